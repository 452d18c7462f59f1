"""Input validation shared by the services and the menu."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from product_management.errors import InvalidInputError


def require_text(value: Any, field_name: str) -> str:
    text = "" if value is None else str(value).strip()
    if not text:
        raise InvalidInputError(f"{field_name} is required")
    return text


def require_money(value: Any, field_name: str) -> Decimal:
    """Non-negative amount; floats go through str() to keep their decimal form."""
    if isinstance(value, bool):
        raise InvalidInputError(f"{field_name} must be a number")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise InvalidInputError(f"{field_name} must be a number, got {value!r}") from e
    if not amount.is_finite():
        raise InvalidInputError(f"{field_name} must be a finite number")
    if amount < 0:
        raise InvalidInputError(f"{field_name} cannot be negative")
    return amount


def require_int(value: Any, field_name: str, minimum: int = 0) -> int:
    if isinstance(value, bool):
        raise InvalidInputError(f"{field_name} must be an integer")
    if isinstance(value, int):
        number = value
    else:
        try:
            number = int(str(value).strip())
        except ValueError as e:
            raise InvalidInputError(f"{field_name} must be an integer, got {value!r}") from e
    if number < minimum:
        raise InvalidInputError(f"{field_name} must be at least {minimum}, got {number}")
    return number


def require_quantity(value: Any) -> int:
    return require_int(value, "Quantity", minimum=1)
