"""Pricing rules - volume discount and profit tax.

- Offer orders of more than 10 units get a flat 10% discount
- Every profit figure is taxed at a fixed 30%
"""

from __future__ import annotations

from decimal import Decimal

TAX_RATE = Decimal("0.30")
DISCOUNT_RATE = Decimal("0.10")
DISCOUNT_QUANTITY_THRESHOLD = 10


def discount_rate(quantity: int) -> Decimal:
    """10% when quantity is strictly above the threshold, otherwise 0."""
    return DISCOUNT_RATE if quantity > DISCOUNT_QUANTITY_THRESHOLD else Decimal("0")


def apply_volume_discount(amount: Decimal, quantity: int) -> Decimal:
    return amount - amount * discount_rate(quantity)


def offer_revenue(offer_price: Decimal, quantity: int) -> Decimal:
    """Revenue of an offer order: quantity * price, discounted above 10 units."""
    return apply_volume_discount(offer_price * quantity, quantity)


def profit_after_tax(revenue: Decimal, cost: Decimal) -> Decimal:
    return (revenue - cost) * (1 - TAX_RATE)
