"""Catalog and sales data models.

Category, Supplier, Product, Offer and SalesOrder records plus the
conversions to and from document-store items. Money is always Decimal.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from product_management.errors import InvalidInputError


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_id(prefix: str) -> str:
    """Short opaque record id, e.g. ``ORD-1A2B3C4D``."""
    return f"{prefix}-{uuid.uuid4().hex[:8].upper()}"


def to_decimal(value: Any) -> Decimal:
    """Converts int/float/str to Decimal without binary float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def _optional_decimal(value: Any) -> Optional[Decimal]:
    return None if value is None else to_decimal(value)


def _compact(item: dict) -> dict:
    # DynamoDB rejects None for index keys; absent attributes are simply omitted.
    return {k: v for k, v in item.items() if v is not None}


class OrderStatus(str, Enum):
    PENDING = "pending"
    SHIPPED = "shipped"


@dataclass
class Category:
    name: str
    category_id: str = field(default_factory=lambda: new_id("CAT"))

    def to_item(self) -> dict:
        return {"category_id": self.category_id, "name": self.name}

    @classmethod
    def from_item(cls, item: dict) -> Category:
        return cls(name=item["name"], category_id=item["category_id"])


@dataclass
class Contact:
    name: str = ""
    email: str = ""


@dataclass
class Supplier:
    name: str
    description: str = ""
    contact: Contact = field(default_factory=Contact)
    category_id: Optional[str] = None
    supplier_id: str = field(default_factory=lambda: new_id("SUP"))

    def to_item(self) -> dict:
        return _compact({
            "supplier_id": self.supplier_id,
            "name": self.name,
            "description": self.description,
            "contact": {"name": self.contact.name, "email": self.contact.email},
            "category_id": self.category_id,
        })

    @classmethod
    def from_item(cls, item: dict) -> Supplier:
        contact = item.get("contact") or {}
        return cls(
            name=item["name"],
            description=item.get("description", ""),
            contact=Contact(name=contact.get("name", ""), email=contact.get("email", "")),
            category_id=item.get("category_id"),
            supplier_id=item["supplier_id"],
        )


@dataclass
class Product:
    name: str
    price: Decimal
    cost: Decimal
    stock: int
    category_id: Optional[str] = None
    supplier_id: Optional[str] = None
    product_id: str = field(default_factory=lambda: new_id("PRD"))

    def to_item(self) -> dict:
        return _compact({
            "product_id": self.product_id,
            "name": self.name,
            "category_id": self.category_id,
            "price": to_decimal(self.price),
            "cost": to_decimal(self.cost),
            "stock": int(self.stock),
            "supplier_id": self.supplier_id,
        })

    @classmethod
    def from_item(cls, item: dict) -> Product:
        return cls(
            name=item["name"],
            price=to_decimal(item["price"]),
            cost=to_decimal(item["cost"]),
            stock=int(item["stock"]),
            category_id=item.get("category_id"),
            supplier_id=item.get("supplier_id"),
            product_id=item["product_id"],
        )


@dataclass
class OfferItem:
    product_id: str
    quantity: int = 1


@dataclass
class Offer:
    items: list[OfferItem]
    price: Decimal
    active: bool = True
    total_revenue: Decimal = Decimal("0")
    total_profit: Decimal = Decimal("0")
    offer_id: str = field(default_factory=lambda: new_id("OFR"))

    @property
    def product_ids(self) -> list[str]:
        return [item.product_id for item in self.items]

    @property
    def units_per_bundle(self) -> int:
        """Product units consumed by one sold offer."""
        return sum(item.quantity for item in self.items)

    def to_item(self) -> dict:
        return {
            "offer_id": self.offer_id,
            "items": [
                {"product_id": i.product_id, "quantity": int(i.quantity)} for i in self.items
            ],
            "price": to_decimal(self.price),
            "active": bool(self.active),
            "total_revenue": to_decimal(self.total_revenue),
            "total_profit": to_decimal(self.total_profit),
        }

    @classmethod
    def from_item(cls, item: dict) -> Offer:
        return cls(
            items=[
                OfferItem(product_id=i["product_id"], quantity=int(i.get("quantity", 1)))
                for i in item.get("items", [])
            ],
            price=to_decimal(item["price"]),
            active=bool(item.get("active", True)),
            total_revenue=to_decimal(item.get("total_revenue", 0)),
            total_profit=to_decimal(item.get("total_profit", 0)),
            offer_id=item["offer_id"],
        )


@dataclass
class SalesOrder:
    quantity: int
    product_id: Optional[str] = None
    offer_id: Optional[str] = None
    status: OrderStatus = OrderStatus.PENDING
    total_cost: Optional[Decimal] = None
    total_revenue: Optional[Decimal] = None
    cost_of_goods: Optional[Decimal] = None
    total_profit: Optional[Decimal] = None
    order_id: str = field(default_factory=lambda: new_id("ORD"))
    created_at: str = field(default_factory=utc_now)
    shipped_at: Optional[str] = None

    def __post_init__(self) -> None:
        # An order references exactly one of product / offer.
        if (self.product_id is None) == (self.offer_id is None):
            raise InvalidInputError(
                "A sales order must reference exactly one of a product or an offer"
            )
        self.status = OrderStatus(self.status)

    @property
    def is_offer_order(self) -> bool:
        return self.offer_id is not None

    def to_item(self) -> dict:
        return _compact({
            "order_id": self.order_id,
            "product_id": self.product_id,
            "offer_id": self.offer_id,
            "quantity": int(self.quantity),
            "status": self.status.value,
            "total_cost": _optional_decimal(self.total_cost),
            "total_revenue": _optional_decimal(self.total_revenue),
            "cost_of_goods": _optional_decimal(self.cost_of_goods),
            "total_profit": _optional_decimal(self.total_profit),
            "created_at": self.created_at,
            "shipped_at": self.shipped_at,
        })

    @classmethod
    def from_item(cls, item: dict) -> SalesOrder:
        return cls(
            quantity=int(item["quantity"]),
            product_id=item.get("product_id"),
            offer_id=item.get("offer_id"),
            status=OrderStatus(item.get("status", OrderStatus.PENDING.value)),
            total_cost=_optional_decimal(item.get("total_cost")),
            total_revenue=_optional_decimal(item.get("total_revenue")),
            cost_of_goods=_optional_decimal(item.get("cost_of_goods")),
            total_profit=_optional_decimal(item.get("total_profit")),
            order_id=item["order_id"],
            created_at=item.get("created_at", ""),
            shipped_at=item.get("shipped_at"),
        )


@dataclass
class Shipment:
    """Every write a fulfilment commits, applied all together or not at all."""

    order_id: str
    revenue: Decimal
    cost: Decimal
    profit: Decimal
    stock_decrements: dict[str, int]
    offer_id: Optional[str] = None
    shipped_at: str = field(default_factory=utc_now)
