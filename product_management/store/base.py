"""Catalog store interface.

Every backend exposes the same create/find/find-by-id operations over the
catalog records plus one atomic write, ``commit_shipment``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from product_management.models.catalog import (
    Category,
    Offer,
    OrderStatus,
    Product,
    SalesOrder,
    Shipment,
    Supplier,
)


class CatalogStore(ABC):
    """Document store for catalog records and sales orders."""

    def ping(self) -> None:
        """Raises StoreUnavailableError when the backend cannot be reached."""

    def close(self) -> None:
        """Releases backend resources."""

    # --- Categories ---

    @abstractmethod
    def put_category(self, category: Category) -> Category:
        ...

    @abstractmethod
    def get_category(self, category_id: str) -> Optional[Category]:
        ...

    @abstractmethod
    def list_categories(self) -> list[Category]:
        ...

    def find_category_by_name(self, name: str) -> Optional[Category]:
        wanted = name.strip().lower()
        for category in self.list_categories():
            if category.name.strip().lower() == wanted:
                return category
        return None

    # --- Suppliers ---

    @abstractmethod
    def put_supplier(self, supplier: Supplier) -> Supplier:
        ...

    @abstractmethod
    def get_supplier(self, supplier_id: str) -> Optional[Supplier]:
        ...

    @abstractmethod
    def list_suppliers(self) -> list[Supplier]:
        ...

    # --- Products ---

    @abstractmethod
    def put_product(self, product: Product) -> Product:
        ...

    @abstractmethod
    def get_product(self, product_id: str) -> Optional[Product]:
        ...

    @abstractmethod
    def list_products(self) -> list[Product]:
        ...

    @abstractmethod
    def find_products(
        self, category_id: Optional[str] = None, supplier_id: Optional[str] = None
    ) -> list[Product]:
        ...

    # --- Offers ---

    @abstractmethod
    def put_offer(self, offer: Offer) -> Offer:
        ...

    @abstractmethod
    def get_offer(self, offer_id: str) -> Optional[Offer]:
        ...

    @abstractmethod
    def list_offers(self) -> list[Offer]:
        ...

    def find_offers_by_price(self, min_price: Decimal, max_price: Decimal) -> list[Offer]:
        return [o for o in self.list_offers() if min_price <= o.price <= max_price]

    # --- Sales orders ---

    @abstractmethod
    def put_order(self, order: SalesOrder) -> SalesOrder:
        ...

    @abstractmethod
    def get_order(self, order_id: str) -> Optional[SalesOrder]:
        ...

    @abstractmethod
    def list_orders(self, status: Optional[OrderStatus] = None) -> list[SalesOrder]:
        ...

    @abstractmethod
    def commit_shipment(self, shipment: Shipment) -> SalesOrder:
        """Atomically marks the order shipped and applies every stock decrement.

        Raises:
            OrderNotPendingError: the order is no longer pending.
            InsufficientStockError: a decrement would make stock negative.
            NotFoundError: the order, a product or the offer is missing.
        """
        ...
