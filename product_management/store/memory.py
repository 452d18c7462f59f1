"""In-memory catalog store - used by tests and the offline backend."""

from __future__ import annotations

import copy
import logging
import threading
from typing import Optional

from product_management.errors import (
    InsufficientStockError,
    NotFoundError,
    OrderNotPendingError,
)
from product_management.models.catalog import (
    Category,
    Offer,
    OrderStatus,
    Product,
    SalesOrder,
    Shipment,
    Supplier,
)
from product_management.store.base import CatalogStore

logger = logging.getLogger(__name__)


class InMemoryCatalogStore(CatalogStore):
    """Keeps every record as a document dict, copied on the way in and out."""

    def __init__(self) -> None:
        # {table: {record_id: item}}
        self._tables: dict[str, dict[str, dict]] = {
            "categories": {},
            "suppliers": {},
            "products": {},
            "offers": {},
            "orders": {},
        }
        self._lock = threading.Lock()

    def _put(self, table: str, record_id: str, item: dict) -> None:
        self._tables[table][record_id] = copy.deepcopy(item)

    def _get(self, table: str, record_id: str) -> Optional[dict]:
        item = self._tables[table].get(record_id)
        return copy.deepcopy(item) if item is not None else None

    def _all(self, table: str) -> list[dict]:
        return [copy.deepcopy(item) for item in self._tables[table].values()]

    # --- Categories ---

    def put_category(self, category: Category) -> Category:
        self._put("categories", category.category_id, category.to_item())
        return category

    def get_category(self, category_id: str) -> Optional[Category]:
        item = self._get("categories", category_id)
        return Category.from_item(item) if item else None

    def list_categories(self) -> list[Category]:
        return [Category.from_item(i) for i in self._all("categories")]

    # --- Suppliers ---

    def put_supplier(self, supplier: Supplier) -> Supplier:
        self._put("suppliers", supplier.supplier_id, supplier.to_item())
        return supplier

    def get_supplier(self, supplier_id: str) -> Optional[Supplier]:
        item = self._get("suppliers", supplier_id)
        return Supplier.from_item(item) if item else None

    def list_suppliers(self) -> list[Supplier]:
        return [Supplier.from_item(i) for i in self._all("suppliers")]

    # --- Products ---

    def put_product(self, product: Product) -> Product:
        self._put("products", product.product_id, product.to_item())
        return product

    def get_product(self, product_id: str) -> Optional[Product]:
        item = self._get("products", product_id)
        return Product.from_item(item) if item else None

    def list_products(self) -> list[Product]:
        return [Product.from_item(i) for i in self._all("products")]

    def find_products(
        self, category_id: Optional[str] = None, supplier_id: Optional[str] = None
    ) -> list[Product]:
        return [
            p for p in self.list_products()
            if (category_id is None or p.category_id == category_id)
            and (supplier_id is None or p.supplier_id == supplier_id)
        ]

    # --- Offers ---

    def put_offer(self, offer: Offer) -> Offer:
        self._put("offers", offer.offer_id, offer.to_item())
        return offer

    def get_offer(self, offer_id: str) -> Optional[Offer]:
        item = self._get("offers", offer_id)
        return Offer.from_item(item) if item else None

    def list_offers(self) -> list[Offer]:
        return [Offer.from_item(i) for i in self._all("offers")]

    # --- Sales orders ---

    def put_order(self, order: SalesOrder) -> SalesOrder:
        self._put("orders", order.order_id, order.to_item())
        return order

    def get_order(self, order_id: str) -> Optional[SalesOrder]:
        item = self._get("orders", order_id)
        return SalesOrder.from_item(item) if item else None

    def list_orders(self, status: Optional[OrderStatus] = None) -> list[SalesOrder]:
        orders = [SalesOrder.from_item(i) for i in self._all("orders")]
        if status is not None:
            orders = [o for o in orders if o.status == OrderStatus(status)]
        return sorted(orders, key=lambda o: o.created_at)

    def commit_shipment(self, shipment: Shipment) -> SalesOrder:
        with self._lock:
            orders = self._tables["orders"]
            products = self._tables["products"]
            offers = self._tables["offers"]

            # Check every condition before touching anything.
            order_item = orders.get(shipment.order_id)
            if order_item is None:
                raise NotFoundError(f"Order not found: {shipment.order_id}")
            if order_item["status"] != OrderStatus.PENDING.value:
                raise OrderNotPendingError(
                    f"Order {shipment.order_id} is not pending: {order_item['status']}"
                )
            for product_id, quantity in shipment.stock_decrements.items():
                product_item = products.get(product_id)
                if product_item is None:
                    raise NotFoundError(f"Product not found: {product_id}")
                if product_item["stock"] < quantity:
                    raise InsufficientStockError(
                        f"Insufficient stock: {product_id} "
                        f"available={product_item['stock']}, requested={quantity}"
                    )
            if shipment.offer_id is not None and shipment.offer_id not in offers:
                raise NotFoundError(f"Offer not found: {shipment.offer_id}")

            for product_id, quantity in shipment.stock_decrements.items():
                products[product_id]["stock"] -= quantity

            if shipment.offer_id is not None:
                offer_item = offers[shipment.offer_id]
                offer_item["total_revenue"] = offer_item.get("total_revenue", 0) + shipment.revenue
                offer_item["total_profit"] = offer_item.get("total_profit", 0) + shipment.profit

            order_item.update({
                "status": OrderStatus.SHIPPED.value,
                "total_revenue": shipment.revenue,
                "cost_of_goods": shipment.cost,
                "total_profit": shipment.profit,
                "shipped_at": shipment.shipped_at,
            })

            logger.debug("Shipment committed: %s", shipment.order_id)
            return SalesOrder.from_item(copy.deepcopy(order_item))
