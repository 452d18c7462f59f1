"""Order processor - creates pending sales orders.

- Individual orders reference one product
- Bundled orders reference one offer and carry the discounted price quote
- Stock is only checked here, never decremented (that happens at shipment)
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from product_management.errors import InsufficientStockError, NotFoundError
from product_management.models.catalog import (
    Offer,
    OrderStatus,
    Product,
    SalesOrder,
)
from product_management.services.pricing import offer_revenue
from product_management.services.validation import require_quantity
from product_management.store.base import CatalogStore

logger = logging.getLogger(__name__)


def load_offer(store: CatalogStore, offer_id: str) -> Offer:
    offer = store.get_offer(offer_id)
    if offer is None:
        raise NotFoundError(f"Offer not found: {offer_id}")
    return offer


def load_product(store: CatalogStore, product_id: str) -> Product:
    product = store.get_product(product_id)
    if product is None:
        raise NotFoundError(f"Product not found: {product_id}")
    return product


def load_offer_products(store: CatalogStore, offer: Offer) -> dict[str, Product]:
    """Resolves every product of the offer; fails on the first missing one."""
    return {pid: load_product(store, pid) for pid in offer.product_ids}


def check_offer_stock(offer: Offer, products: dict[str, Product], quantity: int) -> int:
    """Raises InsufficientStockError unless quantity * units fits the lowest stock.

    Returns:
        The lowest stock among the offer's products.
    """
    available = min(p.stock for p in products.values())
    required = quantity * offer.units_per_bundle
    if required > available:
        raise InsufficientStockError(
            f"Not enough stock for offer {offer.offer_id}: "
            f"required={required}, available={available}"
        )
    return available


class OrderProcessor:
    """Creates pending individual and bundled sales orders."""

    def __init__(self, store: CatalogStore):
        self.store = store

    def create_product_order(self, product_id: str, quantity: Any) -> SalesOrder:
        quantity = require_quantity(quantity)
        product = load_product(self.store, product_id)

        if quantity > product.stock:
            logger.warning(
                "Product order rejected: %s requested=%d stock=%d",
                product.product_id, quantity, product.stock,
            )
            raise InsufficientStockError(
                f"Not enough stock for product '{product.name}'. Current stock: {product.stock}"
            )

        order = self.store.put_order(SalesOrder(product_id=product.product_id, quantity=quantity))
        logger.info(
            "Product order created: %s (%s x%d)", order.order_id, product.product_id, quantity
        )
        return order

    def create_offer_order(self, offer_id: str, quantity: Any) -> SalesOrder:
        quantity = require_quantity(quantity)
        offer = load_offer(self.store, offer_id)
        products = load_offer_products(self.store, offer)

        try:
            check_offer_stock(offer, products, quantity)
        except InsufficientStockError:
            logger.warning("Offer order rejected: %s x%d", offer.offer_id, quantity)
            raise

        order = self.store.put_order(SalesOrder(
            offer_id=offer.offer_id,
            quantity=quantity,
            total_cost=offer_revenue(offer.price, quantity),
        ))
        logger.info(
            "Offer order created: %s (%s x%d, quote=%s)",
            order.order_id, offer.offer_id, quantity, order.total_cost,
        )
        return order

    def get_order(self, order_id: str) -> SalesOrder:
        order = self.store.get_order(order_id)
        if order is None:
            raise NotFoundError(f"Order not found: {order_id}")
        return order

    def list_orders(self, status: Optional[OrderStatus] = None) -> list[SalesOrder]:
        return self.store.list_orders(status)

    def list_pending_orders(self) -> list[SalesOrder]:
        return self.store.list_orders(OrderStatus.PENDING)
