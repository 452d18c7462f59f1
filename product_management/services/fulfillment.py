"""Fulfilment - ships a pending sales order.

- Rejects missing or already shipped orders
- Checks stock for the product, or for every product of the offer
- Computes revenue, cost and after-tax profit
- Commits the status change and every stock decrement as one atomic unit
"""

from __future__ import annotations

import logging
from decimal import Decimal

from product_management.errors import InsufficientStockError, NotFoundError, OrderNotPendingError
from product_management.models.catalog import OrderStatus, SalesOrder, Shipment
from product_management.services.order_processor import (
    check_offer_stock,
    load_offer,
    load_offer_products,
    load_product,
)
from product_management.services.pricing import offer_revenue, profit_after_tax
from product_management.store.base import CatalogStore

logger = logging.getLogger(__name__)


class FulfillmentService:
    """Transitions pending orders to shipped."""

    def __init__(self, store: CatalogStore, scale_offer_cost_by_quantity: bool = False):
        self.store = store
        # Offer cost is a flat per-offer sum unless this is set.
        self.scale_offer_cost_by_quantity = scale_offer_cost_by_quantity

    def ship(self, order_id: str) -> SalesOrder:
        """Ships one pending order and returns it with revenue and profit filled in.

        Raises:
            NotFoundError: the order, its product, its offer or an offer product is missing.
            OrderNotPendingError: the order was already shipped.
            InsufficientStockError: stock does not cover the order.
        """
        order = self.store.get_order(order_id)
        if order is None:
            raise NotFoundError(f"Order not found: {order_id}")
        if order.status != OrderStatus.PENDING:
            raise OrderNotPendingError(f"Order {order_id} is not pending: {order.status.value}")

        if order.is_offer_order:
            shipment = self._offer_shipment(order)
        else:
            shipment = self._product_shipment(order)

        try:
            shipped = self.store.commit_shipment(shipment)
        except (NotFoundError, InsufficientStockError) as e:
            logger.warning("Shipment rejected [%s]: %s", order_id, e)
            raise

        logger.info(
            "Order shipped: %s revenue=%s cost=%s profit=%s",
            shipped.order_id, shipment.revenue, shipment.cost, shipment.profit,
        )
        return shipped

    def _product_shipment(self, order: SalesOrder) -> Shipment:
        product = load_product(self.store, order.product_id)
        if order.quantity > product.stock:
            raise InsufficientStockError(
                f"Not enough stock for product '{product.name}'. Current stock: {product.stock}"
            )

        revenue = product.price * order.quantity
        cost = product.cost * order.quantity
        return Shipment(
            order_id=order.order_id,
            revenue=revenue,
            cost=cost,
            profit=profit_after_tax(revenue, cost),
            stock_decrements={product.product_id: order.quantity},
        )

    def _offer_shipment(self, order: SalesOrder) -> Shipment:
        offer = load_offer(self.store, order.offer_id)
        products = load_offer_products(self.store, offer)
        check_offer_stock(offer, products, order.quantity)

        cost = sum(
            (products[item.product_id].cost * item.quantity for item in offer.items),
            Decimal("0"),
        )
        if self.scale_offer_cost_by_quantity:
            cost *= order.quantity

        revenue = offer_revenue(offer.price, order.quantity)
        return Shipment(
            order_id=order.order_id,
            revenue=revenue,
            cost=cost,
            profit=profit_after_tax(revenue, cost),
            stock_decrements={
                item.product_id: order.quantity * item.quantity for item in offer.items
            },
            offer_id=offer.offer_id,
        )
