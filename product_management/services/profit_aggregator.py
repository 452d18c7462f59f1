"""Profit aggregation over shipped sales orders."""

from __future__ import annotations

from decimal import Decimal

from product_management.models.catalog import OrderStatus
from product_management.store.base import CatalogStore


class ProfitAggregator:
    """Read-side totals; never writes."""

    def __init__(self, store: CatalogStore):
        self.store = store

    def sum_of_profits(self, offers_only: bool = False) -> Decimal:
        """Sum of the stored after-tax profit of every shipped order."""
        total = Decimal("0")
        for order in self.store.list_orders(OrderStatus.SHIPPED):
            if offers_only and not order.is_offer_order:
                continue
            if order.total_profit is not None:
                total += order.total_profit
        return total

    def sum_of_revenue(self, offers_only: bool = False) -> Decimal:
        total = Decimal("0")
        for order in self.store.list_orders(OrderStatus.SHIPPED):
            if offers_only and not order.is_offer_order:
                continue
            if order.total_revenue is not None:
                total += order.total_revenue
        return total
