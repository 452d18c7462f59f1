"""Profit aggregator unit tests."""

from decimal import Decimal

from product_management.models.catalog import OrderStatus, SalesOrder
from product_management.services.profit_aggregator import ProfitAggregator
from product_management.store.memory import InMemoryCatalogStore


def _shipped(profit: str, revenue: str = "0", offer: bool = False) -> SalesOrder:
    reference = {"offer_id": "OFR-1"} if offer else {"product_id": "PRD-1"}
    return SalesOrder(
        quantity=1,
        status=OrderStatus.SHIPPED,
        total_profit=Decimal(profit),
        total_revenue=Decimal(revenue),
        **reference,
    )


class TestSumOfProfits:

    def test_empty_store(self):
        assert ProfitAggregator(InMemoryCatalogStore()).sum_of_profits() == Decimal("0")

    def test_sums_shipped_orders(self):
        store = InMemoryCatalogStore()
        store.put_order(_shipped("70"))
        store.put_order(_shipped("30"))

        assert ProfitAggregator(store).sum_of_profits() == Decimal("100")

    def test_order_independent(self):
        first, second = InMemoryCatalogStore(), InMemoryCatalogStore()
        o1, o2 = _shipped("70"), _shipped("30")
        first.put_order(o1)
        first.put_order(o2)
        second.put_order(o2)
        second.put_order(o1)

        assert ProfitAggregator(first).sum_of_profits() == ProfitAggregator(second).sum_of_profits()

    def test_pending_orders_ignored(self):
        store = InMemoryCatalogStore()
        store.put_order(_shipped("70"))
        store.put_order(SalesOrder(quantity=1, product_id="PRD-1"))

        assert ProfitAggregator(store).sum_of_profits() == Decimal("70")

    def test_offers_only(self):
        store = InMemoryCatalogStore()
        store.put_order(_shipped("70", offer=True))
        store.put_order(_shipped("30"))

        assert ProfitAggregator(store).sum_of_profits(offers_only=True) == Decimal("70")

    def test_losses_reduce_total(self):
        store = InMemoryCatalogStore()
        store.put_order(_shipped("70"))
        store.put_order(_shipped("-20"))

        assert ProfitAggregator(store).sum_of_profits() == Decimal("50")


class TestSumOfRevenue:

    def test_sums_revenue(self):
        store = InMemoryCatalogStore()
        store.put_order(_shipped("70", revenue="500"))
        store.put_order(_shipped("30", revenue="250", offer=True))

        aggregator = ProfitAggregator(store)
        assert aggregator.sum_of_revenue() == Decimal("750")
        assert aggregator.sum_of_revenue(offers_only=True) == Decimal("250")
