"""Fulfilment (ship) unit tests."""

from decimal import Decimal

import pytest

from product_management.errors import (
    InsufficientStockError,
    NotFoundError,
    OrderNotPendingError,
)
from product_management.models.catalog import OrderStatus, SalesOrder
from product_management.services import Services, build_services
from product_management.config import Settings
from product_management.store.memory import InMemoryCatalogStore


def _create_services(scale_offer_cost: bool = False) -> Services:
    settings = Settings(backend="memory", scale_offer_cost_by_quantity=scale_offer_cost)
    return build_services(InMemoryCatalogStore(), settings)


def _add_product(services: Services, name="Widget", price="100", cost="60", stock=5):
    return services.catalog.add_product(
        name=name, category_id=None, price=price, cost=cost, stock=stock, supplier_id=None,
    )


def _stock(services: Services, product_id: str) -> int:
    return services.catalog.get_product(product_id).stock


class TestShipProductOrder:

    def test_stock_decrements_by_quantity(self):
        services = _create_services()
        product = _add_product(services, stock=5)
        order = services.orders.create_product_order(product.product_id, 3)

        services.fulfillment.ship(order.order_id)

        assert _stock(services, product.product_id) == 2

    def test_profit_identity(self):
        """profit = (price - cost) * quantity * 0.7"""
        services = _create_services()
        product = _add_product(services, price="12.50", cost="7.25", stock=10)
        order = services.orders.create_product_order(product.product_id, 4)

        shipped = services.fulfillment.ship(order.order_id)

        expected = (Decimal("12.50") - Decimal("7.25")) * 4 * Decimal("0.7")
        assert shipped.total_profit == expected
        assert shipped.total_revenue == Decimal("50.00")
        assert shipped.cost_of_goods == Decimal("29.00")

    def test_no_discount_on_product_orders(self):
        services = _create_services()
        product = _add_product(services, price="10", cost="0", stock=100)
        order = services.orders.create_product_order(product.product_id, 50)

        shipped = services.fulfillment.ship(order.order_id)

        assert shipped.total_revenue == Decimal("500")

    def test_marks_order_shipped(self):
        services = _create_services()
        product = _add_product(services)
        order = services.orders.create_product_order(product.product_id, 1)

        shipped = services.fulfillment.ship(order.order_id)

        assert shipped.status == OrderStatus.SHIPPED
        assert shipped.shipped_at is not None
        assert services.orders.get_order(order.order_id).status == OrderStatus.SHIPPED

    def test_full_stock_scenario(self):
        """price 100, cost 60, stock 5: ship 5, then an order of 1 fails."""
        services = _create_services()
        product = _add_product(services, price="100", cost="60", stock=5)
        order = services.orders.create_product_order(product.product_id, 5)

        shipped = services.fulfillment.ship(order.order_id)

        assert _stock(services, product.product_id) == 0
        assert shipped.total_profit == Decimal("140")
        with pytest.raises(InsufficientStockError):
            services.orders.create_product_order(product.product_id, 1)

    def test_stock_sold_after_order_creation_fails(self):
        services = _create_services()
        product = _add_product(services, stock=5)
        first = services.orders.create_product_order(product.product_id, 4)
        second = services.orders.create_product_order(product.product_id, 4)
        services.fulfillment.ship(first.order_id)

        with pytest.raises(InsufficientStockError):
            services.fulfillment.ship(second.order_id)

        assert _stock(services, product.product_id) == 1
        assert services.orders.get_order(second.order_id).status == OrderStatus.PENDING


class TestShipTwice:
    """Shipping is not idempotent."""

    def test_second_ship_fails(self):
        services = _create_services()
        product = _add_product(services, stock=5)
        order = services.orders.create_product_order(product.product_id, 2)

        services.fulfillment.ship(order.order_id)
        with pytest.raises(OrderNotPendingError):
            services.fulfillment.ship(order.order_id)

        assert _stock(services, product.product_id) == 3

    def test_not_pending_is_a_not_found(self):
        assert issubclass(OrderNotPendingError, NotFoundError)

    def test_unknown_order_raises(self):
        services = _create_services()
        with pytest.raises(NotFoundError):
            services.fulfillment.ship("ORD-MISSING")


class TestShipOfferOrder:

    def _laptop_bundle(self, services: Services):
        laptop = _add_product(services, "Laptop", "1000", "800", 50)
        phone = _add_product(services, "Smartphone", "800", "600", 40)
        offer = services.offers.create_offer([laptop.product_id, phone.product_id], "1800")
        return laptop, phone, offer

    def test_every_product_decrements(self):
        services = _create_services()
        laptop, phone, offer = self._laptop_bundle(services)
        order = services.orders.create_offer_order(offer.offer_id, 2)

        services.fulfillment.ship(order.order_id)

        assert _stock(services, laptop.product_id) == 48
        assert _stock(services, phone.product_id) == 38

    def test_flat_offer_cost(self):
        services = _create_services()
        _, _, offer = self._laptop_bundle(services)
        order = services.orders.create_offer_order(offer.offer_id, 2)

        shipped = services.fulfillment.ship(order.order_id)

        assert shipped.total_revenue == Decimal("3600")
        assert shipped.cost_of_goods == Decimal("1400")
        assert shipped.total_profit == (Decimal("3600") - Decimal("1400")) * Decimal("0.7")

    def test_scaled_offer_cost(self):
        services = _create_services(scale_offer_cost=True)
        _, _, offer = self._laptop_bundle(services)
        order = services.orders.create_offer_order(offer.offer_id, 2)

        shipped = services.fulfillment.ship(order.order_id)

        assert shipped.cost_of_goods == Decimal("2800")
        assert shipped.total_profit == Decimal("560")

    def test_discount_boundary(self):
        services = _create_services()
        product = _add_product(services, price="50", cost="0", stock=100)
        offer = services.offers.create_offer([product.product_id], "100")
        ten = services.orders.create_offer_order(offer.offer_id, 10)
        eleven = services.orders.create_offer_order(offer.offer_id, 11)

        assert services.fulfillment.ship(ten.order_id).total_revenue == Decimal("1000")
        assert services.fulfillment.ship(eleven.order_id).total_revenue == Decimal("100") * 11 * Decimal("0.9")

    def test_offer_totals_accumulate(self):
        services = _create_services()
        _, _, offer = self._laptop_bundle(services)
        first = services.fulfillment.ship(services.orders.create_offer_order(offer.offer_id, 1).order_id)
        second = services.fulfillment.ship(services.orders.create_offer_order(offer.offer_id, 1).order_id)

        stored = services.offers.get_offer(offer.offer_id)

        assert stored.total_revenue == first.total_revenue + second.total_revenue
        assert stored.total_profit == first.total_profit + second.total_profit

    def test_bundle_quantities_multiply(self):
        services = _create_services()
        product = _add_product(services, cost="10", stock=10)
        offer = services.offers.create_offer([(product.product_id, 3)], "100")
        order = services.orders.create_offer_order(offer.offer_id, 2)

        shipped = services.fulfillment.ship(order.order_id)

        assert _stock(services, product.product_id) == 4
        assert shipped.cost_of_goods == Decimal("30")


class TestShipAtomicity:
    """A rejected shipment changes nothing."""

    def test_no_partial_decrement(self):
        services = _create_services()
        plenty = _add_product(services, "Plenty", stock=50)
        scarce = _add_product(services, "Scarce", stock=10)
        offer = services.offers.create_offer([plenty.product_id, scarce.product_id], "150")
        order = services.orders.create_offer_order(offer.offer_id, 5)

        # Another order drains the scarce product before shipment.
        drain = services.orders.create_product_order(scarce.product_id, 3)
        services.fulfillment.ship(drain.order_id)

        with pytest.raises(InsufficientStockError):
            services.fulfillment.ship(order.order_id)

        assert _stock(services, plenty.product_id) == 50
        assert _stock(services, scarce.product_id) == 7
        assert services.orders.get_order(order.order_id).status == OrderStatus.PENDING
        assert services.offers.get_offer(offer.offer_id).total_revenue == Decimal("0")

    def test_store_rejects_shipped_order(self):
        services = _create_services()
        product = _add_product(services, stock=5)
        order = services.orders.create_product_order(product.product_id, 1)
        services.fulfillment.ship(order.order_id)
        store = services.fulfillment.store

        stale = SalesOrder.from_item({**order.to_item(), "status": "pending"})
        shipment = services.fulfillment._product_shipment(stale)

        with pytest.raises(OrderNotPendingError):
            store.commit_shipment(shipment)
        assert _stock(services, product.product_id) == 4
