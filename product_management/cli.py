"""
Product management text menu.

Every option maps to one handler through a dispatch table; a single loop
reads the selection, runs the handler and reports errors without leaving
the menu.

Usage:
    product-management                  # settings from the environment / .env
    product-management --memory --seed  # offline, with sample data
"""

from __future__ import annotations

import logging
import sys
from dataclasses import replace
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Optional, Sequence, TypeVar

from botocore.exceptions import BotoCoreError, ClientError

from data_layer.generators.sample_data import seed_sample_data
from product_management.config import load_settings
from product_management.errors import InvalidInputError, NotFoundError, ProductManagementError
from product_management.models.catalog import Category, Offer, SalesOrder, Supplier
from product_management.services import Services, build_services
from product_management.services.validation import require_int
from product_management.store import open_store

logger = logging.getLogger("product_management.cli")

T = TypeVar("T")

NEW = "new"


class MenuOption(str, Enum):
    ADD_CATEGORY = "1"
    ADD_PRODUCT = "2"
    PRODUCTS_BY_CATEGORY = "3"
    PRODUCTS_BY_SUPPLIER = "4"
    OFFERS_IN_PRICE_RANGE = "5"
    OFFERS_BY_CATEGORY = "6"
    OFFER_COUNT_BY_STOCK = "7"
    CREATE_PRODUCT_ORDER = "8"
    CREATE_OFFER_ORDER = "9"
    SHIP_ORDER = "10"
    ADD_SUPPLIER = "11"
    VIEW_SUPPLIERS = "12"
    VIEW_SALES = "13"
    SUM_OF_PROFITS = "14"
    CREATE_OFFER = "15"
    EXIT = "16"


MENU_LABELS = {
    MenuOption.ADD_CATEGORY: "Add new category",
    MenuOption.ADD_PRODUCT: "Add new product",
    MenuOption.PRODUCTS_BY_CATEGORY: "View products by category",
    MenuOption.PRODUCTS_BY_SUPPLIER: "View products by supplier",
    MenuOption.OFFERS_IN_PRICE_RANGE: "View all offers within a price range",
    MenuOption.OFFERS_BY_CATEGORY: "View all offers that contain a product from a specific category",
    MenuOption.OFFER_COUNT_BY_STOCK: "View the number of offers based on the number of its products in stock",
    MenuOption.CREATE_PRODUCT_ORDER: "Create order for products",
    MenuOption.CREATE_OFFER_ORDER: "Create order for offers",
    MenuOption.SHIP_ORDER: "Ship orders",
    MenuOption.ADD_SUPPLIER: "Add a new supplier",
    MenuOption.VIEW_SUPPLIERS: "View suppliers",
    MenuOption.VIEW_SALES: "View all sales",
    MenuOption.SUM_OF_PROFITS: "View sum of all profits",
    MenuOption.CREATE_OFFER: "Create new offer",
    MenuOption.EXIT: "Exit",
}

GOODBYE = "Exiting the Product Management System. Goodbye!"


def money(amount: Optional[Decimal]) -> str:
    if amount is None:
        return "-"
    return f"${amount:,.2f}"


class ProductManagementMenu:
    """Numbered text menu over the product management services."""

    def __init__(self, services: Services, input_func: Optional[Callable[[str], str]] = None):
        self.services = services
        self._input = input_func or input
        self._handlers: dict[MenuOption, Callable[[], None]] = {
            MenuOption.ADD_CATEGORY: self.add_category,
            MenuOption.ADD_PRODUCT: self.add_product,
            MenuOption.PRODUCTS_BY_CATEGORY: self.view_products_by_category,
            MenuOption.PRODUCTS_BY_SUPPLIER: self.view_products_by_supplier,
            MenuOption.OFFERS_IN_PRICE_RANGE: self.view_offers_in_price_range,
            MenuOption.OFFERS_BY_CATEGORY: self.view_offers_by_category,
            MenuOption.OFFER_COUNT_BY_STOCK: self.view_offer_count_by_stock,
            MenuOption.CREATE_PRODUCT_ORDER: self.create_product_order,
            MenuOption.CREATE_OFFER_ORDER: self.create_offer_order,
            MenuOption.SHIP_ORDER: self.ship_order,
            MenuOption.ADD_SUPPLIER: self.add_supplier,
            MenuOption.VIEW_SUPPLIERS: self.view_suppliers,
            MenuOption.VIEW_SALES: self.view_sales,
            MenuOption.SUM_OF_PROFITS: self.view_sum_of_profits,
            MenuOption.CREATE_OFFER: self.create_offer,
        }

    # ============================================================
    # Loop
    # ============================================================

    def print_menu(self) -> None:
        print("\n=== Product Management System ===")
        for option in MenuOption:
            print(f"{option.value}. {MENU_LABELS[option]}")

    def run(self) -> int:
        """Runs until Exit (or end of input); returns the process exit code."""
        while True:
            self.print_menu()
            try:
                raw = self.prompt(f"Select an option (1-{len(MenuOption)}): ")
            except (EOFError, KeyboardInterrupt):
                print(f"\n{GOODBYE}")
                return 0

            try:
                option = MenuOption(raw)
            except ValueError:
                print("Invalid option. Please try again.")
                continue

            if option is MenuOption.EXIT:
                print(GOODBYE)
                return 0

            try:
                self._handlers[option]()
            except ProductManagementError as e:
                logger.warning("%s failed: %s", option.name.lower(), e)
                print(f"Error: {e}")
            except (ClientError, BotoCoreError) as e:
                logger.error("Store error during %s: %s", option.name.lower(), e)
                print(f"Error: {e}")
            except (EOFError, KeyboardInterrupt):
                print(f"\n{GOODBYE}")
                return 0

    # ============================================================
    # Prompt helpers
    # ============================================================

    def prompt(self, question: str) -> str:
        return self._input(question).strip()

    def select(
        self,
        title: str,
        records: Sequence[T],
        describe: Callable[[T], str],
        allow_new: bool = False,
        optional: bool = False,
    ) -> Any:
        """Prints a numbered list and returns the chosen record.

        Returns NEW when allow_new and the user typed "new", None when
        optional and the answer was empty.
        """
        print(f"\n{title}:")
        if not records:
            print("  (none)")
        for index, record in enumerate(records, start=1):
            print(f"{index}. {describe(record)}")

        hint = "enter number"
        if allow_new:
            hint += ' or type "new"'
        if optional:
            hint += ", empty to skip"
        answer = self.prompt(f"Select ({hint}): ")

        if allow_new and answer.lower() == NEW:
            return NEW
        if optional and not answer:
            return None

        try:
            index = require_int(answer, "Selection", minimum=1)
        except InvalidInputError:
            raise InvalidInputError(f"Invalid selection: {answer!r}") from None
        if index > len(records):
            raise InvalidInputError(f"Invalid selection: {index}")
        return records[index - 1]

    def _select_category(self, allow_new: bool = False, optional: bool = False) -> Optional[Category]:
        choice = self.select(
            "Existing Categories",
            self.services.catalog.list_categories(),
            lambda c: c.name,
            allow_new=allow_new,
            optional=optional,
        )
        if choice == NEW:
            return self.add_category()
        return choice

    def _select_supplier(self, allow_new: bool = False) -> Supplier:
        choice = self.select(
            "Existing Suppliers",
            self.services.catalog.list_suppliers(),
            lambda s: s.name,
            allow_new=allow_new,
        )
        if choice == NEW:
            return self.add_supplier()
        return choice

    def _select_offer(self) -> Offer:
        return self.select("Offers", self.services.offers.list_offers(), self._describe_offer)

    def _describe_offer(self, offer: Offer) -> str:
        names = []
        for item in offer.items:
            try:
                name = self.services.catalog.get_product(item.product_id).name
            except NotFoundError:
                name = item.product_id
            names.append(f"{name} x{item.quantity}" if item.quantity > 1 else name)
        status = "active" if offer.active else "inactive"
        return f"Offer {offer.offer_id}, Price: {money(offer.price)}, {status} [{', '.join(names)}]"

    def _print_offers(self, offers: list[Offer], heading: str, empty: str) -> None:
        if not offers:
            print(empty)
            return
        print(f"\n{heading}:")
        for offer in offers:
            print(f"- {self._describe_offer(offer)}")

    # ============================================================
    # Catalog
    # ============================================================

    def add_category(self) -> Category:
        category = self.services.catalog.add_category(
            self.prompt("Enter new category name (required): ")
        )
        print(f"New category '{category.name}' added successfully.")
        return category

    def add_supplier(self) -> Supplier:
        name = self.prompt("Enter new supplier name (required): ")
        description = self.prompt("Enter new supplier description: ")
        contact_name = self.prompt("Enter contact name: ")
        contact_email = self.prompt("Enter contact email: ")
        category = self._select_category(optional=True)

        supplier = self.services.catalog.add_supplier(
            name=name,
            description=description,
            contact_name=contact_name,
            contact_email=contact_email,
            category_id=category.category_id if category else None,
        )
        print(f"New supplier '{supplier.name}' added successfully.")
        return supplier

    def add_product(self) -> None:
        name = self.prompt("Enter product name: ")
        category = self._select_category(allow_new=True)
        price = self.prompt("Enter product price: ")
        cost = self.prompt("Enter product cost: ")
        stock = self.prompt("Enter product stock: ")
        supplier = self._select_supplier(allow_new=True)

        product = self.services.catalog.add_product(
            name=name,
            category_id=category.category_id,
            price=price,
            cost=cost,
            stock=stock,
            supplier_id=supplier.supplier_id,
        )
        print(f"Product '{product.name}' added successfully with supplier '{supplier.name}'.")

    def view_products_by_category(self) -> None:
        category = self._select_category()
        products = self.services.catalog.products_by_category(category.category_id)
        if not products:
            print(f"No products found for category '{category.name}'.")
            return

        suppliers = {s.supplier_id: s.name for s in self.services.catalog.list_suppliers()}
        print(f"\nProducts for category '{category.name}':")
        for product in products:
            supplier = suppliers.get(product.supplier_id)
            supplier_info = f"Supplier: {supplier}" if supplier else "No Supplier"
            print(
                f"- {product.name}, Price: {money(product.price)}, "
                f"Stock: {product.stock}, {supplier_info}"
            )

    def view_products_by_supplier(self) -> None:
        supplier = self._select_supplier()
        products = self.services.catalog.products_by_supplier(supplier.supplier_id)
        if not products:
            print(f"No products found for supplier '{supplier.name}'.")
            return

        print(f"\nProducts for supplier '{supplier.name}':")
        for product in products:
            print(
                f"- Name: {product.name}, Price: {money(product.price)}, "
                f"Cost: {money(product.cost)}, Stock: {product.stock}"
            )

    def view_suppliers(self) -> None:
        suppliers = self.services.catalog.list_suppliers()
        if not suppliers:
            print("No suppliers found.")
            return

        print("\nSuppliers:")
        for supplier in suppliers:
            print(
                f"- {supplier.name}, Contact: {supplier.contact.name}, "
                f"Email: {supplier.contact.email}"
            )

    # ============================================================
    # Offers
    # ============================================================

    def create_offer(self) -> None:
        products = self.services.catalog.list_products()
        print("\nProducts:")
        for index, product in enumerate(products, start=1):
            print(f"{index}. {product.name} (Price: {money(product.price)}, Stock: {product.stock})")

        answer = self.prompt("Enter product numbers separated by commas (repeat a number for more units): ")
        items = []
        for part in answer.split(","):
            if not part.strip():
                continue
            index = require_int(part, "Product number", minimum=1)
            if index > len(products):
                raise InvalidInputError(f"Invalid product number: {index}")
            items.append(products[index - 1].product_id)

        price = self.prompt("Enter offer price: ")
        active = self.prompt("Active? (Y/n): ").lower() not in ("n", "no")

        offer = self.services.offers.create_offer(items, price, active=active)
        print(f"Offer '{offer.offer_id}' created successfully.")

    def view_offers_in_price_range(self) -> None:
        min_price = self.prompt("Enter minimum price: ")
        max_price = self.prompt("Enter maximum price: ")
        offers = self.services.offers.offers_in_price_range(min_price, max_price)
        self._print_offers(
            offers,
            f"Offers within the price range ${min_price} - ${max_price}",
            f"No offers found within the price range ${min_price} - ${max_price}.",
        )

    def view_offers_by_category(self) -> None:
        category = self._select_category()
        offers = self.services.offers.offers_by_category(category.category_id)
        self._print_offers(
            offers,
            f"Offers containing products from category '{category.name}'",
            f"No offers found containing products from category '{category.name}'.",
        )

    def view_offer_count_by_stock(self) -> None:
        counts = self.services.offers.offer_count_by_stock()
        if not counts:
            print("No offers found.")
            return

        print("\nOffers by number of products in stock:")
        for in_stock, count in counts.items():
            print(f"- {in_stock} product(s) in stock: {count} offer(s)")

    # ============================================================
    # Orders
    # ============================================================

    def create_product_order(self) -> None:
        product = self.select(
            "Products",
            self.services.catalog.list_products(),
            lambda p: f"{p.name} (Price: {money(p.price)}, Stock: {p.stock})",
        )
        quantity = self.prompt("Enter quantity: ")
        order = self.services.orders.create_product_order(product.product_id, quantity)
        print(
            f"Order for product '{product.name}' created successfully. "
            f"Order ID: {order.order_id}"
        )

    def create_offer_order(self) -> None:
        offer = self._select_offer()
        quantity = self.prompt("Enter quantity: ")
        order = self.services.orders.create_offer_order(offer.offer_id, quantity)
        print(
            f"Order for offer ID '{offer.offer_id}' created successfully. "
            f"Order ID: {order.order_id}, Total: {money(order.total_cost)}"
        )

    def ship_order(self) -> None:
        pending = self.services.orders.list_pending_orders()
        if not pending:
            print("No pending orders found.")
            return

        order = self.select(
            "Pending Orders",
            pending,
            lambda o: f"Order ID: {o.order_id}, Quantity: {o.quantity}, Status: {o.status.value}",
        )
        shipped = self.services.fulfillment.ship(order.order_id)
        kind = "Offer" if shipped.is_offer_order else "Product"
        print(f"Order ID '{shipped.order_id}' ({kind}) shipped successfully.")
        print(f"- Revenue: {money(shipped.total_revenue)}")
        print(f"- Cost: {money(shipped.cost_of_goods)}")
        print(f"- Profit after tax: {money(shipped.total_profit)}")

    def view_sales(self) -> None:
        orders = self.services.orders.list_orders()
        if not orders:
            print("No sales orders found.")
            return

        print("\nSales Orders:")
        for order in orders:
            print(f"- {self._describe_order(order)}")

    @staticmethod
    def _describe_order(order: SalesOrder) -> str:
        details = (
            f"Offer ID: {order.offer_id}" if order.is_offer_order
            else f"Product ID: {order.product_id}"
        )
        line = (
            f"Order ID: {order.order_id}, {details}, "
            f"Quantity: {order.quantity}, Status: {order.status.value}"
        )
        if order.total_profit is not None:
            line += f", Revenue: {money(order.total_revenue)}, Profit: {money(order.total_profit)}"
        return line

    def view_sum_of_profits(self) -> None:
        profits = self.services.profits
        print(f"Sum of all profits: {money(profits.sum_of_profits())}")
        print(f"  from offers: {money(profits.sum_of_profits(offers_only=True))}")
        print(f"Sum of all revenue: {money(profits.sum_of_revenue())}")


# ============================================================
# Main
# ============================================================

def main(argv: Optional[list[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv

    try:
        settings = load_settings()
    except ProductManagementError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    if "--memory" in args:
        settings = replace(settings, backend="memory")
    if "--seed" in args:
        settings = replace(settings, seed_sample_data=True)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )
    logging.getLogger("botocore").setLevel(logging.WARNING)

    try:
        with open_store(settings) as store:
            services = build_services(store, settings)
            if settings.seed_sample_data:
                seed_sample_data(services)
            return ProductManagementMenu(services).run()
    except ProductManagementError as e:
        logger.error("Error connecting to the database: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
