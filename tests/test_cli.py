"""Menu CLI unit tests (scripted input, in-memory store)."""

from decimal import Decimal

from product_management import cli
from product_management.cli import MenuOption, ProductManagementMenu
from product_management.errors import StoreUnavailableError
from product_management.models.catalog import Offer, OfferItem, OrderStatus
from product_management.services import Services, build_services
from product_management.store.memory import InMemoryCatalogStore


def _create_services() -> Services:
    return build_services(InMemoryCatalogStore())


def _create_menu(services: Services, *answers: str) -> ProductManagementMenu:
    scripted = iter(answers)

    def fake_input(prompt):
        try:
            return next(scripted)
        except StopIteration:
            raise EOFError from None

    return ProductManagementMenu(services, input_func=fake_input)


def _add_product(services: Services, name="Laptop", stock=50):
    return services.catalog.add_product(
        name=name, category_id=None, price="1000", cost="800", stock=stock, supplier_id=None,
    )


class TestMenuLoop:

    def test_every_option_has_a_handler(self):
        menu = _create_menu(_create_services())
        assert set(menu._handlers) == set(MenuOption) - {MenuOption.EXIT}

    def test_exit_returns_zero(self, capsys):
        assert _create_menu(_create_services(), "16").run() == 0
        assert "Goodbye" in capsys.readouterr().out

    def test_end_of_input_exits(self):
        assert _create_menu(_create_services()).run() == 0

    def test_invalid_option_continues(self, capsys):
        assert _create_menu(_create_services(), "99", "abc", "16").run() == 0
        assert capsys.readouterr().out.count("Invalid option") == 2

    def test_errors_return_to_menu(self, capsys):
        services = _create_services()
        _add_product(services, stock=1)

        code = _create_menu(services, "8", "1", "5", "16").run()

        assert code == 0
        assert "Error: Not enough stock" in capsys.readouterr().out
        assert services.orders.list_orders() == []

    def test_invalid_selection_is_reported(self, capsys):
        services = _create_services()
        services.catalog.add_category("Books")

        _create_menu(services, "3", "7", "16").run()

        assert "Error: Invalid selection" in capsys.readouterr().out


class TestCatalogCommands:

    def test_add_category(self):
        services = _create_services()
        _create_menu(services, "1", "Books", "16").run()
        assert [c.name for c in services.catalog.list_categories()] == ["Books"]

    def test_add_product_creating_category_and_supplier(self, capsys):
        services = _create_services()
        answers = [
            "2", "Laptop",
            "new", "Electronics",
            "1000", "800", "50",
            "new", "Red-Haired Shanks Supplies", "Ship parts", "Shanks", "shanks@example.com", "",
            "16",
        ]

        _create_menu(services, *answers).run()

        [product] = services.catalog.list_products()
        [category] = services.catalog.list_categories()
        [supplier] = services.catalog.list_suppliers()
        assert product.price == Decimal("1000")
        assert product.category_id == category.category_id
        assert product.supplier_id == supplier.supplier_id
        assert supplier.contact.email == "shanks@example.com"
        assert "added successfully with supplier" in capsys.readouterr().out

    def test_products_by_category(self, capsys):
        services = _create_services()
        books = services.catalog.add_category("Books")
        services.catalog.add_product("Atlas", books.category_id, "50", "20", 3, None)

        _create_menu(services, "3", "1", "16").run()

        out = capsys.readouterr().out
        assert "Products for category 'Books'" in out
        assert "Atlas" in out
        assert "No Supplier" in out

    def test_view_suppliers_empty(self, capsys):
        _create_menu(_create_services(), "12", "16").run()
        assert "No suppliers found." in capsys.readouterr().out


class TestOfferCommands:

    def test_create_offer(self):
        services = _create_services()
        laptop = _add_product(services, "Laptop")
        phone = _add_product(services, "Smartphone")

        _create_menu(services, "15", "1,2,2", "1800", "", "16").run()

        [offer] = services.offers.list_offers()
        assert offer.price == Decimal("1800")
        assert {i.product_id: i.quantity for i in offer.items} == {
            laptop.product_id: 1, phone.product_id: 2,
        }

    def test_offers_in_price_range(self, capsys):
        services = _create_services()
        laptop = _add_product(services)
        services.offers.create_offer([laptop.product_id], "1800")

        _create_menu(services, "5", "1000", "2000", "16").run()

        assert "$1,800.00" in capsys.readouterr().out

    def test_offer_with_missing_product_is_listed(self, capsys):
        services = _create_services()
        laptop = _add_product(services)
        services.offers.store.put_offer(Offer(
            items=[OfferItem(laptop.product_id), OfferItem("PRD-GONE", 2)], price=Decimal("1800"),
        ))

        _create_menu(services, "5", "1000", "2000", "16").run()

        out = capsys.readouterr().out
        assert "[Laptop, PRD-GONE x2]" in out
        assert "Error:" not in out

    def test_offer_count_by_stock(self, capsys):
        services = _create_services()
        laptop = _add_product(services)
        services.offers.create_offer([laptop.product_id], "1800")

        _create_menu(services, "7", "16").run()

        assert "1 product(s) in stock: 1 offer(s)" in capsys.readouterr().out


class TestOrderCommands:

    def test_create_and_ship_offer_order(self, capsys):
        services = _create_services()
        laptop = _add_product(services, "Laptop", stock=50)
        offer = services.offers.create_offer([laptop.product_id], "1800")

        _create_menu(services, "9", "1", "2", "10", "1", "14", "16").run()

        [order] = services.orders.list_orders()
        assert order.offer_id == offer.offer_id
        assert order.status == OrderStatus.SHIPPED
        assert services.catalog.get_product(laptop.product_id).stock == 48
        out = capsys.readouterr().out
        assert "shipped successfully" in out
        assert "Sum of all profits: $1,960.00" in out

    def test_ship_without_pending_orders(self, capsys):
        _create_menu(_create_services(), "10", "16").run()
        assert "No pending orders found." in capsys.readouterr().out

    def test_view_sales(self, capsys):
        services = _create_services()
        laptop = _add_product(services)
        order = services.orders.create_product_order(laptop.product_id, 1)

        _create_menu(services, "13", "16").run()

        out = capsys.readouterr().out
        assert order.order_id in out
        assert "Status: pending" in out


class TestMain:

    def test_memory_backend(self, monkeypatch):
        monkeypatch.setattr("builtins.input", lambda prompt: "16")
        assert cli.main(["--memory", "--seed"]) == 0

    def test_unreachable_store_exits_with_error(self, monkeypatch):
        def unreachable(settings):
            raise StoreUnavailableError("Cannot reach table Categories")

        monkeypatch.setattr(cli, "open_store", unreachable)
        assert cli.main([]) == 1
