"""Catalog service unit tests."""

from decimal import Decimal

import pytest

from product_management.errors import InvalidInputError, NotFoundError
from product_management.services.catalog_service import CatalogService
from product_management.store.memory import InMemoryCatalogStore


def _create_service() -> CatalogService:
    return CatalogService(InMemoryCatalogStore())


class TestCategories:

    def test_add_category(self):
        service = _create_service()
        category = service.add_category("  Electronics ")
        assert category.name == "Electronics"
        assert category.category_id.startswith("CAT-")
        assert service.get_category(category.category_id) == category

    def test_duplicate_name_rejected(self):
        service = _create_service()
        service.add_category("Books")
        with pytest.raises(InvalidInputError):
            service.add_category("books")

    def test_empty_name_rejected(self):
        with pytest.raises(InvalidInputError):
            _create_service().add_category("   ")

    def test_sorted_by_name(self):
        service = _create_service()
        for name in ["Food", "books", "Medical"]:
            service.add_category(name)
        assert [c.name for c in service.list_categories()] == ["books", "Food", "Medical"]


class TestSuppliers:

    def test_add_supplier_with_contact(self):
        service = _create_service()
        category = service.add_category("Food")
        supplier = service.add_supplier(
            name="Sanjis Gourmet Ingredients",
            description="Fine ingredients",
            contact_name="Sanji",
            contact_email="sanji@gourmetingredients.com",
            category_id=category.category_id,
        )

        stored = service.get_supplier(supplier.supplier_id)
        assert stored.contact.name == "Sanji"
        assert stored.contact.email == "sanji@gourmetingredients.com"
        assert stored.category_id == category.category_id

    def test_unknown_category_rejected(self):
        with pytest.raises(NotFoundError):
            _create_service().add_supplier(name="Franky", category_id="CAT-MISSING")

    def test_unknown_supplier_raises(self):
        with pytest.raises(NotFoundError):
            _create_service().get_supplier("SUP-MISSING")


class TestProducts:

    def test_add_product(self):
        service = _create_service()
        category = service.add_category("Electronics")
        supplier = service.add_supplier(name="Shanks")

        product = service.add_product(
            name="Laptop",
            category_id=category.category_id,
            price="1000",
            cost="800.50",
            stock="50",
            supplier_id=supplier.supplier_id,
        )

        stored = service.get_product(product.product_id)
        assert stored.price == Decimal("1000")
        assert stored.cost == Decimal("800.50")
        assert stored.stock == 50

    @pytest.mark.parametrize("price,cost,stock", [
        ("abc", "1", "1"),
        ("-1", "1", "1"),
        ("1", "nan", "1"),
        ("1", "1", "-1"),
        ("1", "1", "2.5"),
    ])
    def test_invalid_values_rejected(self, price, cost, stock):
        service = _create_service()
        with pytest.raises(InvalidInputError):
            service.add_product("Thing", None, price, cost, stock, None)
        assert service.list_products() == []

    def test_unknown_references_rejected(self):
        service = _create_service()
        with pytest.raises(NotFoundError):
            service.add_product("Thing", "CAT-MISSING", "1", "1", 1, None)
        with pytest.raises(NotFoundError):
            service.add_product("Thing", None, "1", "1", 1, "SUP-MISSING")

    def test_products_by_category_and_supplier(self):
        service = _create_service()
        books = service.add_category("Books")
        food = service.add_category("Food")
        robin = service.add_supplier(name="Robin")
        sanji = service.add_supplier(name="Sanji")
        service.add_product("Poneglyph Atlas", books.category_id, "50", "20", 3, robin.supplier_id)
        service.add_product("Cookbook", books.category_id, "30", "10", 8, sanji.supplier_id)
        service.add_product("Sea King Meat", food.category_id, "90", "40", 2, sanji.supplier_id)

        assert [p.name for p in service.products_by_category(books.category_id)] == [
            "Cookbook", "Poneglyph Atlas",
        ]
        assert [p.name for p in service.products_by_supplier(sanji.supplier_id)] == [
            "Cookbook", "Sea King Meat",
        ]

    def test_products_by_unknown_category_raises(self):
        with pytest.raises(NotFoundError):
            _create_service().products_by_category("CAT-MISSING")
