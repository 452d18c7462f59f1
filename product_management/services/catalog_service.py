"""Catalog service - categories, suppliers and products.

- Adds categories (unique names), suppliers and products
- Resolves category/supplier references before storing a product
- Lists products by category or by supplier
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from product_management.errors import InvalidInputError, NotFoundError
from product_management.models.catalog import Category, Contact, Product, Supplier
from product_management.services.validation import require_int, require_money, require_text
from product_management.store.base import CatalogStore

logger = logging.getLogger(__name__)


class CatalogService:
    """Create and list operations over the catalog records."""

    def __init__(self, store: CatalogStore):
        self.store = store

    # --- Categories ---

    def add_category(self, name: str) -> Category:
        name = require_text(name, "Category name")
        if self.store.find_category_by_name(name) is not None:
            raise InvalidInputError(f"Category '{name}' already exists")
        category = self.store.put_category(Category(name=name))
        logger.info("Category added: %s (%s)", category.name, category.category_id)
        return category

    def get_category(self, category_id: str) -> Category:
        category = self.store.get_category(category_id)
        if category is None:
            raise NotFoundError(f"Category not found: {category_id}")
        return category

    def list_categories(self) -> list[Category]:
        return sorted(self.store.list_categories(), key=lambda c: c.name.lower())

    # --- Suppliers ---

    def add_supplier(
        self,
        name: str,
        description: str = "",
        contact_name: str = "",
        contact_email: str = "",
        category_id: Optional[str] = None,
    ) -> Supplier:
        name = require_text(name, "Supplier name")
        if category_id is not None:
            self.get_category(category_id)

        supplier = self.store.put_supplier(Supplier(
            name=name,
            description=(description or "").strip(),
            contact=Contact(name=(contact_name or "").strip(), email=(contact_email or "").strip()),
            category_id=category_id,
        ))
        logger.info("Supplier added: %s (%s)", supplier.name, supplier.supplier_id)
        return supplier

    def get_supplier(self, supplier_id: str) -> Supplier:
        supplier = self.store.get_supplier(supplier_id)
        if supplier is None:
            raise NotFoundError(f"Supplier not found: {supplier_id}")
        return supplier

    def list_suppliers(self) -> list[Supplier]:
        return sorted(self.store.list_suppliers(), key=lambda s: s.name.lower())

    # --- Products ---

    def add_product(
        self,
        name: str,
        category_id: Optional[str],
        price: Any,
        cost: Any,
        stock: Any,
        supplier_id: Optional[str],
    ) -> Product:
        product = Product(
            name=require_text(name, "Product name"),
            price=require_money(price, "Price"),
            cost=require_money(cost, "Cost"),
            stock=require_int(stock, "Stock", minimum=0),
            category_id=category_id,
            supplier_id=supplier_id,
        )
        if category_id is not None:
            self.get_category(category_id)
        if supplier_id is not None:
            self.get_supplier(supplier_id)

        self.store.put_product(product)
        logger.info(
            "Product added: %s (%s) price=%s cost=%s stock=%d",
            product.name, product.product_id, product.price, product.cost, product.stock,
        )
        return product

    def get_product(self, product_id: str) -> Product:
        product = self.store.get_product(product_id)
        if product is None:
            raise NotFoundError(f"Product not found: {product_id}")
        return product

    def list_products(self) -> list[Product]:
        return sorted(self.store.list_products(), key=lambda p: p.name.lower())

    def products_by_category(self, category_id: str) -> list[Product]:
        self.get_category(category_id)
        products = self.store.find_products(category_id=category_id)
        return sorted(products, key=lambda p: p.name.lower())

    def products_by_supplier(self, supplier_id: str) -> list[Product]:
        self.get_supplier(supplier_id)
        products = self.store.find_products(supplier_id=supplier_id)
        return sorted(products, key=lambda p: p.name.lower())
