"""Sample catalog data.

5 categories, 5 suppliers, 2 products, 1 offer bundling both products and
1 pending offer order. Categories are only inserted when missing; products,
the offer and the order are only inserted into an empty catalog.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from product_management.services import Services

logger = logging.getLogger(__name__)


# --- CONSTANTS ---

CATEGORY_NAMES = ["Electronics", "Books", "Medical", "Shipyard", "Food"]

SUPPLIERS = [
    {
        "name": "Red-Haired Shanks Supplies",
        "description": "Supplies from the captain of the Red-Haired Pirates.",
        "contact_name": "Shanks",
        "contact_email": "shanks@redhairedsupplies.com",
        "category": "Shipyard",
    },
    {
        "name": "Nico Robin Books & Artifacts",
        "description": "Specializing in rare books and historical artifacts.",
        "contact_name": "Nico Robin",
        "contact_email": "robin@booksandartifacts.com",
        "category": "Books",
    },
    {
        "name": "Tony Tony Chopper Medicine Co.",
        "description": "Providing top-quality medical supplies and herbal remedies.",
        "contact_name": "Tony Tony Chopper",
        "contact_email": "chopper@medicineco.com",
        "category": "Medical",
    },
    {
        "name": "Frankys Shipyard",
        "description": "Custom-built ships and high-tech gadgets.",
        "contact_name": "Franky",
        "contact_email": "franky@shipyard.com",
        "category": "Shipyard",
    },
    {
        "name": "Sanjis Gourmet Ingredients",
        "description": "Delivering the finest ingredients for the most exquisite dishes.",
        "contact_name": "Sanji",
        "contact_email": "sanji@gourmetingredients.com",
        "category": "Food",
    },
]

# (name, price, cost, stock, supplier index)
PRODUCTS = [
    ("Laptop", Decimal("1000"), Decimal("800"), 50, 0),
    ("Smartphone", Decimal("800"), Decimal("600"), 40, 1),
]

OFFER_PRICE = Decimal("1800")
SAMPLE_ORDER_QUANTITY = 2


def seed_sample_data(services: Services) -> dict:
    """Inserts the sample catalog and returns how many records were added."""
    summary = {"categories": 0, "suppliers": 0, "products": 0, "offers": 0, "orders": 0}

    categories = {}
    for name in CATEGORY_NAMES:
        existing = services.catalog.store.find_category_by_name(name)
        if existing is None:
            existing = services.catalog.add_category(name)
            summary["categories"] += 1
        categories[name] = existing

    if services.catalog.list_products():
        logger.info("Catalog already has products, sample data skipped")
        return summary

    suppliers = []
    for data in SUPPLIERS:
        suppliers.append(services.catalog.add_supplier(
            name=data["name"],
            description=data["description"],
            contact_name=data["contact_name"],
            contact_email=data["contact_email"],
            category_id=categories[data["category"]].category_id,
        ))
        summary["suppliers"] += 1

    products = []
    for name, price, cost, stock, supplier_index in PRODUCTS:
        supplier = suppliers[supplier_index]
        products.append(services.catalog.add_product(
            name=name,
            category_id=supplier.category_id,
            price=price,
            cost=cost,
            stock=stock,
            supplier_id=supplier.supplier_id,
        ))
        summary["products"] += 1

    offer = services.offers.create_offer([p.product_id for p in products], OFFER_PRICE)
    summary["offers"] += 1

    services.orders.create_offer_order(offer.offer_id, SAMPLE_ORDER_QUANTITY)
    summary["orders"] += 1

    logger.info("Sample data inserted: %s", summary)
    return summary
