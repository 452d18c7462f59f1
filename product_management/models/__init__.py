from product_management.models.catalog import (
    Category,
    Contact,
    Offer,
    OfferItem,
    OrderStatus,
    Product,
    SalesOrder,
    Shipment,
    Supplier,
)

__all__ = [
    "Category",
    "Contact",
    "Offer",
    "OfferItem",
    "OrderStatus",
    "Product",
    "SalesOrder",
    "Shipment",
    "Supplier",
]
