from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from product_management.config import Settings
from product_management.services.catalog_service import CatalogService
from product_management.services.fulfillment import FulfillmentService
from product_management.services.offer_builder import OfferBuilder
from product_management.services.order_processor import OrderProcessor
from product_management.services.profit_aggregator import ProfitAggregator
from product_management.store.base import CatalogStore

__all__ = [
    "CatalogService",
    "FulfillmentService",
    "OfferBuilder",
    "OrderProcessor",
    "ProfitAggregator",
    "Services",
    "build_services",
]


@dataclass
class Services:
    catalog: CatalogService
    offers: OfferBuilder
    orders: OrderProcessor
    fulfillment: FulfillmentService
    profits: ProfitAggregator


def build_services(store: CatalogStore, settings: Optional[Settings] = None) -> Services:
    """Wires every service to the same store."""
    settings = settings or Settings()
    return Services(
        catalog=CatalogService(store),
        offers=OfferBuilder(store),
        orders=OrderProcessor(store),
        fulfillment=FulfillmentService(
            store, scale_offer_cost_by_quantity=settings.scale_offer_cost_by_quantity
        ),
        profits=ProfitAggregator(store),
    )
