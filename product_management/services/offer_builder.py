"""Offer builder - bundles catalog products into priced offers.

The offer price is set independently of the product prices.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Iterable, Union

from product_management.errors import InvalidInputError, NotFoundError
from product_management.models.catalog import Offer, OfferItem
from product_management.services.validation import require_int, require_money
from product_management.store.base import CatalogStore

logger = logging.getLogger(__name__)

OfferItemInput = Union[str, tuple[str, int], OfferItem]


class OfferBuilder:
    """Creates offers and answers the offer queries of the menu."""

    def __init__(self, store: CatalogStore):
        self.store = store

    def _normalize_items(self, items: Iterable[OfferItemInput]) -> list[OfferItem]:
        """Merges duplicate products, keeping first-seen order."""
        quantities: dict[str, int] = {}
        for entry in items:
            if isinstance(entry, OfferItem):
                product_id, quantity = entry.product_id, entry.quantity
            elif isinstance(entry, str):
                product_id, quantity = entry, 1
            else:
                product_id, quantity = entry
            quantity = require_int(quantity, "Offer item quantity", minimum=1)
            quantities[product_id] = quantities.get(product_id, 0) + quantity

        if not quantities:
            raise InvalidInputError("An offer needs at least one product")
        return [OfferItem(product_id=pid, quantity=qty) for pid, qty in quantities.items()]

    def create_offer(
        self, items: Iterable[OfferItemInput], price: Any, active: bool = True
    ) -> Offer:
        offer_items = self._normalize_items(items)
        offer_price = require_money(price, "Offer price")

        for item in offer_items:
            if self.store.get_product(item.product_id) is None:
                raise NotFoundError(f"Product not found: {item.product_id}")

        offer = self.store.put_offer(Offer(items=offer_items, price=offer_price, active=active))
        logger.info(
            "Offer created: %s (%d products, price=%s)",
            offer.offer_id, len(offer.items), offer.price,
        )
        return offer

    def get_offer(self, offer_id: str) -> Offer:
        offer = self.store.get_offer(offer_id)
        if offer is None:
            raise NotFoundError(f"Offer not found: {offer_id}")
        return offer

    def list_offers(self) -> list[Offer]:
        return sorted(self.store.list_offers(), key=lambda o: (o.price, o.offer_id))

    def offers_in_price_range(self, min_price: Any, max_price: Any) -> list[Offer]:
        low = require_money(min_price, "Minimum price")
        high = require_money(max_price, "Maximum price")
        if low > high:
            raise InvalidInputError(f"Minimum price {low} is above maximum price {high}")
        offers = self.store.find_offers_by_price(low, high)
        return sorted(offers, key=lambda o: (o.price, o.offer_id))

    def offers_by_category(self, category_id: str) -> list[Offer]:
        """Offers containing at least one product of the category."""
        if self.store.get_category(category_id) is None:
            raise NotFoundError(f"Category not found: {category_id}")

        product_ids = {p.product_id for p in self.store.find_products(category_id=category_id)}
        if not product_ids:
            return []
        return [
            offer for offer in self.list_offers()
            if product_ids.intersection(offer.product_ids)
        ]

    def offer_count_by_stock(self) -> dict[int, int]:
        """{number of the offer's products in stock: number of offers}."""
        stock = {p.product_id: p.stock for p in self.store.list_products()}
        counts: Counter[int] = Counter()
        for offer in self.store.list_offers():
            in_stock = sum(1 for pid in offer.product_ids if stock.get(pid, 0) > 0)
            counts[in_stock] += 1
        return dict(sorted(counts.items()))
