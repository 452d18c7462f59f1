from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from botocore.exceptions import BotoCoreError, ClientError

from product_management.config import Settings
from product_management.errors import StoreUnavailableError
from product_management.store.base import CatalogStore
from product_management.store.dynamodb import DynamoCatalogStore
from product_management.store.memory import InMemoryCatalogStore

logger = logging.getLogger(__name__)

__all__ = [
    "CatalogStore",
    "DynamoCatalogStore",
    "InMemoryCatalogStore",
    "build_store",
    "open_store",
]


def build_store(settings: Settings) -> CatalogStore:
    if settings.backend == "memory":
        return InMemoryCatalogStore()
    try:
        return DynamoCatalogStore(
            region_name=settings.region,
            endpoint_url=settings.endpoint_url,
            table_prefix=settings.table_prefix,
        )
    except (ClientError, BotoCoreError) as e:
        raise StoreUnavailableError(f"Cannot create DynamoDB clients: {e}") from e


@contextmanager
def open_store(settings: Settings) -> Iterator[CatalogStore]:
    """Builds and pings the store, and always closes it on exit."""
    store = build_store(settings)
    try:
        store.ping()
        logger.info("Connected to %s store", settings.backend)
        yield store
    finally:
        store.close()
