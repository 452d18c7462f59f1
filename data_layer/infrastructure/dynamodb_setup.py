"""DynamoDB table creation and deletion.

5 tables: Categories, Suppliers, Products, Offers, SalesOrders
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import boto3
from botocore.exceptions import ClientError

from product_management.store.dynamodb import (
    CATEGORIES_TABLE,
    CATEGORY_INDEX,
    OFFERS_TABLE,
    PRODUCTS_TABLE,
    SALES_ORDERS_TABLE,
    STATUS_INDEX,
    SUPPLIER_INDEX,
    SUPPLIERS_TABLE,
    table_name,
)

logger = logging.getLogger(__name__)

REGION = "us-east-1"

TABLE_DEFINITIONS = [
    {
        "TableName": CATEGORIES_TABLE,
        "KeySchema": [
            {"AttributeName": "category_id", "KeyType": "HASH"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "category_id", "AttributeType": "S"},
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        "TableName": SUPPLIERS_TABLE,
        "KeySchema": [
            {"AttributeName": "supplier_id", "KeyType": "HASH"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "supplier_id", "AttributeType": "S"},
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        "TableName": PRODUCTS_TABLE,
        "KeySchema": [
            {"AttributeName": "product_id", "KeyType": "HASH"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "product_id", "AttributeType": "S"},
            {"AttributeName": "category_id", "AttributeType": "S"},
            {"AttributeName": "supplier_id", "AttributeType": "S"},
        ],
        "GlobalSecondaryIndexes": [
            {
                "IndexName": CATEGORY_INDEX,
                "KeySchema": [
                    {"AttributeName": "category_id", "KeyType": "HASH"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            },
            {
                "IndexName": SUPPLIER_INDEX,
                "KeySchema": [
                    {"AttributeName": "supplier_id", "KeyType": "HASH"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        "TableName": OFFERS_TABLE,
        "KeySchema": [
            {"AttributeName": "offer_id", "KeyType": "HASH"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "offer_id", "AttributeType": "S"},
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
    {
        "TableName": SALES_ORDERS_TABLE,
        "KeySchema": [
            {"AttributeName": "order_id", "KeyType": "HASH"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "order_id", "AttributeType": "S"},
            {"AttributeName": "status", "AttributeType": "S"},
            {"AttributeName": "created_at", "AttributeType": "S"},
        ],
        "GlobalSecondaryIndexes": [
            {
                "IndexName": STATUS_INDEX,
                "KeySchema": [
                    {"AttributeName": "status", "KeyType": "HASH"},
                    {"AttributeName": "created_at", "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
]


def _client(region: str, endpoint_url: Optional[str], client: Optional[Any]) -> Any:
    return client or boto3.client("dynamodb", region_name=region, endpoint_url=endpoint_url)


def create_tables(
    region: str = REGION,
    endpoint_url: Optional[str] = None,
    prefix: str = "",
    client: Optional[Any] = None,
) -> list[str]:
    """Creates every missing table and waits until it is active.

    Returns:
        Names of the tables that were created.
    """
    dynamodb = _client(region, endpoint_url, client)
    created = []

    for table_def in TABLE_DEFINITIONS:
        name = table_name(table_def["TableName"], prefix)
        try:
            dynamodb.describe_table(TableName=name)
            print(f"  ⏭️  {name} already exists, skipping")
        except ClientError as e:
            if e.response["Error"]["Code"] != "ResourceNotFoundException":
                raise
            print(f"  🔨 {name} creating...")
            dynamodb.create_table(**{**table_def, "TableName": name})
            waiter = dynamodb.get_waiter("table_exists")
            waiter.wait(TableName=name)
            created.append(name)
            print(f"  ✓  {name} created")

    logger.info("Tables created: %s", created)
    return created


def delete_tables(
    region: str = REGION,
    endpoint_url: Optional[str] = None,
    prefix: str = "",
    client: Optional[Any] = None,
) -> list[str]:
    """Deletes every table (use with care)."""
    dynamodb = _client(region, endpoint_url, client)
    deleted = []

    for table_def in TABLE_DEFINITIONS:
        name = table_name(table_def["TableName"], prefix)
        try:
            dynamodb.delete_table(TableName=name)
            deleted.append(name)
            print(f"  🗑️  {name} deleted")
        except ClientError as e:
            if e.response["Error"]["Code"] != "ResourceNotFoundException":
                raise
            print(f"  ⏭️  {name} not found, skipping")

    return deleted
