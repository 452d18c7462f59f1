"""DynamoDB catalog store.

- Item reads/writes through the boto3 resource (Table API)
- Scans paginate with LastEvaluatedKey
- Shipments commit as one TransactWriteItems call guarded by condition
  expressions, so a cancelled transaction leaves every record unchanged
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Optional

import boto3
from boto3.dynamodb.conditions import Attr, Key
from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import BotoCoreError, ClientError

from product_management.errors import (
    InsufficientStockError,
    NotFoundError,
    OrderNotPendingError,
    ProductManagementError,
    StoreUnavailableError,
)
from product_management.models.catalog import (
    Category,
    Offer,
    OrderStatus,
    Product,
    SalesOrder,
    Shipment,
    Supplier,
)
from product_management.store.base import CatalogStore

logger = logging.getLogger(__name__)

CATEGORIES_TABLE = "Categories"
SUPPLIERS_TABLE = "Suppliers"
PRODUCTS_TABLE = "Products"
OFFERS_TABLE = "Offers"
SALES_ORDERS_TABLE = "SalesOrders"

ALL_TABLES = [
    CATEGORIES_TABLE,
    SUPPLIERS_TABLE,
    PRODUCTS_TABLE,
    OFFERS_TABLE,
    SALES_ORDERS_TABLE,
]

CATEGORY_INDEX = "CategoryIndex"
SUPPLIER_INDEX = "SupplierIndex"
STATUS_INDEX = "StatusIndex"

_serializer = TypeSerializer()


def table_name(base: str, prefix: str = "") -> str:
    return f"{prefix}{base}"


def _av(value: Any) -> dict:
    """Low-level attribute value, e.g. ``{"N": "5"}``."""
    return _serializer.serialize(value)


class DynamoCatalogStore(CatalogStore):
    """Catalog store on DynamoDB tables (see data_layer.infrastructure.dynamodb_setup)."""

    def __init__(
        self,
        region_name: str = "us-east-1",
        endpoint_url: Optional[str] = None,
        table_prefix: str = "",
        dynamodb_resource: Optional[Any] = None,
        dynamodb_client: Optional[Any] = None,
    ):
        self.region_name = region_name
        self.table_prefix = table_prefix

        # AWS clients - injectable for tests
        self.dynamodb = dynamodb_resource or boto3.resource(
            "dynamodb", region_name=region_name, endpoint_url=endpoint_url
        )
        self.client = dynamodb_client or boto3.client(
            "dynamodb", region_name=region_name, endpoint_url=endpoint_url
        )

        self.categories_table = self.dynamodb.Table(self._name(CATEGORIES_TABLE))
        self.suppliers_table = self.dynamodb.Table(self._name(SUPPLIERS_TABLE))
        self.products_table = self.dynamodb.Table(self._name(PRODUCTS_TABLE))
        self.offers_table = self.dynamodb.Table(self._name(OFFERS_TABLE))
        self.orders_table = self.dynamodb.Table(self._name(SALES_ORDERS_TABLE))

        logger.info("DynamoDB store ready (region: %s, prefix: %r)", region_name, table_prefix)

    def _name(self, base: str) -> str:
        return table_name(base, self.table_prefix)

    def ping(self) -> None:
        for base in ALL_TABLES:
            try:
                self.client.describe_table(TableName=self._name(base))
            except (ClientError, BotoCoreError) as e:
                logger.error("DynamoDB unreachable [%s]: %s", self._name(base), e)
                raise StoreUnavailableError(
                    f"Cannot reach table {self._name(base)}: {e}"
                ) from e

    def close(self) -> None:
        for client in (self.client, self.dynamodb.meta.client):
            close = getattr(client, "close", None)
            if close is not None:
                close()

    # --- Helpers ---

    @staticmethod
    def _get_item(table: Any, key: dict) -> Optional[dict]:
        resp = table.get_item(Key=key)
        return resp.get("Item")

    @staticmethod
    def _scan(table: Any, **kwargs: Any) -> list[dict]:
        items: list[dict] = []
        while True:
            resp = table.scan(**kwargs)
            items.extend(resp.get("Items", []))
            if "LastEvaluatedKey" not in resp:
                return items
            kwargs["ExclusiveStartKey"] = resp["LastEvaluatedKey"]

    @staticmethod
    def _query(table: Any, **kwargs: Any) -> list[dict]:
        items: list[dict] = []
        while True:
            resp = table.query(**kwargs)
            items.extend(resp.get("Items", []))
            if "LastEvaluatedKey" not in resp:
                return items
            kwargs["ExclusiveStartKey"] = resp["LastEvaluatedKey"]

    # --- Categories ---

    def put_category(self, category: Category) -> Category:
        self.categories_table.put_item(Item=category.to_item())
        return category

    def get_category(self, category_id: str) -> Optional[Category]:
        item = self._get_item(self.categories_table, {"category_id": category_id})
        return Category.from_item(item) if item else None

    def list_categories(self) -> list[Category]:
        return [Category.from_item(i) for i in self._scan(self.categories_table)]

    # --- Suppliers ---

    def put_supplier(self, supplier: Supplier) -> Supplier:
        self.suppliers_table.put_item(Item=supplier.to_item())
        return supplier

    def get_supplier(self, supplier_id: str) -> Optional[Supplier]:
        item = self._get_item(self.suppliers_table, {"supplier_id": supplier_id})
        return Supplier.from_item(item) if item else None

    def list_suppliers(self) -> list[Supplier]:
        return [Supplier.from_item(i) for i in self._scan(self.suppliers_table)]

    # --- Products ---

    def put_product(self, product: Product) -> Product:
        self.products_table.put_item(Item=product.to_item())
        return product

    def get_product(self, product_id: str) -> Optional[Product]:
        item = self._get_item(self.products_table, {"product_id": product_id})
        return Product.from_item(item) if item else None

    def list_products(self) -> list[Product]:
        return [Product.from_item(i) for i in self._scan(self.products_table)]

    def find_products(
        self, category_id: Optional[str] = None, supplier_id: Optional[str] = None
    ) -> list[Product]:
        if category_id is not None:
            kwargs: dict[str, Any] = {
                "IndexName": CATEGORY_INDEX,
                "KeyConditionExpression": Key("category_id").eq(category_id),
            }
            if supplier_id is not None:
                kwargs["FilterExpression"] = Attr("supplier_id").eq(supplier_id)
            items = self._query(self.products_table, **kwargs)
        elif supplier_id is not None:
            items = self._query(
                self.products_table,
                IndexName=SUPPLIER_INDEX,
                KeyConditionExpression=Key("supplier_id").eq(supplier_id),
            )
        else:
            items = self._scan(self.products_table)
        return [Product.from_item(i) for i in items]

    # --- Offers ---

    def put_offer(self, offer: Offer) -> Offer:
        self.offers_table.put_item(Item=offer.to_item())
        return offer

    def get_offer(self, offer_id: str) -> Optional[Offer]:
        item = self._get_item(self.offers_table, {"offer_id": offer_id})
        return Offer.from_item(item) if item else None

    def list_offers(self) -> list[Offer]:
        return [Offer.from_item(i) for i in self._scan(self.offers_table)]

    def find_offers_by_price(self, min_price: Decimal, max_price: Decimal) -> list[Offer]:
        items = self._scan(
            self.offers_table,
            FilterExpression=Attr("price").between(min_price, max_price),
        )
        return [Offer.from_item(i) for i in items]

    # --- Sales orders ---

    def put_order(self, order: SalesOrder) -> SalesOrder:
        self.orders_table.put_item(Item=order.to_item())
        return order

    def get_order(self, order_id: str) -> Optional[SalesOrder]:
        item = self._get_item(self.orders_table, {"order_id": order_id})
        return SalesOrder.from_item(item) if item else None

    def list_orders(self, status: Optional[OrderStatus] = None) -> list[SalesOrder]:
        if status is not None:
            items = self._query(
                self.orders_table,
                IndexName=STATUS_INDEX,
                KeyConditionExpression=Key("status").eq(OrderStatus(status).value),
            )
        else:
            items = self._scan(self.orders_table)
        orders = [SalesOrder.from_item(i) for i in items]
        return sorted(orders, key=lambda o: o.created_at)

    # --- Atomic shipment ---

    def _shipment_items(self, shipment: Shipment) -> list[dict]:
        """Transaction items: order first, then products, then the offer."""
        items = [{
            "Update": {
                "TableName": self._name(SALES_ORDERS_TABLE),
                "Key": {"order_id": _av(shipment.order_id)},
                "UpdateExpression": (
                    "SET #s = :shipped, total_revenue = :rev, cost_of_goods = :cost, "
                    "total_profit = :profit, shipped_at = :ts"
                ),
                "ConditionExpression": "#s = :pending",
                "ReturnValuesOnConditionCheckFailure": "ALL_OLD",
                "ExpressionAttributeNames": {"#s": "status"},
                "ExpressionAttributeValues": {
                    ":shipped": _av(OrderStatus.SHIPPED.value),
                    ":pending": _av(OrderStatus.PENDING.value),
                    ":rev": _av(shipment.revenue),
                    ":cost": _av(shipment.cost),
                    ":profit": _av(shipment.profit),
                    ":ts": _av(shipment.shipped_at),
                },
            }
        }]
        for product_id, quantity in shipment.stock_decrements.items():
            items.append({
                "Update": {
                    "TableName": self._name(PRODUCTS_TABLE),
                    "Key": {"product_id": _av(product_id)},
                    "UpdateExpression": "SET stock = stock - :qty",
                    "ConditionExpression": "attribute_exists(product_id) AND stock >= :qty",
                    "ReturnValuesOnConditionCheckFailure": "ALL_OLD",
                    "ExpressionAttributeValues": {":qty": _av(int(quantity))},
                }
            })
        if shipment.offer_id is not None:
            items.append({
                "Update": {
                    "TableName": self._name(OFFERS_TABLE),
                    "Key": {"offer_id": _av(shipment.offer_id)},
                    "UpdateExpression": (
                        "SET total_revenue = if_not_exists(total_revenue, :zero) + :rev, "
                        "total_profit = if_not_exists(total_profit, :zero) + :profit"
                    ),
                    "ConditionExpression": "attribute_exists(offer_id)",
                    "ExpressionAttributeValues": {
                        ":zero": _av(0),
                        ":rev": _av(shipment.revenue),
                        ":profit": _av(shipment.profit),
                    },
                }
            })
        return items

    def commit_shipment(self, shipment: Shipment) -> SalesOrder:
        items = self._shipment_items(shipment)
        try:
            self.client.transact_write_items(TransactItems=items)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") != "TransactionCanceledException":
                logger.error("Shipment transaction error [%s]: %s", shipment.order_id, e)
                raise
            raise self._cancellation_error(shipment, e) from e

        order = self.get_order(shipment.order_id)
        if order is None:
            raise NotFoundError(f"Order not found: {shipment.order_id}")
        return order

    def _cancellation_error(self, shipment: Shipment, error: ClientError) -> Exception:
        """Maps the failed condition of a cancelled transaction to a domain error.

        Order and product updates return the old item on failure, so an
        absent ``Item`` means the record no longer exists.
        """
        reasons = error.response.get("CancellationReasons", [])
        product_ids = list(shipment.stock_decrements)

        for index, reason in enumerate(reasons):
            if reason.get("Code") != "ConditionalCheckFailed":
                continue
            exists = bool(reason.get("Item"))
            if index == 0:
                if not exists:
                    return NotFoundError(f"Order not found: {shipment.order_id}")
                return OrderNotPendingError(f"Order {shipment.order_id} is no longer pending")
            if index <= len(product_ids):
                product_id = product_ids[index - 1]
                if not exists:
                    return NotFoundError(f"Product not found: {product_id}")
                return InsufficientStockError(f"Insufficient stock: {product_id}")
            return NotFoundError(f"Offer not found: {shipment.offer_id}")

        logger.error("Shipment transaction cancelled [%s]: %s", shipment.order_id, reasons)
        return ProductManagementError(
            f"Shipment of order {shipment.order_id} was cancelled: {error}"
        )
