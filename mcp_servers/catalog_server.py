"""
Product Management MCP Server

Provides tools for creating and shipping sales orders and reading profits.
Shipping runs the same atomic fulfilment as the menu.

Tables used: Products, Offers, SalesOrders (GSI: StatusIndex)
"""

import json
import logging
from decimal import Decimal
from typing import Dict, List, Optional

from mcp.server import Server
from mcp.types import TextContent, Tool

from product_management.config import load_settings
from product_management.errors import ProductManagementError
from product_management.models.catalog import SalesOrder
from product_management.services import Services, build_services
from product_management.store import CatalogStore, build_store

logger = logging.getLogger(__name__)

app = Server("product-management")

_services: Optional[Services] = None
_store: Optional[CatalogStore] = None

REQUIRED_ARGUMENTS = {
    "create_product_order": ("product_id", "quantity"),
    "create_offer_order": ("offer_id", "quantity"),
    "ship_order": ("order_id",),
}


def configure(services: Optional[Services]) -> None:
    """Replaces the services the tools run against (None resets)."""
    global _services
    _services = services


def get_services() -> Services:
    global _services, _store
    if _services is None:
        settings = load_settings()
        _store = build_store(settings)
        _store.ping()
        _services = build_services(_store, settings)
    return _services


def shutdown() -> None:
    """Closes the store opened by get_services."""
    global _services, _store
    if _store is not None:
        _store.close()
        _services = None
    _store = None


def _to_json(obj):
    if isinstance(obj, Decimal):
        return int(obj) if obj == int(obj) else float(obj)
    if isinstance(obj, dict):
        return {k: _to_json(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_to_json(i) for i in obj]
    return obj


def _result(data):
    return [TextContent(type="text", text=json.dumps(_to_json(data), indent=2, ensure_ascii=False))]


def _order(order: SalesOrder) -> Dict:
    return order.to_item()


@app.list_tools()
async def list_tools() -> List[Tool]:
    return [
        Tool(name="create_product_order", description="Create a pending sales order for a single product",
             inputSchema={"type": "object", "properties": {
                 "product_id": {"type": "string"}, "quantity": {"type": "integer", "minimum": 1}
             }, "required": ["product_id", "quantity"]}),
        Tool(name="create_offer_order", description="Create a pending sales order for an offer bundle",
             inputSchema={"type": "object", "properties": {
                 "offer_id": {"type": "string"}, "quantity": {"type": "integer", "minimum": 1}
             }, "required": ["offer_id", "quantity"]}),
        Tool(name="ship_order", description="Ship a pending order: decrement stock and record revenue and profit atomically",
             inputSchema={"type": "object", "properties": {"order_id": {"type": "string"}}, "required": ["order_id"]}),
        Tool(name="list_pending_orders", description="List orders waiting to be shipped using StatusIndex GSI",
             inputSchema={"type": "object", "properties": {}}),
        Tool(name="sum_of_profits", description="Sum of after-tax profit over shipped orders",
             inputSchema={"type": "object", "properties": {
                 "offers_only": {"type": "boolean", "default": False}
             }}),
    ]


@app.call_tool()
async def call_tool(name: str, arguments: dict) -> List[TextContent]:
    handlers = {
        "create_product_order": lambda a: create_product_order(a["product_id"], a["quantity"]),
        "create_offer_order": lambda a: create_offer_order(a["offer_id"], a["quantity"]),
        "ship_order": lambda a: ship_order(a["order_id"]),
        "list_pending_orders": lambda a: list_pending_orders(),
        "sum_of_profits": lambda a: sum_of_profits(a.get("offers_only", False)),
    }
    handler = handlers.get(name)
    if not handler:
        raise ValueError(f"Unknown tool: {name}")
    arguments = arguments or {}
    missing = [k for k in REQUIRED_ARGUMENTS.get(name, ()) if k not in arguments]
    if missing:
        return _result({"success": False, "error": f"Missing required argument(s): {', '.join(missing)}"})
    return _result(handler(arguments))


# --- Implementation ---

def create_product_order(product_id: str, quantity: int) -> Dict:
    try:
        order = get_services().orders.create_product_order(product_id, quantity)
        return {"success": True, "order_id": order.order_id, "data": _order(order)}
    except ProductManagementError as e:
        return {"success": False, "error": str(e)}


def create_offer_order(offer_id: str, quantity: int) -> Dict:
    try:
        order = get_services().orders.create_offer_order(offer_id, quantity)
        return {"success": True, "order_id": order.order_id, "data": _order(order)}
    except ProductManagementError as e:
        return {"success": False, "error": str(e)}


def ship_order(order_id: str) -> Dict:
    """Atomic shipment; a rejected shipment leaves every record unchanged."""
    try:
        order = get_services().fulfillment.ship(order_id)
        return {
            "success": True,
            "order_id": order.order_id,
            "status": order.status.value,
            "revenue": order.total_revenue,
            "cost": order.cost_of_goods,
            "profit": order.total_profit,
        }
    except ProductManagementError as e:
        logger.warning("ship_order %s rejected: %s", order_id, e)
        return {"success": False, "error": str(e), "error_type": type(e).__name__}


def list_pending_orders() -> Dict:
    try:
        orders = get_services().orders.list_pending_orders()
        return {"success": True, "count": len(orders), "data": [_order(o) for o in orders]}
    except ProductManagementError as e:
        return {"success": False, "error": str(e), "data": []}


def sum_of_profits(offers_only: bool = False) -> Dict:
    try:
        total = get_services().profits.sum_of_profits(offers_only=offers_only)
        return {"success": True, "offers_only": offers_only, "total_profit": total}
    except ProductManagementError as e:
        return {"success": False, "error": str(e)}


if __name__ == "__main__":
    import asyncio
    from mcp.server.stdio import stdio_server

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(name)s] %(levelname)s: %(message)s")

    async def run():
        async with stdio_server() as (read, write):
            await app.run(read, write, app.create_initialization_options())

    try:
        asyncio.run(run())
    finally:
        shutdown()
