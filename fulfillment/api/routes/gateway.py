"""Gateway Routes — forward /api/* to the order and inventory services.

Invariants:
    - Downstream status code and body returned unchanged on success
    - Any downstream failure → 500 {"error": "<Service> service unavailable"}
    - Request bodies forwarded verbatim (parsed only as JSON, never validated)

Design Decisions:
    - Body read as raw JSON (not a Pydantic model): validation belongs to the
      downstream service, the gateway must not reject what it would accept
"""

from typing import Any

import httpx
from fastapi import APIRouter, Body, Depends
from fastapi.responses import Response

from fulfillment.api.routes.dependencies import get_gateway_router
from fulfillment.core.domain_types import ServiceName
from fulfillment.services.gateway_router import GatewayRouter

router = APIRouter(prefix="/api", tags=["gateway"])


def _relay(downstream: httpx.Response) -> Response:
    """Downstream answer as-is: status, body and content type."""
    return Response(
        content=downstream.content,
        status_code=downstream.status_code,
        media_type=downstream.headers.get("content-type"),
    )


# ── Orders ───────────────────────────────────────────────────────

@router.post("/orders")
async def create_order(
    payload: Any = Body(None),
    gateway: GatewayRouter = Depends(get_gateway_router),
):
    return _relay(await gateway.forward(
        ServiceName.ORDER, "POST", "/orders", json=payload,
    ))


@router.get("/orders")
async def list_orders(gateway: GatewayRouter = Depends(get_gateway_router)):
    return _relay(await gateway.forward(ServiceName.ORDER, "GET", "/orders"))


@router.get("/orders/{order_id}")
async def get_order(
    order_id: str, gateway: GatewayRouter = Depends(get_gateway_router),
):
    return _relay(await gateway.forward(
        ServiceName.ORDER, "GET", f"/orders/{order_id}",
    ))


# ── Inventory ────────────────────────────────────────────────────

@router.get("/inventory")
async def list_inventory(gateway: GatewayRouter = Depends(get_gateway_router)):
    return _relay(await gateway.forward(
        ServiceName.INVENTORY, "GET", "/inventory",
    ))


@router.get("/inventory/{item_id}")
async def get_item(
    item_id: str, gateway: GatewayRouter = Depends(get_gateway_router),
):
    return _relay(await gateway.forward(
        ServiceName.INVENTORY, "GET", f"/inventory/{item_id}",
    ))


@router.put("/inventory/{item_id}")
async def update_item(
    item_id: str,
    payload: Any = Body(None),
    gateway: GatewayRouter = Depends(get_gateway_router),
):
    return _relay(await gateway.forward(
        ServiceName.INVENTORY, "PUT", f"/inventory/{item_id}", json=payload,
    ))


@router.post("/inventory/{item_id}/reserve")
async def reserve_item(
    item_id: str,
    payload: Any = Body(None),
    gateway: GatewayRouter = Depends(get_gateway_router),
):
    return _relay(await gateway.forward(
        ServiceName.INVENTORY, "POST", f"/inventory/{item_id}/reserve",
        json=payload,
    ))


# ── Aggregation ──────────────────────────────────────────────────

@router.get("/dashboard")
async def dashboard(gateway: GatewayRouter = Depends(get_gateway_router)):
    """Inventory and orders in one response."""
    return await gateway.dashboard()
