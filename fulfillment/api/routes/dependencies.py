"""Route Dependencies — typed accessors for per-service state on app.state.

Invariants:
    - Each app factory sets exactly the attributes its routes depend on
"""

from fastapi import Request

from fulfillment.infrastructure.metrics_exposition import MetricsExporter
from fulfillment.services.gateway_router import GatewayRouter
from fulfillment.services.inventory_store import InventoryStore
from fulfillment.services.order_store import OrderStore


def get_order_store(request: Request) -> OrderStore:
    return request.app.state.order_store


def get_inventory_store(request: Request) -> InventoryStore:
    return request.app.state.inventory_store


def get_gateway_router(request: Request) -> GatewayRouter:
    return request.app.state.gateway_router


def get_metrics_exporter(request: Request) -> MetricsExporter:
    return request.app.state.metrics_exporter
