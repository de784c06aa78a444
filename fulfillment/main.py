"""Fulfillment Services — FastAPI app factories for the order, inventory and gateway services.

Invariants:
    - One factory per service; each app owns its store/router on app.state
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map FulfillmentError → {"error": message} responses
    - CORS configured from settings (not hardcoded)
    - Pending order timers cancelled and downstream clients closed on shutdown

Design Decisions:
    - Factories over module-level apps: tests build fresh, isolated services
      and uvicorn runs them with factory=True
    - State built in the factory, not the lifespan: in-process test clients
      (httpx ASGITransport) do not run lifespans
    - Gateway accounting as HTTP middleware: counts every routed request,
      including 404s, but not its own /metrics scrapes
"""

import logging
import time
from contextlib import asynccontextmanager
from collections.abc import Iterable

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from fulfillment.api.error_handlers import register_error_handlers
from fulfillment.api.routes import gateway, health, inventory, metrics, orders
from fulfillment.config import Settings, get_settings
from fulfillment.core.domain_types import InventoryItem, ServiceName
from fulfillment.core.protocols import TransitionScheduler
from fulfillment.infrastructure.downstream_client import DownstreamClient
from fulfillment.infrastructure.metrics_exposition import (
    GatewayMetricsCollector, InventoryMetricsCollector, MetricsExporter,
    OrderMetricsCollector,
)
from fulfillment.infrastructure.observability import setup_logging
from fulfillment.infrastructure.scheduler import TimerScheduler
from fulfillment.services.gateway_router import GatewayRouter
from fulfillment.services.inventory_store import DEFAULT_INVENTORY, InventoryStore
from fulfillment.services.order_store import OrderStore

logger = logging.getLogger(__name__)

ORDER_SERVICE = "order-service"
INVENTORY_SERVICE = "inventory-service"
GATEWAY_SERVICE = "api-gateway"


def _base_app(service_name: str, settings: Settings, lifespan) -> FastAPI:
    """App with CORS, error handlers, health and metrics: shared by all services."""
    app = FastAPI(title=service_name, lifespan=lifespan)
    app.state.service_name = service_name
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(health.router)
    app.include_router(metrics.router)
    return app


# ─── ORDER SERVICE ──────────────────────────────────────────────

def create_order_app(
    settings: Settings | None = None,
    scheduler: TransitionScheduler | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    scheduler = scheduler or TimerScheduler()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(
            settings.log_level, settings.log_format, app.state.service_name,
        )
        logger.info(f"Order service started on port {settings.order_service_port}")
        yield
        if isinstance(scheduler, TimerScheduler):
            scheduler.cancel_all()
        logger.info("Order service shutting down")

    app = _base_app(ORDER_SERVICE, settings, lifespan)
    store = OrderStore(
        scheduler,
        processing_delay=settings.order_processing_delay_seconds,
        completion_delay=settings.order_completion_delay_seconds,
    )
    app.state.order_store = store
    app.state.metrics_exporter = MetricsExporter(OrderMetricsCollector(store.stats))
    app.include_router(orders.router)
    return app


# ─── INVENTORY SERVICE ──────────────────────────────────────────

def create_inventory_app(
    settings: Settings | None = None,
    items: Iterable[InventoryItem] = DEFAULT_INVENTORY,
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(
            settings.log_level, settings.log_format, app.state.service_name,
        )
        logger.info(
            f"Inventory service started on port {settings.inventory_service_port}",
        )
        yield
        logger.info("Inventory service shutting down")

    app = _base_app(INVENTORY_SERVICE, settings, lifespan)
    store = InventoryStore(items)
    app.state.inventory_store = store
    app.state.metrics_exporter = MetricsExporter(
        InventoryMetricsCollector(store.stats),
    )
    app.include_router(inventory.router)
    return app


# ─── API GATEWAY ────────────────────────────────────────────────

def create_gateway_app(
    settings: Settings | None = None,
    transports: dict[ServiceName, httpx.AsyncBaseTransport] | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    transports = transports or {}
    base_urls = {
        ServiceName.ORDER: settings.order_service_url,
        ServiceName.INVENTORY: settings.inventory_service_url,
    }
    router = GatewayRouter(
        {
            service: DownstreamClient(
                service.display_name,
                base_urls[service],
                timeout_seconds=settings.gateway_timeout_seconds,
                max_retries=settings.gateway_max_retries,
                base_delay_ms=settings.gateway_retry_base_delay_ms,
                max_delay_ms=settings.gateway_retry_max_delay_ms,
                transport=transports.get(service),
            )
            for service in ServiceName
        },
        duration_window=settings.gateway_duration_window,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(
            settings.log_level, settings.log_format, app.state.service_name,
        )
        logger.info(f"API gateway started on port {settings.gateway_port}")
        yield
        await router.aclose()
        logger.info("API gateway shutting down")

    app = _base_app(GATEWAY_SERVICE, settings, lifespan)
    app.state.gateway_router = router
    app.state.metrics_exporter = MetricsExporter(GatewayMetricsCollector(router.stats))
    app.include_router(health.readiness_router)
    app.include_router(gateway.router)

    @app.middleware("http")
    async def track_requests(request: Request, call_next):
        """Count requests and record their duration in the rolling window."""
        if request.url.path == "/metrics":
            return await call_next(request)
        router.record_request()
        started = time.perf_counter()
        try:
            return await call_next(request)
        finally:
            router.record_duration((time.perf_counter() - started) * 1000)

    return app
