"""Root conftest — shared fixtures: settings, manual timers, in-process service clients.

Invariants:
    - Every test gets fresh stores (apps are built per test)
    - Order transitions only fire when a test calls scheduler.run_*()
    - The gateway talks to the in-process order/inventory apps through
      httpx.ASGITransport, never over the network

Design Decisions:
    - ManualScheduler over real timers: lifecycle tests are deterministic and instant
    - Retries disabled by default: failure tests do not wait on backoff
"""

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from prometheus_client.parser import text_string_to_metric_families

from fulfillment.config import Settings
from fulfillment.core.domain_types import ServiceName
from fulfillment.main import (
    create_gateway_app, create_inventory_app, create_order_app,
)


class ManualScheduler:
    """TransitionScheduler fake: records callbacks, fires them on demand."""

    def __init__(self):
        self.pending: list[tuple[float, object, tuple]] = []

    def call_later(self, delay, callback, *args):
        self.pending.append((delay, callback, args))

    def run_next(self):
        _, callback, args = self.pending.pop(0)
        callback(*args)

    def run_all(self):
        while self.pending:
            self.run_next()


@pytest.fixture
def settings():
    return Settings(
        order_processing_delay_seconds=0.5,
        order_completion_delay_seconds=1.0,
        gateway_max_retries=0,
        gateway_retry_base_delay_ms=0,
        log_format="text",
    )


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def order_app(settings, scheduler):
    return create_order_app(settings, scheduler)


@pytest.fixture
def inventory_app(settings):
    return create_inventory_app(settings)


@pytest.fixture
async def order_client(order_app):
    async with AsyncClient(
        transport=ASGITransport(app=order_app), base_url="http://order",
    ) as c:
        yield c


@pytest.fixture
async def inventory_client(inventory_app):
    async with AsyncClient(
        transport=ASGITransport(app=inventory_app), base_url="http://inventory",
    ) as c:
        yield c


@pytest.fixture
def gateway_app(settings, order_app, inventory_app):
    """Gateway wired to the in-process order and inventory apps."""
    return create_gateway_app(settings, transports={
        ServiceName.ORDER: ASGITransport(app=order_app),
        ServiceName.INVENTORY: ASGITransport(app=inventory_app),
    })


@pytest.fixture
async def gateway_client(gateway_app):
    async with AsyncClient(
        transport=ASGITransport(app=gateway_app), base_url="http://gateway",
    ) as c:
        yield c


def _refuse_connection(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("Connection refused", request=request)


@pytest.fixture
def unreachable_transport():
    return httpx.MockTransport(_refuse_connection)


@pytest.fixture
async def isolated_gateway_client(settings, unreachable_transport):
    """Gateway whose downstream services both refuse connections."""
    app = create_gateway_app(settings, transports={
        ServiceName.ORDER: unreachable_transport,
        ServiceName.INVENTORY: unreachable_transport,
    })
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://gateway",
    ) as c:
        yield c


@pytest.fixture
def parse_metrics():
    """Parse exposition text into {(sample_name, ((label, value), ...)): value}."""
    def _parse(text: str) -> dict:
        samples = {}
        for family in text_string_to_metric_families(text):
            for sample in family.samples:
                key = (sample.name, tuple(sorted(sample.labels.items())))
                samples[key] = sample.value
        return samples
    return _parse
