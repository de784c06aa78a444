"""Gateway Router — stateless forwarding to the order and inventory services.

Invariants:
    - Never reads or writes business state; only its own request counters
    - Per-service count incremented before the downstream call, error count
      after a failure
    - Downstream failures surface only as DownstreamUnavailableError for the
      named service (no downstream detail)
    - Counters mutated under one lock; the duration window is bounded

Design Decisions:
    - One DownstreamClient per ServiceName: URL and retry policy per service
    - dashboard() fans out with asyncio.gather: one round-trip time, not two
"""

import asyncio
import logging
import threading
from collections import deque

import httpx

from fulfillment.core.domain_types import ServiceName
from fulfillment.core.errors import DownstreamUnavailableError
from fulfillment.core.gateway_stats import (
    DEFAULT_DURATION_WINDOW, GatewayCounters, compute_gateway_stats,
)
from fulfillment.infrastructure.downstream_client import DownstreamClient

logger = logging.getLogger(__name__)


class GatewayRouter:
    """Forwards requests to downstream clients and keeps gateway counters."""

    def __init__(
        self,
        clients: dict[ServiceName, DownstreamClient],
        duration_window: int = DEFAULT_DURATION_WINDOW,
    ):
        self._clients = clients
        self._lock = threading.Lock()
        self._counters = GatewayCounters(
            durations_ms=deque(maxlen=duration_window),
        )

    # ── Forwarding ───────────────────────────────────────────────

    async def forward(
        self,
        service: ServiceName,
        method: str,
        path: str,
        json: object | None = None,
    ) -> httpx.Response:
        """Send one request downstream; the response is returned untouched."""
        self._count_service(service)
        try:
            return await self._clients[service].request(method, path, json=json)
        except DownstreamUnavailableError:
            self.record_error()
            raise

    async def dashboard(self) -> dict:
        """Inventory and orders fetched concurrently, as one payload.

        One inbound request, so at most one gateway error; when both services
        fail, inventory is named.
        """
        self._count_service(ServiceName.INVENTORY)
        self._count_service(ServiceName.ORDER)
        results = await asyncio.gather(
            self._clients[ServiceName.INVENTORY].get("/inventory"),
            self._clients[ServiceName.ORDER].get("/orders"),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                self.record_error()
                raise result
        inventory, orders = results
        return {"inventory": inventory.json(), "orders": orders.json()}

    async def readiness(self) -> dict[str, bool]:
        """Downstream health probes; never raises."""
        checks = {}
        for service, client in self._clients.items():
            try:
                await client.get("/health")
                checks[service.value] = True
            except DownstreamUnavailableError:
                checks[service.value] = False
        return checks

    # ── Accounting ───────────────────────────────────────────────

    def _count_service(self, service: ServiceName) -> None:
        with self._lock:
            self._counters.requests_by_service[service] += 1

    def record_request(self) -> None:
        with self._lock:
            self._counters.total_requests += 1

    def record_duration(self, duration_ms: float) -> None:
        with self._lock:
            self._counters.durations_ms.append(duration_ms)

    def record_error(self) -> None:
        with self._lock:
            self._counters.errors += 1

    def stats(self) -> dict:
        with self._lock:
            return compute_gateway_stats(self._counters)

    async def aclose(self) -> None:
        for client in self._clients.values():
            await client.aclose()
