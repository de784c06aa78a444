"""Resilient Downstream Client — wraps httpx.AsyncClient with retry, backoff, and error mapping.

Invariants:
    - Transport errors on idempotent methods (GET, PUT): max_retries retries
      with exponential backoff
    - Non-idempotent methods (POST) are never retried
    - Non-2xx answers are failures, never retried
    - All failures mapped to DownstreamUnavailableError (core/errors.py);
      the downstream's own error body is logged, never returned

Design Decisions:
    - One client per downstream service: base_url and connection pool per service
    - ±25% jitter on backoff: prevents synchronized retries from many requests
    - Transport injectable: tests route calls to in-process ASGI apps or
      httpx.MockTransport
"""

import asyncio
import logging
import random

import httpx

from fulfillment.core.errors import DownstreamUnavailableError

logger = logging.getLogger(__name__)

IDEMPOTENT_METHODS = frozenset({"GET", "PUT", "HEAD", "OPTIONS"})


class DownstreamClient:
    """Calls one downstream service; every failure becomes DownstreamUnavailableError."""

    def __init__(
        self,
        service_name: str,
        base_url: str,
        timeout_seconds: float = 10.0,
        max_retries: int = 2,
        base_delay_ms: int = 100,
        max_delay_ms: int = 2000,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.service_name = service_name
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            transport=transport,
        )
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms

    async def request(
        self, method: str, path: str, *, json: object | None = None,
    ) -> httpx.Response:
        """Send one request; return the 2xx response or raise DownstreamUnavailableError."""
        method = method.upper()
        retries = self.max_retries if method in IDEMPOTENT_METHODS else 0
        for attempt in range(retries + 1):
            try:
                response = await self.client.request(method, path, json=json)
                response.raise_for_status()
                return response

            except httpx.HTTPStatusError as e:
                logger.warning(
                    f"{self.service_name} answered {e.response.status_code} "
                    f"for {method} {path}",
                    extra={"service": self.service_name, "path": path},
                )
                raise DownstreamUnavailableError(
                    self.service_name, f"status {e.response.status_code}",
                ) from e

            except httpx.TransportError as e:
                await self._handle_transport_error(e, method, path, attempt, retries)

        # Unreachable: the last attempt either returns or raises.
        raise DownstreamUnavailableError(self.service_name, "retries exhausted")

    async def get(self, path: str) -> httpx.Response:
        return await self.request("GET", path)

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _handle_transport_error(
        self, e: httpx.TransportError, method: str, path: str,
        attempt: int, retries: int,
    ) -> None:
        """Retry after backoff, or raise once retries are spent."""
        if attempt >= retries:
            logger.error(
                f"{self.service_name} unreachable for {method} {path}: {e!r}",
                extra={
                    "service": self.service_name, "path": path,
                    "attempt": attempt + 1,
                },
            )
            raise DownstreamUnavailableError(
                self.service_name, type(e).__name__,
            ) from e
        delay = self._backoff(attempt)
        logger.warning(
            f"Transport error calling {self.service_name}, retry after {delay}ms: {e!r}",
            extra={"service": self.service_name, "attempt": attempt + 1},
        )
        await asyncio.sleep(delay / 1000)

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311
