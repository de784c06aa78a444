"""Resilient Downstream Client — retry policy and error mapping.

Tests cover:
    - 2xx returned untouched
    - Non-2xx mapped to DownstreamUnavailableError without retry
    - Transport errors retried for GET/PUT, never for POST
    - Backoff bounded by max_delay_ms
"""

import httpx
import pytest

from fulfillment.core.errors import DownstreamUnavailableError
from fulfillment.infrastructure.downstream_client import DownstreamClient


class FlakyHandler:
    """Refuses the first `failures` calls, then answers 200."""

    def __init__(self, failures: int):
        self.failures = failures
        self.calls = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        if self.calls <= self.failures:
            raise httpx.ConnectError("refused", request=request)
        return httpx.Response(200, json={"ok": True})


def _client(handler, max_retries=2) -> DownstreamClient:
    return DownstreamClient(
        "Inventory", "http://inventory",
        max_retries=max_retries, base_delay_ms=0,
        transport=httpx.MockTransport(handler),
    )


async def test_success_returns_response():
    client = _client(FlakyHandler(0))
    response = await client.request("GET", "/inventory")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


async def test_get_retried_after_transport_error():
    handler = FlakyHandler(2)
    response = await _client(handler).request("GET", "/inventory")
    assert response.status_code == 200
    assert handler.calls == 3


async def test_put_retried_after_transport_error():
    handler = FlakyHandler(1)
    await _client(handler).request("PUT", "/inventory/1", json={"quantity": 1})
    assert handler.calls == 2


async def test_post_never_retried():
    handler = FlakyHandler(1)
    with pytest.raises(DownstreamUnavailableError):
        await _client(handler).request("POST", "/inventory/1/reserve", json={})
    assert handler.calls == 1


async def test_retries_exhausted_raises_unavailable():
    handler = FlakyHandler(10)
    with pytest.raises(DownstreamUnavailableError) as exc:
        await _client(handler, max_retries=2).request("GET", "/inventory")
    assert handler.calls == 3
    assert exc.value.message == "Inventory service unavailable"
    assert exc.value.context.debug_info == {"reason": "ConnectError"}


async def test_error_status_is_not_retried_and_hides_body():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(503, json={"error": "stack trace here"})

    with pytest.raises(DownstreamUnavailableError) as exc:
        await _client(handler).request("GET", "/inventory")
    assert len(calls) == 1
    assert "stack trace" not in exc.value.message


async def test_client_error_status_also_fails():
    def handler(request):
        return httpx.Response(404, json={"error": "Item not found"})

    with pytest.raises(DownstreamUnavailableError):
        await _client(handler).request("GET", "/inventory/9")


def test_backoff_is_capped():
    client = DownstreamClient(
        "Order", "http://order", base_delay_ms=1000, max_delay_ms=2000,
    )
    for attempt in range(6):
        assert client._backoff(attempt) <= 2500  # cap + 25% jitter
