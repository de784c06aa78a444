"""Metrics Endpoints — exposition format, reconciliation and idempotent scrapes.

Invariants:
    - Every service ends with `<service>_up 1`
    - orders_by_status pending+processing+completed == stored orders, at every scrape
    - Two scrapes without mutation in between are identical
"""

import pytest

LAPTOP_ORDER = {
    "customerId": "c1",
    "items": [{"itemId": 1, "name": "Laptop", "quantity": 1, "price": 999.99}],
    "totalAmount": 999.99,
}


def _status_sum(metrics: dict) -> float:
    return sum(
        metrics[("orders_by_status", (("status", s),))]
        for s in ("pending", "processing", "completed")
    )


def _last_sample_line(text: str) -> str:
    lines = [ln for ln in text.strip().splitlines() if not ln.startswith("#")]
    return lines[-1]


async def test_order_metrics_format(order_client):
    res = await order_client.get("/metrics")
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/plain")
    text = res.text
    assert "# HELP orders_total Total number of orders created" in text
    assert "# TYPE orders_total counter" in text
    assert "# TYPE orders_by_status gauge" in text
    assert 'orders_by_status{status="failed"} 0.0' in text
    assert _last_sample_line(text) == "order_service_up 1.0"


async def test_status_gauges_reconcile_through_lifecycle(
    order_client, scheduler, parse_metrics,
):
    for i in range(3):
        await order_client.post("/orders", json={**LAPTOP_ORDER, "customerId": f"c{i}"})
    await order_client.post("/orders", json={"customerId": "bad"})

    while True:
        metrics = parse_metrics((await order_client.get("/metrics")).text)
        stored = len((await order_client.get("/orders")).json())
        assert _status_sum(metrics) == stored == 3
        if not scheduler.pending:
            break
        scheduler.run_next()

    assert metrics[("orders_by_status", (("status", "completed"),))] == 3
    assert metrics[("orders_failed_total", ())] == 1
    assert metrics[("orders_revenue_total", ())] == pytest.approx(3 * 999.99)


async def test_order_scrape_is_idempotent(order_client):
    await order_client.post("/orders", json=LAPTOP_ORDER)
    first = (await order_client.get("/metrics")).text
    second = (await order_client.get("/metrics")).text
    assert first == second


async def test_inventory_metrics_reflect_reservation(inventory_client, parse_metrics):
    await inventory_client.put("/inventory/5", json={"quantity": 10})
    await inventory_client.post("/inventory/1/reserve", json={"quantity": 50})

    text = (await inventory_client.get("/metrics")).text
    metrics = parse_metrics(text)
    assert metrics[("inventory_out_of_stock", ())] == 1
    assert metrics[("inventory_low_stock_alerts", ())] == 1
    assert metrics[("inventory_updates_total", ())] == 2
    assert metrics[
        ("inventory_item_quantity", (("id", "1"), ("item", "Laptop")))
    ] == 0
    assert metrics[
        ("inventory_item_reserved", (("id", "1"), ("item", "Laptop")))
    ] == 50
    expected_value = 200 * 29.99 + 150 * 79.99 + 75 * 299.99 + 10 * 149.99
    assert metrics[("inventory_total_value", ())] == pytest.approx(expected_value, abs=0.01)
    assert _last_sample_line(text) == "inventory_service_up 1.0"


async def test_inventory_scrape_is_idempotent(inventory_client):
    first = (await inventory_client.get("/metrics")).text
    second = (await inventory_client.get("/metrics")).text
    assert first == second


async def test_gateway_metrics_count_routed_requests(gateway_client, parse_metrics):
    await gateway_client.get("/api/inventory")
    await gateway_client.get("/api/orders")
    await gateway_client.get("/api/inventory")

    text = (await gateway_client.get("/metrics")).text
    metrics = parse_metrics(text)
    assert metrics[("gateway_requests_total", ())] == 3
    assert metrics[
        ("gateway_requests_by_service_total", (("service", "inventory"),))
    ] == 2
    assert metrics[
        ("gateway_requests_by_service_total", (("service", "order"),))
    ] == 1
    assert metrics[("gateway_errors_total", ())] == 0
    assert metrics[("gateway_request_duration_ms", ())] >= 0
    assert _last_sample_line(text) == "gateway_up 1.0"


async def test_gateway_scrape_is_idempotent(gateway_client):
    await gateway_client.get("/api/orders")
    first = (await gateway_client.get("/metrics")).text
    second = (await gateway_client.get("/metrics")).text
    assert first == second
