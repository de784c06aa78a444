"""Metrics Exposition — Prometheus text snapshots built from store stats on every scrape.

Invariants:
    - Every scrape calls the stats provider again: nothing is cached here
    - Each service has its own CollectorRegistry (no process/platform defaults)
    - `<service>_up 1` is always the last metric family
    - Collectors only read stats dicts; they never touch store internals

Design Decisions:
    - Custom collectors yielding *MetricFamily objects over module-level
      Counter/Gauge instruments: the stores stay the source of truth and the
      exposition is derived, so reconciliation holds by construction
    - Stats provider injected as a callable: infrastructure never imports services/
"""

from collections.abc import Callable, Iterator

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest
from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily, Metric
from prometheus_client.registry import Collector

from fulfillment.core.domain_types import OrderStatus, ServiceName

StatsProvider = Callable[[], dict]


def _gauge(name: str, documentation: str, value: float) -> GaugeMetricFamily:
    return GaugeMetricFamily(name, documentation, value=value)


def _counter(name: str, documentation: str, value: float) -> CounterMetricFamily:
    return CounterMetricFamily(name, documentation, value=value)


class OrderMetricsCollector(Collector):
    """Order-service counters and status gauges."""

    def __init__(self, stats: StatsProvider):
        self._stats = stats

    def collect(self) -> Iterator[Metric]:
        stats = self._stats()
        yield _counter(
            "orders_total", "Total number of orders created",
            stats["orders_total"],
        )
        yield _counter(
            "orders_processed_total",
            "Total number of orders successfully processed",
            stats["orders_processed_total"],
        )
        yield _counter(
            "orders_failed_total", "Total number of failed orders",
            stats["orders_failed_total"],
        )

        by_status = GaugeMetricFamily(
            "orders_by_status", "Current orders by status", labels=["status"],
        )
        for status in OrderStatus:
            by_status.add_metric([status.value], stats["orders_by_status"][status])
        yield by_status

        yield _counter(
            "orders_revenue_total", "Total revenue from completed orders",
            stats["orders_revenue_total"],
        )
        yield _gauge(
            "orders_processing_time_ms",
            "Average order processing time in milliseconds",
            round(stats["orders_processing_time_ms"], 2),
        )
        yield _gauge("order_service_up", "Order service status", 1)


class InventoryMetricsCollector(Collector):
    """Inventory-service counters, stock gauges and per-item levels."""

    def __init__(self, stats: StatsProvider):
        self._stats = stats

    def collect(self) -> Iterator[Metric]:
        stats = self._stats()
        yield _counter(
            "inventory_checks_total", "Total number of inventory checks",
            stats["inventory_checks_total"],
        )
        yield _counter(
            "inventory_updates_total", "Total number of inventory updates",
            stats["inventory_updates_total"],
        )
        yield _gauge(
            "inventory_total_value", "Total value of all inventory",
            round(stats["inventory_total_value"], 2),
        )
        yield _gauge(
            "inventory_low_stock_alerts", "Number of items with low stock",
            stats["inventory_low_stock_alerts"],
        )
        yield _gauge(
            "inventory_out_of_stock", "Number of items out of stock",
            stats["inventory_out_of_stock"],
        )

        quantity = GaugeMetricFamily(
            "inventory_item_quantity",
            "Current quantity of each inventory item", labels=["item", "id"],
        )
        reserved = GaugeMetricFamily(
            "inventory_item_reserved",
            "Current reserved units of each inventory item", labels=["item", "id"],
        )
        for item in stats["items"]:
            labels = [item.name, str(item.id)]
            quantity.add_metric(labels, item.quantity)
            reserved.add_metric(labels, item.reserved)
        yield quantity
        yield reserved

        yield _gauge("inventory_service_up", "Inventory service status", 1)


class GatewayMetricsCollector(Collector):
    """Gateway request accounting."""

    def __init__(self, stats: StatsProvider):
        self._stats = stats

    def collect(self) -> Iterator[Metric]:
        stats = self._stats()
        yield _counter(
            "gateway_requests_total",
            "Total number of requests to the API gateway",
            stats["gateway_requests_total"],
        )

        by_service = CounterMetricFamily(
            "gateway_requests_by_service",
            "Total requests routed to each service", labels=["service"],
        )
        for service in ServiceName:
            by_service.add_metric(
                [service.value], stats["gateway_requests_by_service"][service],
            )
        yield by_service

        yield _counter(
            "gateway_errors_total", "Total number of gateway errors",
            stats["gateway_errors_total"],
        )
        yield _gauge(
            "gateway_request_duration_ms",
            "Average request duration in milliseconds",
            round(stats["gateway_request_duration_ms"], 2),
        )
        yield _gauge("gateway_up", "Gateway service status", 1)


class MetricsExporter:
    """Per-service registry rendering the text exposition on demand."""

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, collector: Collector):
        self.registry = CollectorRegistry(auto_describe=False)
        self.registry.register(collector)

    def render(self) -> bytes:
        return generate_latest(self.registry)
