"""Order Stats — pure computation of order-service metrics from store state.

Invariants:
    - All inputs come from the Order Store (no IO)
    - Status distribution counted from stored orders, so it always reconciles
      with the order table
    - Never divides by zero: average processing time is 0.0 with no completions

Design Decisions:
    - OrderCounters holds only what cannot be derived from the table
      (totals, failures, revenue, elapsed-time sum)
    - Pure function, not a store method: stores enforce, stats present
"""

from collections.abc import Iterable
from dataclasses import dataclass

from fulfillment.core.domain_types import Order, OrderStatus


@dataclass
class OrderCounters:
    """Monotonic order-service counters, mutated only by the Order Store."""
    created: int = 0
    processed: int = 0
    failed: int = 0
    revenue: float = 0.0
    processing_time_ms_sum: float = 0.0


def average_processing_time_ms(counters: OrderCounters) -> float:
    if counters.processed == 0:
        return 0.0
    return counters.processing_time_ms_sum / counters.processed


def count_by_status(orders: Iterable[Order]) -> dict[OrderStatus, int]:
    """Current orders per status; every OrderStatus present, FAILED included."""
    counts = {status: 0 for status in OrderStatus}
    for order in orders:
        counts[order.status] += 1
    return counts


def compute_order_stats(
    orders: Iterable[Order], counters: OrderCounters,
) -> dict:
    """Flat order metrics dict. Pure, no IO."""
    return {
        "orders_total": counters.created,
        "orders_processed_total": counters.processed,
        "orders_failed_total": counters.failed,
        "orders_revenue_total": counters.revenue,
        "orders_processing_time_ms": average_processing_time_ms(counters),
        "orders_by_status": count_by_status(orders),
    }
