"""Gateway Stats — request accounting for the stateless gateway.

Invariants:
    - Duration window is bounded; appending beyond capacity drops the oldest
    - Counters never decrement
    - Average over an empty window is 0.0
"""

from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field

from fulfillment.core.domain_types import ServiceName

DEFAULT_DURATION_WINDOW = 1000


@dataclass
class GatewayCounters:
    total_requests: int = 0
    errors: int = 0
    requests_by_service: dict[ServiceName, int] = field(
        default_factory=lambda: {service: 0 for service in ServiceName},
    )
    durations_ms: deque = field(
        default_factory=lambda: deque(maxlen=DEFAULT_DURATION_WINDOW),
    )


def average_duration_ms(durations: Iterable[float]) -> float:
    values = list(durations)
    if not values:
        return 0.0
    return sum(values) / len(values)


def compute_gateway_stats(counters: GatewayCounters) -> dict:
    """Flat gateway metrics dict. Pure, no IO."""
    return {
        "gateway_requests_total": counters.total_requests,
        "gateway_requests_by_service": dict(counters.requests_by_service),
        "gateway_errors_total": counters.errors,
        "gateway_request_duration_ms": average_duration_ms(counters.durations_ms),
    }
