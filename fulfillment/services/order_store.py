"""Order Store — owns the order table and drives orders through their lifecycle.

Invariants:
    - Ids are assigned monotonically from 1 and never reused
    - One lock guards the order table AND the counters: a metrics read never
      sees a status change without its matching counter change
    - Callers only ever receive snapshots (copies), never the stored record
    - The completion timer is scheduled by the processing transition, so
      `processing` is always observed before `completed`
    - A timer for an unknown id, or for an order not in the expected source
      state, is a logged no-op

Design Decisions:
    - threading.Lock over asyncio.Lock: timer callbacks and request handlers
      are plain synchronous critical sections; the lock also holds if a
      handler runs in the threadpool
    - Scheduler injected (TransitionScheduler protocol): the store never
      sleeps and tests drive timers by hand
    - Monotonic clock injected for deterministic processing-time tests
"""

import itertools
import logging
import threading
import time
from collections.abc import Callable, Sequence

from fulfillment.core.domain_types import Order, OrderId, OrderLine, OrderStatus
from fulfillment.core.errors import (
    ErrorContext, ResourceNotFoundError, ValidationFailedError,
)
from fulfillment.core.order_lifecycle import can_transition, find_missing_fields
from fulfillment.core.order_stats import OrderCounters, compute_order_stats
from fulfillment.core.protocols import TransitionScheduler

logger = logging.getLogger(__name__)

DEFAULT_PROCESSING_DELAY_SECONDS = 0.5
DEFAULT_COMPLETION_DELAY_SECONDS = 1.0


class OrderStore:
    """In-memory order table with delayed, forward-only status transitions."""

    def __init__(
        self,
        scheduler: TransitionScheduler,
        processing_delay: float = DEFAULT_PROCESSING_DELAY_SECONDS,
        completion_delay: float = DEFAULT_COMPLETION_DELAY_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._scheduler = scheduler
        self._processing_delay = processing_delay
        self._completion_delay = completion_delay
        self._clock = clock
        self._lock = threading.Lock()
        self._orders: dict[OrderId, Order] = {}
        self._ids = itertools.count(1)
        self._counters = OrderCounters()

    # ── Commands ─────────────────────────────────────────────────

    def create(
        self,
        customer_id: str | None,
        items: Sequence[OrderLine] | None,
        total_amount: float | None,
    ) -> Order:
        """Validate and store a new pending order, then schedule processing."""
        missing = find_missing_fields(customer_id, items, total_amount)
        if missing:
            self.record_failure()
            logger.info(f"Order rejected, missing fields: {missing}")
            raise ValidationFailedError("Missing required fields", missing)

        with self._lock:
            order = Order(
                id=OrderId(next(self._ids)),
                customer_id=customer_id,
                items=list(items),
                total_amount=total_amount,
                started_at=self._clock(),
            )
            self._orders[order.id] = order
            self._counters.created += 1
            created = order.snapshot()

        self._scheduler.call_later(
            self._processing_delay, self._start_processing, created.id,
        )
        logger.info(
            "Order created",
            extra={"order_id": created.id, "status": created.status.value},
        )
        return created

    def record_failure(self) -> None:
        """Count a creation that never produced a stored order."""
        with self._lock:
            self._counters.failed += 1

    # ── Queries ──────────────────────────────────────────────────

    def get(self, order_id: int) -> Order:
        with self._lock:
            order = self._orders.get(OrderId(order_id))
            if order is None:
                raise ResourceNotFoundError(
                    "Order", order_id, ErrorContext(order_id=order_id),
                )
            return order.snapshot()

    def list_orders(self) -> list[Order]:
        """All orders, in creation order."""
        with self._lock:
            return [order.snapshot() for order in self._orders.values()]

    def stats(self) -> dict:
        """Metrics view computed from one consistent read of the table."""
        with self._lock:
            return compute_order_stats(self._orders.values(), self._counters)

    # ── Timer callbacks ──────────────────────────────────────────

    def _start_processing(self, order_id: OrderId) -> None:
        if self._advance(order_id, OrderStatus.PROCESSING) is None:
            return
        self._scheduler.call_later(
            self._completion_delay, self._complete, order_id,
        )

    def _complete(self, order_id: OrderId) -> None:
        self._advance(order_id, OrderStatus.COMPLETED)

    def _advance(self, order_id: OrderId, target: OrderStatus) -> Order | None:
        """Move one order to `target` if the transition is legal; else no-op."""
        with self._lock:
            order = self._orders.get(order_id)
            if order is None or not can_transition(order.status, target):
                logger.debug(
                    f"Skipping transition to {target.value}",
                    extra={"order_id": order_id, "status": target.value},
                )
                return None
            order.status = target
            if target is OrderStatus.COMPLETED:
                self._counters.processed += 1
                self._counters.revenue += order.total_amount
                elapsed_ms = (self._clock() - order.started_at) * 1000
                self._counters.processing_time_ms_sum += elapsed_ms
            advanced = order.snapshot()

        logger.info(
            f"Order moved to {target.value}",
            extra={"order_id": order_id, "status": target.value},
        )
        return advanced
