"""Order Lifecycle Rules — pure transition and validation rules for orders.

Invariants:
    - All functions are PURE: no IO, no locks, no side effects
    - Transitions only move forward: pending → processing → completed
    - FAILED is never a transition target; it only labels rejected creations
    - Terminal states (completed, failed) have no successor

Design Decisions:
    - Transition table as a dict: the store asks "may I go from X to Y?" and
      never hardcodes the order of states itself
    - find_missing_fields returns names (not a bool) so the rejection can be logged
"""

from collections.abc import Sequence

from fulfillment.core.domain_types import OrderStatus

NEXT_STATUS: dict[OrderStatus, OrderStatus] = {
    OrderStatus.PENDING: OrderStatus.PROCESSING,
    OrderStatus.PROCESSING: OrderStatus.COMPLETED,
}

TERMINAL_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.FAILED})

# Statuses a stored order can hold.
STORED_STATUSES = (
    OrderStatus.PENDING, OrderStatus.PROCESSING, OrderStatus.COMPLETED,
)


def next_status(current: OrderStatus) -> OrderStatus | None:
    """Successor of `current`, or None for terminal states."""
    return NEXT_STATUS.get(current)


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return NEXT_STATUS.get(current) == target


def is_terminal(status: OrderStatus) -> bool:
    return status in TERMINAL_STATUSES


def find_missing_fields(
    customer_id: str | None,
    items: Sequence | None,
    total_amount: float | None,
) -> list[str]:
    """Names of required order fields that are absent or empty."""
    missing = []
    if not customer_id:
        missing.append("customerId")
    if not items:
        missing.append("items")
    if total_amount is None:
        missing.append("totalAmount")
    return missing
