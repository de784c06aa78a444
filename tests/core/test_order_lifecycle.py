"""Order Lifecycle Rules — tests for pure transition and presence rules.

Tests cover:
    - Transitions only move forward, one step at a time
    - Terminal states have no successor
    - Missing / empty fields are reported by wire name
"""

import pytest

from fulfillment.core.domain_types import OrderLine, OrderStatus
from fulfillment.core.order_lifecycle import (
    STORED_STATUSES,
    can_transition,
    find_missing_fields,
    is_terminal,
    next_status,
)

LINE = OrderLine(item_id=1, name="Laptop", quantity=1, price=999.99)


# ─── transitions ─────────────────────────────────────────────────

def test_pending_moves_to_processing():
    assert next_status(OrderStatus.PENDING) == OrderStatus.PROCESSING
    assert can_transition(OrderStatus.PENDING, OrderStatus.PROCESSING)


def test_processing_moves_to_completed():
    assert next_status(OrderStatus.PROCESSING) == OrderStatus.COMPLETED
    assert can_transition(OrderStatus.PROCESSING, OrderStatus.COMPLETED)


def test_pending_cannot_skip_to_completed():
    assert not can_transition(OrderStatus.PENDING, OrderStatus.COMPLETED)


@pytest.mark.parametrize("current,target", [
    (OrderStatus.PROCESSING, OrderStatus.PENDING),
    (OrderStatus.COMPLETED, OrderStatus.PROCESSING),
    (OrderStatus.COMPLETED, OrderStatus.PENDING),
])
def test_no_backward_transition(current, target):
    assert not can_transition(current, target)


def test_same_state_is_not_a_transition():
    assert not can_transition(OrderStatus.PROCESSING, OrderStatus.PROCESSING)


def test_failed_is_never_a_target():
    for status in OrderStatus:
        assert not can_transition(status, OrderStatus.FAILED)


def test_terminal_states_have_no_successor():
    assert is_terminal(OrderStatus.COMPLETED)
    assert is_terminal(OrderStatus.FAILED)
    assert next_status(OrderStatus.COMPLETED) is None
    assert next_status(OrderStatus.FAILED) is None
    assert not is_terminal(OrderStatus.PENDING)


def test_failed_is_not_a_stored_status():
    assert OrderStatus.FAILED not in STORED_STATUSES
    assert len(STORED_STATUSES) == 3


# ─── find_missing_fields ─────────────────────────────────────────

def test_complete_order_has_no_missing_fields():
    assert find_missing_fields("c1", [LINE], 999.99) == []


def test_missing_items_reported():
    assert find_missing_fields("c1", None, 999.99) == ["items"]


def test_empty_items_reported():
    assert find_missing_fields("c1", [], 999.99) == ["items"]


def test_empty_customer_reported():
    assert find_missing_fields("", [LINE], 10.0) == ["customerId"]


def test_zero_total_is_present():
    assert find_missing_fields("c1", [LINE], 0) == []


def test_all_missing_reported_in_order():
    assert find_missing_fields(None, None, None) == [
        "customerId", "items", "totalAmount",
    ]
