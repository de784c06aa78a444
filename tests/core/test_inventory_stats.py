"""Inventory Stats — derived value, out-of-stock and low-stock counts.

Tests:
    - Low stock boundaries (0 and LOW_STOCK_THRESHOLD are both excluded)
    - Total value is Σ quantity × price, reserved units excluded
"""

import pytest

from fulfillment.core.domain_types import InventoryItem, ItemId
from fulfillment.core.inventory_stats import (
    LOW_STOCK_THRESHOLD,
    InventoryCounters,
    compute_inventory_stats,
    low_stock_count,
    out_of_stock_count,
    total_inventory_value,
)


def _item(item_id: int, quantity: int, price: float = 10.0, reserved: int = 0):
    return InventoryItem(
        id=ItemId(item_id), name=f"item-{item_id}",
        quantity=quantity, price=price, reserved=reserved,
    )


def test_threshold_is_twenty():
    assert LOW_STOCK_THRESHOLD == 20


@pytest.mark.parametrize("quantity,is_low", [
    (0, False), (1, True), (19, True), (20, False), (200, False),
])
def test_low_stock_boundaries(quantity, is_low):
    assert low_stock_count([_item(1, quantity)]) == (1 if is_low else 0)


def test_out_of_stock_counts_only_zero_quantity():
    items = [_item(1, 0), _item(2, 0, reserved=5), _item(3, 1)]
    assert out_of_stock_count(items) == 2


def test_total_value_ignores_reserved_units():
    items = [_item(1, 2, price=999.99, reserved=10), _item(2, 3, price=29.99)]
    assert total_inventory_value(items) == pytest.approx(2 * 999.99 + 3 * 29.99)


def test_empty_inventory_is_all_zero():
    stats = compute_inventory_stats([], InventoryCounters())
    assert stats["inventory_total_value"] == 0
    assert stats["inventory_low_stock_alerts"] == 0
    assert stats["inventory_out_of_stock"] == 0
    assert stats["items"] == []


def test_stats_return_item_copies():
    original = _item(1, 5)
    stats = compute_inventory_stats([original], InventoryCounters(checks=3))
    stats["items"][0].quantity = 99
    assert original.quantity == 5
    assert stats["inventory_checks_total"] == 3
