"""Inventory Stats — derived stock metrics recomputed from the item list.

Invariants:
    - Recomputed on every call; nothing here is cached
    - Low stock is strictly between 0 and LOW_STOCK_THRESHOLD (exclusive)
    - Out-of-stock items are not low-stock items
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from fulfillment.core.domain_types import InventoryItem

LOW_STOCK_THRESHOLD = 20


@dataclass
class InventoryCounters:
    """Monotonic inventory-service counters, mutated only by the Inventory Store."""
    checks: int = 0
    updates: int = 0


def total_inventory_value(items: Iterable[InventoryItem]) -> float:
    return sum(item.quantity * item.price for item in items)


def out_of_stock_count(items: Iterable[InventoryItem]) -> int:
    return sum(1 for item in items if item.quantity == 0)


def low_stock_count(items: Iterable[InventoryItem]) -> int:
    return sum(
        1 for item in items if 0 < item.quantity < LOW_STOCK_THRESHOLD
    )


def compute_inventory_stats(
    items: Sequence[InventoryItem], counters: InventoryCounters,
) -> dict:
    """Flat inventory metrics dict. Pure, no IO."""
    return {
        "inventory_checks_total": counters.checks,
        "inventory_updates_total": counters.updates,
        "inventory_total_value": total_inventory_value(items),
        "inventory_low_stock_alerts": low_stock_count(items),
        "inventory_out_of_stock": out_of_stock_count(items),
        "items": [item.snapshot() for item in items],
    }
