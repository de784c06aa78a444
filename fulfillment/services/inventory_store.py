"""Inventory Store — owns stock quantities and reservations per item.

Invariants:
    - quantity >= 0 and reserved >= 0 for every item at every observable instant
    - reserve() checks and moves units in one critical section: no partial
      reservation, no lost update between concurrent reservations
    - A rejected reservation leaves the item exactly as it was
    - update() overwrites only the fields it is given (no cross-field check)
    - Callers only ever receive snapshots (copies), never the stored record

Design Decisions:
    - Single coarse threading.Lock per store: a handful of items, in-process only
    - update() takes a dict of changes rather than keyword defaults, so
      "absent" and "present" are distinguishable without sentinels
    - Checks/updates counted on every attempt, found or not
"""

import logging
import threading
from collections.abc import Iterable, Mapping

from fulfillment.core.domain_types import InventoryItem, ItemId
from fulfillment.core.errors import (
    ErrorContext, InsufficientStockError, ResourceNotFoundError,
    ValidationFailedError,
)
from fulfillment.core.inventory_stats import (
    InventoryCounters, compute_inventory_stats,
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("quantity", "reserved")

DEFAULT_INVENTORY = (
    InventoryItem(id=ItemId(1), name="Laptop", quantity=50, price=999.99),
    InventoryItem(id=ItemId(2), name="Mouse", quantity=200, price=29.99),
    InventoryItem(id=ItemId(3), name="Keyboard", quantity=150, price=79.99),
    InventoryItem(id=ItemId(4), name="Monitor", quantity=75, price=299.99),
    InventoryItem(id=ItemId(5), name="Headphones", quantity=100, price=149.99),
)


class InventoryStore:
    """In-memory item table with atomic reservation."""

    def __init__(self, items: Iterable[InventoryItem] = DEFAULT_INVENTORY):
        self._lock = threading.Lock()
        self._items: dict[ItemId, InventoryItem] = {
            item.id: item.snapshot() for item in items
        }
        self._counters = InventoryCounters()

    # ── Queries ──────────────────────────────────────────────────

    def get(self, item_id: int) -> InventoryItem:
        with self._lock:
            self._counters.checks += 1
            return self._require(item_id).snapshot()

    def list_items(self) -> list[InventoryItem]:
        with self._lock:
            self._counters.checks += 1
            return [item.snapshot() for item in self._items.values()]

    def stats(self) -> dict:
        with self._lock:
            return compute_inventory_stats(
                list(self._items.values()), self._counters,
            )

    # ── Commands ─────────────────────────────────────────────────

    def update(self, item_id: int, changes: Mapping[str, int]) -> InventoryItem:
        """Overwrite `quantity` and/or `reserved` with the values given."""
        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValidationFailedError(
                f"Unknown fields: {', '.join(sorted(unknown))}",
                sorted(unknown), ErrorContext(item_id=item_id),
            )
        negative = [name for name, value in changes.items() if value < 0]
        if negative:
            raise ValidationFailedError(
                "Quantities cannot be negative", negative,
                ErrorContext(item_id=item_id),
            )

        with self._lock:
            self._counters.updates += 1
            item = self._require(item_id)
            for name, value in changes.items():
                setattr(item, name, value)
            updated = item.snapshot()

        logger.info(
            f"Inventory updated: {sorted(changes)}", extra={"item_id": item_id},
        )
        return updated

    def reserve(self, item_id: int, quantity: int) -> InventoryItem:
        """Move `quantity` units from available stock into reserved."""
        if quantity <= 0:
            raise ValidationFailedError(
                "Reservation quantity must be positive", ["quantity"],
                ErrorContext(item_id=item_id),
            )

        with self._lock:
            self._counters.updates += 1
            item = self._require(item_id)
            if item.quantity < quantity:
                logger.info(
                    f"Reservation of {quantity} rejected, {item.quantity} available",
                    extra={"item_id": item_id},
                )
                raise InsufficientStockError(
                    quantity, item.quantity, ErrorContext(item_id=item_id),
                )
            item.quantity -= quantity
            item.reserved += quantity
            reserved = item.snapshot()

        logger.info(f"Reserved {quantity} units", extra={"item_id": item_id})
        return reserved

    def _require(self, item_id: int) -> InventoryItem:
        """Stored item or ResourceNotFoundError. Caller holds the lock."""
        item = self._items.get(ItemId(item_id))
        if item is None:
            raise ResourceNotFoundError(
                "Item", item_id, ErrorContext(item_id=item_id),
            )
        return item
