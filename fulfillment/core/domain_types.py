"""Domain Types — rich types that replace bare primitives across the services.

Invariants:
    - OrderId and ItemId wrap ints — ids are assigned by their owning store
    - All valid states encoded as Enums — no raw string matching
    - OrderLine is frozen: line items never change after the order is accepted

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
    - Order / InventoryItem as plain dataclasses: the stores own mutation and
      hand out copies, so the records themselves stay simple
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

OrderId = NewType("OrderId", int)
ItemId = NewType("ItemId", int)


# ─── Enums ───────────────────────────────────────────────────────

class OrderStatus(str, Enum):
    """Order lifecycle states. FAILED is counted, never stored."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class ServiceName(str, Enum):
    """Downstream services addressed by the gateway."""
    ORDER = "order"
    INVENTORY = "inventory"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


# ─── Records ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class OrderLine:
    """One line of an order, accepted as given by the caller."""
    item_id: int
    name: str
    quantity: int
    price: float


@dataclass
class Order:
    id: OrderId
    customer_id: str
    items: list[OrderLine]
    total_amount: float
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
    # Monotonic clock reading at creation, used for processing time.
    started_at: float = field(default=0.0, repr=False, compare=False)

    def snapshot(self) -> "Order":
        """Detached copy safe to hand outside the store lock."""
        return replace(self, items=list(self.items))


@dataclass
class InventoryItem:
    id: ItemId
    name: str
    quantity: int
    price: float
    reserved: int = 0

    def snapshot(self) -> "InventoryItem":
        return replace(self)
