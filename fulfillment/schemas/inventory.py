"""Inventory Schemas — Pydantic models for the inventory service boundary.

Invariants:
    - InventoryUpdate: each field optional, non-negative when present
    - Only fields explicitly sent (and not null) reach the store
    - ReserveRequest.quantity is a positive integer

Design Decisions:
    - changes() uses exclude_unset + exclude_none: "absent" and "null" both
      mean "leave untouched"
    - No cross-field validation between quantity and reserved (known gap)
"""

from pydantic import BaseModel, ConfigDict, Field

from fulfillment.core.domain_types import InventoryItem


class InventoryItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    quantity: int
    price: float
    reserved: int

    @classmethod
    def from_item(cls, item: InventoryItem) -> "InventoryItemResponse":
        return cls.model_validate(item)


class InventoryUpdate(BaseModel):
    quantity: int | None = Field(None, ge=0)
    reserved: int | None = Field(None, ge=0)

    def changes(self) -> dict[str, int]:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class ReserveRequest(BaseModel):
    quantity: int = Field(gt=0)
