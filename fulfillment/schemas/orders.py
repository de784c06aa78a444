"""Order Schemas — Pydantic models for the order service boundary.

Invariants:
    - OrderCreate fields are all optional: presence is a business rule checked
      by the Order Store, so a missing field is counted as a failed order
    - Malformed values (wrong types) are rejected here with 400
    - OrderResponse serializes camelCase, status as its string value

Design Decisions:
    - alias_generator=to_camel + populate_by_name: accepts and emits the wire
      names while code keeps snake_case
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from fulfillment.core.domain_types import Order, OrderLine, OrderStatus

CAMEL_CONFIG = ConfigDict(
    alias_generator=to_camel, populate_by_name=True, from_attributes=True,
)


class OrderLineSchema(BaseModel):
    """One order line as sent by the client."""
    model_config = CAMEL_CONFIG

    item_id: int
    name: str
    quantity: int
    price: float

    def to_domain(self) -> OrderLine:
        return OrderLine(
            item_id=self.item_id, name=self.name,
            quantity=self.quantity, price=self.price,
        )


class OrderCreate(BaseModel):
    model_config = CAMEL_CONFIG

    customer_id: str | None = None
    items: list[OrderLineSchema] | None = None
    total_amount: float | None = None

    def domain_items(self) -> list[OrderLine] | None:
        if self.items is None:
            return None
        return [line.to_domain() for line in self.items]


class OrderResponse(BaseModel):
    model_config = CAMEL_CONFIG

    id: int
    customer_id: str
    items: list[OrderLineSchema]
    total_amount: float
    status: OrderStatus
    created_at: datetime

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls.model_validate(order)
