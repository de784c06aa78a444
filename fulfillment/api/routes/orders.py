"""Order Routes — create, list and fetch orders.

Invariants:
    - POST returns 201 with the stored order, status always `pending`
    - Presence validation happens in the Order Store, so rejections are counted
    - An absent body is an order with every field missing; a malformed one is
      counted as failed and answered with the field-level 400
    - Unexpected faults while creating are counted as failed orders and
      reported as a generic 500

Design Decisions:
    - async handlers: creation schedules timers on the running event loop
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from fulfillment.api.routes.dependencies import get_order_store
from fulfillment.core.errors import FulfillmentError, InternalFailureError
from fulfillment.schemas.orders import OrderCreate, OrderResponse
from fulfillment.services.order_store import OrderStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/orders", tags=["orders"])


@router.post(
    "", response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_order(
    payload: Any = Body(None),
    store: OrderStore = Depends(get_order_store),
):
    """Accept a new order; processing continues in the background."""
    body = _parse_order(payload, store)
    try:
        order = store.create(
            body.customer_id, body.domain_items(), body.total_amount,
        )
    except FulfillmentError:
        raise
    except Exception as e:
        store.record_failure()
        logger.error(f"Failed to create order: {e}", exc_info=True)
        raise InternalFailureError("Failed to create order") from e
    return OrderResponse.from_order(order)


def _parse_order(payload: Any, store: OrderStore) -> OrderCreate:
    """Body as OrderCreate; rejected bodies count as failed orders."""
    try:
        return OrderCreate.model_validate(payload or {})
    except ValidationError as e:
        store.record_failure()
        logger.warning(
            f"Order rejected: malformed body ({e.error_count()} problem(s))",
        )
        raise RequestValidationError(e.errors(include_url=False)) from e


@router.get("", response_model=list[OrderResponse])
async def list_orders(store: OrderStore = Depends(get_order_store)):
    """All orders in creation order."""
    return [OrderResponse.from_order(o) for o in store.list_orders()]


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: int, store: OrderStore = Depends(get_order_store)):
    return OrderResponse.from_order(store.get(order_id))
