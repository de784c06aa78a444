"""Inventory Routes — list, fetch, overwrite and reserve stock.

Invariants:
    - PUT only touches fields present in the body
    - Reserve is all-or-nothing: 400 "Insufficient inventory" leaves the item unchanged
"""

import logging

from fastapi import APIRouter, Depends

from fulfillment.api.routes.dependencies import get_inventory_store
from fulfillment.core.errors import FulfillmentError, InternalFailureError
from fulfillment.schemas.inventory import (
    InventoryItemResponse, InventoryUpdate, ReserveRequest,
)
from fulfillment.services.inventory_store import InventoryStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.get("", response_model=list[InventoryItemResponse])
async def list_inventory(store: InventoryStore = Depends(get_inventory_store)):
    return [InventoryItemResponse.from_item(i) for i in store.list_items()]


@router.get("/{item_id}", response_model=InventoryItemResponse)
async def get_item(
    item_id: int, store: InventoryStore = Depends(get_inventory_store),
):
    return InventoryItemResponse.from_item(store.get(item_id))


@router.put("/{item_id}", response_model=InventoryItemResponse)
async def update_item(
    item_id: int,
    body: InventoryUpdate,
    store: InventoryStore = Depends(get_inventory_store),
):
    """Overwrite quantity and/or reserved as given."""
    try:
        item = store.update(item_id, body.changes())
    except FulfillmentError:
        raise
    except Exception as e:
        logger.error(
            f"Failed to update item: {e}",
            exc_info=True, extra={"item_id": item_id},
        )
        raise InternalFailureError("Failed to update item") from e
    return InventoryItemResponse.from_item(item)


@router.post("/{item_id}/reserve", response_model=InventoryItemResponse)
async def reserve_item(
    item_id: int,
    body: ReserveRequest,
    store: InventoryStore = Depends(get_inventory_store),
):
    """Move units from available quantity into reserved."""
    return InventoryItemResponse.from_item(store.reserve(item_id, body.quantity))
