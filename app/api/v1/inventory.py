from fastapi import APIRouter, Depends
from typing import Optional
import logging

from app.api.dependencies import get_admin_client
from app.core.admin_client import AdminAPIClient
from app.core.config import settings
from app.schemas.inventory import InventoryPageResponse, InventorySetRequest
from app.services.filters import collection_choices, filter_by_collection
from app.services.inventory import apply_inventory_updates, load_inventory_page

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/inventory", tags=["inventory"])


@router.get("", response_model=InventoryPageResponse)
async def list_inventory(
    cursor: Optional[str] = None,
    direction: str = "next",
    collection: str = "",
    client: AdminAPIClient = Depends(get_admin_client),
):
    page = await load_inventory_page(client, cursor or None, direction, settings.INVENTORY_PAGE_SIZE)
    return InventoryPageResponse(
        products=filter_by_collection(page.records, collection),
        page_info=page.window,
        has_next=page.has_next,
        has_prev=page.has_prev,
        next_cursor=page.next_cursor,
        prev_cursor=page.prev_cursor,
        collection=collection,
        collection_choices=collection_choices(page.records),
    )


@router.post("/set")
async def set_inventory(data: InventorySetRequest, client: AdminAPIClient = Depends(get_admin_client)):
    """Apply absolute "available" values. Per-item outcomes are always returned."""
    result = await apply_inventory_updates(client, data.items)
    return {
        "success": result.success,
        "succeeded": len(result.succeeded),
        "failed": len(result.failed),
        "outcomes": [outcome.model_dump() for outcome in result.outcomes],
    }
