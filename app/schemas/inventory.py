from enum import Enum
from pydantic import BaseModel, Field
from typing import List, Optional

from app.schemas.product import PageWindow


class AdjustmentReason(str, Enum):
    CORRECTION = "correction"
    DAMAGED = "damaged"
    LOST = "lost"


class InventoryLevel(BaseModel):
    available: int = 0
    committed: int = 0
    location_id: str = ""


class InventoryRow(BaseModel):
    id: str
    title: str
    status: str
    image: Optional[str] = None
    sku: Optional[str] = None
    collections: List[str] = Field(default_factory=list)
    inventory_item_id: Optional[str] = None
    location_id: str = ""
    available: int = 0
    committed: int = 0
    cursor: Optional[str] = None


class PendingEdit(BaseModel):
    adjust_by: str = "0"
    reason: AdjustmentReason = AdjustmentReason.CORRECTION


class InventoryUpdateItem(BaseModel):
    inventoryItemId: str
    locationId: str
    available: int


class InventorySetRequest(BaseModel):
    items: List[InventoryUpdateItem]


class UpdateOutcome(BaseModel):
    inventory_item_id: str
    location_id: str
    available: int
    success: bool
    error: Optional[str] = None


class BatchUpdateResult(BaseModel):
    outcomes: List[UpdateOutcome] = []

    @property
    def succeeded(self) -> List[UpdateOutcome]:
        return [o for o in self.outcomes if o.success]

    @property
    def failed(self) -> List[UpdateOutcome]:
        return [o for o in self.outcomes if not o.success]

    @property
    def success(self) -> bool:
        return not self.failed


class InventoryPageResponse(BaseModel):
    products: List[InventoryRow]
    page_info: PageWindow
    has_next: bool
    has_prev: bool
    next_cursor: Optional[str] = None
    prev_cursor: Optional[str] = None
    collection: str = ""
    collection_choices: List[str] = []
