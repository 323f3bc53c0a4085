from pydantic import BaseModel, Field
from typing import List, Optional


class ProductRecord(BaseModel):
    id: str
    title: str
    status: str
    created_at: Optional[str] = None
    published_at: Optional[str] = None
    image: Optional[str] = None
    image_alt: Optional[str] = None
    sku: Optional[str] = None
    barcode: Optional[str] = None
    price: Optional[str] = None
    collections: List[str] = Field(default_factory=list)
    total_inventory: int = 0
    inventory_quantity: int = 0
    inventory_item_id: Optional[str] = None
    description_html: str = ""
    cursor: Optional[str] = None


class PageWindow(BaseModel):
    has_next_page: bool = False
    has_previous_page: bool = False
    start_cursor: Optional[str] = None
    end_cursor: Optional[str] = None


class SelectOption(BaseModel):
    label: str
    value: str


class FilterState(BaseModel):
    search: str = ""
    status: str = ""
    collection: str = ""
    tag: str = ""
    sort_key: str = "CREATED_AT"
    reverse: bool = True


class ProductPageResponse(BaseModel):
    products: List[ProductRecord]
    page_info: PageWindow
    has_next: bool
    has_prev: bool
    next_cursor: Optional[str] = None
    prev_cursor: Optional[str] = None
    shop: str
    filters: FilterState
    collection_options: List[SelectOption] = []
    tag_options: List[SelectOption] = []


class DashboardMetrics(BaseModel):
    recent_products: List[ProductRecord]
    low_stock_products: List[ProductRecord]
    recent_drafts: List[ProductRecord]
