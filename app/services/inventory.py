import asyncio
import json
import logging
import re
from typing import Dict, Iterable, List, Mapping, Optional

from pydantic import ValidationError

from app.core.exceptions import AdminAPIError
from app.schemas.inventory import (
    BatchUpdateResult,
    InventoryLevel,
    InventoryRow,
    InventoryUpdateItem,
    PendingEdit,
    UpdateOutcome,
)
from app.schemas.product import ProductRecord
from app.services.pagination import CursorPage, fetch_window
from app.services.reshape import reshape_product, short_id

logger = logging.getLogger(__name__)

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")
_FORM_KEY_RE = re.compile(r"^(adjustBy|reason|row)\[(.+)\]$")


def build_inventory_item_map(records: Iterable[ProductRecord]) -> Dict[str, str]:
    """Map short inventory-item id to owning product id, in one pass over the page."""
    item_map = {}
    for record in records:
        if record.inventory_item_id:
            item_map[record.inventory_item_id] = record.id
    return item_map


async def load_inventory_levels(client, inventory_item_ids: List[str]) -> Dict[str, InventoryLevel]:
    if not inventory_item_ids:
        logger.debug("No inventory items on this page, skipping levels lookup")
        return {}

    levels = {}
    for level in await client.get_inventory_levels(inventory_item_ids):
        levels[short_id(level["inventoryItemId"])] = InventoryLevel(
            available=level.get("available") or 0,
            committed=level.get("committed") or 0,
            location_id=level.get("locationId") or "",
        )
    return levels


def merge_inventory_levels(records: Iterable[ProductRecord], levels: Mapping[str, InventoryLevel]) -> List[InventoryRow]:
    """Join product records with their levels.

    A record without a level gets available=0, committed=0, location_id=""
    which renders exactly like a real zero.
    """
    rows = []
    for record in records:
        level = levels.get(record.inventory_item_id or "") or InventoryLevel()
        rows.append(InventoryRow(
            id=short_id(record.id),
            title=record.title,
            status=record.status,
            image=record.image,
            sku=record.sku,
            collections=list(record.collections),
            inventory_item_id=record.inventory_item_id,
            location_id=level.location_id,
            available=level.available,
            committed=level.committed,
            cursor=record.cursor,
        ))
    return rows


async def load_inventory_page(
    client,
    cursor: Optional[str],
    direction: Optional[str],
    page_size: int,
) -> CursorPage[InventoryRow]:
    page = await fetch_window(
        client.fetch_products,
        cursor,
        direction,
        page_size,
        reshape_product,
        extra_variables={"sortKey": "CREATED_AT", "reverse": True},
    )
    # Levels depend on the item ids of this page, so this lookup runs after it.
    item_map = build_inventory_item_map(page.records)
    levels = await load_inventory_levels(client, list(item_map))
    return page.map(lambda records: merge_inventory_levels(records, levels))


def parse_delta(text) -> int:
    """Leading integer of the user's "adjust by" input; anything else is 0."""
    if isinstance(text, int) and not isinstance(text, bool):
        return text
    match = _LEADING_INT_RE.match(str(text or ""))
    if not match:
        return 0
    try:
        return int(match.group(1))
    except ValueError:
        # past the interpreter's int string conversion limit
        logger.warning(f"Ignoring oversized inventory delta of {len(match.group(1))} characters")
        return 0


def build_update_items(
    rows: Iterable[InventoryRow],
    pending_edits: Mapping[str, PendingEdit],
    selected_ids: Iterable[str],
) -> List[InventoryUpdateItem]:
    """Turn selected rows and their deltas into absolute "set available" commands."""
    rows_by_id = {row.id: row for row in rows}
    items = []
    for product_id in selected_ids:
        row = rows_by_id.get(product_id)
        if row is None:
            logger.warning(f"Selected product {product_id} is not on the submitted page")
            continue
        if not row.inventory_item_id:
            logger.warning(f"Product {product_id} has no inventory item, skipping")
            continue
        edit = pending_edits.get(product_id) or PendingEdit()
        items.append(InventoryUpdateItem(
            inventoryItemId=row.inventory_item_id,
            locationId=row.location_id,
            available=row.available + parse_delta(edit.adjust_by),
        ))
    return items


def parse_submitted_items(values: Iterable[str]) -> List[InventoryUpdateItem]:
    """Decode the repeated items[] form field."""
    items = []
    for raw in values:
        try:
            items.append(InventoryUpdateItem.model_validate(json.loads(raw)))
        except (ValueError, TypeError, ValidationError) as e:
            raise ValueError(f"Invalid inventory item: {raw!r}") from e
    return items


def parse_inventory_form(form: Mapping) -> tuple[List[InventoryRow], Dict[str, PendingEdit], List[str]]:
    """Read rows, pending edits and selection from the inventory page form.

    Fields: row[<id>] (JSON of the displayed row), adjustBy[<id>],
    reason[<id>] and a repeated "selected" field of product ids.
    """
    rows = []
    raw_edits: Dict[str, dict] = {}
    for key in form.keys():
        match = _FORM_KEY_RE.match(key)
        if not match:
            continue
        field, product_id = match.groups()
        value = form.get(key)
        if field == "row":
            try:
                data = json.loads(value)
                rows.append(InventoryRow(
                    id=product_id,
                    title=data.get("title", ""),
                    status=data.get("status", ""),
                    inventory_item_id=data.get("inventoryItemId") or None,
                    location_id=data.get("locationId") or "",
                    available=int(data.get("available") or 0),
                ))
            except (ValueError, TypeError, AttributeError, ValidationError) as e:
                raise ValueError(f"Invalid row data for product {product_id}") from e
        elif field == "adjustBy":
            raw_edits.setdefault(product_id, {})["adjust_by"] = value or "0"
        else:
            raw_edits.setdefault(product_id, {})["reason"] = value

    edits = {}
    for product_id, data in raw_edits.items():
        try:
            edits[product_id] = PendingEdit(**data)
        except ValidationError:
            edits[product_id] = PendingEdit(adjust_by=data.get("adjust_by", "0"))

    getlist = getattr(form, "getlist", None)
    selected = list(getlist("selected")) if getlist else list(form.get("selected") or [])
    return rows, edits, selected


async def _set_one(client, item: InventoryUpdateItem) -> UpdateOutcome:
    try:
        await client.set_inventory_level(item.inventoryItemId, item.locationId, item.available)
        return UpdateOutcome(
            inventory_item_id=item.inventoryItemId,
            location_id=item.locationId,
            available=item.available,
            success=True,
        )
    except AdminAPIError as e:
        logger.error(f"Inventory update failed for item {item.inventoryItemId}: {str(e)}")
        return UpdateOutcome(
            inventory_item_id=item.inventoryItemId,
            location_id=item.locationId,
            available=item.available,
            success=False,
            error=str(e),
        )


async def apply_inventory_updates(client, items: List[InventoryUpdateItem]) -> BatchUpdateResult:
    """Issue one set command per item; a failed item never stops the others."""
    outcomes = await asyncio.gather(*(_set_one(client, item) for item in items))
    result = BatchUpdateResult(outcomes=list(outcomes))
    logger.info(f"Inventory batch update: {len(result.succeeded)} succeeded, {len(result.failed)} failed")
    return result
