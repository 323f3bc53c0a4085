"""
Flatten admin API product edges into ProductRecord view models.

Nested singleton connections (images, variants) are reduced to their first
node; anything absent resolves to None or an empty list instead of raising.
Display placeholders are applied only by `display_value`, at render time.
"""
import re
from typing import Any, Optional

from app.schemas.product import ProductRecord

PLACEHOLDER = "-"

STATUS_TONES = {
    "ACTIVE": "success",
    "DRAFT": "info",
    "ARCHIVED": "default",
}

_TAG_RE = re.compile(r"<[^>]+>")


def first_node(connection: Any) -> Optional[dict]:
    if not isinstance(connection, dict):
        return None
    edges = connection.get("edges") or []
    if not edges:
        return None
    node = (edges[0] or {}).get("node")
    return node if isinstance(node, dict) else None


def short_id(global_id: Optional[str]) -> Optional[str]:
    """Return the part of a global id after its last "/"."""
    if global_id is None:
        return None
    return str(global_id).rsplit("/", 1)[-1]


def _titles(connection: Any) -> list[str]:
    if not isinstance(connection, dict):
        return []
    return [
        edge["node"]["title"]
        for edge in connection.get("edges") or []
        if edge and edge.get("node") and edge["node"].get("title") is not None
    ]


def _int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def reshape_product(edge: dict) -> ProductRecord:
    node = edge.get("node") or {}
    variant = first_node(node.get("variants")) or {}
    product_image = first_node(node.get("images")) or {}
    variant_image = variant.get("image") or {}
    inventory_item = variant.get("inventoryItem") or {}

    return ProductRecord(
        id=node["id"],
        title=node.get("title") or "",
        status=node.get("status") or "",
        created_at=node.get("createdAt"),
        published_at=node.get("publishedAt"),
        image=variant_image.get("url") or product_image.get("url") or product_image.get("transformedSrc"),
        image_alt=variant_image.get("altText") or product_image.get("altText"),
        sku=variant.get("sku") or None,
        barcode=variant.get("barcode") or None,
        price=variant.get("price") or None,
        collections=_titles(node.get("collections")),
        total_inventory=_int(node.get("totalInventory")),
        inventory_quantity=_int(variant.get("inventoryQuantity")),
        inventory_item_id=short_id(inventory_item.get("id")),
        description_html=node.get("descriptionHtml") or "",
        cursor=edge.get("cursor"),
    )


# Presentation helpers, registered as Jinja2 filters


def display_value(value: Any, placeholder: str = PLACEHOLDER) -> Any:
    if value is None or value == "":
        return placeholder
    return value


def strip_html(text: Optional[str]) -> str:
    return _TAG_RE.sub("", text or "")


def status_label(status: Optional[str]) -> str:
    if not status:
        return ""
    return status[0] + status[1:].lower()


def status_tone(status: Optional[str]) -> str:
    return STATUS_TONES.get(status or "", "warning")


def iso_date(timestamp: Optional[str]) -> str:
    return (timestamp or "")[:10]
