"""
Filters applied around a fetched product window.

Search, status and tag go to the remote query. Collection filtering only
ever runs over the records already loaded in the current window, so it
never changes which window is fetched or what pagination shows.
"""
from typing import Iterable, List, Mapping, Optional, Sequence, TypeVar

from app.schemas.product import FilterState, SelectOption

SORT_KEYS = ("CREATED_AT", "PUBLISHED_AT", "TITLE", "UPDATED_AT", "INVENTORY_TOTAL")
DEFAULT_SORT_KEY = "CREATED_AT"

SORT_OPTIONS = [
    SelectOption(label="Created Date", value="CREATED_AT"),
    SelectOption(label="Published Date", value="PUBLISHED_AT"),
    SelectOption(label="Title (A-Z)", value="TITLE"),
]

STATUS_OPTIONS = [
    SelectOption(label="All", value=""),
    SelectOption(label="Active", value="ACTIVE"),
    SelectOption(label="Draft", value="DRAFT"),
]

R = TypeVar("R")


def parse_filter_state(params: Mapping[str, str]) -> FilterState:
    sort_key = (params.get("sortKey") or DEFAULT_SORT_KEY).upper()
    if sort_key not in SORT_KEYS:
        sort_key = DEFAULT_SORT_KEY
    return FilterState(
        search=(params.get("search") or "").strip(),
        status=(params.get("status") or "").strip(),
        collection=(params.get("collection") or "").strip(),
        tag=(params.get("tag") or "").strip(),
        sort_key=sort_key,
        reverse=params.get("reverse") != "false",
    )


def build_search_query(filters: FilterState) -> Optional[str]:
    """Remote search string; collection is deliberately left out."""
    terms = []
    if filters.search:
        terms.append(filters.search)
    if filters.status:
        terms.append(f"status:{filters.status}")
    if filters.tag:
        terms.append(f"tag:{filters.tag}")
    return " AND ".join(terms) or None


def filter_by_collection(records: Sequence[R], collection: Optional[str]) -> List[R]:
    if not collection:
        return list(records)
    return [r for r in records if collection in r.collections]


def resolve_collection_title(options: Iterable[SelectOption], value: Optional[str]) -> str:
    """Map a collection option value (its id) to the title records carry."""
    if not value:
        return ""
    for option in options:
        if option.value == value:
            return option.label
    return ""


def collection_choices(records: Iterable) -> List[str]:
    seen = {}
    for record in records:
        for title in record.collections:
            seen.setdefault(title, None)
    return list(seen)


def select_low_stock(
    records: Sequence[R],
    limit: int,
    below: Optional[int] = None,
    quantity=lambda r: r.total_inventory,
) -> List[R]:
    """Smallest `limit` records by quantity, ascending. Never padded.

    The candidates normally arrive already thresholded by the remote query;
    `below` re-applies that threshold locally when given.
    """
    candidates = [r for r in records if below is None or quantity(r) < below]
    return sorted(candidates, key=quantity)[:limit]
