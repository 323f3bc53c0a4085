"""
Cursor pagination for admin API list queries.

A window is requested forward with {after, first} or backward with
{before, last}. Navigation cursors come from the records actually displayed:
the first record's cursor for "prev" and the last record's cursor for "next".
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, List, Optional, TypeVar
from urllib.parse import urlencode

from app.core.exceptions import AdminAPIError
from app.schemas.product import PageWindow

logger = logging.getLogger(__name__)

NEXT = "next"
PREV = "prev"

T = TypeVar("T")


def normalize_direction(direction: Optional[str]) -> str:
    return PREV if direction == PREV else NEXT


def window_variables(cursor: Optional[str], direction: Optional[str], page_size: int) -> dict:
    if page_size <= 0:
        raise ValueError("page_size must be a positive integer")
    if normalize_direction(direction) == PREV:
        return {"before": cursor, "last": page_size}
    return {"after": cursor, "first": page_size}


def parse_page_window(page_info: Optional[dict]) -> PageWindow:
    page_info = page_info or {}
    return PageWindow(
        has_next_page=bool(page_info.get("hasNextPage")),
        has_previous_page=bool(page_info.get("hasPreviousPage")),
        start_cursor=page_info.get("startCursor"),
        end_cursor=page_info.get("endCursor"),
    )


@dataclass
class CursorPage(Generic[T]):
    records: List[T]
    window: PageWindow
    page_size: int
    cursors: List[Optional[str]] = field(default_factory=list)

    @property
    def has_next(self) -> bool:
        # A short window is the last one, whatever the remote reports.
        return self.window.has_next_page and len(self.records) == self.page_size

    @property
    def has_prev(self) -> bool:
        return self.window.has_previous_page

    @property
    def next_cursor(self) -> Optional[str]:
        if not self.cursors:
            return None
        return self.cursors[-1]

    @property
    def prev_cursor(self) -> Optional[str]:
        if not self.cursors:
            return None
        return self.cursors[0]

    def map(self, fn: Callable[[List[T]], List[Any]]) -> "CursorPage":
        """Replace the records while keeping the window and cursors."""
        return CursorPage(records=fn(self.records), window=self.window, page_size=self.page_size, cursors=self.cursors)


async def fetch_window(
    fetch: Callable[[dict], Awaitable[dict]],
    cursor: Optional[str],
    direction: Optional[str],
    page_size: int,
    reshape: Callable[[dict], T],
    extra_variables: Optional[dict] = None,
) -> CursorPage[T]:
    """Fetch one window and reshape its edges.

    `fetch` receives the query variables and returns the raw connection
    ({"pageInfo", "edges"}). Failures propagate unchanged.
    """
    variables = dict(extra_variables or {})
    variables.update(window_variables(cursor, direction, page_size))
    connection = await fetch(variables)

    edges = connection.get("edges")
    if not isinstance(edges, list):
        raise AdminAPIError("Connection has no edges")

    records = [reshape(edge) for edge in edges]
    cursors = [edge.get("cursor") for edge in edges]
    window = parse_page_window(connection.get("pageInfo"))

    if cursors and (cursors[0] != window.start_cursor or cursors[-1] != window.end_cursor):
        logger.warning("Page window cursors disagree with record cursors; using record cursors")

    logger.debug(f"Fetched window of {len(records)}/{page_size} records ({normalize_direction(direction)})")
    return CursorPage(records=records, window=window, page_size=page_size, cursors=cursors)


def navigation_url(base_path: str, params: dict, cursor: Optional[str], direction: str) -> str:
    """Build a prev/next link that keeps the current filter parameters."""
    query = {key: value for key, value in params.items() if value not in (None, "") and key not in ("cursor", "direction")}
    query["cursor"] = cursor or ""
    query["direction"] = normalize_direction(direction)
    return f"{base_path}?{urlencode(query)}"
