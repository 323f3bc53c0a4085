import pytest

from app.core.exceptions import AdminAPIError
from app.services.pagination import (
    CursorPage,
    fetch_window,
    navigation_url,
    window_variables,
)
from app.services.reshape import reshape_product
from app.schemas.product import PageWindow

from factories import connection, make_node


def test_window_variables_next():
    assert window_variables("abc", "next", 20) == {"after": "abc", "first": 20}


def test_window_variables_prev():
    assert window_variables("abc", "prev", 20) == {"before": "abc", "last": 20}


def test_window_variables_unknown_direction_is_next():
    assert window_variables(None, "sideways", 5) == {"after": None, "first": 5}


def test_window_variables_rejects_non_positive_page_size():
    with pytest.raises(ValueError):
        window_variables(None, "next", 0)


def test_short_window_disables_next_even_if_remote_claims_more():
    page = CursorPage(
        records=["a", "b", "c"],
        window=PageWindow(has_next_page=True, has_previous_page=False),
        page_size=5,
        cursors=["c1", "c2", "c3"],
    )
    assert page.has_next is False


def test_full_window_with_remote_next_enables_next():
    page = CursorPage(
        records=list(range(5)),
        window=PageWindow(has_next_page=True, has_previous_page=True),
        page_size=5,
        cursors=[f"c{i}" for i in range(5)],
    )
    assert page.has_next is True
    assert page.has_prev is True


def test_full_window_without_remote_next_disables_next():
    page = CursorPage(records=list(range(5)), window=PageWindow(has_next_page=False), page_size=5)
    assert page.has_next is False


@pytest.mark.asyncio
async def test_record_cursors_win_over_page_info():
    conn = connection([make_node(1), make_node(2)], has_next=True)
    conn["pageInfo"]["startCursor"] = "stale-start"
    conn["pageInfo"]["endCursor"] = "stale-end"

    async def fetch(variables):
        return conn

    page = await fetch_window(fetch, None, "next", 2, reshape_product)

    assert page.prev_cursor == "c1"
    assert page.next_cursor == "c2"
    assert page.window.end_cursor == "stale-end"


@pytest.mark.asyncio
async def test_fetch_window_passes_extra_variables():
    seen = {}

    async def fetch(variables):
        seen.update(variables)
        return connection([])

    await fetch_window(fetch, "c9", "prev", 10, reshape_product, extra_variables={"sortKey": "TITLE"})

    assert seen == {"sortKey": "TITLE", "before": "c9", "last": 10}


@pytest.mark.asyncio
async def test_fetch_window_propagates_remote_failure():
    async def fetch(variables):
        raise AdminAPIError("GraphQL query failed: 500", 500)

    with pytest.raises(AdminAPIError):
        await fetch_window(fetch, None, "next", 10, reshape_product)


@pytest.mark.asyncio
async def test_fetch_window_rejects_connection_without_edges():
    async def fetch(variables):
        return {"pageInfo": {"hasNextPage": False, "hasPreviousPage": False}}

    with pytest.raises(AdminAPIError, match="Connection has no edges"):
        await fetch_window(fetch, None, "next", 10, reshape_product)


@pytest.mark.asyncio
async def test_next_cursor_round_trip_has_no_overlap_or_gap(catalog):
    async def fetch(variables):
        return catalog.window(variables)

    first = await fetch_window(fetch, None, "next", 20, reshape_product)
    second = await fetch_window(fetch, first.next_cursor, "next", 20, reshape_product)
    third = await fetch_window(fetch, second.next_cursor, "next", 20, reshape_product)

    ids = [r.id for r in first.records + second.records + third.records]
    assert ids == [f"gid://shopify/Product/{i}" for i in range(1, 46)]
    assert first.has_next and second.has_next
    assert len(third.records) == 5
    assert third.has_next is False


@pytest.mark.asyncio
async def test_prev_cursor_returns_preceding_window(catalog):
    async def fetch(variables):
        return catalog.window(variables)

    first = await fetch_window(fetch, None, "next", 20, reshape_product)
    second = await fetch_window(fetch, first.next_cursor, "next", 20, reshape_product)
    back = await fetch_window(fetch, second.prev_cursor, "prev", 20, reshape_product)

    assert [r.id for r in back.records] == [r.id for r in first.records]
    assert back.has_prev is False
    assert second.has_prev is True


def test_navigation_url_keeps_filters_and_replaces_cursor():
    url = navigation_url(
        "/app/products",
        {"search": "shirt", "cursor": "old", "direction": "prev", "status": ""},
        "c20",
        "next",
    )
    assert url == "/app/products?search=shirt&cursor=c20&direction=next"
