from app.schemas.product import FilterState, SelectOption
from app.services.filters import (
    build_search_query,
    collection_choices,
    filter_by_collection,
    parse_filter_state,
    resolve_collection_title,
    select_low_stock,
)
from app.services.reshape import reshape_product

from factories import make_node


def _records(quantities):
    return [
        reshape_product({"cursor": f"c{i}", "node": make_node(i, total_inventory=q)})
        for i, q in enumerate(quantities, start=1)
    ]


def test_parse_filter_state_defaults():
    filters = parse_filter_state({})

    assert filters.sort_key == "CREATED_AT"
    assert filters.reverse is True
    assert filters.search == ""


def test_parse_filter_state_reverse_only_false_literal():
    assert parse_filter_state({"reverse": "false"}).reverse is False
    assert parse_filter_state({"reverse": "no"}).reverse is True


def test_parse_filter_state_rejects_unknown_sort_key():
    assert parse_filter_state({"sortKey": "PRICE"}).sort_key == "CREATED_AT"
    assert parse_filter_state({"sortKey": "title"}).sort_key == "TITLE"


def test_build_search_query_leaves_collection_out():
    filters = FilterState(search="shirt", status="ACTIVE", tag="sale", collection="gid://shopify/Collection/1")

    assert build_search_query(filters) == "shirt AND status:ACTIVE AND tag:sale"


def test_build_search_query_empty():
    assert build_search_query(FilterState()) is None


def test_filter_by_collection_only_touches_loaded_records():
    records = [
        reshape_product({"cursor": "c1", "node": make_node(1, collections=["Summer"])}),
        reshape_product({"cursor": "c2", "node": make_node(2, collections=["Winter", "Summer"])}),
        reshape_product({"cursor": "c3", "node": make_node(3, collections=["Winter"])}),
    ]

    assert [r.id for r in filter_by_collection(records, "Winter")] == [
        "gid://shopify/Product/2",
        "gid://shopify/Product/3",
    ]
    assert filter_by_collection(records, "") == records


def test_resolve_collection_title():
    options = [SelectOption(label="Summer", value="gid://shopify/Collection/1")]

    assert resolve_collection_title(options, "gid://shopify/Collection/1") == "Summer"
    assert resolve_collection_title(options, "gid://shopify/Collection/99") == ""
    assert resolve_collection_title(options, "") == ""


def test_collection_choices_first_seen_order():
    records = [
        reshape_product({"cursor": "c1", "node": make_node(1, collections=["B", "A"])}),
        reshape_product({"cursor": "c2", "node": make_node(2, collections=["A", "C"])}),
    ]

    assert collection_choices(records) == ["B", "A", "C"]


def test_low_stock_picks_smallest_ascending():
    records = _records([4, 1, 0, 5, 3, 2])

    selected = select_low_stock(records, 5)

    assert [r.total_inventory for r in selected] == [0, 1, 2, 3, 4]


def test_low_stock_fewer_than_limit_is_not_padded():
    records = _records([7, 1, 0, 9, 3, 2, 6, 8])

    selected = select_low_stock(records, 5, below=6)

    assert [r.total_inventory for r in selected] == [0, 1, 2, 3]
