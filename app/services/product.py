import asyncio
import logging
from typing import Optional

from app.schemas.product import FilterState, ProductPageResponse, SelectOption
from app.services.filters import build_search_query, filter_by_collection, resolve_collection_title
from app.services.pagination import fetch_window
from app.services.reshape import reshape_product

logger = logging.getLogger(__name__)


async def get_product_page(
    client,
    shop: str,
    filters: FilterState,
    cursor: Optional[str] = None,
    direction: Optional[str] = None,
    page_size: int = 25,
) -> ProductPageResponse:
    """
    Load one filtered, sorted product window together with the collection
    and tag option lists.

    Search, status and tag are sent to the remote query. The collection
    filter is applied afterwards to the loaded window only, so pagination
    still reflects the unfiltered window.
    """
    variables = {
        "query": build_search_query(filters),
        "sortKey": filters.sort_key,
        "reverse": filters.reverse,
    }

    page, meta = await asyncio.gather(
        fetch_window(client.fetch_products, cursor, direction, page_size, reshape_product, extra_variables=variables),
        client.fetch_collections_and_tags(),
    )

    collection_options = [SelectOption(label=c["title"], value=c["id"]) for c in meta["collections"]]
    tag_options = [SelectOption(label=tag, value=tag) for tag in meta["tags"]]

    collection_title = resolve_collection_title(collection_options, filters.collection)
    products = filter_by_collection(page.records, collection_title) if filters.collection else page.records
    if filters.collection and not collection_title:
        logger.warning(f"Unknown collection filter {filters.collection!r}, nothing matches")
        products = []

    logger.info(f"Product page: {len(page.records)} loaded, {len(products)} shown (filters={filters.model_dump()})")

    return ProductPageResponse(
        products=products,
        page_info=page.window,
        has_next=page.has_next,
        has_prev=page.has_prev,
        next_cursor=page.next_cursor,
        prev_cursor=page.prev_cursor,
        shop=shop,
        filters=filters,
        collection_options=collection_options,
        tag_options=tag_options,
    )
