import asyncio
import logging
from typing import List

from app.core.config import settings
from app.schemas.product import DashboardMetrics, ProductRecord
from app.services.filters import select_low_stock
from app.services.reshape import reshape_product

logger = logging.getLogger(__name__)


async def _fetch_slice(client, **variables) -> List[ProductRecord]:
    connection = await client.fetch_products(variables)
    return [reshape_product(edge) for edge in connection.get("edges") or []]


async def get_dashboard_metrics(client, slice_size: int = None) -> DashboardMetrics:
    """
    Load the three summary slices concurrently.

    - recent: newest products by creation date
    - low stock: over-fetched candidates under the threshold, smallest N kept
    - drafts: newest draft products

    A failure in any slice fails the whole load.
    """
    slice_size = slice_size or settings.DASHBOARD_SLICE_SIZE
    threshold = settings.LOW_STOCK_THRESHOLD

    recent, low_stock_candidates, drafts = await asyncio.gather(
        _fetch_slice(client, first=slice_size, sortKey="CREATED_AT", reverse=True),
        _fetch_slice(
            client,
            first=slice_size * settings.LOW_STOCK_OVERFETCH_FACTOR,
            query=f"inventory_total:<{threshold}",
        ),
        _fetch_slice(client, first=slice_size, query="status:draft", sortKey="CREATED_AT", reverse=True),
    )
    logger.info(
        f"Dashboard slices loaded: recent={len(recent)}, low_stock_candidates={len(low_stock_candidates)}, drafts={len(drafts)}"
    )

    return DashboardMetrics(
        recent_products=recent,
        low_stock_products=select_low_stock(low_stock_candidates, slice_size, below=threshold),
        recent_drafts=drafts,
    )
