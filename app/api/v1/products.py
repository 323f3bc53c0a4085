from fastapi import APIRouter, Depends, Request
from typing import Optional
import logging

from app.api.dependencies import AdminSession, get_admin_client, get_admin_session
from app.core.admin_client import AdminAPIClient
from app.core.config import settings
from app.schemas.product import DashboardMetrics, ProductPageResponse
from app.services.dashboard import get_dashboard_metrics
from app.services.filters import parse_filter_state
from app.services.product import get_product_page

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["products"])


@router.get("/products", response_model=ProductPageResponse)
async def list_products(
    request: Request,
    cursor: Optional[str] = None,
    direction: str = "next",
    session: AdminSession = Depends(get_admin_session),
    client: AdminAPIClient = Depends(get_admin_client),
):
    """One window of products, filtered by search/status/tag remotely and by collection locally."""
    filters = parse_filter_state(request.query_params)
    return await get_product_page(
        client,
        shop=session.shop,
        filters=filters,
        cursor=cursor or None,
        direction=direction,
        page_size=settings.PRODUCTS_PAGE_SIZE,
    )


@router.get("/dashboard", response_model=DashboardMetrics)
async def dashboard_metrics(client: AdminAPIClient = Depends(get_admin_client)):
    return await get_dashboard_metrics(client)
