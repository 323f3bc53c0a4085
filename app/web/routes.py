import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from app.api.dependencies import AdminSession, get_admin_client, get_admin_session
from app.core.admin_client import AdminAPIClient
from app.core.config import settings
from app.core.i18n import translate
from app.services.dashboard import get_dashboard_metrics
from app.services.filters import (
    SORT_OPTIONS,
    STATUS_OPTIONS,
    collection_choices,
    filter_by_collection,
    parse_filter_state,
)
from app.services.inventory import (
    apply_inventory_updates,
    build_update_items,
    load_inventory_page,
    parse_inventory_form,
    parse_submitted_items,
)
from app.services.pagination import NEXT, PREV, navigation_url
from app.services.product import get_product_page
from app.services.reshape import display_value, iso_date, short_id, status_label, status_tone, strip_html

logger = logging.getLogger(__name__)

router = APIRouter(tags=["web"])
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))
templates.env.globals["t"] = translate
templates.env.globals["app_name"] = settings.APP_NAME
templates.env.globals["toast_duration_ms"] = settings.TOAST_DURATION_SECONDS * 1000
templates.env.filters["display"] = display_value
templates.env.filters["strip_html"] = strip_html
templates.env.filters["status_label"] = status_label
templates.env.filters["status_tone"] = status_tone
templates.env.filters["iso_date"] = iso_date
templates.env.filters["short_id"] = short_id

FLASH_KEY = "inventory_flash"


def _pagination_links(request: Request, page) -> dict:
    params = dict(request.query_params)
    return {
        "prev_url": navigation_url(request.url.path, params, page.prev_cursor, PREV) if page.has_prev else None,
        "next_url": navigation_url(request.url.path, params, page.next_cursor, NEXT) if page.has_next else None,
    }


@router.get("/", response_class=HTMLResponse)
async def root(request: Request):
    return RedirectResponse(url="/app")


@router.get("/app", response_class=HTMLResponse)
async def dashboard(request: Request, client: AdminAPIClient = Depends(get_admin_client)):
    metrics = await get_dashboard_metrics(client)
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "metrics": metrics,
        }
    )


async def _render_products(
    request: Request,
    session: AdminSession,
    client: AdminAPIClient,
    template_title: str,
    fixed_status: Optional[str] = None,
):
    params = dict(request.query_params)
    if fixed_status:
        params["status"] = fixed_status
    filters = parse_filter_state(params)

    page = await get_product_page(
        client,
        shop=session.shop,
        filters=filters,
        cursor=params.get("cursor") or None,
        direction=params.get("direction"),
        page_size=settings.PRODUCTS_PAGE_SIZE,
    )
    links = _pagination_links(request, page)

    return templates.TemplateResponse(
        request,
        "products.html",
        {
            "page_title": template_title,
            "page": page,
            "filters": filters,
            "fixed_status": fixed_status,
            "status_options": STATUS_OPTIONS,
            "sort_options": SORT_OPTIONS,
            **links,
        }
    )


@router.get("/app/products", response_class=HTMLResponse)
async def products_list(
    request: Request,
    session: AdminSession = Depends(get_admin_session),
    client: AdminAPIClient = Depends(get_admin_client),
):
    return await _render_products(request, session, client, translate("products.title"))


@router.get("/app/draftitems", response_class=HTMLResponse)
async def draft_products_list(
    request: Request,
    session: AdminSession = Depends(get_admin_session),
    client: AdminAPIClient = Depends(get_admin_client),
):
    return await _render_products(request, session, client, translate("drafts.title"), fixed_status="DRAFT")


@router.get("/app/inventory", response_class=HTMLResponse)
async def inventory_list(
    request: Request,
    cursor: Optional[str] = None,
    direction: str = NEXT,
    collection: str = "",
    client: AdminAPIClient = Depends(get_admin_client),
):
    page = await load_inventory_page(client, cursor or None, direction, settings.INVENTORY_PAGE_SIZE)
    flash = request.session.pop(FLASH_KEY, None)

    return templates.TemplateResponse(
        request,
        "inventory.html",
        {
            "rows": filter_by_collection(page.records, collection),
            "collection": collection,
            "collection_choices": collection_choices(page.records),
            "flash": flash,
            **_pagination_links(request, page),
        }
    )


@router.post("/app/inventory")
async def inventory_save(request: Request, client: AdminAPIClient = Depends(get_admin_client)):
    form = await request.form()
    redirect_url = request.url.path + (f"?{request.url.query}" if request.url.query else "")

    try:
        submitted = form.getlist("items[]")
        if submitted:
            items = parse_submitted_items(submitted)
        else:
            rows, edits, selected = parse_inventory_form(form)
            items = build_update_items(rows, edits, selected)
    except ValueError as e:
        logger.warning(f"Rejected inventory submission: {str(e)}")
        request.session[FLASH_KEY] = {"kind": "error", "message": str(e), "failed": []}
        return RedirectResponse(url=redirect_url, status_code=303)

    if not items:
        return RedirectResponse(url=redirect_url, status_code=303)

    result = await apply_inventory_updates(client, items)
    if result.success:
        request.session[FLASH_KEY] = {"kind": "success", "message": translate("inventory.updated"), "failed": []}
    else:
        request.session[FLASH_KEY] = {
            "kind": "error",
            "message": translate("inventory.partial_failure"),
            "failed": [
                {"inventory_item_id": o.inventory_item_id, "error": o.error}
                for o in result.failed
            ],
        }
    return RedirectResponse(url=redirect_url, status_code=303)
