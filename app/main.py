import logging
from contextlib import asynccontextmanager

from app.core.config import settings

uvicorn_logger = logging.getLogger("uvicorn")

app_logger = logging.getLogger("app")
app_logger.setLevel(settings.LOG_LEVEL)
app_logger.handlers = uvicorn_logger.handlers
# Without uvicorn handlers (tests, scripts) fall back to the root logger
app_logger.propagate = not uvicorn_logger.handlers

from fastapi import FastAPI, HTTPException, status, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from app.core.admin_client import admin_client
from app.core.exceptions import AdminAPIError
from app.api.v1.products import router as products_router
from app.api.v1.inventory import router as inventory_router
from app.web.routes import router as web_router, templates

logger = logging.getLogger(__name__)
logger.info("Application startup - logging configured")


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    logger.info("Shutting down, closing admin API client")
    await admin_client.close()


app = FastAPI(
    title=settings.APP_NAME,
    description="Embedded admin dashboard for store products and inventory",
    version="1.0.0",
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)

app.add_middleware(SessionMiddleware, secret_key=settings.SESSION_SECRET_KEY)

app.include_router(web_router)
app.include_router(products_router)
app.include_router(inventory_router)


@app.get("/health")
async def health_check():
    return {"status": "ok", "shop": settings.SHOP_DOMAIN}


def _is_api_request(request: Request) -> bool:
    accept = request.headers.get("accept", "")
    return request.url.path.startswith("/api/") or "application/json" in accept


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": exc.errors()},
    )


@app.exception_handler(AdminAPIError)
async def admin_api_exception_handler(request: Request, exc: AdminAPIError):
    # The whole page fails; nothing partial is rendered.
    logger.error(f"Admin API failure on {request.url.path}: {str(exc)}")
    if _is_api_request(request):
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": str(exc)},
        )
    return templates.TemplateResponse(
        request,
        "error.html",
        {"message": str(exc)},
        status_code=status.HTTP_502_BAD_GATEWAY,
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    if not _is_api_request(request):
        return templates.TemplateResponse(
            request,
            "error.html",
            {"message": exc.detail},
            status_code=exc.status_code,
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )
