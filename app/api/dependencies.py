from dataclasses import dataclass

from fastapi import Depends, HTTPException, status

from app.core.admin_client import AdminAPIClient, admin_client
from app.core.config import settings


@dataclass
class AdminSession:
    shop: str
    access_token: str


async def get_admin_session() -> AdminSession:
    """Resolve the shop this request acts for.

    The access token is issued by the platform at install time and supplied
    through configuration.
    """
    if not settings.SHOP_DOMAIN or not settings.ADMIN_API_ACCESS_TOKEN:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Store is not connected. Missing shop domain or access token.",
        )
    return AdminSession(shop=settings.SHOP_DOMAIN, access_token=settings.ADMIN_API_ACCESS_TOKEN)


async def get_admin_client(session: AdminSession = Depends(get_admin_session)) -> AdminAPIClient:
    return admin_client
