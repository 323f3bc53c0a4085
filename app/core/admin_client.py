import logging
import httpx
from typing import Any, Dict, List, Optional

from app.core.config import settings
from app.core.exceptions import AdminAPIError
from app.core.queries import PRODUCTS_QUERY, COLLECTIONS_AND_TAGS_QUERY

logger = logging.getLogger(__name__)


def _rest_id(value: Any) -> Any:
    text = str(value)
    return int(text) if text.isdigit() else value


class AdminAPIClient:
    def __init__(
        self,
        shop_domain: str = None,
        access_token: str = None,
        api_version: str = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.shop_domain = shop_domain or settings.SHOP_DOMAIN
        self.access_token = access_token or settings.ADMIN_API_ACCESS_TOKEN
        self.api_version = api_version or settings.ADMIN_API_VERSION
        self.transport = transport
        self.client = None

    @property
    def base_url(self) -> str:
        return f"https://{self.shop_domain}/admin/api/{self.api_version}"

    @property
    def headers(self) -> dict:
        return {
            "X-Shopify-Access-Token": self.access_token,
            "Content-Type": "application/json",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        if self.client is None:
            self.client = httpx.AsyncClient(timeout=settings.ADMIN_API_TIMEOUT, transport=self.transport)
        return self.client

    async def graphql(self, query: str, variables: Optional[dict] = None) -> dict:
        try:
            client = await self._get_client()
            logger.debug(f"GraphQL request to {self.shop_domain} with variables: {variables}")
            response = await client.post(
                f"{self.base_url}/graphql.json",
                headers=self.headers,
                json={"query": query, "variables": variables or {}}
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"GraphQL query failed with status {e.response.status_code}: {str(e)}")
            raise AdminAPIError(f"GraphQL query failed: {e.response.status_code}", e.response.status_code)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"GraphQL query failed: {str(e)}")
            raise AdminAPIError(f"GraphQL query failed: {str(e)}")

        if not isinstance(payload, dict):
            raise AdminAPIError("GraphQL response is not an object")
        if payload.get("errors"):
            messages = "; ".join(str(err.get("message", err)) for err in payload["errors"])
            logger.error(f"GraphQL query returned errors: {messages}")
            raise AdminAPIError(f"GraphQL errors: {messages}")
        data = payload.get("data")
        if not isinstance(data, dict):
            raise AdminAPIError("GraphQL response has no data")
        return data

    async def fetch_products(self, variables: dict) -> dict:
        """
        Fetch one window of the product connection.

        Returns the raw connection: {"pageInfo": {...}, "edges": [{"cursor", "node"}]}.
        """
        data = await self.graphql(PRODUCTS_QUERY, variables)
        products = data.get("products")
        if not isinstance(products, dict) or "edges" not in products:
            raise AdminAPIError("Products response is malformed")
        logger.info(f"Fetched {len(products['edges'])} products (query={variables.get('query')!r})")
        return products

    async def fetch_collections_and_tags(self) -> dict:
        data = await self.graphql(COLLECTIONS_AND_TAGS_QUERY)
        collections = [
            {"id": edge["node"]["id"], "title": edge["node"]["title"]}
            for edge in (data.get("collections") or {}).get("edges", [])
        ]
        tags = [edge["node"] for edge in (data.get("productTags") or {}).get("edges", [])]
        return {"collections": collections, "tags": tags}

    async def get_inventory_levels(self, inventory_item_ids: List[str]) -> List[Dict[str, Any]]:
        try:
            client = await self._get_client()
            logger.info(f"Fetching inventory levels for {len(inventory_item_ids)} items")
            response = await client.get(
                f"{self.base_url}/inventory_levels.json",
                headers=self.headers,
                params={"inventory_item_ids": ",".join(inventory_item_ids)}
            )
            response.raise_for_status()
            data = response.json()
            return [
                {
                    "inventoryItemId": str(level["inventory_item_id"]),
                    "available": level.get("available") or 0,
                    "committed": level.get("committed") or 0,
                    "locationId": str(level.get("location_id") or ""),
                }
                for level in data.get("inventory_levels", [])
            ]
        except httpx.HTTPStatusError as e:
            logger.error(f"Inventory levels lookup failed with status {e.response.status_code}: {str(e)}")
            raise AdminAPIError(f"Failed to fetch inventory levels: {e.response.status_code}", e.response.status_code)
        except (httpx.HTTPError, ValueError, KeyError, AttributeError) as e:
            logger.error(f"Inventory levels lookup failed: {str(e)}")
            raise AdminAPIError(f"Failed to fetch inventory levels: {str(e)}")

    async def set_inventory_level(self, inventory_item_id: str, location_id: str, available: int) -> dict:
        payload = {
            "inventory_item_id": _rest_id(inventory_item_id),
            "location_id": _rest_id(location_id),
            "available": int(available),
        }
        try:
            client = await self._get_client()
            logger.debug(f"Set inventory level payload: {payload}")
            response = await client.post(
                f"{self.base_url}/inventory_levels/set.json",
                headers=self.headers,
                json=payload
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Set inventory level failed with status {e.response.status_code}: {e.response.text}")
            raise AdminAPIError(
                f"Failed to set inventory level: {e.response.status_code} - {e.response.text}",
                e.response.status_code
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Set inventory level failed: {str(e)}")
            raise AdminAPIError(f"Failed to set inventory level: {str(e)}")

        logger.info(f"Inventory level set for item {inventory_item_id} at {location_id}: {available}")
        # The write has been applied once the status is 2xx, whatever the body holds
        try:
            return response.json()
        except ValueError:
            logger.warning(f"Inventory level set for item {inventory_item_id} returned a non-JSON body")
            return {}

    async def close(self):
        if self.client:
            await self.client.aclose()
            self.client = None


admin_client = AdminAPIClient()
