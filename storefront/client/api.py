import logging
from typing import Any, Dict, List, Optional

import httpx

from storefront.client.errors import (
    ClientError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    ServerError,
    UnauthenticatedError,
)
from storefront.schemas.auth import UserResponse
from storefront.schemas.order import OrderItemResponse, OrderResponse
from storefront.schemas.product import CategoryResponse, ProductResponse

logger = logging.getLogger(__name__)


class StorefrontClient:
    """HTTP client for the storefront REST API."""

    def __init__(
        self,
        base_url: str,
        access_token: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.timeout = timeout
        self.transport = transport
        self.client = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self.client is None:
            self.client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport
            )
        return self.client

    def _headers(self) -> Dict[str, str]:
        if self.access_token:
            return {"Authorization": f"Bearer {self.access_token}"}
        return {}

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        client = await self._get_client()
        try:
            response = await client.request(method, path, headers=self._headers(), **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"{method} {path} timed out: {str(e)}")
            raise ServerError("The request timed out")
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {str(e)}")
            raise ServerError("Could not reach the store")

        if response.is_success:
            return response.json()

        raise self._error_for(response)

    @staticmethod
    def _error_for(response: httpx.Response) -> ClientError:
        try:
            detail = response.json().get("detail")
        except ValueError:
            detail = None

        code = response.status_code
        if code == 401:
            return UnauthenticatedError(detail or "You must be logged in", code)
        if code == 403:
            return ForbiddenError("Forbidden", code)
        if code == 404:
            return NotFoundError(detail or "Not found", code)
        if code in (400, 422):
            return InvalidInputError(detail or "Invalid request", code)

        logger.error(f"Storefront API returned {code}: {response.text}")
        return ServerError("Something went wrong. Please try again.", code)

    async def list_products(
        self,
        category_id: Optional[int] = None,
        search: Optional[str] = None
    ) -> List[ProductResponse]:
        params = {}
        if category_id is not None:
            params["categoryId"] = category_id
        if search:
            params["search"] = search

        data = await self._request("GET", "/api/products", params=params)
        return [ProductResponse.model_validate(item) for item in data]

    async def get_product(self, product_id: int) -> ProductResponse:
        data = await self._request("GET", f"/api/products/{product_id}")
        return ProductResponse.model_validate(data)

    async def list_categories(self) -> List[CategoryResponse]:
        data = await self._request("GET", "/api/categories")
        return [CategoryResponse.model_validate(item) for item in data]

    async def get_category(self, category_id: int) -> CategoryResponse:
        data = await self._request("GET", f"/api/categories/{category_id}")
        return CategoryResponse.model_validate(data)

    async def create_order(self, address: str, items: List[Dict[str, int]]) -> OrderResponse:
        """
        POST /api/orders
        {"address": "12 Main St", "items": [{"productId": 1, "quantity": 2}]}
        """
        logger.info(f"Submitting order with {len(items)} line(s)")
        data = await self._request("POST", "/api/orders", json={"address": address, "items": items})
        return OrderResponse.model_validate(data)

    async def list_orders(self) -> List[OrderResponse]:
        data = await self._request("GET", "/api/orders")
        return [OrderResponse.model_validate(item) for item in data]

    async def get_order(self, order_id: int) -> OrderResponse:
        data = await self._request("GET", f"/api/orders/{order_id}")
        return OrderResponse.model_validate(data)

    async def get_order_items(self, order_id: int) -> List[OrderItemResponse]:
        data = await self._request("GET", f"/api/orders/{order_id}/items")
        return [OrderItemResponse.model_validate(item) for item in data]

    async def get_current_user(self) -> Optional[UserResponse]:
        data = await self._request("GET", "/api/user")
        if data is None:
            return None
        return UserResponse.model_validate(data)

    async def close(self):
        """Close HTTP client."""
        if self.client:
            await self.client.aclose()
            self.client = None
