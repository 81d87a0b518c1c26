"""Typed client for the jeec/v1 REST namespace used by the admin app."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from products_manager.admin.config import AdminConfig
from products_manager.schemas.category import CategoryOut
from products_manager.schemas.product import DeleteResult, ProductOut

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Any failed request: transport failure or a non-2xx response."""

    def __init__(self, message: str, *, status_code: int | None = None, code: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class ProductsApi:
    """Async wrapper over the products and categories endpoints.

    Every request carries the bearer token from :class:`AdminConfig`. Pass
    ``client`` to reuse an existing ``httpx.AsyncClient`` (tests point one at
    the ASGI app).
    """

    def __init__(self, config: AdminConfig, *, client: Optional[httpx.AsyncClient] = None) -> None:
        self._config = config
        self._client = client or httpx.AsyncClient()
        self._owns_client = client is None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "ProductsApi":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        headers = {"Authorization": f"Bearer {self._config.auth_token}"}
        try:
            response = await self._client.request(method, self._config.endpoint(path), headers=headers, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            code = None
            message = f"Request failed with status {exc.response.status_code}"
            try:
                body = exc.response.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                code = body.get("code")
                message = body.get("message") or message
            logger.warning("%s %s -> %s %s", method, path, exc.response.status_code, code)
            raise ApiError(message, status_code=exc.response.status_code, code=code) from exc
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ApiError(str(exc) or exc.__class__.__name__) from exc
        return response.json()

    # Products

    async def get_products(self, per_page: int = 100) -> list[ProductOut]:
        data = await self._request("GET", "products", params={"per_page": per_page})
        return [ProductOut.model_validate(item) for item in data]

    async def get_product(self, product_id: int) -> ProductOut:
        data = await self._request("GET", f"products/{product_id}")
        return ProductOut.model_validate(data)

    async def create_product(self, payload: dict) -> ProductOut:
        data = await self._request("POST", "products", json=payload)
        return ProductOut.model_validate(data)

    async def update_product(self, product_id: int, payload: dict) -> ProductOut:
        """Partial update: only keys present in ``payload`` change."""
        data = await self._request("POST", f"products/{product_id}", json=payload)
        return ProductOut.model_validate(data)

    async def delete_product(self, product_id: int) -> DeleteResult:
        data = await self._request("DELETE", f"products/{product_id}")
        return DeleteResult.model_validate(data)

    # Categories

    async def get_categories(self) -> list[CategoryOut]:
        data = await self._request("GET", "product-categories")
        return [CategoryOut.model_validate(item) for item in data]
