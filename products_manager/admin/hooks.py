"""State holders for the product and category lists."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Literal

from products_manager.admin.api import ApiError, ProductsApi
from products_manager.schemas.category import CategoryOut
from products_manager.schemas.product import ProductOut

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notice:
    status: Literal["success", "error", "warning", "info"]
    message: str


SetNotice = Callable[[Notice], None]


class ProductListHook:
    """Holds the product list for the lifetime of a list view."""

    def __init__(self, api: ProductsApi, set_notice: SetNotice, per_page: int = 100) -> None:
        self._api = api
        self._set_notice = set_notice
        self.per_page = per_page
        self.products: list[ProductOut] = []
        self.loading = True

    async def mount(self) -> None:
        await self.refresh()

    async def refresh(self) -> None:
        self.loading = True
        try:
            self.products = await self._api.get_products(self.per_page)
        except ApiError:
            self._set_notice(Notice("error", "Failed to load products."))
        finally:
            self.loading = False

    async def remove_product(self, product_id: int) -> None:
        # Local state changes only after the server confirms; errors go to the caller
        await self._api.delete_product(product_id)
        self.products = [p for p in self.products if p.id != product_id]


class CategoryListHook:
    """Loads categories once; they are optional, so failures leave the list empty."""

    def __init__(self, api: ProductsApi) -> None:
        self._api = api
        self.categories: list[CategoryOut] = []
        self._loaded = False

    async def mount(self) -> list[CategoryOut]:
        if self._loaded:
            return self.categories
        self._loaded = True
        try:
            self.categories = await self._api.get_categories()
        except ApiError as exc:
            logger.debug("Categories unavailable: %s", exc)
            self.categories = []
        return self.categories
