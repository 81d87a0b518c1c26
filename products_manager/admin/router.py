"""Root of the admin app: which screen is showing and the current notice."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Union

from products_manager.admin.api import ProductsApi
from products_manager.admin.hooks import Notice
from products_manager.admin.templating import render
from products_manager.admin.views import MediaSelector, ProductFormView, ProductListView, no_media_library

logger = logging.getLogger(__name__)


class Screen(str, Enum):
    LIST = "list"
    ADD = "add"
    EDIT = "edit"


class InvalidTransition(Exception):
    pass


class AdminApp:
    """Screen state machine.

    ``list -> add``, ``list -> edit(id)``, and ``add|edit -> list`` on cancel or
    save. A save also leaves a success notice behind. Anything else raises
    :class:`InvalidTransition`.
    """

    def __init__(self, api: ProductsApi, media_selector: MediaSelector = no_media_library) -> None:
        self.api = api
        self.media_selector = media_selector
        self.screen = Screen.LIST
        self.editing_id: Optional[int] = None
        self.notice: Optional[Notice] = None
        self.view: Optional[Union[ProductListView, ProductFormView]] = None

    # Notice

    def set_notice(self, notice: Notice) -> None:
        self.notice = notice

    def dismiss_notice(self) -> None:
        self.notice = None

    # Transitions

    def _go(self, screen: Screen, editing_id: Optional[int] = None) -> None:
        logger.debug("screen %s -> %s", self.screen.value, screen.value)
        self.screen = screen
        self.editing_id = editing_id
        self.view = None

    def add(self) -> None:
        if self.screen is not Screen.LIST:
            raise InvalidTransition(f"cannot add from {self.screen.value}")
        self._go(Screen.ADD)

    def edit(self, product_id: int) -> None:
        if self.screen is not Screen.LIST:
            raise InvalidTransition(f"cannot edit from {self.screen.value}")
        self._go(Screen.EDIT, product_id)

    def cancel(self) -> None:
        if self.screen is Screen.LIST:
            raise InvalidTransition("nothing to cancel on the list screen")
        self._go(Screen.LIST)

    def saved(self, message: str) -> None:
        if self.screen is Screen.LIST:
            raise InvalidTransition("nothing was being saved on the list screen")
        self.set_notice(Notice("success", message))
        self._go(Screen.LIST)

    # Views

    def build_view(self) -> Union[ProductListView, ProductFormView]:
        if self.screen is Screen.LIST:
            view = ProductListView(self.api, on_add=self.add, on_edit=self.edit, set_notice=self.set_notice)
        else:
            view = ProductFormView(
                self.api,
                on_cancel=self.cancel,
                on_saved=self.saved,
                set_notice=self.set_notice,
                product_id=self.editing_id if self.screen is Screen.EDIT else None,
                media_selector=self.media_selector,
            )
        self.view = view
        return view

    async def show(self) -> Union[ProductListView, ProductFormView]:
        """Build and mount the view for the current screen."""
        view = self.build_view()
        await view.mount()
        return view

    def render(self) -> str:
        body = self.view.render() if self.view is not None else ""
        return render("admin/app.html", notice=self.notice, body=body)
