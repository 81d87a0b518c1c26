"""View components of the Products Manager admin app.

Each view keeps its own UI state, exposes the user actions as coroutines and
renders itself to HTML. Network failures never escape an action: they are
turned into a :class:`Notice` through the ``set_notice`` callback.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from products_manager.admin.api import ApiError, ProductsApi
from products_manager.admin.hooks import CategoryListHook, Notice, ProductListHook, SetNotice
from products_manager.admin.templating import render
from products_manager.schemas.category import CategoryOut


@dataclass(frozen=True)
class MediaSelection:
    id: int
    url: str


# Opens the host media library; resolves to None when the user cancels
MediaSelector = Callable[[], Awaitable[Optional[MediaSelection]]]


async def no_media_library() -> Optional[MediaSelection]:
    return None


class DeleteConfirmation:
    def __init__(self, on_confirm: Callable[[], Awaitable[None]], on_cancel: Callable[[], None]) -> None:
        self.on_confirm = on_confirm
        self.on_cancel = on_cancel
        self.is_deleting = False

    async def confirm(self) -> None:
        await self.on_confirm()

    def cancel(self) -> None:
        if self.is_deleting:
            return
        self.on_cancel()

    def render(self) -> str:
        return render("admin/delete_confirm.html", is_deleting=self.is_deleting)


class CategorySelector:
    def __init__(self, categories: list[CategoryOut], selected: list[int], on_change: Callable[[list[int]], None]) -> None:
        self.categories = categories
        self.selected = selected
        self.on_change = on_change

    def toggle(self, category_id: int, checked: bool) -> None:
        if checked:
            ids = self.selected if category_id in self.selected else [*self.selected, category_id]
        else:
            ids = [i for i in self.selected if i != category_id]
        self.selected = ids
        self.on_change(ids)

    def render(self) -> str:
        return render("admin/category_selector.html", categories=self.categories, selected=self.selected)


class ImagePicker:
    def __init__(
        self,
        media_selector: MediaSelector,
        on_select: Callable[[int, str], None],
        on_remove: Callable[[], None],
        image_url: str = "",
    ) -> None:
        self.media_selector = media_selector
        self.on_select = on_select
        self.on_remove = on_remove
        self.image_url = image_url

    async def open(self) -> Optional[MediaSelection]:
        selection = await self.media_selector()
        if selection is None:
            return None
        self.image_url = selection.url
        self.on_select(selection.id, selection.url)
        return selection

    def remove(self) -> None:
        self.image_url = ""
        self.on_remove()

    def render(self) -> str:
        return render("admin/image_picker.html", image_url=self.image_url)


class ProductListView:
    def __init__(
        self,
        api: ProductsApi,
        on_add: Callable[[], None],
        on_edit: Callable[[int], None],
        set_notice: SetNotice,
    ) -> None:
        self.on_add = on_add
        self.on_edit = on_edit
        self.set_notice = set_notice
        self.hook = ProductListHook(api, set_notice)
        self.deleting_id: Optional[int] = None
        self.confirmation: Optional[DeleteConfirmation] = None

    @property
    def loading(self) -> bool:
        return self.hook.loading

    @property
    def products(self):
        return self.hook.products

    async def mount(self) -> None:
        await self.hook.mount()

    def add(self) -> None:
        self.on_add()

    def edit(self, product_id: int) -> None:
        self.on_edit(product_id)

    def request_delete(self, product_id: int) -> DeleteConfirmation:
        self.deleting_id = product_id
        self.confirmation = DeleteConfirmation(self.confirm_delete, self.cancel_delete)
        return self.confirmation

    def cancel_delete(self) -> None:
        self.deleting_id = None
        self.confirmation = None

    async def confirm_delete(self) -> None:
        dialog = self.confirmation
        if self.deleting_id is None or dialog is None or dialog.is_deleting:
            return
        dialog.is_deleting = True
        try:
            await self.hook.remove_product(self.deleting_id)
            self.set_notice(Notice("success", "Product deleted."))
        except ApiError:
            self.set_notice(Notice("error", "Failed to delete product."))
        finally:
            dialog.is_deleting = False
            self.cancel_delete()

    def render(self) -> str:
        return render(
            "admin/product_list.html",
            loading=self.loading,
            products=self.products,
            confirmation=self.confirmation.render() if self.confirmation else "",
        )


class ProductFormView:
    """Add New / Edit screen. ``product_id`` selects edit mode."""

    def __init__(
        self,
        api: ProductsApi,
        on_cancel: Callable[[], None],
        on_saved: Callable[[str], None],
        set_notice: SetNotice,
        product_id: Optional[int] = None,
        media_selector: MediaSelector = no_media_library,
    ) -> None:
        self.api = api
        self.on_cancel = on_cancel
        self.on_saved = on_saved
        self.set_notice = set_notice
        self.product_id = product_id
        self.categories_hook = CategoryListHook(api)

        self.title = ""
        self.description = ""
        # Numeric inputs hold raw text; blank means zero on submit
        self.price = ""
        self.sale_price = ""
        self.is_on_sale = False
        self.youtube_video = ""
        self.featured_image_id = 0
        self.featured_image_url = ""
        self.categories: list[int] = []

        self.loading = bool(product_id)
        self.saving = False
        self.image_picker = ImagePicker(media_selector, self.select_image, self.remove_image)

    @property
    def is_editing(self) -> bool:
        return bool(self.product_id)

    @property
    def all_categories(self) -> list[CategoryOut]:
        return self.categories_hook.categories

    @property
    def category_selector(self) -> CategorySelector:
        return CategorySelector(self.all_categories, self.categories, self.set_categories)

    async def mount(self) -> None:
        await self.categories_hook.mount()
        if not self.product_id:
            return
        self.loading = True
        try:
            product = await self.api.get_product(self.product_id)
        except ApiError:
            self.set_notice(Notice("error", "Failed to load product."))
        else:
            self.title = product.title
            self.description = product.description
            self.price = _amount_text(product.price)
            self.sale_price = _amount_text(product.sale_price)
            self.is_on_sale = product.is_on_sale
            self.youtube_video = product.youtube_video
            self.featured_image_id = product.featured_image_id
            self.featured_image_url = product.featured_image_url
            self.image_picker.image_url = product.featured_image_url
            self.categories = list(product.categories)
        finally:
            self.loading = False

    def select_image(self, media_id: int, url: str) -> None:
        self.featured_image_id = media_id
        self.featured_image_url = url

    def remove_image(self) -> None:
        self.featured_image_id = 0
        self.featured_image_url = ""

    def set_categories(self, ids: list[int]) -> None:
        self.categories = ids

    def toggle_category(self, category_id: int, checked: bool) -> None:
        self.category_selector.toggle(category_id, checked)

    def cancel(self) -> None:
        self.on_cancel()

    def build_payload(self) -> dict:
        return {
            "title": self.title.strip(),
            "description": self.description,
            "price": _parse_amount(self.price, "Price"),
            "sale_price": _parse_amount(self.sale_price, "Sale price"),
            "is_on_sale": self.is_on_sale,
            "youtube_video": self.youtube_video,
            "featured_image_id": self.featured_image_id,
            "categories": list(self.categories),
        }

    async def submit(self) -> bool:
        """Validate and save. Returns True when the server accepted the product."""
        if self.saving:
            return False
        if not self.title.strip():
            self.set_notice(Notice("error", "Title is required."))
            return False
        try:
            payload = self.build_payload()
        except InvalidAmount as exc:
            self.set_notice(Notice("error", str(exc)))
            return False

        self.saving = True
        try:
            if self.is_editing:
                await self.api.update_product(self.product_id, payload)
            else:
                await self.api.create_product(payload)
        except ApiError:
            self.set_notice(Notice("error", "Failed to save product."))
            return False
        finally:
            self.saving = False

        self.on_saved("Product updated successfully." if self.is_editing else "Product created successfully.")
        return True

    def render(self) -> str:
        self.image_picker.image_url = self.featured_image_url
        return render(
            "admin/product_form.html",
            loading=self.loading,
            is_editing=self.is_editing,
            saving=self.saving,
            title=self.title,
            description=self.description,
            price=self.price,
            sale_price=self.sale_price,
            is_on_sale=self.is_on_sale,
            youtube_video=self.youtube_video,
            image_picker=self.image_picker.render(),
            category_selector=self.category_selector.render(),
        )


class InvalidAmount(ValueError):
    pass


def _parse_amount(text, label: str) -> float:
    raw = str(text).strip() if text is not None else ""
    if not raw:
        return 0.0
    try:
        value = float(raw)
    except ValueError:
        raise InvalidAmount(f"{label} must be a number.")
    if value != value or value < 0:
        raise InvalidAmount(f"{label} must be a non-negative number.")
    return value


def _amount_text(value: float) -> str:
    if not value:
        return ""
    return f"{value:g}" if float(value).is_integer() else str(value)
