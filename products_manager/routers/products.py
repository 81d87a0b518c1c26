import math
from typing import List

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from products_manager.models.product import Product
from products_manager.models.user import get_db
from products_manager.schemas.product import DeleteResult, ProductListParams, ProductOut, ProductPayload
from products_manager.services.product_store import ProductStore, StoreError
from products_manager.utils.errors import BadRequest, DeleteFailed, NotFound, RestError
from products_manager.utils.sanitize import escape_url, sanitize_html, sanitize_text_field
from products_manager.utils.security import require_edit_capability

# The permission check runs before any route body
router = APIRouter(dependencies=[Depends(require_edit_capability)])

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_store(db: Session = Depends(get_db)) -> ProductStore:
    return ProductStore(db)


def list_params(
    per_page: int = Query(20, ge=1),
    page: int = Query(1, ge=1),
    search: str = Query(""),
) -> ProductListParams:
    return ProductListParams(per_page=per_page, page=page, search=sanitize_text_field(search))


def to_product_out(store: ProductStore, p: Product) -> ProductOut:
    return ProductOut(
        id=p.id,
        title=p.title or "",
        description=p.description or "",
        price=float(p.price or 0),
        sale_price=float(p.sale_price or 0),
        is_on_sale=bool(p.is_on_sale),
        youtube_video=p.youtube_video or "",
        featured_image_id=p.featured_image_id or 0,
        featured_image_url=store.thumbnail_url(p),
        categories=store.category_ids(p),
        date=p.date.strftime(DATE_FORMAT),
        status=p.status,
    )


def clean_fields(payload: ProductPayload) -> dict:
    """Sanitize the fields present in a request body."""
    fields = payload.present_fields()
    if "title" in fields:
        fields["title"] = sanitize_text_field(fields["title"])
        if not fields["title"]:
            raise BadRequest("Product title is required.", code="empty_title")
    if "description" in fields:
        fields["description"] = sanitize_html(fields["description"])
    if "youtube_video" in fields:
        fields["youtube_video"] = escape_url(fields["youtube_video"])
    return fields


def _get_or_404(store: ProductStore, id: int) -> Product:
    product = store.get(id)
    if not product:
        raise NotFound()
    return product


@router.get("/products", response_model=List[ProductOut])
def get_products(
    response: Response,
    params: ProductListParams = Depends(list_params),
    store: ProductStore = Depends(get_store),
):
    products, total = store.list(params)
    response.headers["X-WP-Total"] = str(total)
    response.headers["X-WP-TotalPages"] = str(math.ceil(total / params.per_page))
    return [to_product_out(store, p) for p in products]


@router.post("/products", response_model=ProductOut, status_code=201)
def create_product(payload: ProductPayload, store: ProductStore = Depends(get_store)):
    fields = clean_fields(payload)
    if not fields.get("title"):
        raise BadRequest("Product title is required.", code="empty_title")
    try:
        product = store.create(fields)
    except StoreError:
        raise RestError("Could not create the product.", code="rest_cannot_create", status_code=500)
    return to_product_out(store, product)


@router.get("/products/{id}", response_model=ProductOut)
def get_product(id: int, store: ProductStore = Depends(get_store)):
    return to_product_out(store, _get_or_404(store, id))


@router.api_route("/products/{id}", methods=["POST", "PUT", "PATCH"], response_model=ProductOut)
def update_product(id: int, payload: ProductPayload, store: ProductStore = Depends(get_store)):
    product = _get_or_404(store, id)
    fields = clean_fields(payload)
    try:
        product = store.update(product, fields)
    except StoreError:
        raise RestError("Could not update the product.", code="rest_cannot_update", status_code=500)
    return to_product_out(store, product)


@router.delete("/products/{id}", response_model=DeleteResult)
def delete_product(id: int, store: ProductStore = Depends(get_store)):
    product = _get_or_404(store, id)
    try:
        store.delete(product)
    except StoreError:
        raise DeleteFailed()
    return DeleteResult(deleted=True, id=id)
