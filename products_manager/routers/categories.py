from typing import List

from fastapi import APIRouter, Depends

from products_manager.routers.products import get_store
from products_manager.schemas.category import CategoryOut
from products_manager.services.product_store import ProductStore
from products_manager.utils.security import require_edit_capability

router = APIRouter(dependencies=[Depends(require_edit_capability)])


@router.get("/product-categories", response_model=List[CategoryOut])
def list_categories(store: ProductStore = Depends(get_store)):
    """Every category, including ones with no products, with a live product count."""
    return [
        CategoryOut(id=c.id, name=c.name, slug=c.slug, count=count)
        for c, count in store.list_categories()
    ]
