"""Persistence for products, their categories and featured images.

Routers never touch the session directly for product data; everything goes
through :class:`ProductStore`, which owns the query shapes and the rules the
REST layer relies on (unknown term or media ids are ignored, categories are
replaced as a whole, counts are derived at read time).
"""
import logging
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from products_manager.models.product import Product, product_categories
from products_manager.models.category import Category
from products_manager.models.media import Media
from products_manager.schemas.product import ProductListParams

logger = logging.getLogger(__name__)

PUBLISH = "publish"


def escape_like(text: str) -> str:
    """Make user text match literally inside a LIKE pattern."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class StoreError(Exception):
    """Raised when the database refuses a write."""


class ProductStore:
    def __init__(self, db: Session):
        self.db = db

    # -- reads ---------------------------------------------------------------

    def list(self, params: ProductListParams) -> Tuple[List[Product], int]:
        query = self.db.query(Product).filter(Product.status == PUBLISH)
        if params.search:
            pattern = f"%{escape_like(params.search)}%"
            query = query.filter(
                or_(Product.title.ilike(pattern, escape="\\"), Product.description.ilike(pattern, escape="\\"))
            )
        total = query.count()
        products = (
            query.order_by(Product.date.desc(), Product.id.desc())
            .offset((params.page - 1) * params.per_page)
            .limit(params.per_page)
            .all()
        )
        return products, total

    def get(self, product_id: int) -> Optional[Product]:
        return self.db.get(Product, product_id)

    def category_ids(self, product: Product) -> List[int]:
        return [c.id for c in product.categories]

    def thumbnail_url(self, product: Product) -> str:
        if not product.featured_image_id or product.featured_image is None:
            return ""
        return product.featured_image.display_url

    def list_categories(self) -> List[Tuple[Category, int]]:
        rows = (
            self.db.query(Category, func.count(product_categories.c.product_id))
            .outerjoin(product_categories, product_categories.c.category_id == Category.id)
            .group_by(Category.id)
            .order_by(Category.name.asc(), Category.id.asc())
            .all()
        )
        return [(category, int(count)) for category, count in rows]

    # -- writes --------------------------------------------------------------

    def create(self, fields: dict) -> Product:
        product = Product(
            title=fields.get("title", ""),
            description=fields.get("description", ""),
            price=0.0,
            sale_price=0.0,
            is_on_sale=False,
            youtube_video="",
            status=PUBLISH,
            date=datetime.utcnow().replace(microsecond=0),
        )
        self.db.add(product)
        self.db.flush()
        self._apply(product, fields)
        self._commit()
        self.db.refresh(product)
        logger.info("Created product %s", product.id)
        return product

    def update(self, product: Product, fields: dict) -> Product:
        if "title" in fields:
            product.title = fields["title"]
        if "description" in fields:
            product.description = fields["description"]
        self._apply(product, fields)
        self._commit()
        self.db.refresh(product)
        logger.info("Updated product %s fields=%s", product.id, sorted(fields))
        return product

    def delete(self, product: Product) -> None:
        product_id = product.id
        try:
            self.db.delete(product)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to delete product %s: %s", product_id, e)
            raise StoreError(str(e)) from e
        logger.info("Deleted product %s", product_id)

    def set_thumbnail(self, product: Product, media_id: int) -> bool:
        media = self.db.get(Media, media_id)
        if media is None:
            return False
        product.featured_image_id = media.id
        product.featured_image = media
        return True

    def clear_thumbnail(self, product: Product) -> None:
        product.featured_image_id = None
        product.featured_image = None

    def set_categories(self, product: Product, ids: Iterable[int]) -> None:
        wanted = list(dict.fromkeys(int(i) for i in ids))
        found = {c.id: c for c in self.db.query(Category).filter(Category.id.in_(wanted)).all()} if wanted else {}
        product.categories = [found[i] for i in wanted if i in found]

    def _apply(self, product: Product, fields: dict) -> None:
        if "price" in fields:
            product.price = float(fields["price"])
        if "sale_price" in fields:
            product.sale_price = float(fields["sale_price"])
        if "is_on_sale" in fields:
            product.is_on_sale = bool(fields["is_on_sale"])
        if "youtube_video" in fields:
            product.youtube_video = fields["youtube_video"]
        if "featured_image_id" in fields:
            image_id = int(fields["featured_image_id"])
            if image_id:
                self.set_thumbnail(product, image_id)
            else:
                self.clear_thumbnail(product)
        if "categories" in fields:
            self.set_categories(product, fields["categories"])

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Product write failed: %s", e)
            raise StoreError(str(e)) from e
