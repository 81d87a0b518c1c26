from sqlalchemy import Column, Integer, String, Text, Float, Boolean, DateTime, ForeignKey, Table
from sqlalchemy.orm import relationship
from datetime import datetime
from products_manager.models.user import Base

# Term associations; rows go away with either side
product_categories = Table(
    "product_categories",
    Base.metadata,
    Column("product_id", Integer, ForeignKey("products.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", Integer, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
)


class Product(Base):
    __tablename__ = "products"
    # Ids are never handed out twice, even after the newest row is deleted
    __table_args__ = {"sqlite_autoincrement": True}
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(Text, nullable=False, default="")
    description = Column(Text, default="")
    price = Column(Float, default=0.0, nullable=False)
    sale_price = Column(Float, default=0.0, nullable=False)
    is_on_sale = Column(Boolean, default=False, nullable=False)
    youtube_video = Column(Text, default="")
    featured_image_id = Column(Integer, ForeignKey("media.id", ondelete="SET NULL"), nullable=True)
    status = Column(String(20), default="publish", nullable=False)
    date = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    featured_image = relationship("Media", lazy="joined")
    categories = relationship("Category", secondary=product_categories, back_populates="products")
