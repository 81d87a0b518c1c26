from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from products_manager.models.user import Base
from products_manager.models.product import product_categories


class Category(Base):
    __tablename__ = "categories"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    slug = Column(String(200), unique=True, index=True, nullable=False)

    products = relationship("Product", secondary=product_categories, back_populates="categories")
