from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class ProductPayload(BaseModel):
    """Body accepted by create and update. Absent or null fields are left untouched."""
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    sale_price: Optional[float] = Field(None, ge=0)
    is_on_sale: Optional[bool] = None
    youtube_video: Optional[str] = None
    featured_image_id: Optional[int] = Field(None, ge=0)
    categories: Optional[List[int]] = None

    def present_fields(self) -> dict:
        return self.model_dump(exclude_none=True)


class ProductOut(BaseModel):
    id: int
    title: str
    description: str = ""
    price: float = 0.0
    sale_price: float = 0.0
    is_on_sale: bool = False
    youtube_video: str = ""
    featured_image_id: int = 0
    featured_image_url: str = ""
    categories: List[int] = []
    date: str
    status: str

    model_config = ConfigDict(from_attributes=True)


class ProductListParams(BaseModel):
    """Query options for the products collection."""
    per_page: int = Field(20, ge=1)
    page: int = Field(1, ge=1)
    search: str = ""


class DeleteResult(BaseModel):
    deleted: bool
    id: int
