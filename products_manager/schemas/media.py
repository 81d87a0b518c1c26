from pydantic import BaseModel


class MediaOut(BaseModel):
    id: int
    url: str
    thumbnail_url: str
