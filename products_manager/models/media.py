from sqlalchemy import Column, Integer, String, DateTime
from datetime import datetime
from products_manager.models.user import Base


class Media(Base):
    __tablename__ = "media"
    id = Column(Integer, primary_key=True, index=True)
    file_url = Column(String(255), nullable=False)
    # Resized rendition when one exists; file_url otherwise
    thumbnail_url = Column(String(255), nullable=True)
    mime_type = Column(String(100))
    created_at = Column(DateTime, default=datetime.utcnow)

    @property
    def display_url(self) -> str:
        return self.thumbnail_url or self.file_url or ""
