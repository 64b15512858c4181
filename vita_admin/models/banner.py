import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Uuid

from vita_admin.db.base import Base

class Banner(Base):
    __tablename__ = "banners"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    image_link = Column(String, nullable=True)
    redirect_link = Column(String, nullable=True)
    created_at = Column(String, default=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "image_link": self.image_link,
            "redirect_link": self.redirect_link,
            "created_at": self.created_at,
        }
