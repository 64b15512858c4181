import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, ForeignKey, String, Uuid

from vita_admin.db.base import Base

class Mentor(Base):
    __tablename__ = "mentors"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, index=True)
    approved = Column(Boolean, nullable=False, default=False)
    top_mentor = Column(Boolean, nullable=False, default=False)
    created_at = Column(String, default=lambda: datetime.now(timezone.utc).isoformat())

class User(Base):
    __tablename__ = "users"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    # Linked mentor profile, present once the user applied as a mentor
    mentor_information = Column(Uuid, ForeignKey("mentors.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(String, default=lambda: datetime.now(timezone.utc).isoformat())
