import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, Integer, String, Uuid

from vita_admin.db.base import Base

class Admin(Base):
    __tablename__ = "admins"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    hashed_password = Column(String, nullable=False)
    created_at = Column(String, default=lambda: datetime.now(timezone.utc).isoformat())

    # Current OTP state, one slot per admin
    otp_hash = Column(String, nullable=True)
    otp_expires_at = Column(String, nullable=True)  # ISO 8601 format
    otp_consumed = Column(Boolean, nullable=False, default=False)
    otp_failed_attempts = Column(Integer, nullable=False, default=0)

    def to_profile(self) -> dict:
        """Public view of the account, without password or OTP material"""
        return {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
            "created_at": self.created_at,
        }
