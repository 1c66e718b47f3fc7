"""User model - owners of store credits and administrators."""

from sqlalchemy import Boolean, Column, DateTime, String

from storecredit.core.database import Base
from storecredit.models.shared import UUIDType, generate_uuid, utc_now


class User(Base):
    __tablename__ = "users"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=True)
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)
