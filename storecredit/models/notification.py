"""Notification model for in-app notification system."""

from sqlalchemy import Boolean, Column, DateTime, String

from storecredit.core.database import Base
from storecredit.models.shared import UUIDType, generate_uuid, utc_now


class Notification(Base):
    """Notification model - stores in-app notifications for admin users."""

    __tablename__ = "notifications"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    category = Column(String(50), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(String(1000), nullable=False)
    resource_type = Column(String(50), nullable=True)
    resource_id = Column(UUIDType, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)
