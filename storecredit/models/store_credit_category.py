"""StoreCreditCategory model."""

from sqlalchemy import Column, DateTime, String

from storecredit.core.database import Base
from storecredit.models.shared import UUIDType, generate_uuid, utc_now


class StoreCreditCategory(Base):
    """Reason a store credit was issued (goodwill, gift card, ...)."""

    __tablename__ = "store_credit_categories"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    name = Column(String(255), unique=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)
