"""StoreCreditEvent model - append-only audit trail of store credit balance changes."""

from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, Numeric, String

from storecredit.core.database import Base
from storecredit.models.shared import UUIDType, generate_uuid, utc_now


class StoreCreditAction(str, Enum):
    ALLOCATE = "allocate"
    ELIGIBLE = "eligible"
    AUTHORIZE = "authorize"
    CAPTURE = "capture"
    VOID = "void"
    CREDIT = "credit"
    ADJUSTMENT = "adjustment"


# Bookkeeping actions never shown in user-facing listings
INTERNAL_ACTIONS = (StoreCreditAction.ELIGIBLE.value, StoreCreditAction.AUTHORIZE.value)


class OriginatorType(str, Enum):
    ADMIN = "admin"
    SYSTEM = "system"


class StoreCreditEvent(Base):
    __tablename__ = "store_credit_events"
    __table_args__ = (
        Index("ix_store_credit_events_store_credit_id_sequence", "store_credit_id", "sequence"),
    )

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    store_credit_id = Column(
        UUIDType, ForeignKey("store_credits.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    # Per-credit position in the log; orders events that share a timestamp
    sequence = Column(Integer, nullable=False, default=0)
    action = Column(String(20), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False, default=0)
    user_total_amount = Column(Numeric(12, 2), nullable=False, default=0)
    originator_type = Column(String(20), nullable=False, default=OriginatorType.SYSTEM.value)
    originator_id = Column(UUIDType, nullable=True)
    authorization_code = Column(String(64), nullable=True, index=True)
    deleted = Column(Boolean, nullable=False, default=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, index=True)
