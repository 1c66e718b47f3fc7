"""StoreCredit model for prepaid store credit balances."""

from decimal import Decimal

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text

from storecredit.core.database import Base
from storecredit.models.shared import UUIDType, generate_uuid, utc_now


class StoreCredit(Base):
    """A balance a user can spend as a payment tender.

    ``amount`` is the face value. ``amount_used`` is what has been captured and
    ``amount_authorized`` what is currently held by uncaptured authorizations.
    ``version_id`` is bumped on every write so concurrent balance updates fail
    instead of overwriting each other.
    """

    __tablename__ = "store_credits"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    user_id = Column(UUIDType, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)
    category_id = Column(
        UUIDType, ForeignKey("store_credit_categories.id", ondelete="RESTRICT"), nullable=True
    )
    created_by_id = Column(UUIDType, ForeignKey("users.id", ondelete="RESTRICT"), nullable=True)
    amount = Column(Numeric(12, 2), nullable=False, default=0)
    amount_used = Column(Numeric(12, 2), nullable=False, default=0)
    amount_authorized = Column(Numeric(12, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False)
    memo = Column(Text, nullable=True)
    priority = Column(Integer, nullable=False, default=1)
    invalidated_at = Column(DateTime(timezone=True), nullable=True)
    version_id = Column(Integer, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utc_now, index=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)

    __mapper_args__ = {"version_id_col": version_id}

    @property
    def amount_remaining(self) -> Decimal:
        return (
            Decimal(str(self.amount))
            - Decimal(str(self.amount_used))
            - Decimal(str(self.amount_authorized))
        )

    @property
    def invalidated(self) -> bool:
        return self.invalidated_at is not None
