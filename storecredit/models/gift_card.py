"""GiftCard model - purchased gift cards that redeem into store credit."""

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String

from storecredit.core.database import Base
from storecredit.models.shared import UUIDType, generate_uuid, utc_now


class GiftCard(Base):
    __tablename__ = "gift_cards"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    order_id = Column(UUIDType, ForeignKey("orders.id", ondelete="RESTRICT"), nullable=False, index=True)
    line_item_id = Column(UUIDType, ForeignKey("line_items.id", ondelete="RESTRICT"), nullable=True)
    purchaser_id = Column(UUIDType, ForeignKey("users.id", ondelete="RESTRICT"), nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), nullable=False)
    redemption_code = Column(String(32), unique=True, index=True, nullable=False)
    redeemer_id = Column(UUIDType, ForeignKey("users.id", ondelete="RESTRICT"), nullable=True)
    redeemed_at = Column(DateTime(timezone=True), nullable=True)
    store_credit_id = Column(
        UUIDType, ForeignKey("store_credits.id", ondelete="RESTRICT"), nullable=True
    )
    created_at = Column(DateTime(timezone=True), default=utc_now)

    @property
    def redeemed(self) -> bool:
        return self.redeemed_at is not None
