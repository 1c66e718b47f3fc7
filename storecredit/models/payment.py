"""Payment, CreditCard and PaymentCaptureEvent models."""

from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, Text

from storecredit.core.database import Base
from storecredit.models.shared import UUIDType, generate_uuid, utc_now


class PaymentState(str, Enum):
    """Payment state enum."""

    CHECKOUT = "checkout"
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    VOID = "void"
    INVALID = "invalid"


INVALID_PAYMENT_STATES = (
    PaymentState.FAILED.value,
    PaymentState.VOID.value,
    PaymentState.INVALID.value,
)


class PaymentSourceType(str, Enum):
    """Closed set of payment sources."""

    STORE_CREDIT = "store_credit"
    CREDIT_CARD = "credit_card"


class CreditCard(Base):
    __tablename__ = "credit_cards"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    user_id = Column(UUIDType, ForeignKey("users.id", ondelete="RESTRICT"), nullable=True, index=True)
    name = Column(String(255), nullable=True)
    cc_type = Column(String(32), nullable=True)
    last_digits = Column(String(4), nullable=False)
    month = Column(String(2), nullable=True)
    year = Column(String(4), nullable=True)
    gateway_payment_profile_id = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now)


class Payment(Base):
    """Payment model - one tender applied to an order."""

    __tablename__ = "payments"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    order_id = Column(UUIDType, ForeignKey("orders.id", ondelete="RESTRICT"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    amount_refunded = Column(Numeric(12, 2), nullable=False, default=0)
    state = Column(String(20), nullable=False, default=PaymentState.CHECKOUT.value, index=True)

    # Source: exactly one of the two references is set, according to source_type
    source_type = Column(String(20), nullable=False)
    store_credit_id = Column(
        UUIDType, ForeignKey("store_credits.id", ondelete="RESTRICT"), nullable=True, index=True
    )
    credit_card_id = Column(
        UUIDType, ForeignKey("credit_cards.id", ondelete="RESTRICT"), nullable=True
    )

    response_code = Column(String(64), nullable=True, index=True)
    failure_reason = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)
    captured_at = Column(DateTime(timezone=True), nullable=True)

    @property
    def is_store_credit(self) -> bool:
        return self.source_type == PaymentSourceType.STORE_CREDIT.value

    @property
    def is_valid(self) -> bool:
        return self.state not in INVALID_PAYMENT_STATES


class PaymentCaptureEvent(Base):
    __tablename__ = "payment_capture_events"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    payment_id = Column(
        UUIDType, ForeignKey("payments.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    amount = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)
