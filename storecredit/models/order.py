"""Order and LineItem models."""

from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String

from storecredit.core.database import Base
from storecredit.models.shared import UUIDType, generate_uuid, utc_now


class OrderState(str, Enum):
    CART = "cart"
    ADDRESS = "address"
    DELIVERY = "delivery"
    PAYMENT = "payment"
    CONFIRM = "confirm"
    COMPLETE = "complete"
    CANCELED = "canceled"


class Order(Base):
    __tablename__ = "orders"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    number = Column(String(32), unique=True, index=True, nullable=False)
    user_id = Column(UUIDType, ForeignKey("users.id", ondelete="RESTRICT"), nullable=True, index=True)
    state = Column(String(20), nullable=False, default=OrderState.CART.value)
    total = Column(Numeric(12, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="USD")
    completed_at = Column(DateTime(timezone=True), nullable=True)
    canceled_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now)


class LineItem(Base):
    __tablename__ = "line_items"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    order_id = Column(UUIDType, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    gift_card = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)
