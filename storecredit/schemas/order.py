"""Order schemas."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from storecredit.schemas.payment import PaymentResponse


class OrderState(str, Enum):
    CART = "cart"
    ADDRESS = "address"
    DELIVERY = "delivery"
    PAYMENT = "payment"
    CONFIRM = "confirm"
    COMPLETE = "complete"
    CANCELED = "canceled"


class LineItemCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    price: Decimal = Field(ge=0)
    quantity: int = Field(default=1, ge=1)
    gift_card: bool = False


class OrderCreate(BaseModel):
    user_id: UUID | None = None
    currency: str = Field(default="USD", min_length=3, max_length=3)
    total: Decimal | None = Field(default=None, ge=0)
    state: OrderState = OrderState.PAYMENT
    line_items: list[LineItemCreate] = Field(default_factory=list)


class LineItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    price: Decimal
    quantity: int
    gift_card: bool


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    number: str
    user_id: UUID | None = None
    state: str
    total: Decimal
    currency: str
    completed_at: datetime | None = None
    canceled_at: datetime | None = None
    created_at: datetime


class OrderStoreCreditSummary(BaseModel):
    currency: str
    covered_by_store_credit: bool
    total_available_store_credit: Decimal
    total_applicable_store_credit: Decimal
    order_total_after_store_credit: Decimal
    store_credit_remaining_after_capture: Decimal
    display_total_available_store_credit: str
    display_total_applicable_store_credit: str
    display_order_total_after_store_credit: str
    display_store_credit_remaining_after_capture: str


class OrderDetailResponse(BaseModel):
    order: OrderResponse
    outstanding_balance: Decimal
    line_items: list[LineItemResponse]
    payments: list[PaymentResponse]
    store_credit: OrderStoreCreditSummary


class OrderTransitionResponse(BaseModel):
    success: bool
    state: str
    errors: list[str] = Field(default_factory=list)
