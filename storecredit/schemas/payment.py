"""Payment schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CreditCardCreate(BaseModel):
    last_digits: str = Field(min_length=4, max_length=4, pattern="^[0-9]{4}$")
    name: str | None = Field(default=None, max_length=255)
    cc_type: str | None = Field(default=None, max_length=32)
    month: str | None = Field(default=None, max_length=2)
    year: str | None = Field(default=None, max_length=4)
    gateway_payment_profile_id: str | None = Field(default=None, max_length=255)


class CardPaymentCreate(BaseModel):
    amount: Decimal = Field(gt=0)
    credit_card: CreditCardCreate


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    order_id: UUID
    amount: Decimal
    amount_refunded: Decimal = Decimal("0")
    state: str
    source_type: str
    store_credit_id: UUID | None = None
    credit_card_id: UUID | None = None
    response_code: str | None = None
    failure_reason: str | None = None
    created_at: datetime
    captured_at: datetime | None = None


class PaymentCaptureOutcomeResponse(BaseModel):
    payment_id: UUID
    source_type: str
    amount: Decimal
    success: bool
    error: str | None = None
    error_type: str | None = None


class CaptureResultResponse(BaseModel):
    order_id: UUID
    succeeded: bool
    captured_total: Decimal
    outcomes: list[PaymentCaptureOutcomeResponse]


class RefundRequest(BaseModel):
    amount: Decimal = Field(gt=0)
