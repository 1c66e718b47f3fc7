"""GiftCard schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class GiftCardRedeem(BaseModel):
    redemption_code: str = Field(min_length=1, max_length=32)
    user_id: UUID


class GiftCardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    order_id: UUID
    amount: Decimal
    currency: str
    redemption_code: str
    redeemer_id: UUID | None = None
    redeemed_at: datetime | None = None
    store_credit_id: UUID | None = None
    created_at: datetime
