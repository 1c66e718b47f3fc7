"""StoreCredit schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class StoreCreditCreate(BaseModel):
    amount: Decimal = Field(ge=0)
    category_id: UUID | None = None
    memo: str | None = None
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    priority: int = Field(default=1, ge=1, le=50)


class StoreCreditUpdate(BaseModel):
    amount: Decimal | None = Field(default=None, ge=0)
    category_id: UUID | None = None
    memo: str | None = None


class StoreCreditResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    category_id: UUID | None = None
    created_by_id: UUID | None = None
    amount: Decimal
    amount_used: Decimal
    amount_authorized: Decimal
    amount_remaining: Decimal
    currency: str
    memo: str | None = None
    priority: int
    invalidated_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class StoreCreditCategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str


class UserStoreCreditBalanceResponse(BaseModel):
    user_id: UUID
    currency: str | None = None
    total_available_store_credit: Decimal
    display_total_available_store_credit: str | None = None
