"""StoreCreditEvent schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class StoreCreditEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    store_credit_id: UUID
    action: str
    display_action: str
    amount: Decimal
    user_total_amount: Decimal
    originator_type: str
    originator_id: UUID | None = None
    authorization_code: str | None = None
    order_id: UUID | None = None
    created_at: datetime


ACTION_LABELS = {
    "allocate": "Added",
    "eligible": "Eligible",
    "authorize": "Authorized",
    "capture": "Used",
    "void": "Credit",
    "credit": "Credit",
    "adjustment": "Adjustment",
}


def display_action(action: str) -> str:
    return ACTION_LABELS.get(action, action.title())
