"""Gift card API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storecredit.core.auth import get_current_admin
from storecredit.core.database import get_db
from storecredit.core.exceptions import StoreCreditValidationError
from storecredit.models.store_credit import StoreCredit
from storecredit.models.user import User
from storecredit.repositories.user_repository import UserRepository
from storecredit.schemas.gift_card import GiftCardRedeem
from storecredit.schemas.store_credit import StoreCreditResponse
from storecredit.services.gift_card_service import GiftCardService

router = APIRouter()


@router.post(
    "/redeem",
    response_model=StoreCreditResponse,
    status_code=201,
    summary="Redeem gift card",
    responses={
        400: {"description": "Gift card cannot be redeemed"},
        404: {"description": "User not found"},
    },
)
async def redeem_gift_card(
    data: GiftCardRedeem,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
) -> StoreCredit:
    """Turn a gift card into store credit for the given user."""
    if not UserRepository(db).get_by_id(data.user_id):
        raise HTTPException(status_code=404, detail="User not found")
    try:
        return GiftCardService(db).redeem(data.redemption_code, data.user_id)
    except StoreCreditValidationError as e:
        raise HTTPException(status_code=400, detail=e.message) from None
