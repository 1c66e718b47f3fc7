"""Admin store credit API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storecredit.core.auth import get_current_admin
from storecredit.core.config import settings
from storecredit.core.database import get_db
from storecredit.core.exceptions import OutstandingAuthorization, StoreCreditValidationError
from storecredit.core.money import format_money
from storecredit.models.store_credit import StoreCredit
from storecredit.models.user import User
from storecredit.repositories.store_credit_event_repository import StoreCreditEventRepository
from storecredit.repositories.store_credit_repository import StoreCreditRepository
from storecredit.repositories.user_repository import UserRepository
from storecredit.schemas.store_credit import (
    StoreCreditCreate,
    StoreCreditResponse,
    StoreCreditUpdate,
    UserStoreCreditBalanceResponse,
)
from storecredit.schemas.store_credit_event import StoreCreditEventResponse, display_action
from storecredit.services.store_credit_service import AdminActor, StoreCreditService
from storecredit.services.user_balance import UserBalanceService

router = APIRouter()


def _load_user(db: Session, user_id: UUID) -> User:
    user = UserRepository(db).get_by_id(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _load_store_credit(db: Session, user_id: UUID, store_credit_id: UUID) -> StoreCredit:
    credit = StoreCreditRepository(db).get_by_id(store_credit_id)
    if not credit or credit.user_id != user_id:
        raise HTTPException(status_code=404, detail="Store credit not found")
    return credit


@router.get(
    "/{user_id}/store_credits",
    response_model=list[StoreCreditResponse],
    summary="List store credits",
    responses={404: {"description": "User not found"}},
)
async def list_store_credits(
    user_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
) -> list[StoreCredit]:
    """List a user's store credits, newest first, including invalidated ones."""
    _load_user(db, user_id)
    return StoreCreditRepository(db).get_by_user_id(user_id)


@router.post(
    "/{user_id}/store_credits",
    response_model=StoreCreditResponse,
    status_code=201,
    summary="Create store credit",
    responses={
        400: {"description": "Store credit could not be created"},
        404: {"description": "User not found"},
        422: {"description": "Validation error"},
    },
)
async def create_store_credit(
    user_id: UUID,
    data: StoreCreditCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
) -> StoreCredit:
    """Issue a store credit to a user; the admin is recorded as creator and originator."""
    _load_user(db, user_id)
    service = StoreCreditService(db)
    try:
        return service.create_store_credit(
            user_id=user_id,
            amount=data.amount,
            currency=data.currency or settings.DEFAULT_CURRENCY,
            category_id=data.category_id,
            memo=data.memo,
            priority=data.priority,
            originator=AdminActor(admin.id),  # type: ignore[arg-type]
        )
    except StoreCreditValidationError as e:
        raise HTTPException(
            status_code=400, detail=f"Unable to create store credit: {e.message}"
        ) from None


@router.get(
    "/{user_id}/store_credits/{store_credit_id}",
    response_model=StoreCreditResponse,
    summary="Get store credit",
    responses={404: {"description": "Store credit not found"}},
)
async def get_store_credit(
    user_id: UUID,
    store_credit_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
) -> StoreCredit:
    return _load_store_credit(db, user_id, store_credit_id)


@router.put(
    "/{user_id}/store_credits/{store_credit_id}",
    response_model=StoreCreditResponse,
    summary="Update store credit",
    responses={
        400: {"description": "Store credit could not be updated"},
        404: {"description": "Store credit not found"},
        422: {"description": "Validation error"},
    },
)
async def update_store_credit(
    user_id: UUID,
    store_credit_id: UUID,
    data: StoreCreditUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
) -> StoreCredit:
    """Edit amount, category or memo; the amount may not drop below what was used."""
    credit = _load_store_credit(db, user_id, store_credit_id)
    service = StoreCreditService(db)
    try:
        return service.update_store_credit(
            credit,
            data.model_dump(exclude_unset=True),
            originator=AdminActor(admin.id),  # type: ignore[arg-type]
        )
    except StoreCreditValidationError as e:
        raise HTTPException(
            status_code=400, detail=f"Unable to update store credit: {e.message}"
        ) from None


@router.put(
    "/{user_id}/store_credits/{store_credit_id}/invalidate",
    response_model=StoreCreditResponse,
    summary="Invalidate store credit",
    responses={
        404: {"description": "Store credit not found"},
        422: {"description": "Store credit has an uncaptured authorization"},
    },
)
async def invalidate_store_credit(
    user_id: UUID,
    store_credit_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
) -> StoreCredit:
    credit = _load_store_credit(db, user_id, store_credit_id)
    try:
        return StoreCreditService(db).invalidate(credit)
    except OutstandingAuthorization as e:
        raise HTTPException(status_code=422, detail=e.message) from None


@router.get(
    "/{user_id}/store_credits/{store_credit_id}/events",
    response_model=list[StoreCreditEventResponse],
    summary="List store credit events",
    responses={404: {"description": "Store credit not found"}},
)
async def list_store_credit_events(
    user_id: UUID,
    store_credit_id: UUID,
    include_internal: bool = False,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
) -> list[StoreCreditEventResponse]:
    """List a store credit's events, newest first.

    Internal bookkeeping (eligibility checks and authorizations) is hidden
    unless ``include_internal`` is set.
    """
    _load_store_credit(db, user_id, store_credit_id)
    repo = StoreCreditEventRepository(db)
    if include_internal:
        events = repo.get_by_store_credit_id(store_credit_id)
    else:
        events = repo.get_exposed_by_store_credit_id(store_credit_id)

    responses = []
    for event in events:
        order = repo.get_order(event)
        responses.append(
            StoreCreditEventResponse(
                id=event.id,
                store_credit_id=event.store_credit_id,
                action=event.action,
                display_action=display_action(str(event.action)),
                amount=event.amount,
                user_total_amount=event.user_total_amount,
                originator_type=event.originator_type,
                originator_id=event.originator_id,
                authorization_code=event.authorization_code,
                order_id=order.id if order else None,
                created_at=event.created_at,
            )
        )
    return responses


@router.get(
    "/{user_id}/store_credit_balance",
    response_model=UserStoreCreditBalanceResponse,
    summary="Get total available store credit",
    responses={404: {"description": "User not found"}},
)
async def get_store_credit_balance(
    user_id: UUID,
    currency: str | None = None,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
) -> UserStoreCreditBalanceResponse:
    _load_user(db, user_id)
    total = UserBalanceService(db).total_available_store_credit(user_id, currency=currency)
    return UserStoreCreditBalanceResponse(
        user_id=user_id,
        currency=currency,
        total_available_store_credit=total,
        display_total_available_store_credit=format_money(total, currency) if currency else None,
    )
