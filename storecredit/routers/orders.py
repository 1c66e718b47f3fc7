"""Order API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storecredit.core.auth import get_current_admin
from storecredit.core.database import get_db
from storecredit.core.exceptions import StoreCreditValidationError
from storecredit.models.order import Order
from storecredit.models.payment import Payment
from storecredit.models.user import User
from storecredit.repositories.order_repository import OrderRepository
from storecredit.repositories.payment_repository import PaymentRepository
from storecredit.schemas.order import (
    LineItemResponse,
    OrderCreate,
    OrderDetailResponse,
    OrderResponse,
    OrderTransitionResponse,
)
from storecredit.schemas.payment import (
    CaptureResultResponse,
    CardPaymentCreate,
    PaymentCaptureOutcomeResponse,
    PaymentResponse,
)
from storecredit.services.order_service import OrderService, OrderTransitionResult

router = APIRouter()


def _load_order(db: Session, order_id: UUID) -> Order:
    order = OrderRepository(db).get_by_id(order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


def _transition_response(result: OrderTransitionResult) -> OrderTransitionResponse:
    if not result.success:
        raise HTTPException(status_code=422, detail=result.errors)
    return OrderTransitionResponse(success=True, state=str(result.order.state))


@router.post(
    "/",
    response_model=OrderResponse,
    status_code=201,
    summary="Create order",
    responses={422: {"description": "Validation error"}},
)
async def create_order(
    data: OrderCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
) -> Order:
    order = OrderRepository(db).create(data)
    db.commit()
    db.refresh(order)
    return order


@router.get(
    "/{order_id}",
    response_model=OrderDetailResponse,
    summary="Get order",
    responses={404: {"description": "Order not found"}},
)
async def get_order(
    order_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
) -> OrderDetailResponse:
    """Get an order with its payments and store credit summary."""
    order = _load_order(db, order_id)
    order_repo = OrderRepository(db)
    service = OrderService(db)
    return OrderDetailResponse(
        order=OrderResponse.model_validate(order),
        outstanding_balance=order_repo.outstanding_balance(order),
        line_items=[
            LineItemResponse.model_validate(item)
            for item in order_repo.get_line_items(order_id)
        ],
        payments=[
            PaymentResponse.model_validate(p)
            for p in PaymentRepository(db).get_by_order_id(order_id)
        ],
        store_credit=service.store_credit_summary(order),
    )


@router.post(
    "/{order_id}/payments",
    response_model=PaymentResponse,
    status_code=201,
    summary="Add card payment",
    responses={
        400: {"description": "Order does not accept payments"},
        404: {"description": "Order not found"},
    },
)
async def add_card_payment(
    order_id: UUID,
    data: CardPaymentCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
) -> Payment:
    _load_order(db, order_id)
    try:
        return OrderService(db).add_card_payment(order_id, data)
    except StoreCreditValidationError as e:
        raise HTTPException(status_code=400, detail=e.message) from None


@router.post(
    "/{order_id}/confirm",
    response_model=OrderTransitionResponse,
    summary="Confirm order",
    responses={
        400: {"description": "Order cannot be confirmed"},
        404: {"description": "Order not found"},
        422: {"description": "Order could not be funded"},
    },
)
async def confirm_order(
    order_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
) -> OrderTransitionResponse:
    """Apply store credit and move the order to confirm."""
    _load_order(db, order_id)
    try:
        result = OrderService(db).confirm(order_id)
    except StoreCreditValidationError as e:
        raise HTTPException(status_code=400, detail=e.message) from None
    return _transition_response(result)


@router.post(
    "/{order_id}/complete",
    response_model=OrderTransitionResponse,
    summary="Complete order",
    responses={
        400: {"description": "Order cannot be completed"},
        404: {"description": "Order not found"},
        422: {"description": "A card payment was declined"},
    },
)
async def complete_order(
    order_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
) -> OrderTransitionResponse:
    _load_order(db, order_id)
    try:
        result = OrderService(db).complete(order_id)
    except StoreCreditValidationError as e:
        raise HTTPException(status_code=400, detail=e.message) from None
    return _transition_response(result)


@router.post(
    "/{order_id}/cancel",
    response_model=OrderTransitionResponse,
    summary="Cancel order",
    responses={
        400: {"description": "Order cannot be canceled"},
        404: {"description": "Order not found"},
    },
)
async def cancel_order(
    order_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
) -> OrderTransitionResponse:
    _load_order(db, order_id)
    try:
        result = OrderService(db).cancel(order_id)
    except StoreCreditValidationError as e:
        raise HTTPException(status_code=400, detail=e.message) from None
    return _transition_response(result)


@router.post(
    "/{order_id}/capture",
    response_model=CaptureResultResponse,
    summary="Capture order payments",
    responses={404: {"description": "Order not found"}},
)
async def capture_order(
    order_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
) -> CaptureResultResponse:
    """Capture pending payments, store credit first.

    Failed captures are reported per payment rather than failing the request.
    """
    _load_order(db, order_id)
    result = OrderService(db).capture(order_id)
    return CaptureResultResponse(
        order_id=result.order_id,
        succeeded=result.succeeded,
        captured_total=result.captured_total,
        outcomes=[
            PaymentCaptureOutcomeResponse(
                payment_id=o.payment_id,
                source_type=o.source_type,
                amount=o.amount,
                success=o.success,
                error=o.error,
                error_type=o.error_type,
            )
            for o in result.outcomes
        ],
    )
