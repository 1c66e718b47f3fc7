"""Payment API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storecredit.core.auth import get_current_admin
from storecredit.core.database import get_db
from storecredit.core.exceptions import StoreCreditValidationError
from storecredit.models.payment import Payment
from storecredit.models.user import User
from storecredit.repositories.payment_repository import PaymentRepository
from storecredit.schemas.payment import PaymentResponse, RefundRequest
from storecredit.services.payment_gateway import GatewayError
from storecredit.services.refund_service import RefundService

router = APIRouter()


@router.get(
    "/{payment_id}",
    response_model=PaymentResponse,
    summary="Get payment",
    responses={404: {"description": "Payment not found"}},
)
async def get_payment(
    payment_id: UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
) -> Payment:
    payment = PaymentRepository(db).get_by_id(payment_id)
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")
    return payment


@router.post(
    "/{payment_id}/refund",
    response_model=PaymentResponse,
    summary="Refund payment",
    responses={
        400: {"description": "Payment cannot be refunded"},
        404: {"description": "Payment not found"},
    },
)
async def refund_payment(
    payment_id: UUID,
    data: RefundRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
) -> Payment:
    """Refund a completed payment back to its store credit or card."""
    if not PaymentRepository(db).get_by_id(payment_id):
        raise HTTPException(status_code=404, detail="Payment not found")
    try:
        return RefundService(db).refund_payment(payment_id, data.amount)
    except StoreCreditValidationError as e:
        raise HTTPException(status_code=400, detail=e.message) from None
    except GatewayError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
