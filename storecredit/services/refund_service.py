"""Refund service for returning captured payments to their source."""

import logging
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from storecredit.core.exceptions import InvalidAmount, StoreCreditError, StoreCreditValidationError
from storecredit.core.money import to_money
from storecredit.models.payment import Payment, PaymentState
from storecredit.repositories.order_repository import OrderRepository
from storecredit.repositories.payment_repository import PaymentRepository
from storecredit.repositories.store_credit_repository import StoreCreditRepository
from storecredit.services.payment_gateway import (
    GatewayError,
    PaymentGatewayBase,
    get_payment_gateway,
)
from storecredit.services.store_credit_service import StoreCreditService

logger = logging.getLogger(__name__)


class RefundService:
    """Service for refunding completed payments."""

    def __init__(self, db: Session, gateway: PaymentGatewayBase | None = None):
        self.db = db
        self.gateway = gateway or get_payment_gateway()
        self.payment_repo = PaymentRepository(db)
        self.order_repo = OrderRepository(db)
        self.credit_repo = StoreCreditRepository(db)
        self.ledger = StoreCreditService(db, autocommit=False)

    def refund_payment(self, payment_id: UUID, amount: Decimal) -> Payment:
        """Refund part or all of a completed payment.

        Store credit goes back onto the credit it came from; card payments are
        refunded through the gateway.
        """
        amount = to_money(amount)
        payment = self.payment_repo.get_by_id(payment_id)
        if payment is None:
            raise StoreCreditValidationError(f"Payment {payment_id} not found")
        if payment.state != PaymentState.COMPLETED.value:
            raise StoreCreditValidationError("Only completed payments can be refunded")
        if amount <= 0:
            raise InvalidAmount("Refund amount must be greater than 0")
        refundable = to_money(payment.amount) - to_money(payment.amount_refunded or 0)
        if amount > refundable:
            raise InvalidAmount(
                f"Refund amount {amount} exceeds the refundable amount {refundable} of the payment"
            )

        order = self.order_repo.get_by_id(payment.order_id)  # type: ignore[arg-type]
        currency = str(order.currency) if order else ""

        if payment.is_store_credit:
            credit = self.credit_repo.get_by_id(payment.store_credit_id)  # type: ignore[arg-type]
            if credit is None:
                raise StoreCreditValidationError(f"Store credit for payment {payment.id} not found")
            try:
                self.ledger.credit(
                    credit, amount, currency, authorization_code=payment.response_code  # type: ignore[arg-type]
                )
            except StoreCreditError:
                self.db.rollback()
                raise
        else:
            response = self.gateway.credit(amount, payment.response_code, currency)  # type: ignore[arg-type]
            if not response.success:
                raise GatewayError(response.message or "Refund declined")

        payment.amount_refunded = to_money(payment.amount_refunded or 0) + amount  # type: ignore[assignment]
        self.db.commit()
        logger.info("Refunded %s of payment %s", amount, payment.id)
        return payment
