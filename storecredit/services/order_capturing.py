"""Capture an order's pending payments, store credit first."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from storecredit.core.config import settings
from storecredit.core.exceptions import StoreCreditValidationError
from storecredit.core.money import to_money
from storecredit.models.order import Order
from storecredit.models.payment import Payment, PaymentSourceType, PaymentState
from storecredit.models.shared import utc_now
from storecredit.repositories.payment_repository import PaymentRepository
from storecredit.repositories.store_credit_repository import StoreCreditRepository
from storecredit.services.payment_gateway import (
    GatewayError,
    PaymentGatewayBase,
    get_payment_gateway,
)
from storecredit.services.store_credit_service import StoreCreditService

logger = logging.getLogger(__name__)


@dataclass
class PaymentCaptureOutcome:
    payment_id: UUID
    source_type: str
    amount: Decimal
    success: bool
    error: str | None = None
    error_type: str | None = None


@dataclass
class CaptureResult:
    """Per-payment outcomes in the order captures were attempted."""

    order_id: UUID
    outcomes: list[PaymentCaptureOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return all(outcome.success for outcome in self.outcomes)

    @property
    def captured_total(self) -> Decimal:
        return sum((o.amount for o in self.outcomes if o.success), Decimal("0"))


def eligible_payment_methods(configured: list[str] | None = None) -> list[PaymentSourceType]:
    """Payment methods in capture order. Store credit is always first."""
    methods = [PaymentSourceType.STORE_CREDIT]
    for name in configured if configured is not None else settings.capture_payment_methods:
        try:
            method = PaymentSourceType(name)
        except ValueError:
            logger.warning("Ignoring unknown capture payment method %r", name)
            continue
        if method not in methods:
            methods.append(method)
    return methods


class OrderCapturing:
    """Captures every pending payment of an order, one method at a time.

    Each capture is committed on its own; a failed capture marks that payment
    failed and the remaining payments are still attempted.
    """

    def __init__(
        self,
        db: Session,
        order: Order,
        gateway: PaymentGatewayBase | None = None,
        payment_methods: list[str] | None = None,
    ):
        self.db = db
        self.order = order
        self.gateway = gateway or get_payment_gateway()
        self.payment_methods = eligible_payment_methods(payment_methods)
        self.ledger = StoreCreditService(db, autocommit=False)
        self.credit_repo = StoreCreditRepository(db)
        self.payment_repo = PaymentRepository(db)

    def capture_payments(self) -> CaptureResult:
        result = CaptureResult(order_id=self.order.id)  # type: ignore[arg-type]
        for method in self.payment_methods:
            payments = self.payment_repo.get_by_state(
                self.order.id, PaymentState.PENDING, method  # type: ignore[arg-type]
            )
            for payment in payments:
                result.outcomes.append(self._capture(payment))

        logger.info(
            "Captured %s for order %s (%d payments, %d failed)",
            result.captured_total,
            self.order.number,
            len(result.outcomes),
            sum(1 for o in result.outcomes if not o.success),
        )
        return result

    def _capture(self, payment: Payment) -> PaymentCaptureOutcome:
        payment_id = payment.id
        source_type = str(payment.source_type)
        amount = to_money(payment.amount)
        try:
            if payment.is_store_credit:
                self._capture_store_credit(payment, amount)
            else:
                self._capture_credit_card(payment, amount)
            payment.state = PaymentState.COMPLETED.value  # type: ignore[assignment]
            payment.captured_at = utc_now()  # type: ignore[assignment]
            self.payment_repo.create_capture_event(payment, amount)
            self.db.commit()
        except (StoreCreditValidationError, GatewayError) as e:
            logger.warning("Capture of payment %s failed: %s", payment_id, e)
            return self._fail(payment_id, source_type, amount, e)  # type: ignore[arg-type]
        except Exception as e:
            # Anything else, such as a gateway timeout, fails this payment only
            logger.exception("Capture of payment %s failed", payment_id)
            return self._fail(payment_id, source_type, amount, e)  # type: ignore[arg-type]

        return PaymentCaptureOutcome(
            payment_id=payment_id,  # type: ignore[arg-type]
            source_type=source_type,
            amount=amount,
            success=True,
        )

    def _fail(
        self, payment_id: UUID, source_type: str, amount: Decimal, error: Exception
    ) -> PaymentCaptureOutcome:
        self.db.rollback()
        failed = self.payment_repo.get_by_id(payment_id)
        if failed is not None:
            self.payment_repo.update_state(failed, PaymentState.FAILED, failure_reason=str(error))
            self.db.commit()
        return PaymentCaptureOutcome(
            payment_id=payment_id,
            source_type=source_type,
            amount=amount,
            success=False,
            error=str(error),
            error_type=type(error).__name__,
        )

    def _capture_store_credit(self, payment: Payment, amount: Decimal) -> None:
        credit = self.credit_repo.get_by_id(payment.store_credit_id)  # type: ignore[arg-type]
        if credit is None:
            raise StoreCreditValidationError(f"Store credit for payment {payment.id} not found")
        self.ledger.capture(credit, payment.response_code, amount)  # type: ignore[arg-type]

    def _capture_credit_card(self, payment: Payment, amount: Decimal) -> None:
        response = self.gateway.capture(amount, payment.response_code, self.order.currency)  # type: ignore[arg-type]
        if not response.success:
            raise GatewayError(response.message or "Capture declined")
