"""Payment repository for data access."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from storecredit.models.payment import (
    INVALID_PAYMENT_STATES,
    CreditCard,
    Payment,
    PaymentCaptureEvent,
    PaymentSourceType,
    PaymentState,
)
from storecredit.schemas.payment import CreditCardCreate


class PaymentRepository:
    """Repository for Payment, CreditCard and PaymentCaptureEvent models."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, payment_id: UUID) -> Payment | None:
        """Get a payment by ID."""
        return self.db.query(Payment).filter(Payment.id == payment_id).first()

    def get_by_response_code(self, response_code: str) -> Payment | None:
        return self.db.query(Payment).filter(Payment.response_code == response_code).first()

    def get_by_order_id(self, order_id: UUID) -> list[Payment]:
        """Get all payments of an order in creation order."""
        return (
            self.db.query(Payment)
            .filter(Payment.order_id == order_id)
            .order_by(Payment.created_at.asc())
            .all()
        )

    def get_store_credit_payments(
        self, order_id: UUID, state: PaymentState | None = None
    ) -> list[Payment]:
        query = self.db.query(Payment).filter(
            Payment.order_id == order_id,
            Payment.source_type == PaymentSourceType.STORE_CREDIT.value,
        )
        if state:
            query = query.filter(Payment.state == state.value)
        return query.order_by(Payment.created_at.asc()).all()

    def get_valid_store_credit_payments(self, order_id: UUID) -> list[Payment]:
        return (
            self.db.query(Payment)
            .filter(
                Payment.order_id == order_id,
                Payment.source_type == PaymentSourceType.STORE_CREDIT.value,
                Payment.state.notin_(INVALID_PAYMENT_STATES),
            )
            .order_by(Payment.created_at.asc())
            .all()
        )

    def get_valid_non_store_credit_payments(self, order_id: UUID) -> list[Payment]:
        return (
            self.db.query(Payment)
            .filter(
                Payment.order_id == order_id,
                Payment.source_type != PaymentSourceType.STORE_CREDIT.value,
                Payment.state.notin_(INVALID_PAYMENT_STATES),
            )
            .order_by(Payment.created_at.asc())
            .all()
        )

    def get_by_state(
        self, order_id: UUID, state: PaymentState, source_type: PaymentSourceType | None = None
    ) -> list[Payment]:
        query = self.db.query(Payment).filter(
            Payment.order_id == order_id,
            Payment.state == state.value,
        )
        if source_type:
            query = query.filter(Payment.source_type == source_type.value)
        return query.order_by(Payment.created_at.asc()).all()

    def create(
        self,
        order_id: UUID,
        amount: Decimal,
        source_type: PaymentSourceType,
        state: PaymentState = PaymentState.CHECKOUT,
        store_credit_id: UUID | None = None,
        credit_card_id: UUID | None = None,
        response_code: str | None = None,
    ) -> Payment:
        """Create a new payment."""
        payment = Payment(
            order_id=order_id,
            amount=amount,
            source_type=source_type.value,
            state=state.value,
            store_credit_id=store_credit_id,
            credit_card_id=credit_card_id,
            response_code=response_code,
        )
        self.db.add(payment)
        self.db.flush()
        self.db.refresh(payment)
        return payment

    def update_state(
        self, payment: Payment, state: PaymentState, failure_reason: str | None = None
    ) -> Payment:
        payment.state = state.value  # type: ignore[assignment]
        if failure_reason is not None:
            payment.failure_reason = failure_reason  # type: ignore[assignment]
        self.db.flush()
        return payment

    def update_amount(self, payment: Payment, amount: Decimal) -> Payment:
        payment.amount = amount  # type: ignore[assignment]
        self.db.flush()
        return payment

    def create_capture_event(self, payment: Payment, amount: Decimal) -> PaymentCaptureEvent:
        event = PaymentCaptureEvent(payment_id=payment.id, amount=amount)
        self.db.add(event)
        self.db.flush()
        self.db.refresh(event)
        return event

    def get_capture_events(self, payment_id: UUID) -> list[PaymentCaptureEvent]:
        return (
            self.db.query(PaymentCaptureEvent)
            .filter(PaymentCaptureEvent.payment_id == payment_id)
            .order_by(PaymentCaptureEvent.created_at.asc())
            .all()
        )

    def get_credit_card(self, credit_card_id: UUID) -> CreditCard | None:
        return self.db.query(CreditCard).filter(CreditCard.id == credit_card_id).first()

    def create_credit_card(self, data: CreditCardCreate, user_id: UUID | None = None) -> CreditCard:
        card = CreditCard(
            user_id=user_id,
            name=data.name,
            cc_type=data.cc_type,
            last_digits=data.last_digits,
            month=data.month,
            year=data.year,
            gateway_payment_profile_id=data.gateway_payment_profile_id,
        )
        self.db.add(card)
        self.db.flush()
        self.db.refresh(card)
        return card
