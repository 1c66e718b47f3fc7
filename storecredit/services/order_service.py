"""Order state transitions and the store credit view of an order."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from storecredit.core.config import settings
from storecredit.core.exceptions import InvalidOrderTransition, StoreCreditValidationError
from storecredit.core.money import format_money, to_money
from storecredit.models.order import Order, OrderState
from storecredit.models.payment import Payment, PaymentSourceType, PaymentState
from storecredit.models.shared import utc_now
from storecredit.repositories.order_repository import OrderRepository
from storecredit.repositories.payment_repository import PaymentRepository
from storecredit.repositories.store_credit_repository import StoreCreditRepository
from storecredit.schemas.order import OrderStoreCreditSummary
from storecredit.schemas.payment import CardPaymentCreate
from storecredit.services.gift_card_service import GiftCardService
from storecredit.services.notification_service import GiftCardNotifier, NotificationService
from storecredit.services.order_capturing import CaptureResult, OrderCapturing
from storecredit.services.payment_allocation import (
    AllocationResult,
    AllocationStrategy,
    StoreCreditAllocator,
)
from storecredit.services.payment_gateway import PaymentGatewayBase, get_payment_gateway
from storecredit.services.store_credit_service import StoreCreditService
from storecredit.services.user_balance import UserBalanceService

logger = logging.getLogger(__name__)

UNABLE_TO_FUND = "Unable to fund the order with store credit. Please provide another payment method."


@dataclass
class OrderTransitionResult:
    """Outcome of a transition that can be refused without an exception."""

    order: Order
    success: bool
    errors: list[str] = field(default_factory=list)
    allocation: AllocationResult | None = None


class OrderService:
    """Drives an order through confirm, complete and cancel.

    The allocation strategy runs at the transition into ``confirm``; it
    defaults to drawing on the user's store credit.
    """

    def __init__(
        self,
        db: Session,
        allocation_strategy: AllocationStrategy | None = None,
        gateway: PaymentGatewayBase | None = None,
        notifier: GiftCardNotifier | None = None,
    ):
        self.db = db
        self.allocation_strategy = allocation_strategy or StoreCreditAllocator(db)
        self.gateway = gateway or get_payment_gateway()
        self.notifier = notifier or NotificationService(db)
        self.order_repo = OrderRepository(db)
        self.payment_repo = PaymentRepository(db)
        self.credit_repo = StoreCreditRepository(db)
        self.balance = UserBalanceService(db)
        self.ledger = StoreCreditService(db, autocommit=False)

    def get_order(self, order_id: UUID) -> Order:
        order = self.order_repo.get_by_id(order_id)
        if order is None:
            raise StoreCreditValidationError(f"Order {order_id} not found")
        return order

    def add_card_payment(self, order_id: UUID, data: CardPaymentCreate) -> Payment:
        order = self.get_order(order_id)
        if order.state in (OrderState.COMPLETE.value, OrderState.CANCELED.value):
            raise InvalidOrderTransition(str(order.state), "add a payment to")
        card = self.payment_repo.create_credit_card(data.credit_card, user_id=order.user_id)  # type: ignore[arg-type]
        payment = self.payment_repo.create(
            order_id=order.id,  # type: ignore[arg-type]
            amount=to_money(data.amount),
            source_type=PaymentSourceType.CREDIT_CARD,
            credit_card_id=card.id,  # type: ignore[arg-type]
        )
        self.db.commit()
        return payment

    def confirm(self, order_id: UUID) -> OrderTransitionResult:
        """Allocate store credit and move the order to ``confirm``.

        A shortfall leaves the order in its current state. By default every
        change made by the allocation is rolled back with it.
        """
        order = self.get_order(order_id)
        if order.state not in (OrderState.PAYMENT.value, OrderState.CONFIRM.value):
            raise InvalidOrderTransition(str(order.state), "confirm")
        self.db.commit()

        try:
            allocation = self.allocation_strategy.allocate(order)
        except Exception:
            self.db.rollback()
            raise

        if not allocation.funded:
            if settings.STORE_CREDIT_ROLLBACK_ON_SHORTFALL:
                self.db.rollback()
            else:
                self.db.commit()
            logger.warning(
                "Order %s could not be funded: pending %s of %s",
                order.number,
                allocation.pending_total,
                allocation.order_total,
            )
            return OrderTransitionResult(
                order=order, success=False, errors=[UNABLE_TO_FUND], allocation=allocation
            )

        self.order_repo.update_state(order, OrderState.CONFIRM)
        self.db.commit()
        return OrderTransitionResult(order=order, success=True, allocation=allocation)

    def complete(self, order_id: UUID) -> OrderTransitionResult:
        """Authorize outstanding card payments, issue gift cards and complete the order."""
        order = self.get_order(order_id)
        if order.state != OrderState.CONFIRM.value:
            raise InvalidOrderTransition(str(order.state), "complete")

        errors = []
        for payment in self.payment_repo.get_by_state(
            order.id, PaymentState.CHECKOUT, PaymentSourceType.CREDIT_CARD  # type: ignore[arg-type]
        ):
            card = self.payment_repo.get_credit_card(payment.credit_card_id)  # type: ignore[arg-type]
            response = self.gateway.authorize(to_money(payment.amount), card, str(order.currency))  # type: ignore[arg-type]
            if response.success:
                payment.response_code = response.authorization  # type: ignore[assignment]
                self.payment_repo.update_state(payment, PaymentState.PENDING)
            else:
                self.payment_repo.update_state(
                    payment, PaymentState.FAILED, failure_reason=response.message
                )
                errors.append(response.message or "Payment could not be authorized")

        if errors:
            # Keep the failed payment on record; the order stays in confirm
            self.db.commit()
            return OrderTransitionResult(order=order, success=False, errors=errors)

        gift_cards = GiftCardService(self.db, autocommit=False).create_for_order(order)
        order.completed_at = utc_now()  # type: ignore[assignment]
        self.order_repo.update_state(order, OrderState.COMPLETE)
        self.db.commit()

        for gift_card in gift_cards:
            try:
                self.notifier.gift_card_issued(gift_card)
            except Exception:
                logger.exception("Failed to send notification for gift card %s", gift_card.id)

        return OrderTransitionResult(order=order, success=True)

    def cancel(self, order_id: UUID) -> OrderTransitionResult:
        """Cancel the order and release any held store credit and card authorizations."""
        order = self.get_order(order_id)
        if order.state in (OrderState.CANCELED.value, OrderState.COMPLETE.value):
            raise InvalidOrderTransition(str(order.state), "cancel")

        try:
            for payment in self.payment_repo.get_by_state(order.id, PaymentState.PENDING):  # type: ignore[arg-type]
                if payment.is_store_credit:
                    credit = self.credit_repo.get_by_id(payment.store_credit_id)  # type: ignore[arg-type]
                    if credit is not None:
                        self.ledger.void(credit, payment.response_code)  # type: ignore[arg-type]
                else:
                    self.gateway.void(payment.response_code)  # type: ignore[arg-type]
                self.payment_repo.update_state(payment, PaymentState.VOID)
            for payment in self.payment_repo.get_by_state(order.id, PaymentState.CHECKOUT):  # type: ignore[arg-type]
                self.payment_repo.update_state(payment, PaymentState.INVALID)
        except Exception:
            self.db.rollback()
            raise

        order.canceled_at = utc_now()  # type: ignore[assignment]
        self.order_repo.update_state(order, OrderState.CANCELED)
        self.db.commit()
        logger.info("Canceled order %s", order.number)
        return OrderTransitionResult(order=order, success=True)

    def capture(self, order_id: UUID) -> CaptureResult:
        order = self.get_order(order_id)
        return OrderCapturing(self.db, order, gateway=self.gateway).capture_payments()

    def total_available_store_credit(self, order: Order) -> Decimal:
        if order.user_id is None:
            return Decimal("0")
        return self.balance.total_available_store_credit(
            order.user_id, currency=order.currency  # type: ignore[arg-type]
        )

    def total_applicable_store_credit(self, order: Order) -> Decimal:
        """Store credit applied to the order, or that would be applied if confirmed now."""
        if order.state in (OrderState.CONFIRM.value, OrderState.COMPLETE.value):
            return sum(
                (
                    to_money(p.amount)
                    for p in self.payment_repo.get_valid_store_credit_payments(order.id)  # type: ignore[arg-type]
                ),
                Decimal("0"),
            )
        return min(to_money(order.total), self.total_available_store_credit(order))

    def store_credit_summary(self, order: Order) -> OrderStoreCreditSummary:
        currency = str(order.currency)
        total = to_money(order.total)
        available = self.total_available_store_credit(order)
        applicable = self.total_applicable_store_credit(order)
        after_store_credit = total - applicable
        if order.state in (OrderState.CONFIRM.value, OrderState.COMPLETE.value):
            # Applied credit is already held or used, so it is not part of available
            remaining_after_capture = available
        else:
            remaining_after_capture = available - applicable
        return OrderStoreCreditSummary(
            currency=currency,
            covered_by_store_credit=order.user_id is not None and available >= total,
            total_available_store_credit=available,
            total_applicable_store_credit=applicable,
            order_total_after_store_credit=after_store_credit,
            store_credit_remaining_after_capture=remaining_after_capture,
            display_total_available_store_credit=format_money(available, currency),
            display_total_applicable_store_credit=format_money(-applicable, currency),
            display_order_total_after_store_credit=format_money(after_store_credit, currency),
            display_store_credit_remaining_after_capture=format_money(
                remaining_after_capture, currency
            ),
        )
