"""Store credit allocation run when an order moves to confirmation."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal

from sqlalchemy.orm import Session

from storecredit.core.exceptions import MultiplePaymentsFound, UnexpectedPaymentSource
from storecredit.core.money import to_money
from storecredit.models.order import Order
from storecredit.models.payment import Payment, PaymentSourceType, PaymentState
from storecredit.repositories.order_repository import OrderRepository
from storecredit.repositories.payment_repository import PaymentRepository
from storecredit.repositories.store_credit_repository import StoreCreditRepository
from storecredit.services.store_credit_service import StoreCreditService

logger = logging.getLogger(__name__)

# Payments that still count toward funding the order
UNPROCESSED_STATES = (PaymentState.CHECKOUT, PaymentState.PENDING)


@dataclass
class AllocationResult:
    """Outcome of an allocation run."""

    order_total: Decimal
    authorized_total: Decimal
    remaining_total: Decimal
    pending_total: Decimal
    store_credit_payments: list[Payment] = field(default_factory=list)

    @property
    def funded(self) -> bool:
        return self.pending_total == self.order_total

    @property
    def shortfall(self) -> Decimal:
        return self.order_total - self.pending_total


class AllocationStrategy(ABC):
    """Decides how an order's balance is split across its payments."""

    @abstractmethod
    def allocate(self, order: Order) -> AllocationResult:
        """Create or adjust the order's payments. Must not commit."""
        pass  # pragma: no cover


class StoreCreditAllocator(AllocationStrategy):
    """Apply the user's store credit first and reconcile the card payment.

    Credits are drawn in priority order, then oldest first. Runs inside the
    caller's transaction so a funding shortfall can be rolled back as a unit.
    """

    def __init__(self, db: Session):
        self.db = db
        self.ledger = StoreCreditService(db, autocommit=False)
        self.credit_repo = StoreCreditRepository(db)
        self.order_repo = OrderRepository(db)
        self.payment_repo = PaymentRepository(db)

    def allocate(self, order: Order) -> AllocationResult:
        # Checkout-state store credit payments are left over from an earlier attempt
        for payment in self.payment_repo.get_store_credit_payments(
            order.id, PaymentState.CHECKOUT  # type: ignore[arg-type]
        ):
            self.payment_repo.update_state(payment, PaymentState.INVALID)

        # Authorized but uncaptured store credit from an attempt whose card payment failed
        authorized_total = sum(
            (
                to_money(p.amount)
                for p in self.payment_repo.get_store_credit_payments(
                    order.id, PaymentState.PENDING  # type: ignore[arg-type]
                )
            ),
            Decimal("0"),
        )
        remaining_total = to_money(self.order_repo.outstanding_balance(order)) - authorized_total

        created: list[Payment] = []
        if order.user_id is not None:
            credits = self.credit_repo.get_usable_by_user_id(
                order.user_id, currency=order.currency  # type: ignore[arg-type]
            )
            for credit in credits:
                if remaining_total <= 0:
                    break
                if credit.amount_remaining <= 0:
                    continue

                amount_to_take = min(credit.amount_remaining, remaining_total)
                code = self.ledger.authorize(credit, amount_to_take, order.currency)  # type: ignore[arg-type]
                created.append(
                    self.payment_repo.create(
                        order_id=order.id,  # type: ignore[arg-type]
                        amount=amount_to_take,
                        source_type=PaymentSourceType.STORE_CREDIT,
                        state=PaymentState.PENDING,
                        store_credit_id=credit.id,  # type: ignore[arg-type]
                        response_code=code,
                    )
                )
                remaining_total -= amount_to_take

        self._reconcile_with_credit_card(order, remaining_total)

        pending_total = sum(
            (
                to_money(p.amount)
                for p in self.payment_repo.get_by_order_id(order.id)  # type: ignore[arg-type]
                if p.state in {s.value for s in UNPROCESSED_STATES}
            ),
            Decimal("0"),
        )
        result = AllocationResult(
            order_total=to_money(self.order_repo.outstanding_balance(order)),
            authorized_total=authorized_total,
            remaining_total=remaining_total,
            pending_total=pending_total,
            store_credit_payments=created,
        )
        logger.info(
            "Allocated %s of store credit to order %s across %d credits (remaining %s)",
            sum((to_money(p.amount) for p in created), Decimal("0")),
            order.number,
            len(created),
            remaining_total,
        )
        return result

    def _reconcile_with_credit_card(self, order: Order, amount: Decimal) -> None:
        """Make the order's single card payment cover exactly what store credit did not."""
        others = self.payment_repo.get_valid_non_store_credit_payments(order.id)  # type: ignore[arg-type]
        if len(others) > 1:
            raise MultiplePaymentsFound(len(others))
        if not others:
            return

        other = others[0]
        if (
            other.source_type != PaymentSourceType.CREDIT_CARD.value
            or other.credit_card_id is None
        ):
            raise UnexpectedPaymentSource(str(other.source_type))

        if amount <= 0:
            self.payment_repo.update_state(other, PaymentState.INVALID)
        else:
            self.payment_repo.update_amount(other, amount)
