"""Store credit ledger: the only code allowed to move store credit balances."""

import logging
import secrets
from dataclasses import dataclass
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from storecredit.core.exceptions import (
    AmountTooLow,
    CurrencyMismatch,
    CurrencyMissing,
    InsufficientFunds,
    InvalidAmount,
    OutstandingAuthorization,
    RefundExceedsCapture,
    StoreCreditInvalidated,
    StoreCreditValidationError,
    UnknownAuthorization,
)
from storecredit.core.money import to_money
from storecredit.models.shared import utc_now
from storecredit.models.store_credit import StoreCredit
from storecredit.models.store_credit_event import (
    OriginatorType,
    StoreCreditAction,
    StoreCreditEvent,
)
from storecredit.repositories.store_credit_category_repository import (
    StoreCreditCategoryRepository,
)
from storecredit.repositories.store_credit_event_repository import StoreCreditEventRepository
from storecredit.repositories.store_credit_repository import StoreCreditRepository
from storecredit.services.user_balance import UserBalanceService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminActor:
    """An administrator acting through the admin screens."""

    user_id: UUID


@dataclass(frozen=True)
class SystemActor:
    """The platform itself (checkout, gift card redemption, ...)."""


Originator = AdminActor | SystemActor

SYSTEM = SystemActor()


def originator_fields(originator: Originator) -> tuple[OriginatorType, UUID | None]:
    if isinstance(originator, AdminActor):
        return OriginatorType.ADMIN, originator.user_id
    return OriginatorType.SYSTEM, None


def generate_authorization_code(credit: StoreCredit) -> str:
    return f"{str(credit.id)[:8]}-SC-{secrets.token_hex(6)}"


class StoreCreditService:
    """State transitions over a single store credit's balance.

    Every transition re-reads the credit under a row lock, validates before
    touching anything and writes exactly one audit event. With
    ``autocommit=False`` the caller owns the transaction (the order allocator
    and capture orchestrator run several transitions as one unit).
    """

    def __init__(self, db: Session, autocommit: bool = True):
        self.db = db
        self.autocommit = autocommit
        self.credit_repo = StoreCreditRepository(db)
        self.event_repo = StoreCreditEventRepository(db)
        self.category_repo = StoreCreditCategoryRepository(db)
        self.balance = UserBalanceService(db)

    def create_store_credit(
        self,
        user_id: UUID,
        amount: Decimal,
        currency: str | None,
        category_id: UUID | None = None,
        memo: str | None = None,
        priority: int = 1,
        originator: Originator = SYSTEM,
    ) -> StoreCredit:
        """Issue a new store credit and record its allocation."""
        amount = to_money(amount)
        if amount < 0:
            raise InvalidAmount("Amount must be greater than or equal to 0")
        if not currency:
            raise CurrencyMissing()
        self._check_category(category_id)

        created_by_id = originator.user_id if isinstance(originator, AdminActor) else None
        credit = self.credit_repo.create(
            user_id=user_id,
            amount=amount,
            currency=currency.upper(),
            category_id=category_id,
            created_by_id=created_by_id,
            memo=memo,
            priority=priority,
        )
        self._record(credit, StoreCreditAction.ALLOCATE, amount, originator)
        self._finish()
        logger.info("Allocated %s %s store credit %s to user %s", amount, currency, credit.id, user_id)
        return credit

    def update_store_credit(
        self,
        credit: StoreCredit,
        changes: dict[str, Any],
        originator: Originator = SYSTEM,
    ) -> StoreCredit:
        """Apply an administrative edit of amount, category or memo.

        Nothing is written unless every change is valid.
        """
        credit = self._lock(credit)
        old_amount = to_money(credit.amount)
        new_amount = old_amount

        if changes.get("amount") is not None:
            new_amount = to_money(changes["amount"])
            used = to_money(credit.amount_used)
            if new_amount < 0:
                raise InvalidAmount("Amount must be greater than or equal to 0")
            if new_amount < used:
                raise AmountTooLow(new_amount, used)
            if new_amount < used + to_money(credit.amount_authorized):
                raise InvalidAmount(
                    "Amount cannot be less than the amount used plus the amount authorized"
                )
        if "category_id" in changes:
            self._check_category(changes["category_id"])

        credit.amount = new_amount  # type: ignore[assignment]
        if "category_id" in changes:
            credit.category_id = changes["category_id"]
        if "memo" in changes:
            credit.memo = changes["memo"]
        if isinstance(originator, AdminActor):
            credit.created_by_id = originator.user_id  # type: ignore[assignment]
        self._save(credit)

        delta = new_amount - old_amount
        if delta != 0:
            self._record(credit, StoreCreditAction.ADJUSTMENT, delta, originator)
        self._finish()
        return credit

    def validate_authorization(
        self,
        credit: StoreCredit,
        amount: Decimal,
        currency: str | None,
        originator: Originator = SYSTEM,
    ) -> StoreCreditEvent:
        """Check that an authorization would succeed and record the eligibility."""
        amount = to_money(amount)
        self._check_authorizable(credit, amount, currency)
        event = self._record(credit, StoreCreditAction.ELIGIBLE, amount, originator)
        self._finish()
        return event

    def authorize(
        self,
        credit: StoreCredit,
        amount: Decimal,
        currency: str | None,
        authorization_code: str | None = None,
        originator: Originator = SYSTEM,
    ) -> str:
        """Hold ``amount`` of the credit and return the authorization code.

        Re-authorizing with a code that is still outstanding returns it
        without placing a second hold.
        """
        amount = to_money(amount)
        credit = self._lock(credit)
        if authorization_code and self._held_amount(credit, authorization_code) is not None:
            return authorization_code
        self._check_authorizable(credit, amount, currency)

        code = authorization_code or generate_authorization_code(credit)
        credit.amount_authorized = to_money(credit.amount_authorized) + amount  # type: ignore[assignment]
        self._save(credit)
        self._record(credit, StoreCreditAction.AUTHORIZE, amount, originator, code)
        self._finish()
        logger.info("Authorized %s on store credit %s (%s)", amount, credit.id, code)
        return code

    def capture(
        self,
        credit: StoreCredit,
        authorization_code: str | None,
        amount: Decimal,
        originator: Originator = SYSTEM,
    ) -> StoreCredit:
        """Settle an authorization: the hold is released and ``amount`` becomes used."""
        amount = to_money(amount)
        credit = self._lock(credit)
        held = self._held_amount(credit, authorization_code) if authorization_code else None
        if held is None:
            raise UnknownAuthorization(authorization_code)
        if amount <= 0:
            raise InvalidAmount("Capture amount must be greater than 0")
        if amount > held:
            raise InsufficientFunds(amount, held)

        credit.amount_authorized = to_money(credit.amount_authorized) - held  # type: ignore[assignment]
        credit.amount_used = to_money(credit.amount_used) + amount  # type: ignore[assignment]
        self._save(credit)
        self._record(credit, StoreCreditAction.CAPTURE, amount, originator, authorization_code)
        self._finish()
        logger.info("Captured %s on store credit %s (%s)", amount, credit.id, authorization_code)
        return credit

    def void(
        self,
        credit: StoreCredit,
        authorization_code: str | None,
        originator: Originator = SYSTEM,
    ) -> StoreCredit:
        """Release an outstanding authorization without using any balance."""
        credit = self._lock(credit)
        held = self._held_amount(credit, authorization_code) if authorization_code else None
        if held is None:
            raise UnknownAuthorization(authorization_code)

        credit.amount_authorized = to_money(credit.amount_authorized) - held  # type: ignore[assignment]
        self._save(credit)
        self._record(credit, StoreCreditAction.VOID, held, originator, authorization_code)
        self._finish()
        logger.info("Voided %s on store credit %s (%s)", held, credit.id, authorization_code)
        return credit

    def credit(
        self,
        credit: StoreCredit,
        amount: Decimal,
        currency: str | None,
        authorization_code: str | None = None,
        originator: Originator = SYSTEM,
    ) -> StoreCredit:
        """Give balance back, e.g. for a refund.

        The used amount is restored first; anything beyond it raises the face
        value. When an authorization code is given the credit is limited to
        what was captured under that code and not credited back yet.
        """
        amount = to_money(amount)
        credit = self._lock(credit)
        if amount <= 0:
            raise InvalidAmount("Credit amount must be greater than 0")
        if not currency:
            raise CurrencyMissing()
        if currency.upper() != credit.currency:
            raise CurrencyMismatch(str(credit.currency), currency)
        if authorization_code:
            refundable = self._refundable_amount(credit, authorization_code)
            if refundable is None:
                raise UnknownAuthorization(authorization_code)
            if amount > refundable:
                raise RefundExceedsCapture(authorization_code)

        used = to_money(credit.amount_used)
        restored = min(used, amount)
        credit.amount_used = used - restored  # type: ignore[assignment]
        credit.amount = to_money(credit.amount) + (amount - restored)  # type: ignore[assignment]
        self._save(credit)
        self._record(credit, StoreCreditAction.CREDIT, amount, originator, authorization_code)
        self._finish()
        logger.info("Credited %s back to store credit %s", amount, credit.id)
        return credit

    def invalidate(self, credit: StoreCredit) -> StoreCredit:
        """Soft-delete a credit; refused while any authorization is outstanding."""
        credit = self._lock(credit)
        if to_money(credit.amount_authorized) > 0:
            raise OutstandingAuthorization()
        if credit.invalidated_at is None:
            credit.invalidated_at = utc_now()  # type: ignore[assignment]
            self._save(credit)
            logger.info("Invalidated store credit %s", credit.id)
        self._finish()
        return credit

    def delete_event(self, event_id: UUID) -> StoreCreditEvent | None:
        """Retire an event from normal listings; it stays in the audit history."""
        event = self.event_repo.soft_delete(event_id)
        self._finish()
        return event

    def _lock(self, credit: StoreCredit) -> StoreCredit:
        locked = self.credit_repo.get_for_update(credit.id)  # type: ignore[arg-type]
        if locked is None:
            raise StoreCreditValidationError(f"Store credit {credit.id} not found")
        return locked

    def _save(self, credit: StoreCredit) -> None:
        try:
            self.credit_repo.save(credit)
        except StaleDataError:
            logger.warning("Concurrent update detected on store credit %s", credit.id)
            self.db.rollback()
            raise

    def _finish(self) -> None:
        if self.autocommit:
            self.db.commit()

    def _check_category(self, category_id: UUID | None) -> None:
        if category_id is not None and self.category_repo.get_by_id(category_id) is None:
            raise StoreCreditValidationError(f"Store credit category {category_id} not found")

    def _check_authorizable(
        self, credit: StoreCredit, amount: Decimal, currency: str | None
    ) -> None:
        if not currency:
            raise CurrencyMissing()
        if currency.upper() != credit.currency:
            raise CurrencyMismatch(str(credit.currency), currency)
        if amount <= 0:
            raise InvalidAmount("Authorization amount must be greater than 0")
        if credit.invalidated_at is not None:
            raise StoreCreditInvalidated()
        if amount > credit.amount_remaining:
            raise InsufficientFunds(amount, credit.amount_remaining)

    def _held_amount(self, credit: StoreCredit, authorization_code: str) -> Decimal | None:
        """Amount still held under ``authorization_code``; None if nothing is outstanding."""
        held: Decimal | None = None
        for event in self.event_repo.get_by_authorization_code(credit.id, authorization_code):  # type: ignore[arg-type]
            if event.action == StoreCreditAction.AUTHORIZE.value:
                held = to_money(event.amount)
            elif event.action in (StoreCreditAction.CAPTURE.value, StoreCreditAction.VOID.value):
                held = None
        return held

    def _refundable_amount(self, credit: StoreCredit, authorization_code: str) -> Decimal | None:
        """Captured minus already credited under a code; None if nothing was captured."""
        captured = Decimal("0")
        credited = Decimal("0")
        seen_capture = False
        for event in self.event_repo.get_by_authorization_code(credit.id, authorization_code):  # type: ignore[arg-type]
            if event.action == StoreCreditAction.CAPTURE.value:
                captured += to_money(event.amount)
                seen_capture = True
            elif event.action == StoreCreditAction.CREDIT.value:
                credited += to_money(event.amount)
        if not seen_capture:
            return None
        return captured - credited

    def _record(
        self,
        credit: StoreCredit,
        action: StoreCreditAction,
        amount: Decimal,
        originator: Originator,
        authorization_code: str | None = None,
    ) -> StoreCreditEvent:
        originator_type, originator_id = originator_fields(originator)
        user_total = self.balance.total_available_store_credit(
            credit.user_id, currency=credit.currency  # type: ignore[arg-type]
        )
        return self.event_repo.create(
            store_credit_id=credit.id,  # type: ignore[arg-type]
            action=action,
            amount=amount,
            user_total_amount=user_total,
            originator_type=originator_type,
            originator_id=originator_id,
            authorization_code=authorization_code,
        )
