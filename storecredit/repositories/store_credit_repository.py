"""StoreCredit repository for data access."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from storecredit.models.store_credit import StoreCredit


class StoreCreditRepository:
    """Repository for StoreCredit model.

    Writes only flush; the calling service owns the transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, store_credit_id: UUID) -> StoreCredit | None:
        """Get a store credit by ID."""
        return self.db.query(StoreCredit).filter(StoreCredit.id == store_credit_id).first()

    def get_for_update(self, store_credit_id: UUID) -> StoreCredit | None:
        """Re-read a store credit under a row lock, discarding any stale in-session state."""
        return (
            self.db.query(StoreCredit)
            .filter(StoreCredit.id == store_credit_id)
            .populate_existing()
            .with_for_update()
            .first()
        )

    def get_by_user_id(self, user_id: UUID) -> list[StoreCredit]:
        """Get all of a user's store credits, newest first (admin listing)."""
        return (
            self.db.query(StoreCredit)
            .filter(StoreCredit.user_id == user_id)
            .order_by(StoreCredit.created_at.desc())
            .all()
        )

    def get_usable_by_user_id(self, user_id: UUID, currency: str | None = None) -> list[StoreCredit]:
        """Get a user's non-invalidated store credits in allocation order.

        Priority ASC, then created_at ASC, then id so the order is total.
        """
        query = self.db.query(StoreCredit).filter(
            StoreCredit.user_id == user_id,
            StoreCredit.invalidated_at.is_(None),
        )
        if currency:
            query = query.filter(StoreCredit.currency == currency)
        return query.order_by(
            StoreCredit.priority.asc(),
            StoreCredit.created_at.asc(),
            StoreCredit.id.asc(),
        ).all()

    def create(
        self,
        user_id: UUID,
        amount: Decimal,
        currency: str,
        category_id: UUID | None = None,
        created_by_id: UUID | None = None,
        memo: str | None = None,
        priority: int = 1,
    ) -> StoreCredit:
        """Create a new store credit with nothing used or authorized."""
        credit = StoreCredit(
            user_id=user_id,
            amount=amount,
            amount_used=Decimal("0"),
            amount_authorized=Decimal("0"),
            currency=currency,
            category_id=category_id,
            created_by_id=created_by_id,
            memo=memo,
            priority=priority,
        )
        self.db.add(credit)
        self.db.flush()
        self.db.refresh(credit)
        return credit

    def save(self, credit: StoreCredit) -> StoreCredit:
        """Flush pending changes; raises StaleDataError if another writer got there first."""
        self.db.flush()
        self.db.refresh(credit)
        return credit
