"""Aggregate store credit balance for a user."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from storecredit.models.store_credit import StoreCredit
from storecredit.repositories.store_credit_repository import StoreCreditRepository


class UserBalanceService:
    """Read-only view over a user's store credits."""

    def __init__(self, db: Session):
        self.db = db
        self.credit_repo = StoreCreditRepository(db)

    def store_credits(self, user_id: UUID, currency: str | None = None) -> list[StoreCredit]:
        """Usable (non-invalidated) credits in the order they are drawn from."""
        return self.credit_repo.get_usable_by_user_id(user_id, currency=currency)

    def total_available_store_credit(self, user_id: UUID, currency: str | None = None) -> Decimal:
        """Sum of amount_remaining across the user's usable credits."""
        return sum(
            (credit.amount_remaining for credit in self.store_credits(user_id, currency)),
            Decimal("0"),
        )
