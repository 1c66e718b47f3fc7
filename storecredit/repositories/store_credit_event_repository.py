"""StoreCreditEvent repository for data access."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from storecredit.models.order import Order
from storecredit.models.payment import Payment
from storecredit.models.shared import utc_now
from storecredit.models.store_credit import StoreCredit
from storecredit.models.store_credit_event import (
    INTERNAL_ACTIONS,
    OriginatorType,
    StoreCreditAction,
    StoreCreditEvent,
)


class StoreCreditEventRepository:
    """Append-only access to store credit events.

    Events are never updated; ``soft_delete`` only flips the deleted flag.
    """

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        store_credit_id: UUID,
        action: StoreCreditAction,
        amount: Decimal,
        user_total_amount: Decimal,
        originator_type: OriginatorType = OriginatorType.SYSTEM,
        originator_id: UUID | None = None,
        authorization_code: str | None = None,
    ) -> StoreCreditEvent:
        last = (
            self.db.query(func.max(StoreCreditEvent.sequence))
            .filter(StoreCreditEvent.store_credit_id == store_credit_id)
            .scalar()
        )
        event = StoreCreditEvent(
            store_credit_id=store_credit_id,
            sequence=(last or 0) + 1,
            action=action.value,
            amount=amount,
            user_total_amount=user_total_amount,
            originator_type=originator_type.value,
            originator_id=originator_id,
            authorization_code=authorization_code,
        )
        self.db.add(event)
        self.db.flush()
        self.db.refresh(event)
        return event

    def get_by_id(self, event_id: UUID) -> StoreCreditEvent | None:
        return self.db.query(StoreCreditEvent).filter(StoreCreditEvent.id == event_id).first()

    def get_by_store_credit_id(
        self, store_credit_id: UUID, include_deleted: bool = False
    ) -> list[StoreCreditEvent]:
        """Get a store credit's events, newest first."""
        query = self.db.query(StoreCreditEvent).filter(
            StoreCreditEvent.store_credit_id == store_credit_id
        )
        if not include_deleted:
            query = query.filter(StoreCreditEvent.deleted.is_(False))
        return query.order_by(StoreCreditEvent.sequence.desc()).all()

    def get_exposed_by_store_credit_id(self, store_credit_id: UUID) -> list[StoreCreditEvent]:
        """Get the user-facing events of a store credit, newest first."""
        return (
            self.db.query(StoreCreditEvent)
            .filter(
                StoreCreditEvent.store_credit_id == store_credit_id,
                StoreCreditEvent.deleted.is_(False),
                StoreCreditEvent.action.notin_(INTERNAL_ACTIONS),
            )
            .order_by(StoreCreditEvent.sequence.desc())
            .all()
        )

    def get_by_user_id(self, user_id: UUID) -> list[StoreCreditEvent]:
        """Get the user-facing events across all of a user's store credits, newest first."""
        return (
            self.db.query(StoreCreditEvent)
            .join(StoreCredit, StoreCredit.id == StoreCreditEvent.store_credit_id)
            .filter(
                StoreCredit.user_id == user_id,
                StoreCreditEvent.deleted.is_(False),
                StoreCreditEvent.action.notin_(INTERNAL_ACTIONS),
            )
            .order_by(StoreCreditEvent.created_at.desc(), StoreCreditEvent.sequence.desc())
            .all()
        )

    def get_by_authorization_code(
        self, store_credit_id: UUID, authorization_code: str
    ) -> list[StoreCreditEvent]:
        """Get every event correlated to an authorization code, oldest first."""
        return (
            self.db.query(StoreCreditEvent)
            .filter(
                StoreCreditEvent.store_credit_id == store_credit_id,
                StoreCreditEvent.authorization_code == authorization_code,
            )
            .order_by(StoreCreditEvent.sequence.asc())
            .all()
        )

    def get_order(self, event: StoreCreditEvent) -> Order | None:
        """Find the order whose payment carries the event's authorization code."""
        if not event.authorization_code:
            return None
        return (
            self.db.query(Order)
            .join(Payment, Payment.order_id == Order.id)
            .filter(Payment.response_code == event.authorization_code)
            .first()
        )

    def soft_delete(self, event_id: UUID) -> StoreCreditEvent | None:
        event = self.get_by_id(event_id)
        if not event:
            return None
        if not event.deleted:
            event.deleted = True  # type: ignore[assignment]
            event.deleted_at = utc_now()  # type: ignore[assignment]
            self.db.flush()
        return event
