"""Service for creating and managing in-app notifications."""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from sqlalchemy.orm import Session

from storecredit.core.money import format_money
from storecredit.models.gift_card import GiftCard
from storecredit.models.notification import Notification
from storecredit.repositories.notification_repository import NotificationRepository

# Notification categories
CATEGORY_GIFT_CARD = "gift_card"


class GiftCardNotifier(Protocol):
    """Collaborator told about every gift card issued by a completed order."""

    def gift_card_issued(self, gift_card: GiftCard) -> None: ...


class NotificationService:
    """Service for creating in-app notifications from system events."""

    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificationRepository(db)

    def notify(
        self,
        *,
        category: str,
        title: str,
        message: str,
        resource_type: str | None = None,
        resource_id: UUID | None = None,
    ) -> Notification:
        """Create a notification."""
        return self.repo.create(
            category=category,
            title=title,
            message=message,
            resource_type=resource_type,
            resource_id=resource_id,
        )

    def gift_card_issued(self, gift_card: GiftCard) -> None:
        amount = format_money(gift_card.amount, str(gift_card.currency))
        self.notify(
            category=CATEGORY_GIFT_CARD,
            title="Gift card issued",
            message=f"A {amount} gift card was issued. Redemption code: {gift_card.redemption_code}.",
            resource_type="gift_card",
            resource_id=gift_card.id,
        )
