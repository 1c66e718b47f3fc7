"""GiftCard repository for data access."""

import secrets
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from storecredit.models.gift_card import GiftCard


def generate_redemption_code() -> str:
    return secrets.token_hex(8).upper()


class GiftCardRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_redemption_code(self, redemption_code: str) -> GiftCard | None:
        return (
            self.db.query(GiftCard)
            .filter(GiftCard.redemption_code == redemption_code.strip().upper())
            .first()
        )

    def get_by_order_id(self, order_id: UUID) -> list[GiftCard]:
        return (
            self.db.query(GiftCard)
            .filter(GiftCard.order_id == order_id)
            .order_by(GiftCard.created_at.asc())
            .all()
        )

    def create(
        self,
        order_id: UUID,
        amount: Decimal,
        currency: str,
        purchaser_id: UUID | None = None,
        line_item_id: UUID | None = None,
    ) -> GiftCard:
        gift_card = GiftCard(
            order_id=order_id,
            line_item_id=line_item_id,
            purchaser_id=purchaser_id,
            amount=amount,
            currency=currency,
            redemption_code=generate_redemption_code(),
        )
        self.db.add(gift_card)
        self.db.flush()
        self.db.refresh(gift_card)
        return gift_card
