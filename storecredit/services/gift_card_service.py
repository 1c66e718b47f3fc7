"""Gift cards bought with an order and redeemed into store credit."""

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from storecredit.core.config import settings
from storecredit.core.exceptions import GiftCardAlreadyRedeemed, GiftCardNotFound
from storecredit.core.money import to_money
from storecredit.models.gift_card import GiftCard
from storecredit.models.order import Order
from storecredit.models.shared import utc_now
from storecredit.models.store_credit import StoreCredit
from storecredit.repositories.gift_card_repository import GiftCardRepository
from storecredit.repositories.order_repository import OrderRepository
from storecredit.repositories.store_credit_category_repository import (
    StoreCreditCategoryRepository,
)
from storecredit.services.store_credit_service import SYSTEM, StoreCreditService

logger = logging.getLogger(__name__)


class GiftCardService:
    def __init__(self, db: Session, autocommit: bool = True):
        self.db = db
        self.autocommit = autocommit
        self.repo = GiftCardRepository(db)
        self.order_repo = OrderRepository(db)
        self.category_repo = StoreCreditCategoryRepository(db)
        self.ledger = StoreCreditService(db, autocommit=False)

    def create_for_order(self, order: Order) -> list[GiftCard]:
        """One gift card per unit of every gift card line item."""
        gift_cards = []
        for item in self.order_repo.get_line_items(order.id):  # type: ignore[arg-type]
            if not item.gift_card:
                continue
            for _ in range(int(item.quantity)):
                gift_cards.append(
                    self.repo.create(
                        order_id=order.id,  # type: ignore[arg-type]
                        amount=to_money(item.price),
                        currency=str(order.currency),
                        purchaser_id=order.user_id,  # type: ignore[arg-type]
                        line_item_id=item.id,  # type: ignore[arg-type]
                    )
                )
        if gift_cards:
            logger.info("Issued %d gift cards for order %s", len(gift_cards), order.number)
        if self.autocommit:
            self.db.commit()
        return gift_cards

    def redeem(self, redemption_code: str, user_id: UUID) -> StoreCredit:
        """Turn a gift card into a store credit owned by ``user_id``."""
        gift_card = self.repo.get_by_redemption_code(redemption_code)
        if gift_card is None:
            raise GiftCardNotFound(redemption_code)
        if gift_card.redeemed:
            raise GiftCardAlreadyRedeemed(redemption_code)

        category = self.category_repo.get_or_create(settings.GIFT_CARD_CATEGORY_NAME)
        credit = self.ledger.create_store_credit(
            user_id=user_id,
            amount=to_money(gift_card.amount),
            currency=str(gift_card.currency),
            category_id=category.id,  # type: ignore[arg-type]
            memo=f"Gift card {gift_card.redemption_code}",
            originator=SYSTEM,
        )
        gift_card.redeemer_id = user_id  # type: ignore[assignment]
        gift_card.redeemed_at = utc_now()  # type: ignore[assignment]
        gift_card.store_credit_id = credit.id
        self.db.flush()
        if self.autocommit:
            self.db.commit()
        logger.info("Gift card %s redeemed by user %s", gift_card.id, user_id)
        return credit
