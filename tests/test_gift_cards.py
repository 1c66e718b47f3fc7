"""Tests for gift card redemption."""

from decimal import Decimal

import pytest

from storecredit.core.config import settings
from storecredit.core.exceptions import GiftCardAlreadyRedeemed, GiftCardNotFound
from storecredit.models.store_credit_event import OriginatorType, StoreCreditAction
from storecredit.repositories.gift_card_repository import (
    GiftCardRepository,
    generate_redemption_code,
)
from storecredit.repositories.store_credit_category_repository import (
    StoreCreditCategoryRepository,
)
from storecredit.repositories.store_credit_event_repository import StoreCreditEventRepository
from storecredit.schemas.order import LineItemCreate
from storecredit.services.gift_card_service import GiftCardService


@pytest.fixture
def gift_card(db_session, make_order):
    order = make_order(
        None,
        line_items=[LineItemCreate(name="Gift card", price=Decimal("50.00"), gift_card=True)],
    )
    cards = GiftCardService(db_session).create_for_order(order)
    return cards[0]


class TestCreateForOrder:
    def test_one_card_per_unit(self, db_session, make_order):
        order = make_order(
            None,
            line_items=[
                LineItemCreate(name="Gift card", price=Decimal("20.00"), quantity=3, gift_card=True),
                LineItemCreate(name="Shirt", price=Decimal("15.00")),
            ],
        )

        cards = GiftCardService(db_session).create_for_order(order)

        assert len(cards) == 3
        assert len({c.redemption_code for c in cards}) == 3
        assert all(c.amount == Decimal("20.00") and c.currency == "USD" for c in cards)
        assert all(not c.redeemed for c in cards)

    def test_redemption_code_format(self):
        code = generate_redemption_code()
        assert len(code) == 16
        assert code == code.upper()


class TestRedeem:
    def test_redeem_creates_store_credit(self, db_session, user, gift_card):
        credit = GiftCardService(db_session).redeem(gift_card.redemption_code, user.id)

        assert credit.user_id == user.id
        assert credit.amount == Decimal("50.00")
        assert credit.memo == f"Gift card {gift_card.redemption_code}"
        category = StoreCreditCategoryRepository(db_session).get_by_id(credit.category_id)
        assert category.name == settings.GIFT_CARD_CATEGORY_NAME

        db_session.refresh(gift_card)
        assert gift_card.redeemed
        assert gift_card.redeemer_id == user.id
        assert gift_card.store_credit_id == credit.id

        event = StoreCreditEventRepository(db_session).get_by_store_credit_id(credit.id)[0]
        assert event.action == StoreCreditAction.ALLOCATE.value
        assert event.originator_type == OriginatorType.SYSTEM.value

    def test_code_lookup_is_case_insensitive(self, db_session, user, gift_card):
        credit = GiftCardService(db_session).redeem(
            f"  {gift_card.redemption_code.lower()} ", user.id
        )
        assert credit.amount == Decimal("50.00")

    def test_redeem_twice(self, db_session, user, gift_card):
        service = GiftCardService(db_session)
        service.redeem(gift_card.redemption_code, user.id)

        with pytest.raises(GiftCardAlreadyRedeemed):
            service.redeem(gift_card.redemption_code, user.id)

    def test_unknown_code(self, db_session, user):
        with pytest.raises(GiftCardNotFound):
            GiftCardService(db_session).redeem("NOPE", user.id)

    def test_category_reused(self, db_session, user, make_order):
        order = make_order(
            None,
            line_items=[LineItemCreate(name="Gift card", price=Decimal("5.00"), quantity=2, gift_card=True)],
        )
        first, second = GiftCardService(db_session).create_for_order(order)
        service = GiftCardService(db_session)

        a = service.redeem(first.redemption_code, user.id)
        b = service.redeem(second.redemption_code, user.id)

        assert a.category_id == b.category_id
        assert len(GiftCardRepository(db_session).get_by_order_id(order.id)) == 2
