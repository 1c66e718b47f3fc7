"""Tests for OrderService transitions and the order store credit summary."""

from decimal import Decimal

import pytest

from storecredit.core.config import settings
from storecredit.core.exceptions import InvalidOrderTransition
from storecredit.models.order import OrderState
from storecredit.models.payment import PaymentState
from storecredit.repositories.gift_card_repository import GiftCardRepository
from storecredit.repositories.notification_repository import NotificationRepository
from storecredit.repositories.payment_repository import PaymentRepository
from storecredit.schemas.order import LineItemCreate
from storecredit.schemas.payment import CardPaymentCreate, CreditCardCreate
from storecredit.services.order_service import UNABLE_TO_FUND, OrderService
from storecredit.services.payment_gateway import BogusGateway


class RecordingNotifier:
    def __init__(self, fail=False):
        self.issued = []
        self.fail = fail

    def gift_card_issued(self, gift_card):
        if self.fail:
            raise RuntimeError("mail server down")
        self.issued.append(gift_card.redemption_code)


@pytest.fixture
def service(db_session):
    return OrderService(db_session, gateway=BogusGateway(), notifier=RecordingNotifier())


class TestConfirm:
    def test_confirm_with_enough_store_credit(self, db_session, service, make_store_credit, make_order):
        make_store_credit("30.00")
        order = make_order("25.00")

        result = service.confirm(order.id)

        assert result.success
        assert result.errors == []
        assert result.order.state == OrderState.CONFIRM.value
        assert result.allocation.pending_total == Decimal("25.00")

    def test_shortfall_rolls_back_allocation(self, db_session, service, make_store_credit, make_order):
        credit = make_store_credit("10.00")
        order = make_order("25.00")

        result = service.confirm(order.id)

        assert not result.success
        assert result.errors == [UNABLE_TO_FUND]
        db_session.refresh(order)
        assert order.state == OrderState.PAYMENT.value
        assert PaymentRepository(db_session).get_by_order_id(order.id) == []
        db_session.refresh(credit)
        assert credit.amount_authorized == Decimal("0")
        assert credit.amount_remaining == Decimal("10.00")

    def test_shortfall_can_keep_partial_allocation(
        self, db_session, service, make_store_credit, make_order, monkeypatch
    ):
        monkeypatch.setattr(settings, "STORE_CREDIT_ROLLBACK_ON_SHORTFALL", False)
        credit = make_store_credit("10.00")
        order = make_order("25.00")

        result = service.confirm(order.id)

        assert not result.success
        db_session.refresh(order)
        assert order.state == OrderState.PAYMENT.value
        payments = PaymentRepository(db_session).get_by_order_id(order.id)
        assert [(p.amount, p.state) for p in payments] == [(Decimal("10.00"), "pending")]
        db_session.refresh(credit)
        assert credit.amount_authorized == Decimal("10.00")

    def test_card_payment_funds_the_rest(
        self, db_session, service, make_store_credit, make_order, make_card_payment
    ):
        make_store_credit("10.00")
        order = make_order("25.00")
        card_payment = make_card_payment(order, "25.00")

        result = service.confirm(order.id)

        assert result.success
        db_session.refresh(card_payment)
        assert card_payment.amount == Decimal("15.00")

    def test_confirm_from_wrong_state(self, db_session, service, make_order):
        order = make_order("25.00", state="cart")

        with pytest.raises(InvalidOrderTransition, match="Cannot confirm an order in state 'cart'"):
            service.confirm(order.id)


class TestComplete:
    def test_complete_authorizes_card(
        self, db_session, service, make_store_credit, make_order, make_card_payment
    ):
        make_store_credit("10.00")
        order = make_order("25.00")
        card_payment = make_card_payment(order, "25.00")
        service.confirm(order.id)

        result = service.complete(order.id)

        assert result.success
        assert result.order.state == OrderState.COMPLETE.value
        assert result.order.completed_at is not None
        db_session.refresh(card_payment)
        assert card_payment.state == PaymentState.PENDING.value
        assert card_payment.response_code.startswith("BGS-")

    def test_declined_card_keeps_order_in_confirm(
        self, db_session, service, make_store_credit, make_order, make_card_payment
    ):
        make_store_credit("10.00")
        order = make_order("25.00")
        card_payment = make_card_payment(order, "25.00", last_digits="0002")
        service.confirm(order.id)

        result = service.complete(order.id)

        assert not result.success
        assert result.errors == ["Bogus Gateway: Forced failure"]
        db_session.refresh(order)
        assert order.state == OrderState.CONFIRM.value
        db_session.refresh(card_payment)
        assert card_payment.state == PaymentState.FAILED.value

    def test_complete_requires_confirm(self, db_session, service, make_order):
        order = make_order("25.00")
        with pytest.raises(InvalidOrderTransition):
            service.complete(order.id)

    def test_gift_cards_issued_and_notified(self, db_session, make_store_credit, make_order):
        notifier = RecordingNotifier()
        service = OrderService(db_session, gateway=BogusGateway(), notifier=notifier)
        make_store_credit("100.00")
        order = make_order(
            None,
            line_items=[
                LineItemCreate(name="Gift card", price=Decimal("25.00"), quantity=2, gift_card=True),
                LineItemCreate(name="Mug", price=Decimal("10.00")),
            ],
        )
        service.confirm(order.id)

        assert service.complete(order.id).success

        gift_cards = GiftCardRepository(db_session).get_by_order_id(order.id)
        assert len(gift_cards) == 2
        assert all(g.amount == Decimal("25.00") for g in gift_cards)
        assert sorted(notifier.issued) == sorted(g.redemption_code for g in gift_cards)

    def test_notifier_failure_does_not_fail_completion(self, db_session, make_store_credit, make_order):
        service = OrderService(
            db_session, gateway=BogusGateway(), notifier=RecordingNotifier(fail=True)
        )
        make_store_credit("100.00")
        order = make_order(
            None,
            line_items=[LineItemCreate(name="Gift card", price=Decimal("25.00"), gift_card=True)],
        )
        service.confirm(order.id)

        result = service.complete(order.id)

        assert result.success
        assert len(GiftCardRepository(db_session).get_by_order_id(order.id)) == 1

    def test_default_notifier_records_notification(self, db_session, make_store_credit, make_order):
        service = OrderService(db_session, gateway=BogusGateway())
        make_store_credit("100.00")
        order = make_order(
            None,
            line_items=[LineItemCreate(name="Gift card", price=Decimal("25.00"), gift_card=True)],
        )
        service.confirm(order.id)
        service.complete(order.id)

        notifications = NotificationRepository(db_session).get_all(category="gift_card")
        assert len(notifications) == 1
        assert "$25.00" in notifications[0].message


class TestCancel:
    def test_cancel_releases_store_credit(
        self, db_session, service, make_store_credit, make_order, make_card_payment
    ):
        credit = make_store_credit("10.00")
        order = make_order("25.00")
        card_payment = make_card_payment(order, "25.00")
        service.confirm(order.id)

        result = service.cancel(order.id)

        assert result.success
        assert result.order.state == OrderState.CANCELED.value
        assert result.order.canceled_at is not None
        db_session.refresh(credit)
        assert credit.amount_authorized == Decimal("0")
        assert credit.amount_remaining == Decimal("10.00")
        store_credit_payment = PaymentRepository(db_session).get_store_credit_payments(order.id)[0]
        assert store_credit_payment.state == PaymentState.VOID.value
        db_session.refresh(card_payment)
        assert card_payment.state == PaymentState.INVALID.value

    def test_cannot_cancel_twice(self, db_session, service, make_order):
        order = make_order("25.00")
        service.cancel(order.id)

        with pytest.raises(InvalidOrderTransition):
            service.cancel(order.id)


class TestCardPayments:
    def test_add_card_payment(self, db_session, service, make_order):
        order = make_order("25.00")

        payment = service.add_card_payment(
            order.id,
            CardPaymentCreate(amount=Decimal("25.00"), credit_card=CreditCardCreate(last_digits="1111")),
        )

        assert payment.state == PaymentState.CHECKOUT.value
        assert payment.source_type == "credit_card"
        card = PaymentRepository(db_session).get_credit_card(payment.credit_card_id)
        assert card.last_digits == "1111"
        assert card.user_id == order.user_id


class TestStoreCreditSummary:
    def test_summary_before_confirm(self, db_session, service, make_store_credit, make_order):
        make_store_credit("30.00")
        order = make_order("25.00")

        summary = service.store_credit_summary(order)

        assert summary.covered_by_store_credit
        assert summary.total_available_store_credit == Decimal("30.00")
        assert summary.total_applicable_store_credit == Decimal("25.00")
        assert summary.order_total_after_store_credit == Decimal("0.00")
        assert summary.store_credit_remaining_after_capture == Decimal("5.00")
        assert summary.display_total_applicable_store_credit == "-$25.00"
        assert summary.display_total_available_store_credit == "$30.00"

    def test_summary_after_confirm(self, db_session, service, make_store_credit, make_order):
        make_store_credit("30.00")
        order = make_order("25.00")
        service.confirm(order.id)
        db_session.refresh(order)

        summary = service.store_credit_summary(order)

        assert summary.total_available_store_credit == Decimal("5.00")
        assert summary.total_applicable_store_credit == Decimal("25.00")
        assert summary.store_credit_remaining_after_capture == Decimal("5.00")

    def test_partial_coverage(self, db_session, service, make_store_credit, make_order):
        make_store_credit("10.00")
        order = make_order("25.00")

        summary = service.store_credit_summary(order)

        assert not summary.covered_by_store_credit
        assert summary.order_total_after_store_credit == Decimal("15.00")
        assert summary.display_order_total_after_store_credit == "$15.00"
        assert summary.store_credit_remaining_after_capture == Decimal("0.00")
