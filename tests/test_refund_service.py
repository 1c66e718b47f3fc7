"""Tests for RefundService."""

from decimal import Decimal
from uuid import uuid4

import pytest

from storecredit.core.exceptions import InvalidAmount, StoreCreditValidationError
from storecredit.models.store_credit_event import StoreCreditAction
from storecredit.repositories.payment_repository import PaymentRepository
from storecredit.repositories.store_credit_event_repository import StoreCreditEventRepository
from storecredit.services.order_service import OrderService
from storecredit.services.payment_gateway import BogusGateway, GatewayError, GatewayResponse
from storecredit.services.refund_service import RefundService


@pytest.fixture
def captured_order(db_session, make_store_credit, make_order, make_card_payment):
    """An order paid 10.00 by store credit and 15.00 by card, fully captured."""
    credit = make_store_credit("10.00")
    order = make_order("25.00")
    make_card_payment(order, "25.00")
    service = OrderService(db_session, gateway=BogusGateway())
    service.confirm(order.id)
    service.complete(order.id)
    assert service.capture(order.id).succeeded
    return order, credit


def _payment(db_session, order, source_type):
    return next(
        p
        for p in PaymentRepository(db_session).get_by_order_id(order.id)
        if p.source_type == source_type
    )


class DecliningGateway(BogusGateway):
    def credit(self, amount, authorization, currency):
        return GatewayResponse(success=False, message="Refund declined by issuer")


class TestRefundService:
    def test_store_credit_refund_restores_balance(self, db_session, captured_order):
        order, credit = captured_order
        payment = _payment(db_session, order, "store_credit")

        RefundService(db_session, gateway=BogusGateway()).refund_payment(payment.id, Decimal("4.00"))

        db_session.refresh(credit)
        assert credit.amount_used == Decimal("6.00")
        assert credit.amount_remaining == Decimal("4.00")
        event = StoreCreditEventRepository(db_session).get_by_store_credit_id(credit.id)[0]
        assert event.action == StoreCreditAction.CREDIT.value
        assert event.authorization_code == payment.response_code

    def test_store_credit_refund_cannot_exceed_capture(self, db_session, captured_order):
        order, credit = captured_order
        payment = _payment(db_session, order, "store_credit")
        service = RefundService(db_session, gateway=BogusGateway())
        service.refund_payment(payment.id, Decimal("10.00"))

        with pytest.raises(InvalidAmount, match="exceeds the refundable amount 0.00"):
            service.refund_payment(payment.id, Decimal("1.00"))
        db_session.refresh(credit)
        assert credit.amount_used == Decimal("0.00")

    def test_card_refund_goes_through_gateway(self, db_session, captured_order):
        order, _ = captured_order
        payment = _payment(db_session, order, "credit_card")

        refunded = RefundService(db_session, gateway=BogusGateway()).refund_payment(
            payment.id, Decimal("15.00")
        )

        assert refunded.id == payment.id
        assert refunded.amount_refunded == Decimal("15.00")

    def test_card_refunds_are_limited_to_the_payment(self, db_session, captured_order):
        order, _ = captured_order
        payment = _payment(db_session, order, "credit_card")
        service = RefundService(db_session, gateway=BogusGateway())
        service.refund_payment(payment.id, Decimal("10.00"))

        with pytest.raises(InvalidAmount, match="exceeds the refundable amount 5.00"):
            service.refund_payment(payment.id, Decimal("5.01"))

        service.refund_payment(payment.id, Decimal("5.00"))
        with pytest.raises(InvalidAmount):
            service.refund_payment(payment.id, Decimal("15.00"))
        db_session.refresh(payment)
        assert payment.amount_refunded == Decimal("15.00")

    def test_declined_card_refund_is_not_counted(self, db_session, captured_order):
        order, _ = captured_order
        payment = _payment(db_session, order, "credit_card")

        with pytest.raises(GatewayError):
            RefundService(db_session, gateway=DecliningGateway()).refund_payment(
                payment.id, Decimal("15.00")
            )

        db_session.refresh(payment)
        assert payment.amount_refunded == Decimal("0")

    def test_declined_card_refund(self, db_session, captured_order):
        order, _ = captured_order
        payment = _payment(db_session, order, "credit_card")

        with pytest.raises(GatewayError, match="declined by issuer"):
            RefundService(db_session, gateway=DecliningGateway()).refund_payment(
                payment.id, Decimal("5.00")
            )

    def test_amount_above_payment(self, db_session, captured_order):
        order, _ = captured_order
        payment = _payment(db_session, order, "credit_card")

        with pytest.raises(InvalidAmount):
            RefundService(db_session, gateway=BogusGateway()).refund_payment(
                payment.id, Decimal("15.01")
            )

    def test_pending_payment_not_refundable(self, db_session, make_store_credit, make_order):
        make_store_credit("30.00")
        order = make_order("25.00")
        OrderService(db_session, gateway=BogusGateway()).confirm(order.id)
        payment = PaymentRepository(db_session).get_by_order_id(order.id)[0]

        with pytest.raises(StoreCreditValidationError, match="Only completed payments"):
            RefundService(db_session, gateway=BogusGateway()).refund_payment(
                payment.id, Decimal("1.00")
            )

    def test_unknown_payment(self, db_session):
        with pytest.raises(StoreCreditValidationError, match="not found"):
            RefundService(db_session, gateway=BogusGateway()).refund_payment(uuid4(), Decimal("1"))
