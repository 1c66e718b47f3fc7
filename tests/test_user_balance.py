"""Tests for UserBalanceService."""

from decimal import Decimal
from uuid import uuid4

from storecredit.services.store_credit_service import StoreCreditService
from storecredit.services.user_balance import UserBalanceService


class TestUserBalance:
    def test_no_credits(self, db_session, user):
        assert UserBalanceService(db_session).total_available_store_credit(user.id) == Decimal("0")

    def test_unknown_user(self, db_session):
        assert UserBalanceService(db_session).total_available_store_credit(uuid4()) == Decimal("0")

    def test_sums_remaining_amounts(self, db_session, user, make_store_credit):
        first = make_store_credit("100.00")
        make_store_credit("25.50")
        service = StoreCreditService(db_session)
        code = service.authorize(first, Decimal("30"), "USD")
        service.capture(first, code, Decimal("20"))
        service.authorize(first, Decimal("5"), "USD")

        total = UserBalanceService(db_session).total_available_store_credit(user.id)

        assert total == Decimal("100.50")

    def test_invalidated_credits_excluded(self, db_session, user, make_store_credit):
        make_store_credit("40.00")
        invalidated = make_store_credit("60.00")
        StoreCreditService(db_session).invalidate(invalidated)

        balance = UserBalanceService(db_session)
        assert balance.total_available_store_credit(user.id) == Decimal("40.00")
        assert len(balance.store_credits(user.id)) == 1

    def test_currency_filter(self, db_session, user, make_store_credit):
        make_store_credit("40.00")
        make_store_credit("15.00", currency="EUR")

        balance = UserBalanceService(db_session)
        assert balance.total_available_store_credit(user.id, currency="USD") == Decimal("40.00")
        assert balance.total_available_store_credit(user.id, currency="EUR") == Decimal("15.00")

    def test_other_users_not_counted(self, db_session, user, admin, make_store_credit):
        make_store_credit("40.00")
        make_store_credit("99.00", owner=admin)

        assert UserBalanceService(db_session).total_available_store_credit(user.id) == Decimal("40.00")
