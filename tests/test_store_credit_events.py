"""Tests for the store credit event log."""

from decimal import Decimal
from uuid import uuid4

import pytest

from storecredit.core.exceptions import UnknownAuthorization
from storecredit.models.store_credit_event import StoreCreditAction
from storecredit.repositories.store_credit_event_repository import StoreCreditEventRepository
from storecredit.schemas.store_credit_event import display_action
from storecredit.services.payment_allocation import StoreCreditAllocator
from storecredit.services.store_credit_service import StoreCreditService


class TestEventListing:
    def test_exposed_events_hide_internal_actions(self, db_session, make_store_credit):
        credit = make_store_credit("100.00")
        service = StoreCreditService(db_session)
        service.validate_authorization(credit, Decimal("10"), "USD")
        code = service.authorize(credit, Decimal("10"), "USD")
        service.capture(credit, code, Decimal("10"))

        repo = StoreCreditEventRepository(db_session)
        all_actions = [e.action for e in repo.get_by_store_credit_id(credit.id)]
        exposed = [e.action for e in repo.get_exposed_by_store_credit_id(credit.id)]

        assert all_actions == ["capture", "authorize", "eligible", "allocate"]
        assert exposed == ["capture", "allocate"]

    def test_user_events_span_all_credits(self, db_session, user, make_store_credit):
        first = make_store_credit("10.00")
        second = make_store_credit("20.00")
        StoreCreditService(db_session).authorize(first, Decimal("5"), "USD")

        events = StoreCreditEventRepository(db_session).get_by_user_id(user.id)

        assert {e.store_credit_id for e in events} == {first.id, second.id}
        assert all(e.action == StoreCreditAction.ALLOCATE.value for e in events)

    def test_snapshot_tracks_running_total(self, db_session, make_store_credit):
        credit = make_store_credit("100.00")
        service = StoreCreditService(db_session)
        code = service.authorize(credit, Decimal("30"), "USD")
        service.capture(credit, code, Decimal("30"))
        service.credit(credit, Decimal("10"), "USD", authorization_code=code)

        events = list(
            reversed(StoreCreditEventRepository(db_session).get_by_store_credit_id(credit.id))
        )
        totals = [(e.action, e.user_total_amount) for e in events]
        assert totals == [
            ("allocate", Decimal("100.00")),
            ("authorize", Decimal("70.00")),
            ("capture", Decimal("70.00")),
            ("credit", Decimal("80.00")),
        ]


class TestSoftDelete:
    def test_deleted_event_is_hidden_but_kept(self, db_session, make_store_credit):
        credit = make_store_credit("100.00")
        repo = StoreCreditEventRepository(db_session)
        event = repo.get_by_store_credit_id(credit.id)[0]

        StoreCreditService(db_session).delete_event(event.id)

        assert repo.get_by_store_credit_id(credit.id) == []
        assert repo.get_exposed_by_store_credit_id(credit.id) == []
        kept = repo.get_by_store_credit_id(credit.id, include_deleted=True)
        assert len(kept) == 1
        assert kept[0].deleted
        assert kept[0].deleted_at is not None

    def test_delete_missing_event(self, db_session):
        assert StoreCreditService(db_session).delete_event(uuid4()) is None


class TestEventOrder:
    def test_authorization_event_links_to_order(self, db_session, make_store_credit, make_order):
        credit = make_store_credit("100.00")
        order = make_order("40.00")
        StoreCreditAllocator(db_session).allocate(order)
        db_session.commit()

        repo = StoreCreditEventRepository(db_session)
        authorize = next(
            e for e in repo.get_by_store_credit_id(credit.id) if e.action == "authorize"
        )
        allocate = next(
            e for e in repo.get_by_store_credit_id(credit.id) if e.action == "allocate"
        )

        assert repo.get_order(authorize).id == order.id
        assert repo.get_order(allocate) is None


class TestEventSequence:
    def test_events_are_numbered_per_credit(self, db_session, make_store_credit):
        first = make_store_credit("100.00")
        second = make_store_credit("50.00")
        service = StoreCreditService(db_session)
        code = service.authorize(first, Decimal("30"), "USD")
        service.void(first, code)

        repo = StoreCreditEventRepository(db_session)
        assert [e.sequence for e in repo.get_by_store_credit_id(first.id)] == [3, 2, 1]
        assert [e.sequence for e in repo.get_by_store_credit_id(second.id)] == [1]

    def test_same_timestamp_keeps_log_order(self, db_session, make_store_credit):
        credit = make_store_credit("100.00")
        service = StoreCreditService(db_session)
        code = service.authorize(credit, Decimal("30"), "USD")
        service.void(credit, code)
        repo = StoreCreditEventRepository(db_session)
        events = repo.get_by_store_credit_id(credit.id)
        stamp = events[-1].created_at
        for event in events:
            event.created_at = stamp
        db_session.commit()

        ordered = repo.get_by_authorization_code(credit.id, code)

        assert [e.action for e in ordered] == ["authorize", "void"]
        with pytest.raises(UnknownAuthorization):
            service.capture(credit, code, Decimal("30"))


class TestDisplayAction:
    def test_labels(self):
        assert display_action("allocate") == "Added"
        assert display_action("capture") == "Used"
        assert display_action("void") == "Credit"
        assert display_action("credit") == "Credit"
        assert display_action("adjustment") == "Adjustment"
        assert display_action("authorize") == "Authorized"
