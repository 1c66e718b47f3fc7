"""Shared test fixtures for all test modules."""

import contextlib
from decimal import Decimal
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import storecredit.models  # noqa: F401
from storecredit.core import database as db_module
from storecredit.core.database import Base
from storecredit.models.payment import PaymentSourceType
from storecredit.repositories.order_repository import OrderRepository
from storecredit.repositories.payment_repository import PaymentRepository
from storecredit.repositories.user_repository import UserRepository
from storecredit.schemas.order import LineItemCreate, OrderCreate, OrderState
from storecredit.schemas.payment import CreditCardCreate
from storecredit.schemas.user import UserCreate
from storecredit.services.store_credit_service import StoreCreditService

# Create an in-memory SQLite engine with StaticPool so all connections
# share the same database state and there are no file-locking issues.
_test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_test_engine)


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and truncate all data after.

    Patches the module-level engine and SessionLocal so all application code
    uses the in-memory test database.
    """
    original_engine = db_module.engine
    original_session = db_module.SessionLocal
    db_module.engine = _test_engine
    db_module.SessionLocal = _TestSessionLocal

    Base.metadata.create_all(bind=_test_engine)

    yield
    with _test_engine.connect() as conn:
        conn.execute(text("PRAGMA foreign_keys = OFF"))
        for table in reversed(Base.metadata.sorted_tables):
            with contextlib.suppress(OperationalError):
                conn.execute(table.delete())
        conn.execute(text("PRAGMA foreign_keys = ON"))
        conn.commit()

    db_module.engine = original_engine
    db_module.SessionLocal = original_session


@pytest.fixture
def db_session():
    """Database session for direct service and repository testing."""
    session = _TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    from storecredit.main import app

    return TestClient(app)


@pytest.fixture
def admin(db_session):
    user = UserRepository(db_session).create(
        UserCreate(email=f"admin-{uuid4()}@example.com", name="Admin", is_admin=True)
    )
    db_session.commit()
    return user


@pytest.fixture
def admin_headers(admin):
    return {"X-Admin-User-Id": str(admin.id)}


@pytest.fixture
def user(db_session):
    user = UserRepository(db_session).create(
        UserCreate(email=f"shopper-{uuid4()}@example.com", name="Shopper")
    )
    db_session.commit()
    return user


@pytest.fixture
def make_store_credit(db_session, user):
    """Factory for committed store credits owned by ``user`` unless told otherwise."""

    def _make(amount="100.00", currency="USD", priority=1, owner=None, **kwargs):
        return StoreCreditService(db_session).create_store_credit(
            user_id=(owner or user).id,
            amount=Decimal(str(amount)),
            currency=currency,
            priority=priority,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_order(db_session, user):
    """Factory for committed orders waiting for payment."""

    def _make(total="50.00", currency="USD", owner=None, line_items=None, state=OrderState.PAYMENT):
        order = OrderRepository(db_session).create(
            OrderCreate(
                user_id=(owner or user).id,
                currency=currency,
                total=Decimal(str(total)) if total is not None else None,
                state=state,
                line_items=line_items or [LineItemCreate(name="Widget", price=Decimal(str(total or 0)))],
            )
        )
        db_session.commit()
        return order

    return _make


@pytest.fixture
def make_card_payment(db_session):
    """Factory for a committed checkout card payment on an order."""

    def _make(order, amount, last_digits="4242"):
        repo = PaymentRepository(db_session)
        card = repo.create_credit_card(
            CreditCardCreate(last_digits=last_digits, name="Test Card", cc_type="visa"),
            user_id=order.user_id,
        )
        payment = repo.create(
            order_id=order.id,
            amount=Decimal(str(amount)),
            source_type=PaymentSourceType.CREDIT_CARD,
            credit_card_id=card.id,
        )
        db_session.commit()
        return payment

    return _make
