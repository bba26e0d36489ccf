"""
Test configuration.

Every test gets its own SQLite database file and an application built with
fake payment processor and identity provider clients.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from config import Settings
from database import build_engine, build_session_factory, init_db, session_scope
from main import create_app
from models import Invoice, InvoiceStatus, Practice, User, UserRole
from tests.helpers import (
    AUTH_USER_ID,
    JWT_SECRET,
    OTHER_AUTH_USER_ID,
    WEBHOOK_SECRET,
    FakeGateway,
    FakeIdentityClient,
    make_token,
)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        environment="test",
        log_level="WARNING",
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        stripe_secret_key="sk_test_123",
        stripe_webhook_secret=WEBHOOK_SECRET,
        idp_url="https://idp.example.test",
        idp_jwt_secret=JWT_SECRET,
    )


@pytest.fixture
def engine(settings):
    engine = build_engine(settings.database_url)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def seed(session_factory):
    """Two practices; the first has a staff user and two open invoices."""
    with session_scope(session_factory) as s:
        s.add_all([
            Practice(id="prac_1", name="Bright Smiles Dental", email="office@brightsmiles.test"),
            Practice(id="prac_2", name="Harbor Family Dentistry", email="billing@harbor.test"),
        ])
        s.flush()
        s.add_all([
            User(id="user_1", auth_user_id=AUTH_USER_ID, practice_id="prac_1",
                 email="dr@brightsmiles.test", role=UserRole.STAFF),
            User(id="user_2", auth_user_id=OTHER_AUTH_USER_ID, practice_id="prac_2",
                 email="dr@harbor.test", role=UserRole.ADMIN),
            Invoice(id="inv_1", practice_id="prac_1", invoice_number="INV-1001",
                    amount=Decimal("850.00"), amount_paid=Decimal("0.00"),
                    status=InvoiceStatus.PENDING, due_date=date.today() + timedelta(days=30)),
            Invoice(id="inv_2", practice_id="prac_1", invoice_number="INV-1002",
                    amount=Decimal("120.00"), amount_paid=Decimal("0.00"),
                    status=InvoiceStatus.PENDING, due_date=date.today() + timedelta(days=10)),
            Invoice(id="inv_other", practice_id="prac_2", invoice_number="INV-2001",
                    amount=Decimal("300.00"), amount_paid=Decimal("0.00"),
                    status=InvoiceStatus.PENDING, due_date=date.today() + timedelta(days=5)),
        ])


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def identity_client():
    return FakeIdentityClient()


@pytest.fixture
def app(settings, session_factory, gateway, identity_client):
    return create_app(
        settings,
        session_factory=session_factory,
        payment_gateway=gateway,
        identity_client=identity_client,
    )


@pytest.fixture
def client(app):
    """Client without a session."""
    return TestClient(app)


@pytest.fixture
def auth_client(app, seed):
    """Client signed in as the staff user of practice prac_1."""
    return TestClient(app, cookies={"sb-access-token": make_token(AUTH_USER_ID)})
