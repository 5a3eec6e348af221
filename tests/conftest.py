"""Pytest configuration and fixtures."""

import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

# Settings are read at import time, so they have to be in place first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("SESSION_SECRET", "test-session-secret")
os.environ.setdefault("STRIPE_CLIENT_ID", "ca_test")
os.environ.setdefault("PUBLIC_DOMAIN", "http://testserver")

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from database import get_session
from main import app
from models import Ambassador, Base, Brand, OnboardingStep
from services.ledger_service import LedgerService
from services.stripe_service import (
    Balance,
    BalanceEntry,
    ChargeResult,
    PayoutResult,
    StripeProcessor,
    get_processor,
)


@pytest.fixture(scope="function")
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture(scope="function")
def db_session(session_factory) -> Session:
    """Fresh database session for each test, on an in-memory SQLite database."""
    session = session_factory()
    try:
        yield session
        session.rollback()
    finally:
        session.close()


@pytest.fixture
def processor():
    """Stripe processor double returning realistic values."""
    mock = MagicMock(spec=StripeProcessor)
    mock.create_customer.return_value = "cus_test_123"
    mock.retrieve_balance.return_value = Balance(
        available=[BalanceEntry(amount=5000, currency="usd")],
        pending=[BalanceEntry(amount=1200, currency="usd")],
    )
    mock.create_charge.return_value = ChargeResult(charge_id="ch_test_123", transfer_id="tr_test_123")
    mock.create_payout.return_value = PayoutResult(
        payout_id="po_test_123", amount=5000, currency="usd", status="pending"
    )
    mock.create_login_link.return_value = "https://connect.stripe.com/express/login/abc"
    mock.exchange_code.return_value = "acct_test_123"
    return mock


@pytest.fixture
def ambassador(db_session) -> Ambassador:
    """Ambassador who finished the profile step but has not linked payouts."""
    ambassador = LedgerService.create_ambassador(
        db_session,
        email="jenny@example.com",
        password="s3cret-pass",
        first_name="Jenny",
        last_name="Rosen",
    )
    ambassador.complete_profile()
    db_session.commit()
    return ambassador


@pytest.fixture
def onboarded_ambassador(db_session, ambassador) -> Ambassador:
    LedgerService.set_payout_destination(db_session, ambassador, "acct_test_123")
    db_session.commit()
    assert ambassador.onboarding_step == OnboardingStep.COMPLETE
    return ambassador


@pytest.fixture
def brand(db_session) -> Brand:
    brand = LedgerService.create_brand(
        db_session,
        client_email="client@brand.com",
        routing_email="routing@brand.com",
        name="Test Brand",
    )
    db_session.commit()
    return brand


@pytest.fixture
def client(session_factory, processor):
    """TestClient wired to the in-memory database and the processor double."""

    def override_get_session():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_processor] = lambda: processor
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
