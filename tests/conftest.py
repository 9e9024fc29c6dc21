"""Pytest fixtures for testing"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from fintrack.api.dependencies import get_clock
from fintrack.api.main import create_app
from fintrack.domain.models import CardPurchase, RecurringExpensePlan, RecurringFrequency
from fintrack.infrastructure.clock import FixedClock
from fintrack.infrastructure.database.models import Base
from fintrack.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

USER_ID = "user_1"


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock() -> FixedClock:
    """Clock pinned mid-February 2025; tests move it by assigning clock.instant"""
    return FixedClock(datetime(2025, 2, 20, 12, 0, 0))


@pytest.fixture
def client(db: Session, clock: FixedClock) -> TestClient:
    """Create FastAPI test client with test database and a fixed clock"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    return TestClient(app, headers={"X-User-ID": USER_ID})


@pytest.fixture
def card(client: TestClient) -> dict:
    """Credit card closing on the 10th, due on the 20th"""
    response = client.post(
        "/v1/credit-cards",
        json={
            "name": "Everyday",
            "brand": "Visa",
            "last_four_digits": "4242",
            "credit_limit": 5000,
            "closing_day": 10,
            "due_day": 20,
        },
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def sample_purchase() -> CardPurchase:
    """300.00 in 3 installments bought after the closing day"""
    return CardPurchase(
        description="Headphones",
        total_amount=Decimal("300.00"),
        purchase_date=date(2025, 1, 15),
        installment_count=3,
    )


@pytest.fixture
def monthly_plan() -> RecurringExpensePlan:
    """Twelve monthly installments starting mid-January 2025"""
    return RecurringExpensePlan(
        start_date=date(2025, 1, 15),
        frequency=RecurringFrequency.MONTHLY,
        total_installments=12,
    )
