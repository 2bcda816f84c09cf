"""Pytest fixtures for testing"""

import os

# Must be set before payment_tracker.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("API_TOKENS", "test-token")

import uuid
import pytest
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from payment_tracker.api.main import create_app
from payment_tracker.infrastructure.database.models import Base
from payment_tracker.infrastructure.database.session import get_db
from payment_tracker.domain.models import PaymentMethod, PaymentRecord


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
TEST_TOKEN = "test-token"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


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


def _app_for(db: Session):
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def client(db: Session) -> TestClient:
    """Authenticated FastAPI test client with test database"""
    return TestClient(_app_for(db), headers={"Authorization": f"Bearer {TEST_TOKEN}"})


@pytest.fixture
def anon_client(db: Session) -> TestClient:
    """Test client without credentials"""
    return TestClient(_app_for(db))


@pytest.fixture
def make_payment() -> Callable[..., PaymentRecord]:
    """Factory for domain payment records"""

    def _make(
        method: PaymentMethod = PaymentMethod.CASH,
        amount: str = "100.00",
        timestamp: str = "2025-10-19T14:00:00+00:00",
        client_name: str = "Jane Doe",
        service_type: str | None = None,
    ) -> PaymentRecord:
        return PaymentRecord(
            id=uuid.uuid4(),
            client_name=client_name,
            payment_method=method,
            amount_paid=Decimal(amount),
            timestamp=datetime.fromisoformat(timestamp).astimezone(timezone.utc),
            service_type=service_type,
        )

    return _make


@pytest.fixture
def scenario_payments(make_payment) -> list[PaymentRecord]:
    """Cash 100, Zelle 50 and a Check refund of -20, all mid-morning ET on 2025-10-19"""
    return [
        make_payment(PaymentMethod.CASH, "100.00", client_name="Alice Smith"),
        make_payment(PaymentMethod.ZELLE, "50.00", client_name="Bob Jones"),
        make_payment(PaymentMethod.CHECK, "-20.00", client_name="Carol White"),
    ]
