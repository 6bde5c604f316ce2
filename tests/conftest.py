"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from datetime import date
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from budget_gateway.api.main import create_app
from budget_gateway.infrastructure.database.models import Base
from budget_gateway.infrastructure.database.session import get_db
from budget_gateway.domain.models import BudgetItem, BudgetSettings, ProductUsage, SessionRecord


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
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


@pytest.fixture
def app(db: Session):
    """FastAPI app wired to the test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def client(app) -> TestClient:
    """Create FastAPI test client with test database"""
    return TestClient(app)


@pytest.fixture
def plan_settings() -> BudgetSettings:
    """Ten-day plan: 2025-03-01 to 2025-03-11"""
    return BudgetSettings(
        id=1,
        client_id=42,
        start_date=date(2025, 3, 1),
        end_date=date(2025, 3, 11),
        total_funds=50.0,
        plan_serial_number="PLAN-42",
    )


@pytest.fixture
def sample_items() -> list[BudgetItem]:
    """One item: 5 units at $10"""
    return [
        BudgetItem(
            id=1,
            client_id=42,
            item_code="A1",
            description="Speech therapy session",
            unit_price=10,
            quantity=5,
            category="Therapy",
        )
    ]


@pytest.fixture
def sample_sessions() -> list[SessionRecord]:
    """Completed session on day 3 of the plan using 2 units of A1, plus a draft"""
    return [
        SessionRecord(
            id=100,
            status="completed",
            session_date=date(2025, 3, 4),
            products=[ProductUsage(item_code="A1", quantity=2)],
            therapist_name="Dana Lee",
        ),
        SessionRecord(
            id=101,
            status="draft",
            session_date=date(2025, 3, 5),
            products=[ProductUsage(item_code="A1", quantity=3)],
        ),
    ]
