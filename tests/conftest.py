"""Pytest fixtures for testing"""

import pytest
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from avalanche_planner.api.main import create_app
from avalanche_planner.infrastructure.database.models import Base
from avalanche_planner.infrastructure.database.session import get_db
from avalanche_planner.domain.models import FeeMode, InstallmentDebt, LoanFee, RevolvingDebt


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
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def credit_card() -> RevolvingDebt:
    """High-rate card with no stated minimum"""
    return RevolvingDebt(
        id="card",
        creditor_name="Chase Visa Credit Card",
        balance=5000.0,
        interest_rate=24.99,
    )


@pytest.fixture
def student_loan() -> RevolvingDebt:
    """Low-rate debt with an explicit minimum"""
    return RevolvingDebt(
        id="student",
        creditor_name="Student Loan",
        balance=15000.0,
        interest_rate=6.5,
        minimum_payment=200.0,
    )


@pytest.fixture
def sample_debts() -> list:
    """Mixed portfolio covering both categories and both fee modes"""
    return [
        RevolvingDebt(
            id="visa",
            creditor_name="Chase Visa Credit Card",
            balance=5000.0,
            interest_rate=24.99,
            minimum_payment=150.0,
        ),
        InstallmentDebt(
            id="student",
            creditor_name="Federal Student Loan",
            balance=15000.0,
            interest_rate=6.5,
            term_months=24,
        ),
        InstallmentDebt(
            id="auto",
            creditor_name="Honda Auto Loan",
            balance=12000.0,
            interest_rate=4.2,
            term_months=18,
            fee=LoanFee(15.0, FeeMode.MONTHLY),
        ),
        InstallmentDebt(
            id="personal",
            creditor_name="SoFi Personal Loan",
            balance=3000.0,
            interest_rate=12.5,
            term_months=12,
            fee=LoanFee(100.0, FeeMode.UPFRONT),
        ),
    ]
