"""Pytest configuration and fixtures."""

import os

# Keep the app's own engine off the filesystem; must run before backoffice imports
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from datetime import date
from decimal import Decimal
from typing import Generator

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from backoffice.db.base import Base
from backoffice.db.session import get_db
from backoffice.main import app
# Import all models to ensure they're registered with Base.metadata
from backoffice.models import *  # noqa: F401,F403
from backoffice.models import Franchise, FranchiseContract, FranchiseStatus
from backoffice.services.contract_service import ContractLifecycleService

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

API = "/api/v1"

# Terms of the worked example: 2 years from 2024-01-01, 1000 + 200 a month,
# 10% yearly increase, first two months in grace
EXAMPLE_TERMS = {
    "start_date": date(2024, 1, 1),
    "duration_years": 2,
    "royalty_amount": Decimal("1000"),
    "marketing_amount": Decimal("200"),
    "annual_increase": Decimal("10"),
    "grace_period_months": 2,
}


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    # Disable rate limiter during tests to avoid flaky failures
    from backoffice.core.rate_limit import limiter
    limiter.enabled = False
    # Don't raise server exceptions so we can test error status codes
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture
def test_franchise(db_session: Session) -> Franchise:
    """Create a franchise without any contract."""
    franchise = Franchise(
        name="Century 21 Lyon Centre",
        company_name="Immo Lyon SARL",
        owner_name="Camille Martin",
        owner_email="camille@immo-lyon.fr",
        owner_phone="+33478000000",
        address="12 rue de la République, Lyon",
        commune="Lyon",
        status=FranchiseStatus.ACTIVE,
    )
    db_session.add(franchise)
    db_session.commit()
    db_session.refresh(franchise)
    return franchise


@pytest.fixture
def example_terms() -> dict:
    return dict(EXAMPLE_TERMS)


@pytest.fixture
def test_contract(db_session: Session, test_franchise: Franchise) -> FranchiseContract:
    """Create the worked-example contract with its 24 payments."""
    return ContractLifecycleService(db_session).create_contract(
        franchise_id=test_franchise.id, **EXAMPLE_TERMS
    )


@pytest.fixture
def onboarding_payload() -> dict:
    """Request body for onboarding a franchise through the API."""
    return {
        "name": "Century 21 Bordeaux",
        "company_name": "Gironde Habitat SAS",
        "owner_name": "Louis Bernard",
        "owner_email": "louis@gironde-habitat.fr",
        "owner_phone": "+33556000000",
        "commune": "Bordeaux",
        "initial_fee": "15000",
        "contract": {
            "start_date": "2024-01-01",
            "duration_years": 2,
            "royalty_amount": "1000",
            "marketing_amount": "200",
            "annual_increase": "10",
            "grace_period_months": 2,
        },
    }
