"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides test database, client, user and pending-code fixtures.

Required settings are put in the environment before the application is
imported, since a missing database credential stops the process.

==============================================================================
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DATABASE_KEY", "test-database-key")
os.environ.setdefault("CATALOG_BACKEND", "memory")
os.environ.setdefault("CODE_SWEEP_ENABLED", "false")

from datetime import datetime, timezone
from typing import Generator, List

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from suki_api.catalog.repository import SAMPLE_PRODUCTS
from suki_api.core.dependencies import get_transaction_service
from suki_api.db.database import Base, get_db
from suki_api.db.models import ProductRecord, Store, User, UserRole
from suki_api.main import app
from suki_api.services.transaction_code_service import (
    PendingTransactionStore,
    TransactionCodeService,
)


# ============================================================================
# DATABASE FIXTURES
# ============================================================================

# In-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def pending_store() -> PendingTransactionStore:
    """Empty pending-code registry, isolated from the process-wide one."""
    return PendingTransactionStore()


@pytest.fixture(scope="function")
def client(db: Session, pending_store: PendingTransactionStore) -> Generator[TestClient, None, None]:
    """Create test client with database and pending-store overrides."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_transaction_service] = (
        lambda: TransactionCodeService(db, store=pending_store)
    )

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ============================================================================
# DATA FIXTURES
# ============================================================================

@pytest.fixture
def product_records(db: Session) -> List[ProductRecord]:
    """Load the sample catalog into the products table."""
    records = [
        ProductRecord(
            id=item["id"],
            store_id=item["storeId"],
            product_name=item["name"],
            price=item["price"],
            product_image=item["image_url"],
            description=item["description"],
        )
        for item in SAMPLE_PRODUCTS
    ]
    db.add_all(records)
    db.commit()
    return records


@pytest.fixture
def stores(db: Session) -> List[Store]:
    """Two stores matching the sample catalog."""
    records = [
        Store(store_id=1, store_name="Aling Nena's Carinderia", location="Quezon City"),
        Store(store_id=2, store_name="Pancitan sa Kanto", location="Makati"),
    ]
    db.add_all(records)
    db.commit()
    return records


@pytest.fixture
def vendor_user(db: Session) -> User:
    """Vendor working at store 1."""
    user = User(user_id=10, role=UserRole.VENDOR.value, store_id=1, user_points=0)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def customer_user(db: Session) -> User:
    """Customer with no points yet."""
    user = User(user_id=20, role=UserRole.CUSTOMER.value, user_points=0)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def sale_items() -> List[dict]:
    """Two items worth 285.00 in total."""
    return [
        {"product_id": 1, "product_name": "Chicken Adobo Rice Bowl", "quantity": 2, "price": 120.0},
        {"product_id": 2, "product_name": "Iced Calamansi Juice", "quantity": 1, "price": 45.0},
    ]


class FrozenClock:
    """Settable time source for expiry tests."""

    def __init__(self, now: datetime = None):
        self.now = now or datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()
