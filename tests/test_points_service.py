"""
==============================================================================
Points Service Tests
==============================================================================

Tests for point balances, per-store totals and the store directory.

==============================================================================
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy.orm import Session

from suki_api.db.models import Transaction, User
from suki_api.services.points_service import PointsService


def add_purchase(db: Session, reference: str, store_id: int, points: float) -> None:
    db.add(Transaction(
        reference_number=reference,
        transaction_date=datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc),
        user_id=20,
        vendor_id=10,
        store_id=store_id,
        product_id=1,
        quantity=1,
        price=points * 10,
        points=points,
    ))
    db.commit()


@pytest.fixture
def service(db: Session) -> PointsService:
    return PointsService(db)


class TestBalance:

    def test_overall_balance_reads_user(self, db: Session, service, customer_user: User):
        customer_user.user_points = 42.25
        db.commit()

        balance = service.get_balance(20)
        assert balance.total_points == 42.25
        assert balance.store_id is None

    def test_store_balance_sums_transactions(self, db: Session, service, customer_user):
        add_purchase(db, "TXN-1-AAAAAAAA", 1, 12.0)
        add_purchase(db, "TXN-2-BBBBBBBB", 1, 4.5)
        add_purchase(db, "TXN-3-CCCCCCCC", 2, 9.5)

        assert service.get_balance(20, store_id=1).total_points == 16.5
        assert service.get_balance(20, store_id=2).total_points == 9.5
        assert service.get_balance(20, store_id=3).total_points == 0

    def test_unknown_user(self, service):
        assert service.get_balance(404).total_points == 0


class TestPointsByStore:

    def test_grouped_and_sorted(self, db: Session, service, stores, customer_user):
        add_purchase(db, "TXN-1-AAAAAAAA", 1, 3.0)
        add_purchase(db, "TXN-2-BBBBBBBB", 2, 9.5)
        add_purchase(db, "TXN-3-CCCCCCCC", 1, 2.0)

        result = service.points_by_store(20)

        assert [(entry.store_id, entry.available_points) for entry in result] == [(2, 9.5), (1, 5.0)]
        assert result[0].store_name == "Pancitan sa Kanto"

    def test_unlisted_store_gets_generic_name(self, db: Session, service, customer_user):
        add_purchase(db, "TXN-1-AAAAAAAA", 7, 1.5)

        [entry] = service.points_by_store(20)
        assert entry.store_name == PointsService.DEFAULT_STORE_NAME

    def test_no_purchases(self, service, customer_user):
        assert service.points_by_store(20) == []


class TestStoreDirectory:

    def test_list_stores(self, service, stores):
        directory = service.list_stores()
        assert [store.id for store in directory] == [1, 2]
        assert directory[0].location == "Quezon City"

    def test_empty_directory(self, service):
        assert service.list_stores() == []
