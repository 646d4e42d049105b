"""
==============================================================================
Transaction Code Service Tests
==============================================================================

Tests for short-code issue, redemption, expiry and the sweeper.

==============================================================================
"""

import re
from datetime import timedelta

import pytest
from sqlalchemy import select
from sqlalchemy.orm import Session

from suki_api.core.exceptions import AppException
from suki_api.db.models import Transaction, User
from suki_api.schemas.transaction import TransactionItem
from suki_api.services.code_sweeper import CodeSweepTaskManager
from suki_api.services.transaction_code_service import (
    PendingTransactionStore,
    TransactionCodeService,
    generate_reference_number,
    generate_short_code,
)


@pytest.fixture
def items(sale_items):
    return [TransactionItem(**item) for item in sale_items]


@pytest.fixture
def service(db: Session, pending_store: PendingTransactionStore, clock) -> TransactionCodeService:
    return TransactionCodeService(db, store=pending_store, clock=clock)


class TestCodeGeneration:

    def test_short_code_format(self):
        for _ in range(50):
            assert re.fullmatch(r"[A-Z0-9]{6}", generate_short_code())

    def test_reference_number_format(self, clock):
        reference = generate_reference_number(clock())
        millis = int(clock().timestamp() * 1000)
        assert re.fullmatch(rf"TXN-{millis}-[0-9A-F]{{8}}", reference)


class TestIssueCode:

    def test_issue(self, service, pending_store, vendor_user: User, items):
        issued = service.issue_code(10, 1, items)

        payload = issued["qr_data"]
        assert payload.total_amount == 285.0
        assert payload.total_points == 28.5
        assert payload.store_id == 1
        assert payload.vendor_id == 10
        assert pending_store.contains(issued["short_code"])

    @pytest.mark.parametrize("vendor_id, store_id, use_items", [
        (None, 1, True),
        (10, None, True),
        (10, 1, False),
    ])
    def test_missing_fields(self, service, vendor_user, items, vendor_id, store_id, use_items):
        with pytest.raises(AppException) as exc:
            service.issue_code(vendor_id, store_id, items if use_items else [])
        assert exc.value.code == "INVALID_INPUT"
        assert exc.value.status_code == 400

    def test_customer_cannot_issue(self, service, customer_user, items):
        with pytest.raises(AppException) as exc:
            service.issue_code(20, 1, items)
        assert exc.value.code == "NOT_A_VENDOR"
        assert exc.value.status_code == 403

    def test_unknown_vendor(self, service, items):
        with pytest.raises(AppException) as exc:
            service.issue_code(999, 1, items)
        assert exc.value.code == "VENDOR_NOT_FOUND"

    def test_store_mismatch(self, service, vendor_user, items):
        with pytest.raises(AppException) as exc:
            service.issue_code(10, 2, items)
        assert exc.value.code == "STORE_MISMATCH"


class TestRedeemCode:

    def test_redeem_records_rows_and_points(
        self, db: Session, service, pending_store, vendor_user, customer_user, items
    ):
        issued = service.issue_code(10, 1, items)

        outcome = service.redeem_code(issued["short_code"].lower(), 20)

        assert outcome["items_count"] == 2
        assert outcome["total_points"] == 28.5
        assert len(pending_store) == 0

        rows = db.execute(select(Transaction).order_by(Transaction.price.desc())).scalars().all()
        assert [row.points for row in rows] == [24.0, 4.5]
        assert {row.vendor_id for row in rows} == {10}
        assert {row.user_id for row in rows} == {20}

        db.refresh(customer_user)
        assert customer_user.user_points == 28.5

    def test_points_accumulate(self, db: Session, service, vendor_user, customer_user, items):
        for _ in range(2):
            issued = service.issue_code(10, 1, items)
            service.redeem_code(issued["short_code"], 20)

        db.refresh(customer_user)
        assert customer_user.user_points == 57.0

    def test_expired_code(self, service, pending_store, clock, vendor_user, customer_user, items):
        issued = service.issue_code(10, 1, items)
        clock.now += timedelta(minutes=10, seconds=1)

        with pytest.raises(AppException) as exc:
            service.redeem_code(issued["short_code"], 20)
        assert exc.value.code == "CODE_EXPIRED"
        assert exc.value.status_code == 400
        assert not pending_store.contains(issued["short_code"])

    def test_code_valid_at_deadline(self, service, clock, vendor_user, customer_user, items):
        issued = service.issue_code(10, 1, items)
        clock.now += timedelta(minutes=10)

        assert service.redeem_code(issued["short_code"], 20)["items_count"] == 2

    @pytest.mark.parametrize("code", ["ABC", "ABC-12", "ZZZZZZ"])
    def test_invalid_code(self, service, customer_user, code):
        with pytest.raises(AppException) as exc:
            service.redeem_code(code, 20)
        assert exc.value.code == "CODE_INVALID"

    def test_unknown_customer_keeps_code(self, service, pending_store, vendor_user, items):
        issued = service.issue_code(10, 1, items)

        with pytest.raises(AppException) as exc:
            service.redeem_code(issued["short_code"], 404)
        assert exc.value.code == "CUSTOMER_NOT_FOUND"
        assert pending_store.contains(issued["short_code"])


class TestProcessQR:

    def test_dict_payload(self, service, vendor_user, customer_user, items):
        issued = service.issue_code(10, 1, items)
        payload = issued["qr_data"].model_dump()

        outcome = service.process_qr(payload, 20)
        assert outcome["reference_number"] == payload["reference_number"]

    def test_claimed_totals_are_recomputed(
        self, db: Session, service, vendor_user, customer_user, items
    ):
        issued = service.issue_code(10, 1, items)
        payload = issued["qr_data"].model_dump()
        payload["total_amount"] = 100000.0
        payload["total_points"] = 10000.0

        outcome = service.process_qr(payload, 20)

        assert outcome["total_amount"] == 285.0
        assert outcome["total_points"] == 28.5
        db.refresh(customer_user)
        assert customer_user.user_points == 28.5

    def test_duplicate_reference(self, service, vendor_user, customer_user, items):
        issued = service.issue_code(10, 1, items)
        service.process_qr(issued["qr_string"], 20)

        with pytest.raises(AppException) as exc:
            service.process_qr(issued["qr_string"], 20)
        assert exc.value.code == "TRANSACTION_EXISTS"
        assert exc.value.message == "Transaction already processed"

    def test_payload_missing_items(self, service, customer_user):
        with pytest.raises(AppException) as exc:
            service.process_qr({"reference_number": "TXN-1-ABCDEF12", "items": []}, 20)
        assert exc.value.code == "INVALID_QR_DATA"

    def test_missing_customer(self, service):
        with pytest.raises(AppException) as exc:
            service.process_qr({"reference_number": "TXN-1"}, None)
        assert exc.value.code == "INVALID_INPUT"


class TestTransactionQueries:

    def test_user_and_store_history(self, service, vendor_user, customer_user, items, clock):
        first = service.issue_code(10, 1, items)
        service.redeem_code(first["short_code"], 20)
        clock.now += timedelta(minutes=1)
        second = service.issue_code(10, 1, items[:1])
        service.redeem_code(second["short_code"], 20)

        purchases = service.list_user_transactions(20)
        assert len(purchases) == 3
        assert purchases[0].reference_number == second["qr_data"].reference_number

        assert len(service.list_user_transactions(10, role="vendor")) == 3
        assert service.list_user_transactions(10) == []
        assert len(service.list_store_transactions(1)) == 3
        assert service.list_store_transactions(2) == []


class TestCodeSweeper:

    def test_sweep_purges_only_expired(
        self, service, pending_store, clock, vendor_user, items
    ):
        old = service.issue_code(10, 1, items)
        clock.now += timedelta(minutes=8)
        fresh = service.issue_code(10, 1, items)
        clock.now += timedelta(minutes=3)

        sweeper = CodeSweepTaskManager(store=pending_store, clock=clock)
        purged = sweeper.sweep()

        assert purged == [old["short_code"]]
        assert pending_store.contains(fresh["short_code"])
        assert not sweeper.is_running

    def test_sweep_empty_store(self, pending_store, clock):
        assert CodeSweepTaskManager(store=pending_store, clock=clock).sweep() == []
