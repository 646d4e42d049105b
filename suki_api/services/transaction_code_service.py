"""
==============================================================================
Transaction Code Service Module
==============================================================================

Issues short codes for vendor sales and resolves a short code (or scanned
QR payload) plus a customer id into recorded transactions and points.

This module implements:
- PendingTransaction: Issued sale waiting for redemption
- PendingTransactionStore: Thread-safe registry of pending sales by code
- TransactionCodeService: Issue, redeem and list operations

Redemption Workflow:
-------------------

    issue_code()                 redeem_code() / process_qr()
  ┌──────────────┐  short code  ┌──────────────────────────────┐
  │   Vendor     │ ───────────▶ │ Customer                     │
  │ (role check, │              │ (role check, duplicate check)│
  │ store check) │              └──────────────┬───────────────┘
  └──────┬───────┘                             │
         │ put()                               │ insert rows, credit points
         ▼                                     ▼
  ┌──────────────────────┐  discard()  ┌──────────────┐
  │PendingTransactionStore│ ◀───────── │ transactions │
  └──────────────────────┘             └──────────────┘

Pending sales live in process memory only and expire after
SHORT_CODE_TTL_MINUTES. A restart forgets every unredeemed code.

Points:
-------
- total_points = round(total_amount * POINTS_RATE, 2)
- per-item points = round(price * quantity * POINTS_RATE, 2)

==============================================================================
"""

from __future__ import annotations

import json
import logging
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from suki_api.config import get_settings
from suki_api.core import exceptions
from suki_api.db.models import Transaction, User, UserRole
from suki_api.schemas.transaction import TransactionItem, TransactionPayload
from suki_api.utils.validators import ShortCodeValidator


# Module logger
logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# PENDING TRANSACTIONS
# =============================================================================

@dataclass
class PendingTransaction:
    """Issued sale waiting to be redeemed."""
    payload: TransactionPayload
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


class PendingTransactionStore:
    """
    In-memory registry of pending sales keyed by uppercase short code.

    Shared by every request of the process; all access goes through a lock.
    """

    def __init__(self) -> None:
        self._pending: Dict[str, PendingTransaction] = {}
        self._lock = threading.Lock()

    def put(self, short_code: str, pending: PendingTransaction) -> None:
        with self._lock:
            self._pending[short_code] = pending

    def get(self, short_code: str) -> Optional[PendingTransaction]:
        with self._lock:
            return self._pending.get(short_code)

    def discard(self, short_code: str) -> None:
        with self._lock:
            self._pending.pop(short_code, None)

    def contains(self, short_code: str) -> bool:
        with self._lock:
            return short_code in self._pending

    def purge_expired(self, now: datetime) -> List[str]:
        """
        Remove every expired entry.

        Returns:
            The purged short codes
        """
        with self._lock:
            expired = [
                code for code, pending in self._pending.items()
                if pending.is_expired(now)
            ]
            for code in expired:
                del self._pending[code]
        return expired

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)


_pending_store = PendingTransactionStore()


def get_pending_store() -> PendingTransactionStore:
    """Get the process-wide pending transaction store."""
    return _pending_store


# =============================================================================
# CODE GENERATION
# =============================================================================

def generate_reference_number(now: datetime) -> str:
    """Build a reference number of the form TXN-<epoch-ms>-<8 hex>."""
    millis = int(now.timestamp() * 1000)
    return f"TXN-{millis}-{secrets.token_hex(4).upper()}"


def generate_short_code() -> str:
    """Build a random 6-character code from A-Z and 0-9."""
    return "".join(
        secrets.choice(ShortCodeValidator.ALPHABET)
        for _ in range(ShortCodeValidator.LENGTH)
    )


# =============================================================================
# SERVICE
# =============================================================================

class TransactionCodeService:
    """
    Short-code transaction service.

    Attributes:
        _db: Database session
        _store: Pending transaction registry
        _points_rate: Points per currency unit
        _ttl: Short code lifetime
        _clock: Current-time source

    Example:
        >>> service = TransactionCodeService(db_session)
        >>> issued = service.issue_code(vendor_id=7, store_id=1, items=[...])
        >>> outcome = service.redeem_code(issued["short_code"], customer_id=3)
    """

    MAX_CODE_ATTEMPTS = 20

    def __init__(
        self,
        db: Session,
        store: Optional[PendingTransactionStore] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        settings = get_settings()
        self._db = db
        self._store = store if store is not None else get_pending_store()
        self._clock = clock or utc_now
        self._points_rate = settings.points_rate
        self._ttl = timedelta(minutes=settings.short_code_ttl_minutes)
        self._code_validator = ShortCodeValidator()

    # =========================================================================
    # ISSUE
    # =========================================================================

    def issue_code(
        self,
        vendor_id: Optional[int],
        store_id: Optional[int],
        items: List[TransactionItem]
    ) -> Dict[str, Any]:
        """
        Issue a short code for a vendor's sale.

        Args:
            vendor_id: Issuing vendor
            store_id: Store the sale happened in
            items: Purchased items

        Returns:
            Dict with qr_data, qr_string and short_code

        Raises:
            AppException: INVALID_INPUT, VENDOR_NOT_FOUND, NOT_A_VENDOR,
                STORE_MISMATCH
        """
        if not vendor_id or not store_id or not items:
            logger.warning(
                f"Code request missing fields: vendor_id={vendor_id}, "
                f"store_id={store_id}, items={len(items) if items else 0}"
            )
            raise exceptions.invalid_input("Vendor ID, Store ID, and items are required")

        vendor = self._db.get(User, vendor_id)

        if vendor is None:
            raise exceptions.vendor_not_found(vendor_id)

        if not vendor.is_vendor:
            raise exceptions.not_a_vendor(vendor.role)

        if vendor.store_id != store_id:
            logger.warning(
                f"Store mismatch for vendor {vendor_id}: "
                f"belongs to {vendor.store_id}, requested {store_id}"
            )
            raise exceptions.store_mismatch(vendor.store_id, store_id)

        now = self._clock()
        total_amount = round(sum(item.price * item.quantity for item in items), 2)
        short_code = self._new_short_code()

        payload = TransactionPayload(
            reference_number=generate_reference_number(now),
            short_code=short_code,
            transaction_date=now.isoformat(),
            vendor_id=vendor_id,
            store_id=store_id,
            items=[
                TransactionItem(
                    product_id=item.product_id,
                    product_name=item.product_name,
                    quantity=item.quantity,
                    price=round(item.price, 2),
                )
                for item in items
            ],
            total_amount=total_amount,
            total_points=round(total_amount * self._points_rate, 2),
        )

        self._store.put(short_code, PendingTransaction(payload, now + self._ttl))

        logger.info(
            f"🧾 Issued code {short_code} ({payload.reference_number}) "
            f"for store {store_id}, {len(items)} items, {len(self._store)} pending"
        )

        return {
            "qr_data": payload,
            "qr_string": payload.model_dump_json(),
            "short_code": short_code,
        }

    def _new_short_code(self) -> str:
        """Generate a short code not currently pending."""
        for _ in range(self.MAX_CODE_ATTEMPTS):
            code = generate_short_code()
            if not self._store.contains(code):
                return code
        raise RuntimeError("Could not allocate a unique short code")

    # =========================================================================
    # REDEEM
    # =========================================================================

    def redeem_code(
        self,
        short_code: Optional[str],
        customer_id: Optional[int]
    ) -> Dict[str, Any]:
        """
        Redeem a short code for a customer.

        Raises:
            AppException: INVALID_INPUT, CODE_INVALID, CODE_EXPIRED, plus the
                errors of the recording step
        """
        if not short_code or not customer_id:
            raise exceptions.invalid_input("Short code and customer ID are required")

        is_valid, code, _ = self._code_validator.validate(short_code)
        if not is_valid:
            raise exceptions.code_invalid()

        pending = self._store.get(code)

        if pending is None:
            logger.info(f"Code {code} not found among {len(self._store)} pending")
            raise exceptions.code_invalid()

        if pending.is_expired(self._clock()):
            self._store.discard(code)
            raise exceptions.code_expired(code)

        return self._record_sale(customer_id, pending.payload)

    def process_qr(
        self,
        qr_data: Optional[Union[Dict[str, Any], str]],
        customer_id: Optional[int]
    ) -> Dict[str, Any]:
        """
        Record a sale from a scanned QR payload.

        Args:
            qr_data: Payload as dict or as its JSON string
            customer_id: Redeeming customer

        Raises:
            AppException: INVALID_INPUT, INVALID_QR_DATA, plus the errors of
                the recording step
        """
        if not qr_data or not customer_id:
            raise exceptions.invalid_input("QR data and customer ID are required")

        try:
            if isinstance(qr_data, str):
                qr_data = json.loads(qr_data)
            payload = TransactionPayload.model_validate(qr_data)
        except json.JSONDecodeError as e:
            raise exceptions.invalid_qr_data(f"not valid JSON: {e.msg}")
        except ValidationError as e:
            raise exceptions.invalid_qr_data(f"{e.error_count()} invalid field(s)")

        return self._record_sale(customer_id, payload)

    def _record_sale(self, customer_id: int, payload: TransactionPayload) -> Dict[str, Any]:
        """
        Insert one transaction row per item and credit the customer's points.

        Totals are recomputed from the items; the amounts carried by the
        payload are not trusted.

        Raises:
            AppException: CUSTOMER_NOT_FOUND, NOT_A_CUSTOMER,
                TRANSACTION_EXISTS, INVALID_QR_DATA
        """
        customer = self._db.get(User, customer_id)

        if customer is None:
            raise exceptions.customer_not_found(customer_id)

        if not customer.is_customer:
            raise exceptions.not_a_customer(customer.role)

        existing = self._db.execute(
            select(Transaction.id)
            .where(Transaction.reference_number == payload.reference_number)
            .limit(1)
        ).first()

        if existing is not None:
            raise exceptions.transaction_exists(payload.reference_number)

        try:
            transaction_date = datetime.fromisoformat(payload.transaction_date)
        except ValueError:
            raise exceptions.invalid_qr_data("transaction_date is not an ISO timestamp")

        total_amount = round(sum(item.price * item.quantity for item in payload.items), 2)
        total_points = round(total_amount * self._points_rate, 2)

        if (total_amount, total_points) != (payload.total_amount, payload.total_points):
            logger.warning(
                f"Totals of {payload.reference_number} do not match its items: "
                f"claimed {payload.total_amount}/{payload.total_points}, "
                f"recomputed {total_amount}/{total_points}"
            )

        rows = [
            Transaction(
                reference_number=payload.reference_number,
                transaction_date=transaction_date,
                user_id=customer_id,
                vendor_id=payload.vendor_id,
                store_id=payload.store_id,
                product_id=item.product_id,
                quantity=item.quantity,
                price=item.price,
                points=round(item.price * item.quantity * self._points_rate, 2),
                transaction_type=payload.transaction_type,
            )
            for item in payload.items
        ]

        try:
            self._db.add_all(rows)
            customer.user_points = round((customer.user_points or 0) + total_points, 2)
            self._db.commit()
        except Exception:
            self._db.rollback()
            raise

        if payload.short_code:
            self._store.discard(payload.short_code.upper())

        logger.info(
            f"✅ Customer {customer_id} redeemed {payload.reference_number}: "
            f"{len(rows)} items, +{total_points} points"
        )

        return {
            "reference_number": payload.reference_number,
            "total_amount": total_amount,
            "total_points": total_points,
            "items_count": len(rows),
        }

    # =========================================================================
    # QUERIES
    # =========================================================================

    def list_user_transactions(self, user_id: int, role: Optional[str] = None) -> List[Transaction]:
        """
        List a user's transactions, newest first.

        ``role="vendor"`` selects sales the user issued; anything else
        selects purchases the user redeemed.
        """
        query = select(Transaction).order_by(
            Transaction.transaction_date.desc(), Transaction.id.desc()
        )

        if role == UserRole.VENDOR.value:
            query = query.where(Transaction.vendor_id == user_id)
        else:
            query = query.where(Transaction.user_id == user_id)

        return list(self._db.execute(query).scalars())

    def list_store_transactions(self, store_id: int) -> List[Transaction]:
        """List a store's transactions, newest first."""
        query = (
            select(Transaction)
            .where(Transaction.store_id == store_id)
            .order_by(Transaction.transaction_date.desc(), Transaction.id.desc())
        )
        return list(self._db.execute(query).scalars())

