"""
==============================================================================
Services Package - Business Logic Layer
==============================================================================

This package provides:
- ProductQueryService: Catalog listing and per-store filtering
- TransactionCodeService: Short-code issue and redemption
- PointsService: Point balances, per-store totals and store directory
- CodeSweepTaskManager: Background purge of expired codes

Architecture Pattern: Service Layer
----------------------------------
    ┌─────────────────┐
    │   API Router    │
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │    Service      │  ← Business Logic
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │   Repository    │  ← Data Access (memory or ORM)
    └─────────────────┘

==============================================================================
"""

from .points_service import PointsService
from .product_service import ProductQueryService
from .transaction_code_service import (
    PendingTransaction,
    PendingTransactionStore,
    TransactionCodeService,
    get_pending_store,
)
from .code_sweeper import CodeSweepTaskManager

__all__ = [
    "PointsService",
    "ProductQueryService",
    "PendingTransaction",
    "PendingTransactionStore",
    "TransactionCodeService",
    "get_pending_store",
    "CodeSweepTaskManager",
]
