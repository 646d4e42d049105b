"""
==============================================================================
Schemas Package - Pydantic Models
==============================================================================

Request and response schemas using Pydantic for validation.

- Common: Message and health responses
- Points: Point balances and store directory
- Transaction: Short-code transaction flow

==============================================================================
"""

from .common import HealthStatus, MessageResponse
from .points import PointsBalance, StorePoints, StoreSummary
from .transaction import (
    GenerateCodeRequest,
    GenerateCodeResponse,
    ProcessCodeRequest,
    ProcessQRRequest,
    ProcessTransactionResponse,
    TransactionItem,
    TransactionListResponse,
    TransactionOutcome,
    TransactionPayload,
)

__all__ = [
    # Common
    "HealthStatus",
    "MessageResponse",
    # Points
    "PointsBalance",
    "StorePoints",
    "StoreSummary",
    # Transaction
    "GenerateCodeRequest",
    "GenerateCodeResponse",
    "ProcessCodeRequest",
    "ProcessQRRequest",
    "ProcessTransactionResponse",
    "TransactionItem",
    "TransactionListResponse",
    "TransactionOutcome",
    "TransactionPayload",
]
