"""
==============================================================================
Transaction Endpoints
==============================================================================

Short-code issue and redemption, plus transaction history.

Endpoints:
----------
- POST /transactions/generate-qr    vendor issues a code for a sale
- POST /transactions/process-qr     customer redeems a scanned QR payload
- POST /transactions/process-code   customer redeems a typed short code
- GET  /transactions/user/{id}      history of a customer (or vendor)
- GET  /transactions/store/{id}     history of a store

==============================================================================
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from suki_api.core.dependencies import get_transaction_service
from suki_api.core.exceptions import fault_boundary
from suki_api.schemas.transaction import (
    GenerateCodeRequest,
    GenerateCodeResponse,
    ProcessCodeRequest,
    ProcessQRRequest,
    ProcessTransactionResponse,
    TransactionListResponse,
    TransactionOutcome,
)
from suki_api.services.transaction_code_service import TransactionCodeService


router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.post(
    "/generate-qr",
    response_model=GenerateCodeResponse,
    status_code=status.HTTP_201_CREATED
)
async def generate_code(
    data: GenerateCodeRequest,
    service: TransactionCodeService = Depends(get_transaction_service)
):
    """Issue a QR payload and short code for a vendor's sale."""
    with fault_boundary("Generate transaction code"):
        issued = service.issue_code(data.vendor_id, data.store_id, data.items)
        return GenerateCodeResponse(**issued)


@router.post(
    "/process-qr",
    response_model=ProcessTransactionResponse,
    status_code=status.HTTP_201_CREATED
)
async def process_qr(
    data: ProcessQRRequest,
    service: TransactionCodeService = Depends(get_transaction_service)
):
    """Record a sale from a scanned QR payload."""
    with fault_boundary("Process QR"):
        outcome = service.process_qr(data.qr_data, data.customer_id)
        return ProcessTransactionResponse(transaction=TransactionOutcome(**outcome))


@router.post(
    "/process-code",
    response_model=ProcessTransactionResponse,
    status_code=status.HTTP_201_CREATED
)
async def process_code(
    data: ProcessCodeRequest,
    service: TransactionCodeService = Depends(get_transaction_service)
):
    """Record a sale from a manually entered short code."""
    with fault_boundary("Process short code"):
        outcome = service.redeem_code(data.short_code, data.customer_id)
        return ProcessTransactionResponse(transaction=TransactionOutcome(**outcome))


@router.get("/user/{user_id}", response_model=TransactionListResponse)
async def list_user_transactions(
    user_id: int,
    role: Optional[str] = Query(None, description="'vendor' for issued sales"),
    service: TransactionCodeService = Depends(get_transaction_service)
):
    """List a user's transactions, newest first."""
    with fault_boundary(f"List transactions for user {user_id}"):
        rows = service.list_user_transactions(user_id, role)
        return TransactionListResponse(
            total=len(rows),
            transactions=[row.to_dict() for row in rows]
        )


@router.get("/store/{store_id}", response_model=TransactionListResponse)
async def list_store_transactions(
    store_id: int,
    service: TransactionCodeService = Depends(get_transaction_service)
):
    """List a store's transactions, newest first."""
    with fault_boundary(f"List transactions for store {store_id}"):
        rows = service.list_store_transactions(store_id)
        return TransactionListResponse(
            total=len(rows),
            transactions=[row.to_dict() for row in rows]
        )
