"""
==============================================================================
Transaction Schemas Module
==============================================================================

Request and response schemas for the short-code transaction flow.

Flow:
-----
1. Vendor posts the sale to /transactions/generate-qr and receives a QR
   payload plus a 6-character short code.
2. Customer scans the QR (/transactions/process-qr) or types the code
   (/transactions/process-code).
3. One transaction row per item is recorded and points are credited.

Identifiers in the request schemas are Optional: a missing value is a 400
from the service, not a 422 from validation.

==============================================================================
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# ITEM & PAYLOAD SCHEMAS
# =============================================================================

class TransactionItem(BaseModel):
    """Purchased item of a sale."""
    product_id: Optional[int] = None
    product_name: str = Field(..., min_length=1, max_length=255)
    quantity: int = Field(..., gt=0, le=9999)
    price: float = Field(..., ge=0)

    @field_validator("product_name")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        return v.strip()


class TransactionPayload(BaseModel):
    """
    Issued sale, as encoded in the QR code.

    Prices and totals are rounded to two decimals.
    """
    reference_number: str = Field(..., min_length=1)
    short_code: Optional[str] = None
    transaction_date: str
    vendor_id: Optional[int] = None
    store_id: int
    items: List[TransactionItem] = Field(..., min_length=1)
    total_amount: float = Field(..., ge=0)
    total_points: float = Field(..., ge=0)
    transaction_type: str = "Purchase"


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class GenerateCodeRequest(BaseModel):
    """Vendor request to issue a transaction code."""
    vendor_id: Optional[int] = None
    store_id: Optional[int] = None
    items: List[TransactionItem] = Field(default_factory=list)


class ProcessCodeRequest(BaseModel):
    """Customer redemption of a short code."""
    short_code: Optional[str] = None
    customer_id: Optional[int] = None


class ProcessQRRequest(BaseModel):
    """Customer redemption of a scanned QR payload (object or JSON string)."""
    qr_data: Optional[Union[Dict[str, Any], str]] = None
    customer_id: Optional[int] = None


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class GenerateCodeResponse(BaseModel):
    success: bool = True
    message: str = "Transaction code generated successfully"
    qr_data: TransactionPayload
    qr_string: str
    short_code: str


class TransactionOutcome(BaseModel):
    reference_number: str
    total_amount: float
    total_points: float
    items_count: int


class ProcessTransactionResponse(BaseModel):
    success: bool = True
    message: str = "Transaction processed successfully"
    transaction: TransactionOutcome


class TransactionListResponse(BaseModel):
    success: bool = True
    total: int = Field(ge=0)
    transactions: List[Dict[str, Any]]
