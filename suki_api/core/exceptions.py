"""
Application Exception Handling

Single AppException class for all application errors with FastAPI integration.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError


logger = logging.getLogger(__name__)


class AppException(Exception):
    """
    Unified application exception for all error scenarios.

    Provides consistent error response format across the entire API.

    Usage:
        raise AppException("Vendor not found", "VENDOR_NOT_FOUND", 404)
        raise AppException("Code has expired", "CODE_EXPIRED", 400, {"short_code": "AB12CD"})

    Error Codes:
        Input:
            - INVALID_INPUT (400)
            - INVALID_QR_DATA (400)

        Users:
            - VENDOR_NOT_FOUND (404)
            - CUSTOMER_NOT_FOUND (404)
            - NOT_A_VENDOR (403)
            - NOT_A_CUSTOMER (403)
            - STORE_MISMATCH (403)

        Short codes:
            - CODE_INVALID (400)
            - CODE_EXPIRED (400)
            - TRANSACTION_EXISTS (400)

        General:
            - DATABASE_ERROR (500)
            - INTERNAL_ERROR (500)
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize application exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "CODE_EXPIRED")
            status_code: HTTP status code (default: 400)
            details: Additional error context (optional)
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        error_dict = {
            "success": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "timestamp": self.timestamp
            }
        }

        if self.details:
            error_dict["error"]["details"] = self.details

        return error_dict


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Convert AppException to consistent JSON error response."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} {exc.details}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Convert a database fault that escaped a controller into a 500 response."""
    logger.error(f"{request.method} {request.url.path} database fault: {exc}")
    return await app_exception_handler(request, database_error(exc))


@contextmanager
def fault_boundary(operation: str) -> Iterator[None]:
    """
    Convert faults raised inside a route handler into AppException.

    AppException passes through untouched. Database faults become
    DATABASE_ERROR and anything else INTERNAL_ERROR, both 500 and both
    carrying the original error text.

    Usage:
        with fault_boundary("list products"):
            return service.list_all()
    """
    try:
        yield
    except AppException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"❌ {operation} failed (database): {e}")
        raise database_error(e) from e
    except Exception as e:
        logger.exception(f"❌ {operation} failed: {e}")
        raise internal_error(e) from e


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)


# ============================================
# CONVENIENCE FACTORY FUNCTIONS
# ============================================

def invalid_input(message: str) -> AppException:
    """Create invalid input exception."""
    return AppException(message, "INVALID_INPUT", 400)


def invalid_qr_data(reason: str) -> AppException:
    """Create malformed QR payload exception."""
    return AppException("Invalid QR data", "INVALID_QR_DATA", 400, {"reason": reason})


def vendor_not_found(vendor_id: int) -> AppException:
    """Create vendor not found exception."""
    return AppException("Vendor not found", "VENDOR_NOT_FOUND", 404, {"vendor_id": vendor_id})


def customer_not_found(customer_id: int) -> AppException:
    """Create customer not found exception."""
    return AppException(
        "Customer not found", "CUSTOMER_NOT_FOUND", 404, {"customer_id": customer_id}
    )


def not_a_vendor(role: str) -> AppException:
    """Create wrong role exception for vendor-only operations."""
    return AppException("User is not a vendor", "NOT_A_VENDOR", 403, {"role": role})


def not_a_customer(role: str) -> AppException:
    """Create wrong role exception for customer-only operations."""
    return AppException("User is not a customer", "NOT_A_CUSTOMER", 403, {"role": role})


def store_mismatch(vendor_store_id: Optional[int], requested_store_id: int) -> AppException:
    """Create vendor/store mismatch exception."""
    return AppException(
        f"Vendor does not belong to this store. Vendor belongs to store "
        f"{vendor_store_id}, but requested store {requested_store_id}",
        "STORE_MISMATCH",
        403,
        {"vendor_store_id": vendor_store_id, "requested_store_id": requested_store_id}
    )


def code_invalid() -> AppException:
    """Create unknown short code exception."""
    return AppException(
        "Invalid or expired code. Please generate a new code.",
        "CODE_INVALID",
        400
    )


def code_expired(short_code: str) -> AppException:
    """Create expired short code exception."""
    return AppException("Code has expired", "CODE_EXPIRED", 400, {"short_code": short_code})


def transaction_exists(reference_number: str) -> AppException:
    """Create duplicate redemption exception."""
    return AppException(
        "Transaction already processed",
        "TRANSACTION_EXISTS",
        400,
        {"reference_number": reference_number}
    )


def database_error(error: Exception) -> AppException:
    """Create upstream database fault exception."""
    return AppException(
        "Database error",
        "DATABASE_ERROR",
        500,
        {"error": str(error)}
    )


def internal_error(error: Exception, message: str = "Internal server error") -> AppException:
    """Create unexpected fault exception."""
    return AppException(message, "INTERNAL_ERROR", 500, {"error": str(error)})
