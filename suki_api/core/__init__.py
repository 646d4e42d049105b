"""
==============================================================================
Core Package
==============================================================================

Core infrastructure for the application.

Modules:
--------
- exceptions: AppException, fault boundary and error factory functions
- dependencies: FastAPI dependency injection functions

Usage:
------
    from suki_api.core import exceptions
    raise exceptions.code_invalid()

    from suki_api.core.dependencies import get_product_service

==============================================================================
"""

from .exceptions import (
    AppException,
    fault_boundary,
    register_exception_handlers,
)

__all__ = [
    "AppException",
    "fault_boundary",
    "register_exception_handlers",
]
