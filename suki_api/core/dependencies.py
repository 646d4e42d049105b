"""
==============================================================================
FastAPI Dependencies Module
==============================================================================

Dependency injection wiring between routes, services and data access.

Dependency Hierarchy:
--------------------
┌────────────────────────┐        ┌─────────────────┐
│ get_product_repository │        │    get_db()     │
│ (session only for the  │        └────────┬────────┘
│  database backend)     │                 │
└───────────┬────────────┘   ┌─────────────┴──────────────┐
            │                │                            │
┌───────────▼────────────┐ ┌─▼───────────────────────┐ ┌──▼──────────────────┐
│  get_product_service   │ │ get_transaction_service │ │ get_points_service  │
└────────────────────────┘ └─────────────────────────┘ └─────────────────────┘

The catalog backend is chosen by CATALOG_BACKEND. Tests swap any of these
through ``app.dependency_overrides``.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import Iterator

from fastapi import Depends
from sqlalchemy.orm import Session

from suki_api.catalog.repository import (
    ProductRepository,
    SqlProductRepository,
    get_memory_catalog,
)
from suki_api.config import get_settings
from suki_api.db.database import get_database_manager, get_db
from suki_api.services.points_service import PointsService
from suki_api.services.product_service import ProductQueryService
from suki_api.services.transaction_code_service import TransactionCodeService


# Module logger
logger = logging.getLogger(__name__)


def get_product_repository() -> Iterator[ProductRepository]:
    """
    FastAPI dependency yielding the configured catalog.

    Only the database backend opens a session.

    Yields:
        SqlProductRepository when CATALOG_BACKEND=database, otherwise the
        process-wide in-memory catalog
    """
    if get_settings().catalog_backend != "database":
        yield get_memory_catalog()
        return

    session = get_database_manager().get_session()
    try:
        yield SqlProductRepository(session)
    finally:
        session.close()


def get_product_service(
    repository: ProductRepository = Depends(get_product_repository)
) -> ProductQueryService:
    """FastAPI dependency returning a ProductQueryService."""
    return ProductQueryService(repository)


def get_transaction_service(db: Session = Depends(get_db)) -> TransactionCodeService:
    """FastAPI dependency returning a TransactionCodeService bound to the request session."""
    return TransactionCodeService(db)


def get_points_service(db: Session = Depends(get_db)) -> PointsService:
    """FastAPI dependency returning a PointsService."""
    return PointsService(db)
