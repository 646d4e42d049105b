"""
==============================================================================
Product Repository Module
==============================================================================

Data-access layer for the product catalog.

Both catalog variants implement ProductRepository, so the query service and
the routes never know which one is configured:

    ┌──────────────────────┐
    │  ProductRepository   │ (abstract)
    └──────────┬───────────┘
               │
       ┌───────┴─────────────────────┐
       │                             │
┌──────▼───────────────────┐ ┌───────▼──────────────┐
│ InMemoryProductRepository│ │ SqlProductRepository │
│ (sample data / JSON file)│ │ (products table)     │
└──────────────────────────┘ └──────────────────────┘

JSON Structure (PRODUCTS_FILE):
------------------------------
[
  {"id": 1, "storeId": 1, "name": "...", "price": 120.0,
   "image_url": "...", "description": "..."},
  ...
]

==============================================================================
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from suki_api.catalog.models import Product
from suki_api.db.models import ProductRecord


# Module logger
logger = logging.getLogger(__name__)


SAMPLE_PRODUCTS = [
    {
        "id": 1,
        "storeId": 1,
        "name": "Chicken Adobo Rice Bowl",
        "price": 120.0,
        "image_url": "https://images.suki.app/products/chicken-adobo.jpg",
        "description": "Braised chicken adobo over garlic rice",
    },
    {
        "id": 2,
        "storeId": 1,
        "name": "Iced Calamansi Juice",
        "price": 45.0,
        "image_url": "https://images.suki.app/products/calamansi-juice.jpg",
        "description": "Freshly squeezed calamansi over ice",
    },
    {
        "id": 3,
        "storeId": 2,
        "name": "Pancit Canton",
        "price": 95.0,
        "image_url": "https://images.suki.app/products/pancit-canton.jpg",
        "description": "Stir-fried egg noodles with vegetables and pork",
    },
]


class ProductRepository(ABC):
    """Read-only access to catalog products."""

    @abstractmethod
    def list_all(self) -> List[Product]:
        """Return every product. No ordering contract."""

    @abstractmethod
    def list_by_store(self, store_id: int) -> List[Product]:
        """Return the products owned by ``store_id`` (possibly none)."""


class InMemoryProductRepository(ProductRepository):
    """
    Catalog held in process memory.

    Loaded once from the built-in sample data or from a JSON file and never
    modified afterwards.

    Example:
        >>> repo = InMemoryProductRepository()
        >>> len(repo.list_by_store(1))
        2
    """

    def __init__(self, products: Optional[Iterable[Product]] = None) -> None:
        if products is None:
            products = [Product.model_validate(item) for item in SAMPLE_PRODUCTS]
        self._products: List[Product] = list(products)

    @classmethod
    def from_file(cls, products_file: Path) -> InMemoryProductRepository:
        """
        Load the catalog from a JSON array of products.

        Raises:
            FileNotFoundError: If the file does not exist
            json.JSONDecodeError: If the file is not valid JSON
            ValueError: If the top level is not a list
        """
        try:
            with products_file.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.error(f"Products file not found: {products_file}")
            raise
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in {products_file}: {e}")
            raise

        if not isinstance(data, list):
            raise ValueError(f"{products_file} must contain a JSON array of products")

        products = [Product.model_validate(item) for item in data]
        logger.info(f"✅ Loaded {len(products)} products from {products_file}")
        return cls(products)

    def list_all(self) -> List[Product]:
        return self._products.copy()

    def list_by_store(self, store_id: int) -> List[Product]:
        return [p for p in self._products if p.store_id == store_id]


class SqlProductRepository(ProductRepository):
    """Catalog backed by the ``products`` table of the hosted database."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def list_all(self) -> List[Product]:
        rows = self._db.execute(
            select(ProductRecord).order_by(ProductRecord.product_name)
        ).scalars()
        return [Product.from_record(row) for row in rows]

    def list_by_store(self, store_id: int) -> List[Product]:
        rows = self._db.execute(
            select(ProductRecord)
            .where(ProductRecord.store_id == store_id)
            .order_by(ProductRecord.product_name)
        ).scalars()
        return [Product.from_record(row) for row in rows]


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

_memory_catalog: Optional[InMemoryProductRepository] = None


def get_memory_catalog() -> InMemoryProductRepository:
    """Get the global in-memory catalog, loading the sample data on first use."""
    global _memory_catalog
    if _memory_catalog is None:
        _memory_catalog = InMemoryProductRepository()
    return _memory_catalog


def init_memory_catalog(products_file: Optional[Path] = None) -> InMemoryProductRepository:
    """
    Initialize the global in-memory catalog.

    Args:
        products_file: JSON file to load; the sample catalog when None

    Returns:
        InMemoryProductRepository instance
    """
    global _memory_catalog
    if products_file is None:
        _memory_catalog = InMemoryProductRepository()
    else:
        _memory_catalog = InMemoryProductRepository.from_file(products_file)
    return _memory_catalog
