"""
==============================================================================
Catalog Package - Product Data Access
==============================================================================

Classes:
--------
- Product: Pydantic model for products
- ProductRepository: Read-only catalog interface
- InMemoryProductRepository: Sample/JSON-file catalog
- SqlProductRepository: Hosted-database catalog

==============================================================================
"""

from .models import Product
from .repository import (
    SAMPLE_PRODUCTS,
    InMemoryProductRepository,
    ProductRepository,
    SqlProductRepository,
    get_memory_catalog,
    init_memory_catalog,
)

__all__ = [
    "Product",
    "SAMPLE_PRODUCTS",
    "ProductRepository",
    "InMemoryProductRepository",
    "SqlProductRepository",
    "get_memory_catalog",
    "init_memory_catalog",
]
