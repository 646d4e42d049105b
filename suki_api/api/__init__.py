"""
==============================================================================
API Endpoints
==============================================================================

Routers:
--------
- health: Database-inclusive health check
- products: Product catalog
- transactions: Short-code transactions
- points: Point balances and store directory

==============================================================================
"""

from . import health, points, products, transactions

__all__ = ["health", "points", "products", "transactions"]
