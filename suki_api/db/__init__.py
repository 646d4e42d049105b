"""
==============================================================================
Database Package
==============================================================================

SQLAlchemy database infrastructure and ORM models.

Architecture:
------------
├── database.py   - DatabaseManager class, session dependency
└── models.py     - ProductRecord, Store, User, Transaction

==============================================================================
"""

from .database import DatabaseManager, Base, build_database_url, get_database_manager, get_db
from .models import ProductRecord, Store, Transaction, User, UserRole

__all__ = [
    # Database management
    "DatabaseManager",
    "Base",
    "build_database_url",
    "get_database_manager",
    "get_db",
    # Models
    "ProductRecord",
    "Store",
    "Transaction",
    "User",
    "UserRole",
]
