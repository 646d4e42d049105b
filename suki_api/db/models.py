"""
==============================================================================
SQLAlchemy ORM Models Module
==============================================================================

ORM mappings for the tables of the hosted Suki database that this service
reads or writes.

Database Schema:
---------------

    ┌──────────────────────────────────────────┐
    │                products                  │
    ├──────────────────────────────────────────┤
    │ id (INTEGER, PK)                         │
    │ store_id (INTEGER, NOT NULL)             │
    │ product_name (VARCHAR, NOT NULL)         │
    │ price (FLOAT, NOT NULL)                  │
    │ product_image (VARCHAR)                  │
    │ description (TEXT)                       │
    │ product_type (VARCHAR)                   │
    └──────────────────────────────────────────┘

    ┌──────────────────────────────────────────┐
    │                 stores                   │
    ├──────────────────────────────────────────┤
    │ store_id (INTEGER, PK)                   │
    │ store_name (VARCHAR, NOT NULL)           │
    │ location (VARCHAR)                       │
    └──────────────────────────────────────────┘

    ┌──────────────────────────────────────────┐
    │                  users                   │
    ├──────────────────────────────────────────┤
    │ user_id (INTEGER, PK)                    │
    │ role (VARCHAR: customer, vendor)         │
    │ store_id (INTEGER, NULLABLE)             │
    │ user_points (FLOAT, DEFAULT 0)           │
    └──────────────────────────────────────────┘
                        │
                        │ 1:N (user_id, Vendor_ID)
                        ▼
    ┌──────────────────────────────────────────┐
    │               transactions               │
    ├──────────────────────────────────────────┤
    │ id (INTEGER, PK, AUTO INCREMENT)         │
    │ reference_number (VARCHAR, INDEXED)      │
    │ transaction_date (DATETIME)              │
    │ user_id (INTEGER → users.user_id)        │
    │ Vendor_ID (INTEGER → users.user_id)      │
    │ store_id (INTEGER)                       │
    │ product_id (INTEGER)                     │
    │ quantity (INTEGER)                       │
    │ price (FLOAT)                            │
    │ points (FLOAT)                           │
    │ transaction_type (VARCHAR)               │
    └──────────────────────────────────────────┘

One transactions row is written per purchased item; rows of the same sale
share a reference_number.

==============================================================================
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)

from suki_api.db.database import Base


# =============================================================================
# ENUMS
# =============================================================================

class UserRole(str, enum.Enum):
    """
    User role enumeration.

    - CUSTOMER: Earns points by redeeming transaction codes
    - VENDOR: Issues transaction codes for sales in their store
    """

    CUSTOMER = "customer"
    VENDOR = "vendor"

    def __str__(self) -> str:
        return self.value


# =============================================================================
# MODELS
# =============================================================================

class ProductRecord(Base):
    """
    Product row of the hosted catalog.

    Column names follow the hosted schema; the API-facing field names are
    produced by ``suki_api.catalog.models.Product.from_record``.
    """

    __tablename__ = "products"

    id: int = Column(Integer, primary_key=True, doc="Product ID")

    store_id: int = Column(
        Integer,
        nullable=False,
        index=True,
        doc="Owning store"
    )

    product_name: str = Column(String(255), nullable=False, doc="Display name")

    price: float = Column(Float, nullable=False, doc="Unit price")

    product_image: Optional[str] = Column(String(1024), nullable=True, doc="Image URL")

    description: Optional[str] = Column(Text, nullable=True)

    product_type: Optional[str] = Column(String(100), nullable=True)

    def __repr__(self) -> str:
        return f"<ProductRecord(id={self.id}, store_id={self.store_id}, name={self.product_name!r})>"


class Store(Base):
    """Merchant owning products, vendors and transactions."""

    __tablename__ = "stores"

    store_id: int = Column(Integer, primary_key=True, doc="Store ID")

    store_name: str = Column(String(255), nullable=False, doc="Display name")

    location: Optional[str] = Column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<Store(store_id={self.store_id}, name={self.store_name!r})>"


class User(Base):
    """
    App user as seen by the transaction flow.

    Only the columns needed for role checks and point balances are mapped.

    Attributes:
        user_id: Primary key
        role: "customer" or "vendor"
        store_id: Store a vendor works for (None for customers)
        user_points: Current loyalty point balance
    """

    __tablename__ = "users"

    user_id: int = Column(Integer, primary_key=True, doc="User ID")

    role: str = Column(
        String(20),
        nullable=False,
        default=UserRole.CUSTOMER.value,
        doc="User role"
    )

    store_id: Optional[int] = Column(
        Integer,
        nullable=True,
        doc="Store a vendor belongs to"
    )

    user_points: float = Column(
        Float,
        nullable=False,
        default=0,
        doc="Loyalty point balance"
    )

    @property
    def is_vendor(self) -> bool:
        return self.role == UserRole.VENDOR.value

    @property
    def is_customer(self) -> bool:
        return self.role == UserRole.CUSTOMER.value

    def __repr__(self) -> str:
        return f"<User(user_id={self.user_id}, role={self.role!r})>"


class Transaction(Base):
    """
    One purchased item of a redeemed sale.

    Attributes:
        reference_number: Shared id of the sale (TXN-<ms>-<hex>)
        transaction_date: When the vendor issued the code
        user_id: Customer who redeemed the code
        vendor_id: Vendor who issued the code (column "Vendor_ID")
        points: Points earned for this item
    """

    __tablename__ = "transactions"

    id: int = Column(Integer, primary_key=True, autoincrement=True)

    reference_number: str = Column(
        String(64),
        nullable=False,
        index=True,
        doc="Sale reference number"
    )

    transaction_date: datetime = Column(
        DateTime(timezone=True),
        nullable=False,
        doc="Issue time of the sale"
    )

    user_id: int = Column(
        Integer,
        ForeignKey("users.user_id"),
        nullable=False,
        index=True,
        doc="Customer"
    )

    vendor_id: Optional[int] = Column(
        "Vendor_ID",
        Integer,
        ForeignKey("users.user_id"),
        nullable=True,
        index=True,
        doc="Issuing vendor"
    )

    store_id: int = Column(Integer, nullable=False, index=True)

    product_id: Optional[int] = Column(Integer, nullable=True)

    quantity: int = Column(Integer, nullable=False)

    price: float = Column(Float, nullable=False)

    points: float = Column(Float, nullable=False, default=0)

    transaction_type: str = Column(String(32), nullable=False, default="Purchase")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the row for JSON responses."""
        return {
            "id": self.id,
            "reference_number": self.reference_number,
            "transaction_date": (
                self.transaction_date.isoformat() if self.transaction_date else None
            ),
            "user_id": self.user_id,
            "vendor_id": self.vendor_id,
            "store_id": self.store_id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "price": self.price,
            "points": self.points,
            "transaction_type": self.transaction_type,
        }

    def __repr__(self) -> str:
        return (
            f"<Transaction(reference_number={self.reference_number!r}, "
            f"product_id={self.product_id}, quantity={self.quantity})>"
        )
