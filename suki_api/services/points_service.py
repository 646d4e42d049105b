"""
==============================================================================
Points Service Module
==============================================================================

Read side of the loyalty program: balances and per-store totals.

Balances:
---------
- Without a store: the ``users.user_points`` balance credited on redemption
- With a store: sum of ``transactions.points`` the user earned there

Unknown users and stores without purchases report zero points rather than
an error.

==============================================================================
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from suki_api.db.models import Store, Transaction, User
from suki_api.schemas.points import PointsBalance, StorePoints, StoreSummary


# Module logger
logger = logging.getLogger(__name__)


class PointsService:
    """
    Points and store directory queries.

    Example:
        >>> service = PointsService(db_session)
        >>> service.get_balance(20).total_points
        28.5
        >>> [s.store_id for s in service.points_by_store(20)]
        [1]
    """

    DEFAULT_STORE_NAME = "Store"

    def __init__(self, db: Session) -> None:
        self._db = db

    def get_balance(self, user_id: int, store_id: Optional[int] = None) -> PointsBalance:
        """
        Get a user's points, overall or for one store.

        Args:
            user_id: User to look up
            store_id: Restrict to points earned in this store

        Returns:
            PointsBalance, zero when nothing is recorded
        """
        if store_id is None:
            user = self._db.get(User, user_id)
            total = user.user_points if user is not None else 0
        else:
            total = self._db.execute(
                select(func.coalesce(func.sum(Transaction.points), 0))
                .where(Transaction.user_id == user_id, Transaction.store_id == store_id)
            ).scalar_one()

        logger.debug(f"Points of user {user_id} (store {store_id}): {total}")
        return PointsBalance(user_id=user_id, store_id=store_id, total_points=round(total or 0, 2))

    def points_by_store(self, user_id: int) -> List[StorePoints]:
        """
        Sum a user's earned points per store, highest first.

        Stores missing from the ``stores`` table are reported under a
        generic name.
        """
        rows = self._db.execute(
            select(
                Transaction.store_id,
                Store.store_name,
                func.sum(Transaction.points).label("points"),
            )
            .outerjoin(Store, Store.store_id == Transaction.store_id)
            .where(Transaction.user_id == user_id)
            .group_by(Transaction.store_id, Store.store_name)
        ).all()

        result = [
            StorePoints(
                store_id=row.store_id,
                store_name=row.store_name or self.DEFAULT_STORE_NAME,
                available_points=round(row.points or 0, 2),
            )
            for row in rows
        ]
        result.sort(key=lambda entry: entry.available_points, reverse=True)
        return result

    def list_stores(self) -> List[StoreSummary]:
        """List every store ordered by id."""
        stores = self._db.execute(select(Store).order_by(Store.store_id)).scalars()
        return [
            StoreSummary(id=store.store_id, name=store.store_name, location=store.location)
            for store in stores
        ]
