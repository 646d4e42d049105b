"""
==============================================================================
Points Endpoints
==============================================================================

Loyalty point balances and the store directory.

Endpoints:
----------
- GET /user/{id}/points               balance, optionally for ?storeId=
- GET /user/{id}/points-by-store      earned points per store
- GET /stores                         store directory

==============================================================================
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from suki_api.core.dependencies import get_points_service
from suki_api.core.exceptions import fault_boundary
from suki_api.schemas.points import PointsBalance, StorePoints, StoreSummary
from suki_api.services.points_service import PointsService


router = APIRouter(tags=["Points"])


@router.get("/user/{user_id}/points", response_model=PointsBalance)
async def get_user_points(
    user_id: int,
    store_id: Optional[int] = Query(None, alias="storeId"),
    service: PointsService = Depends(get_points_service)
):
    """Get a user's point balance."""
    with fault_boundary(f"Get points of user {user_id}"):
        return service.get_balance(user_id, store_id)


@router.get("/user/{user_id}/points-by-store", response_model=List[StorePoints])
async def get_user_points_by_store(
    user_id: int,
    service: PointsService = Depends(get_points_service)
):
    """Get the points a user earned in each store, highest first."""
    with fault_boundary(f"Get points by store of user {user_id}"):
        return service.points_by_store(user_id)


@router.get("/stores", response_model=List[StoreSummary])
async def list_stores(service: PointsService = Depends(get_points_service)):
    """List every store."""
    with fault_boundary("List stores"):
        return service.list_stores()
