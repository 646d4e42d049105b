"""
==============================================================================
Points Schemas Module
==============================================================================

Response schemas for point balances and the store directory.

==============================================================================
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PointsBalance(BaseModel):
    """Points of one user, overall or earned in a single store."""
    user_id: int
    store_id: Optional[int] = None
    total_points: float = Field(default=0, ge=0)


class StorePoints(BaseModel):
    """Points a user earned in one store."""
    store_id: int
    store_name: str
    available_points: float


class StoreSummary(BaseModel):
    """Entry of the store directory."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    location: Optional[str] = None
