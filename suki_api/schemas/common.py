"""
==============================================================================
Common Schemas Module
==============================================================================

Shared response schemas used across API endpoints.

==============================================================================
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Simple message response."""
    success: bool = Field(default=True)
    message: str


class HealthStatus(BaseModel):
    """Result of a database health probe. Computed per request, never stored."""
    status: Literal["success", "error"]
    message: str
    timestamp: Optional[str] = None
