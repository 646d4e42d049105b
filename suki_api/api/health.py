"""
==============================================================================
Health Check Endpoint
==============================================================================

Liveness probe for the hosting platform that includes the database.

==============================================================================
"""

import logging
from datetime import datetime, timezone
from typing import Tuple

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from suki_api.db.database import get_db
from suki_api.db.models import User
from suki_api.schemas.common import HealthStatus


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


class HealthController:
    """Controller for health check operations."""

    def __init__(self, db: Session):
        self._db = db

    def check_database(self) -> None:
        """Run a minimal existence query against the users table."""
        self._db.execute(select(User.user_id).limit(1))

    def get_health(self) -> Tuple[int, HealthStatus]:
        """
        Probe the database.

        Any fault fails the probe, whether the driver reported it or it was
        unexpected.

        Returns:
            Tuple of (HTTP status code, health payload)
        """
        timestamp = datetime.now(timezone.utc).isoformat()

        try:
            self.check_database()
        except SQLAlchemyError as e:
            logger.error(f"❌ Health check database fault: {e}")
            return 500, HealthStatus(
                status="error",
                message=f"Database connection failed: {e}",
                timestamp=timestamp,
            )
        except Exception as e:
            logger.exception(f"❌ Health check failed: {e}")
            return 500, HealthStatus(
                status="error",
                message=f"Server error: {e}",
                timestamp=timestamp,
            )

        return 200, HealthStatus(
            status="success",
            message="Server and database are running",
            timestamp=timestamp,
        )


@router.get("", response_model=HealthStatus)
async def health_check(db: Session = Depends(get_db)):
    """
    Health check endpoint.

    200 with status "success" when the database answers, 500 with status
    "error" and the upstream message otherwise.
    """
    status_code, health = HealthController(db).get_health()
    return JSONResponse(status_code=status_code, content=health.model_dump())
