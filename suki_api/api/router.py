"""
==============================================================================
Main API Router
==============================================================================

Combines all route modules. Routes are served from the root path.

==============================================================================
"""

from fastapi import APIRouter

from suki_api.api import health, points, products, transactions


class MainAPIRouter:
    """Main API router combining all route modules."""

    def __init__(self):
        self._router = APIRouter()
        self._include_routers()

    def _include_routers(self) -> None:
        self._router.include_router(health.router)
        self._router.include_router(products.router)
        self._router.include_router(transactions.router)
        self._router.include_router(points.router)

    @property
    def router(self):
        """Get the FastAPI router instance."""
        return self._router


api_router = MainAPIRouter().router
