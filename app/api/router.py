"""
==============================================================================
Main API Router
==============================================================================

Combines all API routes under the /api prefix.

==============================================================================
"""

from fastapi import APIRouter

from app.api.endpoints import products


class MainAPIRouter:
    """
    Main API router combining all endpoint routers.

    Provides a single entry point for all API endpoints.
    """

    def __init__(self):
        """Initialize the main router with all sub-routers."""
        self._router = APIRouter(prefix="/api")
        self._include_routers()

    def _include_routers(self) -> None:
        """Include all endpoint routers."""
        self._router.include_router(products.router)

    @property
    def router(self):
        """Get the FastAPI router instance."""
        return self._router


# Create main API router instance
api_router = MainAPIRouter().router
