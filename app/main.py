"""
==============================================================================
Products API - Application Entry Point
==============================================================================

FastAPI application with:
- Product catalog REST endpoints (CRUD, search, filters, stats)
- API key protection for mutations
- Request logging
- Uniform JSON error responses

Usage:
------
    # Development
    uvicorn app.main:app --reload

    # Production
    APP_ENV=production API_KEY=... uvicorn app.main:app --host 0.0.0.0 --port 3000

==============================================================================
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.api.router import api_router
from app.catalog import ProductCatalog, build_catalog
from app.config import Settings, get_settings
from app.core.exceptions import register_exception_handlers


# ============================================================================
# LOGGING SETUP
# ============================================================================

settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

logger = logging.getLogger(__name__)

request_logger = logging.getLogger("app.requests")


# ============================================================================
# APPLICATION FACTORY
# ============================================================================

class Application:
    """
    FastAPI application factory and manager.

    Each instance owns its own Settings and ProductCatalog, both exposed
    on ``app.state`` for the dependency layer.

    Handles application lifecycle including:
    - Startup and shutdown logging
    - Middleware configuration
    - Router registration
    - Exception handler setup
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        catalog: Optional[ProductCatalog] = None,
    ):
        """
        Initialize the application.

        Args:
            settings: Explicit settings (defaults to the global instance)
            catalog: Explicit catalog (defaults to one built from settings)
        """
        self._settings = settings or get_settings()
        self._catalog = catalog if catalog is not None else build_catalog(self._settings)
        self._app = self._create_app()

    def _create_app(self) -> FastAPI:
        """Create and configure the FastAPI application."""
        app = FastAPI(
            title=self._settings.app_name,
            version="1.0.0",
            description="In-memory product catalog with search, filters and statistics",
            lifespan=self._lifespan,
            docs_url="/docs",
            redoc_url="/redoc",
        )

        app.state.settings = self._settings
        app.state.catalog = self._catalog

        self._configure_middleware(app)
        register_exception_handlers(app)
        self._register_routers(app)
        self._register_root(app)

        return app

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        """Application lifespan manager."""
        self._startup()
        yield
        self._shutdown()

    def _startup(self) -> None:
        """Application startup tasks."""
        logger.info("=" * 60)
        logger.info(f"🚀 Starting {self._settings.app_name} ({self._settings.app_env})")
        logger.info(f"📦 Catalog holds {len(self._catalog)} products")
        logger.info(f"📍 Running on http://{self._settings.host}:{self._settings.port}")
        logger.info(f"📖 API Docs: http://{self._settings.host}:{self._settings.port}/docs")
        logger.info("=" * 60)

    def _shutdown(self) -> None:
        """Application shutdown tasks."""
        logger.info("🛑 Shutting down...")

    def _configure_middleware(self, app: FastAPI) -> None:
        """Configure application middleware."""
        app.add_middleware(
            CORSMiddleware,
            allow_origins=self._settings.cors_origins_list,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            target = request.url.path
            if request.url.query:
                target = f"{target}?{request.url.query}"
            user_agent = request.headers.get("user-agent", "Unknown")
            request_logger.info(f"{request.method} {target} - {user_agent}")
            return await call_next(request)

    def _register_routers(self, app: FastAPI) -> None:
        """Register API routers."""
        app.include_router(api_router)

    def _register_root(self, app: FastAPI) -> None:
        """Register root endpoint."""

        @app.get("/")
        def root():
            """Welcome document listing the main endpoints."""
            return {
                "success": True,
                "message": "Welcome to the Products API!",
                "version": "1.0.0",
                "endpoints": {
                    "products": "/api/products",
                    "search": "/api/products/search",
                    "statistics": "/api/products/stats",
                },
                "documentation": "See /docs for the interactive API documentation",
            }

    @property
    def app(self) -> FastAPI:
        """Get the FastAPI application instance."""
        return self._app

    @property
    def catalog(self) -> ProductCatalog:
        """Get the catalog served by this application."""
        return self._catalog


# ============================================================================
# APPLICATION INSTANCE
# ============================================================================

application = Application()
app = application.app


# ============================================================================
# ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info"
    )
