"""
==============================================================================
Suki API - Application Entry Point
==============================================================================

FastAPI application serving the Suki loyalty app:
- Product catalog (all products, products per store)
- Database-inclusive health check
- Short-code transactions and loyalty points

Usage:
------
    # Development
    uvicorn suki_api.main:app --reload --port 3000

    # Production
    suki-api

DATABASE_URL and DATABASE_KEY must be set; the process exits otherwise.

==============================================================================
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from suki_api.api.router import api_router
from suki_api.catalog.repository import init_memory_catalog
from suki_api.config import Settings, get_settings
from suki_api.core.exceptions import register_exception_handlers
from suki_api.db.database import get_database_manager
from suki_api.schemas.common import MessageResponse
from suki_api.services.code_sweeper import CodeSweepTaskManager


# ============================================================================
# LOGGING SETUP
# ============================================================================

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

logger = logging.getLogger(__name__)


def load_settings() -> Settings:
    """
    Load settings or terminate the process.

    Missing database credentials are fatal at startup.
    """
    try:
        settings = get_settings()
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]).upper() for err in e.errors() if err["loc"]})
        logger.critical(f"❌ Configuration validation failed: {', '.join(fields)}")
        logger.critical("Set the missing values in the environment or the .env file")
        sys.exit(1)

    if settings.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    return settings


settings = load_settings()


# ============================================================================
# APPLICATION FACTORY
# ============================================================================

class Application:
    """
    FastAPI application factory and manager.

    Handles application lifecycle including:
    - Catalog loading and database connection check on startup
    - Expired-code sweeper start and stop
    - Middleware, router and exception handler setup
    """

    def __init__(self):
        self._settings = get_settings()
        self._sweeper = CodeSweepTaskManager()
        self._app = self._create_app()

    def _create_app(self) -> FastAPI:
        app = FastAPI(
            title=self._settings.app_name,
            version="1.0.0",
            description="Product catalog and loyalty transactions for the Suki app",
            lifespan=self._lifespan,
            docs_url="/docs",
            redoc_url="/redoc",
        )

        self._configure_middleware(app)
        register_exception_handlers(app)
        app.include_router(api_router)
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
        logger.info(f"🚀 Starting {self._settings.app_name}")
        logger.info("=" * 60)

        self._load_catalog()

        db_manager = get_database_manager()
        if self._settings.create_tables:
            db_manager.create_tables()
        if not db_manager.verify_connection():
            logger.warning("⚠️ Database unreachable at startup; /health will report errors until it recovers")

        if self._settings.code_sweep_enabled:
            self._sweeper.start()

        logger.info("=" * 60)
        logger.info(f"✅ {self._settings.app_name} ready")
        logger.info(f"📍 Running on http://{self._settings.host}:{self._settings.port}")
        logger.info(f"🗄️ Catalog backend: {self._settings.catalog_backend}")
        logger.info(f"🔑 DATABASE_KEY present ({self._settings.database_key_preview})")
        logger.info("=" * 60)

    def _shutdown(self) -> None:
        """Application shutdown tasks."""
        logger.info("🛑 Shutting down...")
        self._sweeper.stop()
        get_database_manager().dispose()
        logger.info("✅ Shutdown complete")

    def _load_catalog(self) -> None:
        """Load the in-memory product catalog."""
        if self._settings.catalog_backend != "memory":
            return

        try:
            catalog = init_memory_catalog(self._settings.products_path)
            logger.info(f"✅ Loaded {len(catalog.list_all())} products")
        except Exception as e:
            logger.error(f"❌ Failed to load catalog, using sample data: {e}")
            init_memory_catalog()

    def _configure_middleware(self, app: FastAPI) -> None:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=self._settings.cors_origins_list,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    def _register_root(self, app: FastAPI) -> None:

        @app.get("/", response_model=MessageResponse)
        async def root():
            """Welcome message."""
            return MessageResponse(message="Welcome! API is running. Try /health or /products")

    @property
    def app(self) -> FastAPI:
        """Get the FastAPI application instance."""
        return self._app


# ============================================================================
# APPLICATION INSTANCE
# ============================================================================

application = Application()
app = application.app


# ============================================================================
# ENTRY POINT
# ============================================================================

def run() -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    uvicorn.run(
        "suki_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info"
    )


if __name__ == "__main__":
    run()
