"""
==============================================================================
Product Catalog Service - Application Entry Point
==============================================================================

FastAPI application serving the in-memory product catalog with:
- Catalog loading from the bundled JSON file or AlloyDB
- Catalog refresh endpoint
- Reload-on-read toggle via SIGUSR1 (enable) / SIGUSR2 (disable)

Usage:
------
    # Development
    uvicorn productcatalog.main:app --reload

    # Production
    uvicorn productcatalog.main:app --host 0.0.0.0 --port 3550

==============================================================================
"""

from __future__ import annotations

import logging
import signal
import threading
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from productcatalog.api.router import api_router
from productcatalog.config import Settings, get_settings
from productcatalog.core.exceptions import register_exception_handlers
from productcatalog.services.catalog_service import CatalogService


# ============================================================================
# LOGGING SETUP
# ============================================================================

settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

logger = logging.getLogger(__name__)


# ============================================================================
# APPLICATION FACTORY
# ============================================================================

class Application:
    """
    FastAPI application factory and manager.

    Handles application lifecycle including:
    - Initial catalog load on startup
    - Reload signal handlers
    - Router and exception handler registration
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        catalog_service: Optional[CatalogService] = None,
    ):
        """Initialize the application."""
        self._settings = settings or get_settings()
        self._catalog_service = catalog_service or CatalogService(self._settings)
        self._app = self._create_app()

    def _create_app(self) -> FastAPI:
        """Create and configure the FastAPI application."""
        app = FastAPI(
            title=self._settings.app_name,
            version="1.0.0",
            description="In-memory product catalog loaded from a file or AlloyDB",
            lifespan=self._lifespan,
            docs_url="/docs",
            redoc_url="/redoc",
        )

        app.state.catalog_service = self._catalog_service

        # Register exception handlers
        register_exception_handlers(app)

        # Register routers
        app.include_router(api_router)

        return app

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        """Application lifespan manager."""
        # Startup
        self._startup()
        yield
        # Shutdown
        self._shutdown()

    def _startup(self) -> None:
        """Application startup tasks."""
        logger.info("=" * 60)
        logger.info(f"🚀 Starting {self._settings.app_name}")
        logger.info("=" * 60)

        # Unreadable catalog file aborts startup
        self._catalog_service.load_initial_catalog()

        self._register_signal_handlers()

        logger.info(f"✅ {self._settings.app_name} ready")
        logger.info(f"📍 Running on http://{self._settings.host}:{self._settings.port}")

    def _shutdown(self) -> None:
        """Application shutdown tasks."""
        logger.info("🛑 Shutting down...")

    def _register_signal_handlers(self) -> None:
        """Bind SIGUSR1/SIGUSR2 to the reload toggle where available."""
        if not hasattr(signal, "SIGUSR1"):
            return
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not on the main thread, skipping reload signal handlers")
            return

        signal.signal(signal.SIGUSR1, lambda signum, frame: self._catalog_service.enable_reloading())
        signal.signal(signal.SIGUSR2, lambda signum, frame: self._catalog_service.disable_reloading())
        logger.debug("Reload signal handlers registered")

    @property
    def app(self) -> FastAPI:
        """Get the FastAPI application instance."""
        return self._app

    @property
    def catalog_service(self) -> CatalogService:
        """Get the catalog service."""
        return self._catalog_service


# ============================================================================
# APPLICATION INSTANCE
# ============================================================================

application = Application(settings)
app = application.app


# ============================================================================
# ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "productcatalog.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info"
    )
