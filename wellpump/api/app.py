"""FastAPI application factory for WellPump.

Creates and configures the FastAPI app with CORS, error rendering and all
route modules registered.
"""

import logging
from typing import List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..core.advisor import PumpAdvisor
from ..core.catalog import PumpCatalog
from ..core.db import DatabaseManager
from ..core.selection import SelectionService
from .core import register_exception_handlers

logger = logging.getLogger(__name__)


def create_app(
    db_manager: DatabaseManager,
    pump_catalog: Optional[PumpCatalog] = None,
    pump_advisor: Optional[PumpAdvisor] = None,
    selection_service: Optional[SelectionService] = None,
    cors_origins: Optional[List[str]] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        db_manager: DatabaseManager instance
        pump_catalog: PumpCatalog instance (built from db_manager if omitted)
        pump_advisor: PumpAdvisor instance (disabled advisor if omitted)
        selection_service: SelectionService instance (built if omitted)
        cors_origins: origins allowed to call the API from a browser

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="WellPump API",
        description="Water-well pump selection",
        version="0.1.0",
    )

    # CORS for the browser UI
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins or ["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    pump_catalog = pump_catalog or PumpCatalog(db_manager)
    pump_advisor = pump_advisor or PumpAdvisor()
    selection_service = selection_service or SelectionService(pump_catalog, pump_advisor)

    # Store shared dependencies on app state
    app.state.db_manager = db_manager
    app.state.pump_catalog = pump_catalog
    app.state.pump_advisor = pump_advisor
    app.state.selection_service = selection_service

    # Register routers
    from .routes.pumps import router as pumps_router
    from .routes.selection import router as selection_router

    app.include_router(pumps_router, prefix="/api")
    app.include_router(selection_router, prefix="/api")

    @app.get("/api/health")
    async def health_check():
        try:
            pump_count = pump_catalog.count_pumps()
        except Exception as e:
            logger.warning(f"Health check could not count pumps: {e}")
            pump_count = None
        return {
            "status": "ok" if pump_count is not None else "degraded",
            "service": "wellpump",
            "pumps": pump_count,
            "llm": pump_advisor.get_metrics(),
        }

    logger.info("FastAPI app created with all routes registered")
    return app
