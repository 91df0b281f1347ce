"""
FastAPI application entry point.

This module creates and configures the FastAPI application.
Using an application factory pattern (create_app function) because:
- Easier to test with different configurations
- Explicit about initialization order
- Can create multiple app instances if needed (e.g., for testing)

For local development:
    uvicorn coachtrack.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .api.errors import register_exception_handlers
from .api.routes import coaches, health, sessions
from .config.settings import Settings, get_settings
from .infrastructure.database import DatabaseConfig, create_database, seed_coaches

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup opens the database, creates missing tables and seeds the
    configured coaches. Shutdown disposes the engine.
    """
    settings: Settings = app.state.settings

    logger.info(
        "CoachTrack API starting",
        extra={
            "version": settings.api_version,
            "mock_mode": settings.store_mock_mode,
        }
    )

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )

    database = create_database(
        DatabaseConfig(url=settings.database_url, echo=settings.database_echo),
        mock_mode=settings.store_mock_mode,
    )
    await database.init_schema()
    await seed_coaches(database, settings.seed_coaches_list)
    app.state.database = database

    yield

    logger.info("CoachTrack API shutting down")
    await database.close()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application. Tests pass their own
    Settings; otherwise the cached environment settings are used.
    """
    settings = settings or get_settings()

    logging.getLogger().setLevel(settings.log_level.upper())

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
        Track the training hours of Pilates coaches working towards
        certification.

        ## Workflow

        1. **Register a coach**: `POST /api/coaches`
        2. **Log sessions**: `POST /api/coaches/{coach_id}/sessions`
           - One session is a number of hours on one equipment (reformer,
             mat or chair), either practising or observing
        3. **Follow progress**: `GET /api/coaches/{coach_id}/progress`
           - Hours per equipment against the certification objectives
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(
        health.router,
        prefix="/api/health",
        tags=["Health"],
    )

    app.include_router(
        coaches.router,
        prefix="/api/coaches",
        tags=["Coaches"],
    )

    app.include_router(
        sessions.router,
        prefix="/api",
        tags=["Sessions"],
    )

    if settings.serve_client:
        # Mounted last so the API routes take precedence
        app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="client")
    else:
        @app.get("/", include_in_schema=False)
        async def root():
            return {
                "message": "CoachTrack API",
                "version": settings.api_version,
                "docs": "/docs",
                "health": "/api/health",
            }

    logger.info(
        "FastAPI application created",
        extra={
            "title": settings.api_title,
            "version": settings.api_version,
        }
    )

    return app


# Create the application instance
# This is what uvicorn will import
app = create_app()


# For debugging/development
if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "coachtrack.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )
