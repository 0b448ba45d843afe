"""
Main FastAPI application.

This is the entry point for the API server.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from candidate_tracker import __version__
from candidate_tracker.core.config import Settings, settings as default_settings
from candidate_tracker.core.logging import setup_logging
from candidate_tracker.db.session import Database
from candidate_tracker.errors import register_error_handlers
from candidate_tracker.routers import candidates, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for the FastAPI app.

    - On startup: connect the database (and create the schema if enabled)
    - On shutdown: dispose the engine and its connection pool
    """
    app_settings: Settings = app.state.settings
    database: Database = app.state.database

    setup_logging(app_settings.LOG_LEVEL)
    logger.info("Starting %s...", app_settings.APP_NAME)

    await database.connect()
    if app_settings.AUTO_CREATE_SCHEMA:
        await database.create_schema()

    yield  # The server runs while we're "yielded" here

    await database.disconnect()
    logger.info("Shutting down %s...", app_settings.APP_NAME)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """Build the application. Tests pass their own settings and database."""
    settings = settings or default_settings
    database = database or Database(settings.DATABASE_URL, echo=settings.DEBUG)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Candidate records API for a hiring pipeline",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    register_error_handlers(app)

    # Include routers (API endpoints)
    app.include_router(health.router, prefix=settings.API_PREFIX, tags=["Health"])
    app.include_router(candidates.router, prefix=settings.API_PREFIX)

    @app.get("/")
    async def root():
        return {"success": True, "service": settings.APP_NAME, "version": __version__}

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "candidate_tracker.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        log_level=default_settings.LOG_LEVEL.lower(),
    )
