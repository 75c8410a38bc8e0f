"""
Main FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from datetime import date, datetime, timezone
from typing import Callable, Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware

from plantflow.api import batches, plants, records, upload
from plantflow.api.dependencies import error_response
from plantflow.config.settings import Settings
from plantflow.db.database import Database

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    clock: Callable[[], date] = utc_today,
) -> FastAPI:
    """
    Build the API. A database passed in stays owned by the caller; otherwise
    one is created from settings at startup and disposed at shutdown.
    """
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = app.state.database is None
        if owned:
            app.state.database = Database(settings.database_url, echo=settings.sql_echo)
        # Create database tables
        app.state.database.create_all()
        logger.info("Database ready (retention=%d days, header mode=%s)", settings.retention_days, settings.header_mode)
        try:
            yield
        finally:
            if owned:
                app.state.database.dispose()
                app.state.database = None

    app = FastAPI(
        title="PlantFlow Dispatch Tracker",
        description="Daily shipment batches with ready / in-process tracking",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database
    app.state.clock = clock

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error.")

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(upload.router, prefix="/api", tags=["upload"])
    app.include_router(records.router, prefix="/api/records", tags=["records"])
    app.include_router(batches.router, prefix="/api/batches", tags=["batches"])
    app.include_router(plants.router, prefix="/api", tags=["plants"])

    @app.get("/")
    async def root():
        return {"message": "PlantFlow Dispatch Tracker API"}

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


app = create_app()
