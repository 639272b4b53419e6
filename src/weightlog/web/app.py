"""FastAPI application for the weightlog JSON API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .. import __version__
from ..db.engine import get_db_path, init_db
from ..errors import (
    ImportValidationError,
    RemoteError,
    RemoteNotConfiguredError,
    ValidationError,
    WeightLogError,
)
from ..services import BackupService, HybridSyncCoordinator, create_coordinator
from .routers import backup, entries, settings, sync

logger = logging.getLogger(__name__)


def _status_for(error: WeightLogError) -> int:
    if isinstance(error, (ValidationError, ImportValidationError)):
        return 400
    if isinstance(error, RemoteNotConfiguredError):
        return 409
    if isinstance(error, RemoteError):
        return 502
    # StorageWriteError and anything unexpected
    return 500


async def weightlog_exception_handler(request: Request, exc: WeightLogError) -> JSONResponse:
    """Log a weightlog error and return it as JSON."""
    status_code = _status_for(exc)
    log_level = logging.WARNING if status_code < 500 else logging.ERROR
    logger.log(log_level, "API Error: %s | %s %s", exc.message, request.method, request.url.path)

    return JSONResponse(
        status_code=status_code,
        content={
            "detail": exc.message,
            "error_type": exc.__class__.__name__,
            **({"errors": exc.details["errors"]} if "errors" in exc.details else {}),
        },
    )


def create_app(coordinator: HybridSyncCoordinator | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        coordinator: Coordinator to serve; built from configuration at
            startup when omitted
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Construct the coordinator on startup and dispose of it on shutdown."""
        active = coordinator
        if active is None:
            db_path = get_db_path()
            if not db_path.exists():
                await init_db(db_path)
            active = create_coordinator(db_path=db_path)

        app.state.coordinator = active
        app.state.backup = BackupService(active.entries, active.settings)
        await active.start()
        yield
        await active.close()

    app = FastAPI(
        title="weightlog",
        description="Personal weight tracker with Airtable backup",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_exception_handler(WeightLogError, weightlog_exception_handler)

    app.include_router(entries.router)
    app.include_router(settings.router)
    app.include_router(sync.router)
    app.include_router(backup.router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app
