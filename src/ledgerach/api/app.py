"""FastAPI application with lifespan, router mounting and error mapping."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ledgerach.api.routes import ach, health, routing
from ledgerach.core.config import AppSettings
from ledgerach.core.exceptions import (
    BatchLockedError,
    BatchNotFoundError,
    BatchStatusConflictError,
    BatchStatusError,
    FileIdModifierExhausted,
    LedgerAchError,
    NachaInputError,
    NachaInternalError,
    StoredFileNotFoundError,
)
from ledgerach.core.logconfig import configure_logging
from ledgerach.persistence import create_persistence
from ledgerach.services.ach_file_service import AchFileService

logger = structlog.get_logger(__name__)

# Most specific first; the first matching class wins.
_STATUS_BY_ERROR: list[tuple[type[LedgerAchError], int]] = [
    (BatchNotFoundError, 404),
    (StoredFileNotFoundError, 404),
    (BatchLockedError, 409),
    (BatchStatusConflictError, 409),
    (BatchStatusError, 409),
    (FileIdModifierExhausted, 409),
    (NachaInputError, 422),
    (NachaInternalError, 500),
]


async def _ledgerach_error_handler(request: Request, exc: LedgerAchError) -> JSONResponse:
    status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(exc, cls)), 502)
    if isinstance(exc, NachaInternalError):
        kind = "internal"
    else:
        kind = "input" if status < 500 else "backend"
    if status >= 500:
        logger.error("request_failed", path=request.url.path,
                     error=type(exc).__name__, detail=str(exc))
    return JSONResponse(
        status_code=status,
        content={"error": type(exc).__name__, "kind": kind, "detail": str(exc)},
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Initialize and tear down application resources."""
    if getattr(app.state, "ach_service", None) is None:
        settings = AppSettings()
        configure_logging(settings.log_level, settings.log_format)
        batch_store, file_store, locks = create_persistence(settings)
        app.state.settings = settings
        app.state.ach_service = AchFileService(
            settings=settings, batch_store=batch_store, file_store=file_store, locks=locks,
        )
    yield


def create_app(service: AchFileService | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    ``service`` is injected by tests; otherwise it is built from settings at startup.
    """
    app = FastAPI(
        title="ledgerach NACHA file service",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.ach_service = service
    app.add_exception_handler(LedgerAchError, _ledgerach_error_handler)
    app.include_router(health.router)
    app.include_router(ach.router)
    app.include_router(routing.router)
    return app
