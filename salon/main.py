"""FastAPI application entry point: wires everything together.

Usage:
    python -m salon.main
"""

from __future__ import annotations

import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from salon.admin.events import emit, start_event_system, stop_event_system, subscribe
from salon.api import appointments, catalog, finance, reports
from salon.config import settings
from salon.db.engine import db_lifespan
from salon.errors import (
    AuthenticationError,
    BookingConflictError,
    NotFoundError,
    PersistenceError,
    SalonError,
    ValidationError,
)
from salon.schemas.events import EventType, SystemEvent
from salon.security.audit import audit_on_event

# ── Logging setup ────────────────────────────────────────────────────

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s %(levelname)-8s %(name)s - %(message)s",
    stream=sys.stdout,
)
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = logging.getLogger(__name__)

# ── FastAPI lifespan ─────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup and shutdown lifecycle."""
    logger.info("Starting salon dashboard (env=%s)", settings.environment)

    async with db_lifespan():
        logger.info("Database initialized")

        await start_event_system()
        subscribe(audit_on_event)
        logger.info("Audit logging subscriber registered")

        await emit(SystemEvent(event_type=EventType.SYSTEM_STARTUP, actor_id="system", source_module="main"))
        try:
            yield
        finally:
            logger.info("Shutting down salon dashboard...")
            await emit(SystemEvent(event_type=EventType.SYSTEM_SHUTDOWN, actor_id="system", source_module="main"))
            await stop_event_system()

    logger.info("Salon dashboard shutdown complete")


# ── FastAPI app ──────────────────────────────────────────────────────

app = FastAPI(
    title="Salon Dashboard API",
    description="Agenda, catalogs, stock and cash flow for beauty salons",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(appointments.router)
app.include_router(catalog.router)
app.include_router(finance.router)
app.include_router(reports.router)


# ── Error responses ──────────────────────────────────────────────────

_STATUS_CODES: list[tuple[type[SalonError], int]] = [
    (AuthenticationError, 401),
    (ValidationError, 422),
    (BookingConflictError, 409),
    (NotFoundError, 404),
    (PersistenceError, 502),
]


def _status_for(exc: SalonError) -> int:
    for error_type, code in _STATUS_CODES:
        if isinstance(exc, error_type):
            return code
    return 500


@app.exception_handler(SalonError)
async def salon_error_handler(request: Request, exc: SalonError) -> JSONResponse:
    """Render every domain error as a toast body: ``{"title", "message"}``."""
    code = _status_for(exc)
    if code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected (%d): %s", request.method, request.url.path, code, exc.message)
    return JSONResponse(status_code=code, content={"title": exc.title, "message": exc.message})


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {
        "status": "ok",
        "environment": settings.environment,
    }


# ── Entry point ──────────────────────────────────────────────────────

if __name__ == "__main__":
    uvicorn.run(
        "salon.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
    )
