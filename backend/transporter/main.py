"""
Transporter Backend — FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes middleware registration, route mounting, exception handling
       and lifecycle logging in one place.
How:   Factory pattern: create_app(database, settings) returns a configured
       FastAPI instance bound to the given database handle.
Who:   Called by the entry point (transporter.__main__) and by the test suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain (outermost first):                │
    │  CORS → GZip → RequestID → Logging → Timeouts        │
    │                                                     │
    │  Routes:                                            │
    │  /api/v1/drivers, /api/v1/driver[/{id}]             │
    │  /api/v1/trucks,  /api/v1/truck[/{id}]              │
    │  /health                                            │
    │                                                     │
    │  Exception Handlers:                                │
    │  NotFound→404 │ Conflict→409 │ DB→500 │ other→500   │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from transporter import __version__
from transporter.config import Settings
from transporter.database import Database
from transporter.exceptions import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    TransporterError,
)
from transporter.middleware.logging import RequestLoggingMiddleware
from transporter.middleware.request_id import RequestIDMiddleware, request_id_var
from transporter.middleware.timeout import ConnectionTimeoutMiddleware
from transporter.routes import drivers, health, trucks

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire process.

    What:    Root logger to stdout with a consistent format.
    When:    Called first thing by the entry point, before configuration is
             loaded, so configuration errors are logged too. Calling it again
             with a different level just reconfigures.

    Format: 2024-01-15T12:00:00 [INFO] transporter.config: Checking environment
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # These log every operation at INFO/DEBUG; our access log covers requests
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Log startup and shutdown of the ASGI application.

    The database handle is owned by the entry point: it is connected before
    the app exists and closed after the server has stopped, so the lifespan
    neither opens nor disposes it.
    """
    logger.info("Transporter API %s ready", __version__)
    yield
    logger.info("Transporter API stopped accepting requests")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(code: str, message: str, details: Optional[dict] = None) -> dict:
    body = {"error": code, "message": message, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP responses.

        NotFoundError     → 404 Not Found
        ConflictError     → 409 Conflict
        DatabaseError     → 500 Internal Server Error (generic message)
        TransporterError  → 500 Internal Server Error (catch-all for custom)
        Exception         → 500 Internal Server Error (unexpected errors)

    Request validation errors keep FastAPI's default 422 format.
    Handlers never put stack traces or SQL in the response body.
    """

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content=_error_body("not_found", exc.message))

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        logger.warning("[%s] Conflict: %s", request_id_var.get(""), exc.message)
        details = {"field": exc.field} if exc.field else None
        return JSONResponse(
            status_code=409, content=_error_body("conflict", exc.message, details)
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "server_error", "An internal error occurred. Please try again later."
            ),
        )

    @app.exception_handler(TransporterError)
    async def handle_transporter_error(request: Request, exc: TransporterError):
        logger.error("[%s] Application error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=500, content=_error_body("server_error", exc.message)
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Catch-all for truly unexpected errors.

        Starlette runs this handler outside the user middleware stack, so the
        CORS header is added here for browser clients.
        """
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        headers = {}
        if "origin" in request.headers:
            headers["Access-Control-Allow-Origin"] = "*"
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again later.",
            ),
            headers=headers,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(database: Database, settings: Settings) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        database: Connected handle, shared by every request of this app.
        settings: Validated configuration (CORS origins, timeouts).

    Returns:
        Fully configured FastAPI instance ready to be served.
    """
    app = FastAPI(
        title="Transporter API",
        description="Driver and truck registry for a transporter fleet.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.database = database
    app.state.settings = settings

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute. Timeouts sit innermost so their 408/503
    # responses still pass through logging, request ID and CORS.
    app.add_middleware(
        ConnectionTimeoutMiddleware,
        read_timeout=settings.read_timeout,
        write_timeout=settings.write_timeout,
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=500)

    # Every origin is allowed; "*" cannot be combined with credentials
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    register_exception_handlers(app)

    app.include_router(drivers.router)
    app.include_router(trucks.router)
    app.include_router(health.router)

    return app
