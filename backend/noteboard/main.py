"""
NoteBoard — FastAPI Application Factory
========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() builds the stores (or takes injected
       ones), the session registry, middleware, handlers and routes.
Who:   uvicorn (noteboard.main:app) and the `noteboard` console script.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware: Request ID → Session → Logging              │
    │                                                          │
    │  Routes:                                                 │
    │  ┌──────────────┐ ┌───────────────┐ ┌─────────────────┐  │
    │  │ HTML board   │ │ /api/board    │ │ /storage /health│  │
    │  └──────┬───────┘ └──────┬────────┘ └─────────────────┘  │
    │         └──── BoardRegistry (one NoteBoard per session)  │
    │                    │                  │                  │
    │              RecordStore          BlobStore              │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → config check → local SQLite schema (if used)
    Shutdown: close both stores (HTTP clients, DB engine)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from noteboard import __version__
from noteboard.config import settings
from noteboard.exceptions import (
    NoteBoardError,
    NotFoundError,
    StorageError,
    TransientNetworkError,
    ValidationError,
)
from noteboard.middleware.logging import RequestLoggingMiddleware
from noteboard.middleware.request_id import RequestIDMiddleware, request_id_var
from noteboard.routes import api, board, health, storage
from noteboard.services.board_registry import BoardRegistry
from noteboard.services.providers import build_blob_store, build_record_store
from noteboard.services.store_base import BlobStore, RecordStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once at startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("NoteBoard %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: /health reports the unreachable store
        logger.error("Configuration error: %s", str(e))

    record_store = app.state.record_store
    create_schema = getattr(record_store, "create_schema", None)
    if create_schema is not None and settings.database_url.startswith("sqlite"):
        await create_schema()
        logger.info("SQLite schema ready at %s", settings.database_url)

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("NoteBoard shutting down...")
    await app.state.record_store.close()
    await app.state.blob_store.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(exc: NoteBoardError, error: str, message: Optional[str] = None) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": error,
            "message": message or exc.message,
            "details": exc.context,
            "request_id": request_id_var.get(""),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to status codes and one JSON error shape.

    Handler hierarchy:
        ValidationError        → 400 Bad Request
        NotFoundError          → 404 Not Found
        StorageError           → 502 Bad Gateway
        TransientNetworkError  → 503 Service Unavailable
        NoteBoardError (base)  → 500 Internal Server Error
        Exception (fallback)   → 500, no details
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(exc, "validation_error")

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(exc, "not_found")

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        logger.error(
            "[%s] Storage error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return _error_response(exc, "storage_error")

    @app.exception_handler(TransientNetworkError)
    async def handle_transient_error(request: Request, exc: TransientNetworkError):
        logger.error(
            "[%s] Store unavailable: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return _error_response(exc, "service_unavailable")

    @app.exception_handler(NoteBoardError)
    async def handle_noteboard_error(request: Request, exc: NoteBoardError):
        logger.error("[%s] Application error: %s", request_id_var.get(""), exc.message)
        return _error_response(exc, "server_error")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Stack trace goes to the log only, never into the response."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    record_store: Optional[RecordStore] = None,
    blob_store: Optional[BlobStore] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        record_store: Use this store instead of the configured one (tests).
        blob_store: Use this store instead of the configured one (tests).
    """
    app = FastAPI(
        title="NoteBoard",
        description=(
            "A minimal note board: notes with a name, a description and an "
            "optional image, kept in a record store and a blob store."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    app.state.record_store = record_store or build_record_store()
    app.state.blob_store = blob_store or build_blob_store()
    app.state.registry = BoardRegistry(
        app.state.record_store,
        app.state.blob_store,
        max_sessions=settings.max_sessions,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Session → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.url_signing_secret,
        session_cookie=settings.session_cookie_name,
        same_site="lax",
    )
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(board.router)
    app.include_router(api.router)
    app.include_router(storage.router)
    app.include_router(health.router)

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "noteboard.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


app = create_app()
