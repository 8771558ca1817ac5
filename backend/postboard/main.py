"""
Postboard Backend: FastAPI Application Factory
================================================

What:  Creates the root application: the entry dispatcher.
How:   create_app() mounts the API application at /api and registers the
       preview catch-all for every other path.
Who:   uvicorn (uvicorn postboard.main:app, or the `postboard` script).

Dispatch:
    /api/...        -> API application (auth, posts routes, JSON envelopes)
    anything else   -> preview page (first comment rows as HTML)

Lifecycle:
    Startup:  configure logging, validate settings, optionally create tables
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from postboard import __version__
from postboard.api import create_api_app
from postboard.config import Settings, settings as default_settings
from postboard.database import (
    create_engine_from_settings,
    create_session_factory,
    create_tables,
)
from postboard.middleware.api_key import API_KEY_HEADER
from postboard.middleware.logging import RequestLoggingMiddleware
from postboard.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIDMiddleware,
    request_id_var,
)
from postboard.routes import preview

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

class RequestIDLogFilter(logging.Filter):
    """Adds the current request id to every record as %(request_id)s."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get("") or "-"
        return True


def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIDLogFilter())

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[handler],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings

    setup_logging(settings.log_level)
    logger.info("Postboard %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Reads and the preview still work without a key
        logger.error("Configuration error: %s", str(e))

    if settings.db_create_tables:
        await create_tables(app.state.engine)
        logger.info("Database tables ensured")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Postboard shutting down...")
    await app.state.engine.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Root application handlers.

    API failures never get here: the mounted API application converts them
    into envelopes. What remains is the preview page, whose storage failures
    are unhandled faults reported as a generic 500.
    """

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the root application.

    Settings and the storage handle are built here once and handed to the
    API application explicitly; nothing reads them from module globals
    during a request.
    """
    settings = settings or default_settings
    engine = create_engine_from_settings(settings)
    session_factory = create_session_factory(engine)

    app = FastAPI(
        title="Postboard",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory

    # ── Middleware (last added runs first) ────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", API_KEY_HEADER, REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # ── Dispatch ──────────────────────────────────────────────────────────
    # Mount first: the preview catch-all must only see non-API paths
    app.mount("/api", create_api_app(settings, session_factory))
    app.include_router(preview.router)

    return app


def run() -> None:
    """Console entry point: serve the default application with uvicorn."""
    uvicorn.run(
        "postboard.main:app",
        host=default_settings.backend_host,
        port=default_settings.backend_port,
        log_level=default_settings.log_level.lower(),
    )


app = create_app()
