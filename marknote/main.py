"""
MarkNote — FastAPI Application Factory
=======================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn marknote.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌────────┐ ┌─────────┐ ┌─────────────┐ ┌────────┐  │
    │  │ Req ID │→│ Logging │→│ Method Ovr. │→│Session │  │
    │  └────────┘ └─────────┘ └─────────────┘ └────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────────┐ ┌─────────────┐ ┌───────┐ │
    │  │ /notes (HTML CRUD)   │ │ GET /health │ │/static│ │
    │  └──────────────────────┘ └─────────────┘ └───────┘ │
    │                                                     │
    │  Exception Handlers (HTML error pages):             │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→422 │ NotFound→404 │ DB/other→500 │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from marknote import __version__
from marknote.config import settings
from marknote.database import dispose_engine
from marknote.exceptions import (
    DatabaseError,
    MarkNoteError,
    NotFoundError,
    ValidationError,
)
from marknote.middleware.logging import RequestLoggingMiddleware
from marknote.middleware.method_override import MethodOverrideMiddleware
from marknote.middleware.request_id import (
    RequestIDMiddleware,
    RequestIdLogFilter,
    request_id_var,
)
from marknote.routes import health, notes
from marknote.templating import STATIC_DIR, templates

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s"


def setup_logging() -> None:
    """
    Configure logging for the entire application.

    When:    Called once during app startup, before any other initialization.
    Format:  LOG_FORMAT; the request ID comes from RequestIdLogFilter, which
             sits on the handler so records from every logger get it.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdLogFilter())
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[handler],
        force=True,
    )

    # These libraries log every operation at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:  configure logging, validate settings, log readiness.
    Shutdown: dispose the database engine (closes pooled connections).
    """
    setup_logging()
    logger.info("MarkNote %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Not fatal: the app still works in development with the defaults.
        logger.warning("Configuration warning: %s", str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("MarkNote shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _render_error(request: Request, status_code: int, title: str, message: str):
    return templates.TemplateResponse(
        request,
        "errors/error.html",
        {
            "status_code": status_code,
            "error_title": title,
            "error_message": message,
            "request_id": request_id_var.get(""),
        },
        status_code=status_code,
    )


GENERIC_ERROR_TITLE = "Something went wrong"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTML error pages.

    Handler hierarchy:
        ValidationError      → 422 (create/update normally catch it first)
        NotFoundError        → 404
        DatabaseError        → 500
        MarkNoteError (base) → 500
        Exception (fallback) → 500

    Pages never show internal details; `context` and tracebacks only go to
    the log, tagged with the request ID.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("Validation error outside a form: %s", exc.context.get("fields"))
        message = "; ".join(exc.full_messages) or exc.message
        return _render_error(request, 422, "Invalid note", message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        logger.info("%s %s: %s", request.method, request.url.path, exc.message)
        return _render_error(
            request,
            404,
            "Note not found",
            "The note you were looking for doesn't exist. It may have been deleted.",
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error("Database error: %s | Context: %s", exc.message, exc.context)
        return _render_error(
            request, 500, GENERIC_ERROR_TITLE, "An internal error occurred. Please try again later."
        )

    @app.exception_handler(MarkNoteError)
    async def handle_app_error(request: Request, exc: MarkNoteError):
        logger.error("Application error: %s | Context: %s", exc.message, exc.context)
        return _render_error(request, 500, GENERIC_ERROR_TITLE, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("Unhandled %s on %s %s", type(exc).__name__, request.method,
                     request.url.path, exc_info=exc)
        return _render_error(
            request, 500, GENERIC_ERROR_TITLE, "An unexpected error occurred. Please try again."
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="MarkNote",
        description="Markdown note-taking with search and live preview.",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition: the last one added
    # sees the request first. Execution order:
    #     RequestID → Logging → MethodOverride → Session → GZip → routes
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.secret_key,
        session_cookie=settings.session_cookie,
        same_site="lax",
    )
    app.add_middleware(MethodOverrideMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    app.include_router(notes.router)
    app.include_router(health.router)

    return app


# uvicorn expects `marknote.main:app` to be importable
app = create_app()
