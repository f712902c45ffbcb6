"""
Jotter: FastAPI Application Factory
=====================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() builds the AppContext, registers middleware, exception
       handlers, routes and the /static mount, and returns the app.
Who:   uvicorn (`uvicorn jotter.main:app`, or the `jotter` console script);
       tests call create_app() with their own Settings / store.

Application Layout:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:   Request ID → Logging → GZip          │
    │                                                     │
    │  Routes:       /  /new  /note/{slug}                │
    │                /note/delete/{slug}  /health         │
    │  Mount:        /static → STATIC_DIR                 │
    │                                                     │
    │  Exception Handlers:                                │
    │    Validation→400 │ NotFound→404 │ Method→405       │
    │    Store→500      │ anything else→500               │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, create the schema if configured
    Shutdown: close the store, dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles

from jotter import __version__
from jotter.config import Settings, settings as default_settings
from jotter.context import build_context
from jotter.exceptions import (
    JotterError,
    MethodNotAllowedError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from jotter.middleware.logging import RequestLoggingMiddleware
from jotter.middleware.request_id import RequestIDMiddleware, request_id_var
from jotter.routes import health, notes
from jotter.services.store_base import NoteStore

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An internal error occurred. Please try again later."


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout.
    Chatty third-party loggers are raised to WARNING.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("MARKDOWN").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    context = app.state.context

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(context.settings.log_level)
    logger.info("Jotter %s starting up...", __version__)
    await context.startup()
    logger.info(
        "Server ready at http://%s:%d",
        context.settings.backend_host,
        context.settings.backend_port,
    )

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Jotter shutting down...")
    await context.shutdown()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes.

    Handler hierarchy:
        ValidationError         → 400 Bad Request
        NotFoundError           → 404 Not Found
        MethodNotAllowedError   → 405 Method Not Allowed (+ Allow header)
        StoreError              → 500, generic message
        JotterError (base)      → 500, generic message
        Exception (fallback)    → 500, generic message

    Internal details (SQL errors, constraint names, stack traces) are only
    ever logged, never written to the response.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return PlainTextResponse(exc.message, status_code=400)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return PlainTextResponse("404 page not found", status_code=404)

    @app.exception_handler(MethodNotAllowedError)
    async def handle_method_not_allowed(request: Request, exc: MethodNotAllowedError):
        return PlainTextResponse(
            "Method not allowed",
            status_code=405,
            headers={"Allow": ", ".join(exc.allowed)},
        )

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        rid = request_id_var.get("")
        logger.error("[%s] Store error: %s | Context: %s", rid, exc.message, exc.context)
        return PlainTextResponse(GENERIC_ERROR_MESSAGE, status_code=500)

    @app.exception_handler(JotterError)
    async def handle_jotter_error(request: Request, exc: JotterError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return PlainTextResponse(GENERIC_ERROR_MESSAGE, status_code=500)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return PlainTextResponse(GENERIC_ERROR_MESSAGE, status_code=500)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None, store: Optional[NoteStore] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: configuration; defaults to the environment-loaded settings
        store:    ready-made NoteStore to use instead of building one
    """
    settings = settings or default_settings

    app = FastAPI(
        title="Jotter",
        description="Server-rendered note taking: create, list, view, edit and delete notes.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.context = build_context(settings, store=store)

    # ── Middleware ────────────────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → GZip
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # ── Routes ────────────────────────────────────────────────────────────
    app.include_router(notes.router)
    app.include_router(health.router)
    app.mount(
        "/static",
        StaticFiles(directory=settings.static_dir, check_dir=False),
        name="static",
    )

    return app


def run() -> None:
    """Console entry point: serve the default application with uvicorn."""
    import uvicorn

    uvicorn.run(
        "jotter.main:app",
        host=default_settings.backend_host,
        port=default_settings.backend_port,
        log_level=default_settings.log_level.lower(),
    )


app = create_app()
