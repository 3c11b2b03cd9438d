"""
RestBuddy: FastAPI Application Factory
========================================

What:  Creates and configures the FastAPI application that serves every
       registered resource through one RequestDispatcher.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (`uvicorn restbuddy.main:app`) and the test suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌─────────────────────────┐ ┌──────┐ ┌────────┐    │
    │  │ Request ID + access log │→│ GZip │→│  CORS  │    │
    │  └─────────────────────────┘ └──────┘ └────────┘    │
    │                                                     │
    │  Routes (per registered resource):                  │
    │  ┌───────────────────────────┐ ┌─────────────────┐  │
    │  │ GET|PATCH|PUT /users/{id} │ │ GET /users      │  │
    │  └───────────────────────────┘ └─────────────────┘  │
    │  ┌─────────────────┐                                │
    │  │ GET /health     │                                │
    │  └─────────────────┘                                │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ Unsupp.→405  │   │
    │  │ UnknownResource→500 │ SQLAlchemyError→500    │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, optional table creation, log registered resources
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from restbuddy import __version__
from restbuddy.config import settings
from restbuddy.database import create_tables, dispose_engine
from restbuddy.exceptions import (
    RestBuddyError,
    ValidationError,
    NotFoundError,
    UnsupportedRequestError,
    UnknownResourceError,
)
from restbuddy.middleware.request_context import RequestContextMiddleware, request_id_var
from restbuddy.models import default_registry
from restbuddy.registry import ResourceRegistry
from restbuddy.routes import health
from restbuddy.routes.resources import collection, resources
from restbuddy.schemas.options import DispatcherOptions
from restbuddy.services.dispatcher import RequestDispatcher

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s

    Set LOG_LEVEL=DEBUG to see merged parameters and derived conditions
    for every dispatched request.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("RestBuddy %s starting up...", __version__)

    if settings.create_tables:
        await create_tables()
        logger.info("Database tables ensured")

    registry: ResourceRegistry = app.state.registry
    logger.info("Serving resources: %s", ", ".join(sorted(registry)) or "(none)")
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("RestBuddy shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, details: Optional[dict] = None) -> dict:
    body = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the error envelope.

    Handler hierarchy:
        ValidationError          → 400 Bad Request
        NotFoundError            → 404 Not Found
        UnsupportedRequestError  → 405 Method Not Allowed
        UnknownResourceError     → 500 Internal Server Error
        RestBuddyError (base)    → 500 Internal Server Error
        SQLAlchemyError          → 500 Internal Server Error (details logged only)
        Exception (fallback)     → 500 Internal Server Error
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", exc.message, exc.context),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=_error_body("not_found", exc.message),
        )

    @app.exception_handler(UnsupportedRequestError)
    async def handle_unsupported_request(request: Request, exc: UnsupportedRequestError):
        logger.warning(
            "[%s] Unsupported request: %s %s (%s)",
            request_id_var.get(""), request.method, request.url.path, exc.request_type,
        )
        return JSONResponse(
            status_code=405,
            content=_error_body("unsupported_request", exc.message, exc.context),
        )

    @app.exception_handler(UnknownResourceError)
    async def handle_unknown_resource(request: Request, exc: UnknownResourceError):
        logger.error("[%s] %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=500,
            content=_error_body("unknown_resource", exc.message),
        )

    @app.exception_handler(RestBuddyError)
    async def handle_restbuddy_error(request: Request, exc: RestBuddyError):
        logger.error("[%s] %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", exc.message),
        )

    @app.exception_handler(SQLAlchemyError)
    async def handle_database_error(request: Request, exc: SQLAlchemyError):
        """Store failure: generic message to the client, details in the log."""
        logger.error(
            "[%s] Database error on %s %s: %s",
            request_id_var.get(""), request.method, request.url.path, str(exc),
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "server_error", "An internal error occurred. Please try again later."
            ),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again or contact support.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    registry: Optional[ResourceRegistry] = None,
    options: Optional[DispatcherOptions] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        registry: Resources to serve. Defaults to the demo models
                  (`restbuddy.models.default_registry()`).
        options:  Dispatcher options shared by all resource routes.

    Returns:
        Configured FastAPI instance. The registry and dispatcher are kept on
        `app.state` for the health check and for tests.
    """
    registry = registry if registry is not None else default_registry()
    dispatcher = RequestDispatcher(registry, options)

    app = FastAPI(
        title="RestBuddy API",
        description="Generic list / show / update endpoints for registered SQLAlchemy models.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.registry = registry
    app.state.dispatcher = dispatcher

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: request context → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestContextMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(health.router)
    for resource in registry:
        collection(app, dispatcher, resource)
        resources(app, dispatcher, resource)

    return app


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()
