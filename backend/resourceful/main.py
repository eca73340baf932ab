"""
Resourceful — FastAPI Application Factory
===========================================

What:  Creates a FastAPI application that serves RestController resources.
How:   create_app(*routers) wires logging, middleware, exception handlers
       and the given resource routers into one FastAPI instance.
Who:   Called by the embedding application (or uvicorn through a module
       that does `app = create_app(resource_router(...))`).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐                   │
    │  │ Req ID   │→│  Logging        │                   │
    │  └──────────┘ └─────────────────┘                   │
    │                                                     │
    │  Resource Routes:                                   │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ /{resource}[/{resource_id}] → RestController │   │
    │  └──────────────────────────────────────────────┘   │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ NotFound→404 │ InvalidStatusCode→500 │ …→500 │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Every error leaves as a JSON envelope built with the configured field
names, e.g. {"code": 404, "message": "The requested resource was not found"}.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

from resourceful import __version__
from resourceful.config import settings
from resourceful.exceptions import (
    ConfigurationLockedError,
    InvalidStatusCode,
    ResourceNotFoundError,
    ResourcefulError,
    ResponseAlreadySentError,
)
from resourceful.middleware.logging import RequestLoggingMiddleware
from resourceful.middleware.request_id import RequestIDFilter, RequestIDMiddleware
from resourceful.rest.envelope import pack_envelope
from resourceful.schemas.dispatch import DispatcherConfig

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(request_id)s] %(name)s: %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure logging for the whole process.

    Every record passes through RequestIDFilter, so dispatcher, error and
    access lines of one request share the same [request_id] column.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIDFilter())

    logging.basicConfig(
        level=getattr(logging, level or settings.log_level, logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[handler],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("Resourceful %s starting with %d routes", __version__, len(app.routes))

    yield

    logger.info("Resourceful shutting down")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

INTERNAL_ERROR_MESSAGE = "An internal error occurred. Please try again later."


def error_envelope(request: Request, status_code: int, message: str) -> dict:
    """
    Pack an error into the envelope of the controller that served the request.

    Requests that never reached a resource controller use the field names
    from settings.
    """
    envelope = getattr(request.state, "envelope", None)
    if envelope is None:
        envelope = DispatcherConfig.from_settings(settings).envelope
    return pack_envelope(envelope, status_code, message=message)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map package exceptions to envelope responses.

    Handler hierarchy:
        ResourceNotFoundError     → 404
        InvalidStatusCode         → 500 (logged as a configuration error)
        ResponseAlreadySentError  → 500
        ConfigurationLockedError  → 500
        ResourcefulError (base)   → 500
        Exception (fallback)      → 500

    Context dicts are logged server-side only, never returned.
    """

    @app.exception_handler(ResourceNotFoundError)
    async def handle_not_found(request: Request, exc: ResourceNotFoundError):
        logger.info("Routing miss: %s", exc.context)
        return JSONResponse(status_code=404, content=error_envelope(request, 404, exc.message))

    @app.exception_handler(InvalidStatusCode)
    async def handle_invalid_status(request: Request, exc: InvalidStatusCode):
        logger.error("Configuration error: %s", exc.message)
        return JSONResponse(status_code=500, content=error_envelope(request, 500, INTERNAL_ERROR_MESSAGE))

    @app.exception_handler(ResponseAlreadySentError)
    async def handle_already_sent(request: Request, exc: ResponseAlreadySentError):
        logger.error("%s | Context: %s", exc.message, exc.context)
        return JSONResponse(status_code=500, content=error_envelope(request, 500, INTERNAL_ERROR_MESSAGE))

    @app.exception_handler(ConfigurationLockedError)
    async def handle_configuration_locked(request: Request, exc: ConfigurationLockedError):
        logger.error("%s | Context: %s", exc.message, exc.context)
        return JSONResponse(status_code=500, content=error_envelope(request, 500, INTERNAL_ERROR_MESSAGE))

    @app.exception_handler(ResourcefulError)
    async def handle_resourceful_error(request: Request, exc: ResourcefulError):
        logger.error("%s | Context: %s", exc.message, exc.context)
        return JSONResponse(status_code=500, content=error_envelope(request, 500, exc.message))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("Unexpected error: %s", str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=error_envelope(request, 500, "An unexpected error occurred."),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(*routers: APIRouter, title: str = "Resourceful API") -> FastAPI:
    """
    Create a FastAPI application serving the given resource routers.

    Example:
        app = create_app(
            resource_router("/articles", ArticleController),
            resource_router("/users", UserController),
        )
    """
    app = FastAPI(title=title, version=__version__, lifespan=lifespan)

    # Middleware executes in reverse order of addition:
    # RequestID → Logging → route
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    for router in routers:
        app.include_router(router)

    return app
