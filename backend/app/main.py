"""
TIL Backend — FastAPI Application
==================================

What:  Builds the FastAPI app: middleware, exception handlers, routers.
How:   create_app() returns a new, fully wired instance. The module-level
       `app` is what uvicorn serves (`uvicorn app.main:app`); tests call
       create_app() themselves so every test gets fresh middleware state.

Request path:
    RequestID → AccessLog → RateLimit → GZip → CORS → router
        /api/acronyms/    acronyms, search, relationships
        /api/users/       registration, login, user reads
        /api/categories/  categories
        /health           liveness + database check

Lifecycle:
    startup:   configure logging, check cross-field settings
    shutdown:  dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import settings
from app.database import dispose_engine
from app.exceptions import DatabaseError, TILError, UnauthorizedError
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.rate_limit import RateLimitMiddleware
from app.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from app.routes import acronyms, categories, health, users

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Third-party loggers that are too chatty at INFO
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "aiosqlite")


# ══════════════════════════════════════════════════════════════════════════
# Logging
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str | None = None) -> None:
    """Route all logging to stdout at `level` (default: settings.log_level)."""
    logging.basicConfig(
        level=level or settings.log_level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S",
        stream=sys.stdout,
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup and shutdown hooks.

    The schema is managed by Alembic (`alembic upgrade head`), not here.
    A configuration problem is logged loudly but does not stop the server.
    """
    setup_logging()
    logger.info("TIL Backend %s starting on %s:%d", __version__, settings.backend_host, settings.backend_port)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration problem: %s", str(e))

    yield

    logger.info("TIL Backend shutting down")
    await dispose_engine()


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(
    status_code: int,
    error: str,
    message: str,
    details: dict | None = None,
    headers: dict | None = None,
) -> JSONResponse:
    """Build the common error envelope {error, message, details?, request_id}."""
    body = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to JSON error responses.

    Starlette picks the handler of the closest class in the exception's MRO:
        UnauthorizedError       → 401 + WWW-Authenticate challenge
        DatabaseError           → 500, generic message (context logged only)
        TILError (any other)    → exc.status_code / exc.error_code
        RequestValidationError  → 400 validation_error, per-field errors
        Exception               → 500 internal_server_error

    429 responses are built by RateLimitMiddleware, which sits outside
    these handlers. No handler puts stack traces or SQL in a response body.
    """

    @app.exception_handler(TILError)
    async def handle_app_error(request: Request, exc: TILError):
        log = logger.error if exc.status_code >= 500 else logger.info
        log("[%s] %s %s: %s", request_id_var.get(""), exc.status_code, exc.error_code, exc.message)
        return _error_response(exc.status_code, exc.error_code, exc.message, exc.context)

    @app.exception_handler(UnauthorizedError)
    async def handle_unauthorized(request: Request, exc: UnauthorizedError):
        logger.info("[%s] Unauthorized %s %s", request_id_var.get(""), request.method, request.url.path)
        return _error_response(
            exc.status_code,
            exc.error_code,
            exc.message,
            headers={"WWW-Authenticate": exc.scheme},
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return _error_response(
            exc.status_code,
            exc.error_code,
            "An internal error occurred. Please try again later.",
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
            for err in exc.errors()
        ]
        logger.info(
            "[%s] Request validation failed: %s",
            request_id_var.get(""),
            [".".join(str(part) for part in err["loc"]) for err in errors],
        )
        return _error_response(
            400, "validation_error", "Request validation failed", {"errors": errors}
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return _error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="TIL API",
        description=(
            "Acronyms owned by users and tagged with categories. "
            "Reads are public; writes need a bearer token from /api/users/login."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    # add_middleware wraps the current stack, so the last one added runs first
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER, "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    for module in (acronyms, users, categories, health):
        app.include_router(module.router)

    return app


app = create_app()
