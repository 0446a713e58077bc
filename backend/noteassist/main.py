"""
NoteAssist Backend — FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes configuration, middleware registration, route mounting,
       and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn noteassist.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐        │
    │  │ Req ID   │→│ Logging  │→│ GZip │→│ CORS │        │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘        │
    │                                                     │
    │  Routes:                                            │
    │  ┌────────────┐ ┌──────────────┐ ┌───────────────┐  │
    │  │ /api/notes │ │ /api/ai/*    │ │ /health       │  │
    │  │ (auth)     │ │ (AI_REQUIRE_ │ │ /api/test     │  │
    │  │            │ │  AUTH)       │ │               │  │
    │  └────────────┘ └──────────────┘ └───────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  401 Unauthorized │ 403 Forbidden │ 400 Validation  │
    │  404 NotFound     │ 500 Upstream / Database / other │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → config validation → provider singletons built
    Shutdown: provider HTTP clients closed → database engine disposed
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
from starlette.exceptions import HTTPException as StarletteHTTPException

from noteassist import __version__
from noteassist.config import settings
from noteassist.database import dispose_engine
from noteassist.exceptions import (
    DatabaseError,
    ForbiddenError,
    NoteAssistError,
    NotFoundError,
    UnauthorizedError,
    UpstreamError,
    ValidationError,
)
from noteassist.middleware.logging import RequestLoggingMiddleware
from noteassist.middleware.request_id import RequestIDMiddleware, request_id_var
from noteassist.routes import assist, health, notes
from noteassist.services.providers import close_providers, get_identity_verifier, get_llm_service

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s to stdout
    (Docker captures stdout). Called once during startup.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    for noisy in ("uvicorn.access", "sqlalchemy.engine", "httpcore", "httpx", "google.auth"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("NoteAssist Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: /health and /api/test still answer, and the
        # affected routes fail with clear errors.
        logger.error("Configuration error: %s", str(e))

    # Build the process-wide singletons now so failures surface at startup
    try:
        llm = get_llm_service()
        logger.info("AI provider: %s", llm.name)
    except Exception as e:
        logger.error("Could not initialize AI provider '%s': %s", settings.ai_provider, str(e))
    get_identity_verifier()

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("NoteAssist Backend shutting down...")
    await close_providers()
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    return request_id_var.get("") or getattr(request.state, "request_id", "")


def _error_response(request: Request, status_code: int, message: str, **extra) -> JSONResponse:
    content = {"error": message, "request_id": _request_id(request)}
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the {"error": ...} envelope.

    Handler hierarchy:
        UnauthorizedError       → 401 (+ WWW-Authenticate: Bearer)
        ForbiddenError          → 403
        ValidationError         → 400
        RequestValidationError  → 400 (malformed JSON, wrong field types)
        NotFoundError           → 404
        UpstreamError           → 500
        DatabaseError           → 500 (generic message)
        NoteAssistError (base)  → 500
        HTTPException           → its own status (unknown route, bad method)
        Exception (fallback)    → 500 (stack trace logged only)
    """

    @app.exception_handler(UnauthorizedError)
    async def handle_unauthorized(request: Request, exc: UnauthorizedError):
        return JSONResponse(
            status_code=401,
            content={"error": exc.message, "request_id": _request_id(request)},
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(ForbiddenError)
    async def handle_forbidden(request: Request, exc: ForbiddenError):
        logger.warning("[%s] Rejected token: %s", _request_id(request), exc.context)
        return _error_response(request, 403, exc.message)

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", _request_id(request), exc.message)
        return _error_response(request, 400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        details = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
            for err in exc.errors()
        ]
        logger.warning("[%s] Invalid request body: %s", _request_id(request), details)
        return _error_response(request, 400, "Invalid request", details=details)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(request, 404, exc.message)

    @app.exception_handler(UpstreamError)
    async def handle_upstream_error(request: Request, exc: UpstreamError):
        logger.error("[%s] Upstream error: %s | Context: %s", _request_id(request), exc.message, exc.context)
        return _error_response(request, 500, exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        # Full context server-side only
        logger.error("[%s] Database error: %s | Context: %s", _request_id(request), exc.message, exc.context)
        return _error_response(request, 500, exc.message)

    @app.exception_handler(NoteAssistError)
    async def handle_app_error(request: Request, exc: NoteAssistError):
        logger.error("[%s] Application error: %s | Context: %s", _request_id(request), exc.message, exc.context)
        return _error_response(request, 500, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail), "request_id": _request_id(request)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            _request_id(request),
            str(exc),
            exc_info=True,
        )
        # Runs outside RequestIDMiddleware, which never saw a response to tag
        response = _error_response(request, 500, "An unexpected error occurred")
        rid = _request_id(request)
        if rid:
            response.headers["X-Request-ID"] = rid
        return response


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns a fresh instance each call, so tests can build isolated apps
    and install their own dependency overrides.
    """
    app = FastAPI(
        title="NoteAssist API",
        description=(
            "Per-user note storage authenticated with Google Sign-In, plus "
            "summarize / improve / idea-generation helpers backed by a "
            "configurable generative AI provider."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Execution order is the reverse of addition: RequestID runs first.
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
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(notes.router)
    app.include_router(assist.router)
    app.include_router(health.router)

    return app


# uvicorn expects `noteassist.main:app` to be importable
app = create_app()
