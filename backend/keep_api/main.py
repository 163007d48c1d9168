"""
Keep API — FastAPI Application Factory
========================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() assembles middleware, exception handlers, routers and the
       security services. uvicorn imports the module-level `app`
       (uvicorn keep_api.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → GZip → CORS    │
    │                                                     │
    │  Routes:                                            │
    │    /notes, /note/{id}            (public)           │
    │    /homepage, /pages, /page/{id} (public)           │
    │    /register, /login             (public)           │
    │    /admin/...                    (AuthGate)         │
    │    /, /health                                       │
    │                                                     │
    │  app.state:                                         │
    │    token_service  TokenService(secret from settings)│
    │    auth_gate      AuthGate(token_service)           │
    │    credential_store  CredentialStore(bcrypt rounds) │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → config validation → CREATE TABLE IF NOT EXISTS
    Shutdown: dispose the engine (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from keep_api import __version__
from keep_api.config import Settings, settings
from keep_api.database import create_tables, dispose_engine
from keep_api.exceptions import (
    DatabaseError,
    InvalidCredentialsError,
    InvalidTokenError,
    KeepError,
    MissingTokenError,
    NotFoundError,
    ValidationError,
)
from keep_api.middleware.logging import RequestLoggingMiddleware
from keep_api.middleware.request_id import RequestIDMiddleware, request_id_var
from keep_api.routes import admin_pages, auth, health, notes, pages
from keep_api.security.auth_gate import AuthGate
from keep_api.security.tokens import TokenService
from keep_api.services.credential_store import CredentialStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers are noisy at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app_settings: Settings = app.state.settings

    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("Keep API %s starting up...", __version__)

    try:
        app_settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: a dev secret is a warning, not a crash
        logger.warning("%s", str(e))

    if app_settings.db_create_tables:
        await create_tables()

    logger.info("Server ready at http://%s:%d", app_settings.app_host, app_settings.app_port)
    logger.info("=" * 60)

    yield

    logger.info("Keep API shutting down...")
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
    Map exception types to HTTP status codes and response bodies.

    Handler hierarchy:
        ValidationError / RequestValidationError → 400
        InvalidTokenError / InvalidCredentials   → 401
        MissingTokenError                        → 403
        NotFoundError                            → 404
        DatabaseError                            → 500 (generic message)
        KeepError (base)                         → its own status_code
        Exception (fallback)                     → 500 (generic message)

    Security: responses never carry stack traces, SQL or driver messages.
    Details are logged server-side.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body(exc.error_code, exc.message, exc.context),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Malformed body/path: same 400 contract as service-level validation."""
        errors = [
            {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), errors)
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", "Invalid request data", {"errors": errors}),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content=_error_body(exc.error_code, exc.message))

    @app.exception_handler(MissingTokenError)
    @app.exception_handler(InvalidTokenError)
    @app.exception_handler(InvalidCredentialsError)
    async def handle_auth_error(request: Request, exc: KeepError):
        logger.info(
            "[%s] Auth rejected %s %s: %s",
            request_id_var.get(""),
            request.method,
            request.url.path,
            exc.error_code,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.error_code, exc.message),
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return JSONResponse(status_code=500, content=_error_body(exc.error_code, exc.message))

    @app.exception_handler(KeepError)
    async def handle_keep_error(request: Request, exc: KeepError):
        logger.error("[%s] %s: %s", request_id_var.get(""), type(exc).__name__, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.error_code, exc.message),
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
                "An unexpected error occurred. Please try again later.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    The token signing secret is read from `app_settings` exactly once, here,
    and lives inside the TokenService stored on app.state. The bcrypt work
    factor, CORS origins and log level also come from `app_settings`.

    The database engine is not: it is created once per process in
    keep_api.database from the environment (DATABASE_URL / DB_*), so every
    app built in one process shares the same connection pool.
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title="Keep API",
        description="Notes CRUD API and a small CMS with token-protected admin routes.",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.token_service = TokenService(
        secret=app_settings.jwt_secret,
        ttl_seconds=app_settings.jwt_expires_in_seconds,
        algorithm=app_settings.jwt_algorithm,
    )
    app.state.auth_gate = AuthGate(app.state.token_service)
    app.state.credential_store = CredentialStore(rounds=app_settings.bcrypt_rounds)

    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(notes.router)
    app.include_router(pages.router)
    app.include_router(auth.router)
    app.include_router(admin_pages.router)

    return app


app = create_app()
