"""
MindEase Backend — FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() builds the Database and FileService, attaches them to
       app.state, registers middleware, exception handlers, and routers.
Who:   uvicorn imports `mindease.main:app`; tests call create_app() with
       their own Database and Settings.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                     FastAPI App                          │
    │                                                          │
    │  Middleware:  RequestID → Logging → GZip → CORS          │
    │                                                          │
    │  Routes:  /auth  /chats  /discussions  /profile          │
    │           /uploads  /health                              │
    │                                                          │
    │  Exception Handlers:                                     │
    │    MindEaseError → its status_code (400/404/500)         │
    │    RequestValidationError → 400                          │
    │    Exception → 500                                       │
    └──────────────────────────────────────────────────────────┘
          │ app.state.database.store       │ app.state.file_service
          ▼                                ▼
    SQLAlchemyStore (DataStore)       upload directory

Lifecycle:
    Startup:   logging, upload directory, optional create_all
    Shutdown:  dispose the engine (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from mindease import __version__
from mindease.config import Settings, settings
from mindease.database import Database
from mindease.exceptions import MindEaseError
from mindease.middleware.logging import RequestLoggingMiddleware
from mindease.middleware.request_id import RequestIDMiddleware, request_id_var
from mindease.routes import auth, chats, discussions, health, profile, uploads
from mindease.services.file_service import FileService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure process-wide logging.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Access lines come from the "mindease.access" logger; request IDs are
    included in their message text.
    """
    logging.basicConfig(
        level=getattr(logging, level or settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers are noisy at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app_settings: Settings = app.state.settings
    database: Database = app.state.database

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("MindEase Backend %s starting up...", __version__)

    uploads_dir = Path(app_settings.upload_dir)
    uploads_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Upload directory: %s", uploads_dir.resolve())

    if app_settings.db_create_tables:
        await database.create_all()
        logger.info("Database tables created (DB_CREATE_TABLES=true)")

    logger.info("Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("MindEase Backend shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    # The catch-all handler runs outside the middleware's context, so
    # request.state is checked first
    return getattr(request.state, "request_id", None) or request_id_var.get("")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to the ErrorResponse body.

    Handler hierarchy:
        MindEaseError (and subclasses)  → exc.status_code
        RequestValidationError          → 400 (FastAPI's default is 422)
        Exception (fallback)            → 500

    5xx responses carry a generic message and no details; the exception
    context is logged server-side.
    """

    @app.exception_handler(MindEaseError)
    async def handle_mindease_error(request: Request, exc: MindEaseError):
        rid = _request_id(request)
        content = {
            "error": exc.error_code,
            "message": exc.message,
            "request_id": rid,
        }
        if exc.status_code >= 500:
            logger.error(
                "[%s] %s: %s | Context: %s",
                rid, type(exc).__name__, exc.message, exc.context,
            )
        else:
            logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)
            content["details"] = exc.context
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Malformed body, non-numeric id, or wrong field type."""
        rid = _request_id(request)
        errors = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
                "message": err.get("msg", "Invalid value"),
            }
            for err in exc.errors()
        ]
        logger.warning("[%s] Request validation failed: %s", rid, errors)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": "Invalid request",
                "details": {"errors": errors},
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = _request_id(request)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again later.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    app_settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to use (defaults to the module singleton)
        database: Pre-built Database (tests pass one bound to SQLite)

    The Database and FileService are wired here rather than in the lifespan
    so the app serves requests even when the lifespan is not run.
    """
    app_settings = app_settings or settings
    database = database or Database.from_settings(app_settings)

    app = FastAPI(
        title="MindEase API",
        description=(
            "Backend for a campus social and academic discussion platform: "
            "accounts, chat messages, class/department/public discussions, "
            "likes, replies, and profiles."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.database = database
    app.state.file_service = FileService(
        upload_dir=app_settings.upload_dir,
        max_size=app_settings.max_upload_size,
        url_prefix=app_settings.uploads_url_prefix,
    )

    # ── Middleware ────────────────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Exception Handlers ────────────────────────────────────────────────
    register_exception_handlers(app)

    # ── Routes ────────────────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(chats.router)
    app.include_router(discussions.router)
    app.include_router(profile.router)
    app.include_router(uploads.router, prefix=app_settings.uploads_url_prefix)
    app.include_router(health.router)

    return app


# uvicorn mindease.main:app
app = create_app()
