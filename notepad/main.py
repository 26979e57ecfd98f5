"""
Note Pad API: FastAPI Application Factory
===========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (`uvicorn notepad.main:app`), the `notepad-api` console
       script, and the test suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐        │
    │  │  Req ID  │→│ Logging  │→│ GZip │→│ CORS │        │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘        │
    │                                                     │
    │  Routes (settings.api_prefix):                      │
    │  ┌──────────────────────────┐ ┌──────────────────┐  │
    │  │ /notes, /notes/{id}      │ │ /healthcheck     │  │
    │  └──────────────────────────┘ └──────────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ Storage→500  │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, build the engine + session factory
              (unless one was injected), log readiness
    Shutdown: dispose the engine the lifespan created
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from notepad import __version__
from notepad.config import Settings, settings
from notepad.database import create_engine, create_session_factory, dispose_engine
from notepad.exceptions import NotePadError, StorageError
from notepad.middleware.logging import RequestLoggingMiddleware
from notepad.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from notepad.routes import health, notes

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str) -> None:
    """
    Configure root logging once, before anything else logs.

    Format: 2025-09-10T02:06:48 [INFO] notepad.access: GET /api/v1/notes 200 ...
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # containers capture stdout
        ],
        force=True,
    )

    # uvicorn's access log duplicates RequestLoggingMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup sequence:
        1. Setup logging
        2. Open the connection pool, unless a session factory was injected
    Shutdown sequence:
        1. Dispose the engine this lifespan created
    """
    config: Settings = app.state.settings
    setup_logging(config.log_level)
    logger.info("Note Pad API %s starting up...", __version__)

    engine = None
    if app.state.session_factory is None:
        engine = create_engine(config)
        app.state.session_factory = create_session_factory(engine)
        logger.info("Connection pool ready (pool_size=%d)", config.db_pool_size)

    logger.info("Serving on http://%s:%d%s", config.backend_host, config.backend_port, config.api_prefix)

    yield

    logger.info("Note Pad API shutting down...")
    if engine is not None:
        await dispose_engine(engine)
        app.state.session_factory = None
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, details: Optional[dict] = None) -> dict:
    return {
        "error": error,
        "message": message,
        "details": details,
        "request_id": request_id_var.get(""),
    }


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to status codes and the ErrorResponse body.

        ValidationError         → 400 (details: offending field)
        RequestValidationError  → 400 (malformed JSON, wrong types, bad UUID)
        NotFoundError           → 404
        StorageError            → 500 (generic message; context logged only)
        Exception (fallback)    → 500 (route errors are caught in RequestIDMiddleware)
    """

    @app.exception_handler(NotePadError)
    async def handle_app_error(request: Request, exc: NotePadError):
        rid = request_id_var.get("")
        if isinstance(exc, StorageError):
            # Already logged with its traceback where the driver failed;
            # context stays out of the response body
            body = _error_body(exc.error, "An internal error occurred. Please try again later.")
        elif exc.status_code == 400:
            logger.warning("[%s] Validation error: %s", rid, exc.message)
            body = _error_body(exc.error, exc.message, exc.context)
        else:
            body = _error_body(exc.error, exc.message)
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
            for err in exc.errors()
        ]
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), errors)
        return JSONResponse(
            status_code=400,
            content=_error_body("validation error", "Request body or path is invalid", {"errors": errors}),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Last resort for errors raised before RequestIDMiddleware takes over."""
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body("internal error", "An unexpected error occurred."),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    config: Settings = settings,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        session_factory: Pre-built session factory (tests pass one bound to
                         an in-memory database). When None, the lifespan
                         builds one from `config.database_url`.
        config:          Settings to use; defaults to the environment.
    """
    app = FastAPI(
        title="Note Pad API",
        description="Create, read, update and delete notes stored in PostgreSQL.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.session_factory = session_factory

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(notes.router, prefix=config.api_prefix)
    app.include_router(health.router, prefix=config.api_prefix)

    return app


def run() -> None:
    """Console entry point: serve the module-level app with uvicorn."""
    uvicorn.run(
        "notepad.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


# uvicorn expects `notepad.main:app`; no database work happens until startup
app = create_app()
