"""
Projectdesk Backend — FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() registers middleware, exception handlers and routers.
Who:   uvicorn (uvicorn projectdesk.main:app) and the HTTP tests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌──────────────┐ ┌─────────────┐  │
    │  │   Req ID     │→│   Logging    │→│ GZip / CORS │  │
    │  └──────────────┘ └──────────────┘ └─────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────────┐ ┌─────────────┐  │
    │  │ /api/projects│ │ /api/*/ensure│ │ GET /health │  │
    │  └──────────────┘ └──────────────┘ └─────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌───────────────────────────────────────────────┐  │
    │  │ Validation→400 │ Dependency→422 │ Conflict→409│  │
    │  │ NotFound→404   │ Database→500                 │  │
    │  └───────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging; with SEED_REFERENCE_DATA, create missing tables and
              seed statuses, roles and services.
    Shutdown: dispose the database engine.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from projectdesk import __version__
from projectdesk.config import settings
from projectdesk.database import dispose_engine, init_models, seed_reference_data
from projectdesk.exceptions import (
    ConflictError,
    DatabaseError,
    DependencyError,
    NotFoundError,
    ProjectdeskError,
    ValidationError,
)
from projectdesk.middleware.logging import RequestLoggingMiddleware
from projectdesk.middleware.request_id import RequestIDMiddleware, request_id_var
from projectdesk.routes import catalog, health, projects

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger from settings.log_level.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-query and per-request chatter from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Projectdesk Backend %s starting up...", __version__)

    if settings.seed_reference_data:
        await init_models()
        await seed_reference_data()

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Projectdesk Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the domain exceptions to HTTP responses.

    Handler hierarchy:
        ValidationError          → 400 Bad Request
        NotFoundError            → 404 Not Found
        ConflictError            → 409 Conflict (TransactionError included)
        DependencyError          → 422 Unprocessable Entity
        DatabaseError            → 500 (generic message, details logged only)
        ProjectdeskError (base)  → 500
        Exception (fallback)     → 500
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(status_code=400, content=_error_body("validation_error", exc.message, exc.context))

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content=_error_body("not_found", exc.message, exc.context))

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        logger.warning("[%s] Conflict: %s", request_id_var.get(""), exc.message)
        return JSONResponse(status_code=409, content=_error_body("conflict", exc.message, exc.context))

    @app.exception_handler(DependencyError)
    async def handle_dependency_error(request: Request, exc: DependencyError):
        logger.warning("[%s] Unresolved dependency: %s", request_id_var.get(""), exc.message)
        return JSONResponse(status_code=422, content=_error_body("dependency_error", exc.message, exc.context))

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", "An internal error occurred. Please try again later."),
        )

    @app.exception_handler(ProjectdeskError)
    async def handle_projectdesk_error(request: Request, exc: ProjectdeskError):
        logger.error("[%s] Unhandled application error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(status_code=500, content=_error_body("server_error", exc.message))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        # Stack trace goes to the log only, never into the response
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
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

def create_app() -> FastAPI:
    app = FastAPI(
        title="Projectdesk API",
        description=(
            "Project management backend. Creates projects together with the "
            "customers, services, roles and staff they reference, in one transaction."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in reverse order of addition: RequestID → Logging → GZip → CORS
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
    app.include_router(projects.router)
    app.include_router(catalog.router)
    app.include_router(health.router)

    return app


# uvicorn imports `projectdesk.main:app`
app = create_app()
