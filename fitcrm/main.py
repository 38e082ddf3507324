"""
FastAPI application entry point.

This module creates and configures the FastAPI application.
Using an application factory pattern (create_app function) because:
- Easier to test with different configurations and injected stores
- Explicit about initialization order
- Each app instance owns its own client store (no module-level state)

For local development:
    uvicorn fitcrm.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api.dependencies import build_client_store, build_exercise_suggester
from .api.routes import clients, exercises, health
from .api.routes.clients import ValidationResponse, wire_errors
from .config.settings import Settings, get_settings
from .core.clients.samples import sample_clients
from .core.clients.service import ClientNotFoundError, ClientValidationError
from .core.clients.store import ClientStore, PersistenceError
from .core.exercises.suggestions import ExerciseSuggester

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Runs on startup and shutdown: logs configuration problems and seeds
    sample data when asked to.
    """
    settings: Settings = app.state.settings

    logger.info(
        "FitCRM API starting",
        extra={
            "version": settings.api_version,
            "storage_backend": settings.storage_backend,
            "mock_mode": {
                "r2": settings.r2_mock_mode,
                "wger": settings.wger_mock_mode,
            },
        }
    )

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )

    if settings.seed_sample_data:
        seeded = app.state.client_store.seed_if_empty(sample_clients())
        logger.info("Sample data check complete", extra={"seeded": seeded})

    yield

    logger.info("FitCRM API shutting down")


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain errors onto HTTP responses."""

    @app.exception_handler(ClientNotFoundError)
    async def client_not_found_handler(request: Request, exc: ClientNotFoundError):
        logger.info(
            "Client not found",
            extra={"client_id": exc.client_id, "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "Client not found"},
        )

    @app.exception_handler(ClientValidationError)
    async def client_validation_handler(request: Request, exc: ClientValidationError):
        body = ValidationResponse(is_valid=False, errors=wire_errors(exc.errors))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=body.model_dump(by_alias=True),
        )

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError):
        logger.error(
            "Failed to persist client data",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to save client data"},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all exception handler.

        Prevents stack traces from leaking to clients. The full error is
        logged server-side.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )


def create_app(
    settings: Optional[Settings] = None,
    client_store: Optional[ClientStore] = None,
    exercise_suggester: Optional[ExerciseSuggester] = None,
) -> FastAPI:
    """
    Application factory.

    Store and suggester are built from settings unless supplied, which
    is how tests run the API against a prepared collection.
    """
    settings = settings or get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())

    app = FastAPI(
        title=settings.api_title,
        version=__version__,
        description="""
        Client management for a fitness business.

        ## Features

        - Add, edit, view and delete client records
        - Server-side validation with per-field error messages
        - Training history per client
        - Exercise suggestions from the wger catalogue, with offline fallback
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.client_store = client_store or build_client_store(settings)
    app.state.exercise_suggester = exercise_suggester or build_exercise_suggester(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )

    app.include_router(
        clients.router,
        prefix="/api",
        tags=["Clients"],
    )

    app.include_router(
        exercises.router,
        prefix="/api/exercises",
        tags=["Exercises"],
    )

    @app.get("/", include_in_schema=False)
    async def root():
        """Root endpoint - points at the docs."""
        return {
            "message": "FitCRM API",
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
        }

    register_exception_handlers(app)

    logger.info(
        "FastAPI application created",
        extra={
            "title": settings.api_title,
            "storage_backend": settings.storage_backend,
        }
    )

    return app


# This is what uvicorn imports
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "fitcrm.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )
