"""
FastAPI dependency injection.

Long-lived objects (the client store, the exercise suggester) are built
once by the application factory and attached to app.state. The
dependencies below hand them to route handlers, so routes never build
their own and tests can inject replacements.
"""

import logging
from pathlib import Path
from typing import Annotated

from fastapi import Depends, Request

from ..config.settings import Settings
from ..core.clients.service import ClientService
from ..core.clients.store import ClientStore, RecordBackend
from ..core.exercises.suggestions import ExerciseSuggester
from ..infrastructure.persistence.backends import BlobRecordBackend, InMemoryRecordBackend
from ..infrastructure.storage.client import StorageConfig, create_blob_client
from ..infrastructure.wger.client import WgerConfig, create_exercise_client

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

def build_record_backend(settings: Settings) -> RecordBackend:
    """
    Pick the record backend for the configured storage.

    memory: volatile list in this process
    file:   JSON blob in DATA_DIR
    r2:     JSON blob in an R2 bucket (or in memory with R2_MOCK_MODE)
    """
    if settings.storage_backend == "memory":
        logger.info("Using in-memory client storage")
        return InMemoryRecordBackend()

    if settings.storage_backend == "file":
        client = create_blob_client(base_dir=Path(settings.data_dir))
        return BlobRecordBackend(client, key=f"{settings.storage_key}.json")

    if settings.r2_mock_mode:
        client = create_blob_client(mock_mode=True)
    else:
        client = create_blob_client(
            config=StorageConfig(
                access_key_id=settings.r2_access_key_id,
                secret_access_key=settings.r2_secret_access_key,
                bucket_name=settings.r2_bucket_name,
                endpoint_url=settings.r2_endpoint,
            )
        )
    return BlobRecordBackend(client, key=f"{settings.storage_key}.json")


def build_client_store(settings: Settings) -> ClientStore:
    return ClientStore(build_record_backend(settings))


def build_exercise_suggester(settings: Settings) -> ExerciseSuggester:
    source = create_exercise_client(
        config=WgerConfig(
            base_url=settings.wger_base_url,
            language=settings.wger_language,
            limit=settings.wger_fetch_limit,
            timeout_seconds=settings.wger_timeout_seconds,
        ),
        mock_mode=settings.wger_mock_mode,
    )
    return ExerciseSuggester(source, count=settings.suggestion_count)


# ---------------------------------------------------------------------------
# Request Dependencies
# ---------------------------------------------------------------------------

def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_client_store(request: Request) -> ClientStore:
    return request.app.state.client_store


def get_client_service(
    store: Annotated[ClientStore, Depends(get_client_store)],
) -> ClientService:
    """ClientService is stateless apart from the store, so one per request is fine."""
    return ClientService(store)


def get_exercise_suggester(request: Request) -> ExerciseSuggester:
    return request.app.state.exercise_suggester


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

# These type aliases make route signatures cleaner
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
ClientStoreDep = Annotated[ClientStore, Depends(get_client_store)]
ClientServiceDep = Annotated[ClientService, Depends(get_client_service)]
ExerciseSuggesterDep = Annotated[ExerciseSuggester, Depends(get_exercise_suggester)]
