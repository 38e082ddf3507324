"""
Shared fixtures.

Everything here runs in memory: no files, no network. Tests that need a
blob store use MockBlobClient or pytest's tmp_path.
"""

from datetime import date

import pytest
from fastapi.testclient import TestClient

from fitcrm.config.settings import Settings
from fitcrm.core.clients.service import ClientService
from fitcrm.core.clients.store import ClientStore
from fitcrm.core.exercises.suggestions import ExerciseSuggester
from fitcrm.infrastructure.persistence.backends import InMemoryRecordBackend
from fitcrm.infrastructure.wger.client import MockExerciseClient
from fitcrm.main import create_app


class StubExerciseSource:
    """Exercise source whose behavior each test controls."""

    def __init__(self, names=None, error=None):
        self.names = names if names is not None else [
            "Squat", "Bench Press", "Deadlift", "Row", "Overhead Press", "Dip",
        ]
        self.error = error
        self.calls = 0

    def fetch_exercise_names(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.names)


@pytest.fixture
def today() -> date:
    return date(2025, 6, 15)


@pytest.fixture
def valid_client_data() -> dict:
    """A candidate that passes every rule (keyed by record attribute)."""
    return {
        "name": "Jo",
        "age": 30,
        "gender": "Male",
        "email": "jo@x.com",
        "phone": "+12345678901",
        "fitness_goal": "Weight Loss",
        "membership_start": "2024-01-01",
    }


@pytest.fixture
def valid_client_payload() -> dict:
    """The same client as a JSON request body (wire names)."""
    return {
        "name": "Jo",
        "age": 30,
        "gender": "Male",
        "email": "jo@x.com",
        "phone": "+12345678901",
        "fitnessGoal": "Weight Loss",
        "membershipStart": "2024-01-01",
    }


@pytest.fixture
def store() -> ClientStore:
    return ClientStore(InMemoryRecordBackend())


@pytest.fixture
def service(store) -> ClientService:
    return ClientService(store)


@pytest.fixture
def exercise_source() -> StubExerciseSource:
    return StubExerciseSource()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        storage_backend="memory",
        wger_mock_mode=True,
        seed_sample_data=False,
    )


@pytest.fixture
def app(settings, store, exercise_source):
    return create_app(
        settings=settings,
        client_store=store,
        exercise_suggester=ExerciseSuggester(exercise_source, count=5),
    )


@pytest.fixture
def api(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def mock_exercise_client() -> MockExerciseClient:
    return MockExerciseClient()


@pytest.fixture
def make_exercise_source():
    """Build a StubExerciseSource with custom names or a canned error."""
    return StubExerciseSource
