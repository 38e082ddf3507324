"""
API tests for health and readiness checks.
"""

import pytest
from fastapi.testclient import TestClient

from fitcrm import __version__
from fitcrm.config.settings import Settings
from fitcrm.core.clients.store import ClientStore
from fitcrm.core.exercises.suggestions import ExerciseSuggester
from fitcrm.infrastructure.persistence.backends import BlobRecordBackend
from fitcrm.infrastructure.storage.client import MockBlobClient, StorageError
from fitcrm.main import create_app


class UnreachableBlobClient(MockBlobClient):
    def read_blob(self, key):
        raise StorageError("bucket unreachable")


def make_api(settings, store, exercise_source) -> TestClient:
    return TestClient(
        create_app(
            settings=settings,
            client_store=store,
            exercise_suggester=ExerciseSuggester(exercise_source),
        )
    )


class TestHealth:

    def test_liveness(self, api):
        response = api.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["version"] == __version__
        assert body["details"]["storage_backend"] == "memory"

    def test_root_points_at_docs(self, api):
        assert api.get("/").json()["docs"] == "/docs"


class TestReadiness:

    def test_ready_with_memory_storage(self, api):
        response = api.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    def test_missing_r2_credentials(self, store, exercise_source):
        settings = Settings(_env_file=None, storage_backend="r2", r2_mock_mode=False)

        response = make_api(settings, store, exercise_source).get("/health/ready")

        assert response.status_code == 503
        checks = {c["name"]: c for c in response.json()["checks"]}
        assert checks["configuration"]["status"] == "error"
        assert "R2_ACCESS_KEY_ID" in checks["configuration"]["error"]
        assert checks["storage"]["status"] == "ok"

    def test_unreachable_storage(self, settings, exercise_source):
        store = ClientStore(BlobRecordBackend(UnreachableBlobClient()))

        response = make_api(settings, store, exercise_source).get("/health/ready")

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "not_ready"
        storage = next(c for c in body["checks"] if c["name"] == "storage")
        assert "bucket unreachable" in storage["error"]


@pytest.mark.parametrize(
    "backend, overrides, expected",
    [
        ("memory", {}, []),
        ("r2", {"r2_mock_mode": True}, []),
        ("r2", {"r2_account_id": "acct", "r2_access_key_id": "k", "r2_secret_access_key": "s"}, []),
        ("r2", {"r2_access_key_id": "k", "r2_secret_access_key": "s"}, ["R2_ACCOUNT_ID or R2_ENDPOINT_URL"]),
    ],
)
def test_required_fields_depend_on_backend(backend, overrides, expected):
    settings = Settings(_env_file=None, storage_backend=backend, **overrides)

    assert settings.validate_required_fields() == expected
