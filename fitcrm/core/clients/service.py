"""
Client service: validation plus storage.

This is the control flow callers use: a candidate goes through the
validation orchestrator, and only approved data reaches the store.
Failures are raised as typed exceptions so the API layer can map them
to status codes.
"""

import logging
from datetime import date
from typing import Any, Mapping, Optional

from .models import ClientRecord, TrainingSession
from .store import ClientStore
from .validation import (
    ValidationResult,
    normalize_client_data,
    record_to_candidate,
    validate_client,
    validate_training_session,
)
from .validators import parse_date

logger = logging.getLogger(__name__)


class ClientNotFoundError(Exception):
    """Raised when a requested client doesn't exist."""

    def __init__(self, client_id: str) -> None:
        super().__init__(f"Client {client_id} not found")
        self.client_id = client_id


class ClientValidationError(Exception):
    """Raised when submitted data fails validation. Carries every field error."""

    def __init__(self, result: ValidationResult) -> None:
        super().__init__(f"Invalid client data: {', '.join(sorted(result.errors))}")
        self.result = result

    @property
    def errors(self) -> dict[str, str]:
        return self.result.errors


class ClientService:
    """
    Use cases for client management.

    Holds no state of its own beyond the injected store.
    """

    def __init__(self, store: ClientStore) -> None:
        self._store = store

    @property
    def store(self) -> ClientStore:
        return self._store

    def check(
        self,
        data: Mapping[str, Any],
        exclude_id: Optional[str] = None,
        today: Optional[date] = None,
    ) -> ValidationResult:
        """Validate without persisting."""
        return validate_client(data, self._store.list(), exclude_id=exclude_id, today=today)

    def get_client(self, client_id: str) -> ClientRecord:
        record = self._store.get_by_id(client_id)
        if record is None:
            raise ClientNotFoundError(client_id)
        return record

    def create_client(
        self,
        data: Mapping[str, Any],
        today: Optional[date] = None,
    ) -> ClientRecord:
        with self._store.locked():
            result = self.check(data, today=today)
            if not result.is_valid:
                logger.info(
                    "Rejected new client",
                    extra={"fields": sorted(result.errors)},
                )
                raise ClientValidationError(result)

            return self._store.create(normalize_client_data(data))

    def update_client(
        self,
        client_id: str,
        data: Mapping[str, Any],
        today: Optional[date] = None,
    ) -> ClientRecord:
        """
        Apply a (possibly partial) update.

        The candidate that gets validated is the stored record with the
        supplied fields laid over it, so {"age": 31} alone is a valid update.
        """
        with self._store.locked():
            existing = self.get_client(client_id)

            candidate = record_to_candidate(existing)
            candidate.update({k: v for k, v in data.items() if k != "id"})

            result = self.check(candidate, exclude_id=client_id, today=today)
            if not result.is_valid:
                logger.info(
                    "Rejected client update",
                    extra={"client_id": client_id, "fields": sorted(result.errors)},
                )
                raise ClientValidationError(result)

            return self._store.update(client_id, normalize_client_data(data))

    def delete_client(self, client_id: str) -> None:
        if not self._store.delete(client_id):
            raise ClientNotFoundError(client_id)

    def log_training_session(
        self,
        client_id: str,
        data: Mapping[str, Any],
        today: Optional[date] = None,
    ) -> ClientRecord:
        self.get_client(client_id)

        result = validate_training_session(data, today=today)
        if not result.is_valid:
            raise ClientValidationError(result)

        session = TrainingSession(
            date=parse_date(data["date"]),
            notes=(data.get("notes") or "").strip(),
        )
        updated = self._store.add_training_session(client_id, session)
        if updated is None:
            raise ClientNotFoundError(client_id)
        return updated
