"""
Client record store.

ClientStore owns the collection of client records: it generates
identifiers, fills in list defaults, and performs the CRUD operations.
Where the records actually live is delegated to a RecordBackend, so the
same store works over volatile process memory or a persisted blob.

The store does not validate. Callers run the validation orchestrator
first (see service.py) and only hand approved data to the store.

Every operation is a read-modify-write of the whole collection under a
lock. The new collection is built as a copy and only committed by a
successful save, so a failed write never leaves a half-applied change.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import replace
from datetime import date
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional, Protocol
from uuid import uuid4

from .models import ClientRecord, ClientSummary, FitnessGoal, TrainingSession

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    "name",
    "age",
    "gender",
    "email",
    "phone",
    "fitness_goal",
    "membership_start",
    "training_history",
    "next_session_exercises",
)


class PersistenceError(Exception):
    """Raised when the collection cannot be written (or serialized)."""
    pass


class RecordBackend(Protocol):
    """
    Protocol for the storage behind a ClientStore.

    load returns the full collection in insertion order; save replaces it.
    Implementations raise PersistenceError when a write fails.
    """

    def load(self) -> list[ClientRecord]:
        ...

    def save(self, records: list[ClientRecord]) -> None:
        ...


def _new_client_id() -> str:
    return str(uuid4())


class ClientStore:
    """
    CRUD over the client collection.

    Constructed explicitly and passed to whoever needs it; there is no
    module-level collection.
    """

    def __init__(
        self,
        backend: RecordBackend,
        id_factory: Callable[[], str] = _new_client_id,
    ) -> None:
        self._backend = backend
        self._new_id = id_factory
        self._lock = threading.RLock()

    @property
    def backend(self) -> RecordBackend:
        return self._backend

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Hold the store lock across several calls, e.g. validate then write."""
        with self._lock:
            yield

    def list(self) -> list[ClientRecord]:
        """All records, in insertion order."""
        with self._lock:
            return self._backend.load()

    def get_by_id(self, client_id: str) -> Optional[ClientRecord]:
        with self._lock:
            for record in self._backend.load():
                if record.id == client_id:
                    return record
        logger.debug("Client not found", extra={"client_id": client_id})
        return None

    def search(self, term: str = "") -> list[ClientRecord]:
        """Case-insensitive substring match on name. Blank term returns all."""
        needle = (term or "").strip().lower()
        records = self.list()
        if not needle:
            return records
        return [r for r in records if needle in r.name.lower()]

    def create(self, data: Mapping[str, Any]) -> ClientRecord:
        """
        Append a new record built from already-validated data.

        A fresh identifier is always assigned; any id in data is ignored.
        Training history and next-session exercises default to empty.
        """
        with self._lock:
            records = self._backend.load()
            existing_ids = {r.id for r in records}

            client_id = self._new_id()
            while client_id in existing_ids:
                client_id = self._new_id()

            fields = {k: data[k] for k in UPDATABLE_FIELDS if k in data}
            fields["training_history"] = list(fields.get("training_history") or [])
            fields["next_session_exercises"] = list(fields.get("next_session_exercises") or [])

            record = ClientRecord(id=client_id, **fields)
            self._backend.save(records + [record])

        logger.info("Created client", extra={"client_id": client_id})
        return record

    def update(self, client_id: str, data: Mapping[str, Any]) -> Optional[ClientRecord]:
        """
        Merge data over an existing record.

        Supplied fields overwrite. The two list fields follow a presence
        rule: a missing key keeps the stored list, a present key (even an
        empty list) replaces it. Returns None if the id is unknown.
        """
        with self._lock:
            records = self._backend.load()
            index = self._index_of(records, client_id)
            if index is None:
                return None

            changes = {k: data[k] for k in UPDATABLE_FIELDS if k in data}
            for list_field in ("training_history", "next_session_exercises"):
                if list_field in changes:
                    changes[list_field] = list(changes[list_field] or [])

            merged = replace(records[index], **changes)
            updated = records[:index] + [merged] + records[index + 1:]
            self._backend.save(updated)

        logger.info(
            "Updated client",
            extra={"client_id": client_id, "fields": sorted(changes)},
        )
        return merged

    def delete(self, client_id: str) -> bool:
        """Remove a record. False if it did not exist."""
        with self._lock:
            records = self._backend.load()
            index = self._index_of(records, client_id)
            if index is None:
                return False
            self._backend.save(records[:index] + records[index + 1:])

        logger.info("Deleted client", extra={"client_id": client_id})
        return True

    def add_training_session(
        self,
        client_id: str,
        session: TrainingSession,
    ) -> Optional[ClientRecord]:
        """Append one session to a client's history."""
        with self._lock:
            record = self.get_by_id(client_id)
            if record is None:
                return None
            return self.update(
                client_id,
                {"training_history": record.training_history + [session]},
            )

    def set_next_session_exercises(
        self,
        client_id: str,
        exercises: Iterable[str],
    ) -> Optional[ClientRecord]:
        """Replace the planned exercises wholesale."""
        return self.update(client_id, {"next_session_exercises": list(exercises)})

    def summarize(self, today: Optional[date] = None) -> ClientSummary:
        """Totals for the dashboard: size, joiners this month, goal breakdown."""
        today = today or date.today()
        records = self.list()

        new_this_month = sum(
            1 for r in records
            if r.membership_start.year == today.year
            and r.membership_start.month == today.month
        )
        goal_counts = {goal.value: 0 for goal in FitnessGoal}
        for record in records:
            goal_counts[record.fitness_goal.value] += 1

        return ClientSummary(
            total=len(records),
            new_this_month=new_this_month,
            goal_counts=goal_counts,
        )

    def seed_if_empty(self, records: Iterable[ClientRecord]) -> int:
        """
        Write sample records, keeping their ids, only if nothing is stored.

        Returns how many records were written (0 if the store had data).
        """
        with self._lock:
            if self._backend.load():
                return 0
            seeded = list(records)
            ids = [r.id for r in seeded]
            if len(set(ids)) != len(ids):
                raise ValueError("Seed records must have unique ids")
            self._backend.save(seeded)

        logger.info("Seeded sample clients", extra={"count": len(seeded)})
        return len(seeded)

    @staticmethod
    def _index_of(records: list[ClientRecord], client_id: str) -> Optional[int]:
        for i, record in enumerate(records):
            if record.id == client_id:
                return i
        return None
