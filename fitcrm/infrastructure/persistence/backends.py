"""
Record backends for the client store.

InMemoryRecordBackend keeps the collection in process memory; it is
volatile and starts empty on every restart.

BlobRecordBackend keeps the collection as one JSON array under a single
fixed key in a blob storage client. An absent or unparseable blob is
treated as an empty collection; a malformed entry inside a good array
is skipped on its own.

Both hand out copies, so callers mutating a returned record never
change what is stored.
"""

import copy
import json
import logging
from typing import Optional

from ...core.clients.models import ClientRecord
from ...core.clients.store import PersistenceError
from ..storage.client import BlobStorageClient, StorageError

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "fitcrm_clients"


class InMemoryRecordBackend:
    """Process-local collection. Resets when the process restarts."""

    def __init__(self, records: Optional[list[ClientRecord]] = None) -> None:
        self._records: list[ClientRecord] = copy.deepcopy(records or [])

    def load(self) -> list[ClientRecord]:
        return copy.deepcopy(self._records)

    def save(self, records: list[ClientRecord]) -> None:
        self._records = copy.deepcopy(records)


class BlobRecordBackend:
    """
    Collection serialized as a JSON array in a blob store.

    Reads that fail at the storage level raise PersistenceError; reads
    that succeed but hold something we cannot parse are logged and
    yield an empty collection.
    """

    def __init__(
        self,
        client: BlobStorageClient,
        key: str = DEFAULT_STORAGE_KEY,
    ) -> None:
        self._client = client
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> list[ClientRecord]:
        try:
            raw = self._client.read_blob(self._key)
        except StorageError as e:
            raise PersistenceError(f"Could not read client data: {e}") from e

        if raw is None or not raw.strip():
            return []

        try:
            items = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(
                "Stored client data is not valid JSON, treating as empty",
                extra={"key": self._key, "error": str(e)},
            )
            return []

        if not isinstance(items, list):
            logger.warning(
                "Stored client data is not a list, treating as empty",
                extra={"key": self._key, "type": type(items).__name__},
            )
            return []

        records = []
        for position, item in enumerate(items):
            try:
                records.append(ClientRecord.from_dict(item))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(
                    "Skipping malformed stored client record",
                    extra={"key": self._key, "position": position, "error": str(e)},
                )
        return records

    def save(self, records: list[ClientRecord]) -> None:
        try:
            payload = json.dumps(
                [record.to_dict() for record in records],
                indent=2,
            ).encode("utf-8")
        except (TypeError, ValueError) as e:
            logger.error(
                "Failed to serialize client data",
                extra={"key": self._key, "error": str(e)},
            )
            raise PersistenceError(f"Could not serialize client data: {e}") from e

        try:
            self._client.write_blob(self._key, payload)
        except StorageError as e:
            raise PersistenceError(f"Could not save client data: {e}") from e

        logger.debug(
            "Saved client data",
            extra={"key": self._key, "count": len(records)},
        )
