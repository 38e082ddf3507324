"""
Client records: models, validation, and the record store.
"""

from .models import (
    ClientRecord,
    ClientSummary,
    FitnessGoal,
    Gender,
    TrainingSession,
)
from .service import ClientNotFoundError, ClientService, ClientValidationError
from .store import ClientStore, PersistenceError, RecordBackend
from .validation import ValidationResult, normalize_client_data, validate_client

__all__ = [
    "ClientRecord",
    "ClientSummary",
    "FitnessGoal",
    "Gender",
    "TrainingSession",
    "ClientNotFoundError",
    "ClientService",
    "ClientValidationError",
    "ClientStore",
    "PersistenceError",
    "RecordBackend",
    "ValidationResult",
    "normalize_client_data",
    "validate_client",
]
