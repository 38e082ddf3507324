"""
Client management API endpoints.

CRUD over client records plus validation-only checks, training history
logging, and refreshing a client's planned exercises.

Domain errors are not caught here. ClientNotFoundError,
ClientValidationError and PersistenceError propagate to the exception
handlers registered in main.py, which turn them into 404/400/500.

Handlers are plain functions: the store is synchronous and guarded by
a lock, so FastAPI runs them in its thread pool.
"""

import datetime as dt
import logging
from typing import Any, Optional, Union

from fastapi import APIRouter, Query, Response, status
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ...core.clients.models import ClientRecord
from ...core.clients.service import ClientNotFoundError
from ..dependencies import ClientServiceDep, ClientStoreDep, ExerciseSuggesterDep

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class TrainingSessionItem(CamelModel):
    """One entry of a client's training history."""
    date: dt.date = Field(description="Session date (ISO format)")
    notes: str = Field("", description="What was trained")


class ClientPayload(CamelModel):
    """
    Client fields as submitted by a form.

    Everything is optional here so that missing fields reach the
    validation orchestrator and come back as a full error map (400)
    rather than a framework 422. PUT bodies may be partial.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: Optional[str] = Field(None, description="Only used by validate-client")
    name: Optional[str] = None
    age: Optional[Union[int, float, str]] = None
    gender: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    fitness_goal: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("fitnessGoal", "fitness_goal", "goal"),
    )
    membership_start: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("membershipStart", "membership_start", "startDate"),
    )
    training_history: Optional[list[TrainingSessionItem]] = None
    next_session_exercises: Optional[list[str]] = None

    def to_candidate(self) -> dict[str, Any]:
        """Only the fields the caller actually sent, keyed by record attribute."""
        return self.model_dump(exclude_unset=True, exclude={"id"})


class TrainingSessionPayload(CamelModel):
    date: Optional[str] = Field(None, description="Session date (ISO format)")
    notes: Optional[str] = Field(None, description="What was trained")


class ClientResponse(CamelModel):
    """A stored client record."""
    id: str
    name: str
    age: int
    gender: str
    email: str
    phone: str
    fitness_goal: str
    membership_start: dt.date
    training_history: list[TrainingSessionItem]
    next_session_exercises: list[str]

    @classmethod
    def from_record(cls, record: ClientRecord) -> "ClientResponse":
        return cls.model_validate(record.to_dict())


class ValidationResponse(CamelModel):
    """Outcome of validation. errors is keyed by wire field name."""
    is_valid: bool
    errors: dict[str, str] = Field(default_factory=dict)


class ClientStatsResponse(CamelModel):
    total: int = Field(description="Number of clients")
    new_this_month: int = Field(description="Clients whose membership started this month")
    goal_counts: dict[str, int] = Field(description="Clients per fitness goal")


class ExerciseRefreshResponse(CamelModel):
    client_id: str
    exercises: list[str]
    source: str = Field(description="api, cache or fallback")


# Error keys follow the client form's field ids where they differ from the record
FORM_ERROR_KEYS = {
    "name": "fullName",
    "membership_start": "startDate",
}


def wire_errors(errors: dict[str, str]) -> dict[str, str]:
    """Translate record attribute names to the keys the client form expects."""
    return {
        FORM_ERROR_KEYS.get(field, to_camel(field)): message
        for field, message in errors.items()
    }


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "/clients",
    response_model=list[ClientResponse],
    summary="List clients",
    description="All clients in insertion order, optionally filtered by name",
)
def list_clients(
    store: ClientStoreDep,
    search: Optional[str] = Query(None, description="Case-insensitive name filter"),
) -> list[ClientResponse]:
    records = store.search(search) if search else store.list()
    return [ClientResponse.from_record(r) for r in records]


@router.get(
    "/clients/stats",
    response_model=ClientStatsResponse,
    summary="Client statistics",
)
def client_stats(store: ClientStoreDep) -> ClientStatsResponse:
    summary = store.summarize()
    return ClientStatsResponse(
        total=summary.total,
        new_this_month=summary.new_this_month,
        goal_counts=summary.goal_counts,
    )


@router.get(
    "/clients/{client_id}",
    response_model=ClientResponse,
    summary="Get a client",
    responses={404: {"description": "Client not found"}},
)
def get_client(client_id: str, service: ClientServiceDep) -> ClientResponse:
    return ClientResponse.from_record(service.get_client(client_id))


@router.post(
    "/clients",
    response_model=ClientResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a client",
    responses={400: {"model": ValidationResponse}},
)
def create_client(payload: ClientPayload, service: ClientServiceDep) -> ClientResponse:
    record = service.create_client(payload.to_candidate())
    return ClientResponse.from_record(record)


@router.put(
    "/clients/{client_id}",
    response_model=ClientResponse,
    summary="Update a client",
    description="Fields omitted from the body keep their stored values",
    responses={
        400: {"model": ValidationResponse},
        404: {"description": "Client not found"},
    },
)
def update_client(
    client_id: str,
    payload: ClientPayload,
    service: ClientServiceDep,
) -> ClientResponse:
    record = service.update_client(client_id, payload.to_candidate())
    return ClientResponse.from_record(record)


@router.delete(
    "/clients/{client_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a client",
    responses={404: {"description": "Client not found"}},
)
def delete_client(client_id: str, service: ClientServiceDep) -> Response:
    service.delete_client(client_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/validate-client",
    response_model=ValidationResponse,
    summary="Validate client data",
    description="Runs all validation rules without saving. An id in the body is excluded from the duplicate-email check.",
)
def validate_client_data(
    payload: ClientPayload,
    service: ClientServiceDep,
) -> ValidationResponse:
    result = service.check(payload.to_candidate(), exclude_id=payload.id)
    return ValidationResponse(
        is_valid=result.is_valid,
        errors=wire_errors(result.errors),
    )


@router.post(
    "/clients/{client_id}/history",
    response_model=ClientResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log a training session",
    responses={
        400: {"model": ValidationResponse},
        404: {"description": "Client not found"},
    },
)
def add_training_session(
    client_id: str,
    payload: TrainingSessionPayload,
    service: ClientServiceDep,
) -> ClientResponse:
    record = service.log_training_session(
        client_id,
        payload.model_dump(exclude_none=True),
    )
    return ClientResponse.from_record(record)


@router.post(
    "/clients/{client_id}/exercises/refresh",
    response_model=ExerciseRefreshResponse,
    summary="Refresh next-session exercises",
    description="Replaces the client's planned exercises with fresh suggestions. The static fallback list is returned but not saved.",
    responses={404: {"description": "Client not found"}},
)
def refresh_client_exercises(
    client_id: str,
    service: ClientServiceDep,
    suggester: ExerciseSuggesterDep,
) -> ExerciseRefreshResponse:
    # 404 before spending a network call on a missing client
    service.get_client(client_id)

    suggestion = suggester.suggest()

    # The static fallback is shown, never saved over the client's plan
    if not suggestion.is_fallback:
        record = service.store.set_next_session_exercises(client_id, suggestion.exercises)
        if record is None:
            raise ClientNotFoundError(client_id)

    logger.info(
        "Refreshed client exercises",
        extra={"client_id": client_id, "source": suggestion.source.value},
    )

    return ExerciseRefreshResponse(
        client_id=client_id,
        exercises=suggestion.exercises,
        source=suggestion.source.value,
    )
