"""
Exercise suggestion endpoints.

Suggestions never fail from the caller's point of view: if the
catalogue is down the response carries the static fallback list and
source="fallback".
"""

import logging

from fastapi import APIRouter, Query, status

from ..dependencies import ExerciseSuggesterDep
from .clients import CamelModel

logger = logging.getLogger(__name__)

router = APIRouter()


class SuggestionResponse(CamelModel):
    """Suggested exercises and where they came from."""
    exercises: list[str]
    source: str


@router.get(
    "/suggestions",
    response_model=SuggestionResponse,
    status_code=status.HTTP_200_OK,
    summary="Suggest exercises",
    description="Exercises for a next session. Served from cache unless refresh=true.",
)
def suggest_exercises(
    suggester: ExerciseSuggesterDep,
    refresh: bool = Query(False, description="Bypass the cached list"),
) -> SuggestionResponse:
    result = suggester.suggest(refresh=refresh)
    return SuggestionResponse(exercises=result.exercises, source=result.source.value)
