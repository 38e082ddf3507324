"""
Exercise suggestion logic.

Suggestions come from an external exercise catalogue. The catalogue is
treated as best-effort: the last good list is kept in memory, and any
failure falls back to a short static list. Callers never see an error
from this module.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


FALLBACK_EXERCISES: tuple[str, ...] = (
    "Push-ups",
    "Squats",
    "Plank",
    "Lunges",
    "Pull-ups",
)


class ExerciseSource(Protocol):
    """
    Interface for exercise catalogue clients.

    Implementations return exercise names and raise on any failure;
    the suggester decides what to do about it.
    """

    def fetch_exercise_names(self) -> list[str]:
        ...


class SuggestionSource(Enum):
    """Where a list of suggestions came from."""
    API = "api"
    CACHE = "cache"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class SuggestionResult:
    exercises: list[str]
    source: SuggestionSource

    @property
    def is_fallback(self) -> bool:
        return self.source == SuggestionSource.FALLBACK


class ExerciseSuggester:
    """
    Picks exercises for a client's next session.

    The first successful fetch is cached for the life of the instance;
    pass refresh=True to fetch again. Fallback lists are never cached,
    so the next call retries the catalogue.
    """

    def __init__(self, source: ExerciseSource, count: int = 5) -> None:
        if count < 1:
            raise ValueError("count must be positive")
        self._source = source
        self._count = count
        self._cached: Optional[list[str]] = None
        self._lock = threading.Lock()

    @property
    def cached_exercises(self) -> Optional[list[str]]:
        return list(self._cached) if self._cached else None

    def clear_cache(self) -> None:
        with self._lock:
            self._cached = None

    def suggest(self, refresh: bool = False) -> SuggestionResult:
        if not refresh:
            with self._lock:
                if self._cached:
                    return SuggestionResult(list(self._cached), SuggestionSource.CACHE)

        try:
            names = self._source.fetch_exercise_names()
        except Exception as e:
            logger.warning(
                "Exercise catalogue unavailable, using fallback",
                extra={"error": str(e)},
            )
            return self._fallback()

        picked = [name for name in names if name and name.strip()][: self._count]
        if not picked:
            logger.warning("Exercise catalogue returned no exercises, using fallback")
            return self._fallback()

        with self._lock:
            self._cached = picked

        logger.info("Fetched exercise suggestions", extra={"count": len(picked)})
        return SuggestionResult(list(picked), SuggestionSource.API)

    def _fallback(self) -> SuggestionResult:
        return SuggestionResult(
            list(FALLBACK_EXERCISES[: self._count]),
            SuggestionSource.FALLBACK,
        )
