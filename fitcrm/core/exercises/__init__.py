"""
Exercise suggestions for a client's next session.
"""

from .suggestions import (
    FALLBACK_EXERCISES,
    ExerciseSource,
    ExerciseSuggester,
    SuggestionResult,
    SuggestionSource,
)

__all__ = [
    "FALLBACK_EXERCISES",
    "ExerciseSource",
    "ExerciseSuggester",
    "SuggestionResult",
    "SuggestionSource",
]
