"""
wger exercise catalogue integration.
"""

from .client import (
    ExerciseApiError,
    MockExerciseClient,
    WgerConfig,
    WgerExerciseClient,
    create_exercise_client,
)

__all__ = [
    "ExerciseApiError",
    "MockExerciseClient",
    "WgerConfig",
    "WgerExerciseClient",
    "create_exercise_client",
]
