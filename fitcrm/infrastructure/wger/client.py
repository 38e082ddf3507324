"""
wger REST API client.

A thin wrapper that:
1. Implements the ExerciseSource protocol
2. Handles wger's response shape (paged results, nested translations)
3. Turns every failure into ExerciseApiError

Fallback behavior lives in the core suggester, not here. This client
either returns names or raises.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests

logger = logging.getLogger(__name__)


class ExerciseApiError(Exception):
    """Raised when the exercise catalogue can't be reached or parsed."""
    pass


@dataclass
class WgerConfig:
    """Configuration for the wger client."""
    base_url: str = "https://wger.de/api/v2"
    language: int = 2  # English
    limit: int = 50
    timeout_seconds: float = 5.0

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ValueError("base_url is required")
        if self.limit < 1:
            raise ValueError("limit must be positive")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

    @property
    def exercises_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/exerciseinfo/"


def extract_exercise_name(item: Any, language: int = 2) -> Optional[str]:
    """
    Pull a display name out of one wger result.

    Older endpoints put the name on the item; exerciseinfo nests it in
    translations. Plain strings are accepted as-is.
    """
    if isinstance(item, str):
        return item.strip() or None
    if not isinstance(item, dict):
        return None

    for key in ("name", "name_en"):
        value = item.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()

    translations = item.get("translations") or []
    if isinstance(translations, list):
        for translation in translations:
            if (
                isinstance(translation, dict)
                and translation.get("language") == language
                and isinstance(translation.get("name"), str)
                and translation["name"].strip()
            ):
                return translation["name"].strip()
    return None


class WgerExerciseClient:
    """Fetches exercise names from wger."""

    def __init__(
        self,
        config: WgerConfig,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._config = config
        self._session = session or requests.Session()

    def fetch_exercise_names(self) -> list[str]:
        try:
            response = self._session.get(
                self._config.exercises_url,
                params={
                    "language": self._config.language,
                    "limit": self._config.limit,
                },
                timeout=self._config.timeout_seconds,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.RequestException as e:
            logger.warning("wger request failed", extra={"error": str(e)})
            raise ExerciseApiError(f"wger request failed: {e}") from e
        except ValueError as e:
            logger.warning("wger returned invalid JSON", extra={"error": str(e)})
            raise ExerciseApiError(f"wger returned invalid JSON: {e}") from e

        results = payload.get("results") if isinstance(payload, dict) else None
        if not isinstance(results, list) or not results:
            raise ExerciseApiError("wger returned no results")

        names = []
        for item in results:
            name = extract_exercise_name(item, self._config.language)
            if name and name not in names:
                names.append(name)

        logger.debug(
            "Fetched exercises from wger",
            extra={"results": len(results), "named": len(names)},
        )
        return names


class MockExerciseClient:
    """Canned catalogue for local development. Never touches the network."""

    def __init__(self, names: Optional[list[str]] = None) -> None:
        self._names = names if names is not None else [
            "Barbell Squat",
            "Bench Press",
            "Deadlift",
            "Dumbbell Row",
            "Overhead Press",
            "Romanian Deadlift",
        ]

    def fetch_exercise_names(self) -> list[str]:
        return list(self._names)


def create_exercise_client(
    config: Optional[WgerConfig] = None,
    mock_mode: bool = False,
):
    """Return the wger client, or the canned one in mock mode."""
    if mock_mode:
        return MockExerciseClient()
    return WgerExerciseClient(config or WgerConfig())
