"""
Unit tests for ExerciseSuggester.

The source is a stub (see conftest.py) so each test decides whether
the catalogue works, fails, or comes back empty.
"""

import pytest

from fitcrm.core.exercises.suggestions import (
    FALLBACK_EXERCISES,
    ExerciseSuggester,
    SuggestionSource,
)


class TestSuggest:

    def test_first_call_hits_the_catalogue(self, exercise_source):
        suggester = ExerciseSuggester(exercise_source, count=5)

        result = suggester.suggest()

        assert result.source == SuggestionSource.API
        assert result.exercises == ["Squat", "Bench Press", "Deadlift", "Row", "Overhead Press"]
        assert exercise_source.calls == 1

    def test_second_call_is_served_from_cache(self, exercise_source):
        suggester = ExerciseSuggester(exercise_source, count=5)
        first = suggester.suggest()

        second = suggester.suggest()

        assert second.source == SuggestionSource.CACHE
        assert second.exercises == first.exercises
        assert exercise_source.calls == 1

    def test_refresh_bypasses_cache(self, exercise_source):
        suggester = ExerciseSuggester(exercise_source, count=5)
        suggester.suggest()
        exercise_source.names = ["Burpee", "Box Jump"]

        result = suggester.suggest(refresh=True)

        assert result.source == SuggestionSource.API
        assert result.exercises == ["Burpee", "Box Jump"]
        assert suggester.cached_exercises == ["Burpee", "Box Jump"]

    def test_blank_names_are_skipped(self, make_exercise_source):
        suggester = ExerciseSuggester(make_exercise_source(["", "  ", "Plank"]), count=5)

        assert suggester.suggest().exercises == ["Plank"]

    def test_count_must_be_positive(self, exercise_source):
        with pytest.raises(ValueError):
            ExerciseSuggester(exercise_source, count=0)


class TestFallback:

    def test_error_falls_back_to_static_list(self, make_exercise_source):
        suggester = ExerciseSuggester(make_exercise_source(error=TimeoutError("slow")))

        result = suggester.suggest()

        assert result.is_fallback
        assert result.exercises == list(FALLBACK_EXERCISES)

    def test_empty_catalogue_falls_back(self, make_exercise_source):
        suggester = ExerciseSuggester(make_exercise_source(names=[]))

        assert suggester.suggest().source == SuggestionSource.FALLBACK

    def test_fallback_is_never_cached(self, make_exercise_source):
        source = make_exercise_source(error=ConnectionError("down"))
        suggester = ExerciseSuggester(source)
        suggester.suggest()

        source.error = None
        result = suggester.suggest()

        assert result.source == SuggestionSource.API
        assert source.calls == 2

    def test_failed_refresh_keeps_previous_cache(self, exercise_source):
        suggester = ExerciseSuggester(exercise_source, count=2)
        suggester.suggest()
        exercise_source.error = ConnectionError("down")

        refreshed = suggester.suggest(refresh=True)
        again = suggester.suggest()

        assert refreshed.is_fallback
        assert again.source == SuggestionSource.CACHE
        assert again.exercises == ["Squat", "Bench Press"]

    def test_fallback_respects_count(self, make_exercise_source):
        suggester = ExerciseSuggester(make_exercise_source(error=RuntimeError()), count=3)

        assert suggester.suggest().exercises == ["Push-ups", "Squats", "Plank"]

    def test_clear_cache(self, exercise_source):
        suggester = ExerciseSuggester(exercise_source)
        suggester.suggest()

        suggester.clear_cache()

        assert suggester.cached_exercises is None
        assert suggester.suggest().source == SuggestionSource.API
