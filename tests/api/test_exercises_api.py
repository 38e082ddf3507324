"""
API tests for exercise suggestions.
"""


class TestSuggestions:

    def test_first_request_comes_from_catalogue(self, api):
        response = api.get("/api/exercises/suggestions")

        assert response.status_code == 200
        body = response.json()
        assert body["source"] == "api"
        assert body["exercises"] == ["Squat", "Bench Press", "Deadlift", "Row", "Overhead Press"]

    def test_repeat_request_is_cached(self, api, exercise_source):
        api.get("/api/exercises/suggestions")

        body = api.get("/api/exercises/suggestions").json()

        assert body["source"] == "cache"
        assert exercise_source.calls == 1

    def test_refresh_query_refetches(self, api, exercise_source):
        api.get("/api/exercises/suggestions")

        body = api.get("/api/exercises/suggestions", params={"refresh": "true"}).json()

        assert body["source"] == "api"
        assert exercise_source.calls == 2

    def test_outage_returns_fallback_not_error(self, api, exercise_source):
        exercise_source.error = TimeoutError("wger timed out")

        response = api.get("/api/exercises/suggestions")

        assert response.status_code == 200
        assert response.json() == {
            "exercises": ["Push-ups", "Squats", "Plank", "Lunges", "Pull-ups"],
            "source": "fallback",
        }
