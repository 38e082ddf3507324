"""
Unit tests for ClientStore.

Run against the in-memory backend; backend-specific behavior is covered
in test_backends.py.
"""

import itertools
import threading
from datetime import date

import pytest

from fitcrm.core.clients.models import FitnessGoal, Gender, TrainingSession
from fitcrm.core.clients.samples import sample_clients
from fitcrm.core.clients.store import ClientStore, PersistenceError
from fitcrm.core.clients.validation import normalize_client_data
from fitcrm.infrastructure.persistence.backends import InMemoryRecordBackend


class FailingBackend(InMemoryRecordBackend):
    """Loads fine, refuses every write."""

    def save(self, records):
        raise PersistenceError("quota exceeded")


@pytest.fixture
def client_data(valid_client_data) -> dict:
    return normalize_client_data(valid_client_data)


class TestCreate:

    def test_create_then_get_returns_equal_record(self, store, client_data):
        created = store.create(client_data)

        fetched = store.get_by_id(created.id)

        assert fetched == created
        assert created.id
        assert created.training_history == []
        assert created.next_session_exercises == []

    def test_caller_supplied_id_is_ignored(self, store, client_data):
        created = store.create({**client_data, "id": "mine"})

        assert created.id != "mine"

    def test_identifiers_never_collide(self, client_data):
        ids = itertools.chain(["dup", "dup", "dup"], ["fresh"])
        store = ClientStore(InMemoryRecordBackend(), id_factory=lambda: next(ids))

        first = store.create(client_data)
        second = store.create({**client_data, "email": "other@x.com"})

        assert first.id == "dup"
        assert second.id == "fresh"

    def test_list_keeps_insertion_order(self, store, client_data):
        a = store.create({**client_data, "name": "Alpha"})
        b = store.create({**client_data, "name": "Bravo"})
        c = store.create({**client_data, "name": "Charlie"})

        assert [r.id for r in store.list()] == [a.id, b.id, c.id]

    def test_returned_records_are_copies(self, store, client_data):
        created = store.create(client_data)

        store.get_by_id(created.id).training_history.append(
            TrainingSession(date(2024, 1, 2), "sneaky")
        )

        assert store.get_by_id(created.id).training_history == []


class TestUpdate:

    def test_partial_update_changes_only_given_fields(self, store, client_data):
        created = store.create(client_data)

        updated = store.update(created.id, {"age": 31})

        assert updated.age == 31
        assert updated.name == created.name
        assert updated.email == created.email
        assert updated.membership_start == created.membership_start

    def test_omitted_lists_are_preserved(self, store, client_data):
        created = store.create(client_data)
        store.add_training_session(created.id, TrainingSession(date(2024, 2, 1), "Legs"))
        store.set_next_session_exercises(created.id, ["Squats"])

        updated = store.update(created.id, {"name": "Joanna"})

        assert updated.training_history == [TrainingSession(date(2024, 2, 1), "Legs")]
        assert updated.next_session_exercises == ["Squats"]

    def test_explicit_empty_list_replaces(self, store, client_data):
        created = store.create(client_data)
        store.add_training_session(created.id, TrainingSession(date(2024, 2, 1), "Legs"))

        updated = store.update(created.id, {"training_history": []})

        assert updated.training_history == []
        assert store.get_by_id(created.id).training_history == []

    def test_id_is_immutable(self, store, client_data):
        created = store.create(client_data)

        updated = store.update(created.id, {"id": "hijack", "age": 50})

        assert updated.id == created.id
        assert store.get_by_id("hijack") is None

    def test_unknown_id_returns_none(self, store):
        assert store.update("missing", {"age": 31}) is None


class TestDelete:

    def test_delete_removes_record(self, store, client_data):
        created = store.create(client_data)

        assert store.delete(created.id) is True
        assert store.get_by_id(created.id) is None

    def test_delete_twice_second_is_noop(self, store, client_data):
        created = store.create(client_data)
        store.delete(created.id)

        assert store.delete(created.id) is False

    def test_delete_unknown_leaves_collection_unchanged(self, store, client_data):
        store.create(client_data)
        before = store.list()

        assert store.delete("missing") is False
        assert store.list() == before


class TestPersistenceFailure:

    def test_create_failure_propagates_and_writes_nothing(self, client_data):
        store = ClientStore(FailingBackend())

        with pytest.raises(PersistenceError):
            store.create(client_data)

        assert store.list() == []

    def test_update_failure_leaves_record_unchanged(self, client_data):
        backend = FailingBackend()
        InMemoryRecordBackend.save(backend, sample_clients())
        store = ClientStore(backend)

        with pytest.raises(PersistenceError):
            store.update("client-1", {"age": 99})

        assert store.get_by_id("client-1").age == 28


class TestQueries:

    def test_search_is_case_insensitive_substring(self, store):
        store.seed_if_empty(sample_clients())

        assert [r.name for r in store.search("SMITH")] == ["John Smith"]
        assert [r.name for r in store.search("  jo ")] == ["John Smith", "Sarah Johnson"]

    def test_blank_search_returns_everything(self, store):
        store.seed_if_empty(sample_clients())

        assert len(store.search("")) == 3
        assert len(store.search("   ")) == 3

    def test_summarize(self, store):
        store.seed_if_empty(sample_clients())

        summary = store.summarize(today=date(2025, 2, 20))

        assert summary.total == 3
        assert summary.new_this_month == 1
        assert summary.goal_counts[FitnessGoal.WEIGHT_LOSS.value] == 2
        assert summary.goal_counts[FitnessGoal.GENERAL_FITNESS.value] == 1
        assert summary.goal_counts[FitnessGoal.MUSCLE_GAIN.value] == 0


class TestSeeding:

    def test_seeds_empty_store_keeping_ids(self, store):
        assert store.seed_if_empty(sample_clients()) == 3
        assert store.get_by_id("client-2").gender == Gender.FEMALE

    def test_does_not_overwrite_existing_data(self, store, client_data):
        store.create(client_data)

        assert store.seed_if_empty(sample_clients()) == 0
        assert len(store.list()) == 1


class TestConcurrency:

    def test_parallel_creates_are_not_lost(self, store, client_data):
        def worker(n):
            store.create({**client_data, "email": f"user{n}@x.com"})

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        records = store.list()
        assert len(records) == 20
        assert len({r.id for r in records}) == 20
