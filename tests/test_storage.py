"""Unit tests for storage backends and the submission history.

Tests cover:
- InMemoryStorage and JsonFileStorage get/set behaviour
- Appending submissions with timestamps and ids
- Ordering and unbounded growth of the history
- Rejection of corrupt or malformed stored history
"""

import json
from datetime import datetime, timezone

import pytest

from landingform.config import SUBMISSIONS_KEY
from landingform.errors import SubmissionHistoryError
from landingform.storage import InMemoryStorage, JsonFileStorage, Storage, SubmissionStore
from landingform.types import FormRecord, Submission


def counting_tokens():
    counter = {"n": 0}

    def factory():
        counter["n"] += 1
        return f"tok{counter['n']}"

    return factory


class TestInMemoryStorage:
    """Test the dict-backed store."""

    def test_get_missing_key(self):
        assert InMemoryStorage().get("missing") is None

    def test_set_then_get(self):
        storage = InMemoryStorage()
        storage.set("k", "v")
        assert storage.get("k") == "v"

    def test_values_are_stringified(self):
        storage = InMemoryStorage()
        storage.set("k", 123)
        assert storage.get("k") == "123"

    def test_remove_and_keys(self):
        storage = InMemoryStorage({"a": "1", "b": "2"})
        storage.remove("a")
        storage.remove("zzz")
        assert storage.keys() == ["b"]

    def test_satisfies_protocol(self):
        assert isinstance(InMemoryStorage(), Storage)


class TestJsonFileStorage:
    """Test the file-backed store."""

    def test_missing_file_reads_as_empty(self, tmp_path):
        storage = JsonFileStorage(str(tmp_path / "store.json"))
        assert storage.get("anything") is None

    def test_persists_across_instances(self, tmp_path):
        path = str(tmp_path / "store.json")
        JsonFileStorage(path).set("lastFormSubmission", "42")
        assert JsonFileStorage(path).get("lastFormSubmission") == "42"

        with open(path, encoding="utf-8") as fh:
            assert json.load(fh) == {"lastFormSubmission": "42"}

    def test_rejects_non_object_file(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError):
            JsonFileStorage(str(path)).get("k")

    def test_satisfies_protocol(self, tmp_path):
        assert isinstance(JsonFileStorage(str(tmp_path / "s.json")), Storage)


class TestSubmissionStore:
    """Test the append-only submission history."""

    def test_empty_history(self):
        assert SubmissionStore(InMemoryStorage()).load() == []

    def test_append_stamps_timestamp_and_id(self):
        store = SubmissionStore(InMemoryStorage(), token_factory=lambda: "abc")
        now = datetime(2024, 5, 1, 9, 30, 15, 250000, tzinfo=timezone.utc)

        sub = store.append(FormRecord(name="Jane", email="jane@example.com"), now=now)

        assert sub == Submission(
            name="Jane",
            email="jane@example.com",
            timestamp="2024-05-01T09:30:15.250Z",
            id="abc",
        )
        assert sub.stored_at == now

    def test_history_is_json_array_under_fixed_key(self):
        storage = InMemoryStorage()
        store = SubmissionStore(storage, token_factory=lambda: "abc")
        store.append(FormRecord(name="Jane", email="jane@example.com"),
                     now=datetime(2024, 5, 1, tzinfo=timezone.utc))

        stored = json.loads(storage.get(SUBMISSIONS_KEY))
        assert stored == [{
            "name": "Jane",
            "email": "jane@example.com",
            "timestamp": "2024-05-01T00:00:00.000Z",
            "id": "abc",
        }]

    def test_appends_in_order_without_eviction(self):
        store = SubmissionStore(InMemoryStorage(), token_factory=counting_tokens())
        for i in range(25):
            store.append(FormRecord(name=f"User {i}", email=f"user{i}@example.com"))

        history = store.load()
        assert len(store) == 25
        assert [s.name for s in history] == [f"User {i}" for i in range(25)]
        assert [s.id for s in history] == [f"tok{i}" for i in range(1, 26)]

    def test_default_timestamp_is_utc_now(self):
        store = SubmissionStore(InMemoryStorage())
        before = datetime.now(timezone.utc).replace(microsecond=0)
        sub = store.append(FormRecord(name="Jane", email="jane@example.com"))
        assert sub.timestamp.endswith("Z")
        assert sub.stored_at >= before

    def test_existing_history_is_preserved(self):
        existing = [{"name": "Old", "email": "old@example.com",
                     "timestamp": "2023-01-01T00:00:00.000Z", "id": "old1"}]
        storage = InMemoryStorage({SUBMISSIONS_KEY: json.dumps(existing)})
        store = SubmissionStore(storage, token_factory=lambda: "new1")

        store.append(FormRecord(name="New", email="new@example.com"))

        assert [s.id for s in store.load()] == ["old1", "new1"]

    def test_corrupt_json_raises(self):
        storage = InMemoryStorage({SUBMISSIONS_KEY: "{not json"})
        with pytest.raises(SubmissionHistoryError) as exc_info:
            SubmissionStore(storage).load()
        assert exc_info.value.key == SUBMISSIONS_KEY
        assert exc_info.value.raw == "{not json"

    def test_malformed_entries_raise(self):
        storage = InMemoryStorage({SUBMISSIONS_KEY: json.dumps([{"name": "No email"}])})
        with pytest.raises(SubmissionHistoryError) as exc_info:
            SubmissionStore(storage).load()
        assert "malformed" in str(exc_info.value)

    def test_non_array_history_raises(self):
        storage = InMemoryStorage({SUBMISSIONS_KEY: json.dumps({"name": "x"})})
        with pytest.raises(SubmissionHistoryError):
            SubmissionStore(storage).load()

    def test_logs_stored_submission(self, caplog):
        store = SubmissionStore(InMemoryStorage(), token_factory=lambda: "abc")
        with caplog.at_level("INFO", logger="landingform.storage"):
            store.append(FormRecord(name="Jane", email="jane@example.com"))
        assert "Submission stored" in caplog.text
