"""Persistent key/value storage and the submission history kept in it.

The form only ever needs ``get(key)`` and ``set(key, value)`` on string
values, the same surface a browser's local storage offers. Two backends are
provided: an in-memory one for tests and embedding, and a JSON file for a
store that survives restarts.

Submission history is a JSON array of Submission objects under a single key.
It is validated against SUBMISSION_HISTORY_SCHEMA whenever it is read back.
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from jsonschema import Draft7Validator
from jsonschema.exceptions import best_match
from typing_extensions import Protocol, runtime_checkable

from landingform.config import DEFAULT_CONFIG, FormConfig
from landingform.errors import SubmissionHistoryError
from landingform.tokens import generate_token
from landingform.types import FormRecord, Submission

logger = logging.getLogger(__name__)


SUBMISSION_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "email": {"type": "string"},
        "timestamp": {"type": "string"},
        "id": {"type": "string"},
    },
    "required": ["name", "email", "timestamp", "id"],
}

SUBMISSION_HISTORY_SCHEMA: Dict[str, Any] = {
    "type": "array",
    "items": SUBMISSION_SCHEMA,
}


@runtime_checkable
class Storage(Protocol):
    """String key/value store capability."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class InMemoryStorage:
    """Dict-backed Storage.

    Examples:
        >>> storage = InMemoryStorage()
        >>> storage.get("lastFormSubmission") is None
        True
        >>> storage.set("lastFormSubmission", "1700000000000")
        >>> storage.get("lastFormSubmission")
        '1700000000000'
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def remove(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._items)


class JsonFileStorage:
    """Storage persisted as a flat JSON object in a single file.

    The file is re-read on every ``get`` and rewritten on every ``set``; there
    is no locking, so two writers racing on the same file can lose an update.
    """

    def __init__(self, path: str):
        self.path = path

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, dict):
            raise ValueError(f"Storage file {self.path} does not hold a JSON object")
        return data

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = str(value)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2)
        os.replace(tmp_path, self.path)


class SubmissionStore:
    """Append-only submission history on top of a Storage.

    Attributes:
        storage: Backing key/value store
        key: Storage key holding the JSON array

    Examples:
        >>> from datetime import datetime, timezone
        >>> store = SubmissionStore(InMemoryStorage(), token_factory=lambda: "abc123")
        >>> sub = store.append(FormRecord(name="Jane", email="jane@example.com"),
        ...                    now=datetime(2024, 5, 1, tzinfo=timezone.utc))
        >>> sub.id, sub.timestamp
        ('abc123', '2024-05-01T00:00:00.000Z')
        >>> len(store.load())
        1
    """

    def __init__(
        self,
        storage: Storage,
        config: FormConfig = DEFAULT_CONFIG,
        token_factory: Callable[[], str] = generate_token,
    ):
        self.storage = storage
        self.key = config.submissions_key
        self._token_factory = token_factory
        self._validator = Draft7Validator(SUBMISSION_HISTORY_SCHEMA)

    def load(self) -> List[Submission]:
        """Read back the full history, oldest first.

        Raises:
            SubmissionHistoryError: If the stored value is not a JSON array of
                submissions
        """
        raw = self.storage.get(self.key)
        if not raw:
            return []

        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise SubmissionHistoryError(
                key=self.key,
                raw=raw,
                message=f"Stored submission history under '{self.key}' is not valid JSON: {exc}",
            ) from exc

        first = best_match(self._validator.iter_errors(data))
        if first is not None:
            location = ".".join(str(p) for p in first.path) or "<root>"
            raise SubmissionHistoryError(
                key=self.key,
                raw=raw,
                message=(
                    f"Stored submission history under '{self.key}' is malformed "
                    f"at {location}: {first.message}"
                ),
            )

        return [Submission.from_dict(item) for item in data]

    def append(self, record: FormRecord, now: Optional[datetime] = None) -> Submission:
        """Store a validated record with a fresh timestamp and id.

        Args:
            record: The sanitized, validated form record
            now: Timestamp to stamp the submission with (defaults to UTC now)

        Returns:
            The stored Submission
        """
        if now is None:
            now = datetime.now(timezone.utc)

        submissions = self.load()
        submission = Submission.from_record(record, timestamp=now, submission_id=self._token_factory())
        submissions.append(submission)
        self.storage.set(self.key, json.dumps([s.to_dict() for s in submissions]))

        logger.info("Submission stored: id=%s email=%s", submission.id, submission.email)
        return submission

    def __len__(self) -> int:
        return len(self.load())


__all__ = [
    "Storage",
    "InMemoryStorage",
    "JsonFileStorage",
    "SubmissionStore",
    "SUBMISSION_SCHEMA",
    "SUBMISSION_HISTORY_SCHEMA",
]
