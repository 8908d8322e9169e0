"""Core type definitions for the landing page signup form.

This module defines the fundamental types shared across the package:
- AttemptState: Lifecycle states for a single submission attempt
- EventType: Audit event types emitted while an attempt progresses
- MessageType: Style qualifier for user feedback messages
- FormRecord: The sanitized name/email payload of one attempt
- Submission: A stored FormRecord with its timestamp and opaque id
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from dateutil import parser as date_parser


class AttemptState(str, Enum):
    """Submission attempt lifecycle states.

    An attempt moves forward one gate at a time. Terminal states:
    discarded, throttled, rejected, failed, completed.
    """
    RECEIVED = "received"
    SCREENED = "screened"
    ADMITTED = "admitted"
    SANITIZED = "sanitized"
    VALIDATED = "validated"
    STORED = "stored"
    DISCARDED = "discarded"
    THROTTLED = "throttled"
    REJECTED = "rejected"
    FAILED = "failed"
    COMPLETED = "completed"


class EventType(str, Enum):
    """Audit event types for the attempt event stream."""
    ATTEMPT_RECEIVED = "attempt.received"
    HONEYPOT_PASSED = "honeypot.passed"
    HONEYPOT_TRIGGERED = "honeypot.triggered"
    RATE_LIMIT_PASSED = "rate_limit.passed"
    RATE_LIMITED = "rate_limit.blocked"
    INPUT_SANITIZED = "input.sanitized"
    VALIDATION_PASSED = "validation.passed"
    VALIDATION_FAILED = "validation.failed"
    SUBMISSION_STORED = "submission.stored"
    STORAGE_FAILED = "submission.store_failed"
    ATTEMPT_COMPLETED = "attempt.completed"


class MessageType(str, Enum):
    """Feedback message styles, used as the css class qualifier."""
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class FormRecord:
    """Sanitized signup payload.

    Attributes:
        name: Trimmed name with HTML metacharacters removed
        email: Trimmed email with HTML metacharacters removed

    Examples:
        >>> record = FormRecord(name="John Doe", email="john@example.com")
        >>> record.to_dict()
        {'name': 'John Doe', 'email': 'john@example.com'}
    """
    name: str
    email: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {"name": self.name, "email": self.email}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FormRecord":
        """Create FormRecord from dict."""
        return cls(name=data["name"], email=data["email"])


def format_timestamp(ts: datetime) -> str:
    """Render a datetime as UTC ISO-8601 with millisecond precision and a Z suffix.

    Examples:
        >>> format_timestamp(datetime(2024, 5, 1, 9, 30, 0, 123456, tzinfo=timezone.utc))
        '2024-05-01T09:30:00.123Z'
    """
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    ts = ts.astimezone(timezone.utc)
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class Submission:
    """A stored signup.

    Attributes:
        name: Sanitized name
        email: Sanitized email
        timestamp: ISO-8601 UTC string of when the submission was stored
        id: Opaque, best-effort unique token

    Examples:
        >>> sub = Submission(name="Jane", email="jane@example.com",
        ...                  timestamp="2024-05-01T09:30:00.123Z", id="k3j2h1")
        >>> sub.record
        FormRecord(name='Jane', email='jane@example.com')
        >>> sub.stored_at.year
        2024
    """
    name: str
    email: str
    timestamp: str
    id: str

    @classmethod
    def from_record(cls, record: FormRecord, timestamp: datetime, submission_id: str) -> "Submission":
        """Build a Submission from a validated FormRecord."""
        return cls(
            name=record.name,
            email=record.email,
            timestamp=format_timestamp(timestamp),
            id=submission_id,
        )

    @property
    def record(self) -> FormRecord:
        """The FormRecord part of this submission."""
        return FormRecord(name=self.name, email=self.email)

    @property
    def stored_at(self) -> Optional[datetime]:
        """Parsed timestamp, or None when it cannot be parsed."""
        try:
            return date_parser.isoparse(self.timestamp)
        except ValueError:
            return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "name": self.name,
            "email": self.email,
            "timestamp": self.timestamp,
            "id": self.id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Submission":
        """Create Submission from dict."""
        return cls(
            name=data["name"],
            email=data["email"],
            timestamp=data["timestamp"],
            id=data["id"],
        )


__all__ = [
    "AttemptState",
    "EventType",
    "MessageType",
    "FormRecord",
    "Submission",
    "format_timestamp",
]
