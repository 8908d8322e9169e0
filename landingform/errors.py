"""Error taxonomy and feedback payloads for the signup form.

Nothing in the validation path raises: malformed input makes the validators
return False, and the submission handler turns each failure category into a
FeedbackMessage (or into nothing at all, for detected bots). Exceptions are
reserved for broken storage and for assertion failures inside the test
harness.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from landingform.types import MessageType


class ErrorKind(str, Enum):
    """Failure categories an attempt can end in.

    - INPUT_SHAPE: absent or wrong-type field; validators return False
    - VALIDATION_FAILURE: well-typed but out-of-policy input
    - ABUSE_DETECTED: honeypot filled in; handled silently
    - RATE_LIMITED: cooldown window has not elapsed
    - ASSERTION_FAILURE: test harness only
    """
    INPUT_SHAPE = "input_shape"
    VALIDATION_FAILURE = "validation_failure"
    ABUSE_DETECTED = "abuse_detected"
    RATE_LIMITED = "rate_limited"
    ASSERTION_FAILURE = "assertion_failure"


@dataclass(frozen=True)
class FeedbackMessage:
    """A user-facing message and its style.

    Attributes:
        text: Plain message text
        type: success or error
        kind: Failure category for error messages, None on success

    Examples:
        >>> msg = FeedbackMessage(text="Please wait before submitting again.",
        ...                       type=MessageType.ERROR, kind=ErrorKind.RATE_LIMITED)
        >>> msg.css_class
        'message error'
    """
    text: str
    type: MessageType
    kind: Optional[ErrorKind] = None

    @property
    def css_class(self) -> str:
        """Class attribute applied to the message element."""
        return f"message {self.type.value}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "text": self.text,
            "type": self.type.value,
        }
        if self.kind is not None:
            result["kind"] = self.kind.value
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeedbackMessage":
        """Create FeedbackMessage from dict."""
        kind = data.get("kind")
        return cls(
            text=data["text"],
            type=MessageType(data["type"]),
            kind=ErrorKind(kind) if kind is not None else None,
        )


class SubmissionHistoryError(Exception):
    """Raised when the stored submission history cannot be read back.

    Attributes:
        key: Storage key that held the bad value
        raw: The raw stored value
    """

    def __init__(self, key: str, raw: Any, message: str):
        self.key = key
        self.raw = raw
        super().__init__(message)


def format_value(value: Any) -> str:
    """Render a value for an assertion message.

    Booleans and None print as ``true``, ``false`` and ``null`` so that
    messages read the same whichever matcher produced them.

    Examples:
        >>> format_value(True), format_value(None), format_value("x")
        ('true', 'null', 'x')
    """
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return "null"
    return str(value)


class AssertionFailure(AssertionError):
    """Raised by harness matchers when an expectation does not hold.

    Attributes:
        actual: The value under test
        expected: The value it was compared against
    """

    kind = ErrorKind.ASSERTION_FAILURE

    def __init__(self, actual: Any, expected: Any, message: Optional[str] = None):
        self.actual = actual
        self.expected = expected
        super().__init__(message or f"Expected {format_value(actual)} to be {format_value(expected)}")


__all__ = [
    "ErrorKind",
    "FeedbackMessage",
    "SubmissionHistoryError",
    "AssertionFailure",
    "format_value",
]
