"""Submission attempt state machine.

Each form submit creates one SubmissionAttempt. The attempt walks through
the gates in a fixed order and can only move forward:

    received -> screened -> admitted -> sanitized -> validated -> stored -> completed
        |           |                        |            |
        v           v                        v            v
    discarded   throttled                 rejected      failed

Terminal states: discarded (honeypot), throttled (rate limit), rejected
(validation), failed (submission history unreadable), completed. There
are no retries; a new submit starts a new attempt.

Usage:
    >>> from landingform.state_machine import SubmissionAttempt
    >>> from landingform.types import AttemptState
    >>> attempt = SubmissionAttempt(attempt_id="att_123")
    >>> attempt.transition_to(AttemptState.SCREENED)
    >>> attempt.state
    <AttemptState.SCREENED: 'screened'>
    >>> len(attempt.get_events())
    1
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set
import uuid

from landingform.errors import FeedbackMessage
from landingform.events import AttemptEvent, EventEmitter
from landingform.types import AttemptState, EventType, Submission


class InvalidStateTransitionError(Exception):
    """Raised when attempting an invalid state transition.

    Attributes:
        current_state: The state before the attempted transition
        target_state: The state that was attempted
    """

    def __init__(self, current_state: AttemptState, target_state: AttemptState, message: str):
        self.current_state = current_state
        self.target_state = target_state
        super().__init__(message)


STATE_TO_EVENT_TYPE: Dict[AttemptState, EventType] = {
    AttemptState.RECEIVED: EventType.ATTEMPT_RECEIVED,
    AttemptState.SCREENED: EventType.HONEYPOT_PASSED,
    AttemptState.DISCARDED: EventType.HONEYPOT_TRIGGERED,
    AttemptState.ADMITTED: EventType.RATE_LIMIT_PASSED,
    AttemptState.THROTTLED: EventType.RATE_LIMITED,
    AttemptState.SANITIZED: EventType.INPUT_SANITIZED,
    AttemptState.VALIDATED: EventType.VALIDATION_PASSED,
    AttemptState.REJECTED: EventType.VALIDATION_FAILED,
    AttemptState.STORED: EventType.SUBMISSION_STORED,
    AttemptState.FAILED: EventType.STORAGE_FAILED,
    AttemptState.COMPLETED: EventType.ATTEMPT_COMPLETED,
}


VALID_TRANSITIONS: Dict[AttemptState, Set[AttemptState]] = {
    AttemptState.RECEIVED: {AttemptState.SCREENED, AttemptState.DISCARDED},
    AttemptState.SCREENED: {AttemptState.ADMITTED, AttemptState.THROTTLED},
    AttemptState.ADMITTED: {AttemptState.SANITIZED},
    AttemptState.SANITIZED: {AttemptState.VALIDATED, AttemptState.REJECTED},
    AttemptState.VALIDATED: {AttemptState.STORED, AttemptState.FAILED},
    AttemptState.STORED: {AttemptState.COMPLETED},
    # Terminal states
    AttemptState.DISCARDED: set(),
    AttemptState.THROTTLED: set(),
    AttemptState.REJECTED: set(),
    AttemptState.FAILED: set(),
    AttemptState.COMPLETED: set(),
}


@dataclass
class SubmissionAttempt:
    """Lifecycle of a single form submit.

    Attributes:
        attempt_id: Unique identifier for this attempt
        state: Current state
        emitter: Optional emitter that receives every recorded event
        feedback: Message shown to the user, if any
        submission: The stored submission, once stored

    Examples:
        >>> attempt = SubmissionAttempt(attempt_id="att_123")
        >>> attempt.can_transition_to(AttemptState.SCREENED)
        True
        >>> attempt.can_transition_to(AttemptState.STORED)
        False
    """

    attempt_id: str
    state: AttemptState = AttemptState.RECEIVED
    emitter: Optional[EventEmitter] = field(default=None, repr=False)
    feedback: Optional[FeedbackMessage] = None
    submission: Optional[Submission] = None
    _events: List[AttemptEvent] = field(default_factory=list, init=False, repr=False)

    @classmethod
    def begin(cls, emitter: Optional[EventEmitter] = None, payload: Optional[Dict[str, Any]] = None) -> "SubmissionAttempt":
        """Start a new attempt in RECEIVED state and record the received event."""
        attempt = cls(attempt_id=f"att_{uuid.uuid4().hex[:16]}", emitter=emitter)
        attempt._record(EventType.ATTEMPT_RECEIVED, payload)
        return attempt

    def can_transition_to(self, target_state: AttemptState) -> bool:
        """Check if transition to target state is valid."""
        return target_state in VALID_TRANSITIONS.get(self.state, set())

    def transition_to(self, target_state: AttemptState, payload: Optional[Dict[str, Any]] = None) -> None:
        """Move to ``target_state`` and record the matching event.

        Raises:
            InvalidStateTransitionError: If the transition is not allowed
        """
        if not self.can_transition_to(target_state):
            allowed = VALID_TRANSITIONS[self.state]
            raise InvalidStateTransitionError(
                current_state=self.state,
                target_state=target_state,
                message=(
                    f"Invalid state transition: cannot transition from "
                    f"'{self.state.value}' to '{target_state.value}'. "
                    f"Valid transitions from '{self.state.value}' are: "
                    f"{', '.join(sorted(s.value for s in allowed))}"
                    if allowed
                    else f"Invalid state transition: '{self.state.value}' is a terminal state, "
                    f"no transitions are allowed."
                ),
            )

        old_state = self.state
        self.state = target_state

        event_payload = {"from_state": old_state.value, "to_state": target_state.value}
        if payload:
            event_payload.update(payload)
        self._record(STATE_TO_EVENT_TYPE[target_state], event_payload)

    def is_terminal(self) -> bool:
        """True once no further transitions are possible."""
        return len(VALID_TRANSITIONS[self.state]) == 0

    @property
    def accepted(self) -> bool:
        """True when the attempt ended with a stored submission."""
        return self.state == AttemptState.COMPLETED

    def _record(self, event_type: EventType, payload: Optional[Dict[str, Any]]) -> None:
        event = AttemptEvent(
            event_id=f"evt_{uuid.uuid4().hex[:16]}",
            type=event_type,
            attempt_id=self.attempt_id,
            ts=datetime.now(timezone.utc),
            state=self.state,
            payload=payload,
        )
        self._events.append(event)
        if self.emitter is not None:
            self.emitter.emit(event)

    def get_events(self) -> List[AttemptEvent]:
        """All events recorded for this attempt, in order."""
        return list(self._events)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the attempt outcome to a dictionary.

        Examples:
            >>> SubmissionAttempt(attempt_id="att_123").to_dict()
            {'attemptId': 'att_123', 'state': 'received'}
        """
        result: Dict[str, Any] = {
            "attemptId": self.attempt_id,
            "state": self.state.value,
        }
        if self.feedback is not None:
            result["feedback"] = self.feedback.to_dict()
        if self.submission is not None:
            result["submission"] = self.submission.to_dict()
        return result


__all__ = [
    "SubmissionAttempt",
    "InvalidStateTransitionError",
    "VALID_TRANSITIONS",
    "STATE_TO_EVENT_TYPE",
]
