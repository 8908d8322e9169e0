"""Event system for submission attempts.

Every gate a submission attempt passes or fails emits a typed AttemptEvent.
Events are recorded on the attempt's state machine and dispatched to any
listeners registered on an EventEmitter, which is how hosts hook in
analytics or audit logging without touching the handler.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
import json
import logging

from dateutil import parser as date_parser

from .types import AttemptState, EventType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttemptEvent:
    """A single event in a submission attempt.

    Attributes:
        event_id: Unique event identifier (e.g., "evt_3f9a...")
        type: Event type from EventType enum
        attempt_id: ID of the attempt this event relates to
        ts: UTC timestamp when the event occurred
        state: Attempt state after this event
        payload: Optional event-specific data

    Examples:
        >>> from datetime import datetime, timezone
        >>> event = AttemptEvent(
        ...     event_id="evt_001",
        ...     type=EventType.ATTEMPT_RECEIVED,
        ...     attempt_id="att_001",
        ...     ts=datetime(2024, 5, 1, tzinfo=timezone.utc),
        ...     state=AttemptState.RECEIVED,
        ... )
        >>> event.to_dict()["type"]
        'attempt.received'
    """
    event_id: str
    type: EventType
    attempt_id: str
    ts: datetime
    state: AttemptState
    payload: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        if isinstance(self.state, str):
            object.__setattr__(self, "state", AttemptState(self.state))
        if isinstance(self.type, str):
            object.__setattr__(self, "type", EventType(self.type))

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization.

        Timestamp is formatted as ISO 8601 string.
        """
        result: Dict[str, Any] = {
            "eventId": self.event_id,
            "type": self.type.value,
            "attemptId": self.attempt_id,
            "ts": self.ts.isoformat(),
            "state": self.state.value,
        }
        if self.payload is not None:
            result["payload"] = self.payload
        return result

    def to_jsonl(self) -> str:
        """Convert event to a single line of JSON."""
        return json.dumps(self.to_dict(), separators=(',', ':'))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AttemptEvent":
        """Create AttemptEvent from dictionary (camelCase keys)."""
        return cls(
            event_id=data["eventId"],
            type=EventType(data["type"]),
            attempt_id=data["attemptId"],
            ts=date_parser.isoparse(data["ts"]),
            state=AttemptState(data["state"]),
            payload=data.get("payload"),
        )


EventListener = Callable[[AttemptEvent], None]
"""Type alias for event listener callbacks.

Listeners are called synchronously when events are emitted.
"""


class EventEmitter:
    """Dispatches attempt events to registered listeners.

    - Type-specific subscriptions and wildcard subscriptions
    - Synchronous dispatch in registration order
    - A failing listener is logged and does not stop the others

    Examples:
        >>> emitter = EventEmitter()
        >>> seen = []
        >>> emitter.on(EventType.HONEYPOT_TRIGGERED, seen.append)
        >>> emitter.listener_count()
        1
    """

    def __init__(self):
        self._listeners: Dict[EventType, List[EventListener]] = {}
        self._any_listeners: List[EventListener] = []

    def on(self, event_type: EventType, listener: EventListener) -> None:
        """Subscribe to a specific event type."""
        if event_type not in self._listeners:
            self._listeners[event_type] = []
        self._listeners[event_type].append(listener)

    def on_any(self, listener: EventListener) -> None:
        """Subscribe to all event types."""
        self._any_listeners.append(listener)

    def off(self, event_type: EventType, listener: EventListener) -> None:
        """Unsubscribe from a specific event type. Unknown listeners are ignored."""
        listeners = self._listeners.get(event_type)
        if listeners and listener in listeners:
            listeners.remove(listener)

    def off_any(self, listener: EventListener) -> None:
        """Unsubscribe from the wildcard subscription. Unknown listeners are ignored."""
        if listener in self._any_listeners:
            self._any_listeners.remove(listener)

    def emit(self, event: AttemptEvent) -> None:
        """Dispatch an event: type-specific listeners first, then wildcard listeners."""
        for listener in list(self._listeners.get(event.type, [])) + list(self._any_listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "Event listener %r failed on %s for attempt %s",
                    listener,
                    event.type.value,
                    event.attempt_id,
                )

    def clear(self) -> None:
        """Remove all event listeners."""
        self._listeners.clear()
        self._any_listeners.clear()

    def listener_count(self, event_type: Optional[EventType] = None) -> int:
        """Count listeners for one type, or all listeners including wildcards."""
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return len(self._any_listeners) + sum(len(ls) for ls in self._listeners.values())


__all__ = [
    "AttemptEvent",
    "EventType",
    "EventListener",
    "EventEmitter",
]
