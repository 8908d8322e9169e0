"""User feedback surface.

A single message element shows the outcome of a submit: it receives the
text, a ``message success`` or ``message error`` class, becomes visible, and
hides itself again after a fixed delay.
"""

import logging
import threading
from typing import Any, Callable, Optional

from typing_extensions import Protocol, runtime_checkable

from landingform.config import DEFAULT_CONFIG, FormConfig
from landingform.errors import FeedbackMessage

logger = logging.getLogger(__name__)

Scheduler = Callable[[float, Callable[[], None]], Any]
"""Runs a callback after a delay in seconds."""


def thread_timer_scheduler(delay: float, callback: Callable[[], None]) -> threading.Timer:
    """Default Scheduler backed by a daemon ``threading.Timer``."""
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


@runtime_checkable
class MessageSurface(Protocol):
    """What the submission handler needs to show feedback."""

    def show(self, message: FeedbackMessage) -> None:
        ...


class MessageBox:
    """Auto-hiding message element.

    Attributes:
        text: Current text content
        css_class: Current class attribute
        visible: Whether the element is displayed
        hide_delay_ms: How long a message stays visible

    Examples:
        >>> from landingform.types import MessageType
        >>> pending = []
        >>> box = MessageBox(scheduler=lambda delay, cb: pending.append((delay, cb)))
        >>> box.show(FeedbackMessage(text="Thanks!", type=MessageType.SUCCESS))
        >>> box.visible, box.css_class, pending[0][0]
        (True, 'message success', 5.0)
        >>> pending[0][1]()
        >>> box.visible
        False
    """

    def __init__(self, config: FormConfig = DEFAULT_CONFIG, scheduler: Optional[Scheduler] = None):
        self.text = ""
        self.css_class = "message"
        self.visible = False
        self.hide_delay_ms = config.message_hide_delay_ms
        self._scheduler = scheduler if scheduler is not None else thread_timer_scheduler

    def show(self, message: FeedbackMessage) -> None:
        self.text = message.text
        self.css_class = message.css_class
        self.visible = True
        logger.debug("Showing %s message: %s", message.type.value, message.text)
        self._scheduler(self.hide_delay_ms / 1000.0, self.hide)

    def hide(self) -> None:
        self.visible = False


__all__ = [
    "Scheduler",
    "MessageSurface",
    "MessageBox",
    "thread_timer_scheduler",
]
