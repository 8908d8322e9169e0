"""SubmissionHandler orchestrator for the signup form.

This module provides the SubmissionHandler class that ties the abuse guards,
sanitizer, validators, submission store and feedback surface together. It is
the only stateful part of the package: it reads and writes storage and shows
messages.

Every submit walks the same gates, and any gate can end the attempt:

1. prevent the native submit
2. read name, email, website (honeypot) and csrf_token
3. honeypot filled -> drop silently
4. rate limited -> error message
5. sanitize name and email
6. validate -> error message on failure
7. store the submission
8. record the submission time for the rate limiter
9. success message
10. reset the form

Usage:
    >>> from landingform.feedback import MessageBox
    >>> from landingform.handler import SubmissionHandler
    >>> from landingform.storage import InMemoryStorage
    >>> from landingform.surface import InMemoryForm
    >>> box = MessageBox(scheduler=lambda delay, cb: None)
    >>> handler = SubmissionHandler(storage=InMemoryStorage(), messages=box)
    >>> form = InMemoryForm()
    >>> token = handler.attach(form)
    >>> form.fill(name="Jane Doe", email="jane@example.com")
    >>> event = form.submit()
    >>> box.css_class
    'message success'
"""

import logging
from collections import deque
from datetime import datetime, timezone
from typing import Any, Callable, Deque, Dict, List, Optional

from landingform.config import DEFAULT_CONFIG, FormConfig
from landingform.errors import ErrorKind, FeedbackMessage, SubmissionHistoryError
from landingform.events import EventEmitter
from landingform.feedback import MessageSurface
from landingform.guards import RateLimiter, check_honeypot, current_time_ms
from landingform.state_machine import SubmissionAttempt
from landingform.storage import Storage, SubmissionStore
from landingform.surface import FormSurface, SubmitEvent
from landingform.tokens import generate_token
from landingform.types import AttemptState, FormRecord, MessageType
from landingform.validation import sanitize_input, validate_form

logger = logging.getLogger(__name__)


class SubmissionHandler:
    """Orchestrates a signup form submit.

    Attributes:
        config: Field names, storage keys, timings and user messages
        storage: Persistent key/value store shared by the rate limiter and history
        messages: Where feedback is shown
        store: Submission history
        rate_limiter: Cooldown guard
        emitter: Receives every attempt event

    Examples:
        >>> from landingform.storage import InMemoryStorage
        >>> shown = []
        >>> class Sink:
        ...     def show(self, message):
        ...         shown.append(message)
        >>> handler = SubmissionHandler(storage=InMemoryStorage(), messages=Sink())
        >>> attempt = handler.process({"name": "A", "email": "a@b.co"})
        >>> attempt.state
        <AttemptState.REJECTED: 'rejected'>
        >>> shown[0].text
        'Please check your input and try again.'
    """

    def __init__(
        self,
        storage: Storage,
        messages: MessageSurface,
        config: FormConfig = DEFAULT_CONFIG,
        emitter: Optional[EventEmitter] = None,
        clock_ms: Callable[[], int] = current_time_ms,
        token_factory: Callable[[], str] = generate_token,
    ):
        self.config = config
        self.storage = storage
        self.messages = messages
        self.emitter = emitter if emitter is not None else EventEmitter()
        self._clock_ms = clock_ms
        self._token_factory = token_factory
        self.store = SubmissionStore(storage, config=config, token_factory=token_factory)
        self.rate_limiter = RateLimiter(storage, config=config, clock_ms=clock_ms)
        self._attempts: Deque[SubmissionAttempt] = deque(maxlen=config.attempt_history_size)

    def attach(self, form: FormSurface) -> str:
        """Page-load setup: register on the form and inject a CSRF token field.

        Returns:
            The token written into the hidden field
        """
        form.on_submit(self.handle_submission)
        token = self._token_factory()
        form.add_hidden_field(self.config.csrf_field, token)
        logger.debug("Attached submission handler; csrf field %r set", self.config.csrf_field)
        return token

    def handle_submission(self, event: SubmitEvent) -> SubmissionAttempt:
        """Handle a submit event from an attached form."""
        event.prevent_default()
        form = event.form
        attempt = self.process(form.fields())
        if attempt.accepted:
            form.reset()
        return attempt

    def process(self, fields: Dict[str, Any]) -> SubmissionAttempt:
        """Run the guard, sanitize, validate and store gates over raw field values.

        Args:
            fields: Raw submitted values keyed by field name

        Returns:
            The finished SubmissionAttempt, in a terminal state

        Raises:
            SubmissionHistoryError: If the stored history is unreadable. The
                attempt is moved to FAILED first and nothing is written.
        """
        cfg = self.config
        name = fields.get(cfg.name_field)
        email = fields.get(cfg.email_field)
        honeypot = fields.get(cfg.honeypot_field)
        csrf_token = fields.get(cfg.csrf_field)

        attempt = SubmissionAttempt.begin(
            emitter=self.emitter,
            payload={"has_csrf_token": bool(csrf_token)},
        )
        self._attempts.append(attempt)

        if not check_honeypot(honeypot):
            logger.info("Bot detected via honeypot (attempt %s)", attempt.attempt_id)
            attempt.transition_to(AttemptState.DISCARDED)
            return attempt
        attempt.transition_to(AttemptState.SCREENED)

        if not self.rate_limiter.allow():
            logger.info("Rate limited submission (attempt %s)", attempt.attempt_id)
            attempt.transition_to(AttemptState.THROTTLED)
            self._show(attempt, cfg.rate_limited_message, MessageType.ERROR, ErrorKind.RATE_LIMITED)
            return attempt
        attempt.transition_to(AttemptState.ADMITTED)

        record = FormRecord(name=sanitize_input(name), email=sanitize_input(email))
        attempt.transition_to(AttemptState.SANITIZED)

        if not validate_form(record):
            logger.info("Submission failed validation (attempt %s)", attempt.attempt_id)
            attempt.transition_to(AttemptState.REJECTED)
            self._show(attempt, cfg.invalid_input_message, MessageType.ERROR, ErrorKind.VALIDATION_FAILURE)
            return attempt
        attempt.transition_to(AttemptState.VALIDATED)

        now_ms = self._clock_ms()
        try:
            submission = self.store.append(
                record,
                now=datetime.fromtimestamp(now_ms / 1000.0, tz=timezone.utc),
            )
        except SubmissionHistoryError as exc:
            logger.error("Submission history unreadable (attempt %s): %s", attempt.attempt_id, exc)
            attempt.transition_to(AttemptState.FAILED, {"error": str(exc)})
            raise
        attempt.submission = submission
        attempt.transition_to(AttemptState.STORED, {"submission_id": submission.id})

        self.rate_limiter.record()

        self._show(attempt, cfg.success_message, MessageType.SUCCESS)
        attempt.transition_to(AttemptState.COMPLETED)
        return attempt

    def _show(
        self,
        attempt: SubmissionAttempt,
        text: str,
        message_type: MessageType,
        kind: Optional[ErrorKind] = None,
    ) -> None:
        message = FeedbackMessage(text=text, type=message_type, kind=kind)
        attempt.feedback = message
        self.messages.show(message)

    def get_attempts(self) -> List[SubmissionAttempt]:
        """Most recent attempts processed by this handler, oldest first.

        At most ``config.attempt_history_size`` attempts are kept.
        """
        return list(self._attempts)


__all__ = [
    "SubmissionHandler",
]
