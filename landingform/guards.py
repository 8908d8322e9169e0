"""Anti-abuse checks run before any input is processed.

Two guards:
- Honeypot: a hidden ``website`` field that humans never fill in. A non-empty
  value means a bot, and the attempt is dropped without telling the sender.
- Rate limit: one accepted submission per cooldown window, keyed on the
  last accepted submission time kept in storage.

The rate limit is read-then-written with no lock. Two tabs submitting at the
same instant can both get through; the limiter is a heuristic, not a mutex.
"""

import logging
import re
import time
from typing import Any, Callable, Optional

from landingform.config import DEFAULT_CONFIG, DEFAULT_COOLDOWN_MS, RATE_LIMIT_KEY, FormConfig
from landingform.storage import Storage

logger = logging.getLogger(__name__)

# Leading integer of a stored timestamp; trailing text such as ".0" is ignored.
_LEADING_INTEGER = re.compile(r"\s*([+-]?\d+)")


def current_time_ms() -> int:
    """Wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def check_honeypot(value: Any) -> bool:
    """Return True when the honeypot field is empty (a human sent the form).

    Examples:
        >>> check_honeypot("")
        True
        >>> check_honeypot(None)
        True
        >>> check_honeypot("http://spam")
        False
    """
    if not value:
        return True
    return str(value).strip() == ""


def _read_last_submission(storage: Storage, key: str) -> Optional[int]:
    raw = storage.get(key)
    if raw is None or raw == "":
        return None
    match = _LEADING_INTEGER.match(str(raw))
    if match is None:
        logger.warning("Ignoring unparseable rate limit timestamp under %r: %r", key, raw)
        return None
    return int(match.group(1))


def check_rate_limit(
    storage: Storage,
    now_ms: Optional[int] = None,
    cooldown_ms: int = DEFAULT_COOLDOWN_MS,
    key: str = RATE_LIMIT_KEY,
) -> bool:
    """Return True when a new submission is allowed.

    Blocks while fewer than ``cooldown_ms`` milliseconds have passed since the
    stored last-submission time. No stored time always allows.

    Examples:
        >>> from landingform.storage import InMemoryStorage
        >>> storage = InMemoryStorage({"lastFormSubmission": "1000"})
        >>> check_rate_limit(storage, now_ms=30999)
        False
        >>> check_rate_limit(storage, now_ms=31000)
        True
    """
    last = _read_last_submission(storage, key)
    if last is None:
        return True

    if now_ms is None:
        now_ms = current_time_ms()
    return (now_ms - last) >= cooldown_ms


def record_submission_time(storage: Storage, now_ms: Optional[int] = None, key: str = RATE_LIMIT_KEY) -> int:
    """Store ``now_ms`` as the last accepted submission time and return it."""
    if now_ms is None:
        now_ms = current_time_ms()
    storage.set(key, str(now_ms))
    return now_ms


class RateLimiter:
    """Rate limit guard bound to a storage, clock and config.

    Attributes:
        storage: Where the last submission time is kept
        cooldown_ms: Minimum gap between accepted submissions

    Examples:
        >>> from landingform.storage import InMemoryStorage
        >>> clock = iter([0, 0, 10000]).__next__
        >>> limiter = RateLimiter(InMemoryStorage(), clock_ms=clock)
        >>> limiter.allow()
        True
        >>> limiter.record()
        0
        >>> limiter.allow()
        False
    """

    def __init__(
        self,
        storage: Storage,
        config: FormConfig = DEFAULT_CONFIG,
        clock_ms: Callable[[], int] = current_time_ms,
    ):
        self.storage = storage
        self.cooldown_ms = config.cooldown_ms
        self._key = config.rate_limit_key
        self._clock_ms = clock_ms

    def allow(self) -> bool:
        """Check whether a submission may go through right now."""
        return check_rate_limit(
            self.storage,
            now_ms=self._clock_ms(),
            cooldown_ms=self.cooldown_ms,
            key=self._key,
        )

    def record(self) -> int:
        """Mark now as the last accepted submission."""
        return record_submission_time(self.storage, now_ms=self._clock_ms(), key=self._key)

    def last_submission_ms(self) -> Optional[int]:
        """The stored last submission time, if any."""
        return _read_last_submission(self.storage, self._key)


__all__ = [
    "check_honeypot",
    "check_rate_limit",
    "record_submission_time",
    "current_time_ms",
    "RateLimiter",
]
