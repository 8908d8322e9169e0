"""Configuration defaults for the signup form.

All tunables live on a single frozen FormConfig so that the rate limiter,
message box and submission handler agree on storage keys, field names and
timings. Callers override individual values with ``dataclasses.replace``.
"""

from dataclasses import dataclass

DEFAULT_COOLDOWN_MS = 30000
DEFAULT_MESSAGE_HIDE_DELAY_MS = 5000
DEFAULT_ATTEMPT_HISTORY_SIZE = 100

RATE_LIMIT_KEY = "lastFormSubmission"
SUBMISSIONS_KEY = "workshopSubmissions"


@dataclass(frozen=True)
class FormConfig:
    """Tunables for the signup form.

    Attributes:
        cooldown_ms: Minimum gap between accepted submissions
        rate_limit_key: Storage key holding the last accepted submission time
        submissions_key: Storage key holding the submission history
        message_hide_delay_ms: How long a feedback message stays visible
        attempt_history_size: How many recent attempts a handler keeps for inspection
        name_field: Form field carrying the name
        email_field: Form field carrying the email
        honeypot_field: Hidden decoy field that humans leave empty
        csrf_field: Hidden field carrying the page-load token
        rate_limited_message: Shown when the cooldown has not elapsed
        invalid_input_message: Shown when validation fails
        success_message: Shown after the submission is stored

    Examples:
        >>> from dataclasses import replace
        >>> config = replace(FormConfig(), cooldown_ms=1000)
        >>> config.cooldown_ms
        1000
        >>> config.rate_limit_key
        'lastFormSubmission'
    """
    cooldown_ms: int = DEFAULT_COOLDOWN_MS
    rate_limit_key: str = RATE_LIMIT_KEY
    submissions_key: str = SUBMISSIONS_KEY
    message_hide_delay_ms: int = DEFAULT_MESSAGE_HIDE_DELAY_MS
    attempt_history_size: int = DEFAULT_ATTEMPT_HISTORY_SIZE
    name_field: str = "name"
    email_field: str = "email"
    honeypot_field: str = "website"
    csrf_field: str = "csrf_token"
    rate_limited_message: str = "Please wait before submitting again."
    invalid_input_message: str = "Please check your input and try again."
    success_message: str = "Thank you for registering! We'll send you more details soon."


DEFAULT_CONFIG = FormConfig()


__all__ = [
    "FormConfig",
    "DEFAULT_CONFIG",
    "DEFAULT_COOLDOWN_MS",
    "DEFAULT_MESSAGE_HIDE_DELAY_MS",
    "DEFAULT_ATTEMPT_HISTORY_SIZE",
    "RATE_LIMIT_KEY",
    "SUBMISSIONS_KEY",
]
