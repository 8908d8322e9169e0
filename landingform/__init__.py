"""Signup form intake for the workshop landing page.

landingform provides:
- Field validators and a denylist sanitizer for the name/email signup form
- Honeypot and cooldown-based rate limit guards
- A submission handler that stores accepted signups in key/value storage
- A small describe/test/expect harness for running validation suites

The browser is replaced by injected capabilities (storage, form surface,
message surface), so the same logic runs in-process and under test.

Basic usage:
    >>> from landingform import SubmissionHandler
    >>> from landingform.feedback import MessageBox
    >>> from landingform.storage import InMemoryStorage
    >>> handler = SubmissionHandler(storage=InMemoryStorage(),
    ...                             messages=MessageBox(scheduler=lambda d, cb: None))
    >>> attempt = handler.process({"name": "Jane Doe", "email": "jane@example.com"})
    >>> attempt.state.value
    'completed'
"""

import logging

__version__ = "0.1.0"
__author__ = "Workshop Landing Page Team"

# Version info
VERSION = (0, 1, 0)

# Core exports
from landingform.handler import SubmissionHandler
from landingform.validation import sanitize_input, validate_email, validate_form, validate_name

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Package metadata
__all__ = [
    "__version__",
    "VERSION",
    "SubmissionHandler",
    "sanitize_input",
    "validate_email",
    "validate_form",
    "validate_name",
]
