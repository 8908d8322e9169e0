"""Field validators, sanitizer and form validator for the signup form.

All functions here are pure and never raise on bad input: anything that is
absent or not a string simply fails validation (or sanitizes to ``""``).

The sanitizer is a plain denylist. It deletes ``<``, ``>`` and ``&`` and
nothing else, so payloads such as ``javascript:alert(1)`` pass through
unchanged. It is not HTML escaping.
"""

import re
from collections import abc
from typing import Any, Mapping

from jsonschema import Draft7Validator, validators

from landingform.types import FormRecord

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
UNSAFE_CHARACTERS = re.compile(r"[<>&]")

# Shape check only; field policy is enforced by the validators below.
FORM_RECORD_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {},
        "email": {},
    },
}


def _is_mapping(checker, instance) -> bool:
    return isinstance(instance, abc.Mapping)


# Draft 7 only counts dicts as objects; any read-only mapping is a record too.
MappingDraft7Validator = validators.extend(
    Draft7Validator,
    type_checker=Draft7Validator.TYPE_CHECKER.redefine("object", _is_mapping),
)

_record_shape = MappingDraft7Validator(FORM_RECORD_SCHEMA)


def validate_email(value: Any) -> bool:
    """Check that a value has the minimal ``local@domain.tld`` shape.

    No RFC 5322 parsing and no MX lookups: the trimmed value must be
    non-space/non-@ characters, an ``@``, more of them, a ``.``, more of them.

    Examples:
        >>> validate_email("test@example.com")
        True
        >>> validate_email("  user.name@domain.co.uk  ")
        True
        >>> validate_email("test@")
        False
        >>> validate_email(None)
        False
    """
    if not value or not isinstance(value, str):
        return False
    return EMAIL_PATTERN.fullmatch(value.strip()) is not None


def validate_name(value: Any) -> bool:
    """Check that a trimmed name is between 2 and 100 characters.

    Examples:
        >>> validate_name("Jane")
        True
        >>> validate_name("A")
        False
        >>> validate_name("   ")
        False
    """
    if not value or not isinstance(value, str):
        return False

    trimmed = value.strip()
    if len(trimmed) == 0:
        return False
    if len(trimmed) < NAME_MIN_LENGTH or len(trimmed) > NAME_MAX_LENGTH:
        return False
    return True


def sanitize_input(value: Any) -> str:
    """Delete ``<``, ``>`` and ``&`` from a string and trim it.

    Non-strings and empty values sanitize to ``""``.

    Examples:
        >>> sanitize_input('<script>alert("xss")</script>')
        'scriptalert("xss")/script'
        >>> sanitize_input("  Tom & Jerry  ")
        'Tom  Jerry'
        >>> sanitize_input(None)
        ''
    """
    if not value or not isinstance(value, str):
        return ""
    return UNSAFE_CHARACTERS.sub("", value).strip()


def validate_form(record: Any) -> bool:
    """Validate a whole signup record.

    Accepts a FormRecord or a mapping with ``name`` and ``email`` keys.
    Anything else fails. Both field checks are always evaluated.

    Examples:
        >>> validate_form({"name": "John Doe", "email": "john@example.com"})
        True
        >>> validate_form({"name": "", "email": "john@example.com"})
        False
        >>> validate_form("John Doe")
        False
    """
    if isinstance(record, FormRecord):
        record = record.to_dict()
    if record is None or not _record_shape.is_valid(record):
        return False

    fields: Mapping[str, Any] = record
    name_ok = validate_name(fields.get("name"))
    email_ok = validate_email(fields.get("email"))
    return name_ok and email_ok


__all__ = [
    "NAME_MIN_LENGTH",
    "NAME_MAX_LENGTH",
    "EMAIL_PATTERN",
    "FORM_RECORD_SCHEMA",
    "MappingDraft7Validator",
    "validate_email",
    "validate_name",
    "sanitize_input",
    "validate_form",
]
