"""Unit tests for the field validators, sanitizer and form validator.

Tests cover:
- Email shape checks, including missing and non-string values
- Name length bounds on trimmed input
- Denylist sanitization and its known gaps
- Whole-form validation over dicts, other mappings and FormRecords
"""

from collections import abc
from types import MappingProxyType

import pytest

from landingform.types import FormRecord
from landingform.validation import (
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    sanitize_input,
    validate_email,
    validate_form,
    validate_name,
)


class TestValidateEmail:
    """Test the minimal email shape check."""

    @pytest.mark.parametrize("value", [
        "test@example.com",
        "user.name@domain.co.uk",
        "test+tag@example.org",
        "a@b.c",
    ])
    def test_accepts_valid_addresses(self, value):
        """Should accept local@domain.tld shapes."""
        assert validate_email(value) is True

    @pytest.mark.parametrize("value", [
        "invalid-email",
        "test@",
        "@example.com",
        "test@example",
        "te st@example.com",
        "test@@example.com",
        "test@exa mple.com",
        "",
        "   ",
    ])
    def test_rejects_malformed_addresses(self, value):
        """Should reject anything lacking the local@domain.tld shape."""
        assert validate_email(value) is False

    @pytest.mark.parametrize("value", [None, 42, ["a@b.co"], {"email": "a@b.co"}])
    def test_rejects_non_strings(self, value):
        """Should return False rather than raise for non-string input."""
        assert validate_email(value) is False

    def test_trims_before_matching(self):
        """Surrounding whitespace should not affect the result."""
        assert validate_email("  test@example.com\n") is True


class TestValidateName:
    """Test name length bounds."""

    @pytest.mark.parametrize("value", ["John Doe", "Jane", "Mary-Jane Smith", "Al"])
    def test_accepts_valid_names(self, value):
        assert validate_name(value) is True

    @pytest.mark.parametrize("value", ["", "   ", "\t\n", None, 7])
    def test_rejects_blank_or_missing(self, value):
        assert validate_name(value) is False

    def test_length_bounds(self):
        """Trimmed length must be within [2, 100]."""
        assert validate_name("A") is False
        assert validate_name("A" * NAME_MIN_LENGTH) is True
        assert validate_name("A" * NAME_MAX_LENGTH) is True
        assert validate_name("A" * (NAME_MAX_LENGTH + 1)) is False

    def test_bounds_apply_after_trimming(self):
        """Padding does not count toward the length."""
        assert validate_name("  A  ") is False
        assert validate_name("  " + "A" * NAME_MAX_LENGTH + "  ") is True

    @pytest.mark.parametrize("first,last", [("A", "B"), ("Jo", "Lee"), ("A" * 49, "B" * 50), ("A" * 50, "B" * 50)])
    def test_two_word_names_follow_length_rule(self, first, last):
        """A name with one interior space is valid iff its length is in range."""
        name = f"{first} {last}"
        assert validate_name(name) is (NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH)


class TestSanitizeInput:
    """Test the character denylist sanitizer."""

    def test_removes_markup_characters(self):
        assert sanitize_input('<script>alert("xss")</script>') == 'scriptalert("xss")/script'
        assert sanitize_input("Text with <b>bold</b>") == "Text with bbold/b"
        assert sanitize_input("Tom & Jerry") == "Tom  Jerry"

    def test_leaves_normal_text_alone(self):
        assert sanitize_input("Normal text") == "Normal text"

    def test_trims_after_removal(self):
        assert sanitize_input("  <b> hi </b>  ") == "b hi /b"

    @pytest.mark.parametrize("value", [None, "", 0, ["<b>"]])
    def test_non_strings_become_empty(self, value):
        assert sanitize_input(value) == ""

    def test_is_idempotent(self):
        """Sanitizing sanitized output changes nothing."""
        for value in ['<script>alert("xss")</script>', "  a & b  ", "<<>>&&", "plain"]:
            once = sanitize_input(value)
            assert sanitize_input(once) == once

    def test_does_not_escape_other_payloads(self):
        """Only <, > and & are removed; other payloads pass through."""
        assert sanitize_input("javascript:alert(1)") == "javascript:alert(1)"
        assert sanitize_input('" onmouseover="alert(1)') == '" onmouseover="alert(1)'


class TestValidateForm:
    """Test whole-form validation."""

    def test_valid_form(self):
        assert validate_form({"name": "John Doe", "email": "john@example.com"}) is True

    def test_invalid_forms(self):
        assert validate_form({"name": "", "email": "john@example.com"}) is False
        assert validate_form({"name": "John Doe", "email": "invalid-email"}) is False
        assert validate_form({"name": "", "email": ""}) is False

    def test_missing_keys(self):
        assert validate_form({"name": "John Doe"}) is False
        assert validate_form({}) is False

    def test_accepts_form_record(self):
        assert validate_form(FormRecord(name="John Doe", email="john@example.com")) is True
        assert validate_form(FormRecord(name="J", email="john@example.com")) is False

    def test_accepts_read_only_mapping(self):
        record = MappingProxyType({"name": "John Doe", "email": "john@example.com"})
        assert validate_form(record) is True
        assert validate_form(MappingProxyType({"name": "J", "email": "john@example.com"})) is False

    def test_accepts_custom_mapping(self):
        """Any Mapping is a record, not only dict."""

        class Fields(abc.Mapping):
            def __init__(self, **values):
                self._values = values

            def __getitem__(self, key):
                return self._values[key]

            def __iter__(self):
                return iter(self._values)

            def __len__(self):
                return len(self._values)

        assert validate_form(Fields(name="John Doe", email="john@example.com")) is True
        assert validate_form(Fields(name="John Doe")) is False

    @pytest.mark.parametrize("value", [None, "John Doe", 12, ["John Doe", "john@example.com"]])
    def test_rejects_non_objects(self, value):
        assert validate_form(value) is False

    def test_runs_both_checks(self, monkeypatch):
        """The email check runs even when the name check fails."""
        import landingform.validation as validation

        calls = []
        monkeypatch.setattr(validation, "validate_name", lambda v: calls.append("name") or False)
        monkeypatch.setattr(validation, "validate_email", lambda v: calls.append("email") or True)

        assert validation.validate_form({"name": "", "email": "john@example.com"}) is False
        assert calls == ["name", "email"]
