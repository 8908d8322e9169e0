"""Test suite for the landingform signup form package.

This package contains tests for:
- Field validators, sanitizer and form validator
- Honeypot and rate limit guards
- Token generation
- Submission storage and history validation
- Attempt state machine and event emission
- Submission handler end-to-end flows
- The describe/test/expect harness
"""
