"""Suites written against the landingform describe/test/expect harness."""
