"""Harness suite for the field validators, sanitizer and form validator.

Run it with ``landingform-selftest`` or ``python -m landingform.harness``.
"""

from landingform.harness import TestRunner
from landingform.validation import sanitize_input, validate_email, validate_form, validate_name


def register(runner: TestRunner) -> None:
    describe, test, expect = runner.describe, runner.test, runner.expect

    def validate_email_cases():
        def accepts_valid():
            expect(validate_email("test@example.com")).to_be(True)
            expect(validate_email("user.name@domain.co.uk")).to_be(True)
            expect(validate_email("test+tag@example.org")).to_be(True)

        def rejects_invalid():
            expect(validate_email("invalid-email")).to_be(False)
            expect(validate_email("test@")).to_be(False)
            expect(validate_email("@example.com")).to_be(False)
            expect(validate_email("")).to_be(False)
            expect(validate_email(None)).to_be(False)

        test("should return true for valid email addresses", accepts_valid)
        test("should return false for invalid email addresses", rejects_invalid)

    def validate_name_cases():
        def accepts_valid():
            expect(validate_name("John Doe")).to_be(True)
            expect(validate_name("Jane")).to_be(True)
            expect(validate_name("Mary-Jane Smith")).to_be(True)

        def rejects_blank():
            expect(validate_name("")).to_be(False)
            expect(validate_name("   ")).to_be(False)
            expect(validate_name(None)).to_be(False)

        def rejects_out_of_range():
            expect(validate_name("A")).to_be(False)
            expect(validate_name("A" * 101)).to_be(False)

        test("should return true for valid names", accepts_valid)
        test("should return false for invalid names", rejects_blank)
        test("should return false for names that are too short or too long", rejects_out_of_range)

    def sanitize_input_cases():
        def strips_markup():
            expect(sanitize_input('<script>alert("xss")</script>')).to_be('scriptalert("xss")/script')
            expect(sanitize_input("Normal text")).to_be("Normal text")
            expect(sanitize_input("Text with <b>bold</b>")).to_be("Text with bbold/b")

        def handles_missing():
            expect(sanitize_input(None)).to_be("")

        test("should remove potentially dangerous characters", strips_markup)
        test("should handle missing inputs", handles_missing)

    def validate_form_cases():
        def accepts_valid():
            expect(validate_form({"name": "John Doe", "email": "john@example.com"})).to_be(True)

        def rejects_invalid():
            expect(validate_form({"name": "", "email": "john@example.com"})).to_be(False)
            expect(validate_form({"name": "John Doe", "email": "invalid-email"})).to_be(False)
            expect(validate_form({"name": "", "email": ""})).to_be(False)

        test("should return true for valid form data", accepts_valid)
        test("should return false for invalid form data", rejects_invalid)

    def form_validation():
        describe("validate_email", validate_email_cases)
        describe("validate_name", validate_name_cases)
        describe("sanitize_input", sanitize_input_cases)
        describe("validate_form", validate_form_cases)

    describe("Form Validation", form_validation)
