"""Minimal describe/test/expect harness.

A two-phase runner modelled on the familiar describe/test API:

- Registration: ``describe(name, body)`` sets the current group label and runs
  ``body`` right away; ``test(description, body)`` inside it records a case
  tagged with that label. Groups nest, and the previous label is restored
  when a group's body returns.
- Execution: ``run_tests()`` runs every case in registration order, awaiting
  bodies that return awaitables, and counts passes and failures. A failing
  case is reported and the run moves on.

State lives on a TestRunner instance. The module-level ``describe``, ``test``,
``expect`` and ``run_tests`` functions are bound to a shared default runner
so suites can be written against a global-style API.

Usage:
    >>> runner = TestRunner(reporter=lambda line: None)
    >>> runner.describe("math", lambda: runner.test("adds", lambda: runner.expect(1 + 1).to_be(2)))
    >>> import asyncio
    >>> results = asyncio.run(runner.run_tests())
    >>> (results.total, results.passed, results.failed)
    (1, 1, 0)
"""

import argparse
import asyncio
import importlib
import inspect
import logging
import sys
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence

from landingform.errors import AssertionFailure

logger = logging.getLogger(__name__)

Reporter = Callable[[str], None]

DEFAULT_SUITES = ["landingform.suites.form_validation"]


def strict_equals(actual: Any, expected: Any) -> bool:
    """Identity, or equality between values of exactly the same type.

    ``1`` is not strictly equal to ``True`` or ``1.0``.

    Examples:
        >>> strict_equals("a", "a")
        True
        >>> strict_equals(1, True)
        False
        >>> strict_equals([1], [1])
        False
    """
    if actual is expected:
        return True
    if type(actual) is not type(expected):
        return False
    if isinstance(actual, (str, bytes, int, float, complex)):
        return actual == expected
    return False


@dataclass(frozen=True)
class TestCase:
    """A registered case.

    Attributes:
        group: Label of the enclosing describe block, if any
        description: What the case checks
        body: Zero-argument callable; may return an awaitable
    """
    __test__ = False

    group: Optional[str]
    description: str
    body: Callable[[], Any]

    @property
    def name(self) -> str:
        if self.group is None:
            return self.description
        return f"{self.group} - {self.description}"


@dataclass(frozen=True)
class TestOutcome:
    """Result of running one case."""
    __test__ = False

    case: TestCase
    passed: bool
    error: Optional[str] = None


@dataclass
class TestResults:
    """Counters for a run.

    Attributes:
        total: Cases run
        passed: Cases that completed normally
        failed: Cases that raised
        outcomes: Per-case results in run order
    """
    __test__ = False

    total: int = 0
    passed: int = 0
    failed: int = 0
    outcomes: List[TestOutcome] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failed == 0


class Expectation:
    """Matchers over a single value.

    Each matcher returns True when it holds and raises AssertionFailure
    otherwise.

    Examples:
        >>> Expectation(True).to_be_true()
        True
        >>> Expectation("x").to_be("y")
        Traceback (most recent call last):
        ...
        landingform.errors.AssertionFailure: Expected x to be y
    """

    def __init__(self, actual: Any):
        self.actual = actual

    def to_be(self, expected: Any) -> bool:
        if strict_equals(self.actual, expected):
            return True
        raise AssertionFailure(self.actual, expected)

    def to_be_true(self) -> bool:
        if self.actual is True:
            return True
        raise AssertionFailure(self.actual, True)

    def to_be_false(self) -> bool:
        if self.actual is False:
            return True
        raise AssertionFailure(self.actual, False)


class TestRunner:
    """Registry and executor for harness cases.

    Attributes:
        tests: Registered cases in registration order
        groups: Every describe label seen, in order
        results: Counters for the current run
    """
    __test__ = False

    def __init__(self, reporter: Reporter = print):
        self.tests: List[TestCase] = []
        self.groups: List[str] = []
        self.current_group: Optional[str] = None
        self.results = TestResults()
        self._report = reporter

    def describe(self, name: str, body: Callable[[], Any]) -> None:
        """Run ``body`` with ``name`` as the active group label."""
        previous = self.current_group
        self.current_group = name
        self.groups.append(name)
        try:
            body()
        finally:
            self.current_group = previous

    def test(self, description: str, body: Callable[[], Any]) -> TestCase:
        """Register a case under the active group label."""
        case = TestCase(group=self.current_group, description=description, body=body)
        self.tests.append(case)
        return case

    def expect(self, actual: Any) -> Expectation:
        return Expectation(actual)

    async def run_tests(self) -> TestResults:
        """Run every registered case in order and report as it goes."""
        self._report("Running tests...")
        self._report("")

        for case in self.tests:
            self.results.total += 1
            try:
                result = case.body()
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                self.results.failed += 1
                self.results.outcomes.append(TestOutcome(case=case, passed=False, error=str(exc)))
                logger.debug("Case failed: %s", case.name, exc_info=True)
                self._report(f"FAIL {case.name}")
                self._report(f"   Error: {exc}")
            else:
                self.results.passed += 1
                self.results.outcomes.append(TestOutcome(case=case, passed=True))
                self._report(f"PASS {case.name}")

        self.print_results()
        return self.results

    def print_results(self) -> None:
        self._report("")
        self._report("Test Results:")
        self._report(f"Total: {self.results.total}")
        self._report(f"Passed: {self.results.passed}")
        self._report(f"Failed: {self.results.failed}")

        if self.results.failed == 0:
            self._report("All tests passed!")
        else:
            self._report(f"{self.results.failed} test(s) failed")


default_runner = TestRunner()


def describe(name: str, body: Callable[[], Any]) -> None:
    default_runner.describe(name, body)


def test(description: str, body: Callable[[], Any]) -> TestCase:
    return default_runner.test(description, body)


# Keep pytest from collecting the registration function as a test.
test.__test__ = False  # type: ignore[attr-defined]


def expect(actual: Any) -> Expectation:
    return default_runner.expect(actual)


def run_tests(runner: Optional[TestRunner] = None) -> TestResults:
    """Run a runner's cases to completion (the default runner if none given).

    This drives its own event loop. From inside a coroutine, use
    ``await runner.run_tests()`` instead.

    Raises:
        RuntimeError: If called while an event loop is already running
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run((runner or default_runner).run_tests())
    raise RuntimeError(
        "run_tests() cannot be called from a running event loop; "
        "await runner.run_tests() instead"
    )


def load_suites(modules: Sequence[str], runner: TestRunner) -> None:
    """Import suite modules and register their cases on ``runner``.

    A module that defines ``register(runner)`` is registered through it;
    otherwise importing it is expected to register against the module-level
    API.
    """
    for module_name in modules:
        module = importlib.import_module(module_name)
        register = getattr(module, "register", None)
        if callable(register):
            register(runner)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command line entry point: load suites, run them, exit 1 on failure."""
    parser = argparse.ArgumentParser(
        prog="landingform-selftest",
        description="Run describe/test suites with the landingform harness",
    )
    parser.add_argument(
        "modules",
        nargs="*",
        default=DEFAULT_SUITES,
        help="Suite modules to load (default: %(default)s)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    load_suites(args.modules, default_runner)
    results = run_tests(default_runner)
    return 0 if results.ok else 1


__all__ = [
    "TestCase",
    "TestOutcome",
    "TestResults",
    "Expectation",
    "TestRunner",
    "strict_equals",
    "default_runner",
    "describe",
    "test",
    "expect",
    "run_tests",
    "load_suites",
    "main",
]


if __name__ == "__main__":
    sys.exit(main())
