"""Assertion entry point used by spec bodies.

`Context.then(actual)` and `Context.assume(actual)` return an `Expectation`;
its `should` / `should_not` matchers compare the actual value and, on a
mismatch, record a failure on the spec that is active at that moment.

Example:
    c.then(total).should.equal(20)
    c.then(items).should_not.contain("stale")
    c.assume(connection).should_not.be_none()

A non-fatal mismatch only records the failure; every matcher returns whether
it passed, so a body can return early when a check fails. A fatal mismatch
(from `assume`) records the failure and then aborts the rest of the pass.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from replayspec.exceptions.core import AssumptionFailedError

if TYPE_CHECKING:
    from replayspec.execution.context import Context


class Expectation:
    """An actual value waiting to be matched."""

    def __init__(self, context: "Context", actual: Any, fatal: bool = False):
        self.context = context
        self.actual = actual
        self.fatal = fatal

    @property
    def should(self) -> "Matcher":
        return Matcher(self, negated=False)

    @property
    def should_not(self) -> "Matcher":
        return Matcher(self, negated=True)


class Matcher:
    """Comparisons available on an `Expectation`."""

    def __init__(self, expectation: Expectation, negated: bool):
        self.expectation = expectation
        self.negated = negated

    @property
    def actual(self) -> Any:
        return self.expectation.actual

    def equal(self, expected: Any) -> bool:
        return self._check(
            self.actual == expected,
            f"Expected '{expected}' but was '{self.actual}'",
            f"Did not expect '{expected}' but was '{self.actual}'",
        )

    def be(self, expected: Any) -> bool:
        """Identity comparison."""
        return self._check(
            self.actual is expected,
            f"Expected '{self.actual}' to be the same object as '{expected}'",
            f"Did not expect '{self.actual}' to be the same object as '{expected}'",
        )

    def be_true(self) -> bool:
        return self._check(
            self.actual is True,
            f"Expected 'True' but was '{self.actual}'",
            f"Did not expect 'True' but was '{self.actual}'",
        )

    def be_false(self) -> bool:
        return self._check(
            self.actual is False,
            f"Expected 'False' but was '{self.actual}'",
            f"Did not expect 'False' but was '{self.actual}'",
        )

    def be_none(self) -> bool:
        return self._check(
            self.actual is None,
            f"Expected 'None' but was '{self.actual}'",
            "Did not expect 'None' but was 'None'",
        )

    def contain(self, item: Any) -> bool:
        try:
            found = item in self.actual
        except TypeError:
            found = False
        return self._check(
            found,
            f"Expected '{self.actual}' to contain '{item}'",
            f"Expected '{self.actual}' to not contain '{item}'",
        )

    def satisfy(self, predicate: Callable[[Any], bool], description: str | None = None) -> bool:
        """
        Match against an arbitrary predicate.

        Params:
            predicate: Called with the actual value, truthy result means a match
            description: Criteria wording used in the failure message

        Returns:
            True if the expectation held
        """
        criteria = description or getattr(predicate, "__name__", "criteria")
        return self._check(
            bool(predicate(self.actual)),
            f"Expected '{self.actual}' to satisfy {criteria}",
            f"Expected '{self.actual}' to not satisfy {criteria}",
        )

    def _check(self, matched: bool, message: str, negated_message: str) -> bool:
        if matched != self.negated:
            return True

        failure = negated_message if self.negated else message
        self.expectation.context.record_error(failure)
        if self.expectation.fatal:
            raise AssumptionFailedError(failure)
        return False
