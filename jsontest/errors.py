"""
Exception taxonomy for jsontest.

Two families live here:

- ``JsonTestError`` subclasses signal programming or configuration
  mistakes (malformed path expressions, invalid regex patterns, unreadable
  suites). They are raised at call time and are never part of a chain's
  pass/fail outcome.
- ``AssertionFailure`` subclasses are raised when an assertion chain ends
  in a failed state. They derive from ``AssertionError`` so any test
  framework reports them as ordinary test failures.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from .assertions.models import Diagnostic


class JsonTestError(Exception):
    """Base class for non-assertion errors raised by jsontest."""


class PathSyntaxError(JsonTestError, ValueError):
    """
    A path expression could not be compiled.

    Attributes:
        message: What is wrong with the expression
        expression: The full expression text
        position: Zero-based offset of the offending fragment
        fragment: The offending substring
    """

    def __init__(self, message: str, expression: str, position: int, fragment: str = ""):
        self.message = message
        self.expression = expression
        self.position = position
        self.fragment = fragment
        super().__init__(str(self))

    def __str__(self) -> str:
        text = f"{self.message} at position {self.position}"
        if self.fragment:
            text += f" ({self.fragment!r})"
        return f"{text} in path {self.expression!r}"


class PatternSyntaxError(JsonTestError, ValueError):
    """A regular expression handed to ``matches_pattern`` is invalid."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid regex pattern {pattern!r}: {reason}")


class SuiteLoadError(JsonTestError):
    """A check suite or its document could not be loaded."""


class AssertionFailure(AssertionError):
    """
    An assertion chain ended in a failed state.

    The rendered diagnostic is the exception message; the structured
    record is available as ``diagnostic``.
    """

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.render())


class UnmatchedPath(AssertionFailure):
    """No node in the document resolves the path expression."""


class TypeMismatch(AssertionFailure):
    """A predicate expected a JSON kind the value does not have."""


class ValueMismatch(AssertionFailure):
    """A correctly-typed value failed an equality, ordering or content check."""


class CustomMatcherFailure(AssertionFailure):
    """A user-supplied matcher rejected the value."""


class MultipleFailures(AssertionError):
    """Several independent chains failed; raised by ``JsonTest.verify()``."""

    def __init__(self, diagnostics: Iterable[Diagnostic]):
        self.diagnostics = list(diagnostics)
        blocks = [d.render() for d in self.diagnostics]
        header = f"{len(blocks)} JSON assertion(s) failed"
        super().__init__("\n\n".join([header, *blocks]))


_FAILURE_TYPES = {
    "unmatched_path": UnmatchedPath,
    "type_mismatch": TypeMismatch,
    "value_mismatch": ValueMismatch,
    "custom_matcher_failure": CustomMatcherFailure,
}


def failure_for(diagnostic: Diagnostic) -> AssertionFailure:
    """Build the AssertionFailure subclass matching a diagnostic's kind."""
    return _FAILURE_TYPES.get(diagnostic.kind.value, AssertionFailure)(diagnostic)
