"""
Assertion result models.

This module defines data structures for assertion outcomes,
including the structured Diagnostic behind every failure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..values import render_value


class DiagnosticKind(str, Enum):
    """Category of a failed check."""
    UNMATCHED_PATH = "unmatched_path"
    TYPE_MISMATCH = "type_mismatch"
    VALUE_MISMATCH = "value_mismatch"
    CUSTOM_MATCHER_FAILURE = "custom_matcher_failure"


class ChainState(str, Enum):
    """State of an assertion chain."""
    PENDING = "pending"    # path unmatched, no predicate called yet
    PASSED = "passed"
    FAILED = "failed"
    VACUOUS = "vacuous"    # path unmatched and accepted by exists_or_none()


class AssertionStatus(str, Enum):
    """Status of an assertion check."""
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"  # optional value was absent
    ERROR = "error"  # e.g., invalid path, malformed data


@dataclass(frozen=True)
class Diagnostic:
    """
    Structured record of one failed check.

    Attributes:
        kind: Failure category
        label: Human label of the failed check, e.g. "Type mismatch"
        path: Concrete path (or expression) where the check failed
        expected: Description of what was expected
        actual: Description of what was found
        available: Sibling property names, for missing-property failures
        expression: The path expression the chain was started with
    """
    kind: DiagnosticKind
    label: str
    path: str
    expected: str
    actual: str
    available: tuple[str, ...] | None = None
    expression: str | None = None

    def render(self) -> str:
        """Render in the fixed four-line failure format."""
        lines = [
            f"{self.label} at {self.path}",
            f"Expected: {self.expected}",
            f"Actual: {self.actual}",
        ]
        if self.available is not None:
            listed = ", ".join(self.available) if self.available else "(none)"
            lines.append(f"Available properties: {listed}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "label": self.label,
            "path": self.path,
            "expected": self.expected,
            "actual": self.actual,
            "available": list(self.available) if self.available is not None else None,
            "expression": self.expression,
        }


@dataclass
class AssertionResult:
    """
    Outcome of one assertion chain, detached from the chain itself.

    Attributes:
        status: Whether the chain passed, failed, was skipped or errored
        message: Human-readable description of the result
        path: The path expression the chain was started with
        expected: What was expected (for failed chains)
        actual: What was actually found
        diagnostic: The structured failure, when the chain failed
        details: Additional context for debugging
    """
    status: AssertionStatus
    message: str
    path: str | None = None
    expected: Any = None
    actual: Any = None
    diagnostic: Diagnostic | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def passed(self) -> bool:
        return self.status in (AssertionStatus.PASSED, AssertionStatus.SKIPPED)

    @property
    def failed(self) -> bool:
        return self.status == AssertionStatus.FAILED

    def __str__(self) -> str:
        """Format as a human-readable string."""
        if self.status == AssertionStatus.PASSED:
            return f"✅ PASS: {self.message}"
        if self.status == AssertionStatus.SKIPPED:
            return f"⏭️ SKIP: {self.message}"

        icon = "❌" if self.status == AssertionStatus.FAILED else "⚠️"
        lines = [f"{icon} {self.status.value.upper()}: {self.message}"]

        if self.diagnostic is not None:
            lines.extend(f"   {line}" for line in self.diagnostic.render().splitlines())
        elif self.path:
            lines.append(f"   Path: {self.path}")

        for key, value in self.details.items():
            lines.append(f"   {key}: {render_value(value)}")

        return "\n".join(lines)

    @classmethod
    def passed_result(
        cls,
        message: str,
        path: str | None = None,
        actual: Any = None,
    ) -> AssertionResult:
        """Create a passing result."""
        return cls(
            status=AssertionStatus.PASSED,
            message=message,
            path=path,
            actual=actual,
        )

    @classmethod
    def skipped_result(cls, message: str, path: str | None = None) -> AssertionResult:
        """Create a result for an optional value that was absent."""
        return cls(status=AssertionStatus.SKIPPED, message=message, path=path)

    @classmethod
    def failed_result(cls, diagnostic: Diagnostic) -> AssertionResult:
        """Create a failing result from a diagnostic."""
        return cls(
            status=AssertionStatus.FAILED,
            message=f"{diagnostic.label} at {diagnostic.path}",
            path=diagnostic.expression,
            expected=diagnostic.expected,
            actual=diagnostic.actual,
            diagnostic=diagnostic,
        )

    @classmethod
    def error_result(
        cls,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> AssertionResult:
        """Create an error result (assertion couldn't be evaluated)."""
        return cls(
            status=AssertionStatus.ERROR,
            message=message,
            path=path,
            details=details or {},
        )
