"""
Diagnostics formatter.

Turns failed checks plus their context (expression, concrete path,
evaluation miss) into Diagnostic records.
"""

from __future__ import annotations

from typing import Any

from ..path import ConcretePath, Key, Matched, PathExpression, Unmatched
from ..values import describe
from .matchers import Matcher, MatchOutcome
from .models import Diagnostic, DiagnosticKind


def from_outcome(
    outcome: MatchOutcome,
    matcher: Matcher,
    path: ConcretePath,
    expression: PathExpression,
) -> Diagnostic:
    """Diagnostic for a matcher that rejected the value at ``path``."""
    where = path.child(outcome.at) if outcome.at is not None else path
    return Diagnostic(
        kind=outcome.kind,
        label=outcome.label or matcher.label,
        path=str(where),
        expected=outcome.expected or matcher.description(),
        actual=outcome.actual or "",
        available=outcome.available,
        expression=expression.source,
    )


def from_unmatched(result: Unmatched) -> Diagnostic:
    """Diagnostic for a path that resolved to nothing."""
    source = result.expression.source
    available = result.available_keys if isinstance(result.step, Key) else None
    actual = f"{result.reason} at {result.nearest}"
    return Diagnostic(
        kind=DiagnosticKind.UNMATCHED_PATH,
        label="Path not found",
        path=source,
        expected=f"value at {source}",
        actual=actual,
        available=available,
        expression=source,
    )


def from_unexpected_match(result: Matched) -> Diagnostic:
    """Diagnostic for ``does_not_exist()`` on a path that resolved."""
    first = result.matches[0]
    actual = describe(first.value)
    if len(result) > 1:
        actual = f"{len(result)} matches, first {actual}"
    return Diagnostic(
        kind=DiagnosticKind.VALUE_MISMATCH,
        label="Unexpected value",
        path=str(first.path),
        expected=f"no value at {result.expression.source}",
        actual=actual,
        expression=result.expression.source,
    )


def matching_count_mismatch(
    path: ConcretePath,
    expression: PathExpression,
    expected: int,
    keys: list[str],
) -> Diagnostic:
    listed = ", ".join(keys) if keys else "none"
    return Diagnostic(
        kind=DiagnosticKind.VALUE_MISMATCH,
        label="Matching property count mismatch",
        path=str(path),
        expected=f"{expected} matching properties",
        actual=f"{len(keys)} matching properties ({listed})",
        expression=expression.source,
    )


def property_rejected(
    path: ConcretePath,
    expression: PathExpression,
    key: str,
    value: Any,
    label: str | None = None,
) -> Diagnostic:
    return Diagnostic(
        kind=DiagnosticKind.CUSTOM_MATCHER_FAILURE,
        label=label or "Property condition failed",
        path=str(path.child(key)),
        expected=label or "property to satisfy the predicate",
        actual=describe(value),
        expression=expression.source,
    )
