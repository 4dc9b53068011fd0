"""
Matchers: the capability behind every predicate.

A matcher evaluates one JSON value and returns a MatchOutcome. Built-in
predicates and user-supplied ones share this interface, so they also
share one execution and diagnostic path in the assertion context.

Writing a custom matcher:

    class IsoDate(Matcher):
        label = "Not an ISO date"

        def evaluate(self, value):
            if isinstance(value, str) and DATE_RE.match(value):
                return MatchOutcome.ok()
            return self.fail(value, expected="YYYY-MM-DD string")

        def description(self):
            return "is an ISO date"

    test.assert_path("$.created").matches(IsoDate())
"""

from __future__ import annotations

import operator
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from ..errors import PatternSyntaxError
from ..values import JsonKind, describe, is_array, is_number, is_object, json_equals, kind_of, render_value
from .models import DiagnosticKind


@dataclass(frozen=True)
class MatchOutcome:
    """
    Result of evaluating one matcher against one value.

    Attributes:
        passed: Whether the value satisfied the matcher
        kind: Failure category (ignored when passed)
        label: Failed-check label; defaults to the matcher's label
        expected: Description of what was expected
        actual: Description of what was found
        available: Property names to list, for missing-property failures
        at: Child key or index the failure refers to, relative to the value
    """
    passed: bool
    kind: DiagnosticKind = DiagnosticKind.VALUE_MISMATCH
    label: str | None = None
    expected: str | None = None
    actual: str | None = None
    available: tuple[str, ...] | None = None
    at: str | int | None = None

    @classmethod
    def ok(cls) -> MatchOutcome:
        return cls(passed=True)


class Matcher(ABC):
    """Predicate over a JSON value with a description for diagnostics."""

    label: str = "Check failed"
    kind: DiagnosticKind = DiagnosticKind.VALUE_MISMATCH

    @abstractmethod
    def evaluate(self, value: Any) -> MatchOutcome:
        """Check a value."""

    def description(self) -> str:
        return self.label

    def matches(self, value: Any) -> bool:
        return self.evaluate(value).passed

    def fail(self, value: Any, expected: str | None = None, **kwargs: Any) -> MatchOutcome:
        """Build a failing outcome with this matcher's label and kind."""
        kwargs.setdefault("kind", self.kind)
        kwargs.setdefault("label", self.label)
        kwargs.setdefault("actual", describe(value))
        return MatchOutcome(
            passed=False,
            expected=expected if expected is not None else self.description(),
            **kwargs,
        )

    def wrong_kind(self, value: Any, expected_kind: str) -> MatchOutcome:
        return MatchOutcome(
            passed=False,
            kind=DiagnosticKind.TYPE_MISMATCH,
            label="Type mismatch",
            expected=expected_kind,
            actual=describe(value),
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__}: {self.description()}>"


def _check_number(value: Any, name: str) -> None:
    if not is_number(value):
        raise TypeError(f"{name} must be a number, got {type(value).__name__}")


def _kind(value: Any) -> str:
    try:
        return kind_of(value).value
    except TypeError:
        return type(value).__name__


# ─────────────────────────────────────────────────────────────────────────────
# Type and value
# ─────────────────────────────────────────────────────────────────────────────

class TypeMatcher(Matcher):
    """Value is of one JSON kind."""

    label = "Type mismatch"
    kind = DiagnosticKind.TYPE_MISMATCH

    def __init__(self, expected: JsonKind | str):
        self.expected = JsonKind(expected)

    @classmethod
    def string(cls) -> TypeMatcher:
        return cls(JsonKind.STRING)

    @classmethod
    def number(cls) -> TypeMatcher:
        return cls(JsonKind.NUMBER)

    @classmethod
    def boolean(cls) -> TypeMatcher:
        return cls(JsonKind.BOOLEAN)

    @classmethod
    def array(cls) -> TypeMatcher:
        return cls(JsonKind.ARRAY)

    @classmethod
    def object(cls) -> TypeMatcher:
        return cls(JsonKind.OBJECT)

    @classmethod
    def null(cls) -> TypeMatcher:
        return cls(JsonKind.NULL)

    def evaluate(self, value: Any) -> MatchOutcome:
        if _kind(value) == self.expected.value:
            return MatchOutcome.ok()
        return self.fail(value, expected=self.expected.value)

    def description(self) -> str:
        return f"is of type {self.expected.value}"


class ValueMatcher(Matcher):
    """Structural equality with an expected value."""

    label = "Value mismatch"

    def __init__(self, expected: Any):
        kind_of(expected)
        self.expected = expected

    def evaluate(self, value: Any) -> MatchOutcome:
        if json_equals(self.expected, value):
            return MatchOutcome.ok()
        return self.fail(value, expected=describe(self.expected))

    def description(self) -> str:
        return f"equals {render_value(self.expected)}"


# ─────────────────────────────────────────────────────────────────────────────
# Numbers
# ─────────────────────────────────────────────────────────────────────────────

class ComparisonMatcher(Matcher):
    """Numeric comparison against a bound."""

    label = "Comparison failed"
    OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
        ">": operator.gt,
        "<": operator.lt,
        ">=": operator.ge,
        "<=": operator.le,
    }

    def __init__(self, op: str, bound: Any):
        if op not in self.OPERATORS:
            raise ValueError(f"Unknown comparison operator {op!r}")
        _check_number(bound, "Comparison bound")
        self.op = op
        self.bound = bound

    def evaluate(self, value: Any) -> MatchOutcome:
        if not is_number(value):
            return self.wrong_kind(value, "number")
        if self.OPERATORS[self.op](value, self.bound):
            return MatchOutcome.ok()
        return self.fail(value)

    def description(self) -> str:
        return f"number {self.op} {self.bound}"


class RangeMatcher(Matcher):
    """Number within an inclusive range."""

    label = "Value out of range"

    def __init__(self, low: Any, high: Any):
        _check_number(low, "Lower bound")
        _check_number(high, "Upper bound")
        if low > high:
            raise ValueError(f"Lower bound {low} is greater than upper bound {high}")
        self.low = low
        self.high = high

    def evaluate(self, value: Any) -> MatchOutcome:
        if not is_number(value):
            return self.wrong_kind(value, "number")
        if self.low <= value <= self.high:
            return MatchOutcome.ok()
        return self.fail(value)

    def description(self) -> str:
        return f"number between {self.low} and {self.high}"


# ─────────────────────────────────────────────────────────────────────────────
# Strings
# ─────────────────────────────────────────────────────────────────────────────

class StringMatcher(Matcher):
    """Substring, prefix or suffix check."""

    label = "String mismatch"
    MODES = {
        "contains": "string containing",
        "starts_with": "string starting with",
        "ends_with": "string ending with",
    }

    def __init__(self, mode: str, text: str):
        if mode not in self.MODES:
            raise ValueError(f"Unknown string mode {mode!r}")
        if not isinstance(text, str):
            raise TypeError(f"Expected a string to search for, got {type(text).__name__}")
        self.mode = mode
        self.text = text

    def evaluate(self, value: Any) -> MatchOutcome:
        if not isinstance(value, str):
            return self.wrong_kind(value, "string")
        if self.mode == "contains":
            ok = self.text in value
        elif self.mode == "starts_with":
            ok = value.startswith(self.text)
        else:
            ok = value.endswith(self.text)
        return MatchOutcome.ok() if ok else self.fail(value)

    def description(self) -> str:
        return f"{self.MODES[self.mode]} {render_value(self.text)}"


class RegexMatcher(Matcher):
    """String matching a regular expression (searched anywhere in the value)."""

    label = "Pattern mismatch"

    def __init__(self, pattern: str | re.Pattern):
        if isinstance(pattern, re.Pattern):
            self.pattern = pattern
        else:
            try:
                self.pattern = re.compile(pattern)
            except re.error as e:
                raise PatternSyntaxError(pattern, str(e)) from e

    def evaluate(self, value: Any) -> MatchOutcome:
        if not isinstance(value, str):
            return self.wrong_kind(value, "string")
        if self.pattern.search(value):
            return MatchOutcome.ok()
        return self.fail(value)

    def description(self) -> str:
        return f"string matching /{self.pattern.pattern}/"


# ─────────────────────────────────────────────────────────────────────────────
# Collections
# ─────────────────────────────────────────────────────────────────────────────

class LengthMatcher(Matcher):
    """Array length or object property count."""

    label = "Length mismatch"

    def __init__(self, expected: int):
        if not isinstance(expected, int) or isinstance(expected, bool) or expected < 0:
            raise TypeError(f"Expected length must be a non-negative integer, got {expected!r}")
        self.expected = expected

    def evaluate(self, value: Any) -> MatchOutcome:
        if not (is_array(value) or is_object(value)):
            return self.wrong_kind(value, "array or object")
        if len(value) == self.expected:
            return MatchOutcome.ok()
        unit = "element(s)" if is_array(value) else "property(ies)"
        return self.fail(value, actual=f"{_kind(value)} with {len(value)} {unit}")

    def description(self) -> str:
        return f"length {self.expected}"


class ContainsMatcher(Matcher):
    """Array containing an element (structural equality)."""

    label = "Element not found"

    def __init__(self, item: Any):
        kind_of(item)
        self.item = item

    def evaluate(self, value: Any) -> MatchOutcome:
        if not is_array(value):
            return self.wrong_kind(value, "array")
        if any(json_equals(self.item, element) for element in value):
            return MatchOutcome.ok()
        return self.fail(value)

    def description(self) -> str:
        return f"array containing {render_value(self.item)}"


class PropertyMatcher(Matcher):
    """Object with a property, optionally constrained by another matcher."""

    label = "Missing property"

    def __init__(self, name: str, value_matcher: Matcher | None = None):
        if not isinstance(name, str):
            raise TypeError(f"Property name must be a string, got {type(name).__name__}")
        self.name = name
        self.value_matcher = value_matcher

    def evaluate(self, value: Any) -> MatchOutcome:
        if not is_object(value):
            return self.wrong_kind(value, "object")
        if self.name not in value:
            return self.fail(
                value,
                expected=f"property {self.name!r}",
                actual="property not present",
                available=tuple(value.keys()),
            )
        if self.value_matcher is None:
            return MatchOutcome.ok()

        inner = self.value_matcher.evaluate(value[self.name])
        if inner.passed:
            return inner
        return MatchOutcome(
            passed=False,
            kind=inner.kind,
            label=f"Property {self.name!r}: {inner.label or self.value_matcher.label}",
            expected=inner.expected,
            actual=inner.actual,
            available=inner.available,
            at=self.name,
        )

    def description(self) -> str:
        if self.value_matcher is None:
            return f"has property {self.name!r}"
        return f"has property {self.name!r} that {self.value_matcher.description()}"


class PropertiesMatcher(Matcher):
    """Object with every one of several properties; reports all missing names."""

    label = "Missing properties"

    def __init__(self, names: Iterable[str]):
        if isinstance(names, str):
            raise TypeError("Property names must be an iterable of strings, not a single string")
        self.names = list(names)

    def evaluate(self, value: Any) -> MatchOutcome:
        if not is_object(value):
            return self.wrong_kind(value, "object")
        missing = [name for name in self.names if name not in value]
        if not missing:
            return MatchOutcome.ok()
        return self.fail(
            value,
            actual=f"missing {', '.join(missing)}",
            available=tuple(value.keys()),
        )

    def description(self) -> str:
        return f"properties {', '.join(self.names)}"


class PropertyCountMatcher(Matcher):
    """Object with exactly N properties."""

    label = "Property count mismatch"

    def __init__(self, expected: int):
        if not isinstance(expected, int) or isinstance(expected, bool) or expected < 0:
            raise TypeError(f"Expected count must be a non-negative integer, got {expected!r}")
        self.expected = expected

    def evaluate(self, value: Any) -> MatchOutcome:
        if not is_object(value):
            return self.wrong_kind(value, "object")
        if len(value) == self.expected:
            return MatchOutcome.ok()
        return self.fail(
            value,
            actual=f"{len(value)} properties ({', '.join(value.keys())})",
        )

    def description(self) -> str:
        return f"{self.expected} properties"


# ─────────────────────────────────────────────────────────────────────────────
# Custom
# ─────────────────────────────────────────────────────────────────────────────

class PredicateMatcher(Matcher):
    """
    Wraps a user callable.

    The callable receives the raw value and returns either a bool, a
    ``(bool, label)`` tuple, or a MatchOutcome.
    """

    label = "Custom matcher failed"
    kind = DiagnosticKind.CUSTOM_MATCHER_FAILURE

    def __init__(self, predicate: Callable[[Any], Any], label: str | None = None):
        if not callable(predicate):
            raise TypeError(f"Predicate must be callable, got {type(predicate).__name__}")
        self.predicate = predicate
        self.custom_label = label

    def evaluate(self, value: Any) -> MatchOutcome:
        returned = self.predicate(value)
        if isinstance(returned, MatchOutcome):
            return returned

        label = self.custom_label
        if isinstance(returned, tuple):
            returned, label = returned[0], returned[1] if len(returned) > 1 else label
        if returned:
            return MatchOutcome.ok()
        return self.fail(
            value,
            label=label or self.label,
            expected=label or "custom predicate to pass",
        )

    def description(self) -> str:
        if self.custom_label:
            return self.custom_label
        name = getattr(self.predicate, "__name__", type(self.predicate).__name__)
        return f"satisfies {name}"
