"""
Assertion context: the fluent predicate chain.

An AssertionContext wraps the evaluation of one path expression and
carries it through a chain of predicate calls. The chain is an explicit
state machine:

    PENDING  --exists_or_none()-->  VACUOUS   (later predicates skipped)
    PENDING  --any other call-->    FAILED    (path-not-found diagnostic)
    PASSED   --failing predicate--> FAILED    (later predicates skipped)

Once FAILED, no further predicate executes, so custom matchers with side
effects are never called after the first failure. In fail-fast mode the
failing call raises immediately; otherwise the failure is surfaced by
``verify()``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Iterable

from ..errors import failure_for
from ..path import ConcretePath, EvaluationResult, Matched, PathExpression
from . import formatting
from .matchers import (
    ComparisonMatcher,
    ContainsMatcher,
    LengthMatcher,
    Matcher,
    MatchOutcome,
    PredicateMatcher,
    PropertiesMatcher,
    PropertyCountMatcher,
    PropertyMatcher,
    RangeMatcher,
    RegexMatcher,
    StringMatcher,
    TypeMatcher,
    ValueMatcher,
)
from .models import AssertionResult, ChainState, Diagnostic

if TYPE_CHECKING:
    from .engine import JsonTest

logger = logging.getLogger(__name__)


class AssertionContext:
    """
    Chainable assertions on the value(s) a path expression resolved to.

    Predicates that examine a single value apply to every match of a
    multi-match expression and fail on the first one that does not
    conform, naming its concrete path.

    Example:
        test = JsonTest({"user": {"name": "John", "age": 30}})
        test.assert_path("$.user.name").exists().is_string().equals("John")
        test.assert_path("$.user.age").is_number().is_between(18, 99)
    """

    def __init__(self, owner: JsonTest, expression: PathExpression, result: EvaluationResult):
        self._owner = owner
        self.expression = expression
        self.evaluation = result
        self._state = ChainState.PASSED if result.matched else ChainState.PENDING
        self._diagnostic: Diagnostic | None = None
        self._absence_asserted = False

    # ─────────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────────

    @property
    def root(self) -> Any:
        return self._owner.document

    @property
    def state(self) -> ChainState:
        return self._state

    @property
    def failed(self) -> bool:
        return self._state is ChainState.FAILED

    @property
    def passed(self) -> bool:
        return not self.failed

    @property
    def diagnostic(self) -> Diagnostic | None:
        return self._diagnostic

    @property
    def values(self) -> list[Any]:
        """Every matched value (empty when the path is unmatched)."""
        if isinstance(self.evaluation, Matched):
            return self.evaluation.values
        return []

    @property
    def value(self) -> Any:
        """The first matched value, or None when the path is unmatched."""
        values = self.values
        return values[0] if values else None

    def _fail(self, diagnostic: Diagnostic) -> AssertionContext:
        self._state = ChainState.FAILED
        self._diagnostic = diagnostic
        logger.debug("Assertion failed on %s: %s at %s", self.expression, diagnostic.label, diagnostic.path)
        if self._owner.fail_fast:
            raise failure_for(diagnostic)
        return self

    def _skipping(self) -> bool:
        return self._state in (ChainState.FAILED, ChainState.VACUOUS)

    def _require_match(self) -> bool:
        """Fail with the path-not-found diagnostic if nothing matched."""
        if self._state is ChainState.PENDING:
            self._fail(formatting.from_unmatched(self.evaluation))
            return False
        return True

    def _apply(self, matcher: Matcher) -> AssertionContext:
        if self._skipping() or not self._require_match():
            return self
        for match in self.evaluation.matches:
            outcome = matcher.evaluate(match.value)
            if not outcome.passed:
                return self._fail(formatting.from_outcome(outcome, matcher, match.path, self.expression))
        return self

    # ─────────────────────────────────────────────────────────────────────
    # Existence
    # ─────────────────────────────────────────────────────────────────────

    def exists(self) -> AssertionContext:
        """Fail unless the path resolved to at least one value."""
        if not self._skipping():
            self._require_match()
        return self

    def exists_or_none(self) -> AssertionContext:
        """
        Accept an absent value.

        When the path is unmatched the chain becomes vacuous and every
        later predicate is skipped; when it matched, the chain continues.
        """
        if self._state is ChainState.PENDING:
            self._state = ChainState.VACUOUS
        return self

    def does_not_exist(self) -> AssertionContext:
        """Fail if the path resolved to anything."""
        if self._skipping():
            return self
        if isinstance(self.evaluation, Matched):
            return self._fail(formatting.from_unexpected_match(self.evaluation))
        self._state = ChainState.VACUOUS
        self._absence_asserted = True
        return self

    # ─────────────────────────────────────────────────────────────────────
    # Types
    # ─────────────────────────────────────────────────────────────────────

    def is_string(self) -> AssertionContext:
        return self._apply(TypeMatcher.string())

    def is_number(self) -> AssertionContext:
        return self._apply(TypeMatcher.number())

    def is_bool(self) -> AssertionContext:
        return self._apply(TypeMatcher.boolean())

    is_boolean = is_bool

    def is_array(self) -> AssertionContext:
        return self._apply(TypeMatcher.array())

    def is_object(self) -> AssertionContext:
        return self._apply(TypeMatcher.object())

    def is_null(self) -> AssertionContext:
        return self._apply(TypeMatcher.null())

    # ─────────────────────────────────────────────────────────────────────
    # Values
    # ─────────────────────────────────────────────────────────────────────

    def equals(self, expected: Any) -> AssertionContext:
        """Structural equality; numbers compare by value, kinds never coerce."""
        return self._apply(ValueMatcher(expected))

    def is_greater_than(self, bound: Any) -> AssertionContext:
        return self._apply(ComparisonMatcher(">", bound))

    def is_less_than(self, bound: Any) -> AssertionContext:
        return self._apply(ComparisonMatcher("<", bound))

    def is_at_least(self, bound: Any) -> AssertionContext:
        return self._apply(ComparisonMatcher(">=", bound))

    def is_at_most(self, bound: Any) -> AssertionContext:
        return self._apply(ComparisonMatcher("<=", bound))

    def is_between(self, low: Any, high: Any) -> AssertionContext:
        """Inclusive range check."""
        return self._apply(RangeMatcher(low, high))

    # ─────────────────────────────────────────────────────────────────────
    # Strings
    # ─────────────────────────────────────────────────────────────────────

    def contains_string(self, substring: str) -> AssertionContext:
        return self._apply(StringMatcher("contains", substring))

    def starts_with(self, prefix: str) -> AssertionContext:
        return self._apply(StringMatcher("starts_with", prefix))

    def ends_with(self, suffix: str) -> AssertionContext:
        return self._apply(StringMatcher("ends_with", suffix))

    def matches_pattern(self, pattern: str) -> AssertionContext:
        """
        Regex search anywhere in the string; anchor with ^ and $ for a full match.

        Raises:
            PatternSyntaxError: If the pattern does not compile
        """
        return self._apply(RegexMatcher(pattern))

    # ─────────────────────────────────────────────────────────────────────
    # Collections
    # ─────────────────────────────────────────────────────────────────────

    def has_length(self, expected: int) -> AssertionContext:
        """Array length, or number of properties of an object."""
        return self._apply(LengthMatcher(expected))

    def contains(self, item: Any) -> AssertionContext:
        """Array membership by structural equality."""
        return self._apply(ContainsMatcher(item))

    def has_property(self, name: str) -> AssertionContext:
        return self._apply(PropertyMatcher(name))

    def has_property_value(self, name: str, expected: Any) -> AssertionContext:
        return self._apply(PropertyMatcher(name, ValueMatcher(expected)))

    def has_properties(self, names: Iterable[str]) -> AssertionContext:
        """All names must be present; every missing one is reported together."""
        return self._apply(PropertiesMatcher(names))

    def has_property_count(self, expected: int) -> AssertionContext:
        return self._apply(PropertyCountMatcher(expected))

    def has_property_matching(
        self,
        name: str,
        predicate: Callable[[Any], Any],
        label: str | None = None,
    ) -> AssertionContext:
        """The named property must exist and its value satisfy ``predicate``."""
        return self._apply(PropertyMatcher(name, PredicateMatcher(predicate, label)))

    def properties_matching(self, key_predicate: Callable[[str], bool]) -> PropertyScope:
        """Open a sub-scope over the properties whose key satisfies ``key_predicate``."""
        return PropertyScope(self, key_predicate)

    # ─────────────────────────────────────────────────────────────────────
    # Custom
    # ─────────────────────────────────────────────────────────────────────

    def matches(
        self,
        predicate: Callable[[Any], Any] | Matcher,
        label: str | None = None,
    ) -> AssertionContext:
        """
        Apply a user predicate or Matcher to every matched value.

        A callable may return a bool, a ``(bool, label)`` tuple or a
        MatchOutcome. Without a label the failure reads
        "Custom matcher failed at <path>".
        """
        if isinstance(predicate, Matcher):
            return self._apply(predicate)
        return self._apply(PredicateMatcher(predicate, label))

    def satisfies(self, matcher: Matcher) -> AssertionContext:
        return self._apply(matcher)

    # ─────────────────────────────────────────────────────────────────────
    # Chain control
    # ─────────────────────────────────────────────────────────────────────

    def assert_path(self, expression: str | PathExpression) -> AssertionContext:
        """Start a new chain on the same document."""
        return self._owner.assert_path(expression)

    def verify(self) -> AssertionContext:
        """
        Terminal call: raise the chain's failure, if any.

        Raises:
            AssertionFailure: The subclass matching the failure kind
        """
        if self._diagnostic is not None:
            raise failure_for(self._diagnostic)
        return self

    def result(self) -> AssertionResult:
        """Snapshot of the chain's outcome."""
        source = self.expression.source
        if self._diagnostic is not None:
            return AssertionResult.failed_result(self._diagnostic)
        if self._absence_asserted:
            return AssertionResult.passed_result("Path absent as expected", path=source)
        if self._state is ChainState.VACUOUS:
            return AssertionResult.skipped_result("Optional value absent", path=source)
        if self._state is ChainState.PENDING:
            return AssertionResult.passed_result("No checks applied", path=source)
        actual = self.values[0] if len(self.values) == 1 else self.values
        return AssertionResult.passed_result("All checks passed", path=source, actual=actual)

    def __repr__(self) -> str:
        return f"<AssertionContext {self.expression.source} {self._state.value}>"


class PropertyScope:
    """
    Sub-scope over the properties of the current object(s) whose key
    satisfies a predicate.

    A failure inside the scope propagates to the parent chain; ``and_()``
    returns to the parent.

    Example:
        (test.assert_path("$.config.api_keys")
            .properties_matching(lambda k: k.startswith("key_"))
            .count(3)
            .all(lambda k, v: isinstance(v, str) and v.startswith("pk_"))
            .and_()
            .has_property("key_prod"))
    """

    def __init__(self, parent: AssertionContext, key_predicate: Callable[[str], bool]):
        self._parent = parent
        self._groups: list[tuple[ConcretePath, list[tuple[str, Any]]]] = []
        self._diagnostic: Diagnostic | None = None

        parent._apply(TypeMatcher.object())
        self._active = not parent._skipping()
        if self._active:
            for match in parent.evaluation.matches:
                pairs = [(k, v) for k, v in match.value.items() if key_predicate(k)]
                self._groups.append((match.path, pairs))

    @property
    def failed(self) -> bool:
        return self._diagnostic is not None

    @property
    def passed(self) -> bool:
        return not self.failed

    @property
    def diagnostic(self) -> Diagnostic | None:
        return self._diagnostic

    def _fail(self, diagnostic: Diagnostic) -> PropertyScope:
        self._diagnostic = diagnostic
        self._parent._fail(diagnostic)
        return self

    def _skipping(self) -> bool:
        return not self._active or self._parent._skipping()

    def count(self, expected: int) -> PropertyScope:
        """Fail unless exactly ``expected`` properties matched (per object)."""
        if self._skipping():
            return self
        for path, pairs in self._groups:
            if len(pairs) != expected:
                return self._fail(formatting.matching_count_mismatch(
                    path, self._parent.expression, expected, [k for k, _ in pairs]
                ))
        return self

    def all(self, predicate: Callable[[str, Any], Any]) -> PropertyScope:
        """
        Every matched property must satisfy ``predicate(key, value)``.

        The predicate may return a bool or a ``(bool, label)`` tuple.
        """
        if self._skipping():
            return self
        for path, pairs in self._groups:
            for key, value in pairs:
                returned = predicate(key, value)
                label = None
                if isinstance(returned, MatchOutcome):
                    returned, label = returned.passed, returned.label
                elif isinstance(returned, tuple):
                    returned, label = returned[0], returned[1] if len(returned) > 1 else None
                if not returned:
                    return self._fail(formatting.property_rejected(
                        path, self._parent.expression, key, value, label
                    ))
        return self

    def keys(self) -> list[str]:
        return [k for _, pairs in self._groups for k, _ in pairs]

    def values(self) -> list[Any]:
        return [v for _, pairs in self._groups for _, v in pairs]

    def pairs(self) -> list[tuple[str, Any]]:
        return [pair for _, pairs in self._groups for pair in pairs]

    def and_(self) -> AssertionContext:
        """Return to the parent chain."""
        return self._parent

    def __repr__(self) -> str:
        return f"<PropertyScope {self._parent.expression.source} keys={self.keys()!r}>"
