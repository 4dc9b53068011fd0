"""
Entry points for path assertions.

JsonTest holds the document under test and starts assertion chains on it.
"""

from __future__ import annotations

import logging
from typing import Any

from ..errors import MultipleFailures, failure_for
from ..path import EvaluationResult, PathExpression, compile_path, evaluate
from .context import AssertionContext
from .models import Diagnostic

logger = logging.getLogger(__name__)


class JsonTest:
    """
    A JSON document under test.

    Args:
        document: Decoded JSON (the caller keeps ownership; it is never mutated)
        fail_fast: Raise as soon as a predicate fails. When False, failures
            are recorded on each chain and surfaced by ``verify()`` or by
            leaving a ``with`` block.

    Example:
        test = JsonTest(data)
        test.assert_path("$.users[0].name").exists().is_string().equals("John Doe")

        with JsonTest(data, fail_fast=False) as test:
            test.assert_path("$.users[*].age").is_greater_than(18)
            test.assert_path("$.meta").has_properties(["total", "page"])
    """

    def __init__(self, document: Any, fail_fast: bool = True):
        self.document = document
        self.fail_fast = fail_fast
        self._contexts: list[AssertionContext] = []

    def assert_path(self, expression: str | PathExpression) -> AssertionContext:
        """
        Compile and evaluate a path, returning a chain over its value(s).

        Raises:
            PathSyntaxError: If the expression is malformed
        """
        compiled = compile_path(expression) if isinstance(expression, str) else expression
        context = AssertionContext(self, compiled, evaluate(self.document, compiled))
        self._contexts.append(context)
        return context

    def query(self, expression: str | PathExpression) -> EvaluationResult:
        """Evaluate a path without starting an assertion chain."""
        return evaluate(self.document, expression)

    @property
    def contexts(self) -> list[AssertionContext]:
        return list(self._contexts)

    @property
    def failures(self) -> list[Diagnostic]:
        return [c.diagnostic for c in self._contexts if c.diagnostic is not None]

    def verify(self) -> None:
        """
        Raise if any chain started from this document failed.

        Raises:
            AssertionFailure: When exactly one chain failed
            MultipleFailures: When several chains failed
        """
        failures = self.failures
        logger.debug("Verifying %d chain(s), %d failed", len(self._contexts), len(failures))
        if len(failures) == 1:
            raise failure_for(failures[0])
        if failures:
            raise MultipleFailures(failures)

    def __enter__(self) -> JsonTest:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.verify()


def assert_path(
    root: Any,
    expression: str | PathExpression,
    fail_fast: bool = True,
) -> AssertionContext:
    """Start a single assertion chain on a document."""
    return JsonTest(root, fail_fast=fail_fast).assert_path(expression)
