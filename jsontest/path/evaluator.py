"""
Path evaluator.

Walks a JSON document following the steps of a compiled PathExpression.
Traversal is read-only and deterministic: results are ordered depth-first,
pre-order, left-to-right in container order.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator

from ..values import is_array, is_object, kind_of
from .models import (
    ROOT,
    EvaluationResult,
    Index,
    Key,
    Match,
    Matched,
    PathExpression,
    RecursiveDescent,
    Step,
    Unmatched,
    Wildcard,
)
from .parser import compile_path

logger = logging.getLogger(__name__)


def evaluate(root: Any, expression: PathExpression | str) -> EvaluationResult:
    """
    Resolve an expression against a document.

    Args:
        root: The decoded JSON document
        expression: A compiled expression or expression text

    Returns:
        Matched with every (concrete path, value) pair, or Unmatched
        describing the nearest existing ancestor when nothing resolves.
        When a step misses on every candidate of a fan-out, the miss of
        the first candidate in traversal order is reported.

    Raises:
        PathSyntaxError: If expression text is malformed
    """
    if isinstance(expression, str):
        expression = compile_path(expression)

    steps = expression.steps
    current = [Match(ROOT, root)]
    i = 0

    while i < len(steps):
        step = steps[i]
        if isinstance(step, RecursiveDescent):
            if i + 1 >= len(steps) or isinstance(steps[i + 1], RecursiveDescent):
                raise ValueError(f"Recursive descent in {expression.source!r} has no target step")
            step = steps[i + 1]
            candidates = [node for match in current for node in _walk(match)]
            i += 2
        else:
            candidates = current
            i += 1

        found: list[Match] = []
        first_miss: Unmatched | None = None
        for candidate in candidates:
            hits, miss = _apply(expression, step, candidate)
            found.extend(hits)
            if miss is not None and first_miss is None:
                first_miss = miss

        if not found:
            logger.debug("Path %s unmatched at %s: %s", expression, first_miss.nearest, first_miss.reason)
            return first_miss
        current = found

    logger.debug("Path %s matched %d value(s)", expression, len(current))
    return Matched(expression, tuple(current))


def _walk(match: Match) -> Iterator[Match]:
    """Yield a node and all its descendants in pre-order."""
    stack = [match]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(list(_children(node))))


def _children(match: Match) -> Iterator[Match]:
    value = match.value
    if is_object(value):
        for key, child in value.items():
            yield Match(match.path.child(key), child)
    elif is_array(value):
        for position, child in enumerate(value):
            yield Match(match.path.child(position), child)


def _kind_name(value: Any) -> str:
    try:
        return kind_of(value).value
    except TypeError:
        return type(value).__name__


def _apply(
    expression: PathExpression, step: Step, match: Match
) -> tuple[list[Match], Unmatched | None]:
    """Apply one non-descent step to one node."""
    value = match.value

    if isinstance(step, Key):
        if not is_object(value):
            return [], Unmatched(
                expression, match.path, step,
                reason=f"cannot read property {step.name!r} of {_kind_name(value)}",
            )
        if step.name in value:
            return [Match(match.path.child(step.name), value[step.name])], None
        return [], Unmatched(
            expression, match.path, step,
            reason=f"no property {step.name!r}",
            available_keys=tuple(value.keys()),
        )

    if isinstance(step, Index):
        if not is_array(value):
            return [], Unmatched(
                expression, match.path, step,
                reason=f"cannot index {_kind_name(value)} with [{step.index}]",
            )
        length = len(value)
        position = step.index + length if step.index < 0 else step.index
        if 0 <= position < length:
            return [Match(match.path.child(position), value[position])], None
        return [], Unmatched(
            expression, match.path, step,
            reason=f"index {step.index} out of range for array of length {length}",
            array_length=length,
        )

    if isinstance(step, Wildcard):
        children = list(_children(match))
        if children:
            return children, None
        if is_object(value):
            return [], Unmatched(
                expression, match.path, step, reason="object has no properties",
                available_keys=(),
            )
        if is_array(value):
            return [], Unmatched(
                expression, match.path, step, reason="array is empty", array_length=0,
            )
        return [], Unmatched(
            expression, match.path, step,
            reason=f"{_kind_name(value)} has no children",
        )

    raise TypeError(f"Unknown path step: {step!r}")
