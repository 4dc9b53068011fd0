"""
Typed data structures for compiled path expressions and their results.

This module contains the step variants a path compiles to, the concrete
paths of matched values, and the two evaluation outcomes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Union


# ─────────────────────────────────────────────────────────────────────────────
# Steps
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Key:
    """Object property access: ``.name`` or ``['name']``."""
    name: str

    def __str__(self) -> str:
        return _render_key(self.name)


@dataclass(frozen=True)
class Index:
    """Array element access; negative values count from the end."""
    index: int

    def __str__(self) -> str:
        return f"[{self.index}]"


@dataclass(frozen=True)
class Wildcard:
    """Every child of the current array or object."""

    def __str__(self) -> str:
        return "[*]"


@dataclass(frozen=True)
class RecursiveDescent:
    """Apply the following step at the current node and every descendant."""

    def __str__(self) -> str:
        return ".."


Step = Union[Key, Index, Wildcard, RecursiveDescent]


@dataclass(frozen=True)
class PathExpression:
    """
    A compiled path expression.

    Attributes:
        source: The expression text it was compiled from
        steps: Ordered navigation steps (root marker excluded)
    """
    source: str
    steps: tuple[Step, ...] = ()

    def __str__(self) -> str:
        return self.source

    @property
    def is_definite(self) -> bool:
        """True when the expression can match at most one value."""
        return not any(isinstance(s, (Wildcard, RecursiveDescent)) for s in self.steps)

    def canonical(self) -> str:
        """Render the steps back into normalized path syntax."""
        parts = ["$"]
        for step in self.steps:
            if isinstance(step, RecursiveDescent):
                parts.append("..")
            elif isinstance(step, Key) and parts[-1] == "..":
                parts.append(_render_key(step.name).lstrip("."))
            else:
                parts.append(str(step))
        return "".join(parts)


# ─────────────────────────────────────────────────────────────────────────────
# Concrete paths
# ─────────────────────────────────────────────────────────────────────────────

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_\-]*$")


def _render_key(name: str) -> str:
    if _IDENTIFIER.match(name):
        return f".{name}"
    escaped = name.replace("\\", "\\\\").replace("'", "\\'")
    return f"['{escaped}']"


@dataclass(frozen=True)
class ConcretePath:
    """
    Fully resolved location of one value, e.g. ``$.user.roles[1]``.

    ``parts`` holds property names (str) and array positions (int). Array
    positions are always the non-negative position actually visited.
    """
    parts: tuple[str | int, ...] = ()

    def child(self, part: str | int) -> ConcretePath:
        return ConcretePath(self.parts + (part,))

    @property
    def parent(self) -> ConcretePath | None:
        if not self.parts:
            return None
        return ConcretePath(self.parts[:-1])

    @property
    def depth(self) -> int:
        return len(self.parts)

    def __str__(self) -> str:
        rendered = ["$"]
        for part in self.parts:
            if isinstance(part, int):
                rendered.append(f"[{part}]")
            else:
                rendered.append(_render_key(part))
        return "".join(rendered)


ROOT = ConcretePath()


# ─────────────────────────────────────────────────────────────────────────────
# Evaluation results
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Match:
    """One matched value and where it was found."""
    path: ConcretePath
    value: Any


@dataclass(frozen=True)
class Matched:
    """
    At least one value resolved the expression.

    Matches are ordered depth-first, pre-order, left-to-right.
    """
    expression: PathExpression
    matches: tuple[Match, ...]

    def __post_init__(self) -> None:
        if not self.matches:
            raise ValueError("Matched requires at least one match; use Unmatched")

    @property
    def matched(self) -> bool:
        return True

    @property
    def values(self) -> list[Any]:
        return [m.value for m in self.matches]

    @property
    def paths(self) -> list[ConcretePath]:
        return [m.path for m in self.matches]

    def __len__(self) -> int:
        return len(self.matches)


@dataclass(frozen=True)
class Unmatched:
    """
    Nothing resolved the expression.

    Attributes:
        expression: The compiled expression that was evaluated
        nearest: Deepest existing ancestor reached before the miss
        step: The step that could not be applied
        reason: Short human description of the miss
        available_keys: Keys of ``nearest`` when it is an object
        array_length: Length of ``nearest`` when it is an array
    """
    expression: PathExpression
    nearest: ConcretePath
    step: Step | None
    reason: str
    available_keys: tuple[str, ...] | None = None
    array_length: int | None = None

    @property
    def matched(self) -> bool:
        return False


EvaluationResult = Union[Matched, Unmatched]
