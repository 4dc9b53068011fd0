"""
Path expression compiler.

This module turns path expression text into an immutable PathExpression.

Supported grammar::

    path      := "$" segment*
    segment   := "." name | ".*" | bracket | ".." ( name | "*" | bracket )
    bracket   := "[" ( quoted | integer | "*" ) "]"
    quoted    := "'" chars "'" | '"' chars '"'     (backslash escapes)
    integer   := "-"? digit+

Filters, slices, unions and script expressions are rejected.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import NoReturn

from ..errors import PathSyntaxError
from .models import Index, Key, PathExpression, RecursiveDescent, Step, Wildcard

logger = logging.getLogger(__name__)

_NAME = re.compile(r"[^.\[\]\s'\"*$@()?,:]+")
_INTEGER = re.compile(r"-?\d+")

# Characters that only appear in the parts of JSONPath we do not implement
_UNSUPPORTED = {
    "?": "filter expressions are not supported",
    "(": "script expressions are not supported",
    "@": "current-node references are only valid inside filters",
    ":": "array slices are not supported",
    ",": "unions are not supported",
}


class PathParser:
    """Single-use cursor over one expression string."""

    def __init__(self, expression: str):
        self.expression = expression
        self.pos = 0
        self.steps: list[Step] = []

    def parse(self) -> PathExpression:
        text = self.expression
        if not text:
            raise PathSyntaxError("Empty path expression", text, 0)
        if text[0] != "$":
            raise PathSyntaxError("Path must start with '$'", text, 0, text[0])
        self.pos = 1

        while self.pos < len(text):
            char = text[self.pos]
            if text.startswith("..", self.pos):
                self._parse_descent()
            elif char == ".":
                self.pos += 1
                self._parse_dotted()
            elif char == "[":
                self._parse_bracket()
            else:
                self._fail_unexpected(self.pos)

        return PathExpression(source=text, steps=tuple(self.steps))

    def _parse_descent(self) -> None:
        start = self.pos
        self.pos += 2
        if self.pos >= len(self.expression):
            raise PathSyntaxError(
                "Recursive descent must be followed by a segment",
                self.expression, start, "..",
            )
        self.steps.append(RecursiveDescent())
        char = self.expression[self.pos]
        if char == "[":
            self._parse_bracket()
        elif char == ".":
            raise PathSyntaxError(
                "Too many dots", self.expression, start, self.expression[start:self.pos + 1]
            )
        else:
            self._parse_dotted()

    def _parse_dotted(self) -> None:
        """Parse a name (or ``*``) right after a dot."""
        text = self.expression
        if self.pos >= len(text):
            raise PathSyntaxError("Empty segment after '.'", text, self.pos - 1, ".")
        if text[self.pos] == "*":
            self.steps.append(Wildcard())
            self.pos += 1
            return
        match = _NAME.match(text, self.pos)
        if not match:
            self._fail_unexpected(self.pos)
        self.steps.append(Key(match.group(0)))
        self.pos = match.end()

    def _parse_bracket(self) -> None:
        text = self.expression
        start = self.pos
        self.pos += 1
        if self.pos >= len(text):
            raise PathSyntaxError("Unbalanced '['", text, start, "[")

        char = text[self.pos]
        if char in ("'", '"'):
            self.steps.append(Key(self._parse_quoted(char)))
        elif char == "*":
            self.steps.append(Wildcard())
            self.pos += 1
        else:
            match = _INTEGER.match(text, self.pos)
            if match:
                self.steps.append(Index(int(match.group(0))))
                self.pos = match.end()
            elif char == "]":
                raise PathSyntaxError("Empty brackets", text, start, "[]")
            else:
                self._fail_unexpected(self.pos)

        if self.pos >= len(text):
            raise PathSyntaxError("Unbalanced '['", text, start, text[start:])
        if text[self.pos] != "]":
            self._fail_unexpected(self.pos)
        self.pos += 1

    def _parse_quoted(self, quote: str) -> str:
        text = self.expression
        start = self.pos
        self.pos += 1
        chars: list[str] = []
        while self.pos < len(text):
            char = text[self.pos]
            if char == "\\" and self.pos + 1 < len(text):
                chars.append(text[self.pos + 1])
                self.pos += 2
                continue
            if char == quote:
                self.pos += 1
                if not chars:
                    raise PathSyntaxError("Empty property name", text, start, text[start:self.pos])
                return "".join(chars)
            chars.append(char)
            self.pos += 1
        raise PathSyntaxError("Unterminated quoted name", text, start, text[start:])

    def _fail_unexpected(self, pos: int) -> NoReturn:
        text = self.expression
        char = text[pos]
        if char in _UNSUPPORTED:
            raise PathSyntaxError(_UNSUPPORTED[char], text, pos, text[pos:])
        if char.isspace():
            raise PathSyntaxError("Whitespace is not allowed", text, pos, char)
        if char == "]":
            raise PathSyntaxError("Unbalanced ']'", text, pos, char)
        raise PathSyntaxError(f"Unexpected character {char!r}", text, pos, char)


@lru_cache(maxsize=512)
def compile_path(expression: str) -> PathExpression:
    """
    Compile a path expression.

    The same text always compiles to an equal PathExpression; results are
    cached since compiled expressions are immutable.

    Raises:
        PathSyntaxError: If the expression is malformed or uses an
            unsupported operator
    """
    if not isinstance(expression, str):
        raise TypeError(f"Path expression must be a string, got {type(expression).__name__}")
    compiled = PathParser(expression).parse()
    logger.debug("Compiled path %s into %d step(s)", expression, len(compiled.steps))
    return compiled
