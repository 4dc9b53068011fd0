"""
Typed data structures for declarative check suites.

This module contains the enums and dataclasses that represent the
internal typed structure of a parsed suite file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class CheckOp(str, Enum):
    """Predicates available in suite files."""
    # No argument
    EXISTS = "exists"
    EXISTS_OR_NONE = "exists_or_none"
    DOES_NOT_EXIST = "does_not_exist"
    IS_STRING = "is_string"
    IS_NUMBER = "is_number"
    IS_BOOL = "is_bool"
    IS_ARRAY = "is_array"
    IS_OBJECT = "is_object"
    IS_NULL = "is_null"
    # Value
    EQUALS = "equals"
    IS_GREATER_THAN = "is_greater_than"
    IS_LESS_THAN = "is_less_than"
    IS_AT_LEAST = "is_at_least"
    IS_AT_MOST = "is_at_most"
    IS_BETWEEN = "is_between"  # [low, high]
    CONTAINS_STRING = "contains_string"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    MATCHES_PATTERN = "matches_pattern"
    HAS_LENGTH = "has_length"
    CONTAINS = "contains"
    HAS_PROPERTY = "has_property"
    HAS_PROPERTY_VALUE = "has_property_value"  # {name, value}
    HAS_PROPERTIES = "has_properties"  # [names]
    HAS_PROPERTY_COUNT = "has_property_count"
    PROPERTIES_MATCHING = "properties_matching"  # {prefix|suffix|pattern, count}


NO_VALUE_OPS = frozenset({
    CheckOp.EXISTS,
    CheckOp.EXISTS_OR_NONE,
    CheckOp.DOES_NOT_EXIST,
    CheckOp.IS_STRING,
    CheckOp.IS_NUMBER,
    CheckOp.IS_BOOL,
    CheckOp.IS_ARRAY,
    CheckOp.IS_OBJECT,
    CheckOp.IS_NULL,
})


@dataclass
class Expectation:
    """One predicate call in a check's chain."""
    op: CheckOp
    value: Any = None


@dataclass
class Check:
    """A path plus the ordered predicates applied to it."""
    id: str
    path: str
    expect: list[Expectation] = field(default_factory=list)
    description: str | None = None


@dataclass
class Settings:
    """Suite-wide execution settings."""
    stop_on_failure: bool = False


@dataclass
class CheckSuite:
    """Fully parsed and validated suite."""
    version: int
    name: str
    checks: list[Check] = field(default_factory=list)
    document: str | None = None  # relative to base_dir
    settings: Settings = field(default_factory=Settings)
    base_dir: Path | None = None

    def document_path(self) -> Path | None:
        """Resolve the suite's document reference, if it has one."""
        if self.document is None:
            return None
        path = Path(self.document)
        if not path.is_absolute() and self.base_dir is not None:
            path = self.base_dir / path
        return path
