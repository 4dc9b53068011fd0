"""
Schema validation for check suites.

This module contains the validation logic that checks raw parsed YAML
against the suite schema and reports errors with helpful messages.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from ..errors import PathSyntaxError
from ..path import compile_path
from ..values import is_number, kind_of
from .models import NO_VALUE_OPS, CheckOp


# ─────────────────────────────────────────────────────────────────────────────
# Validation Result Types
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class ValidationError:
    """Represents a single validation error with context."""
    path: str  # e.g., "checks[0].expect[2]"
    message: str
    value: Any = None
    suggestion: str | None = None

    def __str__(self) -> str:
        parts = [f"❌ {self.path}: {self.message}"]
        if self.value is not None:
            parts.append(f"   Got: {repr(self.value)}")
        if self.suggestion:
            parts.append(f"   💡 {self.suggestion}")
        return "\n".join(parts)


@dataclass
class ValidationResult:
    """Result of schema validation."""
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(
        self,
        path: str,
        message: str,
        value: Any = None,
        suggestion: str | None = None
    ) -> None:
        self.errors.append(ValidationError(path, message, value, suggestion))

    def __str__(self) -> str:
        if self.is_valid:
            return "✅ Schema validation passed"
        lines = [f"Schema validation failed with {len(self.errors)} error(s):\n"]
        lines.extend(str(e) for e in self.errors)
        return "\n".join(lines)


# ─────────────────────────────────────────────────────────────────────────────
# Schema Validator
# ─────────────────────────────────────────────────────────────────────────────

def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _is_json(value: Any) -> bool:
    try:
        kind_of(value)
    except TypeError:
        return False
    if isinstance(value, (list, tuple)):
        return all(_is_json(v) for v in value)
    if isinstance(value, dict):
        return all(isinstance(k, str) and _is_json(v) for k, v in value.items())
    return True


class SchemaValidator:
    """Validates raw parsed YAML against the suite schema."""

    REQUIRED_TOP_LEVEL = {"version", "name", "checks"}
    OPTIONAL_TOP_LEVEL = {"document", "settings", "description"}
    VALID_OPS = {op.value for op in CheckOp}
    NUMBER_OPS = {"is_greater_than", "is_less_than", "is_at_least", "is_at_most"}
    STRING_OPS = {"contains_string", "starts_with", "ends_with", "has_property"}
    COUNT_OPS = {"has_length", "has_property_count"}
    KEY_SELECTORS = {"prefix", "suffix", "pattern"}

    def __init__(self, data: dict[str, Any]):
        self.data = data
        self.result = ValidationResult()
        self.check_ids: set[str] = set()

    def validate(self) -> ValidationResult:
        """Run all validation checks and return result."""
        self._validate_top_level()
        if not self.result.is_valid:
            return self.result

        self._validate_version()
        self._validate_name()
        self._validate_document()
        self._validate_settings()
        self._validate_checks()

        return self.result

    def _validate_top_level(self) -> None:
        """Check required and unknown top-level keys."""
        keys = set(self.data.keys())
        missing = self.REQUIRED_TOP_LEVEL - keys
        unknown = keys - self.REQUIRED_TOP_LEVEL - self.OPTIONAL_TOP_LEVEL

        for key in sorted(missing):
            self.result.add_error(
                key,
                f"Required field '{key}' is missing",
                suggestion=f"Add '{key}:' to your suite file"
            )

        for key in sorted(unknown, key=str):
            self.result.add_error(
                str(key),
                f"Unknown top-level field '{key}'",
                suggestion=f"Valid fields are: {', '.join(sorted(self.REQUIRED_TOP_LEVEL | self.OPTIONAL_TOP_LEVEL))}"
            )

    def _validate_version(self) -> None:
        version = self.data.get("version")
        if not isinstance(version, int) or isinstance(version, bool):
            self.result.add_error(
                "version",
                "Must be an integer",
                value=version,
                suggestion="Use 'version: 1'"
            )
        elif version < 1:
            self.result.add_error(
                "version",
                "Must be >= 1",
                value=version
            )

    def _validate_name(self) -> None:
        name = self.data.get("name")
        if not isinstance(name, str):
            self.result.add_error(
                "name",
                "Must be a string",
                value=name
            )
        elif not name.strip():
            self.result.add_error(
                "name",
                "Cannot be empty",
                suggestion="Provide a descriptive name for your suite"
            )

    def _validate_document(self) -> None:
        document = self.data.get("document")
        if document is not None and not isinstance(document, str):
            self.result.add_error(
                "document",
                "Must be a string (path to a JSON file)",
                value=document
            )

    def _validate_settings(self) -> None:
        settings = self.data.get("settings")
        if settings is None:
            return
        if not isinstance(settings, dict):
            self.result.add_error(
                "settings",
                "Must be an object",
                value=settings
            )
            return

        for key in settings:
            if key != "stop_on_failure":
                self.result.add_error(
                    f"settings.{key}",
                    "Unknown setting",
                    suggestion="Valid settings: stop_on_failure"
                )

        stop = settings.get("stop_on_failure")
        if stop is not None and not isinstance(stop, bool):
            self.result.add_error(
                "settings.stop_on_failure",
                "Must be true or false",
                value=stop
            )

    def _validate_checks(self) -> None:
        checks = self.data.get("checks")
        if not isinstance(checks, list):
            self.result.add_error(
                "checks",
                "Must be a list",
                value=checks
            )
            return

        if len(checks) == 0:
            self.result.add_error(
                "checks",
                "Must contain at least one check",
                suggestion="Add a check with 'id', 'path' and 'expect'"
            )
            return

        for i, check in enumerate(checks):
            self._validate_check(i, check)

    def _validate_check(self, index: int, check: Any) -> None:
        path = f"checks[{index}]"

        if not isinstance(check, dict):
            self.result.add_error(
                path,
                "Check must be an object",
                value=check
            )
            return

        check_id = check.get("id")
        if not check_id:
            self.result.add_error(
                f"{path}.id",
                "Check must have an 'id' field",
                suggestion="Add a unique identifier like 'id: user_name'"
            )
        elif not isinstance(check_id, str):
            self.result.add_error(
                f"{path}.id",
                "Check id must be a string",
                value=check_id
            )
        elif check_id in self.check_ids:
            self.result.add_error(
                f"{path}.id",
                "Duplicate check id",
                value=check_id,
                suggestion="Each check must have a unique id"
            )
        else:
            self.check_ids.add(check_id)

        expression = check.get("path")
        if not expression:
            self.result.add_error(
                f"{path}.path",
                "Check requires a 'path' field (path expression)",
                suggestion="Use '$' for the document root"
            )
        elif not isinstance(expression, str):
            self.result.add_error(
                f"{path}.path",
                "Path must be a string",
                value=expression
            )
        else:
            try:
                compile_path(expression)
            except PathSyntaxError as e:
                self.result.add_error(
                    f"{path}.path",
                    f"Invalid path expression: {e.message} at position {e.position}",
                    value=expression,
                    suggestion="Supported segments: .name, ['name'], [0], [*], ..name"
                )

        description = check.get("description")
        if description is not None and not isinstance(description, str):
            self.result.add_error(
                f"{path}.description",
                "Description must be a string",
                value=description
            )

        expect = check.get("expect")
        if not isinstance(expect, list) or not expect:
            self.result.add_error(
                f"{path}.expect",
                "Check requires a non-empty 'expect' list",
                value=expect,
                suggestion="For example: 'expect: [exists, is_string]'"
            )
            return

        for i, item in enumerate(expect):
            self._validate_expectation(f"{path}.expect[{i}]", item)

    def _validate_expectation(self, path: str, item: Any) -> None:
        if isinstance(item, str):
            op, value, has_value = item, None, False
        elif isinstance(item, dict) and len(item) == 1:
            op, value = next(iter(item.items()))
            has_value = True
        else:
            self.result.add_error(
                path,
                "Expectation must be an operator name or a single-key object",
                value=item,
                suggestion="Use 'is_string' or 'equals: 42'"
            )
            return

        if op not in self.VALID_OPS:
            self.result.add_error(
                path,
                "Invalid operator",
                value=op,
                suggestion=f"Valid operators: {', '.join(sorted(self.VALID_OPS))}"
            )
            return

        if CheckOp(op) in NO_VALUE_OPS:
            if has_value and value is not None:
                self.result.add_error(
                    f"{path}.{op}",
                    f"Operator '{op}' takes no value",
                    value=value
                )
            return

        if not has_value:
            self.result.add_error(
                path,
                f"Operator '{op}' requires a value",
                suggestion=f"Write it as '{op}: <value>'"
            )
            return

        self._validate_value(f"{path}.{op}", op, value)

    def _validate_value(self, path: str, op: str, value: Any) -> None:
        if op in self.NUMBER_OPS:
            if not is_number(value):
                self.result.add_error(path, "Must be a number", value=value)

        elif op in self.STRING_OPS:
            if not isinstance(value, str):
                self.result.add_error(path, "Must be a string", value=value)

        elif op in self.COUNT_OPS:
            if not _is_count(value):
                self.result.add_error(path, "Must be a non-negative integer", value=value)

        elif op == "is_between":
            if not (isinstance(value, list) and len(value) == 2 and all(is_number(v) for v in value)):
                self.result.add_error(
                    path,
                    "Must be a list of two numbers",
                    value=value,
                    suggestion="Use 'is_between: [0, 100]'"
                )
            elif value[0] > value[1]:
                self.result.add_error(path, "Lower bound is greater than upper bound", value=value)

        elif op == "matches_pattern":
            if not isinstance(value, str):
                self.result.add_error(path, "Must be a string (regular expression)", value=value)
            else:
                try:
                    re.compile(value)
                except re.error as e:
                    self.result.add_error(path, f"Invalid regular expression: {e}", value=value)

        elif op in ("equals", "contains"):
            if not _is_json(value):
                self.result.add_error(
                    path,
                    "Must be a JSON value",
                    value=value,
                    suggestion="Quote dates and other YAML-specific scalars"
                )

        elif op == "has_properties":
            if not (isinstance(value, list) and value and all(isinstance(v, str) for v in value)):
                self.result.add_error(path, "Must be a non-empty list of property names", value=value)

        elif op == "has_property_value":
            if not isinstance(value, dict) or set(value) != {"name", "value"}:
                self.result.add_error(
                    path,
                    "Must be an object with 'name' and 'value'",
                    value=value,
                    suggestion="Use 'has_property_value: {name: port, value: 5432}'"
                )
            elif not isinstance(value["name"], str):
                self.result.add_error(f"{path}.name", "Must be a string", value=value["name"])
            elif not _is_json(value["value"]):
                self.result.add_error(f"{path}.value", "Must be a JSON value", value=value["value"])

        elif op == "properties_matching":
            self._validate_properties_matching(path, value)

    def _validate_properties_matching(self, path: str, value: Any) -> None:
        if not isinstance(value, dict):
            self.result.add_error(
                path,
                "Must be an object",
                value=value,
                suggestion="Use 'properties_matching: {prefix: meta_, count: 1}'"
            )
            return

        selectors = self.KEY_SELECTORS & set(value)
        unknown = set(value) - self.KEY_SELECTORS - {"count"}
        if len(selectors) != 1:
            self.result.add_error(
                path,
                "Must have exactly one of 'prefix', 'suffix' or 'pattern'",
                value=value
            )
        for key in sorted(unknown, key=str):
            self.result.add_error(f"{path}.{key}", "Unknown field", suggestion="Valid fields: prefix, suffix, pattern, count")

        for selector in selectors:
            if not isinstance(value[selector], str):
                self.result.add_error(f"{path}.{selector}", "Must be a string", value=value[selector])
            elif selector == "pattern":
                try:
                    re.compile(value[selector])
                except re.error as e:
                    self.result.add_error(f"{path}.pattern", f"Invalid regular expression: {e}", value=value[selector])

        if "count" not in value:
            self.result.add_error(f"{path}.count", "Required field 'count' is missing")
        elif not _is_count(value["count"]):
            self.result.add_error(f"{path}.count", "Must be a non-negative integer", value=value["count"])
