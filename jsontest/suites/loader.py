"""
Suite loader for declarative check suites.

This module provides the public API for loading and validating suite
files from disk or YAML strings, and for reading the documents they check.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from ..errors import SuiteLoadError
from .models import CheckSuite
from .parser import SuiteParser
from .validation import SchemaValidator, ValidationResult

logger = logging.getLogger(__name__)

LoadOutcome = tuple[CheckSuite | None, ValidationResult]


def _rejected(location: str, message: str, **details: Any) -> LoadOutcome:
    invalid = ValidationResult()
    invalid.add_error(location, message, **details)
    return None, invalid


def _from_yaml_text(text: str, location: str, base_dir: Path | None) -> LoadOutcome:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        return _rejected(
            location,
            f"Invalid YAML syntax: {exc}",
            suggestion="Look for bad indentation or an unclosed bracket",
        )

    if not isinstance(data, dict):
        return _rejected(location, "Content must be a YAML object", value=type(data).__name__)

    outcome = SchemaValidator(data).validate()
    if not outcome.is_valid:
        return None, outcome
    return SuiteParser(data, base_dir=base_dir).parse(), outcome


def load_suite(path: str | Path) -> LoadOutcome:
    """
    Load and validate a check suite from a YAML file.

    The suite is None whenever the returned ValidationResult holds errors.
    A relative 'document' in the suite resolves against the file's directory.

    Example:
        suite, result = load_suite("checks/user_api.yaml")
        if not result.is_valid:
            print(result)
    """
    path = Path(path)
    if not path.is_file():
        return _rejected(str(path), "File not found", suggestion="Check the file path is correct")

    suite, result = _from_yaml_text(
        path.read_text(encoding="utf-8"), str(path), path.resolve().parent
    )
    logger.debug("Loaded suite %s: %d error(s)", path, len(result.errors))
    return suite, result


def validate_suite_yaml(yaml_string: str, base_dir: str | Path | None = None) -> LoadOutcome:
    """Validate a suite held in a string; 'document' resolves against base_dir."""
    return _from_yaml_text(
        yaml_string, "yaml", Path(base_dir) if base_dir is not None else None
    )


def load_document(path: str | Path) -> Any:
    """
    Read the JSON document a suite checks.

    Files ending in .yaml or .yml are read with the YAML loader.

    Raises:
        SuiteLoadError: If the file is missing or cannot be decoded
    """
    path = Path(path)
    if not path.exists():
        raise SuiteLoadError(f"Document not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SuiteLoadError(f"Cannot read document {path}: {e}") from e

    if path.suffix.lower() in (".yaml", ".yml"):
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise SuiteLoadError(f"Invalid YAML in {path}: {e}") from e

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise SuiteLoadError(
            f"Invalid JSON in {path} at line {e.lineno}, column {e.colno}: {e.msg}"
        ) from e
