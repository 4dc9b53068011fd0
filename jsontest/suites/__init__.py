"""
Declarative check suites.

This package provides tools for parsing, validating, and working with
YAML files that describe path assertions against a JSON document.

Usage:
    from jsontest.suites import load_suite, validate_suite_yaml

    # Load from file
    suite, result = load_suite("checks/user_api.yaml")
    if not result.is_valid:
        print(result)

    # Or validate from string
    suite, result = validate_suite_yaml(yaml_string)
"""

# Public API
from .loader import load_document, load_suite, validate_suite_yaml

# Models (for type hints and isinstance checks)
from .models import Check, CheckOp, CheckSuite, Expectation, Settings

# Validation (for custom validation if needed)
from .validation import SchemaValidator, ValidationError, ValidationResult

__all__ = [
    # Loader functions
    "load_suite",
    "load_document",
    "validate_suite_yaml",
    # Models
    "CheckSuite",
    "Check",
    "CheckOp",
    "Expectation",
    "Settings",
    # Validation
    "ValidationResult",
    "ValidationError",
    "SchemaValidator",
]
