"""
jsontest - Fluent JSON Path Assertions

This package provides chainable, path-addressed assertions over JSON
documents, with diagnostics precise enough to locate a failure without
opening the document.

Subpackages:
    - path: Path expression compiler and evaluator
    - assertions: Assertion chains, matchers and diagnostics
    - suites: Declarative YAML check suites
    - reporting: Run reports and result tracking

Usage:
    from jsontest import JsonTest

    test = JsonTest({"user": {"name": "John Doe", "roles": ["admin", "user"]}})

    test.assert_path("$.user.name").exists().is_string().equals("John Doe")
    test.assert_path("$.user.roles").is_array().contains("admin").has_length(2)
    test.assert_path("$.user").has_properties(["name", "roles"])
"""

__version__ = "0.1.0"

# Errors
from .errors import (
    AssertionFailure,
    CustomMatcherFailure,
    JsonTestError,
    MultipleFailures,
    PathSyntaxError,
    PatternSyntaxError,
    SuiteLoadError,
    TypeMismatch,
    UnmatchedPath,
    ValueMismatch,
)

# Re-export path for convenience
from .path import (
    ConcretePath,
    EvaluationResult,
    Matched,
    PathExpression,
    Unmatched,
    compile_path,
    evaluate,
)

# Re-export assertions for convenience
from .assertions import (
    AssertionContext,
    AssertionResult,
    AssertionStatus,
    Diagnostic,
    DiagnosticKind,
    JsonTest,
    Matcher,
    MatchOutcome,
    PropertyScope,
    assert_path,
)

# Re-export suites for convenience
from .suites import (
    CheckSuite,
    ValidationResult,
    load_document,
    load_suite,
    validate_suite_yaml,
)

# Re-export reporting for convenience
from .reporting import Reporter, RunReport, RunStatus

from .runner import run_suite

__all__ = [
    # Package info
    "__version__",
    # Errors
    "JsonTestError",
    "PathSyntaxError",
    "PatternSyntaxError",
    "SuiteLoadError",
    "AssertionFailure",
    "UnmatchedPath",
    "TypeMismatch",
    "ValueMismatch",
    "CustomMatcherFailure",
    "MultipleFailures",
    # Path
    "compile_path",
    "evaluate",
    "PathExpression",
    "ConcretePath",
    "EvaluationResult",
    "Matched",
    "Unmatched",
    # Assertions
    "JsonTest",
    "assert_path",
    "AssertionContext",
    "PropertyScope",
    "AssertionResult",
    "AssertionStatus",
    "Diagnostic",
    "DiagnosticKind",
    "Matcher",
    "MatchOutcome",
    # Suites
    "CheckSuite",
    "ValidationResult",
    "load_suite",
    "load_document",
    "validate_suite_yaml",
    # Reporting
    "Reporter",
    "RunReport",
    "RunStatus",
    # Runner
    "run_suite",
]
