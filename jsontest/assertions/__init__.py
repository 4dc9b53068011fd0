"""
Fluent assertions over JSON documents.

This package provides chainable, path-addressed checks with structured
diagnostics.

Supported predicates:
    - existence: exists, exists_or_none, does_not_exist
    - types: is_string, is_number, is_bool, is_array, is_object, is_null
    - values: equals, is_greater_than, is_less_than, is_at_least,
      is_at_most, is_between
    - strings: contains_string, starts_with, ends_with, matches_pattern
    - collections: has_length, contains, has_property, has_property_value,
      has_properties, has_property_count, has_property_matching,
      properties_matching
    - custom: matches, satisfies

Usage:
    from jsontest.assertions import JsonTest

    data = {"users": [{"name": "John", "age": 30}, {"name": "Ann", "age": 17}]}
    test = JsonTest(data)
    test.assert_path("$.users[0].name").is_string().starts_with("J")
    test.assert_path("$.users[*].age").is_greater_than(18)
    # AssertionError:
    #   Comparison failed at $.users[1].age
    #   Expected: number > 18
    #   Actual: number 17
"""

# Models
from .models import AssertionResult, AssertionStatus, ChainState, Diagnostic, DiagnosticKind

# Matchers
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

# Chains
from .context import AssertionContext, PropertyScope
from .engine import JsonTest, assert_path

__all__ = [
    # Models
    "AssertionResult",
    "AssertionStatus",
    "ChainState",
    "Diagnostic",
    "DiagnosticKind",
    # Matchers
    "Matcher",
    "MatchOutcome",
    "TypeMatcher",
    "ValueMatcher",
    "ComparisonMatcher",
    "RangeMatcher",
    "StringMatcher",
    "RegexMatcher",
    "LengthMatcher",
    "ContainsMatcher",
    "PropertyMatcher",
    "PropertiesMatcher",
    "PropertyCountMatcher",
    "PredicateMatcher",
    # Chains
    "AssertionContext",
    "PropertyScope",
    "JsonTest",
    "assert_path",
]
