"""pytest plugin for jsontest.

Registered through the pytest11 entry point, so installing the package
makes the fixtures available without any conftest.py changes.

Usage in tests::

    def test_user(json_test):
        test = json_test(response.json())
        test.assert_path("$.user.name").is_string().equals("John")

    def test_listing(json_checks):
        checks = json_checks(response.json())
        checks.assert_path("$.items[*].id").is_number()
        checks.assert_path("$.meta.total").is_at_least(1)
        # every failed chain is reported together at teardown
"""

from __future__ import annotations

from typing import Any, Callable, Iterator

import pytest

from jsontest.assertions import JsonTest
from jsontest.errors import MultipleFailures, failure_for


@pytest.fixture
def json_test() -> Callable[[Any], JsonTest]:
    """Factory for fail-fast documents: the first failing predicate raises."""

    def _make(document: Any) -> JsonTest:
        return JsonTest(document, fail_fast=True)

    return _make


@pytest.fixture
def json_checks() -> Iterator[Callable[[Any], JsonTest]]:
    """
    Factory for deferred documents.

    Failures from every document the test created are raised together
    at teardown: the specific failure type for a single one, otherwise
    MultipleFailures.
    """
    created: list[JsonTest] = []

    def _make(document: Any) -> JsonTest:
        test = JsonTest(document, fail_fast=False)
        created.append(test)
        return test

    yield _make

    failures = [diagnostic for test in created for diagnostic in test.failures]
    if len(failures) == 1:
        raise failure_for(failures[0])
    if failures:
        raise MultipleFailures(failures)
