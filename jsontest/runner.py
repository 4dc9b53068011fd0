"""
Suite runner.

Executes every check of a CheckSuite against a document and records the
outcome of each chain through a Reporter.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable

from .assertions import AssertionContext, AssertionStatus, JsonTest
from .reporting import Reporter
from .suites import Check, CheckOp, CheckSuite, Expectation
from .suites.models import NO_VALUE_OPS

logger = logging.getLogger(__name__)


def key_selector(selector: dict[str, Any]) -> Callable[[str], bool]:
    """Build a key predicate from a ``properties_matching`` selector."""
    if "prefix" in selector:
        prefix = selector["prefix"]
        return lambda key: key.startswith(prefix)
    if "suffix" in selector:
        suffix = selector["suffix"]
        return lambda key: key.endswith(suffix)
    if "pattern" in selector:
        pattern = re.compile(selector["pattern"])
        return lambda key: pattern.search(key) is not None
    raise ValueError(f"No key selector in {selector!r}")


def apply_expectation(context: AssertionContext, expectation: Expectation) -> AssertionContext:
    """Call the predicate an expectation names on a chain."""
    op, value = expectation.op, expectation.value

    if op in NO_VALUE_OPS:
        return getattr(context, op.value)()
    if op is CheckOp.IS_BETWEEN:
        low, high = value
        return context.is_between(low, high)
    if op is CheckOp.HAS_PROPERTY_VALUE:
        return context.has_property_value(value["name"], value["value"])
    if op is CheckOp.PROPERTIES_MATCHING:
        return context.properties_matching(key_selector(value)).count(value["count"]).and_()
    return getattr(context, op.value)(value)


def run_check(document: Any, check: Check) -> AssertionContext:
    """Run one check as a deferred chain and return it."""
    context = JsonTest(document, fail_fast=False).assert_path(check.path)
    for expectation in check.expect:
        apply_expectation(context, expectation)
    return context


def run_suite(
    suite: CheckSuite,
    document: Any,
    document_name: str | None = None,
    run_id: str | None = None,
    on_check: Callable[[Check, Reporter], None] | None = None,
) -> Reporter:
    """
    Execute a suite and return the reporter with results.

    Args:
        suite: The parsed suite
        document: Decoded JSON to check
        document_name: Display name for the report
        run_id: Optional custom run ID
        on_check: Called after each check is recorded (for progress output)
    """
    reporter = Reporter.from_suite(suite, document=document_name, run_id=run_id)
    reporter.start_run()
    logger.info("Running suite %r (%d checks)", suite.name, len(suite.checks))

    stopped = False
    for check in suite.checks:
        if stopped:
            reporter.skip_check(check.id, "an earlier check failed")
        else:
            reporter.start_check(check.id)
            try:
                result = run_check(document, check).result()
            except Exception as e:
                logger.debug("Check %s raised", check.id, exc_info=True)
                reporter.complete_check_error(check.id, f"{type(e).__name__}: {e}")
                stopped = suite.settings.stop_on_failure
            else:
                if result.status == AssertionStatus.FAILED:
                    reporter.complete_check_failure(check.id, result.diagnostic)
                    stopped = suite.settings.stop_on_failure
                elif result.status == AssertionStatus.SKIPPED:
                    reporter.skip_check(check.id, "optional value absent")
                else:
                    reporter.complete_check_success(check.id, actual_value=result.actual)

        if on_check is not None:
            on_check(check, reporter)

    report = reporter.finish_run()
    logger.info(
        "Suite %r finished: %s (%d passed, %d failed, %d errors)",
        suite.name, report.status.value, report.counters.passed, report.counters.failed, report.counters.errors,
    )
    return reporter
