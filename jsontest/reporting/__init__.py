"""
Reporting for suite runs.

This package provides reporting capabilities for capturing complete
records of check suite runs.

Features:
    - Run metadata (ID, timestamp, suite info, document)
    - Check-by-check records with timing
    - Structured diagnostics for failures
    - JSON serialization
    - Human-readable summaries

Usage:
    from jsontest.suites import load_suite
    from jsontest.reporting import Reporter

    suite, _ = load_suite("checks/user_api.yaml")
    reporter = Reporter.from_suite(suite)

    reporter.start_run()
    reporter.start_check("user_name")
    reporter.complete_check_success("user_name", actual_value="John")

    report = reporter.finish_run()
    print(report.summary())
    reporter.save_json("reports/run.json")
"""

# Models
from .models import (
    CheckRecord,
    CheckStatus,
    Counters,
    RunReport,
    RunStatus,
    Timing,
    compute_suite_hash,
)

# Reporter
from .reporter import Reporter

__all__ = [
    # Models
    "RunReport",
    "RunStatus",
    "CheckRecord",
    "CheckStatus",
    "Counters",
    "Timing",
    "compute_suite_hash",
    # Reporter
    "Reporter",
]
