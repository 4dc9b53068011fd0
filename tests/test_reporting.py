import json

from jsontest.assertions import Diagnostic, DiagnosticKind
from jsontest.reporting import CheckStatus, Reporter, RunStatus, compute_suite_hash
from jsontest.suites import validate_suite_yaml


SUITE = """
version: 2
name: Reporting
checks:
  - id: a
    path: $.a
    expect: [exists, is_number]
  - id: b
    path: $.b
    expect:
      - equals: x
"""


def _reporter(**kwargs):
    suite, result = validate_suite_yaml(SUITE)
    assert result.is_valid
    return Reporter.from_suite(suite, **kwargs)


def _diagnostic():
    return Diagnostic(
        kind=DiagnosticKind.VALUE_MISMATCH,
        label="Value mismatch",
        path="$.b",
        expected='string "x"',
        actual='string "y"',
        expression="$.b",
    )


def test_from_suite_prepopulates_checks():
    reporter = _reporter(document="doc.json", run_id="fixed")
    report = reporter.report
    assert report.run_id == "fixed"
    assert report.suite_name == "Reporting"
    assert report.suite_version == 2
    assert len(report.suite_hash) == 12
    assert [c.check_id for c in report.checks] == ["a", "b"]
    assert report.get_check("a").expectations == ["exists", "is_number"]
    assert all(c.status == CheckStatus.PENDING for c in report.checks)


def test_suite_hash_is_stable():
    assert compute_suite_hash({"a": 1, "b": [1, 2]}) == compute_suite_hash({"b": [1, 2], "a": 1})
    assert _reporter().report.suite_hash == _reporter().report.suite_hash


def test_run_lifecycle_and_counters():
    reporter = _reporter()
    reporter.start_run()
    assert reporter.report.status == RunStatus.RUNNING

    reporter.start_check("a")
    reporter.complete_check_success("a", actual_value=1)
    reporter.start_check("b")
    reporter.complete_check_failure("b", _diagnostic())
    report = reporter.finish_run()

    assert report.status == RunStatus.FAILED
    assert (report.counters.total, report.counters.passed, report.counters.failed) == (2, 1, 1)
    assert report.duration_ms is not None
    b = report.get_check("b")
    assert b.duration_ms is not None
    assert b.expected_value == 'string "x"'
    assert b.diagnostic["kind"] == "value_mismatch"


def test_error_outranks_failure():
    reporter = _reporter()
    reporter.start_run()
    reporter.complete_check_failure("a", _diagnostic())
    reporter.complete_check_error("b", "boom")
    assert reporter.finish_run().status == RunStatus.ERROR


def test_skipped_checks_do_not_fail_the_run():
    reporter = _reporter()
    reporter.start_run()
    reporter.complete_check_success("a")
    reporter.skip_check("b", "optional value absent")
    report = reporter.finish_run()
    assert report.status == RunStatus.PASSED
    assert report.counters.skipped == 1


def test_unknown_check_id_is_ignored():
    reporter = _reporter()
    assert reporter.start_check("zzz") is None
    assert reporter.complete_check_success("zzz") is None


def test_to_json_and_save(tmp_path):
    reporter = _reporter(run_id="r1")
    reporter.start_run()
    reporter.complete_check_success("a", actual_value={"n": 1})
    reporter.complete_check_failure("b", _diagnostic())
    reporter.finish_run()

    path = tmp_path / "out" / "r1.json"
    reporter.save_json(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["run_id"] == "r1"
    assert data["status"] == "failed"
    assert data["summary"] == {"total": 2, "passed": 1, "failed": 1, "errors": 0, "skipped": 0}
    assert data["checks"][0]["actual_value"] == {"n": 1}
    assert data["checks"][1]["diagnostic"]["path"] == "$.b"


def test_summary_text():
    reporter = _reporter(document="doc.json")
    reporter.start_run()
    reporter.complete_check_success("a")
    reporter.complete_check_failure("b", _diagnostic())
    reporter.finish_run()
    summary = reporter.get_summary()
    assert "Run Report: Reporting" in summary
    assert "Document:   doc.json" in summary
    assert "Checks: 1 passed, 1 failed, 0 errors, 0 skipped" in summary
    assert "└─ Value mismatch at $.b" in summary
    assert "Actual: string \"y\"" in summary


def test_skipped_check_that_never_started_has_no_duration():
    reporter = _reporter()
    reporter.start_run()
    record = reporter.skip_check("a", "not reached")
    assert record.duration_ms is None
    assert record.to_dict()["started_at"] is None
    assert record.failure_message == "Skipped: not reached"
