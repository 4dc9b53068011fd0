"""
Reporter: records check outcomes into a RunReport while a suite runs.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from .models import CheckRecord, CheckStatus, RunReport, compute_suite_hash

if TYPE_CHECKING:
    from ..assertions import Diagnostic
    from ..suites import CheckSuite


class Reporter:
    """
    Fills in a RunReport one check at a time.

    Records are created up front from the suite, so a check that is never
    reached still appears in the report as pending or skipped. Calls naming
    an unknown check id are ignored and return None.

    Example:
        reporter = Reporter.from_suite(suite, document="user.json")
        reporter.start_run()
        reporter.start_check("user_name")
        reporter.complete_check_success("user_name", actual_value="John")
        print(reporter.finish_run().summary())
    """

    def __init__(self, report: RunReport):
        self.report = report

    @classmethod
    def from_suite(
        cls,
        suite: CheckSuite,
        document: str | None = None,
        run_id: str | None = None,
    ) -> Reporter:
        """
        Build a reporter with one pending CheckRecord per suite check.

        Args:
            suite: Validated suite about to run
            document: Name of the checked document, shown in summaries
            run_id: Fixed run id; a uuid4 is generated when omitted
        """
        report = RunReport(
            suite_name=suite.name,
            suite_version=suite.version,
            suite_hash=compute_suite_hash(_hashable_suite(suite)),
            document=document,
        )
        if run_id:
            report.run_id = run_id

        for check in suite.checks:
            report.add_check(CheckRecord(
                check_id=check.id,
                path=check.path,
                expectations=[e.op.value for e in check.expect],
            ))
        return cls(report)

    def _record(self, check_id: str) -> CheckRecord | None:
        return self.report.get_check(check_id)

    def start_run(self) -> None:
        self.report.start()

    def finish_run(self) -> RunReport:
        """Close the run; counters and overall status are settled here."""
        self.report.complete()
        return self.report

    def start_check(self, check_id: str) -> CheckRecord | None:
        record = self._record(check_id)
        if record:
            record.start()
        return record

    def complete_check_success(self, check_id: str, actual_value: Any = None) -> CheckRecord | None:
        record = self._record(check_id)
        if record:
            record.actual_value = actual_value
            record.complete(CheckStatus.PASSED)
        return record

    def complete_check_failure(self, check_id: str, diagnostic: Diagnostic) -> CheckRecord | None:
        """Store the chain's diagnostic, both rendered and as a dict."""
        record = self._record(check_id)
        if record:
            record.failure_message = diagnostic.render()
            record.expected_value = diagnostic.expected
            record.actual_value = diagnostic.actual
            record.diagnostic = diagnostic.to_dict()
            record.complete(CheckStatus.FAILED)
        return record

    def complete_check_error(self, check_id: str, error_message: str) -> CheckRecord | None:
        """The check could not be evaluated at all."""
        record = self._record(check_id)
        if record:
            record.error_message = error_message
            record.complete(CheckStatus.ERROR)
        return record

    def skip_check(self, check_id: str, reason: str | None = None) -> CheckRecord | None:
        record = self._record(check_id)
        if record:
            if reason:
                record.failure_message = f"Skipped: {reason}"
            record.complete(CheckStatus.SKIPPED)
        return record

    def save_json(self, path: str | Path) -> None:
        """Write the report as JSON, creating parent directories."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.report.to_json(), encoding="utf-8")

    def get_summary(self) -> str:
        return self.report.summary()


def _hashable_suite(suite: CheckSuite) -> dict[str, Any]:
    return {
        "version": suite.version,
        "name": suite.name,
        "document": suite.document,
        "settings": {"stop_on_failure": suite.settings.stop_on_failure},
        "checks": [
            {
                "id": check.id,
                "path": check.path,
                "expect": [{"op": e.op.value, "value": e.value} for e in check.expect],
            }
            for check in suite.checks
        ],
    }
