"""
Report data models for suite runs.

A RunReport holds one CheckRecord per suite check, each with its own
Timing, plus the Counters and overall RunStatus computed when the run
completes.
"""

from __future__ import annotations

import hashlib
import json
import uuid
from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class CheckStatus(str, Enum):
    """Status of an individual check."""
    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"
    SKIPPED = "skipped"


class RunStatus(str, Enum):
    """Overall status of a suite run."""
    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"


# Shared by both enums; keyed by value
_ICONS = {
    "pending": "⏳",
    "running": "🔄",
    "passed": "✅",
    "failed": "❌",
    "error": "⚠️",
    "skipped": "⏭️",
}


def status_icon(status: CheckStatus | RunStatus) -> str:
    return _ICONS.get(status.value, "❓")


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Timing:
    """Start/end timestamps of a check or a run."""
    started_at: datetime | None = None
    ended_at: datetime | None = None

    def start(self) -> None:
        self.started_at = _now()
        self.ended_at = None

    def stop(self) -> None:
        self.ended_at = _now()

    @property
    def duration_ms(self) -> float | None:
        if self.started_at is None or self.ended_at is None:
            return None
        return (self.ended_at - self.started_at).total_seconds() * 1000

    def to_dict(self) -> dict[str, Any]:
        return {
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "duration_ms": self.duration_ms,
        }


@dataclass
class Counters:
    """Per-status totals of a run."""
    total: int = 0
    passed: int = 0
    failed: int = 0
    errors: int = 0
    skipped: int = 0

    @classmethod
    def tally(cls, records: list[CheckRecord]) -> Counters:
        by_status = Counter(record.status for record in records)
        return cls(
            total=len(records),
            passed=by_status[CheckStatus.PASSED],
            failed=by_status[CheckStatus.FAILED],
            errors=by_status[CheckStatus.ERROR],
            skipped=by_status[CheckStatus.SKIPPED],
        )

    def run_status(self) -> RunStatus:
        # A check that could not be evaluated outranks a failed one
        if self.errors:
            return RunStatus.ERROR
        if self.failed:
            return RunStatus.FAILED
        return RunStatus.PASSED


@dataclass
class CheckRecord:
    """
    Record of a single check execution.

    Captures the path checked, the predicates applied, how long it took,
    and the diagnostic when it failed.
    """
    check_id: str
    path: str
    expectations: list[str] = field(default_factory=list)
    status: CheckStatus = CheckStatus.PENDING
    timing: Timing = field(default_factory=Timing)

    # Outcome
    expected_value: Any = None
    actual_value: Any = None
    diagnostic: dict[str, Any] | None = None
    failure_message: str | None = None
    error_message: str | None = None

    @property
    def duration_ms(self) -> float | None:
        return self.timing.duration_ms

    def start(self) -> None:
        self.status = CheckStatus.RUNNING
        self.timing.start()

    def complete(self, status: CheckStatus) -> None:
        self.status = status
        if self.timing.started_at is not None:
            self.timing.stop()

    def to_dict(self) -> dict[str, Any]:
        return {
            "check_id": self.check_id,
            "path": self.path,
            "expectations": self.expectations,
            "status": self.status.value,
            **self.timing.to_dict(),
            "expected_value": _jsonable(self.expected_value),
            "actual_value": _jsonable(self.actual_value),
            "diagnostic": self.diagnostic,
            "failure_message": self.failure_message,
            "error_message": self.error_message,
        }


@dataclass
class RunReport:
    """
    Complete record of a suite run.

    Contains metadata about the run, the suite and document checked,
    and detailed records for each check.
    """
    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timing: Timing = field(default_factory=lambda: Timing(started_at=_now()))

    # Suite info
    suite_name: str = ""
    suite_version: int = 1
    suite_hash: str = ""
    document: str | None = None

    status: RunStatus = RunStatus.PENDING
    checks: list[CheckRecord] = field(default_factory=list)
    counters: Counters = field(default_factory=Counters)

    @property
    def duration_ms(self) -> float | None:
        return self.timing.duration_ms

    @property
    def passed(self) -> bool:
        return self.status == RunStatus.PASSED

    def start(self) -> None:
        self.status = RunStatus.RUNNING
        self.timing.start()

    def complete(self) -> None:
        """Stop the clock, tally the checks and settle the run status."""
        self.timing.stop()
        self.counters = Counters.tally(self.checks)
        self.status = self.counters.run_status()

    def add_check(self, check: CheckRecord) -> None:
        self.checks.append(check)

    def get_check(self, check_id: str) -> CheckRecord | None:
        return next((c for c in self.checks if c.check_id == check_id), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            **self.timing.to_dict(),
            "suite_name": self.suite_name,
            "suite_version": self.suite_version,
            "suite_hash": self.suite_hash,
            "document": self.document,
            "status": self.status.value,
            "summary": asdict(self.counters),
            "checks": [check.to_dict() for check in self.checks],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False, default=str)

    def summary(self) -> str:
        """Human-readable summary, one block per check."""
        rule = "─" * 59
        frame = "═" * 59
        duration = f"{self.duration_ms:.0f}ms" if self.duration_ms is not None else "N/A"
        c = self.counters
        lines = [
            frame,
            f"  Run Report: {self.suite_name}",
            frame,
            f"  Run ID:     {self.run_id}",
            f"  Status:     {status_icon(self.status)} {self.status.value.upper()}",
            f"  Document:   {self.document or 'N/A'}",
            f"  Duration:   {duration}",
            rule,
            f"  Checks: {c.passed} passed, {c.failed} failed, {c.errors} errors, {c.skipped} skipped",
            rule,
        ]

        for check in self.checks:
            lines.append(f"  {status_icon(check.status)} [{check.check_id}] {check.path}")
            if check.failure_message:
                first, *rest = check.failure_message.splitlines()
                lines.append(f"      └─ {first}")
                lines.extend(f"         {line}" for line in rest)
            elif check.error_message:
                lines.append(f"      └─ Error: {check.error_message}")

        lines.append(frame)
        return "\n".join(lines)


def compute_suite_hash(suite_dict: dict[str, Any]) -> str:
    """Short SHA-256 of a suite's canonical JSON, to tell suite revisions apart."""
    canonical = json.dumps(suite_dict, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()[:12]


def _jsonable(value: Any) -> Any:
    """Pass JSON-compatible values through; stringify anything else."""
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value
