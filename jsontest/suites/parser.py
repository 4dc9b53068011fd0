"""
Schema parser for check suites.

This module converts validated YAML data into typed CheckSuite structures.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .models import Check, CheckOp, CheckSuite, Expectation, Settings


class SuiteParser:
    """Parses and converts validated YAML to typed CheckSuite structure."""

    def __init__(self, data: dict[str, Any], base_dir: Path | None = None):
        self.data = data
        self.base_dir = base_dir

    def parse(self) -> CheckSuite:
        """Convert validated data to typed CheckSuite."""
        return CheckSuite(
            version=self.data["version"],
            name=self.data["name"],
            checks=self._parse_checks(),
            document=self.data.get("document"),
            settings=self._parse_settings(),
            base_dir=self.base_dir,
        )

    def _parse_settings(self) -> Settings:
        settings = self.data.get("settings") or {}
        return Settings(stop_on_failure=settings.get("stop_on_failure", False))

    def _parse_checks(self) -> list[Check]:
        return [
            Check(
                id=check["id"],
                path=check["path"],
                expect=[self._parse_expectation(item) for item in check["expect"]],
                description=check.get("description"),
            )
            for check in self.data["checks"]
        ]

    def _parse_expectation(self, item: str | dict) -> Expectation:
        if isinstance(item, str):
            return Expectation(op=CheckOp(item))
        op, value = next(iter(item.items()))
        return Expectation(op=CheckOp(op), value=value)
