"""Report generation from test lifecycle notifications.

The ``Reporter`` is a ``TestSignaller`` that keeps one ``TestResult`` per
started test and turns them into a JSON or YAML report.  Status model:
running, passed, failed, error, skipped.
"""

from __future__ import annotations

import datetime
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from runner_events.reporting.signaller import TestSignaller

# Valid status values
VALID_STATUSES = frozenset({
    "running",
    "passed",
    "failed",
    "error",
    "skipped",
})

FAILURE_STATUSES = frozenset({"failed", "error"})


@dataclass
class TestResult:
    """Outcome of a single test as seen through its notifications."""

    __test__ = False  # not a pytest test class

    name: str
    test_id: int | None
    status: str  # running, passed, failed, error, skipped
    duration_ms: int = 0
    message: str = ""
    stack_trace: str | None = None
    expected: str | None = None
    actual: str | None = None
    skip_reason: str | None = None
    output: list[str] = field(default_factory=list)


class Reporter(TestSignaller):
    """Collects test notifications and generates reports.

    Results are kept in the order their tests started.  A test that is
    skipped or fails without a matching start still gets an entry.
    """

    def __init__(self) -> None:
        self.results: list[TestResult] = []
        self.attach_count = 0
        self.orphan_output: list[str] = []
        self._by_id: dict[int, TestResult] = {}

    def _result_for(self, name: str, test_id: int) -> TestResult:
        result = self._by_id.get(test_id)
        if result is None:
            result = TestResult(name=name, test_id=test_id, status="running")
            self._add(result)
        return result

    def _add(self, result: TestResult) -> None:
        self.results.append(result)
        if result.test_id is not None:
            self._by_id[result.test_id] = result

    def test_started(
        self,
        name: str,
        test_id: int,
        duration: int = 0,
        location_hint: str | None = None,
        metadata: dict[str, Any] | None = None,
        parent_id: int | None = None,
        running: bool = True,
    ) -> None:
        self._add(TestResult(
            name=name,
            test_id=test_id,
            status="running" if running else "passed",
            duration_ms=duration,
        ))

    def test_failed(
        self,
        name: str,
        test_id: int,
        message: str,
        stack_trace: str | None,
        is_error: bool,
        actual: str | None = None,
        expected: str | None = None,
        file_path: str | None = None,
        duration: int = 0,
    ) -> None:
        result = self._result_for(name, test_id)
        result.duration_ms = duration
        if result.status in FAILURE_STATUSES:
            # Subsequent failures of the same test only add their text
            result.message = f"{result.message}\n{message}"
            if result.status == "failed" and is_error:
                result.status = "error"
            return

        result.status = "error" if is_error else "failed"
        result.message = message
        result.stack_trace = stack_trace
        result.expected = expected
        result.actual = actual

    def test_finished(self, name: str, test_id: int, duration: int) -> None:
        result = self._result_for(name, test_id)
        result.duration_ms = duration
        if result.status not in FAILURE_STATUSES:
            result.status = "passed"

    def test_skipped(
        self, name: str, reason: str, message: str | None = None,
    ) -> None:
        result = None
        for candidate in reversed(self.results):
            if candidate.name == name and candidate.status == "running":
                result = candidate
                break
        if result is None:
            result = TestResult(name=name, test_id=None, status="skipped")
            self._add(result)
        result.status = "skipped"
        result.skip_reason = reason
        if message:
            result.message = message

    def test_message(self, name: str, test_id: int, text: str) -> None:
        result = self._by_id.get(test_id)
        if result is None:
            self.orphan_output.append(text)
            return
        result.output.append(text)

    def framework_attached(self) -> None:
        self.attach_count += 1

    @property
    def has_failures(self) -> bool:
        """True if any test failed or errored."""
        return any(r.status in FAILURE_STATUSES for r in self.results)

    @property
    def has_incomplete(self) -> bool:
        """True if any test started but never finished."""
        return any(r.status == "running" for r in self.results)

    def _compute_summary(self) -> dict[str, Any]:
        summary: dict[str, Any] = {"total": len(self.results)}
        for status in sorted(VALID_STATUSES):
            summary[status] = sum(
                1 for r in self.results if r.status == status
            )
        summary["total_duration_ms"] = sum(
            r.duration_ms for r in self.results
        )
        return summary

    def _format_result(self, result: TestResult) -> dict[str, Any]:
        entry: dict[str, Any] = {
            "name": result.name,
            "status": result.status,
            "duration_ms": result.duration_ms,
        }
        if result.test_id is not None:
            entry["id"] = result.test_id
        if result.message:
            entry["message"] = result.message
        if result.stack_trace:
            entry["stack_trace"] = result.stack_trace
        if result.expected is not None:
            entry["expected"] = result.expected
        if result.actual is not None:
            entry["actual"] = result.actual
        if result.skip_reason is not None:
            entry["skip_reason"] = result.skip_reason
        if result.output:
            entry["output"] = list(result.output)
        return entry

    def generate_report(self) -> dict[str, Any]:
        """Generate the report data structure.

        Returns:
            Dictionary representing the full report, suitable for JSON
            or YAML serialization.
        """
        now = datetime.datetime.now(tz=datetime.timezone.utc).isoformat()
        report: dict[str, Any] = {
            "generated_at": now,
            "summary": self._compute_summary(),
            "framework_attached": self.attach_count > 0,
            "tests": [self._format_result(r) for r in self.results],
        }
        if self.orphan_output:
            report["orphan_output"] = list(self.orphan_output)
        return {"report": report}

    def write_report(self, path: Path) -> None:
        """Write the report as a JSON file."""
        report = self.generate_report()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(report, f, indent=2)

    def write_yaml(self, path: Path) -> None:
        """Write the report as a YAML file."""
        report = self.generate_report()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(report, f, sort_keys=False)
