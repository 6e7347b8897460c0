#!/usr/bin/env python3

"""
Result Listener - one terminal notification per test execution, one report
flush per suite.

The listener keeps no per-test state. Suite counters live in ``SuiteSummary``,
owned by the runner and handed to ``on_finish`` after every worker joined.
Report update and flush failures are logged here and never propagated.
"""

# === STANDARD LIBRARY IMPORTS ===
import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Optional

# === LOCAL IMPORTS ===
from core.error_handling import describe_failure
from core.exceptions import ReportFlushError
from reporting.report_sink import ReportSink, Severity

logger = logging.getLogger(__name__)

SEPARATOR = "-" * 40


class TestStatus(Enum):
    __test__ = False

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    PASSED_WITHIN_THRESHOLD = "passed_within_threshold"


@dataclass
class TestOutcome:
    """Terminal classification of one test execution."""

    __test__: ClassVar[bool] = False

    name: str
    status: TestStatus
    detail: str = ""
    duration: float = 0.0
    worker_id: str = ""
    browser: str = ""

    @property
    def duration_ms(self) -> int:
        return int(self.duration * 1000)


def format_duration(seconds: float) -> str:
    millis = int(seconds * 1000)
    if millis < 1000:
        return f"{millis} ms"
    return f"{seconds:.2f} seconds"


class SuiteSummary:
    """Thread-safe aggregate counts for one suite run."""

    def __init__(self) -> None:
        self.total = 0
        self.passed = 0
        self.failed = 0
        self.skipped = 0
        self.passed_within_threshold = 0
        self.outcomes: list[TestOutcome] = []
        self._finalized = False
        self._lock = threading.Lock()

    def record(self, outcome: TestOutcome) -> None:
        with self._lock:
            if self._finalized:
                logger.warning(f"Outcome for {outcome.name} arrived after the summary was finalized; ignored")
                return
            self.outcomes.append(outcome)
            self.total += 1
            if outcome.status is TestStatus.PASSED:
                self.passed += 1
            elif outcome.status is TestStatus.FAILED:
                self.failed += 1
            elif outcome.status is TestStatus.SKIPPED:
                self.skipped += 1
            else:
                self.passed_within_threshold += 1

    @property
    def pass_rate(self) -> float:
        if self.total == 0:
            return 0.0
        return 100.0 * self.passed / self.total

    @property
    def finalized(self) -> bool:
        return self._finalized

    def finalize(self) -> bool:
        """Freeze the counts. Returns False if already frozen."""
        with self._lock:
            if self._finalized:
                return False
            self._finalized = True
            return True

    def as_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "skipped": self.skipped,
            "passed_within_threshold": self.passed_within_threshold,
            "pass_rate": self.pass_rate,
        }


class ResultListener:
    """Logs test lifecycle events and mirrors outcomes into the report."""

    def __init__(self, sink: ReportSink) -> None:
        self.sink = sink
        self.flush_count = 0
        self._finished = False
        self._finish_lock = threading.Lock()

    def _report(self, outcome: TestOutcome, lines: list[tuple[Severity, str]], event: str) -> None:
        try:
            for severity, message in lines:
                self.sink.log(severity, message, worker_id=outcome.worker_id or None)
        except Exception as e:
            logger.error(f"Error updating report for {event}: {e}")

    def on_test_start(self, name: str, description: str = "", worker_id: str = "", browser: str = "") -> None:
        logger.info(f"TEST STARTED: {name}")
        if description:
            logger.info(f"Description: {description}")
        logger.info(f"Browser: {browser or 'default'} | Thread: {worker_id}")
        logger.info(f"Start Time: {datetime.now():%Y-%m-%d %H:%M:%S}")
        logger.info(SEPARATOR)

    def on_test_success(self, outcome: TestOutcome) -> None:
        logger.info(f"TEST PASSED: {outcome.name}")
        logger.info(f"Execution Time: {format_duration(outcome.duration)}")
        logger.info(SEPARATOR)
        self._report(
            outcome, [(Severity.PASS, f"Test completed successfully in {outcome.duration_ms}ms")], "success"
        )

    def on_test_failure(self, outcome: TestOutcome, error: Optional[BaseException] = None) -> None:
        message = str(error) if error is not None else (outcome.detail or "Unknown error")
        logger.error(f"TEST FAILED: {outcome.name}")
        logger.error(describe_failure(error or message, worker_id=outcome.worker_id, browser=outcome.browser))
        logger.error(f"Execution Time: {format_duration(outcome.duration)}")
        if error is not None:
            logger.debug("Stack trace:", exc_info=(type(error), error, error.__traceback__))
        logger.error(SEPARATOR)
        self._report(
            outcome,
            [
                (Severity.FAIL, f"Test failed: {message}"),
                (Severity.INFO, f"Execution time: {outcome.duration_ms}ms"),
            ],
            "failure",
        )

    def on_test_skipped(self, outcome: TestOutcome) -> None:
        reason = outcome.detail or "No reason provided"
        logger.warning(f"TEST SKIPPED: {outcome.name}")
        logger.warning(f"Reason: {reason}")
        logger.warning(SEPARATOR)
        self._report(outcome, [(Severity.SKIP, f"Test skipped: {reason}")], "skip")

    def on_test_failed_within_threshold(self, outcome: TestOutcome) -> None:
        logger.warning(f"TEST FAILED BUT WITHIN SUCCESS PERCENTAGE: {outcome.name}")
        if outcome.detail:
            logger.warning(outcome.detail)
        self._report(
            outcome, [(Severity.WARNING, f"Failed but within success percentage: {outcome.detail}")], "threshold"
        )

    def on_finish(self, summary: SuiteSummary) -> None:
        """Log the summary and flush the report exactly once. Never raises."""
        with self._finish_lock:
            if self._finished:
                logger.warning("on_finish called more than once; report already handled")
                return
            self._finished = True

        summary.finalize()
        logger.info("TEST EXECUTION COMPLETED")
        logger.info(SEPARATOR)
        logger.info("TEST SUMMARY:")
        logger.info(f"   Total Tests: {summary.total}")
        logger.info(f"   Passed: {summary.passed}")
        logger.info(f"   Failed: {summary.failed}")
        logger.info(f"   Skipped: {summary.skipped}")
        if summary.passed_within_threshold:
            logger.info(f"   Passed Within Threshold: {summary.passed_within_threshold}")
        logger.info(f"   Pass Rate: {summary.pass_rate:.2f}%")
        logger.info(SEPARATOR)

        self.flush_count += 1
        try:
            written = self.sink.flush(summary.as_dict())
        except ReportFlushError as e:
            logger.error(f"Error generating report: {e.message}")
            return
        except Exception as e:
            logger.error(f"Unexpected error generating report: {e}", exc_info=True)
            return
        if written is not None:
            logger.info(f"Report Location: {written}")
            logger.info("Open this file in your browser to view results")
