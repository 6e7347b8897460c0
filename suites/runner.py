#!/usr/bin/env python3

"""
Suite Runner - schedules (case, browser, invocation) jobs on a thread pool.

Each pool thread runs one job at a time and owns exactly one registry slot
while it does:

    create report entry -> on_test_start -> registry.session() -> case.execute()
        -> exactly one of on_test_success / on_test_failure / on_test_skipped
        -> session released, report entry detached

Counters are folded per (case, browser) and recorded only after the pool has
joined; ``on_finish`` then flushes the report once.
"""

# === STANDARD LIBRARY IMPORTS ===
import logging
import time
from collections import defaultdict
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import ClassVar, Optional

# === THIRD-PARTY IMPORTS ===
import psutil

# === LOCAL IMPORTS ===
from browser.driver_factory import DriverFactory, normalize_browser
from config.config_schema import ConfigSchema
from core.error_handling import describe_failure
from core.exceptions import TestSkipped
from core.session_registry import SessionRegistry, current_worker_id
from reporting.report_sink import ReportSink, Severity
from reporting.result_listener import ResultListener, SuiteSummary, TestOutcome, TestStatus
from suites.base_case import UITestCase
from suites.context import WorkerContext
from suites.login_cases import resolve_cases

logger = logging.getLogger(__name__)

WORKER_THREAD_PREFIX = "UIWorker"


@dataclass(frozen=True)
class TestJob:
    __test__: ClassVar[bool] = False

    case: UITestCase
    browser: str
    invocation: int = 1

    @property
    def display_name(self) -> str:
        name = f"{self.case.title or self.case.name} [{self.browser}]"
        if self.case.invocation_count > 1:
            name += f" #{self.invocation}"
        return name


def fold_invocations(case: UITestCase, browser: str, outcomes: Sequence[TestOutcome]) -> TestOutcome:
    """Collapse the invocations of one case on one browser into a single outcome."""
    runs = len(outcomes)
    passed = sum(1 for o in outcomes if o.status is TestStatus.PASSED)
    skipped = sum(1 for o in outcomes if o.status is TestStatus.SKIPPED)
    failed = runs - passed - skipped
    duration = sum(o.duration for o in outcomes)
    name = f"{case.title or case.name} [{browser}]"

    if runs == 1:
        only = outcomes[0]
        return TestOutcome(name, only.status, only.detail, only.duration, only.worker_id, browser)
    if skipped == runs:
        return TestOutcome(name, TestStatus.SKIPPED, outcomes[0].detail, duration, "", browser)

    ratio = 100.0 * passed / runs
    detail = f"{passed}/{runs} invocations passed (required {case.success_percentage}%)"
    if failed == 0:
        status = TestStatus.PASSED
    elif ratio >= case.success_percentage:
        status = TestStatus.PASSED_WITHIN_THRESHOLD
    else:
        status = TestStatus.FAILED
        failures = [o.detail for o in outcomes if o.status is TestStatus.FAILED and o.detail]
        if failures:
            detail += f"; last failure: {failures[-1]}"
    return TestOutcome(name, status, detail, duration, "", browser)


class SuiteRunner:
    """Runs test cases across browsers in parallel, one browser session per worker thread."""

    def __init__(
        self,
        config: ConfigSchema,
        registry: Optional[SessionRegistry] = None,
        sink: Optional[ReportSink] = None,
        listener: Optional[ResultListener] = None,
        driver_factory: Optional[DriverFactory] = None,
    ) -> None:
        self.config = config
        self.registry = registry or SessionRegistry(config.selenium, config.app, driver_factory)
        self.sink = sink or ReportSink.from_config(config.report)
        self.listener = listener or ResultListener(self.sink)
        self.summary = SuiteSummary()

    def worker_count(self, job_count: int) -> int:
        configured = self.config.suite.max_workers or psutil.cpu_count(logical=True) or 1
        return max(1, min(configured, job_count))

    def plan(
        self, cases: Optional[Iterable[UITestCase]] = None, browsers: Optional[Iterable[str]] = None
    ) -> list[TestJob]:
        """Jobs ordered by case priority, then browser, then invocation."""
        selected = list(cases) if cases is not None else resolve_cases(self.config.suite.cases)
        kinds: list[str] = []
        for kind in browsers if browsers is not None else self.config.suite.browsers:
            normalized = normalize_browser(kind)
            if normalized not in kinds:
                kinds.append(normalized)

        ordered = sorted(selected, key=lambda case: case.priority)
        return [
            TestJob(case, browser, invocation)
            for case in ordered
            for browser in kinds
            for invocation in range(1, max(1, case.invocation_count) + 1)
        ]

    def run(
        self, cases: Optional[Iterable[UITestCase]] = None, browsers: Optional[Iterable[str]] = None
    ) -> SuiteSummary:
        jobs = self.plan(cases, browsers)
        workers = self.worker_count(len(jobs))
        logger.info(f"Running {len(jobs)} test job(s) on {workers} worker thread(s)")

        grouped: dict[tuple[str, str], list[TestOutcome]] = defaultdict(list)
        pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix=WORKER_THREAD_PREFIX)
        try:
            futures = {pool.submit(self._run_job, job): job for job in jobs}
            for future in as_completed(futures):
                job = futures[future]
                try:
                    outcome = future.result()
                except Exception as e:
                    logger.error(f"Worker crashed running {job.display_name}: {e}", exc_info=True)
                    outcome = TestOutcome(job.display_name, TestStatus.FAILED, str(e), browser=job.browser)
                grouped[(job.case.name, job.browser)].append(outcome)
        except KeyboardInterrupt:
            pool.shutdown(wait=False, cancel_futures=True)
            raise
        pool.shutdown(wait=True)

        # every worker has reported; counters are safe to read from here on
        seen: set[tuple[str, str]] = set()
        for job in jobs:
            key = (job.case.name, job.browser)
            if key in seen:
                continue
            seen.add(key)
            folded = fold_invocations(job.case, job.browser, grouped[key])
            self.summary.record(folded)
            if job.case.invocation_count > 1:
                self._report_group(folded)

        self.listener.on_finish(self.summary)
        return self.summary

    def _report_group(self, folded: TestOutcome) -> None:
        group_worker = f"{folded.name} summary"
        self.sink.create_test(folded.name, folded.detail, worker_id=group_worker, browser=folded.browser)
        grouped_outcome = TestOutcome(
            folded.name, folded.status, folded.detail, folded.duration, group_worker, folded.browser
        )
        try:
            if folded.status is TestStatus.PASSED_WITHIN_THRESHOLD:
                self.listener.on_test_failed_within_threshold(grouped_outcome)
            else:
                severity = Severity.PASS if folded.status is TestStatus.PASSED else Severity.INFO
                self.sink.log(severity, f"{folded.status.name}: {folded.detail}", worker_id=group_worker)
        finally:
            self.sink.remove_test(group_worker)

    def _run_job(self, job: TestJob) -> TestOutcome:
        worker_id = current_worker_id()
        name = job.display_name
        self.sink.create_test(name, job.case.description, worker_id=worker_id, browser=job.browser)
        self.listener.on_test_start(name, job.case.description, worker_id, job.browser)

        started = time.monotonic()
        error: Optional[BaseException] = None
        try:
            with self.registry.session(job.browser, worker_id):
                ctx = WorkerContext(worker_id, job.browser, self.registry, self.sink, self.config)
                job.case.execute(ctx)
            status, detail = TestStatus.PASSED, ""
        except TestSkipped as e:
            status, detail = TestStatus.SKIPPED, e.message
        except Exception as e:
            status, detail, error = TestStatus.FAILED, describe_failure(e, worker_id, job.browser), e

        outcome = TestOutcome(name, status, detail, time.monotonic() - started, worker_id, job.browser)
        try:
            if status is TestStatus.PASSED:
                self.listener.on_test_success(outcome)
            elif status is TestStatus.SKIPPED:
                self.listener.on_test_skipped(outcome)
            else:
                self.listener.on_test_failure(outcome, error)
        except Exception as e:
            logger.error(f"Result listener failed for {name}: {e}")
        finally:
            self.sink.remove_test(worker_id)
        return outcome
