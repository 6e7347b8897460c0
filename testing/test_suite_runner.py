#!/usr/bin/env python3

"""Tests for suites.runner: planning, invocation folding and parallel execution on fake browsers."""

import sys
from typing import Any

from reporting.report_sink import Severity
from reporting.result_listener import TestOutcome, TestStatus
from suites.base_case import UITestCase
from suites.context import WorkerContext
from suites.login_cases import EmptyFieldsCase, InvalidLoginCase, ValidLoginCase, resolve_cases
from suites.runner import SuiteRunner, TestJob, fold_invocations
from testing.test_framework import TestSuite, suppress_logging
from testing.test_utilities import (
    FakeDriverFactory,
    create_login_driver,
    create_standard_test_runner,
    create_test_config,
    temp_directory,
)


class FlakyCase(UITestCase):
    name = "flaky"
    title = "Flaky Test"
    invocation_count = 4
    success_percentage = 75


class RepeatedLoginCase(ValidLoginCase):
    name = "repeated_login"
    invocation_count = 3


class SkippingCase(UITestCase):
    name = "skipping"
    title = "Skipping Test"

    def execute(self, ctx: WorkerContext) -> None:
        ctx.log(Severity.INFO, "Checking preconditions")
        self.skip("Demo site under maintenance")


def _outcomes(*statuses: TestStatus) -> list[TestOutcome]:
    return [TestOutcome("flaky", status, detail=status.value, duration=0.5) for status in statuses]


def _runner(tmp: Any, factory: FakeDriverFactory, **suite: Any) -> SuiteRunner:
    return SuiteRunner(create_test_config(tmp, max_workers=2, **suite), driver_factory=factory)


def test_plan_orders_by_priority_then_browser() -> None:
    runner = SuiteRunner(create_test_config(), driver_factory=FakeDriverFactory())
    jobs = runner.plan([EmptyFieldsCase(), ValidLoginCase()], ["Chrome", "chrome", "firefox"])
    assert [(job.case.name, job.browser) for job in jobs] == [
        ("valid_login", "chrome"),
        ("valid_login", "firefox"),
        ("empty_fields", "chrome"),
        ("empty_fields", "firefox"),
    ]
    flaky = runner.plan([FlakyCase()], ["chrome"])
    assert [job.invocation for job in flaky] == [1, 2, 3, 4]
    assert flaky[1].display_name == "Flaky Test [chrome] #2"


def test_unknown_case_name_rejected() -> None:
    try:
        resolve_cases(["valid_login", "forgot_password"])
    except ValueError as e:
        assert "forgot_password" in str(e)
        return
    raise AssertionError("Expected ValueError")


def test_fold_invocations() -> None:
    case = FlakyCase()
    passed, failed, skipped = TestStatus.PASSED, TestStatus.FAILED, TestStatus.SKIPPED
    assert fold_invocations(case, "chrome", _outcomes(passed, passed, passed, passed)).status is passed
    assert fold_invocations(case, "chrome", _outcomes(passed, passed, passed, failed)).status is (
        TestStatus.PASSED_WITHIN_THRESHOLD
    )
    folded = fold_invocations(case, "chrome", _outcomes(passed, failed, passed, failed))
    assert folded.status is failed
    assert "2/4" in folded.detail
    assert fold_invocations(case, "chrome", _outcomes(skipped, skipped, skipped, skipped)).status is skipped
    single = fold_invocations(ValidLoginCase(), "firefox", _outcomes(failed))
    assert single.status is failed
    assert single.name == "Valid Login Test [firefox]"


def test_run_classifies_outcomes() -> None:
    with temp_directory() as tmp:
        factory = FakeDriverFactory("success")
        runner = _runner(tmp, factory)
        summary = runner.run([ValidLoginCase(), InvalidLoginCase()], ["chrome", "firefox"])

        assert (summary.total, summary.passed, summary.failed) == (4, 2, 2)
        assert summary.pass_rate == 50.0
        statuses = {outcome.name: outcome.status for outcome in summary.outcomes}
        assert statuses["Valid Login Test [chrome]"] is TestStatus.PASSED
        assert statuses["Invalid Login Test [firefox]"] is TestStatus.FAILED

        assert sorted(factory.calls) == ["chrome", "chrome", "firefox", "firefox"]
        assert runner.registry.active_workers() == []
        for driver in factory.drivers:
            driver.quit.assert_called_once()
        assert runner.sink.write_count == 1
        assert runner.listener.flush_count == 1


def test_negative_cases_pass_on_rejection() -> None:
    with temp_directory() as tmp:
        failure = _runner(tmp, FakeDriverFactory("failure")).run([InvalidLoginCase()], ["chrome"])
        assert failure.passed == 1
        required = _runner(tmp, FakeDriverFactory("required")).run([EmptyFieldsCase()], ["chrome"])
        assert required.passed == 1


def test_session_init_failure_is_reported_as_failure() -> None:
    with temp_directory() as tmp:
        factory = FakeDriverFactory("success", fail_kinds=("firefox",))
        runner = _runner(tmp, factory)
        summary = runner.run([ValidLoginCase()], ["chrome", "firefox"])

        assert (summary.passed, summary.failed) == (1, 1)
        failed = next(o for o in summary.outcomes if o.status is TestStatus.FAILED)
        assert "Failed to initialize browser" in failed.detail
        assert runner.registry.active_workers() == []
        html = (tmp / "suite_report.html").read_text(encoding="utf-8")
        assert "Test failed:" in html


def test_skipped_case_is_reported() -> None:
    with temp_directory() as tmp:
        runner = _runner(tmp, FakeDriverFactory("success"))
        summary = runner.run([SkippingCase()], ["chrome"])
        assert (summary.total, summary.skipped) == (1, 1)
        entry = runner.sink.entries[0]
        assert entry.status is Severity.SKIP
        assert entry.lines[-1].message == "Test skipped: Demo site under maintenance"


def test_every_job_gets_own_session() -> None:
    with temp_directory() as tmp:
        built: list[str] = []

        def _builder(kind: str) -> Any:
            built.append(kind)
            return create_login_driver("success")

        factory = FakeDriverFactory(builder=_builder)
        runner = _runner(tmp, factory)
        summary = runner.run([RepeatedLoginCase()], ["chrome"])
        assert (summary.total, summary.passed) == (1, 1)
        assert len({id(driver) for driver in factory.drivers}) == 3
        assert built == ["chrome"] * 3


def test_job_display_name() -> None:
    job = TestJob(ValidLoginCase(), "chrome")
    assert job.display_name == "Valid Login Test [chrome]"


def module_tests() -> bool:
    suite = TestSuite("Suite Runner", "suites/runner.py")
    suite.start_suite()
    with suppress_logging():
        suite.run_test("Plan", test_plan_orders_by_priority_then_browser, "Priority, browser, invocation order")
        suite.run_test("Unknown case", test_unknown_case_name_rejected, "ValueError names the bad case")
        suite.run_test("Fold", test_fold_invocations, "Success percentage decides multi-invocation outcomes")
        suite.run_test(
            "Run",
            test_run_classifies_outcomes,
            "Two cases on two browsers with the success fake",
            expected_outcome="Valid passes, invalid fails, sessions released, report written once",
        )
        suite.run_test("Negative cases", test_negative_cases_pass_on_rejection, "Rejections make negative cases pass")
        suite.run_test("Init failure", test_session_init_failure_is_reported_as_failure, "SessionInitError -> FAILED")
        suite.run_test("Skip", test_skipped_case_is_reported, "TestSkipped -> SKIPPED with reason")
        suite.run_test("Isolation", test_every_job_gets_own_session, "No session shared between jobs")
        suite.run_test("Display name", test_job_display_name, "Title plus browser")
    return suite.finish_suite()


run_comprehensive_tests = create_standard_test_runner(module_tests)


if __name__ == "__main__":
    sys.exit(0 if run_comprehensive_tests() else 1)
