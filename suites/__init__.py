"""Test cases and the parallel suite runner."""

from suites.base_case import UITestCase
from suites.context import WorkerContext
from suites.login_cases import LOGIN_CASES, EmptyFieldsCase, InvalidLoginCase, ValidLoginCase, resolve_cases
from suites.runner import SuiteRunner, TestJob, fold_invocations

__all__ = [
    "LOGIN_CASES",
    "EmptyFieldsCase",
    "InvalidLoginCase",
    "SuiteRunner",
    "TestJob",
    "UITestCase",
    "ValidLoginCase",
    "WorkerContext",
    "fold_invocations",
    "resolve_cases",
]
