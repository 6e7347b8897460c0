"""
Core Package - session lifecycle, waits and error handling.

Components:
- SessionRegistry: one browser session per worker, explicit worker_id map
- selenium_utils: Wait Context construction and wait predicates
- exceptions / error_handling: error taxonomy and failure helpers
"""

from .exceptions import (
    ConfigurationError,
    FatalError,
    InputMismatchError,
    InvalidSessionError,
    PageLoadError,
    ReportFlushError,
    RetryableError,
    SessionInitError,
    TestSkipped,
    UISuiteError,
)

__all__ = [
    "ConfigurationError",
    "FatalError",
    "InputMismatchError",
    "InvalidSessionError",
    "PageLoadError",
    "ReportFlushError",
    "RetryableError",
    "SessionInitError",
    "TestSkipped",
    "UISuiteError",
]
