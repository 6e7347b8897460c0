#!/usr/bin/env python3

"""
Exception hierarchy for the OrangeHRM UI suite.

Retryable errors may be recovered from once (a replaced browser session);
fatal errors end the current action or test case. Reporting errors are
logged by the caller and never propagated.
"""

import logging
from typing import Any

logger = logging.getLogger(__name__)


# === APPLICATION EXCEPTION HIERARCHY ===


class UISuiteError(Exception):
    """Base exception class for all UI suite errors."""

    def __init__(self, message: str = "UI suite error occurred", **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = kwargs.get("context", {})
        self.recovery_hint = kwargs.get("recovery_hint")


class RetryableError(UISuiteError):
    """Exception that indicates the operation can be retried."""

    def __init__(self, message: str = "Operation can be retried", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class FatalError(UISuiteError):
    """Exception that indicates the operation should not be retried."""

    def __init__(self, message: str = "Fatal error occurred", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class SessionInitError(FatalError):
    """Browser session could not be created, configured or verified."""

    def __init__(self, message: str = "Failed to initialize browser session", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.browser = kwargs.get("browser")
        self.worker_id = kwargs.get("worker_id")


class InvalidSessionError(RetryableError):
    """Bound browser session is closed, dead or no longer the worker's live session."""

    def __init__(self, message: str = "Invalid browser session", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.worker_id = kwargs.get("worker_id")


class InputMismatchError(FatalError):
    """Value read back from an input differs from the value typed into it."""

    def __init__(self, message: str = "Entered value does not match", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.field = kwargs.get("field")
        self.expected = kwargs.get("expected")
        self.actual = kwargs.get("actual")


class PageLoadError(FatalError):
    """Page never reached its ready state within the wait timeout."""

    def __init__(self, message: str = "Page failed to load", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.url = kwargs.get("url")


class ReportFlushError(UISuiteError):
    """Report artifact could not be written."""

    def __init__(self, message: str = "Failed to write report", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.path = kwargs.get("path")


class ConfigurationError(FatalError):
    """Exception for configuration errors."""

    def __init__(self, message: str = "Configuration error occurred", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.config_section = kwargs.get("config_section")


class TestSkipped(UISuiteError):
    """Raised by a test case to mark itself skipped."""

    __test__ = False

    def __init__(self, message: str = "No reason provided", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
