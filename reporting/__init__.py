"""Suite reporting: result listener, report sink and HTML rendering."""

from reporting.report_sink import ReportEntry, ReportSink, Severity, SystemInfo
from reporting.result_listener import ResultListener, SuiteSummary, TestOutcome, TestStatus

__all__ = [
    "ReportEntry",
    "ReportSink",
    "ResultListener",
    "Severity",
    "SuiteSummary",
    "SystemInfo",
    "TestOutcome",
    "TestStatus",
]
