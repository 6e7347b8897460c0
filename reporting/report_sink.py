#!/usr/bin/env python3

"""
Report Sink - append-only per-worker log lines, flushed once to one artifact.

A single ``ReportSink`` is constructed at suite start and handed to the
result listener and to every worker context. Each worker owns one current
entry at a time (keyed by worker id); lines are only ever appended. The
suite-level ``flush()`` runs after every worker has finished and writes the
HTML artifact exactly once.
"""

# === STANDARD LIBRARY IMPORTS ===
import logging
import platform
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

# === LOCAL IMPORTS ===
from config.config_schema import ReportConfig
from core.exceptions import ReportFlushError
from core.session_registry import current_worker_id
from reporting.html_report import render_report

logger = logging.getLogger(__name__)


class Severity(Enum):
    INFO = "info"
    PASS = "pass"
    FAIL = "fail"
    SKIP = "skip"
    WARNING = "warning"


@dataclass(frozen=True)
class ReportLine:
    severity: Severity
    message: str
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class ReportEntry:
    """Ordered log lines for one test execution."""

    name: str
    description: str = ""
    worker_id: str = ""
    browser: str = ""
    lines: list[ReportLine] = field(default_factory=list)

    def append(self, severity: Severity, message: str) -> None:
        self.lines.append(ReportLine(severity, message))

    @property
    def status(self) -> Severity:
        """Worst severity seen: FAIL over SKIP over WARNING over PASS over INFO."""
        seen = {line.severity for line in self.lines}
        for severity in (Severity.FAIL, Severity.SKIP, Severity.WARNING, Severity.PASS):
            if severity in seen:
                return severity
        return Severity.INFO


@dataclass(frozen=True)
class SystemInfo:
    environment: str
    tester: str
    browsers: str
    operating_system: str = field(default_factory=lambda: f"{platform.system()} {platform.release()}".strip())
    python_version: str = field(default_factory=platform.python_version)

    @classmethod
    def from_config(cls, report_config: ReportConfig) -> "SystemInfo":
        return cls(
            environment=report_config.environment,
            tester=report_config.tester,
            browsers=report_config.browsers_label,
        )

    def as_pairs(self) -> list[tuple[str, str]]:
        return [
            ("Environment", self.environment),
            ("Tester", self.tester),
            ("Browser", self.browsers),
            ("Operating System", self.operating_system),
            ("Python Version", self.python_version),
        ]


class ReportSink:
    """Collects report entries from all workers and writes them once."""

    def __init__(
        self,
        path: Union[str, Path],
        system_info: Optional[SystemInfo] = None,
        *,
        report_name: str = "OrangeHRM Automation Test Report",
        document_title: str = "Test Execution Report",
    ) -> None:
        self.path = Path(path)
        self.system_info = system_info or SystemInfo.from_config(ReportConfig())
        self.report_name = report_name
        self.document_title = document_title
        self.write_count = 0
        self._entries: list[ReportEntry] = []
        self._current: dict[str, ReportEntry] = {}
        self._flushed = False
        self._lock = threading.Lock()
        logger.debug(f"HTML report will be saved to: {self.path}")

    @classmethod
    def from_config(cls, report_config: ReportConfig) -> "ReportSink":
        return cls(
            report_config.report_path,
            SystemInfo.from_config(report_config),
            report_name=report_config.report_name,
            document_title=report_config.document_title,
        )

    @property
    def entries(self) -> list[ReportEntry]:
        with self._lock:
            return list(self._entries)

    @property
    def flushed(self) -> bool:
        return self._flushed

    def create_test(
        self, name: str, description: str = "", worker_id: Optional[str] = None, browser: str = ""
    ) -> ReportEntry:
        """Register a new entry as the worker's current one."""
        worker = worker_id or current_worker_id()
        entry = ReportEntry(name=name, description=description, worker_id=worker, browser=browser)
        with self._lock:
            self._entries.append(entry)
            self._current[worker] = entry
        logger.debug(f"Test registered with report: {name} ({worker})")
        return entry

    def current(self, worker_id: Optional[str] = None) -> Optional[ReportEntry]:
        with self._lock:
            return self._current.get(worker_id or current_worker_id())

    def log(self, severity: Severity, message: str, worker_id: Optional[str] = None) -> bool:
        """Append a line to the worker's current entry. Returns False when it has none."""
        worker = worker_id or current_worker_id()
        entry = self.current(worker)
        if entry is None:
            logger.warning(f"No report entry registered for {worker}; dropping: {message}")
            return False
        entry.append(severity, message)
        return True

    def remove_test(self, worker_id: Optional[str] = None) -> None:
        """Detach the worker's current entry; the entry itself stays in the report."""
        with self._lock:
            self._current.pop(worker_id or current_worker_id(), None)

    def flush(self, summary: Optional[Mapping[str, Any]] = None) -> Optional[Path]:
        """
        Write every entry to the report file.

        Returns the written path, or None when there was nothing to write or
        the report was already written.

        Raises:
            ReportFlushError: if the file cannot be written.
        """
        with self._lock:
            if self._flushed:
                logger.info("Report already flushed; ignoring repeated flush")
                return None
            if not self._entries:
                logger.info("No report entries to flush")
                return None
            entries = list(self._entries)
            try:
                html = render_report(
                    entries,
                    self.system_info,
                    report_name=self.report_name,
                    document_title=self.document_title,
                    summary=summary,
                )
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self.path.write_text(html, encoding="utf-8")
            except OSError as e:
                raise ReportFlushError(f"Failed to write report to {self.path}: {e}", path=str(self.path)) from e
            self._flushed = True
            self.write_count += 1
        logger.info(f"Report flushed successfully ({len(entries)} entries): {self.path}")
        return self.path
