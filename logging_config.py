#!/usr/bin/env python3

"""
Centralized logging configuration.

Sets up application-wide logging using Python's standard ``logging`` module:
- Configurable log level via argument or ``LOG_LEVEL`` environment variable.
- Console (stderr) and file handlers.
- Custom formatter for aligned multi-line messages.
- Filters to reduce noise from external libraries (Selenium, urllib3).
- Handler levels updated in place on re-initialization.
"""

# --- Standard library imports ---
import copy
import logging
import os
import sys
from pathlib import Path

# --- Local imports ---
from testing.test_framework import Colors

LOG_FORMAT: str = "%(asctime)s %(levelname).3s [%(threadName)-12.12s %(module)-12.12s %(lineno)-4d] %(message)s"
DATE_FORMAT: str = "%H:%M:%S"

NOISY_LOGGERS = [
    "selenium",
    "urllib3",
    "websockets",
    "undetected_chromedriver",
    "asyncio",
    "hpack",
]

logger_for_setup = logging.getLogger("logger_setup")


def _resolve_log_directory(log_dir: str | Path | None = None) -> Path:
    directory = Path(log_dir or os.getenv("LOG_DIR", "Logs"))
    if not directory.is_absolute():
        directory = (Path.cwd() / directory).resolve()
    return directory


# --- Custom Logging Filters ---
class NameFilter(logging.Filter):
    """Filters log records based on logger name starting with excluded prefixes."""

    def __init__(self, excluded_names: list[str]):
        super().__init__()
        self.excluded_names = excluded_names

    def filter(self, record: logging.LogRecord) -> bool:
        """Return False if record name starts with any excluded prefix, True otherwise."""
        return not any(record.name.startswith(name) for name in self.excluded_names)


class RemoteConnectionFilter(logging.Filter):
    """Filters out DEBUG level messages originating specifically from remote_connection.py"""

    def filter(self, record: logging.LogRecord) -> bool:
        is_debug = record.levelno == logging.DEBUG
        is_remote_conn = bool(record.pathname) and "remote_connection.py" in Path(record.pathname).name
        return not (is_debug and is_remote_conn)


# --- Custom Logging Formatter ---
class AlignedMessageFormatter(logging.Formatter):
    """
    Formats log records to align multi-line messages below the initial log prefix.
    Leading whitespace from subsequent lines of the original message is removed.
    """

    def __init__(self, *args, use_color: bool = True, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.use_color = use_color

    def _apply_level_color(self, message: str, level: int) -> str:
        """Apply color based on log level if not already colored."""
        if not self.use_color or "\033[" in message:
            return message
        if level >= logging.ERROR:
            return Colors.red(message)
        if level >= logging.WARNING:
            return Colors.yellow(message)
        return message

    def _calculate_message_start_position(self, record_copy: logging.LogRecord, placeholder: str) -> int:
        """Calculate the position where the actual message starts."""
        prefix_with_placeholder = super().format(record_copy)
        try:
            return prefix_with_placeholder.index(placeholder)
        except ValueError:
            logger_for_setup.warning("Placeholder not found in formatted prefix calculation, using fallback.")
            heuristic_index = prefix_with_placeholder.find("] ")
            return heuristic_index + 2 if heuristic_index != -1 else 41

    @staticmethod
    def _format_multiline_message(lines: list[str], prefix: str, indent: str) -> str:
        """Format multiline message with proper indentation."""
        if not lines:
            return prefix.rstrip()
        result_lines = [f"{prefix}{lines[0].lstrip()}"]
        result_lines.extend(f"{indent}{line.lstrip()}" for line in lines[1:])
        return "\n".join(result_lines)

    def format(self, record: logging.LogRecord) -> str:
        """Formats the log record with alignment and level colouring."""
        original_message = record.getMessage()
        if record.exc_info:
            original_message = f"{original_message}\n{self.formatException(record.exc_info)}"
        original_message = self._apply_level_color(original_message, record.levelno)

        placeholder = "\x00"
        record_copy = copy.copy(record)
        record_copy.msg = placeholder
        record_copy.args = ()
        record_copy.exc_info = None
        record_copy.exc_text = None

        message_start_pos = self._calculate_message_start_position(record_copy, placeholder)
        prefix_string = super().format(record_copy)[:message_start_pos]
        indent = " " * message_start_pos

        return self._format_multiline_message(original_message.split("\n"), prefix_string, indent)


class _LoggingState:
    """Tracks if logging has been set up to avoid adding duplicate handlers."""

    initialized: bool = False
    log_file_path: Path | None = None


def setup_logging(log_file: str = "", log_level: str = "INFO", log_dir: str | Path | None = None) -> logging.Logger:
    """
    Configure the root logger with file and console handlers.

    If called again, updates existing handler levels instead of re-adding them.

    Args:
        log_file: Base name for the log file (placed in the log directory).
                  If empty, reads from LOG_FILE environment variable.
        log_level: Minimum level for the handlers (e.g. "DEBUG", "INFO").
        log_dir: Log directory; defaults to LOG_DIR or ./Logs.

    Returns:
        The configured root logger.
    """
    root = logging.getLogger()
    numeric_log_level = getattr(logging, log_level.upper(), logging.INFO)
    if not isinstance(numeric_log_level, int):
        numeric_log_level = logging.INFO

    if _LoggingState.initialized:
        for handler in root.handlers:
            handler.setLevel(numeric_log_level)
        return root

    log_file = log_file or os.getenv("LOG_FILE", "ui_suite.log")
    logs_dir = _resolve_log_directory(log_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file_path = logs_dir / Path(log_file).name

    for handler in root.handlers[:]:
        root.removeHandler(handler)
    root.setLevel(logging.DEBUG)

    file_handler = logging.FileHandler(log_file_path, mode="a", encoding="utf-8")
    file_handler.setFormatter(AlignedMessageFormatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT, use_color=False))
    file_handler.setLevel(numeric_log_level)
    root.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(AlignedMessageFormatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    console_handler.setLevel(numeric_log_level)
    console_handler.addFilter(RemoteConnectionFilter())
    console_handler.addFilter(NameFilter(NOISY_LOGGERS))
    root.addHandler(console_handler)

    # Configure logging levels for external libraries
    logging.getLogger("urllib3").setLevel(logging.ERROR)
    logging.getLogger("urllib3.connectionpool").setLevel(logging.ERROR)
    logging.getLogger("selenium").setLevel(logging.WARNING)
    logging.getLogger("selenium.webdriver.remote.remote_connection").setLevel(logging.WARNING)
    logging.getLogger("selenium.webdriver.common.service").setLevel(logging.WARNING)
    logging.getLogger("undetected_chromedriver").setLevel(logging.WARNING)
    logging.getLogger("uc").setLevel(logging.ERROR)

    _LoggingState.initialized = True
    _LoggingState.log_file_path = log_file_path
    return root


def reset_logging() -> None:
    """Remove handlers installed by setup_logging (used by tests)."""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    _LoggingState.initialized = False
    _LoggingState.log_file_path = None
