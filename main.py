#!/usr/bin/env python3

"""
OrangeHRM login suite - command line entry point.

    python main.py                                  # every case on the configured browsers
    python main.py --browser chrome firefox --workers 4
    python main.py --case valid_login --headless
    python main.py --list-cases

Exit code 0 when no test failed, 1 otherwise, 130 on CTRL+C.
"""

# === STANDARD LIBRARY IMPORTS ===
import argparse
import logging
import sys
from collections.abc import Sequence
from typing import Any, Optional

# === LOCAL IMPORTS ===
from config import get_config_manager
from config.config_schema import SUPPORTED_BROWSERS, VALID_LOG_LEVELS, ConfigSchema
from core.exceptions import ConfigurationError
from logging_config import setup_logging
from suites.login_cases import LOGIN_CASES
from suites.runner import SuiteRunner

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python main.py",
        description="OrangeHRM login UI suite - parallel Selenium runs with an HTML report",
    )
    parser.add_argument(
        "--browser",
        nargs="+",
        metavar="BROWSER",
        help=f"Browsers to run on ({', '.join(SUPPORTED_BROWSERS)}); unknown values fall back to chrome",
    )
    parser.add_argument("--case", nargs="+", choices=list(LOGIN_CASES), help="Test cases to run (default: all)")
    parser.add_argument("--workers", type=int, help="Worker threads (default: MAX_WORKERS or CPU count)")
    parser.add_argument("--headless", action="store_true", help="Run browsers headless")
    parser.add_argument("--report", help="Path of the HTML report to write")
    parser.add_argument("--log-level", choices=list(VALID_LOG_LEVELS), help="Console and file log level")
    parser.add_argument("--list-cases", action="store_true", help="List available test cases and exit")
    return parser


def build_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Translate CLI flags into a nested override dict for ConfigManager."""
    overrides: dict[str, Any] = {}

    def put(section: str, key: str, value: Any) -> None:
        overrides.setdefault(section, {})[key] = value

    if args.browser:
        browsers = [b.strip().lower() for b in args.browser if b.strip()]
        if browsers:
            put("suite", "browsers", browsers)
        else:
            logger.info("No browser named with --browser; keeping the configured browsers")
    if args.case:
        put("suite", "cases", list(args.case))
    if args.workers is not None:
        put("suite", "max_workers", args.workers)
    if args.headless:
        put("selenium", "headless_mode", True)
    if args.report:
        put("report", "report_path", args.report)
    if args.log_level:
        put("logging", "log_level", args.log_level)
    return overrides


def list_cases() -> None:
    for case_cls in sorted(LOGIN_CASES.values(), key=lambda c: c.priority):
        print(f"{case_cls.name:<15} {case_cls.title:<20} {case_cls.description}")


def load_configuration(args: argparse.Namespace) -> ConfigSchema:
    return get_config_manager().load_config(build_overrides(args))


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.list_cases:
        list_cases()
        return EXIT_OK

    try:
        config = load_configuration(args)
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}", file=sys.stderr)
        return EXIT_FAILED

    setup_logging(config.logging.log_file, config.logging.log_level, config.logging.log_dir)
    logger.info(f"Target: {config.app.login_url}")
    logger.info(f"Browsers: {', '.join(config.suite.browsers)} | Report: {config.report.report_path}")

    runner = SuiteRunner(config)
    try:
        summary = runner.run()
    except KeyboardInterrupt:
        print("\nCTRL+C detected. Exiting.")
        logger.warning("Interrupted; releasing open browser sessions")
        runner.registry.release_all()
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.critical(f"Critical error in main: {e}", exc_info=True)
        runner.registry.release_all()
        return EXIT_FAILED

    return EXIT_OK if summary.failed == 0 else EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
