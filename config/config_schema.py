#!/usr/bin/env python3

"""
Type-safe configuration schema for the OrangeHRM UI suite.

Dataclass sections validated in ``__post_init__``. ``ConfigSchema`` combines
them and converts to and from plain dictionaries so that ``ConfigManager``
can layer defaults, ``.env`` values and environment overrides.
"""

# === STANDARD LIBRARY IMPORTS ===
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

SUPPORTED_BROWSERS = ("chrome", "firefox")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class SeleniumConfig:
    """Browser session and wait configuration."""

    headless_mode: bool = False
    chrome_driver_path: Optional[Path] = None
    chrome_browser_path: Optional[Path] = None

    # Session timeouts (seconds)
    implicit_wait: int = 10
    page_load_timeout: int = 30
    script_timeout: int = 30

    # Wait Context timeouts (seconds)
    explicit_wait: int = 20
    page_wait: int = 15
    result_wait: int = 15
    error_check_wait: float = 2.0
    submit_settle_timeout: float = 3.0
    poll_frequency: float = 0.5

    # Driver start-up retries
    chrome_max_retries: int = 2
    chrome_retry_delay: int = 2

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        for name in ("implicit_wait", "page_load_timeout", "script_timeout", "explicit_wait", "page_wait", "result_wait"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")
        if self.error_check_wait < 0 or self.submit_settle_timeout < 0:
            raise ValueError("error_check_wait and submit_settle_timeout must be non-negative")
        if self.poll_frequency <= 0:
            raise ValueError("poll_frequency must be positive")
        if self.chrome_max_retries < 0:
            raise ValueError("chrome_max_retries must be non-negative")
        if self.chrome_retry_delay < 0:
            raise ValueError("chrome_retry_delay must be non-negative")


@dataclass
class AppConfig:
    """Application under test."""

    base_url: str = "https://opensource-demo.orangehrmlive.com"
    login_path: str = "/web/index.php/auth/login"
    success_marker: str = "/dashboard"

    def __post_init__(self) -> None:
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        if not self.success_marker:
            raise ValueError("success_marker must not be empty")

    @property
    def login_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.login_path.lstrip('/')}"


@dataclass
class CredentialsConfig:
    """Credential pairs used by the login scenarios."""

    valid_username: str = "Admin"
    valid_password: str = "admin123"
    invalid_username: str = "InvalidUser"
    invalid_password: str = "WrongPassword123"


@dataclass
class ReportConfig:
    """HTML report artifact and its system-information header."""

    report_path: Path = Path("test-reports/suite_report.html")
    report_name: str = "OrangeHRM Automation Test Report"
    document_title: str = "Test Execution Report"
    environment: str = "QA"
    tester: str = "QA Automation"
    browsers_label: str = "Chrome & Firefox"

    def __post_init__(self) -> None:
        self.report_path = Path(self.report_path)
        if not self.report_path.name:
            raise ValueError("report_path must name a file")


@dataclass
class SuiteConfig:
    """Which cases run, on which browsers, with how many workers."""

    browsers: list[str] = field(default_factory=lambda: ["chrome"])
    max_workers: int = 0  # 0 = size from CPU count
    cases: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.max_workers < 0:
            raise ValueError("max_workers must be non-negative")
        if not self.browsers:
            raise ValueError("browsers must list at least one browser")


@dataclass
class LoggingConfig:
    """Logging configuration schema."""

    log_level: str = "INFO"
    log_dir: Path = Path("Logs")
    log_file: str = "ui_suite.log"

    def __post_init__(self) -> None:
        self.log_level = self.log_level.upper()
        if self.log_level not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of: {list(VALID_LOG_LEVELS)}")
        self.log_dir = Path(self.log_dir)


_SECTIONS: dict[str, type] = {
    "selenium": SeleniumConfig,
    "app": AppConfig,
    "credentials": CredentialsConfig,
    "report": ReportConfig,
    "suite": SuiteConfig,
    "logging": LoggingConfig,
}


@dataclass
class ConfigSchema:
    """Main configuration schema that combines all sub-schemas."""

    environment: str = "development"
    selenium: SeleniumConfig = field(default_factory=SeleniumConfig)
    app: AppConfig = field(default_factory=AppConfig)
    credentials: CredentialsConfig = field(default_factory=CredentialsConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    suite: SuiteConfig = field(default_factory=SuiteConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        valid_environments = ["development", "testing", "production"]
        if self.environment not in valid_environments:
            raise ValueError(f"environment must be one of: {valid_environments}")

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        result: dict[str, Any] = {}
        for field_name in self.__dataclass_fields__:
            value = getattr(self, field_name)
            if hasattr(value, "__dataclass_fields__"):
                result[field_name] = {sub_field: getattr(value, sub_field) for sub_field in value.__dataclass_fields__}
            else:
                result[field_name] = value
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ConfigSchema":
        """Create configuration from dictionary."""
        sections = {name: section_cls(**data.get(name, {})) for name, section_cls in _SECTIONS.items()}
        main_data = {k: v for k, v in data.items() if k not in _SECTIONS}
        return cls(**sections, **main_data)

    def validate(self) -> list[str]:
        """
        Validate the entire configuration.

        Returns:
            List of validation error messages
        """
        errors: list[str] = []
        for name, section_cls in _SECTIONS.items():
            try:
                section_cls(**getattr(self, name).__dict__)
            except (TypeError, ValueError) as e:
                errors.append(f"{name}: {e}")
        try:
            self.__post_init__()
        except ValueError as e:
            errors.append(str(e))
        return errors
