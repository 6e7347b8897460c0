#!/usr/bin/env python3

"""Per-job execution context handed to every test case."""

# === STANDARD LIBRARY IMPORTS ===
from dataclasses import dataclass
from typing import Any, Optional

# === THIRD-PARTY IMPORTS ===
from selenium.webdriver.support.wait import WebDriverWait

# === LOCAL IMPORTS ===
from config.config_schema import ConfigSchema
from core.exceptions import InvalidSessionError
from core.session_registry import SessionRegistry
from pages.dashboard_page import DashboardPage
from pages.login_page import LoginPage
from reporting.report_sink import ReportSink, Severity


@dataclass
class WorkerContext:
    """What one running test case may touch: its session slot, its report entry and the config."""

    worker_id: str
    browser: str
    registry: SessionRegistry
    sink: ReportSink
    config: ConfigSchema

    def log(self, severity: Severity, message: str) -> None:
        self.sink.log(severity, message, worker_id=self.worker_id)

    @property
    def driver(self) -> Any:
        driver = self.registry.current(self.worker_id)
        if driver is None:
            raise InvalidSessionError("WebDriver is null - setup may have failed", worker_id=self.worker_id)
        return driver

    @property
    def wait(self) -> Optional["WebDriverWait[Any]"]:
        return self.registry.current_wait(self.worker_id)

    def login_page(self) -> LoginPage:
        return LoginPage(
            self.driver,
            registry=self.registry,
            worker_id=self.worker_id,
            config=self.config.selenium,
            app_config=self.config.app,
        )

    def dashboard_page(self) -> DashboardPage:
        return DashboardPage(self.driver, registry=self.registry, worker_id=self.worker_id, config=self.config.selenium)
