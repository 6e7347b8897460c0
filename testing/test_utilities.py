#!/usr/bin/env python3

"""
Shared test helpers: fake browser sessions, fast configurations and the
standard test runner factory used by every test module.

The fake driver is a ``MagicMock`` backed by a mutable ``elements`` map
(Locator -> list of mock elements). ``find_element``/``find_elements`` read
the map at call time, so a test can change the "page" between calls exactly
like a navigation would.
"""

import contextlib
import tempfile
import threading
from collections.abc import Iterator
from pathlib import Path
from typing import Any, Callable, Optional
from unittest.mock import MagicMock, PropertyMock

from selenium.common.exceptions import NoSuchElementException, WebDriverException
from urllib3.exceptions import MaxRetryError

from config.config_schema import AppConfig, ConfigSchema, ReportConfig, SeleniumConfig, SuiteConfig
from pages.locators import (
    DASHBOARD_HEADER,
    ERROR_MESSAGE,
    LOGIN_BUTTON,
    PASSWORD_INPUT,
    REQUIRED_FIELD_MESSAGE,
    USER_DROPDOWN,
    USERNAME_INPUT,
)

LOGIN_URL = AppConfig().login_url
DASHBOARD_URL = f"{AppConfig().base_url}/web/index.php/dashboard/index"


# ==============================================================================
# Runner factory
# ==============================================================================


def create_standard_test_runner(module_test_function: Callable[[], bool]) -> Callable[[], bool]:
    """
    Create a standardized ``run_comprehensive_tests`` function.

    Example:
        run_comprehensive_tests = create_standard_test_runner(module_tests)
    """

    def run_comprehensive_tests() -> bool:
        """Run comprehensive tests using standardized test runner pattern."""
        try:
            return module_test_function()
        except Exception as e:
            print(f"❌ Test execution failed: {e}")
            return False

    return run_comprehensive_tests


@contextlib.contextmanager
def temp_directory(prefix: str = "test-") -> Iterator[Path]:
    """Temporary directory removed on exit."""
    with tempfile.TemporaryDirectory(prefix=prefix) as temp_dir:
        yield Path(temp_dir)


# ==============================================================================
# Configurations
# ==============================================================================


def fast_selenium_config(**overrides: Any) -> SeleniumConfig:
    """SeleniumConfig with sub-second waits so timeout paths finish quickly."""
    values: dict[str, Any] = {
        "implicit_wait": 0,
        "page_load_timeout": 1,
        "script_timeout": 1,
        "explicit_wait": 1,
        "page_wait": 1,
        "result_wait": 1,
        "error_check_wait": 0.05,
        "submit_settle_timeout": 0.05,
        "poll_frequency": 0.01,
        "chrome_max_retries": 1,
        "chrome_retry_delay": 0,
    }
    values.update(overrides)
    return SeleniumConfig(**values)


def create_test_config(report_dir: Optional[Path] = None, **suite: Any) -> ConfigSchema:
    report_path = (report_dir or Path(tempfile.gettempdir())) / "suite_report.html"
    return ConfigSchema(
        environment="testing",
        selenium=fast_selenium_config(),
        report=ReportConfig(report_path=report_path),
        suite=SuiteConfig(**suite),
    )


# ==============================================================================
# Fake browser
# ==============================================================================


def create_mock_element(
    text: str = "",
    value: str = "",
    displayed: bool = True,
    enabled: bool = True,
    on_click: Optional[Callable[[], Any]] = None,
) -> MagicMock:
    """Mock WebElement whose ``value`` attribute follows clear()/send_keys()."""
    element = MagicMock()
    element.text = text
    state = {"value": value}
    element.get_attribute.side_effect = lambda name: state["value"] if name == "value" else None
    element.clear.side_effect = lambda: state.update(value="")
    element.send_keys.side_effect = lambda *keys: state.update(value=state["value"] + "".join(map(str, keys)))
    element.is_displayed.return_value = displayed
    element.is_enabled.return_value = enabled
    if on_click is not None:
        element.click.side_effect = lambda: on_click()
    return element


def create_mock_driver(url: str = LOGIN_URL, elements: Optional[dict[Any, list[Any]]] = None) -> MagicMock:
    driver = MagicMock()
    driver.current_url = url
    driver.elements = dict(elements or {})

    def _find_elements(by: str, value: str) -> list[Any]:
        return list(driver.elements.get((by, value), []))

    def _find_element(by: str, value: str) -> Any:
        found = driver.elements.get((by, value))
        if not found:
            raise NoSuchElementException(f"No element for {by}={value}")
        return found[0]

    driver.find_elements.side_effect = _find_elements
    driver.find_element.side_effect = _find_element
    driver.execute_script.return_value = "complete"
    return driver


def add_login_form(driver: MagicMock) -> dict[str, MagicMock]:
    form = {
        "username": create_mock_element(),
        "password": create_mock_element(),
        "login_button": create_mock_element(text="Login"),
    }
    driver.elements[USERNAME_INPUT] = [form["username"]]
    driver.elements[PASSWORD_INPUT] = [form["password"]]
    driver.elements[LOGIN_BUTTON] = [form["login_button"]]
    return form


def create_login_driver(outcome: Optional[str] = None, user_name: str = "Paul Collings") -> MagicMock:
    """
    Fake session showing the login form.

    ``outcome`` decides what clicking Login does: "success" navigates to the
    dashboard, "failure" shows the invalid-credentials banner, "required"
    shows per-field validation, None does nothing.
    """
    driver = create_mock_driver(LOGIN_URL)
    form = add_login_form(driver)

    def _submit() -> None:
        if outcome == "success":
            show_dashboard(driver, user_name)
        elif outcome == "failure":
            driver.elements[ERROR_MESSAGE] = [create_mock_element(text="Invalid credentials")]
        elif outcome == "required":
            driver.elements[REQUIRED_FIELD_MESSAGE] = [create_mock_element(text="Required"), create_mock_element(text="Required")]

    form["login_button"].click.side_effect = _submit
    return driver


def show_dashboard(driver: MagicMock, user_name: str = "Paul Collings") -> None:
    """Turn a fake session into the post-login dashboard."""
    driver.current_url = DASHBOARD_URL
    for locator in (USERNAME_INPUT, PASSWORD_INPUT, LOGIN_BUTTON, ERROR_MESSAGE, REQUIRED_FIELD_MESSAGE):
        driver.elements.pop(locator, None)
    driver.elements[DASHBOARD_HEADER] = [create_mock_element(text="Dashboard")]
    driver.elements[USER_DROPDOWN] = [create_mock_element(text=user_name)]


def create_dead_driver() -> MagicMock:
    """Session whose every call fails like a closed browser."""
    driver = MagicMock()
    type(driver).current_url = PropertyMock(side_effect=WebDriverException("invalid session id"))
    driver.find_elements.side_effect = WebDriverException("invalid session id")
    driver.find_element.side_effect = WebDriverException("invalid session id")
    return driver


def cut_connection(driver: MagicMock) -> None:
    """Make element lookups and timeouts fail the way a crashed browser process does."""
    lost = MaxRetryError(None, "/session/lost/elements", reason=ConnectionRefusedError("Connection refused"))
    for method in (driver.find_element, driver.find_elements, driver.implicitly_wait, driver.execute_script):
        method.side_effect = lost


class FakeDriverFactory:
    """Drop-in DriverFactory producing fake login sessions."""

    def __init__(
        self,
        outcome: Optional[str] = "success",
        fail_kinds: tuple[str, ...] = (),
        return_none: bool = False,
        builder: Optional[Callable[[str], MagicMock]] = None,
    ) -> None:
        self.outcome = outcome
        self.fail_kinds = fail_kinds
        self.return_none = return_none
        self.builder = builder
        self.calls: list[str] = []
        self.drivers: list[MagicMock] = []
        self._lock = threading.Lock()

    def __call__(self, kind: str, config: SeleniumConfig) -> Optional[MagicMock]:
        with self._lock:
            self.calls.append(kind)
        if kind in self.fail_kinds:
            raise WebDriverException(f"cannot start {kind}")
        if self.return_none:
            return None
        driver = self.builder(kind) if self.builder else create_login_driver(self.outcome)
        with self._lock:
            self.drivers.append(driver)
        return driver
