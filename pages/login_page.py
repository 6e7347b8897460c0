#!/usr/bin/env python3

"""
Login page object and login flow state machine.

    PAGE_LOADING -> FORM_VISIBLE -> SUBMITTING -> OUTCOME_PENDING
        -> SUCCESS | FAILURE | INDETERMINATE

``wait_for_login_result`` races the success redirect against the inline
error banner under a single wait. The success condition is evaluated first
on every poll, so it wins when both hold at once.
"""

# === STANDARD LIBRARY IMPORTS ===
import logging
from enum import Enum
from typing import Any, Optional

# === THIRD-PARTY IMPORTS ===
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.support.wait import WebDriverWait

# === LOCAL IMPORTS ===
from browser.selenium_utils import current_location, extract_text, is_browser_open, is_element_visible
from config.config_schema import AppConfig, SeleniumConfig
from core.exceptions import PageLoadError, UISuiteError
from core.selenium_utils import (
    DRIVER_ERRORS,
    any_element_visible,
    build_wait,
    url_contains,
    wait_for_first,
    wait_until_visible,
)
from core.session_registry import SessionRegistry
from pages.base_page import BasePage, recover_session_once
from pages.locators import LOGIN_PAGE_LOCATORS

logger = logging.getLogger(__name__)


class LoginState(Enum):
    PAGE_LOADING = "page_loading"
    FORM_VISIBLE = "form_visible"
    SUBMITTING = "submitting"
    OUTCOME_PENDING = "outcome_pending"
    SUCCESS = "success"
    FAILURE = "failure"
    INDETERMINATE = "indeterminate"


class LoginResult(Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    INDETERMINATE = "indeterminate"


_TERMINAL_STATES = {
    LoginResult.SUCCESS: LoginState.SUCCESS,
    LoginResult.FAILURE: LoginState.FAILURE,
    LoginResult.INDETERMINATE: LoginState.INDETERMINATE,
}


class LoginPage(BasePage):
    """OrangeHRM login form."""

    LOCATORS = LOGIN_PAGE_LOCATORS

    def __init__(
        self,
        driver: Any,
        wait: Optional["WebDriverWait[Any]"] = None,
        *,
        registry: Optional[SessionRegistry] = None,
        worker_id: Optional[str] = None,
        config: Optional[SeleniumConfig] = None,
        app_config: Optional[AppConfig] = None,
    ) -> None:
        super().__init__(driver, wait, registry=registry, worker_id=worker_id, config=config)
        self.app_config = app_config or (registry.app_config if registry else AppConfig())
        self.state = LoginState.PAGE_LOADING
        self.last_result: Optional[LoginResult] = None
        self.wait_for_page_to_load()
        logger.debug("LoginPage object created")

    def wait_for_page_to_load(self) -> None:
        """
        Block until the username field is visible.

        Raises:
            PageLoadError: if the form never appears within the page wait.
        """
        try:
            with self._without_implicit_wait():
                wait_until_visible(self.wait, self.locator("username"))
        except DRIVER_ERRORS as e:
            url = current_location(self.driver)
            logger.error(f"Login page load failed at {url}: {type(e).__name__}")
            raise PageLoadError("Login page load failed: username field never became visible", url=url) from e
        self.state = LoginState.FORM_VISIBLE
        logger.debug("Login page loaded successfully")

    # --- Actions -----------------------------------------------------------

    @recover_session_once
    def enter_username(self, username: str) -> None:
        self.type_text("username", username)
        logger.info(f"Entered username: {username}")

    @recover_session_once
    def enter_password(self, password: str) -> None:
        self.type_text("password", password, mask=True)
        logger.info("Entered password: ***hidden***")

    @recover_session_once
    def click_login_button(self) -> None:
        """Submit the form and wait briefly for the application to react."""
        url_before = current_location(self.driver)
        self.click("login_button")
        self.state = LoginState.SUBMITTING
        logger.info("Clicked login button")
        self._wait_for_submission_settle(url_before)
        self.state = LoginState.OUTCOME_PENDING

    def _wait_for_submission_settle(self, url_before: Optional[str]) -> None:
        def _url_changed(driver: Any) -> bool:
            return driver.current_url != url_before

        settle = build_wait(self.driver, self.config.submit_settle_timeout, self.config.poll_frequency)
        try:
            with self._without_implicit_wait():
                reaction = wait_for_first(
                    settle,
                    [
                        ("navigated", _url_changed),
                        ("error", any_element_visible(self.locator("error_message"))),
                        ("required", any_element_visible(self.locator("required_message"))),
                    ],
                )
            logger.debug(f"Submission settled: {reaction}")
        except TimeoutException:
            logger.debug(f"No reaction to submit within {self.config.submit_settle_timeout}s; continuing")

    def login(self, username: str, password: str) -> None:
        """Fill both fields and submit. Failures keep their type and gain the username as context."""
        logger.info("Starting login process...")
        try:
            self.enter_username(username)
            self.enter_password(password)
            self.click_login_button()
        except UISuiteError as e:
            e.context.setdefault("username", username)
            logger.error(f"Login process failed for user {username}: {e.message}")
            raise
        except WebDriverException as e:
            logger.error(f"Login process failed for user {username}: {type(e).__name__}: {e.msg}")
            raise
        logger.info("Login process completed")

    # --- Outcome -----------------------------------------------------------

    def wait_for_login_result(self) -> LoginResult:
        """Race the success redirect against the error banner. Never raises."""
        if not is_browser_open(self.driver):
            logger.error("Cannot wait for login result: browser session is not valid")
            return self._settle(LoginResult.INDETERMINATE)

        racer = build_wait(self.driver, self.config.result_wait, self.config.poll_frequency)
        try:
            with self._without_implicit_wait():
                winner = wait_for_first(
                    racer,
                    [
                        ("success", url_contains(self.app_config.success_marker)),
                        ("failure", any_element_visible(self.locator("error_message"))),
                    ],
                )
        except TimeoutException:
            logger.warning(
                f"Login result not determined within {self.config.result_wait}s "
                f"(url: {current_location(self.driver)})"
            )
            return self._settle(LoginResult.INDETERMINATE)
        except DRIVER_ERRORS as e:
            logger.warning(f"Login result not determined: session did not respond ({type(e).__name__})")
            return self._settle(LoginResult.INDETERMINATE)

        result = LoginResult.SUCCESS if winner == "success" else LoginResult.FAILURE
        logger.info(f"Login result: {result.name}")
        return self._settle(result)

    def _settle(self, result: LoginResult) -> LoginResult:
        self.last_result = result
        self.state = _TERMINAL_STATES[result]
        return result

    # --- Queries -----------------------------------------------------------

    def get_error_message(self) -> str:
        """Inline error banner text, or "" when none appears within the check window."""
        if not is_browser_open(self.driver):
            return ""
        message = self.read_text("error_message", timeout=self.config.error_check_wait)
        if message:
            logger.info(f"Error message found: {message}")
        return message

    def is_login_page_displayed(self) -> bool:
        if not self.is_visible("username", timeout=self.config.error_check_wait):
            return False
        return is_element_visible(self.find_one("password")) and is_element_visible(self.find_one("login_button"))

    def get_required_messages(self) -> list[str]:
        """Per-field validation texts shown after submitting empty fields."""
        return [text for text in (extract_text(el) for el in self.find_all("required_message")) if text]
