#!/usr/bin/env python3

"""
Dashboard page object: decides whether a login attempt reached the
authenticated area.

All checks are queries and classify any resolution failure as "not there",
so ``verify()`` never raises.
"""

# === STANDARD LIBRARY IMPORTS ===
import logging
from dataclasses import dataclass

# === LOCAL IMPORTS ===
from browser.selenium_utils import current_location, is_element_visible
from core.exceptions import PageLoadError
from core.selenium_utils import DRIVER_ERRORS, build_wait, wait_until_visible
from pages.base_page import BasePage, recover_session_once
from pages.locators import DASHBOARD_PAGE_LOCATORS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerificationResult:
    logged_in: bool
    dashboard_title: str = ""
    user_name: str = ""
    login_form_displayed: bool = False


class DashboardPage(BasePage):
    """Authenticated landing page (breadcrumb header plus user dropdown)."""

    LOCATORS = DASHBOARD_PAGE_LOCATORS

    def is_dashboard_displayed(self) -> bool:
        displayed = self.is_visible("dashboard_header", timeout=self.config.implicit_wait)
        logger.debug(f"Dashboard displayed: {displayed}")
        return displayed

    def get_dashboard_title(self) -> str:
        return self.read_text("dashboard_header", timeout=self.config.error_check_wait)

    def is_user_logged_in(self) -> bool:
        return self.is_visible("user_dropdown", timeout=self.config.error_check_wait)

    def get_user_display_name(self) -> str:
        return self.read_text("user_dropdown", timeout=self.config.error_check_wait)

    def is_login_form_displayed(self) -> bool:
        return is_element_visible(self.find_one("username"))

    def verify(self) -> VerificationResult:
        """Logged in means the dashboard header is present and the login form is gone."""
        header = self.is_dashboard_displayed()
        login_form = self.is_login_form_displayed()
        if not header:
            logger.info(f"Dashboard header absent at {current_location(self.driver)}")
            return VerificationResult(logged_in=False, login_form_displayed=login_form)
        result = VerificationResult(
            logged_in=not login_form,
            dashboard_title=self.get_dashboard_title(),
            user_name=self.get_user_display_name(),
            login_form_displayed=login_form,
        )
        logger.info(f"Dashboard verification: {result}")
        return result

    @recover_session_once
    def logout(self) -> None:
        """
        Sign out through the user dropdown and wait for the login form.

        Raises:
            PageLoadError: if the login form does not come back.
        """
        self.click("user_dropdown")
        self.click("logout_link")
        back = build_wait(self.driver, self.config.page_wait, self.config.poll_frequency)
        try:
            with self._without_implicit_wait():
                wait_until_visible(back, self.locator("username"))
        except DRIVER_ERRORS as e:
            url = current_location(self.driver)
            raise PageLoadError("Login form did not return after logout", url=url) from e
        logger.info("Logged out")
