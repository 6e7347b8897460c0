#!/usr/bin/env python3

"""Tests for pages.dashboard_page: outcome verification and logout."""

import sys
from typing import Any

from selenium.common.exceptions import WebDriverException

from core.exceptions import PageLoadError
from pages.dashboard_page import DashboardPage, VerificationResult
from pages.locators import DASHBOARD_HEADER, LOGOUT_LINK, USER_DROPDOWN
from testing.test_framework import TestSuite, suppress_logging
from testing.test_utilities import (
    add_login_form,
    create_login_driver,
    create_mock_driver,
    create_mock_element,
    create_standard_test_runner,
    cut_connection,
    fast_selenium_config,
    show_dashboard,
)


def _dashboard(driver: Any, **config: Any) -> DashboardPage:
    return DashboardPage(driver, worker_id="w1", config=fast_selenium_config(**config))


def test_verify_after_successful_login() -> None:
    driver = create_mock_driver()
    show_dashboard(driver, "Paul Collings")
    result = _dashboard(driver).verify()
    assert result == VerificationResult(
        logged_in=True, dashboard_title="Dashboard", user_name="Paul Collings", login_form_displayed=False
    )


def test_verify_on_login_page() -> None:
    result = _dashboard(create_login_driver()).verify()
    assert result.logged_in is False
    assert result.login_form_displayed is True
    assert result.dashboard_title == ""


def test_header_with_login_form_is_not_logged_in() -> None:
    driver = create_login_driver()
    driver.elements[DASHBOARD_HEADER] = [create_mock_element(text="Dashboard")]
    result = _dashboard(driver).verify()
    assert result.logged_in is False
    assert result.login_form_displayed is True


def test_lookup_errors_mean_not_logged_in() -> None:
    driver = create_mock_driver()
    show_dashboard(driver)
    page = _dashboard(driver)
    driver.find_element.side_effect = WebDriverException("stale")
    driver.find_elements.side_effect = WebDriverException("stale")
    result = page.verify()
    assert result.logged_in is False
    assert page.is_user_logged_in() is False


def test_lost_connection_means_not_logged_in() -> None:
    driver = create_mock_driver()
    show_dashboard(driver)
    page = _dashboard(driver)
    cut_connection(driver)
    assert page.verify() == VerificationResult(logged_in=False, login_form_displayed=False)
    assert page.get_user_display_name() == ""


def test_logout_returns_to_login_form() -> None:
    driver = create_mock_driver()
    show_dashboard(driver)
    dropdown = driver.elements[USER_DROPDOWN][0]
    logout_link = create_mock_element(text="Logout", on_click=lambda: add_login_form(driver))
    dropdown.click.side_effect = lambda: driver.elements.__setitem__(LOGOUT_LINK, [logout_link])

    page = _dashboard(driver)
    page.logout()

    logout_link.click.assert_called_once()
    assert page.is_login_form_displayed() is True


def test_logout_without_login_form_raises() -> None:
    driver = create_mock_driver()
    show_dashboard(driver)
    driver.elements[LOGOUT_LINK] = [create_mock_element(text="Logout")]
    page = _dashboard(driver, page_wait=0)
    try:
        page.logout()
    except PageLoadError as e:
        assert "did not return" in e.message
        return
    raise AssertionError("Expected PageLoadError")


def module_tests() -> bool:
    suite = TestSuite("Outcome Verifier", "pages/dashboard_page.py")
    suite.start_suite()
    with suppress_logging():
        suite.run_test("Logged in", test_verify_after_successful_login, "Header, title and user name collected")
        suite.run_test("Login page", test_verify_on_login_page, "Form displayed means not logged in")
        suite.run_test("Header and form", test_header_with_login_form_is_not_logged_in, "Both present: not logged in")
        suite.run_test(
            "Lookup errors",
            test_lookup_errors_mean_not_logged_in,
            "Driver errors during verification",
            expected_outcome="Classified as not logged in, nothing raised",
        )
        suite.run_test(
            "Lost connection",
            test_lost_connection_means_not_logged_in,
            "Browser process gone during verification",
            expected_outcome="Not logged in, transport error not raised",
        )
        suite.run_test("Logout", test_logout_returns_to_login_form, "Dropdown -> Logout -> login form")
        suite.run_test("Logout failure", test_logout_without_login_form_raises, "PageLoadError when form never returns")
    return suite.finish_suite()


run_comprehensive_tests = create_standard_test_runner(module_tests)


if __name__ == "__main__":
    sys.exit(0 if run_comprehensive_tests() else 1)
