#!/usr/bin/env python3

"""Tests for pages.login_page: state machine, outcome race and read-back verification."""

import sys
from typing import Any
from unittest.mock import MagicMock, PropertyMock

from selenium.common.exceptions import InvalidSessionIdException, WebDriverException

from core.exceptions import InputMismatchError, PageLoadError
from pages.locators import ERROR_MESSAGE, PASSWORD_INPUT, USERNAME_INPUT
from pages.login_page import LoginPage, LoginResult, LoginState
from testing.test_framework import TestSuite, suppress_logging
from testing.test_utilities import (
    DASHBOARD_URL,
    create_login_driver,
    create_mock_driver,
    create_mock_element,
    create_standard_test_runner,
    cut_connection,
    fast_selenium_config,
)


def _login_page(driver: Any, registry: Any = None, **config: Any) -> LoginPage:
    return LoginPage(driver, registry=registry, worker_id="w1", config=fast_selenium_config(**config))


def _expect(error_type: type[BaseException], func: Any, *args: Any) -> BaseException:
    try:
        func(*args)
    except error_type as e:
        return e
    raise AssertionError(f"Expected {error_type.__name__}")


def test_page_load_reaches_form_visible() -> None:
    page = _login_page(create_login_driver())
    assert page.state is LoginState.FORM_VISIBLE
    assert page.is_login_page_displayed() is True


def test_missing_form_raises_page_load_error() -> None:
    driver = create_mock_driver(url="https://opensource-demo.orangehrmlive.com/maintenance")
    error = _expect(PageLoadError, _login_page, driver)
    assert error.url == "https://opensource-demo.orangehrmlive.com/maintenance"


def test_valid_login_reaches_success() -> None:
    driver = create_login_driver("success")
    page = _login_page(driver)
    page.login("Admin", "admin123")
    assert page.state is LoginState.OUTCOME_PENDING
    assert page.wait_for_login_result() is LoginResult.SUCCESS
    assert page.state is LoginState.SUCCESS
    assert page.last_result is LoginResult.SUCCESS


def test_invalid_login_reaches_failure() -> None:
    driver = create_login_driver("failure")
    page = _login_page(driver)
    page.login("InvalidUser", "WrongPassword123")
    assert page.wait_for_login_result() is LoginResult.FAILURE
    assert page.state is LoginState.FAILURE
    assert page.get_error_message() == "Invalid credentials"
    assert page.is_login_page_displayed() is True


def test_no_outcome_is_indeterminate_not_raised() -> None:
    page = _login_page(create_login_driver(None), result_wait=0)
    page.login("Admin", "admin123")
    assert page.wait_for_login_result() is LoginResult.INDETERMINATE
    assert page.state is LoginState.INDETERMINATE


def test_simultaneous_outcomes_prefer_success() -> None:
    driver = create_login_driver()
    page = _login_page(driver)
    driver.current_url = DASHBOARD_URL
    driver.elements[ERROR_MESSAGE] = [create_mock_element(text="Invalid credentials")]
    assert page.wait_for_login_result() is LoginResult.SUCCESS


def test_dead_session_result_is_indeterminate() -> None:
    driver = create_login_driver()
    page = _login_page(driver)
    type(driver).current_url = PropertyMock(side_effect=WebDriverException("invalid session id"))
    assert page.wait_for_login_result() is LoginResult.INDETERMINATE
    assert page.get_error_message() == ""


def test_lost_connection_result_is_indeterminate() -> None:
    driver = create_login_driver("failure")
    page = _login_page(driver)
    cut_connection(driver)
    assert page.wait_for_login_result() is LoginResult.INDETERMINATE
    assert page.get_error_message() == ""
    assert page.is_login_page_displayed() is False


def test_hidden_error_banner_is_not_a_failure() -> None:
    driver = create_login_driver()
    page = _login_page(driver, result_wait=0)
    driver.elements[ERROR_MESSAGE] = [create_mock_element(text="Invalid credentials", displayed=False)]
    assert page.wait_for_login_result() is LoginResult.INDETERMINATE


def test_hidden_password_field_is_not_login_page() -> None:
    driver = create_login_driver()
    page = _login_page(driver)
    driver.elements[PASSWORD_INPUT] = [create_mock_element(displayed=False)]
    assert page.is_login_page_displayed() is False


def test_username_mismatch_fails_login() -> None:
    driver = create_login_driver("success")
    stuck = create_mock_element()
    stuck.send_keys.side_effect = None
    driver.elements[USERNAME_INPUT] = [stuck]
    page = _login_page(driver)

    error = _expect(InputMismatchError, page.login, "Admin", "admin123")
    assert error.field == "username"
    assert error.context["username"] == "Admin"
    driver.elements[PASSWORD_INPUT][0].send_keys.assert_not_called()


def test_password_mismatch_is_masked() -> None:
    driver = create_login_driver()
    truncated = create_mock_element()
    truncated.send_keys.side_effect = None
    driver.elements[PASSWORD_INPUT] = [truncated]
    page = _login_page(driver)

    error = _expect(InputMismatchError, page.enter_password, "admin123")
    assert error.expected == "***hidden***"
    assert "admin123" not in error.message


def test_empty_submission_shows_required_messages() -> None:
    driver = create_login_driver("required")
    page = _login_page(driver)
    page.click_login_button()
    assert page.get_required_messages() == ["Required", "Required"]
    assert page.is_login_page_displayed() is True
    assert page.get_error_message() == ""


def test_self_heal_inside_login_action() -> None:
    original, replacement = create_login_driver("success"), create_login_driver("success")
    live = {"driver": original}

    def _die() -> None:
        live["driver"] = replacement
        raise InvalidSessionIdException("invalid session id")

    original.elements[USERNAME_INPUT][0].clear.side_effect = _die
    registry = MagicMock()
    registry.current.side_effect = lambda worker_id=None: live["driver"]
    registry.current_wait.return_value = None

    page = _login_page(original, registry=registry)
    page.enter_username("Admin")

    assert page.recovery_attempts == 1
    assert replacement.elements[USERNAME_INPUT][0].get_attribute("value") == "Admin"


def module_tests() -> bool:
    suite = TestSuite("Login Flow", "pages/login_page.py")
    suite.start_suite()
    with suppress_logging():
        suite.run_test("Page load", test_page_load_reaches_form_visible, "PAGE_LOADING -> FORM_VISIBLE")
        suite.run_test("Page load failure", test_missing_form_raises_page_load_error, "PageLoadError, not retried")
        suite.run_test("Valid login", test_valid_login_reaches_success, "Redirect to dashboard -> SUCCESS")
        suite.run_test("Invalid login", test_invalid_login_reaches_failure, "Error banner -> FAILURE")
        suite.run_test(
            "No outcome",
            test_no_outcome_is_indeterminate_not_raised,
            "Neither condition holds before the timeout",
            expected_outcome="INDETERMINATE returned, nothing raised",
        )
        suite.run_test(
            "Tie-break",
            test_simultaneous_outcomes_prefer_success,
            "Success marker and error banner present in the same poll",
            expected_outcome="SUCCESS wins",
        )
        suite.run_test("Dead session", test_dead_session_result_is_indeterminate, "No crash on a closed browser")
        suite.run_test(
            "Lost connection",
            test_lost_connection_result_is_indeterminate,
            "urllib3 errors from a crashed browser",
            expected_outcome="INDETERMINATE, queries answer negatively",
        )
        suite.run_test("Hidden banner", test_hidden_error_banner_is_not_a_failure, "Only a visible banner means FAILURE")
        suite.run_test("Hidden field", test_hidden_password_field_is_not_login_page, "Every form control must be visible")
        suite.run_test("Username mismatch", test_username_mismatch_fails_login, "InputMismatchError stops the flow")
        suite.run_test("Password mismatch", test_password_mismatch_is_masked, "Password never appears in errors")
        suite.run_test("Empty fields", test_empty_submission_shows_required_messages, "Form stays displayed")
        suite.run_test("Self-heal", test_self_heal_inside_login_action, "One re-acquisition inside enter_username")
    return suite.finish_suite()


run_comprehensive_tests = create_standard_test_runner(module_tests)


if __name__ == "__main__":
    sys.exit(0 if run_comprehensive_tests() else 1)
