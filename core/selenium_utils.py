#!/usr/bin/env python3

"""
Selenium Utilities.

Standardized wait helpers shared by the session registry and page objects.
Every wait is bounded by the ``WebDriverWait`` it runs under.
"""

# === STANDARD LIBRARY IMPORTS ===
import logging
from collections.abc import Callable, Sequence
from typing import Any, Optional

# === THIRD-PARTY IMPORTS ===
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.support import expected_conditions as EC  # noqa: N812
from selenium.webdriver.support.wait import WebDriverWait
from urllib3.exceptions import HTTPError

# === TYPE ALIASES ===
Locator = tuple[str, str]
Condition = Callable[[Any], Any]

# Errors meaning the session could not answer; a dead browser raises urllib3 errors
DRIVER_ERRORS: tuple[type[Exception], ...] = (WebDriverException, HTTPError, ConnectionError)

logger = logging.getLogger(__name__)


def build_wait(driver: Any, timeout: float, poll_frequency: float = 0.5) -> "WebDriverWait[Any]":
    """Create a WebDriverWait with the given timeout and polling interval."""
    return WebDriverWait(driver, timeout, poll_frequency=poll_frequency)


def wait_until_visible(waiter: "WebDriverWait[Any]", locator: Locator) -> Any:
    """Return first element matching locator once it becomes visible."""
    return waiter.until(EC.visibility_of_element_located(locator))


def wait_until_clickable(waiter: "WebDriverWait[Any]", locator: Locator) -> Any:
    """Return the element once it becomes clickable."""
    return waiter.until(EC.element_to_be_clickable(locator))


def document_ready(driver: Any) -> bool:
    """Predicate: the current document has finished loading."""
    try:
        return driver.execute_script("return document.readyState") == "complete"
    except DRIVER_ERRORS:
        return False


def wait_for_first(waiter: "WebDriverWait[Any]", conditions: Sequence[tuple[str, Condition]]) -> str:
    """
    Race several conditions under one wait and return the name of the winner.

    Conditions are evaluated in the order given on every poll, so when more
    than one holds within the same poll the earlier entry wins. A condition
    that raises one of ``DRIVER_ERRORS`` counts as not satisfied for that poll.

    Raises:
        TimeoutException: if no condition holds before the wait times out.
    """

    def _first_satisfied(driver: Any) -> Optional[str]:
        for name, condition in conditions:
            try:
                if condition(driver):
                    return name
            except DRIVER_ERRORS:
                continue
        return None

    return waiter.until(_first_satisfied)


def url_contains(fragment: str) -> Condition:
    """Predicate: the current location contains ``fragment``."""

    def _predicate(driver: Any) -> bool:
        current = driver.current_url
        return bool(current) and fragment in current

    return _predicate


def any_element_visible(locator: Locator) -> Condition:
    """Predicate: at least one element matching ``locator`` is displayed."""

    def _predicate(driver: Any) -> bool:
        return any(element.is_displayed() for element in driver.find_elements(*locator))

    return _predicate
