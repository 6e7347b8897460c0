#!/usr/bin/env python3

"""Selenium/WebDriver Utilities for Browser Automation.

Small query helpers that never raise: each folds WebDriver failures into a
negative result through ``safe_execute``.
"""

# === STANDARD LIBRARY IMPORTS ===
import logging
from typing import Optional, Protocol, cast

# === THIRD-PARTY IMPORTS ===
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement

# === LOCAL IMPORTS ===
from core.error_handling import safe_execute

logger = logging.getLogger(__name__)


class WebElementProtocol(Protocol):
    """Protocol for WebElement to ensure strict typing."""

    def get_attribute(self, name: str) -> Optional[str]: ...

    def click(self) -> None: ...

    def clear(self) -> None: ...

    def send_keys(self, *value: object) -> None: ...

    @property
    def text(self) -> str: ...

    def is_displayed(self) -> bool: ...


@safe_execute(default_return="", log_errors=False)
def extract_text(element: Optional[WebElement]) -> str:
    """Extract stripped text from an element; empty string when unavailable."""
    if not element:
        return ""

    element_proto = cast(WebElementProtocol, element)
    return (element_proto.text or "").strip()


@safe_execute(default_return="", log_errors=False)
def extract_attribute(element: Optional[WebElement], attribute: str) -> str:
    """Extract attribute from an element safely with unified error handling."""
    if not element:
        return ""

    element_proto = cast(WebElementProtocol, element)
    return element_proto.get_attribute(attribute) or ""


@safe_execute(default_return=False, log_errors=False)
def is_browser_open(driver: Optional[WebDriver]) -> bool:
    """Check if browser is still open and responsive."""
    if not driver:
        return False
    # Raises if the browser is gone
    return driver.current_url is not None


@safe_execute(default_return=None, log_errors=False)
def current_location(driver: Optional[WebDriver]) -> Optional[str]:
    """Current URL of the session, or None when it cannot be read."""
    if not driver:
        return None
    return driver.current_url


@safe_execute(default_return=False, log_errors=False)
def is_element_visible(element: Optional[WebElement]) -> bool:
    """Check if element is visible with unified error handling."""
    if not element:
        return False

    element_proto = cast(WebElementProtocol, element)
    return bool(element_proto.is_displayed())
