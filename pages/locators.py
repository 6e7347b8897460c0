#!/usr/bin/env python3

"""Locators for the OrangeHRM pages under test.

Each page declares an immutable name -> (strategy, selector) table. Page
objects resolve these at call time, never at construction.
"""

# === STANDARD LIBRARY IMPORTS ===
from collections.abc import Mapping
from types import MappingProxyType

# === THIRD-PARTY IMPORTS ===
from selenium.webdriver.common.by import By

# === LOCAL IMPORTS ===
from core.selenium_utils import Locator

# --- Login Page (/web/index.php/auth/login) ---
USERNAME_INPUT: Locator = (By.NAME, "username")
PASSWORD_INPUT: Locator = (By.NAME, "password")
LOGIN_BUTTON: Locator = (By.XPATH, "//button[@type='submit']")
ERROR_MESSAGE: Locator = (By.XPATH, "//p[@class='oxd-text oxd-text--p oxd-alert-content-text']")
REQUIRED_FIELD_MESSAGE: Locator = (By.XPATH, "//span[contains(@class, 'oxd-input-field-error-message')]")

# --- Dashboard (/web/index.php/dashboard/index) ---
DASHBOARD_HEADER: Locator = (By.XPATH, "//h6[@class='oxd-text oxd-text--h6 oxd-topbar-header-breadcrumb-module']")
USER_DROPDOWN: Locator = (By.XPATH, "//p[@class='oxd-userdropdown-name']")
LOGOUT_LINK: Locator = (By.XPATH, "//a[text()='Logout']")

LOGIN_PAGE_LOCATORS: Mapping[str, Locator] = MappingProxyType(
    {
        "username": USERNAME_INPUT,
        "password": PASSWORD_INPUT,
        "login_button": LOGIN_BUTTON,
        "error_message": ERROR_MESSAGE,
        "required_message": REQUIRED_FIELD_MESSAGE,
    }
)

DASHBOARD_PAGE_LOCATORS: Mapping[str, Locator] = MappingProxyType(
    {
        "dashboard_header": DASHBOARD_HEADER,
        "user_dropdown": USER_DROPDOWN,
        "logout_link": LOGOUT_LINK,
        "username": USERNAME_INPUT,
    }
)
