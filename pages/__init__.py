"""Page objects for the OrangeHRM application.

- base_page: locator-table page object with call-time resolution and session recovery
- login_page: login flow state machine
- dashboard_page: post-login outcome verifier
"""

from pages.base_page import BasePage
from pages.dashboard_page import DashboardPage, VerificationResult
from pages.login_page import LoginPage, LoginResult, LoginState

__all__ = [
    "BasePage",
    "DashboardPage",
    "LoginPage",
    "LoginResult",
    "LoginState",
    "VerificationResult",
]
