#!/usr/bin/env python3

"""
Base page object.

A page binds a session to a declarative locator table and exposes queries and
actions that resolve locators at call time, so element references never go
stale across navigations.

Queries (``find_one``, ``is_visible``, ``read_text``...) never raise on
resolution failure: they return ``None``, ``False`` or ``""``. Actions
(``click``, ``type_text``) raise, because the caller has no safe default.

Actions decorated with ``recover_session_once`` re-bind to the worker's live
session from the registry at most once per call when the bound session was
replaced or died.
"""

# === STANDARD LIBRARY IMPORTS ===
import contextlib
import logging
from collections.abc import Callable, Iterator, Mapping
from functools import wraps
from typing import Any, ClassVar, Optional, TypeVar, cast

# === THIRD-PARTY IMPORTS ===
from selenium.common.exceptions import (
    InvalidSessionIdException,
    NoSuchWindowException,
    TimeoutException,
)
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support.wait import WebDriverWait

# === LOCAL IMPORTS ===
from browser.selenium_utils import extract_attribute, extract_text, is_browser_open
from config.config_schema import SeleniumConfig
from core.exceptions import InputMismatchError, InvalidSessionError
from core.selenium_utils import DRIVER_ERRORS, Locator, build_wait, wait_until_clickable, wait_until_visible
from core.session_registry import SessionRegistry, current_worker_id

logger = logging.getLogger(__name__)

SESSION_LOST_ERRORS: tuple[type[Exception], ...] = (
    InvalidSessionError,
    InvalidSessionIdException,
    NoSuchWindowException,
)

F = TypeVar("F", bound=Callable[..., Any])


def recover_session_once(action: F) -> F:
    """Retry an action once on the worker's live session if its bound session was lost."""

    @wraps(action)
    def wrapper(self: "BasePage", *args: Any, **kwargs: Any) -> Any:
        if self._action_depth:
            # nested action; the outermost call owns recovery
            return action(self, *args, **kwargs)
        self._action_depth += 1
        try:
            rebound = self._rebind_if_replaced()
            try:
                return action(self, *args, **kwargs)
            except SESSION_LOST_ERRORS as e:
                if rebound:
                    raise
                logger.warning(
                    f"{type(self).__name__}.{action.__name__}: session lost ({type(e).__name__}); re-acquiring"
                )
                self._reacquire_session(e)
                return action(self, *args, **kwargs)
        finally:
            self._action_depth -= 1

    return cast(F, wrapper)


class BasePage:
    """Locator-table page object bound to one worker's browser session."""

    LOCATORS: ClassVar[Mapping[str, Locator]] = {}

    def __init__(
        self,
        driver: Any,
        wait: Optional["WebDriverWait[Any]"] = None,
        *,
        registry: Optional[SessionRegistry] = None,
        worker_id: Optional[str] = None,
        config: Optional[SeleniumConfig] = None,
    ) -> None:
        self.registry = registry
        self.worker_id = worker_id or current_worker_id()
        self.config = config or (registry.selenium_config if registry else SeleniumConfig())
        if not is_browser_open(driver):
            raise InvalidSessionError(
                f"Invalid WebDriver session provided to {type(self).__name__}", worker_id=self.worker_id
            )
        self.driver = driver
        self.wait = wait or build_wait(driver, self.config.page_wait, self.config.poll_frequency)
        self.recovery_attempts = 0
        self._action_depth = 0

    # --- Session binding ---------------------------------------------------

    def _rebind_if_replaced(self) -> bool:
        """Switch to the registry's session when it no longer matches ours."""
        if self.registry is None:
            return False
        live = self.registry.current(self.worker_id)
        if live is None or live is self.driver:
            return False
        logger.info(f"{type(self).__name__}: bound session was replaced for {self.worker_id}; re-binding")
        self.recovery_attempts += 1
        self._bind(live)
        return True

    def _reacquire_session(self, cause: Exception) -> None:
        self.recovery_attempts += 1
        live = self.registry.current(self.worker_id) if self.registry else None
        if live is None or not is_browser_open(live):
            raise InvalidSessionError(
                "Unable to obtain valid WebDriver session", worker_id=self.worker_id, context={"cause": repr(cause)}
            ) from cause
        self._bind(live)

    def _bind(self, driver: Any) -> None:
        self.driver = driver
        registry_wait = self.registry.current_wait(self.worker_id) if self.registry else None
        self.wait = registry_wait or build_wait(driver, self.config.page_wait, self.config.poll_frequency)

    @contextlib.contextmanager
    def _without_implicit_wait(self) -> Iterator[None]:
        """Let explicit waits alone bound element lookups."""
        self.driver.implicitly_wait(0)
        try:
            yield
        finally:
            with contextlib.suppress(*DRIVER_ERRORS):
                self.driver.implicitly_wait(self.config.implicit_wait)

    def _waiter(self, timeout: Optional[float]) -> "WebDriverWait[Any]":
        if timeout is None:
            return self.wait
        return build_wait(self.driver, timeout, self.config.poll_frequency)

    def locator(self, name: str) -> Locator:
        try:
            return self.LOCATORS[name]
        except KeyError:
            raise KeyError(f"{type(self).__name__} declares no locator named {name!r}") from None

    # --- Queries -----------------------------------------------------------

    def find_one(self, name: str) -> Optional[WebElement]:
        """First element matching the named locator right now, or None."""
        elements = self.find_all(name)
        return elements[0] if elements else None

    def find_all(self, name: str) -> list[WebElement]:
        """All elements matching the named locator right now (possibly empty)."""
        locator = self.locator(name)
        try:
            with self._without_implicit_wait():
                return list(self.driver.find_elements(*locator))
        except DRIVER_ERRORS as e:
            logger.debug(f"find_all({name}) failed: {e}")
            return []

    def wait_for_visible(self, name: str, timeout: Optional[float] = None) -> Optional[WebElement]:
        """Element once visible, or None when it does not appear in time."""
        locator = self.locator(name)
        try:
            with self._without_implicit_wait():
                return wait_until_visible(self._waiter(timeout), locator)
        except TimeoutException:
            return None
        except DRIVER_ERRORS as e:
            logger.debug(f"wait_for_visible({name}) failed: {e}")
            return None

    def is_visible(self, name: str, timeout: Optional[float] = None) -> bool:
        return self.wait_for_visible(name, timeout) is not None

    def read_text(self, name: str, timeout: Optional[float] = None) -> str:
        return extract_text(self.wait_for_visible(name, timeout))

    def read_value(self, name: str) -> str:
        return extract_attribute(self.find_one(name), "value")

    # --- Actions -----------------------------------------------------------

    @recover_session_once
    def click(self, name: str) -> None:
        """Click the named element once it is clickable."""
        with self._without_implicit_wait():
            element = wait_until_clickable(self.wait, self.locator(name))
        element.click()
        logger.debug(f"Clicked {name}")

    @recover_session_once
    def type_text(self, name: str, value: str, *, verify: bool = True, mask: bool = False) -> None:
        """
        Replace the named input's content with ``value``.

        Raises:
            InputMismatchError: if ``verify`` and the read-back value differs.
        """
        with self._without_implicit_wait():
            element = wait_until_clickable(self.wait, self.locator(name))
        element.clear()
        element.send_keys(value)
        if not verify:
            return
        actual = element.get_attribute("value")
        if actual != value:
            shown_expected = "***hidden***" if mask else value
            shown_actual = "***hidden***" if mask else actual
            raise InputMismatchError(
                f"{name} not entered correctly. Expected: {shown_expected}, Actual: {shown_actual}",
                field=name,
                expected=shown_expected,
                actual=shown_actual,
            )
