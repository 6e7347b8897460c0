#!/usr/bin/env python3

"""
Session Registry - one browser session per concurrently running test.

Holds an explicit map ``worker_id -> SessionEntry`` instead of ambient
thread-locals. The registry instance is created once per suite run and handed
to every worker through its ``WorkerContext``; ``worker_id`` defaults to the
calling thread's name so each pool thread owns its own slot.

Lifecycle per worker:
    acquire() -> current()/current_wait() during the test -> release()

Acquisition either yields a verified live session or raises
``SessionInitError`` with nothing left behind. Release never raises.
"""

# === STANDARD LIBRARY IMPORTS ===
import contextlib
import logging
import threading
import time
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Optional

# === THIRD-PARTY IMPORTS ===
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.support.wait import WebDriverWait

# === LOCAL IMPORTS ===
from browser.driver_factory import DriverFactory, configure_driver, create_driver, normalize_browser
from config.config_schema import AppConfig, SeleniumConfig
from core.exceptions import SessionInitError
from core.selenium_utils import build_wait, document_ready

logger = logging.getLogger(__name__)


@dataclass
class SessionEntry:
    """One worker's live browser session and its Wait Context."""

    driver: Any
    browser: str
    wait: Optional["WebDriverWait[Any]"] = None
    created_at: float = field(default_factory=time.time)


def current_worker_id() -> str:
    """Identity used when a caller does not name its worker explicitly."""
    return threading.current_thread().name


class SessionRegistry:
    """Creates, hands out and tears down per-worker browser sessions."""

    def __init__(
        self,
        selenium_config: Optional[SeleniumConfig] = None,
        app_config: Optional[AppConfig] = None,
        driver_factory: Optional[DriverFactory] = None,
    ) -> None:
        self.selenium_config = selenium_config or SeleniumConfig()
        self.app_config = app_config or AppConfig()
        self._driver_factory: DriverFactory = driver_factory or create_driver
        self._entries: dict[str, SessionEntry] = {}
        self._lock = threading.Lock()

    # --- Acquisition -------------------------------------------------------

    def acquire(self, kind: Optional[str] = None, worker_id: Optional[str] = None) -> Any:
        """
        Create, configure, navigate and verify a new session for ``worker_id``.

        An existing session for the same worker is released first, so a worker
        never owns more than one live entry.

        Raises:
            SessionInitError: if any step fails; the partial session is closed.
        """
        worker = worker_id or current_worker_id()
        browser = normalize_browser(kind)

        if self.has_session(worker):
            logger.warning(f"Worker {worker} already owns a session; releasing it before acquiring a new one")
            self.release(worker)

        logger.info(f"Setting up {browser} browser for thread: {worker}")
        driver = None
        try:
            driver = self._driver_factory(browser, self.selenium_config)
            if driver is None:
                raise SessionInitError(f"{browser} driver could not be started", browser=browser, worker_id=worker)
            configure_driver(driver, self.selenium_config)
            self._navigate_to_application(driver)
            current_url = self._verify_session(driver)
        except Exception as e:
            logger.error(f"CRITICAL ERROR during browser setup for {worker}: {e}")
            self._quit_quietly(driver, worker)
            if isinstance(e, SessionInitError):
                raise
            raise SessionInitError(
                f"Failed to initialize browser: {e}", browser=browser, worker_id=worker, context={"cause": repr(e)}
            ) from e

        entry = SessionEntry(driver=driver, browser=browser)
        entry.wait = self._build_wait(driver)
        with self._lock:
            self._entries[worker] = entry
        logger.info(f"Browser setup completed for {worker} ({browser}); current URL: {current_url}")
        return driver

    def _navigate_to_application(self, driver: Any) -> None:
        url = self.app_config.login_url
        logger.debug(f"Navigating to: {url}")
        driver.get(url)
        # bounded by the page-load timeout
        try:
            build_wait(driver, self.selenium_config.page_load_timeout, self.selenium_config.poll_frequency).until(
                document_ready
            )
        except TimeoutException:
            logger.warning(f"Document at {url} not complete after {self.selenium_config.page_load_timeout}s")

    @staticmethod
    def _verify_session(driver: Any) -> str:
        try:
            current_url = driver.current_url
        except WebDriverException as e:
            raise SessionInitError(f"Driver session is not active: {e}") from e
        if not current_url:
            raise SessionInitError("Driver session is not active: empty current URL")
        logger.debug(f"Driver session verified. Current URL: {current_url}")
        return current_url

    def _build_wait(self, driver: Any) -> "WebDriverWait[Any]":
        return build_wait(driver, self.selenium_config.explicit_wait, self.selenium_config.poll_frequency)

    # --- Lookup ------------------------------------------------------------

    def has_session(self, worker_id: Optional[str] = None) -> bool:
        with self._lock:
            return (worker_id or current_worker_id()) in self._entries

    def current(self, worker_id: Optional[str] = None) -> Any:
        """The worker's session, or None. Never blocks and never creates."""
        with self._lock:
            entry = self._entries.get(worker_id or current_worker_id())
        return entry.driver if entry else None

    def current_browser(self, worker_id: Optional[str] = None) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(worker_id or current_worker_id())
        return entry.browser if entry else None

    def current_wait(self, worker_id: Optional[str] = None) -> Optional["WebDriverWait[Any]"]:
        """The worker's Wait Context, built lazily when a session exists without one."""
        with self._lock:
            entry = self._entries.get(worker_id or current_worker_id())
            if entry is None:
                return None
            if entry.wait is None:
                entry.wait = self._build_wait(entry.driver)
            return entry.wait

    def active_workers(self) -> list[str]:
        with self._lock:
            return sorted(self._entries)

    # --- Release -----------------------------------------------------------

    def release(self, worker_id: Optional[str] = None) -> None:
        """
        Close the worker's session and remove its entry.

        Idempotent. Close failures are logged, never raised, and never keep
        the entry alive.
        """
        worker = worker_id or current_worker_id()
        with self._lock:
            entry = self._entries.pop(worker, None)
        if entry is None:
            logger.debug(f"No driver to cleanup for {worker}")
            return
        logger.debug(f"Starting cleanup for {worker}")
        self._quit_quietly(entry.driver, worker)

    def release_all(self) -> None:
        """Release every worker's session (interrupt cleanup)."""
        for worker in self.active_workers():
            self.release(worker)

    @staticmethod
    def _quit_quietly(driver: Any, worker: str) -> None:
        if driver is None:
            return
        try:
            driver.quit()
            logger.debug(f"Browser closed successfully for {worker}")
        except Exception as e:
            logger.warning(f"Error closing browser for {worker}: {e}")

    @contextlib.contextmanager
    def session(self, kind: Optional[str] = None, worker_id: Optional[str] = None) -> Iterator[Any]:
        """Scoped acquisition: the session is released however the block exits."""
        worker = worker_id or current_worker_id()
        driver = self.acquire(kind, worker)
        try:
            yield driver
        finally:
            self.release(worker)
