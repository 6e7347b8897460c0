#!/usr/bin/env python3

"""
WebDriver creation for the suite's two browser kinds.

- ``chrome`` (primary): undetected-chromedriver, which strips the automation
  switches and ``navigator.webdriver`` itself, plus the hardening flags the
  demo site needs.
- ``firefox`` (secondary): Selenium's Firefox driver with prompts disabled.

Any other requested kind falls back to ``chrome`` with a logged notice.
"""

# === STANDARD LIBRARY IMPORTS ===
import contextlib
import logging
import time
from collections.abc import Callable
from typing import Any, Optional

# === THIRD-PARTY IMPORTS ===
import undetected_chromedriver as uc
from selenium import webdriver
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.firefox.options import Options as FirefoxOptions
from selenium.webdriver.remote.webdriver import WebDriver

# === LOCAL IMPORTS ===
from config.config_schema import SUPPORTED_BROWSERS, SeleniumConfig

logger = logging.getLogger(__name__)

DEFAULT_BROWSER = "chrome"

CHROME_ARGUMENTS = (
    "--remote-allow-origins=*",
    "--disable-blink-features=AutomationControlled",
    "--disable-extensions",
    "--no-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-web-security",
    "--allow-running-insecure-content",
)

FIREFOX_PREFERENCES = {
    "dom.webnotifications.enabled": False,
    "dom.push.enabled": False,
    "geo.enabled": False,
    "dom.disable_beforeunload": True,
}

DriverFactory = Callable[[str, SeleniumConfig], Optional[WebDriver]]


def normalize_browser(kind: Optional[str]) -> str:
    """Map a requested browser kind onto a supported one, defaulting to Chrome."""
    requested = (kind or "").strip().lower()
    if requested in SUPPORTED_BROWSERS:
        return requested
    logger.info(f"Browser not specified or invalid ({kind!r}). Defaulting to {DEFAULT_BROWSER}.")
    return DEFAULT_BROWSER


def build_chrome_options(config: SeleniumConfig) -> Any:
    """Chrome options with automation-detection and origin restrictions relaxed."""
    options = uc.ChromeOptions()
    for argument in CHROME_ARGUMENTS:
        options.add_argument(argument)
    if config.headless_mode:
        options.add_argument("--headless=new")
        options.add_argument("--window-size=1920,1080")
    if config.chrome_browser_path:
        options.binary_location = str(config.chrome_browser_path)
    return options


def build_firefox_options(config: SeleniumConfig) -> FirefoxOptions:
    """Firefox options with notification, push, geolocation and unload prompts disabled."""
    options = FirefoxOptions()
    for name, value in FIREFOX_PREFERENCES.items():
        options.set_preference(name, value)
    if config.headless_mode:
        options.add_argument("-headless")
    return options


def _create_chrome_driver(config: SeleniumConfig) -> WebDriver:
    logger.debug("Initializing Chrome driver...")
    kwargs: dict[str, Any] = {"options": build_chrome_options(config), "use_subprocess": True}
    if config.chrome_driver_path:
        kwargs["driver_executable_path"] = str(config.chrome_driver_path)
    return uc.Chrome(**kwargs)


def _create_firefox_driver(config: SeleniumConfig) -> WebDriver:
    logger.debug("Initializing Firefox driver...")
    return webdriver.Firefox(options=build_firefox_options(config))


_CREATORS: dict[str, Callable[[SeleniumConfig], WebDriver]] = {
    "chrome": _create_chrome_driver,
    "firefox": _create_firefox_driver,
}


def _handle_driver_exception(e: Exception, browser: str, attempt_num: int) -> None:
    """Log an initialization failure with a hint matching its cause."""
    if isinstance(e, TimeoutException):
        logger.warning(f"Timeout during {browser} init attempt {attempt_num}: {e}")
    elif isinstance(e, WebDriverException):
        err_str = str(e).lower()
        if "cannot connect to chrome" in err_str or "failed to start" in err_str:
            logger.error(f"Failed to connect/start {browser} (attempt {attempt_num}): {e}")
        elif "version" in err_str and ("mismatch" in err_str or "only supports" in err_str):
            logger.error(f"Driver/browser version mismatch (attempt {attempt_num}): {e}")
        else:
            logger.warning(f"WebDriverException during {browser} init attempt {attempt_num}: {e}")
    else:
        logger.error(f"Unexpected error during {browser} init attempt {attempt_num}: {e}", exc_info=True)


def create_driver(kind: Optional[str], config: SeleniumConfig) -> Optional[WebDriver]:
    """
    Start a browser of the given kind, retrying up to ``chrome_max_retries`` times.

    Returns:
        The new driver, or None when every attempt failed.
    """
    browser = normalize_browser(kind)
    creator = _CREATORS[browser]
    max_attempts = max(1, config.chrome_max_retries)

    for attempt_num in range(1, max_attempts + 1):
        logger.debug(f"{browser} WebDriver initialization attempt {attempt_num}/{max_attempts}...")
        start_time = time.time()
        try:
            driver = creator(config)
        except Exception as e:
            _handle_driver_exception(e, browser, attempt_num)
        else:
            logger.debug(f"{browser} WebDriver started in {time.time() - start_time:.2f}s (attempt {attempt_num})")
            return driver

        if attempt_num < max_attempts:
            logger.debug(f"Waiting {config.chrome_retry_delay} seconds before retrying initialization...")
            time.sleep(config.chrome_retry_delay)

    logger.critical(f"Failed to initialize {browser} WebDriver after {max_attempts} attempts.")
    return None


def configure_driver(driver: WebDriver, config: SeleniumConfig) -> None:
    """Maximize the window and apply the implicit, page-load and script timeouts."""
    if config.headless_mode:
        with contextlib.suppress(WebDriverException):
            driver.set_window_size(1920, 1080)
    else:
        driver.maximize_window()
    driver.implicitly_wait(config.implicit_wait)
    driver.set_page_load_timeout(config.page_load_timeout)
    driver.set_script_timeout(config.script_timeout)
    logger.debug(
        f"Timeouts configured: implicit({config.implicit_wait}s), "
        f"pageLoad({config.page_load_timeout}s), script({config.script_timeout}s)"
    )
