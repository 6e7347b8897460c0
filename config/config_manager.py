#!/usr/bin/env python3

"""
Configuration Manager.

Loads the suite configuration from three layers, later layers winning:

1. Schema defaults
2. ``.env`` file (via python-dotenv, skipped when ``CONFIG_SKIP_DOTENV`` is set)
3. Environment variables

The merged dictionary is turned into a validated ``ConfigSchema`` and cached.
"""

# === STANDARD LIBRARY IMPORTS ===
import copy
import logging
import os
from typing import Any, Optional

# === THIRD-PARTY IMPORTS ===
from dotenv import load_dotenv

# === LOCAL IMPORTS ===
from config.config_schema import ConfigSchema
from core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_TRUTHY = {"true", "1", "yes", "on"}


class _ConfigManagerSingleton:
    """Container class for singleton instance to avoid global statement."""

    instance: Optional["ConfigManager"] = None


def get_config_manager(environment: Optional[str] = None, force_new: bool = False) -> "ConfigManager":
    """
    Get the shared ConfigManager instance.

    Args:
        environment: Environment name (only used on first call)
        force_new: If True, create a new instance (for testing only)
    """
    if force_new or _ConfigManagerSingleton.instance is None:
        _ConfigManagerSingleton.instance = ConfigManager(environment=environment)
    return _ConfigManagerSingleton.instance


class ConfigManager:
    """
    Configuration manager with type-safe schemas and validation.

    Usage:
        from config import get_config
        config = get_config()
        config.selenium.page_wait
    """

    def __init__(self, environment: Optional[str] = None, auto_load: bool = True) -> None:
        skip_dotenv = os.getenv("CONFIG_SKIP_DOTENV", "").strip().lower()
        if skip_dotenv not in _TRUTHY:
            load_dotenv()

        self.environment = environment or os.getenv("ENVIRONMENT", "development")
        self._config_cache: Optional[ConfigSchema] = None

        if auto_load:
            self.load_config()

    def load_config(self, overrides: Optional[dict[str, Any]] = None) -> ConfigSchema:
        """
        Load and validate configuration from defaults and environment variables.

        Args:
            overrides: Optional nested dict applied last (CLI flags)

        Raises:
            ConfigurationError: If the merged configuration is invalid
        """
        logger.debug(f"Loading configuration for environment: {self.environment}")

        config_data = self._get_default_config()
        config_data = self._merge_configs(config_data, self._load_environment_variables())
        if overrides:
            config_data = self._merge_configs(config_data, overrides)

        try:
            config = ConfigSchema.from_dict(config_data)
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to load configuration: {e}")
            raise ConfigurationError(f"Configuration loading failed: {e}") from e

        validation_errors = config.validate()
        if validation_errors:
            raise ConfigurationError(f"Configuration validation failed: {validation_errors}")

        self._config_cache = config
        logger.debug(f"Configuration loaded successfully for environment: {self.environment}")
        return config

    def get_config(self) -> ConfigSchema:
        """Return the cached configuration, loading it on first use."""
        if self._config_cache is None:
            return self.load_config()
        return self._config_cache

    def reload_config(self) -> ConfigSchema:
        """Force reload configuration from all sources."""
        self._config_cache = None
        return self.load_config()

    def _get_default_config(self) -> dict[str, Any]:
        return {"environment": self.environment}

    @staticmethod
    def _merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep-merge ``override`` into a copy of ``base``."""
        result = copy.deepcopy(base)
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = ConfigManager._merge_configs(result[key], value)
            else:
                result[key] = value
        return result

    def _load_environment_variables(self) -> dict[str, Any]:
        config: dict[str, Any] = {}
        self._load_selenium_config_from_env(config)
        self._load_app_config_from_env(config)
        self._load_report_config_from_env(config)
        self._load_suite_config_from_env(config)
        self._load_logging_config_from_env(config)
        return config

    def _load_selenium_config_from_env(self, config: dict[str, Any]) -> None:
        self._set_bool_config(config, "selenium", "headless_mode", "HEADLESS_MODE")
        self._set_string_config(config, "selenium", "chrome_driver_path", "CHROME_DRIVER_PATH")
        self._set_string_config(config, "selenium", "chrome_browser_path", "CHROME_BROWSER_PATH")
        self._set_int_config(config, "selenium", "implicit_wait", "IMPLICIT_WAIT")
        self._set_int_config(config, "selenium", "page_load_timeout", "PAGE_LOAD_TIMEOUT")
        self._set_int_config(config, "selenium", "script_timeout", "SCRIPT_TIMEOUT")
        self._set_int_config(config, "selenium", "explicit_wait", "EXPLICIT_WAIT")
        self._set_int_config(config, "selenium", "page_wait", "PAGE_WAIT")
        self._set_int_config(config, "selenium", "result_wait", "RESULT_WAIT")
        self._set_float_config(config, "selenium", "poll_frequency", "POLL_FREQUENCY")

    def _load_app_config_from_env(self, config: dict[str, Any]) -> None:
        self._set_string_config(config, "app", "base_url", "BASE_URL")
        self._set_string_config(config, "credentials", "valid_username", "VALID_USERNAME")
        self._set_string_config(config, "credentials", "valid_password", "VALID_PASSWORD")
        self._set_string_config(config, "credentials", "invalid_username", "INVALID_USERNAME")
        self._set_string_config(config, "credentials", "invalid_password", "INVALID_PASSWORD")

    def _load_report_config_from_env(self, config: dict[str, Any]) -> None:
        self._set_string_config(config, "report", "report_path", "REPORT_PATH")
        self._set_string_config(config, "report", "environment", "REPORT_ENVIRONMENT")
        self._set_string_config(config, "report", "tester", "TESTER_NAME")

    def _load_suite_config_from_env(self, config: dict[str, Any]) -> None:
        self._set_int_config(config, "suite", "max_workers", "MAX_WORKERS")
        # BROWSERS lists several kinds; BROWSER names a single one
        raw = os.getenv("BROWSERS") or os.getenv("BROWSER")
        if raw is None:
            return
        browsers = [b.strip() for b in raw.split(",") if b.strip()]
        if browsers:
            config.setdefault("suite", {})["browsers"] = browsers
        else:
            logger.info(f"No browser named in {raw!r}; keeping the default browser list")

    def _load_logging_config_from_env(self, config: dict[str, Any]) -> None:
        self._set_string_config(config, "logging", "log_level", "LOG_LEVEL")
        self._set_string_config(config, "logging", "log_dir", "LOG_DIR")
        self._set_string_config(config, "logging", "log_file", "LOG_FILE")

    @staticmethod
    def _set_string_config(config: dict[str, Any], section: str, key: str, env_var: str) -> None:
        """Set a string configuration value from environment variable."""
        value = os.getenv(env_var)
        if value:
            config.setdefault(section, {})[key] = value

    @staticmethod
    def _set_int_config(config: dict[str, Any], section: str, key: str, env_var: str) -> None:
        """Set an integer configuration value from environment variable."""
        value = os.getenv(env_var)
        if value:
            try:
                config.setdefault(section, {})[key] = int(value)
            except ValueError:
                logger.warning(f"Invalid {env_var} value: {value}")

    @staticmethod
    def _set_float_config(config: dict[str, Any], section: str, key: str, env_var: str) -> None:
        """Set a float configuration value from environment variable."""
        value = os.getenv(env_var)
        if value:
            try:
                config.setdefault(section, {})[key] = float(value)
            except ValueError:
                logger.warning(f"Invalid {env_var} value: {value}")

    @staticmethod
    def _set_bool_config(config: dict[str, Any], section: str, key: str, env_var: str) -> None:
        """Set a boolean configuration value from environment variable."""
        value = os.getenv(env_var)
        if value is not None:
            config.setdefault(section, {})[key] = value.strip().lower() in _TRUTHY
