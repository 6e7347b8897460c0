"""
Configuration Package.

Main components:
- ConfigManager: layers defaults, .env and environment variables
- ConfigSchema: type-safe configuration sections with validation
"""

from .config_manager import ConfigManager, get_config_manager
from .config_schema import ConfigSchema


def get_config() -> ConfigSchema:
    """Return the shared, cached configuration."""
    return get_config_manager().get_config()


__all__ = [
    "ConfigManager",
    "ConfigSchema",
    "get_config",
    "get_config_manager",
]
