"""Browser Automation Package.

Provides browser automation infrastructure including:
- driver_factory: Chrome/Firefox session creation and configuration
- selenium_utils: non-raising WebDriver query helpers
"""

_SUBMODULES = frozenset(["driver_factory", "selenium_utils"])


def __getattr__(name: str):
    """Lazy import submodules on attribute access."""
    if name in _SUBMODULES:
        import importlib

        return importlib.import_module(f".{name}", __name__)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    """List available submodules."""
    return list(_SUBMODULES)
