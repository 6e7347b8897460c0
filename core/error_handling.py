#!/usr/bin/env python3

"""
Shared error-handling helpers.

``safe_execute`` folds failures of query-style functions into a default
value; action-style functions do not use it and let errors propagate.
``describe_failure`` builds the user-visible line for a failed test case.
"""

# === STANDARD LIBRARY IMPORTS ===
import logging
import threading
from collections.abc import Callable
from functools import wraps
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


def safe_execute(
    default_return: Any = None, log_errors: bool = True, error_message: Optional[str] = None
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator to safely execute a function with error handling.

    Usage:
        @safe_execute(default_return=False)
        def my_func(): ...
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                if log_errors:
                    msg = error_message or f"Error in {func.__name__}: {e}"
                    logger.warning(msg)
                return default_return

        return wrapper

    return decorator


def describe_failure(
    error: Union[BaseException, str], worker_id: Optional[str] = None, browser: Optional[str] = None
) -> str:
    """Failure line carrying the error message, thread identity and browser tag."""
    worker = worker_id or threading.current_thread().name
    message = getattr(error, "message", None) or str(error) or type(error).__name__
    return f"Browser: {browser or 'unknown'}, Thread: {worker}, Error: {message}"
