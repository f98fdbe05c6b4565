"""
Error Handling

Helpers for turning failures into degraded results instead of crashes.
"""

from typing import Callable, TypeVar
from functools import wraps
import logging

from ..domain.exceptions import DomainException


logger = logging.getLogger(__name__)

T = TypeVar("T")


def describe_error(error: Exception) -> str:
    """Short message for an exception, without the class-name prefix."""
    if isinstance(error, DomainException):
        return error.message
    return str(error) or error.__class__.__name__


def handle_exception(
    default_return: T,
    log_level: int = logging.ERROR,
    reraise: bool = False
) -> Callable:
    """
    Decorator that logs a failure and returns ``default_return`` instead.

    Domain errors are expected (timeouts, 5xx, bad payloads) and are
    logged with their details at ``log_level``. Anything else also gets
    a traceback at DEBUG.

    Args:
        default_return: Value to return on exception
        log_level: Logging level for caught exceptions
        reraise: Re-raise after logging (for callers that only want the log)
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                expected = isinstance(e, DomainException)
                suffix = f" {e.details}" if expected and e.details else ""
                logger.log(
                    log_level,
                    f"{func.__name__} {'failed' if expected else 'hit an unexpected error'}: "
                    f"{describe_error(e)}{suffix}"
                )
                if not expected:
                    logger.debug(f"{func.__name__} traceback", exc_info=True)
                if reraise:
                    raise
                return default_return
        return wrapper
    return decorator
