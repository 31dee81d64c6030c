"""Retry and best-effort execution primitives.

Polling in this suite is a fixed interval between a bounded number of
attempts. Every call site that waits for eventually-consistent state goes
through retry_until; every cleanup or diagnostic step goes through
try_cleanup.
"""

import logging
import time
from typing import Any, Callable, Tuple, Type, TypeVar

from src.shared.errors import RetryExhaustedError
from src.shared.sentry_integration import add_breadcrumb

__all__ = [
    'retry_until',
    'sleep_via_page',
    'try_cleanup',
]

logger = logging.getLogger(__name__)

T = TypeVar('T')


def retry_until(
    predicate: Callable[[], T],
    attempts: int,
    interval: float,
    sleep: Callable[[float], Any] = time.sleep,
    description: str = "condition",
    exceptions: Tuple[Type[BaseException], ...] = (),
) -> T:
    """Call predicate until it returns a truthy value.

    Args:
        predicate: Zero-argument callable polled on each attempt
        attempts: Maximum number of calls (must be at least 1)
        interval: Seconds to wait between calls (not after the last one)
        sleep: Sleep function; page objects pass one backed by page.wait_for_timeout
        description: Human-readable name used in logs and the raised error
        exceptions: Exception types that count as a failed attempt instead of propagating

    Returns:
        The first truthy value returned by predicate

    Raises:
        ValueError: If attempts is less than 1
        RetryExhaustedError: If no attempt succeeded
    """
    if attempts < 1:
        raise ValueError(f"attempts must be at least 1, got {attempts}")

    for attempt in range(1, attempts + 1):
        try:
            result = predicate()
        except exceptions as e:
            logger.warning(f"{description}: attempt {attempt}/{attempts} raised {type(e).__name__}: {e}")
            result = None
        if result:
            if attempt > 1:
                logger.info(f"{description}: succeeded on attempt {attempt}/{attempts}")
            return result
        if attempt < attempts:
            logger.debug(f"{description}: attempt {attempt}/{attempts} not met, waiting {interval}s")
            sleep(interval)

    raise RetryExhaustedError(description, attempts)


def try_cleanup(action: Callable[..., Any], description: str, *args, **kwargs) -> bool:
    """Run a cleanup or diagnostic action without letting it fail the caller.

    Args:
        action: Callable to run
        description: Name of the step for the log
        *args: Positional arguments for action
        **kwargs: Keyword arguments for action

    Returns:
        True if the action completed, False if it raised
    """
    try:
        action(*args, **kwargs)
        return True
    except Exception as e:
        logger.warning(f"Cleanup step '{description}' failed: {type(e).__name__}: {e}", exc_info=True)
        add_breadcrumb(f"cleanup failed: {description}", category="cleanup", level="warning",
                       data={"error": str(e)})
        return False


def sleep_via_page(page) -> Callable[[float], None]:
    """Sleep function for retry_until that yields to the browser event loop."""
    def _sleep(seconds: float) -> None:
        page.wait_for_timeout(seconds * 1000)
    return _sleep
