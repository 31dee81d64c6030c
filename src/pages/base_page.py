"""Common helpers for page objects."""

import logging
from typing import Callable, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Locator, Page
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from src.shared.constants import TIMEOUTS
from src.shared.retry import sleep_via_page

__all__ = [
    'BasePage',
    'PlaywrightError',
    'PlaywrightTimeoutError',
]

logger = logging.getLogger(__name__)


class BasePage:
    """Wraps a Playwright page; subclasses add locators and actions for one screen."""

    def __init__(self, page: Page):
        self.page = page

    def log(self, message: str, level: int = logging.INFO) -> None:
        logger.log(level, f"[{type(self).__name__}] {message}")

    @property
    def sleep(self) -> Callable[[float], None]:
        """Sleep function (seconds) for retry_until that keeps the browser responsive."""
        return sleep_via_page(self.page)

    def wait(self, seconds: float) -> None:
        self.page.wait_for_timeout(seconds * 1000)

    def is_visible(self, locator: Locator, timeout: Optional[int] = None) -> bool:
        """Whether locator is visible, optionally waiting up to timeout ms."""
        try:
            if timeout:
                locator.wait_for(state="visible", timeout=timeout)
                return True
            return bool(locator.is_visible())
        except PlaywrightError:
            return False

    def is_enabled(self, locator: Locator) -> bool:
        try:
            return bool(locator.is_enabled())
        except PlaywrightError:
            return False

    def settle(self, timeout: int = TIMEOUTS.NETWORK_IDLE_MS) -> None:
        """Wait for network idle; a page that never goes idle is not an error."""
        try:
            self.page.wait_for_load_state("networkidle", timeout=timeout)
        except PlaywrightTimeoutError:
            self.log(f"network did not go idle within {timeout}ms", logging.DEBUG)

    def by_test_id(self, test_id: str) -> Locator:
        return self.page.locator(f'[data-test-id="{test_id}"]')
