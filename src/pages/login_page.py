"""Login page object: Microsoft sign-in and the terms-and-conditions step."""

import re
from typing import Optional

from config import login_config as sel
from src.pages.base_page import BasePage, PlaywrightTimeoutError
from src.shared.constants import TIMEOUTS
from src.shared.errors import RetryExhaustedError, WorkflowError
from src.shared.retry import retry_until
from src.shared.settings import Credentials


class LoginPage(BasePage):

    def __init__(self, page, base_url: Optional[str] = None):
        super().__init__(page)
        self.base_url = base_url

    def goto(self) -> None:
        self.page.goto(self.base_url or "/")

    def on_terms_page(self) -> bool:
        return sel.TERMS_URL_FRAGMENT in (self.page.url or "")

    def accept_terms_if_present(self) -> bool:
        """Accept the one-time terms-and-conditions step; returns True if it was shown."""
        if not self.on_terms_page():
            return False
        self.log("accepting terms and conditions")
        button = self.page.locator(sel.TERMS_ACCEPT_BUTTON)
        button.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        button.click()
        return True

    def is_logged_in(self) -> bool:
        if "/command" in (self.page.url or ""):
            return True
        return self.is_visible(self.page.locator(sel.SELECTED_COMPANY))

    def _sign_in_with_microsoft(self, credentials: Credentials) -> None:
        page = self.page
        if self.is_visible(page.locator(sel.USE_ANOTHER_ACCOUNT_TILE), timeout=TIMEOUTS.QUICK_MS):
            self.log("choosing 'use another account'")
            page.locator(sel.USE_ANOTHER_ACCOUNT_TILE).click()

        self.log(f"signing in as {credentials.username}")
        page.locator(sel.USERNAME_INPUT).fill(credentials.username)
        page.locator(sel.SUBMIT_BUTTON).click()
        self.wait(3)
        page.locator(sel.PASSWORD_INPUT).fill(credentials.password)
        page.locator(sel.SUBMIT_BUTTON).click()

        if self.is_visible(page.locator(sel.STAY_SIGNED_IN_NO_BUTTON), timeout=TIMEOUTS.SHORT_MS):
            page.locator(sel.STAY_SIGNED_IN_NO_BUTTON).click()

        try:
            page.wait_for_url(lambda url: sel.MICROSOFT_LOGIN_HOST not in url,
                              timeout=TIMEOUTS.LOGIN_REDIRECT_MS)
        except PlaywrightTimeoutError as e:
            raise WorkflowError(
                f"Still on the identity provider after {TIMEOUTS.LOGIN_REDIRECT_MS}ms; check the credentials"
            ) from e

    def _landed(self) -> bool:
        if self.accept_terms_if_present():
            return False
        return self.is_visible(self.page.locator(sel.SELECTED_COMPANY))

    def login(self, credentials: Credentials) -> None:
        """Sign in and block until the command view is shown.

        Raises:
            WorkflowError: If the post-login URL is not reached in time
        """
        self.goto()
        self.accept_terms_if_present()
        if self.is_logged_in():
            self.log("session already authenticated")
            return

        self._sign_in_with_microsoft(credentials)

        try:
            retry_until(self._landed, sel.POST_LOGIN_POLL_ATTEMPTS, sel.POST_LOGIN_POLL_INTERVAL,
                        sleep=self.sleep, description="post-login landing")
        except RetryExhaustedError:
            # The URL check below is authoritative
            self.log("company selector not seen after login")
        self.wait_for_post_login()

    def wait_for_post_login(self, timeout: int = TIMEOUTS.LOGIN_REDIRECT_MS) -> None:
        try:
            self.page.wait_for_url(re.compile(sel.POST_LOGIN_URL_PATTERN), timeout=timeout)
        except PlaywrightTimeoutError as e:
            raise WorkflowError(f"Post-login URL not reached within {timeout}ms (at {self.page.url})") from e

    def logout(self, account: Optional[str] = None) -> None:
        """Sign out through the account menu, picking account in the identity provider's list.

        Raises:
            WorkflowError: If the account menu is not shown
        """
        self.log("signing out")
        dropdown = self.page.locator(sel.LOGOUT_DROPDOWN)
        if not self.is_visible(dropdown, timeout=TIMEOUTS.SHORT_MS):
            raise WorkflowError("Account menu not shown; not signed in?")
        dropdown.click()
        self.page.locator(sel.LOGOUT_BUTTON).click()

        if self.is_visible(self.page.get_by_text(sel.PICK_ACCOUNT_TEXT), timeout=TIMEOUTS.SHORT_MS):
            tile = self.page.get_by_text(account).first if account else None
            if tile is None or not self.is_visible(tile, timeout=TIMEOUTS.QUICK_MS):
                tile = self.page.locator(sel.ACCOUNT_TILE).first
            tile.click()
        self.settle()
