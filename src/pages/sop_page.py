"""SOP panel for a selected alert, plus the card actions it gates."""

from config import dashboard_config
from config import sop_config as sel
from src.pages.alerts_dashboard_page import site_prefix
from src.pages.base_page import BasePage, PlaywrightError
from src.shared.constants import RETRY, TIMEOUTS
from src.shared.errors import RetryExhaustedError, WorkflowError
from src.shared.retry import retry_until


class SopPage(BasePage):

    def open_sop_tab(self) -> None:
        """Click the SOP tab of the selected alert, falling back to its text label.

        Raises:
            WorkflowError: If neither locator becomes visible
        """
        tab = self.page.locator(sel.SOP_TAB)
        if not self.is_visible(tab, timeout=TIMEOUTS.MEDIUM_MS):
            tab = self.page.locator(sel.SOP_TAB_FALLBACK).first
            if not self.is_visible(tab, timeout=TIMEOUTS.QUICK_MS):
                raise WorkflowError("SOP tab not found")
            self.log("using text locator for the SOP tab")
        tab.click()

    def is_sop_complete(self) -> bool:
        return self.is_visible(self.page.locator("body").get_by_text(sel.SOP_COMPLETE_TEXT, exact=True))

    def _click_first_answer(self, answer: str) -> bool:
        buttons = self.page.locator(f'button:has-text("{answer}")')
        for i in range(buttons.count()):
            button = buttons.nth(i)
            if self.is_visible(button) and self.is_enabled(button):
                button.click(force=True)
                return True

        fallback = self.page.locator(sel.ANSWER_BUTTON_FALLBACK)
        if fallback.count() > 0 and self.is_visible(fallback.first):
            self.log(f"no '{answer}' button, using the generic answer button")
            fallback.first.click()
            return True
        return False

    def complete_sop(self, answer: str = sel.DEFAULT_ANSWER) -> None:
        """Open the SOP tab and answer it until the completion banner shows.

        Raises:
            WorkflowError: If no answer button is clickable or the banner never shows
        """
        self.log("completing SOP")
        self.open_sop_tab()
        if self.is_sop_complete():
            self.log("SOP already complete")
            return

        if not self._click_first_answer(answer):
            raise WorkflowError("No clickable answer buttons found in SOP")

        try:
            self.page.locator("body").get_by_text(sel.SOP_COMPLETE_TEXT, exact=True).wait_for(
                state="visible", timeout=TIMEOUTS.SOP_COMPLETE_MS)
        except PlaywrightError as e:
            raise WorkflowError(f"SOP not completed within {TIMEOUTS.SOP_COMPLETE_MS}ms") from e

    def dispatch(self) -> None:
        self.log("dispatching alert")
        self.page.locator(sel.DISPATCH_BUTTON).last.click()
        self.wait(1)

    def escalate(self, site: str) -> bool:
        """Escalate the selected alert of site and wait for it to leave the Incident view.

        The alert has left once the expanded site card lists fewer alerts than
        before the click, or the site card itself is gone. Cards of other
        sites are not considered.

        Returns:
            True if the alert left within the polling window
        """
        self.log(f"escalating alert at '{site}'")
        alerts = self.page.locator(dashboard_config.SITE_ALERT_CARDS)
        site_card = self.page.locator(dashboard_config.SITE_CARD_NAME_XPATH.format(name=site_prefix(site))).first
        before = alerts.count()
        button = self.page.locator(sel.ESCALATE_BUTTON).first
        button.wait_for(state="visible", timeout=TIMEOUTS.QUICK_MS)
        button.click()

        def _left() -> bool:
            return not self.is_visible(site_card) or alerts.count() < before

        try:
            retry_until(_left, RETRY.ESCALATE_POLL_ATTEMPTS, RETRY.ESCALATE_POLL_INTERVAL,
                        sleep=self.sleep, description=f"escalated alert leaving '{site}'")
        except RetryExhaustedError:
            self.log(f"'{site}' still lists {alerts.count()} alert(s) after escalating")
            return False
        return True

    def dismiss(self) -> None:
        self.log("dismissing alert")
        button = self.page.locator(sel.DISMISS_BUTTON)
        button.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        button.click()

    def resolve_all(self) -> bool:
        """Click RESOLVE ALL if present; returns False when the button is not shown."""
        button = self.page.locator(sel.RESOLVE_ALL_BUTTON)
        if not self.is_visible(button, timeout=TIMEOUTS.QUICK_MS):
            return False
        button.click()
        return True

    def confirm_positive(self) -> bool:
        """Click POSITIVE on the simple resolve prompt; returns False when it is not shown."""
        button = self.page.locator(sel.POSITIVE_BUTTON)
        if not self.is_visible(button, timeout=TIMEOUTS.QUICK_MS):
            return False
        button.click()
        return True
