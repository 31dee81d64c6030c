"""Best-effort cleanup of alerts the suite created.

Every loop here is bounded and idempotent: running a cleanup against an
already-clean stack returns immediately, and running it twice in a row
leaves the same state as running it once. Callers wrap the entry points in
try_cleanup so a failed cleanup never masks a test result.
"""

import re
from typing import Optional

from config import dashboard_config
from config import sop_config as sel
from src.pages.alerts_dashboard_page import AlertsDashboardPage
from src.pages.app_interactions_page import AppInteractionsPage
from src.pages.base_page import BasePage, PlaywrightError
from src.pages.sop_page import SopPage
from src.shared.constants import RETRY, TIMEOUTS
from src.shared.errors import RetryExhaustedError, WorkflowError
from src.shared.retry import retry_until, try_cleanup
from src.shared.session import Stack

_RESOLVE_BUTTON_NAME = re.compile(r'^Resolve$', re.IGNORECASE)
_NON_RESOLVE_BUTTONS = re.compile(r'(Back|Cancel|Close|Resolve All)', re.IGNORECASE)
_RADIO = '[role="radio"]'


class WorkflowHelper(BasePage):

    def __init__(self, page):
        super().__init__(page)
        self.dashboard = AlertsDashboardPage(page)
        self.app = AppInteractionsPage(page)
        self.sop = SopPage(page)

    # Resolve dialog

    def _active_resolve_dialog(self):
        modal = self.page.locator(sel.RESOLVE_DIALOG).first
        if modal.count():
            return modal
        return self.page.locator(sel.RESOLVE_DIALOG_FALLBACK).first

    def _click_first_option(self, dialog) -> bool:
        for selector in sel.RESOLVE_OPTION_SELECTORS:
            options = dialog.locator(selector)
            for i in range(min(options.count(), 10)):
                option = options.nth(i)
                if not self.is_visible(option):
                    continue
                if selector == 'button' and (option.text_content() or "").strip().lower() in sel.RESOLVE_EXCLUDED_LABELS:
                    continue
                try:
                    if selector == _RADIO:
                        option.check(force=True)
                    else:
                        option.click(force=True)
                    return True
                except PlaywrightError as e:
                    self.log(f"resolve option {selector}[{i}] not clickable: {e}")
        return False

    def resolve_via_dialog(self) -> bool:
        """Walk the multi-step resolve dialog and confirm with Resolve.

        The dialog asks for a sector, type and outcome; the exact steps vary,
        so the first selectable option of each step is taken.

        Returns:
            True if the dialog closed afterwards
        """
        dialog = self._active_resolve_dialog()
        if not self.is_visible(dialog, timeout=TIMEOUTS.MEDIUM_MS):
            self.log("resolve dialog not shown")
            return False

        resolve = dialog.get_by_role("button", name=_RESOLVE_BUTTON_NAME).first
        for step in range(sel.RESOLVE_MAX_SELECTIONS):
            if not self._click_first_option(dialog):
                self.log("no selectable option on this resolve step")
                break
            self.wait(0.25)
            if step + 1 >= sel.RESOLVE_MIN_SELECTIONS and self.is_visible(resolve):
                break

        if self.is_visible(resolve):
            resolve.click(force=True)
        else:
            fallback = dialog.locator("button:visible").filter(has_not_text=_NON_RESOLVE_BUTTONS).last
            if self.is_visible(fallback):
                fallback.click(force=True)

        try:
            dialog.wait_for(state="hidden", timeout=TIMEOUTS.SOP_COMPLETE_MS)
        except PlaywrightError:
            self.log("resolve dialog still open")
            return False
        self.settle()
        return True

    # Stack state

    def has_cards(self) -> bool:
        cards = self.page.locator(dashboard_config.MANUAL_ALERT_CARD).first.or_(
            self.page.locator(dashboard_config.AGGREGATED_SITE_CARD).first)
        self.is_visible(cards, timeout=TIMEOUTS.QUICK_MS)
        return (self.page.locator(dashboard_config.MANUAL_ALERT_CARD).count()
                + self.page.locator(dashboard_config.AGGREGATED_SITE_CARD).count()) > 0

    def wait_for_stack_empty(self, stack: Stack, attempts: int = RETRY.STACK_EMPTY_ATTEMPTS) -> bool:
        try:
            retry_until(lambda: self.dashboard.is_stack_empty() or not self.has_cards(), attempts, 1.0,
                        sleep=self.sleep, description=f"{stack.value} stack empty")
            return True
        except RetryExhaustedError:
            self.log(f"{stack.value} stack still has cards")
            return False

    def _ub_trex_count(self) -> int:
        return (self.dashboard.count_cards_of_type("Unusual Behaviour")
                + self.dashboard.count_cards_of_type("Trex"))

    # Manual alerts

    def _resolve_incident_group(self) -> None:
        """Dismiss the selected site group, or resolve it when dismissal is unavailable."""
        dismiss = self.page.locator(sel.DISMISS_BUTTON)
        if self.is_visible(dismiss, timeout=2_000):
            self.log("dismissing alert group on the Incident stack")
            dismiss.click(force=True)
            return
        self.log("dismiss unavailable, resolving all on the Incident stack")
        self.sop.resolve_all()
        self.settle()
        if not self.sop.confirm_positive():
            self.resolve_via_dialog()

    def _clean_incident_manual(self) -> None:
        cards = self.page.locator(dashboard_config.AGGREGATED_SITE_CARD)
        target = cards.filter(has_text="MA").first
        if not self.is_visible(target, timeout=1_000):
            target = cards.first
        if not self.is_visible(target, timeout=3_000):
            raise WorkflowError("No aggregated site card on the Incident stack")
        target.click()
        self.settle()
        self.sop.complete_sop()
        self._resolve_incident_group()

    def _clean_situation_manual(self, site: Optional[str]) -> None:
        if site:
            self.dashboard.select_manual_alert_card(site)
        else:
            self.dashboard.select_first_manual_alert_card()
        self.sop.complete_sop()
        self.sop.resolve_all()
        self.settle()
        self.resolve_via_dialog()

    def manual_alert_cleanup(self, site: Optional[str] = None) -> int:
        """Dismiss or resolve manual alerts on the Incident stack, then the Situation stack.

        Args:
            site: Site whose cards to open on the Situation stack (first card when None)

        Returns:
            Number of cards processed
        """
        self.log("starting manual alert cleanup")
        self.app.switch_stack(Stack.INCIDENT)
        self.dashboard.reset_filter()
        self.dashboard.filter_by_manual_alert()
        self.settle()

        processed = 0
        for stack in (Stack.INCIDENT, Stack.SITUATION):
            self.app.switch_stack(stack)
            for _ in range(RETRY.CLEANUP_MAX_ITERATIONS):
                if not self.has_cards():
                    self.log(f"nothing to clean on the {stack.value} stack")
                    break
                if stack is Stack.INCIDENT:
                    self._clean_incident_manual()
                else:
                    self._clean_situation_manual(site)
                processed += 1
                if self.wait_for_stack_empty(stack):
                    break

        self.log(f"manual alert cleanup processed {processed} card(s)")
        return processed

    # UB / Trex alerts

    def _dismiss_site_group(self, site: str) -> None:
        cards = self.page.locator(dashboard_config.AGGREGATED_SITE_CARD)
        parent = cards.filter(has_text=site).first
        if not self.is_visible(parent, timeout=TIMEOUTS.QUICK_MS):
            parent = cards.filter(has_text=site.split(" ")[0]).first
        if not self.is_visible(parent, timeout=TIMEOUTS.QUICK_MS):
            parent = cards.first
        if not self.is_visible(parent, timeout=TIMEOUTS.QUICK_MS):
            raise WorkflowError(f"No site card found for '{site}' on the Incident stack")
        parent.click()
        self.settle()
        self.sop.complete_sop()
        self.page.locator(sel.DISMISS_BUTTON).click(force=True)
        self.settle()

    def _resolve_site_alert(self, site: str) -> None:
        self.dashboard.select_ub_or_trex_card(site)
        self.settle()
        self.sop.complete_sop()
        self.sop.resolve_all()
        self.settle()
        self.resolve_via_dialog()

    def _remaining_on(self, stack: Stack, site: str) -> int:
        self.app.switch_stack(stack)
        self.settle()
        if not self.dashboard.is_site_card_visible(site, timeout=TIMEOUTS.QUICK_MS):
            return 0
        self.dashboard.expand_site_card(site)
        return self._ub_trex_count()

    def ub_and_trex_cleanup(self, site: str) -> int:
        """Dismiss UB/Trex alerts for site on the Incident stack and resolve them on the Situation stack.

        Returns:
            Number of stacks that had cards to process

        Raises:
            WorkflowError: If UB or Trex cards for the site remain on either stack
        """
        self.log(f"starting UB/Trex cleanup for '{site}'")
        self.app.switch_stack(Stack.INCIDENT)
        self.dashboard.reset_filter()
        try_cleanup(self.dashboard.filter_by_ub_and_trex, "UB/Trex filter", site)
        self.settle()

        processed = 0
        for stack, action in ((Stack.INCIDENT, self._dismiss_site_group),
                              (Stack.SITUATION, self._resolve_site_alert)):
            self.app.switch_stack(stack)
            self.wait(3)
            if not self.has_cards() and self._ub_trex_count() == 0:
                self.log(f"no UB/Trex cards on the {stack.value} stack")
                continue
            if try_cleanup(action, f"UB/Trex cleanup on {stack.value}", site):
                processed += 1
            self.wait(2)
            self.wait_for_stack_empty(stack, attempts=RETRY.DISMISS_VERIFY_ATTEMPTS)

        for stack in Stack:
            remaining = self._remaining_on(stack, site)
            if remaining:
                raise WorkflowError(f"{remaining} UB/Trex alert(s) for '{site}' remain on the {stack.value} stack")
        return processed
