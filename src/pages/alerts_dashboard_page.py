"""Command dashboard: stack filter modal, alert cards, counters and timers.

Filter checkboxes are identified by their data-test-id and clicked through
their wrapping label (the input itself is visually hidden); a forced click on
the input is the fallback.
"""

import re
from typing import Dict, List, Optional

from config import dashboard_config as sel
from src.pages.base_page import BasePage, PlaywrightError
from src.shared.constants import RETRY, TIMEOUTS
from src.shared.errors import RetryExhaustedError, WorkflowError
from src.shared.retry import retry_until

__all__ = [
    'AlertsDashboardPage',
    'parse_timer',
    'site_prefix',
]

# Clock time shown on incident alert cards
CLOCK_PATTERN = re.compile(r'(\d{1,2}:\d{2}:\d{2})')


def site_prefix(site: str) -> str:
    """First two words of a site name; the card title truncates long names."""
    return " ".join(site.split(" ")[:2])


def parse_timer(text: str) -> int:
    """Seconds shown by an elapsed-time field (HH:MM:SS, MM:SS or a bare number).

    Raises:
        ValueError: If the text is not a timer reading
    """
    value = (text or "").strip()
    if re.fullmatch(r'\d+(:\d{1,2}){0,2}', value) is None:
        raise ValueError(f"Not a timer value: {text!r}")
    seconds = 0
    for part in value.split(":"):
        seconds = seconds * 60 + int(part)
    return seconds


class AlertsDashboardPage(BasePage):

    # Stack filter modal

    def open_filter(self) -> None:
        self.page.locator(sel.FILTER_TRIGGER).click(timeout=TIMEOUTS.MEDIUM_MS)
        self.page.locator(sel.FILTER_RESET).wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)

    def is_filter_editable(self) -> bool:
        """Open the filter and report whether Apply is offered; roles without edit rights see no Apply."""
        self.page.locator(sel.FILTER_TRIGGER).click(timeout=TIMEOUTS.MEDIUM_MS)
        self.wait(1)
        try:
            apply = self.page.locator(sel.FILTER_APPLY)
            return self.is_visible(apply, timeout=TIMEOUTS.QUICK_MS) and self.is_enabled(apply)
        finally:
            self.close_filter()

    def apply_filter(self) -> None:
        self.page.locator(sel.FILTER_APPLY).click(timeout=TIMEOUTS.QUICK_MS)

    def close_filter(self) -> None:
        close = self.page.locator(sel.FILTER_CLOSE)
        if self.is_visible(close, timeout=1_000):
            close.click()
        else:
            self.page.keyboard.press("Escape")

    def reset_filter(self) -> None:
        """Reset every filter to the defaults and apply."""
        self.log("resetting stack filter")
        self.open_filter()
        self.page.locator(sel.FILTER_RESET).click()
        self.apply_filter()
        self.page.locator(sel.NOTIFICATION_ITEM).first.wait_for(state="hidden", timeout=TIMEOUTS.SHORT_MS)
        self.close_filter()
        self.settle()

    def _checkbox(self, test_id: str):
        return self.by_test_id(test_id)

    def toggle_checkbox(self, test_id: str) -> None:
        try:
            self.page.locator(f'label:has([data-test-id="{test_id}"])').click(timeout=TIMEOUTS.QUICK_MS)
        except PlaywrightError:
            self._checkbox(test_id).click(force=True)

    def is_filter_checked(self, test_id: str) -> bool:
        return bool(self._checkbox(test_id).is_checked())

    def is_filter_enabled(self, test_id: str) -> bool:
        return bool(self._checkbox(test_id).is_enabled())

    def set_checkbox(self, test_id: str, checked: bool) -> None:
        if self.is_filter_checked(test_id) != checked:
            self.toggle_checkbox(test_id)

    def alert_type_filter(self, alert_type: str) -> str:
        """data-test-id of an alert-type checkbox ('LPR', 'Trex', ...)."""
        try:
            return sel.ALERT_TYPE_FILTERS[alert_type]
        except KeyError:
            raise ValueError(f"Unknown alert type filter: {alert_type}") from None

    def voi_source_states(self) -> Dict[str, bool]:
        """Enabled state of each VOI source checkbox (they depend on the LPR checkbox)."""
        return {source: self.is_filter_enabled(test_id) for source, test_id in sel.VOI_SOURCE_FILTERS.items()}

    def search_site_in_filter(self, site: str) -> None:
        search = self.page.get_by_placeholder(sel.FILTER_SITE_SEARCH_PLACEHOLDER)
        search.fill(site)
        search.press("Enter")
        self.wait(0.3)

    def deselect_all(self) -> None:
        """Clear every alert type checkbox in the open filter."""
        button = self.page.get_by_role("button", name=sel.DESELECT_ALL_BUTTON)
        button.wait_for(state="visible", timeout=TIMEOUTS.QUICK_MS)
        button.click()

    def filter_by_manual_alert(self) -> None:
        """Show only manual alerts."""
        self.log("filtering stack by Manual Alert")
        self.page.locator(sel.FILTER_TRIGGER).click()
        self.wait(1)
        self.toggle_checkbox(sel.ALERT_TYPE_FILTERS['Manual Alert'])
        self.apply_filter()
        self.wait(2)
        self.close_filter()
        self.settle()

    def filter_by_ub_and_trex(self, site: str) -> bool:
        """Show only UB and Trex alerts for site; returns True once cards or the empty state render."""
        self.log(f"filtering stack by Unusual Behaviour + Trex for '{site}'")
        self.open_filter()
        self.search_site_in_filter(site)
        self.toggle_checkbox(sel.ALERT_TYPE_FILTERS['Unusual Behaviour'])
        self.toggle_checkbox(sel.ALERT_TYPE_FILTERS['Trex'])
        self.apply_filter()
        self.close_filter()
        self.wait(0.3)

        def _results_rendered() -> bool:
            card = self.site_card_name(site_prefix(site))
            return self.is_visible(card) or self.is_visible(self.page.get_by_text(sel.NO_RESULTS_TEXT))

        try:
            return retry_until(_results_rendered, 6, 0.5, sleep=self.sleep, description="filtered stack render")
        except RetryExhaustedError:
            self.log("filtered stack did not render cards or an empty state yet")
            return False

    def verify_filter_checked(self, alert_type: str, expected: bool = True) -> None:
        """Open the filter, check one alert-type checkbox state, close.

        Raises:
            WorkflowError: If the checkbox is not in the expected state
        """
        self.open_filter()
        try:
            checked = self.is_filter_checked(self.alert_type_filter(alert_type))
        finally:
            self.close_filter()
        if checked != expected:
            state = "checked" if expected else "unchecked"
            raise WorkflowError(f"{alert_type} filter should be {state}")

    def set_alert_order(self, order: str, stack_filter: bool = False) -> None:
        """Choose 'Newest to Oldest' or 'Oldest to Newest' in the alert or stack order toggle."""
        if order not in sel.ALERT_ORDER:
            raise ValueError(f"Unknown alert order: {order}")
        prefix = "stack-order" if stack_filter else "alert-order"
        self.by_test_id(f"{prefix}-{sel.ALERT_ORDER[order]}").click()

    def apply_alert_order(self, order: str) -> None:
        """Set both the alert order within incidents and the stack order, then apply."""
        self.log(f"ordering alerts {order}")
        self.open_filter()
        self.set_alert_order(order)
        self.set_alert_order(order, stack_filter=True)
        self.apply_filter()
        notification = self.page.locator(sel.SUCCESS_NOTIFICATION).first
        if self.is_visible(notification, timeout=2_000):
            try:
                notification.wait_for(state="hidden", timeout=TIMEOUTS.MEDIUM_MS)
            except PlaywrightError:
                self.log("success notification still shown, closing the filter anyway")
        self.close_filter()
        self.settle()

    def read_alert_times(self) -> List[int]:
        """Seconds since midnight of each incident card's HH:MM:SS time, in display order."""
        times = []
        for text in self.page.locator(sel.INCIDENT_ALERT_TIME).all_text_contents():
            match = CLOCK_PATTERN.search(text or "")
            if match:
                times.append(parse_timer(match.group(1)))
        return times

    def read_timers(self) -> List[int]:
        """Seconds shown by every ticking timer on the stack, in display order."""
        return [parse_timer(text) for text in self.page.locator(sel.TICKING_TIMER).all_text_contents()
                if text and text.strip()]

    # Flagging

    def select_manual_alert_at(self, index: int) -> None:
        """Click the manual alert card at a position within the expanded site card."""
        card = self.page.locator(sel.MANUAL_ALERT_CARD).nth(index)
        card.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        card.click()
        self.wait(2)

    def count_manual_alert_cards(self) -> int:
        return self.page.locator(sel.MANUAL_ALERT_CARD).count()

    def is_selected_alert_flagged(self, timeout: Optional[int] = None) -> bool:
        return self.is_visible(self.page.locator(sel.FLAGGED_BUTTON).first, timeout=timeout)

    def flag_selected_alert(self) -> bool:
        """Flag the selected alert; returns True once its toolbar reads Flagged."""
        self.log("flagging selected alert")
        button = self.page.locator(sel.FLAG_BUTTON).first
        button.wait_for(state="visible", timeout=TIMEOUTS.QUICK_MS)
        button.click()
        return self.is_selected_alert_flagged(timeout=TIMEOUTS.QUICK_MS)

    def unflag_selected_alert(self) -> bool:
        """Remove the flag from the selected alert; returns True once Flag is offered again."""
        self.log("removing flag from selected alert")
        button = self.page.locator(sel.FLAGGED_BUTTON).first
        button.wait_for(state="visible", timeout=TIMEOUTS.QUICK_MS)
        button.click()
        return self.is_visible(self.page.locator(sel.FLAG_BUTTON).first, timeout=TIMEOUTS.QUICK_MS)

    # Cards

    def site_card_name(self, site: str):
        return self.page.locator(sel.SITE_CARD_NAME_XPATH.format(name=site)).first

    def is_site_card_visible(self, site: str, timeout: Optional[int] = None) -> bool:
        return self.is_visible(self.site_card_name(site_prefix(site)), timeout=timeout)

    def count_alert_cards(self) -> int:
        return self.page.locator(sel.ANY_ALERT_CARD).count()

    def count_cards_of_type(self, alert_type: str) -> int:
        return self.page.locator(f'{sel.ALERT_CARD}:has-text("{alert_type}")').count()

    def expand_site_card(self, site: str) -> None:
        prefix = site_prefix(site)
        self.settle()
        self.wait(3)
        card = self.site_card_name(prefix)
        card.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        card.click()
        expand = self.page.locator(sel.SITE_CARD_EXPAND_XPATH.format(name=prefix))
        expand.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        expand.click()
        self.wait(1)

    def select_manual_alert_card(self, site: str) -> None:
        self.log(f"selecting manual alert card for '{site}'")
        self.expand_site_card(site)
        card = self.page.locator(sel.MANUAL_ALERT_CARD).first
        card.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        card.click()

    def select_first_manual_alert_card(self) -> None:
        """Expand the first site card on the stack and click its first manual alert."""
        self.settle()
        card = self.page.locator(sel.AGGREGATED_SITE_CARD).first
        card.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        card.click()
        expand = card.locator(sel.SITE_CARD_EXPAND_BUTTON).first
        expand.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        expand.click()
        self.wait(1)
        manual = self.page.locator(sel.MANUAL_ALERT_CARD).first
        manual.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        manual.click()

    def select_ub_or_trex_card(self, site: str) -> str:
        """Open the site card and click its first UB alert, else Trex, else any alert; returns the type."""
        self.log(f"selecting UB/Trex alert card for '{site}'")
        self.expand_site_card(site)
        for alert_type in ("Unusual Behaviour", "Trex"):
            card = self.page.locator(f'{sel.ALERT_CARD}:has-text("{alert_type}")').first
            if self.is_visible(card, timeout=2_000):
                card.click()
                return alert_type
        card = self.page.locator(sel.ALERT_CARD).first
        card.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        card.click()
        return "unknown"

    def wait_for_site_card(self, site: str, attempts: int = RETRY.CARD_ATTEMPTS,
                           interval: float = RETRY.CARD_INTERVAL) -> bool:
        """Poll for a site card that arrives asynchronously (seeded alerts).

        Raises:
            RetryExhaustedError: If the card never shows up
        """
        return retry_until(lambda: self.is_site_card_visible(site), attempts, interval,
                           sleep=self.sleep, description=f"site card '{site}'")

    def read_situation_alert_count(self) -> str:
        badge = self.page.locator(sel.INCIDENT_GROUP_ALERT_COUNT).first
        badge.wait_for(state="visible", timeout=TIMEOUTS.MEDIUM_MS)
        return (badge.text_content() or "").strip()

    def is_empty_state_visible(self, timeout: int = TIMEOUTS.SHORT_MS) -> bool:
        return (self.is_visible(self.page.get_by_text(sel.NO_RESULTS_TEXT).first, timeout=timeout)
                and self.is_visible(self.page.get_by_text(sel.ADJUST_SEARCH_TEXT).first, timeout=timeout))

    def is_stack_empty(self) -> bool:
        if self.count_alert_cards() > 0:
            return False
        stack = self.page.locator(sel.ALERT_STACK)
        return self.is_visible(stack.get_by_text(sel.NO_RESULTS_TEXT)) or not self.is_visible(stack)

    def read_timer_seconds(self) -> int:
        timer = self.page.locator(sel.TICKING_TIMER).first
        timer.wait_for(state="visible", timeout=TIMEOUTS.MEDIUM_MS)
        return parse_timer(timer.text_content() or "")

    def open_suppressions_link(self) -> None:
        """Follow the Suppressions link in the filter notice to suppression management."""
        self.page.get_by_text(sel.SUPPRESSION_TEXT).wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        self.page.get_by_role("link", name=sel.SUPPRESSION_LINK_TEXT).click()
        self.page.wait_for_url(re.compile(re.escape(sel.SUPPRESSION_URL_FRAGMENT)), timeout=TIMEOUTS.SHORT_MS)
