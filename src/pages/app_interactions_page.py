"""Application shell controls: company (tenant) picker, station picker and stack toggle."""

from typing import Optional

from config import dashboard_config as sel
from config import login_config
from src.pages.base_page import BasePage, PlaywrightTimeoutError
from src.shared.constants import RETRY, TIMEOUTS
from src.shared.errors import WorkflowError
from src.shared.retry import retry_until
from src.shared.session import Stack

# Browser-side predicates
_LABEL_EQUALS_JS = """([selector, expected]) => {
    const label = document.querySelector(selector);
    return !!label && label.textContent.trim() === expected;
}"""
_NOT_LOADING_JS = "(selector) => !document.querySelector(selector)"


class AppInteractionsPage(BasePage):

    @property
    def company_dropdown(self):
        return self.page.locator(sel.SELECTED_COMPANY)

    def _company_option(self, name: str):
        # Vodacom's entry is rendered without a plain text node, so match the item label element
        if name in sel.STRUCTURAL_COMPANY_LOCATORS:
            return self.page.locator(sel.DROPDOWN_ITEM_LABEL).filter(has_text=name).first
        return self.page.get_by_text(name, exact=True)

    def select_company(self, name: str) -> None:
        """Pick a company and wait until the picker label shows it.

        Raises:
            WorkflowError: If the label does not update within the timeout
        """
        self.log(f"selecting company '{name}'")
        self.company_dropdown.click()
        self.wait(1)
        option = self._company_option(name)
        option.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        option.click(force=True)
        self.wait_for_company_label(name)

    def wait_for_company_label(self, name: str, timeout: int = TIMEOUTS.COMPANY_SWITCH_MS) -> None:
        try:
            self.page.wait_for_function(_LABEL_EQUALS_JS, arg=[sel.SELECTED_COMPANY_LABEL, name], timeout=timeout)
        except PlaywrightTimeoutError as e:
            current = self.get_selected_company()
            raise WorkflowError(f"Company label still shows {current!r} after selecting {name!r}") from e

    def get_selected_company(self) -> Optional[str]:
        label = self.page.locator(sel.SELECTED_COMPANY_LABEL)
        if not self.is_visible(label, timeout=TIMEOUTS.QUICK_MS):
            return None
        text = label.text_content() or ""
        return text.strip() or None

    def select_station(self, name: str) -> None:
        self.log(f"selecting station '{name}'")
        self.page.locator(sel.STATION_DROPDOWN).click()
        option = self.page.locator(sel.DROPDOWN_ITEM_LABEL).filter(has_text=name).first
        option.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        option.click()
        self.settle()

    def select_default_station_option(self, preferred: str) -> bool:
        """Pick the preferred station option, or the first option when it is absent."""
        self.page.locator(sel.STATION_DROPDOWN).click()
        preferred_option = self.page.locator(sel.STATION_OPTION).filter(has_text=preferred).first
        if self.is_visible(preferred_option, timeout=TIMEOUTS.QUICK_MS):
            preferred_option.click()
            return True
        self.page.locator(sel.STATION_OPTION).first.click()
        return False

    def read_stack(self) -> Optional[Stack]:
        """Stack currently shown by the Incident/Situation toggle."""
        dropdown = self.page.locator(sel.STACK_DROPDOWN)
        for stack in Stack:
            if self.is_visible(dropdown.get_by_text(stack.value)):
                return stack
        return None

    def _wait_for_loading(self) -> None:
        self.wait(2)
        self.page.wait_for_function(_NOT_LOADING_JS, arg=sel.LOADING_INDICATORS,
                                    timeout=TIMEOUTS.COMPANY_SWITCH_MS)

    def switch_stack(self, target: Stack) -> bool:
        """Show the target stack; returns False if it was already shown.

        Raises:
            RetryExhaustedError: If the toggle never confirms the target stack
        """
        if self.read_stack() is target:
            self.log(f"already on {target.value} stack")
            return False

        def _attempt() -> bool:
            toggle = self.page.locator(sel.STACK_DROPDOWN).get_by_text(target.other.value)
            if self.is_visible(toggle):
                self.log(f"switching to {target.value} stack")
                toggle.click()
                self._wait_for_loading()
            return self.read_stack() is target

        retry_until(_attempt, RETRY.STACK_SWITCH_ATTEMPTS, 1.0, sleep=self.sleep,
                    description=f"switch to {target.value} stack")
        return True

    def accept_terms_and_conditions(self) -> None:
        button = self.page.locator(login_config.TERMS_ACCEPT_BUTTON)
        if self.is_visible(button, timeout=TIMEOUTS.QUICK_MS):
            button.click()
