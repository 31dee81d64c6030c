"""Search, pagination and column toggles shared by the management tables."""

import re
from typing import Tuple

from config import management_config as sel
from src.pages.base_page import BasePage, PlaywrightError
from src.shared.constants import TIMEOUTS
from src.shared.errors import WorkflowError

PAGE_BUTTONS = {
    'next': sel.NEXT_PAGE_BUTTON,
    'previous': sel.PREVIOUS_PAGE_BUTTON,
    'first': sel.FIRST_PAGE_BUTTON,
    'last': sel.LAST_PAGE_BUTTON,
}


class ManagementTablePage(BasePage):
    """A configuration screen built around one searchable, paginated table.

    Subclasses set NAME_COLUMN to the column picker entry of their name column.
    """

    NAME_COLUMN = ''

    def wait_until_loaded(self) -> None:
        self.page.locator(sel.LINKED_ITEMS_TABLE).wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)

    def row(self, text: str):
        return self.page.locator(sel.ROW.format(name=text))

    def search(self, text: str) -> None:
        """Search the table, opening the search box first when it is collapsed."""
        search = self.page.locator(sel.SEARCH_INPUT)
        if not self.is_visible(search):
            self.page.locator(sel.SEARCH_TOGGLE).click()
        search.fill(text)
        search.press("Enter")
        self.settle()

    def is_listed(self, text: str, timeout: int = TIMEOUTS.SHORT_MS) -> bool:
        return self.is_visible(self.page.get_by_text(text).first, timeout=timeout)

    def wait_until_gone(self, text: str) -> bool:
        """Wait for the row matching text to leave the table; returns False if it stays."""
        try:
            self.row(text).first.wait_for(state="hidden", timeout=TIMEOUTS.SHORT_MS)
            return True
        except PlaywrightError as e:
            self.log(f"'{text}' still listed: {e}")
            return False

    def has_next_page(self) -> bool:
        return self.is_enabled(self.page.locator(sel.NEXT_PAGE_BUTTON))

    def go_to_page(self, which: str) -> None:
        """Click the 'next', 'previous', 'first' or 'last' page button."""
        try:
            selector = PAGE_BUTTONS[which]
        except KeyError:
            raise ValueError(f"Unknown page button: {which}") from None
        self.page.locator(selector).click()

    def read_page_label(self) -> Tuple[int, int]:
        """Current and total page numbers from the 'Page X of Y' label.

        Raises:
            WorkflowError: If no label is shown
        """
        label = self.page.get_by_text(re.compile(sel.PAGE_LABEL_PATTERN, re.IGNORECASE)).first
        if not self.is_visible(label, timeout=TIMEOUTS.QUICK_MS):
            raise WorkflowError("No page label shown under the table")
        match = re.search(sel.PAGE_LABEL_PATTERN, label.text_content() or "", re.IGNORECASE)
        if match is None:
            raise WorkflowError(f"Unreadable page label: {label.text_content()!r}")
        return int(match.group(1)), int(match.group(2))

    def set_rows_per_page(self, rows: int) -> None:
        self.page.locator(sel.ROWS_PER_PAGE_DROPDOWN).select_option(str(rows))

    def toggle_name_column(self) -> None:
        """Hide or show the name column through the column picker."""
        button = self.page.locator(sel.COLUMN_BUTTON)
        button.click()
        self.page.locator(self.NAME_COLUMN).click()
        button.click()

    def confirm(self) -> bool:
        """Click the first confirmation button offered; returns False when none is shown."""
        for selector in sel.CONFIRM_SELECTORS:
            button = self.page.locator(selector).first
            if self.is_visible(button, timeout=2_000):
                button.click()
                return True
        return False
