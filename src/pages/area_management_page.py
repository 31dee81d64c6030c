"""Area management: create custom areas from the list view, search and archive."""

import re
from typing import Iterable, Optional

from config import management_config as sel
from src.pages.base_page import BasePage, PlaywrightError
from src.shared.constants import TIMEOUTS


class AreaManagementPage(BasePage):

    def click_create_new_by_list(self) -> None:
        self.page.get_by_role("button", name=re.compile(sel.CREATE_NEW_BUTTON_PATTERN, re.IGNORECASE)).click()
        self.page.locator(sel.AREA_BY_LIST_MENUITEM).click()

    def create_area(self, name: str, description: str, areas: Iterable[str]) -> None:
        """Create a custom area from the listed base areas."""
        self.log(f"creating area '{name}'")
        self.click_create_new_by_list()
        for area in areas:
            self.page.get_by_role("checkbox", name=area).click()
        self.page.get_by_role("button", name=sel.AREA_ADD_TO_LIST_NAME).click()
        self.page.get_by_role("textbox", name=sel.AREA_NAME_INPUT_NAME).fill(name)
        self.page.get_by_role("textbox", name=sel.AREA_DESCRIPTION_INPUT_NAME).fill(description)
        self.page.locator(sel.AREA_SAVE_BUTTON).click()

    def search_area(self, name: str) -> None:
        self.page.locator(sel.SEARCH_INPUT).fill(name)
        self.page.keyboard.press("Enter")

    def archive_area(self, name: str) -> None:
        self.log(f"archiving area '{name}'")
        self.page.locator(sel.AREA_ARCHIVE_BUTTON.format(name=name)).click()
        confirm = self.page.locator(sel.AREA_ARCHIVE_CONFIRM)
        confirm.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        confirm.click()

    def is_area_visible(self, name: str, description: Optional[str] = None) -> bool:
        if not self.is_visible(self.page.get_by_text(name).first, timeout=TIMEOUTS.SHORT_MS):
            return False
        if description:
            return self.is_visible(self.page.get_by_text(description).first, timeout=TIMEOUTS.QUICK_MS)
        return True

    def wait_for_area_gone(self, name: str) -> bool:
        try:
            self.page.get_by_text(name).first.wait_for(state="hidden", timeout=TIMEOUTS.SHORT_MS)
            return True
        except PlaywrightError as e:
            self.log(f"area '{name}' still shown: {e}")
            return False
