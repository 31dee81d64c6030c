"""User management: create, rename, re-role and archive users."""

import logging
import re

from config import management_config as sel
from src.pages.management_table_page import ManagementTablePage
from src.shared.constants import TIMEOUTS
from src.shared.errors import WorkflowError


class UserManagementPage(ManagementTablePage):

    NAME_COLUMN = sel.USER_NAME_COLUMN

    def create_user(self, first_name: str, last_name: str, email: str, contact_number: str, role: str) -> None:
        self.log(f"creating user '{first_name} {last_name}'")
        self.page.get_by_role("button", name=re.compile(sel.CREATE_NEW_BUTTON_PATTERN, re.IGNORECASE)).click()
        self.page.locator(sel.USER_FIRST_NAME_INPUT).fill(first_name)
        self.page.locator(sel.USER_LAST_NAME_INPUT).fill(last_name)
        self.page.locator(sel.USER_EMAIL_INPUT).fill(email)
        self.page.locator(sel.USER_CONTACT_INPUT).fill(contact_number)
        self.page.locator(sel.USER_ROLE_DROPDOWN).click()
        self.wait(0.5)
        self.page.get_by_text(role, exact=True).first.click()
        self.page.locator(sel.USER_CREATE_BUTTON).click()
        self.settle()

    def open_editor(self, text: str) -> None:
        edit = self.row(text).first.locator(sel.USER_EDIT_BUTTON).first
        edit.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        edit.click()

    def _save(self) -> None:
        for selector in sel.USER_SAVE_SELECTORS:
            button = self.page.locator(selector).first
            if self.is_visible(button, timeout=2_000):
                button.click()
                self.settle()
                return
        raise WorkflowError("No save button in the user editor")

    def rename_user(self, text: str, first_name: str) -> None:
        self.open_editor(text)
        field = self.page.locator(sel.USER_FIRST_NAME_INPUT)
        field.clear()
        field.fill(first_name)
        self._save()

    def assign_role(self, text: str, role: str) -> str:
        """Give the user in the row matching text a new role.

        Returns:
            The role the user had before

        Raises:
            WorkflowError: If the editor offers no save button
        """
        self.log(f"assigning role '{role}' to '{text}'")
        self.open_editor(text)
        dropdown = self.page.locator(sel.USER_EDIT_ROLE_DROPDOWN)
        dropdown.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        previous = (dropdown.text_content() or "").strip()
        dropdown.click()
        self.page.get_by_role("option", name=role).first.click()
        self._save()
        if not self.is_visible(self.page.get_by_text(sel.USER_UPDATED_TEXT).first, timeout=TIMEOUTS.QUICK_MS):
            self.log("no update confirmation shown", logging.WARNING)
        return previous

    def archive_user(self, text: str) -> None:
        """Archive the user in the row matching text.

        Raises:
            WorkflowError: If the confirmation is not offered
        """
        self.log(f"archiving user '{text}'")
        archive = self.row(text).first.locator(sel.USER_ARCHIVE_BUTTON)
        archive.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        archive.click()
        if not self.confirm():
            raise WorkflowError(f"No confirmation offered when archiving '{text}'")
