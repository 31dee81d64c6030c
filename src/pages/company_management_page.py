"""Company management: create, search, edit contact person and archive."""

import re
from typing import Optional

from config import management_config as sel
from src.pages.base_page import BasePage
from src.shared.constants import TIMEOUTS


class CompanyManagementPage(BasePage):

    def _row(self, company: str):
        return self.page.locator(sel.COMPANY_ROW.format(name=company))

    def create_company(self, company: str, registration_number: str, email: str, contact_person: str) -> None:
        """Fill the create form (company picked from the unassigned list) and save."""
        self.log(f"creating company '{company}'")
        self.page.get_by_role("button", name=re.compile(sel.CREATE_NEW_BUTTON_PATTERN, re.IGNORECASE)).click()
        self.page.locator(sel.COMPANY_NAME_DROPDOWN).click()
        self.wait(1)
        self.page.get_by_text(company, exact=True).click()
        self.page.locator(sel.COMPANY_REGISTRATION_INPUT).fill(registration_number)
        self.page.locator(sel.COMPANY_EMAIL_INPUT).fill(email)
        self.page.locator(sel.COMPANY_CONTACT_INPUT).fill(contact_person)
        self.page.locator(sel.COMPANY_CREATE_BUTTON).click()

    def search_company(self, company: str) -> None:
        self.page.locator(sel.SEARCH_TOGGLE).click()
        self.page.locator(sel.SEARCH_INPUT).fill(company)
        self.page.keyboard.press("Enter")

    def is_company_listed(self, company: str, timeout: int = TIMEOUTS.SHORT_MS) -> bool:
        return self.is_visible(self._row(company).first, timeout=timeout)

    def edit_contact_person(self, company: str, contact_person: str) -> None:
        edit = self._row(company).locator(sel.COMPANY_EDIT_BUTTON)
        edit.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        edit.click()
        self.page.locator(sel.COMPANY_CONTACT_INPUT).fill(contact_person)
        self.page.locator(sel.COMPANY_UPDATE_BUTTON).click()

    def read_contact_person(self, company: str) -> Optional[str]:
        cell = self._row(company).locator(sel.COMPANY_CONTACT_CELL).first
        if not self.is_visible(cell, timeout=TIMEOUTS.SHORT_MS):
            return None
        return (cell.text_content() or "").strip()

    def archive_company(self, company: str) -> None:
        """Archive a company, ticking the confirmation checkbox first."""
        self.log(f"archiving company '{company}'")
        archive = self._row(company).locator(sel.COMPANY_ARCHIVE_BUTTON)
        archive.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        archive.click()
        confirm = self.page.locator(sel.ARCHIVE_CONFIRM_CHECKBOX)
        confirm.wait_for(state="visible", timeout=TIMEOUTS.QUICK_MS)
        confirm.click()
        self.page.locator(sel.ARCHIVE_YES_BUTTON).click()
