"""Tests for the area and company management page objects."""

import pytest

from config import management_config as sel
from src.pages.area_management_page import AreaManagementPage
from src.pages.base_page import PlaywrightTimeoutError
from src.pages.company_management_page import CompanyManagementPage

CREATE_NEW = f"role=button:{sel.CREATE_NEW_BUTTON_PATTERN}"
COMPANY = "Automation Holdings"


class TestAreaManagementPage:

    def test_create_area(self, fake_page):
        AreaManagementPage(fake_page).create_area(
            "Automation area", "Created by the suite", ["Sandton", "Rosebank"])

        fake_page.locators[CREATE_NEW].click.assert_called_once()
        fake_page.locators[sel.AREA_BY_LIST_MENUITEM].click.assert_called_once()
        fake_page.locators["role=checkbox:Sandton"].click.assert_called_once()
        fake_page.locators["role=checkbox:Rosebank"].click.assert_called_once()
        fake_page.locators[f"role=button:{sel.AREA_ADD_TO_LIST_NAME}"].click.assert_called_once()
        fake_page.locators[f"role=textbox:{sel.AREA_NAME_INPUT_NAME}"].fill.assert_called_once_with(
            "Automation area")
        fake_page.locators[f"role=textbox:{sel.AREA_DESCRIPTION_INPUT_NAME}"].fill.assert_called_once_with(
            "Created by the suite")
        fake_page.locators[sel.AREA_SAVE_BUTTON].click.assert_called_once()

    def test_search_area(self, fake_page):
        AreaManagementPage(fake_page).search_area("Automation area")
        fake_page.locators[sel.SEARCH_INPUT].fill.assert_called_once_with("Automation area")
        fake_page.keyboard.press.assert_called_once_with("Enter")

    def test_archive_area(self, fake_page):
        confirm = fake_page.locators[sel.AREA_ARCHIVE_CONFIRM]
        confirm.is_visible.return_value = True

        AreaManagementPage(fake_page).archive_area("Automation area")

        fake_page.locators[sel.AREA_ARCHIVE_BUTTON.format(name="Automation area")].click.assert_called_once()
        confirm.click.assert_called_once()

    def test_archive_confirmation_missing(self, fake_page):
        with pytest.raises(PlaywrightTimeoutError):
            AreaManagementPage(fake_page).archive_area("Automation area")

    def test_area_visible_with_description(self, fake_page):
        fake_page.locators["text=Automation area"].is_visible.return_value = True
        areas = AreaManagementPage(fake_page)

        assert areas.is_area_visible("Automation area") is True
        assert areas.is_area_visible("Automation area", "Created by the suite") is False

    def test_wait_for_area_gone(self, fake_page):
        areas = AreaManagementPage(fake_page)
        assert areas.wait_for_area_gone("Automation area") is True

        fake_page.locators["text=Automation area"].is_visible.return_value = True
        assert areas.wait_for_area_gone("Automation area") is False


class TestCompanyManagementPage:

    @pytest.fixture
    def row(self, fake_page):
        row = fake_page.locators[sel.COMPANY_ROW.format(name=COMPANY)]
        row.is_visible.return_value = True
        return row

    def test_create_company(self, fake_page):
        CompanyManagementPage(fake_page).create_company(COMPANY, "2024/123456/07", "ops@example.com", "Jane Doe")

        fake_page.locators[CREATE_NEW].click.assert_called_once()
        fake_page.locators[f"text={COMPANY}"].click.assert_called_once()
        fake_page.locators[sel.COMPANY_REGISTRATION_INPUT].fill.assert_called_once_with("2024/123456/07")
        fake_page.locators[sel.COMPANY_EMAIL_INPUT].fill.assert_called_once_with("ops@example.com")
        fake_page.locators[sel.COMPANY_CONTACT_INPUT].fill.assert_called_once_with("Jane Doe")
        fake_page.locators[sel.COMPANY_CREATE_BUTTON].click.assert_called_once()

    def test_company_listed(self, fake_page, row):
        companies = CompanyManagementPage(fake_page)
        assert companies.is_company_listed(COMPANY) is True
        assert companies.is_company_listed("Someone Else", timeout=10) is False

    def test_search_company(self, fake_page):
        CompanyManagementPage(fake_page).search_company(COMPANY)
        fake_page.locators[sel.SEARCH_TOGGLE].click.assert_called_once()
        fake_page.locators[sel.SEARCH_INPUT].fill.assert_called_once_with(COMPANY)

    def test_edit_contact_person(self, fake_page, row):
        CompanyManagementPage(fake_page).edit_contact_person(COMPANY, "John Smith")

        row.click.assert_called_once()
        fake_page.locators[sel.COMPANY_CONTACT_INPUT].fill.assert_called_once_with("John Smith")
        fake_page.locators[sel.COMPANY_UPDATE_BUTTON].click.assert_called_once()

    def test_read_contact_person(self, fake_page, row):
        row.text_content.return_value = "  John Smith "
        assert CompanyManagementPage(fake_page).read_contact_person(COMPANY) == "John Smith"

    def test_read_contact_person_missing_row(self, fake_page):
        assert CompanyManagementPage(fake_page).read_contact_person(COMPANY) is None

    def test_archive_company(self, fake_page, row):
        fake_page.locators[sel.ARCHIVE_CONFIRM_CHECKBOX].is_visible.return_value = True

        CompanyManagementPage(fake_page).archive_company(COMPANY)

        row.click.assert_called_once()
        fake_page.locators[sel.ARCHIVE_CONFIRM_CHECKBOX].click.assert_called_once()
        fake_page.locators[sel.ARCHIVE_YES_BUTTON].click.assert_called_once()
