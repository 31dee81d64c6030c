"""Tests for the SOP panel."""

import pytest

from config import dashboard_config
from config import sop_config as sel
from src.pages.base_page import PlaywrightTimeoutError
from src.pages.sop_page import SopPage
from src.shared.errors import WorkflowError

YES_BUTTONS = 'button:has-text("Yes")'
SITE_CARD = dashboard_config.SITE_CARD_NAME_XPATH.format(name="BDFD_Boeing")


@pytest.fixture
def sop_tab(fake_page):
    fake_page.locators[sel.SOP_TAB].is_visible.return_value = True
    return fake_page


class TestOpenSopTab:

    def test_primary_locator(self, sop_tab):
        SopPage(sop_tab).open_sop_tab()
        sop_tab.locators[sel.SOP_TAB].click.assert_called_once()

    def test_text_fallback(self, fake_page):
        fake_page.locators[sel.SOP_TAB_FALLBACK].is_visible.return_value = True
        SopPage(fake_page).open_sop_tab()
        fake_page.locators[sel.SOP_TAB_FALLBACK].click.assert_called_once()

    def test_not_found(self, fake_page):
        with pytest.raises(WorkflowError, match="SOP tab not found"):
            SopPage(fake_page).open_sop_tab()


class TestCompleteSop:

    def test_already_complete(self, sop_tab):
        sop_tab.locators["body"].is_visible.return_value = True
        SopPage(sop_tab).complete_sop()
        sop_tab.locators[YES_BUTTONS].click.assert_not_called()

    def test_answers_first_enabled_button(self, sop_tab):
        # Incomplete when checked, complete once answered
        sop_tab.locators["body"].is_visible.side_effect = [False, True]
        buttons = sop_tab.locators[YES_BUTTONS]
        buttons.count.return_value = 2
        buttons.is_visible.return_value = True
        buttons.is_enabled.return_value = True

        SopPage(sop_tab).complete_sop()

        buttons.click.assert_called_once_with(force=True)

    def test_custom_answer(self, sop_tab):
        sop_tab.locators["body"].is_visible.side_effect = [False, True]
        buttons = sop_tab.locators['button:has-text("No")']
        buttons.count.return_value = 1
        buttons.is_visible.return_value = True
        buttons.is_enabled.return_value = True

        SopPage(sop_tab).complete_sop(answer="No")

        buttons.click.assert_called_once_with(force=True)

    def test_generic_answer_button_fallback(self, sop_tab):
        sop_tab.locators["body"].is_visible.side_effect = [False, True]
        fallback = sop_tab.locators[sel.ANSWER_BUTTON_FALLBACK]
        fallback.count.return_value = 1
        fallback.is_visible.return_value = True

        SopPage(sop_tab).complete_sop()

        fallback.click.assert_called_once()

    def test_no_clickable_answers(self, sop_tab):
        with pytest.raises(WorkflowError, match="No clickable answer buttons found in SOP"):
            SopPage(sop_tab).complete_sop()

    def test_banner_never_shows(self, sop_tab):
        buttons = sop_tab.locators[YES_BUTTONS]
        buttons.count.return_value = 1
        buttons.is_visible.return_value = True
        buttons.is_enabled.return_value = True

        with pytest.raises(WorkflowError, match="SOP not completed"):
            SopPage(sop_tab).complete_sop()


class TestActions:

    def test_escalate_waits_for_alert_to_leave_site(self, fake_page):
        fake_page.locators[sel.ESCALATE_BUTTON].is_visible.return_value = True
        fake_page.locators[SITE_CARD].is_visible.return_value = True
        alerts = fake_page.locators[dashboard_config.SITE_ALERT_CARDS]
        alerts.count.side_effect = [3, 3, 2]

        assert SopPage(fake_page).escalate("BDFD_Boeing") is True
        fake_page.locators[sel.ESCALATE_BUTTON].click.assert_called_once()

    def test_escalate_site_card_gone(self, fake_page):
        fake_page.locators[sel.ESCALATE_BUTTON].is_visible.return_value = True
        fake_page.locators[dashboard_config.SITE_ALERT_CARDS].count.return_value = 1

        assert SopPage(fake_page).escalate("BDFD_Boeing") is True

    def test_escalate_ignores_other_sites(self, fake_page):
        fake_page.locators[sel.ESCALATE_BUTTON].is_visible.return_value = True
        fake_page.locators[SITE_CARD].is_visible.return_value = True
        fake_page.locators[dashboard_config.SITE_ALERT_CARDS].count.return_value = 1
        fake_page.locators[dashboard_config.ANY_ALERT_CARD].count.return_value = 0

        assert SopPage(fake_page).escalate("BDFD_Boeing") is False

    def test_dispatch_clicks_last_button(self, fake_page):
        SopPage(fake_page).dispatch()
        fake_page.locators[sel.DISPATCH_BUTTON].click.assert_called_once()

    def test_dismiss_requires_button(self, fake_page):
        with pytest.raises(PlaywrightTimeoutError):
            SopPage(fake_page).dismiss()

    def test_resolve_all_absent(self, fake_page):
        assert SopPage(fake_page).resolve_all() is False

    def test_confirm_positive(self, fake_page):
        fake_page.locators[sel.POSITIVE_BUTTON].is_visible.return_value = True
        assert SopPage(fake_page).confirm_positive() is True
