"""Sites screen: site search and the manual alert dialog."""

from config import sites_config as sel
from src.pages.base_page import BasePage
from src.shared.constants import TIMEOUTS
from src.shared.errors import WorkflowError


class SitesPage(BasePage):

    def search_site(self, site: str) -> None:
        self.page.locator(sel.SEARCH_TOGGLE).click()
        search = self.page.locator(sel.SEARCH_INPUT)
        search.fill(site)
        search.press("Enter")

    def wait_for_site_row(self, site: str) -> None:
        """Wait for the site in the results; long names may be rendered truncated.

        Raises:
            WorkflowError: If neither the full name nor its prefix appears
        """
        if self.is_visible(self.page.get_by_text(site).first, timeout=TIMEOUTS.SHORT_MS):
            return
        prefix = site[:sel.SITE_PREFIX_LENGTH]
        if self.is_visible(self.page.get_by_text(prefix).first, timeout=TIMEOUTS.QUICK_MS):
            self.log(f"matched site by prefix '{prefix}'")
            return
        raise WorkflowError(f"Site '{site}' not found in search results")

    def create_manual_alert(self, site: str) -> None:
        """Create a manual alert for site and wait for the dialog to close."""
        self.log(f"creating manual alert for '{site}'")
        self.search_site(site)
        self.wait_for_site_row(site)

        self.page.locator(sel.CREATE_ALERT_BUTTON).first.click()
        self.page.locator(sel.ALERT_TYPE_RADIO).first.click()
        self.page.get_by_role("button", name=sel.CREATE_BUTTON_NAME).click()
        self.page.locator("p").filter(has_text=sel.DIALOG_TITLE).wait_for(
            state="hidden", timeout=TIMEOUTS.DIALOG_CLOSE_MS)
