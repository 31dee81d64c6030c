"""Side navigation menu."""

from config import menu_config as sel
from src.pages.base_page import BasePage
from src.shared.constants import TIMEOUTS
from src.shared.errors import WorkflowError
from src.shared.retry import retry_until

_SIDENAV_HIDDEN_JS = "(el, cls) => el.classList.contains(cls)"


class MenuPage(BasePage):

    def _sidenav_hidden(self) -> bool:
        sidenav = self.page.locator(sel.SIDENAV)
        if not self.is_visible(sidenav):
            return True
        return bool(sidenav.evaluate(_SIDENAV_HIDDEN_JS, sel.SIDENAV_HIDDEN_CLASS))

    def open_menu(self) -> None:
        """Open the burger menu unless the side navigation is already expanded."""
        burger = self.page.locator(sel.BURGER_BUTTON)
        burger.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        if self._sidenav_hidden():
            burger.click(force=True)
            self.page.locator(sel.SIDENAV).wait_for(state="visible", timeout=TIMEOUTS.QUICK_MS)

    def _click(self, selector: str) -> None:
        item = self.page.locator(selector).first
        item.scroll_into_view_if_needed()
        item.click()

    def navigate_to(self, menu: str) -> None:
        """Click a top-level menu entry (Command, History, Sites, Reports, ...).

        Raises:
            ValueError: If the menu name is unknown
        """
        if menu not in sel.MENU_ITEMS:
            raise ValueError(f"No locator defined for menu: {menu}")
        self.open_menu()
        self.log(f"navigating to {menu}")
        self._click(f'[data-test-id="{sel.MENU_ITEMS[menu]}"]')

    def navigate_to_configuration(self, submenu: str) -> None:
        if submenu not in sel.CONFIGURATION_ITEMS:
            raise ValueError(f"No locator defined for configuration submenu: {submenu}")
        self.navigate_to('Configurations')
        self.log(f"opening configuration '{submenu}'")
        self._click(f'[data-test-id="{sel.CONFIGURATION_ITEMS[submenu]}"]')

    def navigate_to_reports(self, submenu: str) -> None:
        if submenu not in sel.REPORT_ITEMS:
            raise ValueError(f"No locator defined for reports submenu: {submenu}")
        self.navigate_to('Reports')
        self.log(f"opening report '{submenu}'")
        self._click(sel.REPORT_ITEMS[submenu])

    def navigate_to_alert_reports(self) -> None:
        self.navigate_to_reports('Alert Reports')

    def navigate_to_dispatch_reports(self) -> None:
        """Alert Reports, then its Dispatch Reports tab (re-opening Alert Reports between attempts)."""
        self.navigate_to_alert_reports()
        self.wait(3)

        def _find_tab():
            for selector in sel.DISPATCH_TAB_SELECTORS:
                tab = self.page.locator(selector).first
                if self.is_visible(tab, timeout=TIMEOUTS.QUICK_MS):
                    return tab
            self.navigate_to_alert_reports()
            return None

        try:
            tab = retry_until(_find_tab, 3, 3.0, sleep=self.sleep, description="Dispatch Reports tab")
        except WorkflowError as e:
            raise WorkflowError("Dispatch Reports tab not found after retries") from e
        tab.click()
        self.settle()
