"""Station management: create stations with linked users and areas, rename and archive."""

from typing import Optional

from config import management_config as sel
from src.pages.management_table_page import ManagementTablePage
from src.shared.constants import RETRY, TIMEOUTS

LINK_LABELS = {
    'User': 'Link Users',
    'Area': 'Link Areas',
}


class StationManagementPage(ManagementTablePage):

    NAME_COLUMN = sel.STATION_NAME_COLUMN

    def _link(self, kind: str, query: str, option: str) -> None:
        field = self.page.locator(sel.STATION_LINK_INPUT.format(label=LINK_LABELS[kind]))
        field.click()
        field.fill(query)
        self.page.get_by_text(option).first.click()
        # Clicking the form title closes the picker
        self.page.locator(sel.STATION_DETAILS_TITLE).click()

    def create_station(self, name: str, user: Optional[str] = None, area: Optional[str] = None,
                       user_query: Optional[str] = None, area_query: Optional[str] = None) -> None:
        """Create a station, optionally linking one user and one area picked by search."""
        self.log(f"creating station '{name}'")
        create = self.page.get_by_text(sel.STATION_CREATE_NEW_TEXT, exact=True)
        create.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        create.click()
        self.page.locator(sel.STATION_NAME_INPUT).fill(name)
        if user:
            self._link('User', user_query or user, user)
        if area:
            self._link('Area', area_query or area, area)
        self.page.locator(sel.STATION_SAVE_BUTTON).click()

    def shows_linked(self, station: str, kind: str, expected: str) -> bool:
        """Open the station's linked users or areas and check expected is listed."""
        if kind not in LINK_LABELS:
            raise ValueError(f"Unknown linked item kind: {kind}")
        link = self.row(station).first.locator(sel.STATION_LINKED_LINK.format(kind=kind)).first
        link.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        link.click()
        try:
            return self.is_visible(self.page.get_by_text(expected).first, timeout=TIMEOUTS.QUICK_MS)
        finally:
            self.page.locator(sel.MODAL_CLOSE).click()

    def rename_station(self, name: str, new_name: str) -> None:
        self.log(f"renaming station '{name}' to '{new_name}'")
        edit = self.row(name).first.locator(sel.STATION_EDIT_BUTTON).first
        edit.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        edit.click()
        self.page.locator(sel.STATION_NAME_INPUT).fill(new_name)
        self.page.locator(sel.STATION_SAVE_BUTTON).click()

    def archive_station(self, name: str) -> None:
        self.log(f"archiving station '{name}'")
        archive = self.row(name).first.locator(sel.STATION_ARCHIVE_BUTTON)
        archive.wait_for(state="visible", timeout=TIMEOUTS.QUICK_MS)
        archive.click()
        self.page.locator(sel.DIALOG_CONFIRM).click()
        self.wait(2)

    def archive_all(self, name: str) -> int:
        """Archive every station listed under name; returns how many were archived."""
        archived = 0
        for _ in range(RETRY.CLEANUP_MAX_ITERATIONS):
            if self.page.get_by_text(name).count() == 0:
                break
            self.archive_station(name)
            archived += 1
        return archived
