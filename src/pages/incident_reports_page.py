"""Incident report wizard (Alert Reports) and the incident reports list.

The wizard runs: report details -> site and incident selection -> map
snapshot -> preview -> export. The snapshot step is slow and occasionally
stalls, so proceed_to_export() retries it and checks before each retry
whether the wizard moved on anyway.
"""

import re
from datetime import datetime, timezone
from pathlib import Path
from typing import NamedTuple, Optional, Union

from config import reports_config as sel
from src.pages.base_page import BasePage, PlaywrightError, PlaywrightTimeoutError
from src.shared.constants import REPORTS, RETRY, TIMEOUTS
from src.shared.errors import RetryExhaustedError, WorkflowError
from src.shared.retry import retry_until

__all__ = [
    'DownloadedReport',
    'IncidentReportsPage',
    'unique_report_name',
]


def unique_report_name(prefix: str = sel.REPORT_NAME_PREFIX, now: Optional[datetime] = None) -> str:
    """Report name with a filesystem-safe UTC timestamp, unique per run."""
    now = now or datetime.now(timezone.utc)
    timestamp = re.sub(r'[:.]', '-', now.isoformat(timespec='milliseconds'))
    return f"{prefix} {timestamp}"


class DownloadedReport(NamedTuple):
    path: Path
    row_text: str


class IncidentReportsPage(BasePage):

    @property
    def next_button(self):
        return self.page.get_by_text(sel.NEXT_TEXT, exact=False).first

    @property
    def export_button(self):
        return self.page.locator(sel.EXPORT_BUTTON).first

    @property
    def incident_checkboxes(self):
        return self.page.locator(sel.INCIDENT_CHECKBOXES)

    def start_new_report(self, name: str, email: str = "") -> None:
        """Open the wizard, fill the details step and advance to site selection."""
        self.log(f"starting incident report '{name}'")
        self.page.get_by_text(sel.CREATE_NEW_BUTTON_NAME, exact=False).first.click()
        name_field = self.page.locator(sel.REPORT_NAME_INPUT).first
        name_field.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        name_field.fill(name)
        if email:
            self.page.locator(sel.EMAIL_INPUT).first.fill(email)
        self.next_button.click()

    def wait_for_incidents(self, timeout: int = TIMEOUTS.NETWORK_IDLE_MS) -> int:
        """Wait for the incident table or its empty state; returns the incident count."""
        loaded = self.page.locator(sel.INCIDENT_CHECKBOXES).first.or_(
            self.page.get_by_text(re.compile(sel.NO_INCIDENTS_PATTERN, re.IGNORECASE)).first)
        try:
            loaded.wait_for(state="visible", timeout=timeout)
        except PlaywrightTimeoutError:
            self.log("neither incidents nor an empty state rendered")
        return self.incident_checkboxes.count()

    def select_site(self, max_options: int = REPORTS.SITE_OPTIONS_TO_TRY) -> Optional[str]:
        """Pick the first site option that yields incidents.

        Returns:
            The selected site label, or None if none of the options had incidents
        """
        search = self.page.locator(sel.SITE_SEARCH_INPUT)
        search.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        search.click()
        options = self.page.locator(sel.SITE_OPTIONS)
        options.first.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)

        for i in range(min(options.count(), max_options)):
            option = options.nth(i)
            label = (option.text_content() or "").strip()
            option.click(force=True)
            self.page.locator("body").click()
            if self.wait_for_incidents(timeout=20_000) > 0:
                self.log(f"site '{label}' has incidents")
                return label
            # Deselect before trying the next option
            search.click()
            self.page.locator(sel.SITE_OPTIONS).nth(i).click(force=True)
            self.page.locator("body").click()
        return None

    def select_incidents(self, count: int = 1) -> int:
        """Tick up to count incidents and add them to the export selection; returns how many."""
        boxes = self.incident_checkboxes
        selected = min(count, boxes.count())
        if selected == 0:
            raise WorkflowError("No incidents available to select")
        for i in range(selected):
            boxes.nth(i).click()
        self.page.get_by_text(sel.ADD_TO_EXPORT_TEXT, exact=False).click()
        self.next_button.click()
        return selected

    def _on_snapshot_step(self) -> bool:
        return (self.is_visible(self.page.get_by_text(sel.TAKE_SNAPSHOT_TEXT, exact=False).first)
                or self.is_visible(self.page.get_by_text(sel.MAP_SNAPSHOT_TEXT, exact=False).first))

    def reached_export_step(self) -> bool:
        """Whether the wizard shows the preview export step.

        The step renders as a 'Preview export' heading, as the incident
        carousel, or as an Export button once the map snapshot controls
        are gone; any one of these counts.
        """
        if self.is_visible(self.page.get_by_text(sel.PREVIEW_EXPORT_TEXT, exact=False).first):
            return True
        if self.is_visible(self.page.locator(sel.INCIDENT_CAROUSEL).first):
            return True
        return self.is_visible(self.export_button) and not self._on_snapshot_step()

    def _wait_for_export_step(self) -> bool:
        try:
            retry_until(self.reached_export_step, RETRY.PREVIEW_POLL_ATTEMPTS, 1.0,
                        sleep=self.sleep, description="preview export step")
        except RetryExhaustedError:
            return False
        return True

    def _wait_for_snapshot(self, attempt: int, attempts: int) -> bool:
        """Take the map snapshot; False means the snapshot did not finish processing."""
        snapshot = self.page.get_by_text(sel.TAKE_SNAPSHOT_TEXT, exact=False).first
        if not self.is_visible(snapshot):
            return True
        snapshot.click()
        self.wait(5)
        try:
            self.page.wait_for_function(sel.SNAPSHOT_READY_JS, timeout=TIMEOUTS.SNAPSHOT_READY_MS)
        except PlaywrightTimeoutError:
            self.log(f"snapshot still processing on attempt {attempt}/{attempts}")
            return False
        self.wait(3)
        return True

    def _click_next_when_enabled(self) -> bool:
        for _ in range(RETRY.NEXT_CLICK_ATTEMPTS):
            if self.is_visible(self.next_button):
                if self.is_enabled(self.next_button):
                    self.next_button.click()
                    self.wait(2)
                    return True
                self.wait(3)
        return False

    def _recover(self) -> bool:
        """Check whether a failed attempt still left the wizard able to move on.

        True if the wizard already advanced, or an enabled Next takes it to the
        preview step. Otherwise steps Back when the snapshot controls are gone
        so the next attempt can retake it.
        """
        if self.reached_export_step():
            return True
        if self._on_snapshot_step() and not self.is_enabled(self.next_button):
            return False
        if self.is_visible(self.next_button) and self.is_enabled(self.next_button):
            self.next_button.click()
            self.wait(2)
            if self._wait_for_export_step():
                return True
        back = self.page.get_by_text(sel.BACK_TEXT, exact=True)
        if not self._on_snapshot_step() and self.is_visible(back):
            back.click()
            self.wait(1)
        else:
            self.wait(1.5)
        return False

    def proceed_to_export(self, attempts: int = RETRY.SNAPSHOT_ATTEMPTS) -> None:
        """Drive the snapshot step until the wizard shows the preview export step.

        Raises:
            WorkflowError: If the preview step is still not reached after all attempts
        """
        if self.reached_export_step():
            return

        for attempt in range(1, attempts + 1):
            self.log(f"snapshot attempt {attempt}/{attempts}")
            if self._wait_for_snapshot(attempt, attempts) and self._click_next_when_enabled():
                if self._wait_for_export_step():
                    return
            if self._recover():
                self.log(f"wizard reached the preview step after attempt {attempt}")
                return

        raise WorkflowError(f"Failed to reach the preview export step after {attempts} snapshot attempts")

    def export(self) -> None:
        """Click Export and wait for the newest report to become downloadable."""
        button = self.export_button
        button.wait_for(state="visible", timeout=TIMEOUTS.EXPECT_MS)
        button.click()
        first_download = self.page.locator(
            f'tbody tr:first-child {sel.DOWNLOAD_BUTTONS}, table tr:first-child {sel.DOWNLOAD_BUTTONS}').first
        try:
            first_download.wait_for(state="visible", timeout=TIMEOUTS.REPORT_DOWNLOAD_MS)
        except PlaywrightTimeoutError as e:
            raise WorkflowError("Exported report never became downloadable") from e

    def _find_download_button(self, max_pages: int):
        for _ in range(max_pages):
            buttons = self.page.locator(sel.DOWNLOAD_BUTTONS)
            for i in range(buttons.count()):
                button = buttons.nth(i)
                if self.is_visible(button):
                    return button
            next_page = self.page.get_by_role("button", name=sel.NEXT_PAGE_BUTTON_NAME)
            if not self.is_enabled(next_page):
                break
            next_page.click()
            self.settle(timeout=TIMEOUTS.SHORT_MS)
            self.wait(0.5)
        return None

    def download_first_report(self, dest_dir: Union[str, Path] = REPORTS.DOWNLOAD_DIR,
                              max_pages: int = REPORTS.MAX_LIST_PAGES) -> Optional[DownloadedReport]:
        """Download the first report on any list page.

        Tries a browser download first; when the report opens in a viewer
        popup instead, fetches its URL through the page's request context.

        Returns:
            The saved file and the text of its table row, or None if no report is downloadable
        """
        button = self._find_download_button(max_pages)
        if button is None:
            self.log("no downloadable report found")
            return None

        row = button.locator('xpath=ancestor::tr[1]')
        row_text = " ".join((row.text_content() or "").split())
        dest = Path(dest_dir)
        dest.mkdir(parents=True, exist_ok=True)
        fallback_name = f"incident-report-{int(datetime.now().timestamp() * 1000)}.pdf"

        try:
            with self.page.expect_download(timeout=TIMEOUTS.EXPECT_MS) as download_info:
                button.click()
            download = download_info.value
            path = dest / (download.suggested_filename or fallback_name)
            download.save_as(str(path))
        except PlaywrightError:
            self.log("no download event, reading the report from its popup")
            with self.page.expect_popup(timeout=TIMEOUTS.EXPECT_MS) as popup_info:
                button.click()
            popup = popup_info.value
            try:
                popup.wait_for_load_state("networkidle", timeout=TIMEOUTS.LOGIN_REDIRECT_MS)
            except PlaywrightTimeoutError:
                self.log("report popup did not go idle")
            response = self.page.request.get(popup.url)
            if not response.ok:
                raise WorkflowError(f"Failed to fetch report from {popup.url}: HTTP {response.status}")
            path = dest / fallback_name
            path.write_bytes(response.body())
            popup.close()

        self.log(f"saved report to {path}")
        return DownloadedReport(path, row_text)
