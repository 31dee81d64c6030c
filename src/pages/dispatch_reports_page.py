"""Dispatch reports: the create-report form and the reports table."""

import re
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Union

from config import reports_config as sel
from src.pages.base_page import BasePage, PlaywrightError
from src.shared.constants import REPORTS, TIMEOUTS
from src.shared.errors import WorkflowError


class DispatchReportsPage(BasePage):

    def __init__(self, page, clock: Callable[[], datetime] = datetime.now):
        super().__init__(page)
        self.clock = clock

    # Create form

    def click_create_new(self) -> None:
        self.log("opening create-report dialog")
        self.page.get_by_role("button", name=sel.CREATE_NEW_BUTTON_NAME).click()
        self.page.locator(sel.DIALOG).wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        self.page.get_by_text(sel.REPORT_DETAILS_TEXT).first.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)

    def select_file_format(self, file_format: str = 'xlsx') -> None:
        """Choose csv or xlsx; an unavailable option leaves the form default."""
        option = sel.FILE_FORMAT_OPTIONS.get(file_format.lstrip('.').lower())
        if option is None:
            raise ValueError(f"Unsupported report format: {file_format}")
        try:
            self.page.locator(sel.FILE_FORMAT_TRIGGER).click(timeout=TIMEOUTS.QUICK_MS)
            self.wait(0.5)
            self.page.get_by_text(option).click(timeout=TIMEOUTS.QUICK_MS)
        except PlaywrightError as e:
            self.log(f"could not select format {file_format}, keeping the default: {e}")

    def fill_report_name(self, name: str) -> None:
        field = self.page.locator(sel.TEXT_INPUTS).first
        field.click()
        field.fill(name)

    def fill_email(self, email: str = "") -> None:
        if email:
            self.page.locator(sel.TEXT_INPUTS).nth(1).fill(email)

    def _click_today(self) -> None:
        for selector in sel.TODAY_BUTTON_SELECTORS:
            button = self.page.locator(selector).first
            if self.is_visible(button, timeout=1_000):
                button.click()
                return
        day = str(self.clock().day)
        self.log(f"no Today button in the calendar, clicking day {day}")
        self.page.locator(sel.CALENDAR_DAY.format(day=day)).first.click(timeout=TIMEOUTS.QUICK_MS)

    def _pick_today(self, field_selector: str) -> None:
        self.page.locator(field_selector).click()
        self.wait(1)
        try:
            self._click_today()
        except PlaywrightError:
            self.page.keyboard.press("Escape")
            raise

    def select_today_range(self) -> None:
        """Set both the From and To date pickers to today."""
        self.log("setting date range to today")
        self._pick_today(sel.FROM_DATE)
        self._pick_today(sel.TO_DATE)

    def set_time_range(self, from_time: str = sel.DEFAULT_FROM_TIME, to_time: Optional[str] = None) -> None:
        """Fill From (when empty) and To (always, defaulting to now) as HH:MM:SS."""
        to_time = to_time or self.clock().strftime("%H:%M:%S")
        from_input = self.page.locator(sel.FROM_TIME_INPUT)
        if not (from_input.input_value() or "").strip():
            from_input.click()
            from_input.fill(from_time)
        to_input = self.page.locator(sel.TO_TIME_INPUT)
        to_input.click()
        to_input.clear()
        to_input.fill(to_time)
        self.log(f"time range {from_time} to {to_time}")

    def select_station(self, station: Optional[str]) -> None:
        if not station:
            self.log("no station filter (all stations)")
            return
        field = self.page.locator(sel.STATION_INPUT)
        field.click()
        field.fill(station)
        self.page.get_by_text(station).first.click()

    def submit(self) -> None:
        """Submit the form and continue to the reports list.

        Raises:
            WorkflowError: If the queued confirmation does not appear
        """
        self.page.get_by_text(sel.REPORT_DETAILS_TEXT).first.click()
        self.page.locator(sel.CONTINUE_BUTTON).first.click(force=True, timeout=TIMEOUTS.QUICK_MS)
        try:
            self.page.get_by_text(sel.NEW_REPORT_QUEUED_TEXT).first.wait_for(
                state="visible", timeout=TIMEOUTS.SHORT_MS)
        except PlaywrightError as e:
            raise WorkflowError("Report was not queued after submitting the form") from e
        self.page.get_by_role("button", name=sel.CONTINUE_TO_REPORTS_NAME).click(force=True)
        self.settle()

    def create_report(self, name: str, file_format: str = 'xlsx', email: str = "",
                      station: Optional[str] = None) -> None:
        """Fill and submit the create form for today's range."""
        self.log(f"creating dispatch report '{name}' ({file_format})")
        self.click_create_new()
        self.select_file_format(file_format)
        self.fill_report_name(name)
        self.fill_email(email)
        self.select_today_range()
        self.set_time_range()
        self.select_station(station)
        self.submit()

    # Reports table

    def report_row(self, name: str):
        cell = self.page.get_by_role("cell").filter(has_text=re.compile(f"^{re.escape(name)}$"))
        return self.page.get_by_role("row").filter(has=cell).first

    def report_status(self, name: str) -> Optional[str]:
        row = self.report_row(name)
        for status in (sel.STATUS_READY, sel.STATUS_PROCESSING, sel.STATUS_FAILED):
            if self.is_visible(row.get_by_text(status)):
                return status
        return None

    def wait_for_ready(self, name: str) -> None:
        """Wait for the report to reach Ready, reloading the list once.

        Raises:
            WorkflowError: If it is still Processing, Failed, or in no known state
        """
        if self.is_visible(self.report_row(name).get_by_text(sel.STATUS_READY), timeout=TIMEOUTS.QUICK_MS):
            return
        self.log(f"report '{name}' not ready, reloading and waiting up to {TIMEOUTS.REPORT_READY_MS}ms")
        self.page.reload(wait_until="networkidle")
        if self.is_visible(self.report_row(name).get_by_text(sel.STATUS_READY), timeout=TIMEOUTS.REPORT_READY_MS):
            return

        status = self.report_status(name)
        if status == sel.STATUS_PROCESSING:
            raise WorkflowError(f'Report "{name}" is still processing after {TIMEOUTS.REPORT_READY_MS // 1000} seconds')
        if status == sel.STATUS_FAILED:
            raise WorkflowError(f'Report "{name}" failed to generate')
        raise WorkflowError(f'Report "{name}" status is unclear')

    def download_report(self, name: str, extension: str = '.xlsx',
                        dest_dir: Union[str, Path] = REPORTS.DOWNLOAD_DIR) -> Path:
        """Download a ready report into dest_dir.

        Returns:
            Path of the saved file

        Raises:
            WorkflowError: If the report is not ready or the file name is unexpected
        """
        self.wait_for_ready(name)
        button = self.report_row(name).get_by_role("button", name=sel.DOWNLOAD_BUTTON_NAME)
        with self.page.expect_download(timeout=TIMEOUTS.ACTION_MS) as download_info:
            button.click()
        download = download_info.value

        expected = f"{name}{extension}"
        if download.suggested_filename != expected:
            raise WorkflowError(f"Downloaded {download.suggested_filename!r}, expected {expected!r}")

        dest = Path(dest_dir)
        dest.mkdir(parents=True, exist_ok=True)
        path = dest / expected
        download.save_as(str(path))
        self.log(f"downloaded report to {path}")
        return path

    def archive_report(self, name: str) -> None:
        self.log(f"archiving report '{name}'")
        row = self.report_row(name)
        row.get_by_role("button", name=sel.ARCHIVE_BUTTON_NAME).click()
        self.page.get_by_text(sel.ARCHIVED_TEXT).first.wait_for(state="visible", timeout=TIMEOUTS.SHORT_MS)
        row.wait_for(state="hidden", timeout=TIMEOUTS.SHORT_MS)
