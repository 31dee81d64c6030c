"""Selectors and constants for dispatch reports and the incident report wizard"""

# Dispatch reports list
CREATE_NEW_BUTTON_NAME = 'Create new'
DISPATCH_PAGE_TITLE = 'Create dispatch reports'
DISPATCH_URL_FRAGMENT = '/dispatch-reports'
DIALOG = '[role="dialog"]'
REPORT_DETAILS_TEXT = 'Report Details'

# Dispatch report form
FILE_FORMAT_TRIGGER = '.create-new-report-form .p-dropdown .p-dropdown-trigger'
FILE_FORMAT_OPTIONS = {
    'csv': '.csv - no images attached',
    'xlsx': '.xlsx - no images attached',
}
TEXT_INPUTS = '.textInput input'
STATION_INPUT = '#search_input'
FROM_DATE = '[data-test-id="fromdate_dropdown"]'
TO_DATE = '[data-test-id="todate_dropdown"]'
FROM_TIME_INPUT = '[data-test-id="fromtime_dropdown"] input'
TO_TIME_INPUT = '[data-test-id="totime_dropdown"] input'
CALENDAR_DAY = '.p-datepicker td span:has-text("{day}")'
TODAY_BUTTON_SELECTORS = (
    'text=Today',
    '.p-datepicker-today-button',
    '.p-calendar-today-button',
    '[aria-label="Today"]',
    'button:has-text("Today")',
    '.p-datepicker-buttonbar button:has-text("Today")',
)
DEFAULT_FROM_TIME = '00:00:00'
CONTINUE_BUTTON = 'text=CONTINUE'
NEW_REPORT_QUEUED_TEXT = 'New report queued'
CONTINUE_TO_REPORTS_NAME = 'Continue to reports'

# Reports table
DOWNLOAD_BUTTON_NAME = 'Download'
ARCHIVE_BUTTON_NAME = 'Archive'
ARCHIVED_TEXT = 'Archived Successfully'
STATUS_READY = 'Ready'
STATUS_PROCESSING = 'Processing'
STATUS_FAILED = 'Failed'

# Incident report wizard
REPORT_NAME_INPUT = '.input-container input[type="text"], input.input, .row.input-container input'
EMAIL_INPUT = 'input[type="email"], input[placeholder*="email" i]'
SITE_SEARCH_INPUT = 'input[type="search"][placeholder="Select sites"]'
SITE_OPTIONS = 'li[role="option"], [role="listbox"] li, .p-multiselect-items li'
INCIDENT_CHECKBOXES = ('table input[type="checkbox"], .incidents input[type="checkbox"], '
                       'tbody input[type="checkbox"]')
NO_INCIDENTS_PATTERN = r'No incidents|No data|There is currently no data'
TAKE_SNAPSHOT_TEXT = 'Take snapshot'
MAP_SNAPSHOT_TEXT = 'Map snapshot'
PREVIEW_EXPORT_TEXT = 'Preview export'
INCIDENT_CAROUSEL = '[data-test-id="incident-carsousel"], [data-test-id="incident-carousel"]'
NEXT_TEXT = 'Next'
BACK_TEXT = 'Back'
EXPORT_BUTTON = 'button:has-text("Export")'
DOWNLOAD_BUTTONS = 'button:has-text("Download")'
NEXT_PAGE_BUTTON_NAME = 'Next page'

# Browser-side predicate for the snapshot step: idle and either Next is
# enabled or the wizard already left the snapshot step.
SNAPSHOT_READY_JS = """() => {
    const bodyText = document.body.textContent || '';
    const isProcessing = bodyText.includes('processing') ||
        bodyText.includes('generating') || bodyText.includes('loading');
    const nextButton = Array.from(document.querySelectorAll('button')).find(
        btn => btn.textContent && btn.textContent.trim() === 'Next' && !btn.disabled);
    const stillOnSnapshot = bodyText.includes('Take snapshot');
    return !isProcessing && (nextButton !== undefined || !stillOnSnapshot);
}"""

REPORT_NAME_PREFIX = 'Automation test'
ADD_TO_EXPORT_TEXT = 'Add to export selection'
