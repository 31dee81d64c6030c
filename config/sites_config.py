"""Selectors for the Sites screen and the manual alert dialog"""

SEARCH_TOGGLE = '[data-test-id="search-toggle"]'
SEARCH_INPUT = '[data-test-id="search-input"]'
CREATE_ALERT_BUTTON = '[data-test-id="createAlertSiteBtn"]'
ALERT_TYPE_RADIO = 'input[type="radio"]'
CREATE_BUTTON_NAME = 'Create'
DIALOG_TITLE = 'Create Manual Alert'

# Number of leading characters used when the full site name is not rendered
SITE_PREFIX_LENGTH = 10
