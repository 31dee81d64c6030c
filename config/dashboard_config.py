"""Selectors for the command dashboard: stacks, stack filter and alert cards"""

# Company / station / stack controls
SELECTED_COMPANY = '[data-test-id="selected-company"]'
SELECTED_COMPANY_LABEL = '[data-test-id="selected-company"] .p-dropdown-label'
DROPDOWN_ITEM_LABEL = '[data-pc-section="itemlabel"]'
STATION_DROPDOWN = '[data-test-id="stationDropDown"]'
STATION_OPTION = 'li[role="option"]'
STACK_DROPDOWN = '[testid="events-situations-dropdown"]'
LOADING_INDICATORS = '.loading-indicator, .spinner, [data-loading="true"]'

# Companies whose dropdown entry cannot be matched by plain text
STRUCTURAL_COMPANY_LOCATORS = frozenset({'Vodacom'})

# Stack filter modal
FILTER_TRIGGER = '[data-test-id="alert-stack-popover-trigger-button"]'
FILTER_APPLY = '[data-test-id="alert-filter-apply-button"]'
FILTER_RESET = '[data-test-id="alert-filter-reset-button"]'
FILTER_CLOSE = '[data-test-id="modalClose"]'
FILTER_SITE_SEARCH_PLACEHOLDER = 'Search by site name'
NOTIFICATION_ITEM = '.rnc__notification-item'
DESELECT_ALL_BUTTON = 'Deselect All'

# Filter checkbox test ids
ALERT_TYPE_FILTERS = {
    'LPR': 'stack-filter-alert-type-LPR',
    'Manual Alert': 'stack-filter-alert-type-Manual Alert',
    'Unusual Behaviour': 'stack-filter-alert-type-Unusual Behaviour',
    'Trex': 'stack-filter-alert-type-Trex',
}
DEVICE_FILTERS = {
    'public': 'device-public-checkbox',
    'private': 'device-private-checkbox',
}
VOI_SOURCE_FILTERS = {
    'public': 'alert-level-public-checkbox',
    'private': 'alert-level-private-checkbox',
}

# Alert order toggles (value is the data-test-id suffix)
ALERT_ORDER = {
    'Newest to Oldest': 'false',
    'Oldest to Newest': 'true',
}

# Cards
ALERT_STACK = '[data-test-id="aggregated-alert-stack"]'
ANY_ALERT_CARD = ('[data-test-id*="alert-card"], [data-test-id="manual-alert-card"], '
                  '[data-test-id="aggregated-site-card"]')
ALERT_CARD = '[data-test-id="alert-card"]'
MANUAL_ALERT_CARD = '[data-test-id="manual-alert-card"]'
# Individual alert cards shown inside an expanded site card
SITE_ALERT_CARDS = f"{ALERT_CARD}, {MANUAL_ALERT_CARD}"
AGGREGATED_SITE_CARD = '[data-test-id="aggregated-site-card"]'
SITE_CARD_EXPAND_BUTTON = '[data-test-id="site-alert-card-expand-button"]'
SITE_CARD_NAME_XPATH = '//span[@data-test-id="aggregated-site-card-name" and contains(text(), "{name}")]'
SITE_CARD_EXPAND_XPATH = ('//div[contains(@data-test-id,"aggregated-site-card") and '
                          './/span[contains(text(),"{name}")]]'
                          '//div[@data-test-id="site-alert-card-expand-button"]')
INCIDENT_GROUP_ALERT_COUNT = '[data-test-id="incident-group-alert-count"]'
TICKING_TIMER = '[data-test-id="tickingTimer"]'

# Empty state
NO_RESULTS_TEXT = 'No Results Found'
NO_RESULTS_XPATH = '//b[text()="No Results Found"]'
ADJUST_SEARCH_TEXT = 'Please adjust your search to see results'

# Suppression notice
SUPPRESSION_TEXT = ('Device and alert Suppressions applied will affect which alerts '
                    'populate in the stack.')
SUPPRESSION_LINK_TEXT = 'Suppressions'
SUPPRESSION_URL_FRAGMENT = '/suppression-management'

# Flagging (popup-left holds the action label of the card toolbar)
FLAG_BUTTON = '[popup-left="Flag"]'
FLAGGED_BUTTON = '[popup-left="Flagged"]'

# Ordering
INCIDENT_ALERT_TIME = '[data-test-id="incidentAlertTime"]'
SUCCESS_NOTIFICATION = '.rnc__notification-item--success'
