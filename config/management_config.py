"""Selectors for the area, company, station, user and role management screens"""

# Shared
CREATE_NEW_BUTTON_PATTERN = r'create new'
SEARCH_TOGGLE = '[data-test-id="search-toggle"]'
SEARCH_INPUT = '[data-test-id="search-input"]'

# Area management
AREA_BY_LIST_MENUITEM = 'li[role="menuitem"]:has-text("By List")'
AREA_NAME_INPUT_NAME = 'Area name'
AREA_DESCRIPTION_INPUT_NAME = 'Area description'
AREA_ADD_TO_LIST_NAME = 'Add to custom area list'
AREA_SAVE_BUTTON = '[data-test-id="Save and Update"]'
AREA_ARCHIVE_BUTTON = "tr:has-text('{name}') [data-test-id='archive-button']"
AREA_ARCHIVE_CONFIRM = 'section[data-test-id="dialog"] button[data-test-id="dialog-button-2"]'

# Company management
COMPANY_NAME_DROPDOWN = '[data-test-id="company-management-company-name"]'
COMPANY_REGISTRATION_INPUT = '[data-test-id="company-management-registration-number"]'
COMPANY_EMAIL_INPUT = '[data-test-id="company-management-email"]'
COMPANY_CONTACT_INPUT = '[data-test-id="company-management-contact-person"]'
COMPANY_CREATE_BUTTON = '[data-test-id="company-management-CREATE-company"]'
COMPANY_UPDATE_BUTTON = '[data-test-id="company-management-UPDATE-company"]'
COMPANY_ROW = 'tbody tr:has(td:nth-of-type(3):text-is("{name}"))'
COMPANY_EDIT_BUTTON = '[data-test-id="company-edit-btn"]'
COMPANY_ARCHIVE_BUTTON = '[data-test-id="company-archive-btn"]'
COMPANY_CONTACT_CELL = 'td:nth-of-type(1)'
ARCHIVE_CONFIRM_CHECKBOX = 'div[role="dialog"] .checkbox-container'
ARCHIVE_YES_BUTTON = 'div[role="dialog"] button:has-text("Yes")'

# Paginated tables (station and user management)
LINKED_ITEMS_TABLE = '[data-test-id="LinkedItemsTable"]'
NEXT_PAGE_BUTTON = '[data-test-id="nextPageBtn"]'
PREVIOUS_PAGE_BUTTON = '[data-test-id="previousPageBtn"]'
FIRST_PAGE_BUTTON = '[data-test-id="firstPageBtn"]'
LAST_PAGE_BUTTON = '[data-test-id="lastPageBtn"]'
ROWS_PER_PAGE_DROPDOWN = '[data-test-id="rowDropdown"]'
COLUMN_BUTTON = '[data-test-id="column-btn"]'
PAGE_LABEL_PATTERN = r'page (\d+) of (\d+)'
MODAL_CLOSE = '[data-test-id="modalClose"]'
DIALOG_CONFIRM = '[data-test-id="dialog-button-2"]'
ROW = 'tr:has-text("{name}")'

# Station management
STATION_CREATE_NEW_TEXT = 'Create new'
STATION_NAME_INPUT = '[data-test-id="TextField"]'
STATION_DETAILS_TITLE = "//div[text()='Station Details']"
STATION_LINK_INPUT = "//label[text()='{label}']/following-sibling::div//input[@type='search']"
STATION_SAVE_BUTTON = "//button[span[text()='Save and Update']]"
STATION_NAME_COLUMN = 'input#name'
STATION_LINKED_LINK = "a:has-text('Linked {kind}')"
STATION_EDIT_BUTTON = "button:has-text('Edit')"
STATION_ARCHIVE_BUTTON = "button:has-text('Archive')"

# User management
USER_FIRST_NAME_INPUT = '[data-test-id="firstNameField"]'
USER_LAST_NAME_INPUT = '[data-test-id="lastNameField"]'
USER_EMAIL_INPUT = '[data-test-id="emailAddressField"]'
USER_CONTACT_INPUT = '[data-test-id="contactNumberField"]'
USER_ROLE_DROPDOWN = '[data-test-id="roleDropdown"]'
USER_EDIT_ROLE_DROPDOWN = '[data-test-id="dropdown_role_usermanagement"]'
USER_CREATE_BUTTON = "//span[text()='CREATE NEW USER']"
USER_EDIT_BUTTON = '[data-test-id="editBtn"]'
USER_ARCHIVE_BUTTON = '[data-test-id="archiveButton"]'
USER_NAME_COLUMN = "//span[text()='NAME']/preceding-sibling::div"
USER_SAVE_SELECTORS = (
    '[data-test-id="Save and Update"]',
    "//span[text()='SAVE & UPDATE']",
    'button:has-text("Save and Update")',
    '[data-test-id="saveBtn"]',
)
USER_UPDATED_TEXT = 'User updated successfully'

# Role management
ROLE_NAME_INPUT = '[data-test-id="TextField"][testid="groupName"]'
ROLE_DESCRIPTION_INPUT = '[data-test-id="TextField"][testid="groupDescription"]'
ROLE_SELECT_ALL_BUTTON = 'button:has-text("Select all")'
# First radio is "Yes", second is "No"
ROLE_EDIT_STACK_FILTERS_RADIO = 'input[name="rg-EditStackFilters"]'
ROLE_SAVE_BUTTON_NAME = 'Save and Apply'
ROLE_REMOVE_BUTTONS = (
    'tr:has-text("{name}") [data-test-id="deleteButton"]',
    'tr:has-text("{name}") [data-test-id="archiveButton"]',
)
CONFIRM_SELECTORS = (
    'button:has-text("Yes")',
    'button:has-text("Confirm")',
    '[data-test-id="confirmBtn"]',
)
