"""Selectors and constants for the login and terms-and-conditions screens"""

POST_LOGIN_URL_PATTERN = r".*command"
TERMS_URL_FRAGMENT = "/auth-step/terms-and-conditions"
MICROSOFT_LOGIN_HOST = "login.microsoftonline.com"

# Microsoft sign-in form
USERNAME_INPUT = '[name="loginfmt"]'
PASSWORD_INPUT = '[name="passwd"]'
SUBMIT_BUTTON = '#idSIButton9'
USE_ANOTHER_ACCOUNT_TILE = '#otherTileText'
STAY_SIGNED_IN_NO_BUTTON = '#idBtn_Back'

# Proof360 shell
TERMS_ACCEPT_BUTTON = '[data-test-id="termsAndConditonsAcceptBtn"]'
SELECTED_COMPANY = '[data-test-id="selected-company"]'

# Post-login polling (T&C or company selector)
POST_LOGIN_POLL_ATTEMPTS = 10
POST_LOGIN_POLL_INTERVAL = 1.0  # seconds

# Sign-out
LOGOUT_DROPDOWN = '[data-test-id="logoutDropdown"]'
LOGOUT_BUTTON = '[data-test-id="logoutBtn"]'
PICK_ACCOUNT_TEXT = 'Pick an account'
ACCOUNT_TILE = '[data-test-id*="@"]'
