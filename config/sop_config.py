"""Selectors for the standard operating procedure (SOP) panel and card actions"""

SOP_TAB = '[data-test-id="SOP-tab"]'
SOP_TAB_FALLBACK = 'text="SOP"'
SOP_COMPLETE_TEXT = 'Standard operating procedure complete'

# Answer given to every SOP question
DEFAULT_ANSWER = 'Yes'
ANSWER_BUTTON_FALLBACK = '[data-test-id="answer-button"]'

DISPATCH_BUTTON = 'button:has-text("DISPATCH")'
ESCALATE_BUTTON = 'button:has-text("ESCALATE")'
DISMISS_BUTTON = '[data-test-id="wrongDismiss"]'

# Resolve flows
RESOLVE_ALL_BUTTON = '//button[normalize-space(.)="RESOLVE ALL"]'
POSITIVE_BUTTON = '//button[normalize-space(.)="POSITIVE"]'
RESOLVE_DIALOG = '[role="dialog"][aria-modal="true"]'
RESOLVE_DIALOG_FALLBACK = '[role="dialog"]'
RESOLVE_OPTION_SELECTORS = (
    '[role="radio"]',
    '[role="option"]',
    '[role="menuitemradio"]',
    'button',
)
RESOLVE_EXCLUDED_LABELS = frozenset({
    'back', 'cancel', 'close', 'resolve all', 'next', 'previous', 'resolve',
})
RESOLVE_MAX_SELECTIONS = 6
RESOLVE_MIN_SELECTIONS = 3
