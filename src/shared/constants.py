"""Centralized constants for the Proof360 end-to-end suite.

This module provides frozen dataclass-based configuration groups for the
timeouts, retry bounds and limits used throughout the suite. Browser waits
are expressed in milliseconds (the Playwright convention); retry intervals
and HTTP timeouts are in seconds.

Usage:
    from src.shared.constants import TIMEOUTS, RETRY

    page.wait_for_url(pattern, timeout=TIMEOUTS.LOGIN_REDIRECT_MS)
    retry_until(check, RETRY.CARD_ATTEMPTS, RETRY.CARD_INTERVAL)
"""

from dataclasses import dataclass

__all__ = [
    'BROWSER',
    'BrowserDefaults',
    'DIAGNOSTICS',
    'DiagnosticsDefaults',
    'LOGGING',
    'LoggingDefaults',
    'REPORTS',
    'ReportDefaults',
    'RETRY',
    'RetryDefaults',
    'SEEDING',
    'SeedingDefaults',
    'TIMEOUTS',
    'TimeoutDefaults',
    'VALIDATION',
    'ValidationDefaults',
]


@dataclass(frozen=True)
class TimeoutDefaults:
    """Explicit wait bounds for browser interactions, in milliseconds.

    Every wait in the page objects uses one of these values; none wait
    indefinitely.
    """

    QUICK_MS: int = 5_000
    """Quick UI feedback (a button appearing after a click)."""

    SHORT_MS: int = 10_000
    """Element visibility after navigation within the app."""

    MEDIUM_MS: int = 15_000
    """Cards propagating between stacks, SOP tab rendering."""

    DIALOG_CLOSE_MS: int = 12_000
    """Modal dialogs closing after their confirm button."""

    SOP_COMPLETE_MS: int = 20_000
    """Completion banner after answering the SOP questionnaire."""

    COMPANY_SWITCH_MS: int = 30_000
    """Company label update and stack re-render after a tenant switch."""

    NETWORK_IDLE_MS: int = 30_000
    """Network-idle waits after applying filters."""

    LOGIN_REDIRECT_MS: int = 45_000
    """Leaving the identity provider and landing on /command."""

    SNAPSHOT_READY_MS: int = 120_000
    """Map snapshot generation in the incident report wizard."""

    REPORT_READY_MS: int = 60_000
    """Dispatch report moving from Processing to Ready."""

    REPORT_DOWNLOAD_MS: int = 300_000
    """Incident report download becoming available after export."""

    ACTION_MS: int = 60_000
    """Default Playwright action timeout."""

    NAVIGATION_MS: int = 90_000
    """Default Playwright navigation timeout."""

    EXPECT_MS: int = 30_000
    """Default assertion timeout for expect()."""

    TEST_BUDGET_S: int = 300
    """Whole-test budget in seconds."""


@dataclass(frozen=True)
class RetryDefaults:
    """Bounded polling for eventually-consistent UI state.

    Intervals are fixed (no backoff) so timings stay comparable between runs.
    """

    CARD_ATTEMPTS: int = 5
    """Attempts when waiting for a seeded alert card to appear."""

    CARD_INTERVAL: float = 5.0
    """Seconds between alert card visibility checks."""

    FILTER_VERIFY_ATTEMPTS: int = 3
    """Attempts when verifying a stack filter checkbox state."""

    FILTER_VERIFY_INTERVAL: float = 3.0
    """Seconds between filter verification attempts."""

    SNAPSHOT_ATTEMPTS: int = 5
    """Self-healing attempts to move the report wizard past the snapshot step."""

    NEXT_CLICK_ATTEMPTS: int = 3
    """Attempts to click an enabled Next button within one snapshot attempt."""

    PREVIEW_POLL_ATTEMPTS: int = 10
    """Checks (1 s apart) that the wizard reached the preview export step after Next."""

    STACK_SWITCH_ATTEMPTS: int = 3
    """Attempts to switch between the Incident and Situation stacks."""

    ESCALATE_POLL_INTERVAL: float = 0.5
    """Seconds between checks that an escalated card left the view."""

    ESCALATE_POLL_ATTEMPTS: int = 30
    """Checks after escalating (0.5 s apart, 15 s in total)."""

    CLEANUP_MAX_ITERATIONS: int = 10
    """Upper bound on cards processed by one cleanup pass."""

    STACK_EMPTY_ATTEMPTS: int = 30
    """Checks that a stack emptied after resolving (1 s apart)."""

    DISMISS_VERIFY_ATTEMPTS: int = 5
    """Checks that a dismissed parent card disappeared."""


@dataclass(frozen=True)
class SeedingDefaults:
    """Alert seeding API defaults."""

    TIMEOUT: int = 30
    """HTTP request timeout in seconds."""

    MULTI_SEND_DELAY: float = 1.0
    """Seconds between alerts sent by send_multiple_alerts."""


@dataclass(frozen=True)
class ReportDefaults:
    """Report generation and download defaults."""

    DOWNLOAD_DIR: str = "downloads"
    """Directory downloaded report files are saved into."""

    MAX_LIST_PAGES: int = 25
    """Pages scanned when looking for a downloadable report."""

    SITE_OPTIONS_TO_TRY: int = 8
    """Site options tried when looking for one with incidents."""


@dataclass(frozen=True)
class ValidationDefaults:
    """Report validation settings."""

    LAT_MIN: float = -90.0
    LAT_MAX: float = 90.0
    LON_MIN: float = -180.0
    LON_MAX: float = 180.0

    ERROR_LOG_LIMIT: int = 10
    """Maximum number of validation errors to log individually."""


@dataclass(frozen=True)
class DiagnosticsDefaults:
    """Failure artifact capture settings."""

    ROOT_DIR: str = "test-failures"
    """Directory failure artifacts are written under."""

    RETENTION_DAYS: int = 7
    """Artifact directories older than this are pruned by the cleanup command."""


@dataclass(frozen=True)
class BrowserDefaults:
    """Browser context defaults."""

    VIEWPORT_WIDTH: int = 1920
    VIEWPORT_HEIGHT: int = 1080


@dataclass(frozen=True)
class LoggingDefaults:
    """Logging configuration."""

    MAX_BYTES: int = 10 * 1024 * 1024  # 10MB
    """Maximum log file size before rotation."""

    BACKUP_COUNT: int = 5
    """Number of rotated log files to keep."""


# Singleton instances for easy import
TIMEOUTS = TimeoutDefaults()
RETRY = RetryDefaults()
SEEDING = SeedingDefaults()
REPORTS = ReportDefaults()
VALIDATION = ValidationDefaults()
DIAGNOSTICS = DiagnosticsDefaults()
BROWSER = BrowserDefaults()
LOGGING = LoggingDefaults()
