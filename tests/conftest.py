"""Pytest configuration and fixtures for the Proof360 suite"""

import re
import sys
from pathlib import Path
from typing import Optional

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from unittest.mock import MagicMock

from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from src.shared.constants import BROWSER
from src.shared.diagnostics import record_test_failure
from src.shared.logging_config import set_log_test, setup_logging
from src.shared.settings import (
    ADMIN, NORMAL_USER, get_base_url, load_environment, load_environments_config, missing_env,
)


def _make_locator(key: str) -> MagicMock:
    """Mock Locator whose wait_for agrees with its is_visible return value.

    Chained narrowing (first, nth, filter, locator, ...) returns the same mock,
    so a test configures one selector and every derived locator follows it.
    """
    locator = MagicMock(name=key)
    locator.first = locator
    locator.last = locator
    for method in ('nth', 'filter', 'locator', 'get_by_role', 'get_by_text', 'or_'):
        getattr(locator, method).return_value = locator
    locator.is_visible.return_value = False
    locator.is_enabled.return_value = False
    locator.is_checked.return_value = False
    locator.count.return_value = 0
    locator.text_content.return_value = ''
    locator.input_value.return_value = ''

    def _wait_for(state: str = "visible", timeout: Optional[int] = None):
        visible = locator.is_visible()
        if (state in ("visible", "attached") and not visible) or (state in ("hidden", "detached") and visible):
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {key} to be {state}")

    locator.wait_for.side_effect = _wait_for
    return locator


class LocatorRegistry(dict):
    """Creates a fresh mock locator the first time a key is looked up."""

    def __missing__(self, key):
        locator = _make_locator(key)
        self[key] = locator
        return locator


def _name_key(name) -> str:
    if isinstance(name, re.Pattern):
        return name.pattern
    return '' if name is None else str(name)


def make_fake_page(url: str = "https://uat.proof360.io/command") -> MagicMock:
    """Mock Playwright Page backed by a LocatorRegistry.

    Lookups are keyed as follows:
        page.locator(sel)                -> sel
        page.get_by_text(text)           -> 'text=<text>'
        page.get_by_role(role, name=n)   -> 'role=<role>:<n>' (pattern string for regexes)
        page.get_by_placeholder(text)    -> 'placeholder=<text>'
    """
    page = MagicMock(name="page")
    page.url = url
    page.viewport_size = {'width': BROWSER.VIEWPORT_WIDTH, 'height': BROWSER.VIEWPORT_HEIGHT}
    registry = LocatorRegistry()
    page.locators = registry
    page.locator.side_effect = lambda selector, **kwargs: registry[selector]
    page.get_by_text.side_effect = lambda text, **kwargs: registry[f"text={_name_key(text)}"]
    page.get_by_role.side_effect = lambda role, name=None, **kwargs: registry[f"role={role}:{_name_key(name)}"]
    page.get_by_placeholder.side_effect = lambda text, **kwargs: registry[f"placeholder={text}"]
    return page


@pytest.fixture
def fake_page():
    """Mock Playwright page for page object unit tests (no browser)."""
    return make_fake_page()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable the suite reads so tests start from a known state."""
    for name in (
        *ADMIN, 'NORMAL_MS_USERNAME', 'NORMAL_MS_PASSWORD', 'ENVIRONMENT', 'ENV_FILE', 'BASE_URL',
        'UAT_URL', 'UAT_SASKEY', 'DEV_URL', 'DEV_SASKEY', 'UAT_TOPIC', 'UAT_ISENTRY_TOPIC',
        'UAT_ISENTRY_FIREFLY_TOPIC', 'TREX_PUBLIC_URL', 'TREX_PUBLIC_SASKEY',
        'SENTRY_DSN', 'SENTRY_ENVIRONMENT', 'SENTRY_RELEASE', 'SENTRY_TRACES_SAMPLE_RATE',
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def environments_config():
    """Parsed config/environments.yaml."""
    return load_environments_config()


@pytest.fixture
def sample_report_rows():
    """Header plus rows shaped like a downloaded dispatch report."""
    return [
        ['Incident ID', 'Site', 'Latitude', 'Longitude', 'Proof Status'],
        ['INC-001', 'BDFD_Boeing', '-26.1076', '28.0567', 'Positive'],
        ['INC-002', 'SNDTN_The Marc', '-26.0442', '28.0583', 'Pending'],
    ]


# Browser sessions (pytest-playwright)

def pytest_configure(config):
    load_environment()
    setup_logging()


@pytest.hookimpl(tryfirst=True)
def pytest_runtest_setup(item):
    set_log_test(item.nodeid)


def pytest_runtest_logfinish(nodeid, location):
    set_log_test(None)


@pytest.fixture(scope="session")
def base_url():
    """Application URL; BASE_URL overrides the configured environment."""
    return get_base_url()


@pytest.fixture(scope="session")
def browser_context_args(browser_context_args, base_url):
    return {
        **browser_context_args,
        'base_url': base_url,
        'viewport': {'width': BROWSER.VIEWPORT_WIDTH, 'height': BROWSER.VIEWPORT_HEIGHT},
        'accept_downloads': True,
    }


@pytest.fixture
def require_admin_credentials():
    missing = missing_env(ADMIN)
    if missing:
        pytest.skip(f"Missing credentials: {', '.join(missing)}")


@pytest.fixture
def require_normal_credentials():
    missing = missing_env(NORMAL_USER)
    if missing:
        pytest.skip(f"Missing non-admin credentials: {', '.join(missing)}")


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    record_test_failure(item, call, outcome.get_result())
