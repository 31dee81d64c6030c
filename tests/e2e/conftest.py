"""Fixtures for the browser scenarios.

Every scenario signs in as the admin user, selects a company and hands the
test a SharedSteps facade. Scenarios are skipped when the admin credentials
(or, for seeding scenarios, the seeding API settings) are not configured.
"""

import logging

import pytest

from src.shared.constants import TIMEOUTS
from src.shared.event_publisher import EventPublisher, validate_api_config
from src.shared.retry import try_cleanup
from src.shared.settings import get_credentials
from src.steps import SharedSteps

logger = logging.getLogger(__name__)


@pytest.fixture(autouse=True)
def _browser_timeouts(request):
    """Apply the suite's default action and navigation timeouts to browser tests."""
    if 'page' in request.fixturenames:
        page = request.getfixturevalue('page')
        page.set_default_timeout(TIMEOUTS.ACTION_MS)
        page.set_default_navigation_timeout(TIMEOUTS.NAVIGATION_MS)


@pytest.fixture
def default_company(environments_config):
    return environments_config['companies']['default']


@pytest.fixture
def steps(page, base_url, environments_config, require_admin_credentials, default_company):
    """Signed-in SharedSteps with the default company selected."""
    steps = SharedSteps(page, base_url, environments_config)
    steps.authenticate(get_credentials(), company=default_company)
    return steps


@pytest.fixture
def manual_alert_cleanup(steps, default_company):
    """Resolve manual alerts left by the test, whatever its outcome."""
    yield
    logger.info("Cleaning up manual alerts")
    try_cleanup(steps.login_page.goto, "return to start page")
    try_cleanup(steps.select_company, "reselect company", default_company, True)
    steps.cleanup_manual_alerts()


@pytest.fixture
def publisher():
    missing = validate_api_config()
    if missing:
        pytest.skip(f"Seeding API not configured: {', '.join(missing)}")
    publisher = EventPublisher()
    yield publisher
    publisher.close()
