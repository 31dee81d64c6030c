"""Incident and Situation stack scenarios: escalation, empty state and the alert timer."""

import re

import pytest
from playwright.sync_api import expect

from config import dashboard_config
from src.shared.constants import RETRY
from src.shared.retry import retry_until
from src.shared.session import AlertState

pytestmark = pytest.mark.e2e

SITE = 'BDFD_Boeing'


def test_escalation_reaches_situation_stack(steps, page, manual_alert_cleanup):
    expect(page).to_have_url(re.compile(r'.*command'))

    alert = steps.create_manual_alert(SITE)
    steps.apply_manual_alert_filter()
    steps.select_alert(alert)
    alert = steps.complete_sop(alert)
    alert = steps.escalate(alert)
    assert alert.state is AlertState.ESCALATED

    steps.switch_to_situation_stack()
    card = page.locator('[data-test-id="aggregated-site-card-name"]').filter(has_text=SITE)
    expect(card).to_be_visible(timeout=15_000)

    # A second alert on the same site groups under the escalated incident
    steps.create_manual_alert(SITE)
    steps.switch_to_situation_stack()
    expect(page.locator(dashboard_config.INCIDENT_GROUP_ALERT_COUNT)).to_have_text('2')


def test_dismissed_alert_leaves_incident_stack(steps, page, manual_alert_cleanup):
    alert = steps.create_manual_alert(SITE)
    steps.apply_manual_alert_filter()
    steps.select_alert(alert)
    dashboard = steps.dashboard
    before = dashboard.count_manual_alert_cards()
    assert before >= 1

    alert = steps.dismiss(steps.complete_sop(alert))
    assert alert.is_terminal

    retry_until(lambda: dashboard.count_manual_alert_cards() < before, RETRY.ESCALATE_POLL_ATTEMPTS,
                RETRY.ESCALATE_POLL_INTERVAL, sleep=dashboard.sleep, description="dismissed card removal")
    after = dashboard.count_manual_alert_cards()
    assert after < before, f"{before} manual alert cards before dismissing, {after} after"


def test_empty_stacks_show_empty_state(steps, environments_config):
    steps.select_company(environments_config['companies']['empty'])

    steps.switch_to_incident_stack()
    assert steps.dashboard.is_empty_state_visible()

    steps.switch_to_situation_stack()
    assert steps.dashboard.is_empty_state_visible()


def test_alert_timer_ticks_up(steps, page, manual_alert_cleanup):
    steps.create_manual_alert(SITE)
    steps.apply_manual_alert_filter()

    first = steps.dashboard.read_timer_seconds()
    page.wait_for_timeout(5_000)
    second = steps.dashboard.read_timer_seconds()

    assert second > first, f"Timer did not advance: {first}s then {second}s"
