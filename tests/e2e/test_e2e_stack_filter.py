"""Stack filter scenarios: basic interaction, LPR/VOI dependency, persistence and device types."""

import re

import pytest
from playwright.sync_api import expect

from config import dashboard_config as sel
from src.pages.alerts_dashboard_page import site_prefix
from src.shared.event_publisher import AlertType, get_site_name
from src.shared.retry import try_cleanup

pytestmark = pytest.mark.e2e


def test_voi_sources_depend_on_lpr(steps):
    dashboard = steps.dashboard
    lpr = dashboard.alert_type_filter('LPR')
    steps.reset_stack_filter()
    dashboard.open_filter()
    try:
        assert dashboard.voi_source_states() == {'public': False, 'private': False}

        dashboard.toggle_checkbox(lpr)
        assert dashboard.voi_source_states() == {'public': True, 'private': True}

        dashboard.toggle_checkbox(lpr)
        assert dashboard.voi_source_states() == {'public': False, 'private': False}
    finally:
        dashboard.close_filter()


def test_trex_filter_persists_across_stations(steps, environments_config):
    dashboard = steps.dashboard
    stations = environments_config['stations']
    steps.reset_stack_filter()
    dashboard.open_filter()
    dashboard.set_checkbox(dashboard.alert_type_filter('Trex'), True)
    dashboard.apply_filter()
    dashboard.close_filter()

    try:
        steps.change_station(stations['automation'])
        steps.verify_trex_filter_checked()
        steps.change_station(stations['all'])
        steps.verify_trex_filter_checked()
    finally:
        try_cleanup(steps.reset_stack_filter, "reset stack filter")


def test_device_type_filter(steps, page, publisher):
    site = get_site_name(AlertType.UNUSUAL_BEHAVIOUR)
    publisher.send_alert(AlertType.UNUSUAL_BEHAVIOUR)
    dashboard = steps.dashboard

    try:
        # Seeded devices are public: the private filter must hide them
        steps.reset_stack_filter()
        dashboard.open_filter()
        dashboard.search_site_in_filter(site)
        dashboard.set_checkbox(sel.DEVICE_FILTERS['public'], False)
        dashboard.set_checkbox(sel.DEVICE_FILTERS['private'], True)
        dashboard.apply_filter()
        dashboard.close_filter()
        expect(page.get_by_text(sel.NO_RESULTS_TEXT).first).to_be_visible(timeout=15_000)

        dashboard.open_filter()
        dashboard.set_checkbox(sel.DEVICE_FILTERS['private'], False)
        dashboard.set_checkbox(sel.DEVICE_FILTERS['public'], True)
        dashboard.apply_filter()
        dashboard.close_filter()
        dashboard.wait_for_site_card(site_prefix(site))
    finally:
        try_cleanup(steps.reset_stack_filter, "reset stack filter")
        steps.cleanup_ub_and_trex(site)


def test_filter_interaction_and_suppressions_link(steps, page):
    dashboard = steps.dashboard
    dashboard.open_filter()
    try:
        dashboard.toggle_checkbox(sel.DEVICE_FILTERS['public'])
        dashboard.toggle_checkbox(dashboard.alert_type_filter('LPR'))
        dashboard.toggle_checkbox(sel.VOI_SOURCE_FILTERS['private'])
        dashboard.deselect_all()
        page.locator(sel.FILTER_RESET).click()
        dashboard.apply_filter()
        dashboard.close_filter()

        dashboard.open_filter()
        dashboard.open_suppressions_link()
        expect(page).to_have_url(re.compile(re.escape(sel.SUPPRESSION_URL_FRAGMENT)))
    finally:
        try_cleanup(steps.go_to_command, "return to command")
        try_cleanup(steps.reset_stack_filter, "reset stack filter")
