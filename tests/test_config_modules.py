"""Tests for the selector/constant config modules and environments.yaml."""

import re

import pytest

from config import CONFIG_MODULES, get_config
from config import dashboard_config, menu_config, reports_config, seeding_config, sop_config


class TestGetConfig:

    @pytest.mark.parametrize("screen", sorted(CONFIG_MODULES))
    def test_every_screen_imports(self, screen):
        assert get_config(screen).__name__ == CONFIG_MODULES[screen]

    def test_unknown_screen(self):
        with pytest.raises(ValueError, match="Unknown screen"):
            get_config("checkout")


class TestDashboardSelectors:

    def test_alert_type_filters_use_test_id_convention(self):
        for name, test_id in dashboard_config.ALERT_TYPE_FILTERS.items():
            assert test_id == f"stack-filter-alert-type-{name}"

    def test_site_card_templates_take_a_name(self):
        assert 'BDFD' in dashboard_config.SITE_CARD_NAME_XPATH.format(name='BDFD')
        assert 'BDFD' in dashboard_config.SITE_CARD_EXPAND_XPATH.format(name='BDFD')

    def test_alert_order_values(self):
        assert set(dashboard_config.ALERT_ORDER) == {'Newest to Oldest', 'Oldest to Newest'}


class TestMenuSelectors:

    def test_reports_entries(self):
        assert 'Alert Reports' in menu_config.REPORT_ITEMS
        assert menu_config.MENU_ITEMS['Reports'] == 'sidebaritem-reports'

    def test_management_screens_reachable(self):
        assert {'Area Management', 'Company Management'} <= set(menu_config.CONFIGURATION_ITEMS)


class TestReportsConfig:

    def test_dispatch_formats(self):
        assert set(reports_config.FILE_FORMAT_OPTIONS) == {'csv', 'xlsx'}

    def test_default_from_time_is_midnight(self):
        assert re.fullmatch(r'\d{2}:\d{2}:\d{2}', reports_config.DEFAULT_FROM_TIME)
        assert reports_config.DEFAULT_FROM_TIME == '00:00:00'


class TestSopConfig:

    def test_resolve_dialog_bounds(self):
        assert sop_config.RESOLVE_MIN_SELECTIONS <= sop_config.RESOLVE_MAX_SELECTIONS

    def test_navigation_buttons_never_picked_as_options(self):
        assert {'back', 'cancel', 'close', 'resolve all'} <= sop_config.RESOLVE_EXCLUDED_LABELS


class TestSeedingConfig:

    def test_no_endpoints_or_keys_in_source(self):
        """Endpoints and SAS keys come from the environment only."""
        values = [v for k, v in vars(seeding_config).items() if k.isupper() and isinstance(v, str)]
        for value in values:
            assert 'eventgrid' not in value.lower()
            assert 'sig=' not in value

    def test_site_names_cover_every_alert_type(self):
        from src.shared.event_publisher import AlertType
        assert set(seeding_config.SITE_NAMES) == {t.value for t in AlertType}


class TestEnvironmentsYaml:

    def test_environments_have_https_urls(self, environments_config):
        for name, environment in environments_config['environments'].items():
            assert environment['base_url'].startswith('https://'), name

    def test_default_environment_is_configured(self, environments_config):
        assert environments_config['default_environment'] in environments_config['environments']

    def test_named_fixtures(self, environments_config):
        assert environments_config['sites']['manual_alert']
        assert environments_config['companies']['vodacom'] == 'Vodacom'
