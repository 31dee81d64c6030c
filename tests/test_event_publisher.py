"""Tests for the alert seeding client."""

import logging
from unittest.mock import Mock

import pytest
import requests

from src.shared.errors import MissingConfigError, SeedingError, UnknownAlertTypeError
from src.shared.event_publisher import (
    AlertType,
    ApiConfig,
    EventPublisher,
    build_payload,
    build_public_lpr_payload,
    build_trex_payload,
    build_ub_payload,
    get_site_name,
    load_api_config,
    validate_api_config,
)


@pytest.fixture
def api_config():
    return ApiConfig(environment='uat', url='https://ingest.example.com/api/events?code=abc',
                     sas_key='sas-secret', topic='lpr-topic', isentry_topic='isentry-topic',
                     firefly_topic='firefly-topic')


@pytest.fixture
def session(mock_response):
    session = Mock(spec=requests.Session)
    session.post.return_value = mock_response(200)
    return session


@pytest.fixture
def mock_response():
    def _create(status_code):
        response = Mock()
        response.status_code = status_code
        return response
    return _create


class TestAlertType:

    @pytest.mark.parametrize("name,expected", [
        ("trex", AlertType.TREX_PUBLIC),
        ("TREX_PRIVATE", AlertType.TREX_PRIVATE),
        ("ub", AlertType.UNUSUAL_BEHAVIOUR),
        (" lpr ", AlertType.PUBLIC_LPR),
    ])
    def test_aliases(self, name, expected):
        assert AlertType.from_string(name) is expected

    def test_unknown_type(self):
        with pytest.raises(UnknownAlertTypeError, match="Valid types"):
            AlertType.from_string("smoke")


class TestApiConfig:

    def test_reads_prefixed_variables(self, clean_env):
        clean_env.setenv('ENVIRONMENT', 'dev')
        clean_env.setenv('DEV_URL', 'https://dev-ingest.example.com')
        clean_env.setenv('DEV_SASKEY', 'k')
        config = load_api_config()
        assert config.environment == 'dev'
        assert config.url == 'https://dev-ingest.example.com'

    def test_missing_key_names_variables(self, clean_env):
        clean_env.setenv('UAT_URL', 'https://ingest.example.com')
        with pytest.raises(MissingConfigError) as excinfo:
            load_api_config('uat')
        assert excinfo.value.names == ['UAT_SASKEY']

    def test_unsupported_environment(self, clean_env):
        with pytest.raises(ValueError):
            load_api_config('prod')

    def test_repr_hides_sas_key_and_query(self, api_config):
        text = repr(api_config)
        assert 'sas-secret' not in text
        assert 'code=abc' not in text

    def test_validate_api_config_lists_missing(self, clean_env):
        assert validate_api_config() == ['ENVIRONMENT', 'UAT_URL', 'UAT_SASKEY']

    def test_validate_api_config_complete(self, clean_env):
        for name, value in (('ENVIRONMENT', 'uat'), ('UAT_URL', 'u'), ('UAT_SASKEY', 'k')):
            clean_env.setenv(name, value)
        assert validate_api_config() == []


class TestPayloads:

    def test_trex_public_envelope(self):
        [event] = build_trex_payload(topic='t')
        assert event['eventType'] == 'iSentry Firefly Event'
        assert event['data']['type'] == 'Trex'
        assert event['data']['deviceIdList'] == ['116444']
        assert event['topic'] == 't'

    def test_trex_private_uses_private_device(self):
        [event] = build_trex_payload(private=True)
        assert event['data']['deviceIdList'] == ['123363']

    def test_ub_device_id_is_unique_per_send(self):
        [first] = build_ub_payload(now_ms=1000)
        [second] = build_ub_payload(now_ms=2000)
        assert first['data']['deviceIdList'] != second['data']['deviceIdList']
        assert first['data']['deviceIdList'][0].endswith('-1000')
        assert first['dataVersion'] == '4.0'

    def test_lpr_envelope(self):
        [event] = build_public_lpr_payload(topic='lpr')
        assert event['eventType'] == 'Vumacam.LPR.AlertDispatchedEvent'
        assert event['data']['data']['voiSource'] == 'Public'
        assert event['subject'] == 'lpr'

    def test_ids_are_fresh(self):
        assert build_trex_payload()[0]['id'] != build_trex_payload()[0]['id']

    def test_build_payload_picks_topic(self, api_config):
        assert build_payload(AlertType.UNUSUAL_BEHAVIOUR, api_config)[0]['topic'] == 'isentry-topic'
        assert build_payload(AlertType.TREX_PRIVATE, api_config)[0]['topic'] == 'firefly-topic'
        assert build_payload(AlertType.PUBLIC_LPR, api_config)[0]['topic'] == 'lpr-topic'


class TestSiteNames:

    def test_default_site(self, clean_env):
        clean_env.delenv('UB', raising=False)
        assert get_site_name('ub') == 'MCLN_Berea Str and Bourke Str_20.4_A'

    def test_environment_override(self, clean_env):
        clean_env.setenv('trex', 'Custom site')
        assert get_site_name(AlertType.TREX_PUBLIC) == 'Custom site'


class TestEventPublisher:

    def test_send_alert_posts_with_sas_header(self, api_config, session):
        result = EventPublisher(api_config, session=session).send_alert('ub')

        assert result.ok and result.status == 200
        args, kwargs = session.post.call_args
        assert args[0] == api_config.url
        assert kwargs['headers']['aeg-sas-key'] == 'sas-secret'
        assert isinstance(kwargs['json'], list)

    def test_non_2xx_raises(self, api_config, session, mock_response):
        session.post.return_value = mock_response(401)
        with pytest.raises(SeedingError) as excinfo:
            EventPublisher(api_config, session=session).send_alert(AlertType.TREX_PRIVATE)
        assert excinfo.value.status == 401

    def test_transport_failure_raises_without_leaking_key(self, api_config, session):
        session.post.side_effect = requests.ConnectionError("refused")
        with pytest.raises(SeedingError) as excinfo:
            EventPublisher(api_config, session=session).send_alert('lpr')
        assert 'sas-secret' not in str(excinfo.value)
        assert 'code=abc' not in str(excinfo.value)

    def test_public_trex_needs_its_own_endpoint(self, clean_env, api_config, session):
        with pytest.raises(MissingConfigError) as excinfo:
            EventPublisher(api_config, session=session).send_alert('trex')
        assert excinfo.value.names == ['TREX_PUBLIC_URL', 'TREX_PUBLIC_SASKEY']
        session.post.assert_not_called()

    def test_public_trex_endpoint_from_environment(self, clean_env, api_config, session):
        clean_env.setenv('TREX_PUBLIC_URL', 'https://trex.example.com/api/events')
        clean_env.setenv('TREX_PUBLIC_SASKEY', 'trex-key')
        EventPublisher(api_config, session=session).send_alert('trex')
        args, kwargs = session.post.call_args
        assert args[0] == 'https://trex.example.com/api/events'
        assert kwargs['headers']['aeg-sas-key'] == 'trex-key'

    def test_skip_missing_returns_skipped_result(self, clean_env, session, caplog):
        with caplog.at_level(logging.WARNING):
            result = EventPublisher(session=session, skip_missing=True).send_alert('ub')
        assert result.skipped and not result.ok
        assert result.to_dict() == {'alert_type': 'unusual_behaviour', 'ok': False, 'status': None, 'skipped': True}

    def test_multiple_alerts_sleep_between_sends(self, api_config, session):
        sleep = Mock()
        results = EventPublisher(api_config, session=session, sleep=sleep).send_multiple_alerts(
            ['ub', 'trex_private', 'lpr'], delay=1.0)
        assert [r.alert_type for r in results] == [
            AlertType.UNUSUAL_BEHAVIOUR, AlertType.TREX_PRIVATE, AlertType.PUBLIC_LPR]
        assert sleep.call_count == 2

    def test_multiple_alerts_stop_at_first_failure(self, api_config, session, mock_response):
        session.post.side_effect = [mock_response(200), mock_response(500), mock_response(200)]
        with pytest.raises(SeedingError):
            EventPublisher(api_config, session=session, sleep=Mock()).send_multiple_alerts(['ub', 'ub', 'ub'])
        assert session.post.call_count == 2
