"""Alert seeding client for the Proof360 event ingestion API.

Builds Event Grid envelopes for the synthetic alert kinds the suite needs
(Trex public/private, Unusual Behaviour, public LPR) and POSTs them with the
SAS key header. Any non-2xx response or transport failure raises
SeedingError: a test cannot run without its seeded data.

Usage:
    from src.shared.event_publisher import EventPublisher, AlertType

    publisher = EventPublisher()
    result = publisher.send_alert(AlertType.UNUSUAL_BEHAVIOUR)
    site = get_site_name(AlertType.UNUSUAL_BEHAVIOUR)
"""

import logging
import os
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Union
from urllib.parse import urlparse

import requests

from config import seeding_config as cfg
from src.shared.constants import SEEDING
from src.shared.errors import MissingConfigError, SeedingError, UnknownAlertTypeError
from src.shared.sentry_integration import add_breadcrumb

__all__ = [
    'AlertType',
    'ApiConfig',
    'EventPublisher',
    'SendResult',
    'build_payload',
    'build_public_lpr_payload',
    'build_trex_payload',
    'build_ub_payload',
    'get_site_name',
    'load_api_config',
    'validate_api_config',
]

logger = logging.getLogger(__name__)


class AlertType(Enum):
    """Alert kinds the seeding API can inject."""

    TREX_PUBLIC = "trex_public"
    TREX_PRIVATE = "trex_private"
    UNUSUAL_BEHAVIOUR = "unusual_behaviour"
    PUBLIC_LPR = "public_lpr"

    @classmethod
    def from_string(cls, value: str) -> "AlertType":
        """Resolve an alert type from its name or a short alias.

        Raises:
            UnknownAlertTypeError: If the name is not recognised
        """
        normalized = (value or "").strip().lower()
        if normalized in _ALIASES:
            return _ALIASES[normalized]
        raise UnknownAlertTypeError(
            f"Unknown alert type: {value!r}. Valid types: {', '.join(sorted(_ALIASES))}"
        )


_ALIASES = {
    'trex': AlertType.TREX_PUBLIC,
    'trex_public': AlertType.TREX_PUBLIC,
    'trex_private': AlertType.TREX_PRIVATE,
    'ub': AlertType.UNUSUAL_BEHAVIOUR,
    'unusual_behaviour': AlertType.UNUSUAL_BEHAVIOUR,
    'lpr': AlertType.PUBLIC_LPR,
    'public_lpr': AlertType.PUBLIC_LPR,
}


@dataclass(frozen=True)
class ApiConfig:
    """Endpoint and topics of the ingestion API for one environment."""

    environment: str
    url: str
    sas_key: str
    topic: str = ""
    isentry_topic: str = ""
    firefly_topic: str = ""

    def __repr__(self) -> str:
        return (f"ApiConfig(environment={self.environment!r}, url={_sanitize_url(self.url)!r}, "
                f"sas_key='***')")


@dataclass
class SendResult:
    alert_type: AlertType
    ok: bool
    status: Optional[int]
    skipped: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {'alert_type': self.alert_type.value, 'ok': self.ok,
                'status': self.status, 'skipped': self.skipped}


def _sanitize_url(url: str) -> str:
    """Drop query parameters (SAS tokens can live there) for logging."""
    parsed = urlparse(url or "")
    if not parsed.scheme:
        return "[INVALID_URL]"
    safe_url = f"{parsed.scheme}://{parsed.netloc}{parsed.path}"
    if parsed.query:
        safe_url += "?[REDACTED]"
    return safe_url


def _environment_name(environment: Optional[str] = None) -> str:
    name = (environment or os.getenv('ENVIRONMENT') or cfg.DEFAULT_ENVIRONMENT).strip().lower()
    if name not in cfg.SUPPORTED_ENVIRONMENTS:
        raise ValueError(f"Unsupported ENVIRONMENT '{name}'. Expected one of: {', '.join(cfg.SUPPORTED_ENVIRONMENTS)}")
    return name


def load_api_config(environment: Optional[str] = None) -> ApiConfig:
    """Read the ingestion API configuration for dev or uat from the environment.

    Raises:
        MissingConfigError: If the endpoint URL or SAS key is not set
    """
    env = _environment_name(environment)
    prefix = env.upper()
    url_var, key_var = f"{prefix}_URL", f"{prefix}_SASKEY"
    missing = [name for name in (url_var, key_var) if not os.getenv(name)]
    if missing:
        raise MissingConfigError(missing, f"seeding API ({env})")

    return ApiConfig(
        environment=env,
        url=os.environ[url_var],
        sas_key=os.environ[key_var],
        topic=os.getenv(f"{prefix}_TOPIC", ""),
        isentry_topic=os.getenv(f"{prefix}_ISENTRY_TOPIC", ""),
        firefly_topic=os.getenv(f"{prefix}_ISENTRY_FIREFLY_TOPIC", ""),
    )


def validate_api_config() -> List[str]:
    """Names of required seeding variables that are not set."""
    required = ['ENVIRONMENT']
    try:
        prefix = _environment_name().upper()
    except ValueError:
        prefix = cfg.DEFAULT_ENVIRONMENT.upper()
        required = []
        logger.warning(f"ENVIRONMENT={os.getenv('ENVIRONMENT')!r} is not supported")
    required += [f"{prefix}_URL", f"{prefix}_SASKEY"]
    return [name for name in required if not os.getenv(name)]


def get_site_name(alert_type: Union[AlertType, str]) -> str:
    """Site the given alert type lands on (environment override, then default)."""
    if isinstance(alert_type, str):
        alert_type = AlertType.from_string(alert_type)
    env_var, default = cfg.SITE_NAMES[alert_type.value]
    return os.getenv(env_var) or default


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def _guid() -> str:
    return str(uuid.uuid4())


def build_trex_payload(private: bool = False, topic: str = "") -> List[Dict[str, Any]]:
    """Firefly (Trex) alert envelope for a public or private camera."""
    now = _iso_now()
    if private:
        device_id = os.getenv('TREX_PRIVATE_DEVICE_ID', cfg.TREX_PRIVATE_DEVICE_ID)
        camera_name = os.getenv('TREX_PRIVATE_CAMERA_ID', cfg.TREX_PRIVATE_CAMERA_ID)
    else:
        device_id = os.getenv('TREX_DEVICE_ID', cfg.TREX_DEVICE_ID)
        camera_name = os.getenv('TREX_CAMERA_NAME', cfg.TREX_CAMERA_NAME)

    return [{
        'id': _guid(),
        'subject': cfg.TREX_SUBJECT,
        'data': {
            'source': cfg.TREX_SOURCE,
            'ref': _guid(),
            'type': 'Trex',
            'timestamp': now,
            'deviceIdList': [device_id],
            'data': {
                'organisationId': [],
                'reason': 'Trex',
                'description': 'Trex',
                'shortDescription': 'Trex',
                'localId': _guid(),
                'priority': 'Unknown',
                'cameraName': camera_name,
                'escalationActionName': '',
                'escalationClassificationName': '',
            },
            'imageList': [os.getenv('TREX_IMAGE_URL', cfg.TREX_IMAGE_URL)],
            'videoList': [os.getenv('TREX_VIDEO_URL', cfg.TREX_VIDEO_URL)],
        },
        'eventType': cfg.TREX_EVENT_TYPE,
        'dataVersion': cfg.TREX_DATA_VERSION,
        'metadataVersion': cfg.METADATA_VERSION,
        'eventTime': now,
        'topic': topic,
    }]


def build_ub_payload(topic: str = "", now_ms: Optional[int] = None) -> List[Dict[str, Any]]:
    """Unusual Behaviour alert envelope with a single alert frame.

    The device id is suffixed with the epoch milliseconds so every alert is
    a distinct card.
    """
    now = _iso_now()
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    device_id = f"{os.getenv('UB_DEVICE_ID', cfg.UB_DEVICE_ID)}-{now_ms}"

    frame = {
        'ImagePixelFormat': 137224,
        'Number': 0,
        'FrameNumber': 130527,
        'HighRes': True,
        'FrameID': _guid(),
        'iSentryServerID': _guid(),
        'MSCameraID': device_id,
        'Timestamp': now_ms,
        'TimestampUTC': now,
        'CameraID': 1496,
        'FrameImageType': 0,
        'Width': cfg.UB_FRAME_WIDTH,
        'Height': cfg.UB_FRAME_HEIGHT,
        'Bounding_Box_Inclusion_Percentage': 2,
        'Facial_Inflation_Percentage': 15,
        'TrackingID': '00000000-0000-0000-0000-000000000000',
        'Created': now,
        'ImageURL': cfg.UB_IMAGE_URL,
    }

    return [{
        'id': _guid(),
        'subject': cfg.UB_SUBJECT,
        'data': {
            'source': cfg.UB_SUBJECT,
            'ref': _guid(),
            'type': 'Unusual Behaviour',
            'timestamp': now,
            'deviceIdList': [device_id],
            'data': {
                'organisationId': '',
                'reason': 'Unusual Behaviour',
                'localId': _guid(),
                'priority': 'HIGH',
                'cameraName': os.getenv('UB_CAMERA_NAME', cfg.UB_CAMERA_NAME),
                'timeZone': 'Day',
                'frames': [{
                    'Number': 0,
                    'ActionApplied': 0,
                    'MasterFrame': False,
                    'AlertFrame': frame,
                }],
                'alertIdInt': cfg.UB_ALERT_ID_INT,
            },
            'imageList': [cfg.UB_IMAGE_URL],
            'videoList': [],
        },
        'eventType': cfg.UB_EVENT_TYPE,
        'dataVersion': cfg.UB_DATA_VERSION,
        'metadataVersion': cfg.METADATA_VERSION,
        'eventTime': now,
        'topic': topic,
    }]


def build_public_lpr_payload(topic: str = "") -> List[Dict[str, Any]]:
    """Public VOI license-plate alert envelope."""
    now = _iso_now()
    org_id = int(os.getenv('ORGANIZATION_ID', cfg.LPR_ORGANIZATION_ID))

    return [{
        'data': {
            'data': {
                'cameraName': os.getenv('PUBLIC_LPR_CAMERA_NAME', cfg.LPR_CAMERA_NAME),
                'direction': 'forward',
                'imageList': [],
                'isSuperVOI': False,
                'latitude': float(os.getenv('PUBLIC_LPR_LATITUDE', cfg.LPR_LATITUDE)),
                'levelOfIncidence': {
                    'caseNumber': os.getenv('PUBLIC_LPR_CASE_NUMBER', cfg.LPR_CASE_NUMBER),
                    'crimeType': os.getenv('PUBLIC_LPR_CRIME_TYPE', cfg.LPR_CRIME_TYPE),
                    'id': os.getenv('PUBLIC_LPR_LEVEL_ID', cfg.LPR_LEVEL_ID),
                    'isPublic': 1,
                    'level': 1,
                    'organizationId': org_id,
                    'schedule': '',
                    'timeCreated': os.getenv('PUBLIC_LPR_TIME_CREATED', cfg.LPR_LEVEL_TIME_CREATED),
                },
                'longitude': float(os.getenv('PUBLIC_LPR_LONGITUDE', cfg.LPR_LONGITUDE)),
                'organizationId': org_id,
                'plateId': os.getenv('PLATE_ID2', cfg.LPR_PLATE_ID),
                'timeCaptured': now,
                'timeDispatched': now,
                'voiSource': 'Public',
            },
            'deviceIdList': [str(os.getenv('PUBLIC_LPR_DEVICE_ID', cfg.LPR_DEVICE_ID))],
            'ref': _guid(),
            'source': 'proof',
            'timestamp': now,
            'type': 'plate',
        },
        'dataVersion': '2.0',
        'eventTime': now,
        'eventType': cfg.LPR_EVENT_TYPE,
        'id': _guid(),
        'metadataVersion': cfg.METADATA_VERSION,
        'subject': topic,
        'topic': topic,
    }]


def build_payload(alert_type: AlertType, config: Optional[ApiConfig] = None) -> List[Dict[str, Any]]:
    """Envelope array for alert_type, with the matching topic from config."""
    if alert_type is AlertType.TREX_PUBLIC:
        return build_trex_payload(private=False, topic=config.firefly_topic if config else "")
    if alert_type is AlertType.TREX_PRIVATE:
        return build_trex_payload(private=True, topic=config.firefly_topic if config else "")
    if alert_type is AlertType.UNUSUAL_BEHAVIOUR:
        return build_ub_payload(topic=config.isentry_topic if config else "")
    return build_public_lpr_payload(topic=config.topic if config else "")


class EventPublisher:
    """POSTs seeding envelopes to the ingestion API.

    Args:
        config: API configuration; loaded from the environment on first use when omitted
        session: requests.Session to reuse (one is created when omitted)
        timeout: Request timeout in seconds
        skip_missing: Return a skipped result instead of raising when the endpoint is not configured
        sleep: Sleep function used between multiple sends
    """

    def __init__(
        self,
        config: Optional[ApiConfig] = None,
        session: Optional[requests.Session] = None,
        timeout: int = SEEDING.TIMEOUT,
        skip_missing: bool = False,
        sleep: Callable[[float], Any] = time.sleep,
    ):
        self._config = config
        self.session = session or requests.Session()
        self.timeout = timeout
        self.skip_missing = skip_missing
        self._sleep = sleep

    @property
    def config(self) -> ApiConfig:
        if self._config is None:
            self._config = load_api_config()
        return self._config

    def _endpoint(self, alert_type: AlertType):
        """(url, sas_key) for alert_type; public Trex has its own endpoint."""
        if alert_type is AlertType.TREX_PUBLIC:
            url, key = os.getenv('TREX_PUBLIC_URL'), os.getenv('TREX_PUBLIC_SASKEY')
            if not url or not key:
                missing = [n for n, v in (('TREX_PUBLIC_URL', url), ('TREX_PUBLIC_SASKEY', key)) if not v]
                raise MissingConfigError(missing, "public Trex endpoint")
            return url, key
        return self.config.url, self.config.sas_key

    def send_alert(self, alert_type: Union[AlertType, str]) -> SendResult:
        """Send one alert.

        Raises:
            MissingConfigError: If the endpoint is not configured and skip_missing is False
            SeedingError: On a non-2xx response or transport failure
        """
        if isinstance(alert_type, str):
            alert_type = AlertType.from_string(alert_type)

        try:
            url, sas_key = self._endpoint(alert_type)
            config = self._config_or_none() if alert_type is AlertType.TREX_PUBLIC else self.config
            payload = build_payload(alert_type, config)
        except MissingConfigError as e:
            if self.skip_missing:
                logger.warning(f"Skipping {alert_type.value} alert: {e}")
                return SendResult(alert_type, ok=False, status=None, skipped=True)
            raise

        safe_url = _sanitize_url(url)
        logger.info(f"Sending {alert_type.value} alert to {safe_url}")
        add_breadcrumb(f"seed {alert_type.value}", category="seeding", data={"url": safe_url})

        try:
            response = self.session.post(
                url,
                json=payload,
                headers={cfg.SAS_KEY_HEADER: sas_key, 'Content-Type': 'application/json'},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise SeedingError(f"Failed to send {alert_type.value} alert to {safe_url}: {type(e).__name__}") from e

        if not 200 <= response.status_code < 300:
            raise SeedingError(
                f"Seeding API rejected {alert_type.value} alert with status {response.status_code}",
                status=response.status_code,
            )

        logger.info(f"{alert_type.value} alert accepted (status {response.status_code})")
        return SendResult(alert_type, ok=True, status=response.status_code)

    def _config_or_none(self) -> Optional[ApiConfig]:
        # Public Trex only needs the firefly topic, which is optional
        try:
            return self.config
        except MissingConfigError:
            return None

    def send_multiple_alerts(self, alert_types: Iterable[Union[AlertType, str]],
                             delay: float = SEEDING.MULTI_SEND_DELAY) -> List[SendResult]:
        """Send alerts sequentially with a fixed delay between them."""
        results = []
        alert_types = list(alert_types)
        for index, alert_type in enumerate(alert_types):
            results.append(self.send_alert(alert_type))
            if index < len(alert_types) - 1:
                self._sleep(delay)
        return results

    def close(self) -> None:
        self.session.close()
