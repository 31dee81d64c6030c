"""Shared utilities for the Proof360 suite"""

from .errors import (
    InvalidTransitionError,
    MissingConfigError,
    ReportParseError,
    ReportValidationError,
    RetryExhaustedError,
    SeedingError,
    UnknownAlertTypeError,
    WorkflowError,
)

from .logging_config import setup_logging

from .retry import (
    retry_until,
    sleep_via_page,
    try_cleanup,
)

from .session import (
    ALLOWED_TRANSITIONS,
    AlertFixture,
    AlertState,
    SessionContext,
    Stack,
    validate_transition,
)

from .settings import (
    ADMIN,
    NORMAL_USER,
    Credentials,
    get_base_url,
    get_credentials,
    load_environment,
    require_env,
)

from .event_publisher import (
    AlertType,
    EventPublisher,
    SendResult,
    get_site_name,
)

from .report_parser import (
    ParsedReport,
    PdfText,
    extract_pdf_text,
    parse_report,
)

from .report_validation import (
    ValidationResult,
    assert_valid,
    validate_dispatch_report,
)

from .diagnostics import (
    capture_failure_artifacts,
    cleanup_artifacts,
)

__all__ = [
    # Errors
    'InvalidTransitionError',
    'MissingConfigError',
    'ReportParseError',
    'ReportValidationError',
    'RetryExhaustedError',
    'SeedingError',
    'UnknownAlertTypeError',
    'WorkflowError',
    # Logging
    'setup_logging',
    # Retry
    'retry_until',
    'sleep_via_page',
    'try_cleanup',
    # Session state
    'ALLOWED_TRANSITIONS',
    'AlertFixture',
    'AlertState',
    'SessionContext',
    'Stack',
    'validate_transition',
    # Settings
    'ADMIN',
    'NORMAL_USER',
    'Credentials',
    'get_base_url',
    'get_credentials',
    'load_environment',
    'require_env',
    # Seeding
    'AlertType',
    'EventPublisher',
    'SendResult',
    'get_site_name',
    # Reports
    'ParsedReport',
    'PdfText',
    'extract_pdf_text',
    'parse_report',
    'ValidationResult',
    'assert_valid',
    'validate_dispatch_report',
    # Diagnostics
    'capture_failure_artifacts',
    'cleanup_artifacts',
]
