"""Sentry.io integration for test-failure monitoring.

Sentry is enabled only when SENTRY_DSN is set; every helper in this module is
a no-op otherwise, so local runs need no Sentry project.

Usage:
    from src.shared.sentry_integration import init_sentry, capture_test_failure

    # Initialize once per pytest session or CLI run
    init_sentry()

    # Report a failed test with its session context
    capture_test_failure(exception, test_name="test_escalation", extra={"company": company})
"""

import logging
import os
import re
import subprocess
from typing import Any, Dict, Optional

import sentry_sdk

__all__ = [
    'add_breadcrumb',
    'capture_test_failure',
    'flush',
    'init_sentry',
    'set_session_context',
]

_sentry_initialized = False

logger = logging.getLogger(__name__)


def init_sentry(
    dsn: Optional[str] = None,
    environment: Optional[str] = None,
    release: Optional[str] = None,
    traces_sample_rate: Optional[float] = None,
) -> bool:
    """Initialize Sentry SDK with project configuration.

    Args:
        dsn: Sentry DSN (defaults to SENTRY_DSN env var)
        environment: Environment name (defaults to SENTRY_ENVIRONMENT, then ENVIRONMENT, then 'uat')
        release: Release version (defaults to SENTRY_RELEASE or git hash)
        traces_sample_rate: Performance monitoring sample rate (0.0 to 1.0)

    Returns:
        True if Sentry was initialized, False if disabled
    """
    global _sentry_initialized

    if _sentry_initialized:
        return True

    dsn = dsn or os.getenv("SENTRY_DSN", "")
    if not dsn:
        logger.debug("SENTRY_DSN not set, Sentry disabled")
        return False

    environment = environment or os.getenv("SENTRY_ENVIRONMENT") or os.getenv("ENVIRONMENT", "uat")
    release = release or os.getenv("SENTRY_RELEASE") or _get_git_release()

    if traces_sample_rate is None:
        traces_sample_rate = float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.0"))

    try:
        sentry_sdk.init(
            dsn=dsn,
            environment=environment,
            release=release,
            traces_sample_rate=traces_sample_rate,
            before_send=_before_send,
            send_default_pii=False,
            attach_stacktrace=True,
            max_breadcrumbs=50,
        )
        sentry_sdk.set_tag("project", "proof360-e2e")

        _sentry_initialized = True
        logger.info(f"Sentry initialized (environment={environment}, release={release})")
        return True

    except Exception as e:
        logger.warning(f"Failed to initialize Sentry: {e}")
        return False


def _get_git_release() -> Optional[str]:
    """Get current git commit hash as release version."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0:
            return result.stdout.strip()
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"Could not read git release: {e}")
    return None


def _before_send(event: Dict[str, Any], hint: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Scrub credentials and SAS keys from events before sending."""
    for exception in event.get("exception", {}).get("values", []):
        if "value" in exception:
            exception["value"] = _scrub_sensitive_data(exception["value"])

    for breadcrumb in event.get("breadcrumbs", {}).get("values", []):
        if "message" in breadcrumb:
            breadcrumb["message"] = _scrub_sensitive_data(breadcrumb["message"])

    return event


def _scrub_sensitive_data(text: str) -> str:
    """Remove sensitive data from text."""
    if not isinstance(text, str):
        return text

    # Credentials embedded in URLs (user:pass@host)
    text = re.sub(r"://[^:/\s]+:[^@\s]+@", "://[REDACTED]@", text)

    # key=value style secrets
    text = re.sub(r"(api[_-]?key|sas[_-]?key|password|passwd|secret|token)=[^&\s]+",
                  r"\1=[REDACTED]", text, flags=re.IGNORECASE)

    # Event Grid SAS key header
    text = re.sub(r"(aeg-sas-key['\"]?\s*[:=]\s*['\"]?)[^'\"\s,}]+", r"\1[REDACTED]", text,
                  flags=re.IGNORECASE)

    return text


def set_session_context(company: Optional[str] = None, stack: Optional[str] = None,
                        user: Optional[str] = None) -> None:
    """Tag subsequent events with the active tenant, stack and user."""
    if not _sentry_initialized:
        return
    if company:
        sentry_sdk.set_tag("company", company)
    if stack:
        sentry_sdk.set_tag("stack", stack)
    sentry_sdk.set_context("session", {"company": company, "stack": stack, "user": user})


def capture_test_failure(
    exception: BaseException,
    test_name: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> Optional[str]:
    """Capture a test failure with its context.

    Args:
        exception: The exception that failed the test
        test_name: pytest node id of the failed test
        extra: Additional context (e.g. page URL, artifact directory)

    Returns:
        Sentry event ID if captured, None otherwise
    """
    if not _sentry_initialized:
        return None

    with sentry_sdk.new_scope() as scope:
        if test_name:
            scope.set_tag("test", test_name)
        if extra:
            safe_extra = {
                key: _scrub_sensitive_data(value) if isinstance(value, str) else value
                for key, value in extra.items()
            }
            scope.set_context("test_context", safe_extra)
        return sentry_sdk.capture_exception(exception)


def add_breadcrumb(
    message: str,
    category: str = "workflow",
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
) -> None:
    """Add a breadcrumb for debugging context.

    Args:
        message: Breadcrumb message
        category: Category (e.g., 'workflow', 'seeding', 'cleanup')
        level: Severity level
        data: Additional data to attach
    """
    if _sentry_initialized:
        sentry_sdk.add_breadcrumb(message=message, category=category, level=level, data=data)


def flush(timeout: float = 2.0) -> None:
    """Flush pending events to Sentry before exit."""
    if _sentry_initialized:
        sentry_sdk.flush(timeout=timeout)
