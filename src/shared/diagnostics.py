"""Failure artifact capture.

On a failed test or fixture setup the pytest hook in tests/conftest.py
calls record_test_failure(), which writes a full-page screenshot, the page
HTML and a JSON summary under test-failures/ and reports the failure to
Sentry. Each artifact is captured independently; nothing here can change a
test's outcome.
"""

import json
import logging
import re
import shutil
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from src.shared.constants import DIAGNOSTICS
from src.shared.retry import try_cleanup
from src.shared.sentry_integration import capture_test_failure

__all__ = [
    'artifact_dir_name',
    'capture_failure_artifacts',
    'cleanup_artifacts',
    'record_test_failure',
]

logger = logging.getLogger(__name__)

# pytest phases whose failures are recorded
FAILURE_PHASES = frozenset({'setup', 'call'})


def artifact_dir_name(test_name: str, now: Optional[datetime] = None) -> str:
    """Directory name for one failure: sanitized test name plus a filesystem-safe timestamp."""
    now = now or datetime.now(timezone.utc)
    timestamp = re.sub(r'[:.]', '-', now.isoformat(timespec='milliseconds'))
    safe_name = re.sub(r'[^a-zA-Z0-9]', '_', test_name)
    return f"{safe_name}_{timestamp}"


def _failure_info(page, test_name: str, test_file: str, errors: Iterable[str]) -> Dict[str, Any]:
    info = {
        'testTitle': test_name,
        'testFile': test_file,
        'failureTime': datetime.now(timezone.utc).isoformat(),
        'pageUrl': None,
        'viewport': None,
        'userAgent': None,
        'errors': [{'message': message} for message in errors],
    }
    # Each field is read separately so one closed/crashed page call does not lose the rest
    for key, read in (
        ('pageUrl', lambda: page.url),
        ('viewport', lambda: page.viewport_size),
        ('userAgent', lambda: page.evaluate("() => navigator.userAgent")),
    ):
        try:
            info[key] = read()
        except Exception as e:
            logger.debug(f"Could not read {key} for failure info: {e}")
    return info


def capture_failure_artifacts(
    page,
    test_name: str,
    test_file: str = "",
    errors: Iterable[str] = (),
    root: Union[str, Path] = DIAGNOSTICS.ROOT_DIR,
) -> Optional[Path]:
    """Write screenshot, HTML and failure-info.json for a failed test.

    Args:
        page: Playwright page the test was driving
        test_name: Test title or node id
        test_file: Path of the test module
        errors: Failure messages
        root: Directory artifacts are written under

    Returns:
        The artifact directory, or None if it could not be created
    """
    artifact_dir = Path(root) / artifact_dir_name(test_name)
    try:
        artifact_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Failed to create failure artifact directory {artifact_dir}: {e}")
        return None

    errors = list(errors)
    try_cleanup(page.screenshot, "failure screenshot",
                path=str(artifact_dir / 'failure-screenshot.png'), full_page=True, type='png')
    try_cleanup(lambda: (artifact_dir / 'page-content.html').write_text(page.content(), encoding='utf-8'),
                "page HTML")
    try_cleanup(lambda: (artifact_dir / 'failure-info.json').write_text(
        json.dumps(_failure_info(page, test_name, test_file, errors), indent=2), encoding='utf-8'),
        "failure info")

    logger.info(f"Failure artifacts for {test_name} saved to {artifact_dir}")
    return artifact_dir


def cleanup_artifacts(root: Union[str, Path] = DIAGNOSTICS.ROOT_DIR,
                      older_than_days: int = DIAGNOSTICS.RETENTION_DAYS,
                      now: Optional[float] = None) -> List[Path]:
    """Delete artifact directories older than older_than_days.

    Returns:
        The directories that were removed
    """
    root = Path(root)
    if not root.exists():
        return []

    cutoff = (now if now is not None else time.time()) - older_than_days * 86400
    removed = []
    for entry in sorted(root.iterdir()):
        if not entry.is_dir() or entry.stat().st_mtime >= cutoff:
            continue
        if try_cleanup(shutil.rmtree, f"remove {entry.name}", entry):
            removed.append(entry)

    logger.info(f"Removed {len(removed)} failure artifact director{'y' if len(removed) == 1 else 'ies'} from {root}")
    return removed


def record_test_failure(item, call, report, root: Union[str, Path] = DIAGNOSTICS.ROOT_DIR) -> Optional[Path]:
    """Capture artifacts and a Sentry event for a failed setup or call phase.

    Fixtures sign in and select the company during setup, so setup failures
    are recorded like assertion failures.

    Args:
        item: pytest test item
        call: pytest CallInfo of the phase
        report: TestReport of the phase
        root: Directory artifacts are written under

    Returns:
        The artifact directory, or None when nothing was written
    """
    if report.when not in FAILURE_PHASES or not report.failed:
        return None

    page = (getattr(item, "funcargs", None) or {}).get("page")
    artifact_dir = None
    if page is not None:
        artifact_dir = capture_failure_artifacts(
            page, item.nodeid, test_file=str(getattr(item, "path", "")), errors=[str(report.longrepr)], root=root)
    if call.excinfo is not None:
        capture_test_failure(call.excinfo.value, test_name=item.nodeid,
                             extra={'phase': report.when,
                                    'artifact_dir': str(artifact_dir) if artifact_dir else None})
    logger.error(f"{item.nodeid} failed during {report.when}")
    return artifact_dir
