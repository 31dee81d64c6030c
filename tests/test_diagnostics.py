"""Tests for failure artifact capture and pruning."""

import json
import os
import time
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from src.shared.diagnostics import (
    artifact_dir_name,
    capture_failure_artifacts,
    cleanup_artifacts,
    record_test_failure,
)


def _page():
    page = MagicMock()
    page.url = "https://uat.proof360.io/command"
    page.viewport_size = {'width': 1920, 'height': 1080}
    page.content.return_value = "<html><body>stack</body></html>"
    page.evaluate.return_value = "Mozilla/5.0"
    return page


class TestArtifactDirName:

    def test_sanitizes_name_and_timestamp(self):
        name = artifact_dir_name("tests/e2e/test_x.py::test_escalate[chromium]",
                                 now=datetime(2024, 5, 1, 8, 30, 15, 123000, tzinfo=timezone.utc))
        assert name == "tests_e2e_test_x_py__test_escalate_chromium__2024-05-01T08-30-15-123+00-00"


class TestCaptureFailureArtifacts:

    def test_writes_screenshot_html_and_info(self, tmp_path):
        page = _page()
        artifact_dir = capture_failure_artifacts(page, "test_escalate", "tests/e2e/test_escalation.py",
                                                 errors=["AssertionError: card still shown"], root=tmp_path)

        page.screenshot.assert_called_once()
        assert page.screenshot.call_args.kwargs['full_page'] is True
        assert (artifact_dir / 'page-content.html').read_text(encoding='utf-8').startswith("<html>")

        info = json.loads((artifact_dir / 'failure-info.json').read_text(encoding='utf-8'))
        assert info['testTitle'] == "test_escalate"
        assert info['pageUrl'] == "https://uat.proof360.io/command"
        assert info['viewport'] == {'width': 1920, 'height': 1080}
        assert info['errors'] == [{'message': "AssertionError: card still shown"}]

    def test_one_failing_artifact_does_not_stop_the_others(self, tmp_path):
        page = _page()
        page.screenshot.side_effect = RuntimeError("page closed")
        page.evaluate.side_effect = RuntimeError("page closed")

        artifact_dir = capture_failure_artifacts(page, "test_closed", root=tmp_path)

        assert (artifact_dir / 'page-content.html').exists()
        info = json.loads((artifact_dir / 'failure-info.json').read_text(encoding='utf-8'))
        assert info['userAgent'] is None
        assert info['pageUrl'] == "https://uat.proof360.io/command"


class TestCleanupArtifacts:

    def test_removes_only_old_directories(self, tmp_path):
        old = tmp_path / "old_failure"
        recent = tmp_path / "recent_failure"
        old.mkdir()
        recent.mkdir()
        (old / 'failure-info.json').write_text('{}')
        now = time.time()
        os.utime(old, (now - 10 * 86400, now - 10 * 86400))

        removed = cleanup_artifacts(tmp_path, older_than_days=7, now=now)

        assert removed == [old]
        assert not old.exists()
        assert recent.exists()

    def test_missing_root(self, tmp_path):
        assert cleanup_artifacts(tmp_path / "absent") == []


def _failed_phase(when, page=None, error=None, failed=True):
    """Item, CallInfo and TestReport stand-ins for one pytest phase."""
    funcargs = {'page': page} if page is not None else {}
    item = SimpleNamespace(nodeid="tests/e2e/test_e2e_stacks.py::test_escalation",
                           path="tests/e2e/test_e2e_stacks.py", funcargs=funcargs)
    error = error or RuntimeError("Post-login URL not reached")
    call = SimpleNamespace(excinfo=SimpleNamespace(value=error))
    report = SimpleNamespace(when=when, failed=failed, longrepr=f"{type(error).__name__}: {error}")
    return item, call, report


class TestRecordTestFailure:

    @pytest.mark.parametrize("when", ["setup", "call"])
    def test_records_setup_and_call_failures(self, tmp_path, when):
        item, call, report = _failed_phase(when, page=_page())

        with patch('src.shared.diagnostics.capture_test_failure') as capture:
            artifact_dir = record_test_failure(item, call, report, root=tmp_path)

        assert artifact_dir is not None and artifact_dir.parent == tmp_path
        assert (artifact_dir / 'failure-info.json').exists()
        assert capture.call_args.kwargs['extra']['phase'] == when

    def test_setup_failure_before_page_still_reported(self, tmp_path):
        item, call, report = _failed_phase("setup")

        with patch('src.shared.diagnostics.capture_test_failure') as capture:
            assert record_test_failure(item, call, report, root=tmp_path) is None

        capture.assert_called_once()
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.parametrize("when,failed", [("teardown", True), ("call", False), ("setup", False)])
    def test_ignores_other_phases_and_passes(self, tmp_path, when, failed):
        item, call, report = _failed_phase(when, page=_page(), failed=failed)

        with patch('src.shared.diagnostics.capture_test_failure') as capture:
            assert record_test_failure(item, call, report, root=tmp_path) is None

        capture.assert_not_called()
        assert list(tmp_path.iterdir()) == []
