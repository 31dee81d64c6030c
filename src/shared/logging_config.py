"""Logging configuration and setup.

Records go to a rotating file and the console. Every line carries the node
id of the test that emitted it, so interleaved output from setup, the test
body and cleanup can be traced back to one scenario.
"""

import logging
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from src.shared.constants import LOGGING

__all__ = [
    'CurrentTestFilter',
    'LOG_FORMAT',
    'set_log_test',
    'setup_logging',
]

LOG_FORMAT = '%(asctime)s - %(levelname)s - [%(test)s] %(message)s'
NO_TEST = '-'

# Serializes handler setup when pytest-xdist style workers share a process
_logging_lock = threading.Lock()
_current_test = NO_TEST


def set_log_test(nodeid: Optional[str]) -> None:
    """Name the test whose records follow; None once it has finished."""
    global _current_test
    _current_test = nodeid or NO_TEST


class CurrentTestFilter(logging.Filter):
    """Stamps each record with the running test's node id as record.test."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.test = _current_test
        return True


def _drop_stale_file_handlers(root_logger: logging.Logger, log_path: Path, max_bytes: int,
                              backup_count: int) -> bool:
    """Remove handlers on log_path with other rotation settings; True if a matching one remains."""
    target = str(log_path.absolute())
    for handler in root_logger.handlers[:]:
        if not isinstance(handler, RotatingFileHandler) or handler.baseFilename != target:
            continue
        if handler.maxBytes == max_bytes and handler.backupCount == backup_count:
            return True
        root_logger.removeHandler(handler)
        handler.close()
    return False


def _has_console_handler(root_logger: logging.Logger) -> bool:
    # FileHandler is the base class of every file-based handler
    return any(isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
               for h in root_logger.handlers)


def _attach(root_logger: logging.Logger, handler: logging.Handler) -> None:
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(CurrentTestFilter())
    root_logger.addHandler(handler)


def setup_logging(log_file: str = "logs/proof360.log", max_bytes: int = LOGGING.MAX_BYTES,
                  backup_count: int = LOGGING.BACKUP_COUNT, level: int = logging.INFO) -> None:
    """Setup logging configuration with rotation.

    Idempotent: calling it again (from the CLI and then from the pytest
    session, say) will not add duplicate handlers.

    Args:
        log_file: Path to log file
        max_bytes: Maximum file size before rotation (default: 10MB)
        backup_count: Number of backup files to keep (default: 5)
        level: Root logger level
    """
    with _logging_lock:
        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        log_path = Path(log_file)

        if not _drop_stale_file_handlers(root_logger, log_path, max_bytes, backup_count):
            log_path.parent.mkdir(parents=True, exist_ok=True)
            _attach(root_logger, RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count))

        if not _has_console_handler(root_logger):
            _attach(root_logger, logging.StreamHandler())
