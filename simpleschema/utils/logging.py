"""
simpleschema Logging Utilities

Overview:
---------
Centralised logging configuration.  Every module obtains its logger through
:func:`get_logger`, which places it under the ``simpleschema`` namespace.
Until :func:`setup_logging` is called the namespace only carries a
``NullHandler``, so importing the library never writes anything.

Log Levels:
-----------
- DEBUG: Provider resolution, compile cache activity, per-conversion summaries
- INFO: Session start, registry changes
- WARNING: Replaced providers
- ERROR: Not used by the library itself; errors propagate to the caller

Usage:
------
    from simpleschema.utils.logging import get_logger, setup_logging

    # Call once at application startup
    setup_logging(level="DEBUG", console_output=True)

    logger = get_logger(__name__)
    logger.debug("Compiling descriptor...")
"""

from __future__ import annotations

import logging
import os
import sys
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional

# ============================================================================
# Constants
# ============================================================================

ROOT_LOGGER_NAME = "simpleschema"
DEFAULT_LOG_LEVEL = "WARNING"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(session_id)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Detailed format for file logging (includes line numbers)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(session_id)s | %(name)s:%(lineno)d | %(message)s"

_log_file_path: Optional[Path] = None
_session_id: Optional[str] = None

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


# ============================================================================
# Session ID Filter - Adds session_id to all log records
# ============================================================================

class SessionIdFilter(logging.Filter):
    """Add session_id to all log records."""

    def __init__(self, session_id: str):
        super().__init__()
        self.session_id = session_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = self.session_id  # type: ignore[attr-defined]
        return True


class SessionFormatter(logging.Formatter):
    """Formatter that adds session_id, defaulting to 'N/A' if not present."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "session_id"):
            record.session_id = _session_id or "N/A"  # type: ignore[attr-defined]
        return super().format(record)


# ============================================================================
# Setup Functions
# ============================================================================

def generate_session_id() -> str:
    """Generate a short unique session ID (6 characters)."""
    return uuid.uuid4().hex[:6]


def generate_log_filename(session_id: str) -> str:
    """Generate a timestamped log filename with session ID."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"simpleschema_{timestamp}_{session_id}.log"


def get_log_directory() -> Path:
    """Configured log directory (``SimpleSchemaConfig.log_dir``)."""
    from simpleschema.config import get_config

    return get_config().log_dir


def setup_logging(
    level: Optional[str] = None,
    log_dir: Optional[Path] = None,
    console_output: bool = False,
    log_to_file: bool = False,
) -> Optional[Path]:
    """
    Configure the ``simpleschema`` logger for a new session.

    Parameters
    ----------
    level : str, optional
        DEBUG, INFO, WARNING or ERROR.  Falls back to SIMPLESCHEMA_LOG_LEVEL,
        then to :class:`~simpleschema.config.SimpleSchemaConfig.log_level`.
    log_dir : Path, optional
        When given, a per-session log file is written there.
    console_output : bool
        If True, also log to stderr.
    log_to_file : bool
        If True and no ``log_dir`` is given, write the session log file to
        :func:`get_log_directory` (``~/.simpleschema/logs`` by default).

    Returns
    -------
    Path or None
        The log file being written to, if any.
    """
    global _log_file_path, _session_id

    _session_id = generate_session_id()

    if level is None:
        level = os.getenv("SIMPLESCHEMA_LOG_LEVEL")
    if level is None:
        from simpleschema.config import get_config

        level = get_config().log_level or DEFAULT_LOG_LEVEL
    log_level = getattr(logging, level.upper(), logging.WARNING)

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.handlers.clear()
    for f in root.filters[:]:
        root.removeFilter(f)

    root.setLevel(log_level)
    root.addFilter(SessionIdFilter(_session_id))

    _log_file_path = None
    if log_dir is None and log_to_file:
        log_dir = get_log_directory()
    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        _log_file_path = log_dir / generate_log_filename(_session_id)
        file_handler = logging.FileHandler(_log_file_path, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(SessionFormatter(FILE_LOG_FORMAT, LOG_DATE_FORMAT))
        root.addHandler(file_handler)

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(SessionFormatter(LOG_FORMAT, LOG_DATE_FORMAT))
        root.addHandler(console_handler)

    if not root.handlers:
        root.addHandler(logging.NullHandler())

    root.propagate = False

    root.info(f"simpleschema logging session {_session_id} started (level {level.upper()})")
    return _log_file_path


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the given module name.

    Example
    -------
        logger = get_logger(__name__)
        logger.debug("Resolving provider...")
    """
    if name.startswith(ROOT_LOGGER_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def get_current_log_file() -> Optional[Path]:
    """Return the path to the current log file, if one is being written."""
    return _log_file_path


def get_session_id() -> Optional[str]:
    """Return the current session ID, if logging was set up."""
    return _session_id
