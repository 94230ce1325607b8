"""
simpleschema utilities: cross-cutting helpers that do not belong to the
descriptor model itself.
"""

from .logging import (
    setup_logging,
    get_logger,
    get_current_log_file,
    get_session_id,
    get_log_directory,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "get_current_log_file",
    "get_session_id",
    "get_log_directory",
]
