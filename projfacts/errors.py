"""
Exceptions and error logging for the facts store.

Logs full stack traces for debugging while tool responses carry
clean messages.
"""

import os
import traceback
from datetime import datetime, timezone
from pathlib import Path

from .paths import get_tool_directory


class FactsError(Exception):
    """Base class for facts store errors."""


class StorageError(FactsError):
    """A read, write, list, or mkdir on the storage backend failed."""


class NotFoundError(StorageError):
    """The requested path does not exist."""


class ValidationError(FactsError, ValueError):
    """Caller supplied a value outside a recognized enumeration."""


def _error_log_path() -> Path:
    """Resolve error log path, respecting FACTS_HOME."""
    return get_tool_directory() / "facts-errors.log"


def log_exception(exc: Exception, context: str = "") -> Path:
    """
    Log exception with full traceback to file.

    Args:
        exc: The exception that occurred
        context: Optional context string (e.g., tool name)

    Returns:
        Path to the error log file
    """
    log_path = _error_log_path()
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(log_path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, 0o600)
        with os.fdopen(fd, "a") as f:
            f.write(f"\n{'='*60}\n")
            f.write(f"[{timestamp}]")
            if context:
                f.write(f" {context}")
            f.write("\n")
            f.write("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
    except OSError:
        pass  # never fail the caller over the error log
    return log_path
