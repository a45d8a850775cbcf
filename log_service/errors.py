"""
Errors raised by the log store.

Each error carries the fixed text returned to the HTTP caller and the status
it maps to, so handlers never build messages from OS error details.
"""

from typing import Optional


class LogStoreError(Exception):
    """Base class for log file I/O failures."""

    message = "Log file operation failed"
    status_code = 500

    def __init__(self, cause: Optional[OSError] = None) -> None:
        self.cause = cause
        detail = f"{self.message}: {cause}" if cause is not None else self.message
        super().__init__(detail)


class LogReadError(LogStoreError):
    message = "Failed to read log file"


class LogOpenError(LogStoreError):
    message = "Failed to open log file"


class LogWriteError(LogStoreError):
    message = "Failed to write to log file"


class LogClearError(LogStoreError):
    message = "Failed to clear log file"


class InvalidPayloadError(ValueError):
    """Request body could not be decoded into a device record."""

    message = "Invalid JSON format"
    status_code = 400
