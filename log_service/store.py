"""
Append-only device log backed by a single text file.

All file access goes through one LogStore instance; its lock is held for the
whole of each read, append or truncate so lines never interleave.
"""

import logging
import os
import threading
from datetime import datetime
from typing import Optional

from .errors import LogClearError, LogOpenError, LogReadError, LogWriteError
from .models import DeviceRecord

LOG = logging.getLogger("devlog.service")


def rfc3339(now: Optional[datetime] = None) -> str:
    """Format a timestamp as RFC 3339 with second precision (local time)."""
    now = now or datetime.now()
    if now.tzinfo is None:
        now = now.astimezone()
    ts = now.isoformat(timespec="seconds")
    if ts.endswith("+00:00"):
        ts = ts[:-6] + "Z"
    return ts


class LogStore:
    """Owns the log file path and the lock guarding it"""

    def __init__(self, path: str = "server.log"):
        self.path = path
        self._lock = threading.Lock()

    def read(self) -> Optional[bytes]:
        """Return the raw file contents, or None if the file does not exist."""
        with self._lock:
            try:
                with open(self.path, "rb") as f:
                    return f.read()
            except FileNotFoundError:
                return None
            except OSError as e:
                LOG.error(f"❌ Failed to read {self.path}: {e}")
                raise LogReadError(e) from e

    def append(self, record: DeviceRecord, now: Optional[datetime] = None) -> str:
        """Append one formatted line for the record and return it."""
        line = record.log_line(rfc3339(now))
        with self._lock:
            try:
                f = open(self.path, "a", encoding="utf-8")
            except OSError as e:
                LOG.error(f"❌ Failed to open {self.path}: {e}")
                raise LogOpenError(e) from e
            with f:
                try:
                    f.write(line)
                    f.flush()
                except OSError as e:
                    LOG.error(f"❌ Failed to write {self.path}: {e}")
                    raise LogWriteError(e) from e
        return line

    def clear(self) -> None:
        """Truncate the file to zero length; a missing file counts as already clear."""
        with self._lock:
            try:
                os.truncate(self.path, 0)
            except FileNotFoundError:
                return
            except OSError as e:
                LOG.error(f"❌ Failed to truncate {self.path}: {e}")
                raise LogClearError(e) from e
