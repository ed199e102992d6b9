"""Backing file storage for uploads."""

import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

_UNSAFE_NAME_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


@dataclass(frozen=True)
class StoredFile:
    """Handle to an acquired backing file."""

    path: str
    size_bytes: int


class FileStorage(Protocol):
    """Acquire/release storage for uploaded file bytes."""

    def acquire(self, file_name: str, data: bytes) -> StoredFile:
        """Persist upload bytes and return a handle."""
        ...

    def release(self, path: str) -> bool:
        """Remove a stored file. Returns False if removal failed."""
        ...


def sanitize_file_name(file_name: str) -> str:
    """Replace characters outside [a-zA-Z0-9.-] with underscores."""
    cleaned = _UNSAFE_NAME_CHARS.sub("_", Path(file_name).name)
    return cleaned or "upload"


class LocalFileStorage:
    """Stores uploads under a directory as ``<timestamp>_<sanitized name>``."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def acquire(self, file_name: str, data: bytes) -> StoredFile:
        """Write upload bytes to a new file under the root directory."""
        self._root.mkdir(parents=True, exist_ok=True)

        timestamp_ms = time.time_ns() // 1_000_000
        path = self._root / f"{timestamp_ms}_{sanitize_file_name(file_name)}"
        suffix = 1
        while path.exists():
            path = self._root / f"{timestamp_ms}-{suffix}_{sanitize_file_name(file_name)}"
            suffix += 1

        path.write_bytes(data)
        return StoredFile(path=str(path), size_bytes=len(data))

    def release(self, path: str) -> bool:
        """Delete a stored file; failures are logged, not raised."""
        try:
            Path(path).unlink()
        except OSError as e:
            logger.error("File cleanup error for %s: %s", path, e)
            return False
        return True

    def is_writable(self) -> bool:
        """Check the root directory can be created and written to."""
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            probe = self._root / ".write_probe"
            probe.write_bytes(b"")
            probe.unlink()
        except OSError:
            return False
        return True
