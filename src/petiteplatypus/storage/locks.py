"""Advisory file locks for shared files.

A :class:`FileLock` takes an exclusive ``flock`` on a sidecar ``.lock`` file
next to the protected file. It only excludes other cooperating writers;
processes that ignore the lock file can still write the protected file.
"""

from __future__ import annotations

import fcntl
import os
import time
from pathlib import Path
from typing import Any

from ..observability.loguru_config import get_logger

__all__ = [
    "FileLock",
    "LockTimeoutError",
    "NoOpLock",
    "lock_path_for",
]

logger = get_logger("storage")


class LockTimeoutError(TimeoutError):
    """Raised when a lock is not acquired within its timeout."""

    def __init__(self, lock_file: Path, timeout: float) -> None:
        self.lock_file = lock_file
        self.timeout = timeout
        super().__init__(f"lock {lock_file} still held after {timeout}s")


def lock_path_for(path: Path) -> Path:
    """Return the sidecar lock file path for ``path``."""
    return path.with_name(f"{path.name}.lock")


class FileLock:
    """Exclusive advisory lock context manager.

    Example:
        >>> with FileLock(Path("obsidian.json.lock"), timeout=5.0):
        ...     update_file()
    """

    def __init__(self, lock_file: Path, timeout: float = 10.0, poll_interval: float = 0.05) -> None:
        """Initialize file lock.

        Parameters
        ----------
        lock_file
            Path of the lock file (created if missing, never deleted)
        timeout
            Seconds to wait for the lock before giving up
        poll_interval
            Seconds between acquisition attempts
        """
        self.lock_file = lock_file
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.lock_fd: int | None = None

    def __enter__(self) -> FileLock:
        """Acquire lock."""
        self.lock_fd = os.open(self.lock_file, os.O_CREAT | os.O_RDWR, 0o644)
        start_time = time.monotonic()

        while True:
            try:
                fcntl.flock(self.lock_fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
                break
            except BlockingIOError:
                if time.monotonic() - start_time > self.timeout:
                    os.close(self.lock_fd)
                    self.lock_fd = None
                    raise LockTimeoutError(self.lock_file, self.timeout) from None
                time.sleep(self.poll_interval)

        logger.trace("Acquired lock {}", self.lock_file)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Release lock."""
        if self.lock_fd is not None:
            try:
                fcntl.flock(self.lock_fd, fcntl.LOCK_UN)
            finally:
                os.close(self.lock_fd)
                self.lock_fd = None
            logger.trace("Released lock {}", self.lock_file)


class NoOpLock:
    """No-op lock for when locking is disabled."""

    def __enter__(self) -> NoOpLock:
        """Enter context."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit context."""
        pass
