"""Storage helpers for shared files: advisory locks and atomic writes."""

from .atomic import atomic_write_bytes
from .locks import FileLock, LockTimeoutError, NoOpLock, lock_path_for

__all__ = [
    "FileLock",
    "LockTimeoutError",
    "NoOpLock",
    "atomic_write_bytes",
    "lock_path_for",
]
