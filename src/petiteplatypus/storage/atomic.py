"""Atomic file replacement (temp file + fsync + rename + fsync(dir))."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

__all__ = ["atomic_write_bytes"]


def atomic_write_bytes(file_path: Path, content: bytes, *, mode: int = 0o644, fsync: bool = True) -> None:
    """Replace ``file_path`` with ``content`` so readers see old or new, never partial.

    Parameters
    ----------
    file_path
        Target file path; its parent directory must exist
    content
        Bytes to write
    mode
        Permission bits of the new file
    fsync
        Flush the temp file and the directory to disk

    Raises
    ------
    OSError
        If any step fails; the temp file is removed and the target is untouched
    """
    tmp_file = tempfile.NamedTemporaryFile(
        mode="wb",
        dir=file_path.parent,
        prefix=f".{file_path.name}.tmp",
        delete=False,
    )
    tmp_path = Path(tmp_file.name)

    try:
        with tmp_file:
            tmp_file.write(content)
            tmp_file.flush()
            if fsync:
                os.fsync(tmp_file.fileno())
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, file_path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise

    if fsync:
        dir_fd = os.open(file_path.parent, os.O_RDONLY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)
