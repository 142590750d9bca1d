"""Atomic destination writes and mode-preserving copies for the tree walk.

Every output file is staged in a temporary sibling and moved into place, so
a failed render or copy never leaves a truncated destination behind.
"""

from __future__ import annotations

import os
import shutil
import stat
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator

from ..core.errors import NotFoundError, OutputError


def ensure_parent(path: Path) -> None:
    """Create the missing directories above a destination file."""
    path.parent.mkdir(parents=True, exist_ok=True)


def file_mode(path: Path) -> int:
    """Return the permission bits of *path*."""
    return stat.S_IMODE(path.stat().st_mode)


@contextmanager
def _atomic_target(path: Path, mode: int) -> Iterator[BinaryIO]:
    ensure_parent(path)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    try:
        with os.fdopen(fd, "wb") as tmp:
            yield tmp
            tmp.flush()
            os.fsync(tmp.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    finally:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)


def atomic_write_bytes(path: Path, data: bytes, mode: int = 0o644) -> None:
    """Write bytes to a file atomically using a temporary file.

    The destination either receives the full content with ``mode`` applied
    or is left untouched.

    Args:
        path: Destination file path
        data: Content to write
        mode: File permissions (octal)

    Raises:
        OutputError: If the file or its parent directories cannot be written
    """
    try:
        with _atomic_target(path, mode) as target:
            target.write(data)
    except OSError as e:
        raise OutputError(f"failed to write '{path}': {e}") from e


def copy_file(src: Path, dst: Path) -> None:
    """Copy *src* to *dst* byte for byte, preserving permission bits.

    Raises:
        NotFoundError: If *src* is not a regular file
        OutputError: If reading or writing fails
    """
    if not src.is_file():
        raise NotFoundError(f"Source file not found: {src}")
    try:
        with src.open("rb") as source, _atomic_target(dst, file_mode(src)) as target:
            shutil.copyfileobj(source, target)
    except OSError as e:
        raise OutputError(f"failed to copy '{src}' to '{dst}': {e}") from e
