"""Tests for atomic writes and the byte copier."""

from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from mold.core.errors import NotFoundError, OutputError
from mold.rendering.io import atomic_write_bytes, copy_file

pytestmark = pytest.mark.unit


def _mode(path: Path) -> int:
    return stat.S_IMODE(path.stat().st_mode)


def test_atomic_write_sets_mode_and_content(tmp_path: Path) -> None:
    target = tmp_path / "out" / "file.txt"
    atomic_write_bytes(target, b"payload", mode=0o640)

    assert target.read_bytes() == b"payload"
    assert _mode(target) == 0o640
    assert os.listdir(target.parent) == ["file.txt"]


def test_atomic_write_replaces_read_only_file(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    target.write_bytes(b"old")
    os.chmod(target, 0o444)

    atomic_write_bytes(target, b"new", mode=0o444)

    assert target.read_bytes() == b"new"


def test_atomic_write_into_a_file_path_fails(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    with pytest.raises(OutputError):
        atomic_write_bytes(blocker / "child.txt", b"x")


def test_copy_file_preserves_bytes_and_mode(tmp_path: Path, write_file) -> None:
    src = write_file(tmp_path / "logo.bin", b"\x00\x01\xff binary", 0o600)
    dst = tmp_path / "copy" / "logo.bin"

    copy_file(src, dst)

    assert dst.read_bytes() == b"\x00\x01\xff binary"
    assert _mode(dst) == 0o600


def test_copy_file_missing_source(tmp_path: Path) -> None:
    with pytest.raises(NotFoundError):
        copy_file(tmp_path / "missing", tmp_path / "dst")
    assert not (tmp_path / "dst").exists()
