"""Shared pytest fixtures for the mold test suite.

Provides reusable fixtures for:
- Writing template files with explicit permission bits
- A small template tree with a rendered file, a copied file and a
  templated directory name
- Resetting the cached settings between tests
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable

import pytest

from mold.settings import get_settings


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Environment changes made by a test must reach ``get_settings``."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ---------------------------------------------------------------------------
# File helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def write_file() -> Callable[..., Path]:
    """Write text (or bytes) to a path, creating parents and applying a mode."""

    def _write(path: Path, content: str | bytes, mode: int = 0o644) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        os.chmod(path, mode)
        return path

    return _write


@pytest.fixture
def write_data(tmp_path: Path) -> Callable[..., Path]:
    """Write a JSON data file and return its path."""

    def _write(data: dict[str, Any], name: str = "data.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def snapshot() -> Callable[[Path], dict[str, bytes]]:
    """Map every file under a root (POSIX relative path) to its content."""

    def _snapshot(root: Path) -> dict[str, bytes]:
        return {
            path.relative_to(root).as_posix(): path.read_bytes()
            for path in sorted(root.rglob("*"))
            if path.is_file()
        }

    return _snapshot


# ---------------------------------------------------------------------------
# Template trees
# ---------------------------------------------------------------------------


@pytest.fixture
def template_tree(tmp_path: Path, write_file) -> Path:
    """A template tree exercising render, copy and path placeholders.

    template/
        main.go.tmpl                    "package {{.package_name}}..."
        README.md                       "# Project README"
        {{.project_name}}/config.yaml.tmpl   "Name: {{.project_name}}"
    """
    root = tmp_path / "template"
    write_file(
        root / "main.go.tmpl",
        'package {{.package_name}}\n\nfunc Hello() string {\n\treturn "{{.greeting}}"\n}\n',
    )
    write_file(root / "README.md", "# Project README")
    write_file(root / "{{.project_name}}" / "config.yaml.tmpl", "Name: {{.project_name}}")
    return root


@pytest.fixture
def tree_data() -> dict[str, Any]:
    return {
        "project_name": "myproject",
        "package_name": "main",
        "greeting": "Hello, World!",
    }
