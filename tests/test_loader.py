"""Tests for JSON/YAML data file loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from mold.core.errors import DataParseError, NotFoundError, ParseError, UnsupportedFormatError
from mold.data.loader import load_data_file

pytestmark = pytest.mark.unit


def test_load_json(tmp_path: Path) -> None:
    path = tmp_path / "data.json"
    path.write_text('{"name": "test", "version": 1.0, "enabled": true}')

    assert load_data_file(path) == {"name": "test", "version": 1.0, "enabled": True}


@pytest.mark.parametrize("name", ["data.yaml", "data.yml", "DATA.YAML"])
def test_load_yaml(tmp_path: Path, name: str) -> None:
    path = tmp_path / name
    path.write_text("name: test\nversion: 2\nenabled: false\nnested:\n  key: value\n")

    assert load_data_file(path) == {
        "name": "test",
        "version": 2,
        "enabled": False,
        "nested": {"key": "value"},
    }


def test_empty_yaml_is_empty_mapping(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_data_file(path) == {}


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(NotFoundError):
        load_data_file(tmp_path / "nonexistent.json")


def test_unsupported_extension(tmp_path: Path) -> None:
    path = tmp_path / "data.txt"
    path.write_text("some content")
    with pytest.raises(UnsupportedFormatError, match="unsupported data file format"):
        load_data_file(path)


@pytest.mark.parametrize(
    ("name", "content", "message"),
    [
        ("invalid.json", "{invalid json}", "failed to parse JSON file"),
        ("invalid.yaml", "key: [unclosed", "failed to parse YAML file"),
        ("list.json", "[1, 2]", "mapping at the top level"),
        ("scalar.yml", "just a string", "mapping at the top level"),
    ],
)
def test_malformed_content(tmp_path: Path, name: str, content: str, message: str) -> None:
    path = tmp_path / name
    path.write_text(content)

    with pytest.raises(DataParseError, match=message) as excinfo:
        load_data_file(path)
    assert isinstance(excinfo.value, ParseError)
