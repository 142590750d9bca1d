"""Data file loading: JSON or YAML into the rendering context."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from ..core.errors import DataParseError, NotFoundError, UnsupportedFormatError

logger = logging.getLogger(__name__)

JSON_SUFFIXES = (".json",)
YAML_SUFFIXES = (".yaml", ".yml")


def load_data_file(path: Path) -> dict[str, Any]:
    """Load a JSON or YAML data file into a mapping.

    The format is chosen by extension (case-insensitive). An empty YAML
    document loads as an empty mapping.

    Args:
        path: Data file path

    Returns:
        Top-level mapping used as the rendering context

    Raises:
        NotFoundError: If the file does not exist
        UnsupportedFormatError: If the extension is not JSON or YAML
        DataParseError: If the content is malformed or not a mapping
    """
    if not path.is_file():
        raise NotFoundError(f"Data file not found: {path}")

    suffix = path.suffix.lower()
    if suffix not in JSON_SUFFIXES + YAML_SUFFIXES:
        raise UnsupportedFormatError(
            f"unsupported data file format: {suffix or path.name!r}. "
            "Please use .json, .yaml, or .yml"
        )

    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise DataParseError(f"data file '{path}' is not valid UTF-8: {e}") from e

    if suffix in JSON_SUFFIXES:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise DataParseError(f"failed to parse JSON file '{path}': {e}") from e
    else:
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise DataParseError(f"failed to parse YAML file '{path}': {e}") from e
        if data is None:
            data = {}

    if not isinstance(data, dict):
        raise DataParseError(
            f"data file '{path}' must contain a mapping at the top level, "
            f"got {type(data).__name__}"
        )

    logger.debug(f"Loaded {len(data)} top-level key(s) from {path}")
    return data
