"""Template rendering engine."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from ..core.errors import NotFoundError, OutputError
from ..template.executor import execute
from ..template.nodes import ListNode
from ..template.parser import parse
from .io import atomic_write_bytes, file_mode

logger = logging.getLogger(__name__)

# Bytes that are not valid UTF-8 pass through literal text unchanged.
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def load_template(template_path: Path) -> tuple[str, ListNode]:
    """Read and parse a template file.

    Args:
        template_path: Path to the template file

    Returns:
        Decoded source text and its parsed expression tree

    Raises:
        NotFoundError: If the file does not exist
        ParseError: If the template syntax is malformed
    """
    if not template_path.is_file():
        raise NotFoundError(f"Template not found: {template_path}")

    source = template_path.read_bytes().decode(_ENCODING, _ERRORS)
    return source, parse(source, template_path.name)


def render(
    source: str | bytes, data: Mapping[str, Any], name: str = "template"
) -> bytes:
    """Parse and execute a template, returning the rendered bytes.

    Raises:
        ParseError: If the template syntax is malformed
        RenderError: If execution against ``data`` fails
    """
    if isinstance(source, bytes):
        source = source.decode(_ENCODING, _ERRORS)
    rendered = execute(parse(source, name), data, name)
    return rendered.encode(_ENCODING, _ERRORS)


def render_path(path: str, data: Mapping[str, Any]) -> str:
    """Render placeholders embedded in a file or directory name.

    Args:
        path: A path segment or relative path, e.g. ``{{.project_name}}``
        data: Template context data

    Returns:
        The rendered name; text without actions is returned unchanged
    """
    if "{{" not in path:
        return path
    return execute(parse(path, "path"), data, "path")


def render_template_file(
    template_path: Path, dest_path: Path, data: Mapping[str, Any]
) -> Path:
    """Render a template file to ``dest_path`` with the template's permissions.

    Nothing is written unless parsing and execution both succeed.

    Args:
        template_path: Template file to read
        dest_path: Destination file path
        data: Template context data

    Returns:
        Output file path
    """
    logger.debug(f"Rendering template: {template_path}")

    _, tree = load_template(template_path)
    rendered = execute(tree, data, template_path.name)

    try:
        mode = file_mode(template_path)
    except OSError as e:
        raise OutputError(f"failed to stat '{template_path}': {e}") from e
    atomic_write_bytes(dest_path, rendered.encode(_ENCODING, _ERRORS), mode=mode)

    return dest_path
