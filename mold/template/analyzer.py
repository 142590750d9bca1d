"""Static discovery of the placeholders a template references."""

from __future__ import annotations

import logging
from pathlib import Path

from ..core.errors import NotFoundError
from .nodes import (
    ActionNode,
    CallNode,
    Expression,
    FieldNode,
    IfNode,
    ListNode,
    Node,
    PipeNode,
    RangeNode,
)
from .parser import parse

logger = logging.getLogger(__name__)


def identify_placeholders(source: str, name: str = "template") -> set[str]:
    """Return the distinct dot-joined field names referenced by *source*.

    The template is parsed but never executed, so no data is needed.
    Fields are collected from actions, from ``if``/``range`` pipelines and
    from helper arguments; ``$``-rooted chains are not placeholders.

    Raises:
        ParseError: If the template syntax is malformed.
    """
    placeholders: set[str] = set()
    _walk(parse(source, name), placeholders)
    return placeholders


def analyze_file(template_path: Path) -> set[str]:
    """Read a template file and identify its placeholders."""
    if not template_path.is_file():
        raise NotFoundError(f"Template not found: {template_path}")
    logger.debug(f"Analyzing template: {template_path}")
    source = template_path.read_bytes().decode("utf-8", "surrogateescape")
    return identify_placeholders(source, template_path.name)


def _walk(node: Node, placeholders: set[str]) -> None:
    if isinstance(node, ListNode):
        for child in node.nodes:
            _walk(child, placeholders)
    elif isinstance(node, ActionNode):
        _collect(node.pipe, placeholders)
    elif isinstance(node, (IfNode, RangeNode)):
        _collect(node.pipe, placeholders)
        _walk(node.body, placeholders)
        if node.else_body is not None:
            _walk(node.else_body, placeholders)


def _collect(expr: Expression, placeholders: set[str]) -> None:
    if isinstance(expr, FieldNode):
        placeholders.add(expr.dotted)
    elif isinstance(expr, CallNode):
        for arg in expr.args:
            _collect(arg, placeholders)
    elif isinstance(expr, PipeNode):
        for command in expr.commands:
            _collect(command, placeholders)
