"""Executes a parsed expression tree against a data context."""

from __future__ import annotations

import math
from typing import Any, Mapping

from ..core.errors import RenderError
from .helpers import HELPERS, Helper
from .nodes import (
    ActionNode,
    CallNode,
    DotNode,
    Expression,
    FieldNode,
    IfNode,
    ListNode,
    LiteralNode,
    Node,
    PipeNode,
    RangeNode,
    TextNode,
    VariableNode,
)

_COMPOSITE = (Mapping, list, tuple, set, frozenset)


def format_value(value: Any) -> str:
    """Return the textual form of a scalar data value.

    Booleans render as ``true``/``false``, integral floats without a
    fractional part, ``None`` as an empty string.

    Raises:
        TypeError: For mappings and sequences, which have no textual form.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _format_float(value)
    if value is None:
        return ""
    if isinstance(value, _COMPOSITE):
        raise TypeError(f"cannot render {type(value).__name__} value as text")
    return str(value)


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def _map_key_order(key: Any) -> tuple[str, Any]:
    # YAML keys may mix types; keys only compare within one type name
    return type(key).__name__, key


def is_true(value: Any) -> bool:
    """Truthiness used by ``if``: false, zero, nil and empty values are false."""
    return value is not None and bool(value)


class Executor:
    """Renders an expression tree.

    The root data is exposed as ``$`` and is the initial ``.``; inside a
    ``range`` body ``.`` is the current element.
    """

    def __init__(
        self,
        data: Mapping[str, Any],
        name: str = "template",
        helpers: Mapping[str, Helper] = HELPERS,
    ) -> None:
        self.data = data
        self.name = name
        self.helpers = helpers
        self._out: list[str] = []

    def error(self, message: str, line: int, expr: Any = None) -> RenderError:
        if expr is not None:
            message = f"at <{expr}>: {message}"
        return RenderError(message, name=self.name, line=line)

    def execute(self, tree: ListNode) -> str:
        self._out = []
        self.walk(self.data, tree)
        return "".join(self._out)

    def walk(self, dot: Any, node: Node) -> None:
        if isinstance(node, TextNode):
            self._out.append(node.text)
        elif isinstance(node, ListNode):
            for child in node.nodes:
                self.walk(dot, child)
        elif isinstance(node, ActionNode):
            value = self.eval_pipeline(dot, node.pipe)
            try:
                self._out.append(format_value(value))
            except TypeError as exc:
                raise self.error(str(exc), node.line, node.pipe) from exc
        elif isinstance(node, IfNode):
            if is_true(self.eval_pipeline(dot, node.pipe)):
                self.walk(dot, node.body)
            elif node.else_body is not None:
                self.walk(dot, node.else_body)
        elif isinstance(node, RangeNode):
            items = self._iterate(self.eval_pipeline(dot, node.pipe), node)
            for item in items:
                self.walk(item, node.body)
            if not items and node.else_body is not None:
                self.walk(dot, node.else_body)
        else:
            raise TypeError(f"unknown node type {type(node).__name__}")

    def _iterate(self, value: Any, node: RangeNode) -> list[Any]:
        if value is None:
            return []
        if isinstance(value, Mapping):
            return [value[key] for key in sorted(value, key=_map_key_order)]
        if isinstance(value, (list, tuple)):
            return list(value)
        raise self.error(
            f"range can't iterate over {type(value).__name__}", node.line, node.pipe
        )

    def eval_pipeline(self, dot: Any, pipe: PipeNode) -> Any:
        first, rest = pipe.commands[0], pipe.commands[1:]
        value = self.eval_arg(dot, first, pipe.line)
        for command in rest:
            value = self.call(dot, command, pipe.line, piped=(value,))
        return value

    def eval_arg(self, dot: Any, expr: Expression, line: int) -> Any:
        if isinstance(expr, FieldNode):
            return self.resolve(dot, expr.names, expr, line)
        if isinstance(expr, DotNode):
            return dot
        if isinstance(expr, VariableNode):
            return self.resolve(self.data, expr.names, expr, line)
        if isinstance(expr, LiteralNode):
            return expr.value
        if isinstance(expr, CallNode):
            return self.call(dot, expr, line)
        if isinstance(expr, PipeNode):
            return self.eval_pipeline(dot, expr)
        raise TypeError(f"unknown expression type {type(expr).__name__}")

    def resolve(self, value: Any, names: tuple[str, ...], expr: Any, line: int) -> Any:
        for name in names:
            if isinstance(value, Mapping):
                if name not in value:
                    raise self.error(f'map has no entry for key "{name}"', line, expr)
                value = value[name]
            elif value is None:
                raise self.error(f"nil pointer evaluating .{name}", line, expr)
            else:
                raise self.error(
                    f"can't evaluate field {name} in type {type(value).__name__}",
                    line,
                    expr,
                )
        return value

    def call(
        self, dot: Any, expr: CallNode, line: int, piped: tuple[Any, ...] = ()
    ) -> str:
        helper = self.helpers[expr.name]
        args = [self.eval_arg(dot, arg, line) for arg in expr.args] + list(piped)
        if len(args) != 1:
            raise self.error(
                f"wrong number of args for {expr.name}: want 1 got {len(args)}",
                line,
                expr,
            )
        try:
            text = format_value(args[0])
        except TypeError as exc:
            raise self.error(
                f"wrong type for value in {expr.name}: expected string; "
                f"got {type(args[0]).__name__}",
                line,
                expr,
            ) from exc
        return helper(text)


def execute(
    tree: ListNode,
    data: Mapping[str, Any],
    name: str = "template",
    helpers: Mapping[str, Helper] = HELPERS,
) -> str:
    """Render *tree* against *data*; raises ``RenderError`` on failure."""
    return Executor(data, name, helpers).execute(tree)
