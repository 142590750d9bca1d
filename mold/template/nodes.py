"""Expression tree produced by the parser.

Text and action nodes make up a ``ListNode``; actions hold a ``PipeNode``
made of commands, each either a single operand or a ``CallNode``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class TextNode:
    text: str


@dataclass(frozen=True)
class DotNode:
    def __str__(self) -> str:
        return "."


@dataclass(frozen=True)
class FieldNode:
    """Field chain resolved against the current context, e.g. ``.a.b``."""

    names: tuple[str, ...]

    @property
    def dotted(self) -> str:
        return ".".join(self.names)

    def __str__(self) -> str:
        return "." + self.dotted


@dataclass(frozen=True)
class VariableNode:
    """``$`` or ``$.a.b``, resolved against the root data."""

    names: tuple[str, ...] = ()

    def __str__(self) -> str:
        return "$" + "".join(f".{name}" for name in self.names)


@dataclass(frozen=True)
class LiteralNode:
    value: Any
    source: str

    def __str__(self) -> str:
        return self.source


@dataclass(frozen=True)
class CallNode:
    """Helper invocation; piped input is appended to ``args`` at execution."""

    name: str
    args: tuple[Expression, ...] = ()

    def __str__(self) -> str:
        parts = [f"({arg})" if isinstance(arg, PipeNode) else str(arg) for arg in self.args]
        return " ".join([self.name, *parts])


@dataclass(frozen=True)
class PipeNode:
    commands: tuple[Expression, ...]
    line: int = 0

    def __str__(self) -> str:
        return " | ".join(map(str, self.commands))


Expression = Union[DotNode, FieldNode, VariableNode, LiteralNode, CallNode, PipeNode]


@dataclass(frozen=True)
class ActionNode:
    pipe: PipeNode
    line: int


@dataclass(frozen=True)
class ListNode:
    nodes: tuple[Node, ...] = ()


@dataclass(frozen=True)
class IfNode:
    pipe: PipeNode
    body: ListNode
    else_body: ListNode | None
    line: int


@dataclass(frozen=True)
class RangeNode:
    pipe: PipeNode
    body: ListNode
    else_body: ListNode | None
    line: int


Node = Union[TextNode, ActionNode, IfNode, RangeNode, ListNode]
