"""Recursive-descent parser turning tokens into an expression tree."""

from __future__ import annotations

from typing import Mapping

from ..core.errors import ParseError
from .helpers import HELPERS, Helper
from .lexer import Token, TokenType, tokenize
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

_KEYWORDS = frozenset({"if", "else", "end", "range"})


class Parser:
    """Parses template source against a fixed table of helper names.

    Helper names are checked at parse time so an unknown function is a
    syntax error rather than an execution failure.
    """

    def __init__(self, helpers: Mapping[str, Helper] = HELPERS) -> None:
        self.helpers = helpers

    def parse(self, source: str, name: str = "template") -> ListNode:
        return _ParseRun(tokenize(source, name), name, self.helpers).parse()


class _ParseRun:
    def __init__(
        self, tokens: list[Token], name: str, helpers: Mapping[str, Helper]
    ) -> None:
        self.tokens = tokens
        self.name = name
        self.helpers = helpers
        self.index = 0

    def error(self, message: str, token: Token | None = None) -> ParseError:
        line = (token or self.peek()).line
        return ParseError(message, name=self.name, line=line)

    def peek(self) -> Token:
        return self.tokens[self.index]

    def next(self) -> Token:
        token = self.tokens[self.index]
        if token.type is not TokenType.EOF:
            self.index += 1
        return token

    def expect(self, type_: TokenType, context: str) -> Token:
        token = self.next()
        if token.type is not type_:
            raise self.error(f"unexpected {_describe(token)} in {context}", token)
        return token

    def parse(self) -> ListNode:
        body, _ = self.parse_list(())
        return body

    def parse_list(self, terminators: tuple[str, ...]) -> tuple[ListNode, str | None]:
        """Parse nodes until EOF or one of the ``terminators`` keywords.

        The terminating ``{{end}}`` is consumed entirely; for ``else`` only
        the keyword is consumed so the caller can look for ``else if``.
        """
        nodes: list[Node] = []
        while True:
            token = self.next()
            if token.type is TokenType.EOF:
                if terminators:
                    raise self.error("unexpected EOF", token)
                return ListNode(tuple(nodes)), None
            if token.type is TokenType.TEXT:
                nodes.append(TextNode(token.text))
                continue

            keyword = self.peek()
            if keyword.type is TokenType.IDENTIFIER and keyword.text in _KEYWORDS:
                self.next()
                if keyword.text in ("end", "else"):
                    if keyword.text not in terminators:
                        raise self.error(f"unexpected {{{{{keyword.text}}}}}", keyword)
                    if keyword.text == "end":
                        self.expect(TokenType.RIGHT_DELIM, "end")
                    return ListNode(tuple(nodes)), keyword.text
                nodes.append(self.parse_control(keyword.text, keyword.line))
            else:
                pipe = self.parse_pipeline("command", TokenType.RIGHT_DELIM)
                nodes.append(ActionNode(pipe, token.line))

    def parse_control(self, keyword: str, line: int) -> IfNode | RangeNode:
        pipe = self.parse_pipeline(keyword, TokenType.RIGHT_DELIM)
        body, terminator = self.parse_list(("end", "else"))
        else_body = None
        if terminator == "else":
            following = self.peek()
            if (
                keyword == "if"
                and following.type is TokenType.IDENTIFIER
                and following.text == "if"
            ):
                # {{else if}} shares the {{end}} of the outer if
                self.next()
                else_body = ListNode((self.parse_control("if", following.line),))
            else:
                self.expect(TokenType.RIGHT_DELIM, "else")
                else_body, _ = self.parse_list(("end",))
        node_type = IfNode if keyword == "if" else RangeNode
        return node_type(pipe, body, else_body, line)

    def parse_pipeline(self, context: str, closing: TokenType) -> PipeNode:
        line = self.peek().line
        commands: list[Expression] = []
        while True:
            commands.append(self.parse_command(context, closing))
            token = self.next()
            if token.type is closing:
                break
            if token.type is not TokenType.PIPE:
                raise self.error(f"unexpected {_describe(token)} in {context}", token)

        for stage, command in enumerate(commands[1:], start=2):
            if not isinstance(command, CallNode):
                raise self.error(
                    f"non executable command in pipeline stage {stage}"
                )
        return PipeNode(tuple(commands), line)

    def parse_command(self, context: str, closing: TokenType) -> Expression:
        operands: list[Expression] = []
        while self.peek().type not in (closing, TokenType.PIPE):
            operands.append(self.parse_operand(context))
        if not operands:
            raise self.error(f"missing value for {context}")

        first, args = operands[0], operands[1:]
        if isinstance(first, CallNode):
            return CallNode(first.name, tuple(args))
        if args:
            raise self.error(f"can't give argument to non-function {first}")
        return first

    def parse_operand(self, context: str) -> Expression:
        token = self.next()
        type_ = token.type
        if type_ is TokenType.FIELD:
            return FieldNode(tuple(token.text[1:].split(".")))
        if type_ is TokenType.DOT:
            return DotNode()
        if type_ is TokenType.VARIABLE:
            names = token.text[2:].split(".") if len(token.text) > 1 else []
            return VariableNode(tuple(names))
        if type_ in (TokenType.STRING, TokenType.NUMBER, TokenType.BOOL):
            return LiteralNode(token.value, token.text)
        if type_ is TokenType.NIL:
            return LiteralNode(None, token.text)
        if type_ is TokenType.LEFT_PAREN:
            return self.parse_pipeline("parenthesized pipeline", TokenType.RIGHT_PAREN)
        if type_ is TokenType.IDENTIFIER:
            if token.text in _KEYWORDS:
                raise self.error(f"unexpected keyword {token.text!r} in {context}", token)
            if token.text not in self.helpers:
                raise self.error(f'function "{token.text}" not defined', token)
            return CallNode(token.text)
        if type_ is TokenType.RIGHT_DELIM:
            raise self.error("unclosed left paren", token)
        if type_ is TokenType.EOF:
            raise self.error("unclosed action", token)
        raise self.error(f"unexpected {_describe(token)} in {context}", token)


def _describe(token: Token) -> str:
    if token.type is TokenType.EOF:
        return "EOF"
    return f'"{token.text}"'


def parse(
    source: str, name: str = "template", helpers: Mapping[str, Helper] = HELPERS
) -> ListNode:
    """Parse *source* into an expression tree without touching any data."""
    return Parser(helpers).parse(source, name)
