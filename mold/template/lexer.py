"""Tokenizer for the ``{{ ... }}`` expression syntax."""

from __future__ import annotations

import enum
import json
import re
from dataclasses import dataclass
from typing import Any

from ..core.errors import ParseError

LEFT_DELIM = "{{"
RIGHT_DELIM = "}}"
LEFT_COMMENT = "/*"
RIGHT_COMMENT = "*/"

_SPACE = " \t\r\n"
_FIELD_PATTERN = re.compile(r"(?:\.[^\W\d]\w*)+")
_VARIABLE_PATTERN = re.compile(r"\$((?:\.[^\W\d]\w*)*)")
_IDENTIFIER_PATTERN = re.compile(r"[^\W\d]\w*")
_NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class TokenType(enum.Enum):
    TEXT = "text"
    LEFT_DELIM = "left delimiter"
    RIGHT_DELIM = "right delimiter"
    FIELD = "field"
    DOT = "dot"
    VARIABLE = "variable"
    IDENTIFIER = "identifier"
    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    NIL = "nil"
    PIPE = "pipe"
    LEFT_PAREN = "left paren"
    RIGHT_PAREN = "right paren"
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    type: TokenType
    text: str
    line: int
    value: Any = None


class _Lexer:
    def __init__(self, source: str, name: str) -> None:
        self.source = source
        self.name = name
        self.pos = 0
        self.line = 1
        self.tokens: list[Token] = []
        self._trim_next_text = False

    def error(self, message: str) -> ParseError:
        return ParseError(message, name=self.name, line=self.line)

    def emit(self, type_: TokenType, text: str, value: Any = None) -> None:
        self.tokens.append(Token(type_, text, self.line, value))

    def advance(self, count: int) -> None:
        self.line += self.source.count("\n", self.pos, self.pos + count)
        self.pos += count

    def run(self) -> list[Token]:
        while self.pos < len(self.source):
            start = self.source.find(LEFT_DELIM, self.pos)
            if start == -1:
                start = len(self.source)
            text = self.source[self.pos : start]
            if self._trim_next_text:
                text = text.lstrip(_SPACE)
                self._trim_next_text = False

            inner = start + len(LEFT_DELIM)
            trim_left = (
                start < len(self.source)
                and self.source.startswith("-", inner)
                and self.source[inner + 1 : inner + 2] in tuple(_SPACE)
            )
            if trim_left:
                text = text.rstrip(_SPACE)
            if text:
                self.emit(TokenType.TEXT, text)
            self.advance(start - self.pos)
            if self.pos >= len(self.source):
                break

            self.advance(len(LEFT_DELIM) + (2 if trim_left else 0))
            if self.source.startswith(LEFT_COMMENT, self.pos):
                self._lex_comment()
            else:
                self.emit(TokenType.LEFT_DELIM, LEFT_DELIM)
                self._lex_action()

        self.emit(TokenType.EOF, "")
        return self.tokens

    def _close_delim(self) -> int:
        """Return the width of a right delimiter at the cursor, or 0."""
        if self.source.startswith(RIGHT_DELIM, self.pos):
            return len(RIGHT_DELIM)
        if (
            self.source[self.pos : self.pos + 1] in tuple(_SPACE)
            and self.source.startswith("-" + RIGHT_DELIM, self.pos + 1)
        ):
            self._trim_next_text = True
            return 2 + len(RIGHT_DELIM)
        return 0

    def _lex_comment(self) -> None:
        end = self.source.find(RIGHT_COMMENT, self.pos + len(LEFT_COMMENT))
        if end == -1:
            raise self.error("unclosed comment")
        self.advance(end + len(RIGHT_COMMENT) - self.pos)
        width = self._close_delim()
        if not width:
            raise self.error("comment ends before closing delimiter")
        self.advance(width)

    def _lex_action(self) -> None:
        source = self.source
        while True:
            if self.pos >= len(source):
                raise self.error("unclosed action")

            width = self._close_delim()
            if width:
                self.advance(width)
                self.emit(TokenType.RIGHT_DELIM, RIGHT_DELIM)
                return

            char = source[self.pos]
            if char in _SPACE:
                self.advance(1)
            elif char == "|":
                self.emit(TokenType.PIPE, char)
                self.advance(1)
            elif char == "(":
                self.emit(TokenType.LEFT_PAREN, char)
                self.advance(1)
            elif char == ")":
                self.emit(TokenType.RIGHT_PAREN, char)
                self.advance(1)
            elif char == '"':
                self._lex_quote()
            elif char == "`":
                self._lex_raw_quote()
            elif char == ".":
                match = _FIELD_PATTERN.match(source, self.pos)
                if match:
                    self._emit_match(TokenType.FIELD, match.group())
                elif _NUMBER_PATTERN.match(source, self.pos):
                    self._lex_number()
                else:
                    self.emit(TokenType.DOT, char)
                    self.advance(1)
            elif char == "$":
                match = _VARIABLE_PATTERN.match(source, self.pos)
                following = source[match.end() : match.end() + 1]
                if following and _IDENTIFIER_PATTERN.match(following):
                    raise self.error("only the root variable $ is supported")
                self._emit_match(TokenType.VARIABLE, match.group())
            elif char.isdigit() or (
                char in "+-" and _NUMBER_PATTERN.match(source, self.pos)
            ):
                self._lex_number()
            elif _IDENTIFIER_PATTERN.match(char):
                word = _IDENTIFIER_PATTERN.match(source, self.pos).group()
                if word in ("true", "false"):
                    self.emit(TokenType.BOOL, word, word == "true")
                elif word == "nil":
                    self.emit(TokenType.NIL, word)
                else:
                    self.emit(TokenType.IDENTIFIER, word)
                self.advance(len(word))
            else:
                raise self.error(f"unexpected {char!r} in action")

    def _emit_match(self, type_: TokenType, text: str) -> None:
        self.emit(type_, text)
        self.advance(len(text))

    def _lex_number(self) -> None:
        text = _NUMBER_PATTERN.match(self.source, self.pos).group()
        following = self.source[self.pos + len(text) : self.pos + len(text) + 1]
        if following and (following.isalnum() or following in "._"):
            raise self.error(f"bad number syntax: {text + following!r}")
        if any(marker in text for marker in ".eE"):
            value: int | float = float(text)
        else:
            value = int(text)
        self.emit(TokenType.NUMBER, text, value)
        self.advance(len(text))

    def _lex_quote(self) -> None:
        index = self.pos + 1
        while True:
            if index >= len(self.source) or self.source[index] == "\n":
                raise self.error("unterminated quoted string")
            if self.source[index] == "\\":
                index += 2
                continue
            if self.source[index] == '"':
                break
            index += 1
        text = self.source[self.pos : index + 1]
        try:
            value = json.loads(text)
        except json.JSONDecodeError as exc:
            raise self.error(f"invalid quoted string {text}: {exc.msg}") from exc
        self.emit(TokenType.STRING, text, value)
        self.advance(len(text))

    def _lex_raw_quote(self) -> None:
        end = self.source.find("`", self.pos + 1)
        if end == -1:
            raise self.error("unterminated raw quoted string")
        text = self.source[self.pos : end + 1]
        self.emit(TokenType.STRING, text, text[1:-1])
        self.advance(len(text))


def tokenize(source: str, name: str = "template") -> list[Token]:
    """Split *source* into text and action tokens, ending with ``EOF``.

    Raises:
        ParseError: On unterminated actions, comments or quoted strings,
            and on characters that cannot start a token.
    """
    return _Lexer(source, name).run()
