"""Case-conversion helpers callable from template expressions."""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Mapping

Helper = Callable[[str], str]


def split_words(value: str) -> list[str]:
    """Split *value* into words on case changes and non-alphanumeric runs.

    ``someVariableName`` -> ``["some", "Variable", "Name"]`` and
    ``HTTPServer2Go`` -> ``["HTTP", "Server2", "Go"]``.
    """
    words: list[str] = []
    current: list[str] = []

    for index, char in enumerate(value):
        if not char.isalnum():
            if current:
                words.append("".join(current))
                current = []
            continue

        if current and char.isupper():
            prev = current[-1]
            following = value[index + 1] if index + 1 < len(value) else ""
            # aB, 2B and the last capital of an acronym in ABc start a word
            if prev.islower() or prev.isdigit() or (prev.isupper() and following.islower()):
                words.append("".join(current))
                current = []

        current.append(char)

    if current:
        words.append("".join(current))
    return words


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def snake(value: str) -> str:
    """``someVariableName`` -> ``some_variable_name``."""
    return "_".join(word.lower() for word in split_words(value))


def usnake(value: str) -> str:
    """``someVariableName`` -> ``SOME_VARIABLE_NAME``."""
    return "_".join(word.upper() for word in split_words(value))


def camel(value: str) -> str:
    """``some_variable_name`` -> ``SomeVariableName``."""
    return "".join(_capitalize(word) for word in split_words(value))


def lcamel(value: str) -> str:
    """``some_variable_name`` -> ``someVariableName``."""
    words = split_words(value)
    if not words:
        return ""
    return words[0].lower() + "".join(_capitalize(word) for word in words[1:])


HELPERS: Mapping[str, Helper] = MappingProxyType(
    {
        "snake": snake,
        "usnake": usnake,
        "camel": camel,
        "lcamel": lcamel,
    }
)
