"""Tests for the case-conversion helpers."""

from __future__ import annotations

import pytest

from mold.template.helpers import HELPERS, camel, lcamel, snake, split_words, usnake

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Word splitting
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("someVariableName", ["some", "Variable", "Name"]),
        ("some_variable_name", ["some", "variable", "name"]),
        ("HTTPServer2Go", ["HTTP", "Server2", "Go"]),
        ("version2Name", ["version2", "Name"]),
        ("  hello--world  ", ["hello", "world"]),
        ("", []),
        ("___", []),
    ],
)
def test_split_words(value: str, expected: list[str]) -> None:
    assert split_words(value) == expected


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------


def test_snake_family_from_camel_case() -> None:
    assert snake("someVariableName") == "some_variable_name"
    assert usnake("someVariableName") == "SOME_VARIABLE_NAME"
    assert usnake("someVariableName") == snake("someVariableName").upper()


def test_camel_family_from_snake_case() -> None:
    assert camel("some_variable_name") == "SomeVariableName"
    assert lcamel("some_variable_name") == "someVariableName"


def test_conversions_from_pascal_case() -> None:
    assert snake("MyAwesomeService") == "my_awesome_service"
    assert lcamel("SomeVariableName") == "someVariableName"
    assert camel("someVariableName") == "SomeVariableName"


def test_acronyms_and_separators() -> None:
    assert snake("HTTPServer") == "http_server"
    assert camel("hello-world foo") == "HelloWorldFoo"
    assert usnake("my.config-file") == "MY_CONFIG_FILE"


@pytest.mark.parametrize("helper", [snake, usnake, camel, lcamel])
def test_empty_input_yields_empty_output(helper) -> None:
    assert helper("") == ""
    assert helper("--") == ""


# ---------------------------------------------------------------------------
# Registration table
# ---------------------------------------------------------------------------


def test_helper_table_names() -> None:
    assert set(HELPERS) == {"snake", "usnake", "camel", "lcamel"}
    assert HELPERS["camel"] is camel


def test_helper_table_is_read_only() -> None:
    with pytest.raises(TypeError):
        HELPERS["shout"] = str.upper  # type: ignore[index]
