"""The ``{{ ... }}`` expression language used in templates and path names."""

from .analyzer import analyze_file, identify_placeholders
from .executor import execute, format_value
from .helpers import HELPERS, camel, lcamel, snake, usnake
from .parser import Parser, parse

__all__ = [
    "HELPERS",
    "Parser",
    "analyze_file",
    "camel",
    "execute",
    "format_value",
    "identify_placeholders",
    "lcamel",
    "parse",
    "snake",
    "usnake",
]
