"""Mold - scaffold projects from template directories.

Walks a template tree, renders ``.tmpl`` files and templated path names
against a data file, and copies everything else verbatim.
"""

__version__ = "0.1.0"

# Configure logging for library use
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Re-export main CLI entry point
from .cli import main

__all__ = ["main"]
