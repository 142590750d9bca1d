"""File-level rendering, path rendering and the template tree walk."""

from .engine import render, render_path, render_template_file
from .io import atomic_write_bytes, copy_file
from .tree import apply_template, discover_placeholders

__all__ = [
    "apply_template",
    "atomic_write_bytes",
    "copy_file",
    "discover_placeholders",
    "render",
    "render_path",
    "render_template_file",
]
