"""CLI argument parsers and validators."""

from __future__ import annotations

from pathlib import Path

import typer

EXAMPLE_DATA_FILES = ("template.yaml", "template.json")


def parse_file_mode(value: str) -> int:
    """Parse octal file mode string."""
    try:
        return int(value, 8)
    except ValueError as e:
        raise typer.BadParameter(f"Invalid octal mode: {value!r}") from e


def require_data_file(value: str, template_path: Path) -> Path:
    """Validate the mandatory ``--data-file`` option.

    When it is missing, point at an example data file shipped inside the
    template directory if there is one.
    """
    if value:
        return Path(value)

    hint = ""
    for name in EXAMPLE_DATA_FILES:
        example = template_path / name
        if example.is_file():
            hint = f" Hint: found '{example}'. You can copy and edit it for your data."
            break
    raise typer.BadParameter(
        f"--data-file is required for rendering templates.{hint}",
        param_hint="'--data-file' / '-d'",
    )
