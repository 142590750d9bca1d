"""Main CLI application."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional

import typer
from typing_extensions import Annotated

from ..core.errors import MoldError, NotFoundError, ParseError
from ..core.models import ApplyConfig, PlaceholderReport
from ..data.loader import load_data_file
from ..rendering.tree import apply_template, discover_placeholders
from ..settings import get_settings
from ..template.analyzer import analyze_file
from .parsers import parse_file_mode, require_data_file

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="mold",
    help="Scaffold projects from template directories and a JSON or YAML data file.",
    no_args_is_help=True,
)

Verbose = Annotated[
    bool,
    typer.Option(
        "--verbose",
        "-v",
        help="Enable verbose logging.",
    ),
]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )


def has_placeholder(data: Mapping[str, Any], dotted: str) -> bool:
    """Return True when the dot-joined field chain resolves in ``data``."""
    value: Any = data
    for name in dotted.split("."):
        if not isinstance(value, Mapping) or name not in value:
            return False
        value = value[name]
    return True


def _preflight(template_path: Path, suffix: str, data: Mapping[str, Any]) -> None:
    """Warn about placeholders the data does not provide. Advisory only."""
    report = discover_placeholders(template_path, suffix)
    missing = sorted(
        name for name in report.all_placeholders() if not has_placeholder(data, name)
    )
    if missing:
        # Fields inside range bodies resolve against elements, not the root
        logger.warning(
            f"Placeholders not found at the top level of the data: {', '.join(missing)}"
        )


@app.command()
def apply(
    template_path: Annotated[
        Path,
        typer.Argument(help="Template directory to apply.", metavar="TEMPLATE_PATH"),
    ],
    data_file: Annotated[
        str,
        typer.Option(
            "--data-file",
            "-d",
            help="Path to a JSON or YAML file with placeholder data (required).",
            metavar="FILE",
        ),
    ] = "",
    output: Annotated[
        Path,
        typer.Option(
            "--output",
            "-o",
            help="Output directory for the new project.",
            metavar="DIR",
        ),
    ] = Path("."),
    dir_mode: Annotated[
        str,
        typer.Option(
            "--mode",
            help="Permissions in octal for a newly created output directory "
            "(default: MOLD_OUTPUT_DIR_MODE or 0750).",
            metavar="OCTAL",
        ),
    ] = "",
    verbose: Verbose = False,
) -> None:
    """Render '.tmpl' files and templated names; copy everything else as-is."""
    _configure_logging(verbose)
    settings = get_settings()

    data_path = require_data_file(data_file, template_path)
    config = ApplyConfig(
        template_root=template_path,
        output_root=output,
        template_suffix=settings.template_suffix,
        output_dir_mode=parse_file_mode(dir_mode) if dir_mode else settings.output_dir_mode,
    )

    try:
        if not template_path.exists():
            raise NotFoundError(f"template path '{template_path}' not found")
        logger.info(f"Applying template from: {template_path}")

        logger.info(f"Loading data from: {data_path}")
        data = load_data_file(data_path)

        _preflight(template_path, config.template_suffix, data)
        result = apply_template(config, data)
    except MoldError as e:
        logger.error(f"Error during template processing: {e}")
        raise typer.Exit(code=1) from e

    logger.debug(
        f"Completed: {len(result.directories)} dir(s), {len(result.files)} file(s)"
    )
    logger.info(f"Successfully applied template to: {output}")


@app.command("inspect")
def inspect_placeholders(
    path: Annotated[
        Path,
        typer.Argument(help="Template file or template directory to analyze."),
    ],
    data_file: Annotated[
        str,
        typer.Option(
            "--data-file",
            "-d",
            help="Mark placeholders that this JSON or YAML file does not provide.",
            metavar="FILE",
        ),
    ] = "",
    verbose: Verbose = False,
) -> None:
    """List the placeholders each template references."""
    _configure_logging(verbose)
    settings = get_settings()

    try:
        data = load_data_file(Path(data_file)) if data_file else None
        if path.is_file():
            report = PlaceholderReport()
            try:
                report.placeholders[path.name] = analyze_file(path)
            except ParseError as e:
                report.errors[path.name] = str(e)
        else:
            report = discover_placeholders(path, settings.template_suffix)
    except MoldError as e:
        logger.error(str(e))
        raise typer.Exit(code=1) from e

    for key, names in sorted(report.placeholders.items()):
        typer.echo(f"{key}:")
        for name in sorted(names):
            missing = data is not None and not has_placeholder(data, name)
            typer.echo(f"  - {name}{' (missing)' if missing else ''}")

    for key, message in sorted(report.errors.items()):
        typer.echo(f"{key}: {message}", err=True)
    if report.errors:
        raise typer.Exit(code=1)


@app.command()
def init(
    directory: Annotated[
        Optional[Path],
        typer.Option(
            "--dir",
            help="Templates directory (default: MOLD_TEMPLATES_DIR or ./templates).",
            metavar="DIR",
        ),
    ] = None,
) -> None:
    """Create a directory to store template sets."""
    templates_dir = directory or get_settings().templates_dir

    if templates_dir.exists():
        typer.echo(f"Directory '{templates_dir}' already exists. Nothing to do.")
        return

    try:
        templates_dir.mkdir(mode=0o750, parents=True)
        # Keeps the empty directory under version control
        (templates_dir / ".gitkeep").touch()
    except OSError as e:
        typer.echo(f"Error creating directory '{templates_dir}': {e}", err=True)
        raise typer.Exit(code=1) from e

    typer.echo(f"Successfully created directory: {templates_dir}")
    typer.echo("You can now add your project templates inside this directory.")


@app.command("list")
def list_templates(
    directory: Annotated[
        Optional[Path],
        typer.Option(
            "--dir",
            help="Templates directory (default: MOLD_TEMPLATES_DIR or ./templates).",
            metavar="DIR",
        ),
    ] = None,
) -> None:
    """List the template sets (sub-directories) in the templates directory."""
    templates_dir = directory or get_settings().templates_dir

    if not templates_dir.is_dir():
        typer.echo(f"Directory '{templates_dir}' not found.")
        typer.echo(f"Run 'mold init --dir {templates_dir}' to create it.")
        return

    templates = sorted(entry.name for entry in templates_dir.iterdir() if entry.is_dir())
    if not templates:
        typer.echo(f"No templates found in the '{templates_dir}' directory.")
        typer.echo(
            f"Add a new directory inside '{templates_dir}' to create a template set."
        )
        return

    typer.echo("Available templates:")
    for name in templates:
        typer.echo(f"  - {name}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
