"""Template tree walk: render ``.tmpl`` files, copy everything else."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Iterator, Mapping

from ..core.errors import MoldError, NotFoundError, OutputError, ParseError, RenderError
from ..core.models import ApplyConfig, ApplyResult, PlaceholderReport
from ..template.analyzer import analyze_file, identify_placeholders
from .engine import render_path, render_template_file
from .io import copy_file, file_mode

logger = logging.getLogger(__name__)


def iter_entries(directory: Path) -> Iterator[tuple[Path, Path]]:
    """Yield ``(entry, relative_path)`` depth-first in name order.

    Directories are yielded before their contents; symlinked directories
    are yielded but not descended into.
    """

    def _walk(current: Path, rel: Path) -> Iterator[tuple[Path, Path]]:
        for entry in sorted(current.iterdir(), key=lambda p: p.name):
            entry_rel = rel / entry.name
            yield entry, entry_rel
            if _is_real_dir(entry):
                yield from _walk(entry, entry_rel)

    yield from _walk(directory, Path())


def _is_real_dir(path: Path) -> bool:
    return path.is_dir() and not path.is_symlink()


class _TreeWalk:
    def __init__(
        self, config: ApplyConfig, data: Mapping[str, Any], result: ApplyResult
    ) -> None:
        self.config = config
        self.data = data
        self.result = result

    def visit_dir(self, src_dir: Path, rel_dir: Path, dest_rel: Path) -> None:
        for entry in sorted(src_dir.iterdir(), key=lambda p: p.name):
            rel = rel_dir / entry.name
            try:
                self.visit(entry, rel, dest_rel)
            except MoldError as e:
                if e.path is None:
                    e.path = rel
                raise
            except OSError as e:
                raise OutputError(str(e), path=rel) from e

    def visit(self, entry: Path, rel: Path, dest_rel: Path) -> None:
        suffix = self.config.template_suffix
        output_root = self.config.output_root

        if _is_real_dir(entry):
            child_rel = dest_rel / self.render_name(entry.name)
            dest = output_root / child_rel
            dest.mkdir(parents=True, exist_ok=True)
            self.result.directories.append(dest)
            self.visit_dir(entry, rel, child_rel)
            # Applied last so read-only template directories still get populated
            os.chmod(dest, file_mode(entry))
        elif entry.name.endswith(suffix):
            file_rel = dest_rel / self.render_name(entry.name[: -len(suffix)])
            logger.info(f"Rendering: {rel} -> {file_rel}")
            dest = render_template_file(entry, output_root / file_rel, self.data)
            self.result.rendered.append(dest)
        else:
            dest = output_root / dest_rel / self.render_name(entry.name)
            logger.info(f"Copying: {rel}")
            copy_file(entry, dest)
            self.result.copied.append(dest)

    def render_name(self, name: str) -> Path:
        """Render one name segment into a path relative to its parent.

        Leading separators are dropped so the result always joins under the
        output directory; ``..`` segments are rejected.
        """
        rendered = Path(render_path(name, self.data).lstrip(os.sep))
        if not rendered.parts:
            raise RenderError(f"name {name!r} renders to an empty path")
        if ".." in rendered.parts:
            raise RenderError(
                f"name {name!r} renders to {str(rendered)!r}, "
                "which leaves the output directory"
            )
        return rendered


def apply_template(config: ApplyConfig, data: Mapping[str, Any]) -> ApplyResult:
    """Walk the template tree and materialize it under the output root.

    Fails fast: the first error stops the walk and is raised with the
    offending template-relative path attached. Entries written before the
    failure are left in place.

    Args:
        config: Apply configuration
        data: Template context data, read-only

    Returns:
        Directories, rendered files and copied files that were written
    """
    template_root = config.template_root
    if not template_root.is_dir():
        raise NotFoundError(f"Template path not found: {template_root}")

    try:
        config.output_root.mkdir(
            mode=config.output_dir_mode, parents=True, exist_ok=True
        )
    except OSError as e:
        raise OutputError(
            f"failed to create output directory '{config.output_root}': {e}"
        ) from e

    logger.info(f"Applying template from {template_root} to {config.output_root}")

    result = ApplyResult()
    _TreeWalk(config, data, result).visit_dir(template_root, Path(), Path())

    logger.info(
        f"Rendered {len(result.rendered)} and copied {len(result.copied)} file(s)"
    )
    return result


def discover_placeholders(
    template_root: Path, template_suffix: str = ".tmpl"
) -> PlaceholderReport:
    """Collect placeholders from every template file and templated name.

    Parse failures are recorded per file in the report rather than raised.
    """
    if not template_root.is_dir():
        raise NotFoundError(f"Template path not found: {template_root}")

    report = PlaceholderReport()
    for entry, rel in iter_entries(template_root):
        key = rel.as_posix()
        is_template = entry.is_file() and entry.name.endswith(template_suffix)
        try:
            found = identify_placeholders(entry.name, "path")
            if is_template:
                found |= analyze_file(entry)
        except (ParseError, NotFoundError, OSError) as e:
            logger.warning(f"Skipping {key}: {e}")
            report.errors[key] = str(e)
            continue
        if found or is_template:
            report.placeholders[key] = found

    return report
