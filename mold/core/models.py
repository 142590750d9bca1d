"""Domain models for apply configuration, results and placeholder reports."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class ApplyConfig(BaseModel):
    """Configuration for a single apply run."""

    template_root: Path = Field(..., description="Template directory to walk")
    output_root: Path = Field(..., description="Directory receiving the output tree")
    template_suffix: str = Field(
        default=".tmpl", min_length=1, description="Marker of files to render"
    )
    output_dir_mode: int = Field(
        default=0o750, description="Permissions for a newly created output root"
    )


class ApplyResult(BaseModel):
    """Output paths produced by an apply run, in visiting order."""

    directories: list[Path] = Field(default_factory=list)
    rendered: list[Path] = Field(default_factory=list)
    copied: list[Path] = Field(default_factory=list)

    @property
    def files(self) -> list[Path]:
        return self.rendered + self.copied


class PlaceholderReport(BaseModel):
    """Placeholders discovered across a template tree.

    Keys are template-relative paths in POSIX form. Files that failed to
    parse are listed in ``errors`` instead of ``placeholders``.
    """

    placeholders: dict[str, set[str]] = Field(default_factory=dict)
    errors: dict[str, str] = Field(default_factory=dict)

    def all_placeholders(self) -> set[str]:
        names: set[str] = set()
        for found in self.placeholders.values():
            names |= found
        return names
