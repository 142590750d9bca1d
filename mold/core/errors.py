"""Error taxonomy shared by the loader, the template engine and the tree walk."""

from __future__ import annotations

from pathlib import Path


class MoldError(Exception):
    """Base class for all mold failures.

    ``path`` is the template-relative path being processed when the error
    happened; the tree walk fills it in before re-raising.
    """

    def __init__(self, message: str, *, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = Path(path) if path is not None else None

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.path}: {self.message}"


class NotFoundError(MoldError):
    """Raised when a source path does not exist."""


class UnsupportedFormatError(MoldError):
    """Raised when a data file extension is not JSON or YAML."""


class OutputError(MoldError):
    """Raised when a destination file or directory cannot be written."""


class _LocatedError(MoldError):
    def __init__(
        self,
        message: str,
        *,
        name: str | None = None,
        line: int = 0,
        path: Path | str | None = None,
    ) -> None:
        if name is not None:
            location = f"{name}:{line}" if line else name
            message = f"template: {location}: {message}"
        super().__init__(message, path=path)
        self.name = name
        self.line = line


class ParseError(_LocatedError):
    """Raised when template expression syntax is malformed."""


class DataParseError(ParseError):
    """Raised when a data file is not valid for its declared format."""


class RenderError(_LocatedError):
    """Raised when a parsed template cannot be executed against the data."""
