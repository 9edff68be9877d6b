"""Exceptions raised by the scaffolder.

``InvalidPathError`` and ``PreconditionError`` abort a run.  The others are
captured per entry into a ``FileOutcome`` and never stop the run.
"""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for every scaffolder error."""


class InvalidPathError(ScaffoldError):
    """Raised when a manifest path escapes the project root or is malformed."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid manifest path {path!r}: {reason}")


class TypeConflictError(ScaffoldError):
    """Raised when a destination exists with the wrong type."""

    def __init__(self, path: str | Path, expected: str) -> None:
        self.path = str(path)
        self.expected = expected
        found = "file" if expected == "directory" else "directory"
        super().__init__(f"Expected a {expected} at {self.path} but found a {found}")


class MalformedConfigError(ScaffoldError):
    """Raised when an existing configuration file cannot be parsed."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Cannot parse {self.path}: {reason}")


class IOFailure(ScaffoldError):
    """Raised when a filesystem operation fails (permission, lock, disk)."""

    def __init__(self, path: str | Path, cause: OSError) -> None:
        self.path = str(path)
        self.cause = cause
        reason = cause.strerror or str(cause)
        super().__init__(f"I/O error on {self.path}: {reason}")


class PreconditionError(ScaffoldError):
    """Raised by the CLI when the target directory is not an Expo project."""
