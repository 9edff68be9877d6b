"""Resolve manifest paths against a project root.

Manifest paths are POSIX-style and relative.  Anything that could land
outside the project root (absolute paths, drive letters, ``..`` segments)
is rejected with ``InvalidPathError``.  Resolution only stats the
destination; it never writes.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath, PureWindowsPath

from expo_mvvm.errors import InvalidPathError
from expo_mvvm.models import ResolvedPath


def check_relative_path(relative_path: str) -> str:
    """Validate a manifest path and return its normalized POSIX form.

    ``.`` segments and repeated separators are dropped, so
    ``"src//./theme"`` normalizes to ``"src/theme"``.

    Raises:
        InvalidPathError: If the path is empty, absolute, uses backslash
            separators, or contains a ``..`` segment.
    """
    if not relative_path or not relative_path.strip():
        raise InvalidPathError(relative_path, "path is empty")
    if "\\" in relative_path:
        raise InvalidPathError(relative_path, "backslash separators are not allowed")
    if PurePosixPath(relative_path).is_absolute() or PureWindowsPath(relative_path).drive:
        raise InvalidPathError(relative_path, "absolute paths are not allowed")

    parts = [part for part in relative_path.split("/") if part not in ("", ".")]
    if ".." in parts:
        raise InvalidPathError(relative_path, "parent-directory traversal is not allowed")
    if not parts:
        raise InvalidPathError(relative_path, "path does not name anything below the root")
    return "/".join(parts)


def resolve(root: str | Path, relative_path: str) -> ResolvedPath:
    """Resolve *relative_path* under *root* and stat the destination.

    Args:
        root: Project root directory.
        relative_path: Manifest path, e.g. ``"app/(home)/index.tsx"``.

    Returns:
        A ``ResolvedPath`` describing the absolute destination and what
        currently exists there.
    """
    normalized = check_relative_path(relative_path)
    absolute = Path(root).joinpath(*normalized.split("/"))
    exists = absolute.exists()
    return ResolvedPath(
        relative_path=normalized,
        absolute_path=absolute,
        exists=exists,
        is_directory=exists and absolute.is_dir(),
    )
