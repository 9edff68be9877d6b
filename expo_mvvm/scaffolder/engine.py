"""Write policy engine: materializes a manifest under a project root.

For each entry the engine decides between create, skip, overwrite and
(in ``overwrite`` mode) delete-then-create, then performs the filesystem
operation.  Failures are captured per entry so one unwritable file never
stops the rest of the tree from being scaffolded.
"""

from __future__ import annotations

import asyncio
import shutil
from collections.abc import Callable, Sequence
from pathlib import Path

from jinja2 import TemplateError

from expo_mvvm.errors import IOFailure, TypeConflictError
from expo_mvvm.models import Action, EntryKind, FileOutcome, ManifestEntry, WriteMode
from expo_mvvm.scaffolder.manifest import validate_manifest
from expo_mvvm.scaffolder.paths import resolve
from expo_mvvm.scaffolder.templates import TemplateRenderer


OutcomeCallback = Callable[[FileOutcome], None]


class WritePolicyEngine:
    """Applies a manifest to a project root under a ``WriteMode``.

    Usage::

        engine = WritePolicyEngine(owned_directories=("app", "src"))
        outcomes = await engine.apply(root, build_manifest(), WriteMode.SKIP)
    """

    def __init__(
        self,
        renderer: TemplateRenderer | None = None,
        owned_directories: Sequence[str] = ("app", "src"),
        on_outcome: OutcomeCallback | None = None,
    ) -> None:
        self.renderer = renderer or TemplateRenderer()
        self.owned_directories = tuple(owned_directories)
        self._on_outcome = on_outcome

    # -- Public API --------------------------------------------------------

    async def apply(
        self,
        root: str | Path,
        manifest: Sequence[ManifestEntry],
        mode: WriteMode,
    ) -> list[FileOutcome]:
        """Materialize *manifest* under *root*.

        Returns one outcome per manifest entry in manifest order, preceded
        by one ``deleted`` (or ``failed``) outcome per owned directory
        removed in ``overwrite`` mode.

        Raises:
            InvalidPathError: If the manifest is malformed.  Nothing is
                written in that case.
        """
        validate_manifest(manifest)
        root = Path(root)
        outcomes: list[FileOutcome] = []

        if mode is WriteMode.OVERWRITE:
            for directory in self.owned_directories:
                outcome = await self._clean(root, directory)
                if outcome is not None:
                    self._record(outcomes, outcome)

        for entry in manifest:
            if entry.is_directory:
                outcome = await self._apply_directory(root, entry)
            else:
                outcome = await self._apply_file(root, entry, mode)
            self._record(outcomes, outcome)

        return outcomes

    def render(self, entry: ManifestEntry) -> str:
        """Produce the body for a file entry from its template and params."""
        if entry.kind is EntryKind.TEMPLATED:
            return self.renderer.render(entry.template, entry.params)
        return self.renderer.load_static(entry.template)

    # -- Deletion pass -----------------------------------------------------

    async def _clean(self, root: Path, directory: str) -> FileOutcome | None:
        """Remove one owned top-level directory, if present."""
        try:
            target = resolve(root, directory)
            if not target.exists:
                return None
            if not target.is_directory:
                raise TypeConflictError(target.absolute_path, "directory")
            await asyncio.to_thread(shutil.rmtree, target.absolute_path)
        except TypeConflictError as exc:
            return FileOutcome.failed(directory, exc)
        except OSError as exc:
            return FileOutcome.failed(directory, IOFailure(directory, exc))
        return FileOutcome(path=directory, action=Action.DELETED)

    # -- Creation pass -----------------------------------------------------

    async def _apply_directory(self, root: Path, entry: ManifestEntry) -> FileOutcome:
        path = entry.relative_path
        try:
            target = resolve(root, path)
            if target.exists:
                if not target.is_directory:
                    raise TypeConflictError(target.absolute_path, "directory")
                return FileOutcome(path=path, action=Action.SKIPPED)
            await asyncio.to_thread(target.absolute_path.mkdir, parents=True, exist_ok=True)
        except TypeConflictError as exc:
            return FileOutcome.failed(path, exc)
        except OSError as exc:
            return FileOutcome.failed(path, IOFailure(path, exc))
        return FileOutcome(path=path, action=Action.CREATED)

    async def _apply_file(
        self, root: Path, entry: ManifestEntry, mode: WriteMode
    ) -> FileOutcome:
        path = entry.relative_path
        try:
            target = resolve(root, path)
            if target.exists:
                if target.is_directory:
                    raise TypeConflictError(target.absolute_path, "file")
                if not mode.replaces_existing:
                    return FileOutcome(path=path, action=Action.SKIPPED)
                action = Action.OVERWRITTEN
            else:
                action = Action.CREATED
            content = self.render(entry)
            await asyncio.to_thread(_write_file, target.absolute_path, content)
        except TypeConflictError as exc:
            return FileOutcome.failed(path, exc)
        except TemplateError as exc:
            return FileOutcome.failed(path, exc)
        except OSError as exc:
            return FileOutcome.failed(path, IOFailure(path, exc))
        return FileOutcome(path=path, action=action)

    # -- Helpers -----------------------------------------------------------

    def _record(self, outcomes: list[FileOutcome], outcome: FileOutcome) -> None:
        outcomes.append(outcome)
        if self._on_outcome is not None:
            self._on_outcome(outcome)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
