"""Pydantic v2 models shared by the scaffolder, the config patcher and the CLI.

Defines the template manifest entries, write modes, per-entry outcomes,
configuration patch descriptions and dependency descriptors.  Every model
is immutable once built; a run's only mutable state is the target project's
filesystem.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class EntryKind(str, Enum):
    """What a manifest entry materializes as."""
    DIRECTORY = "directory"
    STATIC = "static"
    TEMPLATED = "templated"


class WriteMode(str, Enum):
    """How existing files are treated during a run.

    ``skip`` leaves existing files untouched, ``force`` overwrites them and
    ``overwrite`` deletes the owned top-level directories before writing
    every entry fresh.
    """
    SKIP = "skip"
    FORCE = "force"
    OVERWRITE = "overwrite"

    @property
    def replaces_existing(self) -> bool:
        return self is not WriteMode.SKIP


class Action(str, Enum):
    """Outcome recorded for a single manifest entry or config file."""
    CREATED = "created"
    SKIPPED = "skipped"
    OVERWRITTEN = "overwritten"
    DELETED = "deleted"
    FAILED = "failed"


class ConfigFormat(str, Enum):
    """Structured document flavours understood by the config patcher."""
    JSON = "json"
    SCRIPT = "script"


class MergeRule(str, Enum):
    """Merge semantics for a single required key."""
    ADD_IF_MISSING = "add_if_missing"
    REPLACE_IF_FORCED = "replace_if_forced"
    REMOVE_IF_DANGLING = "remove_if_dangling"


class DependencyScope(str, Enum):
    RUNTIME = "runtime"
    DEVELOPMENT = "development"


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------

class ManifestEntry(BaseModel):
    """A single path the scaffolder owns, relative to the project root."""

    model_config = ConfigDict(frozen=True)

    relative_path: str = Field(..., description="Project-root-relative destination, POSIX separators")
    kind: EntryKind = Field(..., description="Directory marker, static body or templated body")
    template: Optional[str] = Field(
        default=None, description="Template path relative to the template directory"
    )
    params: dict[str, Any] = Field(
        default_factory=dict, description="Parameter record for templated bodies"
    )

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


class ResolvedPath(BaseModel):
    """A manifest path resolved against a project root."""

    model_config = ConfigDict(frozen=True)

    relative_path: str
    absolute_path: Path
    exists: bool = False
    is_directory: bool = False


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------

class FileOutcome(BaseModel):
    """The single recorded result for one entry in one run."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Project-root-relative path")
    action: Action
    error: Optional[str] = Field(default=None, description="Failure reason, set for ``failed``")
    error_type: Optional[str] = Field(
        default=None, description="Exception class name, e.g. 'TypeConflictError'"
    )

    @classmethod
    def failed(cls, path: str, exc: BaseException) -> "FileOutcome":
        """Build a ``failed`` outcome from a captured exception."""
        return cls(
            path=path,
            action=Action.FAILED,
            error=str(exc),
            error_type=type(exc).__name__,
        )

    @property
    def ok(self) -> bool:
        return self.action is not Action.FAILED


# ---------------------------------------------------------------------------
# Config patches
# ---------------------------------------------------------------------------

class PatchRule(BaseModel):
    """A required key (or statement) and how to merge it."""

    model_config = ConfigDict(frozen=True)

    key_path: tuple[str, ...] = Field(..., min_length=1)
    value: Any = None
    rule: MergeRule = MergeRule.ADD_IF_MISSING


class ConfigPatch(BaseModel):
    """A target configuration file and the rules to apply to it."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Project-root-relative file name, e.g. 'package.json'")
    format: ConfigFormat = ConfigFormat.JSON
    rules: tuple[PatchRule, ...] = ()


class PatchResult(BaseModel):
    """Result of applying one ``ConfigPatch``."""

    model_config = ConfigDict(frozen=True)

    changed: bool
    outcome: FileOutcome


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------

class Dependency(BaseModel):
    """A package the generated code needs in the project's manifest."""

    model_config = ConfigDict(frozen=True)

    name: str
    version_range: str
    scope: DependencyScope = DependencyScope.RUNTIME

    @property
    def manifest_section(self) -> str:
        """The ``package.json`` section this dependency belongs in."""
        if self.scope is DependencyScope.DEVELOPMENT:
            return "devDependencies"
        return "dependencies"
