"""Run configuration for the Expo MVVM scaffolder.

A ``ScaffoldConfig`` is built once (from CLI flags or the environment) and
passed to ``StructureGenerator``.  It is frozen, so nothing mutates the
options of a run after construction.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from expo_mvvm.models import WriteMode


DEFAULT_FEATURES: tuple[str, ...] = ("home", "settings", "profile")
OWNED_DIRECTORIES: tuple[str, ...] = ("app", "src")

_FEATURE_NAME = re.compile(r"^[a-z][a-z0-9]*$")


class ScaffoldConfig(BaseModel):
    """Everything a single scaffolding run needs to know.

    Attributes:
        root: The Expo project directory being scaffolded into.
        mode: Write policy for existing files.
        skip_deps: When set, the caller does not act on the dependency
            descriptors (they are still computed and reported).
        features: MVVM feature names; each gets a route group, a screen
            and a view model.
        owned_directories: Top-level directories removed in ``overwrite``
            mode.
    """

    model_config = ConfigDict(frozen=True)

    root: Path = Field(default_factory=Path.cwd)
    mode: WriteMode = Field(default=WriteMode.SKIP)
    skip_deps: bool = Field(default=False)
    features: tuple[str, ...] = Field(default=DEFAULT_FEATURES, min_length=1)
    owned_directories: tuple[str, ...] = Field(default=OWNED_DIRECTORIES)

    @field_validator("features")
    @classmethod
    def _check_features(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for name in value:
            if not _FEATURE_NAME.match(name):
                raise ValueError(
                    f"Feature names must be lowercase alphanumeric: {name!r}"
                )
        if len(set(value)) != len(value):
            raise ValueError("Feature names must be unique")
        return value

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def forced(self) -> bool:
        """Whether config patches may replace existing values."""
        return self.mode.replaces_existing

    @property
    def package_json_path(self) -> Path:
        return self.root / "package.json"

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_flags(
        cls,
        root: str | Path,
        *,
        force: bool = False,
        overwrite: bool = False,
        skip_deps: bool = False,
        features: tuple[str, ...] | None = None,
    ) -> "ScaffoldConfig":
        """Map CLI flags onto a config.  ``overwrite`` wins over ``force``."""
        if overwrite:
            mode = WriteMode.OVERWRITE
        elif force:
            mode = WriteMode.FORCE
        else:
            mode = WriteMode.SKIP

        kwargs = {}
        if features:
            kwargs["features"] = tuple(features)
        return cls(root=Path(root), mode=mode, skip_deps=skip_deps, **kwargs)

    @classmethod
    def from_env(cls) -> "ScaffoldConfig":
        """Build a config from environment variables.

        Recognised variables (all optional):
            EXPO_MVVM_ROOT, EXPO_MVVM_MODE (skip|force|overwrite),
            EXPO_MVVM_SKIP_DEPS, EXPO_MVVM_FEATURES (comma-separated).
        """
        kwargs: dict = {}
        if os.environ.get("EXPO_MVVM_ROOT"):
            kwargs["root"] = Path(os.environ["EXPO_MVVM_ROOT"])
        if os.environ.get("EXPO_MVVM_MODE"):
            kwargs["mode"] = WriteMode(os.environ["EXPO_MVVM_MODE"].strip().lower())
        if os.environ.get("EXPO_MVVM_SKIP_DEPS"):
            kwargs["skip_deps"] = os.environ["EXPO_MVVM_SKIP_DEPS"].strip().lower() in (
                "1", "true", "yes", "on",
            )
        if os.environ.get("EXPO_MVVM_FEATURES"):
            kwargs["features"] = tuple(
                f.strip() for f in os.environ["EXPO_MVVM_FEATURES"].split(",") if f.strip()
            )
        return cls(**kwargs)
