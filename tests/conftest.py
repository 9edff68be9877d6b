"""Shared pytest fixtures for the Expo MVVM scaffolder test suite.

Provides reusable fixtures for:
- A minimal Expo project directory (package.json + app.json)
- Scaffold configs for each write mode
- The default template manifest
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from expo_mvvm.config import ScaffoldConfig
from expo_mvvm.models import ManifestEntry, WriteMode
from expo_mvvm.scaffolder.manifest import build_manifest


# ---------------------------------------------------------------------------
# Project documents
# ---------------------------------------------------------------------------

@pytest.fixture
def package_json_data() -> dict[str, Any]:
    """package.json of a freshly created Expo app."""
    return {
        "name": "test-expo-app",
        "main": "expo-router/entry",
        "dependencies": {
            "expo": "~49.0.0",
            "expo-router": "~2.0.0",
            "react": "18.2.0",
            "react-native": "0.72.0",
        },
    }


@pytest.fixture
def app_json_data() -> dict[str, Any]:
    """app.json of a freshly created Expo app."""
    return {
        "expo": {
            "name": "Test Expo App",
            "slug": "test-expo-app",
        }
    }


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def expo_project(tmp_path: Path, package_json_data, app_json_data) -> Path:
    """Temporary Expo project directory with package.json and app.json."""
    project_dir = tmp_path / "test-expo-project"
    project_dir.mkdir()
    (project_dir / "package.json").write_text(
        json.dumps(package_json_data, indent=2) + "\n", encoding="utf-8"
    )
    (project_dir / "app.json").write_text(
        json.dumps(app_json_data, indent=2) + "\n", encoding="utf-8"
    )
    yield project_dir


# ---------------------------------------------------------------------------
# Configs & manifest
# ---------------------------------------------------------------------------

@pytest.fixture
def make_config(expo_project: Path):
    """Factory building a ScaffoldConfig for the temporary project."""

    def _make(mode: WriteMode = WriteMode.SKIP, **kwargs: Any) -> ScaffoldConfig:
        return ScaffoldConfig(root=expo_project, mode=mode, **kwargs)

    return _make


@pytest.fixture
def manifest() -> list[ManifestEntry]:
    """The default manifest (home, settings, profile)."""
    return build_manifest()


def read_tree(root: Path) -> dict[str, bytes]:
    """Snapshot every file under *root* as ``{relative_path: bytes}``."""
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


@pytest.fixture
def snapshot():
    """Expose :func:`read_tree` to tests."""
    return read_tree
