"""The declarative list of paths the scaffolder materializes.

``build_manifest`` returns every directory and file of the Expo Router +
MVVM layout in creation order: each directory precedes the files it
contains.  ``validate_manifest`` checks that ordering along with path
safety and uniqueness before anything touches disk.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import PurePosixPath
from typing import Any

from expo_mvvm.config import DEFAULT_FEATURES
from expo_mvvm.errors import InvalidPathError
from expo_mvvm.models import EntryKind, ManifestEntry
from expo_mvvm.scaffolder.paths import check_relative_path
from expo_mvvm.utils import to_pascal


COMPONENTS: tuple[str, ...] = ("Button", "TextInput", "Header", "Loader")

NAVIGATORS: tuple[str, ...] = ("drawer", "tab")

# Ionicons glyphs for the tab bar; unknown features fall back to a dot.
_TAB_ICONS: dict[str, str] = {
    "home": "home-outline",
    "settings": "settings-outline",
    "profile": "person-outline",
}
_DEFAULT_TAB_ICON = "ellipse-outline"

# Single-file modules under src/ that take no parameters.
_STATIC_MODULES: tuple[tuple[str, str], ...] = (
    ("src/services", "api.ts"),
    ("src/theme", "Colors.ts"),
    ("src/utils", "index.ts"),
    ("src/hooks", "useAppTheme.ts"),
    ("src/store", "index.ts"),
)


# ---------------------------------------------------------------------------
# Entry constructors
# ---------------------------------------------------------------------------

def _directory(path: str) -> ManifestEntry:
    return ManifestEntry(relative_path=path, kind=EntryKind.DIRECTORY)


def _static(path: str, template: str) -> ManifestEntry:
    return ManifestEntry(relative_path=path, kind=EntryKind.STATIC, template=template)


def _templated(path: str, template: str, **params: Any) -> ManifestEntry:
    return ManifestEntry(
        relative_path=path, kind=EntryKind.TEMPLATED, template=template, params=params
    )


def _feature_params(feature: str) -> dict[str, str]:
    pascal = to_pascal(feature)
    return {"feature": feature, "pascal": pascal, "title": pascal}


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------

def build_manifest(features: Sequence[str] = DEFAULT_FEATURES) -> list[ManifestEntry]:
    """Build the full manifest for the given MVVM feature names."""
    entries: list[ManifestEntry] = []
    entries.extend(_routing_tree(features))
    entries.extend(_source_tree(features))
    return entries


def _routing_tree(features: Sequence[str]) -> list[ManifestEntry]:
    """The ``app/`` tree consumed by Expo Router."""
    entries = [_directory("app")]
    entries.extend(_directory(f"app/({feature})") for feature in features)
    entries.extend(_directory(f"app/({nav})") for nav in NAVIGATORS)

    entries.append(_static("app/_layout.tsx", "app/_layout.tsx"))
    entries.append(_static("app/index.tsx", "app/index.tsx"))

    for feature in features:
        entries.append(
            _templated(
                f"app/({feature})/index.tsx",
                "app/group_index.tsx.j2",
                **_feature_params(feature),
            )
        )

    screens = [
        {
            "name": feature,
            "title": to_pascal(feature),
            "icon": _TAB_ICONS.get(feature, _DEFAULT_TAB_ICON),
        }
        for feature in features
    ]
    for nav in NAVIGATORS:
        entries.append(
            _templated(
                f"app/({nav})/_layout.tsx",
                f"app/{nav}_layout.tsx.j2",
                screens=screens,
            )
        )
        for feature in features:
            entries.append(
                _templated(
                    f"app/({nav})/{feature}.tsx",
                    "app/nav_screen.tsx.j2",
                    navigator=nav,
                    **_feature_params(feature),
                )
            )
    return entries


def _source_tree(features: Sequence[str]) -> list[ManifestEntry]:
    """The ``src/`` tree holding components, screens, features and services."""
    entries = [_directory("src"), _directory("src/components")]

    entries.append(
        _templated(
            "src/components/index.ts",
            "components/barrel.ts.j2",
            components=list(COMPONENTS),
        )
    )
    for component in COMPONENTS:
        base = f"src/components/{component}"
        entries.append(_directory(base))
        entries.append(
            _templated(f"{base}/index.ts", "components/index.ts.j2", component=component)
        )
        for suffix in (".tsx", ".styles.ts"):
            name = f"{component}{suffix}"
            entries.append(_static(f"{base}/{name}", f"components/{component}/{name}"))

    entries.append(_directory("src/screens"))
    for feature in features:
        params = _feature_params(feature)
        pascal = params["pascal"]
        base = f"src/screens/{feature}"
        entries.append(_directory(base))
        entries.append(_templated(f"{base}/index.ts", "screens/index.ts.j2", **params))
        entries.append(
            _templated(f"{base}/{pascal}Container.tsx", "screens/Container.tsx.j2", **params)
        )
        entries.append(_templated(f"{base}/{pascal}View.tsx", "screens/View.tsx.j2", **params))
        entries.append(
            _templated(f"{base}/{pascal}View.styles.ts", "screens/View.styles.ts.j2", **params)
        )

    entries.append(_directory("src/features"))
    for feature in features:
        params = _feature_params(feature)
        pascal = params["pascal"]
        base = f"src/features/{feature}"
        entries.append(_directory(base))
        entries.append(_templated(f"{base}/{pascal}Model.ts", "features/Model.ts.j2", **params))
        entries.append(
            _templated(f"{base}/{pascal}ViewModel.ts", "features/ViewModel.ts.j2", **params)
        )

    for directory, name in _STATIC_MODULES:
        entries.append(_directory(directory))
        template = f"{directory.removeprefix('src/')}/{name}"
        entries.append(_static(f"{directory}/{name}", template))

    return entries


# ---------------------------------------------------------------------------
# Integrity checks
# ---------------------------------------------------------------------------

def validate_manifest(manifest: Iterable[ManifestEntry]) -> None:
    """Check manifest integrity.

    Raises:
        InvalidPathError: If a path escapes the project root, appears twice,
            or a directory entry comes after a file it contains.
    """
    seen: set[str] = set()
    file_parents: set[str] = set()

    for entry in manifest:
        normalized = check_relative_path(entry.relative_path)
        if normalized in seen:
            raise InvalidPathError(entry.relative_path, "duplicate manifest path")
        seen.add(normalized)

        if entry.is_directory:
            if normalized in file_parents:
                raise InvalidPathError(
                    entry.relative_path, "directory listed after a file it contains"
                )
        else:
            if entry.template is None:
                raise InvalidPathError(entry.relative_path, "file entry has no template")
            file_parents.update(
                parent.as_posix() for parent in PurePosixPath(normalized).parents
            )

