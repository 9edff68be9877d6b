"""Packages the generated Expo Router + MVVM code depends on.

Everything here is a pure function of the scaffold's fixed feature set
(routing, navigation, gestures, animation, icons, type-checking).  Nothing
touches disk or network and nothing is installed: callers decide whether
to run the install commands.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from expo_mvvm.models import Dependency, DependencyScope


_RUNTIME: tuple[tuple[str, str], ...] = (
    # routing
    ("expo-router", "~3.5.0"),
    ("expo-linking", "~6.3.0"),
    ("expo-constants", "~16.0.0"),
    ("expo-status-bar", "~1.12.0"),
    # navigation
    ("@react-navigation/native", "^6.1.0"),
    ("@react-navigation/drawer", "^6.7.0"),
    ("@react-navigation/bottom-tabs", "^6.6.0"),
    ("react-native-screens", "~3.31.0"),
    ("react-native-safe-area-context", "4.10.1"),
    # gestures & animation
    ("react-native-gesture-handler", "~2.16.0"),
    ("react-native-reanimated", "~3.10.0"),
    # icons
    ("@expo/vector-icons", "^14.0.0"),
)

_DEVELOPMENT: tuple[tuple[str, str], ...] = (
    ("typescript", "~5.3.3"),
    ("@types/react", "~18.2.79"),
)


def required_dependencies() -> frozenset[Dependency]:
    """Return every package the generated code needs."""
    runtime = (
        Dependency(name=name, version_range=version, scope=DependencyScope.RUNTIME)
        for name, version in _RUNTIME
    )
    development = (
        Dependency(name=name, version_range=version, scope=DependencyScope.DEVELOPMENT)
        for name, version in _DEVELOPMENT
    )
    return frozenset((*runtime, *development))


def sorted_dependencies(deps: Iterable[Dependency]) -> list[Dependency]:
    """Runtime packages first, then development, each alphabetically."""
    return sorted(
        deps,
        key=lambda d: (d.scope is DependencyScope.DEVELOPMENT, d.name),
    )


def missing_dependencies(
    package_json: dict[str, Any], deps: Iterable[Dependency]
) -> list[Dependency]:
    """Return the packages declared in neither ``dependencies`` nor
    ``devDependencies`` of a parsed ``package.json``."""
    declared: set[str] = set()
    for section in ("dependencies", "devDependencies"):
        values = package_json.get(section)
        if isinstance(values, dict):
            declared.update(values)
    return [d for d in sorted_dependencies(deps) if d.name not in declared]


def install_commands(deps: Iterable[Dependency]) -> list[list[str]]:
    """Build ``npx expo install`` argv lists for *deps*.

    ``expo install`` picks versions compatible with the project's SDK, so
    only package names are passed.  Development packages get their own
    command with ``--save-dev`` forwarded to the package manager.
    """
    ordered = sorted_dependencies(deps)
    runtime = [d.name for d in ordered if d.scope is DependencyScope.RUNTIME]
    development = [d.name for d in ordered if d.scope is DependencyScope.DEVELOPMENT]

    commands: list[list[str]] = []
    if runtime:
        commands.append(["npx", "expo", "install", *runtime])
    if development:
        commands.append(["npx", "expo", "install", *development, "--", "--save-dev"])
    return commands
