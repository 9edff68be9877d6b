"""Tests for the dependency descriptors of the generated code."""

from __future__ import annotations

import pytest

from expo_mvvm.dependencies import (
    install_commands,
    missing_dependencies,
    required_dependencies,
    sorted_dependencies,
)
from expo_mvvm.models import Dependency, DependencyScope


pytestmark = pytest.mark.unit


class TestRequiredDependencies:
    def test_covers_routing_and_navigation(self):
        names = {d.name for d in required_dependencies()}
        for name in (
            "expo-router",
            "react-native-screens",
            "react-native-safe-area-context",
            "@react-navigation/drawer",
            "@react-navigation/bottom-tabs",
        ):
            assert name in names

    def test_names_are_unique(self):
        deps = required_dependencies()
        assert len({d.name for d in deps}) == len(deps)

    def test_deterministic(self):
        assert required_dependencies() == required_dependencies()

    def test_typescript_is_development(self):
        typescript = next(d for d in required_dependencies() if d.name == "typescript")
        assert typescript.scope is DependencyScope.DEVELOPMENT
        assert typescript.manifest_section == "devDependencies"

    def test_sorted_runtime_first(self):
        ordered = sorted_dependencies(required_dependencies())
        scopes = [d.scope for d in ordered]
        first_dev = scopes.index(DependencyScope.DEVELOPMENT)
        assert all(s is DependencyScope.DEVELOPMENT for s in scopes[first_dev:])
        runtime_names = [d.name for d in ordered[:first_dev]]
        assert runtime_names == sorted(runtime_names)


class TestMissingDependencies:
    def test_declared_packages_excluded(self, package_json_data):
        missing = missing_dependencies(package_json_data, required_dependencies())
        names = [d.name for d in missing]
        assert "expo-router" not in names
        assert "react-native-screens" in names

    def test_dev_dependencies_count_as_declared(self):
        package_json = {"devDependencies": {"typescript": "^5.0.0"}}
        names = [d.name for d in missing_dependencies(package_json, required_dependencies())]
        assert "typescript" not in names

    def test_empty_package_json(self):
        deps = required_dependencies()
        assert len(missing_dependencies({}, deps)) == len(deps)

    def test_ignores_malformed_sections(self):
        deps = required_dependencies()
        assert len(missing_dependencies({"dependencies": ["expo"]}, deps)) == len(deps)


class TestInstallCommands:
    def test_runtime_and_dev_commands(self):
        commands = install_commands(required_dependencies())
        assert len(commands) == 2
        runtime, development = commands
        assert runtime[:3] == ["npx", "expo", "install"]
        assert "expo-router" in runtime
        assert "typescript" not in runtime
        assert development[-2:] == ["--", "--save-dev"]
        assert "typescript" in development

    def test_only_runtime(self):
        deps = [Dependency(name="expo-router", version_range="~3.5.0")]
        assert install_commands(deps) == [["npx", "expo", "install", "expo-router"]]

    def test_nothing_to_install(self):
        assert install_commands([]) == []
