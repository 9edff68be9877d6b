"""The fixed set of configuration patches applied to an Expo project.

Covers the package manifest (router entry point, path alias, dependency
entries), the TypeScript config (path aliases), the Metro config
(asset extension and ``require.context`` support for Expo Router) and the
app metadata (URL scheme, dangling asset references).
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from expo_mvvm.models import ConfigFormat, ConfigPatch, Dependency, MergeRule, PatchRule
from expo_mvvm.utils import load_json, slugify


# Asset references in app.json that break prebuild when the file is missing.
ASSET_KEY_PATHS: tuple[tuple[str, ...], ...] = (
    ("expo", "icon"),
    ("expo", "splash", "image"),
    ("expo", "ios", "icon"),
    ("expo", "android", "icon"),
    ("expo", "android", "adaptiveIcon", "foregroundImage"),
    ("expo", "android", "adaptiveIcon", "backgroundImage"),
    ("expo", "android", "adaptiveIcon", "monochromeImage"),
    ("expo", "web", "favicon"),
    ("expo", "notification", "icon"),
)

METRO_STATEMENTS: tuple[tuple[str, str], ...] = (
    (
        "config.resolver.assetExts.push('db')",
        "config.resolver.assetExts.push('db');",
    ),
    (
        "config.transformer.unstable_allowRequireContext",
        "config.transformer.unstable_allowRequireContext = true;",
    ),
)


def package_json_patch(dependencies: Iterable[Dependency]) -> ConfigPatch:
    rules = [
        PatchRule(key_path=("main",), value="expo-router/entry", rule=MergeRule.REPLACE_IF_FORCED),
        PatchRule(key_path=("exports", "./*"), value="./*"),
    ]
    for dep in sorted(dependencies, key=lambda d: (d.manifest_section, d.name)):
        rules.append(
            PatchRule(
                key_path=(dep.manifest_section, dep.name),
                value=dep.version_range,
                rule=MergeRule.REPLACE_IF_FORCED,
            )
        )
    return ConfigPatch(path="package.json", format=ConfigFormat.JSON, rules=tuple(rules))


def tsconfig_patch() -> ConfigPatch:
    rules = (
        PatchRule(key_path=("extends",), value="expo/tsconfig.base"),
        PatchRule(key_path=("compilerOptions", "strict"), value=True),
        PatchRule(
            key_path=("compilerOptions", "baseUrl"), value=".", rule=MergeRule.REPLACE_IF_FORCED
        ),
        PatchRule(
            key_path=("compilerOptions", "paths", "@/*"),
            value=["./*"],
            rule=MergeRule.REPLACE_IF_FORCED,
        ),
        PatchRule(
            key_path=("compilerOptions", "paths", "@/src/*"),
            value=["./src/*"],
            rule=MergeRule.REPLACE_IF_FORCED,
        ),
    )
    return ConfigPatch(path="tsconfig.json", format=ConfigFormat.JSON, rules=rules)


def metro_config_patch() -> ConfigPatch:
    rules = tuple(
        PatchRule(key_path=(key,), value=statement, rule=MergeRule.REPLACE_IF_FORCED)
        for key, statement in METRO_STATEMENTS
    )
    return ConfigPatch(path="metro.config.js", format=ConfigFormat.SCRIPT, rules=rules)


def app_json_patch(scheme: str) -> ConfigPatch:
    rules = [PatchRule(key_path=("expo", "scheme"), value=scheme)]
    rules.extend(
        PatchRule(key_path=key_path, rule=MergeRule.REMOVE_IF_DANGLING)
        for key_path in ASSET_KEY_PATHS
    )
    return ConfigPatch(path="app.json", format=ConfigFormat.JSON, rules=tuple(rules))


def project_scheme(root: Path) -> str:
    """Derive the deep-link scheme from app.json (``expo.slug`` or
    ``expo.name``), falling back to the directory name."""
    try:
        expo = load_json(root / "app.json").get("expo", {})
    except (OSError, ValueError):
        expo = {}
    candidate = ""
    if isinstance(expo, dict):
        candidate = str(expo.get("slug") or expo.get("name") or "")
    return slugify(candidate) or slugify(root.resolve().name) or "app"


def project_patches(root: Path, dependencies: Iterable[Dependency]) -> list[ConfigPatch]:
    """All patches for a run, in application order."""
    return [
        package_json_patch(dependencies),
        tsconfig_patch(),
        metro_config_patch(),
        app_json_patch(project_scheme(root)),
    ]
