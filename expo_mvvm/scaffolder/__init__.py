"""Expo MVVM scaffolder -- materializes the Expo Router + MVVM layout.

Quick usage::

    from expo_mvvm.config import ScaffoldConfig
    from expo_mvvm.scaffolder import StructureGenerator

    config = ScaffoldConfig.from_flags("/path/to/expo-app", force=True)
    report = await StructureGenerator(config).generate()
"""

from expo_mvvm.scaffolder.engine import WritePolicyEngine
from expo_mvvm.scaffolder.generator import StructureGenerator
from expo_mvvm.scaffolder.manifest import build_manifest, validate_manifest
from expo_mvvm.scaffolder.paths import resolve
from expo_mvvm.scaffolder.templates import TemplateRenderer

__all__ = [
    "StructureGenerator",
    "TemplateRenderer",
    "WritePolicyEngine",
    "build_manifest",
    "resolve",
    "validate_manifest",
]
