"""Main scaffolding orchestrator.

Takes a ``ScaffoldConfig`` and materializes the Expo Router + MVVM layout
into an existing Expo project: the template manifest first, then the
configuration patches.  Returns a ``Report`` with one outcome per manifest
entry and per config file, plus the packages the generated code needs.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from expo_mvvm.config import ScaffoldConfig
from expo_mvvm.dependencies import missing_dependencies, required_dependencies, sorted_dependencies
from expo_mvvm.models import FileOutcome
from expo_mvvm.patcher import apply_patch
from expo_mvvm.patcher.project import project_patches
from expo_mvvm.report import Report, ReportBuilder
from expo_mvvm.scaffolder.engine import OutcomeCallback, WritePolicyEngine
from expo_mvvm.scaffolder.manifest import build_manifest
from expo_mvvm.scaffolder.templates import TemplateRenderer
from expo_mvvm.utils import load_json


class StructureGenerator:
    """Scaffolds one project according to one immutable config.

    Usage::

        config = ScaffoldConfig.from_flags("/path/to/app", force=True)
        report = await StructureGenerator(config).generate()

    Args:
        config: Root directory, write mode and feature set for the run.
        renderer: Template renderer; a default one is created if omitted.
        on_outcome: Called with every outcome as soon as it is recorded.
            The generator itself never writes to the console.
    """

    def __init__(
        self,
        config: ScaffoldConfig,
        renderer: TemplateRenderer | None = None,
        on_outcome: OutcomeCallback | None = None,
    ) -> None:
        self.config = config
        self.renderer = renderer or TemplateRenderer()
        self._on_outcome = on_outcome
        self.engine = WritePolicyEngine(
            renderer=self.renderer,
            owned_directories=config.owned_directories,
            on_outcome=on_outcome,
        )

    # -- Public API --------------------------------------------------------

    async def generate(self) -> Report:
        """Run the whole scaffold and return its report.

        Raises:
            InvalidPathError: If the template manifest is malformed.
        """
        root = self.config.root
        builder = ReportBuilder()

        dependencies = required_dependencies()
        declared = await asyncio.to_thread(_read_package_json, self.config.package_json_path)
        builder.with_dependencies(
            sorted_dependencies(dependencies),
            missing_dependencies(declared, dependencies),
        )

        # 1. Directory tree and template files
        manifest = build_manifest(self.config.features)
        builder.extend(await self.engine.apply(root, manifest, self.config.mode))

        # 2. Configuration files
        for config_patch in project_patches(root, dependencies):
            result = await asyncio.to_thread(
                apply_patch, root, config_patch, self.config.forced
            )
            self._record(builder, result.outcome)

        return builder.build()

    # -- Helpers -----------------------------------------------------------

    def _record(self, builder: ReportBuilder, outcome: FileOutcome) -> None:
        builder.add(outcome)
        if self._on_outcome is not None:
            self._on_outcome(outcome)


def _read_package_json(path: Path) -> dict[str, Any]:
    """Parsed package.json, or an empty document when it cannot be read."""
    try:
        return load_json(path)
    except (OSError, ValueError):
        return {}
