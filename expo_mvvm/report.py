"""Aggregation of per-entry outcomes into a run report.

The report is plain data: the CLI decides how to render it.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, Field, computed_field

from expo_mvvm.models import Action, Dependency, FileOutcome


class Report(BaseModel):
    """Everything one ``generate()`` call produced."""

    outcomes: list[FileOutcome] = Field(default_factory=list)
    dependencies: list[Dependency] = Field(
        default_factory=list, description="Packages the generated code needs"
    )
    missing_dependencies: list[Dependency] = Field(
        default_factory=list, description="Required packages not yet declared in package.json"
    )

    @computed_field  # type: ignore[misc]
    @property
    def has_failures(self) -> bool:
        return any(o.action is Action.FAILED for o in self.outcomes)

    @computed_field  # type: ignore[misc]
    @property
    def exit_code(self) -> int:
        """Process exit code the CLI should use: 0 on full success."""
        return 1 if self.has_failures else 0

    @property
    def failures(self) -> list[FileOutcome]:
        return [o for o in self.outcomes if o.action is Action.FAILED]

    def counts(self) -> dict[Action, int]:
        """Number of outcomes per action, with every action present."""
        totals = {action: 0 for action in Action}
        for outcome in self.outcomes:
            totals[outcome.action] += 1
        return totals

    def by_action(self, action: Action) -> list[FileOutcome]:
        return [o for o in self.outcomes if o.action is action]


class ReportBuilder:
    """Collects outcomes in the order they are produced."""

    def __init__(self) -> None:
        self._outcomes: list[FileOutcome] = []
        self._dependencies: list[Dependency] = []
        self._missing: list[Dependency] = []

    def add(self, outcome: FileOutcome) -> "ReportBuilder":
        self._outcomes.append(outcome)
        return self

    def extend(self, outcomes: Iterable[FileOutcome]) -> "ReportBuilder":
        self._outcomes.extend(outcomes)
        return self

    def with_dependencies(
        self,
        dependencies: Iterable[Dependency],
        missing: Iterable[Dependency] = (),
    ) -> "ReportBuilder":
        self._dependencies = list(dependencies)
        self._missing = list(missing)
        return self

    def build(self) -> Report:
        return Report(
            outcomes=list(self._outcomes),
            dependencies=list(self._dependencies),
            missing_dependencies=list(self._missing),
        )
