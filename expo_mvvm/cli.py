"""Command-line entry point: ``expo-mvvm`` / ``python -m expo_mvvm``.

Validates that the target directory is an Expo project, runs the
generator, and renders its report with Rich.

Usage::

    expo-mvvm              # generate structure (skip existing files)
    expo-mvvm -f           # force overwrite existing files
    expo-mvvm -o           # overwrite entire structure (clean first)
"""

from __future__ import annotations

import argparse
import asyncio
import shlex
import sys
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError
from rich.markup import escape
from rich.panel import Panel
from rich.tree import Tree

from expo_mvvm.config import ScaffoldConfig
from expo_mvvm.dependencies import install_commands
from expo_mvvm.errors import PreconditionError
from expo_mvvm.models import Action, FileOutcome
from expo_mvvm.report import Report
from expo_mvvm.scaffolder import StructureGenerator, build_manifest
from expo_mvvm.utils import (
    console,
    load_json,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)


REQUIRED_FILES: tuple[str, ...] = ("package.json", "app.json")

_ACTION_STYLES: dict[Action, str] = {
    Action.CREATED: "green",
    Action.OVERWRITTEN: "yellow",
    Action.SKIPPED: "dim",
    Action.DELETED: "magenta",
    Action.FAILED: "bold red",
}


# ---------------------------------------------------------------------------
# Precondition checks
# ---------------------------------------------------------------------------


def validate_project_directory(root: Path) -> None:
    """Check that *root* looks like an Expo project.

    Raises:
        PreconditionError: If ``package.json`` or ``app.json`` is missing,
            ``package.json`` cannot be read, or it does not depend on
            ``expo``.
    """
    if not root.is_dir():
        raise PreconditionError(f"Target directory does not exist: {root}")

    for name in REQUIRED_FILES:
        if not (root / name).is_file():
            raise PreconditionError(f"Not a valid Expo project directory. Missing: {name}")

    try:
        package_json = load_json(root / "package.json")
    except (OSError, ValueError) as exc:
        raise PreconditionError(f"Cannot read package.json: {exc}") from exc

    dependencies = package_json.get("dependencies")
    if not isinstance(dependencies, dict) or "expo" not in dependencies:
        raise PreconditionError(
            "This does not appear to be an Expo project. "
            "Please run this command in an Expo project directory."
        )


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def print_outcome(outcome: FileOutcome) -> None:
    """Print one progress line for an outcome as it happens."""
    style = _ACTION_STYLES[outcome.action]
    line = f"[{style}]{outcome.action.value:>11}[/{style}]  {escape(outcome.path)}"
    if outcome.error:
        line += f"  [red]({escape(outcome.error)})[/red]"
    console.print(line, highlight=False)


def print_report(report: Report) -> None:
    """Print the summary table and every failure with its reason."""
    console.print()
    counts = report.counts()
    print_summary_table(
        {action.value.capitalize(): str(counts[action]) for action in Action},
        title="Scaffold Summary",
    )
    for failure in report.failures:
        print_error(escape(f"Failed: {failure.path} -- {failure.error_type}: {failure.error}"))


def build_structure_tree(features: Sequence[str]) -> Tree:
    """Render the generated layout as a Rich tree."""
    tree = Tree("[bold]Project structure[/bold]")
    nodes: dict[str, Tree] = {}
    for entry in build_manifest(features):
        parent_path, _, name = entry.relative_path.rpartition("/")
        parent = nodes.get(parent_path, tree)
        label = f"[bold blue]{name}/[/bold blue]" if entry.is_directory else name
        node = parent.add(label)
        if entry.is_directory:
            nodes[entry.relative_path] = node
    return tree


def print_next_steps(report: Report, skip_deps: bool) -> None:
    steps: list[str] = []
    if skip_deps:
        steps.append("Dependency installation skipped (--skip-deps).")
    else:
        steps.append("Install required dependencies:")
        steps.extend(
            f"   [dim]{shlex.join(argv)}[/dim]"
            for argv in install_commands(report.dependencies)
        )
        if report.missing_dependencies:
            names = ", ".join(d.name for d in report.missing_dependencies)
            steps.append(f"   [yellow]Newly declared in package.json:[/yellow] {names}")
    steps.append("Start your development server:")
    steps.append("   [dim]npx expo start --clear[/dim]")
    console.print(Panel("\n".join(steps), title="Next Steps", border_style="yellow"))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="expo-mvvm",
        description="Generate Expo Router + MVVM architecture structure",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  expo-mvvm          # Generate structure (skip existing files)\n"
            "  expo-mvvm -f       # Force overwrite existing files\n"
            "  expo-mvvm -o       # Overwrite entire structure (clean first)\n"
            "\n"
            "Required Dependencies:\n"
            "  - expo-router\n"
            "  - react-native-screens\n"
            "  - react-native-safe-area-context\n"
            "  - @react-navigation/drawer (for drawer layout)\n"
            "  - @react-navigation/bottom-tabs (for tab layout)\n"
        ),
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Expo project directory (default: current directory)",
    )
    parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Force overwrite existing files",
    )
    parser.add_argument(
        "--overwrite", "-o",
        action="store_true",
        help="Overwrite entire structure (clean old files first)",
    )
    parser.add_argument(
        "--skip-deps",
        action="store_true",
        help="Skip installing dependencies",
    )
    parser.add_argument(
        "--features",
        default=None,
        help="Comma-separated MVVM feature names (default: home,settings,profile)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point.  Exits 0 on full success, 1 otherwise."""
    args = build_parser().parse_args(argv)
    root = Path(args.path).resolve()

    features = None
    if args.features:
        features = tuple(f.strip() for f in args.features.split(",") if f.strip())

    try:
        config = ScaffoldConfig.from_flags(
            root,
            force=args.force,
            overwrite=args.overwrite,
            skip_deps=args.skip_deps,
            features=features,
        )
    except ValidationError as exc:
        console.print(f"[bold red]Error:[/bold red] Invalid options: {exc.errors()[0]['msg']}")
        sys.exit(1)

    console.print("[bold blue]Creating Expo Router + MVVM Architecture...[/bold blue]\n")

    try:
        validate_project_directory(root)
    except PreconditionError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        print_warning("Tip: Make sure you are in a React Native/Expo project directory")
        sys.exit(1)

    generator = StructureGenerator(config, on_outcome=print_outcome)
    report = asyncio.run(generator.generate())

    print_report(report)
    if report.has_failures:
        print_error("Scaffolding finished with failures.")
        sys.exit(report.exit_code)

    print_success("Expo Router + MVVM architecture created successfully!")
    console.print(build_structure_tree(config.features))
    print_next_steps(report, config.skip_deps)


if __name__ == "__main__":
    main()
