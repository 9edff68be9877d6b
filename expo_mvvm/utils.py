"""Shared helpers for the Expo MVVM scaffolder.

Provides JSON document I/O that keeps a file's indentation and trailing
newline, name case conversion, and the Rich console helpers the CLI uses
for user-visible output.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------


def slugify(text: str) -> str:
    """Convert text to a URL/filename-safe slug (hyphenated).

    Examples::

        slugify("Test Expo App") -> "test-expo-app"
        slugify("  My App (v2) ") -> "my-app-v2"
    """
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower().strip())
    return slug.strip("-")


def to_pascal(name: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``SomeThing``.

    Words that are already mixed case keep their inner capitals, so
    ``TextInput`` stays ``TextInput``.
    """
    parts = re.split(r"[-_\s]+", name)
    return "".join(word[:1].upper() + word[1:] for word in parts if word)


def to_camel(name: str) -> str:
    """Convert ``some-thing`` or ``SomeThing`` to ``someThing``."""
    pascal = to_pascal(name)
    if pascal:
        return pascal[0].lower() + pascal[1:]
    return ""


# ---------------------------------------------------------------------------
# JSON I/O
# ---------------------------------------------------------------------------


def load_json(path: str | Path) -> dict[str, Any]:
    """Load and parse a JSON file whose top level is an object.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
        ValueError: If the top-level value is not an object.
    """
    raw = Path(path).read_text(encoding="utf-8")
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object at the top level of {path}")
    return data


def detect_indent(text: str, default: int = 2) -> int | str:
    """Return the indentation unit used by a JSON document.

    Looks at the first indented line.  Tab-indented documents return
    ``"\\t"`` so :func:`json.dumps` reproduces them.
    """
    for line in text.splitlines()[1:]:
        stripped = line.lstrip(" \t")
        if not stripped or len(stripped) == len(line):
            continue
        leading = line[: len(line) - len(stripped)]
        if leading.startswith("\t"):
            return "\t"
        return len(leading)
    return default


def dump_json(
    data: Any,
    *,
    indent: int | str = 2,
    trailing_newline: bool = True,
) -> str:
    """Serialise *data* the way JavaScript tooling writes JSON files."""
    content = json.dumps(data, indent=indent, ensure_ascii=False)
    if trailing_newline:
        content += "\n"
    return content


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
