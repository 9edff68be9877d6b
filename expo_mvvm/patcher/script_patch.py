"""Merge required statements into the Metro bundler configuration.

``metro.config.js`` is treated as a sequence of lines.  A document is
only patched when its shape is recognisable: it declares a top-level
``config`` binding and, further down, assigns ``module.exports`` at top
level.  Required statements are inserted just above the ``module.exports``
line, where ``config`` is in scope.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path

from expo_mvvm.errors import MalformedConfigError
from expo_mvvm.models import MergeRule, PatchRule


_EXPORTS_LINE = re.compile(r"^module\.exports\s*=")
_CONFIG_BINDING = re.compile(r"^(?:const|let|var)\s+config\b")

_HEADER = (
    "const { getDefaultConfig } = require('expo/metro-config');",
    "",
    "const config = getDefaultConfig(__dirname);",
)
_FOOTER = "module.exports = config;"


def check_script(text: str, path: str | Path) -> None:
    """Raise ``MalformedConfigError`` unless *text* can be patched safely."""
    lines = text.splitlines()
    exports_at = _exports_index(lines)
    if exports_at is None:
        raise MalformedConfigError(path, "no top-level 'module.exports =' assignment found")
    binding_at = next(
        (i for i, line in enumerate(lines) if _CONFIG_BINDING.match(line)), None
    )
    if binding_at is None:
        raise MalformedConfigError(path, "no top-level 'config' binding to patch")
    if binding_at > exports_at:
        raise MalformedConfigError(path, "'config' is declared after 'module.exports'")


def merge_script(
    text: str,
    rules: Sequence[PatchRule],
    *,
    forced: bool,
    path: str | Path,
) -> str:
    """Return *text* with every rule's statement present.

    A rule's single key is the statement's left-hand side (or the whole
    statement for bare calls); its value is the full statement, ending in
    ``;``.  Keys match regardless of quote style.  A forced replacement
    rewrites only the matched statement, up to its ``;``, and keeps
    anything else on the line.

    Raises:
        MalformedConfigError: If the document shape is not recognised, or
            a statement to replace is not terminated on its own line.
    """
    check_script(text, path)
    lines = text.splitlines()
    pending: list[str] = []

    for rule in rules:
        if rule.rule is MergeRule.REMOVE_IF_DANGLING:
            raise ValueError("remove_if_dangling is not supported for script documents")
        key = rule.key_path[0]
        statement = str(rule.value)
        index = _find_statement(lines, key)
        if index is None:
            if statement not in pending:
                pending.append(statement)
        elif rule.rule is MergeRule.REPLACE_IF_FORCED and forced:
            lines[index] = _replace_statement(lines[index], key, statement, path)

    if pending:
        exports_at = _exports_index(lines)
        block = pending + [""]
        if exports_at > 0 and lines[exports_at - 1].strip():
            block = [""] + block
        lines[exports_at:exports_at] = block

    result = "\n".join(lines)
    if text.endswith("\n"):
        result += "\n"
    return result


def synthesize_script(rules: Sequence[PatchRule]) -> str:
    """Build a minimal Metro config holding exactly the rules' statements."""
    statements = [str(rule.value) for rule in rules if rule.rule is not MergeRule.REMOVE_IF_DANGLING]
    lines = list(_HEADER)
    if statements:
        lines.append("")
        lines.extend(statements)
    lines.extend(["", _FOOTER])
    return "\n".join(lines) + "\n"


def _exports_index(lines: list[str]) -> int | None:
    return next((i for i, line in enumerate(lines) if _EXPORTS_LINE.match(line)), None)


def _same_quotes(text: str) -> str:
    return text.replace('"', "'")


def _find_statement(lines: list[str], key: str) -> int | None:
    """Index of the first line that starts with *key* as a whole token."""
    key = _same_quotes(key)
    for index, line in enumerate(lines):
        stripped = _same_quotes(line.strip())
        if not stripped.startswith(key):
            continue
        rest = stripped[len(key):]
        if not rest or not (rest[0].isalnum() or rest[0] in "_$"):
            return index
    return None


def _replace_statement(line: str, key: str, statement: str, path: str | Path) -> str:
    """Swap the statement that starts *line* for *statement*."""
    start = len(line) - len(line.lstrip())
    end = line.find(";", start)
    if end == -1:
        if _same_quotes(line[start:].rstrip()) == _same_quotes(statement.rstrip(";")):
            return line
        raise MalformedConfigError(path, f"cannot isolate the '{key}' statement")
    current = line[start:end + 1]
    if _same_quotes(current) == _same_quotes(statement):
        return line
    return line[:start] + statement + line[end + 1:]
