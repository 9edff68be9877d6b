"""Merge required keys into JSON configuration documents.

Documents are handled as parsed data, never as text: a file that does not
parse is reported as malformed and left alone.  Existing keys keep their
order and values unless a ``replace_if_forced`` rule runs in forced mode.
"""

from __future__ import annotations

import copy
import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from expo_mvvm.errors import MalformedConfigError
from expo_mvvm.models import MergeRule, PatchRule
from expo_mvvm.utils import detect_indent, dump_json


def parse_json_document(text: str, path: str | Path) -> dict[str, Any]:
    """Parse *text* as a JSON object.

    Raises:
        MalformedConfigError: If the text is not JSON or not an object.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedConfigError(path, f"invalid JSON ({exc.msg} at line {exc.lineno})") from exc
    if not isinstance(data, dict):
        raise MalformedConfigError(path, "top-level value is not an object")
    return data


def merge_json(
    document: dict[str, Any],
    rules: Sequence[PatchRule],
    *,
    forced: bool,
    path: str | Path,
    root: Path | None = None,
) -> dict[str, Any]:
    """Return a copy of *document* with *rules* applied.

    Args:
        document: Parsed document; not modified.
        rules: Rules to apply in order.
        forced: Whether ``replace_if_forced`` rules may replace values.
        path: File name used in error messages.
        root: Directory that ``remove_if_dangling`` asset paths are
            relative to.  Dangling-reference rules are skipped without it.

    Raises:
        MalformedConfigError: If a rule needs to descend through a value
            that is not an object.
    """
    merged = copy.deepcopy(document)
    for rule in rules:
        if rule.rule is MergeRule.REMOVE_IF_DANGLING:
            if root is not None:
                _remove_if_dangling(merged, rule.key_path, root)
            continue
        parent = _ensure_parent(merged, rule.key_path, path)
        key = rule.key_path[-1]
        if key not in parent:
            parent[key] = copy.deepcopy(rule.value)
        elif rule.rule is MergeRule.REPLACE_IF_FORCED and forced and parent[key] != rule.value:
            parent[key] = copy.deepcopy(rule.value)
    return merged


def synthesize_json(rules: Sequence[PatchRule], path: str | Path) -> dict[str, Any]:
    """Build a minimal document holding exactly the rules' required keys."""
    return merge_json({}, rules, forced=False, path=path)


def render_json_document(document: dict[str, Any], original: str | None = None) -> str:
    """Serialise *document*, keeping the original file's indentation and
    trailing-newline convention when there is one."""
    if original is None:
        return dump_json(document)
    return dump_json(
        document,
        indent=detect_indent(original),
        trailing_newline=original.endswith("\n"),
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _ensure_parent(
    document: dict[str, Any], key_path: tuple[str, ...], path: str | Path
) -> dict[str, Any]:
    """Walk to the object holding the last key, creating missing objects."""
    node = document
    for depth, key in enumerate(key_path[:-1]):
        if key not in node:
            node[key] = {}
        child = node[key]
        if not isinstance(child, dict):
            dotted = ".".join(key_path[: depth + 1])
            raise MalformedConfigError(path, f"expected an object at '{dotted}'")
        node = child
    return node


def _remove_if_dangling(document: dict[str, Any], key_path: tuple[str, ...], root: Path) -> None:
    """Delete the key when it names a local file that does not exist."""
    node: Any = document
    for key in key_path[:-1]:
        if not isinstance(node, dict) or key not in node:
            return
        node = node[key]
    if not isinstance(node, dict):
        return
    key = key_path[-1]
    value = node.get(key)
    if not isinstance(value, str) or not value or "://" in value:
        return
    if not (root / value).exists():
        del node[key]
