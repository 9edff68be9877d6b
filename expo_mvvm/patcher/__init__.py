"""Config patcher -- conservative in-place edits of project configuration.

Loads an existing configuration file, merges required keys or statements
into it without dropping unrelated content, and writes it back only when
the result differs.  Applying the same patch twice leaves the file
untouched the second time.

Quick usage::

    from expo_mvvm.patcher import patch
    from expo_mvvm.models import ConfigFormat, PatchRule

    result = patch(
        "/path/to/project/tsconfig.json",
        ConfigFormat.JSON,
        [PatchRule(key_path=("compilerOptions", "baseUrl"), value=".")],
        forced=False,
    )
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from expo_mvvm.errors import IOFailure, MalformedConfigError
from expo_mvvm.models import (
    Action,
    ConfigFormat,
    ConfigPatch,
    FileOutcome,
    PatchResult,
    PatchRule,
)
from expo_mvvm.patcher.json_patch import (
    merge_json,
    parse_json_document,
    render_json_document,
    synthesize_json,
)
from expo_mvvm.patcher.script_patch import merge_script, synthesize_script

__all__ = [
    "apply_patch",
    "patch",
]


def patch(
    file_path: str | Path,
    format: ConfigFormat,
    required: Sequence[PatchRule],
    forced: bool,
    *,
    root: Path | None = None,
    label: str | None = None,
) -> PatchResult:
    """Merge *required* into the configuration file at *file_path*.

    Args:
        file_path: The configuration file.  Created when absent.
        format: How to parse the file.
        required: Rules describing the required keys.
        forced: Whether ``replace_if_forced`` rules may replace values.
        root: Project root used to check asset references; defaults to
            the file's directory.
        label: Path reported in the outcome; defaults to the file name.

    Returns:
        A ``PatchResult`` whose outcome is ``created``, ``overwritten``
        (changed in place), ``skipped`` (already up to date) or ``failed``
        (``MalformedConfigError`` or ``IOFailure``).
    """
    target = Path(file_path)
    name = label or target.name
    root = root if root is not None else target.parent

    try:
        if not target.exists():
            content = _synthesize(format, required, name)
            _write_text(target, content)
            return PatchResult(changed=True, outcome=FileOutcome(path=name, action=Action.CREATED))

        if target.is_dir():
            raise MalformedConfigError(name, "path is a directory")
        original = target.read_text(encoding="utf-8")
        content = _merge(format, original, required, forced, name, root)
        if content is None:
            return PatchResult(changed=False, outcome=FileOutcome(path=name, action=Action.SKIPPED))
        _write_text(target, content)
    except MalformedConfigError as exc:
        return PatchResult(changed=False, outcome=FileOutcome.failed(name, exc))
    except UnicodeDecodeError as exc:
        failure = MalformedConfigError(name, f"not UTF-8 text ({exc.reason})")
        return PatchResult(changed=False, outcome=FileOutcome.failed(name, failure))
    except OSError as exc:
        return PatchResult(changed=False, outcome=FileOutcome.failed(name, IOFailure(name, exc)))

    return PatchResult(changed=True, outcome=FileOutcome(path=name, action=Action.OVERWRITTEN))


def apply_patch(root: str | Path, config_patch: ConfigPatch, forced: bool) -> PatchResult:
    """Apply a ``ConfigPatch`` whose path is relative to *root*."""
    root = Path(root)
    return patch(
        root / config_patch.path,
        config_patch.format,
        config_patch.rules,
        forced,
        root=root,
        label=config_patch.path,
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _synthesize(format: ConfigFormat, rules: Sequence[PatchRule], name: str) -> str:
    if format is ConfigFormat.SCRIPT:
        return synthesize_script(rules)
    return render_json_document(synthesize_json(rules, name))


def _merge(
    format: ConfigFormat,
    original: str,
    rules: Sequence[PatchRule],
    forced: bool,
    name: str,
    root: Path,
) -> str | None:
    """Return the patched text, or ``None`` when nothing changes."""
    if format is ConfigFormat.SCRIPT:
        merged_text = merge_script(original, rules, forced=forced, path=name)
        return None if merged_text == original else merged_text

    document = parse_json_document(original, name)
    merged = merge_json(document, rules, forced=forced, path=name, root=root)
    if merged == document:
        return None
    return render_json_document(merged, original)


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
