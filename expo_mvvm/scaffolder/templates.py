"""Template loading and rendering for the scaffolded Expo files.

Templates live under ``expo_mvvm/scaffolder/templates/``.  Files ending in
``.j2`` are Jinja2 templates rendered with an entry's parameter record;
every other file is a static body copied verbatim.  Rendering never reads
ambient state (time, environment), so the same entry always produces the
same text.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from expo_mvvm.utils import to_camel, to_pascal


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders the scaffold's template bodies.

    Undefined template variables raise instead of rendering as empty
    strings, so a missing parameter surfaces as a failed entry rather than
    a silently broken file.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["pascal_case"] = to_pascal
        self.env.filters["camel_case"] = to_camel

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a Jinja2 template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"screens/View.tsx.j2"``).
            context: Variables available inside the template.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    def load_static(self, template_path: str) -> str:
        """Return a static body verbatim."""
        return (self.template_dir / template_path).read_text(encoding="utf-8")

    def list_templates(self, prefix: str = "") -> list[str]:
        """Return a sorted list of every template path under *prefix*."""
        search_dir = self.template_dir / prefix if prefix else self.template_dir
        if not search_dir.is_dir():
            return []
        return sorted(
            p.relative_to(self.template_dir).as_posix()
            for p in search_dir.rglob("*")
            if p.is_file()
        )
