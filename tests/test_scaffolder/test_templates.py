"""Tests for template rendering and the shipped template bodies."""

from __future__ import annotations

from pathlib import Path

import pytest
from jinja2 import UndefinedError

from expo_mvvm.scaffolder.templates import TemplateRenderer


pytestmark = pytest.mark.unit


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


class TestTemplateRenderer:
    def test_renders_feature_view_model(self, renderer):
        content = renderer.render(
            "features/ViewModel.ts.j2",
            {"feature": "home", "pascal": "Home", "title": "Home"},
        )
        assert "export function useHomeViewModel(): HomeViewModel" in content
        assert "from './HomeModel'" in content
        assert "{{" not in content

    def test_renders_container(self, renderer):
        content = renderer.render(
            "screens/Container.tsx.j2",
            {"feature": "settings", "pascal": "Settings", "title": "Settings"},
        )
        assert "@/src/features/settings/SettingsViewModel" in content
        assert "export default function SettingsContainer()" in content

    def test_renders_layout_loop(self, renderer):
        screens = [
            {"name": "home", "title": "Home", "icon": "home-outline"},
            {"name": "profile", "title": "Profile", "icon": "person-outline"},
        ]
        content = renderer.render("app/tab_layout.tsx.j2", {"screens": screens})
        assert content.count("<Tabs.Screen") == 2
        assert "'person-outline'" in content

    def test_nav_screen_uses_filter(self, renderer):
        content = renderer.render(
            "app/nav_screen.tsx.j2",
            {"feature": "home", "pascal": "Home", "title": "Home", "navigator": "drawer"},
        )
        assert "export default function HomeDrawerScreen()" in content

    def test_missing_param_raises(self, renderer):
        with pytest.raises(UndefinedError):
            renderer.render("features/Model.ts.j2", {"feature": "home"})

    def test_rendering_is_deterministic(self, renderer):
        params = {"feature": "home", "pascal": "Home", "title": "Home"}
        first = renderer.render("screens/View.tsx.j2", params)
        second = renderer.render("screens/View.tsx.j2", params)
        assert first == second

    def test_keeps_trailing_newline(self, renderer):
        content = renderer.render("components/index.ts.j2", {"component": "Button"})
        assert content.endswith("\n")
        assert "export { default as Button } from './Button';" in content

    def test_model_uses_camel_case_filter(self, renderer):
        content = renderer.render(
            "features/Model.ts.j2", {"feature": "home", "pascal": "Home", "title": "Home"}
        )
        assert "export const homeEndpoint = '/home';" in content

    def test_load_static_is_verbatim(self, renderer):
        raw = (renderer.template_dir / "theme" / "Colors.ts").read_text(encoding="utf-8")
        assert renderer.load_static("theme/Colors.ts") == raw

    def test_list_templates(self, renderer):
        templates = renderer.list_templates("screens")
        assert "screens/View.tsx.j2" in templates
        assert all(t.startswith("screens/") for t in templates)

    def test_list_templates_unknown_prefix(self, renderer):
        assert renderer.list_templates("nope") == []

    def test_custom_template_dir(self, tmp_path: Path):
        (tmp_path / "hello.txt.j2").write_text("Hello {{ name }}!\n", encoding="utf-8")
        renderer = TemplateRenderer(tmp_path)
        assert renderer.render("hello.txt.j2", {"name": "Expo"}) == "Hello Expo!\n"


class TestShippedTemplates:
    def test_every_manifest_template_exists(self, renderer, manifest):
        for entry in manifest:
            if entry.template:
                assert (renderer.template_dir / entry.template).is_file(), entry.template

    def test_every_template_is_used(self, renderer, manifest):
        used = {e.template for e in manifest if e.template}
        assert set(renderer.list_templates()) == used
