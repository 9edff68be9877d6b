"""Tests for Metro bundler configuration patching."""

from __future__ import annotations

from pathlib import Path

import pytest

from expo_mvvm.errors import MalformedConfigError
from expo_mvvm.models import Action, ConfigFormat, MergeRule, PatchRule
from expo_mvvm.patcher import patch
from expo_mvvm.patcher.script_patch import check_script, merge_script, synthesize_script


pytestmark = pytest.mark.unit


EXPO_DEFAULT = """\
// Learn more https://docs.expo.io/guides/customizing-metro
const { getDefaultConfig } = require('expo/metro-config');

/** @type {import('expo/metro-config').MetroConfig} */
const config = getDefaultConfig(__dirname);

module.exports = config;
"""

IIFE_LAYOUT = """\
const { getDefaultConfig } = require('expo/metro-config');

module.exports = (() => {
  const config = getDefaultConfig(__dirname);
  config.transformer.babelTransformerPath = require.resolve('react-native-svg-transformer');
  return config;
})();
"""

RULES = [
    PatchRule(
        key_path=("config.resolver.assetExts.push('db')",),
        value="config.resolver.assetExts.push('db');",
        rule=MergeRule.REPLACE_IF_FORCED,
    ),
    PatchRule(
        key_path=("config.transformer.unstable_allowRequireContext",),
        value="config.transformer.unstable_allowRequireContext = true;",
        rule=MergeRule.REPLACE_IF_FORCED,
    ),
]


class TestMergeScript:
    def test_inserts_before_exports(self):
        merged = merge_script(EXPO_DEFAULT, RULES, forced=False, path="metro.config.js")
        lines = merged.splitlines()
        exports_at = lines.index("module.exports = config;")
        assert lines[exports_at - 3] == "config.resolver.assetExts.push('db');"
        assert lines[exports_at - 2] == "config.transformer.unstable_allowRequireContext = true;"
        assert lines[exports_at - 1] == ""

    def test_keeps_existing_content(self):
        merged = merge_script(EXPO_DEFAULT, RULES, forced=False, path="metro.config.js")
        for line in EXPO_DEFAULT.splitlines():
            assert line in merged.splitlines()

    def test_idempotent(self):
        once = merge_script(EXPO_DEFAULT, RULES, forced=True, path="metro.config.js")
        twice = merge_script(once, RULES, forced=True, path="metro.config.js")
        assert once == twice

    def test_existing_assignment_kept_without_force(self):
        text = EXPO_DEFAULT.replace(
            "module.exports", "config.transformer.unstable_allowRequireContext = false;\nmodule.exports"
        )
        merged = merge_script(text, RULES, forced=False, path="metro.config.js")
        assert "unstable_allowRequireContext = false;" in merged
        assert "unstable_allowRequireContext = true;" not in merged

    def test_existing_assignment_replaced_when_forced(self):
        text = EXPO_DEFAULT.replace(
            "module.exports", "  config.transformer.unstable_allowRequireContext = false;\nmodule.exports"
        )
        merged = merge_script(text, RULES, forced=True, path="metro.config.js")
        assert "  config.transformer.unstable_allowRequireContext = true;" in merged.splitlines()
        assert "= false;" not in merged

    def test_key_matches_whole_token(self):
        text = EXPO_DEFAULT.replace(
            "module.exports",
            "config.transformer.unstable_allowRequireContextLegacy = 1;\nmodule.exports",
        )
        merged = merge_script(text, RULES, forced=False, path="metro.config.js")
        assert "config.transformer.unstable_allowRequireContext = true;" in merged

    def test_missing_exports_is_malformed(self):
        with pytest.raises(MalformedConfigError, match="module.exports"):
            check_script("const config = {};\n", "metro.config.js")

    def test_missing_config_binding_is_malformed(self):
        text = "const { getDefaultConfig } = require('expo/metro-config');\nmodule.exports = getDefaultConfig(__dirname);\n"
        with pytest.raises(MalformedConfigError, match="config"):
            merge_script(text, RULES, forced=False, path="metro.config.js")

    def test_removal_rule_rejected(self):
        rules = [PatchRule(key_path=("x",), rule=MergeRule.REMOVE_IF_DANGLING)]
        with pytest.raises(ValueError):
            merge_script(EXPO_DEFAULT, rules, forced=False, path="metro.config.js")

    def test_config_inside_exported_function_is_malformed(self):
        with pytest.raises(MalformedConfigError, match="top-level 'config'"):
            merge_script(IIFE_LAYOUT, RULES, forced=False, path="metro.config.js")

    def test_config_declared_after_exports_is_malformed(self):
        text = "module.exports = config;\nconst config = {};\n"
        with pytest.raises(MalformedConfigError, match="after"):
            check_script(text, "metro.config.js")

    def test_forced_replace_keeps_rest_of_line(self):
        text = EXPO_DEFAULT.replace(
            "module.exports",
            "config.transformer.unstable_allowRequireContext = false; "
            "config.resolver.sourceExts.push('cjs');\nmodule.exports",
        )
        merged = merge_script(text, RULES, forced=True, path="metro.config.js")
        assert (
            "config.transformer.unstable_allowRequireContext = true; "
            "config.resolver.sourceExts.push('cjs');"
        ) in merged.splitlines()

    def test_forced_replace_of_unterminated_statement_is_malformed(self):
        text = EXPO_DEFAULT.replace(
            "module.exports",
            "config.transformer.unstable_allowRequireContext =\n  false;\nmodule.exports",
        )
        with pytest.raises(MalformedConfigError, match="isolate"):
            merge_script(text, RULES, forced=True, path="metro.config.js")

    def test_double_quoted_statement_recognised(self):
        text = EXPO_DEFAULT.replace(
            "module.exports",
            'config.resolver.assetExts.push("db");\n'
            "config.transformer.unstable_allowRequireContext = true;\n\nmodule.exports",
        )
        assert merge_script(text, RULES, forced=False, path="metro.config.js") == text
        assert merge_script(text, RULES, forced=True, path="metro.config.js") == text


class TestSynthesizeScript:
    def test_minimal_document(self):
        text = synthesize_script(RULES)
        check_script(text, "metro.config.js")
        assert text.startswith("const { getDefaultConfig } = require('expo/metro-config');")
        assert text.rstrip().endswith("module.exports = config;")
        assert "config.resolver.assetExts.push('db');" in text

    def test_synthesized_document_is_stable(self):
        text = synthesize_script(RULES)
        assert merge_script(text, RULES, forced=True, path="metro.config.js") == text


class TestPatchScriptFile:
    def test_absent_file_created(self, tmp_path: Path):
        target = tmp_path / "metro.config.js"
        result = patch(target, ConfigFormat.SCRIPT, RULES, forced=False)
        assert result.outcome.action is Action.CREATED
        assert target.read_text(encoding="utf-8") == synthesize_script(RULES)

    def test_patch_then_patch(self, tmp_path: Path):
        target = tmp_path / "metro.config.js"
        target.write_text(EXPO_DEFAULT, encoding="utf-8")

        first = patch(target, ConfigFormat.SCRIPT, RULES, forced=False)
        second = patch(target, ConfigFormat.SCRIPT, RULES, forced=False)

        assert first.outcome.action is Action.OVERWRITTEN
        assert second.changed is False
        assert second.outcome.action is Action.SKIPPED

    def test_unparseable_file_untouched(self, tmp_path: Path):
        target = tmp_path / "metro.config.js"
        target.write_text("export default {};\n", encoding="utf-8")

        result = patch(target, ConfigFormat.SCRIPT, RULES, forced=True)

        assert result.outcome.action is Action.FAILED
        assert result.outcome.error_type == "MalformedConfigError"
        assert target.read_text(encoding="utf-8") == "export default {};\n"

    def test_exported_function_layout_untouched(self, tmp_path: Path):
        target = tmp_path / "metro.config.js"
        target.write_text(IIFE_LAYOUT, encoding="utf-8")

        result = patch(target, ConfigFormat.SCRIPT, RULES, forced=False)

        assert result.outcome.action is Action.FAILED
        assert result.changed is False
        assert target.read_text(encoding="utf-8") == IIFE_LAYOUT
