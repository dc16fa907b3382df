"""Tests for global bundle compilation."""

import json
from datetime import timedelta

import pytest

from designkit.bundles import (
    BundleOptions,
    NoTokensError,
    compile_global_bundle,
)
from designkit.bundles.compiler import collect_modes, group_by_type, render_block
from designkit.tokens.models import ProjectToken

EXPECTED_BASIC_CSS = """/* Design Token Bundle */
/* Token Count: 2 */

:root {
  /* Color Tokens */
  --color-primary-500: #3366ff;

  /* Spacing Tokens */
  --spacing-lg: 1.5rem;
}
"""


# ── basic compilation ──


class TestCompileGlobalBundle:
    def test_two_token_bundle(self, basic_tokens, fixed_now):
        bundle = compile_global_bundle(basic_tokens, now=fixed_now)
        assert "--color-primary-500: #3366ff;" in bundle.css_content
        assert "--spacing-lg: 1.5rem;" in bundle.css_content
        assert json.loads(bundle.json_content) == {
            "Color/Primary/500": "var(--color-primary-500)",
            "spacing.lg": "var(--spacing-lg)",
        }
        assert bundle.token_count == 2
        assert bundle.type == "global"
        assert bundle.created_at == fixed_now

    def test_exact_stylesheet(self, basic_tokens, fixed_now):
        bundle = compile_global_bundle(basic_tokens, now=fixed_now)
        assert bundle.css_content == EXPECTED_BASIC_CSS

    def test_first_version(self, basic_tokens, fixed_now):
        bundle = compile_global_bundle(basic_tokens, now=fixed_now)
        major, minor, _patch = bundle.version.split(".")
        assert (major, minor) == ("1", "0")

    def test_empty_token_list_raises(self):
        with pytest.raises(NoTokensError, match="No active tokens"):
            compile_global_bundle([])

    def test_only_unnameable_tokens_raises(self):
        with pytest.raises(NoTokensError):
            compile_global_bundle([ProjectToken(name="!!!", value="1")])

    def test_unnameable_tokens_skipped(self, basic_tokens):
        bundle = compile_global_bundle(basic_tokens + [ProjectToken(name="///", value="x")])
        assert bundle.token_count == 2
        assert "///" not in json.loads(bundle.json_content)

    def test_accepts_raw_dicts(self):
        bundle = compile_global_bundle([{"name": "radius/sm", "value": 4, "type": "radius"}])
        assert "--radius-sm: 4;" in bundle.css_content

    def test_category_order_is_fixed(self):
        bundle = compile_global_bundle([
            ProjectToken(name="misc", value="1"),
            ProjectToken(name="shadow/card", value="0 1px 2px #000", type="shadow"),
            ProjectToken(name="font/body", value="Inter", type="typography"),
            ProjectToken(name="brand", value="#000000", type="color"),
        ])
        css = bundle.css_content
        headings = [line.strip() for line in css.splitlines() if line.strip().endswith("Tokens */")]
        assert headings == [
            "/* Color Tokens */",
            "/* Typography Tokens */",
            "/* Shadow Tokens */",
            "/* Unknown Tokens */",
        ]

    def test_no_modes_header_without_modes(self, basic_tokens):
        bundle = compile_global_bundle(basic_tokens)
        assert "Modes:" not in bundle.css_content
        assert bundle.modes == []


# ── idempotence / versioning ──


class TestIdempotenceAndVersioning:
    def test_compiling_twice_is_byte_identical(self, themed_tokens, fixed_now):
        first = compile_global_bundle(themed_tokens, now=fixed_now)
        second = compile_global_bundle(
            themed_tokens, previous_bundle=first, now=fixed_now + timedelta(seconds=5),
        )
        assert first.css_content == second.css_content
        assert first.json_content == second.json_content
        assert first.content_hash == second.content_hash
        assert second.version.split(".")[:2] == first.version.split(".")[:2]
        assert second.version != first.version

    def test_one_more_token_bumps_minor_by_one(self, basic_tokens, fixed_now):
        first = compile_global_bundle(basic_tokens, now=fixed_now)
        grown = basic_tokens + [ProjectToken(name="radius/md", value="8px", type="radius")]
        second = compile_global_bundle(grown, previous_bundle=first, now=fixed_now)
        assert first.version.split(".")[1] == "0"
        assert second.version.split(".")[1] == "1"

    def test_value_change_keeps_minor_by_default(self, basic_tokens, fixed_now):
        first = compile_global_bundle(basic_tokens, now=fixed_now)
        changed = [basic_tokens[0].model_copy(update={"value": "#000000"}), basic_tokens[1]]
        second = compile_global_bundle(changed, previous_bundle=first, now=fixed_now)
        assert second.version.split(".")[1] == "0"

    def test_value_change_bumps_minor_when_enabled(self, basic_tokens, fixed_now):
        options = BundleOptions(bump_minor_on_change=True)
        first = compile_global_bundle(basic_tokens, options=options, now=fixed_now)
        changed = [basic_tokens[0].model_copy(update={"value": "#000000"}), basic_tokens[1]]
        second = compile_global_bundle(
            changed, previous_bundle=first, options=options, now=fixed_now,
        )
        assert second.version.split(".")[1] == "1"


# ── modes ──


class TestModes:
    def test_collect_modes_first_seen_order(self, themed_tokens):
        assert collect_modes(themed_tokens) == ["light", "dark"]

    def test_one_block_per_mode_plus_default(self, themed_tokens):
        css = compile_global_bundle(themed_tokens).css_content
        assert ':root[data-theme="light"] {' in css
        assert ':root[data-theme="dark"] {' in css
        assert "\n:root {" in css
        assert "/* Modes: light, dark */" in css
        assert css.index('data-theme="light"') < css.index('data-theme="dark"') < css.index("\n:root {")

    def test_mode_blocks_hold_mode_values(self, themed_tokens):
        css = compile_global_bundle(themed_tokens).css_content
        dark_block = css.split(':root[data-theme="dark"] {')[1].split("}")[0]
        assert "--color-bg: #111111;" in dark_block
        assert "--color-text: #eeeeee;" in dark_block
        # No per-mode override: applies in every mode
        assert "--radius-md: 8px;" in dark_block

    def test_default_block_holds_base_values(self, themed_tokens):
        css = compile_global_bundle(themed_tokens).css_content
        default_block = css.split("\n:root {")[1]
        assert "--color-bg: #ffffff;" in default_block
        assert "--radius-md: 8px;" in default_block

    def test_token_count_is_distinct_rendered_tokens(self, themed_tokens):
        bundle = compile_global_bundle(themed_tokens)
        assert bundle.token_count == 3
        assert bundle.modes == ["light", "dark"]

    def test_default_block_can_be_disabled(self, themed_tokens):
        options = BundleOptions(emit_default_block=False)
        css = compile_global_bundle(themed_tokens, options=options).css_content
        assert "\n:root {" not in css
        assert css.count("{") == 2

    def test_token_overriding_other_mode_only_is_left_out(self):
        tokens = [
            ProjectToken(name="bg", value="#fff", type="color",
                         value_by_mode={"light": "#fff", "dark": "#000"}),
            ProjectToken(name="accent", value="#f00", type="color",
                         value_by_mode={"dark": "#0ff"}),
        ]
        css = compile_global_bundle(tokens).css_content
        light_block = css.split(':root[data-theme="light"] {')[1].split("}")[0]
        assert "--accent" not in light_block

    def test_value_for_mode(self):
        base_only = ProjectToken(name="radius/md", value="8px", modes=["light", "dark"])
        assert not base_only.has_mode_overrides
        assert base_only.value_for_mode("dark") == "8px"

        themed = ProjectToken(name="accent", value="#f00", value_by_mode={"dark": "#0ff"})
        assert themed.has_mode_overrides
        assert themed.value_for_mode("dark") == "#0ff"
        assert themed.value_for_mode("light") is None

        empty = ProjectToken(name="bg", value="#fff", value_by_mode={})
        assert not empty.has_mode_overrides
        assert empty.value_for_mode("dark") == "#fff"

    def test_custom_mode_selector(self, themed_tokens):
        options = BundleOptions(mode_selector=".theme-{mode}")
        css = compile_global_bundle(themed_tokens, options=options).css_content
        assert ".theme-dark {" in css

    def test_single_mode_renders_default_block_only(self):
        tokens = [ProjectToken(name="bg", value="#fff", type="color", modes=["light"])]
        css = compile_global_bundle(tokens).css_content
        assert "data-theme" not in css
        assert css.count("{") == 1


# ── helpers ──


class TestRenderHelpers:
    def test_group_by_type_skips_empty_categories(self, basic_tokens):
        groups = group_by_type([(t, t.value) for t in basic_tokens])
        assert [category for category, _ in groups] == ["color", "spacing"]

    def test_render_block(self, basic_tokens):
        lines = render_block(".x", [(basic_tokens[1], "2rem")])
        assert lines == [".x {", "  /* Spacing Tokens */", "  --spacing-lg: 2rem;", "}"]
