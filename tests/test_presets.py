"""Tests for named presets and the explicit → preset → default merge.

WHY: The merge is the one place where caller intent and preset defaults
meet. A regression here silently swaps a user's colour for the preset's.

HOW: Resolve each preset with and without explicit overrides and inspect
the resulting StyleConfig and AnimationSpec field by field.

RULES:
- Explicit non-None values always win
- Preset values fill what the caller left unset
- DEFAULTS fill the rest
- Unknown names never raise
"""

import logging

import pytest

from caption_synth.core.ir import AnimationKind, CapsMode, StyleConfig
from caption_synth.core.presets import (
    DEFAULTS,
    PRESETS,
    get_preset,
    list_presets,
    merge_fields,
    resolve_options,
)


# ---------------------------------------------------------------------------
# Preset table
# ---------------------------------------------------------------------------


class TestPresetTable:
    """Tests for the preset constants and lookup."""

    def test_list_presets_sorted(self):
        names = list_presets()
        assert names == sorted(names)
        assert "hero-pop" in names

    @pytest.mark.parametrize("name", sorted(PRESETS))
    def test_every_preset_resolves(self, name):
        resolved = resolve_options(name)
        assert resolved.animation.kind != AnimationKind.UNKNOWN
        assert resolved.style.font_size > 0

    def test_name_normalization(self):
        assert get_preset("Hero Pop") == PRESETS["hero-pop"]
        assert get_preset("HERO_POP") == PRESETS["hero-pop"]

    def test_get_preset_returns_copy(self):
        bundle = get_preset("hero-pop")
        bundle["font_size"] = 1
        assert PRESETS["hero-pop"]["font_size"] == 84

    def test_unknown_preset_is_empty_and_warns(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert get_preset("vaporwave") == {}
        assert "vaporwave" in caplog.text

    def test_no_preset_is_silent(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert get_preset(None) == {}
            assert get_preset("  ") == {}
        assert caplog.text == ""


# ---------------------------------------------------------------------------
# Merge precedence
# ---------------------------------------------------------------------------


class TestMergePrecedence:
    """Tests for merge_fields() and resolve_options()."""

    def test_explicit_beats_preset(self):
        resolved = resolve_options("hero-pop", {"primary_color": "#FF0000"})
        assert resolved.style.primary_color == "#FF0000"
        # everything else still from the preset
        assert resolved.style.font_family == "Montserrat ExtraBold"
        assert resolved.style.font_size == 84

    def test_preset_beats_default(self):
        resolved = resolve_options("hero-pop")
        assert resolved.style.outline_width == 6
        assert resolved.style.caps == CapsMode.ALLCAPS
        assert resolved.animation.kind == AnimationKind.HERO_POP

    def test_default_fills_the_rest(self):
        resolved = resolve_options("hero-pop")
        assert resolved.style.italic is StyleConfig().italic
        assert resolved.style.box_color is None

    def test_none_counts_as_unset(self):
        resolved = resolve_options("clean", {"font_size": None, "animation": None})
        assert resolved.style.font_size == 54
        assert resolved.animation.kind == AnimationKind.FADE

    def test_explicit_false_is_not_unset(self):
        resolved = resolve_options("hero-pop", {"bold": False})
        assert resolved.style.bold is False

    def test_explicit_animation_overrides_preset(self):
        resolved = resolve_options("hero-pop", {"animation": "Word By Word"})
        assert resolved.animation.kind == AnimationKind.WORD_BY_WORD

    def test_no_preset_is_all_defaults(self):
        resolved = resolve_options()
        assert resolved.style == StyleConfig()
        assert resolved.animation.kind == AnimationKind.NONE

    def test_merge_fields_tiers(self):
        merged = merge_fields({"font_size": 70, "bold": False}, {"font_size": 90})
        assert merged["font_size"] == 90
        assert merged["bold"] is False
        assert merged["font_family"] == DEFAULTS["font_family"]

    def test_unknown_preset_uses_defaults(self):
        resolved = resolve_options("does-not-exist", {"font_size": 40})
        assert resolved.style.font_size == 40
        assert resolved.style.font_family == StyleConfig().font_family

    def test_unknown_option_keys_ignored(self, caplog):
        with caplog.at_level(logging.WARNING):
            resolved = resolve_options(None, {"glitter": True})
        assert "glitter" in caplog.text
        assert resolved.style == StyleConfig()


# ---------------------------------------------------------------------------
# Field coercion
# ---------------------------------------------------------------------------


class TestCoercion:
    """Tests for value clean-up done during resolution."""

    def test_box_color_none_disables_preset_box(self):
        assert resolve_options("news-box").style.box_mode is True
        resolved = resolve_options("news-box", {"box_color": "none"})
        assert resolved.style.box_color is None
        assert resolved.style.box_mode is False

    def test_caps_from_string(self):
        assert resolve_options(None, {"caps": "titlecase"}).style.caps == CapsMode.TITLECASE
        assert resolve_options(None, {"caps": "ALL CAPS"}).style.caps == CapsMode.ALLCAPS

    def test_unknown_caps_is_normal(self):
        assert resolve_options(None, {"caps": "shouty"}).style.caps == CapsMode.NORMAL

    def test_font_size_cast_to_int(self):
        assert resolve_options(None, {"font_size": "72"}).style.font_size == 72

    def test_animation_parameters_pass_through(self):
        resolved = resolve_options(None, {"animation": "baseline-up", "clip_y": 900, "max_chars": 14})
        assert resolved.animation.clip_y == 900
        assert resolved.animation.max_chars == 14
        assert resolved.animation.is_chunked
