"""Tests for caption text preparation and escaping."""

from caption_synth.core.ir import CapsMode, StyleConfig
from caption_synth.core.text import (
    BACKSLASH_SUBSTITUTE,
    apply_caps,
    escape_text,
    inject_emoji,
    normalize_whitespace,
    prepare_text,
    split_units,
    visible_length,
)


class TestEscaping:
    """Braces and backslashes must never open override blocks."""

    def test_braces_escaped(self):
        assert escape_text("a {b} c") == "a \\{b\\} c"

    def test_backslash_substituted(self):
        assert escape_text("C:\\N") == "C:" + BACKSLASH_SUBSTITUTE + "N"

    def test_split_units_keeps_escapes_whole(self):
        assert split_units("a\\{b") == ["a", "\\{", "b"]

    def test_visible_length_counts_escape_as_one(self):
        assert visible_length(escape_text("{x}")) == 3


class TestCaps:
    """Tests for apply_caps()."""

    def test_allcaps(self):
        assert apply_caps("hello world", CapsMode.ALLCAPS) == "HELLO WORLD"

    def test_titlecase_keeps_rest_of_word(self):
        assert apply_caps("the iPhone launch", CapsMode.TITLECASE) == "The IPhone Launch"

    def test_normal_untouched(self):
        assert apply_caps("MiXeD", CapsMode.NORMAL) == "MiXeD"


class TestPrepareText:
    """Tests for the full preparation pipeline."""

    def test_whitespace_collapses(self):
        assert normalize_whitespace("  one\ntwo\t three ") == "one two three"

    def test_newlines_never_survive(self):
        assert "\n" not in prepare_text("line one\nline two", StyleConfig())

    def test_caps_before_escape(self):
        style = StyleConfig(caps=CapsMode.ALLCAPS)
        assert prepare_text("say {hi}", style) == "SAY \\{HI\\}"

    def test_emoji_only_when_enabled(self):
        assert prepare_text("that was fire", StyleConfig()) == "that was fire"
        assert prepare_text("that was fire", StyleConfig(emoji=True)) == "that was fire\U0001f525"


class TestEmoji:
    """Tests for inject_emoji()."""

    def test_earliest_keyword_wins(self):
        assert inject_emoji("money and fire") == "money\U0001f4b8 and fire"

    def test_whole_words_only(self):
        assert inject_emoji("firework display") == "firework display"

    def test_case_insensitive(self):
        assert inject_emoji("BOOM") == "BOOM\U0001f4a5"

    def test_no_keyword(self):
        assert inject_emoji("nothing here") == "nothing here"
