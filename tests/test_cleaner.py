"""Tests for detect_issues / clean_text."""

from __future__ import annotations

from types import MappingProxyType

import pytest

from unicode_cleaner import clean_text, detect_issues, is_problematic, lookup, all_categories
from unicode_cleaner.core.cleaner import UnicodeCleaner, apply_replacements, normalize_whitespace
from unicode_cleaner.core.models import CharacterCategory
from unicode_cleaner.core.table import ClassificationTable

ALL = set(CharacterCategory)

SAMPLES = [
    "",
    "plain ascii text",
    "caf\u00e9\u2013bar",
    "\u201cHello\u201d",
    "a\u200bb",
    "100\uff05",
    "5\u2034",
    "a   b\n\n\n\nc",
    "  \u201cHi\u201d\u2026 \u00a0\u00a0 there\n\n\n\n\u2014end\ufeff  ",
    "\u2034\u2034\u2026\u2026\u200b\u200b",
    "\ufe0f\u00ad\u3000\t\t\u2003x\n \n\n\n\n",
]


class TestDetectIssues:
    def test_dash_issue_position(self):
        issues = detect_issues("caf\u00e9\u2013bar", {CharacterCategory.DASHES})
        assert len(issues) == 1
        assert issues[0].start == 4
        assert issues[0].end == 5
        assert issues[0].info.character == "\u2013"

    def test_zero_width_space(self):
        issues = detect_issues("a\u200bb", {CharacterCategory.HIDDEN_CONTROL})
        assert len(issues) == 1
        assert issues[0].category == CharacterCategory.HIDDEN_CONTROL
        assert issues[0].replacement == ""

    def test_one_issue_per_occurrence(self):
        issues = detect_issues("\u2014\u2014x\u2014")
        assert [i.start for i in issues] == [0, 1, 3]

    def test_every_category_detected(self, messy_text):
        issues = detect_issues(messy_text)
        assert {i.category for i in issues} == ALL
        assert len(issues) == 10

    @pytest.mark.parametrize("text", SAMPLES)
    def test_offsets_are_sound_and_ascending(self, text):
        issues = detect_issues(text)
        for issue in issues:
            assert issue.end == issue.start + 1
            assert text[issue.start] == issue.info.character
        starts = [i.start for i in issues]
        assert starts == sorted(set(starts))

    @pytest.mark.parametrize("category", list(CharacterCategory))
    def test_filter_matches_unfiltered_restriction(self, messy_text, category):
        filtered = detect_issues(messy_text, {category})
        restricted = [i for i in detect_issues(messy_text) if i.category == category]
        assert filtered == restricted
        assert all(i.category == category for i in filtered)

    def test_filter_accepts_strings(self, messy_text):
        by_name = detect_issues(messy_text, ["dashes", "Quotes & Apostrophes"])
        by_enum = detect_issues(messy_text, {CharacterCategory.DASHES, CharacterCategory.QUOTES})
        assert by_name == by_enum

    def test_empty_filter_matches_nothing(self, messy_text):
        assert detect_issues(messy_text, set()) == []

    def test_context_window(self):
        text = "0123456789\u200babcdefghijKLM"
        issue = detect_issues(text)[0]
        assert issue.start == 10
        assert issue.context == "0123456789\u200babcdefghi"

    def test_context_clipped_at_boundaries(self):
        assert detect_issues("\u2013ab")[0].context == "\u2013ab"
        assert detect_issues("ab\u2013")[0].context == "ab\u2013"

    def test_empty_text(self):
        assert detect_issues("") == []

    def test_plain_ascii_has_no_issues(self):
        assert detect_issues("The quick brown fox -- 'quoted' \"text\" ...") == []

    def test_input_is_not_mutated(self):
        text = "x\u2014y"
        detect_issues(text)
        clean_text(text)
        assert text == "x\u2014y"

    def test_none_text_raises_type_error(self):
        with pytest.raises(TypeError):
            detect_issues(None)  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            clean_text(None)  # type: ignore[arg-type]

    def test_unknown_category_raises(self):
        with pytest.raises(ValueError):
            detect_issues("x", ["bogus"])


class TestCleanText:
    def test_en_dash(self):
        assert clean_text("caf\u00e9\u2013bar", {CharacterCategory.DASHES}) == "caf\u00e9-bar"

    def test_curly_quotes(self):
        assert clean_text("\u201cHello\u201d", {CharacterCategory.QUOTES}) == '"Hello"'

    def test_zero_width_space_removed(self):
        assert clean_text("a\u200bb", {CharacterCategory.HIDDEN_CONTROL}) == "ab"

    def test_full_width_percent(self):
        assert clean_text("100\uff05", {CharacterCategory.FULL_WIDTH}) == "100%"

    def test_triple_prime_expands(self):
        text = "5\u2034"
        cleaned = clean_text(text)
        assert cleaned == "5'''"
        assert len(cleaned) > len(text)
        assert detect_issues(cleaned) == []

    def test_mixed_length_replacements_keep_offsets(self):
        text = "\u2034a\u200bb\u2026c\u2034"
        assert clean_text(text, ALL) == "'''ab...c'''"

    def test_whitespace_normalization(self):
        assert clean_text("a   b\n\n\n\nc") == "a b\n\nc"

    def test_full_clean_strips_and_collapses(self):
        assert clean_text("  a\u00a0\u00a0b\t\tc  ") == "a b c"

    def test_scoped_clean_skips_normalization(self):
        text = "  a   b\n\n\n\n\u2014  "
        assert clean_text(text, {CharacterCategory.DASHES}) == "  a   b\n\n\n\n-  "

    def test_scoped_clean_with_every_category_still_skips_normalization(self):
        text = "a\u00a0 b\n\n\n"
        assert clean_text(text, ALL) == "a  b\n\n\n"

    def test_scoped_clean_leaves_other_categories(self):
        text = "\u201cx\u201d\u2014y"
        assert clean_text(text, {CharacterCategory.QUOTES}) == '"x"\u2014y'

    @pytest.mark.parametrize("text", SAMPLES)
    def test_full_clean_is_idempotent(self, text):
        once = clean_text(text)
        assert clean_text(once) == once
        assert detect_issues(once) == []

    @pytest.mark.parametrize("text", SAMPLES)
    def test_scoped_clean_is_idempotent(self, text):
        once = clean_text(text, {CharacterCategory.QUOTES, CharacterCategory.SPACE})
        assert clean_text(once, {CharacterCategory.QUOTES, CharacterCategory.SPACE}) == once

    def test_messy_text_full_clean(self, messy_text):
        assert clean_text(messy_text) == (
            '"Smart" quotes...\n'
            "em-dash and nbsp\n"
            "zerowidth\n"
            "ABC full width\n"
            "heart\u2764"
        )

    def test_empty_text(self):
        assert clean_text("") == ""
        assert clean_text("", {CharacterCategory.SPACE}) == ""

    def test_plain_ascii_unchanged(self):
        text = "Already clean.\nTwo lines.\n\nNew paragraph."
        assert clean_text(text) == text


class TestHelpers:
    def test_normalize_whitespace(self):
        assert normalize_whitespace(" a \t b\n\n\n\nc \n") == "a b\n\nc"
        assert normalize_whitespace("a\n\nb") == "a\n\nb"

    def test_apply_replacements_order_independent(self):
        text = "\u2034x\u2034"
        issues = detect_issues(text)
        assert apply_replacements(text, issues) == apply_replacements(text, list(reversed(issues)))

    def test_module_lookup_helpers(self):
        assert lookup("\u2026").replacement == "..."
        assert is_problematic("\u00a0")
        assert not is_problematic("a")
        assert all_categories() == tuple(CharacterCategory)

    def test_cleaner_uses_given_table(self):
        cleaner = UnicodeCleaner()
        assert cleaner.table.lookup("\u2013") is lookup("\u2013")

    def test_empty_table_is_kept(self):
        empty = ClassificationTable()
        empty._entries = MappingProxyType({})
        cleaner = UnicodeCleaner(empty)
        assert cleaner.table is empty
        assert cleaner.detect_issues("a\u2014b") == []
        assert cleaner.clean_text("a\u2014b") == "a\u2014b"
