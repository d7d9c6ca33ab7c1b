"""Tests for the classification table and the category enum."""

from __future__ import annotations

import threading

import pytest

from unicode_cleaner.core.models import CharacterCategory, CharacterInfo
from unicode_cleaner.core.table import ClassificationTable, ascii_name


@pytest.fixture
def table() -> ClassificationTable:
    return ClassificationTable.initialize()


class TestCharacterCategory:
    def test_closed_set_in_declaration_order(self):
        assert [c.name for c in CharacterCategory] == [
            "HIDDEN_CONTROL",
            "SPACE",
            "QUOTES",
            "DASHES",
            "PUNCTUATION",
            "FULL_WIDTH",
            "VARIATION",
        ]

    def test_display_names(self):
        assert CharacterCategory.HIDDEN_CONTROL.display_name == "Hidden/Control Characters"
        assert CharacterCategory.QUOTES.display_name == "Quotes & Apostrophes"
        assert CharacterCategory.FULL_WIDTH.display_name == "Full-Width Characters"

    @pytest.mark.parametrize(
        "raw", ["dashes", "DASHES", "Dashes", " dashes ", CharacterCategory.DASHES]
    )
    def test_parse_accepts_value_name_and_display(self, raw):
        assert CharacterCategory.parse(raw) is CharacterCategory.DASHES

    def test_parse_display_name_with_symbols(self):
        assert CharacterCategory.parse("quotes & apostrophes") is CharacterCategory.QUOTES

    def test_parse_unknown_raises(self):
        with pytest.raises(ValueError):
            CharacterCategory.parse("emoji")


class TestClassificationTable:
    def test_initialize_returns_shared_instance(self, table):
        assert ClassificationTable.initialize() is table

    def test_initialize_is_thread_safe(self):
        results: list[ClassificationTable] = []

        def worker() -> None:
            results.append(ClassificationTable.initialize())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len({id(r) for r in results}) == 1

    def test_category_sizes(self, table):
        sizes = {c: len(table.entries(c)) for c in CharacterCategory}
        assert sizes == {
            CharacterCategory.HIDDEN_CONTROL: 24,
            CharacterCategory.SPACE: 16,
            CharacterCategory.QUOTES: 15,
            CharacterCategory.DASHES: 5,
            CharacterCategory.PUNCTUATION: 3,
            CharacterCategory.FULL_WIDTH: 94,
            CharacterCategory.VARIATION: 16,
        }
        assert len(table) == 173

    def test_lookup_known_character(self, table):
        info = table.lookup("\u2013")
        assert isinstance(info, CharacterInfo)
        assert info.replacement == "-"
        assert info.category == CharacterCategory.DASHES
        assert info.description == "En dash"
        assert info.unicode == "U+2013"

    @pytest.mark.parametrize("ch", ["a", "Z", "0", " ", "\n", "\u00e9", "\u4e2d", "\u2764"])
    def test_lookup_unknown_returns_none(self, table, ch):
        assert table.lookup(ch) is None
        assert not table.is_problematic(ch)

    def test_hidden_controls_are_deleted(self, table):
        for info in table.entries(CharacterCategory.HIDDEN_CONTROL):
            assert info.replacement == ""
        assert table.is_problematic("\u00ad")
        assert table.is_problematic("\ufeff")

    def test_variation_block_is_complete(self, table):
        for code in range(0xFE00, 0xFE10):
            info = table.lookup(chr(code))
            assert info is not None
            assert info.category == CharacterCategory.VARIATION
            assert info.replacement == ""

    def test_spaces_become_ascii_space(self, table):
        for ch in ["\u00a0", "\u1680", "\u2000", "\u200a", "\u202f", "\u205f", "\u3000"]:
            assert table.lookup(ch).replacement == " "

    @pytest.mark.parametrize(
        "ch, expected",
        [
            ("\u2018", "'"),
            ("\u201b", "'"),
            ("\u201c", '"'),
            ("\u201f", '"'),
            ("\u2032", "'"),
            ("\u2033", '"'),
            ("\u2034", "'''"),
            ("\u2036", '"'),
            ("\u00ab", '"'),
            ("\u00bb", '"'),
            ("\u2026", "..."),
            ("\u2022", "*"),
            ("\u00b7", "*"),
        ],
    )
    def test_multi_character_and_quote_replacements(self, table, ch, expected):
        assert table.lookup(ch).replacement == expected

    def test_full_width_maps_to_ascii(self, table):
        for code in range(0xFF01, 0xFF5F):
            info = table.lookup(chr(code))
            assert info.category == CharacterCategory.FULL_WIDTH
            assert info.replacement == chr(code - 0xFF01 + 0x21)

    def test_full_width_descriptions(self, table):
        assert table.lookup("\uff05").description == "Full-width percent sign"
        assert table.lookup("\uff3c").description == "Full-width reverse solidus"
        assert table.lookup("\uff5e").description == "Full-width tilde"
        assert table.lookup("\uff21").description == "Full-width character"
        assert table.lookup("\uff10").description == "Full-width character"

    def test_ascii_name_fallback(self):
        assert ascii_name("@") == "commercial at"
        assert ascii_name("q") == "character"

    def test_replacements_never_reintroduce_tabled_characters(self, table):
        for ch in table:
            info = table.lookup(ch)
            assert not any(table.is_problematic(r) for r in info.replacement), info.unicode

    def test_table_cannot_be_mutated(self, table):
        with pytest.raises(TypeError):
            table._entries["x"] = table.lookup("\u2013")  # type: ignore[index]

    def test_entries_are_sorted_by_code_point(self, table):
        codes = [ord(info.character) for info in table.entries()]
        assert codes == sorted(codes)

    def test_all_categories_is_stable(self, table):
        assert table.all_categories() == tuple(CharacterCategory)

    def test_unicode_label_is_zero_padded(self, table):
        assert table.lookup("\u00ad").unicode == "U+00AD"
