"""Core data model: categories, table entries and detected issues.

All other modules import from here. Keep this module free of side-effects so
it can be shared by the CLI, the web API and the tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class CharacterCategory(str, Enum):
    HIDDEN_CONTROL = "hidden_control"
    SPACE = "space"
    QUOTES = "quotes"
    DASHES = "dashes"
    PUNCTUATION = "punctuation"
    FULL_WIDTH = "full_width"
    VARIATION = "variation"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def parse(cls, value: "str | CharacterCategory") -> "CharacterCategory":
        """Resolve an enum value, member name or display name (any case)."""
        if isinstance(value, CharacterCategory):
            return value
        key = str(value).strip().lower()
        for category in cls:
            if key in (category.value, category.name.lower(), category.display_name.lower()):
                return category
        raise ValueError(f"Unknown character category: {value!r}")


_DISPLAY_NAMES: dict[CharacterCategory, str] = {
    CharacterCategory.HIDDEN_CONTROL: "Hidden/Control Characters",
    CharacterCategory.SPACE: "Space Characters",
    CharacterCategory.QUOTES: "Quotes & Apostrophes",
    CharacterCategory.DASHES: "Dashes",
    CharacterCategory.PUNCTUATION: "Punctuation",
    CharacterCategory.FULL_WIDTH: "Full-Width Characters",
    CharacterCategory.VARIATION: "Variation Selectors",
}


# ---------------------------------------------------------------------------
# Table entry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CharacterInfo:
    """One row of the classification table."""

    character: str
    replacement: str  # "" means the character is deleted
    category: CharacterCategory
    description: str

    @property
    def unicode(self) -> str:
        return f"U+{ord(self.character):04X}"

    def to_dict(self) -> dict:
        return {
            "character": self.character,
            "unicode": self.unicode,
            "replacement": self.replacement,
            "category": self.category.value,
            "category_name": self.category.display_name,
            "description": self.description,
        }


# ---------------------------------------------------------------------------
# Issue
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UnicodeIssue:
    """A tabled character found at ``text[start:end]``."""

    start: int
    end: int  # exclusive, always start + 1
    info: CharacterInfo
    context: str  # surrounding text, for display only

    @property
    def category(self) -> CharacterCategory:
        return self.info.category

    @property
    def replacement(self) -> str:
        return self.info.replacement

    def to_dict(self) -> dict:
        return {
            "start": self.start,
            "end": self.end,
            "context": self.context,
            **self.info.to_dict(),
        }
