"""ClassificationTable: the character -> CharacterInfo lookup.

The table is built once, on first use, from a fixed sequence of insertions and
is never modified afterwards. It is safe to share between threads.
"""

from __future__ import annotations

import threading
from types import MappingProxyType
from typing import Iterator, Mapping

from unicode_cleaner.core.models import CharacterCategory, CharacterInfo

# ---------------------------------------------------------------------------
# Table content
# ---------------------------------------------------------------------------

_HIDDEN_CONTROL: list[tuple[str, str]] = [
    ("\u00ad", "Soft hyphen"),
    ("\u180e", "Mongolian vowel separator"),
    ("\u200b", "Zero width space"),
    ("\u200c", "Zero width non-joiner"),
    ("\u200d", "Zero width joiner"),
    ("\u200e", "Left-to-right mark"),
    ("\u200f", "Right-to-left mark"),
    ("\u202a", "Left-to-right embedding"),
    ("\u202b", "Right-to-left embedding"),
    ("\u202c", "Pop directional formatting"),
    ("\u202d", "Left-to-right override"),
    ("\u202e", "Right-to-left override"),
    ("\u2060", "Word joiner"),
    ("\u2061", "Function application"),
    ("\u2062", "Invisible times"),
    ("\u2063", "Invisible separator"),
    ("\u2064", "Invisible plus"),
    ("\u206a", "Inhibit symmetric swapping"),
    ("\u206b", "Activate symmetric swapping"),
    ("\u206c", "Inhibit Arabic form shaping"),
    ("\u206d", "Activate Arabic form shaping"),
    ("\u206e", "National digit shapes"),
    ("\u206f", "Nominal digit shapes"),
    ("\ufeff", "Zero width no-break space (BOM)"),
]

_SPACES: list[tuple[str, str]] = [
    ("\u00a0", "Non-breaking space"),
    ("\u1680", "Ogham space mark"),
    ("\u2000", "En quad"),
    ("\u2001", "Em quad"),
    ("\u2002", "En space"),
    ("\u2003", "Em space"),
    ("\u2004", "Three-per-em space"),
    ("\u2005", "Four-per-em space"),
    ("\u2006", "Six-per-em space"),
    ("\u2007", "Figure space"),
    ("\u2008", "Punctuation space"),
    ("\u2009", "Thin space"),
    ("\u200a", "Hair space"),
    ("\u202f", "Narrow no-break space"),
    ("\u205f", "Medium mathematical space"),
    ("\u3000", "Ideographic space"),
]

_DASHES: list[tuple[str, str]] = [
    ("\u2012", "Figure dash"),
    ("\u2013", "En dash"),
    ("\u2014", "Em dash"),
    ("\u2015", "Horizontal bar"),
    ("\u2212", "Minus sign"),
]

_QUOTES: list[tuple[str, str, str]] = [
    ("\u2018", "'", "Left single quotation mark"),
    ("\u2019", "'", "Right single quotation mark"),
    ("\u201a", "'", "Single low-9 quotation mark"),
    ("\u201b", "'", "Single high-reversed-9 quotation mark"),
    ("\u201c", '"', "Left double quotation mark"),
    ("\u201d", '"', "Right double quotation mark"),
    ("\u201e", '"', "Double low-9 quotation mark"),
    ("\u201f", '"', "Double high-reversed-9 quotation mark"),
    ("\u2032", "'", "Prime"),
    ("\u2033", '"', "Double prime"),
    ("\u2034", "'''", "Triple prime"),
    ("\u2035", "'", "Reversed prime"),
    ("\u2036", '"', "Reversed double prime"),
    ("\u00ab", '"', "Left-pointing double angle quotation mark"),
    ("\u00bb", '"', "Right-pointing double angle quotation mark"),
]

_PUNCTUATION: list[tuple[str, str, str]] = [
    ("\u2026", "...", "Horizontal ellipsis"),
    ("\u2022", "*", "Bullet"),
    ("\u00b7", "*", "Middle dot"),
]

# Names of the ASCII punctuation reached from the full-width block
_ASCII_NAMES: dict[str, str] = {
    "!": "exclamation mark",
    '"': "quotation mark",
    "#": "number sign",
    "$": "dollar sign",
    "%": "percent sign",
    "&": "ampersand",
    "'": "apostrophe",
    "(": "left parenthesis",
    ")": "right parenthesis",
    "*": "asterisk",
    "+": "plus sign",
    ",": "comma",
    "-": "hyphen-minus",
    ".": "full stop",
    "/": "solidus",
    ":": "colon",
    ";": "semicolon",
    "<": "less-than sign",
    "=": "equals sign",
    ">": "greater-than sign",
    "?": "question mark",
    "@": "commercial at",
    "[": "left square bracket",
    "\\": "reverse solidus",
    "]": "right square bracket",
    "^": "circumflex accent",
    "_": "low line",
    "`": "grave accent",
    "{": "left curly bracket",
    "|": "vertical line",
    "}": "right curly bracket",
    "~": "tilde",
}

_VARIATION_RANGE = range(0xFE00, 0xFE10)
_FULL_WIDTH_RANGE = range(0xFF01, 0xFF5F)


def ascii_name(ch: str) -> str:
    """Return the symbol name of an ASCII punctuation character."""
    return _ASCII_NAMES.get(ch, "character")


def _build_entries() -> dict[str, CharacterInfo]:
    entries: dict[str, CharacterInfo] = {}

    def add(ch: str, replacement: str, category: CharacterCategory, description: str) -> None:
        entries[ch] = CharacterInfo(ch, replacement, category, description)

    for ch, desc in _HIDDEN_CONTROL:
        add(ch, "", CharacterCategory.HIDDEN_CONTROL, desc)
    for code in _VARIATION_RANGE:
        add(chr(code), "", CharacterCategory.VARIATION, "Variation selector")
    for ch, desc in _SPACES:
        add(ch, " ", CharacterCategory.SPACE, desc)
    for ch, desc in _DASHES:
        add(ch, "-", CharacterCategory.DASHES, desc)
    for ch, rep, desc in _QUOTES:
        add(ch, rep, CharacterCategory.QUOTES, desc)
    for ch, rep, desc in _PUNCTUATION:
        add(ch, rep, CharacterCategory.PUNCTUATION, desc)
    for code in _FULL_WIDTH_RANGE:
        target = chr(code - 0xFF01 + 0x21)
        add(chr(code), target, CharacterCategory.FULL_WIDTH, f"Full-width {ascii_name(target)}")
    return entries


# ---------------------------------------------------------------------------
# ClassificationTable
# ---------------------------------------------------------------------------


class ClassificationTable:
    """Read-only mapping of problematic characters to their CharacterInfo.

    Use :meth:`initialize` to get the shared instance; constructing a table
    directly is only useful in tests.
    """

    _instance: "ClassificationTable | None" = None
    _lock = threading.Lock()

    def __init__(self) -> None:
        self._entries: Mapping[str, CharacterInfo] = MappingProxyType(_build_entries())

    @classmethod
    def initialize(cls) -> "ClassificationTable":
        """Return the process-wide table, building it on the first call."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    def lookup(self, ch: str) -> CharacterInfo | None:
        return self._entries.get(ch)

    def is_problematic(self, ch: str) -> bool:
        return ch in self._entries

    @staticmethod
    def all_categories() -> tuple[CharacterCategory, ...]:
        return tuple(CharacterCategory)

    def entries(self, category: CharacterCategory | None = None) -> list[CharacterInfo]:
        """Return table entries in code point order, optionally for one category."""
        infos = sorted(self._entries.values(), key=lambda info: ord(info.character))
        if category is not None:
            infos = [info for info in infos if info.category == category]
        return infos

    def __contains__(self, ch: object) -> bool:
        return ch in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
