"""Unicode Cleaner: find and replace problematic Unicode characters in text."""

from __future__ import annotations

__version__ = "0.1.0"

from unicode_cleaner.core.cleaner import (  # noqa: E402
    UnicodeCleaner,
    all_categories,
    clean_text,
    detect_issues,
    is_problematic,
    lookup,
)
from unicode_cleaner.core.models import CharacterCategory, CharacterInfo, UnicodeIssue  # noqa: E402
from unicode_cleaner.core.table import ClassificationTable  # noqa: E402

__all__ = [
    "CharacterCategory",
    "CharacterInfo",
    "ClassificationTable",
    "UnicodeCleaner",
    "UnicodeIssue",
    "all_categories",
    "clean_text",
    "detect_issues",
    "is_problematic",
    "lookup",
]
