"""Quick fixes offered for a detected issue, and selection cleaning.

An editor integration registers one problem per issue with
``problem_message(issue)`` and offers the fixes returned by
``fixes_for(issue)``. Every fix is a pure text -> text function; applying the
result to a document is up to the caller.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable

from unicode_cleaner.core.cleaner import UnicodeCleaner
from unicode_cleaner.core.models import CharacterCategory, CharacterInfo, UnicodeIssue

FAMILY_NAME = "Unicode Character Fixes"


def problem_message(issue: UnicodeIssue) -> str:
    info = issue.info
    return (
        f"Problematic Unicode character: {info.unicode} "
        f"({info.category.display_name}) - {info.description}"
    )


class QuickFix(ABC):
    """A named text transformation."""

    family_name: str = FAMILY_NAME

    def __init__(self, cleaner: UnicodeCleaner | None = None) -> None:
        self._cleaner = cleaner if cleaner is not None else UnicodeCleaner()

    @property
    @abstractmethod
    def name(self) -> str:
        """Label shown to the user."""

    @abstractmethod
    def apply(self, text: str) -> str:
        """Return the fixed text."""


class ReplaceCharacterFix(QuickFix):
    """Replace every occurrence of one character with its replacement."""

    def __init__(self, info: CharacterInfo, cleaner: UnicodeCleaner | None = None) -> None:
        super().__init__(cleaner)
        self.info = info

    @property
    def name(self) -> str:
        if not self.info.replacement:
            return f"Remove {self.info.unicode}"
        return f'Replace with "{self.info.replacement}"'

    def apply(self, text: str) -> str:
        return text.replace(self.info.character, self.info.replacement)


class CleanFileFix(QuickFix):
    """Full clean, whitespace normalization included."""

    @property
    def name(self) -> str:
        return "Clean all Unicode issues in file"

    def apply(self, text: str) -> str:
        return self._cleaner.clean_text(text)


class CleanCategoryFix(QuickFix):
    def __init__(self, category: CharacterCategory, cleaner: UnicodeCleaner | None = None) -> None:
        super().__init__(cleaner)
        self.category = category

    @property
    def name(self) -> str:
        return f"Clean all {self.category.display_name} in file"

    def apply(self, text: str) -> str:
        return self._cleaner.clean_text(text, {self.category})


def fixes_for(issue: UnicodeIssue, cleaner: UnicodeCleaner | None = None) -> list[QuickFix]:
    """Return the single-character, whole-file and whole-category fixes."""
    cleaner = cleaner if cleaner is not None else UnicodeCleaner()
    return [
        ReplaceCharacterFix(issue.info, cleaner),
        CleanFileFix(cleaner),
        CleanCategoryFix(issue.category, cleaner),
    ]


# ---------------------------------------------------------------------------
# Selection cleaning
# ---------------------------------------------------------------------------


@dataclass
class SelectionEdit:
    """Result of cleaning a selected range of a larger buffer."""

    text: str  # the whole buffer after the edit
    selection_start: int
    selection_end: int  # end of the cleaned selection in the new buffer
    issues_found: int
    chars_removed: int  # old selection length - new selection length

    @property
    def changed(self) -> bool:
        return self.issues_found > 0


def clean_selection(
    text: str,
    start: int,
    end: int,
    categories: Iterable[CharacterCategory | str] | None = None,
    cleaner: UnicodeCleaner | None = None,
) -> SelectionEdit:
    """Clean ``text[start:end]`` with the category-scoped rewriter.

    The rest of the buffer is left untouched and no whitespace normalization
    is applied, so text around the selection never moves.
    """
    if not 0 <= start <= end <= len(text):
        raise ValueError(f"Invalid selection [{start}, {end}) for text of length {len(text)}")
    cleaner = cleaner if cleaner is not None else UnicodeCleaner()
    scoped = list(categories) if categories is not None else list(cleaner.all_categories())

    selected = text[start:end]
    issues = cleaner.detect_issues(selected, scoped)
    if not issues:
        return SelectionEdit(text, start, end, 0, 0)

    cleaned = cleaner.clean_text(selected, scoped)
    return SelectionEdit(
        text=text[:start] + cleaned + text[end:],
        selection_start=start,
        selection_end=start + len(cleaned),
        issues_found=len(issues),
        chars_removed=len(selected) - len(cleaned),
    )
