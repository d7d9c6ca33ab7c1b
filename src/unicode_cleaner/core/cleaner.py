"""UnicodeCleaner: detect tabled characters and rewrite them.

The cleaner is stateless apart from a reference to a ClassificationTable.
Callers own the text: nothing here mutates caller storage, every operation
returns a new value.

Offsets are Python ``str`` indices (code points).
"""

from __future__ import annotations

import re
from typing import Iterable

from unicode_cleaner.core.models import CharacterCategory, CharacterInfo, UnicodeIssue
from unicode_cleaner.core.table import ClassificationTable

#: Characters kept on each side of an issue in ``UnicodeIssue.context``
CONTEXT_RADIUS = 10

_SPACE_RUN_RE = re.compile(r"[ \t]+")
_BLANK_LINES_RE = re.compile(r"\n{3,}")


def normalize_whitespace(text: str) -> str:
    """Collapse space/tab runs, cap blank lines at one, strip both ends."""
    text = _SPACE_RUN_RE.sub(" ", text)
    text = _BLANK_LINES_RE.sub("\n\n", text)
    return text.strip()


def _as_category_set(
    categories: Iterable[CharacterCategory | str] | None,
) -> frozenset[CharacterCategory] | None:
    if categories is None:
        return None
    return frozenset(CharacterCategory.parse(c) for c in categories)


def _require_text(text: object) -> None:
    if not isinstance(text, str):
        raise TypeError(f"text must be str, not {type(text).__name__}")


class UnicodeCleaner:
    """Scan and clean text against a classification table.

    Usage::

        cleaner = UnicodeCleaner()
        issues = cleaner.detect_issues(text, {CharacterCategory.DASHES})
        cleaned = cleaner.clean_text(text)
    """

    def __init__(self, table: ClassificationTable | None = None) -> None:
        self._table = table if table is not None else ClassificationTable.initialize()

    @property
    def table(self) -> ClassificationTable:
        return self._table

    def detect_issues(
        self,
        text: str,
        categories: Iterable[CharacterCategory | str] | None = None,
    ) -> list[UnicodeIssue]:
        """Return one issue per tabled character, in ascending offset order.

        Args:
            text: The buffer to scan.
            categories: Only report characters of these categories. ``None``
                reports every category; an empty collection reports nothing.
        """
        _require_text(text)
        enabled = _as_category_set(categories)
        issues: list[UnicodeIssue] = []
        for i, ch in enumerate(text):
            info = self._table.lookup(ch)
            if info is None:
                continue
            if enabled is not None and info.category not in enabled:
                continue
            context = text[max(0, i - CONTEXT_RADIUS):min(len(text), i + CONTEXT_RADIUS)]
            issues.append(UnicodeIssue(start=i, end=i + 1, info=info, context=context))
        return issues

    def clean_text(
        self,
        text: str,
        categories: Iterable[CharacterCategory | str] | None = None,
    ) -> str:
        """Return *text* with every detected character replaced.

        Without *categories* the result is also whitespace-normalized (see
        :func:`normalize_whitespace`). With *categories*, only the direct
        substitutions are applied.
        """
        enabled = _as_category_set(categories)
        issues = self.detect_issues(text, enabled)
        cleaned = apply_replacements(text, issues)
        if enabled is None:
            cleaned = normalize_whitespace(cleaned)
        return cleaned

    def lookup(self, ch: str) -> CharacterInfo | None:
        return self._table.lookup(ch)

    def is_problematic(self, ch: str) -> bool:
        return self._table.is_problematic(ch)

    def all_categories(self) -> tuple[CharacterCategory, ...]:
        return self._table.all_categories()


def apply_replacements(text: str, issues: Iterable[UnicodeIssue]) -> str:
    """Splice each issue's replacement into *text*.

    Issues are applied from the end of the buffer towards the start so the
    offsets of the ones not yet applied stay valid when a replacement has a
    different length than the matched span.
    """
    chars = list(text)
    for issue in sorted(issues, key=lambda i: i.start, reverse=True):
        chars[issue.start:issue.end] = issue.replacement
    return "".join(chars)


# ---------------------------------------------------------------------------
# Module-level convenience API (bound to the shared table)
# ---------------------------------------------------------------------------

_default = UnicodeCleaner()


def detect_issues(
    text: str, categories: Iterable[CharacterCategory | str] | None = None
) -> list[UnicodeIssue]:
    return _default.detect_issues(text, categories)


def clean_text(text: str, categories: Iterable[CharacterCategory | str] | None = None) -> str:
    return _default.clean_text(text, categories)


def lookup(ch: str) -> CharacterInfo | None:
    return _default.lookup(ch)


def is_problematic(ch: str) -> bool:
    return _default.is_problematic(ch)


def all_categories() -> tuple[CharacterCategory, ...]:
    return _default.all_categories()
