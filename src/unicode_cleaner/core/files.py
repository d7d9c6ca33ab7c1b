"""File processing: read text files, scan them and clean them in place.

Handles:
- Encoding detection (strict UTF-8 first, then chardet on the first 32 KB)
- Directory expansion filtered by the configured extensions and size limit
- Per-file scan / clean reports and a batch summary

A failure on one file is logged and recorded in its report; it never aborts
the batch.
"""

from __future__ import annotations

import codecs
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

import chardet

from unicode_cleaner.core.cleaner import UnicodeCleaner
from unicode_cleaner.core.models import UnicodeIssue
from unicode_cleaner.core.settings import CleanerSettings

_log = logging.getLogger(__name__)

# Maps every byte to a code point, so decoding never fails and write-back
# reproduces the original bytes.
_FALLBACK_ENCODING = "iso8859-1"


def line_col(text: str, offset: int) -> tuple[int, int]:
    """Return the 1-based (line, column) of *offset* in *text*."""
    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return line, column


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


@dataclass
class TextFile:
    path: Path
    text: str
    encoding: str


class TextFileReader:
    """Decode a file into text, remembering the encoding for write-back."""

    def read(self, path: Path) -> TextFile:
        raw_bytes = path.read_bytes()
        encoding = self.detect_encoding(raw_bytes)
        return TextFile(path=path, text=raw_bytes.decode(encoding), encoding=encoding)

    def decode(self, raw_bytes: bytes) -> tuple[str, str]:
        """Return ``(text, encoding)`` for in-memory content."""
        encoding = self.detect_encoding(raw_bytes)
        return raw_bytes.decode(encoding), encoding

    @staticmethod
    def detect_encoding(raw_bytes: bytes) -> str:
        if raw_bytes.startswith(codecs.BOM_UTF8):
            return "utf-8-sig"
        try:
            raw_bytes.decode("utf-8")
            return "utf-8"
        except UnicodeDecodeError:
            pass

        sample = raw_bytes[:32768]
        result = chardet.detect(sample)
        encoding = result.get("encoding") or "utf-8"
        confidence = result.get("confidence") or 0.0
        if confidence < 0.7:
            return _FALLBACK_ENCODING
        normalized = encoding.lower().replace("-", "").replace("_", "")
        alias_map = {
            "utf8": "utf-8",
            "utf8bom": "utf-8-sig",
            "utf16": "utf-16",
            "latin1": "latin-1",
            "iso88591": "latin-1",
            "windows1252": "cp1252",
        }
        candidate = alias_map.get(normalized, encoding)
        try:
            candidate = codecs.lookup(candidate).name
            raw_bytes.decode(candidate)
        except (LookupError, UnicodeDecodeError):
            _log.debug("chardet guess %r does not decode the content", encoding)
            return _FALLBACK_ENCODING
        return candidate


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


@dataclass
class FileIssue:
    """An issue located by line and column inside a file."""

    line: int
    column: int
    issue: UnicodeIssue


@dataclass
class FileReport:
    path: Path
    encoding: str = ""
    issues: list[FileIssue] = field(default_factory=list)
    changed: bool = False
    written: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BatchSummary:
    dry_run: bool = False
    files_processed: int = 0
    files_cleaned: int = 0
    issues_fixed: int = 0
    reports: list[FileReport] = field(default_factory=list)

    @property
    def failed(self) -> list[FileReport]:
        return [r for r in self.reports if not r.ok]

    def add(self, report: FileReport) -> None:
        self.reports.append(report)
        self.files_processed += 1
        if report.changed:
            self.files_cleaned += 1
            self.issues_fixed += len(report.issues)


# ---------------------------------------------------------------------------
# FileCleaner
# ---------------------------------------------------------------------------


class FileCleaner:
    """Scan and clean files with the categories enabled in *settings*.

    Cleaning is category-scoped: files get the direct substitutions only,
    never the whitespace normalization of a full clean.
    """

    def __init__(
        self,
        settings: CleanerSettings | None = None,
        cleaner: UnicodeCleaner | None = None,
        reader: TextFileReader | None = None,
    ) -> None:
        self.settings = settings if settings is not None else CleanerSettings()
        self._cleaner = cleaner if cleaner is not None else UnicodeCleaner()
        self._reader = reader if reader is not None else TextFileReader()

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def collect(self, paths: Iterable[Path]) -> list[Path]:
        """Expand directories and filter by extension and size.

        Files named explicitly skip the extension check but still honour the
        size limit.
        """
        found: list[Path] = []
        seen: set[Path] = set()

        def keep(p: Path) -> None:
            key = p.resolve()
            if key not in seen:
                seen.add(key)
                found.append(p)

        for path in paths:
            path = Path(path)
            if path.is_dir():
                for child in sorted(path.rglob("*")):
                    rel_parts = child.relative_to(path).parts
                    if any(part.startswith(".") for part in rel_parts[:-1]):
                        continue
                    if child.is_file() and self.settings.should_inspect_file(
                        child.name, child.stat().st_size
                    ):
                        keep(child)
            elif path.is_file():
                if self.settings.is_within_size_limit(path.stat().st_size):
                    keep(path)
                else:
                    _log.info("Skipping %s: larger than %d KB", path, self.settings.max_file_size_kb)
            else:
                _log.warning("Path not found: %s", path)
        return found

    # ------------------------------------------------------------------
    # Single file
    # ------------------------------------------------------------------

    def scan_file(self, path: Path) -> FileReport:
        report = FileReport(path=path)
        try:
            source = self._reader.read(path)
        except (OSError, UnicodeDecodeError) as exc:
            _log.exception("Error reading file: %s", path)
            report.error = str(exc)
            return report
        report.encoding = source.encoding
        report.issues = self._locate(source.text)
        return report

    def clean_file(self, path: Path, dry_run: bool = False) -> FileReport:
        report = FileReport(path=path)
        try:
            source = self._reader.read(path)
            report.encoding = source.encoding
            report.issues = self._locate(source.text)
            if not report.issues:
                return report
            cleaned = self._cleaner.clean_text(source.text, self.settings.enabled_categories())
            report.changed = cleaned != source.text
            if report.changed and not dry_run:
                path.write_bytes(cleaned.encode(source.encoding))
                report.written = True
                _log.info("Cleaned %s (%d issue(s))", path, len(report.issues))
        except (OSError, UnicodeError) as exc:
            _log.exception("Error processing file: %s", path)
            report.error = str(exc)
        return report

    def _locate(self, text: str) -> list[FileIssue]:
        issues = self._cleaner.detect_issues(text, self.settings.enabled_categories())
        located = []
        for issue in issues:
            line, column = line_col(text, issue.start)
            located.append(FileIssue(line=line, column=column, issue=issue))
        return located

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------

    def scan_paths(self, paths: Iterable[Path], workers: int = 1) -> list[FileReport]:
        files = self.collect(paths)
        _log.debug("Scanning %d file(s)", len(files))
        return self._map(self.scan_file, files, workers)

    def clean_paths(
        self, paths: Iterable[Path], dry_run: bool = False, workers: int = 1
    ) -> BatchSummary:
        files = self.collect(paths)
        _log.debug("Processing %d file(s), dry_run=%s", len(files), dry_run)
        summary = BatchSummary(dry_run=dry_run)
        for report in self._map(lambda p: self.clean_file(p, dry_run=dry_run), files, workers):
            summary.add(report)
        return summary

    @staticmethod
    def _map(func, files: list[Path], workers: int) -> list[FileReport]:
        if workers <= 1 or len(files) <= 1:
            return [func(p) for p in files]
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(func, files))
