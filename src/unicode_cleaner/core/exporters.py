"""Exporters: issues CSV (always ;), TXT report, XLSX workbook."""

from __future__ import annotations

import csv
from datetime import datetime
from pathlib import Path
from typing import Iterable

import pandas as pd

from unicode_cleaner.core.files import FileReport
from unicode_cleaner.core.models import CharacterCategory

ISSUE_COLUMNS = [
    "file",
    "line",
    "column",
    "offset",
    "unicode",
    "category",
    "description",
    "replacement",
    "context",
]


def issues_frame(reports: Iterable[FileReport]) -> pd.DataFrame:
    """Flatten file reports into one DataFrame row per issue."""
    rows = []
    for report in reports:
        for located in report.issues:
            info = located.issue.info
            rows.append(
                {
                    "file": str(report.path),
                    "line": located.line,
                    "column": located.column,
                    "offset": located.issue.start,
                    "unicode": info.unicode,
                    "category": info.category.display_name,
                    "description": info.description,
                    "replacement": info.replacement,
                    "context": located.issue.context,
                }
            )
    return pd.DataFrame(rows, columns=ISSUE_COLUMNS)


def category_counts(df: pd.DataFrame) -> pd.Series:
    """Issue count per category display name, every category listed."""
    names = [c.display_name for c in CharacterCategory]
    return df["category"].value_counts().reindex(names, fill_value=0)


def _printable(value: str) -> str:
    """Escape control and format characters so reports stay readable."""
    return value.encode("unicode_escape").decode("ascii") if not value.isprintable() else value


# ---------------------------------------------------------------------------
# Issues CSV export (ALWAYS ; delimiter)
# ---------------------------------------------------------------------------


class IssuesCSVExporter:
    """Export the issue list to CSV with ; delimiter."""

    def export(self, reports: Iterable[FileReport], path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        df = issues_frame(reports)
        df["context"] = df["context"].map(_printable)
        df.to_csv(path, sep=";", index=False, quoting=csv.QUOTE_MINIMAL, encoding="utf-8")


# ---------------------------------------------------------------------------
# TXT report
# ---------------------------------------------------------------------------


class TXTReporter:
    """Generate a human-readable text report."""

    #: Detail lines listed per file before truncating
    max_details_per_file = 200

    def export(self, reports: Iterable[FileReport], path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(reports), encoding="utf-8")

    def render(self, reports: Iterable[FileReport]) -> str:
        reports = list(reports)
        df = issues_frame(reports)
        lines: list[str] = []
        ts = datetime.now().strftime("%Y-%m-%d %H:%M")

        lines.append("=" * 72)
        lines.append("UNICODE CLEANER REPORT")
        lines.append(f"Generated: {ts}")
        lines.append(f"Files scanned: {len(reports)}")
        lines.append("=" * 72)
        lines.append("")

        lines.append("SUMMARY")
        lines.append("-" * 40)
        for name, count in category_counts(df).items():
            lines.append(f"  {name:<28} {count:>6}")
        lines.append(f"  {'TOTAL':<28} {len(df):>6}")
        lines.append("")

        if not df.empty:
            lines.append("FILES WITH THE MOST ISSUES")
            lines.append("-" * 40)
            for file_name, count in df["file"].value_counts().head(10).items():
                lines.append(f"  {file_name:<55} {count:>6}")
            lines.append("")

        failed = [r for r in reports if not r.ok]
        if failed:
            lines.append("ERRORS")
            lines.append("-" * 40)
            for report in failed:
                lines.append(f"  {report.path}: {report.error}")
            lines.append("")

        lines.append("DETAILS")
        lines.append("=" * 72)
        for report in reports:
            if not report.issues:
                continue
            lines.append(f"\n{report.path} ({len(report.issues)} issue(s))")
            lines.append("-" * 40)
            for located in report.issues[: self.max_details_per_file]:
                info = located.issue.info
                lines.append(
                    f"  {located.line}:{located.column} {info.unicode} "
                    f"({info.category.display_name}) {info.description} "
                    f"-> {info.replacement!r}"
                )
            hidden = len(report.issues) - self.max_details_per_file
            if hidden > 0:
                lines.append(f"  ... {hidden} more")

        return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# XLSX export
# ---------------------------------------------------------------------------


class XLSXExporter:
    """Export issues and per-category counts to an XLSX workbook."""

    def export(self, reports: Iterable[FileReport], path: Path) -> None:
        import openpyxl
        from openpyxl.styles import Font

        path.parent.mkdir(parents=True, exist_ok=True)
        df = issues_frame(reports)
        header_font = Font(bold=True)

        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = "Issues"
        ws.append(ISSUE_COLUMNS)
        for row in df.itertuples(index=False, name=None):
            ws.append([_printable(v) if isinstance(v, str) else v for v in row])
        for cell in ws[1]:
            cell.font = header_font

        summary = wb.create_sheet("Summary")
        summary.append(["category", "issues"])
        for name, count in category_counts(df).items():
            summary.append([name, int(count)])
        summary.append(["TOTAL", len(df)])
        for cell in summary[1]:
            cell.font = header_font

        wb.save(path)
