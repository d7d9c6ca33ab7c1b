"""Entry point: python -m unicode_cleaner

Usage examples::

    unicode-cleaner scan docs/ --report report.xlsx
    unicode-cleaner clean src/ --categories quotes,dashes --dry-run
    unicode-cleaner check README.md --strict
    unicode-cleaner text --categories dashes < notes.txt
    unicode-cleaner serve --port 8400

Exit codes: 0 clean, 1 issues found (or files failed), 2 usage error.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from unicode_cleaner import __version__
from unicode_cleaner.core.cleaner import UnicodeCleaner
from unicode_cleaner.core.exporters import IssuesCSVExporter, TXTReporter, XLSXExporter
from unicode_cleaner.core.files import FileCleaner, FileReport
from unicode_cleaner.core.models import CharacterCategory
from unicode_cleaner.core.settings import CleanerSettings, SettingsManager
from unicode_cleaner.core.table import ClassificationTable

_log = logging.getLogger(__name__)

_REPORTERS = {
    ".csv": IssuesCSVExporter,
    ".txt": TXTReporter,
    ".xlsx": XLSXExporter,
}


def _parse_categories(raw: str) -> set[CharacterCategory]:
    try:
        return {CharacterCategory.parse(part) for part in raw.split(",") if part.strip()}
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", type=Path, default=None, help="Extra settings YAML file")
    common.add_argument(
        "--categories",
        type=_parse_categories,
        default=None,
        help="Comma-separated categories to act on (default: enabled in settings)",
    )
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    parser = argparse.ArgumentParser(
        prog="unicode-cleaner",
        description="Find and replace problematic Unicode characters",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    scan = sub.add_parser("scan", parents=[common], help="List issues in files")
    scan.add_argument("paths", nargs="+", type=Path)
    scan.add_argument("--report", type=Path, default=None, help="Write a .csv, .txt or .xlsx report")
    scan.add_argument("--workers", type=int, default=1)

    clean = sub.add_parser("clean", parents=[common], help="Clean files in place")
    clean.add_argument("paths", nargs="+", type=Path)
    clean.add_argument("--dry-run", action="store_true", help="Report without writing")
    clean.add_argument("--workers", type=int, default=1)

    check = sub.add_parser("check", parents=[common], help="Pre-commit check")
    check.add_argument("paths", nargs="+", type=Path)
    check.add_argument("--strict", action="store_true", help="Fail when issues are found")
    check.add_argument("--fix", action="store_true", help="Clean files that have issues")

    text = sub.add_parser("text", parents=[common], help="Clean stdin to stdout")
    text.add_argument("--detect", action="store_true", help="List issues instead of cleaning")

    sub.add_parser("categories", parents=[common], help="List character categories")

    chars = sub.add_parser("characters", parents=[common], help="List the character table")
    chars.add_argument("--category", type=CharacterCategory.parse, default=None)

    serve = sub.add_parser("serve", parents=[common], help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8400)
    return parser


def _load_settings(args: argparse.Namespace) -> CleanerSettings:
    settings = SettingsManager(project_dir=Path.cwd()).load(args.config)
    if args.categories is not None:
        for category in CharacterCategory:
            settings.set_category_enabled(category, category in args.categories)
    return settings


def _print_issues(report: FileReport) -> None:
    for located in report.issues:
        info = located.issue.info
        print(
            f"{report.path}:{located.line}:{located.column} {info.unicode} "
            f"({info.category.display_name}) {info.description}"
        )
    if report.error:
        print(f"{report.path}: error: {report.error}", file=sys.stderr)


def _missing_paths(paths: list[Path]) -> list[Path]:
    return [p for p in paths if not p.exists()]


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_scan(args: argparse.Namespace, settings: CleanerSettings) -> int:
    reports = FileCleaner(settings).scan_paths(args.paths, workers=args.workers)
    for report in reports:
        _print_issues(report)
    total = sum(len(r.issues) for r in reports)
    print(f"{total} issue(s) in {len(reports)} file(s)")

    if args.report is not None:
        reporter_cls = _REPORTERS.get(args.report.suffix.lower())
        if reporter_cls is None:
            print(f"Unsupported report format: {args.report.suffix}", file=sys.stderr)
            return 2
        reporter_cls().export(reports, args.report)
        print(f"Report written to {args.report}")

    return 1 if total or any(not r.ok for r in reports) else 0


def _cmd_clean(args: argparse.Namespace, settings: CleanerSettings) -> int:
    summary = FileCleaner(settings).clean_paths(args.paths, dry_run=args.dry_run, workers=args.workers)
    for report in summary.failed:
        print(f"{report.path}: error: {report.error}", file=sys.stderr)
    verb = "would be cleaned" if summary.dry_run else "cleaned"
    print(f"Files processed: {summary.files_processed}")
    print(f"Files {verb}: {summary.files_cleaned}")
    print(f"Total issues fixed: {summary.issues_fixed}")
    return 1 if summary.failed else 0


def _cmd_check(args: argparse.Namespace, settings: CleanerSettings) -> int:
    file_cleaner = FileCleaner(settings)
    reports = file_cleaner.scan_paths(args.paths)
    dirty = [r for r in reports if r.issues]
    failed = [r for r in reports if not r.ok]
    for report in reports:
        _print_issues(report)

    if dirty and (args.fix or settings.auto_fix):
        summary = file_cleaner.clean_paths([r.path for r in dirty])
        print(f"Fixed {summary.issues_fixed} issue(s) in {summary.files_cleaned} file(s)")
        for report in summary.failed:
            print(f"{report.path}: error: {report.error}", file=sys.stderr)
        dirty = [r for r in summary.reports if r.ok and not r.written]
        failed.extend(summary.failed)

    if not dirty and not failed:
        print("No Unicode issues found")
        return 0
    if dirty:
        print(f"{sum(len(r.issues) for r in dirty)} Unicode issue(s) in {len(dirty)} file(s)")
    if failed:
        print(f"{len(failed)} file(s) could not be checked")
    blocking = args.strict or settings.block_on_issues
    return 1 if blocking else 0


def _cmd_text(args: argparse.Namespace, settings: CleanerSettings) -> int:
    cleaner = UnicodeCleaner()
    data = sys.stdin.read()
    if args.detect:
        issues = cleaner.detect_issues(data, args.categories)
        for issue in issues:
            info = issue.info
            print(f"{issue.start} {info.unicode} ({info.category.display_name}) {info.description}")
        return 1 if issues else 0
    # No --categories means a full clean, whitespace normalization included
    sys.stdout.write(cleaner.clean_text(data, args.categories))
    return 0


def _cmd_categories(args: argparse.Namespace, settings: CleanerSettings) -> int:
    table = ClassificationTable.initialize()
    for category in table.all_categories():
        state = "on" if settings.is_category_enabled(category) else "off"
        count = len(table.entries(category))
        print(f"{category.value:<16} {category.display_name:<28} {count:>4} chars  [{state}]")
    return 0


def _cmd_characters(args: argparse.Namespace, settings: CleanerSettings) -> int:
    for info in ClassificationTable.initialize().entries(args.category):
        print(f"{info.unicode:<8} {info.category.value:<16} {info.replacement!r:<7} {info.description}")
    return 0


def _cmd_serve(args: argparse.Namespace, settings: CleanerSettings) -> int:
    import uvicorn

    from unicode_cleaner.web.app import app

    print(f"Unicode Cleaner API on http://{args.host}:{args.port}")
    uvicorn.run(app, host=args.host, port=args.port, log_level="info")
    return 0


_COMMANDS = {
    "scan": _cmd_scan,
    "clean": _cmd_clean,
    "check": _cmd_check,
    "text": _cmd_text,
    "categories": _cmd_categories,
    "characters": _cmd_characters,
    "serve": _cmd_serve,
}


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    missing = _missing_paths(getattr(args, "paths", []))
    if missing:
        for path in missing:
            print(f"No such file or directory: {path}", file=sys.stderr)
        return 2

    settings = _load_settings(args)
    return _COMMANDS[args.command](args, settings)


if __name__ == "__main__":
    sys.exit(main())
