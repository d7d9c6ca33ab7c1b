"""Unicode Cleaner Web API, FastAPI backend.

Endpoints:
  GET  /api/categories      -> character categories
  GET  /api/characters      -> classification table (optionally one category)
  POST /api/detect          -> issues in a JSON text payload
  POST /api/clean           -> cleaned text for a JSON text payload
  POST /api/files/clean     -> upload a text file, get issues + cleaned text

Run with:
  uvicorn unicode_cleaner.web.app:app --reload --port 8000
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from fastapi import FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from unicode_cleaner.core.cleaner import UnicodeCleaner
from unicode_cleaner.core.files import TextFileReader, line_col
from unicode_cleaner.core.fixes import fixes_for, problem_message
from unicode_cleaner.core.models import CharacterCategory, UnicodeIssue
from unicode_cleaner.core.settings import SettingsManager
from unicode_cleaner.core.table import ClassificationTable

# ---------------------------------------------------------------------------
# Configuration via environment variables
# ---------------------------------------------------------------------------

_ENV = os.environ.get("UNICODE_CLEANER_ENV", "dev")

_MAX_UPLOAD_MB = int(os.environ.get("UNICODE_CLEANER_MAX_UPLOAD_MB", "10"))
_MAX_UPLOAD_BYTES = _MAX_UPLOAD_MB * 1024 * 1024

# CORS origins: "*" = all, otherwise a comma-separated list
_CORS_ORIGINS_RAW = os.environ.get("UNICODE_CLEANER_CORS_ORIGINS", "*")
_CORS_ORIGINS: list[str] = (
    ["*"]
    if _CORS_ORIGINS_RAW in ("*", "")
    else [o.strip() for o in _CORS_ORIGINS_RAW.split(",") if o.strip()]
)
# allow_credentials is incompatible with allow_origins=["*"]
_CORS_ALLOW_CREDENTIALS = "*" not in _CORS_ORIGINS

_logger = logging.getLogger(__name__)

_settings = SettingsManager().load()
_cleaner = UnicodeCleaner()
_reader = TextFileReader()

# ---------------------------------------------------------------------------
# FastAPI application
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Unicode Cleaner API",
    description="Detect and replace problematic Unicode characters in text",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_CORS_ORIGINS,
    allow_credentials=_CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def _log_startup() -> None:
    _logger.info(
        "Unicode Cleaner started: env=%s max_upload=%dMB cors=%s",
        _ENV,
        _MAX_UPLOAD_MB,
        _CORS_ORIGINS_RAW,
    )


@app.get("/health")
async def health():
    from unicode_cleaner import __version__
    return {"status": "ok", "version": __version__}


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------


@app.get("/api/categories")
async def list_categories():
    table = ClassificationTable.initialize()
    return [
        {
            "id": c.value,
            "name": c.display_name,
            "characters": len(table.entries(c)),
            "enabled": _settings.is_category_enabled(c),
        }
        for c in table.all_categories()
    ]


@app.get("/api/characters")
async def list_characters(category: str = ""):
    selected = _parse_category(category) if category else None
    return [info.to_dict() for info in ClassificationTable.initialize().entries(selected)]


# ---------------------------------------------------------------------------
# Text payloads
# ---------------------------------------------------------------------------


@app.post("/api/detect")
async def detect(request: Request):
    """Return every issue in ``{"text": ..., "categories": [...]}``."""
    text, categories = await _read_payload(request)
    issues = _cleaner.detect_issues(text, categories)
    return {"count": len(issues), "issues": [_issue_dict(text, i) for i in issues]}


@app.post("/api/clean")
async def clean(request: Request):
    """Clean ``{"text": ..., "categories": [...]}``.

    Without ``categories`` the text gets the full clean (whitespace
    normalization included); with ``categories`` only the substitutions.
    """
    text, categories = await _read_payload(request)
    issues = _cleaner.detect_issues(text, categories)
    cleaned = _cleaner.clean_text(text, categories)
    return {"text": cleaned, "changed": cleaned != text, "issues_fixed": len(issues)}


# ---------------------------------------------------------------------------
# File upload
# ---------------------------------------------------------------------------


@app.post("/api/files/clean")
async def clean_file(
    file: UploadFile = File(...),
    categories: str = Form(""),
):
    """Upload a text file; return its issues and the category-scoped cleaned text."""
    filename = file.filename or "file"
    if not _settings.should_check_file_type(filename):
        raise HTTPException(
            status_code=415,
            detail=f"Unsupported file type: {Path(filename).suffix or '(none)'}",
        )

    content = await file.read()
    if len(content) > _MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds the maximum upload size ({_MAX_UPLOAD_MB} MB).",
        )

    try:
        text, encoding = _reader.decode(content)
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=422, detail=f"Could not decode file: {exc}")

    if categories:
        enabled = {_parse_category(c) for c in categories.split(",") if c.strip()}
    else:
        enabled = _settings.enabled_categories()

    issues = _cleaner.detect_issues(text, enabled)
    cleaned = _cleaner.clean_text(text, enabled)
    _logger.info("Cleaned upload %s: %d issue(s)", filename, len(issues))
    return {
        "filename": filename,
        "encoding": encoding,
        "count": len(issues),
        "issues": [_issue_dict(text, i) for i in issues],
        "changed": cleaned != text,
        "text": cleaned,
    }


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _parse_category(value: str) -> CharacterCategory:
    try:
        return CharacterCategory.parse(value)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


async def _read_payload(request: Request) -> tuple[str, set[CharacterCategory] | None]:
    try:
        body: Any = await request.json()
    except ValueError:
        raise HTTPException(status_code=422, detail="Request body must be JSON")
    if not isinstance(body, dict):
        raise HTTPException(status_code=422, detail="Request body must be a JSON object")

    text = body.get("text")
    if not isinstance(text, str):
        raise HTTPException(status_code=422, detail="'text' must be a string")

    raw_categories = body.get("categories")
    if raw_categories is None:
        return text, None
    if not isinstance(raw_categories, list):
        raise HTTPException(status_code=422, detail="'categories' must be a list")
    return text, {_parse_category(str(c)) for c in raw_categories}


def _issue_dict(text: str, issue: UnicodeIssue) -> dict:
    line, column = line_col(text, issue.start)
    return {
        **issue.to_dict(),
        "line": line,
        "column": column,
        "message": problem_message(issue),
        "fixes": [fix.name for fix in fixes_for(issue, _cleaner)],
    }
