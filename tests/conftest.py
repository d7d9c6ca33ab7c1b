"""Pytest fixtures shared across all tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from unicode_cleaner.core.settings import CleanerSettings, SettingsManager


@pytest.fixture(autouse=True)
def isolated_user_settings(tmp_path_factory, monkeypatch) -> Path:
    """Point the per-user settings file at an empty temp directory."""
    user_dir = tmp_path_factory.mktemp("user_config")
    path = user_dir / "settings.yml"
    monkeypatch.setattr(SettingsManager, "get_user_settings_path", lambda self: path)
    return path


@pytest.fixture
def messy_text() -> str:
    """Text containing one character of every category."""
    return (
        "\u201cSmart\u201d quotes\u2026\n"   # quotes + punctuation
        "em\u2014dash and\u00a0nbsp\n"       # dashes + space
        "zero\u200bwidth\n"                  # hidden control
        "\uff21\uff22\uff23 full width\n"    # full width
        "heart\u2764\ufe0f\n"                # variation selector
    )


@pytest.fixture
def settings() -> CleanerSettings:
    return CleanerSettings()


@pytest.fixture
def project_dir(tmp_path) -> Path:
    """A small project tree with dirty, clean, ignored and hidden files."""
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "guide.md").write_text(
        "Use \u201cquotes\u201d and\u00a0spaces.\n", encoding="utf-8"
    )
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "main.py").write_text(
        "x = 1  # caf\u00e9\u2013bar\n", encoding="utf-8"
    )
    (tmp_path / "clean.txt").write_text("plain ascii\n", encoding="utf-8")
    (tmp_path / "image.bin").write_bytes(b"\x00\x01\xe2\x80\x94")
    (tmp_path / ".git").mkdir()
    (tmp_path / ".git" / "notes.txt").write_text("hidden\u200b\n", encoding="utf-8")
    return tmp_path
