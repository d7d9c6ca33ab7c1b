"""Settings: load, deep-merge and query YAML settings files.

Handles four scopes, later ones winning on conflicts:

- **builtin**: shipped with the package under resources/settings/default.yml
- **user**: per-user config directory (platform-specific)
- **project**: ``.unicode-cleaner.yml`` at the root of the project
- **explicit**: a file passed on the command line

``SettingsManager.load()`` returns a ``CleanerSettings`` object ready to be
handed to the file cleaner, the CLI or the web layer.
"""

from __future__ import annotations

import logging
import os
import platform
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from unicode_cleaner.core.models import CharacterCategory
from unicode_cleaner.core.resources import get_builtin_settings_path

_log = logging.getLogger(__name__)

PROJECT_SETTINGS_NAME = ".unicode-cleaner.yml"

DEFAULT_EXTENSIONS: tuple[str, ...] = (
    "txt", "md", "rst", "java", "js", "ts", "py", "cpp", "c", "h",
    "xml", "json", "yaml", "yml", "properties", "html", "css",
)

_KNOWN_KEYS = {"id", "name", "categories", "files", "precommit"}


def deep_merge(base: dict, overlay: dict) -> dict:
    """Merge overlay into base. Overlay wins on scalar conflicts.

    Dicts are merged recursively. Lists are replaced (not concatenated).
    """
    result = deepcopy(base)
    for key, val in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = deep_merge(result[key], val)
        else:
            result[key] = deepcopy(val)
    return result


def _normalize_extension(ext: str) -> str:
    return ext.strip().lstrip(".").lower()


def _all_enabled() -> dict[CharacterCategory, bool]:
    return {category: True for category in CharacterCategory}


# ---------------------------------------------------------------------------
# CleanerSettings
# ---------------------------------------------------------------------------


@dataclass
class CleanerSettings:
    """Effective settings: enabled categories, file filters, pre-commit mode."""

    categories: dict[CharacterCategory, bool] = field(default_factory=_all_enabled)
    extensions: set[str] = field(default_factory=lambda: set(DEFAULT_EXTENSIONS))
    max_file_size_kb: int = 10240
    block_on_issues: bool = False
    auto_fix: bool = False

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def enabled_categories(self) -> set[CharacterCategory]:
        return {c for c in CharacterCategory if self.categories.get(c, True)}

    def is_category_enabled(self, category: CharacterCategory) -> bool:
        return self.categories.get(category, True)

    def set_category_enabled(self, category: CharacterCategory | str, enabled: bool) -> None:
        self.categories[CharacterCategory.parse(category)] = bool(enabled)

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def should_check_file_type(self, file_name: str | None) -> bool:
        if not file_name:
            return False
        suffix = Path(file_name).suffix
        if not suffix:
            return False
        return _normalize_extension(suffix) in self.extensions

    def add_extension(self, ext: str) -> None:
        self.extensions.add(_normalize_extension(ext))

    def remove_extension(self, ext: str) -> None:
        self.extensions.discard(_normalize_extension(ext))

    def is_within_size_limit(self, size_bytes: int) -> bool:
        return size_bytes // 1024 <= self.max_file_size_kb

    def should_inspect_file(self, file_name: str | None, size_bytes: int) -> bool:
        if not self.should_check_file_type(file_name):
            return False
        return self.is_within_size_limit(size_bytes)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def reset_to_defaults(self) -> None:
        fresh = CleanerSettings()
        self.categories = fresh.categories
        self.extensions = fresh.extensions
        self.max_file_size_kb = fresh.max_file_size_kb
        self.block_on_issues = fresh.block_on_issues
        self.auto_fix = fresh.auto_fix

    def to_dict(self) -> dict:
        return {
            "categories": {c.value: self.categories.get(c, True) for c in CharacterCategory},
            "files": {
                "extensions": sorted(self.extensions),
                "max_file_size_kb": self.max_file_size_kb,
            },
            "precommit": {
                "block_on_issues": self.block_on_issues,
                "auto_fix": self.auto_fix,
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CleanerSettings":
        settings = cls()
        for key, enabled in (data.get("categories") or {}).items():
            try:
                settings.set_category_enabled(key, enabled)
            except ValueError:
                _log.warning("Settings reference unknown category: %r", key)

        files_cfg = data.get("files") or {}
        if "extensions" in files_cfg:
            settings.extensions = {
                _normalize_extension(str(e)) for e in files_cfg["extensions"] or []
            }
        if "max_file_size_kb" in files_cfg:
            settings.max_file_size_kb = int(files_cfg["max_file_size_kb"])

        precommit_cfg = data.get("precommit") or {}
        settings.block_on_issues = bool(precommit_cfg.get("block_on_issues", False))
        settings.auto_fix = bool(precommit_cfg.get("auto_fix", False))
        return settings

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            yaml.safe_dump(self.to_dict(), sort_keys=False, allow_unicode=True),
            encoding="utf-8",
        )


# ---------------------------------------------------------------------------
# SettingsManager
# ---------------------------------------------------------------------------


class SettingsManager:
    """Discover settings files and compile them into CleanerSettings.

    Args:
        project_dir: If provided, also reads ``<project_dir>/.unicode-cleaner.yml``.
    """

    def __init__(self, project_dir: Path | None = None) -> None:
        self._project_dir = project_dir

    def get_user_settings_path(self) -> Path:
        """Return the per-user settings file (platform-specific)."""
        system = platform.system()
        if system == "Darwin":
            base = Path.home() / "Library" / "Application Support" / "UnicodeCleaner"
        elif system == "Windows":
            base = Path(os.environ.get("APPDATA", str(Path.home()))) / "UnicodeCleaner"
        else:
            xdg = Path(os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config")))
            base = xdg / "UnicodeCleaner"
        return base / "settings.yml"

    def scope_paths(self, explicit_path: Path | None = None) -> list[tuple[str, Path]]:
        """Return ``(scope, path)`` pairs in merge order, existing files only."""
        candidates: list[tuple[str, Path]] = [
            ("builtin", get_builtin_settings_path()),
            ("user", self.get_user_settings_path()),
        ]
        if self._project_dir is not None:
            candidates.append(("project", self._project_dir / PROJECT_SETTINGS_NAME))
        if explicit_path is not None:
            if not explicit_path.exists():
                _log.warning("Settings file '%s' not found; ignoring.", explicit_path)
            candidates.append(("explicit", explicit_path))
        return [(scope, p) for scope, p in candidates if p.exists()]

    def load_raw(self, explicit_path: Path | None = None) -> dict:
        """Load and deep-merge every settings scope into one dict."""
        config: dict = {}
        for scope, path in self.scope_paths(explicit_path):
            try:
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
            except (OSError, yaml.YAMLError) as exc:
                _log.warning("Could not parse %s settings %s: %s", scope, path, exc)
                continue
            if not isinstance(data, dict):
                _log.warning("Ignoring %s settings %s: not a mapping", scope, path)
                continue
            _log.debug("Merging %s settings from %s", scope, path)
            config = deep_merge(config, data)
        self._warn_unknown_keys(config)
        return config

    def load(self, explicit_path: Path | None = None) -> CleanerSettings:
        return CleanerSettings.from_dict(self.load_raw(explicit_path))

    def _warn_unknown_keys(self, config: dict) -> None:
        for key in config:
            if key not in _KNOWN_KEYS:
                _log.warning("Settings contain unknown key: %r", key)
