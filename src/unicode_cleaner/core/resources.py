"""Location of the settings files shipped inside the package."""

from __future__ import annotations

import importlib.resources
from pathlib import Path

_SETTINGS_PACKAGE = "unicode_cleaner.resources.settings"


def get_builtin_settings_path(name: str = "default") -> Path:
    """Return the path of ``resources/settings/<name>.yml``.

    The wheel ships the YAML files as plain package data, so the traversable
    returned by importlib.resources is always a real file on disk.
    """
    return Path(str(importlib.resources.files(_SETTINGS_PACKAGE) / f"{name}.yml"))
