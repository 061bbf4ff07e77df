"""
YAML → settings loader.

Loads defaults from settings.yaml (bundled with the package) and optionally
merges user overrides from ~/.workout-log/settings.yaml.

Usage:
    from workout_log.core.engine.config_loader import load_settings
    settings = load_settings()
    data_path = settings.get("data_path")

If the user override file exists but cannot be parsed, a warning is emitted
and the file is ignored.
"""

from __future__ import annotations

import importlib.resources
import os
import warnings
from pathlib import Path
from typing import Any

import yaml

from ..config import DEFAULT_DATA_DIRNAME, SETTINGS_FILENAME

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML mapping; raise on parse errors."""
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping, got {type(data).__name__}")
    return data


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_data_dir() -> Path:
    """Return ~/.workout-log (not created here)."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    return home / DEFAULT_DATA_DIRNAME


def load_bundled_settings() -> dict[str, Any]:
    """Return the defaults shipped as workout_log/settings.yaml."""
    ref = importlib.resources.files("workout_log").joinpath(SETTINGS_FILENAME)
    data = yaml.safe_load(ref.read_text(encoding="utf-8"))
    return data if isinstance(data, dict) else {}


def get_user_settings_path() -> Path | None:
    """Return ~/.workout-log/settings.yaml if it exists, else None."""
    p = get_data_dir() / SETTINGS_FILENAME
    return p if p.exists() else None


def load_settings() -> dict[str, Any]:
    """
    Load and merge settings from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/workout_log/settings.yaml
    2. User override at ~/.workout-log/settings.yaml

    Returns:
        Merged settings dict
    """
    settings = load_bundled_settings()

    user = get_user_settings_path()
    if user is not None:
        try:
            settings = _deep_merge(settings, _load_yaml_file(user))
        except (OSError, ValueError, yaml.YAMLError) as e:
            warnings.warn(f"Ignoring unreadable settings file {user}: {e}", stacklevel=2)

    return settings
