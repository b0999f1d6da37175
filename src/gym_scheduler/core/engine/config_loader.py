"""
YAML → engine settings loader.

Loads engine defaults from settings.yaml (bundled with the package) and
optionally merges user overrides from ~/.gym-scheduler/settings.yaml.

Usage:
    from gym_scheduler.core.engine.config_loader import load_engine_settings
    settings = load_engine_settings()
    settings.bar_weight_kg   # 20.0

If a YAML file cannot be parsed, a warning is emitted and the file is
ignored; values missing from every source fall back to the Python
defaults in config.py (no crash).
"""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from ..config import DEFAULT_BAR_WEIGHT_KG, DEFAULT_PLATES_KG, MATERIALIZE_HORIZON_DAYS

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; warn and return {} on any error."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"gym-scheduler: ignoring {path}: {exc}", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


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


@dataclass(frozen=True)
class EngineSettings:
    """Typed view of the merged settings."""

    bar_weight_kg: float = DEFAULT_BAR_WEIGHT_KG
    plates_kg: tuple[float, ...] = DEFAULT_PLATES_KG
    materialize_horizon_days: int = MATERIALIZE_HORIZON_DAYS


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled settings.yaml, or None if not found."""
    # config_loader.py lives at src/gym_scheduler/core/engine/
    candidate = Path(__file__).parent.parent.parent / "settings.yaml"
    return candidate if candidate.exists() else None


def get_user_yaml_path() -> Path | None:
    """Return ~/.gym-scheduler/settings.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".gym-scheduler" / "settings.yaml"
    return p if p.exists() else None


def load_settings_dict() -> dict[str, Any]:
    """
    Load and merge settings from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/gym_scheduler/settings.yaml
    2. User override at ~/.gym-scheduler/settings.yaml

    Returns:
        Merged dict of settings sections.  Empty dict if no YAML available.
    """
    config: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled is not None:
        config = _deep_merge(config, _load_yaml_file(bundled))

    user = get_user_yaml_path()
    if user is not None:
        user_cfg = _load_yaml_file(user)
        if user_cfg:
            config = _deep_merge(config, user_cfg)

    return config


def load_engine_settings() -> EngineSettings:
    """Return the merged settings as an EngineSettings record."""
    cfg = load_settings_dict()
    plates_cfg = cfg.get("plates", {}) or {}
    recurrence_cfg = cfg.get("recurrence", {}) or {}

    denominations = plates_cfg.get("denominations_kg")
    try:
        return EngineSettings(
            bar_weight_kg=float(plates_cfg.get("bar_weight_kg", DEFAULT_BAR_WEIGHT_KG)),
            plates_kg=(
                tuple(float(p) for p in denominations) if denominations else DEFAULT_PLATES_KG
            ),
            materialize_horizon_days=int(
                recurrence_cfg.get("materialize_horizon_days", MATERIALIZE_HORIZON_DAYS)
            ),
        )
    except (TypeError, ValueError) as exc:
        warnings.warn(
            f"gym-scheduler: invalid settings ({exc}); using built-in defaults.",
            stacklevel=2,
        )
        return EngineSettings()
