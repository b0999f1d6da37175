"""
YAML → Exercise / Zone loader.

Loads the exercise catalog from the YAML files in the bundled
``src/gym_scheduler/exercises/`` directory.  Each file (e.g. push.yaml)
holds an ``exercises:`` list; catalog order is file name order, then the
order inside each file.  Catalog order matters: substitutes with equal
score keep it.

User overrides: place YAML files in ``~/.gym-scheduler/exercises/``.
A user entry whose exercise_id matches a bundled entry is deep-merged over
it (only changed keys need to be listed); any other user entry is appended
to the catalog.

Default zones come from the bundled ``zones.yaml``.

Usage (internal, called by registry.py):
    from .loader import load_catalog_from_yaml
    exercises = load_catalog_from_yaml()   # list or None on failure
"""

from __future__ import annotations

import os
import warnings
from pathlib import Path

import yaml

from ..config import SCORE_MAX, SCORE_MIN, TRACKING_TYPES
from ..models import Zone
from .base import Exercise

_REQUIRED_EXERCISE_FIELDS: frozenset[str] = frozenset({"exercise_id", "name"})
_REQUIRED_ZONE_FIELDS: frozenset[str] = frozenset({"zone_id", "name"})


def _str_tuple(value) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


def exercise_from_dict(d: dict) -> Exercise:
    """Convert a raw dict (from YAML or JSON) to an Exercise.

    Raises ValueError if a required field is absent or a value is invalid.
    """
    missing = _REQUIRED_EXERCISE_FIELDS - set(d)
    if missing:
        raise ValueError(f"Exercise missing fields: {sorted(missing)}")

    tracking_type = str(d.get("tracking_type", "reps_weight"))
    if tracking_type not in TRACKING_TYPES:
        raise ValueError(f"Invalid tracking_type: {tracking_type}")

    groups = tuple(_str_tuple(g) for g in d.get("equipment_requirements") or ())
    if any(not g for g in groups):
        raise ValueError("equipment_requirements contains an empty group")

    score = d.get("score")
    if score is not None and not SCORE_MIN <= float(score) <= SCORE_MAX:
        raise ValueError(f"score must be between {SCORE_MIN:g} and {SCORE_MAX:g}, got {score}")
    return Exercise(
        exercise_id=str(d["exercise_id"]),
        name=str(d["name"]),
        equipment=_str_tuple(d.get("equipment")),
        equipment_requirements=groups,
        primary_muscles=_str_tuple(d.get("primary_muscles")),
        secondary_muscles=_str_tuple(d.get("secondary_muscles")),
        score=float(score) if score is not None else None,
        tracking_type=tracking_type,  # type: ignore[arg-type]
        pattern=str(d.get("pattern", "")),
        description=str(d.get("description", "")),
    )


def zone_from_dict(d: dict) -> Zone:
    """Convert a raw dict to a Zone.

    Raises ValueError if a required field is absent.
    """
    missing = _REQUIRED_ZONE_FIELDS - set(d)
    if missing:
        raise ValueError(f"Zone missing fields: {sorted(missing)}")
    plates = d.get("available_plates")
    return Zone(
        zone_id=str(d["zone_id"]),
        name=str(d["name"]),
        inventory=_str_tuple(d.get("inventory")),
        available_plates=tuple(float(p) for p in plates) if plates else None,
        icon=str(d.get("icon", "")),
    )


def _load_yaml_file(path: Path) -> dict:
    """Load a YAML file; warn and return {} when it cannot be parsed."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"gym-scheduler: ignoring {path}: {exc}", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _package_root() -> Path:
    # loader.py lives at src/gym_scheduler/core/catalog/loader.py
    return Path(__file__).parent.parent.parent


def _get_bundled_exercises_dir() -> Path | None:
    """Return path to the bundled exercises/ data directory, or None if not found."""
    candidate = _package_root() / "exercises"
    return candidate if candidate.is_dir() else None


def _get_user_exercises_dir() -> Path | None:
    """Return ~/.gym-scheduler/exercises/ if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".gym-scheduler" / "exercises"
    return p if p.is_dir() else None


def _raw_entries(directory: Path) -> list[dict]:
    entries: list[dict] = []
    for p in sorted(directory.glob("*.yaml")):
        for raw in _load_yaml_file(p).get("exercises") or []:
            if isinstance(raw, dict):
                entries.append(raw)
    return entries


def load_catalog_from_yaml() -> list[Exercise] | None:
    """Return the exercise catalog, in catalog order.

    Bundled entries come first; user entries either override a bundled
    entry in place or are appended.  Entries that fail validation are
    skipped with a warning.

    Returns None (rather than raising) so the registry can decide how to fail.
    """
    bundled_dir = _get_bundled_exercises_dir()
    user_dir = _get_user_exercises_dir()
    if bundled_dir is None and user_dir is None:
        return None

    merged: dict[str, dict] = {}
    if bundled_dir is not None:
        for raw in _raw_entries(bundled_dir):
            merged[str(raw.get("exercise_id"))] = raw
    if user_dir is not None:
        for raw in _raw_entries(user_dir):
            key = str(raw.get("exercise_id"))
            merged[key] = _deep_merge(merged[key], raw) if key in merged else raw

    result: list[Exercise] = []
    for key, raw in merged.items():
        try:
            result.append(exercise_from_dict(raw))
        except (ValueError, TypeError) as exc:
            warnings.warn(
                f"gym-scheduler: skipping exercise '{key}': {exc}",
                stacklevel=2,
            )
    return result if result else None


def load_default_zones() -> list[Zone]:
    """Return the bundled default zones (empty list if the file is missing)."""
    path = _package_root() / "zones.yaml"
    if not path.exists():
        return []
    zones: list[Zone] = []
    for raw in _load_yaml_file(path).get("zones") or []:
        try:
            zones.append(zone_from_dict(raw))
        except (ValueError, TypeError) as exc:
            warnings.warn(f"gym-scheduler: skipping zone: {exc}", stacklevel=2)
    return zones
