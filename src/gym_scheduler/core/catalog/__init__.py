"""
Exercise catalog for gym-scheduler.

Each exercise is an immutable Exercise record loaded from the bundled
YAML files (plus optional user overrides).
"""

from .base import Exercise
from .registry import DEFAULT_ZONES, EXERCISE_CATALOG, get_exercise

__all__ = [
    "Exercise",
    "EXERCISE_CATALOG",
    "DEFAULT_ZONES",
    "get_exercise",
]
