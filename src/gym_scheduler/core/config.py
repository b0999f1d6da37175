"""
Configuration constants for the planning and adaptation engine.

All adjustable parameters are centralized here for easy tuning.
Values that a user may want to change without editing code (bar weight,
default plate set) can also be overridden in settings.yaml; see
core/engine/config_loader.py.
"""

from typing import Final

# =============================================================================
# EQUIPMENT
# =============================================================================

BODYWEIGHT: Final[str] = "bodyweight"  # Universal tag, always available
MISSING_EQUIPMENT_PLACEHOLDER: Final[str] = "equipment"  # Reported when an exercise lists no tags

# =============================================================================
# SUBSTITUTION RANKING
# =============================================================================

DEFAULT_EXERCISE_SCORE: Final[float] = 5.0  # Score used when a catalog entry has none
SCORE_MIN: Final[float] = 1.0
SCORE_MAX: Final[float] = 10.0

# =============================================================================
# SESSION ADAPTATION
# =============================================================================

REPLACED_NOTE_TEMPLATE: Final[str] = "Replaced {name}."

# =============================================================================
# PLATE LOADING
# =============================================================================

DEFAULT_BAR_WEIGHT_KG: Final[float] = 20.0
DEFAULT_PLATES_KG: Final[tuple[float, ...]] = (25.0, 20.0, 15.0, 10.0, 5.0, 2.5, 1.25)
PLATE_ROUNDING_DECIMALS: Final[int] = 2  # Remaining per-side load is rounded after each plate

# =============================================================================
# RECURRENCE
# =============================================================================

# Weekday numbering used by RecurringPlan.days_of_week: 0=Sunday .. 6=Saturday
WEEKDAY_NAMES: Final[tuple[str, ...]] = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

MATERIALIZE_HORIZON_DAYS: Final[int] = 30  # How far ahead occurrences are made concrete
GENERATED_ID_PREFIX: Final[str] = "gen"    # gen-<plan_id>-<YYYY-MM-DD>

ACTIVITY_TYPES: Final[tuple[str, ...]] = ("gym", "cardio", "rehab", "mobility", "rest")
TRACKING_TYPES: Final[tuple[str, ...]] = (
    "reps_weight",
    "reps_only",
    "time_only",
    "time_distance",
    "reps_time",
)
SET_TYPES: Final[tuple[str, ...]] = ("normal", "warmup", "drop", "failure")
