"""
Data models for gym-scheduler.

Core dataclasses for zones, planned work, recurring templates, concrete
activities, history, and the result records returned by the engine.
Dates are ISO strings (YYYY-MM-DD); the engine treats a malformed date as
"no match" rather than rejecting the record, so date validation lives in
io/serializers.py instead of here.
"""

from dataclasses import dataclass, field
from typing import Literal, Union

from .config import ACTIVITY_TYPES, SET_TYPES, TRACKING_TYPES

TrackingType = Literal["reps_weight", "reps_only", "time_only", "time_distance", "reps_time"]
SetType = Literal["normal", "warmup", "drop", "failure"]
ActivityType = Literal["gym", "cardio", "rehab", "mobility", "rest"]
DueKind = Literal["concrete", "template", "completed"]
AdaptationStatus = Literal["ready", "empty"]
PlateStatus = Literal["loaded", "bar_only", "under_bar"]


@dataclass(frozen=True)
class Zone:
    """
    A training location and the equipment available there.

    ``available_plates`` (kg) replaces the default plate set for loading
    calculations when present.
    """

    zone_id: str
    name: str
    inventory: tuple[str, ...] = ()
    available_plates: tuple[float, ...] | None = None
    icon: str = ""

    def has(self, item: str) -> bool:
        """Return True if the item is part of the zone's inventory."""
        return item in self.inventory


@dataclass
class WorkoutSet:
    """
    A single set, planned or performed.

    Which of the fields carry meaning depends on the exercise tracking type
    (reps+weight, time+distance, ...).
    """

    reps: int = 0
    weight_kg: float = 0.0
    distance_m: float | None = None
    duration_seconds: int | None = None
    completed: bool = False
    rpe: float | None = None
    set_type: SetType = "normal"

    def __post_init__(self) -> None:
        """Validate set data."""
        if self.reps < 0:
            raise ValueError("reps must be non-negative")
        if self.weight_kg < 0:
            raise ValueError("weight_kg must be non-negative")
        if self.distance_m is not None and self.distance_m < 0:
            raise ValueError("distance_m must be non-negative")
        if self.duration_seconds is not None and self.duration_seconds < 0:
            raise ValueError("duration_seconds must be non-negative")
        if self.set_type not in SET_TYPES:
            raise ValueError(f"Invalid set_type: {self.set_type}")


@dataclass
class PlannedExercise:
    """One exercise inside a session or template."""

    exercise_id: str
    sets: list[WorkoutSet] = field(default_factory=list)
    notes: str = ""
    tracking_type: TrackingType | None = None  # overrides the catalog value

    def __post_init__(self) -> None:
        if self.tracking_type is not None and self.tracking_type not in TRACKING_TYPES:
            raise ValueError(f"Invalid tracking_type: {self.tracking_type}")


@dataclass
class RecurringPlan:
    """
    A template that recurs on fixed weekdays.

    days_of_week uses 0=Sunday .. 6=Saturday.  end_date is inclusive.
    """

    plan_id: str
    title: str
    days_of_week: tuple[int, ...]
    start_date: str
    end_date: str | None = None
    exercises: list[PlannedExercise] = field(default_factory=list)
    activity_type: ActivityType = "gym"

    def __post_init__(self) -> None:
        """Reject plans that could never be resolved."""
        self.days_of_week = tuple(self.days_of_week)
        if not self.days_of_week:
            raise ValueError(f"RecurringPlan {self.plan_id!r} has no days_of_week")
        for day in self.days_of_week:
            if not 0 <= day <= 6:
                raise ValueError(
                    f"RecurringPlan {self.plan_id!r}: weekday {day} outside 0..6"
                )
        if self.activity_type not in ACTIVITY_TYPES:
            raise ValueError(f"Invalid activity_type: {self.activity_type}")


@dataclass
class ScheduledActivity:
    """
    A concrete, dated planned activity.

    recurrence_id points back at the RecurringPlan this instance overrides
    for its date (None for one-off plans).
    """

    activity_id: str
    date: str
    title: str
    is_completed: bool = False
    exercises: list[PlannedExercise] = field(default_factory=list)
    recurrence_id: str | None = None
    activity_type: ActivityType = "gym"
    linked_session_id: str | None = None

    def __post_init__(self) -> None:
        if self.activity_type not in ACTIVITY_TYPES:
            raise ValueError(f"Invalid activity_type: {self.activity_type}")


@dataclass
class WorkoutSession:
    """A completed workout.  History is append-only."""

    session_id: str
    date: str
    name: str
    exercises: list[PlannedExercise] = field(default_factory=list)
    duration_seconds: int | None = None
    location_name: str | None = None
    zone_id: str | None = None
    rpe: float | None = None
    feeling: str | None = None

    def __post_init__(self) -> None:
        if self.duration_seconds is not None and self.duration_seconds < 0:
            raise ValueError("duration_seconds must be non-negative")


DueSource = Union[RecurringPlan, ScheduledActivity, WorkoutSession]


@dataclass(frozen=True)
class DueItem:
    """
    One effective entry on a calendar day.

    kind tells the caller what it is looking at:
      concrete : an incomplete ScheduledActivity dated that day
      template : a virtual occurrence of a RecurringPlan
      completed: a WorkoutSession from history
    """

    kind: DueKind
    date: str
    item_id: str
    title: str
    source: DueSource

    @property
    def is_planned(self) -> bool:
        return self.kind != "completed"

    @property
    def is_recurring(self) -> bool:
        return self.kind == "template"

    @property
    def exercises(self) -> list[PlannedExercise]:
        return self.source.exercises


@dataclass(frozen=True)
class Compatibility:
    """Whether an exercise can be performed at a zone, and what is missing."""

    compatible: bool
    missing: tuple[str, ...] = ()


@dataclass(frozen=True)
class AdaptationResult:
    """
    Outcome of fitting a planned session to a zone.

    status == "empty" means nothing is left to train; the caller must not
    start the session until the user picks a replacement or gives up.
    """

    final_exercises: tuple[PlannedExercise, ...]
    dropped_count: int
    replaced_count: int = 0

    @property
    def status(self) -> AdaptationStatus:
        return "ready" if self.final_exercises else "empty"

    @property
    def can_start(self) -> bool:
        return self.status == "ready"


@dataclass(frozen=True)
class PlateCount:
    """Number of plates of one denomination on ONE side of the bar."""

    weight_kg: float
    count: int


@dataclass(frozen=True)
class PlateBreakdown:
    """
    Per-side plate loading for a target weight.

    Total external load = bar_weight_kg + 2 × Σ(weight_kg × count).
    remainder_kg is the per-side load the plate set could not represent.
    """

    status: PlateStatus
    total_kg: float
    bar_weight_kg: float
    plates: tuple[PlateCount, ...] = ()
    per_side_kg: float = 0.0
    remainder_kg: float = 0.0

    @property
    def loaded_total_kg(self) -> float:
        """Weight actually on the bar with the computed plates."""
        per_side = sum(p.weight_kg * p.count for p in self.plates)
        return self.bar_weight_kg + 2 * per_side

    @property
    def plate_count(self) -> int:
        """Number of plates per side."""
        return sum(p.count for p in self.plates)
