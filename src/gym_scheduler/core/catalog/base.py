"""
Base types for the exercise catalog.

Exercise is immutable reference data: the engine reads it to decide
equipment compatibility and to rank substitutes, never to modify it.
"""

from dataclasses import dataclass

from ..config import DEFAULT_EXERCISE_SCORE
from ..models import TrackingType


@dataclass(frozen=True)
class Exercise:
    """
    One catalog entry.

    equipment_requirements is an AND-of-OR model: every group must be
    satisfied by at least one of its items.  Exercises without groups fall
    back to the flat ``equipment`` list.
    """

    # Identity
    exercise_id: str          # e.g. "bench_press"
    name: str                 # e.g. "Bench Press"

    # Equipment
    equipment: tuple[str, ...] = ()
    equipment_requirements: tuple[tuple[str, ...], ...] = ()

    # Muscles
    primary_muscles: tuple[str, ...] = ()
    secondary_muscles: tuple[str, ...] = ()

    # Ranking and tracking
    score: float | None = None  # 1–10, None → DEFAULT_EXERCISE_SCORE
    tracking_type: TrackingType = "reps_weight"

    # Display
    pattern: str = ""         # movement pattern, e.g. "horizontal_push"
    description: str = ""

    @property
    def effective_score(self) -> float:
        """Score used for ranking substitutes."""
        return self.score if self.score is not None else DEFAULT_EXERCISE_SCORE

    @property
    def primary_equipment(self) -> str | None:
        """First listed equipment tag, or None if the exercise lists none."""
        return self.equipment[0] if self.equipment else None

    def shares_muscles_with(self, other: "Exercise") -> bool:
        """Return True if the two exercises have a primary muscle in common."""
        return any(m in other.primary_muscles for m in self.primary_muscles)
