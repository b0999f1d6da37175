"""
Equipment compatibility and exercise substitution.

Compatibility rule
------------------
  Grouped requirements :  every group needs at least one item in the zone
                          (AND across groups, OR within a group).
                          On failure a single representative tag is
                          reported: the exercise's first equipment tag.
  Flat equipment list  :  every tag must be "bodyweight" or in the zone;
                          every unmet tag is reported.

Substitution
------------
A substitute for exercise X at zone Z is any other catalog exercise that
shares at least one primary muscle with X and is compatible with Z.
Candidates are ranked by score (default 5), highest first; equal scores
keep catalog order.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from .catalog.base import Exercise
from .config import BODYWEIGHT, MISSING_EQUIPMENT_PLACEHOLDER
from .models import Compatibility, PlannedExercise, Zone


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------

def find_exercise(catalog: Iterable[Exercise], exercise_id: str) -> Exercise | None:
    """Return the catalog entry with the given id, or None if absent."""
    for exercise in catalog:
        if exercise.exercise_id == exercise_id:
            return exercise
    return None


# ---------------------------------------------------------------------------
# Compatibility
# ---------------------------------------------------------------------------

def satisfies_requirements(exercise: Exercise, inventory: Sequence[str]) -> bool:
    """
    Return True if the inventory covers the exercise's equipment needs.

    Uses the grouped requirements when the exercise has them, else the flat
    bodyweight-or-inventory check.
    """
    if exercise.equipment_requirements:
        return all(
            any(item in inventory for item in group)
            for group in exercise.equipment_requirements
        )
    return all(eq == BODYWEIGHT or eq in inventory for eq in exercise.equipment)


def check_compatibility(exercise: Exercise, zone: Zone) -> Compatibility:
    """
    Decide whether an exercise can be performed at a zone.

    Args:
        exercise: Resolved catalog entry
        zone: Training zone

    Returns:
        Compatibility(compatible, missing); missing is empty when compatible
    """
    if exercise.equipment_requirements:
        if satisfies_requirements(exercise, zone.inventory):
            return Compatibility(compatible=True)
        representative = exercise.primary_equipment or MISSING_EQUIPMENT_PLACEHOLDER
        return Compatibility(compatible=False, missing=(representative,))

    missing: list[str] = []
    for eq in exercise.equipment:
        if eq != BODYWEIGHT and not zone.has(eq) and eq not in missing:
            missing.append(eq)
    return Compatibility(compatible=not missing, missing=tuple(missing))


def incompatible_exercises(
    planned: Iterable[PlannedExercise],
    zone: Zone,
    catalog: Sequence[Exercise],
) -> list[tuple[PlannedExercise, Compatibility]]:
    """
    List the planned exercises that cannot be performed at the zone.

    Exercises whose id is not in the catalog are skipped: there is nothing
    to check them against.
    """
    conflicts: list[tuple[PlannedExercise, Compatibility]] = []
    for pe in planned:
        exercise = find_exercise(catalog, pe.exercise_id)
        if exercise is None:
            continue
        result = check_compatibility(exercise, zone)
        if not result.compatible:
            conflicts.append((pe, result))
    return conflicts


def zone_conflict_count(
    planned: Iterable[PlannedExercise],
    zone: Zone,
    catalog: Sequence[Exercise],
) -> int:
    """Number of planned exercises the zone cannot support (0 = fully compatible)."""
    return len(incompatible_exercises(planned, zone, catalog))


# ---------------------------------------------------------------------------
# Substitution
# ---------------------------------------------------------------------------

def find_substitutes(
    original_exercise_id: str,
    zone: Zone,
    catalog: Sequence[Exercise],
) -> list[Exercise]:
    """
    Rank replacement exercises for the original at the given zone.

    Args:
        original_exercise_id: Id of the exercise to replace
        zone: Zone the session will be performed at
        catalog: Full exercise catalog (its order breaks score ties)

    Returns:
        Candidates, best first; empty if the original is unknown or nothing fits
    """
    original = find_exercise(catalog, original_exercise_id)
    if original is None:
        return []

    candidates = [
        e
        for e in catalog
        if e.exercise_id != original.exercise_id
        and e.shares_muscles_with(original)
        and satisfies_requirements(e, zone.inventory)
    ]
    # sorted() is stable, so equal scores keep catalog order.
    return sorted(candidates, key=lambda e: e.effective_score, reverse=True)
