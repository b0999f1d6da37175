"""
Session adaptation to a training zone.

Before a session starts at a chosen zone, each planned exercise is either

  kept     : the zone supports it (or it is not in the catalog at all),
  replaced : the user picked a substitute for it,
  dropped  : neither of the above.

A replaced exercise keeps its sets; its notes get a "Replaced <name>."
prefix.  When nothing is left the result status is "empty" and the caller
must not start the session.
"""

from __future__ import annotations

import copy
import dataclasses
from typing import Iterable, Mapping, Sequence

from .catalog.base import Exercise
from .config import REPLACED_NOTE_TEMPLATE
from .equipment import check_compatibility, find_exercise
from .models import AdaptationResult, PlannedExercise, Zone


def replacement_note(original_name: str, existing_notes: str = "") -> str:
    """Build the notes of a replaced exercise: annotation, then any earlier note."""
    note = REPLACED_NOTE_TEMPLATE.format(name=original_name)
    existing = (existing_notes or "").strip()
    return f"{note} {existing}" if existing else note


def adapt(
    planned_exercises: Sequence[PlannedExercise],
    zone: Zone,
    catalog: Sequence[Exercise],
    replacements: Mapping[str, Exercise] | None = None,
) -> AdaptationResult:
    """
    Fit a planned session to the equipment of a zone.

    Args:
        planned_exercises: Session content, in order
        zone: Zone the user wants to train at
        catalog: Full exercise catalog
        replacements: {original exercise_id: chosen substitute}

    Returns:
        AdaptationResult; check ``status`` / ``can_start`` before starting
    """
    replacements = replacements or {}
    final: list[PlannedExercise] = []
    dropped = 0
    replaced = 0

    for pe in planned_exercises:
        exercise = find_exercise(catalog, pe.exercise_id)
        if exercise is None or check_compatibility(exercise, zone).compatible:
            final.append(pe)
            continue

        substitute = replacements.get(pe.exercise_id)
        if substitute is None:
            dropped += 1
            continue

        final.append(
            dataclasses.replace(
                pe,
                exercise_id=substitute.exercise_id,
                sets=copy.deepcopy(pe.sets),
                notes=replacement_note(exercise.name, pe.notes),
            )
        )
        replaced += 1

    return AdaptationResult(
        final_exercises=tuple(final),
        dropped_count=dropped,
        replaced_count=replaced,
    )


def prepare_for_start(exercises: Iterable[PlannedExercise]) -> list[PlannedExercise]:
    """
    Copy a planned session for a fresh start: every set marked not completed.

    The input is left untouched.
    """
    return [
        dataclasses.replace(
            pe,
            sets=[dataclasses.replace(s, completed=False) for s in pe.sets],
        )
        for pe in exercises
    ]
