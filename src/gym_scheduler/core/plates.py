"""
Barbell plate loading.

Given a target load and a bar, work out the plates for ONE side:

  per_side = (total − bar) / 2
  for each denomination, largest first:
      count      = floor(remaining / denomination)
      remaining  = round(remaining − count × denomination, 2)

Greedy, so not count-minimal for arbitrary plate sets, but deterministic
and exact for the standard set.  Whatever the plates cannot represent is
left in remainder_kg; the breakdown approximates the target from below.
"""

from __future__ import annotations

import math
from typing import Sequence

from .config import DEFAULT_BAR_WEIGHT_KG, DEFAULT_PLATES_KG, PLATE_ROUNDING_DECIMALS
from .models import PlateBreakdown, PlateCount, Zone


def denominations_for_zone(
    zone: Zone | None,
    default: Sequence[float] | None = None,
) -> tuple[float, ...]:
    """
    Plate set to use at a zone.

    A zone's own plate list replaces the default entirely (no merging).
    """
    if zone is not None and zone.available_plates:
        return tuple(zone.available_plates)
    return tuple(default) if default else DEFAULT_PLATES_KG


def allocate(
    total_weight: float,
    bar_weight: float = DEFAULT_BAR_WEIGHT_KG,
    denominations: Sequence[float] | None = None,
) -> PlateBreakdown:
    """
    Compute the per-side plate breakdown for a target weight.

    Args:
        total_weight: Target load including the bar (kg)
        bar_weight: Bar weight (kg)
        denominations: Available plate weights; defaults to DEFAULT_PLATES_KG

    Returns:
        PlateBreakdown with status "under_bar", "bar_only" or "loaded"

    Raises:
        ValueError: On negative weights or non-positive denominations
    """
    if total_weight < 0:
        raise ValueError("total_weight must be non-negative")
    if bar_weight < 0:
        raise ValueError("bar_weight must be non-negative")

    plates_available = DEFAULT_PLATES_KG if denominations is None else tuple(denominations)
    for d in plates_available:
        if d <= 0:
            raise ValueError(f"plate denomination must be positive, got {d}")

    if total_weight < bar_weight:
        return PlateBreakdown(status="under_bar", total_kg=total_weight, bar_weight_kg=bar_weight)
    if round(total_weight - bar_weight, PLATE_ROUNDING_DECIMALS) == 0:
        return PlateBreakdown(status="bar_only", total_kg=total_weight, bar_weight_kg=bar_weight)

    per_side = (total_weight - bar_weight) / 2
    remaining = per_side
    plates: list[PlateCount] = []

    for denomination in sorted(set(plates_available), reverse=True):
        # The rounding guards against 2.4999999 / 2.5 flooring to zero.
        count = math.floor(round(remaining / denomination, 6))
        if count > 0:
            plates.append(PlateCount(weight_kg=denomination, count=count))
            remaining = round(remaining - count * denomination, PLATE_ROUNDING_DECIMALS)

    return PlateBreakdown(
        status="loaded",
        total_kg=total_weight,
        bar_weight_kg=bar_weight,
        plates=tuple(plates),
        per_side_kg=per_side,
        remainder_kg=max(0.0, remaining),
    )
