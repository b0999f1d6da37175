"""
Due-activity projection.

Combines recurring templates, concrete scheduled activities and history into
the effective list of items for a calendar day:

  1. incomplete ScheduledActivity dated D           → "concrete"
  2. WorkoutSession dated D                         → "completed"
  3. RecurringPlan occurring on D without override  → "template"

History does not suppress planned items: a day can show an incomplete plan
and a completed session side by side.  A range is the same projection
applied to each day independently.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from .models import DueItem, RecurringPlan, ScheduledActivity, WorkoutSession
from .recurrence import DayLike, find_override, is_occurring, iter_days, parse_day


def project_day(
    day: DayLike,
    recurring_plans: Iterable[RecurringPlan],
    scheduled_activities: Iterable[ScheduledActivity],
    history: Iterable[WorkoutSession],
) -> list[DueItem]:
    """
    Return the effective items for one day.

    At most one template item is produced per plan id, and never one for a
    plan that has a concrete instance (completed or not) on that day.

    Args:
        day: Calendar day (date, datetime or ISO string)
        recurring_plans: Recurring templates
        scheduled_activities: Concrete dated activities
        history: Completed sessions

    Returns:
        List of DueItem; empty if day is not a valid date
    """
    d = parse_day(day)
    if d is None:
        return []
    iso = d.isoformat()
    activities = list(scheduled_activities)

    items: list[DueItem] = []

    for activity in activities:
        if not activity.is_completed and parse_day(activity.date) == d:
            items.append(
                DueItem(
                    kind="concrete",
                    date=iso,
                    item_id=activity.activity_id,
                    title=activity.title,
                    source=activity,
                )
            )

    for session in history:
        if parse_day(session.date) == d:
            items.append(
                DueItem(
                    kind="completed",
                    date=iso,
                    item_id=session.session_id,
                    title=session.name,
                    source=session,
                )
            )

    seen_plans: set[str] = set()
    for plan in recurring_plans:
        if plan.plan_id in seen_plans:
            continue
        if not is_occurring(plan, d):
            continue
        seen_plans.add(plan.plan_id)
        if find_override(plan, d, activities) is not None:
            continue
        items.append(
            DueItem(
                kind="template",
                date=iso,
                item_id=plan.plan_id,
                title=plan.title,
                source=plan,
            )
        )

    return items


def project_range(
    start: DayLike,
    end: DayLike,
    recurring_plans: Iterable[RecurringPlan],
    scheduled_activities: Iterable[ScheduledActivity],
    history: Iterable[WorkoutSession],
) -> dict[str, list[DueItem]]:
    """
    Project every day in [start, end].

    Returns:
        {iso_day: [DueItem, ...]} in chronological order, one key per day
        (days with nothing due map to an empty list)
    """
    first = parse_day(start)
    last = parse_day(end)
    if first is None or last is None:
        return {}

    plans = list(recurring_plans)
    activities = list(scheduled_activities)
    sessions = list(history)
    return {
        d.isoformat(): project_day(d, plans, activities, sessions)
        for d in iter_days(first, last)
    }


def primary_item(items: Sequence[DueItem]) -> DueItem | None:
    """
    Pick the item to open when a day is selected.

    A completed session wins over planned work; otherwise the first planned
    item; None for an empty day.
    """
    for item in items:
        if item.kind == "completed":
            return item
    for item in items:
        if item.is_planned:
            return item
    return None


def has_due(
    day: DayLike,
    recurring_plans: Iterable[RecurringPlan],
    scheduled_activities: Iterable[ScheduledActivity],
    history: Iterable[WorkoutSession] = (),
) -> bool:
    """Return True if any planned (concrete or template) item is due on day."""
    return any(
        item.is_planned
        for item in project_day(day, recurring_plans, scheduled_activities, history)
    )
