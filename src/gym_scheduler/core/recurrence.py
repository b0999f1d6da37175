"""
Recurring-plan resolution.

A RecurringPlan occurs on day D iff

    weekday(D) ∈ days_of_week  and  D ≥ start_date  and  (no end_date or D ≤ end_date)

with weekdays numbered 0=Sunday .. 6=Saturday and all comparisons made on
calendar days (the start is taken at 00:00, the end at 23:59:59.999, which
on a day grid is the same as comparing dates).  A missing or malformed date
on either side means "never occurring"; nothing here raises for bad dates.

A concrete ScheduledActivity with recurrence_id == plan.plan_id on D
overrides the occurrence for that day.  Materialisation turns occurrences
into such concrete activities; the functions below only build them, the
caller decides whether to store them.
"""

from __future__ import annotations

import copy
import re
from datetime import date, datetime, timedelta
from typing import Iterable, Iterator, Union

from .config import GENERATED_ID_PREFIX, MATERIALIZE_HORIZON_DAYS
from .models import RecurringPlan, ScheduledActivity

DayLike = Union[date, datetime, str]

_ISO_DAY = re.compile(r"^(\d{4}-\d{2}-\d{2})(?:[T ].*)?$")


# ---------------------------------------------------------------------------
# Day helpers
# ---------------------------------------------------------------------------

def parse_day(value: DayLike | None) -> date | None:
    """
    Normalise a date, datetime or ISO string to a calendar day.

    Time-of-day is dropped.  Returns None for None, empty or malformed input.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    m = _ISO_DAY.match(value.strip())
    if not m:
        return None
    try:
        return datetime.strptime(m.group(1), "%Y-%m-%d").date()
    except ValueError:
        return None


def weekday_index(day: date) -> int:
    """Weekday with 0=Sunday .. 6=Saturday."""
    return day.isoweekday() % 7


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def is_occurring(plan: RecurringPlan, day: DayLike) -> bool:
    """
    Return True if the plan has an occurrence on the given day.

    Args:
        plan: Recurring template
        day: Calendar day (date, datetime or ISO string)

    Returns:
        True if the weekday matches and the day lies within start/end
    """
    d = parse_day(day)
    start = parse_day(plan.start_date)
    if d is None or start is None:
        return False
    if weekday_index(d) not in plan.days_of_week:
        return False
    if d < start:
        return False
    if plan.end_date:
        end = parse_day(plan.end_date)
        if end is None or d > end:
            return False
    return True


def find_override(
    plan: RecurringPlan,
    day: DayLike,
    activities: Iterable[ScheduledActivity],
) -> ScheduledActivity | None:
    """Return the concrete activity that replaces the plan's occurrence on day, if any."""
    d = parse_day(day)
    if d is None:
        return None
    for activity in activities:
        if activity.recurrence_id == plan.plan_id and parse_day(activity.date) == d:
            return activity
    return None


def occurrences_between(plan: RecurringPlan, start: DayLike, end: DayLike) -> list[str]:
    """
    List the ISO days in [start, end] on which the plan occurs.

    Overrides are not consulted; see projector.project_range for that.
    """
    first = parse_day(start)
    last = parse_day(end)
    if first is None or last is None:
        return []
    return [d.isoformat() for d in iter_days(first, last) if is_occurring(plan, d)]


# ---------------------------------------------------------------------------
# Materialisation
# ---------------------------------------------------------------------------

def generated_activity_id(plan_id: str, day: date) -> str:
    """Deterministic id for a materialised occurrence: gen-<plan_id>-<YYYY-MM-DD>."""
    return f"{GENERATED_ID_PREFIX}-{plan_id}-{day.isoformat()}"


def materialize_occurrence(plan: RecurringPlan, day: DayLike) -> ScheduledActivity:
    """
    Build the concrete activity for one occurrence of a plan.

    The exercises are deep-copied so the new activity can be edited or
    completed without touching the template.

    Raises:
        ValueError: If day is not a valid date
    """
    d = parse_day(day)
    if d is None:
        raise ValueError(f"Invalid day: {day!r}")
    return ScheduledActivity(
        activity_id=generated_activity_id(plan.plan_id, d),
        date=d.isoformat(),
        title=plan.title,
        is_completed=False,
        exercises=copy.deepcopy(plan.exercises),
        recurrence_id=plan.plan_id,
        activity_type=plan.activity_type,
    )


def materialize_upcoming(
    plans: Iterable[RecurringPlan],
    activities: Iterable[ScheduledActivity],
    today: DayLike,
    horizon_days: int = MATERIALIZE_HORIZON_DAYS,
) -> list[ScheduledActivity]:
    """
    Build concrete activities for occurrences in [today, today + horizon_days].

    Occurrences before a plan's start are skipped, as are days that already
    have a concrete instance for that plan.  Inputs are not modified; the
    returned list holds only the new activities.
    """
    first = parse_day(today)
    if first is None:
        return []
    last = first + timedelta(days=horizon_days)

    existing: set[tuple[str, date]] = set()
    for activity in activities:
        d = parse_day(activity.date)
        if activity.recurrence_id is not None and d is not None:
            existing.add((activity.recurrence_id, d))

    created: list[ScheduledActivity] = []
    for plan in plans:
        for d in iter_days(first, last):
            if (plan.plan_id, d) in existing or not is_occurring(plan, d):
                continue
            created.append(materialize_occurrence(plan, d))
            existing.add((plan.plan_id, d))
    return created


def prune_plan_activities(
    plan_id: str,
    activities: Iterable[ScheduledActivity],
    today: DayLike,
) -> list[ScheduledActivity]:
    """
    Return the activities that survive deleting a recurring plan.

    Future (date ≥ today) incomplete instances of the plan are removed;
    completed or past instances stay as a record of what happened.
    """
    cutoff = parse_day(today)
    kept: list[ScheduledActivity] = []
    for activity in activities:
        d = parse_day(activity.date)
        if (
            activity.recurrence_id == plan_id
            and not activity.is_completed
            and d is not None
            and cutoff is not None
            and d >= cutoff
        ):
            continue
        kept.append(activity)
    return kept
