"""
JSON serialization for planning data models.

Handles conversion between dataclasses and JSON-compatible dicts, and the
parsing of compact command-line strings (weekday lists, replacements).
"""

import json
import re
from datetime import datetime
from typing import Any

from ..core.catalog.loader import zone_from_dict
from ..core.config import WEEKDAY_NAMES
from ..core.models import (
    PlannedExercise,
    RecurringPlan,
    ScheduledActivity,
    WorkoutSession,
    WorkoutSet,
    Zone,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_date(date_str: str) -> str:
    """
    Validate a date string in ISO format.

    Args:
        date_str: Date string to validate

    Returns:
        The YYYY-MM-DD string

    Raises:
        ValidationError: If date format is invalid
    """
    if not isinstance(date_str, str) or not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValidationError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValidationError(f"Invalid date: {date_str}") from e

    return date_str


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def _require(data: dict[str, Any], *keys: str) -> None:
    missing = [k for k in keys if k not in data]
    if missing:
        raise ValidationError(f"Missing fields: {', '.join(missing)}")


# ---------------------------------------------------------------------------
# Sets and exercises
# ---------------------------------------------------------------------------

def workout_set_to_dict(s: WorkoutSet) -> dict[str, Any]:
    """Convert WorkoutSet to a compact dict (optional fields only when set)."""
    d: dict[str, Any] = {
        "reps": s.reps,
        "weight_kg": s.weight_kg,
        "completed": s.completed,
    }
    if s.distance_m is not None:
        d["distance_m"] = s.distance_m
    if s.duration_seconds is not None:
        d["duration_seconds"] = s.duration_seconds
    if s.rpe is not None:
        d["rpe"] = s.rpe
    if s.set_type != "normal":
        d["set_type"] = s.set_type
    return d


def dict_to_workout_set(data: dict[str, Any]) -> WorkoutSet:
    """
    Convert dict to WorkoutSet.

    Raises:
        ValidationError: If data is invalid
    """
    validate_non_negative(data.get("reps", 0), "reps")
    validate_non_negative(data.get("weight_kg", 0), "weight_kg")
    try:
        return WorkoutSet(
            reps=int(data.get("reps", 0)),
            weight_kg=float(data.get("weight_kg", 0.0)),
            distance_m=float(data["distance_m"]) if data.get("distance_m") is not None else None,
            duration_seconds=(
                int(data["duration_seconds"]) if data.get("duration_seconds") is not None else None
            ),
            completed=bool(data.get("completed", False)),
            rpe=float(data["rpe"]) if data.get("rpe") is not None else None,
            set_type=data.get("set_type", "normal"),
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid set: {e}") from e


def planned_exercise_to_dict(pe: PlannedExercise) -> dict[str, Any]:
    """Convert PlannedExercise to JSON-compatible dict."""
    d: dict[str, Any] = {
        "exercise_id": pe.exercise_id,
        "sets": [workout_set_to_dict(s) for s in pe.sets],
    }
    if pe.notes:
        d["notes"] = pe.notes
    if pe.tracking_type is not None:
        d["tracking_type"] = pe.tracking_type
    return d


def dict_to_planned_exercise(data: dict[str, Any]) -> PlannedExercise:
    """
    Convert dict to PlannedExercise.

    Raises:
        ValidationError: If data is invalid
    """
    _require(data, "exercise_id")
    try:
        return PlannedExercise(
            exercise_id=str(data["exercise_id"]),
            sets=[dict_to_workout_set(s) for s in data.get("sets", [])],
            notes=data.get("notes") or "",
            tracking_type=data.get("tracking_type"),
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


# ---------------------------------------------------------------------------
# Plans, activities, sessions, zones
# ---------------------------------------------------------------------------

def recurring_plan_to_dict(plan: RecurringPlan) -> dict[str, Any]:
    """Convert RecurringPlan to JSON-compatible dict."""
    return {
        "plan_id": plan.plan_id,
        "title": plan.title,
        "activity_type": plan.activity_type,
        "days_of_week": list(plan.days_of_week),
        "start_date": plan.start_date,
        "end_date": plan.end_date,
        "exercises": [planned_exercise_to_dict(pe) for pe in plan.exercises],
    }


def dict_to_recurring_plan(data: dict[str, Any]) -> RecurringPlan:
    """
    Convert dict to RecurringPlan.

    Raises:
        ValidationError: If data is invalid
    """
    _require(data, "plan_id", "title", "days_of_week", "start_date")
    validate_date(data["start_date"])
    if data.get("end_date") is not None:
        validate_date(data["end_date"])
    try:
        return RecurringPlan(
            plan_id=str(data["plan_id"]),
            title=str(data["title"]),
            days_of_week=tuple(int(d) for d in data["days_of_week"]),
            start_date=data["start_date"],
            end_date=data.get("end_date"),
            exercises=[dict_to_planned_exercise(pe) for pe in data.get("exercises", [])],
            activity_type=data.get("activity_type", "gym"),
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(str(e)) from e


def scheduled_activity_to_dict(activity: ScheduledActivity) -> dict[str, Any]:
    """Convert ScheduledActivity to JSON-compatible dict."""
    d: dict[str, Any] = {
        "activity_id": activity.activity_id,
        "date": activity.date,
        "title": activity.title,
        "activity_type": activity.activity_type,
        "is_completed": activity.is_completed,
        "exercises": [planned_exercise_to_dict(pe) for pe in activity.exercises],
    }
    if activity.recurrence_id is not None:
        d["recurrence_id"] = activity.recurrence_id
    if activity.linked_session_id is not None:
        d["linked_session_id"] = activity.linked_session_id
    return d


def dict_to_scheduled_activity(data: dict[str, Any]) -> ScheduledActivity:
    """
    Convert dict to ScheduledActivity.

    Raises:
        ValidationError: If data is invalid
    """
    _require(data, "activity_id", "date", "title")
    validate_date(data["date"])
    try:
        return ScheduledActivity(
            activity_id=str(data["activity_id"]),
            date=data["date"],
            title=str(data["title"]),
            is_completed=bool(data.get("is_completed", False)),
            exercises=[dict_to_planned_exercise(pe) for pe in data.get("exercises", [])],
            recurrence_id=data.get("recurrence_id"),
            activity_type=data.get("activity_type", "gym"),
            linked_session_id=data.get("linked_session_id"),
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(str(e)) from e


def workout_session_to_dict(session: WorkoutSession) -> dict[str, Any]:
    """Convert WorkoutSession to JSON-compatible dict."""
    return {
        "session_id": session.session_id,
        "date": session.date,
        "name": session.name,
        "exercises": [planned_exercise_to_dict(pe) for pe in session.exercises],
        "duration_seconds": session.duration_seconds,
        "location_name": session.location_name,
        "zone_id": session.zone_id,
        "rpe": session.rpe,
        "feeling": session.feeling,
    }


def dict_to_workout_session(data: dict[str, Any]) -> WorkoutSession:
    """
    Convert dict to WorkoutSession.

    Raises:
        ValidationError: If data is invalid
    """
    _require(data, "session_id", "date", "name")
    validate_date(data["date"])
    try:
        return WorkoutSession(
            session_id=str(data["session_id"]),
            date=data["date"],
            name=str(data["name"]),
            exercises=[dict_to_planned_exercise(pe) for pe in data.get("exercises", [])],
            duration_seconds=data.get("duration_seconds"),
            location_name=data.get("location_name"),
            zone_id=data.get("zone_id"),
            rpe=data.get("rpe"),
            feeling=data.get("feeling"),
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(str(e)) from e


def zone_to_dict(zone: Zone) -> dict[str, Any]:
    """Convert Zone to JSON-compatible dict."""
    d: dict[str, Any] = {
        "zone_id": zone.zone_id,
        "name": zone.name,
        "icon": zone.icon,
        "inventory": list(zone.inventory),
    }
    if zone.available_plates:
        d["available_plates"] = list(zone.available_plates)
    return d


def dict_to_zone(data: dict[str, Any]) -> Zone:
    """
    Convert dict to Zone.

    Raises:
        ValidationError: If data is invalid
    """
    try:
        return zone_from_dict(data)
    except (TypeError, ValueError) as e:
        raise ValidationError(str(e)) from e


def session_to_json_line(session: WorkoutSession) -> str:
    """Serialize a session to a single JSON line (no trailing newline)."""
    return json.dumps(workout_session_to_dict(session), separators=(",", ":"))


def json_line_to_session(line: str) -> WorkoutSession:
    """
    Deserialize a JSON line to a WorkoutSession.

    Raises:
        ValidationError: If JSON is invalid or data validation fails
    """
    try:
        data = json.loads(line.strip())
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e

    return dict_to_workout_session(data)


# ---------------------------------------------------------------------------
# Command-line strings
# ---------------------------------------------------------------------------

def parse_days_of_week(days_str: str) -> tuple[int, ...]:
    """
    Parse a weekday list such as "1,3,5" or "mon,wed,fri".

    Numbers use 0=Sunday .. 6=Saturday; names are the first three letters
    (case-insensitive).  Duplicates are removed, order is kept.

    Raises:
        ValidationError: If the string is empty or a token is not a weekday
    """
    names = [n.lower() for n in WEEKDAY_NAMES]
    days: list[int] = []
    for token in days_str.split(","):
        token = token.strip().lower()
        if not token:
            continue
        if token.isdigit():
            day = int(token)
            if not 0 <= day <= 6:
                raise ValidationError(f"Weekday out of range (0=Sun..6=Sat): {token}")
        elif token[:3] in names:
            day = names.index(token[:3])
        else:
            raise ValidationError(f"Invalid weekday: {token!r}")
        if day not in days:
            days.append(day)
    if not days:
        raise ValidationError("No weekdays given")
    return tuple(days)


_EXERCISE_SPEC = re.compile(
    r"^(?P<id>[A-Za-z0-9_\-]+)"
    r"(?::(?P<sets>\d+)x(?P<reps>\d+)(?:@(?P<weight>\d+(?:\.\d+)?))?)?$"
)


def parse_exercise_spec(spec: str) -> PlannedExercise:
    """
    Parse a compact exercise spec into a PlannedExercise.

    Format: ``ID[:SETSxREPS[@KG]]``, e.g. ``bench_press:3x8@60`` or ``plank``.
    Without a set part the exercise has no sets yet.

    Raises:
        ValidationError: If the spec cannot be parsed
    """
    m = _EXERCISE_SPEC.match(spec.strip())
    if not m:
        raise ValidationError(
            f"Invalid exercise {spec!r}. Expected ID, ID:SETSxREPS or ID:SETSxREPS@KG"
        )
    sets: list[WorkoutSet] = []
    if m.group("sets") is not None:
        weight = float(m.group("weight")) if m.group("weight") else 0.0
        sets = [
            WorkoutSet(reps=int(m.group("reps")), weight_kg=weight)
            for _ in range(int(m.group("sets")))
        ]
    return PlannedExercise(exercise_id=m.group("id"), sets=sets)


def parse_replacements(pairs: list[str]) -> dict[str, str]:
    """
    Parse "ORIGINAL=REPLACEMENT" pairs into {original_id: replacement_id}.

    Raises:
        ValidationError: If a pair is malformed
    """
    result: dict[str, str] = {}
    for pair in pairs:
        original, sep, replacement = pair.partition("=")
        if not sep or not original.strip() or not replacement.strip():
            raise ValidationError(f"Invalid replacement {pair!r}. Expected ORIGINAL=REPLACEMENT")
        result[original.strip()] = replacement.strip()
    return result
