"""
JSON/JSONL workspace storage.

A workspace is a directory holding the data the CLI feeds to the engine:

- plans.json   : {"recurring_plans": [...], "scheduled_activities": [...]}
- zones.json   : list of zones
- history.jsonl: one completed WorkoutSession per line
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable

from ..core.models import RecurringPlan, ScheduledActivity, WorkoutSession, Zone
from ..core.recurrence import prune_plan_activities
from .serializers import (
    ValidationError,
    dict_to_recurring_plan,
    dict_to_scheduled_activity,
    dict_to_zone,
    json_line_to_session,
    recurring_plan_to_dict,
    scheduled_activity_to_dict,
    session_to_json_line,
    zone_to_dict,
)


class WorkspaceStore:
    """
    Manages the plan, zone and history files of one workspace directory.

    Loaders raise FileNotFoundError when the workspace has not been
    initialised and ValidationError when a stored record is malformed.
    """

    def __init__(self, data_dir: str | Path):
        """
        Initialize the workspace store.

        Args:
            data_dir: Directory holding plans.json, zones.json and history.jsonl
        """
        self.data_dir = Path(data_dir)
        self.plans_path = self.data_dir / "plans.json"
        self.zones_path = self.data_dir / "zones.json"
        self.history_path = self.data_dir / "history.jsonl"

    def exists(self) -> bool:
        """Check if the workspace has been initialised."""
        return self.plans_path.exists()

    def init(self, zones: Iterable[Zone] = ()) -> None:
        """
        Create the workspace files that don't exist yet.

        Existing files are left untouched.

        Args:
            zones: Zones to seed zones.json with
        """
        self.data_dir.mkdir(parents=True, exist_ok=True)

        if not self.plans_path.exists():
            self._write_plans([], [])
        if not self.zones_path.exists():
            self.save_zones(zones)
        if not self.history_path.exists():
            self.history_path.touch()

    # ------------------------------------------------------------------
    # Zones
    # ------------------------------------------------------------------

    def load_zones(self) -> list[Zone]:
        """
        Load all zones.

        Raises:
            FileNotFoundError: If zones.json doesn't exist
            ValidationError: If a zone record is invalid
        """
        data = self._read_json(self.zones_path)
        if not isinstance(data, list):
            raise ValidationError(f"{self.zones_path}: expected a list of zones")
        zones: list[Zone] = []
        for i, raw in enumerate(data, 1):
            try:
                zones.append(dict_to_zone(raw))
            except ValidationError as e:
                raise ValidationError(f"Error in zone #{i} of {self.zones_path}: {e}") from e
        return zones

    def save_zones(self, zones: Iterable[Zone]) -> None:
        """Replace zones.json with the given zones."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        with open(self.zones_path, "w") as f:
            json.dump([zone_to_dict(z) for z in zones], f, indent=2)

    def find_zone(self, zone_ref: str) -> Zone | None:
        """Return the zone whose id or name (case-insensitive) matches, or None."""
        ref = zone_ref.strip().lower()
        for zone in self.load_zones():
            if zone.zone_id.lower() == ref or zone.name.lower() == ref:
                return zone
        return None

    # ------------------------------------------------------------------
    # Plans and activities
    # ------------------------------------------------------------------

    def load_recurring_plans(self) -> list[RecurringPlan]:
        """
        Load all recurring plans.

        Raises:
            FileNotFoundError: If plans.json doesn't exist
            ValidationError: If a plan record is invalid
        """
        data = self._load_plans_data()
        plans: list[RecurringPlan] = []
        for i, raw in enumerate(data.get("recurring_plans", []), 1):
            try:
                plans.append(dict_to_recurring_plan(raw))
            except ValidationError as e:
                raise ValidationError(
                    f"Error in recurring plan #{i} of {self.plans_path}: {e}"
                ) from e
        return plans

    def load_scheduled_activities(self) -> list[ScheduledActivity]:
        """
        Load all concrete activities, sorted by date.

        Raises:
            FileNotFoundError: If plans.json doesn't exist
            ValidationError: If an activity record is invalid
        """
        data = self._load_plans_data()
        activities: list[ScheduledActivity] = []
        for i, raw in enumerate(data.get("scheduled_activities", []), 1):
            try:
                activities.append(dict_to_scheduled_activity(raw))
            except ValidationError as e:
                raise ValidationError(
                    f"Error in scheduled activity #{i} of {self.plans_path}: {e}"
                ) from e
        activities.sort(key=lambda a: a.date)
        return activities

    def save_plans(
        self,
        recurring_plans: Iterable[RecurringPlan],
        scheduled_activities: Iterable[ScheduledActivity],
    ) -> None:
        """Replace plans.json with the given plans and activities."""
        if not self.plans_path.exists():
            raise FileNotFoundError(
                f"Plans file not found: {self.plans_path}. Run 'init' first."
            )
        self._write_plans(list(recurring_plans), list(scheduled_activities))

    def add_recurring_plan(self, plan: RecurringPlan) -> None:
        """
        Add a recurring plan, replacing any plan with the same id.

        Raises:
            FileNotFoundError: If the workspace is not initialised
        """
        plans = [p for p in self.load_recurring_plans() if p.plan_id != plan.plan_id]
        plans.append(plan)
        self.save_plans(plans, self.load_scheduled_activities())

    def add_scheduled_activities(self, new_activities: Iterable[ScheduledActivity]) -> int:
        """
        Add concrete activities, replacing any with the same id.

        Returns:
            Number of activities written
        """
        new_list = list(new_activities)
        new_ids = {a.activity_id for a in new_list}
        activities = [a for a in self.load_scheduled_activities() if a.activity_id not in new_ids]
        activities.extend(new_list)
        self.save_plans(self.load_recurring_plans(), activities)
        return len(new_list)

    def delete_recurring_plan(self, plan_id: str, today: str | None = None) -> bool:
        """
        Delete a recurring plan and its future incomplete instances.

        Args:
            plan_id: Plan to delete
            today: ISO date used as the cut-off (default: current date)

        Returns:
            True if the plan existed
        """
        plans = self.load_recurring_plans()
        remaining = [p for p in plans if p.plan_id != plan_id]
        if len(remaining) == len(plans):
            return False
        today = today or datetime.now().strftime("%Y-%m-%d")
        activities = prune_plan_activities(plan_id, self.load_scheduled_activities(), today)
        self.save_plans(remaining, activities)
        return True

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def load_history(self) -> list[WorkoutSession]:
        """
        Load all sessions from the history file.

        Returns:
            List of WorkoutSession, sorted by date

        Raises:
            FileNotFoundError: If history file doesn't exist
            ValidationError: If a line cannot be parsed
        """
        if not self.history_path.exists():
            raise FileNotFoundError(
                f"History file not found: {self.history_path}. Run 'init' first."
            )

        sessions: list[WorkoutSession] = []
        with open(self.history_path, "r") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    sessions.append(json_line_to_session(line))
                except ValidationError as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {self.history_path}: {e}"
                    ) from e

        sessions.sort(key=lambda s: s.date)
        return sessions

    def append_session(self, session: WorkoutSession) -> None:
        """
        Append a completed session to the history file.

        Raises:
            FileNotFoundError: If history file doesn't exist
        """
        if not self.history_path.exists():
            raise FileNotFoundError(
                f"History file not found: {self.history_path}. Run 'init' first."
            )
        with open(self.history_path, "a") as f:
            f.write(session_to_json_line(session) + "\n")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _read_json(self, path: Path) -> Any:
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}. Run 'init' first.")
        try:
            with open(path, "r") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON in {path}: {e}") from e

    def _load_plans_data(self) -> dict[str, Any]:
        data = self._read_json(self.plans_path)
        if not isinstance(data, dict):
            raise ValidationError(f"{self.plans_path}: expected an object")
        return data

    def _write_plans(
        self,
        recurring_plans: list[RecurringPlan],
        scheduled_activities: list[ScheduledActivity],
    ) -> None:
        data = {
            "recurring_plans": [recurring_plan_to_dict(p) for p in recurring_plans],
            "scheduled_activities": [
                scheduled_activity_to_dict(a) for a in scheduled_activities
            ],
        }
        with open(self.plans_path, "w") as f:
            json.dump(data, f, indent=2)


def get_default_data_dir() -> Path:
    """Default workspace directory: ~/.gym-scheduler."""
    return Path.home() / ".gym-scheduler"
