"""
Tests for the JSON workspace store and the serializers behind it.
"""

import json

import pytest

from gym_scheduler.core.catalog import DEFAULT_ZONES
from gym_scheduler.core.models import (
    PlannedExercise,
    RecurringPlan,
    ScheduledActivity,
    WorkoutSession,
    WorkoutSet,
)
from gym_scheduler.io.serializers import (
    ValidationError,
    dict_to_recurring_plan,
    dict_to_scheduled_activity,
    json_line_to_session,
    parse_days_of_week,
    parse_exercise_spec,
    parse_replacements,
    recurring_plan_to_dict,
    validate_date,
)
from gym_scheduler.io.workspace_store import WorkspaceStore


@pytest.fixture
def store(tmp_path):
    s = WorkspaceStore(tmp_path / "ws")
    s.init(DEFAULT_ZONES)
    return s


def _plan(plan_id: str = "p1") -> RecurringPlan:
    return RecurringPlan(
        plan_id=plan_id,
        title="Upper A",
        days_of_week=(1, 4),
        start_date="2024-01-01",
        exercises=[PlannedExercise("bench_press", [WorkoutSet(reps=8, weight_kg=60)])],
    )


def _activity(activity_id: str, date: str, recurrence_id: str | None = None, done: bool = False):
    return ScheduledActivity(
        activity_id=activity_id,
        date=date,
        title="Session",
        is_completed=done,
        recurrence_id=recurrence_id,
    )


class TestInit:
    def test_creates_files(self, tmp_path):
        s = WorkspaceStore(tmp_path / "new")
        assert not s.exists()
        s.init(DEFAULT_ZONES)
        assert s.exists()
        assert s.zones_path.exists()
        assert s.history_path.exists()

    def test_init_keeps_existing_data(self, store):
        store.add_recurring_plan(_plan())
        store.init(())
        assert [p.plan_id for p in store.load_recurring_plans()] == ["p1"]
        assert len(store.load_zones()) == 3

    def test_load_before_init(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            WorkspaceStore(tmp_path / "missing").load_recurring_plans()


class TestZones:
    def test_zones_survive_save(self, store):
        zones = store.load_zones()
        assert [z.zone_id for z in zones] == ["home", "gym", "travel"]
        home = zones[0]
        assert home.available_plates == (10, 5, 2.5, 1.25)
        assert "dumbbell" in home.inventory

    def test_find_zone_by_id_or_name(self, store):
        assert store.find_zone("gym").zone_id == "gym"
        assert store.find_zone("  TRAVEL ").zone_id == "travel"
        assert store.find_zone("moon") is None

    def test_malformed_zone(self, store):
        store.zones_path.write_text(json.dumps([{"name": "no id"}]))
        with pytest.raises(ValidationError, match="zone #1"):
            store.load_zones()


class TestPlans:
    def test_add_and_replace_plan(self, store):
        store.add_recurring_plan(_plan())
        store.add_recurring_plan(_plan())
        store.add_recurring_plan(_plan("p2"))
        plans = store.load_recurring_plans()
        assert [p.plan_id for p in plans] == ["p1", "p2"]
        assert plans[0].days_of_week == (1, 4)
        assert plans[0].exercises[0].sets[0].weight_kg == 60

    def test_activities_sorted_by_date(self, store):
        count = store.add_scheduled_activities(
            [_activity("b", "2024-01-05"), _activity("a", "2024-01-02")]
        )
        assert count == 2
        assert [a.activity_id for a in store.load_scheduled_activities()] == ["a", "b"]

    def test_delete_recurring_prunes_future_incomplete(self, store):
        store.add_recurring_plan(_plan())
        store.add_scheduled_activities(
            [
                _activity("past", "2024-01-01", "p1"),
                _activity("done", "2024-01-08", "p1", done=True),
                _activity("future", "2024-01-08", "p1"),
                _activity("solo", "2024-01-08"),
            ]
        )
        assert store.delete_recurring_plan("p1", today="2024-01-04")
        assert store.load_recurring_plans() == []
        assert [a.activity_id for a in store.load_scheduled_activities()] == [
            "past",
            "done",
            "solo",
        ]

    def test_delete_unknown_plan(self, store):
        assert not store.delete_recurring_plan("nope")

    def test_malformed_plan_reports_record(self, store):
        store.plans_path.write_text(
            json.dumps({"recurring_plans": [{"plan_id": "x", "title": "X", "days_of_week": [], "start_date": "2024-01-01"}]})
        )
        with pytest.raises(ValidationError, match="recurring plan #1"):
            store.load_recurring_plans()

    def test_invalid_json(self, store):
        store.plans_path.write_text("{not json")
        with pytest.raises(ValidationError, match="Invalid JSON"):
            store.load_scheduled_activities()


class TestHistory:
    def test_append_and_load_sorted(self, store):
        store.append_session(WorkoutSession("s2", "2024-01-05", "Push"))
        store.append_session(WorkoutSession("s1", "2024-01-03", "Pull", zone_id="home"))
        history = store.load_history()
        assert [s.session_id for s in history] == ["s1", "s2"]
        assert history[0].zone_id == "home"

    def test_bad_line_reports_line_number(self, store):
        store.history_path.write_text('{"session_id": "s1", "date": "bad", "name": "x"}\n')
        with pytest.raises(ValidationError, match="line 1"):
            store.load_history()

    def test_blank_lines_ignored(self, store):
        store.history_path.write_text("\n\n")
        assert store.load_history() == []


class TestSerializers:
    def test_plan_dict_preserves_fields(self):
        plan = _plan()
        plan.end_date = "2024-03-01"
        restored = dict_to_recurring_plan(recurring_plan_to_dict(plan))
        assert restored == plan

    def test_activity_requires_valid_date(self):
        with pytest.raises(ValidationError):
            dict_to_scheduled_activity({"activity_id": "a", "date": "01/02/2024", "title": "x"})

    def test_negative_reps_rejected(self):
        with pytest.raises(ValidationError):
            dict_to_scheduled_activity(
                {
                    "activity_id": "a",
                    "date": "2024-01-02",
                    "title": "x",
                    "exercises": [{"exercise_id": "push_up", "sets": [{"reps": -1}]}],
                }
            )

    def test_session_line_invalid_json(self):
        with pytest.raises(ValidationError, match="Invalid JSON"):
            json_line_to_session("{")

    def test_validate_date(self):
        assert validate_date("2024-02-29") == "2024-02-29"
        with pytest.raises(ValidationError):
            validate_date("2023-02-29")


class TestCommandLineParsers:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("1,3,5", (1, 3, 5)),
            ("mon, wed,Fri", (1, 3, 5)),
            ("sunday,0", (0,)),
            ("6,sat", (6,)),
        ],
    )
    def test_days_of_week(self, text, expected):
        assert parse_days_of_week(text) == expected

    @pytest.mark.parametrize("text", ["", "7", "funday", " , "])
    def test_days_of_week_invalid(self, text):
        with pytest.raises(ValidationError):
            parse_days_of_week(text)

    def test_exercise_spec_with_sets(self):
        pe = parse_exercise_spec("bench_press:3x8@62.5")
        assert pe.exercise_id == "bench_press"
        assert [(s.reps, s.weight_kg) for s in pe.sets] == [(8, 62.5)] * 3

    def test_exercise_spec_bare(self):
        pe = parse_exercise_spec("plank")
        assert pe.exercise_id == "plank"
        assert pe.sets == []

    def test_exercise_spec_invalid(self):
        with pytest.raises(ValidationError):
            parse_exercise_spec("bench press:3")

    def test_replacements(self):
        assert parse_replacements(["bench_press = push_up"]) == {"bench_press": "push_up"}
        with pytest.raises(ValidationError):
            parse_replacements(["bench_press"])
