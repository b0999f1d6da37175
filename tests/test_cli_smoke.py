"""
Minimal smoke tests for the gym-scheduler CLI.

Tests basic functionality:
- App runs and shows help
- Workspace is created
- Recurring plans show up on their days
- Overrides, materialisation and deletion
- Zone checks, substitutes and adaptation
- Plate calculator
"""

import json
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from gym_scheduler.cli.main import app


runner = CliRunner()

MONDAY = "2024-01-01"


@pytest.fixture
def data_dir():
    """Create a temporary workspace directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "ws"


def _invoke(data_dir: Path, *args: str):
    return runner.invoke(app, [*args, "--data-dir", str(data_dir)])


def _init_with_plan(data_dir: Path, *exercises: str):
    """Init a workspace with a Mon/Thu plan 'p1' starting 2024-01-01."""
    _invoke(data_dir, "init")
    specs = []
    for ex in exercises or ("bench_press:3x8@60",):
        specs += ["-x", ex]
    result = _invoke(
        data_dir,
        "add-recurring",
        "--id", "p1",
        "--title", "Upper A",
        "--days", "mon,thu",
        "--start", MONDAY,
        *specs,
    )
    assert result.exit_code == 0, result.output


class TestCLISmoke:
    """Basic smoke tests for workspace and planning commands."""

    def test_app_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "add-recurring" in result.output

    def test_init_creates_workspace(self, data_dir):
        result = _invoke(data_dir, "init")
        assert result.exit_code == 0
        assert (data_dir / "plans.json").exists()
        assert (data_dir / "history.jsonl").exists()
        zones = json.loads((data_dir / "zones.json").read_text())
        assert [z["zone_id"] for z in zones] == ["home", "gym", "travel"]

    def test_commands_need_init(self, data_dir):
        result = _invoke(data_dir, "day", "--date", MONDAY)
        assert result.exit_code == 1
        assert "Workspace not found" in result.output

    def test_recurring_plan_shows_on_its_days(self, data_dir):
        _init_with_plan(data_dir)

        result = _invoke(data_dir, "day", "--date", MONDAY)
        assert result.exit_code == 0
        assert "Upper A" in result.output
        assert "recurring" in result.output

        result = _invoke(data_dir, "day", "--date", "2024-01-02")
        assert result.exit_code == 0
        assert "Nothing planned" in result.output

    def test_add_recurring_rejects_bad_days(self, data_dir):
        _invoke(data_dir, "init")
        result = _invoke(data_dir, "add-recurring", "--title", "X", "--days", "funday")
        assert result.exit_code == 1
        assert "Invalid weekday" in result.output

    def test_add_recurring_generates_distinct_ids(self, data_dir):
        _invoke(data_dir, "init")
        for title in ("Upper", "Lower"):
            result = _invoke(data_dir, "add-recurring", "--title", title, "--days", "mon")
            assert result.exit_code == 0, result.output

        plans = json.loads((data_dir / "plans.json").read_text())["recurring_plans"]
        assert sorted(p["title"] for p in plans) == ["Lower", "Upper"]
        assert len({p["plan_id"] for p in plans}) == 2

    def test_add_recurring_refuses_duplicate_id(self, data_dir):
        _init_with_plan(data_dir)
        args = ["add-recurring", "--id", "p1", "--title", "Lower B", "--days", "tue", "--start", MONDAY]

        result = _invoke(data_dir, *args)
        assert result.exit_code == 1
        assert "already exists" in result.output
        plans = json.loads((data_dir / "plans.json").read_text())["recurring_plans"]
        assert [p["title"] for p in plans] == ["Upper A"]

        result = _invoke(data_dir, *args, "--replace")
        assert result.exit_code == 0, result.output
        plans = json.loads((data_dir / "plans.json").read_text())["recurring_plans"]
        assert [p["title"] for p in plans] == ["Lower B"]

    def test_schedule_generates_distinct_ids_and_refuses_duplicates(self, data_dir):
        _invoke(data_dir, "init")
        for title in ("Run", "Swim"):
            result = _invoke(data_dir, "schedule", "--title", title, "--date", MONDAY)
            assert result.exit_code == 0, result.output
        activities = json.loads((data_dir / "plans.json").read_text())["scheduled_activities"]
        assert sorted(a["title"] for a in activities) == ["Run", "Swim"]

        args = ["schedule", "--id", "a1", "--title", "Bike", "--date", MONDAY]
        assert _invoke(data_dir, *args).exit_code == 0
        result = _invoke(data_dir, *args)
        assert result.exit_code == 1
        assert "already exists" in result.output
        assert _invoke(data_dir, *args, "--replace").exit_code == 0

    def test_schedule_override_replaces_template(self, data_dir):
        _init_with_plan(data_dir)
        result = _invoke(
            data_dir,
            "schedule",
            "--title", "Moved Upper",
            "--date", MONDAY,
            "--recurrence-id", "p1",
            "-x", "push_up:3x15",
        )
        assert result.exit_code == 0

        result = _invoke(data_dir, "day", "--date", MONDAY)
        assert "Moved Upper" in result.output
        assert "Upper A" not in result.output

    def test_materialize_and_delete(self, data_dir):
        _init_with_plan(data_dir)

        result = _invoke(data_dir, "materialize", "--from", MONDAY, "--days", "7")
        assert result.exit_code == 0
        assert "Materialized 3" in result.output

        result = _invoke(data_dir, "materialize", "--from", MONDAY, "--days", "7")
        assert "Nothing to materialize" in result.output

        result = _invoke(data_dir, "delete-recurring", "p1", "--force")
        assert result.exit_code == 0
        plans = json.loads((data_dir / "plans.json").read_text())
        assert plans["recurring_plans"] == []

    def test_delete_unknown_plan(self, data_dir):
        _invoke(data_dir, "init")
        result = _invoke(data_dir, "delete-recurring", "nope", "--force")
        assert result.exit_code == 1

    def test_calendar_and_plans(self, data_dir):
        _init_with_plan(data_dir)
        result = _invoke(data_dir, "calendar", "--start", MONDAY, "--end", "2024-01-07")
        assert result.exit_code == 0
        assert "Calendar" in result.output

        result = _invoke(data_dir, "plans")
        assert result.exit_code == 0
        assert "p1" in result.output

    def test_log_completes_activity(self, data_dir):
        _init_with_plan(data_dir)
        _invoke(data_dir, "materialize", "--from", MONDAY, "--days", "0")

        result = _invoke(
            data_dir,
            "log",
            "--name", "Upper done",
            "--date", MONDAY,
            "--zone", "gym",
            "--activity", "gen-p1-2024-01-01",
        )
        assert result.exit_code == 0
        assert "Logged" in result.output

        result = _invoke(data_dir, "day", "--date", MONDAY)
        assert "Upper done" in result.output
        assert "done" in result.output
        assert "planned" not in result.output

    def test_log_with_malformed_zones_file(self, data_dir):
        _invoke(data_dir, "init")
        (data_dir / "zones.json").write_text(json.dumps([{"name": "no id"}]))
        result = _invoke(data_dir, "log", "--name", "Upper", "--date", MONDAY, "--zone", "home")
        assert result.exit_code == 1
        assert "Error" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert (data_dir / "history.jsonl").read_text() == ""


class TestZoneCommands:
    def test_zones_lists_defaults(self, data_dir):
        _invoke(data_dir, "init")
        result = _invoke(data_dir, "zones")
        assert result.exit_code == 0
        assert "Home" in result.output
        assert "Travel" in result.output

    def test_check_reports_missing_equipment(self, data_dir):
        _init_with_plan(data_dir)
        result = _invoke(data_dir, "check", "--zone", "home", "--date", MONDAY)
        assert result.exit_code == 0
        assert "barbell" in result.output

    def test_check_unknown_zone(self, data_dir):
        _init_with_plan(data_dir)
        result = _invoke(data_dir, "check", "--zone", "moon", "--date", MONDAY)
        assert result.exit_code == 1
        assert "Unknown zone" in result.output

    def test_substitutes(self, data_dir):
        _invoke(data_dir, "init")
        result = _invoke(data_dir, "substitutes", "bench_press", "--zone", "home")
        assert result.exit_code == 0
        assert "Substitutes for" in result.output

    def test_substitutes_unknown_exercise(self, data_dir):
        _invoke(data_dir, "init")
        result = _invoke(data_dir, "substitutes", "flying_kick", "--zone", "home")
        assert result.exit_code == 1
        assert "Unknown exercise" in result.output

    def test_adapt_with_replacement(self, data_dir):
        _init_with_plan(data_dir)
        result = _invoke(
            data_dir,
            "adapt",
            "--zone", "home",
            "--date", MONDAY,
            "--replace", "bench_press=dumbbell_bench_press",
        )
        assert result.exit_code == 0, result.output
        assert "Session ready" in result.output

    def test_adapt_best(self, data_dir):
        _init_with_plan(data_dir, "bench_press:3x8@60", "back_squat:3x5@100")
        result = _invoke(data_dir, "adapt", "--zone", "home", "--date", MONDAY, "--best")
        assert result.exit_code == 0, result.output
        assert "Replaced: 2" in result.output

    def test_adapt_empty_exits_1(self, data_dir):
        _init_with_plan(data_dir)
        result = _invoke(data_dir, "adapt", "--zone", "travel", "--date", MONDAY)
        assert result.exit_code == 1
        assert "No exercises left" in result.output


class TestPlatesCommand:
    def test_plates_breakdown(self):
        result = runner.invoke(app, ["plates", "102.5", "--bar", "20"])
        assert result.exit_code == 0
        assert "3 plates" in result.output
        assert "25 kg" in result.output
        assert "15 kg" in result.output
        assert "1.25 kg" in result.output

    def test_plates_bar_only(self):
        result = runner.invoke(app, ["plates", "20", "--bar", "20"])
        assert result.exit_code == 0
        assert "Bar only" in result.output

    def test_plates_under_bar(self):
        result = runner.invoke(app, ["plates", "15", "--bar", "20"])
        assert result.exit_code == 1

    def test_plates_with_zone(self, data_dir):
        _invoke(data_dir, "init")
        result = _invoke(data_dir, "plates", "50", "--bar", "20", "--zone", "home")
        assert result.exit_code == 0
        assert "10 kg" in result.output
        assert "25 kg" not in result.output
