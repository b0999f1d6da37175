"""Planning commands: workspace setup, calendar views, recurring plans and history logging."""

from datetime import datetime, timedelta
from typing import Annotated, Optional

import typer

from ...core.catalog.registry import DEFAULT_ZONES, EXERCISE_CATALOG
from ...core.engine.config_loader import load_engine_settings
from ...core.equipment import find_exercise
from ...core.models import PlannedExercise, RecurringPlan, ScheduledActivity, WorkoutSession
from ...core.projector import project_day, project_range
from ...core.recurrence import materialize_upcoming
from ...io.serializers import (
    ValidationError,
    parse_days_of_week,
    parse_exercise_spec,
)
from .. import views
from ..app import (
    DataDirOption,
    DateOption,
    app,
    get_store,
    load_workspace,
    new_id,
    resolve_date,
    today_iso,
)

ExerciseSpecOption = Annotated[
    Optional[list[str]],
    typer.Option(
        "--exercise",
        "-x",
        help="Exercise as ID, ID:SETSxREPS or ID:SETSxREPS@KG, e.g. bench_press:3x8@60 (repeatable)",
    ),
]


def _parse_exercises(specs: list[str] | None) -> list[PlannedExercise]:
    """Parse --exercise specs, warning about ids the catalog doesn't know."""
    exercises: list[PlannedExercise] = []
    for spec in specs or []:
        try:
            pe = parse_exercise_spec(spec)
        except ValidationError as e:
            views.print_error(str(e))
            raise typer.Exit(1)
        if find_exercise(EXERCISE_CATALOG, pe.exercise_id) is None:
            views.print_warning(f"'{pe.exercise_id}' is not in the exercise catalog.")
        exercises.append(pe)
    return exercises


@app.command()
def init(
    data_dir: DataDirOption = None,
) -> None:
    """
    Create a workspace with the default zones.

    Existing files are kept, so running init twice is harmless.
    """
    store = get_store(data_dir)
    existed = store.exists()
    store.init(DEFAULT_ZONES)
    if existed:
        views.print_info(f"Workspace already exists: {store.data_dir}")
    else:
        views.print_success(f"Workspace created: {store.data_dir}")


@app.command()
def day(
    date: DateOption = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Show what is due on one day.
    """
    iso = resolve_date(date)
    plans, activities, history = load_workspace(get_store(data_dir))
    items = project_day(iso, plans, activities, history)
    views.print_day(iso, items, EXERCISE_CATALOG)


@app.command()
def calendar(
    start: Annotated[
        Optional[str],
        typer.Option("--start", help="First day (default: Monday of this week)"),
    ] = None,
    end: Annotated[
        Optional[str],
        typer.Option("--end", help="Last day (default: start + 6 days)"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Show planned and completed activities for a range of days.
    """
    if start is None:
        today = datetime.now()
        start = (today - timedelta(days=today.weekday())).strftime("%Y-%m-%d")
    first = resolve_date(start)
    if end is None:
        end = (datetime.strptime(first, "%Y-%m-%d") + timedelta(days=6)).strftime("%Y-%m-%d")
    last = resolve_date(end)
    if last < first:
        views.print_error("--end must not be before --start")
        raise typer.Exit(1)

    plans, activities, history = load_workspace(get_store(data_dir))
    days = project_range(first, last, plans, activities, history)
    views.console.print(views.format_calendar_table(days))


@app.command()
def plans(
    data_dir: DataDirOption = None,
) -> None:
    """
    List recurring plans.
    """
    recurring, _, _ = load_workspace(get_store(data_dir))
    if not recurring:
        views.print_info("No recurring plans.")
        return
    views.console.print(views.format_plans_table(recurring))


@app.command("add-recurring")
def add_recurring(
    title: Annotated[str, typer.Option("--title", "-t", help="Plan title")],
    days: Annotated[
        str,
        typer.Option("--days", help="Weekdays, e.g. 1,3,5 (0=Sun) or mon,wed,fri"),
    ],
    start: Annotated[
        Optional[str],
        typer.Option("--start", help="First day (YYYY-MM-DD, default: today)"),
    ] = None,
    end: Annotated[
        Optional[str],
        typer.Option("--end", help="Last day, inclusive (YYYY-MM-DD)"),
    ] = None,
    plan_id: Annotated[
        Optional[str],
        typer.Option("--id", help="Plan id (default: generated rec-<hex>)"),
    ] = None,
    replace: Annotated[
        bool,
        typer.Option("--replace", help="Overwrite an existing plan with the same --id"),
    ] = False,
    activity_type: Annotated[
        str,
        typer.Option("--type", help="gym, cardio, rehab, mobility or rest"),
    ] = "gym",
    exercises: ExerciseSpecOption = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Add a plan that recurs on fixed weekdays.

    Example:
        gym-scheduler add-recurring -t "Upper A" --days mon,thu -x bench_press:3x8@60 -x pull_up:3x8
    """
    store = get_store(data_dir)
    recurring, _, _ = load_workspace(store)
    taken = {p.plan_id for p in recurring}
    if plan_id is not None and plan_id in taken and not replace:
        views.print_error(f"Plan id '{plan_id}' already exists (use --replace to overwrite)")
        raise typer.Exit(1)

    start_date = resolve_date(start)
    end_date = resolve_date(end) if end is not None else None
    if end_date is not None and end_date < start_date:
        views.print_error("--end must not be before --start")
        raise typer.Exit(1)

    try:
        plan = RecurringPlan(
            plan_id=plan_id or new_id("rec", taken),
            title=title,
            days_of_week=parse_days_of_week(days),
            start_date=start_date,
            end_date=end_date,
            exercises=_parse_exercises(exercises),
            activity_type=activity_type,  # type: ignore[arg-type]
        )
        store.add_recurring_plan(plan)
    except (ValidationError, ValueError, FileNotFoundError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Added recurring plan {plan.plan_id}: {plan.title}")


@app.command()
def schedule(
    title: Annotated[str, typer.Option("--title", "-t", help="Activity title")],
    date: DateOption = None,
    activity_id: Annotated[
        Optional[str],
        typer.Option("--id", help="Activity id (default: generated act-<hex>)"),
    ] = None,
    replace: Annotated[
        bool,
        typer.Option("--replace", help="Overwrite an existing activity with the same --id"),
    ] = False,
    recurrence_id: Annotated[
        Optional[str],
        typer.Option("--recurrence-id", help="Recurring plan this activity overrides for its day"),
    ] = None,
    activity_type: Annotated[
        str,
        typer.Option("--type", help="gym, cardio, rehab, mobility or rest"),
    ] = "gym",
    exercises: ExerciseSpecOption = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Add a one-off activity on a specific day.

    With --recurrence-id the activity replaces that plan's occurrence on the day.
    """
    store = get_store(data_dir)
    _, activities, _ = load_workspace(store)
    taken = {a.activity_id for a in activities}
    if activity_id is not None and activity_id in taken and not replace:
        views.print_error(f"Activity id '{activity_id}' already exists (use --replace to overwrite)")
        raise typer.Exit(1)

    iso = resolve_date(date)
    try:
        activity = ScheduledActivity(
            activity_id=activity_id or new_id("act", taken),
            date=iso,
            title=title,
            exercises=_parse_exercises(exercises),
            recurrence_id=recurrence_id,
            activity_type=activity_type,  # type: ignore[arg-type]
        )
        store.add_scheduled_activities([activity])
    except (ValidationError, ValueError, FileNotFoundError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Scheduled {activity.title} on {iso}")


@app.command()
def materialize(
    days: Annotated[
        Optional[int],
        typer.Option("--days", help="Horizon in days (default from settings: 30)"),
    ] = None,
    today: Annotated[
        Optional[str],
        typer.Option("--from", help="First day (YYYY-MM-DD, default: today)"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Turn upcoming recurring occurrences into concrete activities.

    Days that already have a concrete instance are left alone.
    """
    store = get_store(data_dir)
    plans, activities, _ = load_workspace(store)
    horizon = days if days is not None else load_engine_settings().materialize_horizon_days
    if horizon < 0:
        views.print_error("--days must be non-negative")
        raise typer.Exit(1)

    created = materialize_upcoming(plans, activities, resolve_date(today), horizon)
    if not created:
        views.print_info("Nothing to materialize.")
        return
    store.add_scheduled_activities(created)
    views.print_success(f"Materialized {len(created)} activities.")


@app.command("delete-recurring")
def delete_recurring(
    plan_id: Annotated[str, typer.Argument(help="Recurring plan id")],
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Delete without asking"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Delete a recurring plan and its future incomplete instances.
    """
    store = get_store(data_dir)
    recurring, _, _ = load_workspace(store)
    if plan_id not in {p.plan_id for p in recurring}:
        views.print_error(f"No recurring plan with id {plan_id!r}")
        raise typer.Exit(1)

    if not force and not views.confirm_action(f"Delete recurring plan {plan_id}?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    store.delete_recurring_plan(plan_id, today_iso())
    views.print_success(f"Deleted recurring plan {plan_id}")


@app.command()
def log(
    name: Annotated[str, typer.Option("--name", "-n", help="Session name")],
    date: DateOption = None,
    zone: Annotated[
        Optional[str],
        typer.Option("--zone", "-z", help="Zone id or name where the session took place"),
    ] = None,
    activity_id: Annotated[
        Optional[str],
        typer.Option("--activity", help="Scheduled activity this session completes"),
    ] = None,
    rpe: Annotated[
        Optional[float],
        typer.Option("--rpe", help="Session RPE (1-10)"),
    ] = None,
    exercises: ExerciseSpecOption = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Record a completed workout in the history.

    With --activity the matching scheduled activity is marked completed.
    """
    store = get_store(data_dir)
    _, activities, history = load_workspace(store)
    iso = resolve_date(date)

    zone_obj = None
    if zone is not None:
        try:
            zone_obj = store.find_zone(zone)
        except (FileNotFoundError, ValidationError) as e:
            views.print_error(str(e))
            raise typer.Exit(1)
        if zone_obj is None:
            views.print_error(f"Unknown zone: {zone}")
            raise typer.Exit(1)

    target = None
    if activity_id is not None:
        target = next((a for a in activities if a.activity_id == activity_id), None)
        if target is None:
            views.print_error(f"No scheduled activity with id {activity_id!r}")
            raise typer.Exit(1)

    try:
        session = WorkoutSession(
            session_id=new_id("ses", {s.session_id for s in history}),
            date=iso,
            name=name,
            exercises=_parse_exercises(exercises),
            zone_id=zone_obj.zone_id if zone_obj else None,
            location_name=zone_obj.name if zone_obj else None,
            rpe=rpe,
        )
        store.append_session(session)
    except (ValidationError, ValueError, FileNotFoundError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if target is not None:
        target.is_completed = True
        target.linked_session_id = session.session_id
        store.add_scheduled_activities([target])

    views.print_success(f"Logged {session.name} on {iso}")
