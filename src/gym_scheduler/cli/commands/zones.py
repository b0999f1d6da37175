"""Zone commands: zones, check, substitutes, adapt."""

from typing import Annotated, Optional

import typer

from ...core.adaptation import adapt as adapt_session
from ...core.catalog.registry import EXERCISE_CATALOG, get_exercise
from ...core.equipment import find_substitutes, incompatible_exercises
from ...core.models import DueItem, Zone
from ...core.projector import project_day
from ...io.serializers import ValidationError, parse_replacements
from ...io.workspace_store import WorkspaceStore
from .. import views
from ..app import DataDirOption, DateOption, app, get_store, load_workspace, resolve_date

ZoneOption = Annotated[
    str,
    typer.Option("--zone", "-z", help="Zone id or name, e.g. home"),
]


def _get_zone(store: WorkspaceStore, zone_ref: str) -> Zone:
    """Resolve a zone reference or exit 1 listing the known zones."""
    try:
        zone = store.find_zone(zone_ref)
        known = [z.zone_id for z in store.load_zones()]
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    if zone is None:
        views.print_error(f"Unknown zone: {zone_ref}")
        views.print_info(f"Known zones: {', '.join(known) or 'none'}")
        raise typer.Exit(1)
    return zone


def _planned_item(store: WorkspaceStore, day: str) -> DueItem | None:
    """First planned item (concrete before template) on the day."""
    plans, activities, history = load_workspace(store)
    for item in project_day(day, plans, activities, history):
        if item.is_planned:
            return item
    return None


@app.command()
def zones(
    data_dir: DataDirOption = None,
) -> None:
    """
    List training zones and their equipment.
    """
    store = get_store(data_dir)
    load_workspace(store)
    try:
        all_zones = store.load_zones()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    if not all_zones:
        views.print_info("No zones defined.")
        return
    views.console.print(views.format_zones_table(all_zones))


@app.command()
def check(
    zone: ZoneOption,
    date: DateOption = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Check the day's planned session against a zone's equipment.
    """
    store = get_store(data_dir)
    iso = resolve_date(date)
    item = _planned_item(store, iso)
    zone_obj = _get_zone(store, zone)

    if item is None:
        views.print_info(f"Nothing planned on {iso}.")
        return

    views.console.print(f"[bold]{item.title}[/bold] on {iso} at {zone_obj.name}")
    conflicts = incompatible_exercises(item.exercises, zone_obj, EXERCISE_CATALOG)
    views.print_conflicts(zone_obj, conflicts, EXERCISE_CATALOG)


@app.command()
def substitutes(
    exercise_id: Annotated[str, typer.Argument(help="Exercise id, e.g. bench_press")],
    zone: ZoneOption,
    data_dir: DataDirOption = None,
) -> None:
    """
    Rank replacements for an exercise at a zone.

    Candidates share a primary muscle with the exercise and fit the zone;
    higher score first.
    """
    try:
        original = get_exercise(exercise_id)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    store = get_store(data_dir)
    load_workspace(store)
    zone_obj = _get_zone(store, zone)

    candidates = find_substitutes(exercise_id, zone_obj, EXERCISE_CATALOG)
    if not candidates:
        views.print_warning(f"No substitutes for {original.name} at {zone_obj.name}.")
        return
    views.console.print(views.format_substitutes_table(original, candidates, zone_obj))


@app.command()
def adapt(
    zone: ZoneOption,
    date: DateOption = None,
    replace: Annotated[
        Optional[list[str]],
        typer.Option("--replace", "-r", help="Replacement ORIGINAL=SUBSTITUTE (repeatable)"),
    ] = None,
    best: Annotated[
        bool,
        typer.Option("--best", help="Use the top-ranked substitute for every other conflict"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Fit the day's planned session to a zone.

    Exercises the zone can't support are replaced when a substitute was
    chosen and dropped otherwise. Exits with code 1 if nothing is left.

    Example:
        gym-scheduler adapt --zone home -r bench_press=dumbbell_bench_press
    """
    store = get_store(data_dir)
    iso = resolve_date(date)
    item = _planned_item(store, iso)
    zone_obj = _get_zone(store, zone)

    if item is None:
        views.print_info(f"Nothing planned on {iso}.")
        return

    try:
        pairs = parse_replacements(replace or [])
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    replacements = {}
    for original_id, substitute_id in pairs.items():
        try:
            replacements[original_id] = get_exercise(substitute_id)
        except ValueError as e:
            views.print_error(str(e))
            raise typer.Exit(1)

    if best:
        for pe, _ in incompatible_exercises(item.exercises, zone_obj, EXERCISE_CATALOG):
            if pe.exercise_id in replacements:
                continue
            ranked = find_substitutes(pe.exercise_id, zone_obj, EXERCISE_CATALOG)
            if ranked:
                replacements[pe.exercise_id] = ranked[0]

    result = adapt_session(item.exercises, zone_obj, EXERCISE_CATALOG, replacements)
    views.console.print(f"[bold]{item.title}[/bold] on {iso} at {zone_obj.name}")
    views.print_adaptation(result, EXERCISE_CATALOG)

    if not result.can_start:
        views.print_error("No exercises left for this zone. Choose substitutes or another zone.")
        raise typer.Exit(1)
    views.print_success("Session ready.")
