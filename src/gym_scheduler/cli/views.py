"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of planning data.
"""

from datetime import datetime
from typing import Sequence

from rich.console import Console
from rich.table import Table

from ..core.catalog.base import Exercise
from ..core.config import WEEKDAY_NAMES
from ..core.equipment import find_exercise
from ..core.models import (
    AdaptationResult,
    Compatibility,
    DueItem,
    PlannedExercise,
    PlateBreakdown,
    RecurringPlan,
    Zone,
)

console = Console()

_KIND_DISPLAY: dict[str, str] = {
    "concrete": "[cyan]planned[/cyan]",
    "template": "[magenta]recurring[/magenta]",
    "completed": "[green]done[/green]",
}


def _fmt_day(iso: str) -> str:
    """Format an ISO day as '01.03(Wed)'."""
    dt = datetime.strptime(iso, "%Y-%m-%d")
    return dt.strftime("%m.%d(%a)")


def _fmt_weekdays(days: Sequence[int]) -> str:
    return ",".join(WEEKDAY_NAMES[d] for d in sorted(days))


def _exercise_name(exercise_id: str, catalog: Sequence[Exercise]) -> str:
    exercise = find_exercise(catalog, exercise_id)
    return exercise.name if exercise is not None else exercise_id


def _fmt_sets(pe: PlannedExercise) -> str:
    """Compact set summary: '3×8 @ 60.0kg', '3×10', or '—'."""
    if not pe.sets:
        return "—"
    first = pe.sets[0]
    uniform = all(s.reps == first.reps and s.weight_kg == first.weight_kg for s in pe.sets)
    if not uniform:
        return " / ".join(
            f"{s.reps}@{s.weight_kg:g}kg" if s.weight_kg > 0 else str(s.reps) for s in pe.sets
        )
    weight = f" @ {first.weight_kg:.1f}kg" if first.weight_kg > 0 else ""
    return f"{len(pe.sets)}×{first.reps}{weight}"


def print_day(day: str, items: Sequence[DueItem], catalog: Sequence[Exercise]) -> None:
    """
    Print everything due on one day, with the exercises of each item.

    Args:
        day: ISO day
        items: Projected items for the day
        catalog: Exercise catalog for display names
    """
    console.print()
    console.print(f"[bold]{_fmt_day(day)}[/bold]")
    if not items:
        console.print("[yellow]Nothing planned.[/yellow]")
        return

    for item in items:
        console.print(f"  {_KIND_DISPLAY[item.kind]}  [bold]{item.title}[/bold]  [dim]{item.item_id}[/dim]")
        for pe in item.exercises:
            note = f"  [dim]{pe.notes}[/dim]" if pe.notes else ""
            console.print(f"      {_exercise_name(pe.exercise_id, catalog)}: {_fmt_sets(pe)}{note}")
    console.print()


def format_calendar_table(days: dict[str, list[DueItem]]) -> Table:
    """
    Create a Rich table with one row per day of a projected range.

    Args:
        days: {iso_day: items} as returned by project_range

    Returns:
        Rich Table
    """
    table = Table(title="Calendar", show_header=True, header_style="bold")
    table.add_column("Day", style="cyan")
    table.add_column("Planned")
    table.add_column("Done", style="green")

    for iso, items in days.items():
        planned = [
            f"{i.title}{' ↻' if i.is_recurring else ''}" for i in items if i.is_planned
        ]
        done = [i.title for i in items if i.kind == "completed"]
        table.add_row(_fmt_day(iso), ", ".join(planned) or "-", ", ".join(done) or "-")

    return table


def format_plans_table(plans: Sequence[RecurringPlan]) -> Table:
    """Create a Rich table listing recurring plans."""
    table = Table(title="Recurring plans", show_header=True, header_style="bold")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Days")
    table.add_column("From")
    table.add_column("Until")
    table.add_column("Exercises", justify="right")

    for plan in plans:
        table.add_row(
            plan.plan_id,
            plan.title,
            _fmt_weekdays(plan.days_of_week),
            plan.start_date,
            plan.end_date or "-",
            str(len(plan.exercises)),
        )
    return table


def format_zones_table(zones: Sequence[Zone]) -> Table:
    """Create a Rich table listing zones and their inventories."""
    table = Table(title="Zones", show_header=True, header_style="bold")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Equipment")
    table.add_column("Plates (kg)")

    for zone in zones:
        plates = ", ".join(f"{p:g}" for p in zone.available_plates) if zone.available_plates else "default"
        table.add_row(zone.zone_id, zone.name, ", ".join(zone.inventory) or "-", plates)
    return table


def print_conflicts(
    zone: Zone,
    conflicts: Sequence[tuple[PlannedExercise, Compatibility]],
    catalog: Sequence[Exercise],
) -> None:
    """Print the planned exercises the zone cannot support."""
    if not conflicts:
        print_success(f"Everything in this session can be done at {zone.name}.")
        return

    table = Table(title=f"Missing equipment at {zone.name}", show_header=True, header_style="bold")
    table.add_column("Exercise", style="bold")
    table.add_column("Missing", style="red")
    for pe, result in conflicts:
        table.add_row(_exercise_name(pe.exercise_id, catalog), ", ".join(result.missing))
    console.print(table)


def format_substitutes_table(original: Exercise, candidates: Sequence[Exercise], zone: Zone) -> Table:
    """Create a Rich table of ranked substitutes."""
    table = Table(
        title=f"Substitutes for {original.name} at {zone.name}",
        show_header=True,
        header_style="bold",
    )
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", style="dim")
    table.add_column("Exercise", style="bold")
    table.add_column("Shared muscles")
    table.add_column("Score", justify="right", style="cyan")

    for rank, e in enumerate(candidates, 1):
        shared = [m for m in e.primary_muscles if m in original.primary_muscles]
        table.add_row(str(rank), e.exercise_id, e.name, ", ".join(shared), f"{e.effective_score:g}")
    return table


def print_adaptation(result: AdaptationResult, catalog: Sequence[Exercise]) -> None:
    """Print the adapted session and what was dropped or replaced."""
    table = Table(title="Adapted session", show_header=True, header_style="bold")
    table.add_column("Exercise", style="bold")
    table.add_column("Sets")
    table.add_column("Notes", style="dim")
    for pe in result.final_exercises:
        table.add_row(_exercise_name(pe.exercise_id, catalog), _fmt_sets(pe), pe.notes or "")
    if result.final_exercises:
        console.print(table)

    if result.replaced_count:
        print_info(f"Replaced: {result.replaced_count}")
    if result.dropped_count:
        print_warning(f"Dropped (no replacement chosen): {result.dropped_count}")


def print_plates(breakdown: PlateBreakdown) -> None:
    """Print a per-side plate breakdown."""
    if breakdown.status == "under_bar":
        print_error(
            f"{breakdown.total_kg:g} kg is less than the bar ({breakdown.bar_weight_kg:g} kg)."
        )
        return
    if breakdown.status == "bar_only":
        console.print(f"Bar only ({breakdown.bar_weight_kg:g} kg).")
        return

    console.print(
        f"Plates per side ({breakdown.plate_count} plates, {breakdown.bar_weight_kg:g} kg bar):"
    )
    for p in breakdown.plates:
        console.print(f"  [bold]{p.count}[/bold] × {p.weight_kg:g} kg")
    if breakdown.remainder_kg > 0:
        print_warning(
            f"{breakdown.remainder_kg:g} kg per side cannot be loaded with these plates; "
            f"bar will hold {breakdown.loaded_total_kg:g} kg."
        )


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} \\[y/N]: ")
    return response.lower() in ("y", "yes")
