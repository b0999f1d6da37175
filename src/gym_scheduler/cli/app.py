"""Shared Typer app object, shared option types, and store utilities."""

import uuid
from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.models import RecurringPlan, ScheduledActivity, WorkoutSession
from ..io.serializers import ValidationError, validate_date
from ..io.workspace_store import WorkspaceStore, get_default_data_dir
from . import views

# Shared --data-dir option type used across all commands
DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", "-d", help="Workspace directory (default: ~/.gym-scheduler)"),
]

DateOption = Annotated[
    Optional[str],
    typer.Option("--date", help="Day (YYYY-MM-DD, default: today)"),
]

app = typer.Typer(
    name="gym-scheduler",
    help="Recurring workout planner with zone-aware session adaptation and plate math.",
    no_args_is_help=True,
)


def get_store(data_dir: Path | None) -> WorkspaceStore:
    """Get workspace store from path or default location."""
    if data_dir is None:
        data_dir = get_default_data_dir()
    return WorkspaceStore(data_dir)


def today_iso() -> str:
    return datetime.now().strftime("%Y-%m-%d")


def new_id(prefix: str, taken: set[str]) -> str:
    """Random short id with the given prefix that isn't in ``taken``."""
    while True:
        candidate = f"{prefix}-{uuid.uuid4().hex[:8]}"
        if candidate not in taken:
            return candidate


def resolve_date(value: str | None) -> str:
    """Validate a date option or fall back to today; exit 1 on a bad date."""
    if value is None:
        return today_iso()
    try:
        return validate_date(value)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def load_workspace(
    store: WorkspaceStore,
) -> tuple[list[RecurringPlan], list[ScheduledActivity], list[WorkoutSession]]:
    """
    Load plans, activities and history for a command.

    Prints an error and exits with code 1 if the workspace is missing or
    holds a malformed record.
    """
    if not store.exists():
        views.print_error(f"Workspace not found: {store.data_dir}")
        views.print_info("Run 'init' first.")
        raise typer.Exit(1)
    try:
        return (
            store.load_recurring_plans(),
            store.load_scheduled_activities(),
            store.load_history(),
        )
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
