"""Plate calculator command."""

from typing import Annotated, Optional

import typer

from ...core.engine.config_loader import load_engine_settings
from ...core.plates import allocate, denominations_for_zone
from ...io.serializers import ValidationError
from .. import views
from ..app import DataDirOption, app, get_store


@app.command()
def plates(
    total: Annotated[float, typer.Argument(help="Target weight including the bar (kg)")],
    bar: Annotated[
        Optional[float],
        typer.Option("--bar", "-b", help="Bar weight in kg (default from settings: 20)"),
    ] = None,
    zone: Annotated[
        Optional[str],
        typer.Option("--zone", "-z", help="Use the plate set of this zone"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Show which plates to load on each side of the bar.

    Example:
        gym-scheduler plates 102.5
    """
    settings = load_engine_settings()
    bar_weight = settings.bar_weight_kg if bar is None else bar

    zone_obj = None
    if zone is not None:
        store = get_store(data_dir)
        try:
            zone_obj = store.find_zone(zone)
        except (FileNotFoundError, ValidationError) as e:
            views.print_error(str(e))
            raise typer.Exit(1)
        if zone_obj is None:
            views.print_error(f"Unknown zone: {zone}")
            raise typer.Exit(1)

    try:
        breakdown = allocate(total, bar_weight, denominations_for_zone(zone_obj, settings.plates_kg))
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_plates(breakdown)
    if breakdown.status == "under_bar":
        raise typer.Exit(1)
