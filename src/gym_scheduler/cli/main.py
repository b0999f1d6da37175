"""
CLI entry point using Typer.

Provides commands for workout planning:
- init: Create the workspace
- day / calendar / plans: Show what is planned
- add-recurring / schedule / materialize / delete-recurring: Manage plans
- log: Record a completed session
- zones / check / substitutes / adapt: Fit a session to a zone
- plates: Plate calculator
"""

from .app import app
from .commands import planning, plates, zones  # noqa: F401  (registers commands)


if __name__ == "__main__":
    app()
