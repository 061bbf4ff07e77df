"""
CLI entry point using Typer.

Provides commands for the workout log:
- init: Create the entries file
- add / edit / delete: Manage entries
- list: Show entries, newest first, with an exercise filter
- exercises: Show the exercise catalog
- chart: Daily volume and per-exercise progress charts
- export / import: JSON backup and restore
"""

from typing import Annotated

import typer

from . import views
from .app import app, configure_logging
from .commands import analysis, backup, entries  # noqa: F401  (registers commands)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """
    Workout log. Run without a command for interactive mode.
    """
    configure_logging(verbose)

    if ctx.invoked_subcommand is not None:
        return  # A sub-command was given; let it handle things

    # ── Interactive main menu ───────────────────────────────────────────────
    views.console.print()
    views.console.print("[bold cyan]workout-log[/bold cyan]: sets, reps and trends")
    views.console.print()

    menu = {
        "1": ("add",       "Record an entry"),
        "2": ("list",      "Show entries"),
        "3": ("chart",     "Progress charts"),
        "4": ("exercises", "Exercise list"),
        "5": ("export",    "Export backup"),
        "0": ("quit",      "Quit"),
    }

    for key, (_, desc) in menu.items():
        views.console.print(f"  \\[{key}] {desc}")

    views.console.print()
    choice = views.console.input("Choose [1]: ").strip() or "1"

    if choice == "0":
        raise typer.Exit(0)

    chosen = {k: v[0] for k, v in menu.items()}.get(choice)

    if chosen is None:
        views.print_error(f"Unknown choice: {choice}")
        raise typer.Exit(1)

    if chosen == "add":
        ctx.invoke(entries.add)
    elif chosen == "list":
        ctx.invoke(entries.list_entries)
    elif chosen == "chart":
        ctx.invoke(analysis.chart)
    elif chosen == "exercises":
        ctx.invoke(entries.exercises)
    elif chosen == "export":
        ctx.invoke(backup.export)


if __name__ == "__main__":
    app()
