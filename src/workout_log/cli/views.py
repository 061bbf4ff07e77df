"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of entries and trend charts.
"""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.ascii_plot import create_series_chart
from ..core.config import ONE_RM_DECIMALS, VOLUME_DECIMALS
from ..core.models import Aggregation, WorkoutEntry

console = Console()


def _fmt_weight(weight_kg: float) -> str:
    """82.0 -> '82', 82.5 -> '82.5'."""
    return f"{weight_kg:g}"


def format_entries_table(entries: list[WorkoutEntry], title: str | None = None) -> Table:
    """
    Format entries as a Rich table.

    Args:
        entries: Entries in display order
        title: Optional table title

    Returns:
        Rich Table object
    """
    table = Table(title=title, show_header=True, header_style="bold")

    table.add_column("ID", justify="right", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Exercise", style="magenta")
    table.add_column("Weight kg", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("Sets", justify="right")
    table.add_column("Volume", justify="right", style="bold")
    table.add_column("e1RM", justify="right", style="green")
    table.add_column("Notes", overflow="fold")

    for entry in entries:
        table.add_row(
            str(entry.id),
            entry.date,
            escape(entry.exercise),
            _fmt_weight(entry.weight_kg),
            str(entry.reps),
            str(entry.sets),
            f"{entry.volume:.{VOLUME_DECIMALS}f}",
            f"{entry.estimated_one_rep_max:.{ONE_RM_DECIMALS}f}",
            escape(entry.notes),
        )

    return table


def print_entries(entries: list[WorkoutEntry], query: str | None = None) -> None:
    """
    Print the entry listing.

    Args:
        entries: Entries already filtered and sorted newest first
        query: Active exercise filter, shown in the title
    """
    if not entries:
        if query:
            print_info(f"No entries match '{query}'.")
        else:
            print_info("No entries yet. Use 'add' to record one.")
        return

    title = f"Workout Log (filter: {escape(query)})" if query else "Workout Log"
    console.print(format_entries_table(entries, title=title))


def print_entry(entry: WorkoutEntry) -> None:
    """Print a single entry as a one-row table."""
    console.print(format_entries_table([entry]))


def print_exercises(exercises: list[str]) -> None:
    """Print the exercise catalog, one per line."""
    if not exercises:
        print_info("No exercises recorded yet.")
        return
    console.print("[bold]Exercises[/bold]")
    for name in exercises:
        console.print(f"  {escape(name)}")


def print_charts(
    aggregation: Aggregation,
    exercise: str | None,
    last_n: int | None = None,
) -> None:
    """
    Print daily volume and, when an exercise is selected, its progress charts.

    Args:
        aggregation: Output of aggregate()
        exercise: Catalog name of the selected exercise, or None
        last_n: Only show the most recent N dates per chart
    """
    if not aggregation.daily_volume:
        print_info("No entries to chart.")
        return

    console.print()
    console.print(escape(create_series_chart(
        aggregation.daily_volume, "Daily Volume (kg)", last_n, decimals=VOLUME_DECIMALS,
    )))

    if exercise is None:
        return

    series = aggregation.per_exercise[exercise]
    console.print()
    console.print(escape(create_series_chart(
        series.max_weight_by_date, f"{exercise} Max Weight (kg)", last_n,
    )))
    console.print()
    console.print(escape(create_series_chart(
        series.max_one_rep_max_by_date, f"{exercise} Estimated 1RM (kg)", last_n,
        decimals=ONE_RM_DECIMALS,
    )))


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{escape(message)}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {escape(message)}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {escape(message)}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{escape(message)}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{escape(message)} \\[y/N]: ")
    return response.lower() in ("y", "yes")
