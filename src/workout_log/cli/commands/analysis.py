"""Analysis commands: chart."""

import json
from typing import Annotated, Optional

import typer

from ...core.aggregation import aggregate, exercise_group_key
from ...core.models import Aggregation
from ...io.serializers import ValidationError
from .. import views
from ..app import DataPathOption, JsonOption, app, get_store, run


def _resolve_exercise(aggregation: Aggregation, requested: str | None) -> str | None:
    """
    Match a requested exercise against the catalog, ignoring case.

    With no request the first catalog entry is used, as the chart selector
    defaults to it.

    Raises:
        KeyError: If the request matches nothing
    """
    if not aggregation.exercises:
        return None
    if requested is None:
        return aggregation.exercises[0]
    wanted = exercise_group_key(requested)
    for name in aggregation.exercises:
        if exercise_group_key(name) == wanted:
            return name
    raise KeyError(requested)


@app.command()
def chart(
    exercise: Annotated[
        Optional[str],
        typer.Option("--exercise", "-e", help="Exercise to chart (default: first alphabetically)"),
    ] = None,
    days: Annotated[
        Optional[int],
        typer.Option("--days", "-n", help="Only chart the most recent N training days"),
    ] = None,
    data_path: DataPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show daily volume and per-exercise max weight / estimated 1RM charts.
    """
    store = get_store(data_path)

    if not store.exists():
        views.print_error(f"Entries file not found: {store.data_path}")
        views.print_info("Run 'init' first to create it.")
        raise typer.Exit(1)

    try:
        aggregation = aggregate(run(store.list()))
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps(aggregation.to_dict(), indent=2, ensure_ascii=False))
        return

    try:
        selected = _resolve_exercise(aggregation, exercise)
    except KeyError:
        views.print_error(f"Unknown exercise: {exercise}")
        if aggregation.exercises:
            views.print_info(f"Known exercises: {', '.join(aggregation.exercises)}")
        raise typer.Exit(1)

    views.print_charts(aggregation, selected, last_n=days)
