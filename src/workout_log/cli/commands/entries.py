"""Entry commands: init, add, edit, delete, list, exercises, and helpers."""

import json
from datetime import datetime
from typing import Annotated, Any, Callable, Optional

import typer
from rich.markup import escape

from ...core.aggregation import aggregate
from ...core.config import DATE_FORMAT
from ...core.listing import filter_entries
from ...core.models import WorkoutEntry
from ...io.entry_store import EntryStore, NotFoundError
from ...io.serializers import (
    ValidationError,
    entry_to_dict,
    parse_integer,
    parse_number,
    validate_date,
    validate_exercise,
    validate_non_negative,
    validate_positive,
)
from .. import views
from ..app import DataPathOption, JsonOption, app, get_store, run


def _parse_weight(raw: str) -> float:
    return validate_non_negative(parse_number(raw, "weight"), "weight")


def _parse_count(name: str) -> Callable[[str], int]:
    def parse(raw: str) -> int:
        return validate_positive(parse_integer(raw, name), name)
    return parse


# (record key, prompt label, parser) for the fields an entry cannot do without
_REQUIRED_FIELDS: list[tuple[str, str, Callable[[str], Any]]] = [
    ("exercise", "Exercise", validate_exercise),
    ("weightKg", "Weight kg", _parse_weight),
    ("reps", "Reps", _parse_count("reps")),
    ("sets", "Sets", _parse_count("sets")),
]


def _prompt(label: str, parse: Callable[[str], Any], default: Any = None) -> Any:
    """Prompt until *parse* accepts the input; Enter takes the default."""
    hint = escape(f" [{default}]") if default not in (None, "") else ""
    while True:
        raw = views.console.input(f"{label}{hint}: ").strip()
        if not raw and default not in (None, ""):
            raw = str(default)
        try:
            return parse(raw)
        except ValidationError as e:
            views.print_error(str(e))


def _prompt_required(fields: dict[str, Any]) -> dict[str, Any]:
    """Prompt for each required field that is still None."""
    for key, label, parse in _REQUIRED_FIELDS:
        if fields.get(key) is None:
            fields[key] = _prompt(label, parse)
    return fields


def _prompt_fields(current: WorkoutEntry | None = None) -> dict[str, Any]:
    """Interactive step-by-step entry; *current* pre-fills the defaults."""
    today = datetime.now().strftime(DATE_FORMAT)
    defaults = {
        "exercise": current.exercise if current else None,
        "weightKg": f"{current.weight_kg:g}" if current else None,
        "reps": current.reps if current else None,
        "sets": current.sets if current else None,
    }
    fields: dict[str, Any] = {
        "date": _prompt("Date", validate_date, current.date if current else today),
    }
    for key, label, parse in _REQUIRED_FIELDS:
        fields[key] = _prompt(label, parse, defaults[key])
    notes_hint = escape(f" [{current.notes}]") if current and current.notes else ""
    raw_notes = views.console.input(f"[dim]Notes{notes_hint} (optional, Enter to skip): [/dim]").strip()
    fields["notes"] = raw_notes or (current.notes if current else "")
    return fields


def _require_store(data_path) -> EntryStore:
    store = get_store(data_path)
    if not store.exists():
        views.print_error(f"Entries file not found: {store.data_path}")
        views.print_info("Run 'init' first to create it.")
        raise typer.Exit(1)
    return store


@app.command()
def init(data_path: DataPathOption = None) -> None:
    """
    Create an empty entries file.
    """
    store = get_store(data_path)
    if store.exists():
        views.print_info(f"Entries file already exists: {store.data_path}")
        return
    store.init()
    views.print_success(f"Created {store.data_path}")


@app.command()
def add(
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Workout date (YYYY-MM-DD, default: today)"),
    ] = None,
    exercise: Annotated[
        Optional[str],
        typer.Option("--exercise", "-e", help="Exercise name, e.g. Squat"),
    ] = None,
    weight_kg: Annotated[
        Optional[float],
        typer.Option("--weight", "-w", help="Weight in kg"),
    ] = None,
    reps: Annotated[
        Optional[int],
        typer.Option("--reps", "-r", help="Reps per set"),
    ] = None,
    sets: Annotated[
        Optional[int],
        typer.Option("--sets", "-s", help="Number of sets"),
    ] = None,
    notes: Annotated[
        Optional[str],
        typer.Option("--notes", "-n", help="Free-text notes"),
    ] = None,
    data_path: DataPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Record a workout entry.

    Run without options for interactive step-by-step entry; any of
    exercise, weight, reps or sets left out is asked for.  Or supply all of
    them for one-liner use:

      workout-log add --date 2024-01-01 --exercise Squat --weight 100 --reps 5 --sets 3
    """
    store = _require_store(data_path)

    if exercise is None and weight_kg is None and reps is None and sets is None:
        fields = _prompt_fields()
        if date is not None:
            fields["date"] = date
        if notes is not None:
            fields["notes"] = notes
    else:
        fields = {
            "date": date or datetime.now().strftime(DATE_FORMAT),
            "exercise": exercise,
            "weightKg": weight_kg,
            "reps": reps,
            "sets": sets,
            "notes": notes or "",
        }
        fields = _prompt_required(fields)

    try:
        entry = run(store.add(fields))
    except ValidationError as e:
        views.print_error(f"Invalid entry: {e}")
        raise typer.Exit(1)

    if json_out:
        print(json.dumps(entry_to_dict(entry), indent=2, ensure_ascii=False))
        return

    views.print_success(f"Saved entry #{entry.id}: {entry.exercise} on {entry.date}")
    views.print_info(
        f"Volume: {entry.volume:.0f} kg  e1RM: {entry.estimated_one_rep_max:.1f} kg"
    )


@app.command()
def edit(
    entry_id: Annotated[int, typer.Argument(help="Entry ID (see ID column in list)")],
    date: Annotated[Optional[str], typer.Option("--date", "-d", help="New date")] = None,
    exercise: Annotated[Optional[str], typer.Option("--exercise", "-e", help="New exercise")] = None,
    weight_kg: Annotated[Optional[float], typer.Option("--weight", "-w", help="New weight in kg")] = None,
    reps: Annotated[Optional[int], typer.Option("--reps", "-r", help="New reps")] = None,
    sets: Annotated[Optional[int], typer.Option("--sets", "-s", help="New sets")] = None,
    notes: Annotated[Optional[str], typer.Option("--notes", "-n", help="New notes")] = None,
    data_path: DataPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Change an existing entry.

    Options you leave out keep their current value.  With no options at
    all, prompts for each field with the current value as default.
    """
    store = _require_store(data_path)

    try:
        current = run(store.get(entry_id))
        if current is None:
            raise NotFoundError(entry_id)

        if all(v is None for v in (date, exercise, weight_kg, reps, sets, notes)):
            fields = _prompt_fields(current)
        else:
            fields = entry_to_dict(current)
            overrides = {
                "date": date, "exercise": exercise, "weightKg": weight_kg,
                "reps": reps, "sets": sets, "notes": notes,
            }
            fields.update({k: v for k, v in overrides.items() if v is not None})

        entry = run(store.update(entry_id, fields))
    except NotFoundError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    except ValidationError as e:
        views.print_error(f"Invalid entry: {e}")
        raise typer.Exit(1)

    if json_out:
        print(json.dumps(entry_to_dict(entry), indent=2, ensure_ascii=False))
        return

    views.print_success(f"Updated entry #{entry.id}")
    views.print_entry(entry)


@app.command()
def delete(
    entry_id: Annotated[int, typer.Argument(help="Entry ID (see ID column in list)")],
    data_path: DataPathOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
) -> None:
    """
    Remove an entry by its ID.

    Deleting an ID that no longer exists is not an error.
    """
    store = _require_store(data_path)

    try:
        target = run(store.get(entry_id))
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if target is None:
        views.print_info(f"No entry #{entry_id}; nothing to delete.")
        return

    views.console.print(
        f"Entry to delete: [bold]{target.date}[/bold] {escape(target.exercise)} "
        f"{target.weight_kg:g} kg × {target.reps} × {target.sets}"
    )

    if not force and not views.confirm_action("Delete this entry?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    run(store.delete(entry_id))
    views.print_success(f"Deleted entry #{entry_id}")


@app.command("list")
def list_entries(
    query: Annotated[
        Optional[str],
        typer.Option("--filter", "-f", help="Only exercises containing this text (case-insensitive)"),
    ] = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-l", min=1, help="Show at most this many (newest first)"),
    ] = None,
    data_path: DataPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show entries newest first, optionally filtered by exercise.
    """
    store = _require_store(data_path)

    try:
        entries = filter_entries(run(store.list()), query)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if limit is not None:
        entries = entries[:limit]

    if json_out:
        output = []
        for e in entries:
            record = entry_to_dict(e)
            record["volume"] = e.volume
            record["estimatedOneRepMax"] = round(e.estimated_one_rep_max, 2)
            output.append(record)
        print(json.dumps(output, indent=2, ensure_ascii=False))
        return

    views.print_entries(entries, query)


@app.command()
def exercises(
    data_path: DataPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    List distinct exercise names in alphabetical (collation) order.
    """
    store = _require_store(data_path)

    try:
        catalog = aggregate(run(store.list())).exercises
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps(catalog, ensure_ascii=False))
        return

    views.print_exercises(catalog)
