"""Backup commands: export, import."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ...io.backup import (
    ImportFormatError,
    default_export_filename,
    export_document,
    export_to_file,
    import_from_file,
)
from ...io.serializers import ValidationError
from .. import views
from ..app import DataPathOption, app, get_store, run


@app.command()
def export(
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Destination file ('-' for stdout, default: workouts_<today>.json)"),
    ] = None,
    data_path: DataPathOption = None,
) -> None:
    """
    Write every entry (ids included) to a JSON backup file.
    """
    store = get_store(data_path)

    try:
        if output is not None and str(output) == "-":
            print(run(export_document(store)))
            return

        target = output or Path(default_export_filename())
        count = run(export_to_file(store, target))
    except (OSError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Exported {count} entries to {target}")


@app.command("import")
def import_backup(
    source: Annotated[Path, typer.Argument(help="Backup JSON file to restore")],
    data_path: DataPathOption = None,
) -> None:
    """
    Restore entries from a JSON backup.

    Records with an id replace the entry with that id (or are inserted at
    it); records without an id are added as new entries.  If any record is
    invalid nothing is imported.
    """
    store = get_store(data_path)

    try:
        summary = run(import_from_file(store, source))
    except ImportFormatError as e:
        views.print_error(f"Import rejected, no changes made. {e}")
        raise typer.Exit(1)
    except (OSError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(
        f"Imported {summary.total} entries ({summary.inserted} new, {summary.updated} updated)"
    )
    if summary.updated:
        views.print_warning(f"{summary.updated} existing entries were overwritten by id.")
