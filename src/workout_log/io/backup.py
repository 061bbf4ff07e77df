"""
Backup exchange: export the full store to a JSON document and restore it.

Import is all-or-nothing.  Every record is parsed and validated before the
store is touched, and the writes themselves run inside one store
transaction.
"""

import json
import logging
from datetime import date as _date
from pathlib import Path
from typing import Any

from ..core.config import EXPORT_FILENAME_TEMPLATE, EXPORT_INDENT
from ..core.models import ImportSummary, WorkoutEntry
from .entry_store import EntryStore
from .serializers import ValidationError, dict_to_entry, entry_to_dict

logger = logging.getLogger(__name__)


class ImportFormatError(Exception):
    """Raised when a backup document cannot be parsed or a record is invalid."""

    pass


def default_export_filename(today: _date | None = None) -> str:
    """Return ``workouts_YYYY-MM-DD.json`` for the given (default: current) day."""
    today = today or _date.today()
    return EXPORT_FILENAME_TEMPLATE.format(date=today.isoformat())


def entries_to_document(entries: list[WorkoutEntry]) -> str:
    """
    Serialize entries to the exchange document.

    Args:
        entries: Entries in the order they should appear

    Returns:
        Pretty-printed JSON array, ids included
    """
    records = [entry_to_dict(e) for e in entries]
    return json.dumps(records, indent=EXPORT_INDENT, ensure_ascii=False)


def parse_document(text: str | bytes) -> list[WorkoutEntry]:
    """
    Parse and validate every record of an exchange document.

    Args:
        text: Raw document contents

    Returns:
        Validated entries; id is None for records without one

    Raises:
        ImportFormatError: On invalid JSON, a non-array document, or the
            first record that fails validation
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ImportFormatError(f"Backup is not UTF-8 text: {e}") from e

    try:
        data: Any = json.loads(text)
    except ValueError as e:
        # JSONDecodeError, or an integer literal past the int digit limit
        raise ImportFormatError(f"Invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise ImportFormatError(
            f"Backup must be a JSON array of records, got {type(data).__name__}"
        )

    entries: list[WorkoutEntry] = []
    for index, record in enumerate(data, 1):
        try:
            entries.append(dict_to_entry(record))
        except ValidationError as e:
            raise ImportFormatError(f"Record {index}: {e}") from e
    return entries


async def export_document(store: EntryStore) -> str:
    """
    Export every live entry in store listing order.

    Args:
        store: Source store

    Returns:
        Exchange document text
    """
    entries = await store.list()
    logger.info("Exporting %d entries", len(entries))
    return entries_to_document(entries)


async def export_to_file(store: EntryStore, path: str | Path) -> int:
    """
    Write the exchange document to *path*.

    Returns:
        Number of entries written
    """
    entries = await store.list()
    Path(path).write_text(entries_to_document(entries) + "\n", encoding="utf-8")
    return len(entries)


async def import_document(store: EntryStore, text: str | bytes) -> ImportSummary:
    """
    Restore a backup into *store*.

    Records with an id overwrite the entry at that id or are inserted
    there; records without one are added under fresh ids.

    Args:
        store: Target store
        text: Exchange document contents

    Returns:
        ImportSummary with inserted/updated counts

    Raises:
        ImportFormatError: If anything in the document is invalid; the
            store is left unchanged
    """
    entries = parse_document(text)
    summary = ImportSummary()

    async with store.transaction() as tx:
        for entry in entries:
            if entry.id is None:
                tx.add(entry)
                summary.inserted += 1
            elif tx.get(entry.id) is None:
                tx.put(entry)
                summary.inserted += 1
            else:
                tx.put(entry)
                summary.updated += 1

    logger.info("Imported %d entries (%d new, %d updated)",
                summary.total, summary.inserted, summary.updated)
    return summary


async def import_from_file(store: EntryStore, path: str | Path) -> ImportSummary:
    """
    Read *path* and restore it with import_document.

    Raises:
        ImportFormatError: If the file content is invalid
        OSError: If the file cannot be read
    """
    return await import_document(store, Path(path).read_bytes())
