"""
JSONL-based storage for workout entries.

Handles reading, writing, and identity management for the entries file.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from ..core.config import (
    DATA_PATH_ENV_VAR,
    DEFAULT_DATA_FILENAME,
    FIRST_ENTRY_ID,
    META_RECORD_TYPE,
)
from ..core.engine.config_loader import get_data_dir, load_settings
from ..core.models import WorkoutEntry
from .serializers import (
    EntryInput,
    ValidationError,
    coerce_entry,
    dict_to_entry,
    entry_to_json_line,
)

logger = logging.getLogger(__name__)


class NotFoundError(Exception):
    """Raised when an operation targets an id with no live entry."""

    def __init__(self, entry_id: int):
        super().__init__(f"No entry with id {entry_id}")
        self.entry_id = entry_id


class StoreTransaction:
    """
    In-memory view of the store while a transaction holds the write lock.

    Methods apply immediately to the store's working copy; EntryStore writes
    the result once when the transaction block exits cleanly and restores
    the previous state otherwise.  Input must already be validated.
    """

    def __init__(self, store: EntryStore):
        self._store = store

    def get(self, entry_id: int) -> WorkoutEntry | None:
        return self._store._entries.get(entry_id)

    def add(self, entry: WorkoutEntry) -> WorkoutEntry:
        """Insert with a freshly allocated id."""
        stored = entry.with_id(self._store._allocate_id())
        self._store._entries[stored.id] = stored
        logger.debug("Assigned id %d to %s on %s", stored.id, stored.exercise, stored.date)
        return stored

    def put(self, entry: WorkoutEntry) -> WorkoutEntry:
        """Insert or overwrite at the entry's explicit id."""
        if entry.id is None:
            raise ValidationError("put requires an entry with an id")
        self._store._entries[entry.id] = entry
        self._store._next_id = max(self._store._next_id, entry.id + 1)
        return entry

    def update(self, entry_id: int, entry: WorkoutEntry) -> WorkoutEntry:
        """Replace all fields of an existing entry, keeping its id."""
        if entry_id not in self._store._entries:
            raise NotFoundError(entry_id)
        stored = entry.with_id(entry_id)
        self._store._entries[entry_id] = stored
        return stored

    def delete(self, entry_id: int) -> bool:
        """Remove if present; return whether anything was removed."""
        return self._store._entries.pop(entry_id, None) is not None


class EntryStore:
    """
    Manages workout entries stored in JSONL format.

    The file contains one JSON object per line:
    - First line: metadata record with type="meta" holding the id counter
    - Subsequent lines: entry records in exchange format, id included

    Mutations are serialized by an asyncio lock and each one rewrites the
    file atomically (temp file + rename), so readers never see a torn write.
    Ids come from a monotonic counter persisted in the metadata record and
    are never handed out twice, even after the entry is deleted.
    """

    def __init__(self, data_path: str | Path):
        """
        Initialize the entry store.

        Args:
            data_path: Path to the JSONL entries file
        """
        self.data_path = Path(data_path)
        self._lock = asyncio.Lock()
        self._entries: dict[int, WorkoutEntry] = {}
        self._next_id = FIRST_ENTRY_ID
        self._loaded = False

    def exists(self) -> bool:
        """Check if the entries file exists."""
        return self.data_path.exists()

    def init(self) -> None:
        """
        Initialize empty entries file if it doesn't exist.

        Creates parent directories if needed.
        """
        self.data_path.parent.mkdir(parents=True, exist_ok=True)

        if not self.data_path.exists():
            self._write_file({}, FIRST_ENTRY_ID)
            logger.info("Created entries file %s", self.data_path)

    # ------------------------------------------------------------------
    # File I/O (blocking; run in a worker thread)
    # ------------------------------------------------------------------

    def _read_file(self) -> tuple[dict[int, WorkoutEntry], int]:
        """
        Parse the entries file.

        Returns:
            (entries by id in file order, next id)

        Raises:
            ValidationError: If a line is malformed or an id repeats
        """
        entries: dict[int, WorkoutEntry] = {}
        next_id = FIRST_ENTRY_ID

        if not self.data_path.exists():
            return entries, next_id

        with open(self.data_path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue

                try:
                    data = json.loads(line)

                    if isinstance(data, dict) and data.get("type") == META_RECORD_TYPE:
                        next_id = max(next_id, int(data.get("next_id", FIRST_ENTRY_ID)))
                        continue

                    entry = dict_to_entry(data)
                    if entry.id is None:
                        raise ValidationError("stored entry has no id")
                    if entry.id in entries:
                        raise ValidationError(f"duplicate id {entry.id}")
                    entries[entry.id] = entry

                except (TypeError, ValueError, OverflowError, ValidationError) as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {self.data_path}: {e}"
                    ) from e

        if entries:
            next_id = max(next_id, max(entries) + 1)
        return entries, next_id

    def _write_file(self, entries: dict[int, WorkoutEntry], next_id: int) -> None:
        """
        Write all entries, replacing the file atomically.

        Args:
            entries: Entries to write, in listing order
            next_id: Id counter to persist
        """
        self.data_path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.data_path.with_suffix(self.data_path.suffix + ".tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                f.write(json.dumps({"type": META_RECORD_TYPE, "next_id": next_id}) + "\n")
                for entry in entries.values():
                    f.write(entry_to_json_line(entry) + "\n")
            os.replace(tmp, self.data_path)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise

    async def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        self._entries, self._next_id = await asyncio.to_thread(self._read_file)
        self._loaded = True
        logger.debug("Loaded %d entries from %s", len(self._entries), self.data_path)

    def _allocate_id(self) -> int:
        entry_id = self._next_id
        self._next_id += 1
        return entry_id

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[StoreTransaction]:
        """
        Group several writes into one all-or-nothing unit.

        Holds the write lock for the whole block.  On clean exit the new
        state is written once; if the block or the write raises, the
        in-memory state is rolled back and the file is left untouched.

        Usage:
            async with store.transaction() as tx:
                tx.put(entry_a)
                tx.add(entry_b)
        """
        async with self._lock:
            await self._ensure_loaded()
            saved_entries = dict(self._entries)
            saved_next_id = self._next_id
            try:
                yield StoreTransaction(self)
                await asyncio.to_thread(self._write_file, dict(self._entries), self._next_id)
            except BaseException:
                self._entries = saved_entries
                self._next_id = saved_next_id
                raise

    async def add(self, entry: EntryInput) -> WorkoutEntry:
        """
        Validate and insert a new entry under a fresh id.

        Any id on the input is ignored.

        Raises:
            ValidationError: If any field is invalid (nothing is written)
        """
        validated = coerce_entry(entry)
        async with self.transaction() as tx:
            stored = tx.add(validated)
        logger.info("Added entry %d (%s, %s)", stored.id, stored.exercise, stored.date)
        return stored

    async def update(self, entry_id: int, entry: EntryInput) -> WorkoutEntry:
        """
        Replace every field of an existing entry; the id stays the same.

        Raises:
            ValidationError: If any field is invalid (prior value kept)
            NotFoundError: If no entry has this id
        """
        validated = coerce_entry(entry)
        async with self.transaction() as tx:
            stored = tx.update(entry_id, validated)
        logger.info("Updated entry %d", entry_id)
        return stored

    async def put(self, entry: EntryInput) -> WorkoutEntry:
        """
        Upsert an entry at its explicit id.

        Raises:
            ValidationError: If fields are invalid or the id is missing
        """
        validated = coerce_entry(entry)
        if validated.id is None:
            raise ValidationError("put requires an entry with an id")
        async with self.transaction() as tx:
            stored = tx.put(validated)
        return stored

    async def delete(self, entry_id: int) -> None:
        """Remove an entry; unknown ids are ignored."""
        async with self._lock:
            await self._ensure_loaded()
            if entry_id not in self._entries:
                logger.debug("Delete of unknown id %d ignored", entry_id)
                return
        async with self.transaction() as tx:
            tx.delete(entry_id)
        logger.info("Deleted entry %d", entry_id)

    async def get(self, entry_id: int) -> WorkoutEntry | None:
        """Return the entry with this id, or None."""
        async with self._lock:
            await self._ensure_loaded()
            return self._entries.get(entry_id)

    async def list(self) -> list[WorkoutEntry]:
        """
        Return all live entries.

        The order is storage order; sort explicitly when order matters.
        """
        async with self._lock:
            await self._ensure_loaded()
            return list(self._entries.values())

    async def clear(self) -> None:
        """
        Remove all entries (dangerous - use with caution).

        The id counter is kept, so cleared ids are not reissued.
        """
        async with self.transaction():
            self._entries.clear()


def get_default_data_path() -> Path:
    """
    Resolve the entries file location.

    Order: WORKOUT_LOG_DATA environment variable, then ``data_path`` in
    settings, then ~/.workout-log/entries.jsonl.

    Returns:
        Default entries path
    """
    env_path = os.environ.get(DATA_PATH_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()

    configured = load_settings().get("data_path")
    if configured:
        return Path(str(configured)).expanduser()

    return get_data_dir() / DEFAULT_DATA_FILENAME


def get_default_store() -> EntryStore:
    """
    Get an EntryStore with the default path.

    Returns:
        EntryStore instance
    """
    return EntryStore(get_default_data_path())
