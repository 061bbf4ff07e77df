"""
Query helpers for the entry listing view.

Sorting is always stable: entries that share a date keep the relative order
they had in the store listing, so repeated renders never reshuffle ties.
"""

from typing import Iterable

from .models import WorkoutEntry


def normalize_query(query: str | None) -> str:
    """Trim and case-fold a free-text exercise query."""
    return (query or "").strip().casefold()


def matches_exercise(entry: WorkoutEntry, query: str | None) -> bool:
    """True if the entry's exercise contains *query*, ignoring case."""
    needle = normalize_query(query)
    return needle in entry.exercise.casefold()


def sort_newest_first(entries: Iterable[WorkoutEntry]) -> list[WorkoutEntry]:
    """Sort by date descending; equal dates keep their input order."""
    return sorted(entries, key=lambda e: e.date, reverse=True)


def sort_oldest_first(entries: Iterable[WorkoutEntry]) -> list[WorkoutEntry]:
    """Sort by date ascending; equal dates keep their input order."""
    return sorted(entries, key=lambda e: e.date)


def filter_entries(
    entries: Iterable[WorkoutEntry],
    query: str | None = None,
) -> list[WorkoutEntry]:
    """
    Select entries for the listing view.

    Args:
        entries: Store snapshot in listing order
        query: Case-insensitive substring of the exercise name; blank selects all

    Returns:
        Matching entries, newest first, ties in snapshot order
    """
    ordered = sort_newest_first(entries)
    if not normalize_query(query):
        return ordered
    return [e for e in ordered if matches_exercise(e, query)]
