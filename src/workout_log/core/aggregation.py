"""
Aggregation engine: entries -> chart-ready time series.

Everything here is a pure function of its input.  No state survives between
calls, so the same entries (in any order) always produce the same series.
"""

import math
import unicodedata
from functools import lru_cache
from typing import Iterable, Mapping

from pyuca import Collator

from .listing import sort_oldest_first
from .models import Aggregation, ExerciseSeries, WorkoutEntry


@lru_cache(maxsize=1)
def _collator() -> Collator:
    # Loads the DUCET table once per process
    return Collator()


def collation_key(name: str) -> tuple[tuple[int, ...], str]:
    """
    Sort key for exercise names following the Unicode Collation Algorithm.

    Letters compare by base letter first, then accents, then case with
    lowercase first.  Hiragana and katakana of the same sound share a base
    weight, so Japanese names sort by reading rather than by script.  The
    raw name breaks any remaining tie.

    Args:
        name: Exercise label

    Returns:
        Tuple usable as a ``sorted`` key
    """
    return (_collator().sort_key(unicodedata.normalize("NFC", name)), name)


def exercise_group_key(name: str) -> str:
    """Identity used to group labels that differ only in case or padding."""
    return unicodedata.normalize("NFKC", name.strip()).casefold()


def sort_exercise_names(names: Iterable[str]) -> list[str]:
    """Return distinct names in collation order."""
    return sorted(set(names), key=collation_key)


def daily_total_volume(entries: Iterable[WorkoutEntry]) -> dict[str, float]:
    """
    Sum entry volume per date.

    Uses math.fsum, so the totals are exact-rounded and do not depend on
    the order of same-date entries.

    Args:
        entries: Entries in ascending date order

    Returns:
        date -> total volume, keys in input order
    """
    volumes: dict[str, list[float]] = {}
    for entry in entries:
        volumes.setdefault(entry.date, []).append(entry.volume)
    return {day: math.fsum(parts) for day, parts in volumes.items()}


def _display_names(entries: Iterable[WorkoutEntry]) -> dict[str, str]:
    """Map each group key to the label variant that collates first."""
    variants: dict[str, set[str]] = {}
    for entry in entries:
        variants.setdefault(exercise_group_key(entry.exercise), set()).add(entry.exercise)
    return {key: min(labels, key=collation_key) for key, labels in variants.items()}


def exercise_series(entries: Iterable[WorkoutEntry]) -> ExerciseSeries:
    """
    Build daily maxima for a single exercise.

    The max-weight and max-1RM for a date are taken independently, so they
    may come from different entries.

    Args:
        entries: Entries of one exercise in ascending date order

    Returns:
        ExerciseSeries keyed by date
    """
    series = ExerciseSeries()
    for entry in entries:
        best_w = series.max_weight_by_date.get(entry.date)
        if best_w is None or entry.weight_kg > best_w:
            series.max_weight_by_date[entry.date] = entry.weight_kg

        e1rm = entry.estimated_one_rep_max
        best_rm = series.max_one_rep_max_by_date.get(entry.date)
        if best_rm is None or e1rm > best_rm:
            series.max_one_rep_max_by_date[entry.date] = e1rm
    return series


def aggregate(entries: Iterable[WorkoutEntry]) -> Aggregation:
    """
    Derive all chart series from a snapshot of entries.

    Steps:
      1. stable sort by date ascending
      2. daily total volume
      3. collated exercise catalog
      4. per-exercise daily max weight and max estimated 1RM

    Args:
        entries: Store snapshot (any order)

    Returns:
        Aggregation with date-ascending series
    """
    ordered = sort_oldest_first(entries)
    names = _display_names(ordered)

    grouped: dict[str, list[WorkoutEntry]] = {}
    for entry in ordered:
        grouped.setdefault(names[exercise_group_key(entry.exercise)], []).append(entry)

    catalog = sort_exercise_names(grouped)

    return Aggregation(
        daily_volume=daily_total_volume(ordered),
        exercises=catalog,
        per_exercise={name: exercise_series(grouped[name]) for name in catalog},
    )


def to_chart_series(series: Mapping[str, float]) -> tuple[list[str], list[float]]:
    """
    Split a date-keyed mapping into aligned label and value lists.

    Args:
        series: date -> value

    Returns:
        (sorted dates, values in the same order)
    """
    labels = sorted(series)
    return labels, [series[label] for label in labels]
