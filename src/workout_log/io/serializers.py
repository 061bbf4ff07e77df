"""
JSON serialization for workout entries.

Handles conversion between WorkoutEntry and JSON-compatible dicts, and the
field validation every stored entry must pass.
"""

import json
import math
import re
from datetime import datetime
from typing import Any, Mapping

from ..core.config import DATE_FORMAT, DATE_PATTERN
from ..core.models import WorkoutEntry


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


EntryInput = WorkoutEntry | Mapping[str, Any]


def validate_date(date_str: Any) -> str:
    """
    Validate an ISO date string.

    Args:
        date_str: Date string to validate

    Returns:
        The YYYY-MM-DD string, stripped of surrounding whitespace

    Raises:
        ValidationError: If missing or not a real calendar date
    """
    if not isinstance(date_str, str) or not date_str.strip():
        raise ValidationError("date is required")

    date_str = date_str.strip()
    if not re.match(DATE_PATTERN, date_str):
        raise ValidationError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        datetime.strptime(date_str, DATE_FORMAT)
    except ValueError as e:
        raise ValidationError(f"Invalid date: {date_str}") from e

    return date_str


def validate_exercise(exercise: Any) -> str:
    """
    Validate an exercise label.

    Returns:
        The trimmed label, case preserved

    Raises:
        ValidationError: If missing or blank
    """
    if not isinstance(exercise, str) or not exercise.strip():
        raise ValidationError("exercise is required")
    return exercise.strip()


def parse_number(value: Any, name: str) -> float:
    """
    Coerce a JSON/CLI value to a finite float.

    Numeric strings are accepted ("82.5"); booleans, blanks, NaN and
    infinities are not.

    Raises:
        ValidationError: If the value is missing or not numeric
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{name} is required and must be a number, got {value!r}")

    if isinstance(value, str):
        if not value.strip():
            raise ValidationError(f"{name} is required and must be a number")
        try:
            number = float(value.strip())
        except ValueError as e:
            raise ValidationError(f"{name} must be a number, got {value!r}") from e
    elif isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError as e:
            raise ValidationError(f"{name} is out of range") from e
    else:
        raise ValidationError(f"{name} must be a number, got {type(value).__name__}")

    if not math.isfinite(number):
        raise ValidationError(f"{name} must be finite, got {value!r}")
    return number


def parse_integer(value: Any, name: str) -> int:
    """
    Coerce a value to int, rejecting fractional numbers.

    Raises:
        ValidationError: If the value is not a whole number
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    number = parse_number(value, name)
    if not number.is_integer():
        raise ValidationError(f"{name} must be a whole number, got {value!r}")
    return int(number)


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def validate_positive(value: int | float, name: str) -> int | float:
    """
    Validate that a value is positive.

    Raises:
        ValidationError: If value is not positive
    """
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


def parse_entry_id(value: Any) -> int | None:
    """
    Coerce an optional record id.

    None, "" and 0 mean "no id" so the store assigns a fresh one.

    Raises:
        ValidationError: If present but not a positive whole number
    """
    if value is None or value == "" or value == 0:
        return None
    entry_id = parse_integer(value, "id")
    validate_positive(entry_id, "id")
    return entry_id


def entry_to_dict(entry: WorkoutEntry) -> dict[str, Any]:
    """
    Convert WorkoutEntry to the exchange record shape.

    Args:
        entry: Entry to convert

    Returns:
        Dict with camelCase keys, id first
    """
    return {
        "id": entry.id,
        "date": entry.date,
        "exercise": entry.exercise,
        "weightKg": entry.weight_kg,
        "reps": entry.reps,
        "sets": entry.sets,
        "notes": entry.notes,
    }


def dict_to_entry(data: Mapping[str, Any]) -> WorkoutEntry:
    """
    Convert an exchange record to a validated WorkoutEntry.

    Accepts ``weightKg`` or ``weight_kg``.  Numeric fields may be numeric
    strings.  ``notes`` defaults to "".

    Args:
        data: Dict representation

    Returns:
        WorkoutEntry instance (id None when the record carries none)

    Raises:
        ValidationError: If any field is missing or out of range
    """
    if not isinstance(data, Mapping):
        raise ValidationError(f"Record must be an object, got {type(data).__name__}")

    weight_raw = data["weightKg"] if "weightKg" in data else data.get("weight_kg")

    date = validate_date(data.get("date"))
    exercise = validate_exercise(data.get("exercise"))
    weight_kg = validate_non_negative(parse_number(weight_raw, "weightKg"), "weightKg")
    reps = validate_positive(parse_integer(data.get("reps"), "reps"), "reps")
    sets = validate_positive(parse_integer(data.get("sets"), "sets"), "sets")

    notes = data.get("notes")
    if notes is None:
        notes = ""
    elif not isinstance(notes, str):
        raise ValidationError(f"notes must be text, got {type(notes).__name__}")

    return WorkoutEntry(
        date=date,
        exercise=exercise,
        weight_kg=float(weight_kg),
        reps=int(reps),
        sets=int(sets),
        notes=notes.strip(),
        id=parse_entry_id(data.get("id")),
    )


def coerce_entry(entry: EntryInput) -> WorkoutEntry:
    """
    Validate store input given either as a WorkoutEntry or a plain dict.

    Raises:
        ValidationError: If any field is invalid
    """
    if isinstance(entry, WorkoutEntry):
        return dict_to_entry(entry_to_dict(entry))
    return dict_to_entry(entry)


def entry_to_json_line(entry: WorkoutEntry) -> str:
    """
    Serialize an entry to a single JSON line.

    Returns:
        JSON string (single line, no trailing newline)
    """
    return json.dumps(entry_to_dict(entry), separators=(",", ":"), ensure_ascii=False)

