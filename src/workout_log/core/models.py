"""
Data models for workout-log.

A single record shape, WorkoutEntry, plus the result types produced by the
aggregation engine.  Field validation lives in io.serializers so that the
store can reject bad input with a ValidationError before any mutation.
"""

from dataclasses import asdict, dataclass, field, replace
from typing import Any

from .metrics import estimate_one_rep_max, training_volume


@dataclass(frozen=True)
class WorkoutEntry:
    """
    One recorded workout set-group.

    ``id`` is None until the store assigns one.  Volume and estimated 1RM are
    properties, so they always reflect the current field values.
    """

    date: str  # ISO format: YYYY-MM-DD
    exercise: str
    weight_kg: float
    reps: int
    sets: int
    notes: str = ""
    id: int | None = None

    @property
    def volume(self) -> float:
        """weight × reps × sets."""
        return training_volume(self.weight_kg, self.reps, self.sets)

    @property
    def estimated_one_rep_max(self) -> float:
        """Epley estimate: weight × (1 + reps / 30)."""
        return estimate_one_rep_max(self.weight_kg, self.reps)

    def with_id(self, entry_id: int | None) -> "WorkoutEntry":
        """Return a copy carrying the given id."""
        return replace(self, id=entry_id)

    def fields(self) -> dict[str, Any]:
        """Stored fields without the id, for equality checks that ignore identity."""
        data = asdict(self)
        data.pop("id")
        return data


@dataclass
class ExerciseSeries:
    """Per-exercise chart series keyed by ISO date."""

    max_weight_by_date: dict[str, float] = field(default_factory=dict)
    max_one_rep_max_by_date: dict[str, float] = field(default_factory=dict)


@dataclass
class Aggregation:
    """
    Chart-ready series derived from a snapshot of entries.

    Attributes:
        daily_volume: date -> total volume across all exercises
        exercises: distinct exercise names in collation order
        per_exercise: exercise name -> ExerciseSeries
    """

    daily_volume: dict[str, float] = field(default_factory=dict)
    exercises: list[str] = field(default_factory=list)
    per_exercise: dict[str, ExerciseSeries] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Render the camelCase shape consumed by chart front-ends."""
        return {
            "dailyVolume": dict(self.daily_volume),
            "exercises": list(self.exercises),
            "perExercise": {
                name: {
                    "maxWeightByDate": dict(series.max_weight_by_date),
                    "maxOneRepMaxByDate": dict(series.max_one_rep_max_by_date),
                }
                for name, series in self.per_exercise.items()
            },
        }


@dataclass
class ImportSummary:
    """Outcome of a successful backup import."""

    inserted: int = 0
    updated: int = 0

    @property
    def total(self) -> int:
        return self.inserted + self.updated
