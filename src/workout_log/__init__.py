"""
workout-log: personal workout record store with trend aggregation.

The public API re-exports the store, the aggregation engine and the backup
exchange so callers can work without touching the CLI.
"""

from .core.aggregation import aggregate, to_chart_series
from .core.listing import filter_entries
from .core.models import Aggregation, ExerciseSeries, ImportSummary, WorkoutEntry
from .io.backup import ImportFormatError, export_document, import_document
from .io.entry_store import EntryStore, NotFoundError
from .io.serializers import ValidationError

__version__ = "0.1.0"

__all__ = [
    "Aggregation",
    "EntryStore",
    "ExerciseSeries",
    "ImportFormatError",
    "ImportSummary",
    "NotFoundError",
    "ValidationError",
    "WorkoutEntry",
    "aggregate",
    "export_document",
    "filter_entries",
    "import_document",
    "to_chart_series",
]
