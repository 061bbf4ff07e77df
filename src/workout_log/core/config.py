"""
Configuration constants for the workout log.

All adjustable parameters are centralized here for easy tuning.
"""

from typing import Final

# =============================================================================
# DERIVED METRICS
# =============================================================================

ONE_RM_REP_DIVISOR: Final[float] = 30.0  # Epley: 1RM = w * (1 + reps / 30)

# =============================================================================
# DATES
# =============================================================================

DATE_FORMAT: Final[str] = "%Y-%m-%d"
DATE_PATTERN: Final[str] = r"^\d{4}-\d{2}-\d{2}$"

# =============================================================================
# STORAGE
# =============================================================================

DEFAULT_DATA_DIRNAME: Final[str] = ".workout-log"
DEFAULT_DATA_FILENAME: Final[str] = "entries.jsonl"
SETTINGS_FILENAME: Final[str] = "settings.yaml"
DATA_PATH_ENV_VAR: Final[str] = "WORKOUT_LOG_DATA"
META_RECORD_TYPE: Final[str] = "meta"
FIRST_ENTRY_ID: Final[int] = 1

# =============================================================================
# BACKUP EXCHANGE
# =============================================================================

EXPORT_FILENAME_TEMPLATE: Final[str] = "workouts_{date}.json"
EXPORT_INDENT: Final[int] = 2

# =============================================================================
# DISPLAY
# =============================================================================

CHART_BAR_WIDTH: Final[int] = 40
VOLUME_DECIMALS: Final[int] = 0
ONE_RM_DECIMALS: Final[int] = 1
