"""
Pure metric computation functions.

All functions are pure and typed for testability.  Derived values are
computed on demand from stored fields and are never persisted.
"""

from .config import ONE_RM_REP_DIVISOR


def training_volume(weight_kg: float, reps: int, sets: int) -> float:
    """
    Calculate the workload proxy for one entry.

    volume = weight × reps × sets

    Args:
        weight_kg: Load lifted per rep
        reps: Reps per set
        sets: Number of sets

    Returns:
        Volume in kg
    """
    return weight_kg * reps * sets


def estimate_one_rep_max(weight_kg: float, reps: int) -> float:
    """
    Estimate one-repetition maximum with the Epley formula.

    1RM = w × (1 + reps / 30)

    A single rep at w yields w × 1.033, not w; the formula is applied
    uniformly so the series stays comparable across rep ranges.

    Args:
        weight_kg: Load lifted per rep
        reps: Reps performed at that load

    Returns:
        Estimated 1RM in kg
    """
    return weight_kg * (1 + reps / ONE_RM_REP_DIVISOR)
