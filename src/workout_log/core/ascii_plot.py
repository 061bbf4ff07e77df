"""
ASCII charts for workout trends.

Creates terminal-friendly bar charts from the date-keyed series produced by
the aggregation engine.
"""

from typing import Mapping

from .aggregation import to_chart_series
from .config import CHART_BAR_WIDTH


def create_simple_bar_chart(
    labels: list[str],
    values: list[float],
    width: int = CHART_BAR_WIDTH,
    title: str = "",
    decimals: int = 1,
) -> str:
    """
    Create a simple horizontal bar chart.

    Args:
        labels: Labels for each bar
        values: Values for each bar
        width: Maximum bar width
        title: Chart title
        decimals: Digits shown after each bar

    Returns:
        ASCII bar chart string
    """
    if not values:
        return "No data to display."

    max_val = max(values)
    max_label_len = max(len(l) for l in labels)

    lines = []

    if title:
        lines.append(title)
        lines.append("─" * (max_label_len + width + 5))

    for label, value in zip(labels, values):
        bar_len = int((value / max_val) * width) if max_val > 0 else 0
        bar = "█" * bar_len
        lines.append(f"{label:>{max_label_len}} │{bar} {value:.{decimals}f}")

    return "\n".join(lines)


def create_series_chart(
    series: Mapping[str, float],
    title: str,
    last_n: int | None = None,
    decimals: int = 1,
) -> str:
    """
    Chart a date-keyed series in chronological order.

    Args:
        series: date -> value
        title: Chart title
        last_n: Only show the most recent N dates
        decimals: Digits shown after each bar

    Returns:
        ASCII chart string
    """
    labels, values = to_chart_series(series)
    if last_n is not None and last_n > 0:
        labels, values = labels[-last_n:], values[-last_n:]
    return create_simple_bar_chart(labels, values, title=title, decimals=decimals)
