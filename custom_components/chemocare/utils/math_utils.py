# File: utils/math_utils.py
"""Progress calculations for ChemoCare.

Pure Python math functions with ZERO Home Assistant dependencies.

⚠️ UTILS PURITY: NO `homeassistant.*` imports allowed.

Functions:
    - calculate_progress_percent: Course progress as a rounded percentage
    - clamp: Bound a value to a range
"""

from __future__ import annotations

PROGRESS_PRECISION = 1


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value between minimum and maximum bounds.

    Examples:
        clamp(150, 0, 100) → 100
        clamp(-10, 0, 100) → 0
    """
    return max(min_val, min(value, max_val))


def calculate_progress_percent(
    completed: int,
    total: int | None,
    precision: int = PROGRESS_PRECISION,
) -> float | None:
    """Calculate how far through a course of treatment the patient is.

    Args:
        completed: Number of treatments dated on or before today.
        total: Planned number of cycles, or None for an open-ended course.
        precision: Number of decimal places for rounding.

    Returns:
        Percentage in the 0-100 range, or None when there is no planned total.

    Examples:
        calculate_progress_percent(3, 6) → 50.0
        calculate_progress_percent(1, 3) → 33.3
        calculate_progress_percent(8, 6) → 100.0
        calculate_progress_percent(2, None) → None
    """
    if not total or total <= 0:
        return None
    return round(clamp(completed / total * 100, 0.0, 100.0), precision)
