"""Tests for utils/math_utils.py course progress helpers."""

import pytest

from custom_components.chemocare.utils.math_utils import (
    calculate_progress_percent,
    clamp,
)


@pytest.mark.parametrize(
    ("completed", "total", "expected"),
    [
        (0, 6, 0.0),
        (3, 6, 50.0),
        (1, 3, 33.3),
        (6, 6, 100.0),
        (8, 6, 100.0),
        (2, None, None),
        (2, 0, None),
    ],
)
def test_calculate_progress_percent(completed, total, expected) -> None:
    """Progress is clamped to 0-100 and None for open-ended courses."""
    assert calculate_progress_percent(completed, total) == expected


def test_calculate_progress_percent_precision() -> None:
    """Precision controls the number of decimals."""
    assert calculate_progress_percent(1, 3, precision=2) == 33.33


def test_clamp() -> None:
    """Values outside the bounds are pulled back in."""
    assert clamp(150, 0, 100) == 100
    assert clamp(-10, 0, 100) == 0
    assert clamp(42, 0, 100) == 42
