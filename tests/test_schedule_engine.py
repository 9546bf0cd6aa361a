"""Unit tests for schedule_engine.py anchor series and occurrence windows.

Covers:
- Anchor series construction (implicit start anchor, duplicate moves)
- Occurrence resolution from the most recent anchor
- Windowed enumeration against an exhaustive from-zero scan
- Freezing past occurrences before a plan change
- Move list merging and completed-occurrence counting
"""

from datetime import date, timedelta

import pytest

from custom_components.chemocare.engines.models import Anchor, Move, Occurrence
from custom_components.chemocare.engines.schedule_engine import (
    OccurrenceWindow,
    build_anchor_series,
    count_completed_occurrences,
    freeze_past_occurrences,
    iterate_occurrences,
    merge_moves,
    remove_move,
    resolve_occurrence_date,
    upsert_move,
)

START = date(2025, 1, 1)


def exhaustive_scan(series, from_date, to_date, cycle_cap=None, limit=400):
    """Resolve every index from zero and keep the ones inside the window."""
    result = []
    for index in range(limit):
        if cycle_cap is not None and index >= cycle_cap:
            break
        occurrence_date = resolve_occurrence_date(series, index)
        if to_date is not None and occurrence_date > to_date:
            break
        if from_date is not None and occurrence_date < from_date:
            continue
        result.append(Occurrence(index=index, date=occurrence_date))
    return result


# =============================================================================
# Anchor series
# =============================================================================


class TestBuildAnchorSeries:
    """Test anchor series construction."""

    def test_no_moves_has_single_start_anchor(self) -> None:
        """Without moves the series is the implicit anchor only."""
        series = build_anchor_series(START, 14)

        assert series.anchors == (Anchor(0, START),)
        assert series.frequency_days == 14
        assert series.first == Anchor(0, START)

    def test_moves_are_sorted_by_index(self) -> None:
        """Moves given out of order end up in ascending index order."""
        series = build_anchor_series(
            START,
            14,
            [Move(4, date(2025, 3, 1)), Move(1, date(2025, 1, 20))],
        )

        assert [anchor.index for anchor in series.anchors] == [0, 1, 4]

    def test_move_of_index_zero_replaces_start(self) -> None:
        """A move for occurrence #0 replaces the plan start date."""
        series = build_anchor_series(START, 14, [Move(0, date(2025, 1, 3))])

        assert series.anchors == (Anchor(0, date(2025, 1, 3)),)
        assert resolve_occurrence_date(series, 1) == date(2025, 1, 17)

    def test_duplicate_index_last_move_wins(self) -> None:
        """Two moves for the same index collapse to the later one."""
        series = build_anchor_series(
            START,
            14,
            [Move(2, date(2025, 2, 1)), Move(2, date(2025, 2, 4))],
        )

        assert series.anchors == (Anchor(0, START), Anchor(2, date(2025, 2, 4)))


# =============================================================================
# Occurrence resolution
# =============================================================================


class TestResolveOccurrenceDate:
    """Test date resolution from anchors."""

    def test_plain_series(self) -> None:
        """Occurrences fall every frequency_days from the start."""
        series = build_anchor_series(START, 14)

        assert resolve_occurrence_date(series, 0) == date(2025, 1, 1)
        assert resolve_occurrence_date(series, 1) == date(2025, 1, 15)
        assert resolve_occurrence_date(series, 5) == date(2025, 3, 12)

    def test_move_shifts_later_occurrences_only(self) -> None:
        """Moving #1 to Jan 20 puts #2 on Feb 3 and leaves #0 alone."""
        series = build_anchor_series(START, 14, [Move(1, date(2025, 1, 20))])

        assert resolve_occurrence_date(series, 0) == date(2025, 1, 1)
        assert resolve_occurrence_date(series, 1) == date(2025, 1, 20)
        assert resolve_occurrence_date(series, 2) == date(2025, 2, 3)

    def test_each_occurrence_follows_nearest_anchor(self) -> None:
        """With several moves, each index extrapolates from its own anchor."""
        series = build_anchor_series(
            START,
            14,
            [Move(1, date(2025, 1, 20)), Move(3, date(2025, 2, 20))],
        )

        assert resolve_occurrence_date(series, 2) == date(2025, 2, 3)
        assert resolve_occurrence_date(series, 3) == date(2025, 2, 20)
        assert resolve_occurrence_date(series, 4) == date(2025, 3, 6)

    def test_frequency_of_one_day(self) -> None:
        """A daily series resolves to consecutive days."""
        series = build_anchor_series(START, 1)

        assert resolve_occurrence_date(series, 31) == date(2025, 2, 1)


# =============================================================================
# Windowed enumeration
# =============================================================================


class TestOccurrenceWindow:
    """Test the restartable occurrence window."""

    def test_cycle_cap_limits_occurrences(self) -> None:
        """A cap of 6 yields exactly occurrences #0 to #5."""
        series = build_anchor_series(START, 14)

        occurrences = list(iterate_occurrences(series, cycle_cap=6))

        assert [occurrence.index for occurrence in occurrences] == list(range(6))
        assert occurrences[-1].date == date(2025, 3, 12)

    def test_window_bounds_are_inclusive(self) -> None:
        """Occurrences on the first and last day of the window are included."""
        series = build_anchor_series(START, 14)

        occurrences = list(
            iterate_occurrences(series, date(2025, 1, 15), date(2025, 2, 12))
        )

        assert [occurrence.date for occurrence in occurrences] == [
            date(2025, 1, 15),
            date(2025, 1, 29),
            date(2025, 2, 12),
        ]

    def test_window_before_start_is_empty(self) -> None:
        """A window that ends before the first treatment yields nothing."""
        series = build_anchor_series(START, 14)

        window = iterate_occurrences(series, date(2024, 11, 1), date(2024, 12, 31))

        assert list(window) == []

    def test_window_is_restartable(self) -> None:
        """Iterating the same window twice produces the same sequence."""
        series = build_anchor_series(START, 14, [Move(1, date(2025, 1, 20))])
        window = OccurrenceWindow(series, date(2025, 1, 1), date(2025, 6, 1))

        first = list(window)
        second = list(window)

        assert first == second
        assert first[1] == Occurrence(index=1, date=date(2025, 1, 20))

    def test_max_count_limits_yields(self) -> None:
        """No more than max_count occurrences are yielded."""
        series = build_anchor_series(START, 7)

        occurrences = list(iterate_occurrences(series, max_count=3))

        assert len(occurrences) == 3

    def test_open_ended_series_stops_at_max_count(self) -> None:
        """Without a cap or end date the default safety limit applies."""
        series = build_anchor_series(START, 1)

        occurrences = list(iterate_occurrences(series, from_date=START))

        assert len(occurrences) == 1000

    def test_start_index_is_close_to_window(self) -> None:
        """The walk does not start at zero for a window far in the future."""
        series = build_anchor_series(START, 14)
        window = OccurrenceWindow(series, from_date=START + timedelta(days=14 * 50))

        assert 40 < window.start_index() <= 50

    def test_start_index_steps_back_after_large_move(self) -> None:
        """A move pushing dates far out still finds the first matching index."""
        series = build_anchor_series(
            START, 14, [Move(1, START + timedelta(days=100))]
        )
        from_date = START + timedelta(days=150)
        window = OccurrenceWindow(series, from_date=from_date)

        occurrences = list(
            iterate_occurrences(series, from_date, from_date + timedelta(days=60))
        )

        assert window.start_index() == 5
        assert occurrences[0] == Occurrence(index=5, date=date(2025, 6, 6))

    @pytest.mark.parametrize(
        ("moves", "from_offset", "to_offset", "cycle_cap"),
        [
            ([], 0, 200, None),
            ([], 45, 130, 6),
            ([Move(1, date(2025, 1, 20))], 10, 90, None),
            ([Move(1, date(2025, 4, 11))], 150, 300, None),
            ([Move(2, date(2025, 2, 3)), Move(8, date(2025, 6, 30))], 100, 400, 12),
            ([Move(0, date(2025, 1, 10)), Move(3, date(2025, 3, 1))], 20, 365, None),
        ],
    )
    def test_matches_exhaustive_scan(
        self, moves, from_offset, to_offset, cycle_cap
    ) -> None:
        """The estimated start index never drops occurrences a full scan finds."""
        series = build_anchor_series(START, 14, moves)
        from_date = START + timedelta(days=from_offset)
        to_date = START + timedelta(days=to_offset)

        windowed = list(
            iterate_occurrences(series, from_date, to_date, cycle_cap=cycle_cap)
        )

        assert windowed == exhaustive_scan(series, from_date, to_date, cycle_cap)


# =============================================================================
# Freezing and move lists
# =============================================================================


class TestFreezeAndMerge:
    """Test freezing history and combining move lists."""

    def test_freeze_pins_occurrences_up_to_cutoff(self) -> None:
        """Occurrences on or before the cutoff become moves to their own date."""
        series = build_anchor_series(START, 14)

        frozen = freeze_past_occurrences(series, date(2025, 1, 20))

        assert frozen == [Move(0, date(2025, 1, 1)), Move(1, date(2025, 1, 15))]

    def test_freeze_includes_occurrence_on_cutoff_day(self) -> None:
        """An occurrence dated exactly on the cutoff counts as past."""
        series = build_anchor_series(START, 14)

        frozen = freeze_past_occurrences(series, date(2025, 1, 15))

        assert frozen[-1] == Move(1, date(2025, 1, 15))

    def test_freeze_respects_cycle_cap(self) -> None:
        """Indices at or beyond the cap are never frozen."""
        series = build_anchor_series(START, 14)

        frozen = freeze_past_occurrences(series, date(2026, 1, 1), cycle_cap=3)

        assert [move.index for move in frozen] == [0, 1, 2]

    def test_freeze_before_start_is_empty(self) -> None:
        """Nothing is frozen before the first treatment."""
        series = build_anchor_series(START, 14)

        assert freeze_past_occurrences(series, date(2024, 12, 31)) == []

    def test_frequency_change_keeps_frozen_history(self) -> None:
        """After freezing, a new frequency only changes future occurrences."""
        old_series = build_anchor_series(START, 14)
        frozen = freeze_past_occurrences(old_series, date(2025, 1, 20))

        new_series = build_anchor_series(START, 21, merge_moves([], frozen))

        assert resolve_occurrence_date(new_series, 0) == date(2025, 1, 1)
        assert resolve_occurrence_date(new_series, 1) == date(2025, 1, 15)
        assert resolve_occurrence_date(new_series, 2) == date(2025, 2, 5)

    def test_freeze_is_idempotent(self) -> None:
        """Freezing twice at the same cutoff changes nothing."""
        series = build_anchor_series(START, 14, [Move(1, date(2025, 1, 20))])
        first = merge_moves(
            [Move(1, date(2025, 1, 20))],
            freeze_past_occurrences(series, date(2025, 2, 10)),
        )

        again = build_anchor_series(START, 14, first)
        second = merge_moves(first, freeze_past_occurrences(again, date(2025, 2, 10)))

        assert first == second

    def test_merge_moves_additions_win(self) -> None:
        """On a shared index the added move replaces the existing one."""
        merged = merge_moves(
            [Move(1, date(2025, 1, 20)), Move(3, date(2025, 2, 20))],
            [Move(1, date(2025, 1, 15)), Move(0, date(2025, 1, 1))],
        )

        assert merged == [
            Move(0, date(2025, 1, 1)),
            Move(1, date(2025, 1, 15)),
            Move(3, date(2025, 2, 20)),
        ]

    def test_upsert_and_remove_move(self) -> None:
        """A move can be replaced and then removed again."""
        moves = upsert_move([], 2, date(2025, 2, 1))
        moves = upsert_move(moves, 2, date(2025, 2, 2))

        assert moves == [Move(2, date(2025, 2, 2))]
        assert remove_move(moves, 2) == []
        assert remove_move(moves, 5) == moves


# =============================================================================
# Progress
# =============================================================================


class TestCountCompletedOccurrences:
    """Test counting treatments dated on or before a day."""

    def test_counts_past_treatments(self) -> None:
        """Two treatments have happened by Jan 20."""
        series = build_anchor_series(START, 14)

        assert count_completed_occurrences(series, date(2025, 1, 20), 6) == 2

    def test_count_is_capped(self) -> None:
        """Long after the course ends the count equals the cap."""
        series = build_anchor_series(START, 14)

        assert count_completed_occurrences(series, date(2026, 6, 1), 6) == 6

    def test_count_before_start_is_zero(self) -> None:
        """Before the first treatment nothing is completed."""
        series = build_anchor_series(START, 14)

        assert count_completed_occurrences(series, date(2024, 12, 1)) == 0
