# File: engines/schedule_engine.py
"""Schedule Engine for ChemoCare.

Anchor-based recurrence for treatment series:
- A series starts at occurrence #0 on the plan start date and repeats every
  `frequency_days` days.
- A move pins one occurrence to a new date. Every later occurrence follows
  from the most recent pin, earlier occurrences are untouched.
- Freezing pins every occurrence that already happened, so a later change of
  start date or frequency cannot rewrite history.

IMPORTANT: This module must NOT import from coordinator.py to avoid circular imports.
Only import from const.py, the engine models, and the pure utils.
"""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterable, Iterator
import datetime

from .. import const
from ..utils.dt_utils import add_days, as_date, day_difference
from .models import Anchor, AnchorSeries, Move, Occurrence, TreatmentPlan

# =============================================================================
# ANCHOR SERIES
# =============================================================================


def build_anchor_series(
    start_date: datetime.date,
    frequency_days: int,
    moves: Iterable[Move] = (),
) -> AnchorSeries:
    """Build the sorted anchor list for a series.

    The implicit anchor {0, start_date} comes first, followed by the moves in
    index order. After a stable sort, runs of the same index collapse to the
    last entry, so a move for index 0 replaces the start date and a later
    duplicate move replaces an earlier one.

    Args:
        start_date: Date of occurrence #0.
        frequency_days: Days between occurrences (>= 1, validated by the caller).
        moves: Overrides in any order.

    Returns:
        AnchorSeries with strictly increasing anchor indices.
    """
    candidates = [Anchor(0, as_date(start_date))]
    candidates.extend(
        Anchor(move.index, as_date(move.new_date))
        for move in sorted(moves, key=lambda move: move.index)
    )
    candidates.sort(key=lambda anchor: anchor.index)

    anchors: list[Anchor] = []
    for anchor in candidates:
        if anchors and anchors[-1].index == anchor.index:
            anchors[-1] = anchor
        else:
            anchors.append(anchor)

    return AnchorSeries(anchors=tuple(anchors), frequency_days=frequency_days)


def series_for_plan(plan: TreatmentPlan, moves: Iterable[Move] = ()) -> AnchorSeries:
    """Build the anchor series for a stored plan and its moves."""
    return build_anchor_series(plan.start_date, plan.frequency_days, moves)


# =============================================================================
# OCCURRENCE RESOLUTION
# =============================================================================


def resolve_occurrence_date(series: AnchorSeries, index: int) -> datetime.date:
    """Return the date of occurrence `index`.

    Uses the most recent anchor at or before `index` and extrapolates by
    whole multiples of the frequency. Indices below the first anchor fall
    back to the first anchor and extrapolate backwards.

    Example:
        series = build_anchor_series(date(2025, 1, 1), 14, [Move(1, date(2025, 1, 20))])
        resolve_occurrence_date(series, 2) -> date(2025, 2, 3)
    """
    indices = [anchor.index for anchor in series.anchors]
    position = bisect_right(indices, index) - 1
    anchor = series.anchors[position] if position >= 0 else series.first
    return add_days(anchor.date, (index - anchor.index) * series.frequency_days)


# =============================================================================
# WINDOWED ENUMERATION
# =============================================================================


class OccurrenceWindow:
    """Restartable iterable over the occurrences of a series inside a window.

    Each call to `iter()` starts a fresh walk; no cursor survives between
    iterations, so the same window can be consumed any number of times.

    The walk starts close to `from_date` instead of at index 0: the start
    index is estimated from occurrence #0, backed off by a few cycles, and
    then stepped back while the preceding occurrence still falls inside the
    window (a move can push later occurrences past their estimated index).

    Walk rules, in order, for each index:
    - stop once the index reaches the cycle cap
    - stop once a date is after `to_date`
    - skip dates before `from_date`
    - yield, and stop after `max_count` yields

    At most `max_count` indices are inspected.
    """

    def __init__(
        self,
        series: AnchorSeries,
        from_date: datetime.date | None = None,
        to_date: datetime.date | None = None,
        max_count: int = const.MAX_OCCURRENCES,
        cycle_cap: int | None = None,
    ) -> None:
        """Initialize the window.

        Args:
            series: Anchor series to walk.
            from_date: Inclusive lower bound, or None for no lower bound.
            to_date: Inclusive upper bound, or None for no upper bound.
            max_count: Maximum number of occurrences yielded and indices inspected.
            cycle_cap: Occurrence indices >= cap do not exist.
        """
        self.series = series
        self.from_date = as_date(from_date) if from_date is not None else None
        self.to_date = as_date(to_date) if to_date is not None else None
        self.max_count = max_count
        self.cycle_cap = cycle_cap

    def start_index(self) -> int:
        """Return the index the walk begins at."""
        if self.from_date is None:
            return 0

        first_date = resolve_occurrence_date(self.series, 0)
        estimate = (
            day_difference(first_date, self.from_date) // self.series.frequency_days
            - const.ESTIMATE_BACKOFF
        )
        start = max(0, estimate)

        while (
            start > 0
            and resolve_occurrence_date(self.series, start - 1) >= self.from_date
        ):
            start -= 1
        return start

    def __iter__(self) -> Iterator[Occurrence]:
        """Walk the series from a fresh start index."""
        start = self.start_index()
        count = 0
        for index in range(start, start + self.max_count):
            if self.cycle_cap is not None and index >= self.cycle_cap:
                return
            occurrence_date = resolve_occurrence_date(self.series, index)
            if self.to_date is not None and occurrence_date > self.to_date:
                return
            if self.from_date is not None and occurrence_date < self.from_date:
                continue
            yield Occurrence(index=index, date=occurrence_date)
            count += 1
            if count >= self.max_count:
                return

        if self.max_count > 0:
            const.LOGGER.warning(
                "WARNING: OccurrenceWindow: Max iterations reached (%s) starting at index %s",
                self.max_count,
                start,
            )


def iterate_occurrences(
    series: AnchorSeries,
    from_date: datetime.date | None = None,
    to_date: datetime.date | None = None,
    max_count: int = const.MAX_OCCURRENCES,
    cycle_cap: int | None = None,
) -> OccurrenceWindow:
    """Return a restartable iterable of occurrences inside the window."""
    return OccurrenceWindow(
        series,
        from_date=from_date,
        to_date=to_date,
        max_count=max_count,
        cycle_cap=cycle_cap,
    )


# =============================================================================
# MOVES AND FREEZING
# =============================================================================


def freeze_past_occurrences(
    series: AnchorSeries,
    cutoff: datetime.date | datetime.datetime,
    cycle_cap: int | None = None,
) -> list[Move]:
    """Pin every occurrence dated on or before `cutoff` to its current date.

    Walks from index 0 and stops at the first occurrence after the cutoff,
    at the cycle cap, or after the safety limit.

    Returns:
        Moves in ascending index order, one per past occurrence.
    """
    cutoff_date = as_date(cutoff)
    frozen: list[Move] = []
    for index in range(const.FREEZE_SAFETY_CAP):
        if cycle_cap is not None and index >= cycle_cap:
            break
        occurrence_date = resolve_occurrence_date(series, index)
        if occurrence_date > cutoff_date:
            break
        frozen.append(Move(index=index, new_date=occurrence_date))
    else:
        const.LOGGER.warning(
            "WARNING: freeze_past_occurrences: Safety cap of %s occurrences reached",
            const.FREEZE_SAFETY_CAP,
        )

    const.LOGGER.debug(
        "DEBUG: Froze %s past occurrences up to %s", len(frozen), cutoff_date
    )
    return frozen


def merge_moves(existing: Iterable[Move], additions: Iterable[Move]) -> list[Move]:
    """Union two move lists keyed by index, additions winning.

    Returns:
        Moves sorted by ascending index.
    """
    by_index: dict[int, Move] = {}
    for move in existing:
        by_index[move.index] = move
    for move in additions:
        by_index[move.index] = move
    return [by_index[index] for index in sorted(by_index)]


def upsert_move(
    moves: Iterable[Move], index: int, new_date: datetime.date
) -> list[Move]:
    """Replace any move for `index` with one to `new_date`."""
    return merge_moves(moves, [Move(index=index, new_date=as_date(new_date))])


def remove_move(moves: Iterable[Move], index: int) -> list[Move]:
    """Drop the move for `index`, if any, keeping the rest sorted."""
    return sorted(
        (move for move in moves if move.index != index),
        key=lambda move: move.index,
    )


# =============================================================================
# PROGRESS
# =============================================================================


def count_completed_occurrences(
    series: AnchorSeries,
    as_of: datetime.date | datetime.datetime,
    cycle_cap: int | None = None,
) -> int:
    """Count the occurrences dated on or before `as_of`."""
    window = OccurrenceWindow(
        series,
        to_date=as_date(as_of),
        max_count=cycle_cap if cycle_cap is not None else const.COMPLETED_SAFETY_CAP,
        cycle_cap=cycle_cap,
    )
    return sum(1 for _ in window)
