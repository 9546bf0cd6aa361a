# File: engines/event_engine.py
"""Event Engine for ChemoCare.

Turns a treatment plan and its moves into a sorted list of calendar events:
- one treatment event per occurrence in the window
- one action event per enabled action rule per occurrence
- one event per one-off appointment or medication

Titles are produced in the requested language; locale is always an explicit
argument, never global state.

IMPORTANT: This module must NOT import from coordinator.py to avoid circular imports.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
import datetime

from .. import const
from ..utils.dt_utils import (
    add_days,
    apply_time_of_day,
    as_date,
    day_difference,
    dt_today_local,
    start_of_month,
)
from .models import ActionRule, Move, OneOffItem, ScheduledEvent, TreatmentPlan
from .schedule_engine import OccurrenceWindow, series_for_plan

# =============================================================================
# DAY INDICATORS
# =============================================================================


def day_to_offset(day: int) -> int:
    """Convert a hospital day indicator to a day offset from treatment.

    Day 1 is the treatment day itself (offset 0), day 2 the day after, and
    negative days count backwards with no day zero in between.

    Examples:
        day_to_offset(1) → 0
        day_to_offset(3) → 2
        day_to_offset(-1) → -1
    """
    return day - 1 if day >= 1 else day


def normalize_day_input(raw: object) -> int:
    """Coerce raw user input into a valid day indicator.

    Non-numeric input and 0 both become day 1; everything else is kept.
    """
    try:
        day = int(str(raw).strip())
    except (TypeError, ValueError):
        return const.DEFAULT_DAY_INDICATOR
    return day if day != 0 else const.DEFAULT_DAY_INDICATOR


# =============================================================================
# LABELS
# =============================================================================


def get_label(language: str, key: str) -> str:
    """Return a translated label, falling back to the default language."""
    labels = const.LABELS.get(language) or const.LABELS[const.DEFAULT_LANGUAGE]
    return labels[key]


def treatment_title(number: int, language: str = const.DEFAULT_LANGUAGE) -> str:
    """Return "Treatment #n" in the given language (n is 1-based)."""
    return f"{get_label(language, const.LABEL_TREATMENT)} #{number}"


def cycle_label(number: int, language: str = const.DEFAULT_LANGUAGE) -> str:
    """Return "Cycle n" in the given language (n is 1-based)."""
    return f"{get_label(language, const.LABEL_CYCLE)} {number}"


def action_title(rule: ActionRule, language: str = const.DEFAULT_LANGUAGE) -> str:
    """Return the rule title, or a generated "Day n: action" title."""
    if rule.title:
        return rule.title
    return (
        f"{get_label(language, const.LABEL_DAY)} {rule.day}: "
        f"{get_label(language, const.LABEL_ACTION)}"
    )


def one_off_title(item: OneOffItem, language: str = const.DEFAULT_LANGUAGE) -> str:
    """Return the item title, or its kind ("Medication"/"Appointment")."""
    if item.title:
        return item.title
    if item.kind == const.ONE_OFF_KIND_MEDICATION:
        return get_label(language, const.LABEL_MEDICATION)
    return get_label(language, const.LABEL_APPOINTMENT)


# =============================================================================
# WINDOWS
# =============================================================================


def compute_display_window(
    today: datetime.date, months_ahead: int = const.DEFAULT_MONTHS_AHEAD
) -> tuple[datetime.date, datetime.date]:
    """Return the (start, end) dates of the default display window.

    The window opens a week before the first of the current month and runs
    `months_ahead` 31-day blocks past it.

    Example:
        compute_display_window(date(2025, 3, 15), 12)
        → (date(2025, 2, 22), date(2026, 3, 8))
    """
    month_start = start_of_month(today)
    return (
        add_days(month_start, -const.WINDOW_LEAD_DAYS),
        add_days(month_start, months_ahead * const.DAYS_PER_MONTH_ESTIMATE),
    )


# =============================================================================
# MATERIALIZATION
# =============================================================================


def rule_offset_margin(plan: TreatmentPlan) -> int:
    """Return how many days action events can sit away from their treatment.

    A caller asking for events overlapping a window widens the occurrence
    window by this margin so actions of treatments just outside it are kept.
    """
    offsets = [abs(day_to_offset(rule.day)) for rule in plan.rules if rule.enabled]
    return max(offsets, default=0)


def _event_sort_key(event: ScheduledEvent) -> tuple[datetime.datetime, int]:
    """Sort by start, treatment events first on identical starts."""
    return (
        event.sort_start,
        0 if event.event_type == const.EVENT_TYPE_TREATMENT else 1,
    )


def materialize_events(
    plan: TreatmentPlan,
    moves: Iterable[Move],
    window_start: datetime.date,
    window_end: datetime.date,
    language: str = const.DEFAULT_LANGUAGE,
) -> list[ScheduledEvent]:
    """Produce every event of the plan that belongs to the window.

    Treatment and action events come from the occurrences inside
    [window_start, window_end] (respecting the cycle cap). Action events are
    positioned relative to their own treatment and may therefore fall just
    outside the window. One-off items are always included.

    Args:
        plan: Validated treatment plan.
        moves: Overrides for individual occurrences.
        window_start: Inclusive first day.
        window_end: Inclusive last day.
        language: Label language for generated titles.

    Returns:
        Events sorted by start, treatments before other events on ties.
    """
    series = series_for_plan(plan, moves)
    occurrences = OccurrenceWindow(
        series,
        from_date=window_start,
        to_date=window_end,
        cycle_cap=plan.cycles,
    )
    enabled_rules = [rule for rule in plan.rules if rule.enabled]

    events: list[ScheduledEvent] = []
    for occurrence in occurrences:
        events.append(
            ScheduledEvent(
                uid=f"{const.EVENT_UID_PREFIX_TREATMENT}-{occurrence.index}",
                event_type=const.EVENT_TYPE_TREATMENT,
                title=treatment_title(occurrence.number, language),
                start=occurrence.date,
                index=occurrence.index,
                notes=cycle_label(occurrence.number, language),
            )
        )
        for rule in enabled_rules:
            action_day = add_days(occurrence.date, day_to_offset(rule.day))
            events.append(
                ScheduledEvent(
                    uid=(
                        f"{const.EVENT_UID_PREFIX_ACTION}-{occurrence.index}-{rule.rule_id}"
                    ),
                    event_type=const.EVENT_TYPE_ACTION,
                    title=action_title(rule, language),
                    start=apply_time_of_day(action_day, rule.time),
                    index=occurrence.index,
                    rule=rule,
                    notes=rule.notes,
                )
            )

    for item in plan.one_offs:
        events.append(
            ScheduledEvent(
                uid=f"{const.EVENT_UID_PREFIX_ONE_OFF}-{item.item_id}",
                event_type=const.EVENT_TYPE_ONE_OFF,
                title=one_off_title(item, language),
                start=apply_time_of_day(item.date, item.time),
                item=item,
                notes=item.notes,
            )
        )

    events.sort(key=_event_sort_key)
    const.LOGGER.debug(
        "DEBUG: Materialized %s events for window %s → %s",
        len(events),
        window_start,
        window_end,
    )
    return events


def build_events(
    plan: TreatmentPlan,
    moves: Iterable[Move],
    months_ahead: int = const.DEFAULT_MONTHS_AHEAD,
    today: datetime.date | None = None,
    language: str = const.DEFAULT_LANGUAGE,
) -> list[ScheduledEvent]:
    """Materialize events for the default display window around `today`."""
    window_start, window_end = compute_display_window(
        today or dt_today_local(), months_ahead
    )
    return materialize_events(plan, moves, window_start, window_end, language)


# =============================================================================
# QUERIES
# =============================================================================


def days_until(today: datetime.date, when: datetime.date | datetime.datetime) -> int:
    """Return calendar days from today to an event (negative when overdue)."""
    return day_difference(today, when)


def find_next_event(
    events: Sequence[ScheduledEvent],
    today: datetime.date,
    event_type: str | None = None,
) -> ScheduledEvent | None:
    """Return the first event of a type that falls today or later."""
    for event in events:
        if event_type is not None and event.event_type != event_type:
            continue
        if days_until(today, event.start) >= 0:
            return event
    return None


def upcoming_events(
    events: Sequence[ScheduledEvent],
    today: datetime.date,
    limit: int = const.DEFAULT_UPCOMING_LIMIT,
) -> list[ScheduledEvent]:
    """Return up to `limit` events that fall today or later."""
    return [event for event in events if as_date(event.start) >= today][:limit]
