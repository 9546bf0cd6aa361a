# File: engines/models.py
"""Immutable records consumed and produced by the ChemoCare engines.

Storage keeps plain dicts (see type_defs.py); data_builders.py turns them
into these records at the boundary so the engines only ever see validated,
normalized values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import datetime

from .. import const


@dataclass(frozen=True, slots=True)
class Anchor:
    """A pinned (index, date) point of a treatment series."""

    index: int
    date: datetime.date


@dataclass(frozen=True, slots=True)
class Move:
    """User override: treatment `index` happens on `new_date` instead.

    Every later treatment follows from the new date; earlier ones are untouched.
    """

    index: int
    new_date: datetime.date


@dataclass(frozen=True, slots=True)
class AnchorSeries:
    """Sorted, index-unique anchors plus the fixed spacing between occurrences.

    Always contains the implicit anchor for index 0 unless a move replaced it.
    """

    anchors: tuple[Anchor, ...]
    frequency_days: int

    @property
    def first(self) -> Anchor:
        """Return the lowest-index anchor."""
        return self.anchors[0]


@dataclass(frozen=True, slots=True)
class Occurrence:
    """A resolved treatment: zero-based index and its calendar date."""

    index: int
    date: datetime.date

    @property
    def number(self) -> int:
        """Return the 1-based treatment number shown to users."""
        return self.index + 1


@dataclass(frozen=True, slots=True)
class ActionRule:
    """Recurring per-cycle action, positioned relative to each treatment.

    Attributes:
        rule_id: Unique identifier within the plan.
        day: Hospital day indicator. 1 is the treatment day, 2 the day after,
            -1 the day before. Never 0.
        title: Display title; empty means a generated "Day n: action" title.
        notes: Free text exported as the event description.
        time: Optional "HH:MM" time of day; None makes an all-day event.
        enabled: Disabled rules produce no events.
    """

    rule_id: str
    day: int = const.DEFAULT_DAY_INDICATOR
    title: str = ""
    notes: str = ""
    time: str | None = None
    enabled: bool = True


@dataclass(frozen=True, slots=True)
class OneOffItem:
    """Single appointment or medication outside the treatment rhythm."""

    item_id: str
    date: datetime.date
    time: str | None = None
    title: str = ""
    notes: str = ""
    kind: str = const.ONE_OFF_KIND_APPOINTMENT


@dataclass(frozen=True, slots=True)
class TreatmentPlan:
    """Everything needed to compute a schedule, apart from the moves."""

    start_date: datetime.date
    frequency_days: int
    cycles: int | None = None
    rules: tuple[ActionRule, ...] = ()
    one_offs: tuple[OneOffItem, ...] = ()
    calendar_name: str = const.DEFAULT_CALENDAR_NAME


@dataclass(frozen=True, slots=True)
class ScheduledEvent:
    """A materialized calendar event.

    `start` is a plain date for all-day events and a naive local datetime
    when a time of day applies. `index` is set for treatment and action
    events; `rule` or `item` links back to the record that produced it.
    """

    uid: str
    event_type: str
    title: str
    start: datetime.date | datetime.datetime
    index: int | None = None
    rule: ActionRule | None = None
    item: OneOffItem | None = None
    notes: str = field(default="")

    @property
    def is_timed(self) -> bool:
        """Return True when the event has a time of day."""
        return isinstance(self.start, datetime.datetime)

    @property
    def day(self) -> datetime.date:
        """Return the calendar day of the event."""
        if isinstance(self.start, datetime.datetime):
            return self.start.date()
        return self.start

    @property
    def sort_start(self) -> datetime.datetime:
        """Return the start as a datetime, all-day events at midnight."""
        if isinstance(self.start, datetime.datetime):
            return self.start
        return datetime.datetime.combine(self.start, datetime.time.min)
