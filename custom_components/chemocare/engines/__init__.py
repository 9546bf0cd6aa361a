"""Engine modules for ChemoCare integration.

Contains pure computation engines:
- models: Immutable plan, move, anchor, occurrence and event records
- schedule_engine: Anchor series, occurrence resolution, windowed
  enumeration, move merging and freezing
- event_engine: Event materialization, display windows and queries
"""

# Use relative imports within package to avoid mypy module resolution issues
from .event_engine import (
    build_events,
    compute_display_window,
    day_to_offset,
    find_next_event,
    materialize_events,
    normalize_day_input,
    upcoming_events,
)
from .models import (
    ActionRule,
    Anchor,
    AnchorSeries,
    Move,
    Occurrence,
    OneOffItem,
    ScheduledEvent,
    TreatmentPlan,
)
from .schedule_engine import (
    OccurrenceWindow,
    build_anchor_series,
    count_completed_occurrences,
    freeze_past_occurrences,
    iterate_occurrences,
    merge_moves,
    remove_move,
    resolve_occurrence_date,
    series_for_plan,
    upsert_move,
)

__all__ = [
    "ActionRule",
    "Anchor",
    "AnchorSeries",
    "Move",
    "Occurrence",
    "OccurrenceWindow",
    "OneOffItem",
    "ScheduledEvent",
    "TreatmentPlan",
    "build_anchor_series",
    "build_events",
    "compute_display_window",
    "count_completed_occurrences",
    "day_to_offset",
    "find_next_event",
    "freeze_past_occurrences",
    "iterate_occurrences",
    "materialize_events",
    "merge_moves",
    "normalize_day_input",
    "remove_move",
    "resolve_occurrence_date",
    "series_for_plan",
    "upcoming_events",
    "upsert_move",
]
