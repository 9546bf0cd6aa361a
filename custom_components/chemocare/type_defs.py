"""Type definitions for ChemoCare storage structures.

Storage shapes use TypedDict because every key is known at design time.
The engines never see these dicts: data_builders.py converts them into the
immutable records in engines/models.py.

IMPORTANT: This file must NOT import from coordinator.py, *helpers.py, or
any file that imports coordinator to avoid circular dependencies.

NOTE: TypedDict is STATIC ANALYSIS ONLY. It does NOT enforce types at
runtime; data_builders.py is where stored values are validated.
"""

from typing import Literal, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

RuleId = str
OneOffId = str
EventUid = str  # "treat-3", "act-3-<rule id>", "one-<item id>"
ISODate = str  # ISO 8601 date string (no time) "2026-01-18"
TimeOfDay = str  # "HH:MM"

OneOffKind = Literal["appointment", "medication"]

# =============================================================================
# Plan
# =============================================================================


class ActionRuleData(TypedDict):
    """Stored action rule. `day` is never 0."""

    id: RuleId
    day: int
    title: str
    notes: str
    time: TimeOfDay | None
    enabled: bool


class OneOffData(TypedDict):
    """Stored one-off appointment or medication."""

    id: OneOffId
    date: ISODate
    time: TimeOfDay | None
    title: str
    notes: str
    kind: OneOffKind


class PlanData(TypedDict):
    """Stored treatment plan (the "settings" bucket)."""

    start_date: ISODate
    frequency_days: int
    cycles: int | None
    rules: list[ActionRuleData]
    one_offs: list[OneOffData]
    calendar_name: NotRequired[str]


class MoveData(TypedDict):
    """Stored override for a single occurrence index."""

    index: int
    new_date: ISODate


# =============================================================================
# Storage root
# =============================================================================


class StoredData(TypedDict):
    """Root structure of the chemocare_data storage file."""

    settings: PlanData | None
    moves: list[MoveData]
    done: dict[EventUid, bool]
