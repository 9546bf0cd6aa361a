"""Record building, validation and conversion helpers.

This module is the SINGLE SOURCE OF TRUTH for:
- Field defaults of stored plans, rules, one-off items and moves
- Input validation at the integration boundary
- Conversion between stored dicts (type_defs.py) and engine records
  (engines/models.py)

### Build Functions
Each record type has a `build_<record>()` function that:
- Takes user_input (service data or form input) and optionally the existing record
- Resolves each field with priority user_input > existing > default
- Generates an id (UUID) for new rules and one-off items; a rule sent
  without an id keeps the id of the stored rule with the same day and title
- Raises PlanValidationError on malformed input
- Returns a complete dict ready for storage

### Conversion Functions
`plan_from_data()` / `moves_from_data()` / `moves_to_data()` move between
storage and the engines. Degenerate but well-formed stored values are
normalized here (day 0 → 1, missing `enabled` → True, missing lists → []).

`prune_done_flags()` drops done flags of events a saved plan no longer
produces.

Consumers:
- config_flow.py / options_flow.py (UI input)
- services.py (programmatic input)
- coordinator.py (storage ↔ engine)
"""

from __future__ import annotations

from collections.abc import Iterable
import datetime
from typing import Any
import uuid

from . import const
from .engines.event_engine import normalize_day_input
from .engines.models import ActionRule, Move, OneOffItem, TreatmentPlan
from .type_defs import ActionRuleData, MoveData, OneOffData, PlanData
from .utils.dt_utils import format_iso_date, is_valid_time_of_day, parse_iso_date

# ==============================================================================
# EXCEPTIONS
# ==============================================================================


class PlanValidationError(Exception):
    """Validation error with field-specific information for form highlighting.

    Raised when input for a plan, rule, one-off item or move is malformed.
    The field attribute lets flows map the error back to the form field, and
    services turn the translation key into a ServiceValidationError.

    Attributes:
        field: The field name that failed validation
        translation_key: The TRANS_KEY_* constant for the error message
        placeholders: Optional dict for translation string placeholders

    Example:
        raise PlanValidationError(
            field=const.DATA_PLAN_FREQUENCY_DAYS,
            translation_key=const.TRANS_KEY_ERROR_INVALID_FREQUENCY,
            placeholders={"value": "0"},
        )
    """

    def __init__(
        self,
        field: str,
        translation_key: str,
        placeholders: dict[str, str] | None = None,
    ) -> None:
        """Initialize PlanValidationError."""
        self.field = field
        self.translation_key = translation_key
        self.placeholders = placeholders or {}
        super().__init__(f"Validation failed for {field}: {translation_key}")


# ==============================================================================
# FIELD HELPERS
# ==============================================================================


def _get_field(
    field: str,
    user_input: dict[str, Any],
    existing: dict[str, Any] | None,
    default: Any,
) -> Any:
    """Resolve a field with priority user_input > existing > default."""
    if field in user_input:
        return user_input[field]
    if existing is not None and field in existing:
        return existing[field]
    return default


def _coerce_date(field: str, value: Any) -> datetime.date:
    """Accept a date or a YYYY-MM-DD string, raising PlanValidationError otherwise."""
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    try:
        return parse_iso_date(value)
    except ValueError as err:
        raise PlanValidationError(
            field=field,
            translation_key=const.TRANS_KEY_ERROR_INVALID_DATE,
            placeholders={"value": str(value)},
        ) from err


def _coerce_time(field: str, value: Any) -> str | None:
    """Accept an "HH:MM" string (or time object); empty means no time."""
    if value is None:
        return None
    if isinstance(value, datetime.time):
        return value.strftime("%H:%M")
    text = str(value).strip()
    if not text:
        return None
    # Selectors hand back "HH:MM:SS"
    if len(text) == 8 and text.count(":") == 2:
        text = text[:5]
    if not is_valid_time_of_day(text):
        raise PlanValidationError(
            field=field,
            translation_key=const.TRANS_KEY_ERROR_INVALID_TIME,
            placeholders={"value": text},
        )
    return text


def _coerce_positive_int(field: str, value: Any, translation_key: str) -> int:
    """Return value as an int >= 1, raising PlanValidationError otherwise."""
    try:
        number = int(value)
    except (TypeError, ValueError) as err:
        raise PlanValidationError(
            field=field,
            translation_key=translation_key,
            placeholders={"value": str(value)},
        ) from err
    if number < const.MIN_FREQUENCY_DAYS:
        raise PlanValidationError(
            field=field,
            translation_key=translation_key,
            placeholders={"value": str(value)},
        )
    return number


def _coerce_cycles(value: Any) -> int | None:
    """Return a positive cycle cap, or None for an open-ended course."""
    if value in (None, "", 0):
        return None
    return _coerce_positive_int(
        const.DATA_PLAN_CYCLES, value, const.TRANS_KEY_ERROR_INVALID_CYCLES
    )


# ==============================================================================
# PLAN
# ==============================================================================


def build_plan(
    user_input: dict[str, Any],
    existing: PlanData | None = None,
) -> PlanData:
    """Build a complete stored plan from user input.

    Args:
        user_input: Any subset of plan fields; dates may be date objects or
            YYYY-MM-DD strings.
        existing: The currently stored plan, used for fields not in user_input.

    Returns:
        PlanData ready for storage.

    Raises:
        PlanValidationError: On a missing/invalid start date, a frequency
            below one day, or an invalid cycle count.
    """
    existing_dict: dict[str, Any] | None = dict(existing) if existing else None

    start_raw = _get_field(const.DATA_PLAN_START_DATE, user_input, existing_dict, None)
    if start_raw in (None, ""):
        raise PlanValidationError(
            field=const.DATA_PLAN_START_DATE,
            translation_key=const.TRANS_KEY_ERROR_INVALID_DATE,
            placeholders={"value": ""},
        )
    start_date = _coerce_date(const.DATA_PLAN_START_DATE, start_raw)

    frequency_days = _coerce_positive_int(
        const.DATA_PLAN_FREQUENCY_DAYS,
        _get_field(
            const.DATA_PLAN_FREQUENCY_DAYS,
            user_input,
            existing_dict,
            const.DEFAULT_FREQUENCY_DAYS,
        ),
        const.TRANS_KEY_ERROR_INVALID_FREQUENCY,
    )
    cycles = _coerce_cycles(
        _get_field(const.DATA_PLAN_CYCLES, user_input, existing_dict, None)
    )

    rules_raw = _get_field(const.DATA_PLAN_RULES, user_input, existing_dict, None) or []
    stored_rules = existing_dict.get(const.DATA_PLAN_RULES) if existing_dict else None
    rules = build_action_rules(rules_raw, existing=stored_rules)

    one_offs_raw = (
        _get_field(const.DATA_PLAN_ONE_OFFS, user_input, existing_dict, None) or []
    )
    one_offs = [build_one_off(item) for item in one_offs_raw]
    _ensure_unique_ids(
        [item[const.DATA_ONE_OFF_ID] for item in one_offs],
        const.DATA_PLAN_ONE_OFFS,
        const.TRANS_KEY_ERROR_DUPLICATE_ONE_OFF_ID,
    )

    calendar_name = str(
        _get_field(
            const.DATA_PLAN_CALENDAR_NAME,
            user_input,
            existing_dict,
            const.DEFAULT_CALENDAR_NAME,
        )
        or const.DEFAULT_CALENDAR_NAME
    ).strip()

    return PlanData(
        start_date=format_iso_date(start_date),
        frequency_days=frequency_days,
        cycles=cycles,
        rules=rules,
        one_offs=one_offs,
        calendar_name=calendar_name or const.DEFAULT_CALENDAR_NAME,
    )


def validate_plan_input(user_input: dict[str, Any]) -> dict[str, str]:
    """Validate plan form input, returning {field: translation_key} errors."""
    try:
        build_plan(user_input)
    except PlanValidationError as err:
        return {err.field: err.translation_key}
    return {}


# ==============================================================================
# ACTION RULES
# ==============================================================================


def build_action_rule(
    user_input: dict[str, Any],
    existing: ActionRuleData | None = None,
) -> ActionRuleData:
    """Build a stored action rule; the day indicator is normalized (0 → 1)."""
    existing_dict: dict[str, Any] | None = dict(existing) if existing else None

    rule_id = _get_field(const.DATA_RULE_ID, user_input, existing_dict, None)
    title = _get_field(const.DATA_RULE_TITLE, user_input, existing_dict, "")
    notes = _get_field(const.DATA_RULE_NOTES, user_input, existing_dict, "")
    enabled = _get_field(const.DATA_RULE_ENABLED, user_input, existing_dict, True)

    return ActionRuleData(
        id=str(rule_id) if rule_id else str(uuid.uuid4()),
        day=normalize_day_input(
            _get_field(
                const.DATA_RULE_DAY,
                user_input,
                existing_dict,
                const.DEFAULT_DAY_INDICATOR,
            )
        ),
        title=str(title or "").strip(),
        notes=str(notes or ""),
        time=_coerce_time(
            const.DATA_RULE_TIME,
            _get_field(const.DATA_RULE_TIME, user_input, existing_dict, None),
        ),
        enabled=enabled is not False,
    )


def build_action_rules(
    rules: Iterable[dict[str, Any]],
    existing: Iterable[ActionRuleData] | None = None,
) -> list[ActionRuleData]:
    """Build a full rule list, rejecting duplicate rule ids.

    A rule sent without an id takes over the id of an unclaimed stored rule
    with the same day and title, so its action event uids (and the done
    flags keyed on them) stay the same.
    """
    rules = [dict(rule) for rule in rules]
    claimed = {
        str(rule[const.DATA_RULE_ID]) for rule in rules if rule.get(const.DATA_RULE_ID)
    }
    available = [
        dict(rule)
        for rule in existing or []
        if str(rule.get(const.DATA_RULE_ID)) not in claimed
    ]

    built: list[ActionRuleData] = []
    for rule in rules:
        if not rule.get(const.DATA_RULE_ID):
            match = _match_stored_rule(rule, available)
            if match is not None:
                available.remove(match)
                rule[const.DATA_RULE_ID] = match[const.DATA_RULE_ID]
        built.append(build_action_rule(rule))

    _ensure_unique_ids(
        [rule[const.DATA_RULE_ID] for rule in built],
        const.DATA_PLAN_RULES,
        const.TRANS_KEY_ERROR_DUPLICATE_RULE_ID,
    )
    return built


def _match_stored_rule(
    rule: dict[str, Any], stored: list[dict[str, Any]]
) -> dict[str, Any] | None:
    """Return the first stored rule with the same day and title."""
    day = normalize_day_input(
        rule.get(const.DATA_RULE_DAY, const.DEFAULT_DAY_INDICATOR)
    )
    title = str(rule.get(const.DATA_RULE_TITLE) or "").strip()
    for candidate in stored:
        if (
            candidate.get(const.DATA_RULE_DAY) == day
            and candidate.get(const.DATA_RULE_TITLE, "") == title
        ):
            return candidate
    return None


# ==============================================================================
# ONE-OFF ITEMS
# ==============================================================================


def build_one_off(
    user_input: dict[str, Any],
    existing: OneOffData | None = None,
) -> OneOffData:
    """Build a stored one-off appointment or medication."""
    existing_dict: dict[str, Any] | None = dict(existing) if existing else None

    item_id = _get_field(const.DATA_ONE_OFF_ID, user_input, existing_dict, None)
    date_raw = _get_field(const.DATA_ONE_OFF_DATE, user_input, existing_dict, None)
    if date_raw in (None, ""):
        raise PlanValidationError(
            field=const.DATA_ONE_OFF_DATE,
            translation_key=const.TRANS_KEY_ERROR_INVALID_DATE,
            placeholders={"value": ""},
        )
    kind = _get_field(
        const.DATA_ONE_OFF_KIND,
        user_input,
        existing_dict,
        const.ONE_OFF_KIND_APPOINTMENT,
    )
    if kind not in const.ONE_OFF_KIND_OPTIONS:
        kind = const.ONE_OFF_KIND_APPOINTMENT

    return OneOffData(
        id=str(item_id) if item_id else str(uuid.uuid4()),
        date=format_iso_date(_coerce_date(const.DATA_ONE_OFF_DATE, date_raw)),
        time=_coerce_time(
            const.DATA_ONE_OFF_TIME,
            _get_field(const.DATA_ONE_OFF_TIME, user_input, existing_dict, None),
        ),
        title=str(
            _get_field(const.DATA_ONE_OFF_TITLE, user_input, existing_dict, "") or ""
        ).strip(),
        notes=str(
            _get_field(const.DATA_ONE_OFF_NOTES, user_input, existing_dict, "") or ""
        ),
        kind=kind,
    )


# ==============================================================================
# MOVES
# ==============================================================================


def build_move(index: int, new_date: datetime.date | str) -> MoveData:
    """Build a stored move for a zero-based occurrence index."""
    if index < 0:
        raise PlanValidationError(
            field=const.DATA_MOVE_INDEX,
            translation_key=const.TRANS_KEY_ERROR_INVALID_TREATMENT_NUMBER,
            placeholders={"value": str(index + 1)},
        )
    return MoveData(
        index=index,
        new_date=format_iso_date(_coerce_date(const.DATA_MOVE_NEW_DATE, new_date)),
    )


# ==============================================================================
# DONE FLAGS
# ==============================================================================


def _index_in_course(raw: str, cycles: int | None) -> bool:
    """Return True when `raw` is an occurrence index inside the course."""
    if not raw.isdigit():
        return False
    return cycles is None or int(raw) < cycles


def prune_done_flags(done: dict[str, bool], plan: PlanData) -> dict[str, bool]:
    """Keep only the done flags of events the plan can still produce.

    Uids have the forms "treat-<index>", "act-<index>-<rule id>" and
    "one-<one-off id>"; rule and one-off ids may contain dashes.

    Example:
        prune_done_flags({"act-0-old": True, "treat-0": True}, plan)
        → {"treat-0": True}  # when no rule has id "old"
    """
    cycles = plan.get(const.DATA_PLAN_CYCLES)
    rule_ids = {
        rule[const.DATA_RULE_ID] for rule in plan.get(const.DATA_PLAN_RULES) or []
    }
    one_off_ids = {
        item[const.DATA_ONE_OFF_ID] for item in plan.get(const.DATA_PLAN_ONE_OFFS) or []
    }

    kept: dict[str, bool] = {}
    for uid, flag in done.items():
        prefix, _, rest = uid.partition("-")
        if prefix == const.EVENT_UID_PREFIX_TREATMENT:
            valid = _index_in_course(rest, cycles)
        elif prefix == const.EVENT_UID_PREFIX_ACTION:
            index, _, rule_id = rest.partition("-")
            valid = _index_in_course(index, cycles) and rule_id in rule_ids
        elif prefix == const.EVENT_UID_PREFIX_ONE_OFF:
            valid = rest in one_off_ids
        else:
            valid = False
        if valid:
            kept[uid] = flag
    return kept


# ==============================================================================
# STORAGE ↔ ENGINE CONVERSION
# ==============================================================================


def plan_from_data(data: PlanData | dict[str, Any]) -> TreatmentPlan:
    """Convert a stored plan into an engine TreatmentPlan."""
    cycles = data.get(const.DATA_PLAN_CYCLES)
    return TreatmentPlan(
        start_date=parse_iso_date(data[const.DATA_PLAN_START_DATE]),
        frequency_days=max(
            const.MIN_FREQUENCY_DAYS, int(data[const.DATA_PLAN_FREQUENCY_DAYS])
        ),
        cycles=int(cycles) if cycles else None,
        rules=tuple(
            rule_from_data(rule) for rule in data.get(const.DATA_PLAN_RULES) or []
        ),
        one_offs=tuple(
            one_off_from_data(item)
            for item in data.get(const.DATA_PLAN_ONE_OFFS) or []
        ),
        calendar_name=data.get(const.DATA_PLAN_CALENDAR_NAME)
        or const.DEFAULT_CALENDAR_NAME,
    )


def rule_from_data(data: ActionRuleData | dict[str, Any]) -> ActionRule:
    """Convert a stored action rule into an engine ActionRule."""
    return ActionRule(
        rule_id=str(data[const.DATA_RULE_ID]),
        day=normalize_day_input(data.get(const.DATA_RULE_DAY)),
        title=data.get(const.DATA_RULE_TITLE) or "",
        notes=data.get(const.DATA_RULE_NOTES) or "",
        time=data.get(const.DATA_RULE_TIME) or None,
        enabled=data.get(const.DATA_RULE_ENABLED) is not False,
    )


def one_off_from_data(data: OneOffData | dict[str, Any]) -> OneOffItem:
    """Convert a stored one-off item into an engine OneOffItem."""
    return OneOffItem(
        item_id=str(data[const.DATA_ONE_OFF_ID]),
        date=parse_iso_date(data[const.DATA_ONE_OFF_DATE]),
        time=data.get(const.DATA_ONE_OFF_TIME) or None,
        title=data.get(const.DATA_ONE_OFF_TITLE) or "",
        notes=data.get(const.DATA_ONE_OFF_NOTES) or "",
        kind=data.get(const.DATA_ONE_OFF_KIND) or const.ONE_OFF_KIND_APPOINTMENT,
    )


def moves_from_data(data: Iterable[MoveData | dict[str, Any]]) -> list[Move]:
    """Convert stored moves into engine Moves, sorted by index."""
    moves = [
        Move(
            index=int(move[const.DATA_MOVE_INDEX]),
            new_date=parse_iso_date(move[const.DATA_MOVE_NEW_DATE]),
        )
        for move in data
    ]
    return sorted(moves, key=lambda move: move.index)


def moves_to_data(moves: Iterable[Move]) -> list[MoveData]:
    """Convert engine Moves into stored moves."""
    return [
        MoveData(index=move.index, new_date=format_iso_date(move.new_date))
        for move in moves
    ]


def _ensure_unique_ids(ids: list[str], field: str, translation_key: str) -> None:
    """Raise PlanValidationError when an id appears more than once."""
    seen: set[str] = set()
    for item_id in ids:
        if item_id in seen:
            raise PlanValidationError(
                field=field,
                translation_key=translation_key,
                placeholders={"id": item_id},
            )
        seen.add(item_id)
