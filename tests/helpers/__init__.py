"""Test helpers for ChemoCare integration tests.

This module re-exports all helpers for convenient imports:

    from tests.helpers import (
        # Setup
        setup_scenario, setup_from_yaml, load_scenario, SetupResult,

        # Validation
        get_entity_id, assert_entity_exists, assert_state_equals,
    )

See individual modules for full documentation:
- setup.py: Declarative test setup from scenario dicts and YAML files
- constants.py: ChemoCare constants for test assertions
- validation.py: Entity lookup and state assertions
"""

from tests.helpers.constants import (
    ATTR_COMPLETED,
    ATTR_CYCLE_LABEL,
    ATTR_DAYS_UNTIL,
    ATTR_DONE,
    ATTR_EVENT_UID,
    ATTR_MOVED_TREATMENTS,
    ATTR_NOTES,
    ATTR_TIME,
    ATTR_TITLE,
    ATTR_TOTAL,
    ATTR_TREATMENT_NUMBER,
    ATTR_UPCOMING,
    CALENDAR_UID_SUFFIX,
    DOMAIN,
    SENSOR_UID_SUFFIX_COURSE_PROGRESS,
    SENSOR_UID_SUFFIX_NEXT_ACTION,
    SENSOR_UID_SUFFIX_NEXT_TREATMENT,
    SERVICE_ADD_ONE_OFF,
    SERVICE_EXPORT_ICS,
    SERVICE_MOVE_TREATMENT,
    SERVICE_REMOVE_ONE_OFF,
    SERVICE_RESET_PLAN,
    SERVICE_SET_ACTION_RULES,
    SERVICE_SET_EVENT_DONE,
    SERVICE_UNDO_MOVE,
    SERVICE_UPDATE_PLAN,
)
from tests.helpers.setup import (
    SetupResult,
    load_scenario,
    setup_from_yaml,
    setup_scenario,
)
from tests.helpers.validation import (
    assert_entity_exists,
    assert_state_equals,
    get_entity_id,
)

__all__ = [
    "ATTR_COMPLETED",
    "ATTR_CYCLE_LABEL",
    "ATTR_DAYS_UNTIL",
    "ATTR_DONE",
    "ATTR_EVENT_UID",
    "ATTR_MOVED_TREATMENTS",
    "ATTR_NOTES",
    "ATTR_TIME",
    "ATTR_TITLE",
    "ATTR_TOTAL",
    "ATTR_TREATMENT_NUMBER",
    "ATTR_UPCOMING",
    "CALENDAR_UID_SUFFIX",
    "DOMAIN",
    "SENSOR_UID_SUFFIX_COURSE_PROGRESS",
    "SENSOR_UID_SUFFIX_NEXT_ACTION",
    "SENSOR_UID_SUFFIX_NEXT_TREATMENT",
    "SERVICE_ADD_ONE_OFF",
    "SERVICE_EXPORT_ICS",
    "SERVICE_MOVE_TREATMENT",
    "SERVICE_REMOVE_ONE_OFF",
    "SERVICE_RESET_PLAN",
    "SERVICE_SET_ACTION_RULES",
    "SERVICE_SET_EVENT_DONE",
    "SERVICE_UNDO_MOVE",
    "SERVICE_UPDATE_PLAN",
    "SetupResult",
    "assert_entity_exists",
    "assert_state_equals",
    "get_entity_id",
    "load_scenario",
    "setup_from_yaml",
    "setup_scenario",
]
