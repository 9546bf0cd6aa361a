# File: const.py
"""Constants for the ChemoCare integration.

This file centralizes storage keys, defaults, service and field names,
translation keys and platform identifiers for consistency across the
integration. It also carries the label tables used for event titles and
calendar export in each supported language.
"""

import logging

import homeassistant.util.dt as dt_util
from homeassistant.const import Platform

from .utils import dt_utils


def set_default_timezone(hass):
    """Set the default timezone based on the Home Assistant configuration."""
    global DEFAULT_TIME_ZONE
    DEFAULT_TIME_ZONE = dt_util.get_time_zone(hass.config.time_zone)
    if DEFAULT_TIME_ZONE is not None:
        dt_utils.set_default_timezone(DEFAULT_TIME_ZONE)


# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
# Integration Name
CHEMOCARE_TITLE = "ChemoCare"

# Integration Domain
DOMAIN = "chemocare"

# Logger
LOGGER = logging.getLogger(__package__)

# Supported Platforms
PLATFORMS = [
    Platform.CALENDAR,
    Platform.SENSOR,
]

# Coordinator
COORDINATOR = "coordinator"
COORDINATOR_SUFFIX = "_coordinator"

# Storage and Versioning
STORE = "store"
STORAGE_KEY = "chemocare_data"
STORAGE_VERSION = 1

# Default timezone: initially None, to be set once hass is available.
DEFAULT_TIME_ZONE = None

# Update Interval (minutes). Events are date based, a slow refresh keeps
# "next" sensors rolling over at midnight.
DEFAULT_UPDATE_INTERVAL = 15

# ------------------------------------------------------------------------------------------------
# Configuration Keys (config entry data / options)
# ------------------------------------------------------------------------------------------------
CONF_CALENDAR_NAME = "calendar_name"
CONF_START_DATE = "start_date"
CONF_FREQUENCY_DAYS = "frequency_days"
CONF_CYCLES = "cycles"
CONF_MONTHS_AHEAD = "months_ahead"
CONF_LANGUAGE = "language"

CONFIG_FLOW_STEP_USER = "user"
OPTIONS_FLOW_STEP_INIT = "init"

# ------------------------------------------------------------------------------------------------
# Storage Data Keys
# ------------------------------------------------------------------------------------------------
DATA_SETTINGS = "settings"
DATA_MOVES = "moves"
DATA_DONE = "done"

# Coordinator data (derived, never persisted)
DATA_EVENTS = "events"
DATA_COMPLETED = "completed"
DATA_TOTAL = "total"

# Plan (settings)
DATA_PLAN_START_DATE = "start_date"
DATA_PLAN_FREQUENCY_DAYS = "frequency_days"
DATA_PLAN_CYCLES = "cycles"
DATA_PLAN_RULES = "rules"
DATA_PLAN_ONE_OFFS = "one_offs"
DATA_PLAN_CALENDAR_NAME = "calendar_name"

# Action rule
DATA_RULE_ID = "id"
DATA_RULE_DAY = "day"
DATA_RULE_TITLE = "title"
DATA_RULE_NOTES = "notes"
DATA_RULE_TIME = "time"
DATA_RULE_ENABLED = "enabled"

# One-off item
DATA_ONE_OFF_ID = "id"
DATA_ONE_OFF_DATE = "date"
DATA_ONE_OFF_TIME = "time"
DATA_ONE_OFF_TITLE = "title"
DATA_ONE_OFF_NOTES = "notes"
DATA_ONE_OFF_KIND = "kind"

ONE_OFF_KIND_APPOINTMENT = "appointment"
ONE_OFF_KIND_MEDICATION = "medication"
ONE_OFF_KIND_OPTIONS = [ONE_OFF_KIND_APPOINTMENT, ONE_OFF_KIND_MEDICATION]

# Move (override)
DATA_MOVE_INDEX = "index"
DATA_MOVE_NEW_DATE = "new_date"

# ------------------------------------------------------------------------------------------------
# Defaults and Limits
# ------------------------------------------------------------------------------------------------
DEFAULT_CALENDAR_NAME = CHEMOCARE_TITLE
DEFAULT_FREQUENCY_DAYS = 21
DEFAULT_MONTHS_AHEAD = 12
DEFAULT_LANGUAGE = "nl"
DEFAULT_DAY_INDICATOR = 1
DEFAULT_UPCOMING_LIMIT = 12

# Safety limits for walking an occurrence series
MAX_OCCURRENCES = 1000
FREEZE_SAFETY_CAP = 1000
COMPLETED_SAFETY_CAP = 9999

# Windowed enumeration: step back from the estimated start index so that
# occurrences pinned earlier than their implied date are not missed.
ESTIMATE_BACKOFF = 3

# Display window: lead-in before the first of the month, and days per month
WINDOW_LEAD_DAYS = 7
DAYS_PER_MONTH_ESTIMATE = 31

MIN_FREQUENCY_DAYS = 1
MAX_MONTHS_AHEAD = 60

# ------------------------------------------------------------------------------------------------
# Events
# ------------------------------------------------------------------------------------------------
EVENT_TYPE_TREATMENT = "treatment"
EVENT_TYPE_ACTION = "action"
EVENT_TYPE_ONE_OFF = "oneoff"

EVENT_UID_PREFIX_TREATMENT = "treat"
EVENT_UID_PREFIX_ACTION = "act"
EVENT_UID_PREFIX_ONE_OFF = "one"

# ------------------------------------------------------------------------------------------------
# iCalendar Export
# ------------------------------------------------------------------------------------------------
ICS_PRODID = "-//ChemoCare//EN"
ICS_VERSION = "2.0"
ICS_UID_DOMAIN = "chemocare.local"
ICS_CALNAME_PROPERTY = "X-WR-CALNAME"
ICS_TIMED_EVENT_DURATION_HOURS = 1
ICS_FILENAME_PREFIX = CHEMOCARE_TITLE
ICS_FILENAME_EXTENSION = ".ics"

# ------------------------------------------------------------------------------------------------
# Languages and Labels
# ------------------------------------------------------------------------------------------------
LANGUAGE_EN = "en"
LANGUAGE_NL = "nl"
LANGUAGE_OPTIONS = [LANGUAGE_EN, LANGUAGE_NL]

LABEL_TREATMENT = "treatment"
LABEL_CYCLE = "cycle"
LABEL_MEDICATION = "medication"
LABEL_APPOINTMENT = "appointment"
LABEL_ACTION = "action"
LABEL_DAY = "day"

LABELS: dict[str, dict[str, str]] = {
    LANGUAGE_EN: {
        LABEL_TREATMENT: "Treatment",
        LABEL_CYCLE: "Cycle",
        LABEL_MEDICATION: "Medication",
        LABEL_APPOINTMENT: "Appointment",
        LABEL_ACTION: "action",
        LABEL_DAY: "Day",
    },
    LANGUAGE_NL: {
        LABEL_TREATMENT: "Behandeling",
        LABEL_CYCLE: "Cyclus",
        LABEL_MEDICATION: "Medicatie",
        LABEL_APPOINTMENT: "Afspraak",
        LABEL_ACTION: "actie",
        LABEL_DAY: "Dag",
    },
}

# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_UPDATE_PLAN = "update_plan"
SERVICE_SET_ACTION_RULES = "set_action_rules"
SERVICE_ADD_ONE_OFF = "add_one_off"
SERVICE_REMOVE_ONE_OFF = "remove_one_off"
SERVICE_MOVE_TREATMENT = "move_treatment"
SERVICE_UNDO_MOVE = "undo_move"
SERVICE_SET_EVENT_DONE = "set_event_done"
SERVICE_RESET_PLAN = "reset_plan"
SERVICE_EXPORT_ICS = "export_ics"

# Service Fields
FIELD_START_DATE = "start_date"
FIELD_FREQUENCY_DAYS = "frequency_days"
FIELD_CYCLES = "cycles"
FIELD_CALENDAR_NAME = "calendar_name"
FIELD_RULES = "rules"
FIELD_ID = "id"
FIELD_DAY = "day"
FIELD_TITLE = "title"
FIELD_NOTES = "notes"
FIELD_TIME = "time"
FIELD_ENABLED = "enabled"
FIELD_DATE = "date"
FIELD_KIND = "kind"
FIELD_TREATMENT_NUMBER = "treatment_number"
FIELD_NEW_DATE = "new_date"
FIELD_EVENT_UID = "event_uid"
FIELD_DONE = "done"
FIELD_CONFIRM = "confirm"

# Service response keys
RESPONSE_ICS = "ics"
RESPONSE_FILENAME = "filename"
RESPONSE_EVENT_COUNT = "event_count"

# ------------------------------------------------------------------------------------------------
# Entities
# ------------------------------------------------------------------------------------------------
CALENDAR_UID_SUFFIX = "_calendar"
SENSOR_UID_SUFFIX_NEXT_TREATMENT = "_next_treatment"
SENSOR_UID_SUFFIX_NEXT_ACTION = "_next_action"
SENSOR_UID_SUFFIX_COURSE_PROGRESS = "_course_progress"

ATTR_TREATMENT_NUMBER = "treatment_number"
ATTR_CYCLE_LABEL = "cycle_label"
ATTR_DAYS_UNTIL = "days_until"
ATTR_TITLE = "title"
ATTR_EVENT_UID = "event_uid"
ATTR_NOTES = "notes"
ATTR_TIME = "time"
ATTR_START = "start"
ATTR_COMPLETED = "completed"
ATTR_TOTAL = "total"
ATTR_UPCOMING = "upcoming"
ATTR_DONE = "done"
ATTR_MOVED_TREATMENTS = "moved_treatments"

DEVICE_MANUFACTURER = CHEMOCARE_TITLE
DEVICE_MODEL = "Treatment Plan"

# ------------------------------------------------------------------------------------------------
# Translation Keys
# ------------------------------------------------------------------------------------------------
TRANS_KEY_CALENDAR_NAME = "treatment_calendar"
TRANS_KEY_SENSOR_NEXT_TREATMENT = "next_treatment"
TRANS_KEY_SENSOR_NEXT_ACTION = "next_action"
TRANS_KEY_SENSOR_COURSE_PROGRESS = "course_progress"

TRANS_KEY_ERROR_CALENDAR_CREATE_NOT_SUPPORTED = "calendar_create_not_supported"
TRANS_KEY_ERROR_CALENDAR_DELETE_NOT_SUPPORTED = "calendar_delete_not_supported"
TRANS_KEY_ERROR_CALENDAR_UPDATE_NOT_SUPPORTED = "calendar_update_not_supported"

TRANS_KEY_ERROR_NO_ENTRY = "no_entry_found"
TRANS_KEY_ERROR_NO_PLAN = "no_plan"
TRANS_KEY_ERROR_INVALID_DATE = "invalid_date"
TRANS_KEY_ERROR_INVALID_TIME = "invalid_time"
TRANS_KEY_ERROR_INVALID_FREQUENCY = "invalid_frequency"
TRANS_KEY_ERROR_INVALID_CYCLES = "invalid_cycles"
TRANS_KEY_ERROR_INVALID_TREATMENT_NUMBER = "invalid_treatment_number"
TRANS_KEY_ERROR_DUPLICATE_RULE_ID = "duplicate_rule_id"
TRANS_KEY_ERROR_DUPLICATE_ONE_OFF_ID = "duplicate_one_off_id"
TRANS_KEY_ERROR_ONE_OFF_NOT_FOUND = "one_off_not_found"
TRANS_KEY_ERROR_MOVE_NOT_FOUND = "move_not_found"
TRANS_KEY_ERROR_RESET_NOT_CONFIRMED = "reset_not_confirmed"

TRANS_KEY_ABORT_SINGLE_INSTANCE = "single_instance_allowed"

