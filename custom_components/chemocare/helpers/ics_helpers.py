# File: helpers/ics_helpers.py
"""iCalendar (RFC 5545) export for ChemoCare events.

Builds a VCALENDAR document with the `icalendar` library:
- Timed events (action rules and one-off items with a time of day) get a
  local DTSTART and a DTEND exactly one hour later.
- All other events are all-day: DTSTART;VALUE=DATE on the day and
  DTEND;VALUE=DATE on the following day.

The export is a pure function of its inputs.
"""

from __future__ import annotations

from collections.abc import Iterable
import datetime
import re

from icalendar import Calendar as iCalendar, Event as iEvent

from .. import const
from ..engines.event_engine import cycle_label, treatment_title
from ..engines.models import ScheduledEvent
from ..utils.dt_utils import add_days, format_iso_date

UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9\-_]+")


def event_summary(event: ScheduledEvent, language: str = const.DEFAULT_LANGUAGE) -> str:
    """Return the exported SUMMARY: "Treatment #n" for treatments, else the title."""
    if event.event_type == const.EVENT_TYPE_TREATMENT and event.index is not None:
        return treatment_title(event.index + 1, language)
    return event.title


def event_description(
    event: ScheduledEvent, language: str = const.DEFAULT_LANGUAGE
) -> str:
    """Return the exported DESCRIPTION: "Cycle n" for treatments, else the notes."""
    if event.event_type == const.EVENT_TYPE_TREATMENT and event.index is not None:
        return cycle_label(event.index + 1, language)
    if event.rule is not None:
        return event.rule.notes
    if event.item is not None:
        return event.item.notes
    return event.notes


def event_end(event: ScheduledEvent) -> datetime.date | datetime.datetime:
    """Return the exclusive end of an event (one hour, or one day)."""
    if isinstance(event.start, datetime.datetime):
        return event.start + datetime.timedelta(
            hours=const.ICS_TIMED_EVENT_DURATION_HOURS
        )
    return add_days(event.start, 1)


def event_ics_uid(event: ScheduledEvent) -> str:
    """Return the globally unique UID of an exported event."""
    return f"{event.uid}@{const.ICS_UID_DOMAIN}"


def generate_ics(
    events: Iterable[ScheduledEvent],
    calendar_name: str = const.DEFAULT_CALENDAR_NAME,
    language: str = const.DEFAULT_LANGUAGE,
    stamp_date: datetime.date | None = None,
) -> str:
    """Render events as an iCalendar document.

    Args:
        events: Materialized events in display order.
        calendar_name: Value of X-WR-CALNAME.
        language: Label language for treatment summaries and descriptions.
        stamp_date: Day used for DTSTAMP (midnight UTC). Defaults to today (UTC).

    Returns:
        The document as text, CRLF line endings.
    """
    if stamp_date is None:
        stamp_date = datetime.datetime.now(datetime.UTC).date()
    stamp = datetime.datetime.combine(stamp_date, datetime.time.min, tzinfo=datetime.UTC)

    cal = iCalendar()
    cal.add("prodid", const.ICS_PRODID)
    cal.add("version", const.ICS_VERSION)
    cal.add(const.ICS_CALNAME_PROPERTY, calendar_name or const.DEFAULT_CALENDAR_NAME)

    count = 0
    for event in events:
        ical_event = iEvent()
        ical_event.add("uid", event_ics_uid(event))
        ical_event.add("dtstamp", stamp)
        ical_event.add("dtstart", event.start)
        ical_event.add("dtend", event_end(event))
        ical_event.add("summary", event_summary(event, language))
        ical_event.add("description", event_description(event, language) or "")
        cal.add_component(ical_event)
        count += 1

    const.LOGGER.debug(
        "DEBUG: Exported %s events to calendar '%s'", count, calendar_name
    )
    return cal.to_ical().decode("utf-8")


def build_export_filename(calendar_name: str | None, today: datetime.date) -> str:
    """Return "ChemoCare-<safe name>-<YYYY-MM-DD>.ics".

    Example:
        build_export_filename("Mam's plan", date(2025, 1, 1))
        → "ChemoCare-Mam_s_plan-2025-01-01.ics"
    """
    name = (calendar_name or "").strip() or const.DEFAULT_CALENDAR_NAME
    safe_name = UNSAFE_FILENAME_CHARS.sub("_", name)
    return (
        f"{const.ICS_FILENAME_PREFIX}-{safe_name}-{format_iso_date(today)}"
        f"{const.ICS_FILENAME_EXTENSION}"
    )
