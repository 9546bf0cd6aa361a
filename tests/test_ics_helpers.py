"""Tests for helpers/ics_helpers.py iCalendar export.

Exported documents are parsed back with icalendar to check the properties
calendar clients rely on.
"""

from datetime import date, datetime, timedelta

from icalendar import Calendar
import pytest

from custom_components.chemocare import const
from custom_components.chemocare.engines.event_engine import materialize_events
from custom_components.chemocare.engines.models import (
    ActionRule,
    OneOffItem,
    ScheduledEvent,
    TreatmentPlan,
)
from custom_components.chemocare.helpers.ics_helpers import (
    build_export_filename,
    event_description,
    event_end,
    event_ics_uid,
    event_summary,
    generate_ics,
)


@pytest.fixture
def events() -> list[ScheduledEvent]:
    """Return one treatment, one timed action and one one-off item."""
    plan = TreatmentPlan(
        start_date=date(2025, 1, 1),
        frequency_days=14,
        cycles=1,
        rules=(
            ActionRule(
                rule_id="nausea",
                day=2,
                title="Anti-nausea",
                notes="With food",
                time="08:00",
            ),
        ),
        one_offs=(
            OneOffItem(
                item_id="pills",
                date=date(2025, 1, 10),
                kind=const.ONE_OFF_KIND_MEDICATION,
            ),
        ),
    )
    return materialize_events(
        plan, [], date(2025, 1, 1), date(2025, 1, 31), const.LANGUAGE_EN
    )


def _vevents(document: str) -> dict[str, object]:
    """Parse a document and index its VEVENTs by UID."""
    calendar = Calendar.from_ical(document)
    return {str(event.get("uid")): event for event in calendar.walk("VEVENT")}


def test_document_header(events: list[ScheduledEvent]) -> None:
    """The calendar carries PRODID, VERSION and the calendar name."""
    document = generate_ics(
        events, "Mam's plan", const.LANGUAGE_EN, stamp_date=date(2025, 1, 20)
    )
    calendar = Calendar.from_ical(document)

    assert document.startswith("BEGIN:VCALENDAR\r\n")
    assert str(calendar.get("prodid")) == const.ICS_PRODID
    assert str(calendar.get("version")) == const.ICS_VERSION
    assert str(calendar.get(const.ICS_CALNAME_PROPERTY)) == "Mam's plan"
    assert len(calendar.walk("VEVENT")) == 3


def test_all_day_treatment_event(events: list[ScheduledEvent]) -> None:
    """Treatments export as all-day events with summary and cycle label."""
    vevent = _vevents(
        generate_ics(events, "ChemoCare", const.LANGUAGE_EN, date(2025, 1, 20))
    )["treat-0@chemocare.local"]

    assert vevent.get("dtstart").dt == date(2025, 1, 1)
    assert vevent.get("dtend").dt == date(2025, 1, 2)
    assert str(vevent.get("summary")) == "Treatment #1"
    assert str(vevent.get("description")) == "Cycle 1"


def test_timed_action_event(events: list[ScheduledEvent]) -> None:
    """Timed actions last one hour and export their notes."""
    vevent = _vevents(
        generate_ics(events, "ChemoCare", const.LANGUAGE_EN, date(2025, 1, 20))
    )["act-0-nausea@chemocare.local"]

    assert vevent.get("dtstart").dt == datetime(2025, 1, 2, 8, 0)
    assert vevent.get("dtend").dt == datetime(2025, 1, 2, 9, 0)
    assert str(vevent.get("summary")) == "Anti-nausea"
    assert str(vevent.get("description")) == "With food"


def test_one_off_event_has_empty_description(events: list[ScheduledEvent]) -> None:
    """Every event has a DESCRIPTION, even when there are no notes."""
    vevent = _vevents(
        generate_ics(events, "ChemoCare", const.LANGUAGE_EN, date(2025, 1, 20))
    )["one-pills@chemocare.local"]

    assert str(vevent.get("summary")) == "Medication"
    assert str(vevent.get("description")) == ""


def test_dtstamp_is_midnight_utc(events: list[ScheduledEvent]) -> None:
    """DTSTAMP is the export day at midnight UTC."""
    document = generate_ics(events, "ChemoCare", const.LANGUAGE_EN, date(2025, 1, 20))

    assert "DTSTAMP:20250120T000000Z" in document


def test_export_labels_follow_language(events: list[ScheduledEvent]) -> None:
    """Treatment summaries are rendered in the export language."""
    treatment = events[0]

    assert event_summary(treatment, const.LANGUAGE_NL) == "Behandeling #1"
    assert event_description(treatment, const.LANGUAGE_NL) == "Cyclus 1"


def test_event_end_and_uid(events: list[ScheduledEvent]) -> None:
    """All-day events end the next day, timed ones an hour later."""
    treatment, action = events[0], events[1]

    assert event_end(treatment) == date(2025, 1, 2)
    assert event_end(action) == action.start + timedelta(hours=1)
    assert event_ics_uid(treatment) == "treat-0@chemocare.local"


def test_empty_export_is_valid() -> None:
    """A calendar without events still parses."""
    calendar = Calendar.from_ical(generate_ics([], "", stamp_date=date(2025, 1, 1)))

    assert calendar.walk("VEVENT") == []
    assert str(calendar.get(const.ICS_CALNAME_PROPERTY)) == const.DEFAULT_CALENDAR_NAME


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Mam's plan", "ChemoCare-Mam_s_plan-2025-01-01.ics"),
        ("Zoë plan", "ChemoCare-Zo_plan-2025-01-01.ics"),
        ("kuur-2_a", "ChemoCare-kuur-2_a-2025-01-01.ics"),
        ("", "ChemoCare-ChemoCare-2025-01-01.ics"),
        (None, "ChemoCare-ChemoCare-2025-01-01.ics"),
    ],
)
def test_build_export_filename(name, expected: str) -> None:
    """Unsafe characters are collapsed into underscores."""
    assert build_export_filename(name, date(2025, 1, 1)) == expected
