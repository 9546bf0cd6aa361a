# pyright: reportIncompatibleVariableOverride=false
# ^ Suppresses Pylance warnings about @property overriding @cached_property from base classes.
"""Calendar platform for ChemoCare integration.

Provides a read-only calendar of treatments, per-cycle actions and one-off
appointments. Events are materialized on request for the asked window.
"""

import datetime

from homeassistant.components.calendar import CalendarEntity, CalendarEvent
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.util import dt as dt_util

from . import const
from .coordinator import ChemoCareCoordinator
from .engines.event_engine import rule_offset_margin
from .engines.models import ScheduledEvent
from .entity import ChemoCareCoordinatorEntity
from .helpers.ics_helpers import event_description, event_end

# Coordinator-based entities that don't poll
PARALLEL_UPDATES = 0


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the ChemoCare calendar platform."""
    coordinator: ChemoCareCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]
    async_add_entities([TreatmentCalendar(coordinator, entry)])


class TreatmentCalendar(ChemoCareCoordinatorEntity, CalendarEntity):
    """Read-only calendar of the treatment plan."""

    _attr_translation_key = const.TRANS_KEY_CALENDAR_NAME

    def __init__(
        self, coordinator: ChemoCareCoordinator, config_entry: ConfigEntry
    ) -> None:
        """Initialize the calendar entity."""
        super().__init__(coordinator, config_entry, const.CALENDAR_UID_SUFFIX)

    def _local_tz(self) -> datetime.tzinfo:
        """Return the Home Assistant time zone."""
        return dt_util.get_time_zone(self.hass.config.time_zone)

    def _to_calendar_event(self, event: ScheduledEvent) -> CalendarEvent:
        """Convert a scheduled event into a Home Assistant CalendarEvent."""
        start = event.start
        end = event_end(event)
        if isinstance(start, datetime.datetime):
            tz = self._local_tz()
            start = start.replace(tzinfo=tz)
            end = end.replace(tzinfo=tz)
        return CalendarEvent(
            summary=event.title,
            start=start,
            end=end,
            description=event_description(event, self.coordinator.language),
            uid=event.uid,
        )

    def _event_overlaps_window(
        self,
        event: CalendarEvent,
        window_start: datetime.datetime,
        window_end: datetime.datetime,
    ) -> bool:
        """Check if event overlaps [window_start, window_end]."""
        sdt = event.start
        edt = event.end
        tz = self._local_tz()
        if isinstance(sdt, datetime.date) and not isinstance(sdt, datetime.datetime):
            sdt = datetime.datetime.combine(sdt, datetime.time.min, tzinfo=tz)
        if isinstance(edt, datetime.date) and not isinstance(edt, datetime.datetime):
            edt = datetime.datetime.combine(edt, datetime.time.min, tzinfo=tz)
        return (edt > window_start) and (sdt < window_end)

    async def async_get_events(
        self,
        hass: HomeAssistant,
        start_date: datetime.datetime,
        end_date: datetime.datetime,
    ) -> list[CalendarEvent]:
        """Return events overlapping [start_date, end_date]."""
        local_tz = self._local_tz()
        if start_date.tzinfo is None:
            start_date = start_date.replace(tzinfo=local_tz)
        if end_date.tzinfo is None:
            end_date = end_date.replace(tzinfo=local_tz)

        plan = self.coordinator.plan
        if plan is None:
            return []

        margin = rule_offset_margin(plan)
        window_start = dt_util.as_local(start_date).date() - datetime.timedelta(
            days=margin
        )
        window_end = dt_util.as_local(end_date).date() + datetime.timedelta(
            days=margin
        )

        events: list[CalendarEvent] = []
        for scheduled in self.coordinator.get_events(window_start, window_end):
            calendar_event = self._to_calendar_event(scheduled)
            if self._event_overlaps_window(calendar_event, start_date, end_date):
                events.append(calendar_event)
        return events

    @property
    def event(self) -> CalendarEvent | None:
        """Return the current event, or the next upcoming one."""
        now = dt_util.now()
        for scheduled in self.coordinator.events:
            calendar_event = self._to_calendar_event(scheduled)
            end = calendar_event.end
            if not isinstance(end, datetime.datetime):
                end = datetime.datetime.combine(
                    end, datetime.time.min, tzinfo=self._local_tz()
                )
            if end > now:
                return calendar_event
        return None

    async def async_create_event(self, **kwargs) -> None:
        """Create a new event - not supported for read-only calendar."""
        raise HomeAssistantError(
            translation_domain=const.DOMAIN,
            translation_key=const.TRANS_KEY_ERROR_CALENDAR_CREATE_NOT_SUPPORTED,
        )

    async def async_delete_event(
        self,
        uid: str,
        recurrence_id: str | None = None,
        recurrence_range: str | None = None,
    ) -> None:
        """Delete an event - not supported for read-only calendar."""
        raise HomeAssistantError(
            translation_domain=const.DOMAIN,
            translation_key=const.TRANS_KEY_ERROR_CALENDAR_DELETE_NOT_SUPPORTED,
        )

    async def async_update_event(
        self,
        uid: str,
        event: dict,
        recurrence_id: str | None = None,
        recurrence_range: str | None = None,
    ) -> None:
        """Update an event - not supported for read-only calendar."""
        raise HomeAssistantError(
            translation_domain=const.DOMAIN,
            translation_key=const.TRANS_KEY_ERROR_CALENDAR_UPDATE_NOT_SUPPORTED,
        )
