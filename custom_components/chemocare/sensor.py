# File: sensor.py
"""Sensors for the ChemoCare integration.

Sensors Defined in This File (3):
01. NextTreatmentSensor - date of the next treatment
02. NextActionSensor - date of the next per-cycle action
03. CourseProgressSensor - share of planned treatments already given
"""

from __future__ import annotations

import datetime
from typing import Any

from homeassistant.components.sensor import SensorDeviceClass, SensorEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import PERCENTAGE
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from . import const
from .coordinator import ChemoCareCoordinator
from .engines.event_engine import (
    cycle_label,
    days_until,
    find_next_event,
    upcoming_events,
)
from .engines.models import ScheduledEvent
from .entity import ChemoCareCoordinatorEntity
from .utils.dt_utils import dt_today_local, format_iso_date
from .utils.math_utils import calculate_progress_percent

# Coordinator-based entities that don't poll
PARALLEL_UPDATES = 0


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up sensors for ChemoCare integration."""
    coordinator: ChemoCareCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]
    async_add_entities(
        [
            NextTreatmentSensor(coordinator, entry),
            NextActionSensor(coordinator, entry),
            CourseProgressSensor(coordinator, entry),
        ]
    )


class _NextEventSensor(ChemoCareCoordinatorEntity, SensorEntity):
    """Shared logic for "next event of a type" sensors."""

    _attr_device_class = SensorDeviceClass.DATE
    _event_type: str = const.EVENT_TYPE_TREATMENT

    def _next_event(self) -> ScheduledEvent | None:
        """Return the next event of this sensor's type."""
        return find_next_event(
            self.coordinator.events, dt_today_local(), self._event_type
        )

    @property
    def native_value(self) -> datetime.date | None:
        """Return the day of the next event."""
        event = self._next_event()
        return event.day if event else None

    def _base_attributes(self, event: ScheduledEvent) -> dict[str, Any]:
        """Attributes shared by every next-event sensor."""
        return {
            const.ATTR_EVENT_UID: event.uid,
            const.ATTR_TITLE: event.title,
            const.ATTR_DAYS_UNTIL: days_until(dt_today_local(), event.start),
            const.ATTR_DONE: self.coordinator.is_done(event.uid),
        }


class NextTreatmentSensor(_NextEventSensor):
    """Date of the next treatment, with its number and upcoming events."""

    _attr_translation_key = const.TRANS_KEY_SENSOR_NEXT_TREATMENT
    _attr_icon = "mdi:needle"
    _event_type = const.EVENT_TYPE_TREATMENT

    def __init__(
        self, coordinator: ChemoCareCoordinator, config_entry: ConfigEntry
    ) -> None:
        """Initialize the sensor."""
        super().__init__(
            coordinator, config_entry, const.SENSOR_UID_SUFFIX_NEXT_TREATMENT
        )

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose treatment number, moved treatments and the upcoming list."""
        attributes: dict[str, Any] = {
            const.ATTR_MOVED_TREATMENTS: {
                str(move.index + 1): format_iso_date(move.new_date)
                for move in self.coordinator.moves
            },
            const.ATTR_UPCOMING: [
                {
                    const.ATTR_EVENT_UID: event.uid,
                    const.ATTR_TITLE: event.title,
                    const.ATTR_START: event.start.isoformat(),
                }
                for event in upcoming_events(self.coordinator.events, dt_today_local())
            ],
        }
        event = self._next_event()
        if event is None or event.index is None:
            return attributes

        attributes.update(self._base_attributes(event))
        attributes[const.ATTR_TREATMENT_NUMBER] = event.index + 1
        attributes[const.ATTR_CYCLE_LABEL] = cycle_label(
            event.index + 1, self.coordinator.language
        )
        return attributes


class NextActionSensor(_NextEventSensor):
    """Date of the next action derived from the action rules."""

    _attr_translation_key = const.TRANS_KEY_SENSOR_NEXT_ACTION
    _attr_icon = "mdi:pill"
    _event_type = const.EVENT_TYPE_ACTION

    def __init__(
        self, coordinator: ChemoCareCoordinator, config_entry: ConfigEntry
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, config_entry, const.SENSOR_UID_SUFFIX_NEXT_ACTION)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose the action title, time and notes."""
        event = self._next_event()
        if event is None:
            return {}
        attributes = self._base_attributes(event)
        attributes[const.ATTR_NOTES] = event.notes
        attributes[const.ATTR_TIME] = (
            event.start.strftime("%H:%M") if event.is_timed else None
        )
        if event.index is not None:
            attributes[const.ATTR_TREATMENT_NUMBER] = event.index + 1
        return attributes


class CourseProgressSensor(ChemoCareCoordinatorEntity, SensorEntity):
    """Percentage of the planned treatments dated today or earlier."""

    _attr_translation_key = const.TRANS_KEY_SENSOR_COURSE_PROGRESS
    _attr_native_unit_of_measurement = PERCENTAGE
    _attr_icon = "mdi:progress-check"

    def __init__(
        self, coordinator: ChemoCareCoordinator, config_entry: ConfigEntry
    ) -> None:
        """Initialize the sensor."""
        super().__init__(
            coordinator, config_entry, const.SENSOR_UID_SUFFIX_COURSE_PROGRESS
        )

    @property
    def native_value(self) -> float | None:
        """Return progress, or None for an open-ended course."""
        data = self.coordinator.data or {}
        return calculate_progress_percent(
            data.get(const.DATA_COMPLETED, 0), data.get(const.DATA_TOTAL, 0)
        )

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose completed and planned treatment counts."""
        data = self.coordinator.data or {}
        return {
            const.ATTR_COMPLETED: data.get(const.DATA_COMPLETED, 0),
            const.ATTR_TOTAL: data.get(const.DATA_TOTAL, 0),
        }
