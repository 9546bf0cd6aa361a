# File: coordinator.py
"""Coordinator for the ChemoCare integration.

Owns the ChemoCareStore and is the only writer of plan, moves and done
flags. Every read recomputes events from the stored plan and moves through
the pure engines; nothing derived is persisted.

Plan edits follow the freeze/merge contract: before a new plan is stored,
every treatment that already happened under the old plan is pinned to its
actual date, so changing the start date, frequency or cycle count never
rewrites history.
"""

from __future__ import annotations

import datetime
from datetime import timedelta
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from . import const
from . import data_builders as db
from .engines.event_engine import build_events, materialize_events
from .engines.models import Move, ScheduledEvent, TreatmentPlan
from .engines.schedule_engine import (
    count_completed_occurrences,
    freeze_past_occurrences,
    merge_moves,
    remove_move,
    series_for_plan,
    upsert_move,
)
from .helpers.ics_helpers import build_export_filename, generate_ics
from .store import ChemoCareStore
from .utils.dt_utils import dt_now_local, dt_today_local, parse_iso_date


class ChemoCareCoordinator(DataUpdateCoordinator[dict[str, Any]]):
    """Coordinator for ChemoCare integration.

    `data` holds the materialized events for the display window together
    with course progress, refreshed on a timer so "next" sensors roll over
    at midnight and immediately after every mutation.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        store: ChemoCareStore,
    ):
        """Initialize the ChemoCareCoordinator."""
        super().__init__(
            hass,
            const.LOGGER,
            name=f"{const.DOMAIN}{const.COORDINATOR_SUFFIX}",
            update_interval=timedelta(minutes=const.DEFAULT_UPDATE_INTERVAL),
        )
        self.config_entry = config_entry
        self.store = store

    # -------------------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------------------

    @property
    def plan_data(self) -> dict[str, Any] | None:
        """Return the stored plan dict, or None when no plan exists."""
        return self.store.get_settings()

    @property
    def plan(self) -> TreatmentPlan | None:
        """Return the stored plan as an engine record."""
        settings = self.store.get_settings()
        if not settings:
            return None
        return db.plan_from_data(settings)

    @property
    def moves(self) -> list[Move]:
        """Return the stored moves as engine records."""
        return db.moves_from_data(self.store.get_moves())

    @property
    def done(self) -> dict[str, bool]:
        """Return the done flags keyed by event uid."""
        return self.store.get_done()

    @property
    def months_ahead(self) -> int:
        """Return the configured display window size."""
        return int(
            self.config_entry.options.get(
                const.CONF_MONTHS_AHEAD, const.DEFAULT_MONTHS_AHEAD
            )
        )

    @property
    def language(self) -> str:
        """Return the configured label language."""
        return self.config_entry.options.get(
            const.CONF_LANGUAGE, const.DEFAULT_LANGUAGE
        )

    @property
    def events(self) -> list[ScheduledEvent]:
        """Return the events of the display window from the last refresh."""
        if not self.data:
            return []
        return self.data.get(const.DATA_EVENTS, [])

    # -------------------------------------------------------------------------------------
    # Refresh
    # -------------------------------------------------------------------------------------

    async def async_config_entry_first_refresh(self) -> None:
        """Seed storage with the plan from the config entry, then refresh.

        Only a store that did not exist yet is seeded; a plan removed by a
        reset stays removed across reloads.
        """
        if self.store.is_new and self.config_entry.data.get(const.CONF_START_DATE):
            const.LOGGER.info(
                "INFO: No stored plan, creating initial plan from config entry data"
            )
            self.store.put_settings(db.build_plan(dict(self.config_entry.data)))
            self._persist()

        await super().async_config_entry_first_refresh()

    async def _async_update_data(self) -> dict[str, Any]:
        """Periodic update."""
        try:
            return self._compute_data()
        except Exception as err:  # pylint: disable=broad-exception-caught
            raise UpdateFailed(f"Error updating ChemoCare data: {err}") from err

    def _compute_data(self) -> dict[str, Any]:
        """Materialize the display window and course progress."""
        plan = self.plan
        today = dt_today_local()
        if plan is None:
            return {
                const.DATA_EVENTS: [],
                const.DATA_COMPLETED: 0,
                const.DATA_TOTAL: 0,
            }

        moves = self.moves
        events = build_events(
            plan, moves, self.months_ahead, today=today, language=self.language
        )
        completed = count_completed_occurrences(
            series_for_plan(plan, moves), today, plan.cycles
        )
        return {
            const.DATA_EVENTS: events,
            const.DATA_COMPLETED: completed,
            const.DATA_TOTAL: plan.cycles or 0,
        }

    def _persist(self) -> None:
        """Save to persistent storage."""
        self.hass.add_job(self.store.async_save)

    def _notify(self) -> None:
        """Recompute derived data and push it to listening entities."""
        self.async_set_updated_data(self._compute_data())

    # -------------------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------------------

    def get_events(
        self, window_start: datetime.date, window_end: datetime.date
    ) -> list[ScheduledEvent]:
        """Materialize events for an arbitrary window (calendar requests)."""
        plan = self.plan
        if plan is None:
            return []
        return materialize_events(
            plan, self.moves, window_start, window_end, self.language
        )

    def is_done(self, event_uid: str) -> bool:
        """Return the done flag of an event."""
        return self.done.get(event_uid, False)

    def export_ics(self) -> tuple[str, str, int]:
        """Export the display window as an iCalendar document.

        Returns:
            (document, suggested file name, number of events)
        """
        plan = self.plan
        today = dt_today_local()
        events = self._compute_data()[const.DATA_EVENTS]
        calendar_name = plan.calendar_name if plan else const.DEFAULT_CALENDAR_NAME
        document = generate_ics(
            events,
            calendar_name=calendar_name,
            language=self.language,
            stamp_date=today,
        )
        return document, build_export_filename(calendar_name, today), len(events)

    # -------------------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------------------

    def save_plan(self, user_input: dict[str, Any]) -> None:
        """Validate and store a new plan, freezing history under the old one.

        Fields missing from `user_input` keep their stored values. When a
        plan already exists, every treatment dated on or before now under
        the old plan is pinned before the new plan replaces it.

        Raises:
            PlanValidationError: When the input does not form a valid plan.
        """
        old_settings = self.store.get_settings()
        new_settings = db.build_plan(user_input, existing=old_settings)

        if old_settings:
            old_plan = db.plan_from_data(old_settings)
            old_moves = self.moves
            frozen = freeze_past_occurrences(
                series_for_plan(old_plan, old_moves), dt_now_local(), old_plan.cycles
            )
            merged = merge_moves(old_moves, frozen)
            self.store.put_moves(db.moves_to_data(merged))
            const.LOGGER.debug(
                "DEBUG: Plan save pinned %s past treatments (%s moves total)",
                len(frozen),
                len(merged),
            )

        self.store.put_settings(new_settings)
        done = self.store.get_done()
        kept = db.prune_done_flags(done, new_settings)
        if len(kept) != len(done):
            const.LOGGER.debug(
                "DEBUG: Dropped %s done flags of events no longer in the plan",
                len(done) - len(kept),
            )
            self.store.put_done(kept)
        self._persist()
        self._notify()
        const.LOGGER.info(
            "INFO: Treatment plan saved: start %s every %s days, cycles %s",
            new_settings[const.DATA_PLAN_START_DATE],
            new_settings[const.DATA_PLAN_FREQUENCY_DAYS],
            new_settings[const.DATA_PLAN_CYCLES],
        )

    def move_treatment(self, treatment_number: int, new_date: datetime.date) -> None:
        """Move one treatment (1-based number); later treatments follow it.

        Raises:
            PlanValidationError: No plan, or the number is outside the course.
        """
        plan = self._require_plan()
        index = self._index_for_number(plan, treatment_number)
        move = db.build_move(index, new_date)
        moves = upsert_move(
            self.moves, index, parse_iso_date(move[const.DATA_MOVE_NEW_DATE])
        )
        self.store.put_moves(db.moves_to_data(moves))
        self._persist()
        self._notify()
        const.LOGGER.info(
            "INFO: Treatment #%s moved to %s",
            treatment_number,
            move[const.DATA_MOVE_NEW_DATE],
        )

    def undo_move(self, treatment_number: int) -> None:
        """Remove the move of a treatment so it follows the series again.

        Raises:
            PlanValidationError: No plan, or the treatment was never moved.
        """
        plan = self._require_plan()
        index = self._index_for_number(plan, treatment_number)
        moves = self.moves
        if not any(move.index == index for move in moves):
            raise db.PlanValidationError(
                field=const.FIELD_TREATMENT_NUMBER,
                translation_key=const.TRANS_KEY_ERROR_MOVE_NOT_FOUND,
                placeholders={"number": str(treatment_number)},
            )
        self.store.put_moves(db.moves_to_data(remove_move(moves, index)))
        self._persist()
        self._notify()
        const.LOGGER.info("INFO: Move of treatment #%s removed", treatment_number)

    def set_event_done(self, event_uid: str, done: bool) -> None:
        """Set or clear the done flag of an event."""
        flags = self.store.get_done()
        if done:
            flags[event_uid] = True
        else:
            flags.pop(event_uid, None)
        self.store.put_done(flags)
        self._persist()
        self._notify()

    async def async_reset(self) -> None:
        """Clear plan, moves and done flags."""
        await self.store.async_clear_data()
        self._notify()
        const.LOGGER.info("INFO: ChemoCare plan reset")

    # -------------------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------------------

    def _require_plan(self) -> TreatmentPlan:
        """Return the stored plan or raise when none exists."""
        plan = self.plan
        if plan is None:
            raise db.PlanValidationError(
                field=const.DATA_SETTINGS,
                translation_key=const.TRANS_KEY_ERROR_NO_PLAN,
            )
        return plan

    @staticmethod
    def _index_for_number(plan: TreatmentPlan, treatment_number: int) -> int:
        """Convert a 1-based treatment number into a zero-based index."""
        if treatment_number < 1 or (
            plan.cycles is not None and treatment_number > plan.cycles
        ):
            raise db.PlanValidationError(
                field=const.FIELD_TREATMENT_NUMBER,
                translation_key=const.TRANS_KEY_ERROR_INVALID_TREATMENT_NUMBER,
                placeholders={"value": str(treatment_number)},
            )
        return treatment_number - 1
