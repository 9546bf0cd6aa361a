# File: services.py
"""Defines custom services for the ChemoCare integration.

These services allow editing the treatment plan from scripts, automations
and the UI: plan rhythm, action rules, one-off items, moving single
treatments, done flags, a full reset, and an iCalendar export returned as
a service response.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant.core import HomeAssistant, ServiceCall, ServiceResponse, SupportsResponse
from homeassistant.exceptions import ServiceValidationError
from homeassistant.helpers import config_validation as cv

from . import const
from .data_builders import PlanValidationError
from .helpers.entity_helpers import get_coordinator

# --- Service Schemas ---
UPDATE_PLAN_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_START_DATE): cv.date,
        vol.Optional(const.FIELD_FREQUENCY_DAYS): vol.All(
            vol.Coerce(int), vol.Range(min=const.MIN_FREQUENCY_DAYS)
        ),
        # 0 clears the cap (open-ended course)
        vol.Optional(const.FIELD_CYCLES): vol.All(vol.Coerce(int), vol.Range(min=0)),
        vol.Optional(const.FIELD_CALENDAR_NAME): cv.string,
    }
)

ACTION_RULE_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_ID): cv.string,
        vol.Required(const.FIELD_DAY): vol.Coerce(int),
        vol.Optional(const.FIELD_TITLE, default=""): cv.string,
        vol.Optional(const.FIELD_NOTES, default=""): cv.string,
        vol.Optional(const.FIELD_TIME): vol.Any(None, cv.string),
        vol.Optional(const.FIELD_ENABLED, default=True): cv.boolean,
    }
)

SET_ACTION_RULES_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_RULES): vol.All(cv.ensure_list, [ACTION_RULE_SCHEMA]),
    }
)

ADD_ONE_OFF_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_ID): cv.string,
        vol.Required(const.FIELD_DATE): cv.date,
        vol.Optional(const.FIELD_TIME): vol.Any(None, cv.string),
        vol.Optional(const.FIELD_TITLE, default=""): cv.string,
        vol.Optional(const.FIELD_NOTES, default=""): cv.string,
        vol.Optional(const.FIELD_KIND, default=const.ONE_OFF_KIND_APPOINTMENT): vol.In(
            const.ONE_OFF_KIND_OPTIONS
        ),
    }
)

REMOVE_ONE_OFF_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_ID): cv.string,
    }
)

MOVE_TREATMENT_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_TREATMENT_NUMBER): vol.All(
            vol.Coerce(int), vol.Range(min=1)
        ),
        vol.Required(const.FIELD_NEW_DATE): cv.date,
    }
)

UNDO_MOVE_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_TREATMENT_NUMBER): vol.All(
            vol.Coerce(int), vol.Range(min=1)
        ),
    }
)

SET_EVENT_DONE_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_EVENT_UID): cv.string,
        vol.Optional(const.FIELD_DONE, default=True): cv.boolean,
    }
)

RESET_PLAN_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_CONFIRM): cv.boolean,
    }
)

EXPORT_ICS_SCHEMA = vol.Schema({})


def _validation_error(err: PlanValidationError) -> ServiceValidationError:
    """Convert a PlanValidationError into a translated ServiceValidationError."""
    return ServiceValidationError(
        translation_domain=const.DOMAIN,
        translation_key=err.translation_key,
        translation_placeholders=err.placeholders,
    )


def async_setup_services(hass: HomeAssistant):
    """Register ChemoCare services."""

    async def handle_update_plan(call: ServiceCall):
        """Handle changing start date, frequency, cycle cap or calendar name."""
        coordinator = get_coordinator(hass)
        user_input: dict[str, Any] = {}
        for field in (
            const.FIELD_START_DATE,
            const.FIELD_FREQUENCY_DAYS,
            const.FIELD_CYCLES,
            const.FIELD_CALENDAR_NAME,
        ):
            if field in call.data:
                user_input[field] = call.data[field]

        if coordinator.plan_data is None and const.FIELD_START_DATE not in user_input:
            const.LOGGER.warning("WARNING: Update Plan: no plan and no start date")
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_NO_PLAN,
            )

        try:
            coordinator.save_plan(user_input)
        except PlanValidationError as err:
            const.LOGGER.warning("WARNING: Update Plan: %s", err)
            raise _validation_error(err) from err

    async def handle_set_action_rules(call: ServiceCall):
        """Handle replacing the list of per-cycle action rules."""
        coordinator = get_coordinator(hass)
        try:
            coordinator.save_plan({const.DATA_PLAN_RULES: call.data[const.FIELD_RULES]})
        except PlanValidationError as err:
            const.LOGGER.warning("WARNING: Set Action Rules: %s", err)
            raise _validation_error(err) from err

        const.LOGGER.info(
            "INFO: Action rules replaced (%s rules)", len(call.data[const.FIELD_RULES])
        )

    async def handle_add_one_off(call: ServiceCall):
        """Handle adding a one-off appointment or medication."""
        coordinator = get_coordinator(hass)
        plan_data = coordinator.plan_data
        if plan_data is None:
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_NO_PLAN,
            )

        one_offs = list(plan_data.get(const.DATA_PLAN_ONE_OFFS) or [])
        one_offs.append(dict(call.data))
        try:
            coordinator.save_plan({const.DATA_PLAN_ONE_OFFS: one_offs})
        except PlanValidationError as err:
            const.LOGGER.warning("WARNING: Add One-Off: %s", err)
            raise _validation_error(err) from err

    async def handle_remove_one_off(call: ServiceCall):
        """Handle removing a one-off item by id."""
        coordinator = get_coordinator(hass)
        item_id = call.data[const.FIELD_ID]
        plan_data = coordinator.plan_data
        one_offs = list((plan_data or {}).get(const.DATA_PLAN_ONE_OFFS) or [])
        remaining = [item for item in one_offs if item[const.DATA_ONE_OFF_ID] != item_id]
        if len(remaining) == len(one_offs):
            const.LOGGER.warning("WARNING: Remove One-Off: '%s' not found", item_id)
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_ONE_OFF_NOT_FOUND,
                translation_placeholders={"id": item_id},
            )
        coordinator.save_plan({const.DATA_PLAN_ONE_OFFS: remaining})

    async def handle_move_treatment(call: ServiceCall):
        """Handle moving one treatment; later treatments follow it."""
        coordinator = get_coordinator(hass)
        try:
            coordinator.move_treatment(
                call.data[const.FIELD_TREATMENT_NUMBER], call.data[const.FIELD_NEW_DATE]
            )
        except PlanValidationError as err:
            const.LOGGER.warning("WARNING: Move Treatment: %s", err)
            raise _validation_error(err) from err

    async def handle_undo_move(call: ServiceCall):
        """Handle removing the move of a treatment."""
        coordinator = get_coordinator(hass)
        try:
            coordinator.undo_move(call.data[const.FIELD_TREATMENT_NUMBER])
        except PlanValidationError as err:
            const.LOGGER.warning("WARNING: Undo Move: %s", err)
            raise _validation_error(err) from err

    async def handle_set_event_done(call: ServiceCall):
        """Handle marking an event as done (or not done)."""
        coordinator = get_coordinator(hass)
        coordinator.set_event_done(
            call.data[const.FIELD_EVENT_UID], call.data[const.FIELD_DONE]
        )

    async def handle_reset_plan(call: ServiceCall):
        """Handle clearing plan, moves and done flags."""
        if not call.data[const.FIELD_CONFIRM]:
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_RESET_NOT_CONFIRMED,
            )
        coordinator = get_coordinator(hass)
        await coordinator.async_reset()

    async def handle_export_ics(call: ServiceCall) -> ServiceResponse:
        """Handle exporting the display window as an iCalendar document."""
        coordinator = get_coordinator(hass)
        if coordinator.plan_data is None:
            raise ServiceValidationError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_NO_PLAN,
            )
        document, filename, count = coordinator.export_ics()
        return {
            const.RESPONSE_ICS: document,
            const.RESPONSE_FILENAME: filename,
            const.RESPONSE_EVENT_COUNT: count,
        }

    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_UPDATE_PLAN,
        handle_update_plan,
        schema=UPDATE_PLAN_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_SET_ACTION_RULES,
        handle_set_action_rules,
        schema=SET_ACTION_RULES_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_ADD_ONE_OFF,
        handle_add_one_off,
        schema=ADD_ONE_OFF_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_REMOVE_ONE_OFF,
        handle_remove_one_off,
        schema=REMOVE_ONE_OFF_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_MOVE_TREATMENT,
        handle_move_treatment,
        schema=MOVE_TREATMENT_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_UNDO_MOVE,
        handle_undo_move,
        schema=UNDO_MOVE_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_SET_EVENT_DONE,
        handle_set_event_done,
        schema=SET_EVENT_DONE_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_RESET_PLAN,
        handle_reset_plan,
        schema=RESET_PLAN_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_EXPORT_ICS,
        handle_export_ics,
        schema=EXPORT_ICS_SCHEMA,
        supports_response=SupportsResponse.ONLY,
    )

    const.LOGGER.info("INFO: ChemoCare services have been registered successfully")


async def async_unload_services(hass: HomeAssistant):
    """Unregister ChemoCare services when unloading the integration."""
    services = [
        const.SERVICE_UPDATE_PLAN,
        const.SERVICE_SET_ACTION_RULES,
        const.SERVICE_ADD_ONE_OFF,
        const.SERVICE_REMOVE_ONE_OFF,
        const.SERVICE_MOVE_TREATMENT,
        const.SERVICE_UNDO_MOVE,
        const.SERVICE_SET_EVENT_DONE,
        const.SERVICE_RESET_PLAN,
        const.SERVICE_EXPORT_ICS,
    ]

    for service in services:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("INFO: ChemoCare services have been unregistered")
