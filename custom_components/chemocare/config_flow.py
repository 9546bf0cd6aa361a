# File: config_flow.py
"""Config flow for the ChemoCare integration.

A single `user` step collects the calendar name, the first treatment date,
the frequency in days and an optional number of cycles. The entered plan is
stored in the config entry data and seeded into storage on first setup.
"""

from typing import Any

from homeassistant import config_entries
from homeassistant.core import callback

from . import const
from . import data_builders as db
from . import flow_helpers as fh
from .options_flow import ChemoCareOptionsFlowHandler

# pylint: disable=abstract-method


class ChemoCareConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for ChemoCare."""

    VERSION = 1

    async def async_step_user(self, user_input: dict[str, Any] | None = None):
        """Collect the initial treatment plan."""
        if any(self._async_current_entries()):
            return self.async_abort(reason=const.TRANS_KEY_ABORT_SINGLE_INSTANCE)

        errors: dict[str, str] = {}
        if user_input is not None:
            plan_input = fh.normalize_plan_input(user_input)
            errors = db.validate_plan_input(plan_input)
            if not errors:
                const.LOGGER.info(
                    "INFO: Creating ChemoCare entry '%s' starting %s",
                    plan_input[const.CONF_CALENDAR_NAME],
                    plan_input[const.CONF_START_DATE],
                )
                return self.async_create_entry(
                    title=plan_input[const.CONF_CALENDAR_NAME],
                    data=plan_input,
                    options={
                        const.CONF_MONTHS_AHEAD: const.DEFAULT_MONTHS_AHEAD,
                        const.CONF_LANGUAGE: const.DEFAULT_LANGUAGE,
                    },
                )
            const.LOGGER.debug("DEBUG: Plan form errors: %s", errors)

        return self.async_show_form(
            step_id=const.CONFIG_FLOW_STEP_USER,
            data_schema=fh.build_plan_schema(user_input),
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        """Return the Options Flow."""
        return ChemoCareOptionsFlowHandler()
