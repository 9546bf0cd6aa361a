# File: options_flow.py
"""Options Flow for the ChemoCare integration.

Edits how the schedule is shown, not the schedule itself: the number of
months materialized ahead and the label language. Plan edits go through
the services so the freeze/merge contract always applies.
"""

from typing import Any

from homeassistant import config_entries

from . import const
from . import flow_helpers as fh


class ChemoCareOptionsFlowHandler(config_entries.OptionsFlow):
    """Options Flow for display settings."""

    async def async_step_init(self, user_input: dict[str, Any] | None = None):
        """Show and store the display options."""
        if user_input is not None:
            options = {
                const.CONF_MONTHS_AHEAD: int(user_input[const.CONF_MONTHS_AHEAD]),
                const.CONF_LANGUAGE: user_input[const.CONF_LANGUAGE],
            }
            const.LOGGER.debug("DEBUG: Saving ChemoCare options: %s", options)
            return self.async_create_entry(title="", data=options)

        return self.async_show_form(
            step_id=const.OPTIONS_FLOW_STEP_INIT,
            data_schema=fh.build_options_schema(dict(self.config_entry.options)),
        )
