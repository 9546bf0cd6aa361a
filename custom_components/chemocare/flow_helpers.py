# File: flow_helpers.py
"""Schema builders shared by the config flow and options flow."""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant.helpers import selector

from . import const


def build_plan_schema(defaults: dict[str, Any] | None = None) -> vol.Schema:
    """Build the form schema for the initial treatment plan.

    Args:
        defaults: Previously entered values, shown again after a form error.
    """
    defaults = defaults or {}
    schema: dict[Any, Any] = {
        vol.Required(
            const.CONF_CALENDAR_NAME,
            default=defaults.get(const.CONF_CALENDAR_NAME, const.DEFAULT_CALENDAR_NAME),
        ): selector.TextSelector(),
        vol.Required(
            const.CONF_START_DATE,
            default=defaults.get(const.CONF_START_DATE, vol.UNDEFINED),
        ): selector.DateSelector(),
        vol.Required(
            const.CONF_FREQUENCY_DAYS,
            default=defaults.get(
                const.CONF_FREQUENCY_DAYS, const.DEFAULT_FREQUENCY_DAYS
            ),
        ): selector.NumberSelector(
            selector.NumberSelectorConfig(
                min=const.MIN_FREQUENCY_DAYS,
                step=1,
                mode=selector.NumberSelectorMode.BOX,
                unit_of_measurement="d",
            )
        ),
        vol.Optional(
            const.CONF_CYCLES,
            default=defaults.get(const.CONF_CYCLES, 0),
        ): selector.NumberSelector(
            selector.NumberSelectorConfig(
                min=0, step=1, mode=selector.NumberSelectorMode.BOX
            )
        ),
    }
    return vol.Schema(schema)


def build_options_schema(options: dict[str, Any]) -> vol.Schema:
    """Build the options form schema (display window and language)."""
    return vol.Schema(
        {
            vol.Required(
                const.CONF_MONTHS_AHEAD,
                default=options.get(const.CONF_MONTHS_AHEAD, const.DEFAULT_MONTHS_AHEAD),
            ): selector.NumberSelector(
                selector.NumberSelectorConfig(
                    min=1,
                    max=const.MAX_MONTHS_AHEAD,
                    step=1,
                    mode=selector.NumberSelectorMode.BOX,
                )
            ),
            vol.Required(
                const.CONF_LANGUAGE,
                default=options.get(const.CONF_LANGUAGE, const.DEFAULT_LANGUAGE),
            ): selector.SelectSelector(
                selector.SelectSelectorConfig(
                    options=const.LANGUAGE_OPTIONS,
                    mode=selector.SelectSelectorMode.LIST,
                    translation_key=const.CONF_LANGUAGE,
                )
            ),
        }
    )


def normalize_plan_input(user_input: dict[str, Any]) -> dict[str, Any]:
    """Turn selector output (floats, blanks) into clean config entry data."""
    cycles = user_input.get(const.CONF_CYCLES)
    return {
        const.CONF_CALENDAR_NAME: str(
            user_input.get(const.CONF_CALENDAR_NAME) or const.DEFAULT_CALENDAR_NAME
        ).strip(),
        const.CONF_START_DATE: user_input.get(const.CONF_START_DATE),
        const.CONF_FREQUENCY_DAYS: int(
            user_input.get(const.CONF_FREQUENCY_DAYS) or 0
        ),
        const.CONF_CYCLES: int(cycles) if cycles else None,
    }
