"""Tests for the ChemoCare config flow and options flow."""

# pylint: disable=redefined-outer-name  # Pytest fixtures
# pylint: disable=unused-argument  # Fixtures needed for test setup

from unittest.mock import patch

from homeassistant import config_entries
from homeassistant.core import HomeAssistant
from homeassistant.data_entry_flow import FlowResultType
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.chemocare.const import (
    CONF_CALENDAR_NAME,
    CONF_CYCLES,
    CONF_FREQUENCY_DAYS,
    CONF_LANGUAGE,
    CONF_MONTHS_AHEAD,
    CONF_START_DATE,
    DEFAULT_LANGUAGE,
    DEFAULT_MONTHS_AHEAD,
    DOMAIN,
    LANGUAGE_NL,
)


async def test_form_user_flow_success(hass: HomeAssistant) -> None:
    """Test successful user config flow."""
    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )
    assert result.get("type") == FlowResultType.FORM
    assert result.get("step_id") == "user"

    with patch(
        "custom_components.chemocare.async_setup_entry",
        return_value=True,
    ) as mock_setup_entry:
        result = await hass.config_entries.flow.async_configure(
            result.get("flow_id"),
            user_input={
                CONF_CALENDAR_NAME: "Mam",
                CONF_START_DATE: "2025-01-01",
                CONF_FREQUENCY_DAYS: 21.0,
                CONF_CYCLES: 6.0,
            },
        )
        await hass.async_block_till_done()

    assert result.get("type") == FlowResultType.CREATE_ENTRY
    assert result.get("title") == "Mam"
    assert result.get("data") == {
        CONF_CALENDAR_NAME: "Mam",
        CONF_START_DATE: "2025-01-01",
        CONF_FREQUENCY_DAYS: 21,
        CONF_CYCLES: 6,
    }
    assert result.get("options") == {
        CONF_MONTHS_AHEAD: DEFAULT_MONTHS_AHEAD,
        CONF_LANGUAGE: DEFAULT_LANGUAGE,
    }
    assert len(mock_setup_entry.mock_calls) == 1


async def test_form_user_flow_open_ended(hass: HomeAssistant) -> None:
    """Zero cycles is stored as an open-ended course."""
    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )

    with patch(
        "custom_components.chemocare.async_setup_entry",
        return_value=True,
    ):
        result = await hass.config_entries.flow.async_configure(
            result.get("flow_id"),
            user_input={
                CONF_CALENDAR_NAME: "ChemoCare",
                CONF_START_DATE: "2025-01-01",
                CONF_FREQUENCY_DAYS: 14,
                CONF_CYCLES: 0,
            },
        )
        await hass.async_block_till_done()

    assert result.get("type") == FlowResultType.CREATE_ENTRY
    assert result.get("data", {}).get(CONF_CYCLES) is None


async def test_single_instance(
    hass: HomeAssistant, mock_config_entry: MockConfigEntry
) -> None:
    """A second entry is not allowed."""
    mock_config_entry.add_to_hass(hass)

    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )

    assert result.get("type") == FlowResultType.ABORT
    assert result.get("reason") == "single_instance_allowed"


async def test_options_flow(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """The options flow stores window size and language."""
    result = await hass.config_entries.options.async_init(init_integration.entry_id)
    assert result.get("type") == FlowResultType.FORM
    assert result.get("step_id") == "init"

    result = await hass.config_entries.options.async_configure(
        result.get("flow_id"),
        user_input={CONF_MONTHS_AHEAD: 6.0, CONF_LANGUAGE: LANGUAGE_NL},
    )
    await hass.async_block_till_done()

    assert result.get("type") == FlowResultType.CREATE_ENTRY
    assert init_integration.options == {
        CONF_MONTHS_AHEAD: 6,
        CONF_LANGUAGE: LANGUAGE_NL,
    }
