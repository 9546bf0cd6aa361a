"""Shared fixtures for ChemoCare tests."""

from typing import Any
from unittest.mock import patch

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.chemocare.const import (
    CONF_CALENDAR_NAME,
    CONF_CYCLES,
    CONF_FREQUENCY_DAYS,
    CONF_LANGUAGE,
    CONF_MONTHS_AHEAD,
    CONF_START_DATE,
    DATA_DONE,
    DATA_MOVES,
    DATA_SETTINGS,
    DOMAIN,
    LANGUAGE_EN,
)

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a mock config entry for ChemoCare."""
    return MockConfigEntry(
        domain=DOMAIN,
        title="ChemoCare",
        data={
            CONF_CALENDAR_NAME: "ChemoCare",
            CONF_START_DATE: "2025-01-01",
            CONF_FREQUENCY_DAYS: 14,
            CONF_CYCLES: 6,
        },
        options={
            CONF_MONTHS_AHEAD: 12,
            CONF_LANGUAGE: LANGUAGE_EN,
        },
        entry_id="test_entry_id",
        unique_id=None,
    )


@pytest.fixture
def mock_storage_data() -> dict[str, Any]:
    """Create mock storage data: a 14-day plan with one action rule."""
    return {
        DATA_SETTINGS: {
            "start_date": "2025-01-01",
            "frequency_days": 14,
            "cycles": 6,
            "rules": [
                {
                    "id": "nausea",
                    "day": 2,
                    "title": "Anti-nausea",
                    "notes": "With food",
                    "time": "08:00",
                    "enabled": True,
                },
                {
                    "id": "blood",
                    "day": -1,
                    "title": "Blood test",
                    "notes": "",
                    "time": None,
                    "enabled": True,
                },
            ],
            "one_offs": [
                {
                    "id": "scan",
                    "date": "2025-02-05",
                    "time": "14:30",
                    "title": "CT scan",
                    "notes": "Radiology, floor 2",
                    "kind": "appointment",
                },
            ],
            "calendar_name": "ChemoCare",
        },
        DATA_MOVES: [],
        DATA_DONE: {},
    }


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
    mock_storage_data: dict[str, Any],  # pylint: disable=redefined-outer-name
) -> MockConfigEntry:
    """Set up the ChemoCare integration for testing with mocked storage."""
    mock_config_entry.add_to_hass(hass)

    # Mock the Store's async_load to return our test data
    with patch(
        "homeassistant.helpers.storage.Store.async_load",
        return_value=mock_storage_data,
    ):
        assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
        await hass.async_block_till_done()

    return mock_config_entry
