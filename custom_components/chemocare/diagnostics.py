"""Diagnostics support for ChemoCare integration.

The diagnostics JSON returns the raw storage data - identical to the
chemocare_data file - together with the options of the entry.
"""

from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from . import const
from .coordinator import ChemoCareCoordinator


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    coordinator: ChemoCareCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]

    return {
        "options": dict(entry.options),
        "storage": coordinator.store.data,
    }
