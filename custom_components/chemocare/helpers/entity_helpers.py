# File: helpers/entity_helpers.py
"""Config entry lookup helpers for ChemoCare services."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.exceptions import HomeAssistantError

from .. import const

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import ChemoCareCoordinator


def get_first_chemocare_entry(hass: HomeAssistant) -> str | None:
    """Get the entry_id of the first set up ChemoCare config entry.

    Returns:
        Config entry ID string, or None if no entry is set up
    """
    domain_entries = hass.data.get(const.DOMAIN)
    if not domain_entries:
        return None
    return next(iter(domain_entries.keys()), None)


def get_coordinator(hass: HomeAssistant) -> ChemoCareCoordinator:
    """Return the coordinator of the first ChemoCare entry.

    Raises:
        HomeAssistantError: When no ChemoCare entry is set up.
    """
    entry_id = get_first_chemocare_entry(hass)
    if not entry_id:
        const.LOGGER.warning("WARNING: No ChemoCare config entry found")
        raise HomeAssistantError(
            translation_domain=const.DOMAIN,
            translation_key=const.TRANS_KEY_ERROR_NO_ENTRY,
        )
    return hass.data[const.DOMAIN][entry_id][const.COORDINATOR]
