# File: __init__.py
"""Initialization file for the ChemoCare integration.

Handles setting up the integration, including loading configuration entries,
initializing data storage, and preparing the coordinator for data handling.

Key Features:
- Config entry setup and unload support.
- Coordinator initialization for the treatment schedule.
- Storage management for the plan, moved treatments and done flags.
"""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady

from . import const
from .coordinator import ChemoCareCoordinator
from .services import async_setup_services, async_unload_services
from .store import ChemoCareStore


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info("INFO: Starting setup for ChemoCare entry: %s", entry.entry_id)

    # Local calendar days follow the Home Assistant time zone
    const.set_default_timezone(hass)

    store = ChemoCareStore(hass, const.STORAGE_KEY)
    await store.async_initialize()

    coordinator = ChemoCareCoordinator(hass, entry, store)

    try:
        await coordinator.async_config_entry_first_refresh()
    except ConfigEntryNotReady as e:
        const.LOGGER.error("ERROR: Failed to refresh coordinator data: %s", e)
        raise ConfigEntryNotReady from e

    hass.data.setdefault(const.DOMAIN, {})[entry.entry_id] = {
        const.COORDINATOR: coordinator,
        const.STORE: store,
    }

    async_setup_services(hass)

    await hass.config_entries.async_forward_entry_setups(entry, const.PLATFORMS)

    # Options (window size, language) change titles and the window: reload
    entry.async_on_unload(entry.add_update_listener(async_reload_entry))

    const.LOGGER.info("INFO: ChemoCare setup complete for entry: %s", entry.entry_id)
    return True


async def async_reload_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload the config entry after an options change."""
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    const.LOGGER.info("INFO: Unloading ChemoCare entry: %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, const.PLATFORMS)

    if unload_ok:
        hass.data[const.DOMAIN].pop(entry.entry_id)

        if not hass.data[const.DOMAIN]:
            await async_unload_services(hass)

    return unload_ok


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Handle removal of a config entry."""
    const.LOGGER.info("INFO: Removing ChemoCare entry: %s", entry.entry_id)

    store = ChemoCareStore(hass, const.STORAGE_KEY)
    await store.async_delete_storage()

    const.LOGGER.info("INFO: ChemoCare entry data cleared: %s", entry.entry_id)
