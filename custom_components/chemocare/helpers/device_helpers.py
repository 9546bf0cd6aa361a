# File: helpers/device_helpers.py
"""Device registry helper functions for ChemoCare.

Functions that construct DeviceInfo objects for Home Assistant's device registry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.helpers.device_registry import DeviceEntryType, DeviceInfo

from .. import const

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry


def create_plan_device_info(config_entry: ConfigEntry) -> DeviceInfo:
    """Create device info for the treatment plan of a config entry.

    All ChemoCare entities (calendar and sensors) of one entry hang off this
    single service device.
    """
    return DeviceInfo(
        identifiers={(const.DOMAIN, config_entry.entry_id)},
        name=config_entry.title,
        manufacturer=const.DEVICE_MANUFACTURER,
        model=const.DEVICE_MODEL,
        entry_type=DeviceEntryType.SERVICE,
    )
