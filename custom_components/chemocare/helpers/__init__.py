# File: helpers/__init__.py
"""Helper functions for ChemoCare.

Submodules:
    - device_helpers: DeviceInfo construction
    - entity_helpers: Config entry and coordinator lookup for services
    - ics_helpers: iCalendar export (pure, no `hass` needed)

Usage:
    from .helpers.device_helpers import create_plan_device_info
    from .helpers import ics_helpers
"""

from . import device_helpers, entity_helpers, ics_helpers

__all__ = ["device_helpers", "entity_helpers", "ics_helpers"]
