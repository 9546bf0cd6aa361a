"""Base entity classes for ChemoCare integration."""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .coordinator import ChemoCareCoordinator
from .helpers.device_helpers import create_plan_device_info


class ChemoCareCoordinatorEntity(CoordinatorEntity[ChemoCareCoordinator]):
    """Base entity class for ChemoCare entities with typed coordinator access.

    Every entity of an entry shares the plan device and a unique_id built
    from the entry id plus a per-entity suffix.
    """

    _attr_has_entity_name = True

    def __init__(
        self,
        coordinator: ChemoCareCoordinator,
        config_entry: ConfigEntry,
        unique_id_suffix: str,
    ) -> None:
        """Initialize the entity."""
        super().__init__(coordinator)
        self._config_entry = config_entry
        self._attr_unique_id = f"{config_entry.entry_id}{unique_id_suffix}"
        self._attr_device_info = create_plan_device_info(config_entry)

    @property
    def coordinator(self) -> ChemoCareCoordinator:
        """Return typed coordinator."""
        return object.__getattribute__(self, "_coordinator")

    @coordinator.setter
    def coordinator(self, value: ChemoCareCoordinator) -> None:
        """Set coordinator with proper typing."""
        object.__setattr__(self, "_coordinator", value)
