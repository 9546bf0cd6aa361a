# File: store.py
"""Handles persistent data storage for the ChemoCare integration.

Uses Home Assistant's Storage helper to keep the treatment plan, the list of
moved treatments and the per-event done flags across restarts. The engines
never touch storage: the coordinator reads the three buckets, computes, and
writes them back through this class.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.helpers.storage import Store

from . import const

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from .type_defs import MoveData, PlanData


class ChemoCareStore:
    """Key-value wrapper around Home Assistant's Store for ChemoCare data.

    Three buckets are kept under one storage key:
    - settings: the PlanData, or None before a plan exists / after a reset
    - moves: list of MoveData overrides, sorted by index
    - done: mapping of event uid to completion flag
    """

    def __init__(
        self, hass: HomeAssistant, storage_key: str = const.STORAGE_KEY
    ) -> None:
        """Initialize the store.

        Args:
            hass: Home Assistant core object.
            storage_key: Key to identify storage location (default: const.STORAGE_KEY).
        """
        self.hass = hass
        self._storage_key = storage_key
        self._store: Store = Store(hass, const.STORAGE_VERSION, storage_key)
        self._data: dict[str, Any] = {}  # In-memory data cache for quick access.
        self._is_new = False

    @staticmethod
    def get_default_structure() -> dict[str, Any]:
        """Return the empty data structure used for fresh installations."""
        return {
            const.DATA_SETTINGS: None,
            const.DATA_MOVES: [],
            const.DATA_DONE: {},
        }

    async def async_initialize(self) -> None:
        """Load data from storage during startup.

        If no data exists, initializes with an empty structure and marks
        the store as new. Missing buckets in an existing file are filled with
        their defaults.
        """
        const.LOGGER.debug("DEBUG: ChemoCareStore: Loading data from storage")
        existing_data = await self._store.async_load()

        if existing_data is None:
            const.LOGGER.info("INFO: No existing storage found. Initializing new data")
            self._data = ChemoCareStore.get_default_structure()
            self._is_new = True
            return

        self._is_new = False
        self._data = {**ChemoCareStore.get_default_structure(), **existing_data}
        const.LOGGER.debug(
            "DEBUG: Loaded existing data from storage: plan=%s, moves=%s, done=%s",
            self._data.get(const.DATA_SETTINGS) is not None,
            len(self._data.get(const.DATA_MOVES) or []),
            len(self._data.get(const.DATA_DONE) or {}),
        )

    @property
    def is_new(self) -> bool:
        """Return True when no storage file existed at load time."""
        return self._is_new

    @property
    def data(self) -> dict[str, Any]:
        """Retrieve the in-memory data cache."""
        return self._data

    # -------------------------------------------------------------------------------------
    # Buckets
    # -------------------------------------------------------------------------------------

    def get_settings(self) -> PlanData | None:
        """Return the stored plan, or None when no plan exists."""
        return self._data.get(const.DATA_SETTINGS)

    def put_settings(self, settings: PlanData | None) -> None:
        """Replace the stored plan in memory."""
        self._data[const.DATA_SETTINGS] = settings

    def get_moves(self) -> list[MoveData]:
        """Return the stored moves (empty list when none)."""
        return list(self._data.get(const.DATA_MOVES) or [])

    def put_moves(self, moves: list[MoveData]) -> None:
        """Replace the stored moves in memory."""
        self._data[const.DATA_MOVES] = list(moves)

    def get_done(self) -> dict[str, bool]:
        """Return the stored done flags keyed by event uid."""
        return dict(self._data.get(const.DATA_DONE) or {})

    def put_done(self, done: dict[str, bool]) -> None:
        """Replace the stored done flags in memory."""
        self._data[const.DATA_DONE] = dict(done)

    # -------------------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------------------

    async def async_save(self) -> None:
        """Save the current data structure to storage asynchronously.

        Errors are logged but do not stop execution:
            OSError: File system issues prevent saving.
            TypeError: Data contains non-serializable types.
            ValueError: Data is invalid for JSON serialization.
        """
        try:
            await self._store.async_save(self._data)
            const.LOGGER.debug("DEBUG: Data saved successfully to storage")
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to file system error: %s. "
                "Check disk space and file permissions for %s",
                err,
                self._store.path,
            )
        except TypeError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to non-serializable data: %s",
                err,
            )
        except ValueError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to invalid data format: %s",
                err,
            )

    async def async_clear_data(self) -> None:
        """Clear plan, moves and done flags and persist the empty structure."""
        const.LOGGER.warning("WARNING: Clearing all ChemoCare data and resetting storage")
        self._data = ChemoCareStore.get_default_structure()
        await self.async_save()

    async def async_delete_storage(self) -> None:
        """Delete the storage file completely from disk."""
        self._data = ChemoCareStore.get_default_structure()
        try:
            await self._store.async_remove()
            const.LOGGER.info(
                "INFO: Storage file removed successfully: %s",
                self._store.path,
            )
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to remove storage file %s: %s. Check file permissions",
                self._store.path,
                err,
            )
