"""Per-device facade between the accessory framework and the state store."""

from __future__ import annotations

import logging
from typing import Protocol

from pyhubsync._constants import device_unique_id
from pyhubsync.dispatcher import OutboundSyncDispatcher
from pyhubsync.state.store import StateStore

_logger = logging.getLogger(__name__)


class Accessory(Protocol):
    """What the host framework must expose for a single switch."""

    def update_characteristic(self, is_on: bool) -> None:
        ...


class DeviceAdapter:
    """Bridges one device's on/off characteristic to the store.

    Local writes go to the store and trigger a debounced dispatch; the
    dispatch outcome is never reported back to the caller. Reads never touch
    the network and may lag the physical hub until its next push.
    """

    def __init__(
        self,
        index: int,
        store: StateStore,
        dispatcher: OutboundSyncDispatcher,
        *,
        accessory: Accessory | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        # Validates the index up front.
        store.get(index)
        self._index = index
        self._store = store
        self._dispatcher = dispatcher
        self._logger = logger or _logger
        self.accessory = accessory

    @property
    def index(self) -> int:
        return self._index

    @property
    def unique_id(self) -> str:
        return device_unique_id(self._index)

    def set_on(self, value: bool) -> None:
        """Handle a local actor switching the device."""
        is_on = bool(value)
        self._store.set(self._index, is_on)
        self._logger.debug("Set Characteristic On %s -> %s", self.unique_id, is_on)
        self._dispatcher.trigger()

    def get_on(self) -> bool:
        is_on = self._store.get(self._index)
        self._logger.debug("Get Characteristic On %s -> %s", self.unique_id, is_on)
        return is_on

    def reflect(self, is_on: bool) -> None:
        """Tell the framework about a value that changed on the hub side."""
        if self.accessory is None:
            return
        self._logger.debug("Update Characteristic On %s -> %s", self.unique_id, is_on)
        self.accessory.update_characteristic(is_on)
