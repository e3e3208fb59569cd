"""Fixed-size in-memory state store.

This is the only component allowed to hold device on/off state. It performs
no I/O and no locking; all callers run on a single event loop.
"""

from __future__ import annotations

from collections.abc import Sequence

from pyhubsync.exceptions import DeviceIndexError, HubSyncConfigError, HubSyncPayloadError
from pyhubsync.models.status import DeviceState, to_snapshot
from pyhubsync.state.events import ChangeSource, StateChange


class StateStore:
    """Ordered table of ``device_count`` device states, indexed ``0..N-1``.

    Entries are created once at construction and mutated in place for the
    process lifetime. Given the same sequence of writes, :meth:`snapshot`
    always produces the same string.
    """

    def __init__(self, device_count: int) -> None:
        if device_count <= 0:
            raise HubSyncConfigError(f"device_count must be positive, got {device_count}")
        self._states: list[DeviceState] = [DeviceState(index=i) for i in range(device_count)]

    @property
    def device_count(self) -> int:
        return len(self._states)

    def __len__(self) -> int:
        return len(self._states)

    def _state(self, index: int) -> DeviceState:
        # bool is an int subclass but never a valid index.
        if isinstance(index, bool) or not isinstance(index, int):
            raise DeviceIndexError(index, len(self._states))
        if not 0 <= index < len(self._states):
            raise DeviceIndexError(index, len(self._states))
        return self._states[index]

    def get(self, index: int) -> bool:
        return self._state(index).is_on

    def set(self, index: int, value: bool) -> bool:
        """Write a device value; return whether it actually differed."""
        state = self._state(index)
        value = bool(value)
        if state.is_on == value:
            return False
        state.is_on = value
        return True

    def apply_vector(
        self,
        values: Sequence[float | bool],
        *,
        source: ChangeSource = ChangeSource.HUB,
    ) -> list[StateChange]:
        """Apply a full state vector and return the changes in index order.

        A vector of the wrong length is rejected before anything is written.
        """
        if len(values) != len(self._states):
            raise HubSyncPayloadError(f"State vector has {len(values)} entries, expected {len(self._states)}")

        changes: list[StateChange] = []
        for index, value in enumerate(values):
            is_on = value == 1
            if self.set(index, is_on):
                changes.append(StateChange(index=index, is_on=is_on, source=source))
        return changes

    def snapshot(self) -> str:
        """Return the ``'0'``/``'1'`` string of all devices in index order."""
        return to_snapshot(state.is_on for state in self._states)

    def states(self) -> list[DeviceState]:
        """Return copies of all device states."""
        return [state.model_copy() for state in self._states]
