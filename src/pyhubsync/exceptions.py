"""Custom exception hierarchy for pyhubsync."""

from __future__ import annotations


class HubSyncError(Exception):
    """Base exception for all pyhubsync errors."""


class HubSyncConfigError(HubSyncError):
    """Invalid or missing configuration."""


class HubSyncTransportError(HubSyncError):
    """HTTP-level failure talking to the hub (network, non-2xx)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class HubSyncPayloadError(HubSyncError):
    """A status payload was not valid JSON or had the wrong shape."""


class HubSyncStartupError(HubSyncError):
    """Initial state could not be pulled from the hub.

    The underlying transport or payload error is chained as ``__cause__``.
    """


class DeviceIndexError(HubSyncError, IndexError):
    """A device index outside ``0..device_count-1`` was used.

    This always signals a configuration or programming error; indices are
    never wrapped or truncated.
    """

    def __init__(self, index: object, device_count: int) -> None:
        self.index = index
        self.device_count = device_count
        super().__init__(f"device index {index!r} out of range for {device_count} devices")
