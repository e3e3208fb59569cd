"""Data models for hub status payloads."""

from pyhubsync.models.status import DeviceState, StatusPayload, to_snapshot

__all__ = [
    "DeviceState",
    "StatusPayload",
    "to_snapshot",
]
