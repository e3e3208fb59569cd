"""pyhubsync - Async bidirectional state sync between local switches and an HTTP light hub."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyhubsync")
except PackageNotFoundError:
    __version__ = "0+local"
from pyhubsync.adapter import Accessory, DeviceAdapter
from pyhubsync.bridge import HubBridge
from pyhubsync.config import HubSyncConfig
from pyhubsync.dispatcher import OutboundSyncDispatcher
from pyhubsync.exceptions import (
    DeviceIndexError,
    HubSyncConfigError,
    HubSyncError,
    HubSyncPayloadError,
    HubSyncStartupError,
    HubSyncTransportError,
)
from pyhubsync.inbound import InboundSyncHandler
from pyhubsync.models import DeviceState, StatusPayload, to_snapshot
from pyhubsync.state.events import ChangeSource, StateChange
from pyhubsync.state.store import StateStore

__all__ = [
    "__version__",
    "Accessory",
    "ChangeSource",
    "DeviceAdapter",
    "DeviceIndexError",
    "DeviceState",
    "HubBridge",
    "HubSyncConfig",
    "HubSyncConfigError",
    "HubSyncError",
    "HubSyncPayloadError",
    "HubSyncStartupError",
    "HubSyncTransportError",
    "InboundSyncHandler",
    "OutboundSyncDispatcher",
    "StateChange",
    "StateStore",
    "StatusPayload",
    "to_snapshot",
]
