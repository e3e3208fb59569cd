"""Internal constants shared across the library."""

USER_AGENT = "pyhubsync"

# Hub endpoints, relative to the configured base URL.
SET_STATUS_ENDPOINT = "set_status"
GET_STATUS_ENDPOINT = "get_status"

# Path the hub pushes full state vectors to.
INBOUND_STATUS_PATH = "/setStatus"

DEFAULT_LOCAL_PORT = 8080
DEFAULT_DEVICE_COUNT = 16
DEFAULT_DEBOUNCE_DELAY = 0.02

_UNIQUE_ID_PREFIX = "L"


def device_unique_id(index: int) -> str:
    """Framework identifier for a device index (``0`` -> ``"L00"``)."""
    return f"{_UNIQUE_ID_PREFIX}{index:02d}"
