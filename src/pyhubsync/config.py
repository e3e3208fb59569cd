"""Bridge configuration for pyhubsync."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyhubsync._constants import DEFAULT_DEBOUNCE_DELAY, DEFAULT_DEVICE_COUNT, DEFAULT_LOCAL_PORT
from pyhubsync.exceptions import HubSyncConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class HubSyncConfig:
    """Bridge configuration.

    Parameters
    ----------
    url : str
        Hub base URL, e.g. ``"http://192.168.1.50/"``. Endpoint names
        (``set_status``, ``get_status``) are appended to it.
    local_port : int
        Port the inbound HTTP server listens on.
    device_count : int
        Number of switches exposed by the hub. Fixed for the process lifetime.
    host : str
        Interface the inbound HTTP server binds to.
    debounce_delay : float
        Seconds to wait after the last local change before dispatching.
    request_timeout : float or None
        Total timeout for outbound hub requests. ``None`` disables the
        timeout entirely, so a hung hub holds the dispatch lock until the
        connection resolves.
    mark_sent_on_failure : bool
        Record a snapshot as sent even when its push failed. This suppresses
        retries of the failed push until the state changes again. Defaults
        to ``False`` (only successful pushes are recorded).
    pull_on_start : bool
        Seed the state store from ``get_status`` when the bridge starts.
    """

    url: str
    local_port: int = DEFAULT_LOCAL_PORT
    device_count: int = DEFAULT_DEVICE_COUNT
    host: str = "0.0.0.0"  # noqa: S104
    debounce_delay: float = DEFAULT_DEBOUNCE_DELAY
    request_timeout: float | None = None
    mark_sent_on_failure: bool = False
    pull_on_start: bool = False

    def validate(self) -> None:
        """Raise :class:`HubSyncConfigError` if any field is unusable."""
        if not self.url or not self.url.strip():
            raise HubSyncConfigError("url must be non-empty")
        if self.device_count <= 0:
            raise HubSyncConfigError(f"device_count must be positive, got {self.device_count}")
        if not 0 <= self.local_port <= 65535:
            raise HubSyncConfigError(f"local_port must be between 0 and 65535, got {self.local_port}")
        if self.debounce_delay < 0:
            raise HubSyncConfigError(f"debounce_delay must not be negative, got {self.debounce_delay}")
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise HubSyncConfigError(f"request_timeout must be positive, got {self.request_timeout}")

    def endpoint_url(self, endpoint: str) -> str:
        """Join the hub base URL and an endpoint name."""
        return f"{self.url.rstrip('/')}/{endpoint.lstrip('/')}"

    @classmethod
    def from_env(cls, **overrides: Any) -> HubSyncConfig:
        """Create configuration from environment variables.

        Reads ``HUBSYNC_URL`` plus the optional ``HUBSYNC_*`` variables
        matching each field name. Explicit keyword arguments override
        environment values.
        """
        env = os.environ

        config_kwargs: dict[str, Any] = {}
        url = env.get("HUBSYNC_URL")
        if url is not None:
            config_kwargs["url"] = url
        host = env.get("HUBSYNC_HOST")
        if host is not None:
            config_kwargs["host"] = host

        _ENV_INT_MAP = {
            "HUBSYNC_LOCAL_PORT": "local_port",
            "HUBSYNC_DEVICE_COUNT": "device_count",
        }
        for env_key, field_name in _ENV_INT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                try:
                    config_kwargs[field_name] = int(val)
                except ValueError as exc:
                    raise HubSyncConfigError(f"{env_key} must be an integer, got {val!r}") from exc

        delay_env = env.get("HUBSYNC_DEBOUNCE_DELAY")
        if delay_env is not None and "debounce_delay" not in overrides:
            config_kwargs["debounce_delay"] = float(delay_env)

        timeout_env = env.get("HUBSYNC_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = float(timeout_env) if timeout_env.strip() else None

        if "mark_sent_on_failure" not in overrides:
            config_kwargs["mark_sent_on_failure"] = _env_bool(env.get("HUBSYNC_MARK_SENT_ON_FAILURE"), False)
        if "pull_on_start" not in overrides:
            config_kwargs["pull_on_start"] = _env_bool(env.get("HUBSYNC_PULL_ON_START"), False)

        config_kwargs.update(overrides)
        if "url" not in config_kwargs:
            raise HubSyncConfigError("HUBSYNC_URL is not set and no url was given")

        return cls(**config_kwargs)
