"""HTTP transport for talking to the hub."""

from __future__ import annotations

import logging
from typing import Protocol

import aiohttp

from pyhubsync._constants import GET_STATUS_ENDPOINT, SET_STATUS_ENDPOINT, USER_AGENT
from pyhubsync.config import HubSyncConfig
from pyhubsync.exceptions import HubSyncTransportError

_logger = logging.getLogger(__name__)


class HubTransport(Protocol):
    """Structural transport interface used by the dispatcher and bridge.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpHubTransport`) concrete.
    """

    async def post_status(self, snapshot: str) -> None:
        ...

    async def get_status(self) -> str:
        ...


class HttpHubTransport:
    """aiohttp-backed hub transport.

    Outbound pushes send the snapshot bitstring as a plain-text body;
    the startup pull returns the raw response text for the caller to parse.
    """

    def __init__(self, config: HubSyncConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        # total=None really means no timeout, unlike the session default.
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def _request(self, method: str, endpoint: str, *, data: str | None = None) -> str:
        url = self._config.endpoint_url(endpoint)
        headers = {"user-agent": USER_AGENT}
        if data is not None:
            headers["content-type"] = "text/plain; charset=ascii"

        _logger.debug("%s %s", method, url)

        try:
            async with self._http.request(
                method,
                url,
                data=data.encode("ascii") if data is not None else None,
                headers=headers,
                timeout=self._timeout,
            ) as resp:
                text = await resp.text()
                if not 200 <= resp.status < 300:
                    raise HubSyncTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except HubSyncTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise HubSyncTransportError(
                f"Request to {endpoint} failed: {exc!r}",
                endpoint=endpoint,
            ) from exc
        return text

    async def post_status(self, snapshot: str) -> None:
        """POST the snapshot to the hub's ``set_status`` endpoint."""
        await self._request("POST", SET_STATUS_ENDPOINT, data=snapshot)

    async def get_status(self) -> str:
        """GET the hub's ``get_status`` endpoint and return the body text."""
        return await self._request("GET", GET_STATUS_ENDPOINT)
