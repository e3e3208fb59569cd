"""High-level async bridge between local switches and the hub."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import aiohttp
from aiohttp import web

from pyhubsync._transport import HttpHubTransport, HubTransport
from pyhubsync.adapter import Accessory, DeviceAdapter
from pyhubsync.config import HubSyncConfig
from pyhubsync.dispatcher import OutboundSyncDispatcher
from pyhubsync.exceptions import HubSyncError, HubSyncPayloadError, HubSyncStartupError, HubSyncTransportError
from pyhubsync.inbound import InboundSyncHandler
from pyhubsync.models.status import StatusPayload
from pyhubsync.state.events import ChangeSource, StateChange
from pyhubsync.state.store import StateStore

_logger = logging.getLogger(__name__)


class HubBridge:
    """Keeps a fixed set of local switches in sync with the hub.

    Usage::

        async with HubBridge(config) as bridge:
            bridge.attach_accessory(0, my_switch)
            bridge.adapter(0).set_on(True)
    """

    def __init__(
        self,
        config: HubSyncConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: HubTransport | None = None,
        accessories: Sequence[Accessory | None] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        config.validate()
        if accessories is not None and len(accessories) > config.device_count:
            raise HubSyncError(f"{len(accessories)} accessories given for {config.device_count} devices")
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._accessories = list(accessories or [])
        self._logger = logger or _logger
        self.store = StateStore(config.device_count)
        self._dispatcher: OutboundSyncDispatcher | None = None
        self._handler: InboundSyncHandler | None = None
        self._adapters: list[DeviceAdapter] = []
        self._runner: web.AppRunner | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> HubBridge:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpHubTransport(self._config, self._http_session)

        self._dispatcher = OutboundSyncDispatcher(
            self.store,
            self._transport,
            debounce_delay=self._config.debounce_delay,
            mark_sent_on_failure=self._config.mark_sent_on_failure,
            logger=self._logger,
        )
        self._adapters = [
            DeviceAdapter(
                index,
                self.store,
                self._dispatcher,
                accessory=self._accessories[index] if index < len(self._accessories) else None,
                logger=self._logger,
            )
            for index in range(self._config.device_count)
        ]
        self._handler = InboundSyncHandler(
            self.store,
            on_change=self._reflect,
            dispatcher=self._dispatcher,
            logger=self._logger,
        )

        try:
            if self._config.pull_on_start:
                await self.pull_status()
            await self._start_server()
        except BaseException:
            await self.__aexit__(None, None, None)
            raise
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
            self._logger.info("Http server stopped")
        if self._dispatcher is not None:
            await self._dispatcher.aclose()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    async def _start_server(self) -> None:
        handler = self._require_handler()
        runner = web.AppRunner(handler.build_app())
        await runner.setup()
        site = web.TCPSite(runner, self._config.host, self._config.local_port)
        try:
            await site.start()
        except OSError:
            await runner.cleanup()
            raise
        self._runner = runner
        self._logger.info("Http server listening on %s:%d", self._config.host, self.port)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_handler(self) -> InboundSyncHandler:
        if self._handler is None:
            raise HubSyncError("Bridge not started. Use 'async with HubBridge(...) as bridge:'")
        return self._handler

    def _require_transport(self) -> HubTransport:
        if self._transport is None:
            raise HubSyncError("Bridge not started. Use 'async with HubBridge(...) as bridge:'")
        return self._transport

    def _reflect(self, index: int, is_on: bool) -> None:
        self._adapters[index].reflect(is_on)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def port(self) -> int:
        """Port the inbound server is bound to (resolves ``local_port=0``)."""
        if self._runner is None or not self._runner.addresses:
            return self._config.local_port
        return int(self._runner.addresses[0][1])

    @property
    def dispatcher(self) -> OutboundSyncDispatcher:
        if self._dispatcher is None:
            raise HubSyncError("Bridge not started. Use 'async with HubBridge(...) as bridge:'")
        return self._dispatcher

    @property
    def adapters(self) -> list[DeviceAdapter]:
        self._require_handler()
        return list(self._adapters)

    def adapter(self, index: int) -> DeviceAdapter:
        self._require_handler()
        # Raises DeviceIndexError for bad indices.
        self.store.get(index)
        return self._adapters[index]

    def attach_accessory(self, index: int, accessory: Accessory) -> DeviceAdapter:
        """Connect a framework accessory to the adapter for *index*."""
        adapter = self.adapter(index)
        adapter.accessory = accessory
        return adapter

    async def pull_status(self) -> list[StateChange]:
        """Seed the store from the hub's ``get_status`` endpoint.

        Any transport or payload failure is fatal and raised as
        :class:`HubSyncStartupError`; the store is left untouched.
        """
        transport = self._require_transport()
        handler = self._require_handler()
        try:
            body = await transport.get_status()
            payload = StatusPayload.parse_for(body, self.store.device_count)
        except (HubSyncTransportError, HubSyncPayloadError) as exc:
            raise HubSyncStartupError(f"Could not pull initial state from hub: {exc}") from exc

        changes = handler.apply(payload.st, source=ChangeSource.PULL)
        self._logger.info("Pulled initial state %s from hub", payload.snapshot())
        return changes
