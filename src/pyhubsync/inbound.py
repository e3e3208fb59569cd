"""HTTP endpoint receiving full state vectors pushed by the hub."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from aiohttp import web

from pyhubsync._constants import INBOUND_STATUS_PATH
from pyhubsync.dispatcher import OutboundSyncDispatcher
from pyhubsync.exceptions import HubSyncPayloadError
from pyhubsync.models.status import StatusPayload
from pyhubsync.state.events import ChangeSource, StateChange
from pyhubsync.state.store import StateStore

_logger = logging.getLogger(__name__)

ChangeListener = Callable[[int, bool], None]


class InboundSyncHandler:
    """Apply hub pushes to the store and forward real changes.

    The endpoint is fire-and-forget for the hub: every request, on every
    path, gets ``204 No Content``. Payload errors are logged and dropped
    without touching the store.
    """

    def __init__(
        self,
        store: StateStore,
        *,
        on_change: ChangeListener | None = None,
        dispatcher: OutboundSyncDispatcher | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._store = store
        self._on_change = on_change
        self._dispatcher = dispatcher
        self._logger = logger or _logger

    def apply(
        self,
        values: Sequence[float],
        *,
        source: ChangeSource = ChangeSource.HUB,
    ) -> list[StateChange]:
        """Apply a state vector reported by the hub.

        The resulting snapshot is recorded with the dispatcher as already
        synced, so it is not pushed straight back. Listeners only hear about
        devices whose value actually changed.
        """
        changes = self._store.apply_vector(values, source=source)
        if self._dispatcher is not None:
            self._dispatcher.mark_synced(self._store.snapshot())

        if self._on_change is not None:
            for change in changes:
                try:
                    self._on_change(change.index, change.is_on)
                except Exception:
                    self._logger.warning("Change listener failed for index=%d", change.index, exc_info=True)
        return changes

    async def handle(self, request: web.Request) -> web.Response:
        if request.path == INBOUND_STATUS_PATH:
            try:
                body = await request.read()
                payload = StatusPayload.parse_for(body, self._store.device_count)
            except web.HTTPRequestEntityTooLarge as exc:
                self._logger.debug("Ignoring oversized hub push: %s", exc.text)
            except HubSyncPayloadError as exc:
                self._logger.debug("Ignoring hub push: %s", exc)
            else:
                self.apply(payload.st)
        return web.Response(status=204)

    def build_app(self, *, client_max_size: int = 1024**2) -> web.Application:
        """Create an aiohttp application routing every request to :meth:`handle`.

        Bodies larger than *client_max_size* are dropped, still with a 204.
        """
        app = web.Application(client_max_size=client_max_size)
        app.router.add_route("*", "/{tail:.*}", self.handle)
        return app
