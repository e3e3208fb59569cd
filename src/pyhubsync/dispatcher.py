"""Debounced, serialized outbound push of local state to the hub."""

from __future__ import annotations

import asyncio
import logging

from pyhubsync._constants import DEFAULT_DEBOUNCE_DELAY
from pyhubsync._transport import HubTransport
from pyhubsync.exceptions import HubSyncTransportError
from pyhubsync.state.store import StateStore

_logger = logging.getLogger(__name__)


class OutboundSyncDispatcher:
    """Push store snapshots to the hub, at most one request at a time.

    :meth:`trigger` arms a trailing debounce timer; when it fires a single
    dispatch cycle runs under a lock held across snapshot computation and
    the network call. Snapshots equal to the last one sent are not pushed.
    """

    def __init__(
        self,
        store: StateStore,
        transport: HubTransport,
        *,
        debounce_delay: float = DEFAULT_DEBOUNCE_DELAY,
        mark_sent_on_failure: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self._store = store
        self._transport = transport
        self._debounce_delay = debounce_delay
        self._mark_sent_on_failure = mark_sent_on_failure
        self._logger = logger or _logger
        self._lock = asyncio.Lock()
        self._last_sent = ""
        # Bumped by mark_synced; a cycle only records its push if unchanged.
        self._sync_generation = 0
        self._timer: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task[bool]] = set()
        self._closed = False

    @property
    def last_sent(self) -> str:
        """Snapshot most recently pushed or marked synced (``""`` initially)."""
        return self._last_sent

    @property
    def pending(self) -> bool:
        """Whether a debounce timer is armed or a cycle is running."""
        return self._timer is not None or bool(self._tasks)

    def mark_synced(self, snapshot: str) -> None:
        """Record a snapshot the hub already reported as its own state."""
        self._last_sent = snapshot
        self._sync_generation += 1

    def trigger(self) -> None:
        """Schedule a dispatch cycle after the debounce delay.

        Re-arms the timer on every call so rapid triggers coalesce. Must be
        called from the event loop thread.
        """
        if self._closed:
            self._logger.debug("Dispatcher closed; ignoring trigger")
            return
        loop = asyncio.get_running_loop()
        if self._timer is not None:
            self._timer.cancel()
        self._timer = loop.call_later(self._debounce_delay, self._fire)

    def _fire(self) -> None:
        self._timer = None
        task = asyncio.get_running_loop().create_task(self.dispatch())
        self._tasks.add(task)
        task.add_done_callback(self._on_cycle_done)

    def _on_cycle_done(self, task: asyncio.Task[bool]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._logger.error("Dispatch cycle failed unexpectedly", exc_info=exc)

    async def dispatch(self) -> bool:
        """Run one dispatch cycle; return True if a push succeeded."""
        async with self._lock:
            current = self._store.snapshot()
            if current == self._last_sent:
                self._logger.debug("Snapshot %s unchanged; skipping push", current)
                return False
            generation = self._sync_generation
            try:
                await self._transport.post_status(current)
            except HubSyncTransportError as exc:
                self._logger.error("Push of %s to hub failed: %s", current, exc)
                if self._mark_sent_on_failure:
                    self._record_sent(current, generation)
                return False
            self._logger.debug("Pushed snapshot %s to hub", current)
            self._record_sent(current, generation)
            return True

    def _record_sent(self, snapshot: str, generation: int) -> None:
        if generation != self._sync_generation:
            self._logger.debug("Hub reported newer state during push of %s; keeping %s", snapshot, self._last_sent)
            return
        self._last_sent = snapshot

    async def flush(self) -> None:
        """Run any armed cycle now and wait until no cycle is running."""
        if self._timer is not None:
            self._timer.cancel()
            self._fire()
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def aclose(self) -> None:
        """Stop accepting triggers; let a running cycle finish."""
        self._closed = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
