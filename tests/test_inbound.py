from __future__ import annotations

import pytest
from aiohttp.test_utils import TestClient, TestServer

from pyhubsync.dispatcher import OutboundSyncDispatcher
from pyhubsync.inbound import InboundSyncHandler
from pyhubsync.state.events import ChangeSource
from pyhubsync.state.store import StateStore


class _NullTransport:
    async def post_status(self, snapshot: str) -> None:  # pragma: no cover
        raise AssertionError("unexpected push")

    async def get_status(self) -> str:  # pragma: no cover
        raise AssertionError("unexpected pull")


def _handler(device_count: int = 3) -> tuple[StateStore, InboundSyncHandler, list[tuple[int, bool]]]:
    store = StateStore(device_count)
    forwarded: list[tuple[int, bool]] = []
    handler = InboundSyncHandler(store, on_change=lambda index, is_on: forwarded.append((index, is_on)))
    return store, handler, forwarded


@pytest.mark.asyncio
async def test_push_updates_store_and_forwards_changes() -> None:
    store, handler, forwarded = _handler()

    async with TestClient(TestServer(handler.build_app())) as client:
        resp = await client.post("/setStatus", data='{"st":[1,0,1]}')
        assert resp.status == 204
        assert await resp.read() == b""

    assert store.snapshot() == "101"
    assert forwarded == [(0, True), (2, True)]


@pytest.mark.asyncio
async def test_repeated_push_forwards_nothing() -> None:
    store, handler, forwarded = _handler()

    async with TestClient(TestServer(handler.build_app())) as client:
        await client.post("/setStatus", data='{"st":[1,0,1]}')
        forwarded.clear()
        resp = await client.post("/setStatus", data='{"st":[1,0,1]}')

    assert resp.status == 204
    assert forwarded == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    ["this is not json", '{"st":[1,0]}', '{"st":[1,"x",1]}', '{"other":1}'],
)
async def test_malformed_push_is_ignored(body: str) -> None:
    store, handler, forwarded = _handler()
    store.set(1, True)

    async with TestClient(TestServer(handler.build_app())) as client:
        resp = await client.post("/setStatus", data=body)

    assert resp.status == 204
    assert store.snapshot() == "010"
    assert forwarded == []


@pytest.mark.asyncio
@pytest.mark.parametrize(("method", "path"), [("POST", "/other"), ("GET", "/"), ("PUT", "/set_status")])
async def test_other_paths_are_accepted_without_processing(method: str, path: str) -> None:
    store, handler, forwarded = _handler()

    async with TestClient(TestServer(handler.build_app())) as client:
        resp = await client.request(method, path, data='{"st":[1,1,1]}')

    assert resp.status == 204
    assert store.snapshot() == "000"
    assert forwarded == []


def test_apply_records_snapshot_as_synced() -> None:
    store = StateStore(3)
    dispatcher = OutboundSyncDispatcher(store, _NullTransport())
    handler = InboundSyncHandler(store, dispatcher=dispatcher)

    changes = handler.apply([0, 1, 1], source=ChangeSource.PULL)

    assert [c.index for c in changes] == [1, 2]
    assert dispatcher.last_sent == "011"


def test_failing_listener_does_not_stop_other_notifications() -> None:
    store = StateStore(3)
    seen: list[int] = []

    def listener(index: int, is_on: bool) -> None:
        seen.append(index)
        if index == 0:
            raise RuntimeError("framework unavailable")

    handler = InboundSyncHandler(store, on_change=listener)
    handler.apply([1, 1, 1])

    assert seen == [0, 1, 2]
    assert store.snapshot() == "111"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("body", "expected"),
    [('{"st":[1.0,0,1]}', "101"), ('{"st":[2,0,1]}', "001"), ('{"st":[0.5,1,-1]}', "010")],
)
async def test_numeric_entries_other_than_one_mean_off(body: str, expected: str) -> None:
    store, handler, forwarded = _handler()

    async with TestClient(TestServer(handler.build_app())) as client:
        resp = await client.post("/setStatus", data=body)

    assert resp.status == 204
    assert store.snapshot() == expected
    assert [index for index, _ in forwarded] == [i for i, bit in enumerate(expected) if bit == "1"]


@pytest.mark.asyncio
async def test_oversized_push_still_gets_no_content() -> None:
    store, handler, forwarded = _handler()
    body = '{"st":[1,1,1], "pad": "' + "x" * 2048 + '"}'

    async with TestClient(TestServer(handler.build_app(client_max_size=1024))) as client:
        resp = await client.post("/setStatus", data=body)
        assert resp.status == 204

    assert store.snapshot() == "000"
    assert forwarded == []
