#!/usr/bin/env python3
"""Run a hub bridge with log-only accessories.

Starts the inbound server, optionally seeds state from the hub, and keeps
running until interrupted. Every characteristic update pushed by the hub
is printed, which makes this handy for checking hub wiring without a host
accessory framework.

Usage
-----
Set environment variables and run::

    export HUBSYNC_URL="http://192.168.1.50/"
    python scripts/run_bridge.py --pull

Options::

    --url URL            Hub base URL (overrides HUBSYNC_URL)
    --port PORT          Inbound server port
    --devices N          Number of switches
    --pull               Seed state from get_status before serving
    --set INDEX=0|1      Apply a local change after startup (repeatable)
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyhubsync import HubBridge, HubSyncConfig, HubSyncError  # noqa: E402

LOG = logging.getLogger("run_bridge")


class _PrintAccessory:
    def __init__(self, unique_id: str) -> None:
        self.unique_id = unique_id

    def update_characteristic(self, is_on: bool) -> None:
        print(f"{self.unique_id} -> {'on' if is_on else 'off'}")


def _parse_assignment(raw: str) -> tuple[int, bool]:
    index, sep, value = raw.partition("=")
    if not sep or value not in {"0", "1"}:
        raise argparse.ArgumentTypeError(f"expected INDEX=0|1, got {raw!r}")
    try:
        return int(index), value == "1"
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected INDEX=0|1, got {raw!r}") from exc


async def run(args: argparse.Namespace) -> int:
    overrides: dict[str, Any] = {}
    if args.url:
        overrides["url"] = args.url
    if args.port is not None:
        overrides["local_port"] = args.port
    if args.devices is not None:
        overrides["device_count"] = args.devices
    if args.pull:
        overrides["pull_on_start"] = True

    try:
        config = HubSyncConfig.from_env(**overrides)
    except HubSyncError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    async with HubBridge(config) as bridge:
        for adapter in bridge.adapters:
            adapter.accessory = _PrintAccessory(adapter.unique_id)
        print(f"Listening on port {bridge.port}; initial state {bridge.store.snapshot()}")

        for index, is_on in args.set or []:
            bridge.adapter(index).set_on(is_on)
        await bridge.dispatcher.flush()

        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            LOG.debug("Shutting down")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Bridge local switches with an HTTP light hub.")
    parser.add_argument("--url", help="Hub base URL (default: HUBSYNC_URL)")
    parser.add_argument("--port", type=int, help="Inbound server port")
    parser.add_argument("--devices", type=int, help="Number of switches")
    parser.add_argument("--pull", action="store_true", help="Seed state from the hub before serving")
    parser.add_argument("--set", action="append", type=_parse_assignment, metavar="INDEX=0|1")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        sys.exit(asyncio.run(run(args)))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
