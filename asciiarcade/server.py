"""The game server: accepts WebSocket clients and pairs them in rooms."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging

from websockets.asyncio.server import serve

from asciiarcade.hub import Hub

DEFAULT_PORT = 8000

_log = logging.getLogger(__name__)


async def run_server(host: str | None = None, port: int = DEFAULT_PORT) -> None:
    """Serve clients on ``host``:``port`` until cancelled; no host means all interfaces."""
    hub = Hub()
    hub_task = asyncio.create_task(hub.run())
    try:
        async with serve(hub.serve, host, port):
            await asyncio.get_running_loop().create_future()
    finally:
        hub_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await hub_task


def main(argv: list[str] | None = None) -> int:
    """Run the game server from the command line."""
    parser = argparse.ArgumentParser(
        prog="asciiarcade-server", description="Run the ASCII arcade game server."
    )
    parser.add_argument("--host", default=None, help="interface to listen on (default: all)")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")
    _log.info("Starting server...")
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(run_server(args.host, args.port))
    return 0