"""The terminal client: reads keys, talks to the server and redraws the screen."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import os
import sys
import termios
import tty
from typing import NamedTuple

from dotenv import load_dotenv
from websockets.exceptions import ConnectionClosed

from asciiarcade.messages import ClientMessage
from asciiarcade.session import Session
from asciiarcade.ws_driver import WSDriver

DEFAULT_SERVER_URL = "ws://localhost:8000"

_KEYS = {
    b"\x03": "ctrl+c",
    b"\r": "enter",
    b"\n": "enter",
    b"\x7f": "backspace",
    b"\x08": "backspace",
    b"\t": "tab",
    b"\x1b": "escape",
    b"\x1b[A": "up",
    b"\x1b[B": "down",
    b"\x1b[C": "right",
    b"\x1b[D": "left",
    b"\x1bOA": "up",
    b"\x1bOB": "down",
    b"\x1bOC": "right",
    b"\x1bOD": "left",
}


def decode_key(data: bytes) -> str | None:
    """Name the key in one terminal read, or None for input the client does not use."""
    name = _KEYS.get(data)
    if name is not None:
        return name
    text = data.decode("utf-8", errors="ignore")
    if len(text) == 1 and text.isprintable():
        return text
    return None


class _Event(NamedTuple):
    kind: str
    source: object
    payload: object


class _ClientTransport:
    """A server link that connects in the background and reports back through events."""

    def __init__(self, url: str, events: asyncio.Queue[_Event]) -> None:
        self._events = events
        self._outbox: asyncio.Queue[ClientMessage] = asyncio.Queue()
        self._closed = False
        self._task = asyncio.get_running_loop().create_task(self._run(url))

    def send(self, msg: ClientMessage) -> None:
        if self._closed:
            raise OSError("connection to server is closed")
        self._outbox.put_nowait(msg)

    def close(self) -> None:
        self._closed = True
        self._task.cancel()

    def _report(self, kind: str, payload: object = None) -> None:
        if not self._closed:
            self._events.put_nowait(_Event(kind, self, payload))

    async def _run(self, url: str) -> None:
        try:
            driver = await WSDriver.connect(url)
        except ConnectionError as exc:
            self._report("error", str(exc))
            self._closed = True
            return
        writer = asyncio.create_task(self._write(driver))
        try:
            async with contextlib.aclosing(driver.messages()) as stream:
                async for msg in stream:
                    self._report("server", msg)
            self._report("closed")
        finally:
            self._closed = True
            writer.cancel()
            await driver.close()

    async def _write(self, driver: WSDriver) -> None:
        while True:
            msg = await self._outbox.get()
            try:
                await driver.write(msg)
            except (OSError, ConnectionClosed) as exc:
                self._report("error", f"error writing to server: {exc}")
                return


def _apply(session: Session, event: _Event) -> bool:
    """Feed one event to the session; returns False when the client should stop."""
    if event.kind == "key":
        return session.handle_key(str(event.payload))
    if event.source is not session.transport:
        return True
    if event.kind == "server":
        session.handle_server_message(event.payload)  # type: ignore[arg-type]
    elif event.kind == "closed":
        session.handle_server_closed()
    elif event.kind == "error":
        session.handle_server_closed()
        session.err_msg = str(event.payload)
    return True


def _render(session: Session) -> None:
    sys.stdout.write("\033[H\033[2J" + session.view().replace("\n", "\r\n"))
    sys.stdout.flush()


async def run_client(url: str) -> None:
    """Run the interactive client against the server at ``url`` until the user quits."""
    if not sys.stdin.isatty():
        raise RuntimeError("the client needs an interactive terminal")
    loop = asyncio.get_running_loop()
    events: asyncio.Queue[_Event] = asyncio.Queue()
    session = Session(url, lambda server_url: _ClientTransport(server_url, events))
    fd = sys.stdin.fileno()

    def on_input() -> None:
        key = decode_key(os.read(fd, 64))
        if key is not None:
            events.put_nowait(_Event("key", None, key))

    saved = termios.tcgetattr(fd)
    tty.setraw(fd)
    loop.add_reader(fd, on_input)
    try:
        sys.stdout.write("\033[?25l")
        _render(session)
        while _apply(session, await events.get()):
            _render(session)
    finally:
        loop.remove_reader(fd)
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)
        if session.transport is not None:
            session.transport.close()
        sys.stdout.write("\033[?25h\r\n")
        sys.stdout.flush()


def main(argv: list[str] | None = None) -> int:
    """Start the terminal client."""
    parser = argparse.ArgumentParser(
        prog="asciiarcade", description="Play two-player board games in the terminal."
    )
    parser.add_argument(
        "--url", default=None, help="server URL (default: $SERVER_URL or ws://localhost:8000)"
    )
    args = parser.parse_args(argv)

    load_dotenv()
    url = args.url or os.environ.get("SERVER_URL") or DEFAULT_SERVER_URL

    if os.environ.get("DEBUG"):
        try:
            logging.basicConfig(
                filename="debug.log", level=logging.DEBUG, format="%(asctime)s %(message)s"
            )
        except OSError as exc:
            print("fatal:", exc)
            return 1
    else:
        logging.basicConfig(handlers=[logging.NullHandler()])

    if not sys.stdin.isatty():
        print("fatal: the client needs an interactive terminal", file=sys.stderr)
        return 1

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(run_client(url))
    return 0