import asyncio
import io
import socket
import sys

import pytest
from websockets.asyncio.server import serve

from asciiarcade.client import _apply, _ClientTransport, _Event, decode_key, main
from asciiarcade.messages import (
    ClientMessage,
    ClientMessageType,
    ServerMessage,
    ServerMessageType,
)
from asciiarcade.session import Session
from asciiarcade.states import SessionStateType


@pytest.mark.parametrize(
    "data, expected",
    [
        (b"\x1b[A", "up"),
        (b"\x1b[B", "down"),
        (b"\x1b[C", "right"),
        (b"\x1b[D", "left"),
        (b"\r", "enter"),
        (b"\x03", "ctrl+c"),
        (b"\x7f", "backspace"),
        (b"\x1b", "escape"),
        (b" ", " "),
        (b"q", "q"),
    ],
)
def test_decode_key(data, expected):
    assert decode_key(data) == expected


def test_decode_key_non_ascii_character():
    assert decode_key("é".encode()) == "é"


@pytest.mark.parametrize("data", [b"\x01", b"\x1b[5~", b"ab"])
def test_decode_key_unknown(data):
    assert decode_key(data) is None


class FakeTransport:
    def __init__(self, url):
        self.url = url
        self.sent = []
        self.closed = False

    def send(self, msg):
        self.sent.append(msg)

    def close(self):
        self.closed = True


def waiting_session():
    session = Session("ws://localhost:8000", FakeTransport)
    for key in ("a", "b", "enter"):
        session.handle_key(key)
    session.handle_server_message(ServerMessage(ServerMessageType.ROOM_JOINED, player_number=1))
    return session


def test_apply_key_ctrl_c_stops():
    session = Session("ws://localhost:8000", FakeTransport)
    assert _apply(session, _Event("key", None, "ctrl+c")) is False


def test_apply_ignores_stale_source():
    session = waiting_session()
    assert _apply(session, _Event("closed", object(), None)) is True
    assert session.state.type is SessionStateType.WAITING_ROOM


def test_apply_closed_from_current_transport():
    session = waiting_session()
    _apply(session, _Event("closed", session.transport, None))
    assert session.state.type is SessionStateType.IN_MENU


def test_apply_error_shows_message():
    session = waiting_session()
    _apply(session, _Event("error", session.transport, "lost"))
    assert session.err_msg == "lost"
    assert session.state.type is SessionStateType.IN_MENU


def test_apply_server_message():
    session = waiting_session()
    _apply(
        session,
        _Event("server", session.transport, ServerMessage(ServerMessageType.ENTERED_GAME_SELECTION)),
    )
    assert session.state.type is SessionStateType.GAME_SELECTION


@pytest.mark.asyncio
async def test_transport_round_trip():
    seen = []

    async def handler(ws):
        async for raw in ws:
            seen.append(ClientMessage.from_json(raw))
            await ws.send(ServerMessage(ServerMessageType.ROOM_JOINED, player_number=1).to_json())
            return

    async with serve(handler, "127.0.0.1", 0) as server:
        port = server.sockets[0].getsockname()[1]
        events = asyncio.Queue()
        transport = _ClientTransport(f"ws://127.0.0.1:{port}", events)
        transport.send(ClientMessage(ClientMessageType.JOIN_ROOM, room_code="abc"))
        first = await asyncio.wait_for(events.get(), 5)
        second = await asyncio.wait_for(events.get(), 5)
        transport.close()

    assert first.kind == "server"
    assert first.source is transport
    assert first.payload.type is ServerMessageType.ROOM_JOINED
    assert second.kind == "closed"
    assert seen[0].room_code == "abc"


@pytest.mark.asyncio
async def test_transport_connect_failure():
    sock = socket.socket()
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    events = asyncio.Queue()
    transport = _ClientTransport(f"ws://127.0.0.1:{port}", events)
    event = await asyncio.wait_for(events.get(), 10)
    assert event.kind == "error"
    assert "error dialing websocket" in event.payload
    with pytest.raises(OSError):
        transport.send(ClientMessage(ClientMessageType.JOIN_ROOM))


def test_main_help_exits_cleanly():
    with pytest.raises(SystemExit) as info:
        main(["--help"])
    assert info.value.code == 0


def test_main_requires_terminal(monkeypatch, tmp_path, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DEBUG", raising=False)
    monkeypatch.setattr(sys, "stdin", io.StringIO(""))
    assert main([]) == 1
    assert "fatal" in capsys.readouterr().err