"""Server side of one client connection: relays between the client and its room."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from enum import Enum, auto
from typing import AsyncIterator, Protocol

from websockets.exceptions import ConnectionClosed

from asciiarcade.messages import (
    ClientMessage,
    ClientMessageType,
    ServerMessage,
    ServerMessageType,
)
from asciiarcade.room import RoomChannels, RoomRequest

_log = logging.getLogger(__name__)


class Connection(Protocol):
    """What a player needs from a client connection."""

    def __aiter__(self) -> AsyncIterator[str | bytes]: ...

    async def send(self, message: str) -> None: ...

    async def close(self) -> None: ...


class PlayerPhase(Enum):
    """Where the player is in its lifecycle."""

    NOT_IN_ROOM = auto()
    WAITING_ROOM = auto()
    IN_GAME_SELECTION = auto()
    IN_ROOM = auto()


class PlayerClosing(Exception):
    """Raised when the player must stop serving its client."""


_FORWARDED: dict[PlayerPhase, tuple[frozenset[ClientMessageType], str]] = {
    PlayerPhase.WAITING_ROOM: (
        frozenset({ClientMessageType.QUIT_ROOM}),
        "waiting for room",
    ),
    PlayerPhase.IN_GAME_SELECTION: (
        frozenset({ClientMessageType.QUIT_ROOM, ClientMessageType.SELECT_GAME_TYPE}),
        "game selection",
    ),
    PlayerPhase.IN_ROOM: (
        frozenset(
            {
                ClientMessageType.SEND_TURN,
                ClientMessageType.QUIT_ROOM,
                ClientMessageType.CONCEDE,
            }
        ),
        "in room",
    ),
}


class Player:
    """Serves one connected client.

    Messages from the client are handled according to the player's phase and,
    where appropriate, passed on to the room. Messages from the room are
    written back to the client. A ``None`` put on the room's outgoing queue
    means the room went away.
    """

    def __init__(self, connection: Connection, room_requests: asyncio.Queue[RoomRequest]) -> None:
        self.connection = connection
        self.room_requests = room_requests
        self.phase = PlayerPhase.NOT_IN_ROOM
        self.player_number = 0
        self.room: RoomChannels | None = None
        self._client_read: asyncio.Queue[ClientMessage | None] = asyncio.Queue()

    async def run(self) -> None:
        """Serve the client until it disconnects, the room goes away or an error occurs."""
        pump = asyncio.create_task(self._read_pump())
        pending: dict[asyncio.Queue, asyncio.Future] = {}
        try:
            await self._serve(pending)
        except PlayerClosing as exc:
            _log.info("Closing player: %s", exc)
        finally:
            for future in pending.values():
                future.cancel()
            pump.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await pump
            _log.info("Player %s stopped", self.player_number)

    async def _serve(self, pending: dict[asyncio.Queue, asyncio.Future]) -> None:
        while True:
            sources: list[asyncio.Queue] = [self._client_read]
            if self.room is not None:
                sources.append(self.room.room_to_player)
            for queue in [q for q in pending if q not in sources]:
                pending.pop(queue).cancel()
            for queue in sources:
                if queue not in pending:
                    pending[queue] = asyncio.ensure_future(queue.get())
            done, _ = await asyncio.wait(pending.values(), return_when=asyncio.FIRST_COMPLETED)
            for queue in sources:
                future = pending.get(queue)
                if future is None or future not in done:
                    continue
                del pending[queue]
                item = future.result()
                if queue is self._client_read:
                    if item is None:
                        _log.info("Client connection closed, closing player.")
                        if self.room is not None:
                            self.room.player_to_room.put_nowait(
                                ClientMessage(ClientMessageType.QUIT_ROOM)
                            )
                        return
                    await self.handle_client_message(item)
                else:
                    if item is None:
                        _log.info("Room closed, closing player.")
                        with contextlib.suppress(PlayerClosing):
                            await self.write_to_client(
                                ServerMessage(ServerMessageType.ROOM_DISCONNECTED)
                            )
                        return
                    await self.handle_room_message(item)

    async def _read_pump(self) -> None:
        try:
            async for raw in self.connection:
                try:
                    msg = ClientMessage.from_json(raw)
                except (ValueError, TypeError, AttributeError) as exc:
                    _log.info("Error occurred while reading message: %s", exc)
                    return
                _log.info("Received message from client: %s", msg)
                await self._client_read.put(msg)
        except (OSError, ConnectionClosed) as exc:
            _log.info("Error occurred while reading message: %s", exc)
        finally:
            _log.info("Shutting down player.")
            with contextlib.suppress(OSError, ConnectionClosed):
                await self.connection.close()
            self._client_read.put_nowait(None)

    def _forward(self, msg: ClientMessage) -> None:
        if self.room is None:
            raise PlayerClosing("player is not in a room")
        self.room.player_to_room.put_nowait(msg)

    async def handle_client_message(self, msg: ClientMessage) -> None:
        """Act on a message from the client; raises PlayerClosing on a protocol error."""
        if self.phase is PlayerPhase.NOT_IN_ROOM:
            if msg.type is ClientMessageType.JOIN_ROOM:
                channels = RoomChannels()
                self.room = channels
                self.room_requests.put_nowait(RoomRequest(msg.room_code, channels))
                _log.info("Player waiting for room. Room code: %s", msg.room_code)
                return
            if msg.type is ClientMessageType.QUIT_ROOM:
                with contextlib.suppress(PlayerClosing):
                    await self.write_to_client(ServerMessage(ServerMessageType.ROOM_CLOSED))
                return
            raise PlayerClosing(
                f"unsupported message type while waiting for room: {msg.type.name}"
            )

        allowed, context = _FORWARDED[self.phase]
        if msg.type not in allowed:
            raise PlayerClosing(f"unsupported message type while {context}: {msg.type.name}")
        self._forward(msg)

    async def handle_room_message(self, msg: ServerMessage) -> None:
        """Act on a message from the room; raises PlayerClosing when the player must stop."""
        kind = msg.type
        if self.phase is PlayerPhase.NOT_IN_ROOM:
            if kind is ServerMessageType.ROOM_JOINED:
                self.player_number = msg.player_number
                await self.write_to_client(msg)
                self.phase = PlayerPhase.WAITING_ROOM
            elif kind is ServerMessageType.ROOM_UNAVAILABLE:
                msg.error_message = "room is full"
                with contextlib.suppress(PlayerClosing):
                    await self.write_to_client(msg)
                raise PlayerClosing("player tried to join full room")
            else:
                raise PlayerClosing(
                    f"unsupported message type while waiting for room: {kind.name}"
                )
        elif self.phase is PlayerPhase.WAITING_ROOM:
            if kind is ServerMessageType.ROOM_CLOSED:
                await self._write_then_close(msg)
            if kind is ServerMessageType.ENTERED_GAME_SELECTION:
                await self.write_to_client(msg)
            self.phase = PlayerPhase.IN_GAME_SELECTION
        elif self.phase is PlayerPhase.IN_GAME_SELECTION:
            if kind is ServerMessageType.ROOM_CLOSED:
                await self._write_then_close(msg)
            elif kind is ServerMessageType.GAME_STARTED:
                await self.write_to_client(msg)
                self.phase = PlayerPhase.IN_ROOM
            else:
                raise PlayerClosing(
                    f"unsupported message type while in game selection: {kind.name}"
                )
        else:
            if kind is ServerMessageType.GAME_FINISHED:
                with contextlib.suppress(PlayerClosing):
                    await self.write_to_client(msg)
                self.phase = PlayerPhase.NOT_IN_ROOM
            elif kind is ServerMessageType.ROOM_CLOSED:
                await self._write_then_close(msg)
            elif kind in (ServerMessageType.TURN_RESULT, ServerMessageType.ERROR):
                await self.write_to_client(msg)
            else:
                raise PlayerClosing(f"unsupported message type while in room: {kind.name}")

    async def _write_then_close(self, msg: ServerMessage) -> None:
        with contextlib.suppress(PlayerClosing):
            await self.write_to_client(msg)
        raise PlayerClosing("client quit, closing room")

    async def write_to_client(self, msg: ServerMessage) -> None:
        """Send ``msg`` to the client; raises PlayerClosing if the connection failed."""
        _log.info("Sending message to client %s: %s", self.player_number, msg)
        try:
            await self.connection.send(msg.to_json())
        except (OSError, ConnectionClosed) as exc:
            raise PlayerClosing(f"could not write to client: {exc}") from exc