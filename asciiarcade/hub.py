"""Routes join requests to rooms, creating and discarding rooms as needed."""

from __future__ import annotations

import asyncio
import logging

from asciiarcade.player import Connection, Player
from asciiarcade.room import Room, RoomRequest

_log = logging.getLogger(__name__)


class Hub:
    """Owns every open room, keyed by room code."""

    def __init__(self) -> None:
        self.room_requests: asyncio.Queue[RoomRequest] = asyncio.Queue()
        self.rooms: dict[str, Room] = {}
        self._close_requests: asyncio.Queue[str] = asyncio.Queue()
        self._tasks: set[asyncio.Task] = set()

    async def run(self) -> None:
        """Route join requests and discard closed rooms until cancelled."""
        get_request: asyncio.Future | None = None
        get_close: asyncio.Future | None = None
        try:
            while True:
                if get_request is None:
                    get_request = asyncio.ensure_future(self.room_requests.get())
                if get_close is None:
                    get_close = asyncio.ensure_future(self._close_requests.get())
                done, _ = await asyncio.wait(
                    {get_request, get_close}, return_when=asyncio.FIRST_COMPLETED
                )
                if get_close in done:
                    self._close_room(get_close.result())
                    get_close = None
                if get_request in done:
                    self._route(get_request.result())
                    get_request = None
        finally:
            for future in (get_request, get_close):
                if future is not None:
                    future.cancel()
            for task in list(self._tasks):
                task.cancel()

    def _route(self, request: RoomRequest) -> None:
        room = self.rooms.get(request.code)
        if room is None:
            _log.info("Creating new room with code: %s", request.code)
            room = Room(request.code, self._close_requests)
            task = asyncio.create_task(room.run())
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            self.rooms[request.code] = room
        room.requests.put_nowait(request)

    def _close_room(self, code: str) -> None:
        room = self.rooms.pop(code, None)
        if room is None:
            _log.error("Error closing room - no room with code %s", code)
            return
        _log.info("Closing room %s", room.code)

    async def serve(self, connection: Connection) -> None:
        """Serve a newly connected client until it goes away."""
        _log.info("New connection established, creating player.")
        await Player(connection, self.room_requests).run()