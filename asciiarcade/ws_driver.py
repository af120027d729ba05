"""The client's WebSocket link to the game server."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import AsyncIterator, Protocol

from websockets.asyncio.client import connect
from websockets.exceptions import ConnectionClosed, WebSocketException

from asciiarcade.messages import ClientMessage, ServerMessage

_log = logging.getLogger(__name__)


class _Connection(Protocol):
    def __aiter__(self) -> AsyncIterator[str | bytes]: ...

    async def send(self, message: str) -> None: ...

    async def close(self) -> None: ...


class WSDriver:
    """Sends client messages and yields server messages over one connection."""

    def __init__(self, connection: _Connection) -> None:
        self._connection = connection
        self.is_open = True

    @classmethod
    async def connect(cls, url: str) -> WSDriver:
        """Dial ``url``; raises ConnectionError if the server cannot be reached."""
        try:
            connection = await connect(url)
        except (OSError, WebSocketException, asyncio.TimeoutError) as exc:
            raise ConnectionError(f"error dialing websocket: {exc}") from exc
        return cls(connection)

    async def write(self, msg: ClientMessage) -> None:
        """Send ``msg`` to the server."""
        await self._connection.send(msg.to_json())

    async def messages(self) -> AsyncIterator[ServerMessage]:
        """Yield server messages until the link closes or a message cannot be read."""
        try:
            async for raw in self._connection:
                if not self.is_open:
                    return
                try:
                    msg = ServerMessage.from_json(raw)
                except (ValueError, TypeError, KeyError, AttributeError) as exc:
                    _log.warning("error reading message from server: %s", exc)
                    return
                yield msg
        except (ConnectionClosed, OSError) as exc:
            _log.warning("error reading message from server: %s", exc)
        finally:
            await self.close()

    async def close(self) -> None:
        """Close the link; later calls do nothing."""
        if not self.is_open:
            return
        self.is_open = False
        with contextlib.suppress(OSError, WebSocketException):
            await self._connection.close()