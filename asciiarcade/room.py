"""A game room: pairs two players, runs their game and reports the outcome."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum, auto

from asciiarcade.catalog import new_game
from asciiarcade.game import Game, GameStatus, GameType, InvalidMoveError
from asciiarcade.messages import (
    ClientMessage,
    ClientMessageType,
    GameResult,
    ServerMessage,
    ServerMessageType,
)

_log = logging.getLogger(__name__)


@dataclass(eq=False)
class RoomChannels:
    """The pair of queues connecting one player with its room."""

    room_to_player: asyncio.Queue[ServerMessage] = field(default_factory=asyncio.Queue)
    player_to_room: asyncio.Queue[ClientMessage] = field(default_factory=asyncio.Queue)


@dataclass(eq=False)
class RoomRequest:
    """A player's request to join the room with ``code``."""

    code: str
    channels: RoomChannels


class RoomPhase(Enum):
    """Where the room is in its lifecycle."""

    WAITING_FOR_P1 = auto()
    WAITING_FOR_P2 = auto()
    IN_GAME_SELECTION = auto()
    RUNNING = auto()


class RoomClosing(Exception):
    """Raised by a handler when the room must shut down."""


_COMPLETION_RESULTS = {
    GameStatus.DRAW: (GameResult.DRAW, GameResult.DRAW),
    GameStatus.PLAYER1_WIN: (GameResult.PLAYER_WIN, GameResult.PLAYER_LOSE),
    GameStatus.PLAYER2_WIN: (GameResult.PLAYER_LOSE, GameResult.PLAYER_WIN),
}


class Room:
    """Holds two players and the game between them."""

    def __init__(self, code: str, close_requests: asyncio.Queue[str] | None = None) -> None:
        self.code = code
        self.close_requests = close_requests
        self.requests: asyncio.Queue[RoomRequest] = asyncio.Queue()
        self.phase = RoomPhase.WAITING_FOR_P1
        self.game_type = GameType.TIC_TAC_TOE
        self.game: Game | None = None
        self.player_turn = 0
        self.player_one: RoomChannels | None = None
        self.player_two: RoomChannels | None = None

    def advance_turn(self) -> None:
        """Pass the turn to the other player."""
        self.player_turn = 2 if self.player_turn == 1 else 1

    def _sources(self) -> dict[str, asyncio.Queue]:
        sources: dict[str, asyncio.Queue] = {"requests": self.requests}
        if self.player_one is not None:
            sources["player1"] = self.player_one.player_to_room
        if self.player_two is not None:
            sources["player2"] = self.player_two.player_to_room
        return sources

    def _dispatch(self, source: str, item: RoomRequest | ClientMessage) -> None:
        if source == "requests":
            self.handle_join_request(item)  # type: ignore[arg-type]
        else:
            self.handle_player_message(item, 1 if source == "player1" else 2)  # type: ignore[arg-type]

    async def run(self) -> None:
        """Serve join requests and player messages until the room closes.

        On exit the room's code is put on ``close_requests``.
        """
        pending: dict[str, asyncio.Future] = {}
        try:
            while True:
                sources = self._sources()
                for name, queue in sources.items():
                    if name not in pending:
                        pending[name] = asyncio.ensure_future(queue.get())
                done, _ = await asyncio.wait(
                    pending.values(), return_when=asyncio.FIRST_COMPLETED
                )
                for name in list(sources):
                    task = pending.get(name)
                    if task is None or task not in done:
                        continue
                    del pending[name]
                    self._dispatch(name, task.result())
        except RoomClosing as exc:
            _log.info("closing room %s: %s", self.code, exc)
        finally:
            for task in pending.values():
                task.cancel()
            if self.close_requests is not None:
                self.close_requests.put_nowait(self.code)

    @staticmethod
    def _send(channels: RoomChannels, msg: ServerMessage) -> None:
        channels.room_to_player.put_nowait(msg)

    def _players(self) -> tuple[RoomChannels, RoomChannels]:
        if self.player_one is None or self.player_two is None:
            raise RuntimeError("room does not have two players")
        return self.player_one, self.player_two

    def handle_join_request(self, request: RoomRequest) -> None:
        """Seat a joining player, or tell them the room is unavailable."""
        if self.phase is RoomPhase.WAITING_FOR_P1:
            self.player_one = request.channels
            self.phase = RoomPhase.WAITING_FOR_P2
            self._send(
                self.player_one,
                ServerMessage(ServerMessageType.ROOM_JOINED, player_number=1),
            )
        elif self.phase is RoomPhase.WAITING_FOR_P2:
            self.player_two = request.channels
            self._send(
                self.player_two,
                ServerMessage(ServerMessageType.ROOM_JOINED, player_number=2),
            )
            for channels in self._players():
                self._send(channels, ServerMessage(ServerMessageType.ENTERED_GAME_SELECTION))
            self.phase = RoomPhase.IN_GAME_SELECTION
            _log.info("Player two joined room, entering game selection.")
        else:
            self._send(request.channels, ServerMessage(ServerMessageType.ROOM_UNAVAILABLE))

    def handle_player_message(self, msg: ClientMessage, player_number: int) -> None:
        """Act on a player's message; raises RoomClosing when the room must close."""
        if self.phase is RoomPhase.WAITING_FOR_P1:
            raise RuntimeError("should be no player messages while waiting for p1")
        if self.phase is RoomPhase.WAITING_FOR_P2:
            if player_number == 2:
                raise RoomClosing("should be no messages from player two while waiting for p2")
            if msg.type is ClientMessageType.QUIT_ROOM:
                self._quit(player_number)
            return
        if self.phase is RoomPhase.IN_GAME_SELECTION:
            if msg.type is ClientMessageType.QUIT_ROOM:
                self._quit(player_number)
            elif msg.type is ClientMessageType.SELECT_GAME_TYPE:
                self._select_game(msg.game_type, player_number)
            return
        self._handle_running(msg, player_number)

    def _quit(self, player_number: int) -> None:
        self.end_game_on_quit(player_number)
        raise RoomClosing(f"player {player_number} quit")

    def _select_game(self, game_type: GameType, player_number: int) -> None:
        if player_number != 1:
            raise RoomClosing("only player 1 can select the game type")
        self.game_type = GameType(game_type)
        _log.info("Room %s selected game %s", self.code, self.game_type)
        self.game = new_game(self.game_type)
        self.player_turn = 1
        for channels in self._players():
            self._send(
                channels,
                ServerMessage(ServerMessageType.GAME_STARTED, game=self.game, player_turn=1),
            )
        self.phase = RoomPhase.RUNNING

    def _handle_running(self, msg: ClientMessage, player_number: int) -> None:
        game = self.game
        if game is None:
            raise RuntimeError("room is running without a game")
        if msg.type is ClientMessageType.QUIT_ROOM:
            self._quit(player_number)
        elif msg.type is ClientMessageType.SEND_TURN:
            if player_number != self.player_turn:
                self._send_error(player_number, "You can only move on your turn.")
                return
            try:
                game.validate_move(msg.turn_action, player_number)
            except InvalidMoveError as exc:
                self._send_error(player_number, str(exc))
                return
            game.execute_turn(msg.turn_action, player_number)
            self.advance_turn()
            if game.status is not GameStatus.ONGOING:
                self.end_game_on_completion()
                raise RoomClosing("game completed, closing room")
            for channels in self._players():
                self._send(
                    channels,
                    ServerMessage(
                        ServerMessageType.TURN_RESULT, game=game, player_turn=self.player_turn
                    ),
                )
        elif msg.type is ClientMessageType.CONCEDE:
            game.status = (
                GameStatus.PLAYER2_WIN if player_number == 1 else GameStatus.PLAYER1_WIN
            )
            self.end_game_on_completion()
            raise RoomClosing("game completed, closing room")

    def _send_error(self, player_number: int, text: str) -> None:
        channels = self.player_one if player_number == 1 else self.player_two
        if channels is not None:
            self._send(channels, ServerMessage(ServerMessageType.ERROR, error_message=text))

    def end_game_on_quit(self, quitting_player_num: int) -> None:
        """Tell every seated player that the room closed because a player quit."""
        results = {1: GameResult.PLAYER_WIN, 2: GameResult.PLAYER_WIN}
        quitting = 0
        if quitting_player_num in (1, 2):
            results[quitting_player_num] = GameResult.PLAYER_LOSE
            quitting = quitting_player_num
        for number, channels in ((1, self.player_one), (2, self.player_two)):
            if channels is None:
                continue
            msg = ServerMessage(
                ServerMessageType.ROOM_CLOSED,
                game=self.game,
                game_result=results[number],
                quitting_player_num=quitting,
            )
            try:
                channels.room_to_player.put_nowait(msg)
            except asyncio.QueueFull:
                _log.warning("Could not send message to player %s, channel unavailable", number)

    def end_game_on_completion(self) -> None:
        """Send each player the finished game and their result."""
        if self.game is None:
            raise RuntimeError("no game to finish")
        first, second = _COMPLETION_RESULTS.get(
            self.game.status, (GameResult.PLAYER_WIN, GameResult.PLAYER_WIN)
        )
        player_one, player_two = self._players()
        self._send(
            player_one,
            ServerMessage(ServerMessageType.GAME_FINISHED, game=self.game, game_result=first),
        )
        self._send(
            player_two,
            ServerMessage(ServerMessageType.GAME_FINISHED, game=self.game, game_result=second),
        )