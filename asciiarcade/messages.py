"""Messages exchanged between clients and the server, and their JSON wire form."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Mapping

from asciiarcade.checkers import CheckersDirection, CheckersGame, CheckersTurn
from asciiarcade.game import Game, GameTurn, GameType
from asciiarcade.tic_tac_toe import TicTacToeGame, TicTacToeTurn
from asciiarcade.vector import Vector


class GameResult(IntEnum):
    """The outcome of a game from the receiving player's point of view."""

    PLAYER_WIN = 0
    PLAYER_LOSE = 1
    DRAW = 2


class ServerMessageType(IntEnum):
    """Kinds of message the server sends to a client."""

    ROOM_JOINED = 0
    ENTERED_GAME_SELECTION = 1
    GAME_STARTED = 2
    TURN_RESULT = 3
    ROOM_DISCONNECTED = 4
    GAME_FINISHED = 5
    ROOM_CLOSED = 6
    ROOM_UNAVAILABLE = 7
    ERROR = 8

    def __str__(self) -> str:
        return _SERVER_TYPE_NAMES[self]


_SERVER_TYPE_NAMES = {
    ServerMessageType.ROOM_JOINED: "Room Joined",
    ServerMessageType.ENTERED_GAME_SELECTION: "Entered Game Selection",
    ServerMessageType.GAME_STARTED: "Game Started",
    ServerMessageType.TURN_RESULT: "Turn Result",
    ServerMessageType.ROOM_DISCONNECTED: "Room Disconnected",
    ServerMessageType.GAME_FINISHED: "Game Finished",
    ServerMessageType.ROOM_CLOSED: "Room Closed",
    ServerMessageType.ROOM_UNAVAILABLE: "Room Unavailable",
    ServerMessageType.ERROR: "Error",
}


class ClientMessageType(IntEnum):
    """Kinds of message a client sends to the server."""

    JOIN_ROOM = 0
    SELECT_GAME_TYPE = 1
    SEND_TURN = 2
    QUIT_ROOM = 3
    CONCEDE = 4


_GAME_KEYS: dict[GameType, tuple[str, type[TicTacToeGame] | type[CheckersGame]]] = {
    GameType.TIC_TAC_TOE: ("tic_tac_toe", TicTacToeGame),
    GameType.CHECKERS: ("checkers", CheckersGame),
}


def encode_game(game: Game | None) -> dict[str, Any]:
    """Wrap a game in its tagged wire form; ``None`` gives the empty wrapper."""
    if game is None:
        return {"type": int(GameType.TIC_TAC_TOE)}
    key, _ = _GAME_KEYS[game.game_type]
    return {"type": int(game.game_type), key: game.to_dict()}


def decode_game(data: Mapping[str, Any] | None) -> Game | None:
    """Unwrap a tagged game; returns ``None`` when no game is carried."""
    if not data:
        return None
    try:
        game_type = GameType(data.get("type", 0))
    except ValueError:
        return None
    key, cls = _GAME_KEYS[game_type]
    payload = data.get(key)
    if payload is None:
        return None
    return cls.from_dict(payload)


def encode_turn(turn: GameTurn | None) -> dict[str, Any]:
    """Wrap a turn in its tagged wire form, with empty turns for the other games."""
    tic_tac_toe = turn if isinstance(turn, TicTacToeTurn) else TicTacToeTurn(Vector())
    checkers = (
        turn
        if isinstance(turn, CheckersTurn)
        else CheckersTurn(Vector(), CheckersDirection.LEFT)
    )
    game_type = turn.game_type if turn is not None else GameType.TIC_TAC_TOE
    return {
        "game_type": int(game_type),
        "tictactoe_turn": tic_tac_toe.to_dict(),
        "checkers_turn": checkers.to_dict(),
    }


def decode_turn(data: Mapping[str, Any] | None) -> GameTurn | None:
    """Unwrap a tagged turn; unknown or missing wrappers give ``None``."""
    if not data:
        return None
    try:
        game_type = GameType(data.get("game_type", 0))
    except ValueError:
        return None
    if game_type is GameType.TIC_TAC_TOE:
        return TicTacToeTurn.from_dict(data.get("tictactoe_turn") or {})
    return CheckersTurn.from_dict(data.get("checkers_turn") or {})


def _load_object(text: str | bytes) -> dict[str, Any]:
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("message must be a JSON object")
    return data


def _dump(data: Mapping[str, Any]) -> str:
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


@dataclass
class ServerMessage:
    """A message from the server to one client."""

    type: ServerMessageType
    player_number: int = 0
    player_turn: int = 0
    game: Game | None = None
    game_result: GameResult = GameResult.PLAYER_WIN
    quitting_player_num: int = 0
    error_message: str = ""

    def to_json(self) -> str:
        """Serialise the message to its JSON wire form."""
        return _dump(
            {
                "type": int(self.type),
                "player_number": self.player_number,
                "player_turn": self.player_turn,
                "game": encode_game(self.game),
                "game_result": int(self.game_result),
                "quitting_player_num": self.quitting_player_num,
                "error_message": self.error_message,
            }
        )

    @classmethod
    def from_json(cls, text: str | bytes) -> ServerMessage:
        """Parse a message from JSON; unknown message types raise ValueError."""
        data = _load_object(text)
        return cls(
            type=ServerMessageType(data.get("type", 0)),
            player_number=int(data.get("player_number", 0)),
            player_turn=int(data.get("player_turn", 0)),
            game=decode_game(data.get("game")),
            game_result=GameResult(data.get("game_result", 0)),
            quitting_player_num=int(data.get("quitting_player_num", 0)),
            error_message=str(data.get("error_message", "")),
        )


@dataclass
class ClientMessage:
    """A message from a client to the server."""

    type: ClientMessageType
    room_code: str = ""
    game_type: GameType = GameType.TIC_TAC_TOE
    turn_action: GameTurn | None = None

    def to_json(self) -> str:
        """Serialise the message to its JSON wire form."""
        return _dump(
            {
                "type": int(self.type),
                "room_code": self.room_code,
                "game_type": int(self.game_type),
                "turn_action": encode_turn(self.turn_action),
            }
        )

    @classmethod
    def from_json(cls, text: str | bytes) -> ClientMessage:
        """Parse a message from JSON; unknown message types raise ValueError."""
        data = _load_object(text)
        return cls(
            type=ClientMessageType(data.get("type", 0)),
            room_code=str(data.get("room_code", "")),
            game_type=GameType(data.get("game_type", 0)),
            turn_action=decode_turn(data.get("turn_action")),
        )