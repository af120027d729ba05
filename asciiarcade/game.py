"""Common types shared by all games."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Any, ClassVar

from asciiarcade.vector import Vector


class GameType(IntEnum):
    """The kinds of game that can be played."""

    TIC_TAC_TOE = 0
    CHECKERS = 1

    def __str__(self) -> str:
        return {GameType.TIC_TAC_TOE: "TicTacToe", GameType.CHECKERS: "Checkers"}[self]


class GameStatus(IntEnum):
    """Whether a game is still running and who won it."""

    ONGOING = 0
    PLAYER1_WIN = 1
    PLAYER2_WIN = 2
    DRAW = 3


class InvalidMoveError(Exception):
    """Raised when a player attempts a move the rules forbid."""


class GameTurn(ABC):
    """One player's action in a game."""

    game_type: ClassVar[GameType]

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Return the wire representation of the turn."""


class Game(ABC):
    """The state and rules of a two-player game."""

    game_type: ClassVar[GameType]
    status: GameStatus

    @abstractmethod
    def validate_move(self, turn: GameTurn, player_num: int) -> None:
        """Raise InvalidMoveError if ``turn`` is not legal for ``player_num``."""

    @abstractmethod
    def execute_turn(self, turn: GameTurn, player_num: int) -> str:
        """Apply an already validated turn and return a message about it."""

    @abstractmethod
    def display_board(self, cursor: Vector, player_num: int) -> str:
        """Render the board as seen by ``player_num`` with ``cursor`` highlighted."""

    @abstractmethod
    def instructions(self) -> str:
        """Return how-to-play text."""

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Return the wire representation of the game."""