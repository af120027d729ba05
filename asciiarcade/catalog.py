"""Lookup of the available games and their wire forms."""

from __future__ import annotations

from typing import Any, Mapping

from asciiarcade.checkers import CheckersGame, CheckersTurn
from asciiarcade.game import Game, GameTurn, GameType
from asciiarcade.tic_tac_toe import TicTacToeGame, TicTacToeTurn

_GAMES: dict[GameType, type[TicTacToeGame] | type[CheckersGame]] = {
    GameType.TIC_TAC_TOE: TicTacToeGame,
    GameType.CHECKERS: CheckersGame,
}

_TURNS: dict[GameType, type[TicTacToeTurn] | type[CheckersTurn]] = {
    GameType.TIC_TAC_TOE: TicTacToeTurn,
    GameType.CHECKERS: CheckersTurn,
}


def get_game_types() -> list[GameType]:
    """Return the selectable game types in menu order."""
    return [GameType.TIC_TAC_TOE, GameType.CHECKERS]


def new_game(game_type: GameType | int) -> Game:
    """Start a fresh game of ``game_type``; unknown types raise ValueError."""
    return _GAMES[GameType(game_type)]()


def _game_type_of(data: Mapping[str, Any]) -> GameType:
    if "game_type" not in data:
        raise ValueError("missing game_type")
    return GameType(data["game_type"])


def game_from_dict(data: Mapping[str, Any]) -> Game:
    """Rebuild a game from its wire form, chosen by its ``game_type`` key."""
    return _GAMES[_game_type_of(data)].from_dict(data)


def turn_from_dict(data: Mapping[str, Any]) -> GameTurn:
    """Rebuild a turn from its wire form tagged with a ``game_type`` key."""
    return _TURNS[_game_type_of(data)].from_dict(data)