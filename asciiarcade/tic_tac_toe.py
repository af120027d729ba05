"""Tic-tac-toe rules and board rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, ClassVar, Mapping

from asciiarcade.game import Game, GameStatus, GameTurn, GameType, InvalidMoveError
from asciiarcade.styles import Align, Border, Style, join_vertical
from asciiarcade.vector import Vector


class TicTacToeSquare(IntEnum):
    """Contents of one square."""

    EMPTY = 0
    X = 1
    O = 2  # noqa: E741


@dataclass(frozen=True)
class TicTacToeTurn(GameTurn):
    """Placing a mark on the square at ``coords``."""

    coords: Vector
    game_type: ClassVar[GameType] = GameType.TIC_TAC_TOE

    def to_dict(self) -> dict[str, Any]:
        return {"coords": self.coords.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TicTacToeTurn:
        return cls(Vector.from_dict(data.get("coords") or {}))


_HEADER_STYLE = Style(
    bold=True, foreground="#FAFAFA", background="#6366F1", padding=(0, 1), margin=(0, 0, 1, 0)
)
_BOARD_STYLE = Style(border=Border.ROUNDED, border_foreground="#6366F1", padding=1)
_X_STYLE = Style(bold=True, foreground="#EF4444")
_O_STYLE = Style(bold=True, foreground="#3B82F6")
_CURSOR_STYLE = Style(bold=True, background="#10B981")

_COLUMN_HEADERS = "        0       1       2   "
_TOP = "  ┌───────┬───────┬───────┐"
_SEPARATOR = "  ├───────┼───────┼───────┤"
_BOTTOM = "  └───────┴───────┴───────┘"
_BLANK_CELL = "       "
_SYMBOLS = {TicTacToeSquare.EMPTY: " ", TicTacToeSquare.X: "X", TicTacToeSquare.O: "O"}

_LINES = (
    [((r, 0), (r, 1), (r, 2)) for r in range(3)]
    + [((0, c), (1, c), (2, c)) for c in range(3)]
    + [((0, 0), (1, 1), (2, 2)), ((0, 2), (1, 1), (2, 0))]
)


def _empty_board() -> list[list[TicTacToeSquare]]:
    return [[TicTacToeSquare.EMPTY] * 3 for _ in range(3)]


@dataclass
class TicTacToeGame(Game):
    """A 3x3 game: player 1 plays X, player 2 plays O."""

    board: list[list[TicTacToeSquare]] = field(default_factory=_empty_board)
    status: GameStatus = GameStatus.ONGOING
    game_type: ClassVar[GameType] = GameType.TIC_TAC_TOE

    @staticmethod
    def _require_turn(turn: GameTurn) -> TicTacToeTurn:
        if not isinstance(turn, TicTacToeTurn):
            raise TypeError(
                "server error - sent a turn not of type tictactoe turn during tictactoe game"
            )
        return turn

    def validate_move(self, turn: GameTurn, player_num: int) -> None:
        coords = self._require_turn(turn).coords
        if not (0 <= coords.y <= 2 and 0 <= coords.x <= 2):
            raise InvalidMoveError("selected square is out of bounds")
        if self.board[coords.y][coords.x] is not TicTacToeSquare.EMPTY:
            raise InvalidMoveError("square is occupied")

    def execute_turn(self, turn: GameTurn, player_num: int) -> str:
        coords = self._require_turn(turn).coords
        mark = TicTacToeSquare.O if player_num == 2 else TicTacToeSquare.X
        self.board[coords.y][coords.x] = mark
        self.status = self._check_status()
        return ""

    def _check_status(self) -> GameStatus:
        for line in _LINES:
            first, *rest = (self.board[r][c] for r, c in line)
            if first is not TicTacToeSquare.EMPTY and all(sq is first for sq in rest):
                if first is TicTacToeSquare.X:
                    return GameStatus.PLAYER1_WIN
                return GameStatus.PLAYER2_WIN
        if all(sq is not TicTacToeSquare.EMPTY for row in self.board for sq in row):
            return GameStatus.DRAW
        return GameStatus.ONGOING

    def display_board(self, cursor: Vector, player_num: int) -> str:
        def spacer(row_idx: int) -> str:
            return "  │" + "".join(
                _CURSOR_STYLE.render(_BLANK_CELL) + "│"
                if cursor == Vector(col_idx, row_idx)
                else _BLANK_CELL + "│"
                for col_idx in range(3)
            )

        lines = [_TOP]
        for i, row in enumerate(self.board):
            lines.append(spacer(i))
            content = f"{i} │"
            for j, square in enumerate(row):
                symbol = _SYMBOLS[square]
                if cursor == Vector(j, i):
                    content += _CURSOR_STYLE.render(f"   {symbol}   ") + "│"
                else:
                    if square is TicTacToeSquare.X:
                        symbol = _X_STYLE.render("X")
                    elif square is TicTacToeSquare.O:
                        symbol = _O_STYLE.render("O")
                    content += f"   {symbol}   │"
            lines.append(content)
            lines.append(spacer(i))
            if i < 2:
                lines.append(_SEPARATOR)
        lines.append(_BOTTOM)

        grid = join_vertical(Align.LEFT, _COLUMN_HEADERS, "\n".join(lines))
        header = _HEADER_STYLE.render("TIC TAC TOE")
        return join_vertical(Align.CENTER, header, _BOARD_STYLE.render(grid))

    def instructions(self) -> str:
        return "when it is your turn, enter \033[33m move <row-num> <col-num>\033[0m."

    def to_dict(self) -> dict[str, Any]:
        return {
            "game_type": int(self.game_type),
            "board": [[int(sq) for sq in row] for row in self.board],
            "game_status": int(self.status),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TicTacToeGame:
        raw_board = data.get("board")
        board = (
            [[TicTacToeSquare(v) for v in row] for row in raw_board]
            if raw_board
            else _empty_board()
        )
        return cls(board=board, status=GameStatus(data.get("game_status", 0)))