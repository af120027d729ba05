"""Checkers rules and board rendering."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, ClassVar, Mapping

from asciiarcade.game import Game, GameStatus, GameTurn, GameType, InvalidMoveError
from asciiarcade.styles import Align, Border, Style, join_vertical
from asciiarcade.vector import Vector

PIECE_WHITE = "w"
PIECE_BLACK = "b"
BOARD_SIZE = 8

_log = logging.getLogger(__name__)

_SUBSCRIPTS = ("", "₁", "₂", "₃", "₄", "₅", "₆", "₇", "₈", "₉", "₁₀", "₁₁", "₁₂")


def to_subscript(n: int) -> str:
    """Return ``n`` (0 to 12) written with subscript digits; 0 gives ''."""
    if not 0 <= n < len(_SUBSCRIPTS):
        raise IndexError(f"no subscript for {n}")
    return _SUBSCRIPTS[n]


@dataclass(frozen=True)
class CheckersPiece:
    """A piece on the board; the empty square has no colour and id 0."""

    piece_id: int = 0
    color: str = ""
    is_king: bool = False

    def display_id(self) -> int:
        """Return the piece's number within its own colour, from 1."""
        if self.color == PIECE_WHITE:
            return self.piece_id - 100
        return self.piece_id - 200

    def render(self) -> str:
        """Return the 7-cell text for the piece, or '' for an empty square."""
        if self.color == "":
            return ""
        text = "👑" if self.is_king else "  "
        text += "⚪" if self.color == PIECE_WHITE else "⚫"
        number = self.display_id()
        text += to_subscript(number)
        text += "  " if number < 10 else " "
        return text


_EMPTY = CheckersPiece()


class CheckersDirection(IntEnum):
    """Move directions, relative to the moving player."""

    LEFT = 0
    RIGHT = 1
    BACK_LEFT = 2
    BACK_RIGHT = 3


_BACKWARDS = (CheckersDirection.BACK_LEFT, CheckersDirection.BACK_RIGHT)

_OFFSETS = {
    CheckersDirection.LEFT: Vector(-1, -1),
    CheckersDirection.RIGHT: Vector(1, -1),
    CheckersDirection.BACK_LEFT: Vector(-1, 1),
    CheckersDirection.BACK_RIGHT: Vector(1, 1),
}

_BLACK_TO_WHITE = {
    CheckersDirection.LEFT: CheckersDirection.BACK_RIGHT,
    CheckersDirection.RIGHT: CheckersDirection.BACK_LEFT,
    CheckersDirection.BACK_LEFT: CheckersDirection.RIGHT,
    CheckersDirection.BACK_RIGHT: CheckersDirection.LEFT,
}


def convert_direction_from_black_to_white(direction: CheckersDirection) -> CheckersDirection:
    """Turn a direction as black sees the board into the absolute direction."""
    return _BLACK_TO_WHITE[CheckersDirection(direction)]


def apply_move(square: Vector, direction: CheckersDirection) -> Vector:
    """Return the square one diagonal step from ``square`` in ``direction``."""
    return square + _OFFSETS[CheckersDirection(direction)]


@dataclass(frozen=True)
class CheckersTurn(GameTurn):
    """Moving the piece at ``piece_coords`` one step in ``direction``."""

    piece_coords: Vector
    direction: CheckersDirection
    game_type: ClassVar[GameType] = GameType.CHECKERS

    def to_dict(self) -> dict[str, Any]:
        return {"piece_coords": self.piece_coords.to_dict(), "direction": int(self.direction)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CheckersTurn:
        return cls(
            Vector.from_dict(data.get("piece_coords") or {}),
            CheckersDirection(data.get("direction", 0)),
        )


def _initial_board() -> list[list[CheckersPiece]]:
    board = [[_EMPTY] * BOARD_SIZE for _ in range(BOARD_SIZE)]
    white_id, black_id = 101, 201
    for row in range(BOARD_SIZE):
        for col in range(BOARD_SIZE):
            if (row % 2 == 0) != (col % 2 == 0):
                continue
            if row < 3:
                board[row][col] = CheckersPiece(black_id, PIECE_BLACK)
                black_id += 1
            elif row > 4:
                board[row][col] = CheckersPiece(white_id, PIECE_WHITE)
                white_id += 1
    return board


def _in_bounds(square: Vector) -> bool:
    return 0 <= square.x < BOARD_SIZE and 0 <= square.y < BOARD_SIZE


def _player_color(player_num: int) -> str:
    return PIECE_WHITE if player_num == 1 else PIECE_BLACK


def _piece_to_dict(piece: CheckersPiece) -> dict[str, Any]:
    return {"id": piece.piece_id, "color": piece.color, "is_king": piece.is_king}


def _piece_from_dict(data: Mapping[str, Any]) -> CheckersPiece:
    return CheckersPiece(
        int(data.get("id", 0)), str(data.get("color", "")), bool(data.get("is_king", False))
    )


_HEADER_STYLE = Style(
    bold=True, foreground="#FAFAFA", background="#6366F1", padding=(0, 1), margin=(0, 0, 1, 0)
)
_BOARD_STYLE = Style(border=Border.ROUNDED, border_foreground="#6366F1", padding=1)
_DARK_STYLE = Style(bold=True, background="#8B4513", foreground="#FFFFFF")
_LIGHT_STYLE = Style(bold=True, background="#F5DEB3", foreground="#000000")
_CURSOR_STYLE = Style(bold=True, background="#10B981", foreground="#000000")

_WHITE_HEADERS = "        0       1       2       3       4       5       6       7   "
_BLACK_HEADERS = "        7       6       5       4       3       2       1       0   "
_TOP = "  ┌───────┬───────┬───────┬───────┬───────┬───────┬───────┬───────┐"
_SEPARATOR = "  ├───────┼───────┼───────┼───────┼───────┼───────┼───────┼───────┤"
_BOTTOM = "  └───────┴───────┴───────┴───────┴───────┴───────┴───────┴───────┘"
_BLANK_CELL = "       "


@dataclass
class CheckersGame(Game):
    """An 8x8 game: player 1 plays white from the bottom, player 2 black."""

    board: list[list[CheckersPiece]] = field(default_factory=_initial_board)
    status: GameStatus = GameStatus.ONGOING
    white_piece_count: int = 12
    black_piece_count: int = 12
    game_type: ClassVar[GameType] = GameType.CHECKERS

    @staticmethod
    def _require_turn(turn: GameTurn) -> CheckersTurn:
        if not isinstance(turn, CheckersTurn):
            raise TypeError(
                "server error - sent a turn not of type checkers turn during checkers game"
            )
        return turn

    def _at(self, square: Vector) -> CheckersPiece:
        return self.board[square.y][square.x]

    def square_has_player_piece(self, pos: Vector, player_num: int) -> bool:
        """Whether ``pos`` holds one of ``player_num``'s pieces."""
        return _in_bounds(pos) and self._at(pos).color == _player_color(player_num)

    @staticmethod
    def _true_direction(direction: CheckersDirection, player_num: int) -> CheckersDirection:
        if player_num == 2:
            return convert_direction_from_black_to_white(direction)
        return CheckersDirection(direction)

    def validate_move(self, turn: GameTurn, player_num: int) -> None:
        move = self._require_turn(turn)
        origin = move.piece_coords
        if not self.square_has_player_piece(origin, player_num):
            raise InvalidMoveError(f"player has no piece at square {origin.y}, {origin.x}")

        piece = self._at(origin)
        if not piece.is_king and move.direction in _BACKWARDS:
            raise InvalidMoveError("only kings can move backwards")

        direction = self._true_direction(move.direction, player_num)
        target = apply_move(origin, direction)
        if not _in_bounds(target):
            raise InvalidMoveError("destination is out of bounds")
        target_piece = self._at(target)
        if target_piece.color == piece.color:
            raise InvalidMoveError("destination is occupied")

        if target_piece.color != "":
            behind = apply_move(target, direction)
            if not _in_bounds(behind):
                raise InvalidMoveError("destination is out of bounds")
            if self._at(behind).color != "":
                raise InvalidMoveError("destination is occupied")

    def execute_turn(self, turn: GameTurn, player_num: int) -> str:
        move = self._require_turn(turn)
        origin = move.piece_coords
        piece = self._at(origin)
        direction = self._true_direction(move.direction, player_num)
        target = apply_move(origin, direction)
        target_piece = self._at(target)

        msg = ""
        if target_piece.color != "" and target_piece.color != piece.color:
            self._capture_piece(target)
            target = apply_move(target, direction)
            msg = (
                "captured a black piece!"
                if piece.color == PIECE_WHITE
                else "captured a white piece!"
            )

        if (player_num == 1 and target.y == 0) or (player_num == 2 and target.y == 7):
            piece = dataclasses.replace(piece, is_king=True)

        self.board[target.y][target.x] = piece
        self.board[origin.y][origin.x] = _EMPTY
        self.status = self._check_status()
        return msg

    def _capture_piece(self, square: Vector) -> None:
        captured = self._at(square)
        if captured.piece_id == 0:
            raise RuntimeError("no piece on this square - did validation run?")
        if captured.color == PIECE_WHITE:
            self.white_piece_count -= 1
        else:
            self.black_piece_count -= 1
        self.board[square.y][square.x] = _EMPTY
        _log.info("Capture a piece at %s, %s", square.x, square.y)

    def _check_status(self) -> GameStatus:
        if self.white_piece_count == 0:
            return GameStatus.PLAYER2_WIN
        if self.black_piece_count == 0:
            return GameStatus.PLAYER1_WIN
        return GameStatus.ONGOING

    def display_board(self, cursor: Vector, player_num: int) -> str:
        white_view = player_num == 1
        order = list(range(BOARD_SIZE)) if white_view else list(reversed(range(BOARD_SIZE)))

        def style_for(row: int, col: int) -> Style:
            if cursor == Vector(col, row):
                return _CURSOR_STYLE
            return _DARK_STYLE if (row + col) % 2 == 1 else _LIGHT_STYLE

        def spacer(row: int) -> str:
            return "  │" + "".join(style_for(row, col).render(_BLANK_CELL) + "│" for col in order)

        lines = [_TOP]
        for idx, row in enumerate(order):
            lines.append(spacer(row))
            lines.append(
                f"{chr(ord('a') + row)} │"
                + "".join(
                    style_for(row, col).render(self.board[row][col].render() or _BLANK_CELL)
                    + "│"
                    for col in order
                )
            )
            lines.append(spacer(row))
            if idx < BOARD_SIZE - 1:
                lines.append(_SEPARATOR)
        lines.append(_BOTTOM)

        headers = _WHITE_HEADERS if white_view else _BLACK_HEADERS
        grid = join_vertical(Align.LEFT, headers, "\n".join(lines))
        header = _HEADER_STYLE.render("CHECKERS")
        return join_vertical(Align.CENTER, header, _BOARD_STYLE.render(grid))

    def instructions(self) -> str:
        return (
            "when it is your turn, enter \033[33m move <piece-num> <direction>\033[0m.\n"
            "Possible directions are \033[33m'l', 'r', 'bl', 'br'\033[0m. "
            "Note that only kings can move backwards."
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "game_type": int(self.game_type),
            "board": [[_piece_to_dict(p) for p in row] for row in self.board],
            "game_status": int(self.status),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CheckersGame:
        raw_board = data.get("board")
        if raw_board:
            board = [[_piece_from_dict(p) for p in row] for row in raw_board]
        else:
            board = [[_EMPTY] * BOARD_SIZE for _ in range(BOARD_SIZE)]
        pieces = [p for row in board for p in row]
        return cls(
            board=board,
            status=GameStatus(data.get("game_status", 0)),
            white_piece_count=sum(p.color == PIECE_WHITE for p in pieces),
            black_piece_count=sum(p.color == PIECE_BLACK for p in pieces),
        )