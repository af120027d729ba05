"""The screens a client session moves through, and how each reacts to input."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, ClassVar

from asciiarcade.catalog import get_game_types
from asciiarcade.checkers import CheckersDirection, CheckersGame, CheckersTurn
from asciiarcade.game import Game, GameType
from asciiarcade.messages import (
    ClientMessage,
    ClientMessageType,
    GameResult,
    ServerMessage,
    ServerMessageType,
)
from asciiarcade.styles import Align, Border, Style, join_vertical
from asciiarcade.tic_tac_toe import TicTacToeTurn
from asciiarcade.vector import Vector


class SessionStateType(IntEnum):
    """The screens of a client session."""

    IN_MENU = 0
    WAITING_ROOM = 1
    GAME_SELECTION = 2
    IN_GAME = 3
    END_GAME = 4

    def __str__(self) -> str:
        return _STATE_NAMES[self]


_STATE_NAMES = {
    SessionStateType.IN_MENU: "In Menu",
    SessionStateType.WAITING_ROOM: "Waiting Room",
    SessionStateType.GAME_SELECTION: "Game Selection",
    SessionStateType.IN_GAME: "In Game",
    SessionStateType.END_GAME: "End Game",
}


class ValidationError(Exception):
    """An error to show the user: bad input or an unexpected server reply."""


_UP = ("up", "k", "w")
_DOWN = ("down", "j", "s")
_LEFT = ("left", "h", "a")
_RIGHT = ("right", "l", "d")
_SELECT = ("enter", " ")
_CONCEDE = ("c", "q")


def _unexpected(msg: ServerMessage, where: str) -> ValidationError:
    return ValidationError(f"unexpected server message type while {where}: {msg.type!s}")


def _send_quit(session: Any) -> None:
    session.send(ClientMessage(ClientMessageType.QUIT_ROOM))


def _send_concede(session: Any) -> None:
    session.send(ClientMessage(ClientMessageType.CONCEDE))


@dataclass
class TextInput:
    """A single-line text field with a character limit."""

    value: str = ""
    placeholder: str = ""
    prompt: str = " "
    char_limit: int = 5
    width: int = 30

    def handle_key(self, key: str) -> None:
        """Insert a printable character or delete with backspace; other keys are ignored."""
        if key == "backspace":
            self.value = self.value[:-1]
        elif len(key) == 1 and key.isprintable() and len(self.value) < self.char_limit:
            self.value += key

    def view(self) -> str:
        """Render the field, showing the placeholder while it is empty."""
        content = self.value if self.value else self.placeholder
        return self.prompt + content.ljust(self.width)


def _menu_input() -> TextInput:
    return TextInput(placeholder="Enter room code.", char_limit=5, width=30)


_MENU_TITLE = Style(
    bold=True, foreground="#FAFAFA", background="#7D56F4", padding=(0, 1), margin=(0, 0, 1, 0)
)
_MENU_INSTRUCTION = Style(foreground="#626262", margin=(0, 0, 2, 0))
_MENU_BOX = Style(
    border=Border.ROUNDED, border_foreground="#874BFD", padding=1, margin=(1, 0, 0, 0)
)


@dataclass
class MenuState:
    """The opening screen, where a room code is entered."""

    text_input: TextInput = field(default_factory=_menu_input)
    type: ClassVar[SessionStateType] = SessionStateType.IN_MENU

    def handle_key(self, key: str, session: Any) -> None:
        """Edit the room code; on enter, connect and ask to join the room."""
        self.text_input.handle_key(key)
        if key != "enter":
            return
        code = self.text_input.value
        if not code:
            raise ValidationError("Please enter a code.")
        session.start_ws()
        session.room_code = code
        session.send(ClientMessage(ClientMessageType.JOIN_ROOM, room_code=code))

    def handle_server_message(self, session: Any, msg: ServerMessage) -> None:
        if msg.type is ServerMessageType.ROOM_JOINED:
            session.player_number = msg.player_number
            session.set_state(SessionStateType.WAITING_ROOM)
        else:
            raise _unexpected(msg, "in menu")

    def display(self) -> str:
        title = _MENU_TITLE.render("🎮 ASCII ARCADE")
        instruction = _MENU_INSTRUCTION.render(
            "Enter a room code to join or create a game room"
        )
        box = _MENU_BOX.render(self.text_input.view())
        return join_vertical(Align.LEFT, title, instruction, box)


_WAIT_TITLE = Style(
    bold=True, foreground="#FAFAFA", background="#FF6B35", padding=(0, 1), margin=(0, 0, 1, 0)
)
_WAIT_STATUS = Style(foreground="#626262", italic=True, margin=(0, 0, 1, 0))
_WAIT_INSTRUCTION = Style(
    foreground="#9CA3AF",
    border=Border.NORMAL,
    border_foreground="#6B7280",
    padding=1,
    margin=(1, 0, 0, 0),
)


@dataclass
class WaitingRoomState:
    """Waiting in a room for a second player."""

    room_code: str
    type: ClassVar[SessionStateType] = SessionStateType.WAITING_ROOM

    def handle_key(self, key: str, session: Any) -> None:
        if key == "q":
            _send_quit(session)

    def handle_server_message(self, session: Any, msg: ServerMessage) -> None:
        if msg.type is ServerMessageType.ROOM_CLOSED:
            session.handle_room_closure()
        elif msg.type is ServerMessageType.ENTERED_GAME_SELECTION:
            session.set_state(SessionStateType.GAME_SELECTION)
        else:
            raise _unexpected(msg, "in waiting room")

    def display(self) -> str:
        title = _WAIT_TITLE.render("WAITING ROOM | ROOM CODE: " + self.room_code)
        status = _WAIT_STATUS.render("Waiting for another player to join...")
        instruction = _WAIT_INSTRUCTION.render("Press 'q' to quit and return to main menu")
        return join_vertical(Align.LEFT, title, status, instruction)


_SELECT_TITLE = Style(
    bold=True, foreground="#FAFAFA", background="#32D74B", padding=(0, 1), margin=(0, 0, 1, 0)
)
_SELECT_WAITING = Style(
    foreground="#FF9500",
    italic=True,
    border=Border.ROUNDED,
    border_foreground="#FF9500",
    padding=1,
    margin=(1, 0, 0, 0),
)
_SELECT_INSTRUCTION = Style(foreground="#626262", margin=(0, 0, 1, 0))
_SELECTED = Style(bold=True, foreground="#FAFAFA", background="#32D74B", padding=(0, 1))
_UNSELECTED = Style(foreground="#9CA3AF", padding=(0, 1))
_CONTROLS = Style(
    foreground="#6B7280", border=Border.NORMAL, border_foreground="#374151", padding=1
)
_SELECT_CONTROLS = Style(
    foreground="#6B7280",
    border=Border.NORMAL,
    border_foreground="#374151",
    padding=1,
    margin=(1, 0, 0, 0),
)


@dataclass
class GameSelectionState:
    """Player 1 picks a game; player 2 waits."""

    player_num: int
    cursor: int = 0
    type: ClassVar[SessionStateType] = SessionStateType.GAME_SELECTION

    def handle_key(self, key: str, session: Any) -> None:
        if key == "q":
            _send_quit(session)
            return
        if session.player_number != 1:
            return
        game_types = get_game_types()
        if key in _UP:
            self.cursor = max(self.cursor - 1, 0)
        elif key in _DOWN:
            self.cursor = min(self.cursor + 1, len(game_types) - 1)
        elif key in _SELECT:
            session.send(
                ClientMessage(
                    ClientMessageType.SELECT_GAME_TYPE, game_type=game_types[self.cursor]
                )
            )

    def handle_server_message(self, session: Any, msg: ServerMessage) -> None:
        if msg.type is ServerMessageType.GAME_STARTED:
            session.game = msg.game
            session.game_type = msg.game.game_type if msg.game is not None else None
            session.player_turn = msg.player_turn
            session.set_state(SessionStateType.IN_GAME)
        elif msg.type is ServerMessageType.ROOM_CLOSED:
            session.handle_room_closure()
        else:
            raise _unexpected(msg, "in game selection")

    def display(self) -> str:
        title = _SELECT_TITLE.render("🎯 GAME SELECTION")
        if self.player_num != 1:
            waiting = _SELECT_WAITING.render("Waiting for Player 1 to select a game...")
            return join_vertical(Align.LEFT, title, waiting)

        instruction = _SELECT_INSTRUCTION.render("Choose a game to play:")
        options = [
            _SELECTED.render(f"▶ {game_type}")
            if i == self.cursor
            else _UNSELECTED.render(f"  {game_type}")
            for i, game_type in enumerate(get_game_types())
        ]
        games = join_vertical(Align.LEFT, *options)
        controls = _SELECT_CONTROLS.render("↑/↓ Navigate • Enter/Space Select • q Quit")
        return join_vertical(Align.LEFT, title, instruction, games, controls)


_INFO = Style(foreground="#626262", background="#1C1C1E", padding=(0, 1), margin=(0, 0, 1, 0))

_MOVE_KEYS = {
    "e": CheckersDirection.LEFT,
    "r": CheckersDirection.RIGHT,
    "d": CheckersDirection.BACK_LEFT,
    "f": CheckersDirection.BACK_RIGHT,
}


class InGameState:
    """Playing a game: moving a cursor over the board and sending turns."""

    type: ClassVar[SessionStateType] = SessionStateType.IN_GAME

    def __init__(self, player_num: int, player_turn: int, game: Game) -> None:
        self.player_num = player_num
        self.game = game
        self.is_player_turn = player_num == player_turn
        self.cursor = Vector(0, 0)
        self.selected_square = Vector(-1, -1)
        self.in_move_select_mode = False

    def handle_key(self, key: str, session: Any) -> None:
        if self.game.game_type is GameType.TIC_TAC_TOE:
            self._handle_tic_tac_toe_key(key, session)
        elif self.game.game_type is GameType.CHECKERS:
            self._handle_checkers_key(key, session)
        else:
            raise RuntimeError("game type not accounted for")

    def _handle_tic_tac_toe_key(self, key: str, session: Any) -> None:
        x, y = self.cursor.x, self.cursor.y
        if key in _CONCEDE:
            _send_concede(session)
        elif key in _UP:
            self.cursor = Vector(x, max(y - 1, 0))
        elif key in _DOWN:
            self.cursor = Vector(x, min(y + 1, 2))
        elif key in _LEFT:
            self.cursor = Vector(max(x - 1, 0), y)
        elif key in _RIGHT:
            self.cursor = Vector(min(x + 1, 2), y)
        elif key in _SELECT:
            session.send(
                ClientMessage(
                    ClientMessageType.SEND_TURN, turn_action=TicTacToeTurn(self.cursor)
                )
            )

    def _move_checkers_cursor(self, dx: int, dy: int) -> None:
        # Player 2 sees the board rotated, so their moves are mirrored.
        if self.player_num == 2:
            dx, dy = -dx, -dy
        elif self.player_num != 1:
            return
        x = self.cursor.x + dx
        y = self.cursor.y + dy
        if 0 <= x <= 7 and 0 <= y <= 7:
            self.cursor = Vector(x, y)

    def _handle_checkers_key(self, key: str, session: Any) -> None:
        if key in _CONCEDE:
            _send_concede(session)
            return
        if not self.in_move_select_mode:
            if key in _UP:
                self._move_checkers_cursor(0, -1)
            elif key in _DOWN:
                self._move_checkers_cursor(0, 1)
            elif key in _LEFT:
                self._move_checkers_cursor(-1, 0)
            elif key in _RIGHT:
                self._move_checkers_cursor(1, 0)
            elif key in _SELECT:
                game = self.game
                if not (
                    isinstance(game, CheckersGame)
                    and game.square_has_player_piece(self.cursor, self.player_num)
                ):
                    raise ValidationError(
                        f"you do not have a piece at {self.cursor.y}, {self.cursor.x}"
                    )
                self.in_move_select_mode = True
            return

        if key in ("backspace", "escape", "esc"):
            self.in_move_select_mode = False
            return
        direction = _MOVE_KEYS.get(key)
        if direction is None:
            raise ValidationError("invalid input")
        self.in_move_select_mode = False
        session.send(
            ClientMessage(
                ClientMessageType.SEND_TURN,
                turn_action=CheckersTurn(self.cursor, direction),
            )
        )

    def handle_server_message(self, session: Any, msg: ServerMessage) -> None:
        if msg.type is ServerMessageType.ERROR:
            raise ValidationError(msg.error_message)
        if msg.type is ServerMessageType.TURN_RESULT:
            session.game = msg.game
            session.player_turn = msg.player_turn
            self.game = msg.game
            self.is_player_turn = msg.player_turn == self.player_num
        elif msg.type is ServerMessageType.GAME_FINISHED:
            session.game = msg.game
            session.game_result = msg.game_result
            session.set_state(SessionStateType.END_GAME)
        elif msg.type is ServerMessageType.ROOM_CLOSED:
            session.handle_room_closure()
        else:
            raise _unexpected(msg, "in game")

    def display(self) -> str:
        board = self.game.display_board(self.cursor, self.player_num)
        turn_text = "Your turn!" if self.is_player_turn else "Waiting for opponents move..."
        info = _INFO.render(f"Player: {self.player_num} | {turn_text}")
        if self.in_move_select_mode:
            controls_text = (
                "e Move Left • r Move Right • d Move Back Left • f Move Back Right • "
                "Backspace Deselect Square • q/c Concede"
            )
        else:
            controls_text = "WASD/Arrow Keys Move • Enter/Space Select • q/c Concede"
        return join_vertical(Align.LEFT, board, info, _CONTROLS.render(controls_text))


_RESULT_TEXT = {
    GameResult.PLAYER_WIN: ("#32D74B", "You Won!"),
    GameResult.PLAYER_LOSE: ("#FF3B30", "You Lost"),
    GameResult.DRAW: ("#FF9500", "It's a Draw!"),
}
_PROMPT = Style(
    foreground="#626262", background="#1C1C1E", padding=(0, 1), margin=(0, 0, 1, 0)
)


@dataclass
class EndGameState:
    """The finished game, with an offer to play again."""

    game: Game
    game_result: GameResult
    player_num: int
    type: ClassVar[SessionStateType] = SessionStateType.END_GAME

    def handle_key(self, key: str, session: Any) -> None:
        if key == "y":
            session.send(
                ClientMessage(ClientMessageType.JOIN_ROOM, room_code=session.room_code)
            )
        elif key in ("n", "q"):
            _send_quit(session)

    def handle_server_message(self, session: Any, msg: ServerMessage) -> None:
        if msg.type is ServerMessageType.ROOM_JOINED:
            session.player_number = msg.player_number
            session.set_state(SessionStateType.WAITING_ROOM)
        elif msg.type is ServerMessageType.ROOM_CLOSED:
            session.handle_room_closure()
        else:
            raise _unexpected(msg, "in game end")

    def display(self) -> str:
        board = self.game.display_board(Vector(-1, -1), self.player_num)
        background, text = _RESULT_TEXT.get(self.game_result, (None, "Game Over"))
        result_style = Style(
            bold=True,
            foreground="#FAFAFA",
            background=background,
            padding=(0, 1),
            margin=(1, 0, 1, 0),
        )
        result = result_style.render(text)
        prompt = _PROMPT.render("Play again? (y/n)")
        controls = _CONTROLS.render("y Play Again • n/q Quit to Menu")
        return join_vertical(Align.LEFT, board, result, prompt, controls)