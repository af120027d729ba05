"""A client session: the current screen, the game in progress and the server link."""

from __future__ import annotations

from typing import Callable, Protocol, Union

from asciiarcade.game import Game, GameType
from asciiarcade.messages import ClientMessage, GameResult, ServerMessage
from asciiarcade.states import (
    EndGameState,
    GameSelectionState,
    InGameState,
    MenuState,
    SessionStateType,
    ValidationError,
    WaitingRoomState,
)
from asciiarcade.styles import Align, Style, join_vertical

SessionState = Union[MenuState, WaitingRoomState, GameSelectionState, InGameState, EndGameState]

_ERROR_STYLE = Style(foreground="#FF3B30", padding=(0, 1))
_ROOM_CLOSED_TEXT = "A player has quit, closing the room."


class Transport(Protocol):
    """What a session needs from its link to the server."""

    def send(self, msg: ClientMessage) -> None: ...

    def close(self) -> None: ...


class Session:
    """Tracks which screen the player is on and routes keys and server messages to it."""

    def __init__(self, server_url: str, connect: Callable[[str], Transport]) -> None:
        self.server_url = server_url
        self._connect = connect
        self.state: SessionState = MenuState()
        self.room_code = ""
        self.waiting_for_server_response = False
        self.err_msg = ""
        self.player_number = 0
        self.player_turn = 0
        self.game_type: GameType | None = None
        self.game: Game | None = None
        self.game_result = GameResult.PLAYER_WIN
        self.transport: Transport | None = None

    def _drop_transport(self) -> None:
        if self.transport is not None:
            self.transport.close()
            self.transport = None

    def start_ws(self) -> None:
        """Open a fresh link to the server; raises ValidationError if that fails."""
        self._drop_transport()
        try:
            self.transport = self._connect(self.server_url)
        except OSError as exc:
            raise ValidationError(f"error starting WS: {exc}") from exc

    def handle_key(self, key: str) -> bool:
        """Handle a key press; returns False when the user asked to quit."""
        self.err_msg = ""
        if key == "ctrl+c":
            return False
        try:
            self.state.handle_key(key, self)
        except ValidationError as exc:
            self.err_msg = str(exc)
        return True

    def handle_server_message(self, msg: ServerMessage) -> None:
        """Pass a server message to the current screen, showing any error it raises."""
        self.waiting_for_server_response = False
        try:
            self.state.handle_server_message(self, msg)
        except ValidationError as exc:
            self.err_msg = str(exc)

    def handle_server_closed(self) -> None:
        """React to the server dropping the link: return to the menu."""
        self.waiting_for_server_response = False
        if self.state.type is not SessionStateType.IN_MENU:
            self.set_state(SessionStateType.IN_MENU)
        else:
            self._drop_transport()

    def send(self, msg: ClientMessage) -> None:
        """Send ``msg`` to the server; a failure is shown as the error message."""
        if self.transport is None:
            self.err_msg = "not connected to server"
            return
        try:
            self.transport.send(msg)
        except OSError as exc:
            self.err_msg = str(exc)
        else:
            self.waiting_for_server_response = True

    def _require(self, *allowed: SessionStateType) -> None:
        current = self.state.type
        if current not in allowed:
            raise RuntimeError(f"Unexpected state when transitioning: {current}")

    def set_state(self, state_type: SessionStateType) -> None:
        """Move to the screen ``state_type``; an impossible transition raises RuntimeError."""
        state_type = SessionStateType(state_type)
        if state_type is SessionStateType.IN_MENU:
            self._drop_transport()
            self.state = MenuState()
        elif state_type is SessionStateType.WAITING_ROOM:
            self._require(SessionStateType.IN_MENU, SessionStateType.END_GAME)
            self.state = WaitingRoomState(self.room_code)
        elif state_type is SessionStateType.GAME_SELECTION:
            self._require(SessionStateType.WAITING_ROOM)
            self.state = GameSelectionState(self.player_number)
        elif state_type is SessionStateType.IN_GAME:
            self._require(SessionStateType.GAME_SELECTION)
            if self.game is None:
                raise RuntimeError("cannot enter a game without one")
            self.state = InGameState(self.player_number, self.player_turn, self.game)
        else:
            self._require(SessionStateType.IN_GAME)
            if self.game is None:
                raise RuntimeError("cannot end a game without one")
            self.state = EndGameState(self.game, self.game_result, self.player_number)

    def handle_room_closure(self) -> None:
        """Tell the user the room closed and return to the menu."""
        self.err_msg = _ROOM_CLOSED_TEXT
        self.set_state(SessionStateType.IN_MENU)

    def view(self) -> str:
        """Render the current screen, followed by any error message."""
        parts = [self.state.display()]
        if self.err_msg:
            parts.append(_ERROR_STYLE.render(self.err_msg))
        return join_vertical(Align.LEFT, *parts)