import pytest

from asciiarcade.catalog import new_game
from asciiarcade.game import GameType
from asciiarcade.messages import (
    ClientMessageType,
    GameResult,
    ServerMessage,
    ServerMessageType,
)
from asciiarcade.session import Session
from asciiarcade.states import SessionStateType
from asciiarcade.tic_tac_toe import TicTacToeTurn
from asciiarcade.vector import Vector


class FakeTransport:
    def __init__(self, url):
        self.url = url
        self.sent = []
        self.closed = False
        self.fail = False

    def send(self, msg):
        if self.fail:
            raise OSError("broken pipe")
        self.sent.append(msg)

    def close(self):
        self.closed = True


@pytest.fixture
def transports():
    return []


@pytest.fixture
def session(transports):
    def connect(url):
        transport = FakeTransport(url)
        transports.append(transport)
        return transport

    return Session("ws://localhost:8000", connect)


def join(session, code="abc"):
    for ch in code:
        session.handle_key(ch)
    session.handle_key("enter")


def to_waiting_room(session, player=1):
    join(session)
    session.handle_server_message(
        ServerMessage(ServerMessageType.ROOM_JOINED, player_number=player)
    )


def to_game(session, player=1):
    to_waiting_room(session, player)
    session.handle_server_message(ServerMessage(ServerMessageType.ENTERED_GAME_SELECTION))
    session.handle_server_message(
        ServerMessage(
            ServerMessageType.GAME_STARTED,
            game=new_game(GameType.TIC_TAC_TOE),
            player_turn=1,
        )
    )


def test_starts_in_menu(session):
    assert session.state.type is SessionStateType.IN_MENU
    assert session.transport is None


def test_enter_connects_and_joins(session, transports):
    join(session)
    assert len(transports) == 1
    assert transports[0].url == "ws://localhost:8000"
    sent = transports[0].sent
    assert [m.type for m in sent] == [ClientMessageType.JOIN_ROOM]
    assert sent[0].room_code == "abc"
    assert session.room_code == "abc"
    assert session.waiting_for_server_response is True


def test_enter_without_code_shows_error(session, transports):
    session.handle_key("enter")
    assert session.err_msg == "Please enter a code."
    assert transports == []
    assert "Please enter a code." in session.view()


def test_ctrl_c_quits(session):
    assert session.handle_key("ctrl+c") is False
    assert session.handle_key("x") is True


def test_connection_failure_reported():
    def connect(url):
        raise OSError("refused")

    session = Session("ws://localhost:8000", connect)
    join(session)
    assert session.err_msg.startswith("error starting WS:")
    assert session.state.type is SessionStateType.IN_MENU


def test_key_clears_error(session):
    session.handle_key("enter")
    assert session.err_msg
    session.handle_key("a")
    assert session.err_msg == ""


def test_room_joined_enters_waiting_room(session):
    to_waiting_room(session, player=2)
    assert session.state.type is SessionStateType.WAITING_ROOM
    assert session.player_number == 2
    assert session.waiting_for_server_response is False


def test_unexpected_message_in_menu(session):
    session.handle_server_message(ServerMessage(ServerMessageType.TURN_RESULT))
    assert "unexpected server message type" in session.err_msg
    assert session.state.type is SessionStateType.IN_MENU


def test_full_game_flow(session, transports):
    to_game(session)
    assert session.state.type is SessionStateType.IN_GAME
    assert session.game_type is GameType.TIC_TAC_TOE
    session.handle_key("enter")
    turn_msg = transports[0].sent[-1]
    assert turn_msg.type is ClientMessageType.SEND_TURN
    assert turn_msg.turn_action == TicTacToeTurn(Vector(0, 0))

    game = new_game(GameType.TIC_TAC_TOE)
    session.handle_server_message(
        ServerMessage(ServerMessageType.GAME_FINISHED, game=game, game_result=GameResult.DRAW)
    )
    assert session.state.type is SessionStateType.END_GAME
    assert session.game_result is GameResult.DRAW

    session.handle_key("y")
    again = transports[0].sent[-1]
    assert again.type is ClientMessageType.JOIN_ROOM
    assert again.room_code == "abc"
    session.handle_server_message(
        ServerMessage(ServerMessageType.ROOM_JOINED, player_number=1)
    )
    assert session.state.type is SessionStateType.WAITING_ROOM


def test_turn_result_updates_player_turn(session):
    to_game(session)
    session.handle_server_message(
        ServerMessage(
            ServerMessageType.TURN_RESULT,
            game=new_game(GameType.TIC_TAC_TOE),
            player_turn=2,
        )
    )
    assert session.player_turn == 2
    assert session.state.is_player_turn is False


def test_room_closed_returns_to_menu(session, transports):
    to_waiting_room(session)
    session.handle_server_message(ServerMessage(ServerMessageType.ROOM_CLOSED))
    assert session.state.type is SessionStateType.IN_MENU
    assert session.err_msg == "A player has quit, closing the room."
    assert transports[0].closed is True
    assert session.transport is None


def test_server_closed_outside_menu(session, transports):
    to_waiting_room(session)
    session.handle_server_closed()
    assert session.state.type is SessionStateType.IN_MENU
    assert transports[0].closed is True


def test_server_closed_in_menu_drops_link(session, transports):
    join(session)
    session.handle_server_closed()
    assert session.state.type is SessionStateType.IN_MENU
    assert session.transport is None
    assert transports[0].closed is True


def test_invalid_transition_raises(session):
    with pytest.raises(RuntimeError):
        session.set_state(SessionStateType.GAME_SELECTION)


def test_send_failure_sets_error(session, transports):
    to_waiting_room(session)
    transports[0].fail = True
    session.handle_key("q")
    assert session.err_msg == "broken pipe"


def test_send_without_transport_sets_error(session):
    session.send(ServerMessage(ServerMessageType.ERROR))
    assert session.err_msg == "not connected to server"
    assert session.waiting_for_server_response is False


def test_new_join_closes_previous_transport(session, transports):
    join(session)
    session.start_ws()
    assert transports[0].closed is True
    assert session.transport is transports[1]