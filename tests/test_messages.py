import json

import pytest

from asciiarcade.checkers import CheckersDirection, CheckersGame, CheckersTurn
from asciiarcade.game import GameStatus, GameType
from asciiarcade.messages import (
    ClientMessage,
    ClientMessageType,
    GameResult,
    ServerMessage,
    ServerMessageType,
    decode_game,
    decode_turn,
    encode_game,
    encode_turn,
)
from asciiarcade.tic_tac_toe import TicTacToeGame, TicTacToeSquare, TicTacToeTurn
from asciiarcade.vector import Vector


def test_server_message_type_names():
    assert str(ServerMessageType(0)) == "Room Joined"
    assert str(ServerMessageType(1)) == "Entered Game Selection"
    assert str(ServerMessageType(8)) == "Error"


def test_encode_empty_game_is_empty_wrapper():
    assert encode_game(None) == {"type": 0}
    assert decode_game(encode_game(None)) is None


def test_encode_game_uses_tagged_key():
    wrapped = encode_game(CheckersGame())
    assert wrapped["type"] == int(GameType.CHECKERS)
    assert "checkers" in wrapped
    assert "tic_tac_toe" not in wrapped


def test_decode_game_unknown_type_is_none():
    assert decode_game({"type": 42}) is None


def test_turn_round_trip_tic_tac_toe():
    turn = TicTacToeTurn(Vector(2, 1))
    assert decode_turn(encode_turn(turn)) == turn


def test_turn_round_trip_checkers():
    turn = CheckersTurn(Vector(1, 5), CheckersDirection.BACK_RIGHT)
    assert decode_turn(encode_turn(turn)) == turn


def test_encode_turn_carries_both_turns():
    wrapped = encode_turn(CheckersTurn(Vector(3, 4), CheckersDirection.RIGHT))
    assert set(wrapped) == {"game_type", "tictactoe_turn", "checkers_turn"}
    assert wrapped["tictactoe_turn"] == TicTacToeTurn(Vector()).to_dict()


def test_decode_turn_unknown_type_is_none():
    assert decode_turn({"game_type": 9}) is None


def test_server_message_wire_keys():
    msg = ServerMessage(ServerMessageType.ROOM_JOINED, player_number=1)
    data = json.loads(msg.to_json())
    assert data == {
        "type": 0,
        "player_number": 1,
        "player_turn": 0,
        "game": {"type": 0},
        "game_result": 0,
        "quitting_player_num": 0,
        "error_message": "",
    }


def test_server_message_round_trip_with_tic_tac_toe():
    game = TicTacToeGame()
    game.board[1][1] = TicTacToeSquare.X
    msg = ServerMessage(ServerMessageType.TURN_RESULT, player_turn=2, game=game)
    back = ServerMessage.from_json(msg.to_json())
    assert back == msg
    assert back.game.board[1][1] is TicTacToeSquare.X


def test_server_message_round_trip_with_checkers_result():
    game = CheckersGame(status=GameStatus.PLAYER2_WIN)
    msg = ServerMessage(
        ServerMessageType.GAME_FINISHED,
        game=game,
        game_result=GameResult.PLAYER_LOSE,
        quitting_player_num=1,
        error_message="room is full",
    )
    assert ServerMessage.from_json(msg.to_json()) == msg


def test_client_message_round_trip():
    msg = ClientMessage(
        ClientMessageType.SEND_TURN,
        room_code="abcde",
        game_type=GameType.CHECKERS,
        turn_action=CheckersTurn(Vector(6, 2), CheckersDirection.LEFT),
    )
    assert ClientMessage.from_json(msg.to_json()) == msg


def test_client_message_from_bytes():
    msg = ClientMessage(ClientMessageType.JOIN_ROOM, room_code="room1")
    back = ClientMessage.from_json(msg.to_json().encode())
    assert back.type is ClientMessageType.JOIN_ROOM
    assert back.room_code == "room1"


def test_unknown_server_type_raises():
    with pytest.raises(ValueError):
        ServerMessage.from_json('{"type": 99}')


def test_non_object_json_raises():
    with pytest.raises(ValueError):
        ClientMessage.from_json("[1, 2]")