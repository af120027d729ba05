import pytest

from asciiarcade.game import Game, GameStatus, GameTurn, GameType, InvalidMoveError


def test_game_type_names():
    assert str(GameType(0)) == "TicTacToe"
    assert str(GameType(1)) == "Checkers"


def test_game_type_formats_as_name():
    assert format(GameType(1)) == "Checkers"
    assert f"{GameType(0)}" == "TicTacToe"


def test_game_type_wire_values_follow_declaration_order():
    assert [int(t) for t in GameType] == [0, 1]
    assert GameType(1) is GameType.CHECKERS


def test_game_status_wire_values():
    assert GameStatus(0) is GameStatus.ONGOING
    assert GameStatus(1) is GameStatus.PLAYER1_WIN
    assert GameStatus(2) is GameStatus.PLAYER2_WIN
    assert GameStatus(3) is GameStatus.DRAW


def test_unknown_game_type_rejected():
    with pytest.raises(ValueError):
        GameType(7)


def test_game_is_abstract():
    with pytest.raises(TypeError):
        Game()


def test_game_turn_is_abstract():
    with pytest.raises(TypeError):
        GameTurn()


def test_invalid_move_error_carries_message():
    err = InvalidMoveError("square is occupied")
    assert str(err) == "square is occupied"
    assert isinstance(err, Exception)