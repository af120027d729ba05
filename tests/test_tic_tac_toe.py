import pytest

from asciiarcade.game import GameStatus, GameType, InvalidMoveError
from asciiarcade.styles import visible_width
from asciiarcade.tic_tac_toe import TicTacToeGame, TicTacToeSquare, TicTacToeTurn
from asciiarcade.vector import Vector


def _play(game, moves):
    for player, (x, y) in moves:
        game.execute_turn(TicTacToeTurn(Vector(x, y)), player)


@pytest.fixture
def game_with_centre():
    game = TicTacToeGame()
    game.execute_turn(TicTacToeTurn(Vector(1, 1)), 1)
    return game


def test_valid_move_top_left(game_with_centre):
    game_with_centre.validate_move(TicTacToeTurn(Vector(0, 0)), 1)
    assert game_with_centre.board[0][0] is TicTacToeSquare.EMPTY


def test_invalid_move_negative_x(game_with_centre):
    with pytest.raises(InvalidMoveError, match="selected square is out of bounds"):
        game_with_centre.validate_move(TicTacToeTurn(Vector(-1, 1)), 1)


def test_invalid_move_occupied_square(game_with_centre):
    with pytest.raises(InvalidMoveError, match="square is occupied"):
        game_with_centre.validate_move(TicTacToeTurn(Vector(1, 1)), 1)


def test_invalid_move_row_out_of_bounds():
    with pytest.raises(InvalidMoveError, match="out of bounds"):
        TicTacToeGame().validate_move(TicTacToeTurn(Vector(0, 3)), 1)


def test_invalid_move_column_out_of_bounds():
    with pytest.raises(InvalidMoveError, match="out of bounds"):
        TicTacToeGame().validate_move(TicTacToeTurn(Vector(3, 0)), 1)


def test_execute_turn_places_marks():
    game = TicTacToeGame()
    cases = [
        (Vector(0, 0), 1, TicTacToeSquare.X),
        (Vector(1, 1), 2, TicTacToeSquare.O),
        (Vector(2, 2), 1, TicTacToeSquare.X),
    ]
    for coords, player, expected in cases:
        game.execute_turn(TicTacToeTurn(coords), player)
        assert game.board[coords.y][coords.x] is expected


def test_execute_turn_returns_empty_message():
    assert TicTacToeGame().execute_turn(TicTacToeTurn(Vector(0, 0)), 1) == ""


def test_wrong_turn_type_rejected():
    with pytest.raises(TypeError):
        TicTacToeGame().validate_move(Vector(0, 0), 1)
    with pytest.raises(TypeError):
        TicTacToeGame().execute_turn(Vector(0, 0), 1)


def test_new_game_is_ongoing_and_empty():
    game = TicTacToeGame()
    assert game.status is GameStatus.ONGOING
    assert all(sq is TicTacToeSquare.EMPTY for row in game.board for sq in row)
    assert game.game_type is GameType.TIC_TAC_TOE


def test_row_win_for_player_one():
    game = TicTacToeGame()
    _play(game, [(1, (0, 0)), (2, (0, 1)), (1, (1, 0)), (2, (1, 1)), (1, (2, 0))])
    assert game.status is GameStatus.PLAYER1_WIN


def test_column_win_for_player_two():
    game = TicTacToeGame()
    _play(game, [(1, (0, 0)), (2, (2, 0)), (1, (1, 1)), (2, (2, 1)), (1, (0, 2)), (2, (2, 2))])
    assert game.status is GameStatus.PLAYER2_WIN


def test_anti_diagonal_win():
    game = TicTacToeGame()
    _play(game, [(1, (2, 0)), (1, (1, 1)), (1, (0, 2))])
    assert game.status is GameStatus.PLAYER1_WIN


def test_full_board_without_line_is_draw():
    game = TicTacToeGame()
    _play(
        game,
        [
            (1, (0, 0)), (2, (1, 0)), (1, (2, 0)),
            (1, (0, 1)), (2, (1, 1)), (2, (2, 1)),
            (2, (0, 2)), (1, (1, 2)), (1, (2, 2)),
        ],
    )
    assert game.status is GameStatus.DRAW


def test_game_round_trips_through_dict():
    game = TicTacToeGame()
    _play(game, [(1, (0, 0)), (2, (2, 1))])
    restored = TicTacToeGame.from_dict(game.to_dict())
    assert restored == game


def test_to_dict_wire_keys():
    data = TicTacToeGame().to_dict()
    assert set(data) == {"game_type", "board", "game_status"}
    assert data["game_type"] == 0
    assert data["game_status"] == 0


def test_turn_round_trips_through_dict():
    turn = TicTacToeTurn(Vector(2, 1))
    assert TicTacToeTurn.from_dict(turn.to_dict()) == turn
    assert turn.to_dict() == {"coords": {"X": 2, "Y": 1}}


def test_display_board_contains_title_and_grid():
    game = TicTacToeGame()
    game.execute_turn(TicTacToeTurn(Vector(0, 0)), 1)
    out = game.display_board(Vector(-1, -1), 1)
    assert "TIC TAC TOE" in out
    assert "  ┌───────┬───────┬───────┐" in out
    assert "  └───────┴───────┴───────┘" in out
    assert "X" in out


def test_display_board_lines_have_equal_width():
    out = TicTacToeGame().display_board(Vector(1, 1), 1)
    assert len({visible_width(line) for line in out.split("\n")}) == 1


def test_instructions_mention_move():
    assert "move <row-num> <col-num>" in TicTacToeGame().instructions()