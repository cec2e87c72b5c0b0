"""Unit tests for Cosmic Tic-Tac-Toe rules and the game controller."""

import pytest

from cosmicxo.game import (
    DRAW,
    EMPTY,
    WINNING_LINES,
    Difficulty,
    GameMode,
    TicTacToeGame,
    empty_board,
    evaluate,
    winning_line,
)

_ = EMPTY


def test_empty_board_continues():
    assert evaluate(empty_board()) is None


@pytest.mark.parametrize("line", WINNING_LINES)
def test_every_line_wins(line):
    board = empty_board()
    for index in line:
        board[index] = "O"
    assert evaluate(board) == "O"
    assert winning_line(board) == line


def test_top_row_wins_regardless_of_other_cells():
    board = ["X", "X", "X", "O", "O", _, "O", _, "O"]
    assert evaluate(board) == "X"


def test_win_takes_precedence_over_full_board():
    board = ["X", "X", "X", "O", "O", "X", "O", "X", "O"]
    assert evaluate(board) == "X"


def test_full_board_without_line_is_draw():
    assert evaluate(["X", "O", "X", "X", "O", "O", "O", "X", "X"]) == DRAW


def test_partial_board_without_line_continues():
    board = ["X", "O", "X", _, "O", _, _, "X", _]
    assert evaluate(board) is None
    assert winning_line(board) is None


def test_unreachable_board_reports_first_line():
    board = ["X", "X", "X", "O", "O", "O", _, _, _]
    assert evaluate(board) == "X"
    assert winning_line(board) == (0, 1, 2)


def test_evaluate_is_pure():
    board = ["X", "O", _, _, "X", _, _, _, "O"]
    snapshot = list(board)
    assert evaluate(board) == evaluate(board)
    assert board == snapshot


def test_play_move_alternates_players():
    game = TicTacToeGame()
    game.play_move(4)
    assert game.cells[4] == "X"
    assert game.current_player == "O"
    game.play_move(0)
    assert game.cells[0] == "O"
    assert game.current_player == "X"
    assert game.available_moves() == [1, 2, 3, 5, 6, 7, 8]


def test_occupied_cell_rejected():
    game = TicTacToeGame()
    game.play_move(0)
    with pytest.raises(ValueError, match="occupied"):
        game.play_move(0)


def test_out_of_range_rejected():
    game = TicTacToeGame()
    with pytest.raises(ValueError):
        game.play_move(9)


def test_win_ends_game():
    game = TicTacToeGame(mode=GameMode.TWO_PLAYER)
    for index in (0, 3, 1, 4, 2):
        game.play_move(index)
    assert game.winner == "X"
    assert not game.drawn
    assert game.is_over()
    assert game.winning_line() == (0, 1, 2)
    assert game.available_moves() == []
    with pytest.raises(ValueError, match="finished"):
        game.play_move(8)


def test_draw_ends_game():
    game = TicTacToeGame(mode=GameMode.TWO_PLAYER)
    # X O X / X O O / O X X
    for index in (0, 1, 2, 4, 3, 5, 7, 6, 8):
        game.play_move(index)
    assert game.winner is None
    assert game.drawn
    assert game.is_over()


def test_reset_clears_board_and_switches_settings():
    game = TicTacToeGame()
    game.play_move(0)
    game.reset(mode=GameMode.TWO_PLAYER, difficulty=Difficulty.EASY)
    assert game.cells == empty_board()
    assert game.current_player == "X"
    assert game.mode is GameMode.TWO_PLAYER
    assert game.difficulty is Difficulty.EASY
    assert not game.is_over()


def test_clone_is_independent():
    game = TicTacToeGame()
    game.play_move(4)
    copy = game.clone()
    copy.play_move(0)
    assert game.cells[0] == EMPTY
    assert game.current_player == "O"
