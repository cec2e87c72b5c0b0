"""Tests for the Cosmic Tic-Tac-Toe minimax AI."""

import random

import pytest

from cosmicxo.ai import MinimaxAI, ScoredMove, select_move
from cosmicxo.game import (
    DRAW,
    EMPTY,
    Difficulty,
    GameMode,
    TicTacToeGame,
    empty_board,
    evaluate,
)

_ = EMPTY


def test_ai_blocks_immediate_loss():
    board = ["X", "X", _, _, "O", _, _, _, _]
    move = select_move(board, True, Difficulty.HARD)
    assert move is not None
    assert move.index == 2


def test_ai_takes_immediate_win():
    board = ["O", "X", "X", _, "O", _, "X", _, _]
    move = select_move(board, True, Difficulty.HARD)
    assert move == ScoredMove(index=8, score=9)


def test_minimizing_player_takes_immediate_win():
    board = ["X", "X", _, "O", "O", _, _, _, _]
    move = select_move(board, False, Difficulty.HARD)
    assert move == ScoredMove(index=2, score=-9)


def test_prefers_immediate_win_over_block():
    # X threatens 5; O completes the top row first.
    board = ["O", "O", _, "X", "X", _, _, "X", _]
    move = select_move(board, True, Difficulty.HARD)
    assert move.index == 2
    assert move.score == 9


def test_answers_corner_opening_with_center():
    # Every other reply loses for O.
    board = ["X", _, _, _, _, _, _, _, _]
    move = select_move(board, True, Difficulty.HARD)
    assert move == ScoredMove(index=4, score=0)


def test_ties_keep_first_move():
    # X to move; each of 3, 4 and 5 draws.
    board = ["X", "O", "X", _, _, _, "O", "X", "O"]
    move = select_move(board, False, Difficulty.HARD)
    assert move == ScoredMove(index=3, score=0)


def test_no_move_on_full_board():
    assert select_move(["X", "O", "X", "X", "O", "O", "O", "X", "X"], True, Difficulty.HARD) is None


def test_no_move_on_won_board():
    board = ["X", "X", "X", "O", "O", _, _, _, _]
    assert select_move(board, True, Difficulty.HARD) is None
    assert select_move(board, True, Difficulty.EASY) is None


def test_select_move_does_not_mutate_board():
    board = ["X", _, _, _, "O", _, _, _, "X"]
    snapshot = list(board)
    select_move(board, True, Difficulty.HARD)
    select_move(board, False, Difficulty.EASY)
    assert board == snapshot


def test_hard_self_play_is_a_draw():
    board = empty_board()
    maximizing = False  # X opens
    while evaluate(board) is None:
        move = select_move(board, maximizing, Difficulty.HARD)
        assert move is not None
        assert board[move.index] == EMPTY
        board[move.index] = "O" if maximizing else "X"
        maximizing = not maximizing
    assert evaluate(board) == DRAW


def test_easy_uses_more_than_one_move():
    board = ["X", _, "O", _, "X", _, _, _, _]
    rng = random.Random(1234)
    seen = set()
    for _attempt in range(40):
        move = select_move(board, True, Difficulty.EASY, rng=rng)
        assert move is not None
        assert board[move.index] == EMPTY
        seen.add(move.index)
    assert len(seen) > 1


def test_easy_on_empty_board_returns_a_cell():
    move = select_move(empty_board(), True, Difficulty.EASY, rng=random.Random(7))
    assert move is not None
    assert 0 <= move.index <= 8


def test_difficulty_accepts_plain_strings():
    board = ["X", "X", _, _, "O", _, _, _, _]
    assert select_move(board, True, "hard").index == 2


def test_minimax_ai_plays_for_o():
    game = TicTacToeGame()
    game.play_move(0)
    game.play_move(4)
    game.play_move(1)

    ai = MinimaxAI(player="O", difficulty=Difficulty.HARD)
    assert ai.choose(game) == 2


def test_minimax_ai_rejects_wrong_turn():
    game = TicTacToeGame()
    ai = MinimaxAI(player="O")
    with pytest.raises(ValueError):
        ai.choose(game)


def test_minimax_ai_easy_move_is_legal():
    game = TicTacToeGame(mode=GameMode.AI, difficulty=Difficulty.EASY)
    game.play_move(4)
    ai = MinimaxAI(player="O", difficulty=Difficulty.EASY, rng=random.Random(3))
    index = ai.choose(game)
    assert index in game.available_moves()


def test_easy_stays_random_below_the_first_move():
    # A minimax value would give each index exactly one score.
    board = ["X", _, _, _, "O", _, _, _, "X"]
    rng = random.Random(0)
    scores = {}
    for _attempt in range(200):
        move = select_move(board, True, Difficulty.EASY, rng=rng)
        assert board[move.index] == EMPTY
        scores.setdefault(move.index, set()).add(move.score)
    assert any(len(seen) > 1 for seen in scores.values())

    hard_scores = {
        select_move(board, True, Difficulty.HARD).score for _attempt in range(3)
    }
    assert len(hard_scores) == 1
