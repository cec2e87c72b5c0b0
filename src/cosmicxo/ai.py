"""Exhaustive minimax move selection for Cosmic Tic-Tac-Toe."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .game import (
    EMPTY,
    O,
    X,
    Difficulty,
    Player,
    TicTacToeGame,
    evaluate,
)

WIN_SCORE = 10


@dataclass(frozen=True)
class ScoredMove:
    # index is None only for a terminal node inside the search
    index: Optional[int]
    score: int


def select_move(
    board: Sequence[str],
    maximizing_player: bool,
    difficulty: Difficulty,
    rng: Optional[random.Random] = None,
) -> Optional[ScoredMove]:
    """Pick the next move for the side to play on ``board``.

    ``maximizing_player`` places "O" and maximizes; otherwise "X" is placed
    and the score is minimized. Scores are relative to this call: an "O" win
    found ``d`` plies down is worth ``10 - d``, an "X" win ``d - 10``, a draw 0.

    Hard keeps the first strictly best score at every node. Easy picks a
    uniformly random candidate at every node, ignoring scores.

    Returns ``None`` when the board has no legal move.
    """
    result = _search(list(board), maximizing_player, Difficulty(difficulty), 0, rng)
    if result.index is None:
        return None
    return result


def _terminal_score(outcome: str, depth: int) -> int:
    if outcome == O:
        return WIN_SCORE - depth
    if outcome == X:
        return depth - WIN_SCORE
    return 0


def _search(
    board: List[str],
    maximizing: bool,
    difficulty: Difficulty,
    depth: int,
    rng: Optional[random.Random],
) -> ScoredMove:
    outcome = evaluate(board)
    if outcome is not None:
        return ScoredMove(index=None, score=_terminal_score(outcome, depth))

    mark = O if maximizing else X
    moves: List[ScoredMove] = []
    for i, cell in enumerate(board):
        if cell != EMPTY:
            continue
        child = board.copy()
        child[i] = mark
        result = _search(child, not maximizing, difficulty, depth + 1, rng)
        moves.append(ScoredMove(index=i, score=result.score))

    if difficulty is Difficulty.EASY:
        return (rng or random).choice(moves)

    best = moves[0]
    for move in moves[1:]:
        if maximizing and move.score > best.score:
            best = move
        elif not maximizing and move.score < best.score:
            best = move
    return best


@dataclass
class MinimaxAI:
    """Computer opponent bound to one mark and one difficulty.

    ``choose(game)`` returns the cell index to play.
    """

    player: Player = O
    difficulty: Difficulty = Difficulty.HARD
    rng: Optional[random.Random] = field(default=None, repr=False)

    def choose(self, game: TicTacToeGame) -> int:
        if game.current_player != self.player:
            raise ValueError("It is not this AI player's turn")

        move = select_move(
            game.cells, self.player == O, self.difficulty, rng=self.rng
        )
        if move is None or move.index is None:
            raise RuntimeError("No valid moves available")
        return move.index
