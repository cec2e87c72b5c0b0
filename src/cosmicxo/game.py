"""Core rules for Cosmic Tic-Tac-Toe: outcome evaluation and the game controller."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

Player = str  # "X" or "O"
Board = List[str]

X: Player = "X"
O: Player = "O"
EMPTY = " "
DRAW = "Draw"
BOARD_SIZE = 9

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


class GameMode(str, Enum):
    AI = "ai"
    TWO_PLAYER = "two_player"


class Difficulty(str, Enum):
    EASY = "easy"
    HARD = "hard"


def empty_board() -> Board:
    return [EMPTY] * BOARD_SIZE


def empty_cells(board: Sequence[str]) -> List[int]:
    return [i for i, c in enumerate(board) if c == EMPTY]


def winning_line(board: Sequence[str]) -> Optional[Tuple[int, int, int]]:
    """First completed line in table order, or ``None``."""
    for line in WINNING_LINES:
        a, b, c = line
        v = board[a]
        if v != EMPTY and v == board[b] == board[c]:
            return line
    return None


def evaluate(board: Sequence[str]) -> Optional[str]:
    """Return ``"X"``/``"O"`` for a win, ``DRAW`` for a full board, else ``None``.

    A completed line wins even when the board is also full.
    """
    line = winning_line(board)
    if line is not None:
        return board[line[0]]
    if EMPTY not in board:
        return DRAW
    return None


def other_player(player: Player) -> Player:
    return O if player == X else X


# ---------- Game ----------


@dataclass
class TicTacToeGame:
    cells: Board = field(default_factory=empty_board)
    current_player: Player = X
    mode: GameMode = GameMode.AI
    difficulty: Difficulty = Difficulty.HARD
    winner: Optional[Player] = None
    drawn: bool = False

    # ---- API used by UI & AI ----

    def is_over(self) -> bool:
        return self.winner is not None or self.drawn

    def available_moves(self) -> List[int]:
        if self.is_over():
            return []
        return empty_cells(self.cells)

    def play_move(self, index: int) -> None:
        """Place the current player's mark, update the outcome and pass the turn."""
        if self.is_over():
            raise ValueError("Game already finished")
        if not 0 <= index < BOARD_SIZE:
            raise ValueError("Cell index out of range")
        if self.cells[index] != EMPTY:
            raise ValueError("Cell already occupied")

        self.cells[index] = self.current_player
        self._update_state()
        self.current_player = other_player(self.current_player)

    def winning_line(self) -> Optional[Tuple[int, int, int]]:
        return winning_line(self.cells)

    def reset(
        self,
        mode: Optional[GameMode] = None,
        difficulty: Optional[Difficulty] = None,
    ) -> None:
        self.cells = empty_board()
        self.current_player = X
        self.winner = None
        self.drawn = False
        if mode is not None:
            self.mode = mode
        if difficulty is not None:
            self.difficulty = difficulty

    def clone(self) -> "TicTacToeGame":
        return TicTacToeGame(
            cells=self.cells.copy(),
            current_player=self.current_player,
            mode=self.mode,
            difficulty=self.difficulty,
            winner=self.winner,
            drawn=self.drawn,
        )

    # ---- helpers ----

    def _update_state(self) -> None:
        outcome = evaluate(self.cells)
        if outcome == DRAW:
            self.winner = None
            self.drawn = True
        elif outcome is not None:
            self.winner = outcome
            self.drawn = False
