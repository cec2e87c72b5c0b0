"""Cosmic Tic-Tac-Toe package exposing game rules, the minimax AI, and the web application."""

from .ai import MinimaxAI, ScoredMove, select_move
from .game import Difficulty, GameMode, TicTacToeGame, evaluate
from .ui import app

__all__ = [
    "Difficulty",
    "GameMode",
    "MinimaxAI",
    "ScoredMove",
    "TicTacToeGame",
    "app",
    "evaluate",
    "select_move",
]
