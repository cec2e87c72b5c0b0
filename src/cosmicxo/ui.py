"""FastAPI-powered web UI for playing Cosmic Tic-Tac-Toe in the browser."""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator

from . import config
from .ai import MinimaxAI, select_move
from .game import (
    BOARD_SIZE,
    DRAW,
    EMPTY,
    O,
    X,
    Difficulty,
    GameMode,
    TicTacToeGame,
    evaluate,
    winning_line,
)

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """Container for an active game, its optional AI opponent and move log."""

    game: TicTacToeGame
    ai: Optional[MinimaxAI]
    move_log: List[Dict[str, int | str]] = field(default_factory=list)
    ai_pending: bool = False
    # bumped on restart so stale AI turns can tell they are stale
    generation: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
app = FastAPI(
    title="Cosmic Tic-Tac-Toe",
    description="Tic-tac-toe against a friend or a minimax AI, played in the browser",
)

AI_THINK_DELAY: float = config.AI_DELAY


class NewGameRequest(BaseModel):
    """Request payload for starting a new game."""

    mode: GameMode = Field(default=GameMode.AI, description="Play vs AI or two players")
    difficulty: Difficulty = Field(
        default=Difficulty.HARD,
        description="easy: random moves, hard: full minimax search",
    )


class RestartRequest(BaseModel):
    """Optional settings to switch to when restarting a game."""

    mode: Optional[GameMode] = None
    difficulty: Optional[Difficulty] = None


class MoveRequest(BaseModel):
    """Request payload for submitting a move on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=BOARD_SIZE - 1)


class BoardRequest(BaseModel):
    """A raw board snapshot; empty cells may be ``""``, ``" "`` or ``null``."""

    board: List[Optional[str]] = Field(min_length=BOARD_SIZE, max_length=BOARD_SIZE)

    @field_validator("board")
    @classmethod
    def normalize_cells(cls, value: List[Optional[str]]) -> List[Optional[str]]:
        cells: List[Optional[str]] = []
        for cell in value:
            if cell in (None, "", EMPTY):
                cells.append(EMPTY)
            elif cell.upper() in (X, O):
                cells.append(cell.upper())
            else:
                raise ValueError(f"Invalid cell value {cell!r}. Use 'X', 'O' or ''.")
        return cells


class AiMoveRequest(BoardRequest):
    """Board snapshot plus the search settings for a one-off AI move."""

    model_config = ConfigDict(populate_by_name=True)

    difficulty: Difficulty = Difficulty.HARD
    maximizing_player: bool = Field(default=True, alias="maximizingPlayer")


def _make_ai(mode: GameMode, difficulty: Difficulty) -> Optional[MinimaxAI]:
    if mode is GameMode.AI:
        return MinimaxAI(player=O, difficulty=difficulty)
    return None


def _create_session(mode: GameMode, difficulty: Difficulty) -> tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    game = TicTacToeGame(mode=mode, difficulty=difficulty)
    session = GameSession(game=game, ai=_make_ai(mode, difficulty))
    session_id = uuid.uuid4().hex
    SESSIONS[session_id] = session
    logger.info(
        "Created game %s (mode=%s, difficulty=%s)",
        session_id,
        mode.value,
        difficulty.value,
    )
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _log_result(game_id: str, game: TicTacToeGame) -> None:
    if game.winner:
        logger.info("Game %s won by %s", game_id, game.winner)
    elif game.drawn:
        logger.info("Game %s ended in a draw", game_id)


def _run_ai_turn(game_id: str, generation: int) -> None:
    session = SESSIONS.get(game_id)
    if not session:
        return

    time.sleep(max(0.0, AI_THINK_DELAY))

    with session.lock:
        if session.generation != generation:
            return
        try:
            if not session.ai:
                return
            game = session.game
            if game.is_over():
                return
            if game.current_player != session.ai.player:
                return
            cell_index = session.ai.choose(game)
            game.play_move(cell_index)
            session.move_log.append(
                {"player": session.ai.player, "cellIndex": cell_index}
            )
            logger.info(
                "Game %s: AI (%s) played cell %d",
                game_id,
                session.ai.difficulty.value,
                cell_index,
            )
            _log_result(game_id, game)
        finally:
            session.ai_pending = False


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        game = session.game
        line = game.winning_line()
        state: Dict[str, object] = {
            "id": game_id,
            "mode": game.mode.value,
            "difficulty": game.difficulty.value,
            "cells": [c if c in (X, O) else "" for c in game.cells],
            "currentPlayer": game.current_player,
            "winner": game.winner,
            "drawn": game.drawn,
            "winningLine": list(line) if line else None,
            "availableMoves": game.available_moves(),
            "moveLog": list(session.move_log),
            "aiPending": session.ai_pending,
        }
        if session.move_log:
            state["lastMove"] = session.move_log[-1]
        return state


def _apply_player_move(
    game_id: str,
    session: GameSession,
    cell_index: int,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    should_schedule_ai = False
    with session.lock:
        game = session.game
        if game.is_over():
            raise HTTPException(status_code=400, detail="Game already finished")

        if session.ai_pending:
            raise HTTPException(status_code=400, detail="AI is completing its move")

        if session.ai and game.current_player == session.ai.player:
            raise HTTPException(status_code=400, detail="It is the computer's turn")

        player = game.current_player
        try:
            game.play_move(cell_index)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        session.move_log.append({"player": player, "cellIndex": cell_index})
        logger.info("Game %s: %s played cell %d", game_id, player, cell_index)
        _log_result(game_id, game)

        should_schedule_ai = (
            session.ai is not None
            and not game.is_over()
            and game.current_player == session.ai.player
        )
        if should_schedule_ai:
            session.ai_pending = True
        generation = session.generation

    if should_schedule_ai and background_tasks is not None:
        background_tasks.add_task(_run_ai_turn, game_id, generation)


def _restart_session(
    game_id: str, session: GameSession, request: RestartRequest
) -> None:
    with session.lock:
        game = session.game
        game.reset(mode=request.mode, difficulty=request.difficulty)
        session.ai = _make_ai(game.mode, game.difficulty)
        session.move_log.clear()
        session.ai_pending = False
        session.generation += 1
        logger.info(
            "Restarted game %s (mode=%s, difficulty=%s)",
            game_id,
            game.mode.value,
            game.difficulty.value,
        )


@app.post("/api/game")
def create_game(request: NewGameRequest) -> Dict[str, object]:
    game_id, session = _create_session(request.mode, request.difficulty)
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(
    game_id: str, request: MoveRequest, background_tasks: BackgroundTasks
) -> Dict[str, object]:
    session = _get_session(game_id)
    _apply_player_move(game_id, session, request.cell_index, background_tasks)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/restart")
def restart_game(
    game_id: str, request: Optional[RestartRequest] = None
) -> Dict[str, object]:
    session = _get_session(game_id)
    _restart_session(game_id, session, request or RestartRequest())
    return _serialize_session(game_id, session)


@app.post("/api/evaluate")
def evaluate_board(request: BoardRequest) -> Dict[str, object]:
    outcome = evaluate(request.board)
    line = winning_line(request.board)
    return {
        "outcome": outcome,
        "winner": outcome if outcome in (X, O) else None,
        "drawn": outcome == DRAW,
        "winningLine": list(line) if line else None,
    }


@app.post("/api/ai/move")
def ai_move(request: AiMoveRequest) -> Dict[str, Optional[int]]:
    move = select_move(request.board, request.maximizing_player, request.difficulty)
    if move is None:
        return {"index": None, "score": None}
    return {"index": move.index, "score": move.score}


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Cosmic Tic Tac Toe</title>
    <style>
      :root {
        color-scheme: dark;
        font-family: system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
      }
      * {
        box-sizing: border-box;
      }
      body {
        margin: 0;
        min-height: 100vh;
        background: linear-gradient(180deg, #111827, #000000);
        color: #f9fafb;
        display: flex;
        flex-direction: column;
        align-items: center;
      }
      nav {
        width: 100%;
        display: flex;
        justify-content: space-between;
        align-items: center;
        padding: 1rem 2rem;
        background: linear-gradient(90deg, #6d28d9, #3730a3);
        box-shadow: 0 4px 12px rgba(0, 0, 0, 0.35);
      }
      nav h1 {
        margin: 0;
        font-size: 1.8rem;
        font-weight: 800;
        letter-spacing: 0.04em;
      }
      nav .links {
        display: flex;
        gap: 1rem;
      }
      nav a {
        color: white;
        text-decoration: none;
        padding: 0.5rem 1rem;
        border-radius: 8px;
      }
      nav a.active,
      nav a:hover {
        background: #8b5cf6;
      }
      .panel {
        margin-top: 2.5rem;
        padding: 1.5rem;
        border-radius: 14px;
        background: linear-gradient(135deg, #5b21b6, #312e81);
        box-shadow: 0 20px 40px rgba(0, 0, 0, 0.4);
        text-align: center;
      }
      .panel h2 {
        margin: 0 0 1rem;
      }
      .mode-picker {
        display: flex;
        gap: 1rem;
        justify-content: center;
      }
      button,
      select {
        font: inherit;
        cursor: pointer;
        border: none;
        border-radius: 999px;
        padding: 0.55rem 1.4rem;
        font-weight: 600;
      }
      .mode-picker button {
        background: #374151;
        color: #d1d5db;
      }
      .mode-picker button.selected {
        background: #8b5cf6;
        color: white;
      }
      select {
        margin-top: 1rem;
        background: #1f2937;
        color: white;
        border: 1px solid #4b5563;
      }
      #status {
        margin-top: 2rem;
        font-size: 1.5rem;
        font-weight: 700;
        min-height: 2rem;
      }
      #status .x {
        color: #22d3ee;
      }
      #status .o {
        color: #f472b6;
      }
      #message {
        min-height: 1.2rem;
        color: #fca5a5;
      }
      #board {
        display: grid;
        grid-template-columns: repeat(3, 6rem);
        gap: 0.75rem;
        margin-top: 1.5rem;
      }
      #board.thinking {
        opacity: 0.75;
      }
      .cell {
        width: 6rem;
        height: 6rem;
        border-radius: 0;
        border: 1px solid #a855f7;
        background: linear-gradient(135deg, #581c87, #312e81);
        color: #67e8f9;
        font-size: 3rem;
        font-weight: 800;
        padding: 0;
        transition: filter 0.2s ease;
      }
      .cell:hover:enabled {
        filter: brightness(1.25);
      }
      .cell:disabled {
        cursor: default;
      }
      .cell.win {
        background: linear-gradient(135deg, #be185d, #7c3aed);
      }
      .cell.last-move {
        outline: 2px solid #f9a8d4;
      }
      #restart {
        margin-top: 1.5rem;
        padding: 0.75rem 1.6rem;
        color: white;
        background: linear-gradient(90deg, #ec4899, #dc2626);
        box-shadow: 0 8px 18px rgba(0, 0, 0, 0.35);
      }
      #about {
        margin: 4rem 1rem 3rem;
        max-width: 36rem;
        padding: 1.5rem;
        border-radius: 14px;
        background: linear-gradient(135deg, #1f2937, #111827);
        color: #d1d5db;
      }
      #about h2 {
        color: white;
        margin-top: 0;
      }
      .hidden {
        display: none !important;
      }
    </style>
  </head>
  <body>
    <nav>
      <h1>Cosmic Tic Tac Toe</h1>
      <div class=\"links\">
        <a class=\"active\" href=\"#\">Game</a>
        <a href=\"#about\">About</a>
      </div>
    </nav>

    <section class=\"panel\">
      <h2>Select Game Mode</h2>
      <div class=\"mode-picker\">
        <button type=\"button\" data-mode=\"ai\">Play vs AI</button>
        <button type=\"button\" data-mode=\"two_player\">Two Players</button>
      </div>
      <select id=\"difficulty\" aria-label=\"AI difficulty\">
        <option value=\"easy\">Easy</option>
        <option value=\"hard\" selected>Hard</option>
      </select>
    </section>

    <div id=\"status\" role=\"status\"></div>
    <div id=\"message\"></div>
    <div id=\"board\"></div>
    <button id=\"restart\" type=\"button\">Restart</button>

    <section id=\"about\">
      <h2>About Min-Max</h2>
      <p>
        Min-Max is a recursive algorithm used in decision making and game theory.
        It is used to find the optimal move for a player, assuming that the opponent
        also plays optimally. It explores all possible moves and chooses the one that
        maximizes the player's chances of winning while minimizing the opponent's.
      </p>
    </section>

    <script>
      const boardEl = document.getElementById('board');
      const statusEl = document.getElementById('status');
      const messageEl = document.getElementById('message');
      const difficultyEl = document.getElementById('difficulty');
      const restartButton = document.getElementById('restart');
      const modeButtons = document.querySelectorAll('.mode-picker button');

      let gameId = null;
      let gameState = null;
      let mode = 'ai';
      let isRequestPending = false;
      let aiPollHandle = null;

      function stopAiPolling() {
        if (aiPollHandle !== null) {
          clearTimeout(aiPollHandle);
          aiPollHandle = null;
        }
      }

      function ensureAiPolling() {
        if (aiPollHandle !== null) return;
        aiPollHandle = window.setTimeout(pollAiState, 300);
      }

      function renderControls() {
        modeButtons.forEach((button) => {
          button.classList.toggle('selected', button.dataset.mode === mode);
        });
        difficultyEl.classList.toggle('hidden', mode !== 'ai');
      }

      function renderBoard() {
        boardEl.innerHTML = '';
        if (!gameState) return;
        const winLine = new Set(gameState.winningLine || []);
        const available = new Set(gameState.availableMoves || []);
        const lastMove = gameState.lastMove || null;
        const humanTurn = mode !== 'ai' || gameState.currentPlayer === 'X';
        gameState.cells.forEach((value, index) => {
          const cell = document.createElement('button');
          cell.type = 'button';
          cell.classList.add('cell');
          cell.textContent = value;
          cell.setAttribute('aria-label', value ? `${value} placed` : 'Empty cell');
          if (winLine.has(index)) cell.classList.add('win');
          if (lastMove && lastMove.cellIndex === index) cell.classList.add('last-move');
          const canClick =
            available.has(index) && humanTurn && !gameState.aiPending && !isRequestPending;
          cell.disabled = !canClick;
          if (canClick) {
            cell.addEventListener('click', () => sendMove(index));
          }
          boardEl.appendChild(cell);
        });
      }

      function updateStatus() {
        boardEl.classList.remove('thinking');
        if (!gameState) {
          statusEl.textContent = 'Setting up your game…';
          return;
        }
        if (gameState.winner) {
          statusEl.textContent = `${gameState.winner} Wins!`;
          return;
        }
        if (gameState.drawn) {
          statusEl.textContent = "It's a Draw";
          return;
        }
        if (gameState.aiPending) {
          statusEl.textContent = 'AI is thinking…';
          boardEl.classList.add('thinking');
          return;
        }
        statusEl.innerHTML =
          gameState.currentPlayer === 'X'
            ? 'Next player: <span class=\"x\">X 🔵</span>'
            : 'Next player: <span class=\"o\">O 🔴</span>';
      }

      function setState(data) {
        gameState = data;
        gameId = data.id;
        mode = data.mode;
        difficultyEl.value = data.difficulty;
        renderControls();
        renderBoard();
        updateStatus();
        if (gameState.aiPending) {
          ensureAiPolling();
        }
      }

      async function request(url, body) {
        const response = await fetch(url, {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: JSON.stringify(body || {}),
        });
        const payload = await response.json().catch(() => ({}));
        if (!response.ok) {
          const detail = typeof payload.detail === 'string' ? payload.detail : 'Request failed';
          throw new Error(detail);
        }
        return payload;
      }

      async function startGame(nextMode = mode) {
        if (isRequestPending) {
          if (gameState) difficultyEl.value = gameState.difficulty;
          return;
        }
        isRequestPending = true;
        const previousMode = mode;
        mode = nextMode;
        renderControls();
        stopAiPolling();
        messageEl.textContent = '';
        const settings = { mode, difficulty: difficultyEl.value };
        try {
          const data = gameId
            ? await request(`/api/game/${gameId}/restart`, settings)
            : await request('/api/game', settings);
          isRequestPending = false;
          setState(data);
        } catch (error) {
          messageEl.textContent = error.message || 'Network error. Please try again.';
          mode = previousMode;
          if (gameState) difficultyEl.value = gameState.difficulty;
          renderControls();
        } finally {
          isRequestPending = false;
        }
      }

      async function pollAiState() {
        aiPollHandle = null;
        if (!gameId) return;
        try {
          const response = await fetch(`/api/game/${gameId}`);
          if (response.ok) {
            setState(await response.json());
          }
        } catch (error) {
          console.error('Polling failed', error);
          ensureAiPolling();
        }
      }

      async function sendMove(index) {
        if (!gameState || gameState.winner || gameState.drawn || isRequestPending) return;
        isRequestPending = true;
        messageEl.textContent = '';
        try {
          const data = await request(`/api/game/${gameId}/move`, { cellIndex: index });
          isRequestPending = false;
          setState(data);
        } catch (error) {
          messageEl.textContent = error.message || 'Invalid move';
          renderBoard();
        } finally {
          isRequestPending = false;
        }
      }

      modeButtons.forEach((button) => {
        button.addEventListener('click', () => {
          if (button.dataset.mode === mode || isRequestPending) return;
          startGame(button.dataset.mode);
        });
      });
      difficultyEl.addEventListener('change', () => startGame());
      restartButton.addEventListener('click', () => startGame());

      renderControls();
      updateStatus();
      startGame();
    </script>
  </body>
</html>
"""
