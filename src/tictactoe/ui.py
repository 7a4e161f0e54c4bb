"""FastAPI-powered web UI for playing Tic Tac Toe in the browser."""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from .game import (
    GameState,
    Win,
    apply_move,
    initial_state,
    is_cell_enabled,
    render_board,
    reset,
    status_text,
    status_tone,
    winning_line,
)

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """The current game of one browser page."""

    state: GameState = field(default_factory=initial_state)
    last_seen: float = field(default_factory=lambda: time.time())
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def touch(self) -> None:
        self.last_seen = time.time()


SESSIONS: Dict[str, GameSession] = {}
SESSIONS_LOCK = threading.Lock()
SESSION_TTL_SECONDS = 60 * 30  # 30 minutes

app = FastAPI(title="Tic Tac Toe", description="Two-player tic-tac-toe in the browser")


class MoveRequest(BaseModel):
    """Request payload for marking a cell on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


def _cleanup_sessions() -> None:
    """Drop sessions nobody has touched within the TTL. Caller holds SESSIONS_LOCK."""

    now = time.time()
    expired = [
        session_id
        for session_id, session in list(SESSIONS.items())
        if now - session.last_seen >= SESSION_TTL_SECONDS
    ]
    for session_id in expired:
        SESSIONS.pop(session_id, None)
    if expired:
        logger.info("Evicted %d idle game session(s)", len(expired))


def _create_session() -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    session = GameSession()
    session_id = uuid.uuid4().hex
    with SESSIONS_LOCK:
        _cleanup_sessions()
        SESSIONS[session_id] = session
    logger.info("Created game session %s", session_id)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        session = SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc
    session.touch()
    return session


def _serialize_state(game_id: str, state: GameState) -> Dict[str, object]:
    outcome = state.outcome
    if isinstance(outcome, Win):
        status = "win"
    elif state.finished:
        status = "draw"
    else:
        status = "ongoing"

    return {
        "id": game_id,
        "board": [cell.value for cell in state.board],
        "currentPlayer": state.turn.value,
        "status": status,
        "winner": outcome.player.value if isinstance(outcome, Win) else None,
        "drawn": status == "draw",
        "winningLine": list(winning_line(state)),
        "statusText": status_text(state),
        "statusTone": status_tone(state),
        "enabledCells": [is_cell_enabled(state, i) for i in range(len(state.board))],
    }


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        return _serialize_state(game_id, session.state)


def _apply_cell_click(game_id: str, session: GameSession, cell_index: int) -> bool:
    """Forward a cell click into the session's game; returns whether it was accepted."""

    with session.lock:
        before = session.state
        after = apply_move(before, cell_index)
        if after is before:
            logger.debug("Ignored move at cell %d in game %s", cell_index, game_id)
            return False
        session.state = after

    if after.finished:
        logger.info(
            "Game %s finished: %s\n%s", game_id, status_text(after), render_board(after.board)
        )
    return True


@app.post("/api/game")
def create_game() -> Dict[str, object]:
    game_id, session = _create_session()
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(game_id: str, request: MoveRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    accepted = _apply_cell_click(game_id, session, request.cell_index)
    state = _serialize_session(game_id, session)
    state["moveAccepted"] = accepted
    return state


@app.post("/api/game/{game_id}/reset")
def reset_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    with session.lock:
        session.state = reset(session.state)
    logger.debug("Reset game %s", game_id)
    return _serialize_session(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Tic Tac Toe</title>
    <link rel=\"preconnect\" href=\"https://fonts.googleapis.com\" />
    <link rel=\"preconnect\" href=\"https://fonts.gstatic.com\" crossorigin />
    <link
      href=\"https://fonts.googleapis.com/css2?family=Poppins:wght@400;500;600;700&display=swap\"
      rel=\"stylesheet\"
    />
    <style>
      :root {
        color-scheme: light;
        font-family: 'Poppins', system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
        font-weight: 400;
        --primary: #3a66ff;
        --accent: #ff6b5c;
        --text-secondary: #5a6785;
      }
      * {
        box-sizing: border-box;
      }
      body {
        margin: 0;
        background: radial-gradient(circle at top, #f2f5ff, #dbe0ff 40%, #cfd8ff 70%);
        min-height: 100vh;
        display: flex;
        justify-content: center;
        align-items: center;
        padding: 2rem 1rem 3rem;
        color: #13203a;
      }
      main {
        background: rgba(255, 255, 255, 0.92);
        border-radius: 18px;
        box-shadow: 0 20px 40px rgba(34, 47, 79, 0.16);
        padding: clamp(1.5rem, 4vw, 2.5rem);
        width: min(420px, 100%);
        display: flex;
        flex-direction: column;
        align-items: center;
      }
      h1 {
        margin: 0 0 0.75rem;
        font-size: clamp(1.8rem, 2.4vw + 1.2rem, 2.6rem);
        letter-spacing: 0.06em;
        color: #0c1a33;
        text-shadow: 0 2px 6px rgba(9, 24, 46, 0.15);
      }
      .status {
        min-height: 1.6rem;
        margin-bottom: 1.25rem;
        font-size: 1.15rem;
        font-weight: 600;
      }
      .status.tone-x {
        color: var(--primary);
      }
      .status.tone-o {
        color: var(--accent);
      }
      .status.tone-draw {
        color: var(--text-secondary);
      }
      .board {
        display: grid;
        grid-template-columns: repeat(3, 1fr);
        gap: 0.6rem;
        width: min(320px, 80vw);
        aspect-ratio: 1;
        margin-bottom: 1.5rem;
      }
      .cell {
        border: none;
        border-radius: 14px;
        background: rgba(226, 232, 255, 0.85);
        font-family: inherit;
        font-size: clamp(2rem, 8vw, 3rem);
        font-weight: 700;
        cursor: pointer;
        touch-action: manipulation;
        transition: transform 0.1s ease, box-shadow 0.1s ease, background 0.2s ease;
      }
      .cell:hover:enabled {
        transform: translateY(-1px);
        box-shadow: 0 8px 18px rgba(0, 64, 128, 0.12);
      }
      .cell:disabled {
        cursor: default;
      }
      .cell.mark-x {
        color: var(--primary);
      }
      .cell.mark-o {
        color: var(--accent);
      }
      .cell.win {
        background: linear-gradient(150deg, rgba(255, 236, 170, 0.95), rgba(255, 214, 102, 0.9));
        box-shadow: 0 0 0 3px rgba(255, 190, 60, 0.65);
      }
      .reset-button {
        font-size: 1rem;
        padding: 0.55rem 1.4rem;
        border-radius: 999px;
        border: 1px solid rgba(60, 70, 120, 0.25);
        background: white;
        cursor: pointer;
        font-family: inherit;
        font-weight: 600;
        transition: transform 0.1s ease, box-shadow 0.1s ease;
      }
      .reset-button:hover {
        transform: translateY(-1px);
        box-shadow: 0 8px 18px rgba(0, 64, 128, 0.12);
      }
      .message {
        min-height: 1.2rem;
        margin-top: 0.75rem;
        color: #b3261e;
        font-size: 0.9rem;
      }
    </style>
  </head>
  <body>
    <main>
      <h1>Tic Tac Toe</h1>
      <div id=\"status\" class=\"status\" aria-live=\"polite\"></div>
      <div id=\"board\" class=\"board\" role=\"grid\" aria-label=\"Tic Tac Toe board\"></div>
      <button id=\"reset\" class=\"reset-button\" type=\"button\">Reset Game</button>
      <div id=\"message\" class=\"message\"></div>
    </main>
    <script>
      const statusEl = document.getElementById('status');
      const boardEl = document.getElementById('board');
      const resetButton = document.getElementById('reset');
      const messageEl = document.getElementById('message');

      let gameId = null;
      let gameState = null;
      let busy = false;

      async function callApi(path, options = {}) {
        const response = await fetch(path, {
          headers: { 'Content-Type': 'application/json' },
          ...options,
        });
        if (!response.ok) {
          const data = await response.json().catch(() => ({}));
          throw new Error(data.detail || 'Request failed.');
        }
        return response.json();
      }

      function renderBoard() {
        boardEl.innerHTML = '';
        const cells = gameState ? gameState.board : Array(9).fill('');
        const winLine = gameState ? gameState.winningLine : [];
        cells.forEach((mark, index) => {
          const cell = document.createElement('button');
          cell.type = 'button';
          cell.className = 'cell';
          if (mark) {
            cell.classList.add(`mark-${mark.toLowerCase()}`);
          }
          if (winLine.includes(index)) {
            cell.classList.add('win');
          }
          cell.textContent = mark;
          cell.setAttribute('aria-label', `cell ${index} ${mark}`);
          cell.disabled = !gameState || !gameState.enabledCells[index];
          cell.addEventListener('click', () => handleCellClick(index));
          boardEl.appendChild(cell);
        });
      }

      function renderStatus() {
        statusEl.className = 'status';
        if (!gameState) {
          statusEl.textContent = 'Starting a new game…';
          return;
        }
        statusEl.textContent = gameState.statusText;
        statusEl.classList.add(`tone-${gameState.statusTone}`);
      }

      function render() {
        renderStatus();
        renderBoard();
      }

      async function startGame() {
        messageEl.textContent = '';
        try {
          gameState = await callApi('/api/game', { method: 'POST' });
          gameId = gameState.id;
        } catch (error) {
          messageEl.textContent = error.message || 'Unable to start a game.';
        }
        render();
      }

      async function handleCellClick(index) {
        if (!gameId || busy) {
          return;
        }
        busy = true;
        messageEl.textContent = '';
        try {
          gameState = await callApi(`/api/game/${gameId}/move`, {
            method: 'POST',
            body: JSON.stringify({ cellIndex: index }),
          });
        } catch (error) {
          messageEl.textContent = error.message || 'Move failed.';
        } finally {
          busy = false;
        }
        render();
      }

      async function handleReset() {
        if (!gameId) {
          await startGame();
          return;
        }
        messageEl.textContent = '';
        try {
          gameState = await callApi(`/api/game/${gameId}/reset`, { method: 'POST' });
        } catch (error) {
          // The server forgot this game (idle too long); start over.
          await startGame();
          return;
        }
        render();
      }

      resetButton.addEventListener('click', handleReset);
      render();
      startGame();
    </script>
  </body>
</html>
"""
