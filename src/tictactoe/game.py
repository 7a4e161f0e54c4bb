"""Core rules for classic 3x3 Tic Tac Toe."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union


class Cell(str, Enum):
    EMPTY = ""
    X = "X"
    O = "O"


class Player(str, Enum):
    X = "X"
    O = "O"

    @property
    def cell(self) -> Cell:
        return Cell(self.value)

    @property
    def other(self) -> "Player":
        return Player.O if self is Player.X else Player.X


Board = Tuple[Cell, ...]

BOARD_CELLS = 9

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


# ---------- Outcome ----------


@dataclass(frozen=True)
class Ongoing:
    pass


@dataclass(frozen=True)
class Win:
    player: Player
    line: Tuple[int, int, int]


@dataclass(frozen=True)
class Draw:
    pass


Outcome = Union[Ongoing, Win, Draw]

ONGOING = Ongoing()
DRAW = Draw()


# ---------- Board helpers ----------


def empty_board() -> Board:
    return (Cell.EMPTY,) * BOARD_CELLS


def make_board(cells: Iterable[Union[Cell, str, None]]) -> Board:
    """Build a board from 9 cell values.

    Accepts ``Cell`` members or their string forms; ``None``, ``""``, ``" "``
    and ``"."`` all mean an empty cell, which keeps test fixtures readable::

        make_board("XXXOO....")
    """
    board: List[Cell] = []
    for value in cells:
        if value is None or value in (" ", "."):
            board.append(Cell.EMPTY)
        else:
            board.append(Cell(value))
    if len(board) != BOARD_CELLS:
        raise ValueError(f"A board has exactly {BOARD_CELLS} cells, got {len(board)}")
    return tuple(board)


def render_board(board: Board) -> str:
    """Three lines of ``X|O|.`` text, handy in logs."""
    marks = [c.value or "." for c in board]
    return "\n".join("|".join(marks[row * 3 : row * 3 + 3]) for row in range(3))


# ---------- Evaluation ----------


def evaluate(board: Board) -> Outcome:
    """Return the verdict for ``board``; the first complete line wins ties."""
    for a, b, c in WINNING_LINES:
        v = board[a]
        if v != Cell.EMPTY and v == board[b] == board[c]:
            return Win(player=Player(getattr(v, "value", v)), line=(a, b, c))
    if all(cell != Cell.EMPTY for cell in board):
        return DRAW
    return ONGOING


# ---------- Game state ----------


@dataclass(frozen=True)
class GameState:
    """Board, player to move and verdict.

    ``outcome`` is derived from the board when omitted; passing one that
    disagrees with ``evaluate(board)`` raises ``ValueError``, as does a board
    that is not exactly 9 cells.
    """

    board: Board
    turn: Player = Player.X
    outcome: Optional[Outcome] = None

    def __post_init__(self) -> None:
        board = make_board(self.board)
        actual = evaluate(board)
        if self.outcome is not None and self.outcome != actual:
            raise ValueError(f"Outcome {self.outcome!r} does not match board ({actual!r})")
        object.__setattr__(self, "board", board)
        object.__setattr__(self, "outcome", actual)

    @property
    def finished(self) -> bool:
        return not isinstance(self.outcome, Ongoing)


def initial_state() -> GameState:
    return GameState(board=empty_board(), turn=Player.X, outcome=ONGOING)


def reset(state: Optional[GameState] = None) -> GameState:
    """Discard ``state`` and return a fresh game with X to move."""
    return initial_state()


def apply_move(state: GameState, index: int) -> GameState:
    """Place the current player's mark at ``index``.

    Out-of-range indices, occupied cells and moves on a finished game are
    ignored: the very same ``state`` object comes back, so callers can detect
    a rejected move with an identity check.
    """
    if not isinstance(index, int) or isinstance(index, bool):
        return state
    if not 0 <= index < BOARD_CELLS:
        return state
    if state.finished or state.board[index] != Cell.EMPTY:
        return state

    cells = list(state.board)
    cells[index] = state.turn.cell
    board: Board = tuple(cells)
    outcome = evaluate(board)
    # Turn stays with the last mover once the game is over.
    turn = state.turn.other if isinstance(outcome, Ongoing) else state.turn
    return GameState(board=board, turn=turn, outcome=outcome)


# ---- derived display values ----


def available_moves(state: GameState) -> List[int]:
    if state.finished:
        return []
    return [i for i, c in enumerate(state.board) if c == Cell.EMPTY]


def is_cell_enabled(state: GameState, index: int) -> bool:
    if not 0 <= index < BOARD_CELLS:
        return False
    return not state.finished and state.board[index] == Cell.EMPTY


def winning_line(state: GameState) -> Tuple[int, ...]:
    if isinstance(state.outcome, Win):
        return state.outcome.line
    return ()


def status_text(state: GameState) -> str:
    outcome = state.outcome
    if isinstance(outcome, Win):
        return f"Winner: {outcome.player.value}"
    if isinstance(outcome, Draw):
        return "It's a draw!"
    return f"Next turn: {state.turn.value}"


def status_tone(state: GameState) -> str:
    """Colour role for the status line: ``x``, ``o`` or ``draw``."""
    outcome = state.outcome
    if isinstance(outcome, Win):
        return outcome.player.value.lower()
    if isinstance(outcome, Draw):
        return "draw"
    return state.turn.value.lower()
