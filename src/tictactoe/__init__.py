"""Tic Tac Toe package exposing game rules and the web application."""

from .game import GameState, apply_move, evaluate, reset
from .ui import app

__all__ = ["GameState", "app", "apply_move", "evaluate", "reset"]
