"""Game module for Tetromino RL.

Exports the rules engine and supporting classes:
- GameGrid: Locked-cell grid, collision checks and line clearing
- Piece: Immutable tetromino value with rotation transforms
- Tetromino: Enum of piece kinds, including the empty sentinel
- ScoringRules: Scoring, level curve and gravity curve
- TetrisGame: State machine driven by player commands and gravity ticks
"""

from .grid import ClearResult, GameGrid
from .pieces import Piece, Tetromino, cells_of, random_kind
from .rules import ScoringRules
from .core import Action, GameConfig, GameState, GameStatus, TetrisGame

__all__ = [
    "ClearResult",
    "GameGrid",
    "Piece",
    "Tetromino",
    "cells_of",
    "random_kind",
    "ScoringRules",
    "Action",
    "GameConfig",
    "GameState",
    "GameStatus",
    "TetrisGame",
]
