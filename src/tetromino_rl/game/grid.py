from __future__ import annotations

from dataclasses import dataclass
from typing import List

import numpy as np

from .pieces import Piece, Tetromino


@dataclass
class ClearResult:
    lines_cleared: int
    perfect_clear: bool


class GameGrid:
    """Grid of locked tetromino kinds.

    Cells hold ``Tetromino`` values with 0 for empty. The array is indexed
    ``[y, x]`` and row 0 is the bottom of the well, so anything drawing it to a
    screen has to flip it vertically.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(Tetromino.NO_SHAPE)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_empty(self, x: int, y: int) -> bool:
        return self.is_inside(x, y) and self.grid[y, x] == Tetromino.NO_SHAPE

    def kind_at(self, x: int, y: int) -> Tetromino:
        return Tetromino(int(self.grid[y, x]))

    def can_place(self, piece: Piece, x: int, y: int) -> bool:
        for cx, cy in piece.cells_at(x, y):
            if not self.is_empty(cx, cy):
                return False
        return True

    def lock(self, piece: Piece, x: int, y: int) -> None:
        """Write ``piece`` into the grid. Assumes ``can_place`` already passed."""
        for cx, cy in piece.cells_at(x, y):
            self.grid[cy, cx] = int(piece.kind)

    def clear_full_lines(self) -> ClearResult:
        """Remove full rows bottom-up, shifting everything above down by one.

        The same row index is examined again after a shift since the row that
        was above it has slid into place.
        """
        cleared = 0
        y = 0
        while y < self.height:
            if np.all(self.grid[y] != Tetromino.NO_SHAPE):
                cleared += 1
                self.grid[y:-1] = self.grid[y + 1:]
                self.grid[-1].fill(Tetromino.NO_SHAPE)
                continue
            y += 1
        perfect = not bool(np.any(self.grid != Tetromino.NO_SHAPE))
        return ClearResult(lines_cleared=cleared, perfect_clear=perfect)

    def rows(self) -> List[List[Tetromino]]:
        """Rows from the top of the well down, as a renderer would draw them."""
        return [[Tetromino(int(v)) for v in row] for row in self.grid[::-1]]

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
