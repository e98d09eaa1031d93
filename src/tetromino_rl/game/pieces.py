from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Tuple


Offset = Tuple[int, int]


class Tetromino(IntEnum):
    NO_SHAPE = 0
    Z = 1
    S = 2
    LINE = 3
    T = 4
    SQUARE = 5
    L = 6
    MIRRORED_L = 7


REAL_KINDS: Tuple[Tetromino, ...] = tuple(k for k in Tetromino if k != Tetromino.NO_SHAPE)


# Offsets around the pivot. The y axis of an offset points down the board.
COORDS_TABLE = {
    Tetromino.NO_SHAPE: ((0, 0), (0, 0), (0, 0), (0, 0)),
    Tetromino.Z: ((0, -1), (0, 0), (-1, 0), (-1, 1)),
    Tetromino.S: ((0, -1), (0, 0), (1, 0), (1, 1)),
    Tetromino.LINE: ((0, -1), (0, 0), (0, 1), (0, 2)),
    Tetromino.T: ((-1, 0), (0, 0), (1, 0), (0, 1)),
    Tetromino.SQUARE: ((0, 0), (1, 0), (0, 1), (1, 1)),
    Tetromino.L: ((-1, -1), (0, -1), (0, 0), (0, 1)),
    Tetromino.MIRRORED_L: ((1, -1), (0, -1), (0, 0), (0, 1)),
}


def cells_of(kind: Tetromino) -> Tuple[Offset, ...]:
    return COORDS_TABLE[Tetromino(kind)]


def random_kind(rng: Optional[random.Random] = None) -> Tetromino:
    """Uniform pick over the seven real kinds; never ``NO_SHAPE``."""
    rng = rng or random
    return rng.choice(REAL_KINDS)


@dataclass(frozen=True)
class Piece:
    kind: Tetromino = Tetromino.NO_SHAPE
    cells: Tuple[Offset, ...] = COORDS_TABLE[Tetromino.NO_SHAPE]

    @classmethod
    def of(cls, kind: Tetromino) -> "Piece":
        kind = Tetromino(kind)
        return cls(kind=kind, cells=cells_of(kind))

    @property
    def is_empty(self) -> bool:
        return self.kind == Tetromino.NO_SHAPE

    def min_x(self) -> int:
        return min(x for x, _ in self.cells)

    def min_y(self) -> int:
        return min(y for _, y in self.cells)

    def rotate_left(self) -> "Piece":
        if self.kind == Tetromino.SQUARE:
            return self
        return Piece(self.kind, tuple((y, -x) for x, y in self.cells))

    def rotate_right(self) -> "Piece":
        if self.kind == Tetromino.SQUARE:
            return self
        return Piece(self.kind, tuple((-y, x) for x, y in self.cells))

    def cells_at(self, origin_x: int, origin_y: int) -> List[Tuple[int, int]]:
        return [(origin_x + dx, origin_y - dy) for dx, dy in self.cells]
