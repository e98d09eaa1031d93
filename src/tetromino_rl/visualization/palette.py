from __future__ import annotations

from typing import Tuple

from tetromino_rl.game import Tetromino

Color = Tuple[int, int, int]

BACKGROUND: Color = (20, 20, 26)

PALETTE = {
    Tetromino.NO_SHAPE: BACKGROUND,
    Tetromino.Z: (204, 102, 102),
    Tetromino.S: (102, 204, 102),
    Tetromino.LINE: (102, 102, 204),
    Tetromino.T: (204, 204, 102),
    Tetromino.SQUARE: (204, 102, 204),
    Tetromino.L: (102, 204, 204),
    Tetromino.MIRRORED_L: (218, 170, 0),
}


def color_for_value(v: int) -> Color:
    # Falling piece cells are stored negated in observations
    return PALETTE.get(abs(v), (200, 200, 200))


def brighter(color: Color, factor: float = 0.7) -> Color:
    return tuple(min(255, int(c / factor)) for c in color)  # type: ignore[return-value]


def darker(color: Color, factor: float = 0.7) -> Color:
    return tuple(int(c * factor) for c in color)  # type: ignore[return-value]
