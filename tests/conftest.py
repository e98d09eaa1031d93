from __future__ import annotations

from typing import Optional

import pytest

from tetromino_rl.game import GameConfig, Piece, TetrisGame, Tetromino


class FakeClock:
    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def game(clock: FakeClock) -> TetrisGame:
    g = TetrisGame(GameConfig(random_seed=1234), clock=clock)
    g.new_game()
    return g


def fill_row(game: TetrisGame, y: int, *gaps: int) -> None:
    for x in range(game.grid.width):
        if x not in gaps:
            game.grid.grid[y, x] = Tetromino.Z


def place(game: TetrisGame, kind: Tetromino, x: int, y: int) -> None:
    game.current_piece = Piece.of(kind)
    game.current_x = x
    game.current_y = y


def single_clear_setup(game: TetrisGame, extra: Optional[tuple] = None) -> None:
    """Row 0 full except column 0, with a vertical line ready to plug it."""
    fill_row(game, 0, 0)
    if extra is not None:
        game.grid.grid[extra[1], extra[0]] = Tetromino.S
    place(game, Tetromino.LINE, 0, 2)
