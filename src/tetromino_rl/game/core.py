from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Callable, List, Optional, Tuple

import numpy as np

from .grid import ClearResult, GameGrid
from .pieces import Piece, Tetromino, random_kind
from .rules import ScoringRules

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE_CW = 2
    ROTATE_CCW = 3
    SOFT_DROP = 4
    HARD_DROP = 5
    NONE = 6
    TICK = 7
    PAUSE = 8


class GameState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None

    def __post_init__(self) -> None:
        # Spawn column is width // 2 + 1 and pieces reach one column either side
        if self.width < 5 or self.height < 4:
            raise ValueError(f"board must be at least 5x4, got {self.width}x{self.height}")


@dataclass
class GameStatus:
    """Snapshot polled by whatever draws the status bar."""

    state: GameState
    score: int
    level: int
    lines: int
    combo: int
    perfect_clear: bool
    tick_interval_ms: int

    @property
    def paused(self) -> bool:
        return self.state == GameState.PAUSED

    @property
    def game_over(self) -> bool:
        return self.state == GameState.GAME_OVER

    def summary(self) -> str:
        if self.game_over:
            return f"Game Over | Final Score: {self.score}"
        if self.paused:
            return "paused"
        text = f"Score: {self.score} | Level: {self.level} | Lines: {self.lines}"
        if self.combo > 1:
            text += f" | Combo: x{self.combo}"
        if self.perfect_clear:
            text += " | PERFECT CLEAR!"
        return text


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class TetrisGame:
    """Falling-block rules engine.

    Every command runs to completion and leaves the engine in a consistent
    state. Rejected moves are reported through return values; nothing here
    raises during play. Callers must serialize commands and ticks onto a
    single thread.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = rng or random.Random(self.config.random_seed)
        self.clock = clock or _monotonic_ms
        self.grid = GameGrid(self.config.width, self.config.height)
        self.current_piece = Piece()
        self.current_x = 0
        self.current_y = 0
        self.score = 0
        self.level = 1
        self.lines_cleared_total = 0
        self.combo_counter = 0
        self.last_clear_ms: Optional[float] = None
        self.board_was_cleared = False
        self.falling_finished = False
        self.paused = False
        self.game_over = False
        self.started = False
        self.tick_interval_ms = self.rules.base_delay_ms

    @property
    def state(self) -> GameState:
        if self.game_over:
            return GameState.GAME_OVER
        if not self.started:
            return GameState.IDLE
        if self.paused:
            return GameState.PAUSED
        return GameState.RUNNING

    def new_game(self) -> None:
        self.grid.reset()
        self.score = 0
        self.level = 1
        self.lines_cleared_total = 0
        self.combo_counter = 0
        self.last_clear_ms = None
        self.board_was_cleared = False
        self.falling_finished = False
        self.paused = False
        self.game_over = False
        self.started = True
        self.tick_interval_ms = self.rules.delay_for_level(self.level)
        logger.info("New game on a %dx%d board", self.grid.width, self.grid.height)
        self._spawn_piece()

    def toggle_pause(self) -> bool:
        """Flip the paused flag and return it. Ignored before start and after game over."""
        if not self.started or self.game_over:
            return self.paused
        self.paused = not self.paused
        logger.debug("Paused" if self.paused else "Resumed")
        return self.paused

    # ---------- Commands ----------
    def _can_act(self) -> bool:
        return (
            self.started
            and not self.game_over
            and not self.paused
            and not self.current_piece.is_empty
        )

    def _try_move(self, piece: Piece, x: int, y: int) -> bool:
        if not self.grid.can_place(piece, x, y):
            return False
        self.current_piece = piece
        self.current_x = x
        self.current_y = y
        return True

    def move_left(self) -> bool:
        if not self._can_act():
            return False
        return self._try_move(self.current_piece, self.current_x - 1, self.current_y)

    def move_right(self) -> bool:
        if not self._can_act():
            return False
        return self._try_move(self.current_piece, self.current_x + 1, self.current_y)

    def rotate_clockwise(self) -> bool:
        if not self._can_act():
            return False
        return self._try_move(self.current_piece.rotate_right(), self.current_x, self.current_y)

    def rotate_counter_clockwise(self) -> bool:
        if not self._can_act():
            return False
        return self._try_move(self.current_piece.rotate_left(), self.current_x, self.current_y)

    def soft_drop(self) -> bool:
        """Move down one row. Returns False when the piece landed and was locked."""
        if not self._can_act():
            return False
        return self._one_line_down()

    def hard_drop(self) -> int:
        """Drop to the floor, lock, and return the number of rows fallen."""
        if not self._can_act():
            return 0
        distance = 0
        while self._try_move(self.current_piece, self.current_x, self.current_y - 1):
            distance += 1
        self.score += distance * self.rules.hard_drop_points
        self._piece_dropped()
        return distance

    def tick(self) -> None:
        if not self.started or self.game_over or self.paused:
            return
        if self.falling_finished:
            self.falling_finished = False
            self._spawn_piece()
            return
        self._one_line_down()

    def step(self, action: Action) -> Tuple[np.ndarray, int, bool, dict]:
        action = Action(action)
        before = self.score

        if action == Action.LEFT:
            self.move_left()
        elif action == Action.RIGHT:
            self.move_right()
        elif action == Action.ROTATE_CW:
            self.rotate_clockwise()
        elif action == Action.ROTATE_CCW:
            self.rotate_counter_clockwise()
        elif action == Action.SOFT_DROP:
            self.soft_drop()
        elif action == Action.HARD_DROP:
            self.hard_drop()
        elif action == Action.TICK:
            self.tick()
        elif action == Action.PAUSE:
            self.toggle_pause()
        elif action == Action.NONE:
            pass

        info = {
            "score": self.score,
            "level": self.level,
            "lines_cleared_total": self.lines_cleared_total,
            "combo": self.combo_counter,
            "tick_interval_ms": self.tick_interval_ms,
        }
        return self.get_state(), self.score - before, self.game_over, info

    # ---------- Gravity, locking and spawning ----------
    def _one_line_down(self) -> bool:
        if self._try_move(self.current_piece, self.current_x, self.current_y - 1):
            self.score += self.rules.soft_drop_points
            return True
        self._piece_dropped()
        return False

    def _piece_dropped(self) -> None:
        self.grid.lock(self.current_piece, self.current_x, self.current_y)
        result = self.grid.clear_full_lines()
        if result.lines_cleared > 0:
            self._apply_clear(result)
            # Board stays settled with no active piece until the next tick
            self.current_piece = Piece()
            self.falling_finished = True
        else:
            self.combo_counter = 0
            self._spawn_piece()

    def _apply_clear(self, result: ClearResult) -> None:
        level = self.level
        self.combo_counter += 1

        now = self.clock()
        elapsed = None if self.last_clear_ms is None else now - self.last_clear_ms
        self.last_clear_ms = now

        if result.perfect_clear:
            self.board_was_cleared = True
        gained = self.rules.score_for_clear(
            result.lines_cleared,
            level,
            self.combo_counter,
            elapsed_ms=elapsed,
            perfect_clear=result.perfect_clear,
        )
        self.score += gained
        logger.debug(
            "Cleared %d line(s) for %d points (combo %d, perfect=%s)",
            result.lines_cleared, gained, self.combo_counter, result.perfect_clear,
        )

        self.lines_cleared_total += result.lines_cleared
        self.level = self.rules.level_for_lines(self.lines_cleared_total)
        self.tick_interval_ms = self.rules.delay_for_level(self.level)
        if self.level != level:
            logger.info("Level %d reached, gravity every %d ms", self.level, self.tick_interval_ms)

    def _spawn_piece(self, kind: Optional[Tetromino] = None) -> bool:
        piece = Piece.of(kind if kind is not None else random_kind(self.rng))
        x = self.grid.width // 2 + 1
        y = self.grid.height - 1 + piece.min_y()
        if not self.grid.can_place(piece, x, y):
            self.current_piece = Piece()
            self.game_over = True
            logger.info("Game over: final score %d at level %d", self.score, self.level)
            return False
        self.current_piece = piece
        self.current_x = x
        self.current_y = y
        return True

    # ---------- Observation ----------
    def active_cells(self) -> List[Tuple[int, int]]:
        if self.current_piece.is_empty:
            return []
        return self.current_piece.cells_at(self.current_x, self.current_y)

    def status(self) -> GameStatus:
        """Read the status; consumes the one-shot perfect-clear flag."""
        perfect = self.board_was_cleared
        self.board_was_cleared = False
        return GameStatus(
            state=self.state,
            score=self.score,
            level=self.level,
            lines=self.lines_cleared_total,
            combo=self.combo_counter,
            perfect_clear=perfect,
            tick_interval_ms=self.tick_interval_ms,
        )

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        state = self.grid.clone_state()
        for x, y in self.active_cells():
            if self.grid.is_inside(x, y):
                # Use negative to indicate falling piece overlay
                state[y, x] = -int(self.current_piece.kind)
        return state
