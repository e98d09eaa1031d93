from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetromino_rl.game import Action, GameConfig, ScoringRules, TetrisGame, Tetromino
from tetromino_rl.game.core import Clock
from tetromino_rl.visualization.palette import color_for_value

AGENT_ACTIONS = (
    Action.LEFT,
    Action.RIGHT,
    Action.ROTATE_CW,
    Action.ROTATE_CCW,
    Action.SOFT_DROP,
    Action.HARD_DROP,
    Action.NONE,
)


class TetrominoEnv(gym.Env):
    """
    Falling-block environment driven one player command at a time.

    Actions (7 total):
      0: Move Left
      1: Move Right
      2: Rotate CW
      3: Rotate CCW
      4: Soft Drop
      5: Hard Drop
      6: No-op

    Notes:
    - Gravity is simulated by calling the engine's tick after every
      ``gravity_every`` actions, so an agent that only idles still loses.
    - Reward is the engine score delta over the action and the gravity tick.
    - Time seen by the engine advances ``step_ms`` per action unless a clock is
      passed in, so the quick-drop bonus depends only on the action sequence.
    - The observation is the board with the falling piece overlaid as negative
      kind values; row 0 is the bottom of the well.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        render_mode: Optional[str] = None,
        gravity_every: int = 1,
        max_episode_steps: int = 10000,
        step_penalty: float = 0.0,
        terminal_penalty: float = 0.0,
        step_ms: float = 100.0,
        clock: Optional[Clock] = None,
    ) -> None:
        super().__init__()
        if gravity_every < 1:
            raise ValueError(f"gravity_every must be >= 1, got {gravity_every}")
        self.step_ms = float(step_ms)
        self._steps = 0
        self.game = TetrisGame(config, rules, clock=clock or self._step_clock)
        self.render_mode = render_mode
        self.gravity_every = int(gravity_every)
        self.max_episode_steps = int(max_episode_steps)
        self.step_penalty = float(step_penalty)
        self.terminal_penalty = float(terminal_penalty)

        height, width = self.game.grid.height, self.game.grid.width
        max_kind = int(max(Tetromino))
        self.observation_space = spaces.Box(
            low=-max_kind, high=max_kind, shape=(height, width), dtype=np.int8
        )
        self.action_space = spaces.Discrete(len(AGENT_ACTIONS))

        self._last_obs: Optional[np.ndarray] = None

    def _step_clock(self) -> float:
        return self._steps * self.step_ms

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "level": self.game.level,
            "lines_cleared_total": self.game.lines_cleared_total,
            "combo": self.game.combo_counter,
            "tick_interval_ms": self.game.tick_interval_ms,
            "steps": self._steps,
        }

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[dict] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.game.rng.seed(seed)
        self.game.new_game()
        self._steps = 0
        obs = self.game.get_state()
        self._last_obs = obs
        return obs, self._get_info()

    def step(self, action: int):
        action = AGENT_ACTIONS[int(action)]
        reward_components: Dict[str, float] = {}

        _, gained, _, _ = self.game.step(action)
        self._steps += 1
        if not self.game.game_over and self._steps % self.gravity_every == 0:
            _, fallen, _, _ = self.game.step(Action.TICK)
            gained += fallen

        reward_components["score"] = float(gained)
        reward_components["step"] = self.step_penalty
        terminated = bool(self.game.game_over)
        truncated = self._steps >= self.max_episode_steps
        if terminated:
            reward_components["terminal"] = self.terminal_penalty

        reward = float(sum(reward_components.values()))
        obs = self.game.get_state()
        info = self._get_info()
        info["reward_components"] = reward_components
        self._last_obs = obs
        return obs, reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        grid = self._last_obs if self._last_obs is not None else self.game.get_state()
        cell = 12
        h, w = grid.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            # Flip so row 0 ends up at the bottom of the image
            row = h - 1 - y
            for x in range(w):
                img[row * cell : (row + 1) * cell, x * cell : (x + 1) * cell, :] = color_for_value(int(grid[y, x]))
        return img

    def close(self) -> None:
        pass
