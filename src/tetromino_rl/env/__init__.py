"""Gymnasium environments for Tetromino RL."""

from __future__ import annotations

from gymnasium.envs.registration import register

from .tetromino_env import AGENT_ACTIONS, TetrominoEnv

# Register the standard 10x20 well
register(
    id="Tetromino-10x20-v0",
    entry_point="tetromino_rl.env.tetromino_env:TetrominoEnv",
)

__all__ = ["AGENT_ACTIONS", "TetrominoEnv"]
