import itertools

import gymnasium as gym
import numpy as np
import pytest

import tetromino_rl.env  # noqa: F401
from tetromino_rl.env import AGENT_ACTIONS, TetrominoEnv
from tetromino_rl.game import Action, GameConfig
from tetromino_rl.game import core

from conftest import FakeClock, single_clear_setup


def test_reset_observation_matches_space():
    env = TetrominoEnv(GameConfig(random_seed=5))
    obs, info = env.reset()
    assert obs.shape == (20, 10)
    assert obs.dtype == np.int8
    assert env.observation_space.contains(obs)
    assert info["score"] == 0
    assert info["level"] == 1
    assert env.action_space.n == len(AGENT_ACTIONS) == 7


def test_idle_step_applies_gravity():
    env = TetrominoEnv(GameConfig(random_seed=5))
    env.reset()
    y = env.game.current_y
    _, reward, terminated, truncated, info = env.step(AGENT_ACTIONS.index(Action.NONE))
    assert env.game.current_y == y - 1
    assert reward == 1.0
    assert not terminated
    assert not truncated
    assert info["reward_components"]["score"] == 1.0


def test_gravity_every_n_steps():
    env = TetrominoEnv(GameConfig(random_seed=5), gravity_every=3)
    env.reset()
    y = env.game.current_y
    noop = AGENT_ACTIONS.index(Action.NONE)
    env.step(noop)
    env.step(noop)
    assert env.game.current_y == y
    env.step(noop)
    assert env.game.current_y == y - 1


def test_rejects_bad_gravity_setting():
    with pytest.raises(ValueError):
        TetrominoEnv(gravity_every=0)


def test_hard_drops_eventually_terminate():
    env = TetrominoEnv(GameConfig(random_seed=11), terminal_penalty=-5.0)
    env.reset()
    hard = AGENT_ACTIONS.index(Action.HARD_DROP)
    terminated = False
    for _ in range(200):
        _, reward, terminated, truncated, info = env.step(hard)
        if terminated:
            break
    assert terminated
    assert info["reward_components"]["terminal"] == -5.0
    assert env.game.game_over


def test_truncates_at_step_limit():
    env = TetrominoEnv(GameConfig(random_seed=5), max_episode_steps=3)
    env.reset()
    noop = AGENT_ACTIONS.index(Action.NONE)
    assert not env.step(noop)[3]
    assert not env.step(noop)[3]
    assert env.step(noop)[3]


def test_seeded_resets_are_reproducible():
    a = TetrominoEnv()
    b = TetrominoEnv()
    obs_a, _ = a.reset(seed=7)
    obs_b, _ = b.reset(seed=7)
    assert np.array_equal(obs_a, obs_b)
    assert a.game.current_piece == b.game.current_piece


def test_rgb_render():
    env = TetrominoEnv(GameConfig(random_seed=5), render_mode="rgb_array")
    env.reset()
    img = env.render()
    assert img.shape == (20 * 12, 10 * 12, 3)
    assert img.dtype == np.uint8


def test_registered_env():
    env = gym.make("Tetromino-10x20-v0")
    obs, _ = env.reset(seed=3)
    assert obs.shape == (20, 10)
    env.step(env.action_space.sample())
    env.close()


def test_random_agent_smoke(capsys):
    from tetromino_rl.rl.random_agent import run_random

    total = run_random(steps=300, seed=0)
    out = capsys.readouterr().out
    assert "Random agent total reward" in out
    assert total >= 0.0


def _two_quick_singles(seed):
    env = TetrominoEnv(GameConfig(random_seed=seed))
    env.reset(seed=seed)
    hard = AGENT_ACTIONS.index(Action.HARD_DROP)
    rewards = []
    for _ in range(2):
        env.game.grid.reset()
        single_clear_setup(env.game)
        rewards.append(env.step(hard)[1])
    return rewards


def test_quick_drop_bonus_follows_step_count_not_wall_time(monkeypatch):
    first = _two_quick_singles(7)
    # Wall time jumps by seconds between reads; rewards must not notice
    ticks = itertools.count(0.0, 5000.0)
    monkeypatch.setattr(core, "_monotonic_ms", lambda: next(ticks))
    second = _two_quick_singles(7)

    # Second clear lands one 100 ms step later: (40 + 100 combo + 180 quick) * 1.5
    assert first == second == [60.0, 480.0]


def test_step_ms_scales_quick_drop_window():
    env = TetrominoEnv(GameConfig(random_seed=7), step_ms=2000.0)
    env.reset(seed=7)
    hard = AGENT_ACTIONS.index(Action.HARD_DROP)
    rewards = []
    for _ in range(2):
        env.game.grid.reset()
        single_clear_setup(env.game)
        rewards.append(env.step(hard)[1])
    # Combo bonus only: (40 + 100) * 1.5
    assert rewards == [60.0, 210.0]


def test_custom_clock_is_passed_to_engine():
    clock = FakeClock(250.0)
    env = TetrominoEnv(GameConfig(random_seed=7), clock=clock)
    env.reset()
    assert env.game.clock is clock
    env.game.grid.reset()
    single_clear_setup(env.game)
    env.step(AGENT_ACTIONS.index(Action.HARD_DROP))
    assert env.game.last_clear_ms == 250.0
