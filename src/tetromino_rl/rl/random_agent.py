from __future__ import annotations

import argparse
from typing import Optional

import gymnasium as gym

import tetromino_rl.env  # noqa: F401  ensure registration


def run_random(steps: int = 200, seed: Optional[int] = None) -> float:
    env = gym.make("Tetromino-10x20-v0")
    env.action_space.seed(seed)
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    episodes = 0
    for _ in range(steps):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            episodes += 1
            print(f"Episode {episodes}: score={info['score']} level={info['level']} lines={info['lines_cleared_total']}")
            obs, info = env.reset()
    env.close()
    print(f"Random agent total reward: {total_reward:.2f}")
    return total_reward


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--steps", type=int, default=200)
    p.add_argument("--seed", type=int, default=None)
    return p


if __name__ == "__main__":  # pragma: no cover
    args = build_parser().parse_args()
    run_random(args.steps, args.seed)
