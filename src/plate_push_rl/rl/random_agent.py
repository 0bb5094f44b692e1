from __future__ import annotations

import random

import gymnasium as gym
import numpy as np

import plate_push_rl.env  # noqa: F401  ensure registration


def run_random(steps: int = 200, level_index: int = 0) -> float:
    env = gym.make("PlatePush-v0", level_index=level_index)
    obs, info = env.reset()
    total_reward = 0.0
    wins = 0
    for _ in range(steps):
        # Prefer moves that are not blocked
        valid = np.flatnonzero(info.get("action_mask", []))
        if valid.size:
            action = int(random.choice(list(valid)))
        else:
            action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated:
            wins += 1
        if terminated or truncated:
            obs, info = env.reset()
    env.close()
    print(f"Random agent total reward: {total_reward:.2f}  wins: {wins}")
    return total_reward


if __name__ == "__main__":  # pragma: no cover
    run_random()
