"""Gymnasium environments for Plate Push RL."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Register the plate puzzle environment (level chosen via level_index kwarg)
register(
    id="PlatePush-v0",
    entry_point="plate_push_rl.env.plate_push_env:PlatePushEnv",
)

__all__ = ["PlatePush-v0"]
