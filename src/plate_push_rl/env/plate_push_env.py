from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from plate_push_rl.game import (
    Direction,
    GameConfig,
    GameEvent,
    Outcome,
    PuzzleSession,
    attempt_move,
)
from plate_push_rl.game.grid import (
    NUM_PLANES,
    PLANE_EXIT,
    PLANE_HEAVY,
    PLANE_LIGHT,
    PLANE_PLATE,
    PLANE_PLAYER,
    PLANE_WALL,
)
from plate_push_rl.game.rules import MAX_STACK_HEIGHT


ACT_UNDO = len(Direction)


def _compute_action_mask(session: PuzzleSession) -> np.ndarray:
    mask = np.zeros((len(Direction) + 1,), dtype=np.bool_)
    for direction in Direction:
        probe = session.state.clone()
        mask[int(direction)] = attempt_move(probe, direction) is not Outcome.BLOCKED
    mask[ACT_UNDO] = bool(session.history)
    return mask


class PlatePushEnv(gym.Env):
    """Single-level plate puzzle as a gymnasium environment.

    Actions (5 total):
      0: Up
      1: Down
      2: Left
      3: Right
      4: Undo

    Observations are the state's int8 planes (walls, plates, exit, heavy,
    light height, player) with shape (6, height, width).
    """

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 30}

    def __init__(
        self,
        level_index: int = 0,
        render_mode: Optional[str] = None,
        max_episode_steps: int = 500,
        step_penalty: float = -0.01,
        blocked_penalty: float = -0.05,
        undo_penalty: float = -0.02,
        plate_reward: float = 1.0,
        win_reward: float = 10.0,
    ) -> None:
        super().__init__()
        self.session = PuzzleSession(GameConfig(level_index=level_index))
        self.render_mode = render_mode
        self.max_episode_steps = int(max_episode_steps)

        self.step_penalty = float(step_penalty)
        self.blocked_penalty = float(blocked_penalty)
        self.undo_penalty = float(undo_penalty)
        self.plate_reward = float(plate_reward)
        self.win_reward = float(win_reward)

        state = self.session.state
        self.observation_space = spaces.Box(
            low=0,
            high=MAX_STACK_HEIGHT,
            shape=(NUM_PLANES, state.height, state.width),
            dtype=np.int8,
        )
        self.action_space = spaces.Discrete(len(Direction) + 1)

        self._steps = 0

    def _get_obs(self) -> np.ndarray:
        return self.session.state.to_planes()

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": _compute_action_mask(self.session),
            "active_plates": self.session.active_plate_count,
            "exit_open": self.session.is_exit_open,
            "steps": self._steps,
        }

    def get_action_mask(self) -> np.ndarray:
        return _compute_action_mask(self.session)

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[np.ndarray, Dict[str, Any]]:
        super().reset(seed=seed)
        self.session.reset_level()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action):
        action = int(action)
        reward_components: Dict[str, float] = {"step": self.step_penalty}
        events: Tuple[GameEvent, ...] = ()
        outcome: Optional[Outcome] = None

        if action == ACT_UNDO:
            self.session.undo()
            reward_components["undo"] = self.undo_penalty
        else:
            result = self.session.move(Direction(action))
            outcome = result.outcome
            events = result.events
            if outcome is Outcome.BLOCKED:
                reward_components["blocked"] = self.blocked_penalty
            plates = sum(1 for e in events if e is GameEvent.PLATE_ACTIVATED)
            if plates:
                reward_components["plates"] = self.plate_reward * plates
            if outcome is Outcome.WON:
                reward_components["win"] = self.win_reward

        self._steps += 1
        terminated = bool(self.session.won)
        truncated = not terminated and self._steps >= self.max_episode_steps
        reward = float(sum(reward_components.values()))

        info = self._get_info()
        info["outcome"] = outcome.value if outcome is not None else "undo"
        info["events"] = [e.value for e in events]
        info["reward_components"] = reward_components
        return self._get_obs(), reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            planes = self._get_obs()
            cell = 12
            _, h, w = planes.shape
            img = np.full((h * cell, w * cell, 3), (30, 30, 36), dtype=np.uint8)
            layers = (
                (PLANE_PLATE, (60, 110, 140)),
                (PLANE_EXIT, (140, 255, 170) if self.session.is_exit_open else (120, 70, 70)),
                (PLANE_LIGHT, (190, 140, 90)),
                (PLANE_HEAVY, (255, 90, 90)),
                (PLANE_WALL, (90, 90, 100)),
                (PLANE_PLAYER, (245, 245, 245)),
            )
            for plane, color in layers:
                ys, xs = np.nonzero(planes[plane])
                for y, x in zip(ys, xs):
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
            return img
        # human rendering delegated to the pygame UI; noop
        return None

    def close(self) -> None:
        pass
