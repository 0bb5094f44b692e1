import gymnasium as gym
import numpy as np

import plate_push_rl.env  # noqa: F401
from plate_push_rl.env.plate_push_env import ACT_UNDO, PlatePushEnv
from plate_push_rl.game import Direction


def test_registered_env_resets_to_level_planes():
    env = gym.make("PlatePush-v0", level_index=0)
    obs, info = env.reset(seed=0)

    assert obs.shape == (6, 6, 13)
    assert env.observation_space.contains(obs)
    assert env.action_space.n == 5
    assert info["active_plates"] == 0
    assert not info["exit_open"]
    env.close()


def test_action_mask_matches_blocked_moves():
    env = PlatePushEnv(level_index=0)
    _, info = env.reset()
    mask = info["action_mask"]

    # Start in the top-left corner: only down and right are open, nothing to undo
    assert mask.tolist() == [False, True, False, True, False]

    _, _, _, _, info = env.step(int(Direction.RIGHT))
    assert info["action_mask"][ACT_UNDO]


def test_blocked_step_is_penalised():
    env = PlatePushEnv(level_index=0, step_penalty=-0.01, blocked_penalty=-0.05)
    env.reset()
    _, reward, terminated, truncated, info = env.step(int(Direction.UP))

    assert info["outcome"] == "blocked"
    assert info["events"] == ["blocked"]
    assert abs(reward - (-0.06)) < 1e-9
    assert not terminated and not truncated


def test_undo_action_rewinds():
    env = PlatePushEnv(level_index=0)
    obs0, _ = env.reset()
    env.step(int(Direction.RIGHT))
    obs, _, _, _, info = env.step(ACT_UNDO)

    assert info["outcome"] == "undo"
    assert np.array_equal(obs, obs0)


def test_solution_terminates_with_win_reward(directions, level_1_solution):
    env = PlatePushEnv(level_index=0, plate_reward=1.0, win_reward=10.0)
    env.reset()
    total = 0.0
    seen = []
    terminated = False
    for direction in directions(level_1_solution):
        assert not terminated
        _, reward, terminated, truncated, info = env.step(int(direction))
        total += reward
        seen.extend(info["events"])

    assert terminated
    assert seen.count("plate-activated") == 1
    assert seen.count("exit-opened") == 1
    assert seen[-1] == "won"
    assert total > 10.0


def test_episode_truncates_at_step_limit():
    env = PlatePushEnv(level_index=0, max_episode_steps=3)
    env.reset()
    results = [env.step(int(Direction.UP)) for _ in range(3)]

    assert [r[3] for r in results] == [False, False, True]


def test_rgb_render_has_cell_pixels():
    env = PlatePushEnv(level_index=0, render_mode="rgb_array")
    env.reset()
    img = env.render()

    assert img.shape == (6 * 12, 13 * 12, 3)
    assert img.dtype == np.uint8
    # Player cell is drawn white
    assert tuple(img[12 + 6, 12 + 6]) == (245, 245, 245)
