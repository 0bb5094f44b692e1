from __future__ import annotations

import argparse

import gymnasium as gym
import pygame

import plate_push_rl.env  # ensure registration
from plate_push_rl.visualization.renderer import Renderer


def build_env(level_index: int) -> gym.Env:
    return gym.make("PlatePush-v0", level_index=level_index)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--model", type=str, required=True)
    p.add_argument("--level", type=int, default=1, help="Level number to play (1-based)")
    p.add_argument("--steps", type=int, default=500)
    p.add_argument("--fps", type=int, default=8)
    return p


def main() -> None:
    args = build_parser().parse_args()
    from stable_baselines3 import PPO

    env = build_env(args.level - 1)
    model = PPO.load(args.model, device="auto")
    session = env.unwrapped.session
    renderer = Renderer(cell_size=40)

    pygame.init()
    try:
        screen = pygame.display.set_mode(renderer.window_size(session.state))
        pygame.display.set_caption("Plate Push - Agent Eval")
        clock = pygame.time.Clock()

        obs, info = env.reset()
        total_reward = 0.0
        wins = 0
        steps = 0
        while steps < args.steps:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    return
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    return

            action, _ = model.predict(obs, deterministic=True)
            obs, reward, terminated, truncated, info = env.step(action)
            total_reward += float(reward)
            steps += 1

            renderer.draw(
                screen,
                session.state,
                level_name=f"{session.level.name}  step {steps}/{args.steps}  reward {total_reward:.1f}",
                elapsed=session.timer.elapsed,
                best=session.best_time,
            )
            if terminated:
                wins += 1
            if terminated or truncated:
                obs, info = env.reset()
            clock.tick(args.fps)
        print(f"Agent wins: {wins} in {steps} steps, total reward {total_reward:.1f}")
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    main()
