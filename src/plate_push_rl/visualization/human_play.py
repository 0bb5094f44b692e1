from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

import pygame

from plate_push_rl.game import BestTimeStore, GameConfig, PuzzleSession
from .audio import AudioCues
from .controls import KEY_TO_DIRECTION, SwipeTracker
from .renderer import Renderer


DEFAULT_RECORDS = Path.home() / ".plate_push_rl" / "best_times.json"


def run(level_index: int = 0, records_path: Optional[Path] = DEFAULT_RECORDS, sound: bool = True) -> None:
    store = BestTimeStore(records_path) if records_path is not None else None
    session = PuzzleSession(GameConfig(level_index=level_index), store=store)
    renderer = Renderer(cell_size=48)
    audio = AudioCues(enabled=sound)
    session.subscribe(lambda result: audio.play_events(result.events))

    pygame.init()
    try:
        clock = pygame.time.Clock()

        def open_window() -> pygame.Surface:
            screen = pygame.display.set_mode(renderer.window_size(session.state))
            pygame.display.set_caption(f"Plate Push - Level {session.level.name}")
            return screen

        screen = open_window()
        swipe = SwipeTracker()

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key in (pygame.K_z, pygame.K_u):
                        session.undo()
                    elif event.key == pygame.K_r:
                        session.reset_level()
                    elif event.key in (pygame.K_n, pygame.K_p):
                        if event.key == pygame.K_n:
                            session.next_level()
                        else:
                            session.previous_level()
                        screen = open_window()
                    else:
                        direction = KEY_TO_DIRECTION.get(event.key)
                        if direction is not None:
                            session.move(direction)
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    swipe.press(event.pos)
                elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                    direction = swipe.release(event.pos)
                    if direction is not None:
                        session.move(direction)
                elif event.type == pygame.WINDOWLEAVE:
                    swipe.cancel()

            renderer.draw(
                screen,
                session.state,
                level_name=session.level.name,
                elapsed=session.timer.elapsed,
                best=session.best_time,
            )
            clock.tick(60)
    finally:
        pygame.quit()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--level", type=int, default=1, help="Level number to start on (1-based)")
    p.add_argument("--records", type=str, default=str(DEFAULT_RECORDS))
    p.add_argument("--no-records", action="store_true", help="Keep best times in memory only")
    p.add_argument("--mute", action="store_true")
    p.add_argument("--verbose", action="store_true")
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    records = None if args.no_records else Path(args.records)
    run(level_index=args.level - 1, records_path=records, sound=not args.mute)


if __name__ == "__main__":  # pragma: no cover
    main()
