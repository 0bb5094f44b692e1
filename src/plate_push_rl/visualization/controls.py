from __future__ import annotations

from typing import Dict, Optional, Tuple

import pygame

from plate_push_rl.game import Direction


KEY_TO_DIRECTION: Dict[int, Direction] = {
    pygame.K_UP: Direction.UP,
    pygame.K_w: Direction.UP,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_s: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
    pygame.K_a: Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_d: Direction.RIGHT,
}

MIN_SWIPE_PX = 18


def swipe_direction(dx: float, dy: float, threshold: float = MIN_SWIPE_PX) -> Optional[Direction]:
    adx, ady = abs(dx), abs(dy)
    if max(adx, ady) < threshold:
        return None
    if adx > ady:
        return Direction.RIGHT if dx > 0 else Direction.LEFT
    return Direction.DOWN if dy > 0 else Direction.UP


class SwipeTracker:
    """Turns a pointer press/release pair into a direction."""

    def __init__(self, threshold: float = MIN_SWIPE_PX) -> None:
        self.threshold = threshold
        self._origin: Optional[Tuple[int, int]] = None

    @property
    def active(self) -> bool:
        return self._origin is not None

    def press(self, pos: Tuple[int, int]) -> None:
        self._origin = pos

    def release(self, pos: Tuple[int, int]) -> Optional[Direction]:
        if self._origin is None:
            return None
        x0, y0 = self._origin
        self._origin = None
        return swipe_direction(pos[0] - x0, pos[1] - y0, self.threshold)

    def cancel(self) -> None:
        self._origin = None
