"""Shared pytest fixtures.

pygame is pointed at SDL's ``dummy`` video and audio drivers so the
visualization modules import and run headless.
"""

from __future__ import annotations

import os
from typing import Callable, List

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

from plate_push_rl.game import Direction, PuzzleState, level_from_text, parse_level


LETTER_TO_DIRECTION = {
    "U": Direction.UP,
    "D": Direction.DOWN,
    "L": Direction.LEFT,
    "R": Direction.RIGHT,
}

# Pushes the heavy block out through the gap, round to its far side, and back
# onto the plate before walking to the exit.
LEVEL_1_SOLUTION = "RRRRDDRRDRRULLLLLRRRRUURRR"


class FakeClock:
    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def make_state() -> Callable[[str], PuzzleState]:
    def build(text: str) -> PuzzleState:
        return parse_level(level_from_text("test", text))
    return build


@pytest.fixture
def directions() -> Callable[[str], List[Direction]]:
    def convert(letters: str) -> List[Direction]:
        return [LETTER_TO_DIRECTION[c] for c in letters]
    return convert


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def level_1_solution() -> str:
    return LEVEL_1_SOLUTION
