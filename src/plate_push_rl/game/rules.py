from __future__ import annotations

from .grid import Coordinate, PuzzleState


MAX_STACK_HEIGHT = 2
# How far up the player may step from the tile it stands on
MAX_CLIMB = 1


def active_plate_count(state: PuzzleState) -> int:
    return sum(1 for pos in state.plates if state.block_at(pos).heavy)


def is_exit_open(state: PuzzleState) -> bool:
    # No plates means the exit starts open
    return all(state.block_at(pos).heavy for pos in state.plates)


def can_stand_on(state: PuzzleState, pos: Coordinate, from_height: int) -> bool:
    if not state.in_bounds(pos) or state.is_wall(pos):
        return False
    block = state.block_at(pos)
    if block.heavy:
        return False
    return can_climb(block.height, from_height)


def can_climb(to_height: int, from_height: int) -> bool:
    return to_height <= from_height + MAX_CLIMB


def can_merge(moving: int, resting: int) -> bool:
    return moving + resting <= MAX_STACK_HEIGHT
