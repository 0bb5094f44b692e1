"""Game module for Plate Push RL.

Exports the puzzle engine and supporting classes:
- PuzzleState / Block: Grid snapshot with sparse block storage
- attempt_move: Move resolver for one directional step
- active_plate_count / is_exit_open: Plate activation tracking
- HistoryStack: Bounded undo log
- PuzzleSession: Live state, undo, events, timer and best times
- LEVELS / parse_level: Built-in level maps and the map loader
"""

from .grid import Block, Coordinate, PuzzleState, EMPTY_BLOCK, HEAVY_BLOCK
from .rules import MAX_STACK_HEIGHT, active_plate_count, is_exit_open
from .history import HistoryStack
from .levels import LEVELS, LevelDefinition, get_level, level_from_text, parse_level
from .records import BestTimeStore, LevelTimer, MemoryTimeStore, TimeStore
from .core import (
    Direction,
    GameConfig,
    GameEvent,
    MoveResult,
    Outcome,
    PuzzleSession,
    attempt_move,
)

__all__ = [
    "Block",
    "Coordinate",
    "PuzzleState",
    "EMPTY_BLOCK",
    "HEAVY_BLOCK",
    "MAX_STACK_HEIGHT",
    "active_plate_count",
    "is_exit_open",
    "HistoryStack",
    "LEVELS",
    "LevelDefinition",
    "get_level",
    "level_from_text",
    "parse_level",
    "BestTimeStore",
    "LevelTimer",
    "MemoryTimeStore",
    "TimeStore",
    "Direction",
    "GameConfig",
    "GameEvent",
    "MoveResult",
    "Outcome",
    "PuzzleSession",
    "attempt_move",
]
