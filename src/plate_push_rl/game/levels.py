from __future__ import annotations

import logging
import textwrap
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .grid import HEAVY_BLOCK, Block, Coordinate, PuzzleState


logger = logging.getLogger(__name__)


WALL = "#"
FLOOR = "."
PLAYER = "P"
LIGHT = "L"
HEAVY = "H"
PLATE = "p"
EXIT = "E"

DEFAULT_PLAYER_START: Coordinate = (1, 1)


@dataclass(frozen=True)
class LevelDefinition:
    name: str
    rows: Tuple[str, ...]


def _level(name: str, *rows: str) -> LevelDefinition:
    return LevelDefinition(name=name, rows=tuple(rows))


LEVELS: Tuple[LevelDefinition, ...] = (
    _level(
        "1",
        "#############",
        "#P....#....E#",
        "#.##..#..##.#",
        "#..p..H.....#",
        "#.....#..L..#",
        "#############",
    ),
    _level(
        "2",
        "#############",
        "#P....#....E#",
        "#.##..#..##.#",
        "#..p..H..L..#",
        "#.....#.....#",
        "#############",
    ),
    _level(
        "3",
        "#############",
        "#P..L.#....E#",
        "#.##..#..##.#",
        "#..p..H.....#",
        "#.....#..L..#",
        "#############",
    ),
    _level(
        "4",
        "###############",
        "#P.....#.....E#",
        "#.###..#..###.#",
        "#..p...H...L..#",
        "#.###..#..###.#",
        "#.....L#......#",
        "###############",
    ),
    _level(
        "5",
        "###############",
        "#P.....#.....E#",
        "#.###..#..###.#",
        "#..p...H...p..#",
        "#.###..#..###.#",
        "#..L..L#.....H#",
        "###############",
    ),
    _level(
        "6",
        "################",
        "#P.....#.....E#",
        "#.###..#..###.#",
        "#..p...H...p..#",
        "#.###..#..###.#",
        "#..L..L#..H...#",
        "#.....L#......#",
        "################",
    ),
    _level(
        "7",
        "#################",
        "#P....#.......E#",
        "#.##..#.#####..#",
        "#..p..H....p...#",
        "#.##..#.#####..#",
        "#..L..#..L.....#",
        "#.....#.....H..#",
        "#################",
    ),
    _level(
        "8",
        "#################",
        "#P....#.......E#",
        "#.##..#.#####..#",
        "#..p..H..L.p...#",
        "#.##..#.#####..#",
        "#..L..#..L.....#",
        "#.....#..H.....#",
        "#################",
    ),
    _level(
        "9",
        "##################",
        "#P.....#.......E#",
        "#.####.#.#####..#",
        "#..p...H.....p..#",
        "#.####.#.#####..#",
        "#..L..L#..L.....#",
        "#.....H#........#",
        "##################",
    ),
    _level(
        "10",
        "##################",
        "#P.....#.......E#",
        "#.####.#.#####..#",
        "#..p...H..L..p..#",
        "#.####.#.#####..#",
        "#..L..L#..L..H..#",
        "#......#........#",
        "##################",
    ),
)


def get_level(index: int) -> LevelDefinition:
    if not 0 <= index < len(LEVELS):
        raise IndexError(f"Level index {index} out of range (0..{len(LEVELS) - 1})")
    return LEVELS[index]


def level_from_text(name: str, text: str) -> LevelDefinition:
    rows = [line.rstrip() for line in textwrap.dedent(text).splitlines() if line.strip()]
    return LevelDefinition(name=name, rows=tuple(rows))


def normalize_rows(rows: Sequence[str]) -> List[str]:
    """Pad ragged rows with walls up to the widest row."""
    width = max(len(row) for row in rows)
    return [row.ljust(width, WALL) for row in rows]


def parse_level(definition: LevelDefinition) -> PuzzleState:
    """Build the initial state for ``definition``.

    Each cell takes exactly one role; the map is trusted to be well formed.
    A map without a player start falls back to ``DEFAULT_PLAYER_START``.
    """
    if not definition.rows:
        raise ValueError(f"Level {definition.name!r} has no rows")
    lines = normalize_rows(definition.rows)
    height = len(lines)
    width = len(lines[0])

    walls: Set[Coordinate] = set()
    plates: Set[Coordinate] = set()
    blocks: Dict[Coordinate, Block] = {}
    player: Optional[Coordinate] = None
    exit_pos: Optional[Coordinate] = None

    for y, line in enumerate(lines):
        for x, symbol in enumerate(line):
            pos = (x, y)
            if symbol == WALL:
                walls.add(pos)
            elif symbol == PLAYER:
                player = pos
            elif symbol == PLATE:
                plates.add(pos)
            elif symbol == EXIT:
                exit_pos = pos
            elif symbol == LIGHT:
                blocks[pos] = Block(light_count=1)
            elif symbol == HEAVY:
                blocks[pos] = HEAVY_BLOCK

    if player is None:
        logger.warning("Level %r has no player start; using %s", definition.name, DEFAULT_PLAYER_START)
        player = DEFAULT_PLAYER_START
    if exit_pos is None:
        logger.warning("Level %r has no exit", definition.name)

    state = PuzzleState(
        width=width,
        height=height,
        walls=walls,
        plates=plates,
        exit=exit_pos,
        player=player,
    )
    for pos, block in blocks.items():
        state.set_block(pos, block)
    return state
