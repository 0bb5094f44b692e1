from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Set, Tuple

import numpy as np


Coordinate = Tuple[int, int]

# Observation plane indices for PuzzleState.to_planes()
PLANE_WALL = 0
PLANE_PLATE = 1
PLANE_EXIT = 2
PLANE_HEAVY = 3
PLANE_LIGHT = 4
PLANE_PLAYER = 5
NUM_PLANES = 6


@dataclass(frozen=True)
class Block:
    heavy: bool = False
    light_count: int = 0  # 0..2

    @property
    def height(self) -> int:
        return self.light_count

    @property
    def is_empty(self) -> bool:
        return not self.heavy and self.light_count == 0


EMPTY_BLOCK = Block()
HEAVY_BLOCK = Block(heavy=True)


@dataclass
class PuzzleState:
    """Snapshot of one level: grid, entities and the won flag.

    ``blocks`` is sparse. A coordinate absent from it holds ``EMPTY_BLOCK``,
    and an empty block is never stored; write through ``set_block`` only.
    """

    width: int
    height: int
    walls: Set[Coordinate] = field(default_factory=set)
    plates: Set[Coordinate] = field(default_factory=set)
    exit: Optional[Coordinate] = None
    player: Coordinate = (1, 1)
    blocks: Dict[Coordinate, Block] = field(default_factory=dict)
    won: bool = False

    def in_bounds(self, pos: Coordinate) -> bool:
        x, y = pos
        return 0 <= x < self.width and 0 <= y < self.height

    def is_wall(self, pos: Coordinate) -> bool:
        return pos in self.walls

    def is_exit(self, pos: Coordinate) -> bool:
        return self.exit is not None and self.exit == pos

    def block_at(self, pos: Coordinate) -> Block:
        return self.blocks.get(pos, EMPTY_BLOCK)

    def height_at(self, pos: Coordinate) -> int:
        return self.block_at(pos).height

    def set_block(self, pos: Coordinate, block: Block) -> None:
        if block.is_empty:
            self.blocks.pop(pos, None)
        else:
            self.blocks[pos] = Block(heavy=bool(block.heavy), light_count=int(block.light_count))

    def clone(self) -> "PuzzleState":
        # Block is frozen, so copying the mapping is enough
        return PuzzleState(
            width=self.width,
            height=self.height,
            walls=set(self.walls),
            plates=set(self.plates),
            exit=self.exit,
            player=self.player,
            blocks=dict(self.blocks),
            won=self.won,
        )

    def to_planes(self) -> np.ndarray:
        planes = np.zeros((NUM_PLANES, self.height, self.width), dtype=np.int8)
        for x, y in self.walls:
            planes[PLANE_WALL, y, x] = 1
        for x, y in self.plates:
            planes[PLANE_PLATE, y, x] = 1
        if self.exit is not None:
            ex, ey = self.exit
            planes[PLANE_EXIT, ey, ex] = 1
        for (x, y), block in self.blocks.items():
            if block.heavy:
                planes[PLANE_HEAVY, y, x] = 1
            planes[PLANE_LIGHT, y, x] = block.light_count
        px, py = self.player
        planes[PLANE_PLAYER, py, px] = 1
        return planes
