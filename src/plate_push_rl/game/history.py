from __future__ import annotations

from collections import deque
from typing import Deque, Optional

from .grid import PuzzleState


DEFAULT_HISTORY_LIMIT = 200


class HistoryStack:
    """Bounded undo log of independent state snapshots.

    Pushing past ``max_length`` drops the oldest snapshot. There is no redo.
    """

    def __init__(self, max_length: int = DEFAULT_HISTORY_LIMIT) -> None:
        if max_length < 1:
            raise ValueError(f"max_length must be positive, got {max_length}")
        self.max_length = int(max_length)
        self._snapshots: Deque[PuzzleState] = deque(maxlen=self.max_length)

    def push(self, state: PuzzleState) -> None:
        self._snapshots.append(state.clone())

    def pop(self) -> Optional[PuzzleState]:
        if not self._snapshots:
            return None
        return self._snapshots.pop()

    def clear(self) -> None:
        self._snapshots.clear()

    def __len__(self) -> int:
        return len(self._snapshots)

    def __bool__(self) -> bool:
        return bool(self._snapshots)
