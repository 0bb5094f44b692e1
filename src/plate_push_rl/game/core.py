from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Callable, List, Optional, Sequence, Tuple

from .grid import EMPTY_BLOCK, HEAVY_BLOCK, Block, Coordinate, PuzzleState
from .history import DEFAULT_HISTORY_LIMIT, HistoryStack
from .levels import LEVELS, LevelDefinition, parse_level
from .records import LevelTimer, MemoryTimeStore, TimeStore, best_key
from .rules import active_plate_count, can_climb, can_merge, can_stand_on, is_exit_open


logger = logging.getLogger(__name__)


class Direction(IntEnum):
    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3

    @property
    def vector(self) -> Coordinate:
        return _VECTORS[self]


_VECTORS = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


class Outcome(Enum):
    BLOCKED = "blocked"
    MOVED = "moved"
    PUSHED = "pushed"
    WON = "won"


class GameEvent(Enum):
    BLOCKED = "blocked"
    MOVED = "moved"
    PUSHED = "pushed"
    PLATE_ACTIVATED = "plate-activated"
    EXIT_OPENED = "exit-opened"
    WON = "won"


_OUTCOME_EVENTS = {
    Outcome.BLOCKED: GameEvent.BLOCKED,
    Outcome.MOVED: GameEvent.MOVED,
    Outcome.PUSHED: GameEvent.PUSHED,
    Outcome.WON: GameEvent.WON,
}


def _step(pos: Coordinate, direction: Direction) -> Coordinate:
    dx, dy = direction.vector
    return pos[0] + dx, pos[1] + dy


def _passable(state: PuzzleState, pos: Coordinate) -> bool:
    return state.in_bounds(pos) and not state.is_wall(pos)


def attempt_move(state: PuzzleState, direction: Direction, history: Optional[HistoryStack] = None) -> Outcome:
    """Resolve one step of the player in ``direction``, mutating ``state``.

    Every check runs before anything is written. An accepted move pushes the
    pre-move snapshot onto ``history`` and is then applied in full; a blocked
    move leaves both ``state`` and ``history`` untouched.
    """
    if state.won:
        return Outcome.BLOCKED

    dest = _step(state.player, direction)
    if not _passable(state, dest):
        return Outcome.BLOCKED

    from_height = state.height_at(state.player)

    if state.is_exit(dest):
        if not is_exit_open(state) or not state.block_at(dest).is_empty:
            return Outcome.BLOCKED
        if history is not None:
            history.push(state)
        state.player = dest
        state.won = True
        return Outcome.WON

    target = state.block_at(dest)
    if target.is_empty:
        if not can_stand_on(state, dest, from_height):
            return Outcome.BLOCKED
        if history is not None:
            history.push(state)
        state.player = dest
        return Outcome.MOVED

    beyond = _step(dest, direction)
    if not _passable(state, beyond):
        return Outcome.BLOCKED
    if state.is_exit(beyond) and not is_exit_open(state):
        return Outcome.BLOCKED

    resting = state.block_at(beyond)
    if target.heavy:
        if not resting.is_empty:
            return Outcome.BLOCKED
        landed = HEAVY_BLOCK
    elif target.light_count > 0:
        if resting.heavy or not can_merge(target.light_count, resting.light_count):
            return Outcome.BLOCKED
        landed = Block(light_count=target.light_count + resting.light_count)
    else:
        return Outcome.BLOCKED

    # The pushed tile is empty once the block leaves it
    if not can_climb(EMPTY_BLOCK.height, from_height):
        return Outcome.BLOCKED

    if history is not None:
        history.push(state)
    state.set_block(beyond, landed)
    state.set_block(dest, EMPTY_BLOCK)
    state.player = dest
    return Outcome.PUSHED


@dataclass
class GameConfig:
    level_index: int = 0
    history_limit: int = DEFAULT_HISTORY_LIMIT


@dataclass(frozen=True)
class MoveResult:
    outcome: Outcome
    events: Tuple[GameEvent, ...]
    state: PuzzleState

    @property
    def accepted(self) -> bool:
        return self.outcome is not Outcome.BLOCKED


Observer = Callable[[MoveResult], None]


class PuzzleSession:
    """Live puzzle state for one player, with undo, timing and records.

    Observers receive a ``MoveResult`` after every resolved intent and only
    ever see cloned states.
    """

    _state: PuzzleState

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        levels: Sequence[LevelDefinition] = LEVELS,
        store: Optional[TimeStore] = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.config = config or GameConfig()
        self.levels = tuple(levels)
        self.store: TimeStore = store if store is not None else MemoryTimeStore()
        self.history = HistoryStack(self.config.history_limit)
        self.timer = LevelTimer(clock)
        self.level_index = self.config.level_index
        self.best_time: Optional[float] = None
        self._observers: List[Observer] = []
        self._last_active_plates = 0
        self._last_exit_open = False
        self.load_level(self.level_index)

    @property
    def state(self) -> PuzzleState:
        return self._state

    @property
    def level(self) -> LevelDefinition:
        return self.levels[self.level_index]

    @property
    def active_plate_count(self) -> int:
        return active_plate_count(self.state)

    @property
    def is_exit_open(self) -> bool:
        return is_exit_open(self.state)

    @property
    def won(self) -> bool:
        return self.state.won

    def snapshot(self) -> PuzzleState:
        return self.state.clone()

    def subscribe(self, observer: Observer) -> None:
        self._observers.append(observer)

    def unsubscribe(self, observer: Observer) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def load_level(self, index: int) -> None:
        if not 0 <= index < len(self.levels):
            raise IndexError(f"Level index {index} out of range (0..{len(self.levels) - 1})")
        self.level_index = index
        self.history.clear()
        self._state = parse_level(self.levels[index])
        self.timer.reset()
        self.best_time = self._read_best()
        self._sync_markers()
        logger.info("Loaded level %s (%dx%d)", self.level.name, self.state.width, self.state.height)

    def reset_level(self) -> None:
        self.load_level(self.level_index)

    def next_level(self) -> None:
        self.load_level((self.level_index + 1) % len(self.levels))

    def previous_level(self) -> None:
        self.load_level((self.level_index - 1) % len(self.levels))

    def move(self, direction: Direction) -> MoveResult:
        state = self.state
        if not state.won:
            self.timer.start()

        outcome = attempt_move(state, direction, self.history)
        events = [_OUTCOME_EVENTS[outcome]]
        if outcome in (Outcome.MOVED, Outcome.PUSHED):
            events.extend(self._transition_events())
        elif outcome is Outcome.WON:
            self._on_win()

        if outcome is not Outcome.BLOCKED:
            logger.debug("%s %s -> player %s", direction.name, outcome.value, state.player)
        result = MoveResult(outcome=outcome, events=tuple(events), state=state.clone())
        self._notify(result)
        return result

    def undo(self) -> bool:
        prev = self.history.pop()
        if prev is None:
            return False
        was_won = self.state.won
        self._state = prev
        if was_won and not prev.won:
            self.timer.resume()
        self._sync_markers()
        return True

    def _transition_events(self) -> List[GameEvent]:
        events: List[GameEvent] = []
        now_active = active_plate_count(self.state)
        now_open = is_exit_open(self.state)
        if now_active > self._last_active_plates:
            events.append(GameEvent.PLATE_ACTIVATED)
        if now_open and not self._last_exit_open:
            events.append(GameEvent.EXIT_OPENED)
        self._last_active_plates = now_active
        self._last_exit_open = now_open
        return events

    def _sync_markers(self) -> None:
        self._last_active_plates = active_plate_count(self.state)
        self._last_exit_open = is_exit_open(self.state)

    def _on_win(self) -> None:
        seconds = self.timer.stop()
        logger.info("Level %s solved in %.2fs", self.level.name, seconds)
        key = best_key(self.level_index)
        try:
            if self.store.record(key, seconds):
                logger.info("New best time for level %s: %.2fs", self.level.name, seconds)
            self.best_time = self.store.get(key)
        except Exception:
            logger.exception("Best time store failed for %s", key)

    def _read_best(self) -> Optional[float]:
        try:
            return self.store.get(best_key(self.level_index))
        except Exception:
            logger.exception("Best time store failed for level %d", self.level_index)
            return None

    def _notify(self, result: MoveResult) -> None:
        for observer in list(self._observers):
            try:
                observer(result)
            except Exception:
                logger.exception("Move observer %r failed", observer)
