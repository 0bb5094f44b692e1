from __future__ import annotations

import json
import logging
import math
import time
from pathlib import Path
from typing import Callable, Dict, Optional, Protocol, Union


logger = logging.getLogger(__name__)


def best_key(level_index: int) -> str:
    return f"level_{level_index}"


class TimeStore(Protocol):
    def get(self, level_key: str) -> Optional[float]: ...

    def record(self, level_key: str, seconds: float) -> bool: ...


class MemoryTimeStore:
    """Best completion times kept in memory only."""

    def __init__(self) -> None:
        self._times: Dict[str, float] = {}

    def get(self, level_key: str) -> Optional[float]:
        return self._times.get(level_key)

    def record(self, level_key: str, seconds: float) -> bool:
        prev = self.get(level_key)
        if prev is not None and seconds >= prev:
            return False
        self._times[level_key] = float(seconds)
        return True


class BestTimeStore(MemoryTimeStore):
    """Best completion times persisted as a JSON object on disk.

    Unreadable or unwritable files never raise; reads fall back to no record
    and failed writes keep the in-memory value only.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        super().__init__()
        self.path = Path(path)
        self._times = self._load()

    def _load(self) -> Dict[str, float]:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("Could not read best times from %s: %s", self.path, exc)
            return {}
        if not isinstance(raw, dict):
            logger.warning("Ignoring malformed best times file %s", self.path)
            return {}
        times: Dict[str, float] = {}
        for key, value in raw.items():
            try:
                seconds = float(value)
            except (TypeError, ValueError):
                continue
            if math.isfinite(seconds):
                times[str(key)] = seconds
        return times

    def record(self, level_key: str, seconds: float) -> bool:
        improved = super().record(level_key, seconds)
        if improved:
            self._save()
        return improved

    def _save(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self._times, indent=2, sort_keys=True), encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not write best times to %s: %s", self.path, exc)


class LevelTimer:
    """Elapsed play time for one attempt at a level.

    Starts on the first intent and freezes once stopped (on a win).
    """

    def __init__(self, clock: Callable[[], float] = time.perf_counter) -> None:
        self._clock = clock
        self._start: Optional[float] = None
        self._stopped_at: Optional[float] = None

    @property
    def started(self) -> bool:
        return self._start is not None

    @property
    def running(self) -> bool:
        return self._start is not None and self._stopped_at is None

    @property
    def elapsed(self) -> float:
        if self._start is None:
            return 0.0
        end = self._stopped_at if self._stopped_at is not None else self._clock()
        return end - self._start

    def start(self) -> None:
        if self._start is None:
            self._start = self._clock()

    def stop(self) -> float:
        if self._start is not None and self._stopped_at is None:
            self._stopped_at = self._clock()
        return self.elapsed

    def resume(self) -> None:
        self._stopped_at = None

    def reset(self) -> None:
        self._start = None
        self._stopped_at = None
