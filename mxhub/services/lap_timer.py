"""Stopwatch arithmetic for lap timing.

All times are integer milliseconds. ``split_time`` is cumulative since the
timer started; ``time`` is the duration of that single lap.
"""

import threading
import time
from dataclasses import asdict, dataclass, field
from typing import Callable, Dict, List, Optional, Tuple


def monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


def format_time(ms: int) -> str:
    """Render milliseconds as ``MM:SS.cc``."""
    minutes = ms // 60000
    seconds = (ms % 60000) // 1000
    centiseconds = (ms % 1000) // 10
    return f"{minutes:02d}:{seconds:02d}.{centiseconds:02d}"


@dataclass(frozen=True)
class Lap:
    number: int
    time: int
    split_time: int

    def to_dict(self) -> dict:
        return asdict(self)


def best_lap_time(laps: List[dict]) -> Optional[int]:
    if not laps:
        return None
    return min(lap["time"] for lap in laps)


def best_lap_number(laps: List[dict]) -> int:
    best = best_lap_time(laps)
    if best is None:
        return 0
    for lap in laps:
        if lap["time"] == best:
            return lap["number"]
    return 0


class TimerStateError(Exception):
    pass


@dataclass
class LapTimer:
    clock: Callable[[], int] = monotonic_ms
    track_id: Optional[str] = None
    laps: List[Lap] = field(default_factory=list)
    running: bool = False
    # Held across every state change; request threads share one timer per rider.
    lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False, compare=False)
    _start_ref: int = field(default=0, init=False, repr=False)
    _last_mark: int = field(default=0, init=False, repr=False)
    _elapsed: int = field(default=0, init=False, repr=False)

    def elapsed(self) -> int:
        with self.lock:
            if self.running:
                return self.clock() - self._start_ref
            return self._elapsed

    def start(self) -> None:
        with self.lock:
            if self.running:
                raise TimerStateError("Timer is already running")
            if self._elapsed == 0:
                self.laps = []
                self._last_mark = 0
            # Resuming keeps the time already on the clock.
            self._start_ref = self.clock() - self._elapsed
            self.running = True

    def lap(self) -> Lap:
        with self.lock:
            if not self.running:
                raise TimerStateError("Timer is not running")
            current = self.clock() - self._start_ref
            lap = Lap(number=len(self.laps) + 1, time=current - self._last_mark, split_time=current)
            self.laps.append(lap)
            self._last_mark = current
            return lap

    def stop(self) -> Tuple[int, List[Lap]]:
        with self.lock:
            if not self.running:
                raise TimerStateError("Timer is not running")
            current = self.clock() - self._start_ref
            lap_time = current - self._last_mark
            if lap_time > 0:
                self.laps.append(Lap(number=len(self.laps) + 1, time=lap_time, split_time=current))
                self._last_mark = current
            self._elapsed = current
            self.running = False
            return current, list(self.laps)

    def finish(self) -> Tuple[int, List[Lap]]:
        """Stop a running timer, or hand back the result of one already stopped.

        A stopped timer keeps its total and laps until ``reset``, so a save
        that failed after ``stop`` can be retried without touching the clock.
        """
        with self.lock:
            if self.running:
                return self.stop()
            if self._elapsed > 0:
                return self._elapsed, list(self.laps)
            raise TimerStateError("Timer is not running")

    def reset(self) -> None:
        with self.lock:
            self.running = False
            self.laps = []
            self._start_ref = 0
            self._last_mark = 0
            self._elapsed = 0

    def snapshot(self) -> dict:
        with self.lock:
            elapsed = self.elapsed()
            return {
                "track_id": self.track_id,
                "running": self.running,
                "elapsed": elapsed,
                "elapsed_display": format_time(elapsed),
                "laps": [lap.to_dict() for lap in self.laps],
            }


class TimerRegistry:
    """One in-process timer per user."""

    def __init__(self, clock: Callable[[], int] = monotonic_ms):
        self._clock = clock
        self._timers: Dict[str, LapTimer] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str) -> Optional[LapTimer]:
        with self._lock:
            return self._timers.get(user_id)

    def get_or_create(self, user_id: str) -> LapTimer:
        with self._lock:
            timer = self._timers.get(user_id)
            if timer is None:
                timer = LapTimer(clock=self._clock)
                self._timers[user_id] = timer
            return timer

    def discard(self, user_id: str) -> None:
        with self._lock:
            self._timers.pop(user_id, None)


timers = TimerRegistry()
