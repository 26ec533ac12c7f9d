import time
from collections.abc import Callable
from dataclasses import dataclass

from deepscan.ratelimit.base import BaseCounterStore


@dataclass
class WindowCounter:
    """Count of calls observed in one window and when that window resets."""

    count: int
    reset_time: float


class MemoryCounterStore(BaseCounterStore):
    """Process-local counter table.

    Counters are not coordinated across process instances. Mutations are plain
    dict operations, safe under a single event loop; a multi-threaded server
    would need a lock around increment.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._counters: dict[str, WindowCounter] = {}

    def increment(self, key: str, expires_at: float) -> int:
        counter = self._live(key)
        if counter is None:
            counter = WindowCounter(count=0, reset_time=expires_at)
            self._counters[key] = counter
        counter.count += 1
        return counter.count

    def get(self, key: str) -> int:
        counter = self._live(key)
        return counter.count if counter is not None else 0

    def reset_time(self, key: str) -> float | None:
        counter = self._live(key)
        return counter.reset_time if counter is not None else None

    def sweep(self) -> int:
        now = self._clock()
        expired = [key for key, c in self._counters.items() if c.reset_time <= now]
        for key in expired:
            del self._counters[key]
        return len(expired)

    def clear(self) -> None:
        self._counters.clear()

    def __len__(self) -> int:
        return len(self._counters)

    def _live(self, key: str) -> WindowCounter | None:
        counter = self._counters.get(key)
        if counter is None or counter.reset_time <= self._clock():
            return None
        return counter
