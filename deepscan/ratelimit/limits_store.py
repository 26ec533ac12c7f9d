"""Counter store backed by the `limits` storage backends.

Lets several process instances share counters through redis or memcached,
e.g. RATE_LIMIT_STORAGE_URI=redis://localhost:6379.
"""

import math
import time
from collections.abc import Callable

from limits.storage import storage_from_string

from deepscan.ratelimit.base import BaseCounterStore


class LimitsCounterStore(BaseCounterStore):
    """Adapter from BaseCounterStore onto a `limits` storage."""

    def __init__(
        self,
        storage_uri: str,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._storage = storage_from_string(storage_uri)
        self._clock = clock

    def increment(self, key: str, expires_at: float) -> int:
        expiry = max(1, math.ceil(expires_at - self._clock()))
        return int(self._storage.incr(key, expiry))

    def get(self, key: str) -> int:
        return int(self._storage.get(key))

    def reset_time(self, key: str) -> float | None:
        if self.get(key) == 0:
            return None
        return float(self._storage.get_expiry(key))

    def sweep(self) -> int:
        # The backend expires keys on its own.
        return 0

    def clear(self) -> None:
        self._storage.reset()
