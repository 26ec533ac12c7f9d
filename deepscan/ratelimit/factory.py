import time
from collections.abc import Callable

from deepscan.config.settings import Settings
from deepscan.ratelimit.base import BaseCounterStore
from deepscan.ratelimit.limits_store import LimitsCounterStore
from deepscan.ratelimit.memory_store import MemoryCounterStore


class CounterStoreFactory:
    """Creates the configured counter store."""

    @classmethod
    def create(
        cls,
        settings: Settings,
        clock: Callable[[], float] = time.time,
    ) -> BaseCounterStore:
        uri = settings.rate_limit_storage_uri.strip()
        if not uri:
            return MemoryCounterStore(clock=clock)
        return LimitsCounterStore(uri, clock=clock)
