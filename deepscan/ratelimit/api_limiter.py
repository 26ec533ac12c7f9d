import math
import time
from collections.abc import Callable

from deepscan.config.settings import Settings
from deepscan.logging.logger import Log
from deepscan.ratelimit.base import BaseCounterStore
from deepscan.ratelimit.models import WINDOWS, RemainingCalls, ServiceLimits


class ApiRateLimiter:
    """Tracks outbound calls to third-party APIs over minute/hour/day windows.

    Callers check with can_make_call() and call record_call() on the path that
    actually performs the external request. The two steps are not atomic, so
    concurrent requests can overshoot a ceiling by a small margin.
    """

    def __init__(
        self,
        store: BaseCounterStore,
        limits: dict[str, ServiceLimits],
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._limits = limits
        self._clock = clock

    def can_make_call(self, service: str) -> bool:
        """Return False if any window for service is at its ceiling. Does not mutate."""
        limits = self._service_limits(service)
        now = self._clock()
        for window, size in WINDOWS:
            if self._store.get(self._key(service, window, size, now)) >= limits.ceiling(window):
                return False
        return True

    def record_call(self, service: str) -> None:
        """Count one call in every window and sweep expired counters."""
        self._service_limits(service)
        now = self._clock()
        for window, size in WINDOWS:
            self._store.increment(
                self._key(service, window, size, now),
                self._window_end(size, now),
            )
        removed = self._store.sweep()
        if removed:
            Log.debug(f"Swept {removed} expired rate limit counters")

    def remaining(self, service: str) -> RemainingCalls:
        limits = self._service_limits(service)
        now = self._clock()
        left: dict[str, int] = {}
        for window, size in WINDOWS:
            used = self._store.get(self._key(service, window, size, now))
            left[window] = max(0, limits.ceiling(window) - used)
        minute_size = WINDOWS[0][1]
        next_reset = self._store.reset_time(self._key(service, "minute", minute_size, now))
        return RemainingCalls(
            minute=left["minute"],
            hour=left["hour"],
            day=left["day"],
            next_reset=next_reset if next_reset is not None else self._window_end(minute_size, now),
        )

    def retry_after(self, service: str) -> int:
        """Seconds until the nearest exhausted window resets, at least 1."""
        limits = self._service_limits(service)
        now = self._clock()
        resets: list[float] = []
        for window, size in WINDOWS:
            key = self._key(service, window, size, now)
            if self._store.get(key) >= limits.ceiling(window):
                reset = self._store.reset_time(key)
                resets.append(reset if reset is not None else self._window_end(size, now))
        if not resets:
            return 1
        return max(1, math.ceil(min(resets) - now))

    def reset(self) -> None:
        """Clear every counter (admin/testing)."""
        self._store.clear()
        Log.info("Rate limits reset successfully")

    def _service_limits(self, service: str) -> ServiceLimits:
        limits = self._limits.get(service)
        if limits is None:
            raise ValueError(
                f"Unknown rate limited service '{service}'. Choose from: {list(self._limits)}"
            )
        return limits

    @staticmethod
    def _key(service: str, window: str, size: int, now: float) -> str:
        return f"api:{service}:{window}:{math.floor(now / size)}"

    @staticmethod
    def _window_end(size: int, now: float) -> float:
        return float((math.floor(now / size) + 1) * size)


def build_api_limits(settings: Settings) -> dict[str, ServiceLimits]:
    """Per-service outbound ceilings from settings."""
    return {
        "sightengine": ServiceLimits(
            per_minute=settings.sightengine_calls_per_minute,
            per_hour=settings.sightengine_calls_per_hour,
            per_day=settings.sightengine_calls_per_day,
        ),
        "resemble": ServiceLimits(
            per_minute=settings.resemble_calls_per_minute,
            per_hour=settings.resemble_calls_per_hour,
            per_day=settings.resemble_calls_per_day,
        ),
    }
