import hashlib
import math
import time
from collections.abc import Callable, Mapping

from deepscan.config.settings import Settings
from deepscan.logging.logger import Log
from deepscan.ratelimit.base import BaseCounterStore
from deepscan.ratelimit.exceptions import RateLimitExceededError
from deepscan.ratelimit.models import RouteLimit


def client_fingerprint(headers: Mapping[str, str]) -> str:
    """Identify a client by request characteristics rather than its IP.

    Behind a serverless front end every request can arrive from the same
    address, so the key is built from headers that vary between clients.
    """
    parts = (
        headers.get("user-agent", "unknown"),
        headers.get("accept-language", "unknown"),
        headers.get("accept-encoding", "unknown"),
    )
    return hashlib.sha256("|".join(parts).encode("utf-8")).hexdigest()[:32]


class RequestRateLimiter:
    """Fixed-window limiter for inbound HTTP requests, one ceiling per route class.

    Expired counters are swept at most once per SWEEP_INTERVAL_SECONDS, so the
    store stays bounded by the clients seen in the current windows.
    """

    SWEEP_INTERVAL_SECONDS = 60

    def __init__(
        self,
        store: BaseCounterStore,
        limits: dict[str, RouteLimit],
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._limits = limits
        self._clock = clock
        self._last_sweep = clock()

    def hit(self, route_class: str, identity: str) -> int:
        """Count one request and return the count in the current window.

        Raises:
            RateLimitExceededError: if the count exceeds the route class ceiling.
        """
        limit = self._limits.get(route_class)
        if limit is None:
            raise ValueError(
                f"Unknown route class '{route_class}'. Choose from: {list(self._limits)}"
            )
        now = self._clock()
        self._maybe_sweep(now)
        index = math.floor(now / limit.window_seconds)
        key = f"req:{route_class}:{identity}:{index}"
        count = self._store.increment(key, float((index + 1) * limit.window_seconds))
        if count > limit.max_requests:
            reset = self._store.reset_time(key) or float((index + 1) * limit.window_seconds)
            retry_after = max(1, math.ceil(reset - now))
            Log.warning(
                f"Rate limit '{route_class}' exceeded for client {identity} "
                f"({count}/{limit.max_requests}), retry after {retry_after}s"
            )
            raise RateLimitExceededError(
                limit.message,
                retry_after=retry_after,
                error=limit.error,
            )
        return count

    def _maybe_sweep(self, now: float) -> None:
        if now - self._last_sweep < self.SWEEP_INTERVAL_SECONDS:
            return
        self._last_sweep = now
        removed = self._store.sweep()
        if removed:
            Log.debug(f"Swept {removed} expired request counters")


def build_route_limits(settings: Settings) -> dict[str, RouteLimit]:
    """Per-route-class inbound ceilings from settings."""
    return {
        "general": RouteLimit(
            max_requests=settings.general_rate_limit,
            window_seconds=settings.general_rate_window_seconds,
            error="Rate limit exceeded",
            message="Too many requests, please try again later.",
        ),
        "analysis": RouteLimit(
            max_requests=settings.analysis_rate_limit,
            window_seconds=settings.analysis_rate_window_seconds,
            error="Analysis rate limit exceeded",
            message="You have exceeded the analysis limit. "
            "Please wait before uploading more files.",
        ),
        "upload": RouteLimit(
            max_requests=settings.upload_rate_limit,
            window_seconds=settings.upload_rate_window_seconds,
            error="Upload rate limit exceeded",
            message="You have exceeded the upload limit. "
            "Please wait before uploading more files.",
        ),
        "status": RouteLimit(
            max_requests=settings.status_rate_limit,
            window_seconds=settings.status_rate_window_seconds,
            error="Status check rate limit exceeded",
            message="Too many status checks. Please wait before checking again.",
        ),
    }
