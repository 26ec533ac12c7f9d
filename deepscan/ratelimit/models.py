from dataclasses import dataclass

# (window name, window size in seconds)
WINDOWS: tuple[tuple[str, int], ...] = (
    ("minute", 60),
    ("hour", 3600),
    ("day", 86400),
)


@dataclass(frozen=True)
class ServiceLimits:
    """Call ceilings for one external service."""

    per_minute: int
    per_hour: int
    per_day: int

    def ceiling(self, window: str) -> int:
        return {
            "minute": self.per_minute,
            "hour": self.per_hour,
            "day": self.per_day,
        }[window]


@dataclass(frozen=True)
class RemainingCalls:
    """Calls left in each window; next_reset is the minute window's reset (epoch seconds)."""

    minute: int
    hour: int
    day: int
    next_reset: float


@dataclass(frozen=True)
class RouteLimit:
    """Inbound ceiling for one route class."""

    max_requests: int
    window_seconds: int
    error: str
    message: str
