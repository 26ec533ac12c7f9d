from typing import ClassVar

from deepscan.exceptions import ServiceError
from deepscan.ratelimit.exceptions import RateLimitExceededError


class ProviderError(ServiceError):
    """Base exception for provider adapter errors."""

    status_code: ClassVar[int] = 502
    title: ClassVar[str] = "Provider error"


class ProviderRequestError(ProviderError):
    """Raised when a provider call fails on transport, status or payload."""

    def __init__(self, message: str, *, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status


class ProviderRateLimitError(RateLimitExceededError):
    """Raised when the outbound call budget for a provider is exhausted."""

    title: ClassVar[str] = "External API rate limit exceeded"
