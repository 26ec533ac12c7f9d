from typing import ClassVar

from deepscan.exceptions import ServiceError


class RateLimitError(ServiceError):
    """Base exception for rate limiting."""

    status_code: ClassVar[int] = 429
    title: ClassVar[str] = "Rate limit exceeded"


class RateLimitExceededError(RateLimitError):
    """Raised when a caller is over a ceiling. Carries a retry-after hint."""

    def __init__(self, message: str, *, retry_after: int, error: str | None = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after
        self.error = error or self.title
