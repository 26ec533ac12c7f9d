from abc import ABC, abstractmethod


class BaseCounterStore(ABC):
    """Contract for window counter storage shared by the rate limiters."""

    @abstractmethod
    def increment(self, key: str, expires_at: float) -> int:
        """Increment the counter for key and return the new count.

        Args:
            key: Fully qualified window key (identity, granularity, index).
            expires_at: Epoch seconds at which a freshly created counter resets.

        Returns:
            The count after incrementing.
        """

    @abstractmethod
    def get(self, key: str) -> int:
        """Return the live count for key, 0 when absent or expired."""

    @abstractmethod
    def reset_time(self, key: str) -> float | None:
        """Return the epoch seconds at which key resets, None when absent."""

    @abstractmethod
    def sweep(self) -> int:
        """Physically remove expired counters. Returns the number removed."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every counter."""
