from abc import ABC, abstractmethod
from pathlib import Path

from deepscan.providers.models import NormalizedProviderResult


class BaseProviderAdapter(ABC):
    """Contract for all media analysis provider adapters."""

    @abstractmethod
    async def analyze(self, file_path: Path) -> NormalizedProviderResult:
        """Score a media file for manipulation.

        Args:
            file_path: Path to the transient upload.

        Returns:
            ProviderResult from a real call, or SyntheticResult when the
            provider is unavailable.

        Raises:
            ProviderRateLimitError: if the outbound call budget is exhausted.
            IntakeError: if the file cannot be sent to the provider as-is.
        """
