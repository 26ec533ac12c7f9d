from deepscan.providers.base import BaseProviderAdapter
from deepscan.providers.factory import ProviderFactory
from deepscan.providers.models import NormalizedProviderResult, ProviderResult, SyntheticResult

__all__ = [
    "BaseProviderAdapter",
    "NormalizedProviderResult",
    "ProviderFactory",
    "ProviderResult",
    "SyntheticResult",
]
