from dataclasses import dataclass, field
from typing import Any, Literal


@dataclass(frozen=True)
class ProviderResult:
    """Score returned by a real provider call."""

    score: float
    metadata: dict[str, Any] = field(default_factory=dict)
    raw_response: dict[str, Any] = field(default_factory=dict)
    kind: Literal["provider"] = "provider"


@dataclass(frozen=True)
class SyntheticResult:
    """Placeholder score produced when no real provider result is available.

    is_synthetic carries an explicit verdict for stand-ins that decide on their
    own (the voice stand-in); None means the score is compared to the threshold.
    """

    score: float
    note: str
    metadata: dict[str, Any] = field(default_factory=dict)
    reason: str = ""
    is_synthetic: bool | None = None
    kind: Literal["synthetic"] = "synthetic"


NormalizedProviderResult = ProviderResult | SyntheticResult
