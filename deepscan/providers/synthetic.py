"""Synthetic stand-in results.

These are placeholders shown while a provider is unavailable, not detectors.
"""

import random
from typing import Literal

from deepscan.providers.models import SyntheticResult

MediaKind = Literal["image", "video"]

_VISION_METADATA: dict[str, dict[str, object]] = {
    "image": {"width": 1024, "height": 768, "format": "demo"},
    "video": {"duration": 15.6, "fps": 30, "resolution": "1920x1080"},
}

_VOICE_METADATA: dict[str, object] = {
    "duration": 8.5,
    "sample_rate": 44100,
    "channels": 2,
}


class SyntheticResultFactory:
    """Builds demo-mode results from an injectable random source."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()

    def vision(self, media_kind: MediaKind, reason: str) -> SyntheticResult:
        """Roughly 20% flagged (0.7-1.0), otherwise authentic-looking (0.1-0.5)."""
        flagged = self._rng.random() > 0.8
        if flagged:
            score = self._rng.uniform(0.7, 1.0)
        else:
            score = self._rng.uniform(0.1, 0.5)
        label = "deepfake detection" if flagged else f"authentic {media_kind}"
        return SyntheticResult(
            score=score,
            note=f"Fallback demo: Simulated {label}",
            metadata=dict(_VISION_METADATA[media_kind]),
            reason=reason,
        )

    def voice(self) -> SyntheticResult:
        """Roughly 50/50; confidence 0.70-0.95 if synthetic, 0.75-0.95 if authentic."""
        is_synthetic = self._rng.random() > 0.5
        if is_synthetic:
            confidence = self._rng.uniform(0.70, 0.95)
        else:
            confidence = self._rng.uniform(0.75, 0.95)
        label = "synthetic voice detection" if is_synthetic else "authentic voice"
        return SyntheticResult(
            score=confidence,
            note=f"Demo mode: Simulated {label}",
            metadata=dict(_VOICE_METADATA),
            is_synthetic=is_synthetic,
        )
