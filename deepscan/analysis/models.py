from dataclasses import dataclass, field
from typing import Any, Literal

AnalysisType = Literal["image", "video", "audio"]


@dataclass(frozen=True)
class AnalysisResult:
    """Unified verdict returned to API clients.

    provider_data is rendered as sightengineData for image/video and as
    resembleData for audio, never both.
    """

    type: AnalysisType
    is_deepfake: bool
    confidence: float
    analysis_time_ms: int
    metadata: dict[str, Any] = field(default_factory=dict)
    provider_data: dict[str, Any] = field(default_factory=dict)

    @property
    def provider_field(self) -> str:
        return "resembleData" if self.type == "audio" else "sightengineData"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "isDeepfake": self.is_deepfake,
            "confidence": self.confidence,
            "analysisTime": self.analysis_time_ms,
            "metadata": self.metadata,
            self.provider_field: self.provider_data,
        }
