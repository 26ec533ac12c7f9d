import time
from collections.abc import Callable, Mapping
from typing import Any

from deepscan.analysis.models import AnalysisResult, AnalysisType
from deepscan.intake.exceptions import UnsupportedFileTypeError
from deepscan.intake.file_intake import FileIntake
from deepscan.intake.models import UploadedFile
from deepscan.logging.logger import Log
from deepscan.providers.base import BaseProviderAdapter
from deepscan.providers.models import NormalizedProviderResult, ProviderResult, SyntheticResult


class AnalysisOrchestrator:
    """Dispatches an upload to its provider adapter and assembles the verdict.

    Pipeline: dispatch -> analyze -> assemble, with the transient file deleted
    on every path.
    """

    def __init__(
        self,
        adapters: Mapping[str, BaseProviderAdapter],
        intake: FileIntake,
        threshold: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._adapters = adapters
        self._intake = intake
        self._threshold = threshold
        self._clock = clock

    async def handle(self, uploaded: UploadedFile) -> AnalysisResult:
        """Analyze an uploaded file and always delete it afterwards.

        Raises:
            UnsupportedFileTypeError: if no adapter handles the file's category.
        """
        try:
            category = uploaded.category
            adapter = self._adapters.get(category)
            if category == "unsupported" or adapter is None:
                raise UnsupportedFileTypeError(f"Unsupported file type: {uploaded.mime_type}")

            Log.info(f"Analyzing {category} '{uploaded.original_name}' ({uploaded.size_bytes} bytes)")
            started = self._clock()
            provider_result = await adapter.analyze(uploaded.path)
            elapsed_ms = int((self._clock() - started) * 1000)

            result = self._assemble(category, provider_result, elapsed_ms)
            Log.info(
                f"Analysis of '{uploaded.original_name}' complete: "
                f"deepfake={result.is_deepfake} confidence={result.confidence:.3f} "
                f"demo={provider_result.kind == 'synthetic'} in {elapsed_ms}ms"
            )
            return result
        finally:
            await self._intake.discard(uploaded)

    def _assemble(
        self,
        category: AnalysisType,
        provider_result: NormalizedProviderResult,
        elapsed_ms: int,
    ) -> AnalysisResult:
        if isinstance(provider_result, SyntheticResult) and provider_result.is_synthetic is not None:
            is_deepfake = provider_result.is_synthetic
        else:
            is_deepfake = provider_result.score > self._threshold

        if category == "audio":
            provider_data = self._voice_payload(provider_result, is_deepfake)
        else:
            provider_data = self._vision_payload(provider_result)
        return AnalysisResult(
            type=category,
            is_deepfake=is_deepfake,
            confidence=provider_result.score,
            analysis_time_ms=elapsed_ms,
            metadata=provider_result.metadata,
            provider_data=provider_data,
        )

    @staticmethod
    def _vision_payload(result: NormalizedProviderResult) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "status": "success",
            "deepfake": {"prob": result.score, "deepfake_score": result.score},
            "metadata": result.metadata,
        }
        if isinstance(result, ProviderResult):
            payload["raw_response"] = result.raw_response
            payload["detection_details"] = {"face_deepfake": result.score}
        else:
            payload["demo_mode"] = True
            payload["error_message"] = result.reason
            payload["demo_note"] = result.note
        return payload

    @staticmethod
    def _voice_payload(result: NormalizedProviderResult, is_synthetic: bool) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "status": "success",
            "is_synthetic": is_synthetic,
            "confidence": result.score,
            "metadata": result.metadata,
        }
        if isinstance(result, ProviderResult):
            payload["raw_response"] = result.raw_response
        else:
            payload["demo_mode"] = True
            payload["demo_note"] = result.note
        return payload
