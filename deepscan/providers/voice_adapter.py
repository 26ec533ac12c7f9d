import asyncio
from pathlib import Path

from deepscan.logging.logger import Log
from deepscan.providers.base import BaseProviderAdapter
from deepscan.providers.models import NormalizedProviderResult
from deepscan.providers.synthetic import SyntheticResultFactory


class SyntheticVoiceAdapter(BaseProviderAdapter):
    """Stand-in for a voice-synthesis detector.

    No real integration exists yet; a Resemble adapter should implement the
    same contract as SightengineAdapter and replace this one in the factory.
    """

    def __init__(
        self,
        *,
        synthesizer: SyntheticResultFactory,
        delay_seconds: float = 2.0,
        api_key_configured: bool = False,
    ) -> None:
        self._synthesizer = synthesizer
        self._delay_seconds = delay_seconds
        self._api_key_configured = api_key_configured

    async def analyze(self, file_path: Path) -> NormalizedProviderResult:
        Log.info(
            f"Analyzing audio {file_path.name} in demo mode "
            f"(resemble key {'set' if self._api_key_configured else 'missing'})"
        )
        await asyncio.sleep(self._delay_seconds)
        return self._synthesizer.voice()
