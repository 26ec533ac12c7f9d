import random

from deepscan.config.settings import Settings
from deepscan.providers.base import BaseProviderAdapter
from deepscan.providers.credential_check import SightengineCredentialChecker
from deepscan.providers.sightengine_adapter import SightengineAdapter
from deepscan.providers.synthetic import SyntheticResultFactory
from deepscan.providers.voice_adapter import SyntheticVoiceAdapter
from deepscan.ratelimit.api_limiter import ApiRateLimiter


class ProviderFactory:
    """Creates the adapter for each analysis category."""

    @classmethod
    def create(
        cls,
        settings: Settings,
        limiter: ApiRateLimiter,
        rng: random.Random | None = None,
    ) -> dict[str, BaseProviderAdapter]:
        """Map image/video/audio onto configured adapters sharing one random source."""
        synthesizer = SyntheticResultFactory(rng)
        return {
            "image": SightengineAdapter(
                media_kind="image",
                api_user=settings.sightengine_user,
                api_secret=settings.sightengine_secret,
                base_url=settings.sightengine_api_url,
                timeout_seconds=settings.sightengine_image_timeout_seconds,
                limiter=limiter,
                synthesizer=synthesizer,
                max_bytes=settings.provider_image_max_bytes,
            ),
            "video": SightengineAdapter(
                media_kind="video",
                api_user=settings.sightengine_user,
                api_secret=settings.sightengine_secret,
                base_url=settings.sightengine_api_url,
                timeout_seconds=settings.sightengine_video_timeout_seconds,
                limiter=limiter,
                synthesizer=synthesizer,
            ),
            "audio": SyntheticVoiceAdapter(
                synthesizer=synthesizer,
                delay_seconds=settings.audio_demo_delay_seconds,
                api_key_configured=settings.resemble_configured,
            ),
        }

    @classmethod
    def create_credential_checker(cls, settings: Settings) -> SightengineCredentialChecker:
        return SightengineCredentialChecker(
            api_user=settings.sightengine_user,
            api_secret=settings.sightengine_secret,
            base_url=settings.sightengine_api_url,
            test_image_url=settings.sightengine_test_image_url,
            timeout_seconds=settings.sightengine_test_timeout_seconds,
        )
