import random
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from deepscan.analysis.orchestrator import AnalysisOrchestrator
from deepscan.config.settings import Settings
from deepscan.intake.file_intake import FileIntake
from deepscan.providers import ProviderFactory
from deepscan.providers.credential_check import SightengineCredentialChecker
from deepscan.ratelimit import ApiRateLimiter, CounterStoreFactory, RequestRateLimiter
from deepscan.ratelimit.api_limiter import build_api_limits
from deepscan.ratelimit.request_limiter import build_route_limits


@dataclass
class Services:
    """Collaborators shared by every request handled by one app instance."""

    settings: Settings
    intake: FileIntake
    orchestrator: AnalysisOrchestrator
    api_limiter: ApiRateLimiter
    request_limiter: RequestRateLimiter
    credential_checker: SightengineCredentialChecker


def build_services(
    settings: Settings,
    clock: Callable[[], float] = time.time,
    rng: random.Random | None = None,
) -> Services:
    """Build the request pipeline with all required adapters."""
    store = CounterStoreFactory.create(settings, clock=clock)
    api_limiter = ApiRateLimiter(store, build_api_limits(settings), clock=clock)
    request_limiter = RequestRateLimiter(store, build_route_limits(settings), clock=clock)
    intake = FileIntake(Path(settings.upload_dir), settings.max_upload_bytes, clock=clock)
    adapters = ProviderFactory.create(settings, api_limiter, rng=rng)
    orchestrator = AnalysisOrchestrator(
        adapters=adapters,
        intake=intake,
        threshold=settings.deepfake_threshold,
    )
    return Services(
        settings=settings,
        intake=intake,
        orchestrator=orchestrator,
        api_limiter=api_limiter,
        request_limiter=request_limiter,
        credential_checker=ProviderFactory.create_credential_checker(settings),
    )
