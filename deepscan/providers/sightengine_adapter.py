import json
import mimetypes
from pathlib import Path
from typing import Any, ClassVar

import anyio
import httpx

from deepscan.intake.exceptions import EmptyFileError, FileTooLargeError
from deepscan.logging.logger import Log
from deepscan.providers.base import BaseProviderAdapter
from deepscan.providers.exceptions import ProviderRateLimitError, ProviderRequestError
from deepscan.providers.models import NormalizedProviderResult, ProviderResult
from deepscan.providers.score_extraction import extract_score, extract_video_score, lookup
from deepscan.providers.synthetic import MediaKind, SyntheticResultFactory
from deepscan.ratelimit.api_limiter import ApiRateLimiter

SERVICE = "sightengine"


def classify_failure(status_code: int, detail: str) -> str:
    """Turn a provider HTTP status into a human-readable diagnostic."""
    if status_code == 400:
        return "Bad request - check file format and size"
    if status_code in (401, 403):
        return "Authentication failed - check API credentials"
    if status_code == 413:
        return "File too large - exceeds API limits"
    return f"HTTP {status_code}: {detail}"


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase
    message = lookup(body, ("error", "message")) or lookup(body, ("error",))
    return str(message) if message else response.reason_phrase


def _first_present(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return "unknown"


class SightengineAdapter(BaseProviderAdapter):
    """Image/video deepfake scoring through the Sightengine API.

    Provider failures never fail the request: they are logged, classified and
    degraded to a synthetic result. Only an exhausted outbound budget and
    media the provider can never accept are raised.
    """

    MODELS = "deepfake"
    ENDPOINTS: ClassVar[dict[str, str]] = {
        "image": "check.json",
        "video": "video/check-sync.json",
    }

    def __init__(
        self,
        *,
        media_kind: MediaKind,
        api_user: str,
        api_secret: str,
        base_url: str,
        timeout_seconds: float,
        limiter: ApiRateLimiter,
        synthesizer: SyntheticResultFactory,
        max_bytes: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._media_kind = media_kind
        self._api_user = api_user
        self._api_secret = api_secret
        self._url = f"{base_url.rstrip('/')}/{self.ENDPOINTS[media_kind]}"
        self._timeout_seconds = timeout_seconds
        self._limiter = limiter
        self._synthesizer = synthesizer
        self._max_bytes = max_bytes
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self._api_user and self._api_secret)

    async def analyze(self, file_path: Path) -> NormalizedProviderResult:
        if not self.configured:
            Log.info(
                f"Sightengine credentials missing. Using {self._media_kind} demo fallback."
            )
            return self._synthesizer.vision(
                self._media_kind, "Sightengine API credentials not configured"
            )

        await self._check_size(file_path)
        if not self._limiter.can_make_call(SERVICE):
            raise ProviderRateLimitError(
                f"Rate limit exceeded for {SERVICE} API. Please try again later.",
                retry_after=self._limiter.retry_after(SERVICE),
            )

        media = await anyio.Path(file_path).read_bytes()
        self._limiter.record_call(SERVICE)
        try:
            payload = await self._submit(file_path, media)
        except ProviderRequestError as exc:
            Log.warning(
                f"Sightengine {self._media_kind} analysis failed ({exc}), "
                "falling back to demo mode"
            )
            return self._synthesizer.vision(self._media_kind, str(exc))
        return self._build_result(payload)

    async def _check_size(self, file_path: Path) -> None:
        size = (await anyio.Path(file_path).stat()).st_size
        if size == 0:
            raise EmptyFileError("Uploaded file is empty")
        if self._max_bytes is not None and size > self._max_bytes:
            raise FileTooLargeError(
                f"File size exceeds {self._max_bytes // (1024 * 1024)}MB limit"
            )

    async def _submit(self, file_path: Path, media: bytes) -> dict[str, Any]:
        content_type = mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
        Log.info(
            f"Sending {self._media_kind} to Sightengine: url={self._url} "
            f"models={self.MODELS} api_user={self._api_user} "
            f"size={len(media)} bytes content_type={content_type}"
        )
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self._url,
                    data={
                        "api_user": self._api_user,
                        "api_secret": self._api_secret,
                        "models": self.MODELS,
                    },
                    files={"media": (f"{self._media_kind}{file_path.suffix}", media, content_type)},
                )
                Log.info(f"Sightengine responded with HTTP {response.status_code}")
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            Log.warning(f"Sightengine error body: {exc.response.text[:1000]}")
            raise ProviderRequestError(
                classify_failure(status_code, _error_detail(exc.response)),
                upstream_status=status_code,
            ) from exc
        except httpx.TimeoutException as exc:
            raise ProviderRequestError(
                f"Sightengine request timed out after {self._timeout_seconds}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderRequestError(f"Sightengine network error: {exc}") from exc
        except ValueError as exc:
            raise ProviderRequestError("Sightengine returned a non-JSON response") from exc

        if not isinstance(payload, dict):
            raise ProviderRequestError("Sightengine response must be a JSON object")
        Log.debug(f"Sightengine response:\n{json.dumps(payload, indent=2)}")
        if payload.get("status") != "success":
            message = lookup(payload, ("error", "message"))
            raise ProviderRequestError(
                str(message or "Sightengine API returned unsuccessful status")
            )
        return payload

    def _build_result(self, payload: dict[str, Any]) -> ProviderResult:
        if self._media_kind == "video":
            score = extract_video_score(payload)
            metadata = {
                "duration": _first_present(
                    lookup(payload, ("media", "duration")), payload.get("duration")
                ),
                "fps": _first_present(lookup(payload, ("media", "fps")), payload.get("fps")),
                "resolution": "{}x{}".format(
                    _first_present(lookup(payload, ("media", "width")), payload.get("width"), "?"),
                    _first_present(lookup(payload, ("media", "height")), payload.get("height"), "?"),
                ),
            }
        else:
            score = extract_score(payload)
            metadata = {
                "width": _first_present(lookup(payload, ("media", "width"))),
                "height": _first_present(lookup(payload, ("media", "height"))),
                "format": _first_present(lookup(payload, ("media", "format"))),
            }
        Log.info(f"Sightengine {self._media_kind} deepfake score: {score:.3f}")
        return ProviderResult(score=score, metadata=metadata, raw_response=payload)
