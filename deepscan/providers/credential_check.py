from typing import Any

import httpx

from deepscan.logging.logger import Log
from deepscan.providers.exceptions import ProviderRequestError


class SightengineCredentialChecker:
    """Diagnostic check of Sightengine credentials against a public sample image."""

    def __init__(
        self,
        *,
        api_user: str,
        api_secret: str,
        base_url: str,
        test_image_url: str,
        timeout_seconds: float = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_user = api_user
        self._api_secret = api_secret
        self._url = f"{base_url.rstrip('/')}/check.json"
        self._test_image_url = test_image_url
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    async def check(self) -> dict[str, Any]:
        """Run the check and return a JSON-ready report.

        Raises:
            ProviderRequestError: if the provider cannot be reached or rejects the call.
        """
        if not (self._api_user and self._api_secret):
            return {
                "success": True,
                "message": "Sightengine API credentials not configured - running in demo mode",
                "credentials_present": False,
            }

        Log.info(f"Testing Sightengine API with sample image {self._test_image_url}")
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get(
                    self._url,
                    params={
                        "models": "deepfake",
                        "api_user": self._api_user,
                        "api_secret": self._api_secret,
                        "url": self._test_image_url,
                    },
                )
                Log.info(f"Sightengine test responded with HTTP {response.status_code}")
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            raise ProviderRequestError(
                f"Sightengine API error: {exc.response.status_code}",
                upstream_status=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderRequestError(f"Sightengine API test failed: {exc}") from exc
        except ValueError as exc:
            raise ProviderRequestError("Sightengine returned a non-JSON response") from exc

        return {
            "success": True,
            "message": "Sightengine API test successful",
            "credentials_present": True,
            "credentials_valid": isinstance(data, dict) and data.get("status") == "success",
            "data": data,
        }
