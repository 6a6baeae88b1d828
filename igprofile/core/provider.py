"""HikerAPI client for Instagram profile lookups."""

from dataclasses import dataclass

import httpx
from pydantic import ValidationError

from igprofile.exceptions import AssetMirrorError, ProfileNotFoundError, UpstreamError
from igprofile.models.profile import ProviderProfile

DEFAULT_BASE_URL = "https://api.hikerapi.com"
LOOKUP_PATH = "/v1/user/by/username"
DEFAULT_IMAGE_TYPE = "image/jpeg"


@dataclass
class DownloadedImage:
    """Bytes of a downloaded picture with its content type."""

    data: bytes
    content_type: str


class HikerClient:
    """
    Thin async client over the HikerAPI endpoints used by the service.

    Example:
        async with HikerClient(api_key) as client:
            profile = await client.fetch_profile("instagram")
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the provider client.

        Args:
            api_key: HikerAPI access key, sent as the x-access-key header
            base_url: API root
            timeout_seconds: Per-request timeout
            client: Preconfigured httpx client, mainly for tests
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._client = client

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Get or create the underlying HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout_seconds)
        return self._client

    async def fetch_profile(self, username: str) -> ProviderProfile:
        """
        Look up a profile by username.

        Args:
            username: Normalized Instagram username

        Returns:
            Parsed provider payload

        Raises:
            ProfileNotFoundError: If the provider answers 404
            UpstreamError: On any other failure
        """
        client = await self._ensure_client()
        try:
            response = await client.get(
                f"{self.base_url}{LOOKUP_PATH}",
                params={"username": username},
                headers={
                    "accept": "application/json",
                    "x-access-key": self.api_key,
                },
            )
        except httpx.HTTPError as e:
            raise UpstreamError(f"Failed to fetch Instagram profile: {e}") from e

        if response.status_code == 404:
            raise ProfileNotFoundError(f"Profile @{username} not found")
        if not response.is_success:
            raise UpstreamError(
                f"Failed to fetch Instagram profile: {response.status_code} {response.reason_phrase}",
                status=response.status_code,
                reason=response.reason_phrase,
            )

        try:
            return ProviderProfile.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise UpstreamError(f"Malformed provider payload: {e}") from e

    async def download_image(self, url: str) -> DownloadedImage:
        """
        Download a profile picture.

        Raises:
            AssetMirrorError: If the URL is unusable, the request fails or
                returns a non-2xx status
        """
        client = await self._ensure_client()
        try:
            response = await client.get(url, follow_redirects=True)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            raise AssetMirrorError(f"Picture download failed: {e}") from e

        content_type = response.headers.get("content-type", DEFAULT_IMAGE_TYPE)
        return DownloadedImage(
            data=response.content,
            content_type=content_type.split(";")[0].strip() or DEFAULT_IMAGE_TYPE,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HikerClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
