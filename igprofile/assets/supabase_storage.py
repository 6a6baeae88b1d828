"""Supabase Storage picture store."""

import httpx

from igprofile.assets.base import AssetStore
from igprofile.cache.supabase_cache import supabase_headers
from igprofile.exceptions import AssetMirrorError


class SupabaseStorage(AssetStore):
    """Uploads pictures to a public Supabase Storage bucket."""

    def __init__(
        self,
        supabase_url: str,
        service_key: str,
        bucket: str = "instagram_profile_pictures",
        timeout_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the storage client.

        Args:
            supabase_url: Project URL, e.g. https://<ref>.supabase.co
            service_key: Service role key with write access to the bucket
            bucket: Public bucket receiving the pictures
            timeout_seconds: Per-request timeout
            client: Preconfigured httpx client, mainly for tests
        """
        self.storage_url = f"{supabase_url.rstrip('/')}/storage/v1"
        self.service_key = service_key
        self.bucket = bucket
        self.timeout_seconds = timeout_seconds
        self._client = client

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout_seconds)
        return self._client

    def public_url(self, key: str) -> str:
        """Public URL of an object in the bucket."""
        return f"{self.storage_url}/object/public/{self.bucket}/{key}"

    async def upload(self, key: str, data: bytes, content_type: str) -> str:
        client = await self._ensure_client()
        try:
            response = await client.post(
                f"{self.storage_url}/object/{self.bucket}/{key}",
                content=data,
                headers={
                    **supabase_headers(self.service_key),
                    "Content-Type": content_type,
                    "x-upsert": "true",
                },
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise AssetMirrorError(f"Supabase upload of {key} failed: {e}") from e
        return self.public_url(key)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
