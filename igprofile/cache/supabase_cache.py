"""Supabase (PostgREST) profile store implementation."""

import httpx
from pydantic import ValidationError

from igprofile.cache.base import ProfileCache
from igprofile.exceptions import CacheReadError, CacheWriteError
from igprofile.models.profile import ProfileRecord


def supabase_headers(service_key: str) -> dict[str, str]:
    """Auth headers accepted by every Supabase REST service."""
    return {
        "apikey": service_key,
        "Authorization": f"Bearer {service_key}",
    }


class SupabaseCache(ProfileCache):
    """
    Profile store backed by a Supabase table through its REST interface.

    Upserts use PostgREST's merge-duplicates resolution on the "id" column,
    so concurrent refreshes of the same profile resolve as last write wins.
    """

    def __init__(
        self,
        supabase_url: str,
        service_key: str,
        table: str = "instagram_profiles",
        timeout_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize Supabase store.

        Args:
            supabase_url: Project URL, e.g. https://<ref>.supabase.co
            service_key: Service role key, allowed to bypass row level security
            table: Table holding the profile rows
            timeout_seconds: Per-request timeout
            client: Preconfigured httpx client, mainly for tests
        """
        self.endpoint = f"{supabase_url.rstrip('/')}/rest/v1/{table}"
        self.service_key = service_key
        self.timeout_seconds = timeout_seconds
        self._client = client

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Get or create the underlying HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout_seconds)
        return self._client

    async def get(self, username: str) -> ProfileRecord | None:
        """Retrieve the row whose username matches, None on miss."""
        client = await self._ensure_client()
        try:
            response = await client.get(
                self.endpoint,
                params={
                    "select": "*",
                    "username": f"eq.{username.lower()}",
                    "limit": "1",
                },
                headers={**supabase_headers(self.service_key), "Accept": "application/json"},
            )
            response.raise_for_status()
            rows = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise CacheReadError(f"Supabase read failed: {e}") from e

        if not rows:
            return None

        try:
            return ProfileRecord.model_validate(rows[0])
        except ValidationError as e:
            raise CacheReadError(f"Unexpected row shape for {username}: {e}") from e

    async def upsert(self, record: ProfileRecord) -> None:
        """
        Insert or merge the row keyed on id.

        A row holding the same username under another id is deleted first,
        since the username column is unique.
        """
        client = await self._ensure_client()
        headers = supabase_headers(self.service_key)
        try:
            response = await client.delete(
                self.endpoint,
                params={
                    "username": f"eq.{record.username}",
                    "id": f"neq.{record.id}",
                },
                headers={**headers, "Prefer": "return=minimal"},
            )
            response.raise_for_status()
            response = await client.post(
                self.endpoint,
                params={"on_conflict": "id"},
                json=record.model_dump(mode="json"),
                headers={
                    **headers,
                    "Content-Type": "application/json",
                    "Prefer": "resolution=merge-duplicates,return=minimal",
                },
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise CacheWriteError(f"Supabase upsert failed: {e}") from e

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
