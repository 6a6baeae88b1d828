"""Redis profile store implementation."""

from typing import Optional

import redis.asyncio as redis
from pydantic import ValidationError

from igprofile.cache.base import ProfileCache
from igprofile.exceptions import CacheReadError, CacheWriteError
from igprofile.models.profile import ProfileRecord


class RedisCache(ProfileCache):
    """
    Redis-based profile store.

    Records live under "<prefix>profile:<id>"; "<prefix>username:<name>"
    points at the id currently holding that username.

    Example:
        cache = RedisCache("redis://localhost:6379/0")
        async with cache:
            await cache.upsert(record)
            stored = await cache.get("instagram")
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        key_prefix: str = "igprofile:",
        client: Optional[redis.Redis] = None,
    ):
        """
        Initialize Redis store.

        Args:
            redis_url: Redis connection URL
            key_prefix: Namespace for all keys
            client: Preconfigured client, mainly for tests
        """
        self.redis_url = redis_url
        self._key_prefix = key_prefix
        self._client = client

    async def _ensure_client(self) -> "redis.Redis":
        """Get or create Redis client."""
        if self._client is None:
            self._client = redis.from_url(self.redis_url, decode_responses=True)
        return self._client

    def _profile_key(self, profile_id: int) -> str:
        return f"{self._key_prefix}profile:{profile_id}"

    def _username_key(self, username: str) -> str:
        return f"{self._key_prefix}username:{username.lower()}"

    async def get(self, username: str) -> ProfileRecord | None:
        """Retrieve the stored record for a username."""
        try:
            client = await self._ensure_client()
            profile_id = await client.get(self._username_key(username))
            if profile_id is None:
                return None
            data = await client.get(self._profile_key(int(profile_id)))
        except redis.RedisError as e:
            raise CacheReadError(f"Redis read failed: {e}") from e
        except ValueError as e:
            raise CacheReadError(f"Corrupt username index for {username}: {profile_id!r}") from e

        if data is None:
            return None

        try:
            record = ProfileRecord.model_validate_json(data)
        except ValidationError as e:
            raise CacheReadError(f"Corrupt cached profile for {username}: {e}") from e

        # Index left behind by a username that moved to another account
        if record.username != username.lower():
            return None
        return record

    async def upsert(self, record: ProfileRecord) -> None:
        """Overwrite the record under its id and repoint the username index."""
        try:
            client = await self._ensure_client()
            previous = await client.get(self._profile_key(record.id))
            pipe = client.pipeline()
            if previous is not None:
                old_username = ProfileRecord.model_validate_json(previous).username
                if old_username != record.username:
                    pipe.delete(self._username_key(old_username))
            pipe.set(self._profile_key(record.id), record.model_dump_json())
            pipe.set(self._username_key(record.username), str(record.id))
            await pipe.execute()
        except (redis.RedisError, ValidationError) as e:
            raise CacheWriteError(f"Redis upsert failed: {e}") from e

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None
